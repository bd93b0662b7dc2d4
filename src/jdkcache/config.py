import platform
from pathlib import Path
from typing import Dict, Optional

CONFIG_DIR = Path.home() / ".jdkcache"
CONFIG_FILE = CONFIG_DIR / "config"

WORKSPACE_KEY = "JDKCACHE_WORKSPACE"
API_URL_KEY = "JDKCACHE_API_URL"
IMAGE_TYPE_KEY = "JDKCACHE_IMAGE_TYPE"

KNOWN_KEYS = (WORKSPACE_KEY, API_URL_KEY, IMAGE_TYPE_KEY)

DEFAULT_WORKSPACE = CONFIG_DIR / "runtime"
DEFAULT_API_URL = "https://api.adoptium.net"
DEFAULT_IMAGE_TYPE = "jdk"

def _read_config(config_file: Path) -> Dict[str, str]:
    config = {}
    if not config_file.exists():
        return config
    try:
        with open(config_file, "r") as f:
            for line in f:
                line = line.strip()
                if "=" in line:
                    key, value = line.split("=", 1)
                    config[key] = value
    except (IOError, PermissionError, OSError):
        # if we can't read the file, treat as not configured
        return {}
    return config

def get_setting(key: str, config_file: Path = None) -> Optional[str]:
    """get a configured value from the config file."""
    return _read_config(config_file or CONFIG_FILE).get(key) or None

def set_setting(key: str, value: str, config_file: Path = None):
    """set a value in the config file, preserving other config values."""
    config_file = config_file or CONFIG_FILE
    config_file.parent.mkdir(parents=True, exist_ok=True)

    config = _read_config(config_file)
    config[key] = value

    try:
        with open(config_file, "w") as f:
            for k, v in config.items():
                f.write(f"{k}={v}\n")
    except (IOError, PermissionError, OSError) as e:
        raise RuntimeError(f"failed to write config file: {e}") from e

def get_workspace_root(config_file: Path = None) -> Path:
    configured = get_setting(WORKSPACE_KEY, config_file)
    return Path(configured).expanduser() if configured else DEFAULT_WORKSPACE

def get_api_url(config_file: Path = None) -> str:
    return get_setting(API_URL_KEY, config_file) or DEFAULT_API_URL

def get_default_image_type(config_file: Path = None) -> str:
    return get_setting(IMAGE_TYPE_KEY, config_file) or DEFAULT_IMAGE_TYPE

def detect_platform() -> str:
    """the release API's name for the host os."""
    system = platform.system().lower()
    if system == "darwin":
        return "mac"
    if system == "windows":
        return "windows"
    return "linux"

def detect_arch() -> str:
    machine = platform.machine().lower()
    if machine in ("i386", "i686", "x86"):
        return "x86"
    return "x64"
