from pathlib import Path
from typing import Optional, Union

class JdkCacheError(Exception):
    """base class for exceptions in jdkcache."""
    pass

class InvalidParameter(JdkCacheError):
    """raised when a required request field is missing or unusable."""
    def __init__(self, name: str, value: object = None):
        self.name = name
        self.value = value
        super().__init__(f"Invalid parameter: {name}={value!r}")

class InvalidPlatform(JdkCacheError):
    """raised when the requested platform is not supported."""
    def __init__(self, value: object):
        self.value = value
        super().__init__(f"Invalid platform {value!r}, expected one of linux, mac, windows")

class InvalidArchitecture(JdkCacheError):
    """raised when the requested architecture is not supported."""
    def __init__(self, value: object):
        self.value = value
        super().__init__(f"Invalid architecture {value!r}, expected one of x64, x86")

class NoReleaseFound(JdkCacheError):
    """raised when the release API returns no matching build."""
    def __init__(self, version: int, platform: str, arch: str, image_type: str):
        self.version = version
        self.platform = platform
        self.arch = arch
        self.image_type = image_type
        super().__init__(
            f"No release found for {image_type} {version} on {platform}/{arch}"
        )

class InvalidReleaseMetadata(JdkCacheError):
    """raised when the release API answers with something we cannot parse."""
    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Unexpected release metadata from {url}: {reason}")

class ChecksumMismatch(JdkCacheError):
    """raised when a downloaded archive does not match its published digest."""
    def __init__(self, path: Union[str, Path], expected: str, actual: str):
        self.path = Path(path)
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Checksum mismatch for {path}: expected {expected}, got {actual}"
        )

class NetworkError(JdkCacheError):
    """raised on transport-level failures talking to the release API or mirror."""
    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Network error for {url}: {reason}")

class PathNotFound(JdkCacheError):
    """raised when an expected file or directory does not exist."""
    def __init__(self, path: Union[str, Path], detail: Optional[str] = None):
        self.path = Path(path)
        message = f"Path not found: {path}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)

class CorruptManifest(JdkCacheError):
    """raised when the runtime manifest cannot be read as a list of entries."""
    def __init__(self, path: Union[str, Path], reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Invalid runtime map {path}: {reason}")

class DuplicateVersionEntry(JdkCacheError):
    """raised when the runtime manifest holds two entries for one major version."""
    def __init__(self, path: Union[str, Path], major: int):
        self.path = Path(path)
        self.major = major
        super().__init__(f"Invalid runtime map {path}: duplicate entry for major version {major}")

class RuntimeNotInstalled(JdkCacheError):
    """raised when a major version has no manifest entry."""
    def __init__(self, major: int):
        self.major = major
        super().__init__(f"Runtime {major} is not installed")

class RuntimeAlreadyInstalled(JdkCacheError):
    """raised when an install would replace an existing runtime without permission."""
    def __init__(self, major: int, path: Union[str, Path]):
        self.major = major
        self.path = Path(path)
        super().__init__(f"Runtime {major} is already installed at {path}")
