from pathlib import Path

from ..archives.extractor import archive_suffix_for
from ..manifest.store import MANIFEST_FILENAME

class WorkspaceLayout:
    """where a workspace keeps its manifest, scratch files and installed runtimes."""

    def __init__(self, root: Path):
        self.root = Path(root)

    @property
    def temp_dir(self) -> Path:
        return self.root / "temp"

    @property
    def manifest_path(self) -> Path:
        return self.root / MANIFEST_FILENAME

    def ensure(self) -> "WorkspaceLayout":
        self.temp_dir.mkdir(parents=True, exist_ok=True)
        return self

    def install_dir(self, major: int) -> Path:
        return self.root / f"jdk_{major}"

    def staging_dir(self, major: int) -> Path:
        return self.temp_dir / f"extract_{major}"

    def archive_path(self, major: int, arch: str, platform: str, image_type: str = "jdk") -> Path:
        suffix = "-jre" if image_type == "jre" else ""
        return self.temp_dir / f"{major}_{arch}_{platform}{suffix}{archive_suffix_for(platform)}"
