from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, TYPE_CHECKING

from ..domain.models import ReleaseMetadata

if TYPE_CHECKING:
    from rich.progress import TaskID

class RuntimeRepositoryClient(ABC):
    @abstractmethod
    def build_query_url(
        self,
        version: int = 8,
        arch: str = "x64",
        image_type: str = "jdk",
        platform: str = "windows",
    ) -> str:
        """Build the release query URL for a version/platform/arch request."""
        pass

    @abstractmethod
    def fetch_release(self, version: int, platform: str, arch: str, image_type: str = "jdk") -> ReleaseMetadata:
        """Resolve a request to the release metadata of one concrete build."""
        pass

    @abstractmethod
    def get_release_name(self, version: int) -> Optional[str]:
        """Release name cached by the last fetch_release for this major version."""
        pass

    @abstractmethod
    def download_release(
        self,
        release: ReleaseMetadata,
        target_path: Path,
        progress=None,
        task_id: Optional["TaskID"] = None,
    ) -> Path:
        """Download and verify the release archive to the target path."""
        pass

    def close(self) -> None:
        """Release any connections held by the client."""
