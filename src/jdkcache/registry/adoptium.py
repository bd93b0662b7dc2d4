import logging
from pathlib import Path
from typing import Dict, Optional, TYPE_CHECKING

import httpx
from pydantic import ValidationError

from ..domain.errors import InvalidReleaseMetadata, NetworkError, NoReleaseFound
from ..domain.models import ReleaseMetadata
from ..domain.platforms import (
    DEFAULT_ARCH,
    DEFAULT_IMAGE_TYPE,
    DEFAULT_PLATFORM,
    DEFAULT_VERSION,
    validate_arch,
    validate_image_type,
    validate_platform,
)
from .client import RuntimeRepositoryClient
from .download import ArchiveDownloader

if TYPE_CHECKING:
    from rich.progress import TaskID

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.adoptium.net"
VENDOR = "eclipse"

class AdoptiumRepository(RuntimeRepositoryClient):
    """release lookups against the Eclipse Adoptium v3 API."""

    def __init__(self, base_url: str = DEFAULT_API_URL, client: Optional[httpx.Client] = None):
        self.base_url = base_url.rstrip("/")
        # release links redirect to the GitHub release assets
        self.client = client or httpx.Client(follow_redirects=True)
        self.downloader = ArchiveDownloader(self.client)
        self._release_names: Dict[int, str] = {}

    def build_query_url(
        self,
        version: int = DEFAULT_VERSION,
        arch: str = DEFAULT_ARCH,
        image_type: str = DEFAULT_IMAGE_TYPE,
        platform: str = DEFAULT_PLATFORM,
    ) -> str:
        """
        build the `assets/latest` query url.

        no network I/O happens here. the query parameters always come in the
        same order so the url is stable for a given request.

        raises:
            InvalidPlatform: if platform is not linux, mac or windows
            InvalidArchitecture: if arch is not x64 or x86
            InvalidParameter: if image_type is not jdk or jre
        """
        validate_arch(arch)
        validate_platform(platform)
        validate_image_type(image_type)

        url = httpx.URL(
            f"{self.base_url}/v3/assets/latest/{version}/hotspot",
            params={
                "architecture": arch,
                "image_type": image_type,
                "os": platform,
                "vendor": VENDOR,
            },
        )
        return str(url)

    def fetch_release(
        self,
        version: int,
        platform: str,
        arch: str,
        image_type: str = DEFAULT_IMAGE_TYPE,
    ) -> ReleaseMetadata:
        """
        resolve a request to the first release record the API returns.

        the API's own ordering is kept; nothing is re-sorted.

        raises:
            NetworkError: on transport failure or an error status
            InvalidReleaseMetadata: if the answer is not a list of release records
            NoReleaseFound: if the answer is an empty list
        """
        url = self.build_query_url(version=version, arch=arch, image_type=image_type, platform=platform)
        logger.debug(f"querying {url}")

        try:
            response = self.client.get(url)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise NetworkError(url, str(e)) from e

        try:
            data = response.json()
        except ValueError as e:
            raise InvalidReleaseMetadata(url, f"response is not JSON: {e}") from e

        if not isinstance(data, list):
            raise InvalidReleaseMetadata(url, f"expected a list, got {type(data).__name__}")
        if not data:
            raise NoReleaseFound(version, platform, arch, image_type)

        try:
            release = ReleaseMetadata.model_validate(data[0])
        except ValidationError as e:
            raise InvalidReleaseMetadata(url, str(e)) from e

        self._release_names[version] = release.release_name
        logger.info(f"resolved {image_type} {version} ({platform}/{arch}) to {release.release_name}")
        return release

    def get_release_name(self, version: int) -> Optional[str]:
        return self._release_names.get(version)

    def download_release(
        self,
        release: ReleaseMetadata,
        target_path: Path,
        progress=None,
        task_id: Optional["TaskID"] = None,
    ) -> Path:
        request = self.downloader.request_for(release, target_path)
        return self.downloader.download(request, progress, task_id)

    def close(self) -> None:
        self.client.close()
