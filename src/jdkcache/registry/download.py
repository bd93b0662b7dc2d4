"""
checksum-verified archive downloads.

archives are streamed straight to their destination while the digest is
computed chunk by chunk, so a JDK never has to be read back from disk to be
verified.
"""
import logging
from pathlib import Path
from typing import Optional, TYPE_CHECKING

import httpx

from ..domain.errors import ChecksumMismatch, NetworkError
from ..domain.models import DownloadRequest, ReleaseMetadata
from ..utils.hash import checksums_match, new_digest

if TYPE_CHECKING:
    from rich.progress import TaskID

logger = logging.getLogger(__name__)


class ArchiveDownloader:
    """streams release archives to disk and verifies their sha256 checksum."""

    def __init__(self, client: httpx.Client, chunk_size: int = 1024 * 64):
        self.client = client
        self.chunk_size = chunk_size

    @staticmethod
    def request_for(release: ReleaseMetadata, destination: Path) -> DownloadRequest:
        package = release.package
        return DownloadRequest(
            source_url=package.link,
            destination=destination,
            expected_checksum=package.checksum,
            size=package.size,
        )

    def download(
        self,
        request: DownloadRequest,
        progress=None,
        task_id: Optional["TaskID"] = None,
    ) -> Path:
        """
        download request.source_url to request.destination.

        args:
            request: what to fetch and the digest it must have
            progress: optional Progress instance for tracking download
            task_id: optional task id for updating progress

        returns:
            the destination path

        raises:
            NetworkError: on any transport failure or error status
            ChecksumMismatch: if the digest differs; the file is removed first
        """
        destination = Path(request.destination)
        destination.parent.mkdir(parents=True, exist_ok=True)
        digest = new_digest(request.checksum_algorithm)

        logger.debug(f"downloading {request.source_url} to {destination}")
        try:
            with self.client.stream("GET", request.source_url) as response:
                response.raise_for_status()

                # prefer the server's length, fall back to the advertised package size
                total_size = request.size or None
                if "content-length" in response.headers:
                    total_size = int(response.headers["content-length"])
                if progress and task_id is not None:
                    progress.update(task_id, total=total_size)

                downloaded = 0
                with open(destination, "wb") as f:
                    for chunk in response.iter_bytes(self.chunk_size):
                        f.write(chunk)
                        digest.update(chunk)
                        downloaded += len(chunk)
                        if progress and task_id is not None:
                            progress.update(task_id, completed=downloaded)
        except httpx.HTTPError as e:
            _remove_quietly(destination)
            raise NetworkError(request.source_url, str(e)) from e

        actual = digest.hexdigest()
        if not checksums_match(request.expected_checksum, actual):
            _remove_quietly(destination)
            raise ChecksumMismatch(destination, request.expected_checksum, actual)

        logger.info(f"downloaded {downloaded} bytes to {destination} ({request.checksum_algorithm} ok)")
        return destination


def _remove_quietly(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        logger.warning(f"could not remove partial download {path}: {e}")
