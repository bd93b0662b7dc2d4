import asyncio
import logging
import shutil
import weakref
from pathlib import Path
from typing import List, Optional, Tuple

from ..archives.extractor import ArchiveExtractor
from ..domain.errors import RuntimeAlreadyInstalled, RuntimeNotInstalled
from ..domain.models import InstallResult, ManifestEntry
from ..domain.platforms import validate_request
from ..manifest.store import VersionManifest
from ..registry.adoptium import AdoptiumRepository
from ..registry.client import RuntimeRepositoryClient
from ..ui.progress import ProgressManager
from .layout import WorkspaceLayout

logger = logging.getLogger(__name__)


class RuntimeWorkspace:
    """downloads runtimes into a workspace directory and keeps its manifest current."""

    def __init__(
        self,
        layout: WorkspaceLayout,
        manifest: VersionManifest,
        repository: Optional[RuntimeRepositoryClient] = None,
        extractor: Optional[ArchiveExtractor] = None,
        progress_manager: Optional[ProgressManager] = None,
    ):
        self.layout = layout
        self.manifest = manifest
        self.repository = repository or AdoptiumRepository()
        self.extractor = extractor or ArchiveExtractor()
        self.progress_manager = progress_manager or ProgressManager()
        # installs and removals against this workspace run one at a time, per event loop
        self._locks: "weakref.WeakKeyDictionary[asyncio.AbstractEventLoop, asyncio.Lock]" = (
            weakref.WeakKeyDictionary()
        )

    @classmethod
    def open(
        cls,
        root: Path,
        repository: Optional[RuntimeRepositoryClient] = None,
        extractor: Optional[ArchiveExtractor] = None,
        progress_manager: Optional[ProgressManager] = None,
    ) -> "RuntimeWorkspace":
        """
        create the workspace directories and load (or initialize) its manifest.

        raises:
            CorruptManifest, DuplicateVersionEntry: if the manifest cannot be loaded
        """
        layout = WorkspaceLayout(root).ensure()
        manifest = VersionManifest.open_or_initialize(layout.manifest_path)
        return cls(layout, manifest, repository, extractor, progress_manager)

    @property
    def directory(self) -> Path:
        return self.layout.root

    def close(self) -> None:
        self.repository.close()

    def __enter__(self) -> "RuntimeWorkspace":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _lock(self) -> asyncio.Lock:
        # an asyncio.Lock binds to the first loop that waits on it
        loop = asyncio.get_running_loop()
        lock = self._locks.get(loop)
        if lock is None:
            lock = self._locks[loop] = asyncio.Lock()
        return lock

    async def download_runtime(
        self,
        major: int,
        platform: str,
        arch: str,
        image_type: Optional[str] = None,
        overwrite: bool = True,
    ) -> Path:
        """download, verify and install a runtime; returns its install path."""
        result = await self.install_runtime(major, platform, arch, image_type, overwrite)
        return result.path

    async def install_runtime(
        self,
        major: int,
        platform: str,
        arch: str,
        image_type: Optional[str] = None,
        overwrite: bool = True,
    ) -> InstallResult:
        """
        install a runtime into jdk_<major> and register it in the manifest.

        args:
            major: major version, e.g. 8 or 17
            platform: linux, mac or windows
            arch: x64 or x86
            image_type: jdk or jre, jdk when omitted
            overwrite: replace an installed runtime of the same major version

        returns:
            InstallResult; replaced_existing is set when a previous jdk_<major>
            directory was deleted to make room

        raises:
            InvalidParameter, InvalidPlatform, InvalidArchitecture: before any I/O
            RuntimeAlreadyInstalled: if overwrite is False and major is installed
            NoReleaseFound, NetworkError, InvalidReleaseMetadata, ChecksumMismatch,
            PathNotFound: from the pipeline; the manifest is not touched
        """
        image_type = validate_request(major, platform, arch, image_type)

        async with self._lock():
            existing = self.manifest.get_runtime(major)
            if existing is not None and not overwrite:
                raise RuntimeAlreadyInstalled(major, existing.path)

            loop = asyncio.get_running_loop()
            archive_path = self.layout.archive_path(major, arch, platform, image_type)
            staging_dir = self.layout.staging_dir(major)

            try:
                with self.progress_manager.spinner(f"resolving {image_type} {major} for {platform}/{arch}"):
                    release = await loop.run_in_executor(
                        None, self.repository.fetch_release, major, platform, arch, image_type
                    )

                with self.progress_manager.download_task(f"downloading {release.release_name}") as (progress, task_id):
                    await loop.run_in_executor(
                        None, self.repository.download_release, release, archive_path, progress, task_id
                    )

                with self.progress_manager.spinner(f"extracting {release.release_name}"):
                    install_path, replaced = await loop.run_in_executor(
                        None, self._unpack, major, platform, archive_path, staging_dir
                    )

                bin_dir = self.bin_directory_for(install_path, platform)
                entry = ManifestEntry(major=major, path=str(install_path), bin=str(bin_dir))
                await loop.run_in_executor(None, self.manifest.register, entry)
            finally:
                self._cleanup(archive_path, staging_dir)

        logger.info(f"installed {release.release_name} as runtime {major} at {install_path}")
        return InstallResult(
            major=major,
            path=install_path,
            bin=bin_dir,
            entry=entry,
            release_name=release.release_name,
            replaced_existing=replaced,
        )

    @staticmethod
    def bin_directory_for(install_path: Path, platform: str) -> Path:
        # mac builds are bundles: jdk_<major>/Contents/Home/bin
        if platform == "mac":
            return install_path / "Contents" / "Home" / "bin"
        return install_path / "bin"

    def _unpack(self, major: int, platform: str, archive_path: Path, staging_dir: Path) -> Tuple[Path, bool]:
        """extract into a staging directory, then move the runtime to jdk_<major>."""
        self.layout.root.mkdir(parents=True, exist_ok=True)
        if staging_dir.exists():
            shutil.rmtree(staging_dir)
        staging_dir.mkdir(parents=True)

        self.extractor.extract(archive_path, staging_dir, platform)
        extracted = self.extractor.find_extracted_root(
            staging_dir, self.repository.get_release_name(major)
        )

        install_path = self.layout.install_dir(major)
        replaced = install_path.exists()
        if replaced:
            logger.warning(f"replacing existing runtime directory {install_path}")
            shutil.rmtree(install_path)

        shutil.move(str(extracted), str(install_path))
        return install_path, replaced

    def _cleanup(self, *paths: Path) -> None:
        for path in paths:
            try:
                if path.is_dir():
                    shutil.rmtree(path)
                else:
                    path.unlink(missing_ok=True)
            except OSError as e:
                logger.warning(f"could not clean up {path}: {e}")

    def get_latest_runtime_entry(self) -> Optional[ManifestEntry]:
        return self.manifest.get_runtime(self.manifest.get_highest_major())

    def get_runtime(self, major: int) -> Optional[ManifestEntry]:
        return self.manifest.get_runtime(major)

    def list_runtimes(self) -> List[ManifestEntry]:
        return sorted(self.manifest.entries(), key=lambda entry: entry.major)

    def resolve_java_executable(self, major: int) -> Path:
        """path of the java launcher of an installed runtime."""
        entry = self.manifest.get_runtime(major)
        if entry is None:
            raise RuntimeNotInstalled(major)

        windows_launcher = entry.bin_directory / "java.exe"
        if windows_launcher.exists():
            return windows_launcher
        return entry.bin_directory / "java"

    async def remove_runtime(self, major: int) -> ManifestEntry:
        """drop an installed runtime from the manifest, then delete its directory."""
        async with self._lock():
            entry = self.manifest.get_runtime(major)
            if entry is None:
                raise RuntimeNotInstalled(major)

            loop = asyncio.get_running_loop()
            await loop.run_in_executor(None, self.manifest.unregister, major)
            if entry.install_path.exists():
                await loop.run_in_executor(None, shutil.rmtree, entry.install_path)

        logger.info(f"removed runtime {major} from {entry.path}")
        return entry
