import logging
import os
import tarfile
import zipfile
from pathlib import Path
from typing import Optional

from ..domain.errors import PathNotFound
from ..domain.platforms import validate_platform

logger = logging.getLogger(__name__)

ZIP = "zip"
TAR_GZ = "tar.gz"


def archive_format_for(platform: str) -> str:
    """windows builds ship as zip, everything else as tar.gz."""
    validate_platform(platform)
    return ZIP if platform == "windows" else TAR_GZ


def archive_suffix_for(platform: str) -> str:
    return f".{archive_format_for(platform)}"


class ArchiveExtractor:
    """unpacks release archives into an existing directory, overwriting collisions."""

    def extract(self, source: Path, target: Path, platform: str) -> Path:
        if archive_format_for(platform) == ZIP:
            return self.extract_zip(source, target)
        return self.extract_tar_gz(source, target)

    def extract_zip(self, source: Path, target: Path) -> Path:
        source, target = Path(source), Path(target)
        if not source.exists():
            raise PathNotFound(source, "archive to extract")

        logger.info(f"extracting {source} into {target}")
        with zipfile.ZipFile(source, "r") as zf:
            for info in zf.infolist():
                extracted = zf.extract(info, target)
                # zipfile drops unix permissions, put the executable bits back
                mode = (info.external_attr >> 16) & 0o777
                if mode and not info.is_dir():
                    os.chmod(extracted, mode)
        return target

    def extract_tar_gz(self, source: Path, target: Path) -> Path:
        source, target = Path(source), Path(target)
        if not source.exists():
            raise PathNotFound(source, "archive to extract")

        logger.info(f"extracting {source} into {target}")
        with tarfile.open(source, "r:gz") as tar:
            tar.extractall(target, filter="data")
        return target

    @staticmethod
    def find_extracted_root(directory: Path, release_name: Optional[str] = None) -> Path:
        """
        locate the top-level directory an archive unpacked into.

        args:
            directory: where the archive was extracted
            release_name: the release name reported by the API, if known

        returns:
            the directory named after the release, or one starting with it
            (jre archives append "-jre"), or the only top-level directory

        raises:
            PathNotFound: if nothing matches
        """
        directory = Path(directory)
        children = sorted(child for child in directory.iterdir() if child.is_dir())

        if release_name:
            exact = directory / release_name
            if exact.is_dir():
                return exact
            prefixed = [child for child in children if child.name.startswith(release_name)]
            if len(prefixed) == 1:
                return prefixed[0]

        if len(children) == 1:
            return children[0]

        raise PathNotFound(
            directory / (release_name or "*"),
            f"could not identify the extracted runtime among {[c.name for c in children]}",
        )
