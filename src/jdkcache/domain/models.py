from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

class ManifestEntry(BaseModel):
    """one installed runtime, as stored in runtime_map.json."""
    major: int
    path: str
    bin: str

    @property
    def install_path(self) -> Path:
        return Path(self.path)

    @property
    def bin_directory(self) -> Path:
        return Path(self.bin)

class ReleasePackage(BaseModel):
    """the downloadable archive of a release binary."""
    link: str
    checksum: str
    size: int = 0
    name: Optional[str] = None

class ReleaseBinary(BaseModel):
    architecture: str
    image_type: str
    os: str
    package: ReleasePackage

class ReleaseVersion(BaseModel):
    major: Optional[int] = None
    semver: Optional[str] = None
    openjdk_version: Optional[str] = None

class ReleaseMetadata(BaseModel):
    """one record of the release API's `assets/latest` answer."""
    release_name: str
    vendor: Optional[str] = None
    binary: ReleaseBinary
    version: Optional[ReleaseVersion] = None

    @property
    def package(self) -> ReleasePackage:
        return self.binary.package

class DownloadRequest(BaseModel):
    source_url: str
    destination: Path
    expected_checksum: str
    checksum_algorithm: str = Field(default="sha256")
    size: int = 0

@dataclass
class InstallResult:
    """outcome of a successful install; replaced_existing marks a destructive overwrite."""
    major: int
    path: Path
    bin: Path
    entry: ManifestEntry
    release_name: str
    replaced_existing: bool = False
