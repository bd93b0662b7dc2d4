"""the runtime_map.json manifest of installed runtimes."""
from .store import MANIFEST_FILENAME, VersionManifest

__all__ = [
    "MANIFEST_FILENAME",
    "VersionManifest",
]
