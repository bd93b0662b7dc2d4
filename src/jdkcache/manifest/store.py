import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from pydantic import ValidationError

from ..domain.errors import CorruptManifest, DuplicateVersionEntry
from ..domain.models import ManifestEntry

logger = logging.getLogger(__name__)

MANIFEST_FILENAME = "runtime_map.json"


class VersionManifest:
    """maps major versions to installed runtimes, persisted as a JSON array."""

    def __init__(self, file_path: Path, entries: Optional[Iterable[ManifestEntry]] = None):
        self.file_path = Path(file_path)
        self._entries: Dict[int, ManifestEntry] = {}
        self._highest_major: Optional[int] = None
        for entry in entries or []:
            self.set_runtime(entry)

    @classmethod
    def load(cls, file_path: Path) -> "VersionManifest":
        """
        read a manifest from disk.

        raises:
            CorruptManifest: if the file is not a JSON array of entries
            DuplicateVersionEntry: if two entries share a major version
        """
        file_path = Path(file_path)
        try:
            with open(file_path, "r") as f:
                data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise CorruptManifest(file_path, str(e)) from e

        if not isinstance(data, list):
            raise CorruptManifest(file_path, f"expected a list, got {type(data).__name__}")

        # a repeated major is reported as such even when its rows are malformed
        seen = set()
        for raw in data:
            major = raw.get("major") if isinstance(raw, dict) else None
            if isinstance(major, int) and not isinstance(major, bool):
                if major in seen:
                    raise DuplicateVersionEntry(file_path, major)
                seen.add(major)

        manifest = cls(file_path)
        for index, raw in enumerate(data):
            try:
                entry = ManifestEntry.model_validate(raw)
            except ValidationError as e:
                raise CorruptManifest(file_path, f"entry {index}: {e}") from e
            if manifest.has_runtime(entry.major):
                # majors given as strings only collide after coercion
                raise DuplicateVersionEntry(file_path, entry.major)
            manifest.set_runtime(entry)

        logger.debug(f"loaded {len(manifest)} runtime entries from {file_path}")
        return manifest

    @classmethod
    def open_or_initialize(cls, file_path: Path) -> "VersionManifest":
        """load the manifest, or write an empty one if the file does not exist yet."""
        file_path = Path(file_path)
        if file_path.exists():
            return cls.load(file_path)

        manifest = cls(file_path)
        manifest.save()
        logger.info(f"initialized empty runtime map at {file_path}")
        return manifest

    def has_runtime(self, major: int) -> bool:
        return major in self._entries

    def get_runtime(self, major: Optional[int]) -> Optional[ManifestEntry]:
        if major is None:
            return None
        return self._entries.get(major)

    def set_runtime(self, entry: ManifestEntry) -> None:
        """insert or replace the entry for entry.major."""
        self._entries[entry.major] = entry
        if self._highest_major is None or entry.major > self._highest_major:
            self._highest_major = entry.major

    def remove_runtime(self, major: int) -> Optional[ManifestEntry]:
        removed = self._entries.pop(major, None)
        if removed is not None and major == self._highest_major:
            self._highest_major = max(self._entries) if self._entries else None
        return removed

    def get_highest_major(self) -> Optional[int]:
        return self._highest_major

    def entries(self) -> List[ManifestEntry]:
        return list(self._entries.values())

    def save(self) -> None:
        """write every entry to the backing file, replacing it atomically."""
        self._write(self.entries())

    def register(self, entry: ManifestEntry) -> None:
        """
        persist the manifest with entry included, then apply it in memory.

        if writing fails the in-memory manifest is left untouched.
        """
        pending = {**self._entries, entry.major: entry}
        self._write(list(pending.values()))
        self.set_runtime(entry)

    def unregister(self, major: int) -> Optional[ManifestEntry]:
        """persist the manifest without major, then drop it in memory."""
        if major not in self._entries:
            return None
        self._write([entry for entry in self._entries.values() if entry.major != major])
        return self.remove_runtime(major)

    def _write(self, entries: List[ManifestEntry]) -> None:
        self.file_path.parent.mkdir(parents=True, exist_ok=True)
        payload = [entry.model_dump() for entry in entries]

        fd, tmp_name = tempfile.mkstemp(
            dir=self.file_path.parent, prefix=f".{self.file_path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w") as f:
                json.dump(payload, f, indent=2)
            os.replace(tmp_name, self.file_path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

    def __len__(self) -> int:
        return len(self._entries)
