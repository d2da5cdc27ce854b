"""Result types produced by the application scanner."""

import locale
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterator, Optional, Sequence, overload


@dataclass(frozen=True)
class ApplicationRecord:
    """A discovered application bundle.

    Identity is the canonical (symlink-resolved) path: two records built
    from the same bundle compare equal regardless of metadata.

    Attributes:
        name: Bundle filename without the .app extension
        path: Canonical path of the bundle
        bundle_id: CFBundleIdentifier, if declared
        icon_file: CFBundleIconFile (or CFBundleIconName), if declared
        version: CFBundleShortVersionString or CFBundleVersion, if declared
    """

    name: str
    path: Path
    bundle_id: Optional[str] = field(default=None, compare=False)
    icon_file: Optional[str] = field(default=None, compare=False)
    version: Optional[str] = field(default=None, compare=False)

    @classmethod
    def from_path(cls, path: Path, **metadata: Optional[str]) -> "ApplicationRecord":
        """Build a record whose display name comes from the bundle filename."""
        return cls(name=path.stem, path=path, **metadata)

    @property
    def icon_path(self) -> Optional[Path]:
        """Location of the bundle's icon inside Contents/Resources."""
        if not self.icon_file:
            return None
        icon_name = self.icon_file
        if not Path(icon_name).suffix:
            icon_name += ".icns"
        return self.path / "Contents" / "Resources" / icon_name

    def sort_key(self) -> tuple[str, str, str]:
        # Locale collation of the casefolded name; raw casefold and path
        # keep the order total under the C locale
        folded = self.name.casefold()
        return (locale.strxfrm(folded), folded, str(self.path))

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "path": str(self.path),
            "bundle_id": self.bundle_id,
            "icon_file": self.icon_file,
            "version": self.version,
        }


class ScanResult(Sequence[ApplicationRecord]):
    """Immutable, ordered list of application records from one scan.

    Records are sorted case-insensitively by display name with ties
    broken by canonical path, so equal filesystems give equal results.
    """

    def __init__(self, records: Sequence[ApplicationRecord] = ()):
        self._records: tuple[ApplicationRecord, ...] = tuple(
            sorted(records, key=ApplicationRecord.sort_key)
        )

    @overload
    def __getitem__(self, index: int) -> ApplicationRecord: ...

    @overload
    def __getitem__(self, index: slice) -> tuple[ApplicationRecord, ...]: ...

    def __getitem__(self, index):
        return self._records[index]

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[ApplicationRecord]:
        return iter(self._records)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ScanResult):
            return NotImplemented
        return self._records == other._records

    def __hash__(self) -> int:
        return hash(self._records)

    def __repr__(self) -> str:
        return f"ScanResult({len(self._records)} applications)"

    def names(self) -> tuple[str, ...]:
        return tuple(record.name for record in self._records)

    def paths(self) -> tuple[Path, ...]:
        return tuple(record.path for record in self._records)

    def to_dict(self) -> dict[str, Any]:
        return {
            "applications": [record.to_dict() for record in self._records],
            "count": len(self._records),
        }
