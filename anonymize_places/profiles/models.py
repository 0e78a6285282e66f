from dataclasses import dataclass
from pathlib import Path

_SIZE_UNITS: tuple[tuple[int, str], ...] = (
    (1024 * 1024 * 1024, "Gb"),
    (1024 * 1024, "Mb"),
    (1024, "Kb"),
)


@dataclass(frozen=True)
class Profile:
    """A Firefox profile and its places database."""

    name: str
    places_db: Path
    db_size: int

    def friendly_db_size(self) -> str:
        """Human readable size, e.g. ``~1.5 Mb`` or ``512 bytes``."""
        for limit, suffix in _SIZE_UNITS:
            if self.db_size >= limit:
                return f"~{round(self.db_size / limit, 1)} {suffix}"
        return f"{self.db_size} bytes"
