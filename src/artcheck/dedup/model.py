"""Value objects exchanged with the artwork corpus."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional


class MatchLevel(Enum):
    """How close a corpus match is to the query."""
    EXACT = "exact"
    SIMILAR = "similar"


@dataclass(frozen=True)
class ArtworkRecord:
    """A stored artwork as seen by the matcher. Read-only."""
    id: str
    perceptual_hash: Optional[str]
    title: str = ""
    user_id: str = ""

    @classmethod
    def from_dict(cls, row: Mapping[str, Any]) -> "ArtworkRecord":
        """Build a record from a corpus row (``id``, ``perceptual_hash``, ``title``, ``user_id``)."""
        return cls(
            id=str(row["id"]),
            perceptual_hash=row.get("perceptual_hash") or None,
            title=row.get("title") or "",
            user_id=str(row.get("user_id") or ""),
        )


@dataclass(frozen=True)
class MatchResult:
    """Closest corpus artwork within the admission threshold."""
    artwork: ArtworkRecord
    distance: int          # Hamming distance, 0 to 64
    confidence: float      # 1 - distance / 64, clamped to [0, 1]
