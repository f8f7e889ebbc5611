from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from typing_extensions import TypeAlias

# cursor, total frames, at start, at end
PlaybackSnapshot: TypeAlias = tuple[int, int, bool, bool]


@dataclass(frozen=True)
class StatusMessage:
    text: str
    level: str = "info"
    until: Optional[float] = None
