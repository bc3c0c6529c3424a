from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Tuple


@dataclass(frozen=True)
class EnrichedUser:
    login: str
    name: str
    url: str
    times: Tuple[datetime, ...] = field(default_factory=tuple)
