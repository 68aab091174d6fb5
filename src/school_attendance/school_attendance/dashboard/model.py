from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class ActivityItem:
    """One entry of the teacher activity feed."""

    type: str
    id: int
    occurred_at: datetime
    description: str
    link: str

    def to_dict(self) -> dict:
        return {
            "type": self.type,
            "id": self.id,
            "date": self.occurred_at.date().isoformat(),
            "timestamp": int(self.occurred_at.timestamp() * 1000),
            "description": self.description,
            "link": self.link,
        }
