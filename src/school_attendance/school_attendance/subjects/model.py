from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Subject:
    """Domain entity: a unit within a stream that students enroll in."""

    id: int
    name: str
    description: Optional[str]
    stream_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "stream_id": self.stream_id,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }
