"""Data models for short links."""

from dataclasses import dataclass
from datetime import datetime, timezone


@dataclass(frozen=True)
class Link:
    """Represents a short link record in the store."""

    id: int
    title: str
    target_url: str
    short_code: str
    created_at: datetime
    clicks: int = 0

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "title": self.title,
            "target_url": self.target_url,
            "short_code": self.short_code,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "clicks": self.clicks,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Link":
        """Create from dictionary."""
        created_at = data["created_at"]
        if not isinstance(created_at, datetime):
            created_at = datetime.fromisoformat(created_at)
        if created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=timezone.utc)
        return cls(
            id=int(data["id"]),
            title=data["title"],
            target_url=data["target_url"],
            short_code=data["short_code"],
            created_at=created_at,
            clicks=int(data.get("clicks", 0)),
        )
