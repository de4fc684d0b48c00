"""
Pydantic models for bookmarks and alerts.
"""
from datetime import datetime, timezone
from typing import NamedTuple, Optional, Tuple
from pydantic import BaseModel

import settings


class Bookmark(BaseModel):
    """Bookmarked post as returned by the X API (extra fields are ignored)"""
    id: str
    text: str = ""
    created_at: Optional[str] = None


class Alert(BaseModel):
    """Bookmark scored as relevant to a tracked project"""
    id: str
    url: str
    text: str
    relevance_score: int
    reason: str
    project: str
    timestamp: str

    @classmethod
    def from_bookmark(cls, bookmark: Bookmark, score: "RelevanceScore",
                      now: Optional[datetime] = None) -> "Alert":
        now = now or datetime.now(timezone.utc)
        return cls(
            id=bookmark.id,
            url=settings.STATUS_URL_TEMPLATE.format(id=bookmark.id),
            text=bookmark.text,
            relevance_score=score.score,
            reason=score.reason,
            project=score.project,
            timestamp=now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z"),
        )


class ProjectKeywords(NamedTuple):
    """Keywords for one tracked project, in table order"""
    project: str
    keywords: Tuple[str, ...]


class RelevanceScore(NamedTuple):
    """Best project match for a piece of text"""
    score: int
    reason: str
    project: str
