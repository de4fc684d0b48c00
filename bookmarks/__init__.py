"""
Bookmark monitor: X API client, relevance scoring and local state
"""
from .client import XApiClient, XApiError, XAuthError
from .models import Alert, Bookmark, ProjectKeywords, RelevanceScore
from .monitor import BookmarkMonitor, CheckResult
from .scoring import (
    DEFAULT_PROJECTS,
    STOP_WORDS,
    load_project_keywords,
    parse_project_document,
    score_relevance,
)
from .storage import AlertStore, SeenStore

__all__ = [
    # Client
    "XApiClient",
    "XApiError",
    "XAuthError",
    # Models
    "Alert",
    "Bookmark",
    "ProjectKeywords",
    "RelevanceScore",
    # Monitor
    "BookmarkMonitor",
    "CheckResult",
    # Scoring
    "DEFAULT_PROJECTS",
    "STOP_WORDS",
    "load_project_keywords",
    "parse_project_document",
    "score_relevance",
    # Storage
    "AlertStore",
    "SeenStore",
]
