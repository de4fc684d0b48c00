"""Bookmark monitor: fetch, dedupe against seen ids, score, record alerts"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, List, Optional, Tuple

from config import MissingCredentialsError, MonitorConfig
from .client import XApiClient
from .models import Alert, Bookmark
from .scoring import load_project_keywords, score_relevance
from .storage import AlertStore, SeenStore


logger = logging.getLogger(__name__)


@dataclass
class CheckResult:
    """Outcome of one ingest run"""
    fetched: int = 0
    new: int = 0
    alerts: List[Alert] = field(default_factory=list)
    user_id: Optional[str] = None
    looked_up: bool = False

    @property
    def alerts_added(self) -> int:
        return len(self.alerts)


class BookmarkMonitor:
    """Runs the three monitor modes against explicit configuration"""

    def __init__(self, config: MonitorConfig, client: Optional[XApiClient] = None,
                 clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc)):
        self.config = config
        self.client = client
        self.clock = clock
        self.seen_store = SeenStore(config.seen_file)
        self.alert_store = AlertStore(config.alerts_file)

    def _require_client(self) -> XApiClient:
        if self.client is None:
            raise MissingCredentialsError("OAuth2 token not found. Bookmarks require user-context auth.")
        return self.client

    async def resolve_user_id(self) -> Tuple[str, bool]:
        """Configured account id, or a one-time lookup

        Returns:
            Tuple of (user_id, looked_up)
        """
        if self.config.user_id:
            return self.config.user_id, False
        user_id = await self._require_client().lookup_user_id(self.config.username)
        logger.info(f"Resolved user id {user_id}")
        return user_id, True

    async def fetch(self, user_id: str) -> List[Bookmark]:
        bookmarks = await self._require_client().fetch_bookmarks(user_id, self.config.page_size)
        logger.info(f"Fetched {len(bookmarks)} bookmark(s)")
        return bookmarks

    def process(self, bookmarks: List[Bookmark]) -> CheckResult:
        """
        Score unseen bookmarks and persist state.

        Every fetched id joins the seen-set; only unseen ones are scored.
        Seen ids and alerts are written once, after the whole batch.
        """
        seen = self.seen_store.load()
        seen_ids = set(seen)
        new_bookmarks = [b for b in bookmarks if b.id not in seen_ids]
        result = CheckResult(fetched=len(bookmarks), new=len(new_bookmarks))

        if not new_bookmarks:
            logger.info("No unseen bookmarks")
            return result

        projects = load_project_keywords(self.config.projects_file, self.config.max_keywords)

        for bookmark in new_bookmarks:
            score = score_relevance(bookmark.text, projects)
            logger.debug(f"Bookmark {bookmark.id} scored {score.score} ({score.project or 'no project'})")
            if score.score >= self.config.alert_threshold:
                result.alerts.append(Alert.from_bookmark(bookmark, score, self.clock()))

        for bookmark in bookmarks:
            if bookmark.id not in seen_ids:
                seen_ids.add(bookmark.id)
                seen.append(bookmark.id)

        self.seen_store.save(seen)
        if result.alerts:
            self.alert_store.append(result.alerts)

        logger.info(f"{result.new} new bookmark(s), {result.alerts_added} alert(s) added")
        return result

    async def check(self) -> CheckResult:
        """Resolve the account, fetch bookmarks and process them"""
        user_id, looked_up = await self.resolve_user_id()
        result = self.process(await self.fetch(user_id))
        result.user_id = user_id
        result.looked_up = looked_up
        return result

    def show(self) -> List[Alert]:
        return self.alert_store.load_alerts()

    def clear(self) -> None:
        self.alert_store.clear()
