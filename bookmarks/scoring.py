"""
Keyword relevance scoring of bookmarks against tracked projects.

Projects come from a markdown document where every level-2 header
(``## name``) names a project and the text under it, up to the next
level-2 header, supplies its keywords.
"""
import logging
import re
from pathlib import Path
from typing import List, Sequence

from .models import ProjectKeywords, RelevanceScore

logger = logging.getLogger(__name__)

DEFAULT_PROJECTS: List[ProjectKeywords] = [
    ProjectKeywords("BNKR/Bankr", ("bankr", "bnkr", "clanker", "token launch", "onchain", "launchpad", "vesting", "earnings mechanism")),
    ProjectKeywords("belief-router", ("trade thesis", "belief router", "market thesis", "investment thesis", "options", "perp", "kalshi")),
    ProjectKeywords("x-research", ("x api", "twitter api", "bookmarks", "tweet search", "social media research")),
    ProjectKeywords("sell-radar", ("sell signal", "ladder", "mcap", "dexscreener", "portfolio management")),
    ProjectKeywords("Anthropic", ("anthropic", "claude", "llm", "ai agent", "solutions architect", "applied ai")),
    ProjectKeywords("trading", ("solana", "base", "memecoin", "fomo", "dex", "wallet", "defi", "pnl")),
]

STOP_WORDS = frozenset({
    "with", "this", "that", "from", "have", "will", "been", "they", "their",
    "status", "next", "action", "last", "worked",
})

HEADER_PATTERN = re.compile(r"^## (.+)$", re.MULTILINE)
WORD_PATTERN = re.compile(r"\b[a-z]{4,}\b", re.ASCII)

HIGH_SCORE = 3
MATCH_SCORE = 2
HIGH_SCORE_MIN_MATCHES = 3


def extract_keywords(section: str, max_keywords: int = 10) -> List[str]:
    """Lowercase words of 4+ letters, minus stop words, deduplicated, capped"""
    words = [w for w in WORD_PATTERN.findall(section.lower()) if w not in STOP_WORDS]
    return list(dict.fromkeys(words))[:max_keywords]


def parse_project_document(content: str, max_keywords: int = 10) -> List[ProjectKeywords]:
    """
    Build the project keyword table from a markdown document.

    The header line belongs to its own section, so words in a project's name
    are keywords too. Sections end at the next line starting with ``## ``.
    """
    headers = list(HEADER_PATTERN.finditer(content))
    projects = []
    for idx, match in enumerate(headers):
        end = headers[idx + 1].start() if idx + 1 < len(headers) else len(content)
        section = content[match.start():end]
        projects.append(ProjectKeywords(
            project=match.group(1).strip(),
            keywords=tuple(extract_keywords(section, max_keywords)),
        ))
    return projects


def load_project_keywords(path: Path, max_keywords: int = 10) -> List[ProjectKeywords]:
    """
    Project keyword table for this run.

    Falls back to DEFAULT_PROJECTS when the document is missing, unreadable,
    or has no ``## `` headers.
    """
    path = Path(path)
    if not path.exists():
        logger.debug(f"Active projects file not found at {path}, using default projects")
        return DEFAULT_PROJECTS

    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning(f"Failed to read active projects file {path}: {e}")
        return DEFAULT_PROJECTS

    projects = parse_project_document(content, max_keywords)
    if not projects:
        logger.info(f"No '## ' project headers in {path}, using default projects")
        return DEFAULT_PROJECTS

    logger.info(f"Loaded {len(projects)} project(s) from {path}: {[p.project for p in projects]}")
    return projects


def score_relevance(text: str, projects: Sequence[ProjectKeywords]) -> RelevanceScore:
    """
    Score text against every project and keep the best one.

    A project scores 3 when three or more of its keywords occur in the
    lowercased text, 2 when one or two do, and is skipped otherwise.
    Projects are compared with strict ``>`` in table order, so on a tie the
    earlier project wins.
    """
    lowered = text.lower()
    best = RelevanceScore(score=0, reason="", project="")

    for project, keywords in projects:
        matched = [kw for kw in keywords if kw.lower() in lowered]
        if not matched:
            continue
        score = HIGH_SCORE if len(matched) >= HIGH_SCORE_MIN_MATCHES else MATCH_SCORE
        if score > best.score:
            best = RelevanceScore(
                score=score,
                reason=f"Matches {project}: {', '.join(matched[:3])}",
                project=project,
            )

    return best
