"""
Pure helpers applied to posts and comments before they are persisted.
"""

import hashlib
import math
import re
from datetime import datetime
from typing import List, Optional, Union

SUMMARY_LENGTH = 150
WORDS_PER_MINUTE = 200

_TAG_RE = re.compile(r"<[^>]*>")


def strip_tags(html: str) -> str:
    return _TAG_RE.sub("", html or "")


def derive_summary(content: str, summary: Optional[str] = None) -> str:
    """Return ``summary`` when given, otherwise a plain-text excerpt of ``content``."""
    if summary and summary.strip():
        return summary
    return strip_tags(content)[:SUMMARY_LENGTH] + "..."


def estimate_reading_time(content: str) -> int:
    words = len(strip_tags(content).split())
    return max(1, math.ceil(words / WORDS_PER_MINUTE))


def gravatar_url(email: str, size: int = 80) -> str:
    digest = hashlib.md5(email.strip().lower().encode("utf-8")).hexdigest()
    return f"https://www.gravatar.com/avatar/{digest}?d=identicon&s={size}"


def normalize_tags(tags: Union[str, List[str], None]) -> List[str]:
    """Accept a list or a comma separated string; drop blanks and duplicates."""
    if tags is None:
        return []
    if isinstance(tags, str):
        tags = tags.split(",")
    result: List[str] = []
    for tag in tags:
        tag = str(tag).strip()
        if tag and tag not in result:
            result.append(tag)
    return result


def sync_publication(post, now: datetime) -> None:
    """Keep ``published_at`` consistent with ``is_published``.

    The first publish stamps the time; later saves of a published post keep
    it. Unpublishing clears it.
    """
    if post.is_published:
        if post.published_at is None:
            post.published_at = now
    else:
        post.published_at = None
