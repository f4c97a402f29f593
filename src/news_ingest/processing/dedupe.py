from __future__ import annotations

import datetime
import logging
from dataclasses import dataclass
from typing import Callable, Optional

from news_ingest.models import ArticleRecord
from news_ingest.storage.base import ArticleStore
from news_ingest.utils.common import jaccard, title_tokens, utc_now


@dataclass(frozen=True)
class GateDecision:
    accepted: bool
    score: float = 0.0
    matched_title: str = ""


class DuplicateGate:
    """Rejects a candidate whose title is too close to a recently stored one.

    Only stored records are compared: two near-identical candidates in the same
    batch are both accepted if neither was stored when the other was checked.
    """

    def __init__(
        self,
        *,
        store: ArticleStore,
        lookback_hours: float,
        threshold: float,
        now_provider: Callable[[], datetime.datetime] = utc_now,
        tokenize_func: Callable[[str], set[str]] = title_tokens,
        jaccard_func: Callable[[set[str], set[str]], float] = jaccard,
        log: Optional[logging.Logger] = None,
    ) -> None:
        self._store = store
        self._lookback = datetime.timedelta(hours=lookback_hours)
        self._threshold = threshold
        self._now = now_provider
        self._tokenize = tokenize_func
        self._jaccard = jaccard_func
        self._log = log or logging.getLogger(__name__)

    def window_start(self) -> datetime.datetime:
        return self._now() - self._lookback

    def check(self, record: ArticleRecord) -> GateDecision:
        candidate = self._tokenize(record.title)
        if not candidate:
            return GateDecision(accepted=True)
        recent = self._store.find_recent_titles(self.window_start(), record.language)
        best = GateDecision(accepted=True)
        for title in recent:
            score = self._jaccard(candidate, self._tokenize(title))
            if score >= self._threshold:
                self._log.debug("Near-duplicate %.2f: %r ~ %r", score, record.title, title)
                return GateDecision(accepted=False, score=score, matched_title=title)
            if score > best.score:
                best = GateDecision(accepted=True, score=score, matched_title=title)
        return best

    def is_duplicate(self, record: ArticleRecord) -> bool:
        return not self.check(record).accepted
