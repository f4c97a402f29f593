from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Sequence


@dataclass(frozen=True)
class ClassificationResult:
    categories: dict[str, int] = field(default_factory=dict)
    top_category: str | None = None


class TopicClassifier:
    """Keyword-count topic classifier over a fixed, ordered category table."""

    def __init__(self, *, category_keywords: Mapping[str, Sequence[str]]) -> None:
        # dict preserves the table's declaration order, which breaks ties
        self._table: dict[str, tuple[str, ...]] = {
            category: tuple(dict.fromkeys(k.lower() for k in keywords if k and k.strip()))
            for category, keywords in category_keywords.items()
        }

    def score(self, text: str) -> dict[str, int]:
        lowered = (text or "").lower()
        if not lowered.strip():
            return {}
        scores: dict[str, int] = {}
        for category, keywords in self._table.items():
            hits = sum(1 for kw in keywords if kw in lowered)
            if hits > 0:
                scores[category] = hits
        return scores

    def classify(self, text: str) -> ClassificationResult:
        scores = self.score(text)
        if not scores:
            return ClassificationResult()
        # max() returns the first maximal key in insertion order
        top = max(scores, key=scores.__getitem__)
        return ClassificationResult(categories=scores, top_category=top)

    def classify_parts(self, *parts: str) -> ClassificationResult:
        return self.classify(" ".join(p for p in parts if p))
