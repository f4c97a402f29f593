from __future__ import annotations

from typing import Sequence

from news_ingest.models import RawItem


class SourceAdapter:
    """One external source. `produce_items` raises SourceError on failure."""

    name: str = ""
    kind: str = ""

    def produce_items(self) -> Sequence[RawItem]:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"
