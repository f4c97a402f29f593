"""Core configuration and constants.

Import what you need from `news_ingest.core.config` and
`news_ingest.core.constants` to avoid heavy side effects at import time.
"""

__all__ = ["config", "constants"]
