def test_package_imports() -> None:
    import news_ingest  # noqa: F401

    from news_ingest.core import config  # noqa: F401
    from news_ingest.storage import sqlite  # noqa: F401

    try:
        import pytest
    except Exception:
        return
    pytest.importorskip("feedparser")
    pytest.importorskip("playwright")
    from news_ingest.processing import pipeline  # noqa: F401


def test_default_data_paths() -> None:
    from news_ingest.core.config import DATABASE_PATH

    assert DATABASE_PATH.endswith("/data/articles.db") or DATABASE_PATH.endswith("\\data\\articles.db")


def test_default_rss_sources_include_times_of_india() -> None:
    from news_ingest.core.config import RSS_SOURCES

    assert RSS_SOURCES[0]["url"] == "https://timesofindia.indiatimes.com/rssfeedstopstories.cms"
