import datetime
import time

from news_ingest.utils import (
    clean_text,
    contains_telugu,
    jaccard,
    parse_datetime_utc,
    strip_read_more,
    title_tokens,
)


def test_clean_text_strips_html_and_ws() -> None:
    assert clean_text("  hello&nbsp;<b>world</b>\n") == "hello world"


def test_clean_text_keeps_block_boundaries() -> None:
    assert clean_text("<p>first</p><p>second</p>") == "first second"


def test_strip_read_more_removes_stacked_placeholders() -> None:
    assert strip_read_more("Markets rallied today… [+1234 chars]") == "Markets rallied today"
    assert strip_read_more("Prices rose sharply [...]") == "Prices rose sharply"
    assert strip_read_more("Budget passed. Read more »") == "Budget passed."


def test_strip_read_more_keeps_plain_text() -> None:
    assert strip_read_more("Students read the results") == "Students read the results"


def test_contains_telugu_detects_script() -> None:
    assert contains_telugu("హైదరాబాద్ news") is True
    assert contains_telugu("Hyderabad news") is False


def test_title_tokens_casefolds_and_dedupes() -> None:
    assert title_tokens("Tax TAX policy") == {"tax", "policy"}
    assert title_tokens("") == set()


def test_jaccard_empty_is_zero() -> None:
    assert jaccard(set(), {"a"}) == 0.0
    assert jaccard(title_tokens(""), title_tokens("")) == 0.0


def test_jaccard_title_overlap() -> None:
    score = jaccard(title_tokens("Government announces new tax policy"), title_tokens("Government unveils new tax policy"))
    assert abs(score - 4 / 6) < 1e-9


def test_parse_datetime_utc_formats() -> None:
    expected = datetime.datetime(2024, 1, 2, 3, 4, 5, tzinfo=datetime.timezone.utc)
    assert parse_datetime_utc("2024-01-02T03:04:05Z") == expected
    assert parse_datetime_utc("Tue, 02 Jan 2024 03:04:05 GMT") == expected
    assert parse_datetime_utc(time.struct_time((2024, 1, 2, 3, 4, 5, 1, 2, 0))) == expected
    assert parse_datetime_utc("Tue, 02 Jan 2024 08:34:05 +0530") == expected


def test_parse_datetime_utc_rejects_garbage() -> None:
    assert parse_datetime_utc("yesterday-ish") is None
    assert parse_datetime_utc(None) is None
