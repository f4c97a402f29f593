from news_ingest.core.constants import CATEGORY_KEYWORDS
from news_ingest.processing.classifier import TopicClassifier

_TABLE = {
    "politics": ["government", "minister", "election"],
    "sports": ["cricket", "football", "tennis", "match", "tournament"],
    "technology": ["software", "startup"],
}


def _build_classifier() -> TopicClassifier:
    return TopicClassifier(category_keywords=_TABLE)


def test_classify_counts_distinct_keywords() -> None:
    result = _build_classifier().classify("The cricket match ended in a thrilling victory")
    assert result.categories == {"sports": 2}
    assert result.top_category == "sports"


def test_classify_is_deterministic() -> None:
    classifier = _build_classifier()
    text = "The cricket match ended in a thrilling victory"
    assert classifier.classify(text) == classifier.classify(text)


def test_classify_no_match_returns_empty() -> None:
    result = _build_classifier().classify("Weather stays pleasant over the weekend")
    assert result.categories == {}
    assert result.top_category is None


def test_classify_tie_goes_to_first_declared_category() -> None:
    result = _build_classifier().classify("Minister opens cricket stadium")
    assert result.categories == {"politics": 1, "sports": 1}
    assert result.top_category == "politics"


def test_classify_is_case_insensitive_substring() -> None:
    result = _build_classifier().classify("FOOTBALL-mad SOFTWARE engineers")
    assert result.categories == {"sports": 1, "technology": 1}
    assert result.top_category == "sports"


def test_repeated_keyword_counts_once() -> None:
    result = _build_classifier().classify("match match match")
    assert result.categories == {"sports": 1}


def test_default_table_handles_telugu_keywords() -> None:
    classifier = TopicClassifier(category_keywords=CATEGORY_KEYWORDS)
    result = classifier.classify("క్రికెట్ మ్యాచ్")
    assert result.top_category == "sports"
