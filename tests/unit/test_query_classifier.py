"""Unit tests for visual-intent classification."""

import pytest

from cms_search.core.services.query_classifier import QueryClassifier

pytestmark = pytest.mark.unit


@pytest.fixture
def classifier():
    return QueryClassifier()


class TestClassify:
    def test_single_keyword(self, classifier):
        analysis = classifier.classify("blue")
        assert analysis.is_visual is True
        assert analysis.matched_keywords == ["blue"]
        assert analysis.confidence == pytest.approx(1 / 3)

    def test_overlapping_keywords_counted_once(self, classifier):
        analysis = classifier.classify("red sneakers")
        assert analysis.matched_keywords == ["red", "sneakers"]
        assert analysis.confidence == pytest.approx(2 / 3)

    def test_confidence_saturates(self, classifier):
        analysis = classifier.classify("red leather boots with striped pattern")
        assert set(analysis.matched_keywords) == {"red", "leather", "boots", "striped", "pattern"}
        assert analysis.confidence == 1.0

    def test_case_insensitive(self, classifier):
        assert classifier.classify("RED SHOES").matched_keywords == ["red", "shoes"]

    def test_non_visual_query(self, classifier):
        analysis = classifier.classify("return policy")
        assert analysis.is_visual is False
        assert analysis.confidence == 0.0
        assert analysis.matched_keywords == []
