"""Unit tests for content-type to category mapping."""

import pytest

from cms_search.core.domain import ContentCategory
from cms_search.core.services.content_type_mapper import ContentTypeMapper

pytestmark = pytest.mark.unit


@pytest.fixture
def mapper():
    return ContentTypeMapper()


@pytest.mark.parametrize(
    "content_type,expected",
    [
        ("article", ContentCategory.ARTICLE),
        ("blog_post", ContentCategory.ARTICLE),
        ("smartphone", ContentCategory.PRODUCT),
        ("Movie", ContentCategory.VIDEO),
        ("asset", ContentCategory.MEDIA),
    ],
)
def test_exact_match(mapper, content_type, expected):
    assert mapper.map(content_type) is expected


@pytest.mark.parametrize(
    "content_type,expected",
    [
        ("product_listing", ContentCategory.PRODUCT),
        ("video_tutorial", ContentCategory.VIDEO),
        ("landing_page", ContentCategory.ARTICLE),
    ],
)
def test_substring_match(mapper, content_type, expected):
    assert mapper.map(content_type) is expected


@pytest.mark.parametrize(
    "content_type,expected",
    [
        ("hero_img", ContentCategory.MEDIA),
        ("picture_set", ContentCategory.MEDIA),
        ("shopfront", ContentCategory.PRODUCT),
        ("vid_clip", ContentCategory.VIDEO),
    ],
)
def test_keyword_heuristics(mapper, content_type, expected):
    assert mapper.map(content_type) is expected


@pytest.mark.parametrize("content_type", ["", "   ", None, "faq"])
def test_fallback_is_article(mapper, content_type):
    assert mapper.map(content_type) is ContentCategory.ARTICLE
