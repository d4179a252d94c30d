"""Unit tests for the image analyzer retry and degrade behaviour."""

import pytest

from cms_search.core.domain import ImageAnalysisDisabled, ImageAnalysisEnabled
from cms_search.core.domain.exceptions import (
    ImageAnalysisError,
    ImageAnalysisRateLimitError,
    ImageAnalysisUnavailableError,
)
from cms_search.core.services.image_analyzer import ImageAnalyzer
from tests.conftest import FakeImageAnalysis

pytestmark = pytest.mark.unit

IMAGE_URL = "https://cdn.example.com/assets/shoe.jpg"


def make_analyzer(client, **kwargs) -> ImageAnalyzer:
    kwargs.setdefault("retry_delay", 0)
    kwargs.setdefault("rate_limit_backoff", 0)
    return ImageAnalyzer(ImageAnalysisEnabled(client=client), **kwargs)


class TestDisabled:
    """Disabled analysis never reaches a provider."""

    @pytest.mark.asyncio
    async def test_returns_empty_result(self):
        analyzer = ImageAnalyzer(ImageAnalysisDisabled())

        result = await analyzer.analyze(IMAGE_URL, title="Shoe")

        assert result.source_image_url == IMAGE_URL
        assert result.caption is None
        assert result.analyzed is False
        assert analyzer.enabled is False

    def test_require_enabled_raises(self):
        analyzer = ImageAnalyzer(ImageAnalysisDisabled(reason="no key"))

        with pytest.raises(ImageAnalysisUnavailableError) as exc_info:
            analyzer.require_enabled()

        assert exc_info.value.extra_context == {"reason": "no key"}


class TestAnalyze:
    @pytest.mark.asyncio
    async def test_caption_returned(self, fake_vision):
        analyzer = make_analyzer(fake_vision)

        result = await analyzer.analyze(IMAGE_URL, title="Red Running Shoes", query="red shoes")

        assert result.caption == "A red running shoe on white background"
        assert result.analyzed is True
        url, prompt = fake_vision.calls[0]
        assert url == IMAGE_URL
        assert '"Red Running Shoes"' in prompt
        assert '"red shoes"' in prompt

    @pytest.mark.asyncio
    async def test_blank_caption_is_none(self):
        analyzer = make_analyzer(FakeImageAnalysis(caption="   "))
        result = await analyzer.analyze(IMAGE_URL)
        assert result.caption is None

    @pytest.mark.asyncio
    async def test_retries_transient_failures(self):
        client = FakeImageAnalysis(errors=[ImageAnalysisError("flaky"), ImageAnalysisError("flaky")])
        analyzer = make_analyzer(client)

        result = await analyzer.analyze(IMAGE_URL)

        assert result.analyzed is True
        assert len(client.calls) == 3

    @pytest.mark.asyncio
    async def test_gives_up_after_max_attempts(self):
        client = FakeImageAnalysis(errors=[ImageAnalysisError("down")] * 5)
        analyzer = make_analyzer(client, max_attempts=2)

        result = await analyzer.analyze(IMAGE_URL)

        assert result.caption is None
        assert len(client.calls) == 2

    @pytest.mark.asyncio
    async def test_rate_limit_degrades_to_empty(self):
        client = FakeImageAnalysis(errors=[ImageAnalysisRateLimitError("429")] * 3)
        analyzer = make_analyzer(client)

        result = await analyzer.analyze(IMAGE_URL)

        assert result.caption is None
        assert len(client.calls) == 3

    def test_prompt_without_context(self):
        prompt = ImageAnalyzer.build_prompt()
        assert prompt.startswith("Analyze this image.")
        assert "colors" in prompt
