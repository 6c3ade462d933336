"""
Tests for the explanation provider.

HTTP calls go through httpx.MockTransport; coroutines are driven with
asyncio.run so no async test plugin is needed.
"""

import asyncio
import json
import random

import httpx
import pytest

from models import ExplanationRequest, MediaSnapshot, MediaType
from deepfake_defense.services.ai import (
    FAKE_EXPLANATIONS,
    REAL_EXPLANATIONS,
    ExplanationProvider,
)


def completion(text):
    return {"choices": [{"message": {"role": "assistant", "content": text}}]}


def provider_with(handler, **kwargs):
    kwargs.setdefault('rng', random.Random(11))
    return ExplanationProvider(api_key='test-key', transport=httpx.MockTransport(handler), **kwargs)


@pytest.fixture
def fake_quote():
    return MediaSnapshot(type='quote', content='The internet is just a passing fad.', is_fake=True)


@pytest.fixture
def real_image():
    return MediaSnapshot(type='image', content='Real celebrity photo', is_fake=False)


# ============================================================================
# API path
# ============================================================================


class TestApiExplanation:
    """Test explanations from the chat-completions endpoint."""

    def test_returns_api_text(self, fake_quote):
        provider = provider_with(lambda request: httpx.Response(200, json=completion("  Misattributed.  ")))
        assert asyncio.run(provider.get_explanation(fake_quote)) == "Misattributed."

    def test_request_shape(self, fake_quote):
        seen = {}

        def handler(request):
            seen['url'] = str(request.url)
            seen['auth'] = request.headers['authorization']
            seen['body'] = json.loads(request.content)
            return httpx.Response(200, json=completion("ok"))

        provider = provider_with(handler, base_url='https://llm.example/v1/', model='test-model')
        asyncio.run(provider.get_explanation(fake_quote))

        assert seen['url'] == 'https://llm.example/v1/chat/completions'
        assert seen['auth'] == 'Bearer test-key'
        assert seen['body']['model'] == 'test-model'
        assert seen['body']['max_tokens'] == 150
        assert [m['role'] for m in seen['body']['messages']] == ['system', 'user']
        assert 'passing fad' in seen['body']['messages'][1]['content']

    def test_explain_tags_result(self, fake_quote):
        provider = provider_with(lambda request: httpx.Response(200, json=completion("Fake.")))
        result = asyncio.run(provider.explain(
            ExplanationRequest(request_id=4, generation=2, media=fake_quote)))
        assert result.request_id == 4
        assert result.generation == 2
        assert result.text == "Fake."
        assert result.fallback is False
        assert 0 <= result.confidence <= 100


# ============================================================================
# Fallbacks
# ============================================================================


class TestFallbacks:
    """Test that failures never reach the caller."""

    def test_no_api_key(self, fake_quote):
        provider = ExplanationProvider(api_key=None, rng=random.Random(1))
        text = asyncio.run(provider.get_explanation(fake_quote))
        assert text in FAKE_EXPLANATIONS[MediaType.QUOTE]

    def test_real_item_gets_real_text(self, real_image):
        provider = ExplanationProvider(api_key=None, rng=random.Random(1))
        assert asyncio.run(provider.get_explanation(real_image)) in REAL_EXPLANATIONS[MediaType.IMAGE]

    @pytest.mark.parametrize("response", [
        httpx.Response(500, json={"error": "boom"}),
        httpx.Response(200, json={"choices": []}),
        httpx.Response(200, json={"unexpected": True}),
        httpx.Response(200, content=b"not json"),
    ])
    def test_bad_responses(self, fake_quote, response):
        provider = provider_with(lambda request: response)
        result = asyncio.run(provider.explain(
            ExplanationRequest(request_id=1, generation=1, media=fake_quote)))
        assert result.fallback is True
        assert result.text in FAKE_EXPLANATIONS[MediaType.QUOTE]

    def test_network_error(self, fake_quote):
        def handler(request):
            raise httpx.ConnectError("unreachable", request=request)

        provider = provider_with(handler)
        assert asyncio.run(provider.get_explanation(fake_quote)) in FAKE_EXPLANATIONS[MediaType.QUOTE]


# ============================================================================
# Local analysis
# ============================================================================


class TestAnalysis:
    """Test prompts, confidence and features."""

    def test_prompt_includes_library_context(self, fake_quote, library):
        prompt = ExplanationProvider(api_key=None, library=library).build_prompt(fake_quote)
        assert 'explain why it might be fake' in prompt
        assert 'Author: Bill Gates' in prompt
        assert 'Source: Misattributed' in prompt

    def test_prompt_without_library(self, real_image):
        prompt = ExplanationProvider(api_key=None).build_prompt(real_image)
        assert 'authentic and real' in prompt
        assert 'Author:' not in prompt

    def test_confidence_in_range(self, fake_quote, real_image):
        provider = ExplanationProvider(api_key=None, rng=random.Random(0))
        for _ in range(500):
            assert 75 <= provider.get_confidence_score(fake_quote) <= 95
            assert 68 <= provider.get_confidence_score(real_image) <= 88

    def test_features(self, fake_quote, real_image):
        provider = ExplanationProvider(api_key=None)
        assert 'Misattributed to famous person' in provider.detect_features(fake_quote)
        assert 'Natural facial asymmetry' in provider.detect_features(real_image)

    def test_validate_media(self, fake_quote):
        provider = ExplanationProvider(api_key=None, rng=random.Random(2))
        result = asyncio.run(provider.validate_media(fake_quote))
        assert result['isFake'] is True
        assert len(result['features']) == 5
        assert result['explanation'] in FAKE_EXPLANATIONS[MediaType.QUOTE]
