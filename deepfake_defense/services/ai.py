"""
AI explanation provider.

Explains why a media item is real or fake. With an API key configured the
explanation comes from an OpenAI-compatible chat-completions endpoint over
httpx; without one, or when the call fails for any reason, a canned
explanation for the item's type and verdict is returned instead. Callers
never see an error.

Confidence scores and feature lists are generated locally from the
pre-authored label; no detection model is involved.
"""

import random
from typing import Any, Dict, List, Optional, Tuple

import httpx

from models import ExplanationRequest, ExplanationResult, MediaType
from deepfake_defense import config
from deepfake_defense.logging import get_logger

log = get_logger('ai')

SYSTEM_PROMPT = (
    "You are an expert in media literacy and deepfake detection. "
    "Provide clear, educational explanations about why content might be real or fake."
)

FAKE_EXPLANATIONS = {
    MediaType.IMAGE: [
        "This image appears to be AI-generated due to unrealistic facial features, perfect symmetry, or artificial artifacts that are common in computer-generated images.",
        "AI-generated images often have unnatural lighting, inconsistent details, or patterns that don't occur in real photographs.",
        "Look for signs like overly perfect features, strange background elements, or artifacts that indicate computer generation.",
    ],
    MediaType.QUOTE: [
        "This quote appears to be fake because it's misattributed to someone who never said it, or contains modern language that wouldn't have been used in the historical context.",
        "Fake quotes often lack proper sources, contradict known facts about the person, or use contemporary language in historical contexts.",
        "Always verify quotes by checking reliable sources and historical records.",
    ],
    MediaType.VIDEO: [
        "This video shows signs of deepfake manipulation, such as unnatural facial movements, inconsistent lighting, or artifacts around the face.",
        "Deepfake videos often have synchronization issues between audio and video, or unrealistic facial expressions.",
        "Look for glitches, unnatural movements, or inconsistencies that indicate AI manipulation.",
    ],
}

REAL_EXPLANATIONS = {
    MediaType.IMAGE: [
        "This appears to be a real photograph with natural lighting, realistic details, and authentic characteristics that are difficult to fake convincingly.",
        "Real images typically have natural imperfections, consistent lighting, and realistic details that AI struggles to replicate perfectly.",
        "The image shows authentic characteristics and natural elements that indicate it's a genuine photograph.",
    ],
    MediaType.QUOTE: [
        "This quote appears to be authentic with proper attribution, historical context, and verification from reliable sources.",
        "Real quotes are typically well-documented, have clear sources, and fit within the historical context of the person's life and work.",
        "This quote is properly attributed and has been verified through historical records and reliable sources.",
    ],
    MediaType.VIDEO: [
        "This video appears to be authentic with natural movements, consistent lighting, and realistic interactions that are difficult to fake.",
        "Real videos typically have natural facial expressions, consistent audio-video synchronization, and realistic environmental factors.",
        "The video shows authentic characteristics and natural elements that indicate it's genuine footage.",
    ],
}

FEATURES = {
    (MediaType.IMAGE, True): [
        'Perfect facial symmetry',
        'Unrealistic lighting patterns',
        'AI artifacts around edges',
        'Overly smooth skin texture',
        'Inconsistent background details',
    ],
    (MediaType.IMAGE, False): [
        'Natural facial asymmetry',
        'Realistic lighting and shadows',
        'Natural skin texture and pores',
        'Consistent background elements',
        'Authentic environmental details',
    ],
    (MediaType.QUOTE, True): [
        'No historical record found',
        'Modern language in historical context',
        'Misattributed to famous person',
        'Contradicts known facts',
        'Lacks proper source citation',
    ],
    (MediaType.QUOTE, False): [
        'Well-documented historical record',
        'Appropriate language for time period',
        'Properly attributed',
        'Consistent with known facts',
        'Multiple reliable sources',
    ],
    (MediaType.VIDEO, True): [
        'Unnatural facial movements',
        'Audio-video sync issues',
        'Inconsistent lighting',
        'Artifacts around face',
        'Unrealistic expressions',
    ],
    (MediaType.VIDEO, False): [
        'Natural facial expressions',
        'Perfect audio-video sync',
        'Consistent lighting throughout',
        'Realistic movements',
        'Authentic environmental factors',
    ],
}

FAKE_BASE_CONFIDENCE = 85
REAL_BASE_CONFIDENCE = 78
CONFIDENCE_SPREAD = 10


class ExplanationProvider:
    """Explanations, confidence scores and indicator lists for media items.

    Items are anything with ``type``, ``content`` and ``is_fake`` (a
    MediaItem or a MediaSnapshot).

    Args:
        api_key: Chat-completions API key; None means always use fallbacks
        library: Optional MediaLibrary used to enrich prompts with author,
            source and description
        transport: httpx transport override, used by tests
    """

    def __init__(
        self,
        api_key: Optional[str] = config.OPENAI_API_KEY,
        model: str = config.OPENAI_MODEL,
        base_url: str = config.OPENAI_BASE_URL,
        timeout: float = config.AI_TIMEOUT_S,
        max_tokens: int = config.AI_MAX_TOKENS,
        temperature: float = config.AI_TEMPERATURE,
        library=None,
        rng: Optional[random.Random] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.library = library
        self.rng = rng or random.Random()
        self.transport = transport
        if not api_key:
            log.info("No API key configured; explanations use fallback responses")

    def build_prompt(self, item) -> str:
        verdict = 'fake' if item.is_fake else 'real'
        lines = [
            f"Analyze this {item.type.value} and explain why it might be {verdict}:",
            "",
            f'Content: "{item.content}"',
            f"Type: {item.type.value}",
        ]
        if self.library is not None:
            info = self.library.get_media_info(item)
            if info.author:
                lines.append(f"Author: {info.author}")
            if info.source:
                lines.append(f"Source: {info.source}")
            if info.description:
                lines.append(f"Description: {info.description}")
        focus = 'AI-generated or fake' if item.is_fake else 'authentic and real'
        lines += [
            "",
            "Please provide a brief, educational explanation (max 100 words) about why "
            f"this content appears to be {focus}. Focus on specific indicators that help "
            f"identify {verdict} content.",
        ]
        return "\n".join(lines)

    async def _call_api(self, prompt: str) -> str:
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            response = await client.post(
                f"{self.base_url}/chat/completions",
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                },
                json={
                    "model": self.model,
                    "messages": [
                        {"role": "system", "content": SYSTEM_PROMPT},
                        {"role": "user", "content": prompt},
                    ],
                    "max_tokens": self.max_tokens,
                    "temperature": self.temperature,
                },
            )
            response.raise_for_status()
            data = response.json()
            return data["choices"][0]["message"]["content"].strip()

    async def _explanation(self, item) -> Tuple[str, bool]:
        """Explanation text and whether it is a fallback."""
        if not self.api_key:
            return self.fallback_explanation(item), True
        try:
            return await self._call_api(self.build_prompt(item)), False
        except (httpx.HTTPError, KeyError, IndexError, TypeError, ValueError) as e:
            log.warning("Explanation request failed (%s); using fallback", e)
            return self.fallback_explanation(item), True

    async def get_explanation(self, item) -> str:
        """Explanation text; falls back to canned text on any failure."""
        text, _ = await self._explanation(item)
        return text

    async def explain(self, request: ExplanationRequest) -> ExplanationResult:
        """Answer a doubt request, tagging the result with its id and generation."""
        text, fallback = await self._explanation(request.media)
        return ExplanationResult(
            request_id=request.request_id,
            generation=request.generation,
            text=text,
            confidence=self.get_confidence_score(request.media),
            fallback=fallback,
        )

    def fallback_explanation(self, item) -> str:
        table = FAKE_EXPLANATIONS if item.is_fake else REAL_EXPLANATIONS
        options = table.get(item.type, table[MediaType.IMAGE])
        return self.rng.choice(options)

    def get_confidence_score(self, item) -> int:
        """Demonstration confidence in [0, 100] around a per-verdict base."""
        base = FAKE_BASE_CONFIDENCE if item.is_fake else REAL_BASE_CONFIDENCE
        variation = self.rng.uniform(-CONFIDENCE_SPREAD, CONFIDENCE_SPREAD)
        return max(0, min(100, round(base + variation)))

    def detect_features(self, item) -> List[str]:
        return list(FEATURES.get((item.type, bool(item.is_fake)), []))

    async def validate_media(self, item) -> Dict[str, Any]:
        """Full analysis bundle: verdict, confidence, features, explanation."""
        return {
            'isFake': bool(item.is_fake),
            'confidence': self.get_confidence_score(item),
            'features': self.detect_features(item),
            'explanation': await self.get_explanation(item),
        }

