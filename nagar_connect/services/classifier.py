from __future__ import annotations

import logging
from typing import Any, List, Optional, Sequence, Tuple

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types
from pydantic import BaseModel, Field

from nagar_connect.core.config import Settings

logger = logging.getLogger(__name__)

AI_CATEGORIES = (
    "pothole",
    "streetlight",
    "road",
    "traffic",
    "water",
    "garbage",
    "drainage",
    "safety",
    "other",
)

PROMPT = (
    "Look at this image and categorize it as ONLY ONE of these civic issue types: "
    f"{', '.join(AI_CATEGORIES)}. Respond with just the category name, nothing else."
)

Rule = Tuple[Tuple[str, ...], str, float]

# checked in order, first hit wins
MODEL_REPLY_RULES: Sequence[Rule] = (
    (("pothole", "hole"), "pothole", 0.8),
    (("streetlight", "light"), "streetlight", 0.8),
    (("road", "street"), "road", 0.7),
    (("traffic", "signal"), "traffic", 0.8),
    (("water", "leak"), "water", 0.8),
    (("garbage", "trash"), "garbage", 0.8),
    (("drainage", "drain"), "drainage", 0.8),
    (("safety", "hazard"), "safety", 0.7),
    (("other",), "other", 0.6),
)
MODEL_REPLY_DEFAULT = ("other", 0.5)

FILENAME_RULES: Sequence[Rule] = (
    (("pothole", "hole"), "pothole", 0.6),
    (("light", "lamp"), "streetlight", 0.6),
    (("water", "leak"), "water", 0.6),
    (("garbage", "trash"), "garbage", 0.6),
    (("road", "street"), "road", 0.5),
)
FILENAME_DEFAULT = ("other", 0.3)


class Analysis(BaseModel):
    category: str
    confidence: float = Field(..., ge=0.0, le=1.0)
    description: str
    tags: List[str] = Field(default_factory=list)


UNABLE_TO_ANALYZE = Analysis(
    category="other", confidence=0.1, description="Unable to analyze image", tags=[]
)


class ModelEndpointNotFound(Exception):
    pass


def match_rules(text: str, rules: Sequence[Rule], default: Tuple[str, float]) -> Tuple[str, float]:
    text = text.lower()
    for needles, category, confidence in rules:
        if any(n in text for n in needles):
            return category, confidence
    return default


def classify_by_filename(image_url: str) -> Analysis:
    category, confidence = match_rules(image_url, FILENAME_RULES, FILENAME_DEFAULT)
    return Analysis(
        category=category,
        confidence=confidence,
        description=f"Fallback: {category}",
        tags=[category],
    )


def classify_model_reply(reply: str) -> Analysis:
    category, confidence = match_rules(reply.strip(), MODEL_REPLY_RULES, MODEL_REPLY_DEFAULT)
    return Analysis(
        category=category,
        confidence=confidence,
        description=f"Detected: {category}",
        tags=[category],
    )


class ImageClassifier:
    """
    Suggests a civic-issue category for an uploaded image.

    With GEMINI_API_KEY configured the image is sent to Gemini; without it the
    classifier runs in filename-keyword mode. classify() never raises.
    """

    def __init__(
        self,
        settings: Settings,
        client: Optional[httpx.AsyncClient] = None,
        model_client: Optional[Any] = None,
    ):
        self.api_key = settings.gemini_api_key
        self.model = settings.gemini_model
        self.timeout = settings.http_timeout_seconds
        self._client = client
        self._model_client = model_client

    @property
    def ai_enabled(self) -> bool:
        return bool(self.api_key)

    @property
    def model_client(self) -> genai.Client:
        if self._model_client is None:
            self._model_client = genai.Client(
                api_key=self.api_key,
                http_options=types.HttpOptions(timeout=int(self.timeout * 1000)),
            )
        return self._model_client

    async def classify(self, image_url: str) -> Analysis:
        try:
            if not self.ai_enabled:
                return classify_by_filename(image_url)
            try:
                return await self._classify_with_model(image_url)
            except ModelEndpointNotFound:
                logger.info("Gemini model not found, using filename fallback")
                return classify_by_filename(image_url)
        except Exception:
            logger.exception("Image analysis failed for %s", image_url)
            return UNABLE_TO_ANALYZE.model_copy(deep=True)

    async def _classify_with_model(self, image_url: str) -> Analysis:
        if self._client is not None:
            data, mime_type = await self._fetch_image(self._client, image_url)
        else:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                data, mime_type = await self._fetch_image(client, image_url)
        return await self._ask_model(data, mime_type)

    async def _fetch_image(self, client: httpx.AsyncClient, image_url: str) -> Tuple[bytes, str]:
        image = await client.get(image_url)
        image.raise_for_status()
        return image.content, image.headers.get("content-type") or "image/jpeg"

    async def _ask_model(self, data: bytes, mime_type: str) -> Analysis:
        try:
            response = await self.model_client.aio.models.generate_content(
                model=self.model,
                contents=[PROMPT, types.Part.from_bytes(data=data, mime_type=mime_type)],
                config=types.GenerateContentConfig(temperature=0.1, max_output_tokens=10),
            )
        except genai_errors.ClientError as exc:
            if exc.code == 404:
                raise ModelEndpointNotFound() from exc
            raise

        reply = (response.text or "").strip().lower()
        if not reply:
            raise RuntimeError("No content in Gemini response")
        logger.debug("Gemini reply: %r", reply)
        return classify_model_reply(reply)
