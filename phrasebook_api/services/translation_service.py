"""
Translation service for the phrasebook backend.

Text and image translation between English and Arabic through the OpenAI
chat completions API. The model is asked for a JSON object with exactly the
keys ``arabic``, ``transliteration`` and ``english``; anything it returns
outside those keys is ignored.
"""

import asyncio
import base64
import json
import logging
from typing import Any, Dict, List, Optional

from openai import AsyncOpenAI, OpenAIError

from phrasebook_api.config.settings import OpenAISettings
from phrasebook_api.core.exceptions import (
    MissingTextError,
    TranslationError,
    TranslatorNotConfiguredError,
)
from phrasebook_api.schemas.translation import (
    Direction,
    ImageTranslationResult,
    TranslationResult,
)

logger = logging.getLogger(__name__)

TEXT_SYSTEM_PROMPT = """
You are a careful Arabic/English translator.
Return ONLY valid JSON with exactly these keys:
arabic, transliteration, english
No extra keys. No commentary.
""".strip()

EN_TO_AR_PROMPT = """Translate this English into Arabic:
"{text}"

Rules:
- arabic: Modern Standard Arabic
- transliteration: simple Latin transliteration (ā ī ū where appropriate if you can)
- english: original English text (cleaned, normal casing)"""

AR_TO_EN_PROMPT = """Translate this Arabic into English:
"{text}"

Rules:
- arabic: original Arabic text (cleaned)
- transliteration: Latin transliteration
- english: natural English translation"""

IMAGE_SYSTEM_PROMPT = """
You are an Arabic phrasebook translator.
The user provides an image containing text.
Extract the text and translate it based on direction.

Return ONLY valid JSON with exactly these keys:
arabic, english, transliteration, source

Rules:
- If direction is "en_to_ar": translate extracted English -> Arabic.
- If direction is "ar_to_en": translate extracted Arabic -> English.
- Transliteration must use macrons when helpful (ā ī ū).
- Keep it short and natural for travel phrases.
- "source" must be "openai".
""".strip()


def _text_field(data: Dict[str, Any], name: str) -> str:
    value = data.get(name)
    return value.strip() if isinstance(value, str) else ""


def build_text_messages(text: str, direction: Direction) -> List[Dict[str, Any]]:
    template = EN_TO_AR_PROMPT if direction == Direction.EN_TO_AR else AR_TO_EN_PROMPT
    return [
        {"role": "system", "content": TEXT_SYSTEM_PROMPT},
        {"role": "user", "content": template.format(text=text)},
    ]


def build_image_messages(data_url: str, direction: Direction) -> List[Dict[str, Any]]:
    return [
        {"role": "system", "content": IMAGE_SYSTEM_PROMPT},
        {
            "role": "user",
            "content": [
                {"type": "text", "text": f"direction: {direction.value}"},
                {"type": "image_url", "image_url": {"url": data_url}},
            ],
        },
    ]


def to_data_url(image_bytes: bytes, mime_type: str) -> str:
    encoded = base64.b64encode(image_bytes).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"


class OpenAITranslationService:
    """
    English/Arabic translation backed by OpenAI chat completions.

    The AsyncOpenAI client is created on first use. Without an API key the
    service still constructs, and every translation raises
    TranslatorNotConfiguredError.
    """

    def __init__(self, openai_settings: Optional[OpenAISettings] = None, client: Optional[AsyncOpenAI] = None):
        self.settings = openai_settings or OpenAISettings()
        self._client = client
        self._client_lock = asyncio.Lock()

        if not self.is_configured:
            logger.warning("OpenAI API key not configured. Set OPENAI_API_KEY to enable translation.")

    @property
    def is_configured(self) -> bool:
        return self._client is not None or bool(self.settings.api_key)

    async def _get_client(self) -> AsyncOpenAI:
        if self._client is not None:
            return self._client

        async with self._client_lock:
            if self._client is None:
                if not self.settings.api_key:
                    raise TranslatorNotConfiguredError()
                self._client = AsyncOpenAI(
                    api_key=self.settings.api_key,
                    timeout=self.settings.timeout_seconds,
                    max_retries=self.settings.max_retries,
                )
                logger.info("OpenAI client initialized", extra={"model": self.settings.model})
        return self._client

    async def _complete_json(self, messages: List[Dict[str, Any]], operation: str) -> Dict[str, Any]:
        client = await self._get_client()
        try:
            completion = await client.chat.completions.create(
                model=self.settings.model,
                temperature=self.settings.temperature,
                messages=messages,
                response_format={"type": "json_object"},
            )
        except OpenAIError as e:
            logger.exception(f"{operation} failed at the language model")
            raise TranslationError(details={"operation": operation, "reason": type(e).__name__}) from e

        content = "{}"
        if completion.choices and completion.choices[0].message.content:
            content = completion.choices[0].message.content

        try:
            data = json.loads(content)
        except ValueError as e:
            logger.error(f"{operation} returned non-JSON content", extra={"content": content[:200]})
            raise TranslationError(details={"operation": operation, "reason": "invalid_json"}) from e

        if not isinstance(data, dict):
            raise TranslationError(details={"operation": operation, "reason": "not_an_object"})
        return data

    async def translate_text(self, text: Any, direction: Any = None) -> TranslationResult:
        """
        Translate free text.

        Args:
            text: Text to translate; must be non-empty after trimming
            direction: "en_to_ar" or "ar_to_en"; anything else means "en_to_ar"

        Returns:
            TranslationResult with trimmed arabic, transliteration and english
        """
        cleaned = text.strip() if isinstance(text, str) else ""
        if not cleaned:
            raise MissingTextError()

        parsed_direction = Direction.parse(direction)
        data = await self._complete_json(build_text_messages(cleaned, parsed_direction), "translate")

        return TranslationResult(
            arabic=_text_field(data, "arabic"),
            transliteration=_text_field(data, "transliteration"),
            english=_text_field(data, "english"),
        )

    async def translate_image(self, image_bytes: bytes, mime_type: str, direction: Any = None) -> ImageTranslationResult:
        """
        Extract text from an image and translate it.

        The image is sent inline as a base64 data URL. ``source`` is always
        "openai" regardless of what the model returns.
        """
        parsed_direction = Direction.parse(direction)
        messages = build_image_messages(to_data_url(image_bytes, mime_type), parsed_direction)
        data = await self._complete_json(messages, "translate_image")

        return ImageTranslationResult(
            arabic=_text_field(data, "arabic"),
            english=_text_field(data, "english"),
            transliteration=_text_field(data, "transliteration"),
            source="openai",
        )

    async def close(self) -> None:
        if self._client is not None:
            await self._client.close()
            self._client = None
