from enum import Enum
from pydantic import BaseModel
from typing import Any, Optional


class Direction(str, Enum):
    EN_TO_AR = "en_to_ar"
    AR_TO_EN = "ar_to_en"

    @classmethod
    def parse(cls, value: Any) -> "Direction":
        """Anything other than ``ar_to_en`` means English to Arabic."""
        return cls.AR_TO_EN if value == cls.AR_TO_EN.value else cls.EN_TO_AR


class TextTranslationRequest(BaseModel):
    text: Optional[Any] = None
    direction: Optional[Any] = None


class TranslationResult(BaseModel):
    arabic: str = ""
    transliteration: str = ""
    english: str = ""


class ImageTranslationResult(TranslationResult):
    source: str = "openai"
