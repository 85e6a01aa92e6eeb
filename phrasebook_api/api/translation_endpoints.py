"""Translation endpoints for free text and images."""
from typing import Optional
from fastapi import APIRouter, Depends, File, Form, UploadFile
import logging

from phrasebook_api.config.settings import Settings
from phrasebook_api.core.dependencies import get_app_settings, get_translation_service
from phrasebook_api.core.exceptions import ImageValidationError, TranslatorNotConfiguredError
from phrasebook_api.core.metrics import record_latency
from phrasebook_api.schemas.translation import (
    ImageTranslationResult,
    TextTranslationRequest,
    TranslationResult,
)
from phrasebook_api.services.image_preprocess import (
    MISSING_IMAGE_MESSAGE,
    resolve_mime_type,
    validate_image_upload,
)
from phrasebook_api.services.translation_service import OpenAITranslationService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["translation"])


@router.post("/translate", response_model=TranslationResult)
async def translate_text(
    request: Optional[TextTranslationRequest] = None,
    translator: OpenAITranslationService = Depends(get_translation_service),
):
    """
    Translate text between English and Arabic.

    - **text**: text to translate
    - **direction**: "en_to_ar" (default) or "ar_to_en"
    """
    request = request or TextTranslationRequest()
    with record_latency("translate"):
        return await translator.translate_text(request.text, request.direction)


@router.post("/translate-image", response_model=ImageTranslationResult)
async def translate_image(
    image: Optional[UploadFile] = File(None),
    direction: Optional[str] = Form(None),
    translator: OpenAITranslationService = Depends(get_translation_service),
    settings: Settings = Depends(get_app_settings),
):
    """
    Extract text from an uploaded image and translate it.

    Multipart form: **image** file and optional **direction** field.
    """
    if not translator.is_configured:
        raise TranslatorNotConfiguredError()

    if image is None:
        raise ImageValidationError(MISSING_IMAGE_MESSAGE)

    image_settings = settings.images
    raw = await image.read()
    image_format = validate_image_upload(raw, image_settings.max_upload_mb)
    mime_type = resolve_mime_type(image.content_type, image_format, image_settings.default_mime_type)

    logger.info(
        "Image translation requested",
        extra={"image_format": image_format, "size_bytes": len(raw), "direction": direction},
    )
    with record_latency("translate_image"):
        return await translator.translate_image(raw, mime_type, direction)
