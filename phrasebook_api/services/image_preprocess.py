"""Upload checks for image translation."""
from PIL import Image, UnidentifiedImageError
import io

from phrasebook_api.core.exceptions import ImageTooLargeError, ImageValidationError

MISSING_IMAGE_MESSAGE = "Missing image file (field name must be 'image')"


def validate_image_upload(image_bytes: bytes, max_size_mb: int) -> str:
    """
    Check an uploaded image before it is sent to the language model.

    Args:
        image_bytes: Raw upload bytes
        max_size_mb: Upper size limit in megabytes

    Returns:
        The image format detected by Pillow (e.g. "JPEG", "PNG")
    """
    if not image_bytes:
        raise ImageValidationError(MISSING_IMAGE_MESSAGE)

    size_mb = len(image_bytes) / (1024 * 1024)
    if size_mb > max_size_mb:
        raise ImageTooLargeError(size_mb, max_size_mb)

    try:
        with Image.open(io.BytesIO(image_bytes)) as img:
            img.verify()
            image_format = img.format
    except (UnidentifiedImageError, OSError, SyntaxError) as e:
        raise ImageValidationError("Uploaded file is not a readable image", details={"reason": str(e)}) from e

    return image_format or "UNKNOWN"


def resolve_mime_type(content_type: str | None, image_format: str, default: str = "image/jpeg") -> str:
    """Prefer the client's image/* content type, then Pillow's format, then the default."""
    if content_type and content_type.startswith("image/"):
        return content_type
    mime = Image.MIME.get(image_format.upper()) if image_format else None
    return mime or default
