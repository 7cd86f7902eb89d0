"""Image processing service for tagfolio application.

Uploaded images are stored inline in the photo document as ``data:`` URLs,
so every upload is downscaled and re-encoded as JPEG until it fits the
document size budget.
"""

import base64
import io
from datetime import datetime
from pathlib import Path

from PIL import Image, ImageOps, UnidentifiedImageError

from ..config import get_config
from ..error_handling import ImageProcessingError, ValidationError
from ..logging_config import get_logger, log_error, log_performance

try:
    from pillow_heif import register_heif_opener  # type: ignore[import-untyped]

    register_heif_opener()
    HEIF_AVAILABLE = True
except ImportError:
    HEIF_AVAILABLE = False

logger = get_logger(__name__)

DATA_URL_PREFIX = "data:image/jpeg;base64,"


class ImageProcessor:
    """Validates uploads and encodes them as JPEG data URLs."""

    SUPPORTED_FORMATS = {".jpg", ".jpeg", ".png", ".gif", ".webp", ".heic", ".heif"}

    # Quality steps tried after the configured quality, until the URL fits
    FALLBACK_QUALITIES = (75, 65, 55, 45)

    def __init__(self) -> None:
        config = get_config()
        self.max_file_size = config.get("MAX_FILE_SIZE", 20 * 1024 * 1024, int)
        self.min_file_size = config.get("MIN_FILE_SIZE", 100, int)
        self.max_edge = config.get("IMAGE_MAX_EDGE", 1280, int)
        self.quality = config.get("IMAGE_QUALITY", 85, int)
        self.max_data_url_bytes = config.get("MAX_DATA_URL_BYTES", 900_000, int)

        if not HEIF_AVAILABLE:
            logger.debug("heif_support_unavailable", message="Install pillow-heif for HEIC support")

    def is_supported_format(self, filename: str) -> bool:
        """
        Check if the image format is supported, by extension.

        HEIC/HEIF are only supported when pillow-heif is installed.
        """
        extension = Path(filename).suffix.lower()
        if extension in {".heic", ".heif"}:
            return HEIF_AVAILABLE
        return extension in self.SUPPORTED_FORMATS

    def validate_upload(self, image_data: bytes, filename: str) -> None:
        """
        Validate format and size of an uploaded file.

        Raises:
            ValidationError: If the format is unsupported or the size is out of range
        """
        if not self.is_supported_format(filename):
            raise ValidationError(
                f"Unsupported image format: {filename}",
                code="unsupported_format",
                user_message="지원하지 않는 이미지 형식입니다. (JPG, PNG, GIF, WEBP)",
                details={"filename": filename},
            )

        file_size = len(image_data)
        if file_size < self.min_file_size:
            raise ValidationError(
                f"File '{filename}' is too small ({file_size} bytes)",
                code="file_too_small",
                user_message=f"파일 '{filename}'이(가) 너무 작습니다.",
                details={"filename": filename, "file_size": file_size, "min_size": self.min_file_size},
            )

        if file_size > self.max_file_size:
            max_size_mb = self.max_file_size / (1024 * 1024)
            raise ValidationError(
                f"File '{filename}' is too large ({file_size} bytes)",
                code="file_too_large",
                user_message=f"파일 '{filename}'이(가) 너무 큽니다. 최대 크기: {max_size_mb:.0f}MB",
                details={"filename": filename, "file_size": file_size, "max_size": self.max_file_size},
            )

    def _calculate_target_size(self, original_size: tuple[int, int]) -> tuple[int, int]:
        """Scale down so the longest edge is at most max_edge; never upscale."""
        width, height = original_size
        longest = max(width, height)
        if longest <= self.max_edge:
            return original_size

        scale = self.max_edge / longest
        return (max(1, int(width * scale)), max(1, int(height * scale)))

    def _encode_jpeg(self, image: Image.Image, quality: int) -> bytes:
        buffer = io.BytesIO()
        image.save(buffer, format="JPEG", quality=quality, optimize=True)
        return buffer.getvalue()

    def to_data_url(self, image_data: bytes, filename: str = "upload") -> str:
        """
        Encode an uploaded image as a JPEG data URL.

        Args:
            image_data: Raw bytes of the uploaded file
            filename: Original filename, for validation and logging

        Returns:
            str: ``data:image/jpeg;base64,...``

        Raises:
            ValidationError: If the upload fails validation
            ImageProcessingError: If the image cannot be decoded or made small enough
        """
        self.validate_upload(image_data, filename)
        start_time = datetime.now()

        try:
            with Image.open(io.BytesIO(image_data)) as opened:
                image = ImageOps.exif_transpose(opened)
                original_size = image.size

                if image.mode not in ("RGB", "L"):
                    image = image.convert("RGB")

                target_size = self._calculate_target_size(original_size)
                if target_size != original_size:
                    image = image.resize(target_size, Image.Resampling.LANCZOS)

                for quality in (self.quality, *[q for q in self.FALLBACK_QUALITIES if q < self.quality]):
                    data_url = DATA_URL_PREFIX + base64.b64encode(self._encode_jpeg(image, quality)).decode("ascii")
                    if len(data_url) <= self.max_data_url_bytes:
                        break
                else:
                    raise ImageProcessingError(
                        f"Encoded image for '{filename}' exceeds {self.max_data_url_bytes} bytes",
                        code="image_too_large",
                        user_message="이미지가 너무 커서 저장할 수 없습니다. 더 작은 이미지를 사용해 주세요.",
                        details={"filename": filename, "size": len(data_url)},
                    )

        except (UnidentifiedImageError, OSError) as e:
            log_error(e, {"operation": "to_data_url", "filename": filename})
            raise ImageProcessingError(
                f"Failed to decode image '{filename}': {e}",
                code="image_decode_failed",
                details={"filename": filename, "file_size": len(image_data)},
                original_exception=e,
            ) from e

        log_performance(
            "to_data_url",
            (datetime.now() - start_time).total_seconds(),
            filename=filename,
            original_size=original_size,
            target_size=target_size,
            quality=quality,
            data_url_bytes=len(data_url),
        )
        return data_url


def get_image_processor() -> ImageProcessor:
    """Create an image processor with the current configuration."""
    return ImageProcessor()
