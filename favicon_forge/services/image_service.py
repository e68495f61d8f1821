"""Проверка и декодирование загруженных изображений.

Принципы:
- SRP: класс отвечает только за валидацию и однократное декодирование источника.
- OCP: новые источники (стрим, буфер обмена) сводятся к `load_bytes`.
- Ошибки входа всегда `ValidationError`; генерация с таким входом не начинается.
"""
from __future__ import annotations

import io
import logging
import mimetypes
from concurrent.futures import Executor, Future
from pathlib import Path
from typing import Optional, Sequence

from PIL import Image, UnidentifiedImageError

from favicon_forge.config import Config
from favicon_forge.errors import ValidationError
from favicon_forge.models.image_model import ImageType, SourceImage

logger = logging.getLogger(__name__)

# mimetypes на некоторых системах не знает webp
mimetypes.add_type("image/webp", ".webp")

_PIL_FORMATS = {
    ImageType.PNG: "PNG",
    ImageType.JPEG: "JPEG",
    ImageType.WEBP: "WEBP",
}


class ImageService:
    def __init__(
        self,
        max_bytes: int = Config.MAX_UPLOAD_BYTES,
        allowed_mime_types: Sequence[str] = Config.ALLOWED_MIME_TYPES,
        svg_min_raster_size: int = Config.SVG_MIN_RASTER_SIZE,
    ) -> None:
        self.max_bytes = max_bytes
        self.allowed_mime_types = tuple(allowed_mime_types)
        self.svg_min_raster_size = svg_min_raster_size

    def validate(self, size_bytes: int, mime_type: Optional[str]) -> ImageType:
        """Проверяет размер и MIME-тип до декодирования.

        Raises:
            ValidationError: файл больше лимита или тип не поддерживается.
        """
        if size_bytes > self.max_bytes:
            limit_mb = self.max_bytes // (1024 * 1024)
            raise ValidationError(f"Размер файла должен быть меньше {limit_mb} МБ")
        if mime_type not in self.allowed_mime_types:
            raise ValidationError("Файл должен быть PNG, JPG, WebP или SVG")
        return ImageType.from_mime(mime_type)

    def load_bytes(self, data: bytes, mime_type: Optional[str], path: Optional[Path] = None) -> SourceImage:
        """Проверяет и декодирует байты загрузки.

        Returns:
            `SourceImage` с изображением в режиме RGBA.

        Raises:
            ValidationError: превышен размер, неверный тип или файл не декодируется.
        """
        image_type = self.validate(len(data), mime_type)
        if image_type is ImageType.SVG:
            pil_image = self._decode_svg(data)
        else:
            pil_image = self._decode_raster(data, image_type)

        width, height = pil_image.size
        logger.debug("decoded %s %dx%d (%d bytes)", image_type.value, width, height, len(data))
        return SourceImage(
            data=bytes(data),
            pil_image=pil_image,
            image_type=image_type,
            width=width,
            height=height,
            size_bytes=len(data),
            path=path,
        )

    def load_image(self, file_path: str | Path) -> SourceImage:
        """Загружает изображение с диска; MIME-тип определяется по расширению.

        Raises:
            FileNotFoundError: если путь не существует или не указывает на файл.
            ValidationError: см. `load_bytes`.
        """
        path = Path(file_path)
        if not path.exists() or not path.is_file():
            raise FileNotFoundError(f"Файл не найден: {path}")

        # размер проверяем до чтения, чтобы не тянуть в память гигантские файлы
        mime_type, _encoding = mimetypes.guess_type(path.name)
        self.validate(path.stat().st_size, mime_type)
        return self.load_bytes(path.read_bytes(), mime_type, path=path)

    def submit_load(self, file_path: str | Path, executor: Executor) -> "Future[SourceImage]":
        """Декодирование вне UI-потока; вызывающий ждёт `Future`."""
        return executor.submit(self.load_image, file_path)

    # ---- Helpers ----
    def _decode_raster(self, data: bytes, image_type: ImageType) -> Image.Image:
        try:
            with Image.open(io.BytesIO(data)) as opened:
                if opened.format != _PIL_FORMATS[image_type]:
                    raise ValidationError("Содержимое файла не соответствует его типу")
                return opened.convert("RGBA")
        except Image.DecompressionBombError as exc:
            raise ValidationError("Изображение слишком большое") from exc
        except (UnidentifiedImageError, OSError) as exc:
            raise ValidationError("Файл не является изображением") from exc

    def _decode_svg(self, data: bytes) -> Image.Image:
        # cairosvg тянет системный cairo, поэтому импорт только по требованию
        import cairosvg

        try:
            png = cairosvg.svg2png(bytestring=data)
            with Image.open(io.BytesIO(png)) as probe:
                width, height = probe.size
                longest = max(width, height)
                if longest >= self.svg_min_raster_size:
                    return probe.convert("RGBA")
            # мелкий viewBox растеризуем заново в большем масштабе, чтобы 512px не мылились
            scale = self.svg_min_raster_size / max(1, longest)
            png = cairosvg.svg2png(bytestring=data, scale=scale)
            with Image.open(io.BytesIO(png)) as opened:
                return opened.convert("RGBA")
        except Exception as exc:  # noqa: BLE001 - cairosvg/ElementTree бросают разнородные ошибки
            raise ValidationError("Не удалось прочитать SVG") from exc
