"""Модели данных для исходного изображения.

Принципы:
- SRP: только структура данных, без логики декодирования.
- Чистый код: неизменяемость (`frozen=True`) для предсказуемости; байты загрузки только читаются.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from PIL import Image


class ImageType(str, Enum):
    """Поддерживаемые типы исходных файлов."""
    PNG = "png"
    JPEG = "jpeg"
    WEBP = "webp"
    SVG = "svg"

    @property
    def mime_type(self) -> str:
        return _MIME_BY_TYPE[self]

    @classmethod
    def from_mime(cls, mime_type: str) -> "ImageType":
        """Возвращает тип по MIME; ValueError для неизвестного."""
        for image_type in cls:
            if image_type.mime_type == mime_type:
                return image_type
        raise ValueError(f"Неподдерживаемый MIME-тип: {mime_type}")


_MIME_BY_TYPE = {
    ImageType.PNG: "image/png",
    ImageType.JPEG: "image/jpeg",
    ImageType.WEBP: "image/webp",
    ImageType.SVG: "image/svg+xml",
}


@dataclass(frozen=True)
class SourceImage:
    """Неизменяемая модель загруженного изображения.

    Fields:
        data: Исходные байты файла (только чтение).
        pil_image: Изображение, декодированное один раз (RGBA).
        image_type: Тип файла (png/jpeg/webp/svg).
        width: Ширина, px.
        height: Высота, px.
        size_bytes: Размер загруженных данных.
        path: Путь к файлу, если загрузка шла с диска.
    """
    data: bytes
    pil_image: Image.Image
    image_type: ImageType
    width: int
    height: int
    size_bytes: int
    path: Optional[Path] = None

    @property
    def display_name(self) -> str:
        return self.path.name if self.path is not None else f"<{self.image_type.value}>"

    def close(self) -> None:
        """Освобождает декодированное изображение (при замене или сбросе сессии)."""
        self.pil_image.close()
