"""Модели генерации: размеры, обрезка, конфигурация режимов и результат.

Принципы:
- SRP: структуры данных и их инварианты, без отрисовки.
- Конфигурация: закрытая сумма двух вариантов (`ImageModeConfig | CustomModeConfig`);
  общие поля (радиус, фон) переносятся при смене режима.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, replace
from enum import IntEnum
from typing import ClassVar, NamedTuple, Optional, Union

import regex

from favicon_forge.errors import ValidationError

TRANSPARENT = "transparent"
MAX_GRAPHEMES = 4
MAX_RADIUS_PERCENT = 50
MIN_CROP_EXTENT = 1e-6

DEFAULT_IMAGE_BACKGROUND = "#ffffff"
DEFAULT_CUSTOM_BACKGROUND = TRANSPARENT
DEFAULT_TEXT = "😎Yo"
DEFAULT_TEXT_COLOR = "#000000"

_HEX_COLOR_RE = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")


class FaviconSize(IntEnum):
    """Единственные размеры, которые попадают в архив."""
    S16 = 16
    S32 = 32
    S48 = 48
    S180 = 180
    S192 = 192
    S512 = 512


FAVICON_SIZES = tuple(FaviconSize)

FAVICON_FILENAMES = {
    FaviconSize.S16: "favicon-16x16.png",
    FaviconSize.S32: "favicon-32x32.png",
    FaviconSize.S48: "favicon-48x48.png",
    FaviconSize.S180: "apple-touch-icon.png",
    FaviconSize.S192: "android-chrome-192x192.png",
    FaviconSize.S512: "android-chrome-512x512.png",
}


def limit_graphemes(text: str, limit: int = MAX_GRAPHEMES) -> str:
    """Обрезает строку до `limit` графемных кластеров (эмодзи с модификаторами не рвутся)."""
    if not text:
        return ""
    return "".join(regex.findall(r"\X", text)[:limit])


def normalize_color(value: str, *, allow_transparent: bool = True) -> str:
    """Проверяет цвет '#rgb' / '#rrggbb' (или 'transparent') и приводит к нижнему регистру."""
    value = (value or "").strip()
    if allow_transparent and value.lower() == TRANSPARENT:
        return TRANSPARENT
    if not _HEX_COLOR_RE.match(value):
        raise ValidationError(f"Некорректный цвет: {value!r}")
    return value.lower()


def _clamp_radius(value: float) -> float:
    return max(0, min(MAX_RADIUS_PERCENT, value))


@dataclass(frozen=True)
class ImageCrop:
    """Нормализованный прямоугольник обрезки, доли [0, 1] от размеров источника."""
    x: float
    y: float
    width: float
    height: float

    def clamped(self) -> "ImageCrop":
        """Возвращает прямоугольник, удовлетворяющий инвариантам (ничего не выходит за [0, 1])."""
        x = min(max(self.x, 0.0), 1.0 - MIN_CROP_EXTENT)
        y = min(max(self.y, 0.0), 1.0 - MIN_CROP_EXTENT)
        width = min(max(self.width, MIN_CROP_EXTENT), 1.0 - x)
        height = min(max(self.height, MIN_CROP_EXTENT), 1.0 - y)
        return ImageCrop(x=x, y=y, width=width, height=height)


class PixelRect(NamedTuple):
    """Прямоугольник источника в пикселях."""
    sx: int
    sy: int
    sw: int
    sh: int


@dataclass(frozen=True)
class ImageModeConfig:
    mode: ClassVar[str] = "image"

    radius_percent: float = 0
    background_color: str = DEFAULT_IMAGE_BACKGROUND
    crop: Optional[ImageCrop] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "radius_percent", _clamp_radius(self.radius_percent))
        object.__setattr__(self, "background_color", normalize_color(self.background_color))
        if self.crop is not None:
            object.__setattr__(self, "crop", self.crop.clamped())


@dataclass(frozen=True)
class CustomModeConfig:
    mode: ClassVar[str] = "custom"

    radius_percent: float = 0
    background_color: str = DEFAULT_CUSTOM_BACKGROUND
    text: str = DEFAULT_TEXT
    text_color: str = DEFAULT_TEXT_COLOR

    def __post_init__(self) -> None:
        object.__setattr__(self, "radius_percent", _clamp_radius(self.radius_percent))
        object.__setattr__(self, "background_color", normalize_color(self.background_color))
        object.__setattr__(self, "text", limit_graphemes(self.text))
        object.__setattr__(self, "text_color", normalize_color(self.text_color, allow_transparent=False))


GeneratorConfig = Union[ImageModeConfig, CustomModeConfig]


def to_image_mode(config: GeneratorConfig, crop: Optional[ImageCrop] = None) -> ImageModeConfig:
    """Переключает на режим изображения, сохраняя радиус и фон."""
    if isinstance(config, ImageModeConfig):
        return replace(config, crop=crop)
    return ImageModeConfig(
        radius_percent=config.radius_percent,
        background_color=config.background_color,
        crop=crop,
    )


def to_custom_mode(
    config: GeneratorConfig,
    text: Optional[str] = None,
    text_color: Optional[str] = None,
) -> CustomModeConfig:
    """Переключает на текстовый режим, сохраняя радиус и фон."""
    if isinstance(config, CustomModeConfig):
        return replace(
            config,
            text=config.text if text is None else text,
            text_color=text_color or config.text_color,
        )
    return CustomModeConfig(
        radius_percent=config.radius_percent,
        background_color=config.background_color,
        text=DEFAULT_TEXT if text is None else text,
        text_color=text_color or DEFAULT_TEXT_COLOR,
    )


@dataclass(frozen=True)
class GeneratedIcon:
    """Результат одного прогона для одного размера."""
    size: FaviconSize
    data: bytes
    filename: str

    @classmethod
    def for_size(cls, size: int, data: bytes) -> "GeneratedIcon":
        size = FaviconSize(size)
        return cls(size=size, data=data, filename=FAVICON_FILENAMES[size])
