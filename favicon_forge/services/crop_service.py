"""Нормализация обрезки: проценты UI -> доли [0, 1] -> пиксели источника."""
from __future__ import annotations

import math
from typing import Mapping, Optional

from favicon_forge.models.icon_model import ImageCrop, PixelRect


def round_half_up(value: float) -> int:
    """Округление к ближайшему целому, половина округляется вверх."""
    return int(math.floor(value + 0.5))


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(value, high))


class CropNormalizer:
    def default_crop(self, width: int, height: int) -> ImageCrop:
        """Центрированный квадрат со стороной min(width, height)."""
        side = min(width, height)
        x = max(0.0, (width - side) / 2)
        y = max(0.0, (height - side) / 2)
        return ImageCrop(x=x / width, y=y / height, width=side / width, height=side / height)

    def normalized_crop(
        self,
        percent_rect: Optional[Mapping[str, float]] = None,
        *,
        width: int,
        height: int,
    ) -> ImageCrop:
        """Переводит прямоугольник 0–100% (из виджета обрезки) в доли [0, 1].

        Args:
            percent_rect: Словарь с ключами x, y, width, height в процентах или None.
            width: Ширина источника, px (нужна для обрезки по умолчанию).
            height: Высота источника, px.
        """
        if percent_rect is None:
            return self.default_crop(width, height)
        return ImageCrop(
            x=percent_rect["x"] / 100,
            y=percent_rect["y"] / 100,
            width=percent_rect["width"] / 100,
            height=percent_rect["height"] / 100,
        ).clamped()

    def to_pixel_rect(self, crop: ImageCrop, width: int, height: int) -> PixelRect:
        """Переводит обрезку в пиксели источника с зажатием в границы."""
        sx = _clamp(round_half_up(crop.x * width), 0, width - 1)
        sy = _clamp(round_half_up(crop.y * height), 0, height - 1)
        sw = _clamp(round_half_up(crop.width * width), 1, width - sx)
        sh = _clamp(round_half_up(crop.height * height), 1, height - sy)
        return PixelRect(sx=sx, sy=sy, sw=sw, sh=sh)
