"""Подбор размера шрифта для текста/эмодзи и измерение текста через Pillow.

Принципы:
- DIP: `GlyphFitter` получает функцию измерения извне и не знает о движке отрисовки.
- Детерминизм: при фиксированной `measure` результат зависит только от входа.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Callable, NamedTuple, Optional

from PIL import ImageColor, ImageFont

from favicon_forge.models.icon_model import TRANSPARENT
from favicon_forge.services.crop_service import round_half_up

MIN_FONT = 8
FIT_RATIO = 0.85
MAX_FONT_RATIO = 1.5


class TextExtent(NamedTuple):
    width: float
    height: float


Measure = Callable[[int], TextExtent]


def text_extent(
    font_size: int,
    width: float,
    ascent: Optional[float] = None,
    descent: Optional[float] = None,
) -> TextExtent:
    """Собирает габариты; без метрик высота оценивается как 0.8f + 0.2f."""
    if ascent is None:
        ascent = font_size * 0.8
    if descent is None:
        descent = font_size * 0.2
    return TextExtent(width=width, height=ascent + descent)


class GlyphFitter:
    """Находит наибольший целый кегль, при котором текст помещается в бокс.

    Бинарный поиск корректен при монотонной (неубывающей) функции измерения.
    """

    def __init__(self, min_font: int = MIN_FONT, fit_ratio: float = FIT_RATIO) -> None:
        self.min_font = min_font
        self.fit_ratio = fit_ratio

    def fit(self, text: str, box_size: int, measure: Measure) -> int:
        max_box = box_size * self.fit_ratio
        lo, hi = self.min_font, round_half_up(box_size * MAX_FONT_RATIO)
        best = self.min_font
        while lo <= hi:
            mid = (lo + hi) // 2
            width, height = measure(mid)
            if width <= max_box and height <= max_box:
                best = mid
                lo = mid + 1
            else:
                hi = mid - 1
        return best


class FontLoader:
    """Загружает FreeType-шрифт заданного кегля (TTF из настроек или встроенный Pillow)."""

    def __init__(self, font_path: Optional[str] = None) -> None:
        self.font_path = font_path
        self._load = lru_cache(maxsize=256)(self._load_uncached)

    def __call__(self, font_size: int) -> ImageFont.FreeTypeFont:
        return self._load(font_size)

    def _load_uncached(self, font_size: int) -> ImageFont.FreeTypeFont:
        if self.font_path:
            return ImageFont.truetype(self.font_path, font_size)
        return ImageFont.load_default(size=font_size)


def pillow_measure(text: str, font_loader: FontLoader) -> Measure:
    """Функция измерения поверх `getbbox` с якорем на базовой линии (ascent = -top, descent = bottom)."""

    def measure(font_size: int) -> TextExtent:
        font = font_loader(font_size)
        try:
            left, top, right, bottom = font.getbbox(text, anchor="ls")
        except (ValueError, TypeError):
            # bitmap-шрифты не поддерживают якоря
            left, _top, right, _bottom = font.getbbox(text)
            return text_extent(font_size, right - left)
        return text_extent(font_size, right - left, ascent=-top, descent=bottom)

    return measure


def suggest_text_color(background: str) -> str:
    """Контрастный цвет текста: белый на тёмном фоне, чёрный на светлом и прозрачном."""
    if not background or background == TRANSPARENT:
        return "#000000"
    r, g, b = ImageColor.getrgb(background)[:3]
    luminance = (0.299 * r + 0.587 * g + 0.114 * b) / 255
    return "#ffffff" if luminance < 0.5 else "#000000"
