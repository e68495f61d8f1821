"""Композитинг одной иконки: скругление -> фон -> содержимое -> PNG.

Принципы:
- SRP: рисует ровно один квадрат заданного размера; выбор размеров и упаковка живут в других сервисах.
- Область отсечения является ресурсом с гарантированным освобождением (`clip_region`), даже если рисование упало.
"""
from __future__ import annotations

import io
import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Optional, Union

import numpy as np
from PIL import Image, ImageColor, ImageDraw

from favicon_forge.errors import RenderError
from favicon_forge.models.icon_model import (
    TRANSPARENT,
    CustomModeConfig,
    GeneratorConfig,
    ImageModeConfig,
    PixelRect,
)
from favicon_forge.models.image_model import SourceImage
from favicon_forge.services.crop_service import CropNormalizer, round_half_up
from favicon_forge.services.glyph_service import FontLoader, GlyphFitter, pillow_measure

logger = logging.getLogger(__name__)

MASK_SUPERSAMPLE = 4


@dataclass(frozen=True)
class ImageContent:
    source: SourceImage
    rect: PixelRect


@dataclass(frozen=True)
class GlyphContent:
    text: str
    color: str


Content = Union[ImageContent, GlyphContent]


def clip_radius(size: int, radius_percent: float) -> int:
    """Радиус скругления в пикселях для холста `size`."""
    return round_half_up(size * (radius_percent / 100))


def rounded_mask(size: int, radius: int) -> Image.Image:
    """Маска скруглённого квадрата (L, 0/255) со сглаживанием через суперсэмплинг."""
    s = MASK_SUPERSAMPLE
    big = Image.new("L", (size * s, size * s), 0)
    ImageDraw.Draw(big).rounded_rectangle([0, 0, size * s - 1, size * s - 1], radius=radius * s, fill=255)
    mask = big.resize((size, size), Image.Resampling.LANCZOS)
    big.close()
    return mask


def _apply_mask(layer: Image.Image, mask: Image.Image) -> Image.Image:
    """Умножает альфу слоя на маску (а не заменяет её, как `putalpha`)."""
    rgba = np.array(layer, dtype=np.float32)
    weights = np.asarray(mask, dtype=np.float32) / 255.0
    rgba[..., 3] *= weights
    out = np.clip(np.rint(rgba), 0, 255).astype(np.uint8)
    return Image.fromarray(out)


@contextmanager
def clip_region(canvas: Image.Image, radius: int) -> Iterator[Image.Image]:
    """Ограничивает рисование скруглённым квадратом.

    Отдаёт слой для рисования; при нормальном выходе слой через маску переносится на холст.
    Слой и маска освобождаются всегда.
    """
    if radius <= 0:
        yield canvas
        return
    layer = Image.new("RGBA", canvas.size, (0, 0, 0, 0))
    mask = rounded_mask(canvas.width, radius)
    try:
        yield layer
        canvas.alpha_composite(_apply_mask(layer, mask))
    finally:
        mask.close()
        layer.close()


def encode_png(image: Image.Image) -> bytes:
    buffer = io.BytesIO()
    try:
        image.save(buffer, format="PNG", optimize=True)
    except (OSError, ValueError) as exc:
        raise RenderError("Не удалось закодировать PNG") from exc
    return buffer.getvalue()


class Compositor:
    def __init__(
        self,
        crop_normalizer: Optional[CropNormalizer] = None,
        fitter: Optional[GlyphFitter] = None,
        font_loader: Optional[FontLoader] = None,
    ) -> None:
        self.crop_normalizer = crop_normalizer or CropNormalizer()
        self.fitter = fitter or GlyphFitter()
        self.font_loader = font_loader or FontLoader()

    def content_for(self, config: GeneratorConfig, source: Optional[SourceImage]) -> Content:
        """Готовит содержимое для режима: пиксельную обрезку источника или текст.

        Raises:
            RenderError: режим изображения без загруженного источника.
        """
        if isinstance(config, ImageModeConfig):
            if source is None:
                raise RenderError("Сначала загрузите изображение")
            crop = config.crop or self.crop_normalizer.default_crop(source.width, source.height)
            rect = self.crop_normalizer.to_pixel_rect(crop, source.width, source.height)
            return ImageContent(source=source, rect=rect)
        if isinstance(config, CustomModeConfig):
            return GlyphContent(text=config.text, color=config.text_color)
        raise RenderError(f"Неизвестный режим: {type(config).__name__}")

    def compose(self, size: int, config: GeneratorConfig, content: Content) -> Image.Image:
        """Рисует иконку `size`×`size` и возвращает RGBA-изображение (без кодирования)."""
        if size < 1:
            raise RenderError(f"Некорректный размер холста: {size}")
        canvas = Image.new("RGBA", (size, size), (0, 0, 0, 0))
        radius = clip_radius(size, config.radius_percent) if config.radius_percent > 0 else 0
        try:
            with clip_region(canvas, radius) as layer:
                self._draw_background(layer, config.background_color)
                if isinstance(content, ImageContent):
                    self._draw_image(layer, content)
                else:
                    self._draw_glyph(layer, content)
        except (OSError, ValueError) as exc:
            canvas.close()
            raise RenderError(f"Ошибка отрисовки {size}x{size}") from exc
        return canvas

    def render(self, size: int, config: GeneratorConfig, content: Content) -> bytes:
        """Рисует и кодирует иконку в PNG."""
        logger.debug("render size=%s mode=%s", size, config.mode)
        image = self.compose(size, config, content)
        try:
            return encode_png(image)
        finally:
            image.close()

    # ---- Helpers ----
    def _draw_background(self, layer: Image.Image, background: str) -> None:
        if background == TRANSPARENT:
            # холст уже прозрачный; очищаем на случай повторного использования слоя
            layer.paste((0, 0, 0, 0), (0, 0, layer.width, layer.height))
            return
        color = ImageColor.getrgb(background)[:3] + (255,)
        layer.paste(color, (0, 0, layer.width, layer.height))

    def _draw_image(self, layer: Image.Image, content: ImageContent) -> None:
        sx, sy, sw, sh = content.rect
        region = content.source.pil_image.crop((sx, sy, sx + sw, sy + sh))
        try:
            # cover: выделение растягивается на весь квадрат, пропорции назначения всегда 1:1
            scaled = region.resize(layer.size, Image.Resampling.LANCZOS)
            if scaled.mode != "RGBA":
                scaled = scaled.convert("RGBA")
            layer.alpha_composite(scaled)
        finally:
            region.close()

    def _draw_glyph(self, layer: Image.Image, content: GlyphContent) -> None:
        if not content.text:
            return
        size = layer.width
        font_size = self.fitter.fit(content.text, size, pillow_measure(content.text, self.font_loader))
        font = self.font_loader(font_size)
        draw = ImageDraw.Draw(layer)
        draw.text(
            (size / 2, size / 2),
            content.text,
            font=font,
            fill=content.color,
            anchor="mm",
            embedded_color=True,
        )
