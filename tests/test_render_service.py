import io

import numpy as np
import pytest
from PIL import Image

from favicon_forge.errors import RenderError
from favicon_forge.models.icon_model import CustomModeConfig, ImageCrop, ImageModeConfig
from favicon_forge.services.render_service import (
    GlyphContent,
    clip_radius,
    clip_region,
    rounded_mask,
)


def pixels(image):
    return np.asarray(image.convert("RGBA"))


def test_clip_radius():
    assert clip_radius(32, 50) == 16
    assert clip_radius(16, 25) == 4
    assert clip_radius(48, 0) == 0
    assert clip_radius(180, 10) == 18


def test_rounded_mask_corners_and_center():
    mask = np.asarray(rounded_mask(32, 16))
    assert mask[0, 0] == 0
    assert mask[31, 31] == 0
    assert mask[16, 16] == 255


def test_transparent_background_with_empty_text_is_fully_transparent(compositor):
    config = CustomModeConfig(text="", background_color="transparent")
    image = compositor.compose(32, config, compositor.content_for(config, None))
    assert image.size == (32, 32)
    assert pixels(image)[..., 3].max() == 0


def test_solid_background_fills_square(compositor):
    config = CustomModeConfig(text="", background_color="#336699")
    image = compositor.compose(16, config, compositor.content_for(config, None))
    data = pixels(image)
    assert (data[..., 3] == 255).all()
    assert tuple(data[8, 8]) == (0x33, 0x66, 0x99, 255)


def test_rounded_corners_are_transparent(compositor):
    config = CustomModeConfig(text="", background_color="#336699", radius_percent=50)
    data = pixels(compositor.compose(32, config, compositor.content_for(config, None)))
    assert data[0, 0, 3] == 0
    assert data[0, 31, 3] == 0
    assert data[16, 16, 3] == 255


def test_default_crop_covers_center_of_source(compositor, source):
    config = ImageModeConfig()
    data = pixels(compositor.compose(32, config, compositor.content_for(config, source)))
    # в центре 200x100 проходит граница красного и синего
    red, blue = data[16, 3].astype(int), data[16, 28].astype(int)
    assert red[0] >= 250 and red[2] <= 5
    assert blue[2] >= 250 and blue[0] <= 5
    assert (data[..., 3] == 255).all()


def test_explicit_crop_selects_region(compositor, source):
    config = ImageModeConfig(crop=ImageCrop(0.0, 0.0, 0.25, 0.5))
    data = pixels(compositor.compose(16, config, compositor.content_for(config, source)))
    assert (data[..., 0] == 255).all()
    assert (data[..., 2] == 0).all()


def test_image_mode_without_source_fails(compositor):
    with pytest.raises(RenderError):
        compositor.content_for(ImageModeConfig(), None)


def test_zero_size_canvas_fails(compositor):
    config = CustomModeConfig()
    with pytest.raises(RenderError):
        compositor.compose(0, config, compositor.content_for(config, None))


def test_custom_text_draws_pixels(compositor):
    config = CustomModeConfig(text="AB", text_color="#000000", background_color="transparent")
    data = pixels(compositor.compose(64, config, compositor.content_for(config, None)))
    alpha = data[..., 3]
    assert alpha.max() > 0
    # текст центрирован: по краям холста пусто
    assert alpha[0, :].max() == 0
    assert alpha[:, 0].max() == 0


def test_render_returns_png(compositor):
    config = CustomModeConfig(background_color="#ffffff")
    data = compositor.render(48, config, compositor.content_for(config, None))
    assert data.startswith(b"\x89PNG\r\n\x1a\n")
    with Image.open(io.BytesIO(data)) as decoded:
        assert decoded.size == (48, 48)


def test_render_is_deterministic(compositor):
    config = CustomModeConfig(text="Yo", background_color="#ff0000", radius_percent=30)
    content = compositor.content_for(config, None)
    assert compositor.render(32, config, content) == compositor.render(32, config, content)


def test_clip_region_leaves_canvas_untouched_on_error():
    canvas = Image.new("RGBA", (16, 16), (0, 0, 0, 0))
    with pytest.raises(RuntimeError):
        with clip_region(canvas, 4) as layer:
            layer.paste((255, 0, 0, 255), (0, 0, 16, 16))
            raise RuntimeError("boom")
    assert pixels(canvas)[..., 3].max() == 0


def test_clip_region_without_radius_draws_directly():
    canvas = Image.new("RGBA", (8, 8), (0, 0, 0, 0))
    with clip_region(canvas, 0) as layer:
        assert layer is canvas


def test_empty_glyph_draws_nothing(compositor):
    config = CustomModeConfig(text="", background_color="transparent")
    image = compositor.compose(16, config, GlyphContent(text="", color="#000000"))
    assert pixels(image)[..., 3].max() == 0

