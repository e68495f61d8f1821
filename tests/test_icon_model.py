import pytest

from favicon_forge.errors import ValidationError
from favicon_forge.models.icon_model import (
    FAVICON_FILENAMES,
    FAVICON_SIZES,
    CustomModeConfig,
    GeneratedIcon,
    ImageCrop,
    ImageModeConfig,
    limit_graphemes,
    normalize_color,
    to_custom_mode,
    to_image_mode,
)


def test_canonical_sizes():
    assert [int(size) for size in FAVICON_SIZES] == [16, 32, 48, 180, 192, 512]
    assert FAVICON_FILENAMES[180] == "apple-touch-icon.png"


def test_limit_graphemes_truncates_plain_text():
    assert limit_graphemes("abcdef") == "abcd"


def test_limit_graphemes_keeps_clusters_whole():
    family = "\U0001F468‍\U0001F469‍\U0001F467"
    flag = "\U0001F1FA\U0001F1E6"
    thumbs = "\U0001F44D\U0001F3FD"
    text = family + flag + thumbs + "Yo"
    assert limit_graphemes(text) == family + flag + thumbs + "Y"


def test_limit_graphemes_empty():
    assert limit_graphemes("") == ""


def test_custom_config_defaults():
    config = CustomModeConfig()
    assert config.mode == "custom"
    assert config.text == "😎Yo"
    assert config.text_color == "#000000"
    assert config.background_color == "transparent"


def test_image_config_defaults():
    config = ImageModeConfig()
    assert config.mode == "image"
    assert config.background_color == "#ffffff"
    assert config.crop is None


@pytest.mark.parametrize("given,expected", [(-5, 0), (0, 0), (25, 25), (50, 50), (80, 50)])
def test_radius_is_clamped(given, expected):
    assert ImageModeConfig(radius_percent=given).radius_percent == expected
    assert CustomModeConfig(radius_percent=given).radius_percent == expected


def test_custom_config_truncates_text():
    assert CustomModeConfig(text="ABCDEFG").text == "ABCD"


@pytest.mark.parametrize("value", ["red", "#12", "#12345", "ffffff", "#ggg"])
def test_invalid_color_is_rejected(value):
    with pytest.raises(ValidationError):
        ImageModeConfig(background_color=value)


def test_text_color_cannot_be_transparent():
    with pytest.raises(ValidationError):
        CustomModeConfig(text_color="transparent")


def test_normalize_color_lowercases():
    assert normalize_color("#ABCDEF") == "#abcdef"
    assert normalize_color(" Transparent ") == "transparent"


def test_image_config_clamps_crop():
    config = ImageModeConfig(crop=ImageCrop(-0.5, 0.5, 2, 2))
    assert config.crop.x == 0
    assert config.crop.x + config.crop.width <= 1
    assert config.crop.y + config.crop.height <= 1


def test_mode_switch_keeps_shared_fields():
    image = ImageModeConfig(radius_percent=20, background_color="#336699")
    custom = to_custom_mode(image, text="Hi")
    assert isinstance(custom, CustomModeConfig)
    assert (custom.radius_percent, custom.background_color, custom.text) == (20, "#336699", "Hi")

    back = to_image_mode(custom)
    assert isinstance(back, ImageModeConfig)
    assert (back.radius_percent, back.background_color) == (20, "#336699")


def test_to_custom_mode_updates_existing_text():
    config = to_custom_mode(CustomModeConfig(text="A", text_color="#ffffff"), text="")
    assert config.text == ""
    assert config.text_color == "#ffffff"


def test_generated_icon_filename_follows_size():
    icon = GeneratedIcon.for_size(512, b"png")
    assert icon.filename == "android-chrome-512x512.png"
    with pytest.raises(ValueError):
        GeneratedIcon.for_size(64, b"png")
