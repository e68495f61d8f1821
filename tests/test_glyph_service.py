import pytest

from favicon_forge.services.glyph_service import (
    MIN_FONT,
    FontLoader,
    GlyphFitter,
    TextExtent,
    pillow_measure,
    suggest_text_color,
    text_extent,
)


def square(font_size):
    return TextExtent(font_size, font_size)


def test_fit_picks_largest_size_inside_box():
    # бокс 32 * 0.85 = 27.2
    assert GlyphFitter().fit("AB", 32, square) == 27


def test_fit_falls_back_to_minimum_when_nothing_fits():
    assert GlyphFitter().fit("AB", 16, lambda f: TextExtent(1000, 1000)) == MIN_FONT


def test_fit_is_capped_by_search_range():
    # measure всегда маленький, ответ равен верхней границе round(1.5 * box)
    assert GlyphFitter().fit("A", 32, lambda f: TextExtent(0, 0)) == 48


def test_fit_is_monotonic_in_box_size():
    fitter = GlyphFitter()
    wide = lambda f: TextExtent(f * 1.7, f)  # noqa: E731
    results = [fitter.fit("Yo", box, wide) for box in (16, 32, 48, 64, 180, 192, 512)]
    assert results == sorted(results)


def test_fit_respects_both_dimensions():
    tall = lambda f: TextExtent(f * 0.1, f * 2)  # noqa: E731
    best = GlyphFitter().fit("|", 100, tall)
    assert best * 2 <= 85
    assert (best + 1) * 2 > 85


def test_text_extent_estimates_missing_metrics():
    assert text_extent(10, 5.0) == TextExtent(5.0, pytest.approx(10.0))
    assert text_extent(10, 5.0, ascent=7, descent=1) == TextExtent(5.0, 8)


def test_pillow_measure_grows_with_font_size():
    measure = pillow_measure("AB", FontLoader())
    small, large = measure(10), measure(40)
    assert large.width > small.width
    assert large.height > small.height


def test_font_loader_caches_per_size():
    loader = FontLoader()
    assert loader(12) is loader(12)


@pytest.mark.parametrize(
    "background,expected",
    [
        ("transparent", "#000000"),
        ("#ffffff", "#000000"),
        ("#ff0", "#000000"),
        ("#000000", "#ffffff"),
        ("#1e3a8a", "#ffffff"),
    ],
)
def test_suggest_text_color(background, expected):
    assert suggest_text_color(background) == expected
