from concurrent.futures import ThreadPoolExecutor

import pytest

from favicon_forge.errors import RenderError
from favicon_forge.models.icon_model import CustomModeConfig, ImageModeConfig
from favicon_forge.services.preview_service import PreviewService


@pytest.fixture
def preview():
    executor = ThreadPoolExecutor(max_workers=2)
    yield PreviewService(executor=executor)
    executor.shutdown(wait=True)


def test_previews_cover_all_sizes_at_screen_scale(preview):
    previews = preview.build_previews(None, CustomModeConfig())
    assert sorted(previews) == [16, 32, 48, 180, 192, 512]
    assert previews[16].size == (16, 16)
    assert previews[512].size == (64, 64)
    assert all(max(image.size) <= 64 for image in previews.values())


def test_tokens_increase(preview):
    first = preview.issue_token()
    second = preview.issue_token()
    assert second > first
    assert preview.latest_token == second


def test_only_latest_run_is_committed(preview):
    old_token, old_future = preview.submit(None, CustomModeConfig(text="A"))
    new_token, new_future = preview.submit(None, CustomModeConfig(text="B"))
    new_previews = new_future.result(timeout=30)

    assert preview.commit(new_token, new_previews) is True
    # устаревший прогон завершился позже, но не перетирает свежий результат
    assert preview.commit(old_token, old_future.result(timeout=30)) is False
    assert preview.current == new_previews


def test_reset_invalidates_running_previews(preview):
    token, future = preview.submit(None, CustomModeConfig())
    preview.reset()
    assert preview.commit(token, future.result(timeout=30)) is False
    assert preview.current == {}


def test_current_is_a_copy(preview):
    token, future = preview.submit(None, CustomModeConfig())
    preview.commit(token, future.result(timeout=30))
    preview.current.clear()
    assert len(preview.current) == 6


def test_preview_of_image_mode_without_source_fails(preview):
    _token, future = preview.submit(None, ImageModeConfig())
    with pytest.raises(RenderError):
        future.result(timeout=30)
