import pytest

pytest.importorskip("customtkinter")

from favicon_forge.config import TestingConfig  # noqa: E402
from favicon_forge.controllers.app_controller import AppController  # noqa: E402
from favicon_forge.models.icon_model import (  # noqa: E402
    DEFAULT_TEXT,
    DEFAULT_TEXT_COLOR,
    CustomModeConfig,
    ImageModeConfig,
)


class FakeSidebar:
    """Хранит то, что контроллер выставил в панели, вместо настоящих виджетов."""

    def __init__(self):
        self.mode = "image"
        self.text = DEFAULT_TEXT
        self.text_color = DEFAULT_TEXT_COLOR
        self.radius = 0
        self.background = "#ffffff"

    def get_text(self):
        return self.text

    def get_text_color(self):
        return self.text_color

    def set_mode(self, mode):
        self.mode = mode

    def reset_text(self):
        self.text = DEFAULT_TEXT
        self.text_color = DEFAULT_TEXT_COLOR

    def set_radius_percent(self, value):
        self.radius = value

    def set_background(self, value):
        self.background = value

    def clear_image_info(self):
        pass


class FakeViewer:
    def clear(self):
        pass

    def reset_crop(self):
        pass


class FakePreviews:
    def __init__(self):
        self.status = None

    def clear_previews(self):
        pass

    def set_previews(self, previews):
        pass

    def set_status(self, text, is_error=False):
        self.status = (text, is_error)


class FakeWindow:
    def after(self, _ms, *_args):
        pass


@pytest.fixture
def controller():
    ctrl = AppController(
        viewer=FakeViewer(),
        sidebar=FakeSidebar(),
        previews=FakePreviews(),
        window=FakeWindow(),
        settings=TestingConfig,
    )
    yield ctrl
    ctrl.shutdown()


def test_reset_from_text_mode_returns_sidebar_to_image_tab(controller):
    controller.sidebar.mode = "custom"
    controller.sidebar.text = "Hi"
    controller.sidebar.text_color = "#ff0000"
    controller._handle_mode_change("custom")
    assert isinstance(controller._config, CustomModeConfig)

    controller._handle_reset()

    assert isinstance(controller._config, ImageModeConfig)
    assert controller.sidebar.mode == controller._config.mode == "image"
    assert controller.sidebar.text == DEFAULT_TEXT
    assert controller.sidebar.text_color == DEFAULT_TEXT_COLOR
    assert controller.sidebar.background == "#ffffff"


def test_text_mode_works_again_after_reset(controller):
    controller._handle_mode_change("custom")
    controller._handle_reset()

    controller.sidebar.mode = "custom"
    controller._handle_mode_change("custom")
    controller.sidebar.text = "Yo"
    controller._handle_text_change()

    assert isinstance(controller._config, CustomModeConfig)
    assert controller._config.text == "Yo"
