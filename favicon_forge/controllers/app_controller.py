"""Контроллер приложения: оркестрация UI и сервисов.

SOLID:
- SRP: класс управляет связями между UI и сервисами (без логики отрисовки иконок).
- DIP: зависит от сервисов как от ролей; конкретные реализации инкапсулированы.
Clean Code:
- Обработчики компактны; тяжёлая работа идёт в пулах потоков, UI-поток только опрашивает `Future`
  и является единственным владельцем состояния превью.
"""
from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field, replace
from pathlib import Path
from tkinter import filedialog, TclError
from typing import Any, Callable, Dict, Optional

import customtkinter as ctk

from favicon_forge.config import Config
from favicon_forge.errors import FaviconForgeError, PackagingError, ValidationError
from favicon_forge.models.icon_model import (
    CustomModeConfig,
    GeneratorConfig,
    ImageModeConfig,
    to_custom_mode,
    to_image_mode,
)
from favicon_forge.models.image_model import SourceImage
from favicon_forge.services.crop_service import CropNormalizer
from favicon_forge.services.generator_service import GeneratorService
from favicon_forge.services.glyph_service import FontLoader, suggest_text_color
from favicon_forge.services.image_service import ImageService
from favicon_forge.services.preview_service import PreviewService
from favicon_forge.services.render_service import Compositor
from favicon_forge.ui.crop_viewer import CropViewer
from favicon_forge.ui.preview_bar import PreviewBar
from favicon_forge.ui.sidebar import Sidebar

logger = logging.getLogger(__name__)

POLL_MS = 30
GENERIC_ERROR = "Не удалось сгенерировать иконки. Попробуйте ещё раз."


@dataclass
class AppController:
    """Связывает элементы UI с прикладной логикой.

    Ответственности:
    - Инициализация и бинд событий (UI -> контроллер).
    - Загрузка источника через `ImageService` (вне UI-потока).
    - Поддержание текущей `GeneratorConfig` и пересчёт превью с токенами поколений.
    - Запуск генерации архива и сохранение результата.
    """
    viewer: CropViewer
    sidebar: Sidebar
    previews: PreviewBar
    window: ctk.CTk
    settings: type = Config

    _config: GeneratorConfig = field(default_factory=ImageModeConfig)
    _source: Optional[SourceImage] = None
    _generating: bool = False
    _image_service: ImageService = field(init=False)
    _crop_normalizer: CropNormalizer = field(init=False)
    _preview_service: PreviewService = field(init=False)
    _generator_service: GeneratorService = field(init=False)
    _io_pool: ThreadPoolExecutor = field(init=False)

    def __post_init__(self) -> None:
        compositor = Compositor(font_loader=FontLoader(self.settings.FONT_PATH))
        self._crop_normalizer = compositor.crop_normalizer
        self._image_service = ImageService(
            max_bytes=self.settings.MAX_UPLOAD_BYTES,
            allowed_mime_types=self.settings.ALLOWED_MIME_TYPES,
            svg_min_raster_size=self.settings.SVG_MIN_RASTER_SIZE,
        )
        self._preview_service = PreviewService(compositor, max_size=self.settings.PREVIEW_MAX_SIZE)
        self._generator_service = GeneratorService(compositor, max_workers=self.settings.RENDER_WORKERS)
        self._io_pool = ThreadPoolExecutor(max_workers=1, thread_name_prefix="favicon-io")

    def bind_events(self) -> None:
        """Регистрирует обработчики событий между UI-компонентами.

        Компоненты UI ничего не знают друг о друге, общаются через контроллер.
        """
        self.sidebar.on_open_file = self._handle_open_file
        self.sidebar.on_mode_change = self._handle_mode_change
        self.sidebar.on_style_change = self._handle_style_change
        self.sidebar.on_text_change = self._handle_text_change
        self.sidebar.on_auto_contrast = self._handle_auto_contrast
        self.sidebar.on_crop_reset = self.viewer.reset_crop
        self.sidebar.on_generate = self._handle_generate
        self.sidebar.on_reset = self._handle_reset

        self.viewer.on_crop_change = self._handle_crop_change

        self.sidebar.set_background(self._config.background_color)

    def shutdown(self) -> None:
        self._generator_service.shutdown()
        self._io_pool.shutdown(wait=False, cancel_futures=True)

    # ---- Handlers ----
    def _handle_open_file(self) -> None:
        try:
            file_path = filedialog.askopenfilename(
                title="Выберите изображение",
                filetypes=(
                    ("Images", "*.png *.jpg *.jpeg *.webp *.svg"),
                    ("All files", "*.*"),
                ),
            )
        except TclError:
            # Silent fail if dialog cannot open
            return

        if not file_path:
            return

        self.previews.set_status("Загрузка…")
        future = self._image_service.submit_load(file_path, self._io_pool)
        self._await(future, self._on_image_loaded, self._report_error)

    def _on_image_loaded(self, source: SourceImage) -> None:
        self._release_source()
        self._source = source
        self.viewer.set_image(source.pil_image)
        self.sidebar.set_image_info(source)
        if isinstance(self._config, ImageModeConfig):
            self._config = to_image_mode(self._config, crop=None)
        self.previews.set_status(f"Загружено: {source.display_name}")
        self._schedule_preview()

    def _handle_mode_change(self, mode: str) -> None:
        if mode == "custom":
            try:
                self._config = to_custom_mode(
                    self._config, text=self.sidebar.get_text(), text_color=self.sidebar.get_text_color()
                )
            except ValidationError as exc:
                self._report_error(exc)
                return
        else:
            crop = self._current_crop()
            self._config = to_image_mode(self._config, crop=crop)
        self._schedule_preview()

    def _handle_style_change(self) -> None:
        try:
            self._config = replace(
                self._config,
                radius_percent=self.sidebar.get_radius_percent(),
                background_color=self.sidebar.get_background(),
            )
        except ValidationError as exc:
            self._report_error(exc)
            return
        self._schedule_preview()

    def _handle_text_change(self) -> None:
        if not isinstance(self._config, CustomModeConfig):
            return
        try:
            self._config = to_custom_mode(
                self._config, text=self.sidebar.get_text(), text_color=self.sidebar.get_text_color()
            )
        except ValidationError as exc:
            self._report_error(exc)
            return
        self._schedule_preview()

    def _handle_auto_contrast(self) -> None:
        self.sidebar.set_text_color(suggest_text_color(self._config.background_color))
        self._handle_text_change()

    def _handle_crop_change(self, percent_rect: Dict[str, float]) -> None:
        if self._source is None or not isinstance(self._config, ImageModeConfig):
            return
        crop = self._crop_normalizer.normalized_crop(
            percent_rect, width=self._source.width, height=self._source.height
        )
        self._config = to_image_mode(self._config, crop=crop)
        self._schedule_preview()

    def _handle_generate(self) -> None:
        if isinstance(self._config, ImageModeConfig) and self._source is None:
            self.previews.set_status("Сначала загрузите изображение", is_error=True)
            return
        try:
            target = filedialog.asksaveasfilename(
                title="Сохранить архив",
                defaultextension=".zip",
                initialfile=self.settings.ARCHIVE_FILENAME,
                filetypes=(("ZIP", "*.zip"),),
            )
        except TclError:
            return
        if not target:
            return

        self._generating = True
        self.sidebar.set_generating(True)
        self.previews.set_status("Генерация…")
        future = self._generator_service.submit_archive(self._source, self._config)
        self._await(
            future,
            lambda data: self._on_archive_ready(Path(target), data),
            self._on_archive_failed,
        )

    def _on_archive_ready(self, target: Path, data: bytes) -> None:
        self._generating = False
        self.sidebar.set_generating(False)
        try:
            target.write_bytes(data)
        except OSError as exc:
            logger.error("failed to save archive to %s", target, exc_info=exc)
            self.previews.set_status(f"Не удалось сохранить файл: {target}", is_error=True)
            return
        logger.info("archive saved to %s", target)
        self.previews.set_status(f"Архив сохранён: {target}")

    def _on_archive_failed(self, exc: BaseException) -> None:
        self._generating = False
        self.sidebar.set_generating(False)
        self._report_error(exc)

    def _handle_reset(self) -> None:
        self._release_source()
        self._preview_service.reset()
        self._config = ImageModeConfig()
        self.viewer.clear()
        self.sidebar.clear_image_info()
        # вкладка и поля текста должны совпадать с новой конфигурацией
        self.sidebar.set_mode(self._config.mode)
        self.sidebar.reset_text()
        self.sidebar.set_radius_percent(0)
        self.sidebar.set_background(self._config.background_color)
        self.previews.clear_previews()
        self.previews.set_status("Сброшено")

    # ---- Helpers ----
    def _schedule_preview(self) -> None:
        """Запускает пересчёт превью; зафиксирован будет только самый свежий прогон."""
        if isinstance(self._config, ImageModeConfig) and self._source is None:
            self._preview_service.reset()
            self.previews.clear_previews()
            return
        token, future = self._preview_service.submit(self._source, self._config)
        self._await(
            future,
            lambda previews: self._commit_preview(token, previews),
            lambda exc: self._on_preview_failed(token, exc),
        )

    def _commit_preview(self, token: int, previews: Dict[int, Any]) -> None:
        if self._preview_service.commit(token, previews):
            self.previews.set_previews(self._preview_service.current)

    def _on_preview_failed(self, token: int, exc: BaseException) -> None:
        if token != self._preview_service.latest_token:
            return
        self._report_error(exc)

    def _current_crop(self):
        if self._source is None:
            return None
        percent_rect = self.viewer.get_crop_percent()
        if percent_rect is None:
            return None
        return self._crop_normalizer.normalized_crop(
            percent_rect, width=self._source.width, height=self._source.height
        )

    def _release_source(self) -> None:
        if self._source is not None:
            # источник ещё читает запущенная генерация: только отпускаем ссылку
            if not self._generating:
                self._source.close()
            self._source = None

    def _await(
        self,
        future: Future,
        on_done: Callable[[Any], None],
        on_error: Callable[[BaseException], None],
    ) -> None:
        """Опрашивает `Future` из UI-цикла без блокировки главного потока."""
        if not future.done():
            self.window.after(POLL_MS, self._await, future, on_done, on_error)
            return
        if future.cancelled():
            return
        exc = future.exception()
        if exc is not None:
            on_error(exc)
        else:
            on_done(future.result())

    def _report_error(self, exc: BaseException) -> None:
        if isinstance(exc, PackagingError):
            # нарушение контракта вызывающего, пользователю только общее сообщение
            logger.error("packaging contract violated", exc_info=exc)
            message = GENERIC_ERROR
        elif isinstance(exc, FaviconForgeError):
            logger.warning("%s: %s", type(exc).__name__, exc, exc_info=exc)
            message = exc.user_message
        elif isinstance(exc, FileNotFoundError):
            logger.warning("file not found: %s", exc)
            message = str(exc)
        else:
            logger.error("unexpected failure", exc_info=exc)
            message = GENERIC_ERROR
        self.previews.set_status(message, is_error=True)
