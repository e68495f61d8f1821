"""Генерация полного набора иконок и архива.

Принципы:
- Шесть размеров независимы: рендерятся параллельно в пуле потоков, результаты собираются по размеру.
- Прогон атомарен: при любой ошибке незавершённые задачи отменяются, частичный набор не возвращается.
"""
from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Dict, List, Optional

from favicon_forge.config import Config
from favicon_forge.errors import FaviconForgeError, RenderError
from favicon_forge.models.icon_model import FAVICON_SIZES, FaviconSize, GeneratedIcon, GeneratorConfig
from favicon_forge.models.image_model import SourceImage
from favicon_forge.services.archive_service import ArchiveBuilder
from favicon_forge.services.render_service import Compositor

logger = logging.getLogger(__name__)


class GeneratorService:
    def __init__(
        self,
        compositor: Optional[Compositor] = None,
        archive_builder: Optional[ArchiveBuilder] = None,
        max_workers: int = Config.RENDER_WORKERS,
    ) -> None:
        self.compositor = compositor or Compositor()
        self.archive_builder = archive_builder or ArchiveBuilder()
        self._render_pool = ThreadPoolExecutor(max_workers=max(1, max_workers), thread_name_prefix="favicon-render")
        # отдельный поток для задач целиком: они ждут пул рендера и не должны его занимать
        self._job_pool = ThreadPoolExecutor(max_workers=1, thread_name_prefix="favicon-job")

    def generate_icons(self, source: Optional[SourceImage], config: GeneratorConfig) -> List[GeneratedIcon]:
        """Рендерит шесть канонических размеров.

        Raises:
            RenderError: нет источника в режиме изображения или сбой любого размера.
        """
        content = self.compositor.content_for(config, source)
        futures: Dict[FaviconSize, Future] = {
            size: self._render_pool.submit(self.compositor.render, int(size), config, content)
            for size in FAVICON_SIZES
        }
        icons: List[GeneratedIcon] = []
        try:
            for size in FAVICON_SIZES:
                icons.append(GeneratedIcon.for_size(size, futures[size].result()))
        except FaviconForgeError:
            self._cancel(futures)
            raise
        except Exception as exc:
            self._cancel(futures)
            raise RenderError("Не удалось сгенерировать иконки") from exc
        logger.debug("generated %d icons (mode=%s)", len(icons), config.mode)
        return icons

    def generate_archive(self, source: Optional[SourceImage], config: GeneratorConfig) -> bytes:
        icons = self.generate_icons(source, config)
        return self.archive_builder.build(icons)

    def submit_archive(self, source: Optional[SourceImage], config: GeneratorConfig) -> "Future[bytes]":
        """Неблокирующий запуск полной генерации; отменить после старта нельзя."""
        return self._job_pool.submit(self.generate_archive, source, config)

    def shutdown(self) -> None:
        self._job_pool.shutdown(wait=False, cancel_futures=True)
        self._render_pool.shutdown(wait=False, cancel_futures=True)

    @staticmethod
    def _cancel(futures: Dict[FaviconSize, Future]) -> None:
        for future in futures.values():
            future.cancel()
