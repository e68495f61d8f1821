"""Живое превью с отменой по токену поколения.

Каждый пересчёт получает возрастающий токен. Зафиксировать результат может только
прогон с последним выданным токеном; устаревшие прогоны ничего не пишут, даже если
завершились позже. `issue_token` и `commit` вызывает один координирующий владелец
(UI-поток), поэтому блокировки не нужны.
"""
from __future__ import annotations

import itertools
import logging
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import Dict, Optional, Tuple

from PIL import Image

from favicon_forge.config import Config
from favicon_forge.models.icon_model import FAVICON_SIZES, GeneratorConfig
from favicon_forge.models.image_model import SourceImage
from favicon_forge.services.render_service import Compositor

logger = logging.getLogger(__name__)

Previews = Dict[int, Image.Image]


class PreviewService:
    def __init__(
        self,
        compositor: Optional[Compositor] = None,
        executor: Optional[Executor] = None,
        max_size: int = Config.PREVIEW_MAX_SIZE,
    ) -> None:
        self.compositor = compositor or Compositor()
        self.max_size = max_size
        self._executor = executor or ThreadPoolExecutor(max_workers=1, thread_name_prefix="favicon-preview")
        self._tokens = itertools.count(1)
        self._latest = 0
        self._current: Previews = {}

    @property
    def latest_token(self) -> int:
        return self._latest

    @property
    def current(self) -> Previews:
        return dict(self._current)

    def issue_token(self) -> int:
        self._latest = next(self._tokens)
        return self._latest

    def build_previews(self, source: Optional[SourceImage], config: GeneratorConfig) -> Previews:
        """Рисует все размеры в экранном масштабе min(size, max_size), без кодирования."""
        content = self.compositor.content_for(config, source)
        previews: Previews = {}
        for size in FAVICON_SIZES:
            view = min(int(size), self.max_size)
            previews[int(size)] = self.compositor.compose(view, config, content)
        return previews

    def submit(self, source: Optional[SourceImage], config: GeneratorConfig) -> Tuple[int, "Future[Previews]"]:
        token = self.issue_token()
        return token, self._executor.submit(self.build_previews, source, config)

    def commit(self, token: int, previews: Previews) -> bool:
        """Фиксирует результат только для последнего токена; устаревший отбрасывается."""
        if token != self._latest:
            logger.debug("stale preview discarded: token=%s latest=%s", token, self._latest)
            return False
        self._current = dict(previews)
        return True

    def reset(self) -> None:
        """Сбрасывает состояние; уже запущенные прогоны становятся устаревшими."""
        self.issue_token()
        self._current = {}
