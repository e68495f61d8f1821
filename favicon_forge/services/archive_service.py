"""Сборка ZIP-архива из шести иконок, копии favicon.ico и HTML-фрагмента.

Принципы:
- Имена файлов определяются размером, а не порядком входа.
- Неполный набор иконок считается ошибкой контракта; частичный архив не создаётся.
"""
from __future__ import annotations

import io
import logging
import zipfile
from typing import Dict, Iterable

from favicon_forge.errors import PackagingError
from favicon_forge.models.icon_model import FAVICON_FILENAMES, FAVICON_SIZES, FaviconSize, GeneratedIcon
from favicon_forge.services.snippet_service import snippet_document

logger = logging.getLogger(__name__)

LEGACY_ICON_NAME = "favicon.ico"
SNIPPET_NAME = "head-snippet.html"
# фиксированная метка времени: одинаковый вход -> одинаковые байты архива
ZIP_TIMESTAMP = (1980, 1, 1, 0, 0, 0)


class ArchiveBuilder:
    def entries(self, icons: Iterable[GeneratedIcon]) -> Dict[str, bytes]:
        """Возвращает имя файла -> содержимое для всех 8 записей архива.

        Raises:
            PackagingError: если хотя бы одного из шести размеров нет.
        """
        by_size: Dict[FaviconSize, GeneratedIcon] = {}
        for icon in icons:
            try:
                by_size[FaviconSize(icon.size)] = icon
            except ValueError as exc:
                raise PackagingError(f"Неподдерживаемый размер иконки: {icon.size}") from exc
        missing = [int(size) for size in FAVICON_SIZES if size not in by_size]
        if missing:
            raise PackagingError(f"Нет иконок для размеров: {missing}")

        files: Dict[str, bytes] = {}
        for size in FAVICON_SIZES:
            files[FAVICON_FILENAMES[size]] = by_size[size].data
        # не настоящий ICO-контейнер: PNG 32x32 под устаревшим именем
        files[LEGACY_ICON_NAME] = by_size[FaviconSize.S32].data
        files[SNIPPET_NAME] = snippet_document().encode("utf-8")
        return files

    def build(self, icons: Iterable[GeneratedIcon]) -> bytes:
        files = self.entries(icons)
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as zf:
            for name, data in files.items():
                info = zipfile.ZipInfo(name, date_time=ZIP_TIMESTAMP)
                info.compress_type = zipfile.ZIP_DEFLATED
                zf.writestr(info, data)
        logger.info("archive built: %d entries, %d bytes", len(files), buffer.tell())
        return buffer.getvalue()
