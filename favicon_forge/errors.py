"""Ошибки генератора иконок.

Все три вида ошибок терминальны для текущего запроса: повторов нет,
пользователь видит одно человекочитаемое сообщение, детали уходят в лог.
"""
from __future__ import annotations


class FaviconForgeError(Exception):
    """Базовая ошибка приложения с сообщением для пользователя."""

    default_message = "Не удалось сгенерировать иконки"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)

    @property
    def user_message(self) -> str:
        return str(self)


class ValidationError(FaviconForgeError):
    """Файл слишком большой, неподдерживаемый тип или не декодируется."""

    default_message = "Некорректный входной файл"


class RenderError(FaviconForgeError):
    """Нет холста, нет исходного изображения или сбой кодирования."""

    default_message = "Ошибка отрисовки иконки"


class PackagingError(FaviconForgeError):
    """Сборка архива вызвана с неполным набором иконок."""

    default_message = "Не удалось собрать архив"
