"""Точка входа в приложение."""
import logging

from favicon_forge.app import FaviconForgeApp
from favicon_forge.config import get_config


def main() -> None:
    """Настраивает логирование, создаёт и запускает главное окно приложения."""
    settings = get_config()
    logging.basicConfig(
        level=getattr(logging, str(settings.LOG_LEVEL).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    app = FaviconForgeApp(settings)
    app.mainloop()


if __name__ == "__main__":
    main()
