

import customtkinter as ctk

from favicon_forge.config import Config
from favicon_forge.controllers.app_controller import AppController
from favicon_forge.ui.crop_viewer import CropViewer
from favicon_forge.ui.sidebar import Sidebar
from favicon_forge.ui.preview_bar import PreviewBar


class FaviconForgeApp(ctk.CTk):
    def __init__(self, settings: type = Config) -> None:
        super().__init__()
        ctk.set_appearance_mode("system")
        ctk.set_default_color_theme("blue")

        self.title(settings.APP_NAME)
        self.minsize(960, 640)

        # root layout: left crop viewer, right sidebar, previews below
        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(0, weight=1)
        self.grid_rowconfigure(1, weight=0)

        self._viewer = CropViewer(self)
        self._viewer.grid(row=0, column=0, sticky="nsew", padx=(12, 6), pady=(12, 6))

        self._sidebar = Sidebar(self)
        self._sidebar.grid(row=0, column=1, sticky="ns", padx=(6, 12), pady=(12, 6))

        self._previews = PreviewBar(self)
        self._previews.grid(row=1, column=0, columnspan=2, sticky="ew", padx=12, pady=(0, 12))

        self._controller = AppController(
            viewer=self._viewer, sidebar=self._sidebar, previews=self._previews, window=self, settings=settings
        )
        self._controller.bind_events()
        self.protocol("WM_DELETE_WINDOW", self._on_close)

    def _on_close(self) -> None:
        self._controller.shutdown()
        self.destroy()
