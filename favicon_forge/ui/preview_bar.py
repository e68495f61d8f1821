from __future__ import annotations

from typing import Dict, Optional

import customtkinter as ctk
from PIL import Image

from favicon_forge.models.icon_model import FAVICON_SIZES

TILE = 64


class PreviewBar(ctk.CTkFrame):
    def __init__(self, master: ctk.CTk, **kwargs) -> None:
        super().__init__(master, height=120, **kwargs)

        self._tiles: Dict[int, ctk.CTkLabel] = {}
        self._images: Dict[int, ctk.CTkImage] = {}

        # layout: one column per size, status line below
        for column, size in enumerate(FAVICON_SIZES):
            self.grid_columnconfigure(column, weight=1)
            tile = ctk.CTkLabel(self, text="", width=TILE, height=TILE)
            tile.grid(row=0, column=column, padx=6, pady=(8, 2))
            caption = ctk.CTkLabel(self, text=f"{int(size)}×{int(size)}", font=ctk.CTkFont(size=11))
            caption.grid(row=1, column=column, padx=6, pady=(0, 4))
            self._tiles[int(size)] = tile

        self._status_val = ctk.StringVar(value="Загрузите изображение или выберите вкладку «Текст»")
        self._status = ctk.CTkLabel(self, textvariable=self._status_val, anchor="w")
        self._status.grid(row=2, column=0, columnspan=len(FAVICON_SIZES), padx=10, pady=(0, 8), sticky="ew")

    # public API (sync from controller)
    def set_previews(self, previews: Dict[int, Image.Image]) -> None:
        for size, tile in self._tiles.items():
            image: Optional[Image.Image] = previews.get(size)
            if image is None:
                tile.configure(image=None)
                self._images.pop(size, None)
                continue
            # small sizes are shown enlarged to the tile, like a zoomed tab icon
            ctk_image = ctk.CTkImage(light_image=image, dark_image=image, size=(TILE, TILE))
            self._images[size] = ctk_image
            tile.configure(image=ctk_image)

    def clear_previews(self) -> None:
        self.set_previews({})

    def set_status(self, text: str, is_error: bool = False) -> None:
        self._status_val.set(text)
        self._status.configure(text_color="#dc2626" if is_error else ("gray10", "gray90"))
