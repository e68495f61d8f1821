"""Виджет просмотра источника с квадратной рамкой обрезки.

Принципы:
- SRP: отвечает только за представление и интеракции с рамкой; наружу отдаёт
  прямоугольник в процентах (0–100), как внешний виджет обрезки.
- Чистый код: чёткое разделение публичного API и внутренних обработчиков событий.
"""
from __future__ import annotations

from typing import Callable, Dict, Optional, Tuple

import customtkinter as ctk
import tkinter as tk
from PIL import Image, ImageTk

MIN_SELECTION_PX = 8


class CropViewer(ctk.CTkFrame):
    """Канва с изображением, вписанным в область, и перетаскиваемой рамкой 1:1."""
    def __init__(self, master: ctk.CTk | tk.Misc, **kwargs) -> None:
        super().__init__(master, **kwargs)
        self.grid_rowconfigure(0, weight=1)
        self.grid_columnconfigure(0, weight=1)

        self._canvas = tk.Canvas(self, highlightthickness=0, bg=self._get_canvas_bg())
        self._canvas.grid(row=0, column=0, sticky="nsew")

        self._image: Optional[Image.Image] = None
        self._tk_image: Optional[ImageTk.PhotoImage] = None

        self._scale_factor: float = 1.0
        self._image_top_left: Tuple[int, int] = (0, 0)

        # selection in source pixels: (x, y, side)
        self._selection: Optional[Tuple[float, float, float]] = None

        # dragging state
        self._is_dragging: bool = False
        self._drag_start_canvas_xy: Optional[Tuple[int, int]] = None
        self._drag_start_selection: Optional[Tuple[float, float, float]] = None

        self.on_crop_change: Optional[Callable[[Dict[str, float]], None]] = None

        self._canvas.bind("<Configure>", self._on_canvas_resize)

        # Mouse wheel resizes selection (cross-platform)
        self._canvas.bind("<MouseWheel>", self._on_mouse_wheel)      # Windows/macOS
        self._canvas.bind("<Button-4>", self._on_mouse_wheel_linux)  # Linux scroll up
        self._canvas.bind("<Button-5>", self._on_mouse_wheel_linux)  # Linux scroll down

        # Move selection with left mouse drag
        self._canvas.bind("<ButtonPress-1>", self._on_drag_start)
        self._canvas.bind("<B1-Motion>", self._on_drag_move)
        self._canvas.bind("<ButtonRelease-1>", self._on_drag_end)

    # ---- Public API ----
    def set_image(self, image: Image.Image) -> None:
        """Устанавливает источник и ставит рамку по центру (сторона = min(W, H))."""
        self._image = image
        self._selection = self._centered_selection()
        self._render()

    def clear(self) -> None:
        self._image = None
        self._selection = None
        self._tk_image = None
        self._canvas.delete("all")

    def reset_crop(self) -> None:
        if self._image is None:
            return
        self._selection = self._centered_selection()
        self._render()
        self._emit_crop()

    def get_crop_percent(self) -> Optional[Dict[str, float]]:
        """Текущая рамка в процентах от размеров источника."""
        if self._image is None or self._selection is None:
            return None
        img_w, img_h = self._image.size
        x, y, side = self._selection
        return {
            "x": x / img_w * 100,
            "y": y / img_h * 100,
            "width": side / img_w * 100,
            "height": side / img_h * 100,
        }

    # ---- Internals ----
    def _centered_selection(self) -> Tuple[float, float, float]:
        assert self._image is not None
        img_w, img_h = self._image.size
        side = min(img_w, img_h)
        return ((img_w - side) / 2, (img_h - side) / 2, side)

    def _on_canvas_resize(self, _event: tk.Event) -> None:
        if self._image is None:
            return
        self._render()

    def _render(self) -> None:
        self._canvas.delete("all")
        if self._image is None:
            return

        canvas_w = max(1, int(self._canvas.winfo_width()))
        canvas_h = max(1, int(self._canvas.winfo_height()))
        img_w, img_h = self._image.size
        self._scale_factor = max(0.01, min(canvas_w / img_w, canvas_h / img_h))
        scaled_w = max(1, int(img_w * self._scale_factor))
        scaled_h = max(1, int(img_h * self._scale_factor))
        ox = (canvas_w - scaled_w) // 2
        oy = (canvas_h - scaled_h) // 2
        self._image_top_left = (ox, oy)

        resized = self._image.resize((scaled_w, scaled_h), Image.Resampling.LANCZOS)
        self._tk_image = ImageTk.PhotoImage(resized)
        self._canvas.create_image(ox, oy, image=self._tk_image, anchor="nw")

        if self._selection is not None:
            x, y, side = self._selection
            x0 = ox + x * self._scale_factor
            y0 = oy + y * self._scale_factor
            x1 = x0 + side * self._scale_factor
            y1 = y0 + side * self._scale_factor
            self._canvas.create_rectangle(x0, y0, x1, y1, outline="#3b82f6", width=2)

    def _clamp_selection(self, x: float, y: float, side: float) -> Tuple[float, float, float]:
        assert self._image is not None
        img_w, img_h = self._image.size
        side = max(min(MIN_SELECTION_PX, img_w, img_h), min(side, img_w, img_h))
        x = max(0.0, min(x, img_w - side))
        y = max(0.0, min(y, img_h - side))
        return (x, y, side)

    def _emit_crop(self) -> None:
        crop = self.get_crop_percent()
        if crop is not None and self.on_crop_change:
            self.on_crop_change(crop)

    def _get_canvas_bg(self) -> str:
        # CTk does not expose canvas theme, so pick neutral
        return "#1f1f1f" if ctk.get_appearance_mode().lower() == "dark" else "#f2f2f2"

    # ---- Mouse wheel resize ----
    def _on_mouse_wheel(self, event: tk.Event) -> None:
        if event.delta == 0:
            return
        self._resize_selection(1.1 if event.delta > 0 else 1.0 / 1.1)

    def _on_mouse_wheel_linux(self, event: tk.Event) -> None:
        # On X11, Button-4 is up, Button-5 is down
        self._resize_selection(1.1 if getattr(event, "num", None) == 4 else 1.0 / 1.1)

    def _resize_selection(self, factor: float) -> None:
        if self._image is None or self._selection is None:
            return
        x, y, side = self._selection
        new_side = side * factor
        # resize around the selection center
        cx, cy = x + side / 2, y + side / 2
        self._selection = self._clamp_selection(cx - new_side / 2, cy - new_side / 2, new_side)
        self._render()
        self._emit_crop()

    # ---- Dragging ----
    def _on_drag_start(self, event: tk.Event) -> None:
        if self._selection is None:
            return
        self._canvas.focus_set()
        self._is_dragging = True
        self._drag_start_canvas_xy = (event.x, event.y)
        self._drag_start_selection = self._selection

    def _on_drag_move(self, event: tk.Event) -> None:
        if not self._is_dragging or self._drag_start_canvas_xy is None or self._drag_start_selection is None:
            return
        sx, sy = self._drag_start_canvas_xy
        x, y, side = self._drag_start_selection
        dx = (event.x - sx) / self._scale_factor
        dy = (event.y - sy) / self._scale_factor
        self._selection = self._clamp_selection(x + dx, y + dy, side)
        self._render()

    def _on_drag_end(self, _event: tk.Event) -> None:
        was_dragging = self._is_dragging
        self._is_dragging = False
        self._drag_start_canvas_xy = None
        self._drag_start_selection = None
        if was_dragging:
            self._emit_crop()
