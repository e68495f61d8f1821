"""Боковая панель: открытие файла, информация, режим, оформление, генерация.

Принципы:
- SRP: управляет только UI параметров, не содержит отрисовки иконок.
- ISP: выдаёт параметры через компактные методы `get_*`, события через `on_*`.
"""
from __future__ import annotations

from typing import Callable, Optional

import customtkinter as ctk

from favicon_forge.models.icon_model import DEFAULT_TEXT, DEFAULT_TEXT_COLOR, TRANSPARENT, limit_graphemes
from favicon_forge.models.image_model import SourceImage

TAB_IMAGE = "Изображение"
TAB_CUSTOM = "Текст"
_MODE_BY_TAB = {TAB_IMAGE: "image", TAB_CUSTOM: "custom"}


class Sidebar(ctk.CTkFrame):
    """Панель инструментов с блоками: файл, информация, режим, оформление, архив."""
    def __init__(self, master: ctk.CTk, **kwargs) -> None:
        super().__init__(master, width=300, **kwargs)

        self.grid_columnconfigure(0, weight=1)

        # Callbacks
        self.on_open_file: Optional[Callable[[], None]] = None
        self.on_mode_change: Optional[Callable[[str], None]] = None
        self.on_style_change: Optional[Callable[[], None]] = None
        self.on_text_change: Optional[Callable[[], None]] = None
        self.on_auto_contrast: Optional[Callable[[], None]] = None
        self.on_crop_reset: Optional[Callable[[], None]] = None
        self.on_generate: Optional[Callable[[], None]] = None
        self.on_reset: Optional[Callable[[], None]] = None

        self._last_background = "#ffffff"

        # Controls
        self._title = ctk.CTkLabel(self, text="Инструменты", font=ctk.CTkFont(size=16, weight="bold"))
        self._title.grid(row=0, column=0, padx=8, pady=(8, 4), sticky="w")

        self._open_btn = ctk.CTkButton(self, text="Открыть изображение…", command=self._emit_open_file)
        self._open_btn.grid(row=1, column=0, padx=8, pady=(0, 12), sticky="ew")

        # Info section
        self._info_title = ctk.CTkLabel(self, text="Информация", font=ctk.CTkFont(size=16, weight="bold"))
        self._info_title.grid(row=2, column=0, padx=8, pady=(8, 4), sticky="w")

        self._path_val = ctk.StringVar(value="—")
        self._size_val = ctk.StringVar(value="—")
        self._dims_val = ctk.StringVar(value="—")

        self._info_path = ctk.CTkLabel(self, textvariable=self._path_val, wraplength=270, anchor="w", justify="left")
        self._info_size = ctk.CTkLabel(self, textvariable=self._size_val, anchor="w", justify="left")
        self._info_dims = ctk.CTkLabel(self, textvariable=self._dims_val, anchor="w", justify="left")

        self._info_path.grid(row=3, column=0, padx=8, pady=(0, 2), sticky="ew")
        self._info_size.grid(row=4, column=0, padx=8, pady=(0, 2), sticky="ew")
        self._info_dims.grid(row=5, column=0, padx=8, pady=(0, 10), sticky="ew")

        # Режимы
        self._tabs = ctk.CTkTabview(self, height=170, command=self._emit_mode_change)
        self._tabs.grid(row=6, column=0, padx=8, pady=(0, 8), sticky="ew")
        self._tabs.add(TAB_IMAGE)
        self._tabs.add(TAB_CUSTOM)

        image_tab = self._tabs.tab(TAB_IMAGE)
        image_tab.grid_columnconfigure(0, weight=1)
        self._crop_hint = ctk.CTkLabel(
            image_tab,
            text="Перетащите рамку на изображении.\nКолесо мыши — размер рамки.",
            anchor="w",
            justify="left",
        )
        self._crop_hint.grid(row=0, column=0, padx=6, pady=(6, 4), sticky="w")
        self._crop_reset_btn = ctk.CTkButton(image_tab, text="Обрезка по центру", command=self._emit_crop_reset)
        self._crop_reset_btn.grid(row=1, column=0, padx=6, pady=(0, 6), sticky="ew")

        custom_tab = self._tabs.tab(TAB_CUSTOM)
        custom_tab.grid_columnconfigure(0, weight=1)
        self._text_val = ctk.StringVar(value=DEFAULT_TEXT)
        self._text_label = ctk.CTkLabel(custom_tab, text="Текст или эмодзи (до 4 символов):")
        self._text_entry = ctk.CTkEntry(custom_tab, textvariable=self._text_val)
        self._text_label.grid(row=0, column=0, padx=6, pady=(4, 2), sticky="w")
        self._text_entry.grid(row=1, column=0, padx=6, pady=(0, 4), sticky="ew")
        self._text_val.trace_add("write", self._on_text_write)

        self._text_color_val = ctk.StringVar(value=DEFAULT_TEXT_COLOR)
        self._text_color_label = ctk.CTkLabel(custom_tab, text="Цвет текста:")
        self._text_color_entry = ctk.CTkEntry(custom_tab, textvariable=self._text_color_val, width=100)
        self._auto_contrast_btn = ctk.CTkButton(
            custom_tab, text="Авто-контраст", width=110, command=self._emit_auto_contrast
        )
        self._text_color_label.grid(row=2, column=0, padx=6, pady=(0, 2), sticky="w")
        self._text_color_entry.grid(row=3, column=0, padx=6, pady=(0, 6), sticky="w")
        self._auto_contrast_btn.grid(row=3, column=0, padx=6, pady=(0, 6), sticky="e")
        self._text_color_entry.bind("<FocusOut>", self._on_text_params_commit)
        self._text_color_entry.bind("<Return>", self._on_text_params_commit)

        # Оформление (общее для обоих режимов)
        self._style_title = ctk.CTkLabel(self, text="Оформление", font=ctk.CTkFont(size=16, weight="bold"))
        self._style_title.grid(row=7, column=0, padx=8, pady=(8, 4), sticky="w")

        self._radius_val = ctk.StringVar(value="0%")
        self._radius_label = ctk.CTkLabel(self, text="Скругление углов:")
        self._radius_slider = ctk.CTkSlider(self, from_=0, to=50, number_of_steps=50, command=self._on_radius_change)
        self._radius_slider.set(0)
        self._radius_value = ctk.CTkLabel(self, textvariable=self._radius_val, width=48, anchor="w")
        self._radius_label.grid(row=8, column=0, padx=8, pady=(0, 2), sticky="w")
        self._radius_slider.grid(row=9, column=0, padx=8, pady=(0, 2), sticky="ew")
        self._radius_value.grid(row=10, column=0, padx=8, pady=(0, 6), sticky="w")

        self._bg_val = ctk.StringVar(value="#ffffff")
        self._bg_label = ctk.CTkLabel(self, text="Фон:")
        self._bg_entry = ctk.CTkEntry(self, textvariable=self._bg_val, width=100)
        self._transparent_val = ctk.BooleanVar(value=False)
        self._transparent_check = ctk.CTkCheckBox(
            self, text="Прозрачный", variable=self._transparent_val, command=self._on_transparent_toggle
        )
        self._bg_label.grid(row=11, column=0, padx=8, pady=(0, 2), sticky="w")
        self._bg_entry.grid(row=12, column=0, padx=8, pady=(0, 8), sticky="w")
        self._transparent_check.grid(row=12, column=0, padx=8, pady=(0, 8), sticky="e")
        self._bg_entry.bind("<FocusOut>", self._on_style_commit)
        self._bg_entry.bind("<Return>", self._on_style_commit)

        # filler
        self.grid_rowconfigure(99, weight=1)

        self._generate_btn = ctk.CTkButton(self, text="Скачать архив (ZIP)", command=self._emit_generate)
        self._generate_btn.grid(row=100, column=0, padx=8, pady=(8, 4), sticky="ew")
        self._reset_btn = ctk.CTkButton(self, text="Сбросить", fg_color="gray40", command=self._emit_reset)
        self._reset_btn.grid(row=101, column=0, padx=8, pady=(0, 8), sticky="ew")

    # ---- Public API ----
    def set_image_info(self, source: SourceImage) -> None:
        """Показывает сведения о загруженном источнике."""
        self._path_val.set(str(source.path) if source.path is not None else source.display_name)
        self._size_val.set(f"Размер: {source.size_bytes / 1024:.1f} КБ ({source.image_type.value.upper()})")
        self._dims_val.set(f"Разрешение: {source.width}×{source.height}")

    def clear_image_info(self) -> None:
        self._path_val.set("—")
        self._size_val.set("—")
        self._dims_val.set("—")

    def get_mode(self) -> str:
        """Возвращает 'image' | 'custom' по активной вкладке."""
        return _MODE_BY_TAB.get(self._tabs.get(), "image")

    def get_radius_percent(self) -> int:
        return int(round(self._radius_slider.get()))

    def get_background(self) -> str:
        if self._transparent_val.get():
            return TRANSPARENT
        return self._bg_val.get().strip()

    def set_background(self, value: str) -> None:
        is_transparent = value == TRANSPARENT
        self._transparent_val.set(is_transparent)
        if not is_transparent:
            self._bg_val.set(value)
            self._last_background = value
        self._bg_entry.configure(state="disabled" if is_transparent else "normal")

    def set_mode(self, mode: str) -> None:
        """Переключает вкладку без события `on_mode_change`: режим уже выбран контроллером."""
        self._tabs.set(TAB_CUSTOM if mode == "custom" else TAB_IMAGE)

    def reset_text(self) -> None:
        self._text_val.set(DEFAULT_TEXT)
        self._text_color_val.set(DEFAULT_TEXT_COLOR)

    def get_text(self) -> str:
        return self._text_val.get()

    def get_text_color(self) -> str:
        return self._text_color_val.get().strip()

    def set_text_color(self, value: str) -> None:
        self._text_color_val.set(value)

    def set_radius_percent(self, value: int) -> None:
        self._radius_slider.set(value)
        self._radius_val.set(f"{int(value)}%")

    def set_generating(self, generating: bool) -> None:
        self._generate_btn.configure(
            state="disabled" if generating else "normal",
            text="Генерация…" if generating else "Скачать архив (ZIP)",
        )

    # ---- Events ----
    def _emit_open_file(self) -> None:
        if self.on_open_file:
            self.on_open_file()

    def _emit_mode_change(self) -> None:
        if self.on_mode_change:
            self.on_mode_change(self.get_mode())

    def _emit_crop_reset(self) -> None:
        if self.on_crop_reset:
            self.on_crop_reset()

    def _emit_auto_contrast(self) -> None:
        if self.on_auto_contrast:
            self.on_auto_contrast()

    def _emit_generate(self) -> None:
        if self.on_generate:
            self.on_generate()

    def _emit_reset(self) -> None:
        if self.on_reset:
            self.on_reset()

    def _on_text_write(self, *_args) -> None:
        value = self._text_val.get()
        limited = limit_graphemes(value)
        if limited != value:
            # повторный вызов trace придёт уже с обрезанной строкой
            self._text_val.set(limited)
            return
        if self.on_text_change:
            self.on_text_change()

    def _on_text_params_commit(self, _event=None) -> None:
        if self.on_text_change:
            self.on_text_change()

    def _on_radius_change(self, value: float) -> None:
        self._radius_val.set(f"{int(round(value))}%")
        if self.on_style_change:
            self.on_style_change()

    def _on_transparent_toggle(self) -> None:
        if self._transparent_val.get():
            self._last_background = self._bg_val.get().strip() or self._last_background
            self._bg_entry.configure(state="disabled")
        else:
            self._bg_entry.configure(state="normal")
            self._bg_val.set(self._last_background)
        if self.on_style_change:
            self.on_style_change()

    def _on_style_commit(self, _event=None) -> None:
        if self.on_style_change:
            self.on_style_change()
