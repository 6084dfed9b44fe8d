#!/usr/bin/env python3
"""Stopwatch window with an animated analog face, lap list and theme toggle."""

from __future__ import annotations

import argparse
import json
import logging
import math
from pathlib import Path

from PyQt5.QtCore import QEasingCurve, QPointF, QRectF, Qt, QVariantAnimation
from PyQt5.QtGui import QColor, QFont, QPainter, QPen
from PyQt5.QtWidgets import (
    QAction,
    QActionGroup,
    QApplication,
    QHBoxLayout,
    QLabel,
    QListWidget,
    QMenu,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from clock_ticker import ClockTicker
from stopwatch_core import Stopwatch, StopwatchSnapshot, format_elapsed, hand_angles

logger = logging.getLogger(__name__)

STATE_DIR = Path.home() / ".config" / "stopwatch_widget"
STATE_FILE = STATE_DIR / "state.json"
APP_NAME = "Stopwatch"

THEME_LIGHT = "light"
THEME_DARK = "dark"
DEFAULT_THEME = THEME_LIGHT

MIN_CLOCK_SIZE = 160
MAX_CLOCK_SIZE = 480
DEFAULT_CLOCK_SIZE = 220

HAND_ANIMATION_MS = 180
PRESS_ANIMATION_MS = 90
PRESSED_SCALE = 0.9

THEME_PRESETS = {
    THEME_LIGHT: {
        "window_bg": (250, 250, 252),
        "text": (20, 24, 32),
        "face_fill": (211, 211, 211),
        "face_border": (150, 156, 166),
        "major_tick": (40, 48, 60, 220),
        "minor_tick": (70, 80, 95, 130),
        "minute_hand": (0, 0, 0),
        "second_hand": (220, 30, 30),
        "center_dot": (20, 24, 32),
        "button_bg": (103, 80, 164),
        "button_text": (255, 255, 255),
    },
    THEME_DARK: {
        "window_bg": (28, 27, 31),
        "text": (255, 255, 255),
        "face_fill": (58, 60, 66),
        "face_border": (120, 126, 136),
        "major_tick": (236, 238, 242, 230),
        "minor_tick": (200, 204, 210, 140),
        "minute_hand": (240, 240, 240),
        "second_hand": (255, 96, 96),
        "center_dot": (245, 247, 250),
        "button_bg": (208, 188, 255),
        "button_text": (56, 30, 114),
    },
}


def _valid_theme(theme_name: str | None) -> str:
    if theme_name in THEME_PRESETS:
        return theme_name
    return DEFAULT_THEME


def _valid_size(size: int | str | None) -> int:
    try:
        parsed = int(size)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        parsed = DEFAULT_CLOCK_SIZE
    return max(MIN_CLOCK_SIZE, min(MAX_CLOCK_SIZE, parsed))


def _qcolor(values: tuple[int, ...]) -> QColor:
    if len(values) == 3:
        return QColor(values[0], values[1], values[2])
    return QColor(values[0], values[1], values[2], values[3])


def _css_rgb(values: tuple[int, ...]) -> str:
    return f"rgb({values[0]}, {values[1]}, {values[2]})"


def load_saved_state() -> dict:
    try:
        payload = json.loads(STATE_FILE.read_text(encoding="utf-8"))
        return payload if isinstance(payload, dict) else {}
    except (OSError, ValueError):
        return {}


class AnimatedButton(QPushButton):
    """Push button whose label shrinks while held down.

    Only the label font is scaled; the button frame keeps its size.
    """

    def __init__(self, text: str, parent: QWidget | None = None):
        super().__init__(text, parent)
        point_size = self.font().pointSizeF()
        self.base_point_size = point_size if point_size > 0 else 10.0
        self.scale = 1.0

        self.press_animation = QVariantAnimation(self)
        self.press_animation.setDuration(PRESS_ANIMATION_MS)
        self.press_animation.setEasingCurve(QEasingCurve.OutQuad)
        self.press_animation.valueChanged.connect(self._apply_scale)

        self.pressed.connect(lambda: self._animate_to(PRESSED_SCALE))
        self.released.connect(lambda: self._animate_to(1.0))

    def _animate_to(self, target: float) -> None:
        self.press_animation.stop()
        self.press_animation.setStartValue(self.scale)
        self.press_animation.setEndValue(target)
        self.press_animation.start()

    def _apply_scale(self, value: float) -> None:
        self.scale = float(value)
        font = self.font()
        font.setPointSizeF(max(1.0, self.base_point_size * self.scale))
        self.setFont(font)


class AnalogClockFace(QWidget):
    """Stopwatch dial with a minute hand and a second hand."""

    def __init__(self, size: int, parent: QWidget | None = None):
        super().__init__(parent)
        self.clock_size = _valid_size(size)
        self.setFixedSize(self.clock_size, self.clock_size)
        self.palette_values = THEME_PRESETS[DEFAULT_THEME]

        self.minute_angle = 0.0
        self.second_angle = 0.0
        self.minute_animation = self._make_hand_animation("minute_angle")
        self.second_animation = self._make_hand_animation("second_angle")

    def _make_hand_animation(self, attribute: str) -> QVariantAnimation:
        animation = QVariantAnimation(self)
        animation.setDuration(HAND_ANIMATION_MS)
        animation.setEasingCurve(QEasingCurve.OutCubic)

        def apply(value: float) -> None:
            setattr(self, attribute, float(value))
            self.update()

        animation.valueChanged.connect(apply)
        return animation

    def _retarget(self, animation: QVariantAnimation, current: float, target: float) -> None:
        if animation.endValue() == target:
            return
        animation.stop()
        animation.setStartValue(current)
        animation.setEndValue(target)
        animation.start()

    def set_elapsed(self, elapsed_ms: int) -> None:
        minute_target, second_target = hand_angles(elapsed_ms)
        self._retarget(self.minute_animation, self.minute_angle, minute_target)
        self._retarget(self.second_animation, self.second_angle, second_target)

    def set_clock_size(self, size: int) -> None:
        self.clock_size = _valid_size(size)
        self.setFixedSize(self.clock_size, self.clock_size)
        self.update()

    def set_palette_values(self, palette: dict) -> None:
        self.palette_values = palette
        self.update()

    def paintEvent(self, _event) -> None:  # noqa: N802 (Qt signature)
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing)
        palette = self.palette_values

        face_bounds = QRectF(4, 4, self.clock_size - 8, self.clock_size - 8)
        center = face_bounds.center()
        radius = min(face_bounds.width(), face_bounds.height()) / 2

        painter.setPen(QPen(_qcolor(palette["face_border"]), 2))
        painter.setBrush(_qcolor(palette["face_fill"]))
        painter.drawEllipse(face_bounds)

        self._draw_tick_marks(painter, center, radius, palette)
        self._draw_hand(
            painter,
            center,
            angle_deg=self.minute_angle - 90,
            length=radius * 0.70,
            width=8,
            color=_qcolor(palette["minute_hand"]),
        )
        self._draw_hand(
            painter,
            center,
            angle_deg=self.second_angle - 90,
            length=radius * 0.90,
            width=4,
            color=_qcolor(palette["second_hand"]),
        )

        painter.setPen(Qt.NoPen)
        painter.setBrush(_qcolor(palette["center_dot"]))
        painter.drawEllipse(center, 5, 5)

    def _draw_tick_marks(self, painter: QPainter, center: QPointF, radius: float, palette: dict) -> None:
        for step in range(60):
            angle = math.radians(step * 6 - 90)
            outer = QPointF(
                center.x() + (radius - 6) * math.cos(angle),
                center.y() + (radius - 6) * math.sin(angle),
            )

            if step % 5 == 0:
                inner_distance = radius - 20
                thickness = 2.4
                color = _qcolor(palette["major_tick"])
            else:
                inner_distance = radius - 13
                thickness = 1.2
                color = _qcolor(palette["minor_tick"])

            inner = QPointF(
                center.x() + inner_distance * math.cos(angle),
                center.y() + inner_distance * math.sin(angle),
            )
            painter.setPen(QPen(color, thickness))
            painter.drawLine(inner, outer)

    @staticmethod
    def _draw_hand(
        painter: QPainter,
        center: QPointF,
        angle_deg: float,
        length: float,
        width: float,
        color: QColor,
    ) -> None:
        angle = math.radians(angle_deg)
        endpoint = QPointF(
            center.x() + length * math.cos(angle),
            center.y() + length * math.sin(angle),
        )
        pen = QPen(color, width)
        pen.setCapStyle(Qt.RoundCap)
        painter.setPen(pen)
        painter.drawLine(center, endpoint)


class StopwatchWindow(QWidget):
    def __init__(self, size: int, color_theme: str, stopwatch: Stopwatch | None = None):
        super().__init__()
        self.clock_size = _valid_size(size)
        self.color_theme = _valid_theme(color_theme)

        self.stopwatch = stopwatch if stopwatch is not None else Stopwatch()
        self.ticker = ClockTicker(self.stopwatch, parent=self)

        self.setWindowTitle(APP_NAME)
        self.setAttribute(Qt.WA_StyledBackground, True)

        self.title_label = QLabel(APP_NAME)
        title_font = QFont(self.title_label.font())
        title_font.setPointSize(16)
        title_font.setBold(True)
        self.title_label.setFont(title_font)
        self.theme_button = QPushButton()
        self.theme_button.clicked.connect(self.toggle_theme)

        top_bar = QHBoxLayout()
        top_bar.addWidget(self.title_label)
        top_bar.addStretch(1)
        top_bar.addWidget(self.theme_button)

        self.clock_face = AnalogClockFace(self.clock_size)

        self.readout_label = QLabel()
        self.readout_label.setAlignment(Qt.AlignHCenter | Qt.AlignVCenter)
        readout_font = QFont("Monospace", 24)
        readout_font.setStyleHint(QFont.TypeWriter)
        self.readout_label.setFont(readout_font)

        self.start_button = AnimatedButton("Start")
        self.pause_button = AnimatedButton("Pause")
        self.reset_button = AnimatedButton("Reset")
        self.lap_button = AnimatedButton("⏱️")
        self.start_button.clicked.connect(self.stopwatch.start)
        self.pause_button.clicked.connect(self.stopwatch.pause)
        self.reset_button.clicked.connect(self.stopwatch.reset)
        self.lap_button.clicked.connect(self.stopwatch.lap)

        controls = QHBoxLayout()
        controls.addStretch(1)
        controls.addWidget(self.start_button)
        controls.addWidget(self.pause_button)
        controls.addWidget(self.reset_button)
        controls.addSpacing(8)
        controls.addWidget(self.lap_button)
        controls.addStretch(1)

        self.laps_header = QLabel("Lap Times")
        laps_font = QFont(self.laps_header.font())
        laps_font.setPointSize(14)
        self.laps_header.setFont(laps_font)
        self.lap_list = QListWidget()

        layout = QVBoxLayout()
        layout.setContentsMargins(16, 16, 16, 16)
        layout.addLayout(top_bar)
        layout.addStretch(1)
        layout.addWidget(self.clock_face, alignment=Qt.AlignHCenter)
        layout.addSpacing(16)
        layout.addWidget(self.readout_label)
        layout.addSpacing(16)
        layout.addLayout(controls)
        layout.addSpacing(16)
        layout.addWidget(self.laps_header)
        layout.addWidget(self.lap_list, 1)
        self.setLayout(layout)

        self._unsubscribe = self.stopwatch.subscribe(self.render_snapshot)
        self.destroyed.connect(lambda _obj=None, release=self._unsubscribe: release())
        self.apply_theme()
        self.render_snapshot(self.stopwatch.snapshot())

    @property
    def is_dark_theme(self) -> bool:
        return self.color_theme == THEME_DARK

    def render_snapshot(self, snapshot: StopwatchSnapshot) -> None:
        self.readout_label.setText(format_elapsed(snapshot.elapsed_ms))
        self.clock_face.set_elapsed(snapshot.elapsed_ms)

        if len(snapshot.laps) < self.lap_list.count():
            self.lap_list.clear()
        for lap in snapshot.laps[self.lap_list.count():]:
            self.lap_list.addItem(lap.label())

    def apply_theme(self) -> None:
        palette = THEME_PRESETS[self.color_theme]
        self.theme_button.setText("Light Theme" if self.is_dark_theme else "Dark Theme")
        self.setStyleSheet(
            f"StopwatchWindow {{ background-color: {_css_rgb(palette['window_bg'])}; }}"
            f"QLabel {{ color: {_css_rgb(palette['text'])}; }}"
            f"QListWidget {{ background: transparent; border: none; color: {_css_rgb(palette['text'])}; }}"
            f"QPushButton {{ background-color: {_css_rgb(palette['button_bg'])};"
            f" color: {_css_rgb(palette['button_text'])}; border-radius: 14px; padding: 6px 14px; }}"
        )
        self.clock_face.set_palette_values(palette)

    def set_color_theme(self, theme_name: str, persist: bool = True) -> None:
        normalized_theme = _valid_theme(theme_name)
        if normalized_theme == self.color_theme:
            return
        self.color_theme = normalized_theme
        logger.info("switched to %s theme", normalized_theme)
        self.apply_theme()
        if persist:
            self.save_state()

    def toggle_theme(self) -> None:
        self.set_color_theme(THEME_LIGHT if self.is_dark_theme else THEME_DARK)

    def set_clock_size(self, size: int, persist: bool = True) -> None:
        normalized_size = _valid_size(size)
        if normalized_size == self.clock_size:
            return
        self.clock_size = normalized_size
        self.clock_face.set_clock_size(normalized_size)
        self.adjustSize()
        if persist:
            self.save_state()

    def detach(self) -> None:
        self.ticker.detach()
        self._unsubscribe()

    def closeEvent(self, event) -> None:  # noqa: N802 (Qt signature)
        self.detach()
        super().closeEvent(event)

    def build_context_menu(self) -> QMenu:
        menu = QMenu(self)

        size_menu = menu.addMenu("Clock size")
        size_down_action = QAction("Smaller", self)
        size_down_action.triggered.connect(lambda: self.set_clock_size(self.clock_size - 20))
        size_down_action.setEnabled(self.clock_size > MIN_CLOCK_SIZE)
        size_menu.addAction(size_down_action)

        size_up_action = QAction("Larger", self)
        size_up_action.triggered.connect(lambda: self.set_clock_size(self.clock_size + 20))
        size_up_action.setEnabled(self.clock_size < MAX_CLOCK_SIZE)
        size_menu.addAction(size_up_action)

        size_menu.addSeparator()
        size_group = QActionGroup(size_menu)
        size_group.setExclusive(True)
        for label, size_value in [
            ("Small (160)", 160),
            ("Medium (220)", 220),
            ("Large (300)", 300),
            ("XL (380)", 380),
        ]:
            size_action = QAction(label, self)
            size_action.setCheckable(True)
            size_action.setChecked(self.clock_size == size_value)
            size_action.triggered.connect(lambda _checked=False, value=size_value: self.set_clock_size(value))
            size_group.addAction(size_action)
            size_menu.addAction(size_action)

        dark_action = QAction("Dark theme", self)
        dark_action.setCheckable(True)
        dark_action.setChecked(self.is_dark_theme)
        dark_action.triggered.connect(lambda _checked=False: self.toggle_theme())
        menu.addAction(dark_action)

        menu.addSeparator()
        center_action = QAction("Center on screen", self)
        quit_action = QAction("Quit", self)
        center_action.triggered.connect(self.center_on_screen)
        quit_action.triggered.connect(QApplication.instance().quit)
        menu.addAction(center_action)
        menu.addSeparator()
        menu.addAction(quit_action)
        return menu

    def contextMenuEvent(self, event) -> None:  # noqa: N802 (Qt signature)
        self.build_context_menu().exec_(event.globalPos())

    def center_on_screen(self) -> None:
        screen = QApplication.primaryScreen()
        if screen is None:
            return
        geometry = screen.availableGeometry()
        self.move(
            geometry.left() + (geometry.width() - self.width()) // 2,
            geometry.top() + (geometry.height() - self.height()) // 2,
        )

    def save_state(self) -> None:
        try:
            STATE_DIR.mkdir(parents=True, exist_ok=True)
            payload = {
                "x": self.x(),
                "y": self.y(),
                "size": self.clock_size,
                "theme": self.color_theme,
            }
            STATE_FILE.write_text(json.dumps(payload), encoding="utf-8")
        except OSError as exc:
            logger.warning("could not save preferences to %s: %s", STATE_FILE, exc)

    def restore_position(self, cli_x: int | None, cli_y: int | None, state: dict) -> None:
        if cli_x is not None and cli_y is not None:
            self.move(cli_x, cli_y)
            return

        try:
            self.move(int(state["x"]), int(state["y"]))
        except (TypeError, ValueError, KeyError):
            self.center_on_screen()
            return

        if not self._is_on_any_screen():
            self.center_on_screen()

    def _is_on_any_screen(self) -> bool:
        center = self.frameGeometry().center()
        return any(screen.geometry().contains(center) for screen in QApplication.screens())


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Stopwatch with laps and an analog face.")
    parser.add_argument(
        "--theme",
        choices=sorted(THEME_PRESETS.keys()),
        help="Color theme.",
    )
    parser.add_argument(
        "--size",
        type=int,
        help=f"Clock face size in pixels ({MIN_CLOCK_SIZE}-{MAX_CLOCK_SIZE}).",
    )
    parser.add_argument("--x", type=int, help="Initial X position.")
    parser.add_argument("--y", type=int, help="Initial Y position.")
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log state transitions.",
    )
    return parser.parse_args(argv)


def resolve_launch_settings(args: argparse.Namespace, saved_state: dict) -> tuple[int, str]:
    launch_size = _valid_size(args.size if args.size is not None else saved_state.get("size"))
    launch_theme = _valid_theme(args.theme if args.theme else saved_state.get("theme"))
    return launch_size, launch_theme


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )
    saved_state = load_saved_state()

    launch_size, launch_theme = resolve_launch_settings(args, saved_state)

    app = QApplication([])

    window = StopwatchWindow(size=launch_size, color_theme=launch_theme)
    window.restore_position(args.x, args.y, saved_state)
    window.show()

    exit_code = app.exec_()
    window.save_state()
    return exit_code


if __name__ == "__main__":
    raise SystemExit(main())
