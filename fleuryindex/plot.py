"""Two-dimensional line, point and histogram plots as lists of draw commands."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum, IntFlag
from typing import Optional, Sequence

_GRID_ALPHA = 0x91000000
_RGB_MASK = 0x00FFFFFF


class Plot2DMode(Enum):
    """What a plot shows."""

    LINE = 0
    HISTOGRAM = 1


class Plot2DStyle(IntFlag):
    """How sample points are drawn."""

    NONE = 0
    LINES = 1 << 0
    POINTS = 1 << 1


@dataclass(frozen=True)
class Rect:
    """An axis-aligned rectangle in screen or plot coordinates."""

    x0: float
    y0: float
    x1: float
    y1: float

    @property
    def width(self) -> float:
        return self.x1 - self.x0

    @property
    def height(self) -> float:
        return self.y1 - self.y0


@dataclass(frozen=True)
class DrawCommand:
    """One drawing operation.

    ``kind`` is ``"string"``, ``"rect"``, ``"outline"`` or ``"clip"``. A
    string has ``text``, ``position`` and, when drawn rotated, ``direction``;
    a clip with no ``rect`` restores an unclipped view.
    """

    kind: str
    rect: Optional[Rect] = None
    color: int = 0
    roundness: float = 0.0
    thickness: float = 0.0
    text: str = ""
    position: tuple[float, float] = (0.0, 0.0)
    direction: Optional[tuple[float, float]] = None


def tick_increment(low: float, high: float) -> float:
    """The grid spacing for a view from ``low`` to ``high``: a power of ten.

    A view so inverted that no spacing can be derived falls back to 1.
    """
    span = (high - low) / 10.0 + 1.0
    if span <= 0:
        return 1.0
    increment = 10.0 ** math.floor(math.log10(span))
    return increment if increment > 0 else 1.0


def _check_view(view: Rect) -> None:
    if view.x1 == view.x0 or view.y1 == view.y0:
        raise ValueError("plot view has zero width or height")


_DEFAULT_PALETTE = (0xFF4FC1E9, 0xFFED5565, 0xFFA0D468, 0xFFFFCE54, 0xFFAC92EC)


@dataclass
class Plot2D:
    """A plot being drawn: call :meth:`begin`, add data, then :meth:`end`.

    Drawing operations accumulate in ``commands``. For histograms,
    ``bins`` holds ``num_bins`` counters for each of ``bin_group_count``
    groups, one group per call to :meth:`histogram`.
    """

    screen_rect: Rect
    plot_view: Rect = Rect(0.0, 0.0, 1.0, 1.0)
    mode: Plot2DMode = Plot2DMode.LINE
    title: Optional[str] = None
    x_axis: Optional[str] = None
    y_axis: Optional[str] = None
    num_bins: int = 0
    bin_data_range: tuple[float, float] = (0.0, 1.0)
    bin_group_count: int = 1
    palette: Sequence[int] = _DEFAULT_PALETTE
    comment_color: int = 0xFF808080
    back_color: int = 0xFF0C0C0C
    margin_color: int = 0xFF303030
    title_line_height: float = 16.0
    previous_clip: Optional[Rect] = None
    commands: list[DrawCommand] = field(default_factory=list)
    bins: list[int] = field(init=False)
    color_cycle_position: int = field(default=0, init=False)
    current_bin_group: int = field(default=0, init=False)

    def __post_init__(self) -> None:
        if not self.palette:
            raise ValueError("palette must hold at least one color")
        self.bins = [0] * (max(self.num_bins, 0) * max(self.bin_group_count, 0))

    def _draw(self, command: DrawCommand) -> None:
        self.commands.append(command)

    def begin(self) -> None:
        """Draw the title, axis labels, background and (for line plots) the grid."""
        rect = self.screen_rect
        if self.title is not None:
            self._draw(DrawCommand("string", color=self.comment_color, text=self.title,
                                   position=(rect.x0, rect.y0 - self.title_line_height)))
        if self.x_axis is not None:
            self._draw(DrawCommand("string", color=self.comment_color, text=self.x_axis,
                                   position=(rect.x0, rect.y1)))
        if self.y_axis is not None:
            self._draw(DrawCommand("string", color=self.comment_color, text=self.y_axis,
                                   position=(rect.x0 - 10, rect.y0 + 5), direction=(0.0, 1.0)))
        self._draw(DrawCommand("clip", rect=rect))
        self._draw(DrawCommand("rect", rect=rect, color=self.back_color, roundness=4.0))
        if self.mode != Plot2DMode.HISTOGRAM:
            self._draw_grid()

    def _draw_grid(self) -> None:
        rect = self.screen_rect
        view = self.plot_view
        _check_view(view)
        width, height = rect.width, rect.height
        grid_color = (self.comment_color & _RGB_MASK) | _GRID_ALPHA
        tick_x = tick_increment(view.x0, view.x1)
        tick_y = tick_increment(view.y0, view.y1)
        precision = 0 if tick_y >= 1 else 3

        nearest_y = (view.y1 + view.y0) / 2
        nearest_y -= math.fmod(nearest_y, tick_y)
        label_y = rect.y0 + height - height * (nearest_y - view.y0) / view.height
        x = view.x0 - math.fmod(view.x0, tick_x)
        while x <= view.x1:
            left = rect.x0 + width * (x - view.x0) / view.width
            self._draw(DrawCommand("rect", rect=Rect(left, rect.y0, left + 1, rect.y1),
                                   color=grid_color, roundness=1.0))
            self._draw(DrawCommand("string", color=grid_color, text=f"{x:.{precision}f}",
                                   position=(left, label_y)))
            x += tick_x

        nearest_x = (view.x1 + view.x0) / 2
        nearest_x -= math.fmod(nearest_x, tick_x)
        label_x = rect.x0 + width * (nearest_x - view.x0) / view.width
        y = view.y0 - math.fmod(view.y0, tick_y)
        while y <= view.y1:
            top = rect.y0 + height - height * (y - view.y0) / view.height
            self._draw(DrawCommand("rect", rect=Rect(rect.x0, top, rect.x1, top + 1),
                                   color=grid_color, roundness=1.0))
            self._draw(DrawCommand("string", color=grid_color, text=f"{y:.{precision}f}",
                                   position=(label_x, top)))
            y += tick_y

    def points(self, style: Plot2DStyle, x_data: Sequence[float], y_data: Sequence[float]) -> None:
        """Draw samples in the next palette color as small dots, larger points, or both."""
        if len(x_data) != len(y_data):
            raise ValueError("x and y data differ in length")
        view = self.plot_view
        _check_view(view)
        rect = self.screen_rect
        color = self.palette[self.color_cycle_position % len(self.palette)]
        self.color_cycle_position += 1
        for x, y in zip(x_data, y_data):
            px = rect.x0 + rect.width * (x - view.x0) / view.width
            py = rect.y0 + rect.height - rect.height * (y - view.y0) / view.height
            if style & Plot2DStyle.LINES:
                self._draw(DrawCommand("rect", rect=Rect(px - 1, py - 1, px + 1, py + 1),
                                       color=color, roundness=2.0))
            if style & Plot2DStyle.POINTS:
                self._draw(DrawCommand("rect", rect=Rect(px - 4, py - 4, px + 4, py + 4),
                                       color=color, roundness=6.0))

    def histogram(self, data: Sequence[float]) -> None:
        """Count ``data`` into the bins of the next group; values out of range are dropped."""
        if self.num_bins <= 0 or not self.bins:
            return
        if self.current_bin_group >= self.bin_group_count:
            raise ValueError("more histogram groups than bin_group_count")
        low, high = self.bin_data_range
        if high == low:
            raise ValueError("bin data range is empty")
        offset = self.current_bin_group * self.num_bins
        for value in data:
            bin_index = int(self.num_bins * (value - low) / (high - low))
            if 0 <= bin_index < self.num_bins:
                self.bins[offset + bin_index] += 1
        self.current_bin_group += 1

    def end(self) -> None:
        """Draw histogram bars, the frame, and restore the previous clip."""
        rect = self.screen_rect
        if (self.mode == Plot2DMode.HISTOGRAM and self.num_bins > 0
                and self.bin_group_count > 0):
            bar_width = rect.width / self.num_bins / self.bin_group_count
            for group in range(self.bin_group_count):
                counts = self.bins[group * self.num_bins:(group + 1) * self.num_bins]
                total = sum(counts)
                color = self.palette[group % len(self.palette)]
                for i, count in enumerate(counts):
                    left = rect.x0 + (i / self.num_bins) * rect.width + bar_width * group
                    fraction = count / total if total else 0.0
                    top = rect.y1 - fraction * rect.height
                    self._draw(DrawCommand("rect", rect=Rect(left, top, left + bar_width, rect.y1),
                                           color=color, roundness=4.0))
        self._draw(DrawCommand("outline", rect=rect, color=self.margin_color,
                               roundness=4.0, thickness=3.0))
        self._draw(DrawCommand("clip", rect=self.previous_clip))