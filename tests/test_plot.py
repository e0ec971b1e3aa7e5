import math

import pytest

from fleuryindex.plot import DrawCommand, Plot2D, Plot2DMode, Plot2DStyle, Rect, tick_increment

SCREEN = Rect(100.0, 50.0, 500.0, 350.0)


def rects(plot):
    return [c for c in plot.commands if c.kind == "rect"]


def test_tick_increment_values():
    assert tick_increment(-4, 4) == 1.0
    assert tick_increment(0, 100) == 10.0


@pytest.mark.parametrize("low, high", [(0, 1), (-4, 4), (0, 1000), (-25, 80), (3, 3.5)])
def test_tick_increment_is_power_of_ten_within_span(low, high):
    tick = tick_increment(low, high)
    exponent = math.log10(tick)
    assert exponent == pytest.approx(round(exponent))
    assert tick <= (high - low) / 10 + 1


def test_tick_increment_falls_back_for_inverted_view():
    assert tick_increment(100, 0) == 1.0


def test_begin_draws_labels_clip_and_background_first():
    plot = Plot2D(SCREEN, Rect(-4, -4, 4, 4), title="My Plot", x_axis="x", y_axis="y")
    plot.begin()
    title, x_label, y_label, clip, back = plot.commands[:5]
    assert title.text == "My Plot"
    assert title.position == (SCREEN.x0, SCREEN.y0 - plot.title_line_height)
    assert x_label.position == (SCREEN.x0, SCREEN.y1)
    assert y_label.direction == (0.0, 1.0)
    assert clip == DrawCommand("clip", rect=SCREEN)
    assert back.rect == SCREEN and back.color == plot.back_color


def test_grid_lines_stay_inside_the_screen_and_use_translucent_comment_color():
    plot = Plot2D(SCREEN, Rect(-4, -4, 4, 4))
    plot.begin()
    lines = rects(plot)[1:]
    assert lines
    for line in lines:
        assert SCREEN.x0 <= line.rect.x0 <= SCREEN.x1
        assert SCREEN.y0 <= line.rect.y0 <= SCREEN.y1
        assert line.color >> 24 == 0x91
        assert line.color & 0x00FFFFFF == plot.comment_color & 0x00FFFFFF
    vertical = [line for line in lines if line.rect.y0 == SCREEN.y0 and line.rect.y1 == SCREEN.y1]
    assert vertical[0].rect.x0 == SCREEN.x0
    assert vertical[-1].rect.x0 == SCREEN.x1


def test_grid_labels_have_no_decimals_for_whole_ticks():
    plot = Plot2D(SCREEN, Rect(0, 0, 10, 10))
    plot.begin()
    labels = [c.text for c in plot.commands if c.kind == "string"]
    assert labels
    assert all("." not in label for label in labels)
    assert "10" in labels


def test_histogram_mode_draws_no_grid():
    plot = Plot2D(SCREEN, mode=Plot2DMode.HISTOGRAM, num_bins=4)
    plot.begin()
    assert [c.kind for c in plot.commands] == ["clip", "rect"]


def test_zero_sized_view_is_rejected():
    plot = Plot2D(SCREEN, Rect(1, 0, 1, 5))
    with pytest.raises(ValueError):
        plot.begin()


def test_points_draw_one_rect_per_style_and_cycle_colors():
    plot = Plot2D(SCREEN, Rect(0, 0, 10, 10))
    xs, ys = [0, 5, 10], [0, 5, 10]
    plot.points(Plot2DStyle.LINES | Plot2DStyle.POINTS, xs, ys)
    plot.points(Plot2DStyle.POINTS, xs, ys)
    drawn = rects(plot)
    assert len(drawn) == 2 * len(xs) + len(xs)
    assert drawn[0].color == plot.palette[0]
    assert drawn[-1].color == plot.palette[1]
    first_point = drawn[1].rect
    assert (first_point.x0 + first_point.x1) / 2 == SCREEN.x0
    assert (first_point.y0 + first_point.y1) / 2 == SCREEN.y1


def test_points_reject_mismatched_data():
    plot = Plot2D(SCREEN, Rect(0, 0, 10, 10))
    with pytest.raises(ValueError):
        plot.points(Plot2DStyle.POINTS, [1, 2], [1])


def test_histogram_counts_in_range_values_per_group():
    plot = Plot2D(SCREEN, mode=Plot2DMode.HISTOGRAM, num_bins=10,
                  bin_data_range=(0, 10), bin_group_count=2)
    plot.histogram([0.5, 1.5, 1.7, 9.9, 10, -1])
    plot.histogram([2.5])
    first, second = plot.bins[:10], plot.bins[10:]
    assert sum(first) == 4
    assert sum(second) == 1
    assert first[1] == 2
    assert plot.current_bin_group == 2


def test_histogram_rejects_extra_groups():
    plot = Plot2D(SCREEN, mode=Plot2DMode.HISTOGRAM, num_bins=3, bin_group_count=1)
    plot.histogram([0.1])
    with pytest.raises(ValueError):
        plot.histogram([0.2])


def test_end_bars_fill_height_and_frame_restores_clip():
    previous = Rect(0, 0, 800, 600)
    plot = Plot2D(SCREEN, mode=Plot2DMode.HISTOGRAM, num_bins=5,
                  bin_data_range=(-40, 40), bin_group_count=2, previous_clip=previous)
    plot.begin()
    plot.histogram([-30, -10, 0, 5, 20, 39])
    plot.histogram([1, 2, 3])
    plot.end()
    outline, clip = plot.commands[-2:]
    assert outline.kind == "outline" and outline.rect == SCREEN
    assert clip == DrawCommand("clip", rect=previous)
    bars = rects(plot)[1:]
    assert len(bars) == 10
    for group in range(2):
        heights = [bar.rect.height for bar in bars[group * 5:(group + 1) * 5]]
        assert sum(heights) == pytest.approx(SCREEN.height)
        assert all(bar.rect.y1 == SCREEN.y1 for bar in bars)
    assert bars[5].rect.x0 - bars[0].rect.x0 == pytest.approx(bars[0].rect.width)


def test_end_of_line_plot_only_draws_frame():
    plot = Plot2D(SCREEN, Rect(0, 0, 1, 1))
    plot.end()
    assert [c.kind for c in plot.commands] == ["outline", "clip"]
    assert plot.commands[-1].rect is None