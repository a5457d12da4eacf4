"""Chart themes, axis styling and figure save helpers."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from matplotlib.axes import Axes
from matplotlib.figure import Figure
from matplotlib.ticker import MaxNLocator

logger = logging.getLogger(__name__)

OUTPUT_FORMATS: tuple[str, ...] = ("png", "pdf", "svg")
FIGURE_DPI = 300


@dataclass(frozen=True)
class ChartTheme:
    """ggplot2-style theme applied to statistical charts.

    Colors are hex strings. A grid or axis-line width of 0 disables that
    element regardless of the ``show_*`` flags.
    """

    name: str
    background: str
    plot_background: str
    grid_major_color: str
    grid_major_width: float
    show_grid_major: bool
    axis_line_color: str
    axis_line_width: float
    show_axis_lines: bool
    title_font_size: float
    title_color: str
    axis_title_font_size: float
    axis_tick_font_size: float
    axis_tick_color: str
    color_palette: tuple[str, ...]
    box_fill_color: str
    box_stroke_color: str
    bar_fill_color: str
    point_fill_color: str
    line_color: str
    highlight_color: str
    median_color: str
    mean_color: str
    violin_fill_color: str
    violin_stroke_color: str

    def color_for(self, index: int) -> str:
        """Return a stable palette color for the ``index``-th group."""
        return self.color_palette[int(index) % len(self.color_palette)]


THEME_GREY = ChartTheme(
    name="grey",
    background="#FFFFFF",
    plot_background="#EBEBEB",
    grid_major_color="#FFFFFF",
    grid_major_width=1.0,
    show_grid_major=True,
    axis_line_color="#000000",
    axis_line_width=0.0,
    show_axis_lines=False,
    title_font_size=14,
    title_color="#000000",
    axis_title_font_size=11,
    axis_tick_font_size=10,
    axis_tick_color="#4D4D4D",
    color_palette=(
        "#F8766D", "#00BA38", "#619CFF", "#F564E3",
        "#00BFC4", "#B79F00", "#E76BF3", "#00B0F6",
    ),
    box_fill_color="#595959",
    box_stroke_color="#2B2B2B",
    bar_fill_color="#595959",
    point_fill_color="#000000",
    line_color="#3366FF",
    highlight_color="#F8766D",
    median_color="#FFFFFF",
    mean_color="#F8766D",
    violin_fill_color="#595959",
    violin_stroke_color="#2B2B2B",
)

THEME_MINIMAL = ChartTheme(
    name="minimal",
    background="#FFFFFF",
    plot_background="#FFFFFF",
    grid_major_color="#D9D9D9",
    grid_major_width=0.5,
    show_grid_major=True,
    axis_line_color="#000000",
    axis_line_width=0.0,
    show_axis_lines=False,
    title_font_size=14,
    title_color="#333333",
    axis_title_font_size=11,
    axis_tick_font_size=10,
    axis_tick_color="#999999",
    color_palette=(
        "#4E79A7", "#F28E2B", "#E15759", "#76B7B2",
        "#59A14F", "#EDC948", "#B07AA1", "#FF9DA7",
    ),
    box_fill_color="#4E79A7",
    box_stroke_color="#365678",
    bar_fill_color="#4E79A7",
    point_fill_color="#4E79A7",
    line_color="#4E79A7",
    highlight_color="#E15759",
    median_color="#FFFFFF",
    mean_color="#E15759",
    violin_fill_color="#4E79A7",
    violin_stroke_color="#365678",
)

THEME_CLASSIC = ChartTheme(
    name="classic",
    background="#FFFFFF",
    plot_background="#FFFFFF",
    grid_major_color="#000000",
    grid_major_width=0.0,
    show_grid_major=False,
    axis_line_color="#000000",
    axis_line_width=1.0,
    show_axis_lines=True,
    title_font_size=14,
    title_color="#000000",
    axis_title_font_size=12,
    axis_tick_font_size=10,
    axis_tick_color="#000000",
    color_palette=(
        "#000000", "#DF536B", "#61D04F", "#2297E6",
        "#28E2E5", "#CD0BBC", "#F5C710", "#9E9E9E",
    ),
    box_fill_color="#FFFFFF",
    box_stroke_color="#000000",
    bar_fill_color="#CCCCCC",
    point_fill_color="#000000",
    line_color="#000000",
    highlight_color="#DF536B",
    median_color="#000000",
    mean_color="#DF536B",
    violin_fill_color="#CCCCCC",
    violin_stroke_color="#000000",
)

THEME_ECONOMIST = ChartTheme(
    name="economist",
    background="#D5E4EB",
    plot_background="#D5E4EB",
    grid_major_color="#FFFFFF",
    grid_major_width=1.0,
    show_grid_major=True,
    axis_line_color="#000000",
    axis_line_width=0.0,
    show_axis_lines=False,
    title_font_size=14,
    title_color="#000000",
    axis_title_font_size=11,
    axis_tick_font_size=10,
    axis_tick_color="#3B3B3B",
    color_palette=(
        "#01A2D9", "#014D64", "#6794A7", "#7AD2F6",
        "#00887D", "#76C0C1", "#ADADAD", "#7C260B",
    ),
    box_fill_color="#014D64",
    box_stroke_color="#01303F",
    bar_fill_color="#014D64",
    point_fill_color="#014D64",
    line_color="#01A2D9",
    highlight_color="#7C260B",
    median_color="#FFFFFF",
    mean_color="#7C260B",
    violin_fill_color="#6794A7",
    violin_stroke_color="#014D64",
)

THEME_FIVETHIRTYEIGHT = ChartTheme(
    name="fivethirtyeight",
    background="#F0F0F0",
    plot_background="#F0F0F0",
    grid_major_color="#CBCBCB",
    grid_major_width=1.0,
    show_grid_major=True,
    axis_line_color="#000000",
    axis_line_width=0.0,
    show_axis_lines=False,
    title_font_size=16,
    title_color="#3C3C3C",
    axis_title_font_size=12,
    axis_tick_font_size=11,
    axis_tick_color="#3C3C3C",
    color_palette=(
        "#FF2700", "#008FD5", "#77AB43", "#636464",
        "#C5C5C5", "#FF6F00", "#00A86B", "#9467BD",
    ),
    box_fill_color="#008FD5",
    box_stroke_color="#006BA6",
    bar_fill_color="#008FD5",
    point_fill_color="#008FD5",
    line_color="#008FD5",
    highlight_color="#FF2700",
    median_color="#FFFFFF",
    mean_color="#FF2700",
    violin_fill_color="#008FD5",
    violin_stroke_color="#006BA6",
)

STAT_THEMES: dict[str, ChartTheme] = {
    theme.name: theme
    for theme in (
        THEME_GREY,
        THEME_MINIMAL,
        THEME_CLASSIC,
        THEME_ECONOMIST,
        THEME_FIVETHIRTYEIGHT,
    )
}
DEFAULT_THEME = "grey"


def get_theme(name: str | ChartTheme | None = None) -> ChartTheme:
    """Look up a theme by name, falling back to ``grey`` for unknown names."""
    if isinstance(name, ChartTheme):
        return name
    if name is None:
        return STAT_THEMES[DEFAULT_THEME]
    theme = STAT_THEMES.get(str(name))
    if theme is None:
        logger.warning("Unknown theme %r; using %r", name, DEFAULT_THEME)
        return STAT_THEMES[DEFAULT_THEME]
    return theme


def apply_theme(ax: Axes, theme: str | ChartTheme | None = None) -> ChartTheme:
    """Apply background, grid, spine and tick styling to one axis.

    Returns:
        ChartTheme: The resolved theme, so callers can reuse its colors.
    """
    t = get_theme(theme)
    ax.figure.set_facecolor(t.background)
    ax.set_facecolor(t.plot_background)
    ax.set_axisbelow(True)

    ax.grid(False)
    if t.show_grid_major and t.grid_major_width > 0:
        ax.grid(True, color=t.grid_major_color, linewidth=t.grid_major_width)

    show_spines = t.show_axis_lines and t.axis_line_width > 0
    for side in ("left", "bottom"):
        ax.spines[side].set_visible(show_spines)
        if show_spines:
            ax.spines[side].set_color(t.axis_line_color)
            ax.spines[side].set_linewidth(t.axis_line_width)
    ax.spines["top"].set_visible(False)
    ax.spines["right"].set_visible(False)

    ax.tick_params(
        axis="both",
        which="major",
        labelsize=t.axis_tick_font_size,
        colors=t.axis_tick_color,
    )
    ax.xaxis.label.set_size(t.axis_title_font_size)
    ax.yaxis.label.set_size(t.axis_title_font_size)
    ax.title.set_size(t.title_font_size)
    ax.title.set_color(t.title_color)
    return t


def set_sensible_ticks(ax: Axes, nbins_x: int = 6, nbins_y: int = 6) -> None:
    ax.xaxis.set_major_locator(MaxNLocator(nbins=nbins_x, min_n_ticks=3))
    ax.yaxis.set_major_locator(MaxNLocator(nbins=nbins_y, min_n_ticks=3))


def sanitize_filename(name: str) -> str:
    """Turn a column or group label into a file stem.

    Runs of characters outside ``[A-Za-z0-9_-]`` become one underscore and
    leading or trailing underscores are dropped. Dots are replaced too, so
    ``save_figure`` never mistakes part of a label for an extension.
    """
    stem = re.sub(r"[^A-Za-z0-9_-]+", "_", str(name)).strip("_")
    return stem or "figure"


def save_figure(
    fig: Figure,
    savepath_base: str | Path,
    formats: Sequence[str] = OUTPUT_FORMATS,
    dpi: int = FIGURE_DPI,
    *,
    bbox_inches: str = "tight",
    pad_inches: float = 0.12,
) -> Path:
    """Save a figure to multiple formats using one extensionless base path.

    Raises:
        ValueError: If a format outside ``OUTPUT_FORMATS`` is requested.
    """
    base = Path(savepath_base)
    if base.suffix:
        base = base.with_suffix("")
    base.parent.mkdir(parents=True, exist_ok=True)
    for ext in formats:
        if ext not in OUTPUT_FORMATS:
            raise ValueError(
                f"Unsupported extension '{ext}'. Expected one of {OUTPUT_FORMATS}."
            )
        target = base.with_suffix(f".{ext}")
        fig.savefig(
            str(target),
            dpi=dpi if ext == "png" else None,
            bbox_inches=bbox_inches,
            pad_inches=pad_inches,
            facecolor=fig.get_facecolor(),
        )
    return base.with_suffix(f".{formats[0]}") if formats else base
