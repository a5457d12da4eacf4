"""Render precomputed engine results with matplotlib.

No statistics are computed here: every function receives the structures
returned by ``chartstats.stats`` and maps them to artists. Results carrying
the ``nan`` sentinel (empty samples) are skipped rather than drawn.
"""

from __future__ import annotations

import logging
import math
import os
from typing import Mapping, Optional, Sequence

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.axes import Axes

from ..stats import (
    BoxplotStats,
    GroupedBoxplotStats,
    HistogramBin,
    KDEPoint,
    RegressionResult,
    compute_cumulative_distribution,
    normalize_kde,
)
from .style import (
    ChartTheme,
    apply_theme,
    sanitize_filename,
    save_figure,
    set_sensible_ticks,
)

logger = logging.getLogger(__name__)

VIOLIN_WIDTH = 0.8
BOX_WIDTH = 0.5
BAND_ALPHA_CONFIDENCE = 0.25
BAND_ALPHA_PREDICTION = 0.12


def _as_stats_mapping(grouped) -> dict[str, BoxplotStats]:
    if isinstance(grouped, Mapping):
        return dict(grouped)
    out = {}
    for item in grouped:
        if isinstance(item, GroupedBoxplotStats):
            out[item.category] = item.stats
        else:
            category, stats = item
            out[str(category)] = stats
    return out


def plot_boxplot(
    ax: Axes,
    grouped,
    theme: str | ChartTheme | None = None,
    *,
    show_mean: bool = True,
) -> list[str]:
    """Draw one box per group from precomputed statistics.

    Args:
        ax: Target axis.
        grouped: ``{category: BoxplotStats}``, a list of
            ``GroupedBoxplotStats``, or ``(category, BoxplotStats)`` pairs.
        theme: Theme name or instance.
        show_mean: Mark the mean with a point.

    Returns:
        list[str]: Categories actually drawn, left to right.
    """
    t = apply_theme(ax, theme)
    stats_by_group = _as_stats_mapping(grouped)

    records = []
    labels = []
    for category, st in stats_by_group.items():
        if st.n == 0:
            logger.debug("Skipping empty group %r in box plot", category)
            continue
        records.append(
            {
                "label": category,
                "med": st.median,
                "q1": st.q1,
                "q3": st.q3,
                "whislo": st.lower_whisker,
                "whishi": st.upper_whisker,
                "fliers": list(st.outliers),
                "mean": st.mean,
            }
        )
        labels.append(category)

    if not records:
        return []

    ax.bxp(
        records,
        widths=BOX_WIDTH,
        showmeans=show_mean,
        patch_artist=True,
        boxprops={"facecolor": t.box_fill_color, "edgecolor": t.box_stroke_color},
        medianprops={"color": t.median_color, "linewidth": 2.0},
        whiskerprops={"color": t.box_stroke_color},
        capprops={"color": t.box_stroke_color},
        flierprops={
            "marker": "o",
            "markerfacecolor": t.highlight_color,
            "markeredgecolor": t.highlight_color,
            "markersize": 4,
        },
        meanprops={
            "marker": "D",
            "markerfacecolor": t.mean_color,
            "markeredgecolor": t.mean_color,
            "markersize": 5,
        },
    )
    return labels


def plot_histogram(
    ax: Axes,
    bins: Sequence[HistogramBin],
    theme: str | ChartTheme | None = None,
    *,
    density: bool = False,
    show_cumulative: bool = False,
    label: Optional[str] = None,
    color: Optional[str] = None,
) -> Optional[Axes]:
    """Draw histogram bars from precomputed bins.

    Args:
        density: Plot ``density`` instead of ``count`` on the y axis.
        show_cumulative: Overlay the cumulative frequency on a twin axis.

    Returns:
        matplotlib.axes.Axes | None: The twin axis when the cumulative curve is
        drawn, otherwise ``None``.
    """
    t = apply_theme(ax, theme)
    if not bins:
        return None

    lefts = [b.x0 for b in bins]
    widths = [b.x1 - b.x0 for b in bins]
    heights = [b.density if density else b.count for b in bins]
    ax.bar(
        lefts,
        heights,
        width=widths,
        align="edge",
        color=color or t.bar_fill_color,
        edgecolor=t.background,
        linewidth=0.6,
        label=label,
        alpha=0.85 if color else 1.0,
    )
    ax.set_ylabel("Density" if density else "Count")
    set_sensible_ticks(ax)

    if not show_cumulative:
        return None

    cumulative = compute_cumulative_distribution(bins)
    twin = ax.twinx()
    xs = [bins[0].x0] + [c.x for c in cumulative]
    ys = [0.0] + [c.cumulative for c in cumulative]
    twin.plot(xs, ys, color=t.line_color, linewidth=1.6)
    twin.set_ylim(0.0, 1.05)
    twin.set_ylabel("Cumulative frequency")
    twin.spines["top"].set_visible(False)
    return twin


def plot_violin(
    ax: Axes,
    kde_by_group: Mapping[str, Sequence[KDEPoint]],
    theme: str | ChartTheme | None = None,
    *,
    max_width: float = VIOLIN_WIDTH,
    boxplots: Optional[Mapping[str, BoxplotStats]] = None,
) -> list[str]:
    """Draw mirrored density outlines, one violin per group.

    Densities are peak-normalized per group so every violin spans
    ``max_width`` at its widest point. When ``boxplots`` is given, the
    interquartile range and median of each group are overlaid.

    Returns:
        list[str]: Categories drawn, in position order starting at 0.
    """
    t = apply_theme(ax, theme)
    half = max_width / 2.0
    labels = []
    for category, points in kde_by_group.items():
        if not points:
            continue
        center = len(labels)
        normalized = normalize_kde(points)
        ys = np.array([p.x for p in normalized])
        widths = np.array([p.density for p in normalized]) * half
        ax.fill_betweenx(
            ys,
            center - widths,
            center + widths,
            facecolor=t.violin_fill_color,
            edgecolor=t.violin_stroke_color,
            linewidth=1.0,
            alpha=0.85,
        )
        st = boxplots.get(category) if boxplots else None
        if st is not None and st.n > 0:
            ax.vlines(center, st.q1, st.q3, color=t.box_stroke_color, linewidth=4.0)
            ax.plot(center, st.median, "o", color=t.median_color, markersize=4)
        labels.append(category)

    ax.set_xticks(range(len(labels)))
    ax.set_xticklabels(labels)
    return labels


def plot_regression(
    ax: Axes,
    x: Sequence[float],
    y: Sequence[float],
    result: Optional[RegressionResult],
    theme: str | ChartTheme | None = None,
    *,
    show_bands: bool = True,
    annotate: bool = True,
) -> None:
    """Scatter the data and overlay a fitted trend line with its bands.

    The prediction band is drawn beneath the narrower confidence band. The
    equation and R^2 are annotated in the upper-left corner when available.
    """
    t = apply_theme(ax, theme)
    ax.scatter(x, y, s=18, color=t.point_fill_color, alpha=0.75, zorder=3)
    set_sensible_ticks(ax)
    if result is None:
        return

    if show_bands and result.prediction_band:
        band = result.prediction_band
        ax.fill_between(
            [p.x for p in band],
            [p.lower for p in band],
            [p.upper for p in band],
            color=t.line_color,
            alpha=BAND_ALPHA_PREDICTION,
            linewidth=0,
            label="Prediction band",
        )
    if show_bands and result.confidence_band:
        band = result.confidence_band
        ax.fill_between(
            [p.x for p in band],
            [p.lower for p in band],
            [p.upper for p in band],
            color=t.line_color,
            alpha=BAND_ALPHA_CONFIDENCE,
            linewidth=0,
            label="Confidence band",
        )

    if result.curve:
        ax.plot(
            [p.x for p in result.curve],
            [p.y for p in result.curve],
            color=t.line_color,
            linewidth=2.0,
            zorder=4,
            label=result.type.capitalize(),
        )

    if annotate:
        lines = [result.equation] if result.equation else []
        if not math.isnan(result.r_squared):
            lines.append(f"R² = {result.r_squared:.4f}")
        if lines:
            ax.text(
                0.02,
                0.98,
                "\n".join(lines),
                transform=ax.transAxes,
                ha="left",
                va="top",
                fontsize=9,
                color=t.title_color,
            )


def plot_statistical_summary(
    summaries: Mapping[str, Mapping[str, object]],
    output_dir: str = "output",
    *,
    theme: str | ChartTheme | None = None,
    regression: Optional[RegressionResult] = None,
    x: Optional[Sequence[float]] = None,
    y: Optional[Sequence[float]] = None,
    value_label: str = "Value",
    name: str = "statistical_summary",
) -> str:
    """Compose box, histogram, violin and regression panels into one figure.

    Args:
        summaries: Output of ``analysis.summarize_groups``.
        output_dir: Directory where the PNG, PDF and SVG files are written.
        name: File stem, passed through ``sanitize_filename``.
        regression, x, y: Optional fitted trend line and its data; the fourth
            panel notes when no fit is available.

    Returns:
        str: Path of the saved PNG.
    """
    fig, axes = plt.subplots(2, 2, figsize=(11.0, 8.0))
    ax_box, ax_hist, ax_violin, ax_reg = axes.ravel()

    plot_boxplot(ax_box, {g: s["boxplot"] for g, s in summaries.items()}, theme)
    ax_box.set_title("Box plot")
    ax_box.set_ylabel(value_label)

    t = apply_theme(ax_hist, theme)
    for idx, (group, s) in enumerate(summaries.items()):
        color = t.color_for(idx) if len(summaries) > 1 else None
        plot_histogram(ax_hist, s["histogram"], t, density=True, label=group, color=color)
    if len(summaries) > 1:
        ax_hist.legend(frameon=False, fontsize=8)
    ax_hist.set_title("Histogram")
    ax_hist.set_xlabel(value_label)

    plot_violin(
        ax_violin,
        {g: s["kde"] for g, s in summaries.items()},
        theme,
        boxplots={g: s["boxplot"] for g, s in summaries.items()},
    )
    ax_violin.set_title("Violin plot")
    ax_violin.set_ylabel(value_label)

    if regression is not None and x is not None and y is not None:
        plot_regression(ax_reg, x, y, regression, theme)
        ax_reg.set_title("Regression")
    else:
        apply_theme(ax_reg, theme)
        ax_reg.text(
            0.5,
            0.5,
            "No regression fitted",
            transform=ax_reg.transAxes,
            ha="center",
            va="center",
        )
        ax_reg.set_xticks([])
        ax_reg.set_yticks([])

    fig.tight_layout()
    png = save_figure(fig, os.path.join(output_dir, sanitize_filename(name)))
    plt.close(fig)
    logger.info("Saved statistical summary figure to %s", png)
    return str(png)
