# sheet_nester/plotting.py
# Minimal matplotlib visualization: draw all boards in one figure.
# Parts are drawn at their real size; the kerf margin is left blank.

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import matplotlib.pyplot as plt
from matplotlib.patches import Rectangle

from .board import Board


@dataclass(frozen=True)
class PlotStyle:
    show_labels: bool = True
    show_dims: bool = True
    show_free_rects: bool = False
    show_grid: bool = False
    font_size: int = 7
    padding_mm: int = 20  # empty margin around each sheet in drawing units
    max_cols: int = 2     # layout of multiple boards in a single figure


def _hash_color(key: str) -> Tuple[float, float, float]:
    """Deterministic pastel-ish color from a string."""
    h = 2166136261
    for ch in key.encode("utf-8"):
        h ^= ch
        h *= 16777619
        h &= 0xFFFFFFFF
    # map to [0.3..0.9] range for readability
    r = 0.3 + ((h >> 0) & 0xFF) / 255 * 0.6
    g = 0.3 + ((h >> 8) & 0xFF) / 255 * 0.6
    b = 0.3 + ((h >> 16) & 0xFF) / 255 * 0.6
    return (r, g, b)


def _board_title(board: Board, index: int) -> str:
    return " | ".join(
        [
            f"Board {index + 1}",
            board.material,
            f"{board.stock_width:g}×{board.stock_height:g}",
            f"{len(board.parts)} parts",
            f"efficiency {board.efficiency_percentage():.1f}%",
        ]
    )


def plot_boards(
    boards: Sequence[Board],
    style: Optional[PlotStyle] = None,
    figsize: Optional[Tuple[float, float]] = None,
) -> plt.Figure:
    """
    Draw all boards in one matplotlib figure.
    Coordinates are sheet coordinates (0..stock_width, 0..stock_height).
    """
    style = style or PlotStyle()

    n = len(boards)
    if n == 0:
        raise ValueError("No boards to plot")

    cols = min(style.max_cols, n)
    rows = (n + cols - 1) // cols

    if figsize is None:
        # heuristic sizing: ~6x4 per board
        figsize = (6 * cols, 4.5 * rows)

    fig, axes = plt.subplots(rows, cols, figsize=figsize, squeeze=False)
    ax_list: List[plt.Axes] = list(axes.ravel())

    for ax in ax_list[n:]:
        ax.axis("off")

    for idx, board in enumerate(boards):
        ax = ax_list[idx]
        W, H = board.stock_width, board.stock_height

        ax.add_patch(Rectangle((0, 0), W, H, fill=False, linewidth=1.2))

        if style.show_free_rects:
            for fr in board.free_rectangles:
                ax.add_patch(
                    Rectangle((fr.x, fr.y), fr.width, fr.height, fill=False, linewidth=0.5, linestyle=":")
                )

        for p in board.parts:
            color = _hash_color(p.name)
            ax.add_patch(Rectangle((p.x, p.y), p.width, p.height, facecolor=color, edgecolor="black", linewidth=0.8))

            if style.show_labels or style.show_dims:
                lines: List[str] = []
                if style.show_labels:
                    lines.append(p.instance_id or p.name)
                if style.show_dims:
                    lines.append(f"{p.width:g}×{p.height:g}" + (" R" if p.rotated else ""))
                ax.text(
                    p.x + p.width / 2,
                    p.y + p.height / 2,
                    "\n".join(lines),
                    ha="center",
                    va="center",
                    fontsize=style.font_size,
                    color="black",
                )

        ax.set_title(_board_title(board, idx), fontsize=10)
        ax.set_aspect("equal", adjustable="box")

        pad = style.padding_mm
        ax.set_xlim(-pad, W + pad)
        ax.set_ylim(-pad, H + pad)
        ax.grid(bool(style.show_grid), linewidth=0.3)
        ax.tick_params(labelbottom=False, labelleft=False, bottom=False, left=False)

    fig.tight_layout()
    return fig


def show_boards(boards: Sequence[Board], style: Optional[PlotStyle] = None) -> None:
    """Convenience wrapper: plot and show."""
    plot_boards(boards, style=style)
    plt.show()


def save_boards_png(
    boards: Sequence[Board],
    path: str,
    style: Optional[PlotStyle] = None,
    dpi: int = 200,
) -> None:
    fig = plot_boards(boards, style=style)
    fig.savefig(path, dpi=dpi, bbox_inches="tight")
    plt.close(fig)
