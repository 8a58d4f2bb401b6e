"""Shared visualization style and color palette."""

from __future__ import annotations

COLORS = {
    "treated": "#E07A5F",
    "control": "#3D405B",
    "control_raw": "#A8DADC",
    "pre": "#81B29A",
    "post": "#F2CC8F",
    "highlight": "#E63946",
}

# CI z-values -- avoids scipy dependency
Z_VALUES = {
    0.80: 1.282,
    0.90: 1.645,
    0.95: 1.960,
    0.99: 2.576,
}

_TITLE_LOC = {"center": "center", "left": "left"}


def get_z(ci: float) -> float:
    """Get z-value for a confidence level."""
    if ci in Z_VALUES:
        return Z_VALUES[ci]
    raise ValueError(f"Unsupported CI level: {ci}. Use one of {list(Z_VALUES.keys())}")


def apply_style(
    title_pos: str = "center",
    axis_title_pos: str = "left",
    slides: bool = False,
    base_size: float = 14,
) -> None:
    """Apply the stacked-did matplotlib theme.

    Sans-serif body text with a bold serif title, italic axis titles, no grid,
    grey axis lines and a transparent background.

    Parameters
    ----------
    title_pos : {"center", "left"}
        Alignment of the figure title.
    axis_title_pos : {"center", "left"}
        "left" puts the x label on the left and the y label at the top.
    slides : bool
        Use a light grey (#ECECEC) background for slides.
    base_size : float
        Base font size; titles, labels and ticks scale from it.
    """
    import matplotlib.pyplot as plt

    if title_pos not in _TITLE_LOC:
        raise ValueError(f"title_pos must be 'center' or 'left', got {title_pos!r}")
    if axis_title_pos not in ("center", "left"):
        raise ValueError(f"axis_title_pos must be 'center' or 'left', got {axis_title_pos!r}")

    background = "#ECECEC" if slides else "none"

    plt.rcParams.update({
        "figure.figsize": (10, 6),
        "figure.dpi": 100,
        "figure.facecolor": background,
        "axes.facecolor": background,
        "savefig.facecolor": background,
        "font.family": "sans-serif",
        "font.sans-serif": ["Fira Sans", "DejaVu Sans"],
        "font.serif": ["Noto Serif", "DejaVu Serif"],
        "font.size": base_size,
        "axes.titlesize": base_size * 1.285,
        "axes.titleweight": "bold",
        "axes.titlelocation": _TITLE_LOC[title_pos],
        "axes.titlepad": 16,
        "axes.labelsize": base_size * 0.86,
        "axes.labelpad": 10,
        "xaxis.labellocation": "left" if axis_title_pos == "left" else "center",
        "yaxis.labellocation": "top" if axis_title_pos == "left" else "center",
        "axes.spines.top": False,
        "axes.spines.right": False,
        "axes.edgecolor": "#666666",
        "axes.grid": False,
        "xtick.labelsize": base_size * 0.72,
        "ytick.labelsize": base_size * 0.72,
        "legend.fontsize": base_size * 0.72,
        "legend.title_fontsize": base_size * 0.86,
        "legend.frameon": False,
    })


def style_title(ax, title: str, subtitle: str | None = None) -> None:
    """Set a serif bold title and optional italic subtitle on ``ax``."""
    ax.set_title(title, fontfamily="serif", fontweight="bold", pad=24 if subtitle else 16)
    if subtitle:
        ax.text(
            0.5, 1.02, subtitle,
            transform=ax.transAxes, ha="center", va="bottom",
            fontfamily="serif", fontstyle="italic",
        )


def style_axis_labels(ax, xlabel: str, ylabel: str) -> None:
    """Set italic axis titles on ``ax``."""
    ax.set_xlabel(xlabel, fontstyle="italic")
    ax.set_ylabel(ylabel, fontstyle="italic")
