"""
Central styling for OWID-style charts and maps.

Use style(role) for line/scatter/map calls and owid_palette() whenever a list
of colours is needed. Colours come from one OWID_COLORS palette, the same
categorical scheme used on ourworldindata.org charts. theme_owid(ax) applies
the house look (light grid, no box, muted axis text) to an existing axis.
"""

from __future__ import annotations

from itertools import cycle, islice

from cycler import cycler
from matplotlib import colormaps
from matplotlib.colors import ListedColormap, to_rgba

# --- OWID categorical palette ("OwidDistinct"), in the order charts use it ---
OWID_COLORS = [
    "#6D3E91",
    "#C05917",
    "#58AC8C",
    "#286BBB",
    "#883039",
    "#BC8E5A",
    "#00295B",
    "#C15065",
    "#18470F",
    "#9A5129",
    "#E56E5A",
    "#A2559C",
    "#38AABA",
    "#578145",
    "#970046",
    "#00847E",
    "#B13507",
    "#4C6A9C",
    "#CF0A66",
    "#00875E",
    "#B16214",
    "#8C4569",
    "#3B8E1D",
    "#D73C50",
]

TEXT_COLOR = "#5B5B5B"
GRID_COLOR = "#DDDDDD"
NO_DATA_COLOR = "#E9E9E9"
BORDER_COLOR = "#FFFFFF"

# --- Base styles (kwargs for ax.plot / GeoDataFrame.plot) ---
LINE_STYLE = {
    "linewidth": 1.5,
    "alpha": 0.9,
    "zorder": 2,
}

SUMMARY_STYLE = {
    "linewidth": 2.5,
    "color": OWID_COLORS[3],
    "zorder": 3,
}

MAP_STYLE = {
    "edgecolor": BORDER_COLOR,
    "linewidth": 0.3,
}

NO_DATA_STYLE = {
    "color": NO_DATA_COLOR,
    "edgecolor": BORDER_COLOR,
    "linewidth": 0.3,
    "hatch": "///",
}

ROLE_BASES = {
    "line": LINE_STYLE,
    "summary": SUMMARY_STYLE,
    "map": MAP_STYLE,
    "no_data": NO_DATA_STYLE,
}

# rcParams applied by theme_owid (and usable with plt.rc_context)
OWID_THEME = {
    "font.size": 10,
    "axes.titlesize": 13,
    "axes.titleweight": "bold",
    "axes.titlelocation": "left",
    "axes.labelcolor": TEXT_COLOR,
    "axes.edgecolor": GRID_COLOR,
    "axes.grid": True,
    "axes.grid.axis": "y",
    "grid.color": GRID_COLOR,
    "grid.linestyle": "--",
    "grid.linewidth": 0.8,
    "xtick.color": TEXT_COLOR,
    "ytick.color": TEXT_COLOR,
    "legend.frameon": False,
}


def owid_palette(alpha: float = 1.0, n: int | None = None) -> list[tuple[float, float, float, float]]:
    """
    Return OWID colours as RGBA tuples.

    - alpha: transparency in [0, 1] applied to every colour
    - n: number of colours (default: the whole palette); cycles past its end
    """
    if not 0.0 <= float(alpha) <= 1.0:
        raise ValueError(f"alpha must be between 0 and 1, got {alpha}")
    if n is None:
        n = len(OWID_COLORS)
    if n < 0:
        raise ValueError(f"n must be non-negative, got {n}")
    return [to_rgba(c, alpha=alpha) for c in islice(cycle(OWID_COLORS), n)]


def owid_color_cycle(alpha: float = 1.0):
    """Property cycle for ax.set_prop_cycle(...) using the OWID palette."""
    return cycler(color=owid_palette(alpha))


def owid_cmap(name: str = "Reds", n: int | None = None):
    """
    Return a colormap for choropleths.

    - name: "owid" for the categorical palette, otherwise any matplotlib
      colormap name (e.g. "Reds", "Blues", "viridis")
    - n: optional number of discrete bins
    """
    if name == "owid":
        colors = owid_palette(n=n) if n else owid_palette()
        return ListedColormap(colors, name="owid")
    if name not in colormaps:
        raise ValueError(f"Unknown palette: {name!r}")
    cmap = colormaps[name]
    return cmap.resampled(n) if n else cmap


def style(role: str, *, color=None, label: str | None = None) -> dict:
    """
    Return a single style dict for ax.plot(...) or GeoDataFrame.plot(...).

    - role: "line" | "summary" | "map" | "no_data"
    - color: optional colour override
    - label: optional legend label

    Example: ax.plot(x, y, **style("line", color=palette[0], label="France"))
    """
    base = ROLE_BASES.get(role)
    if base is None:
        raise ValueError(f"Unknown role: {role}")
    out = dict(base)
    if color is not None:
        out["color"] = color
    if label is not None:
        out["label"] = label
    return out


def theme_owid(ax) -> None:
    """Apply the OWID look to an existing axis."""
    ax.set_prop_cycle(owid_color_cycle())
    ax.grid(True, axis="y", color=GRID_COLOR, linestyle="--", linewidth=0.8)
    ax.grid(False, axis="x")
    ax.set_axisbelow(True)
    for side in ("top", "right", "left"):
        ax.spines[side].set_visible(False)
    ax.spines["bottom"].set_color(GRID_COLOR)
    ax.tick_params(colors=TEXT_COLOR, length=0)
    ax.title.set_color("#333333")
