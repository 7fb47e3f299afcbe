"""
Time-series charts for OWID datasets.

owid_plot() accepts a dataset returned by `owid()` and returns a matplotlib
Figure, so notebooks can stay declarative and callers can keep customising
the axis afterwards.
"""

from __future__ import annotations

from typing import Iterable, Optional, Union

import matplotlib.pyplot as plt
import pandas as pd

from .fetch import time_column, value_columns
from .plot_styles import OWID_THEME, owid_palette, style, theme_owid
from .tables import Years, filter_entities, filter_years


def pick_value_column(df: pd.DataFrame, value: Optional[str]) -> str:
    values = value_columns(df)
    if not values:
        raise ValueError("Dataset has no value columns to plot.")
    if value is None:
        return values[0]
    if value not in values:
        raise KeyError(f"{value!r} is not a value column. Value columns: {values}")
    return value


def axis_label(df: pd.DataFrame, value: str) -> str:
    """y-axis label from column metadata (title and unit) where available."""
    meta = ((df.attrs.get("metadata") or {}).get("columns") or {}).get(value) or {}
    title = meta.get("titleShort") or value
    unit = meta.get("shortUnit") or meta.get("unit") or ""
    return f"{title} ({unit})" if unit else title


def summarise_mean(df: pd.DataFrame, value: str) -> pd.Series:
    """Mean of `value` across entities, per year (or date); NaNs ignored."""
    tcol = time_column(df)
    return df.groupby(tcol)[value].mean().dropna().sort_index()


def owid_plot(
    df: pd.DataFrame,
    *,
    filter: Union[str, Iterable[str], None] = None,
    summarise: bool = True,
    years: Optional[Years] = None,
    value: Optional[str] = None,
    title: Optional[str] = None,
    ax=None,
):
    """
    Line chart of an OWID dataset over time.

    Parameters
    ----------
    df : DataFrame
        Dataset returned by `owid()`.
    filter : str or list of str, optional
        Entities to draw, one line each.
    summarise : bool, default True
        Only used without `filter`: if True draw a single line with the mean
        across all entities; if False draw one line per entity.
    years : int or (int, int), optional
        Restrict the chart to a year or an inclusive range of years.
    value : str, optional
        Value column to plot (default: the first one).
    title : str, optional
        Chart title (default: the chart's title from ``df.attrs``).
    ax : matplotlib Axes, optional
        Draw into an existing axis instead of a new figure.

    Returns
    -------
    matplotlib.figure.Figure
    """
    value = pick_value_column(df, value)
    tcol = time_column(df)

    data = df
    if filter is not None:
        data = filter_entities(data, filter)
    if years is not None:
        data = filter_years(data, years)
    data = data.dropna(subset=[value])
    if data.empty:
        raise ValueError("Nothing to plot: no data left after filtering.")

    with plt.rc_context(OWID_THEME):
        if ax is None:
            fig, ax = plt.subplots(figsize=(9, 5.5))
        else:
            fig = ax.figure
        theme_owid(ax)

        if filter is None and summarise:
            series = summarise_mean(data, value)
            n_entities = data["entity"].nunique()
            ax.plot(series.index, series.values, **style("summary", label=f"Mean of {n_entities} entities"))
        else:
            entities = list(dict.fromkeys(data["entity"]))
            colors = owid_palette(n=len(entities))
            for entity, color in zip(entities, colors):
                rows = data[data["entity"] == entity].sort_values(tcol)
                ax.plot(rows[tcol], rows[value], **style("line", color=color, label=entity))

        ax.set_title(title if title is not None else df.attrs.get("title", value))
        ax.set_xlabel("Date" if tcol == "date" else "Year")
        ax.set_ylabel(axis_label(df, value))

        n_lines = len(ax.get_lines())
        if 1 < n_lines <= 12 or (filter is None and summarise):
            ax.legend(loc="upper left", fontsize=8)

        source = df.attrs.get("url")
        if source:
            fig.text(0.01, 0.01, f"Source: Our World in Data, {source}", fontsize=7, color="#858585")
        fig.tight_layout(rect=(0, 0.03, 1, 1))
    return fig
