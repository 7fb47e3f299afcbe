"""
Choropleth world maps for OWID datasets.

Country polygons come from Natural Earth (1:110m admin-0 countries), downloaded
once into `RAW_DIR` and joined to the dataset on ISO 3166-1 alpha-3 codes
(OWID's `code` column). OWID's own aggregates (codes starting with "OWID_",
e.g. continents and income groups) have no polygon and are dropped.
"""

from __future__ import annotations

import numbers
from pathlib import Path
from typing import Optional, Union

import geopandas as gpd
import matplotlib.pyplot as plt
import pandas as pd

from .config import RAW_DIR, WORLD_SHAPES_URL
from .fetch import time_column
from .http import _stage, get
from .plot_styles import OWID_THEME, owid_cmap, style
from .plotting import axis_label, pick_value_column


def _download_zip(url: str, dest: Path, description: str, refresh: bool = False) -> Path:
    """
    Download a ZIP file from `url` to `dest` unless it is already there.
    """
    dest.parent.mkdir(parents=True, exist_ok=True)

    if dest.exists() and not refresh:
        _stage(f"{description} cache hit: {dest}")
        return dest

    resp = get(url, what=description)
    if not resp.content:
        raise RuntimeError(f"Empty response when downloading {description} from {url}")

    dest.write_bytes(resp.content)
    _stage(f"Saved {description} ({dest.stat().st_size:,} bytes) to {dest}")
    return dest


def _iso3_codes(world: gpd.GeoDataFrame) -> pd.Series:
    """
    ISO alpha-3 code per polygon.

    Natural Earth sets ISO_A3 to "-99" for a few countries (France, Norway,
    Kosovo, ...); fall back to ISO_A3_EH, then ADM0_A3.
    """
    iso = world["ISO_A3"].astype(str) if "ISO_A3" in world.columns else pd.Series("-99", index=world.index)
    for fallback in ("ISO_A3_EH", "ADM0_A3"):
        if fallback in world.columns:
            iso = iso.where(iso != "-99", world[fallback].astype(str))
    return iso


def load_world(refresh: bool = False) -> gpd.GeoDataFrame:
    """
    Load Natural Earth country polygons with an `iso3` column.

    Parameters
    ----------
    refresh : bool, default False
        Re-download the shapes even if a local copy exists.
    """
    dest = RAW_DIR / Path(WORLD_SHAPES_URL).name
    path = _download_zip(WORLD_SHAPES_URL, dest, "Natural Earth country shapes", refresh=refresh)
    world = gpd.read_file(path)
    world["iso3"] = _iso3_codes(world)
    return world[["iso3", "geometry"]]


def _country_rows(df: pd.DataFrame, value: str) -> pd.DataFrame:
    """Rows with a country code and a value; OWID aggregates dropped."""
    rows = df.dropna(subset=["code", value])
    return rows[~rows["code"].astype(str).str.startswith("OWID_")]


def _is_calendar_year(year) -> bool:
    if isinstance(year, numbers.Integral):
        return True
    return isinstance(year, str) and len(year) == 4 and year.isdigit()


def _select_period(rows: pd.DataFrame, year: Union[int, str, None]):
    """
    Return (rows for one year or date, the period used).

    Without `year`, the latest period with country data is used. For
    day-based data a calendar year (int or "YYYY") selects that year's
    latest date; anything else is parsed as a date.
    """
    tcol = time_column(rows)
    times = rows[tcol]
    if tcol == "date":
        times = pd.to_datetime(times, errors="coerce")

    if year is None:
        period = times.max()
    elif tcol == "date" and _is_calendar_year(year):
        period = times[times.dt.year == int(year)].max()
    elif tcol == "date":
        period = pd.Timestamp(year)
    else:
        period = int(year)

    selected = rows[times == period]
    if selected.empty:
        available = times.dropna()
        if tcol == "date":
            available = available.dt.date
        raise ValueError(
            f"No data for {tcol} {year!r}; available range is "
            f"{available.min()} to {available.max()}."
        )
    return selected, period


def owid_map(
    df: pd.DataFrame,
    *,
    year: Union[int, str, None] = None,
    value: Optional[str] = None,
    palette: str = "Reds",
    title: Optional[str] = None,
    legend: bool = True,
    ax=None,
    world: Optional[gpd.GeoDataFrame] = None,
):
    """
    Choropleth world map of an OWID dataset for a single year.

    Parameters
    ----------
    df : DataFrame
        Dataset returned by `owid()`; must have a `code` column.
    year : int (or date string for day-based data), optional
        Year to map (default: the latest year with country data). For
        day-based data a year maps that year's latest date.
    value : str, optional
        Value column to map (default: the first one).
    palette : str, default "Reds"
        Matplotlib colormap name, or "owid" for the OWID palette.
    title : str, optional
        Map title (default: the chart title from ``df.attrs``).
    legend : bool, default True
        Draw a colour bar.
    ax : matplotlib Axes, optional
        Draw into an existing axis.
    world : GeoDataFrame, optional
        Country polygons with an `iso3` column (default: `load_world()`).

    Returns
    -------
    matplotlib.figure.Figure
    """
    if "code" not in df.columns:
        raise ValueError("Dataset has no 'code' column, so it cannot be joined to country shapes.")
    value = pick_value_column(df, value)
    cmap = owid_cmap(palette)

    countries = _country_rows(df, value)
    if countries.empty:
        raise ValueError(f"No country in the dataset has a '{value}' value.")
    rows, period = _select_period(countries, year)

    if world is None:
        world = load_world()
    merged = world.merge(rows[["code", "entity", value]], left_on="iso3", right_on="code", how="left")
    has_data = merged[value].notna()
    if not has_data.any():
        raise ValueError(f"None of the dataset's countries for {period} match a country shape.")

    with plt.rc_context(OWID_THEME):
        if ax is None:
            fig, ax = plt.subplots(figsize=(11, 6))
        else:
            fig = ax.figure

        if (~has_data).any():
            merged[~has_data].plot(ax=ax, **style("no_data"))
        merged[has_data].plot(
            column=value,
            cmap=cmap,
            ax=ax,
            legend=legend,
            legend_kwds={"label": axis_label(df, value), "orientation": "horizontal", "shrink": 0.5, "pad": 0.02}
            if legend
            else None,
            **style("map"),
        )

        period_label = period.date() if isinstance(period, pd.Timestamp) else period
        ax.set_title(f"{title if title is not None else df.attrs.get('title', value)}, {period_label}")
        ax.set_axis_off()

        source = df.attrs.get("url")
        if source:
            fig.text(0.01, 0.01, f"Source: Our World in Data, {source}", fontsize=7, color="#858585")
    return fig
