"""
owidpy: a small client for Our World in Data.

This package contains utilities for:
- Searching OWID charts and downloading the data behind them as tidy
  pandas DataFrames (one row per entity and year)
- Reading the source and citation metadata published with each chart
- Plotting time series and choropleth maps in OWID's house style

Typical use:

    from owidpy import owid_search, owid, owid_plot
    owid_search("life expectancy")
    df = owid("life-expectancy")
    owid_plot(df, filter=["France", "Japan"])
"""

from .exceptions import ChartNotFoundError, LicenseError, OwidError
from .fetch import owid, owid_covid, owid_rename, parse_chart_id, value_columns, view_chart
from .plot_styles import owid_cmap, owid_palette, theme_owid
from .plotting import owid_plot
from .search import owid_search, owid_search_frame
from .source import owid_citation, owid_source
from .tables import filter_entities, filter_years, owid_join

__version__ = "0.1.0"

__all__ = [
    "ChartNotFoundError",
    "LicenseError",
    "OwidError",
    "filter_entities",
    "filter_years",
    "owid",
    "owid_citation",
    "owid_cmap",
    "owid_covid",
    "owid_join",
    "owid_map",
    "owid_palette",
    "owid_plot",
    "owid_rename",
    "owid_search",
    "owid_search_frame",
    "owid_source",
    "parse_chart_id",
    "theme_owid",
    "value_columns",
    "view_chart",
]


def owid_map(*args, **kwargs):
    """Choropleth map; see `owidpy.maps.owid_map` (imports geopandas lazily)."""
    from .maps import owid_map as _owid_map

    return _owid_map(*args, **kwargs)
