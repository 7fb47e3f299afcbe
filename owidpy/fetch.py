"""
Download OWID grapher charts and reshape them into tidy DataFrames.

Every published chart on ourworldindata.org serves its data at
`/grapher/<chart_id>.csv` and its metadata at `/grapher/<chart_id>.metadata.json`.
This module:
- Fetches the CSV and normalises the key columns to `entity`, `code`, `year`
  (or `date` for day-based charts), keeping the value columns after them.
- Optionally fetches the metadata JSON and stores it in `df.attrs`, where
  `owidpy.source` and the plotting helpers pick it up.
- Provides helpers to rename value columns and open a chart in the browser.
"""

from __future__ import annotations

import io
import webbrowser
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

import pandas as pd

from .config import COVID_URL, GRAPHER_URL
from .http import get, get_json

KEY_COLUMNS = ("entity", "code", "year", "date")
RAW_KEY_NAMES = {"Entity": "entity", "Code": "code", "Year": "year", "Day": "date"}

Rename = Union[str, Sequence[str], Mapping[str, str]]


def parse_chart_id(chart_id: str) -> str:
    """Extract the chart slug from a grapher URL, or return the slug as-is."""
    chart_id = str(chart_id).strip()
    marker = "ourworldindata.org/grapher/"
    if marker in chart_id:
        path = chart_id.split(marker, 1)[1]
        return path.split("?")[0].split("#")[0].rstrip("/")
    if chart_id.startswith(("http://", "https://")):
        raise ValueError(
            "URL must be a grapher URL, e.g. https://ourworldindata.org/grapher/life-expectancy"
        )
    if not chart_id:
        raise ValueError("chart_id must be a non-empty string.")
    return chart_id


def chart_url(chart_id: str) -> str:
    return f"{GRAPHER_URL}/{parse_chart_id(chart_id)}"


def value_columns(df: pd.DataFrame) -> List[str]:
    """Return the non-key columns of a dataset, in order."""
    return [c for c in df.columns if c not in KEY_COLUMNS]


def time_column(df: pd.DataFrame) -> str:
    """Return 'year' or 'date', whichever indexes time in `df`."""
    for col in ("year", "date"):
        if col in df.columns:
            return col
    raise KeyError("Dataset has neither a 'year' nor a 'date' column.")


def _tidy_frame(df: pd.DataFrame, tidy_date: bool = True) -> pd.DataFrame:
    """Normalise key column names, parse dates, sort and check uniqueness."""
    df = df.rename(columns=RAW_KEY_NAMES)

    # Some charts report full dates under the "Year" header.
    if "year" in df.columns and df["year"].astype(str).str.match(r"^\d{4}-\d{2}-\d{2}$").all():
        df = df.rename(columns={"year": "date"})

    if "date" in df.columns and tidy_date:
        df["date"] = pd.to_datetime(df["date"], errors="coerce")

    keys = [c for c in KEY_COLUMNS if c in df.columns]
    df = df[keys + value_columns(df)]

    tcol = time_column(df)
    if "entity" not in df.columns:
        raise ValueError("Dataset has no 'entity' column.")
    dupes = df.duplicated(subset=["entity", tcol])
    if dupes.any():
        example = df.loc[dupes, ["entity", tcol]].iloc[0].tolist()
        raise ValueError(f"Dataset has more than one row per (entity, {tcol}), e.g. {example}.")

    return df.sort_values(["entity", tcol], kind="mergesort").reset_index(drop=True)


def _rename_mapping(df: pd.DataFrame, rename: Rename) -> Dict[str, str]:
    values = value_columns(df)
    if isinstance(rename, str):
        if len(values) != 1:
            raise ValueError(
                f"A single name can only rename a dataset with one value column; "
                f"this one has {len(values)}: {values}. Pass a list or a dict instead."
            )
        return {values[0]: rename}
    if isinstance(rename, Mapping):
        unknown = [k for k in rename if k not in values]
        if unknown:
            raise KeyError(f"Not value columns of this dataset: {unknown}. Value columns: {values}")
        return dict(rename)

    names = list(rename)
    if len(names) != len(values):
        raise ValueError(
            f"Got {len(names)} names for {len(values)} value columns ({values})."
        )
    return dict(zip(values, names))


def owid_rename(df: pd.DataFrame, rename: Rename) -> pd.DataFrame:
    """
    Rename the value columns of a dataset.

    Parameters
    ----------
    df : DataFrame
        Dataset returned by `owid()`.
    rename : str, sequence of str, or mapping
        A single new name (only for one-value datasets), a list of names in
        value-column order, or an explicit ``{old: new}`` mapping.

    Returns
    -------
    DataFrame
        Copy of `df` with renamed value columns; metadata in ``attrs`` follows.
    """
    mapping = _rename_mapping(df, rename)
    clash = [new for new in mapping.values() if new in KEY_COLUMNS]
    if clash:
        raise ValueError(f"Value columns cannot be renamed to key column names: {clash}")
    new_names = [mapping.get(c, c) for c in value_columns(df)]
    repeated = sorted({n for n in new_names if new_names.count(n) > 1})
    if repeated:
        raise ValueError(f"Renaming would give several value columns the same name: {repeated}")

    out = df.rename(columns=mapping)
    out.attrs = dict(df.attrs)

    meta = df.attrs.get("metadata")
    if isinstance(meta, dict) and isinstance(meta.get("columns"), dict):
        columns = {mapping.get(k, k): v for k, v in meta["columns"].items()}
        out.attrs["metadata"] = {**meta, "columns": columns}
    out.attrs["value_cols"] = value_columns(out)
    return out


def fetch_metadata(chart_id: str) -> Dict[str, Any]:
    """Download the metadata JSON published alongside a chart."""
    slug = parse_chart_id(chart_id)
    return get_json(f"{GRAPHER_URL}/{slug}.metadata.json", what=f"metadata for '{slug}'")


def owid(
    chart_id: str,
    rename: Optional[Rename] = None,
    *,
    tidy_date: bool = True,
    metadata: bool = True,
) -> pd.DataFrame:
    """
    Download the data behind an OWID chart.

    Parameters
    ----------
    chart_id : str
        Chart slug as returned by `owid_search` (e.g. "life-expectancy"), or
        a full grapher URL.
    rename : str, sequence or mapping, optional
        New names for the value columns (see `owid_rename`).
    tidy_date : bool, default True
        Parse the `date` column of day-based charts into datetimes.
    metadata : bool, default True
        Also download the chart's metadata (source, citation, units).

    Returns
    -------
    DataFrame
        Columns `entity`, `code`, `year` (or `date`), then one column per
        indicator; one row per entity and year. ``attrs`` holds `chart_id`,
        `url`, `title`, `value_cols` and, if requested, `metadata`.

    Raises
    ------
    ChartNotFoundError
        If no chart exists under `chart_id`.
    LicenseError
        If the chart's data is not redistributable.
    """
    slug = parse_chart_id(chart_id)
    resp = get(
        f"{GRAPHER_URL}/{slug}.csv",
        params={"useColumnShortNames": "true"},
        what=f"chart '{slug}'",
    )
    df = _tidy_frame(pd.read_csv(io.StringIO(resp.text)), tidy_date=tidy_date)

    df.attrs["chart_id"] = slug
    df.attrs["url"] = chart_url(slug)
    df.attrs["title"] = slug.replace("-", " ").capitalize()
    df.attrs["value_cols"] = value_columns(df)

    if metadata:
        meta = fetch_metadata(slug)
        df.attrs["metadata"] = meta
        title = (meta.get("chart") or {}).get("title")
        if title:
            df.attrs["title"] = title

    if rename is not None:
        df = owid_rename(df, rename)
    return df


def owid_covid(*, tidy_date: bool = True) -> pd.DataFrame:
    """
    Download OWID's COVID-19 dataset (compact version).

    Returns
    -------
    DataFrame
        Columns `entity`, `code` (when published), `date`, then one column
        per COVID-19 indicator; one row per entity and date.
    """
    resp = get(COVID_URL, what="COVID-19 dataset")
    df = pd.read_csv(io.StringIO(resp.text))
    df = df.rename(columns={"country": "entity", "location": "entity", "iso_code": "code"})
    df = _tidy_frame(df, tidy_date=tidy_date)
    df.attrs["chart_id"] = None
    df.attrs["url"] = COVID_URL
    df.attrs["title"] = "COVID-19 pandemic"
    df.attrs["value_cols"] = value_columns(df)
    return df


def view_chart(chart: Union[str, pd.DataFrame]) -> str:
    """Open the interactive version of a chart in the web browser; return its URL."""
    if isinstance(chart, pd.DataFrame):
        slug = chart.attrs.get("chart_id")
        if not slug:
            raise ValueError("This dataset carries no chart_id; pass the chart id instead.")
        chart = slug
    url = chart_url(chart)
    webbrowser.open(url)
    return url
