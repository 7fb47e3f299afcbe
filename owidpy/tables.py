"""
Helpers for combining and subsetting datasets returned by `owidpy.owid()`.
"""

from __future__ import annotations

import numbers
from typing import Iterable, Tuple, Union

import pandas as pd

from .fetch import time_column, value_columns

Years = Union[int, Tuple[int, int]]


def owid_join(left: pd.DataFrame, right: pd.DataFrame, *, how: str = "inner") -> pd.DataFrame:
    """
    Join two OWID datasets on entity and year (or date).

    Parameters
    ----------
    left, right : DataFrame
        Datasets returned by `owid()`. Both must index time the same way.
    how : {"inner", "left", "right", "outer"}, default "inner"
        Passed to `DataFrame.merge`.

    Returns
    -------
    DataFrame
        Key columns followed by the value columns of `left`, then `right`.
        ``attrs["metadata"]["columns"]`` merges both metadata sets.
    """
    tcol = time_column(left)
    if time_column(right) != tcol:
        raise ValueError(
            f"Cannot join a dataset indexed by '{tcol}' with one indexed by '{time_column(right)}'."
        )

    overlap = sorted(set(value_columns(left)) & set(value_columns(right)))
    if overlap:
        raise ValueError(
            f"Both datasets have value columns named {overlap}; rename one with owid_rename() first."
        )

    keys = ["entity", tcol]
    right_cols = keys + value_columns(right)
    if "code" in right.columns:
        right_cols.append("code")
    merged = left.merge(right[right_cols], on=keys, how=how, suffixes=("", "_right"))

    if "code_right" in merged.columns:
        if "code" in merged.columns:
            merged["code"] = merged["code"].fillna(merged["code_right"])
        else:
            merged["code"] = merged["code_right"]
        merged = merged.drop(columns=["code_right"])

    front = [c for c in ("entity", "code", tcol) if c in merged.columns]
    values = value_columns(left) + value_columns(right)
    merged = merged[front + values].sort_values(["entity", tcol], kind="mergesort").reset_index(drop=True)

    columns_meta = {}
    for df in (left, right):
        meta = df.attrs.get("metadata") or {}
        columns_meta.update(meta.get("columns") or {})
    merged.attrs = {
        "chart_id": left.attrs.get("chart_id"),
        "url": left.attrs.get("url"),
        "title": " & ".join(t for t in (left.attrs.get("title"), right.attrs.get("title")) if t),
        "value_cols": values,
        "metadata": {**(left.attrs.get("metadata") or {}), "columns": columns_meta},
        "joined": [left.attrs.get("chart_id"), right.attrs.get("chart_id")],
    }
    return merged


def filter_entities(df: pd.DataFrame, entities: Union[str, Iterable[str]]) -> pd.DataFrame:
    """Keep only the rows of the given entities (e.g. countries)."""
    if isinstance(entities, str):
        entities = [entities]
    entities = list(entities)
    missing = [e for e in entities if e not in set(df["entity"])]
    if missing:
        raise KeyError(f"Entities not in dataset: {missing}")
    out = df[df["entity"].isin(entities)].reset_index(drop=True)
    out.attrs = dict(df.attrs)
    return out


def filter_years(df: pd.DataFrame, years: Years) -> pd.DataFrame:
    """Keep a single year or an inclusive (start, end) range of years."""
    if isinstance(years, numbers.Integral):
        start, end = years, years
    else:
        start, end = years
    if start > end:
        raise ValueError(f"years range is reversed: ({start}, {end})")

    tcol = time_column(df)
    if tcol == "year":
        period = df["year"]
    else:
        period = pd.to_datetime(df["date"], errors="coerce").dt.year
    out = df[(period >= start) & (period <= end)].reset_index(drop=True)
    out.attrs = dict(df.attrs)
    return out
