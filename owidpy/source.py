"""
Publisher and citation information for OWID datasets.

The metadata JSON published next to every grapher chart looks like::

    {
      "chart": {"title": ..., "subtitle": ..., "citation": ..., "originalChartUrl": ...},
      "columns": {<short name>: {"titleShort": ..., "unit": ..., "citationShort": ..., ...}},
      "dateDownloaded": "YYYY-MM-DD"
    }

`owid()` stores it in ``df.attrs["metadata"]``; this module turns it into a
`SourceInfo` object that prints as readable text.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List

import pandas as pd

from .fetch import chart_url, fetch_metadata


@dataclass
class ColumnSource:
    """Source details for one value column."""

    name: str
    title: str = ""
    unit: str = ""
    description: str = ""
    citation_short: str = ""
    citation_long: str = ""
    timespan: str = ""
    last_updated: str = ""
    next_update: str = ""

    @classmethod
    def from_metadata(cls, name: str, meta: Dict[str, Any]) -> "ColumnSource":
        return cls(
            name=name,
            title=meta.get("titleShort") or meta.get("titleLong") or name,
            unit=meta.get("unit") or meta.get("shortUnit") or "",
            description=meta.get("descriptionShort") or "",
            citation_short=meta.get("citationShort") or "",
            citation_long=meta.get("citationLong") or "",
            timespan=meta.get("timespan") or "",
            last_updated=meta.get("lastUpdated") or "",
            next_update=meta.get("nextUpdate") or "",
        )


@dataclass
class SourceInfo:
    """Container for the source information of a dataset."""

    title: str
    url: str
    citation: str = ""
    subtitle: str = ""
    date_downloaded: str = ""
    columns: List[ColumnSource] = field(default_factory=list)

    def __str__(self) -> str:
        lines = [self.title]
        if self.subtitle:
            lines.append(self.subtitle)
        lines.append(f"URL: {self.url}")
        for col in self.columns:
            lines.append("")
            header = f"{col.name}: {col.title}"
            if col.unit:
                header += f" ({col.unit})"
            lines.append(header)
            if col.description:
                lines.append(f"  {col.description}")
            if col.citation_short:
                lines.append(f"  Source: {col.citation_short}")
            if col.timespan:
                lines.append(f"  Time span: {col.timespan}")
            if col.last_updated:
                updated = f"  Last updated: {col.last_updated}"
                if col.next_update:
                    updated += f" (next update: {col.next_update})"
                lines.append(updated)
        if self.citation:
            lines += ["", f"Citation: {self.citation}"]
        if self.date_downloaded:
            lines.append(f"Downloaded: {self.date_downloaded}")
        return "\n".join(lines)


def _metadata_for(df: pd.DataFrame) -> Dict[str, Any]:
    meta = df.attrs.get("metadata")
    if meta:
        return meta
    chart_id = df.attrs.get("chart_id")
    if not chart_id:
        raise ValueError(
            "Dataset carries no source metadata. Fetch it with owid(chart_id) "
            "(metadata=True) to keep source information."
        )
    return fetch_metadata(chart_id)


def owid_source(df: pd.DataFrame) -> SourceInfo:
    """
    Extract source information from a dataset returned by `owid()`.

    If the metadata was not downloaded with the data (``metadata=False``),
    it is fetched now using the chart id stored in ``df.attrs``.
    """
    meta = _metadata_for(df)
    chart = meta.get("chart") or {}
    columns_meta = meta.get("columns") or {}

    chart_id = df.attrs.get("chart_id")
    url = chart.get("originalChartUrl") or df.attrs.get("url") or (chart_url(chart_id) if chart_id else "")

    # Report value columns in dataset order; metadata for dropped columns is ignored.
    names = [c for c in df.attrs.get("value_cols", columns_meta.keys()) if c in columns_meta]
    columns = [ColumnSource.from_metadata(name, columns_meta[name]) for name in names]

    citation = chart.get("citation") or "; ".join(c.citation_short for c in columns if c.citation_short)
    return SourceInfo(
        title=chart.get("title") or df.attrs.get("title") or "",
        url=url,
        citation=citation,
        subtitle=chart.get("subtitle") or "",
        date_downloaded=meta.get("dateDownloaded") or "",
        columns=columns,
    )


def owid_citation(df: pd.DataFrame) -> str:
    """Return the citation text for a dataset."""
    info = owid_source(df)
    if info.citation:
        return info.citation
    long_citations = [c.citation_long for c in info.columns if c.citation_long]
    return "; ".join(long_citations) or f"Our World in Data, {info.url}"
