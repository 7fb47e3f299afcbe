"""
Search the OWID chart catalogue.

OWID's site search (Algolia behind https://ourworldindata.org/api/search) is
queried with `type=charts`; each hit carries the chart slug, which is the
`chart_id` accepted by `owidpy.owid()`.
"""

from __future__ import annotations

import warnings
from typing import Any, Dict, List

import numpy as np
import pandas as pd

from .config import GRAPHER_URL, SEARCH_URL
from .http import get_json

SEARCH_COLUMNS = ("titles", "chart_id")
MAX_HITS = 100


def _search_hits(term: str, limit: int = 20, page: int = 0) -> List[Dict[str, Any]]:
    if not isinstance(term, str) or not term.strip():
        raise ValueError("Search term must be a non-empty string, e.g. owid_search('gdp').")

    if limit > MAX_HITS:
        warnings.warn(
            f"Max allowed of result items is {MAX_HITS}. Using limit={MAX_HITS} instead.",
            UserWarning,
            stacklevel=3,
        )
    params = {
        "q": term.strip(),
        "type": "charts",
        "hitsPerPage": min(max(1, int(limit)), MAX_HITS),
        "page": int(page),
    }
    data = get_json(SEARCH_URL, params=params, what=f"search results for '{term}'")

    hits = [hit for hit in data.get("results", []) if hit.get("slug")]
    if not hits:
        warnings.warn(f"No charts found matching '{term}'.", UserWarning, stacklevel=3)
    return hits


def owid_search(term: str, *, limit: int = 20, page: int = 0) -> np.ndarray:
    """
    Search OWID charts by keyword.

    Parameters
    ----------
    term : str
        Keyword(s) to search for, e.g. "gdp" or "life expectancy".
    limit : int, default 20
        Maximum number of hits (clamped to 1..100).
    page : int, default 0
        Zero-based results page.

    Returns
    -------
    numpy.ndarray
        Two-dimensional array of strings with columns ("titles", "chart_id"),
        one row per matching chart. Empty (shape (0, 2)) when nothing matches.
    """
    hits = _search_hits(term, limit=limit, page=page)
    out = np.empty((len(hits), len(SEARCH_COLUMNS)), dtype=object)
    for i, hit in enumerate(hits):
        out[i, 0] = str(hit.get("title") or "")
        out[i, 1] = str(hit["slug"])
    return out


def owid_search_frame(term: str, **kwargs) -> pd.DataFrame:
    """Like `owid_search` but returns a DataFrame with subtitle and URL columns."""
    hits = _search_hits(term, **kwargs)
    rows = [
        {
            "titles": hit.get("title") or "",
            "chart_id": hit["slug"],
            "subtitle": hit.get("subtitle") or hit.get("variantName") or "",
            "url": f"{GRAPHER_URL}/{hit['slug']}",
        }
        for hit in hits
    ]
    return pd.DataFrame(rows, columns=[*SEARCH_COLUMNS, "subtitle", "url"])
