"""
CLI entrypoint for quick OWID lookups from the shell.

Examples:
    python -m owidpy.cli search "life expectancy"
    python -m owidpy.cli fetch life-expectancy --rename lifeexp -o lifeexp.csv
    python -m owidpy.cli source life-expectancy
    python -m owidpy.cli plot life-expectancy --filter France Japan -o lifeexp.png
    python -m owidpy.cli map life-expectancy --year 2019 -o lifeexp_map.png
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional

import matplotlib
import pandas as pd

from .fetch import owid, parse_chart_id
from .search import owid_search
from .source import owid_source


def _cmd_search(args: argparse.Namespace) -> int:
    hits = owid_search(args.term, limit=args.limit)
    if len(hits) == 0:
        return 1
    width = max(len(h) for h in hits[:, 1])
    for title, chart_id in hits:
        print(f"{chart_id:<{width}}  {title}")
    return 0


def _cmd_fetch(args: argparse.Namespace) -> int:
    rename = None
    if args.rename:
        rename = args.rename[0] if len(args.rename) == 1 else args.rename
    df = owid(args.chart_id, rename=rename)
    if args.output is None:
        df.to_csv(sys.stdout, index=False)
    else:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        df.to_csv(args.output, index=False)
        print(f"Saved {len(df):,} rows x {df.shape[1]} columns to {args.output}")
    return 0


def _cmd_source(args: argparse.Namespace) -> int:
    # Metadata only; owid_source fetches it from the chart id.
    stub = pd.DataFrame()
    stub.attrs["chart_id"] = parse_chart_id(args.chart_id)
    print(owid_source(stub))
    return 0


def _period_arg(text: str):
    """A year ('2019') as int; anything else ('2020-03-01') stays a date string."""
    return int(text) if text.isdigit() else text


def _save_figure(fig, output: Path) -> None:
    output.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(output, dpi=150, bbox_inches="tight")
    print(f"Saved figure to {output}")


def _cmd_plot(args: argparse.Namespace) -> int:
    from .plotting import owid_plot

    df = owid(args.chart_id)
    years = tuple(args.years) if args.years else None
    fig = owid_plot(df, filter=args.filter, summarise=args.summarise, years=years, value=args.value)
    _save_figure(fig, args.output)
    return 0


def _cmd_map(args: argparse.Namespace) -> int:
    from .maps import owid_map

    df = owid(args.chart_id)
    fig = owid_map(df, year=args.year, value=args.value, palette=args.palette)
    _save_figure(fig, args.output)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="owidpy", description="Search, download and plot Our World in Data charts.")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("search", help="Search charts by keyword.")
    p.add_argument("term", help="Keyword(s), e.g. 'gdp'.")
    p.add_argument("--limit", type=int, default=20, help="Maximum number of results (1-100).")
    p.set_defaults(func=_cmd_search)

    p = sub.add_parser("fetch", help="Download a chart's data as CSV.")
    p.add_argument("chart_id", help="Chart id (slug) or grapher URL.")
    p.add_argument("--rename", nargs="+", default=None, help="New name(s) for the value column(s).")
    p.add_argument("-o", "--output", type=Path, default=None, help="Output CSV (default: stdout).")
    p.set_defaults(func=_cmd_fetch)

    p = sub.add_parser("source", help="Print source and citation information.")
    p.add_argument("chart_id", help="Chart id (slug) or grapher URL.")
    p.set_defaults(func=_cmd_source)

    p = sub.add_parser("plot", help="Save a time-series chart.")
    p.add_argument("chart_id", help="Chart id (slug) or grapher URL.")
    p.add_argument("--filter", nargs="+", default=None, help="Entities to draw, one line each.")
    p.add_argument(
        "--no-summarise",
        dest="summarise",
        action="store_false",
        help="Without --filter, draw every entity instead of the cross-entity mean.",
    )
    p.add_argument("--years", type=int, nargs=2, metavar=("START", "END"), default=None, help="Year range.")
    p.add_argument("--value", default=None, help="Value column to plot (default: first).")
    p.add_argument("-o", "--output", type=Path, required=True, help="Output image (e.g. chart.png).")
    p.set_defaults(func=_cmd_plot)

    p = sub.add_parser("map", help="Save a choropleth world map.")
    p.add_argument("chart_id", help="Chart id (slug) or grapher URL.")
    p.add_argument(
        "--year", type=_period_arg, default=None, help="Year (or YYYY-MM-DD for daily data) to map (default: latest)."
    )
    p.add_argument("--value", default=None, help="Value column to map (default: first).")
    p.add_argument("--palette", default="Reds", help="Matplotlib colormap name, or 'owid'.")
    p.add_argument("-o", "--output", type=Path, required=True, help="Output image (e.g. map.png).")
    p.set_defaults(func=_cmd_map)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Parse arguments and run one subcommand; return the exit code."""
    matplotlib.use("Agg")
    args = build_parser().parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
