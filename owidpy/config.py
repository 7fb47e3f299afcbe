"""
Configuration for owidpy.

Centralises the OWID endpoints and the local directory used for downloaded
assets (world map polygons), so nothing else hardcodes a URL or a path.
Each value can be overridden with an environment variable.
"""

import os
from pathlib import Path

# Root directory for files downloaded by owidpy (never the API responses)
DATA_ROOT = Path(os.getenv("OWIDPY_DATA_DIR", Path.home() / ".owidpy"))
RAW_DIR = DATA_ROOT / "raw"  # Downloaded ZIP files

# OWID endpoints
GRAPHER_URL = os.getenv("OWIDPY_GRAPHER_URL", "https://ourworldindata.org/grapher")
SEARCH_URL = os.getenv("OWIDPY_SEARCH_URL", "https://ourworldindata.org/api/search")
COVID_URL = os.getenv(
    "OWIDPY_COVID_URL",
    "https://catalog.ourworldindata.org/garden/covid/latest/compact/compact.csv",
)

# Natural Earth 1:110m admin-0 countries, used for choropleths
WORLD_SHAPES_URL = os.getenv(
    "OWIDPY_WORLD_SHAPES_URL",
    "https://naciscdn.org/naturalearth/110m/cultural/ne_110m_admin_0_countries.zip",
)

# HTTP configuration
HTTP_TIMEOUT = float(os.getenv("OWIDPY_HTTP_TIMEOUT", "30"))
USER_AGENT = "owidpy/0.1 (+https://ourworldindata.org)"

# NOTE: directory creation happens in the download code, not at import time.
