from unittest.mock import patch

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
import pandas as pd  # noqa: E402
import pytest  # noqa: E402

from .mocking import make_response  # noqa: E402

LIFE_EXPECTANCY_CSV = """Entity,Code,Year,life_expectancy_0
Japan,JPN,2001,81.4
Japan,JPN,2000,81.1
France,FRA,2000,79.1
France,FRA,2001,79.2
World,OWID_WRL,2000,67.5
World,OWID_WRL,2001,67.8
"""

LIFE_EXPECTANCY_METADATA = {
    "chart": {
        "title": "Life expectancy",
        "subtitle": "The period life expectancy at birth, in a given year.",
        "citation": "UN WPP (2024); HMD (2024)",
        "originalChartUrl": "https://ourworldindata.org/grapher/life-expectancy",
    },
    "columns": {
        "life_expectancy_0": {
            "titleShort": "Life expectancy at birth",
            "unit": "years",
            "shortUnit": "",
            "descriptionShort": "The period life expectancy at birth, in a given year.",
            "citationShort": "UN WPP (2024); HMD (2024)",
            "citationLong": "UN, World Population Prospects (2024); Human Mortality Database (2024)",
            "timespan": "1543-2023",
            "lastUpdated": "2024-07-15",
            "nextUpdate": "2025-07-15",
        }
    },
    "dateDownloaded": "2026-10-18",
}


@pytest.fixture
def routes():
    """URL suffix -> mocked response, consulted by `mock_get`."""
    return {}


@pytest.fixture
def mock_get(routes):
    def _get(url, params=None, timeout=None):
        for suffix, resp in routes.items():
            if url.endswith(suffix):
                return resp
        return make_response(404)

    with patch("owidpy.http.requests.Session.get", side_effect=_get) as m:
        yield m


@pytest.fixture
def life_expectancy_routes(routes):
    routes["/life-expectancy.csv"] = make_response(text=LIFE_EXPECTANCY_CSV)
    routes["/life-expectancy.metadata.json"] = make_response(json_data=LIFE_EXPECTANCY_METADATA)
    return routes


@pytest.fixture
def life_expectancy():
    """Dataset shaped like owid('life-expectancy'), built without the network."""
    df = pd.DataFrame(
        {
            "entity": ["France", "France", "Japan", "Japan", "World", "World"],
            "code": ["FRA", "FRA", "JPN", "JPN", "OWID_WRL", "OWID_WRL"],
            "year": [2000, 2001, 2000, 2001, 2000, 2001],
            "life_expectancy_0": [79.1, 79.2, 81.1, 81.4, 67.5, 67.8],
        }
    )
    df.attrs = {
        "chart_id": "life-expectancy",
        "url": "https://ourworldindata.org/grapher/life-expectancy",
        "title": "Life expectancy",
        "value_cols": ["life_expectancy_0"],
        "metadata": LIFE_EXPECTANCY_METADATA,
    }
    return df


@pytest.fixture(autouse=True)
def close_figures():
    yield
    plt.close("all")
