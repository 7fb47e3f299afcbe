from unittest.mock import patch

import geopandas as gpd
import pandas as pd
import pytest
from matplotlib.figure import Figure
from shapely.geometry import box

from owidpy import maps
from owidpy.maps import _download_zip, _iso3_codes, load_world, owid_map

from .mocking import make_response


def _title(fig):
    ax = fig.axes[0]
    return ax.get_title(loc="left") or ax.get_title()


@pytest.fixture
def world():
    return gpd.GeoDataFrame(
        {"iso3": ["FRA", "JPN", "DEU"]},
        geometry=[box(0, 0, 1, 1), box(2, 0, 3, 1), box(0, 2, 1, 3)],
        crs="EPSG:4326",
    )


def test_map_returns_figure_for_latest_year(life_expectancy, world):
    fig = owid_map(life_expectancy, world=world)

    assert isinstance(fig, Figure)
    ax = fig.axes[0]
    title = ax.get_title(loc="left") or ax.get_title()
    assert title == "Life expectancy, 2001"
    # one collection for countries without data (DEU), one for the choropleth
    assert len(ax.collections) == 2
    # colour bar
    assert len(fig.axes) == 2


def test_map_without_legend(life_expectancy, world):
    fig = owid_map(life_expectancy, world=world, year=2000, legend=False, palette="owid")
    assert len(fig.axes) == 1


def test_map_unknown_year(life_expectancy, world):
    with pytest.raises(ValueError, match="available range is 2000 to 2001"):
        owid_map(life_expectancy, world=world, year=1990)


def test_map_needs_code_column(life_expectancy, world):
    with pytest.raises(ValueError, match="'code'"):
        owid_map(life_expectancy.drop(columns=["code"]), world=world)


def test_map_drops_owid_aggregates(life_expectancy, world):
    only_world = life_expectancy[life_expectancy["entity"] == "World"]
    with pytest.raises(ValueError, match="No country"):
        owid_map(only_world, world=world)


def test_map_loads_world_shapes_by_default(life_expectancy, world):
    with patch.object(maps, "load_world", return_value=world) as mock_load:
        owid_map(life_expectancy)
    mock_load.assert_called_once_with()


def test_iso3_codes_fall_back_for_missing_iso():
    shapes = gpd.GeoDataFrame(
        {
            "ISO_A3": ["-99", "JPN", "-99"],
            "ISO_A3_EH": ["FRA", "JPN", "-99"],
            "ADM0_A3": ["FRA", "JPN", "KOS"],
        },
        geometry=[box(0, 0, 1, 1), box(2, 0, 3, 1), box(0, 2, 1, 3)],
    )
    assert _iso3_codes(shapes).tolist() == ["FRA", "JPN", "KOS"]


def test_download_zip_uses_local_copy(tmp_path):
    dest = tmp_path / "shapes.zip"
    dest.write_bytes(b"zip")

    with patch("owidpy.maps.get") as mock_get:
        assert _download_zip("https://example.com/shapes.zip", dest, "shapes") == dest
    mock_get.assert_not_called()


def test_download_zip_saves_response(tmp_path):
    dest = tmp_path / "raw" / "shapes.zip"

    with patch("owidpy.maps.get", return_value=make_response(content=b"PK\x03\x04")) as mock_get:
        _download_zip("https://example.com/shapes.zip", dest, "shapes")

    mock_get.assert_called_once()
    assert dest.read_bytes() == b"PK\x03\x04"


def test_download_zip_rejects_empty_response(tmp_path):
    with patch("owidpy.maps.get", return_value=make_response(content=b"")):
        with pytest.raises(RuntimeError, match="Empty response"):
            _download_zip("https://example.com/shapes.zip", tmp_path / "shapes.zip", "shapes")


def test_load_world(tmp_path, world):
    raw = world.rename(columns={"iso3": "ISO_A3"})
    with patch.object(maps, "RAW_DIR", tmp_path), patch.object(
        maps, "_download_zip", return_value=tmp_path / "x.zip"
    ) as mock_download, patch.object(maps.gpd, "read_file", return_value=raw):
        out = load_world()

    assert list(out.columns) == ["iso3", "geometry"]
    assert out["iso3"].tolist() == ["FRA", "JPN", "DEU"]
    assert mock_download.call_args.args[1] == tmp_path / "ne_110m_admin_0_countries.zip"


def test_map_default_year_ignores_later_aggregates(world):
    df = pd.DataFrame(
        {
            "entity": ["France", "Japan", "World", "World"],
            "code": ["FRA", "JPN", "OWID_WRL", "OWID_WRL"],
            "year": [2022, 2022, 2022, 2023],
            "v": [1.0, 2.0, 3.0, 4.0],
        }
    )
    assert _title(owid_map(df, world=world, title="Test")) == "Test, 2022"


def test_map_default_year_skips_missing_values(world):
    df = pd.DataFrame(
        {
            "entity": ["France", "France"],
            "code": ["FRA", "FRA"],
            "year": [2021, 2022],
            "v": [1.0, float("nan")],
        }
    )
    assert _title(owid_map(df, world=world, title="Test")) == "Test, 2021"


@pytest.fixture
def daily():
    return pd.DataFrame(
        {
            "entity": ["France", "France", "Japan", "France"],
            "code": ["FRA", "FRA", "JPN", "FRA"],
            "date": pd.to_datetime(["2020-03-01", "2020-12-31", "2020-12-31", "2021-01-05"]),
            "cases": [1.0, 2.0, 3.0, 4.0],
        }
    )


def test_map_daily_data_by_calendar_year(daily, world):
    assert _title(owid_map(daily, world=world, year=2020, title="Cases")) == "Cases, 2020-12-31"
    assert _title(owid_map(daily, world=world, year="2020", title="Cases")) == "Cases, 2020-12-31"


def test_map_daily_data_by_date(daily, world):
    assert _title(owid_map(daily, world=world, year="2020-03-01", title="Cases")) == "Cases, 2020-03-01"
    assert _title(owid_map(daily, world=world, title="Cases")) == "Cases, 2021-01-05"


def test_map_daily_data_kept_as_text(daily, world):
    text_dates = daily.assign(date=daily["date"].dt.strftime("%Y-%m-%d"))
    assert _title(owid_map(text_dates, world=world, year=2020, title="Cases")) == "Cases, 2020-12-31"


def test_map_daily_data_unknown_year(daily, world):
    with pytest.raises(ValueError, match="available range is 2020-03-01 to 2021-01-05"):
        owid_map(daily, world=world, year=2019)
