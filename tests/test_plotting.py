import numpy as np
import pytest
from matplotlib.figure import Figure

from owidpy.plotting import axis_label, owid_plot, summarise_mean


def _lines(fig):
    return fig.axes[0].get_lines()


def test_plot_summarises_with_mean_by_default(life_expectancy):
    fig = owid_plot(life_expectancy)

    assert isinstance(fig, Figure)
    lines = _lines(fig)
    assert len(lines) == 1
    assert list(np.asarray(lines[0].get_xdata())) == [2000, 2001]
    assert np.asarray(lines[0].get_ydata()) == pytest.approx([(79.1 + 81.1 + 67.5) / 3, (79.2 + 81.4 + 67.8) / 3])
    assert lines[0].get_label() == "Mean of 3 entities"


def test_plot_filter_draws_one_line_per_entity(life_expectancy):
    fig = owid_plot(life_expectancy, filter=["France", "Japan"])

    labels = [line.get_label() for line in _lines(fig)]
    assert labels == ["France", "Japan"]
    assert fig.axes[0].get_legend() is not None


def test_plot_all_entities_without_summary(life_expectancy):
    fig = owid_plot(life_expectancy, summarise=False)
    assert len(_lines(fig)) == 3


def test_plot_years(life_expectancy):
    fig = owid_plot(life_expectancy, filter="France", years=2001)
    assert list(np.asarray(_lines(fig)[0].get_xdata())) == [2001]


def test_plot_title_and_labels(life_expectancy):
    fig = owid_plot(life_expectancy)
    ax = fig.axes[0]
    assert ax.get_title(loc="left") == "Life expectancy" or ax.get_title() == "Life expectancy"
    assert ax.get_xlabel() == "Year"
    assert ax.get_ylabel() == "Life expectancy at birth (years)"

    fig = owid_plot(life_expectancy, title="Custom")
    ax = fig.axes[0]
    assert "Custom" in (ax.get_title(), ax.get_title(loc="left"))


def test_plot_into_existing_axis(life_expectancy):
    import matplotlib.pyplot as plt

    fig, ax = plt.subplots()
    assert owid_plot(life_expectancy, ax=ax) is fig


def test_plot_errors(life_expectancy):
    with pytest.raises(KeyError):
        owid_plot(life_expectancy, value="nope")
    with pytest.raises(KeyError):
        owid_plot(life_expectancy, filter="Atlantis")
    with pytest.raises(ValueError, match="Nothing to plot"):
        owid_plot(life_expectancy, years=(1900, 1950))


def test_summarise_mean_ignores_missing(life_expectancy):
    df = life_expectancy.copy()
    df.loc[df["entity"] == "World", "life_expectancy_0"] = np.nan
    mean = summarise_mean(df, "life_expectancy_0")
    assert mean.loc[2000] == pytest.approx((79.1 + 81.1) / 2)


def test_axis_label_without_metadata(life_expectancy):
    life_expectancy.attrs = {}
    assert axis_label(life_expectancy, "life_expectancy_0") == "life_expectancy_0"
