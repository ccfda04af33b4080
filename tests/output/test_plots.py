"""Unit tests for the plotting tools."""

from datetime import date, timedelta

import pytest

from fred_dash.data.models import Observation
from fred_dash.output.plots import WindowPlotConfig, _marker_size, generate_window_plot


def _observations(count: int) -> list[Observation]:
    return [
        Observation(date=date(2024, 1, 1) + timedelta(days=offset), value=1.3 + offset / 100)
        for offset in range(count)
    ]


@pytest.fixture
def mock_plt(mocker):
    """Fixture for a mock matplotlib.pyplot returning a 2x2 grid of axes."""
    fig_mock = mocker.MagicMock()
    axes = [[mocker.MagicMock(), mocker.MagicMock()], [mocker.MagicMock(), mocker.MagicMock()]]
    subplots_mock = mocker.patch("matplotlib.pyplot.subplots", return_value=(fig_mock, axes))
    mocker.patch("matplotlib.pyplot.close")
    return subplots_mock, fig_mock, axes


def test_generate_window_plot(mock_plt, tmp_path):
    """Each window gets its own axes and the figure is saved once."""
    subplots_mock, fig_mock, axes = mock_plt
    windows = {30: _observations(31), 14: _observations(15), 90: []}
    config = WindowPlotConfig(title="CAD - USD", decimals=4)

    report = generate_window_plot(windows, output_dir=tmp_path, filename="cad.png", config=config)

    assert report.path == tmp_path / "cad.png"
    assert report.windows == (14, 30, 90)
    assert report.points == 46
    subplots_mock.assert_called_once()
    assert subplots_mock.call_args.args[:2] == (2, 2)
    axes[0][0].set_title.assert_called_with("14 Days")
    axes[0][1].set_title.assert_called_with("30 Days")
    axes[1][0].set_title.assert_called_with("90 Days")
    axes[1][0].text.assert_called_once()
    axes[1][0].plot.assert_not_called()
    axes[1][1].set_visible.assert_called_with(False)
    fig_mock.suptitle.assert_called_with("CAD - USD")
    fig_mock.savefig.assert_called_once()


def test_generate_window_plot_requires_windows(mock_plt, tmp_path):
    """Rendering nothing is an error."""
    with pytest.raises(ValueError, match="At least one window"):
        generate_window_plot({}, output_dir=tmp_path)


def test_marker_size():
    """Dense windows drop their markers."""
    assert _marker_size(10) == 3.0
    assert _marker_size(45) == 2.0
    assert _marker_size(120) == 0.0
