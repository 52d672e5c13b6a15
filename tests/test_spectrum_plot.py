"""
Tests for the ASCII spectrum plot.

These tests verify:
1. Canvas geometry (rows, columns, axis)
2. Row bands and column sampling
3. Degenerate inputs never raise
"""

import numpy as np

from mm1_trace.plot.spectrum import plot_spectrum, COLS, ROWS, AXIS_INDENT

LABEL_WIDTH = 10


def _dots(line: str) -> str:
    return line[LABEL_WIDTH:]


class TestGeometry:
    """Test canvas size."""

    def test_default_canvas(self):
        """ROWS bands plus the axis rule."""
        lines = plot_spectrum(list(range(140)))
        assert len(lines) == ROWS + 1
        assert lines[-1] == AXIS_INDENT + '+' + '-' * COLS
        for line in lines[:-1]:
            assert line[8:10] == ' |'
            assert len(_dots(line)) == COLS

    def test_custom_canvas(self):
        lines = plot_spectrum(list(range(100)), cols=20, rows=5)
        assert len(lines) == 6
        assert lines[-1].endswith('+' + '-' * 20)

    def test_labels_descend(self):
        """Row labels show each band's lower bound, top row first."""
        lines = plot_spectrum([0] * 139 + [290])
        labels = [int(line[:8]) for line in lines[:-1]]
        assert labels[0] == 290
        assert labels[-1] == 0
        assert labels == sorted(labels, reverse=True)


class TestBands:
    """Test point placement."""

    def test_single_peak(self):
        """A peak lands in the top row, the baseline in the bottom row."""
        bins = [0] * 140
        bins[70] = 290                      # sampled by column 35 (x_unit 2)
        lines = plot_spectrum(bins)

        top = _dots(lines[0])
        assert top.count('x') == 1
        assert top[34] == 'x'

        bottom = _dots(lines[ROWS - 1])
        assert bottom[34] == ' '
        assert bottom[69] == ' '            # column 70 samples past the end
        assert bottom.count('x') == COLS - 2

        for line in lines[1:ROWS - 1]:
            assert 'x' not in _dots(line)

    def test_flat_spectrum_single_row(self):
        """A zero y unit collapses to one row."""
        lines = plot_spectrum([5] * 140)
        assert len(lines) == 2
        assert int(lines[0][:8]) == 5
        assert _dots(lines[0]).count('x') == COLS - 1

    def test_fewer_bins_than_columns(self):
        """Each bin gets a column; columns past the data stay empty."""
        lines = plot_spectrum([0, 100, 0, 100], cols=10, rows=3)
        dots = [_dots(line) for line in lines[:-1]]
        assert dots[0][0] == 'x'            # column 1 samples bin 1
        assert dots[0][2] == 'x'            # column 3 samples bin 3
        assert all(d[3:] == ' ' * 7 for d in dots)

    def test_numpy_input(self):
        """Spectrum views from the decoder plot directly."""
        spectrum = np.arange(70, dtype='<u4')
        lines = plot_spectrum(spectrum, cols=7, rows=3)
        assert len(lines) == 4


class TestRejected:
    """Test the optional second series."""

    def test_none_rejected(self):
        assert plot_spectrum([1, 2, 3], None) == plot_spectrum([1, 2, 3])

    def test_rejected_marks(self):
        """Rejected-only points are drawn with '.'."""
        accepted = [0] * 20
        rejected = [0] * 20
        rejected[4] = 40
        lines = plot_spectrum(accepted, rejected, cols=10, rows=3)
        assert _dots(lines[0])[1] == '.'

    def test_rejected_only(self):
        lines = plot_spectrum(None, [0, 10, 20, 30], cols=4, rows=2)
        assert len(lines) == 3
        assert 'x' not in ''.join(lines)


class TestDegenerate:
    """Inputs that produce no plot."""

    def test_empty(self):
        assert plot_spectrum([]) == []

    def test_none(self):
        assert plot_spectrum(None) == []
        assert plot_spectrum(None, None) == []
