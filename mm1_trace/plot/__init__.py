"""Spectrum plotting."""

from .spectrum import plot_spectrum, COLS, ROWS

__all__ = ['plot_spectrum', 'COLS', 'ROWS']
