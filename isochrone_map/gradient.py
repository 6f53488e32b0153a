"""
Colour gradient generation for isochrone bands.

Colours are interpolated through a fixed three-stop scale (red, amber, green
by default) in CIELAB so that neighbouring bands stay distinguishable even
when there are many of them.
"""

from typing import Dict, List, Optional, Sequence

import matplotlib.colors as mcolors
import numpy as np
import logging

logger = logging.getLogger(__name__)

DEFAULT_STOPS = ("#f44242", "#f4be41", "#41f497")

# sRGB (D65) <-> CIE XYZ
_RGB_TO_XYZ = np.array([
    [0.4124564, 0.3575761, 0.1804375],
    [0.2126729, 0.7151522, 0.0721750],
    [0.0193339, 0.1191920, 0.9503041],
])
_XYZ_TO_RGB = np.linalg.inv(_RGB_TO_XYZ)
_D65_WHITE = _RGB_TO_XYZ.sum(axis=1)
_DELTA = 6 / 29


def _srgb_to_lab(rgb: np.ndarray) -> np.ndarray:
    linear = np.where(rgb <= 0.04045, rgb / 12.92, ((rgb + 0.055) / 1.055) ** 2.4)
    xyz = linear @ _RGB_TO_XYZ.T / _D65_WHITE
    f = np.where(xyz > _DELTA ** 3, np.cbrt(xyz), xyz / (3 * _DELTA ** 2) + 4 / 29)
    fx, fy, fz = f[..., 0], f[..., 1], f[..., 2]
    return np.stack([116 * fy - 16, 500 * (fx - fy), 200 * (fy - fz)], axis=-1)


def _lab_to_srgb(lab: np.ndarray) -> np.ndarray:
    fy = (lab[..., 0] + 16) / 116
    f = np.stack([fy + lab[..., 1] / 500, fy, fy - lab[..., 2] / 200], axis=-1)
    xyz = np.where(f > _DELTA, f ** 3, 3 * _DELTA ** 2 * (f - 4 / 29)) * _D65_WHITE
    linear = np.clip(xyz @ _XYZ_TO_RGB.T, 0.0, 1.0)
    rgb = np.where(linear <= 0.0031308, 12.92 * linear, 1.055 * linear ** (1 / 2.4) - 0.055)
    return np.clip(rgb, 0.0, 1.0)


class ColorGradientGenerator:
    """Produces ``n`` ordered hex colours along a fixed perceptual path."""

    def __init__(self, stops: Optional[Sequence[str]] = None):
        self.stops = tuple(stops or DEFAULT_STOPS)
        if len(self.stops) < 2:
            raise ValueError("A gradient needs at least two colour stops")

        self._stop_lab = _srgb_to_lab(np.array([mcolors.to_rgb(c) for c in self.stops]))
        self._stop_positions = np.linspace(0.0, 1.0, len(self.stops))
        self._cache: Dict[int, List[str]] = {}

    def generate(self, n_colors: int) -> List[str]:
        """
        Generate the gradient for ``n_colors`` isochrone groups.

        Args:
            n_colors: Number of colours, one per group

        Returns:
            List of ``#rrggbb`` strings, low stop first. A single colour is
            the low stop.
        """
        if n_colors < 0:
            raise ValueError(f"Number of colours must be >= 0, got {n_colors}")

        if n_colors not in self._cache:
            self._cache[n_colors] = self._interpolate(n_colors)
            logger.debug(f"Generated {n_colors} gradient colours from stops {self.stops}")

        return list(self._cache[n_colors])

    def _interpolate(self, n_colors: int) -> List[str]:
        if n_colors == 0:
            return []
        if n_colors == 1:
            return [mcolors.to_hex(self.stops[0])]

        positions = np.linspace(0.0, 1.0, n_colors)
        lab = np.column_stack([
            np.interp(positions, self._stop_positions, self._stop_lab[:, channel])
            for channel in range(3)
        ])
        return [mcolors.to_hex(rgb) for rgb in _lab_to_srgb(lab)]

