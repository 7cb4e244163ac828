"""Feature centers for the distance-based (blob) generators."""

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class FeatureCenter:
    """A randomly placed point that shapes a localized effect.

    Created and discarded within one generator call.

    Attributes:
        x: Center x in pixels (float)
        y: Center y in pixels (float)
        size: Radius of influence in pixels
        intensity: Strength multiplier (ink intensity or cloud density)
        seed: Phase offset that keeps each center's noise distortion distinct
    """

    x: float
    y: float
    size: float
    intensity: float = 1.0
    seed: float = 0.0

    def distance(self, xs: np.ndarray, ys: np.ndarray) -> np.ndarray:
        """Euclidean distance of every grid pixel to this center."""
        return np.hypot(xs - self.x, ys - self.y)
