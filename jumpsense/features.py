"""
Accelerometer feature helpers.
Reduces triaxial readings to the scalar magnitude consumed by the JPM detector.
"""
import math
import numpy as np


def magnitude(x: float, y: float, z: float) -> float:
    """Euclidean norm of a single 3-axis reading."""
    return math.sqrt(x * x + y * y + z * z)


def magnitudes(x: np.ndarray, y: np.ndarray, z: np.ndarray) -> np.ndarray:
    """Vectorised magnitude for whole batches of readings."""
    x = np.asarray(x, dtype=np.float64)
    y = np.asarray(y, dtype=np.float64)
    z = np.asarray(z, dtype=np.float64)
    return np.sqrt(x * x + y * y + z * z)
