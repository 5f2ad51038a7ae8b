"""
Unit cell geometry for periodic boundary conditions.
"""
import numpy as np
from typing import Tuple
import logging

from ..utils.helpers import validate_array_shape

logger = logging.getLogger(__name__)

ZERO_VOLUME_TOL = 1e-12

def check_lattice_transform(f_to_cartesian: np.ndarray) -> np.ndarray:
    """
    Validate a fractional-to-Cartesian transform.

    Args:
        f_to_cartesian: 3x3 matrix whose columns are the lattice vectors a, b, c

    Returns:
        The transform as a float64 array

    Raises:
        ValueError: If the matrix is not 3x3 or is singular
    """
    mtrx = np.asarray(f_to_cartesian, dtype=np.float64)
    validate_array_shape(mtrx, (3, 3), "Lattice transform")
    volume = abs(np.linalg.det(mtrx))
    if volume < ZERO_VOLUME_TOL:
        raise ValueError(f"Lattice transform is singular (cell volume {volume:.2e}).")
    return mtrx

def unit_cell_heights(f_to_cartesian: np.ndarray) -> np.ndarray:
    """
    Perpendicular distances between the three pairs of opposite unit cell faces.

    height = volume / area, with the area of the face spanned by the other two
    lattice vectors. For a non-orthogonal cell these are smaller than the edge
    lengths, so they are what bounds the distance to a periodic image.

    Args:
        f_to_cartesian: 3x3 matrix whose columns are the lattice vectors a, b, c

    Returns:
        Array [h_a, h_b, h_c] in the units of the transform
    """
    mtrx = check_lattice_transform(f_to_cartesian)
    a, b, c = mtrx[:, 0], mtrx[:, 1], mtrx[:, 2]
    volume = abs(np.linalg.det(mtrx))
    areas = np.array([np.linalg.norm(np.cross(b, c)),
                      np.linalg.norm(np.cross(c, a)),
                      np.linalg.norm(np.cross(a, b))])
    return volume / areas

def replication_factors(f_to_cartesian: np.ndarray, cutoff: float) -> Tuple[int, int, int]:
    """
    Number of periodic images per lattice direction needed to cover `cutoff`.

    Images run from -n to +n along each axis. n = ceil(cutoff / height) is enough
    for every query point in [0, 1]^3 and every atom in the primitive cell; rounding
    down would silently drop interactions.

    Args:
        f_to_cartesian: 3x3 matrix whose columns are the lattice vectors a, b, c
        cutoff: Interaction cutoff radius (same length units as the transform)

    Returns:
        (nx, ny, nz)

    Raises:
        ValueError: If the cutoff is not positive or the transform is singular
    """
    if cutoff <= 0:
        raise ValueError(f"Cutoff must be positive, got {cutoff}.")
    heights = unit_cell_heights(f_to_cartesian)
    n = np.ceil(cutoff / heights).astype(int)
    return int(n[0]), int(n[1]), int(n[2])
