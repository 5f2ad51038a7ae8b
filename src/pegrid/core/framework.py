"""
Core crystal framework data structure.
"""
from dataclasses import dataclass
import numpy as np
from typing import Sequence, Tuple
import logging

logger = logging.getLogger(__name__)

@dataclass(frozen=True)
class Framework:
    name: str
    f_to_cartesian: np.ndarray     # (3, 3), columns are lattice vectors a, b, c
    fractional_coords: np.ndarray  # (n_atoms, 3)
    atom_types: Tuple[str, ...]    # (n_atoms,)

    def __post_init__(self):
        if self.f_to_cartesian.shape != (3, 3):
            raise ValueError(f"Fractional-to-Cartesian matrix must be 3x3, got {self.f_to_cartesian.shape}")
        if self.fractional_coords.ndim != 2 or self.fractional_coords.shape[1] != 3:
            raise ValueError("Fractional coordinates must be 2D (atoms, xyz) and last dimension must be 3.")
        if self.fractional_coords.shape[0] != len(self.atom_types):
            raise ValueError("Atom count mismatch: fractional_coords, atom_types.")
        if len(self.atom_types) == 0:
            raise ValueError(f"Framework '{self.name}' contains no atoms.")

    @property
    def n_atoms(self) -> int:
        return len(self.atom_types)

    @property
    def edge_lengths(self) -> np.ndarray:
        """Unit cell edge lengths a, b, c (Angstrom)."""
        return np.linalg.norm(self.f_to_cartesian, axis=0)

    @property
    def a(self) -> float:
        return float(self.edge_lengths[0])

    @property
    def b(self) -> float:
        return float(self.edge_lengths[1])

    @property
    def c(self) -> float:
        return float(self.edge_lengths[2])

    @property
    def volume(self) -> float:
        return float(abs(np.linalg.det(self.f_to_cartesian)))

    @property
    def cartesian_coords(self) -> np.ndarray:
        return self.fractional_coords @ self.f_to_cartesian.T

    @classmethod
    def from_cell_parameters(cls, name: str, a: float, b: float, c: float,
                             alpha: float, beta: float, gamma: float,
                             fractional_coords: Sequence[Sequence[float]],
                             atom_types: Sequence[str]) -> 'Framework':
        """
        Build a framework from crystallographic cell parameters.

        The lattice is placed with a along x and b in the xy-plane, which gives an
        upper-triangular fractional-to-Cartesian matrix.

        Args:
            name: Structure name (used for output file naming)
            a, b, c: Cell edge lengths in Angstrom
            alpha, beta, gamma: Cell angles in degrees
            fractional_coords: (n_atoms, 3) fractional positions
            atom_types: Atom type label of each position

        Returns:
            Framework instance

        Raises:
            ValueError: If the cell parameters do not describe a valid cell
        """
        if min(a, b, c) <= 0:
            raise ValueError(f"Cell edge lengths must be positive, got ({a}, {b}, {c}).")
        return cls(name=name,
                   f_to_cartesian=cell_matrix(a, b, c, alpha, beta, gamma),
                   fractional_coords=np.asarray(fractional_coords, dtype=np.float64).reshape(-1, 3),
                   atom_types=tuple(str(t) for t in atom_types))

def cell_matrix(a: float, b: float, c: float, alpha: float, beta: float, gamma: float) -> np.ndarray:
    """Fractional-to-Cartesian transform for cell parameters (angles in degrees)."""
    cos_a, cos_b, cos_g = np.cos(np.deg2rad([alpha, beta, gamma]))
    sin_g = np.sin(np.deg2rad(gamma))
    vol_factor = 1.0 - cos_a**2 - cos_b**2 - cos_g**2 + 2.0 * cos_a * cos_b * cos_g
    if vol_factor <= 0 or np.isclose(sin_g, 0):
        raise ValueError(f"Cell angles ({alpha}, {beta}, {gamma}) do not describe a valid cell.")
    volume = a * b * c * np.sqrt(vol_factor)

    mtrx = np.zeros((3, 3), dtype=np.float64)
    mtrx[0, 0] = a
    mtrx[0, 1] = b * cos_g
    mtrx[1, 1] = b * sin_g
    mtrx[0, 2] = c * cos_b
    mtrx[1, 2] = c * (cos_a - cos_b * cos_g) / sin_g
    mtrx[2, 2] = volume / (a * b * sin_g)
    # exact zeros for right angles
    mtrx[np.abs(mtrx) < 1e-12] = 0.0
    return mtrx
