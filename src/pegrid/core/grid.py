"""
Sampling grid over the unit cell and per-slab energy evaluation.
"""
from dataclasses import dataclass
import numpy as np
from typing import Sequence, Tuple

from .potential import AtomTable, energy_at_point

@dataclass(frozen=True)
class GridSpec:
    n_points: Tuple[int, int, int]  # (Nx, Ny, Nz)

    def __post_init__(self):
        if len(self.n_points) != 3:
            raise ValueError(f"Grid needs three point counts, got {self.n_points}")
        if min(self.n_points) < 2:
            raise ValueError(f"Grid needs at least 2 points per axis, got {self.n_points}. Decrease the grid spacing.")

    @classmethod
    def from_spacing(cls, edge_lengths: Sequence[float], spacing: float) -> 'GridSpec':
        """
        Point counts from cell edge lengths and a target spacing.

        N = floor(edge / spacing) + 1 on each axis. Grid points include both faces
        of the unit cell, so the actual spacing is edge / (N - 1) <= spacing.
        """
        if spacing <= 0:
            raise ValueError(f"Grid spacing must be positive, got {spacing}.")
        counts = tuple(int(np.floor(edge / spacing)) + 1 for edge in edge_lengths)
        return cls(n_points=counts)

    @property
    def n_total(self) -> int:
        return int(np.prod(self.n_points))

    @property
    def axes(self) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """Fractional coordinates of the grid points along x, y, z."""
        return tuple(np.linspace(0.0, 1.0, n) for n in self.n_points)

    @property
    def fractional_spacing(self) -> np.ndarray:
        return 1.0 / (np.asarray(self.n_points, dtype=np.float64) - 1.0)

    def voxel_vectors(self, f_to_cartesian: np.ndarray) -> np.ndarray:
        """Cartesian voxel edge vectors, one row per grid axis."""
        return (np.asarray(f_to_cartesian, dtype=np.float64) * self.fractional_spacing[None, :]).T

def compute_slab(x_f: float, grid: GridSpec, atom_table: AtomTable, f_to_cartesian: np.ndarray,
                 rep_factors: Sequence[int], cutoff: float) -> np.ndarray:
    """Energies (Ny, Nz) on the y-z sheet of grid points at fractional x = `x_f`."""
    _, yf_grid, zf_grid = grid.axes
    sheet = np.empty((len(yf_grid), len(zf_grid)), dtype=np.float64)
    for j, y_f in enumerate(yf_grid):
        for k, z_f in enumerate(zf_grid):
            sheet[j, k] = energy_at_point((x_f, y_f, z_f), atom_table, f_to_cartesian, rep_factors, cutoff)
    return sheet
