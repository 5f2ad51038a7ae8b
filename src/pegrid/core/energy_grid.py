"""
Core potential energy grid calculation engine.
"""
import numpy as np
from typing import Iterator, Optional, Sequence, Tuple
import logging
from tqdm import tqdm

from .framework import Framework
from .forcefield import Forcefield
from .geometry import check_lattice_transform, replication_factors
from .grid import GridSpec, compute_slab
from .parallel import GridTask, default_workers, iter_slabs_parallel
from .potential import build_atom_table, energy_at_point

logger = logging.getLogger(__name__)

class EnergyGridCalculator:
    """
    Potential energy of an adsorbate on a grid superimposed on a framework unit cell.

    Energies are in Kelvin. Slabs come out in ascending x index whether they are
    computed here or in a worker pool.
    """

    def __init__(self, framework: Framework, forcefield: Forcefield, spacing: float = 0.1):
        self.framework = framework
        self.forcefield = forcefield
        self.spacing = spacing
        self.f_to_cartesian = check_lattice_transform(framework.f_to_cartesian)
        self.atom_table = build_atom_table(framework, forcefield)
        self.rep_factors = replication_factors(self.f_to_cartesian, forcefield.cutoff)
        self.grid = GridSpec.from_spacing(framework.edge_lengths, spacing)

        logger.info(f"Unit cell replication factors for LJ cutoff of {forcefield.cutoff:.2f} A: "
                    f"{self.rep_factors[0]} by {self.rep_factors[1]} by {self.rep_factors[2]}")
        nx, ny, nz = self.grid.n_points
        logger.info(f"Grid is {nx} by {ny} by {nz} points, a total of {self.grid.n_total} grid points.")
        dx_f, dy_f, dz_f = self.grid.fractional_spacing
        logger.info(f"Fractional grid spacing: dx_f = {dx_f:f}, dy_f = {dy_f:f}, dz_f = {dz_f:f}")
        dx, dy, dz = self.f_to_cartesian @ self.grid.fractional_spacing
        logger.info(f"Grid spacing: dx = {dx:.2f}, dy = {dy:.2f}, dz = {dz:.2f}")

    @property
    def cutoff(self) -> float:
        return self.forcefield.cutoff

    def energy_at(self, point: Sequence[float]) -> float:
        return energy_at_point(point, self.atom_table, self.f_to_cartesian, self.rep_factors, self.cutoff)

    def compute_slab(self, i: int) -> np.ndarray:
        return compute_slab(self.grid.axes[0][i], self.grid, self.atom_table,
                            self.f_to_cartesian, self.rep_factors, self.cutoff)

    def task(self) -> GridTask:
        """Read-only payload describing this calculation for worker processes."""
        return GridTask(structure_name=self.framework.name,
                        adsorbate=self.forcefield.adsorbate,
                        forcefield_name=self.forcefield.name,
                        spacing=self.spacing,
                        cutoff=self.cutoff,
                        f_to_cartesian=self.f_to_cartesian,
                        atom_table=self.atom_table,
                        rep_factors=self.rep_factors,
                        grid=self.grid)

    def iter_slabs(self, n_workers: int = 1, show_progress: bool = True) -> Iterator[Tuple[int, np.ndarray]]:
        """
        Yield (x index, (Ny, Nz) energy sheet) in ascending x index.

        Args:
            n_workers: 1 computes in this process, more dispatches slabs to a worker pool
            show_progress: Show a progress bar over x slabs
        """
        if n_workers < 1:
            raise ValueError(f"n_workers must be >= 1, got {n_workers}.")
        if n_workers > 1:
            yield from iter_slabs_parallel(self.task(), n_workers, show_progress=show_progress)
            return

        n_x = self.grid.n_points[0]
        report_every = max(n_x // 10, 1)
        for i in tqdm(range(n_x), desc="Computing energy grid", unit="slab", disable=not show_progress):
            yield i, self.compute_slab(i)
            if (i + 1) % report_every == 0:
                logger.debug(f"Percent finished: {100.0 * (i + 1) / n_x:.1f}")

    def iter_points(self, n_workers: int = 1, show_progress: bool = True) -> Iterator[Tuple[int, int, int, float]]:
        """Yield (i, j, k, energy) with x slowest and z fastest."""
        for i, sheet in self.iter_slabs(n_workers, show_progress):
            for j in range(sheet.shape[0]):
                for k in range(sheet.shape[1]):
                    yield i, j, k, float(sheet[j, k])

    def iter_energies(self, n_workers: int = 1, show_progress: bool = True) -> Iterator[float]:
        for i, sheet in self.iter_slabs(n_workers, show_progress):
            yield from sheet.ravel().tolist()

    def compute(self, n_workers: int = 1, show_progress: bool = False) -> np.ndarray:
        """Full (Nx, Ny, Nz) energy array in Kelvin."""
        energies = np.empty(self.grid.n_points, dtype=np.float64)
        for i, sheet in self.iter_slabs(n_workers, show_progress):
            energies[i] = sheet
        return energies

def compute_grid(framework: Framework, forcefield: Forcefield, spacing: float,
                 show_progress: bool = True) -> Iterator[Tuple[int, int, int, float]]:
    """Serial energy grid as an ordered stream of (i, j, k, energy [K])."""
    return EnergyGridCalculator(framework, forcefield, spacing).iter_points(1, show_progress)

def compute_grid_parallel(framework: Framework, forcefield: Forcefield, spacing: float,
                          n_workers: Optional[int] = None,
                          show_progress: bool = True) -> Iterator[Tuple[int, int, int, float]]:
    """Same stream as `compute_grid`, with y-z slabs computed in a worker pool."""
    calc = EnergyGridCalculator(framework, forcefield, spacing)
    return calc.iter_points(default_workers() if n_workers is None else n_workers, show_progress)
