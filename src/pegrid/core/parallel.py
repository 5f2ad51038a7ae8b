"""
Parallel energy grid computation over a pool of worker processes.

The grid is decomposed into y-z slabs, one per x index. Every slab depends only on
its x index and on read-only inputs, which are bundled into a `GridTask` and handed
to each worker once when the pool starts.
"""
from dataclasses import dataclass
import multiprocessing
import numpy as np
from typing import Iterator, Optional, Tuple
import logging
from tqdm import tqdm

from .grid import GridSpec, compute_slab
from .potential import AtomTable

logger = logging.getLogger(__name__)

@dataclass(frozen=True)
class GridTask:
    structure_name: str
    adsorbate: str
    forcefield_name: str
    spacing: float
    cutoff: float
    f_to_cartesian: np.ndarray
    atom_table: AtomTable
    rep_factors: Tuple[int, int, int]
    grid: GridSpec

    def slab(self, i: int) -> np.ndarray:
        return compute_slab(self.grid.axes[0][i], self.grid, self.atom_table,
                            self.f_to_cartesian, self.rep_factors, self.cutoff)

# Set once per worker process by the pool initializer.
_worker_task: Optional[GridTask] = None

def _init_worker(task: GridTask) -> None:
    global _worker_task
    _worker_task = task

def _compute_slab(i: int) -> np.ndarray:
    if _worker_task is None:
        raise RuntimeError("Worker process was started without a GridTask.")
    return _worker_task.slab(i)

def default_workers() -> int:
    return multiprocessing.cpu_count()

def iter_slabs_parallel(task: GridTask, n_workers: Optional[int] = None,
                        show_progress: bool = True) -> Iterator[Tuple[int, np.ndarray]]:
    """
    Yield (x index, (Ny, Nz) energy sheet) in ascending x index.

    Slabs are mapped onto the pool in batches of `n_workers`; each batch is collected
    in dispatch order before the next one starts. An exception in any worker is
    re-raised here and ends the iteration.

    Args:
        task: Read-only description of the calculation
        n_workers: Pool size (defaults to the number of CPUs)
        show_progress: Show a progress bar over x slabs
    """
    n_workers = default_workers() if n_workers is None else n_workers
    if n_workers < 1:
        raise ValueError(f"n_workers must be >= 1, got {n_workers}.")
    n_x = task.grid.n_points[0]
    logger.info(f"Number of parallel workers: {n_workers}")

    with multiprocessing.Pool(processes=n_workers, initializer=_init_worker, initargs=(task,)) as pool:
        with tqdm(total=n_x, desc="Computing energy grid", unit="slab", disable=not show_progress) as pbar:
            for start in range(0, n_x, n_workers):
                batch = list(range(start, min(start + n_workers, n_x)))
                sheets = pool.map(_compute_slab, batch)
                for i, sheet in zip(batch, sheets):
                    yield i, sheet
                pbar.update(len(batch))
                logger.debug(f"Percent finished: {100.0 * (batch[-1] + 1) / n_x:.1f}")
