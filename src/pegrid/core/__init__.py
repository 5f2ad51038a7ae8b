"""
Core module for pegrid.

This module provides the data structures and calculation engines for potential
energy grids.
"""

from .framework import Framework, cell_matrix
from .forcefield import Forcefield, lorentz_berthelot
from .geometry import check_lattice_transform, unit_cell_heights, replication_factors
from .potential import AtomTable, build_atom_table, image_offsets, lennard_jones, energy_at_point
from .grid import GridSpec, compute_slab
from .parallel import GridTask, iter_slabs_parallel
from .energy_grid import EnergyGridCalculator, compute_grid, compute_grid_parallel

__all__ = [
    'Framework',
    'cell_matrix',
    'Forcefield',
    'lorentz_berthelot',
    'check_lattice_transform',
    'unit_cell_heights',
    'replication_factors',
    'AtomTable',
    'build_atom_table',
    'image_offsets',
    'lennard_jones',
    'energy_at_point',
    'GridSpec',
    'compute_slab',
    'GridTask',
    'iter_slabs_parallel',
    'EnergyGridCalculator',
    'compute_grid',
    'compute_grid_parallel',
]
