"""
pegrid: potential energy grids of an adsorbate in a periodic framework.
"""

__version__ = "0.1.0"

# Core components
from .core.framework import Framework
from .core.forcefield import Forcefield
from .core.geometry import replication_factors, unit_cell_heights
from .core.potential import AtomTable, build_atom_table, energy_at_point
from .core.grid import GridSpec
from .core.parallel import GridTask
from .core.energy_grid import EnergyGridCalculator, compute_grid, compute_grid_parallel

# IO components
from .io.loader import FrameworkLoader, load_forcefield
from .io.writer import GridWriter, write_cube, read_cube, read_cube_header

# Utility components
from .utils.config_manager import ConfigManager

__all__ = [
    # Core
    'Framework',
    'Forcefield',
    'replication_factors',
    'unit_cell_heights',
    'AtomTable',
    'build_atom_table',
    'energy_at_point',
    'GridSpec',
    'GridTask',
    'EnergyGridCalculator',
    'compute_grid',
    'compute_grid_parallel',
    # IO
    'FrameworkLoader',
    'load_forcefield',
    'GridWriter',
    'write_cube',
    'read_cube',
    'read_cube_header',
    # Utils
    'ConfigManager',
]
