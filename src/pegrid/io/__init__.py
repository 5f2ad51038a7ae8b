"""
Input/Output module for pegrid.

This module provides functionality for loading frameworks and force fields and
for writing energy grids.
"""

from .loader import FrameworkLoader, load_forcefield
from .writer import GridWriter, CubeHeader, write_cube, read_cube, read_cube_header

__all__ = ['FrameworkLoader', 'load_forcefield', 'GridWriter', 'CubeHeader',
           'write_cube', 'read_cube', 'read_cube_header']
