"""
Energy grid writing module for pegrid.

Grids are written in the Gaussian cube format (http://paulbourke.net/dataformats/cube/)
with energies in kJ/mol, and can be read back for inspection.
"""
from dataclasses import dataclass
import numpy as np
from pathlib import Path
import logging
import os
import tempfile
from typing import Any, Dict, Iterable, Optional, Sequence, Tuple, Union
import yaml

from ..core.grid import GridSpec

logger = logging.getLogger(__name__)

KELVIN_TO_KJ_PER_MOL = 8.314 / 1000.0
VALUES_PER_LINE = 6
DEFAULT_COMMENTS = ("This is a grid file generated by pegrid", "Loop order: x, y, z")

@dataclass
class CubeHeader:
    comments: Tuple[str, str]
    n_atoms: int
    origin: np.ndarray         # (3,)
    n_points: Tuple[int, int, int]
    voxel_vectors: np.ndarray  # (3, 3), one row per grid axis

def write_cube(output_path: Union[str, Path], f_to_cartesian: np.ndarray, n_points: Sequence[int],
               energies: Iterable[float], comments: Optional[Sequence[str]] = None) -> Path:
    """
    Write an energy grid to a cube file.

    Energies are consumed lazily in x -> y -> z order (z fastest) and converted from
    Kelvin to kJ/mol. Each value is followed by a space; a line ends after every
    sixth value of a z-run and after every complete z-run.

    The file is assembled under a temporary name next to `output_path` and moved
    into place only once the whole grid has been written. If the energy stream
    raises, or holds the wrong number of values, no file is left behind.

    Args:
        output_path: Destination file
        f_to_cartesian: 3x3 fractional-to-Cartesian transform (columns a, b, c)
        n_points: (Nx, Ny, Nz)
        energies: Energies in Kelvin, Nx*Ny*Nz values
        comments: Two free-text header lines

    Returns:
        Path of the written file

    Raises:
        ValueError: If the energy stream does not match the grid size
    """
    output_path = Path(output_path)
    grid = GridSpec(n_points=tuple(int(n) for n in n_points))
    comments = tuple(comments) if comments is not None else DEFAULT_COMMENTS
    if len(comments) != 2:
        raise ValueError(f"Cube files take exactly two comment lines, got {len(comments)}.")
    voxels = grid.voxel_vectors(f_to_cartesian)
    n_x, n_y, n_z = grid.n_points

    fd, tmp_name = tempfile.mkstemp(prefix=f".{output_path.name}.", suffix=".tmp", dir=output_path.parent)
    try:
        with os.fdopen(fd, 'w') as f:
            for line in comments:
                f.write(f"{line}\n")
            f.write("%d %f %f %f\n" % (0, 0.0, 0.0, 0.0))  # 0 atoms, then origin
            for n_axis, vec in zip(grid.n_points, voxels):
                f.write("%d %f %f %f\n" % (n_axis, vec[0], vec[1], vec[2]))

            values = iter(energies)
            n_written = 0
            for _ in range(n_x * n_y):
                for k in range(1, n_z + 1):
                    try:
                        energy = next(values)
                    except StopIteration:
                        raise ValueError(f"Energy stream ended after {n_written} of {grid.n_total} values.") from None
                    f.write("%e " % (energy * KELVIN_TO_KJ_PER_MOL))
                    n_written += 1
                    if k % VALUES_PER_LINE == 0:
                        f.write("\n")
                f.write("\n")
            if next(values, None) is not None:
                raise ValueError(f"Energy stream holds more than {grid.n_total} values.")
        os.chmod(tmp_name, 0o644)
        os.replace(tmp_name, output_path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise

    logger.info(f"Grid available in {output_path}")
    return output_path

def read_cube_header(path: Union[str, Path]) -> CubeHeader:
    """Parse the header of a cube file."""
    with open(path, 'r') as f:
        return _parse_header(f)

def read_cube(path: Union[str, Path]) -> Tuple[CubeHeader, np.ndarray]:
    """
    Read a cube file.

    Returns:
        (header, values) with values shaped (Nx, Ny, Nz) in the file's units (kJ/mol)
    """
    with open(path, 'r') as f:
        header = _parse_header(f)
        values = np.array(f.read().split(), dtype=np.float64)
    if values.size != int(np.prod(header.n_points)):
        raise ValueError(f"Cube file {path} holds {values.size} values, header promises {header.n_points}.")
    return header, values.reshape(header.n_points)

def _parse_header(f) -> CubeHeader:
    comments = (f.readline().rstrip("\n"), f.readline().rstrip("\n"))
    fields = f.readline().split()
    if len(fields) < 4:
        raise ValueError("Malformed cube header: missing atom count and origin line.")
    n_atoms = abs(int(fields[0]))
    origin = np.array([float(v) for v in fields[1:4]])
    counts, vectors = [], []
    for _ in range(3):
        fields = f.readline().split()
        if len(fields) < 4:
            raise ValueError("Malformed cube header: missing voxel axis line.")
        counts.append(int(fields[0]))
        vectors.append([float(v) for v in fields[1:4]])
    for _ in range(n_atoms):
        f.readline()
    return CubeHeader(comments=comments, n_atoms=n_atoms, origin=origin,
                      n_points=tuple(counts), voxel_vectors=np.array(vectors))

class GridWriter:
    """Class for writing energy grids and run settings to an output directory."""

    def __init__(self, output_dir: Union[str, Path]):
        """
        Initialize the grid writer.

        Args:
            output_dir: Directory to write output files to
        """
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def grid_path(self, structure_name: str, adsorbate: str, forcefield_name: str) -> Path:
        """Default grid location: <output_dir>/<forcefield>/<structure>_<adsorbate>.cube"""
        return self.output_dir / forcefield_name / f"{structure_name}_{adsorbate}.cube"

    def save_grid(self, f_to_cartesian: np.ndarray, n_points: Sequence[int], energies: Iterable[float],
                  filename: Optional[Union[str, Path]] = None, structure_name: str = "framework",
                  adsorbate: str = "adsorbate", forcefield_name: str = "forcefield") -> Path:
        """
        Save an energy grid (Kelvin) as a cube file in kJ/mol.

        Args:
            filename: Optional custom file name relative to the output directory
                (default: <forcefield>/<structure>_<adsorbate>.cube)
        """
        if filename is None:
            filepath = self.grid_path(structure_name, adsorbate, forcefield_name)
        else:
            filepath = self.output_dir / filename
        filepath.parent.mkdir(parents=True, exist_ok=True)

        logger.info(f"Writing grid to {filepath}")
        return write_cube(filepath, f_to_cartesian, n_points, energies)

    def save_config(self, config: Dict[str, Any], filename: Optional[str] = None) -> Path:
        """
        Save configuration data to a YAML file.

        Args:
            config: Configuration dictionary to save
            filename: Optional custom filename (default: 'config.yaml')
        """
        if filename is None:
            filename = 'config.yaml'
        filepath = self.output_dir / filename

        logger.info(f"Saving configuration to {filepath}")
        with open(filepath, 'w') as f:
            yaml.dump(config, f, default_flow_style=False)
        return filepath
