"""
Framework and force field loading module.
"""
import numpy as np
from pathlib import Path
import logging
from typing import Optional, Union
import yaml

from ..core.framework import Framework
from ..core.forcefield import Forcefield

# Try to import OVITO, but don't fail if it's not available
try:
    from ovito.io import import_file
    OVITO_AVAILABLE = True
except ImportError as e:
    logging.error(f"OVITO import failed: {e}")
    OVITO_AVAILABLE = False

logger = logging.getLogger(__name__)

class FrameworkLoader:
    def __init__(self, filename: Union[str, Path], file_format: str = 'auto', name: Optional[str] = None):
        self.filepath = Path(filename)
        if not self.filepath.exists():
            raise FileNotFoundError(f"Structure file not found: {filename}")
        self.file_format = file_format
        self.name = name or self.filepath.stem

    def load(self) -> Framework:
        """
        Read the first frame of a structure file with OVITO.

        Cartesian positions are mapped into fractional coordinates of the simulation
        cell and wrapped into [0, 1). Atom type labels are the OVITO particle type names.
        """
        if not OVITO_AVAILABLE:
            raise ImportError("OVITO is required to read structure files (pip install ovito).")

        ovito_fmt = None if self.file_format == 'auto' else self.file_format
        logger.info(f"Constructing framework object for {self.name} from '{self.filepath.name}'.")
        logger.debug(f"OVITO load format: {ovito_fmt or 'auto-detected'}")
        try:
            pipeline = import_file(str(self.filepath), input_format=ovito_fmt) if ovito_fmt else import_file(str(self.filepath))
            data = pipeline.compute(0)
        except Exception as e:
            logger.error(f"OVITO failed to load file '{self.filepath.name}': {e}")
            raise RuntimeError(f"OVITO import failed: {e}")

        if not (data and hasattr(data, 'cell') and data.cell is not None):
            raise ValueError(f"OVITO: Could not read cell data from '{self.filepath.name}'.")
        if not (hasattr(data, 'particles') and data.particles and data.particles.count > 0):
            raise ValueError(f"OVITO: No particles in '{self.filepath.name}'.")

        cell = np.array(data.cell[...], dtype=np.float64)
        f_to_cartesian, origin = cell[:3, :3], cell[:3, 3]
        if abs(np.linalg.det(f_to_cartesian)) < 1e-12:
            raise ValueError(f"Cell of '{self.filepath.name}' has zero volume.")

        positions = np.array(data.particles.positions, dtype=np.float64)
        fractional = np.linalg.solve(f_to_cartesian, (positions - origin).T).T
        fractional = fractional - np.floor(fractional)

        type_prop = data.particles.particle_types
        if type_prop is None:
            raise ValueError(f"OVITO: No particle types in '{self.filepath.name}'.")
        labels = []
        for type_id in np.asarray(type_prop):
            ptype = type_prop.type_by_id(int(type_id))
            labels.append(ptype.name if ptype is not None and ptype.name else str(int(type_id)))

        framework = Framework(name=self.name, f_to_cartesian=f_to_cartesian,
                              fractional_coords=fractional, atom_types=tuple(labels))
        logger.info(f"Framework '{self.name}' loaded via OVITO: {framework.n_atoms} atoms, "
                    f"a = {framework.a:.3f}, b = {framework.b:.3f}, c = {framework.c:.3f} A.")
        return framework

def load_forcefield(filename: Union[str, Path], adsorbate: str, cutoff: Optional[float] = None) -> Forcefield:
    """
    Load pure-component LJ parameters from a YAML table and mix them with the adsorbate.

    Expected layout::

        name: UFF
        cutoff: 12.5
        atoms:
          C:  {epsilon: 52.83, sigma: 3.43}
          Xe: {epsilon: 221.0, sigma: 4.1}

    Args:
        filename: Path to the YAML force field table
        adsorbate: Adsorbate label, must appear under `atoms`
        cutoff: LJ cutoff radius; overrides the table's value (default 12.5 A)

    Returns:
        Forcefield with Lorentz-Berthelot cross parameters
    """
    ff_path = Path(filename)
    if not ff_path.exists():
        raise FileNotFoundError(f"Force field file not found: {filename}")

    with open(ff_path, 'r') as f:
        table = yaml.safe_load(f) or {}
    if not isinstance(table.get('atoms'), dict) or not table['atoms']:
        raise ValueError(f"Force field file {ff_path.name} has no 'atoms' table.")

    name = str(table.get('name', ff_path.stem))
    if cutoff is None:
        cutoff = float(table.get('cutoff', 12.5))
    logger.info(f"Constructing forcefield object for {name} (adsorbate {adsorbate}, cutoff {cutoff:.2f} A).")
    return Forcefield.from_pure_parameters(name, adsorbate, table['atoms'], cutoff=cutoff)
