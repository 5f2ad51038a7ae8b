"""
Lennard-Jones potential energy of an adsorbate at a point in a periodic framework.
"""
from dataclasses import dataclass
import numpy as np
from typing import Sequence
import logging

from .framework import Framework
from .forcefield import Forcefield

logger = logging.getLogger(__name__)

@dataclass(frozen=True)
class AtomTable:
    positions: np.ndarray  # (n_atoms, 3) fractional coordinates in the primitive cell
    epsilons: np.ndarray   # (n_atoms,) adsorbate cross epsilons [K]
    sigmas: np.ndarray     # (n_atoms,) adsorbate cross sigmas [Angstrom]

    def __post_init__(self):
        if self.positions.ndim != 2 or self.positions.shape[1] != 3:
            raise ValueError("Positions must be 2D (atoms, xyz) and last dimension must be 3.")
        if self.epsilons.ndim != 1 or self.sigmas.ndim != 1:
            raise ValueError("Epsilons and sigmas must be 1D")
        if not (self.positions.shape[0] == len(self.epsilons) == len(self.sigmas)):
            raise ValueError("Atom count mismatch: positions, epsilons, sigmas.")
        if len(self.epsilons) == 0:
            raise ValueError("Atom table is empty.")

    @property
    def n_atoms(self) -> int:
        return len(self.epsilons)

def build_atom_table(framework: Framework, forcefield: Forcefield) -> AtomTable:
    """
    Flatten framework atoms and their force field parameters into aligned arrays.

    All atom types are checked before anything is computed, so a structure with an
    unparameterized type fails up front. Positions are wrapped into [0, 1).

    Raises:
        ValueError: If one or more framework atom types are missing from the force field
    """
    missing = sorted(set(framework.atom_types) - set(forcefield.atom_types))
    if missing:
        raise ValueError(f"Atom types {missing} of '{framework.name}' not present in force field '{forcefield.name}'.")

    params = np.array([forcefield.parameters_for(t) for t in framework.atom_types], dtype=np.float64)
    # image ranges assume every atom inside the primitive cell
    positions = np.array(framework.fractional_coords, dtype=np.float64)
    positions = positions - np.floor(positions)
    return AtomTable(positions=positions,
                     epsilons=params[:, 0].copy(),
                     sigmas=params[:, 1].copy())

def image_offsets(rep_factors: Sequence[int]) -> np.ndarray:
    """
    Integer offsets of every periodic image in range.

    Returns:
        ((2nx+1)(2ny+1)(2nz+1), 3) array, covering -n..n inclusive on each axis
    """
    nx, ny, nz = (int(n) for n in rep_factors)
    if min(nx, ny, nz) < 0:
        raise ValueError(f"Replication factors must be non-negative, got {tuple(rep_factors)}.")
    grid = np.mgrid[-nx:nx + 1, -ny:ny + 1, -nz:nz + 1]
    return grid.reshape(3, -1).T.astype(np.float64)

def lennard_jones(r2: np.ndarray, epsilons: np.ndarray, sigmas: np.ndarray) -> np.ndarray:
    """
    12-6 Lennard-Jones pair energies from squared distances.

    E = 4 eps (sigma/r)^6 ((sigma/r)^6 - 1). Undefined for r2 == 0.
    """
    sig_ovr_r6 = sigmas * sigmas / r2
    sig_ovr_r6 = sig_ovr_r6 * sig_ovr_r6 * sig_ovr_r6
    return 4.0 * epsilons * sig_ovr_r6 * (sig_ovr_r6 - 1.0)

def energy_at_point(point: Sequence[float], atom_table: AtomTable, f_to_cartesian: np.ndarray,
                    rep_factors: Sequence[int], cutoff: float) -> float:
    """
    Van der Waals energy of the adsorbate at a fractional point.

    Sums the Lennard-Jones energy over every framework atom in the atom table and
    over all periodic images given by `rep_factors`. Moving the query point by an
    image offset is equivalent to moving the atoms the other way, so only the point
    is shifted. Pairs at r >= cutoff contribute nothing.

    A framework atom sitting exactly on the query point (or on one of its images)
    makes the energy undefined; a warning is logged and the non-finite value is
    returned as is.

    Args:
        point: (3,) fractional coordinates of the query point
        atom_table: Framework atoms and their adsorbate cross parameters
        f_to_cartesian: 3x3 fractional-to-Cartesian transform
        rep_factors: Replication factors (nx, ny, nz)
        cutoff: LJ cutoff radius in Angstrom

    Returns:
        Energy in the units of epsilon (Kelvin)
    """
    shifted = np.asarray(point, dtype=np.float64)[None, :] + image_offsets(rep_factors)
    # (images, atoms, 3) fractional displacements, then Cartesian
    dx_f = atom_table.positions[None, :, :] - shifted[:, None, :]
    dx = dx_f @ np.asarray(f_to_cartesian, dtype=np.float64).T
    r2 = np.einsum('ijk,ijk->ij', dx, dx)

    within = r2 < cutoff * cutoff
    r2_in = r2[within]
    if np.any(r2_in == 0.0):
        logger.warning(f"Framework atom coincides with point {tuple(np.asarray(point).tolist())}; energy is undefined there.")

    eps = np.broadcast_to(atom_table.epsilons, r2.shape)[within]
    sig = np.broadcast_to(atom_table.sigmas, r2.shape)[within]
    with np.errstate(divide='ignore', invalid='ignore'):
        return float(np.sum(lennard_jones(r2_in, eps, sig)))
