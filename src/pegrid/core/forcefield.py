"""
Lennard-Jones force field with adsorbate cross-interaction parameters.
"""
from dataclasses import dataclass, field
import numpy as np
from typing import Dict, Mapping, Tuple
import logging

logger = logging.getLogger(__name__)

def lorentz_berthelot(epsilon_i: float, sigma_i: float,
                      epsilon_j: float, sigma_j: float) -> Tuple[float, float]:
    """
    Lorentz-Berthelot combining rules.

    sigma_ij is the arithmetic mean of the two sigmas, epsilon_ij the geometric
    mean of the two epsilons.
    """
    return float(np.sqrt(epsilon_i * epsilon_j)), 0.5 * (sigma_i + sigma_j)

@dataclass(frozen=True)
class Forcefield:
    name: str
    adsorbate: str
    cutoff: float
    # atom type -> (epsilon [K], sigma [Angstrom]) of the adsorbate/atom-type pair
    cross_parameters: Dict[str, Tuple[float, float]] = field(default_factory=dict)

    def __post_init__(self):
        if self.cutoff <= 0:
            raise ValueError(f"Cutoff must be positive, got {self.cutoff}.")
        for atom_type, (eps, sig) in self.cross_parameters.items():
            if eps < 0 or sig <= 0:
                raise ValueError(f"Invalid LJ parameters for '{atom_type}': epsilon={eps}, sigma={sig}.")

    @property
    def atom_types(self) -> Tuple[str, ...]:
        return tuple(self.cross_parameters)

    def parameters_for(self, atom_type: str) -> Tuple[float, float]:
        """(epsilon, sigma) of the adsorbate interacting with `atom_type`."""
        try:
            return self.cross_parameters[atom_type]
        except KeyError:
            raise ValueError(f"Atom type '{atom_type}' not present in force field '{self.name}'.") from None

    @classmethod
    def from_pure_parameters(cls, name: str, adsorbate: str,
                             pure_parameters: Mapping[str, Mapping[str, float]],
                             cutoff: float = 12.5) -> 'Forcefield':
        """
        Mix pure-component parameters into adsorbate cross-interaction parameters.

        Args:
            name: Force field name
            adsorbate: Adsorbate label, must be a key of `pure_parameters`
            pure_parameters: {label: {'epsilon': K, 'sigma': Angstrom}}
            cutoff: LJ cutoff radius in Angstrom

        Returns:
            Forcefield instance with one entry per label (the adsorbate included)

        Raises:
            ValueError: If the adsorbate is missing or an entry lacks epsilon/sigma
        """
        missing = {label: sorted({'epsilon', 'sigma'} - set(params))
                   for label, params in pure_parameters.items()
                   if not {'epsilon', 'sigma'}.issubset(params)}
        if missing:
            raise ValueError(f"Missing force field parameters: {missing}")
        if adsorbate not in pure_parameters:
            raise ValueError(f"Adsorbate '{adsorbate}' not present in force field '{name}'.")

        eps_ads = float(pure_parameters[adsorbate]['epsilon'])
        sig_ads = float(pure_parameters[adsorbate]['sigma'])
        cross = {str(label): lorentz_berthelot(eps_ads, sig_ads,
                                               float(params['epsilon']), float(params['sigma']))
                 for label, params in pure_parameters.items()}
        logger.debug(f"Mixed {len(cross)} atom types with adsorbate '{adsorbate}' (Lorentz-Berthelot).")
        return cls(name=name, adsorbate=adsorbate, cutoff=float(cutoff), cross_parameters=cross)
