#!/usr/bin/env python3
"""
Basic Energy Grid Example

This script demonstrates how to compute the potential energy grid of a xenon
probe in a small triclinic framework using the pegrid package.
"""

import sys
from pathlib import Path
import numpy as np

# Add the src directory to the Python path
sys.path.append(str(Path(__file__).parent.parent / "src"))

from pegrid import Framework, Forcefield, EnergyGridCalculator, GridWriter, read_cube

def main():
    # Create output directory
    output_dir = Path("toy_output")
    output_dir.mkdir(exist_ok=True)

    # Build the framework from cell parameters
    print("Building framework...")
    framework = Framework.from_cell_parameters(
        "toy_framework",
        8.0, 9.0, 7.5,         # a, b, c in Angstrom
        80.0, 95.0, 110.0,     # alpha, beta, gamma in degrees
        fractional_coords=[[0.13, 0.27, 0.41], [0.62, 0.58, 0.87], [0.33, 0.91, 0.12]],
        atom_types=["C", "O", "H"]
    )

    # Mix UFF-like pure parameters with the adsorbate
    print("Building force field...")
    forcefield = Forcefield.from_pure_parameters("toy_uff", "Xe", {
        "Xe": {"epsilon": 221.0, "sigma": 4.1},
        "C": {"epsilon": 52.83, "sigma": 3.43},
        "O": {"epsilon": 30.19, "sigma": 3.12},
        "H": {"epsilon": 22.14, "sigma": 2.57},
    }, cutoff=12.5)

    # Initialize calculator
    print("Initializing energy grid calculator...")
    calculator = EnergyGridCalculator(framework, forcefield, spacing=0.5)

    # Stream the grid to disk, two worker processes
    print("Calculating grid...")
    writer = GridWriter(output_dir)
    grid_path = writer.save_grid(
        calculator.f_to_cartesian,
        calculator.grid.n_points,
        calculator.iter_energies(n_workers=2),
        structure_name=framework.name,
        adsorbate=forcefield.adsorbate,
        forcefield_name=forcefield.name
    )

    # Read it back and report the most favourable site
    header, energies = read_cube(grid_path)
    i, j, k = np.unravel_index(np.argmin(energies), header.n_points)
    print(f"Minimum energy {energies[i, j, k]:.3f} kJ/mol at grid point ({i}, {j}, {k})")
    print(f"Grid written to {grid_path}")

if __name__ == "__main__":
    main()
