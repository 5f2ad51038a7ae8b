import argparse
import logging

from pegrid.io.loader import FrameworkLoader, load_forcefield
from pegrid.io.writer import GridWriter
from pegrid.core.energy_grid import EnergyGridCalculator
from pegrid.utils.config_manager import ConfigManager
from pegrid.utils.helpers import ensure_directory

logger = logging.getLogger(__name__)

def main(argv=None):
    parser = argparse.ArgumentParser(description='Potential energy grid of an adsorbate in a periodic framework.')
    parser.add_argument('--structure', type=str, help='Path to the framework structure file (any format OVITO reads).')
    parser.add_argument('--structure-format', type=str, help="OVITO input format of the structure file (default: auto).")
    parser.add_argument('--forcefield', type=str, help='Path to the YAML force field table.')
    parser.add_argument('--adsorbate', type=str, help='Adsorbate label in the force field table.')
    parser.add_argument('--config', type=str, help='Path to YAML configuration file.')
    parser.add_argument('--spacing', type=float, help='Override grid spacing from config (A).')
    parser.add_argument('--cutoff', type=float, help='Override LJ cutoff radius (A); default is the force field table value, else 12.5.')
    parser.add_argument('--workers', type=int, help='Number of worker processes (1 = serial).')
    parser.add_argument('--output-dir', type=str, help='Directory for results.')
    parser.add_argument('--output', type=str, help='Grid file name relative to the output directory.')
    parser.add_argument('--no-progress', action='store_true', help='Disable the progress bar.')
    parser.add_argument('--verbose', action='store_true', help='Enable debug logging.')
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    try:
        cfg = ConfigManager(args.config)
        cfg.update_config({
            'framework': {'file': args.structure, 'format': args.structure_format},
            'forcefield': {'file': args.forcefield, 'adsorbate': args.adsorbate},
            'grid': {'spacing': args.spacing, 'cutoff': args.cutoff, 'n_workers': args.workers},
            'output': {'directory': args.output_dir, 'filename': args.output},
        })
        cfg.validate_inputs()
        fw_cfg, ff_cfg = cfg.get_framework_config(), cfg.get_forcefield_config()
        grid_cfg, out_cfg = cfg.get_grid_config(), cfg.get_output_config()

        framework = FrameworkLoader(fw_cfg['file'], file_format=fw_cfg['format'], name=fw_cfg.get('name')).load()
        cutoff = grid_cfg.get('cutoff')
        forcefield = load_forcefield(ff_cfg['file'], ff_cfg['adsorbate'],
                                     cutoff=None if cutoff is None else float(cutoff))
        cfg.update_config({'grid': {'cutoff': forcefield.cutoff}})

        calc = EnergyGridCalculator(framework, forcefield, spacing=float(grid_cfg['spacing']))
        writer = GridWriter(ensure_directory(out_cfg['directory']))

        logger.info("Writing grid...")
        writer.save_grid(calc.f_to_cartesian, calc.grid.n_points,
                         calc.iter_energies(int(grid_cfg['n_workers']), show_progress=not args.no_progress),
                         filename=out_cfg.get('filename'), structure_name=framework.name,
                         adsorbate=forcefield.adsorbate, forcefield_name=forcefield.name)
        writer.save_config(cfg.to_dict(), f"{framework.name}_{forcefield.adsorbate}_config.yaml")
        logger.info("pegrid processing completed.")

    except FileNotFoundError as e: logger.error(f"File Error: {e}"); raise SystemExit(1)
    except ValueError as e: logger.error(f"Value Error: {e}"); raise SystemExit(1)
    except Exception as e: logger.error(f"Unexpected error: {e}", exc_info=True); raise SystemExit(1)

if __name__ == "__main__":
    main()
