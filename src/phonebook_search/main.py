#!/usr/bin/env python3
"""
===============================================================================
PHONE BOOK SEARCH BENCHMARK - MAIN ENTRY POINT
===============================================================================
Loads a directory and a list of names to find, then times four strategies:

    linear search                (baseline)
    bubble sort + jump search    (falls back to linear search on timeout)
    quick sort + binary search
    hash table

USAGE:
    phonebook-bench                          # Files from the config
    phonebook-bench --directory d.txt --find f.txt
    phonebook-bench --limit 10000            # First 10k directory entries
    phonebook-bench --generate 20000         # Synthetic directory
    phonebook-bench --generate --write-data data  # ... also saved as input files
    phonebook-bench --no-save                # Console report only

OUTPUTS (in output.dir, default ./output):
    results.csv        - One row per strategy
    durations_bar.png  - Preparation vs search time
    report.md          - Markdown summary
    benchmark.log      - Run log

DEPENDENCIES:
    numpy, pandas, matplotlib, pyyaml
===============================================================================
"""

import argparse
import copy
import logging
import sys
from pathlib import Path
from typing import List, Optional

import yaml

from phonebook_search.core.errors import MissingFallbackError
from phonebook_search.data.generator import generate_directory, generate_queries, write_dataset
from phonebook_search.data.loader import load_directory, load_queries
from phonebook_search.performance.benchmarks import BenchmarkDriver

PROJECT_ROOT = Path(__file__).resolve().parent
DEFAULT_CONFIG_PATH = PROJECT_ROOT.parent.parent / 'config' / 'benchmark_config.yaml'

DEFAULT_CONFIG = {
    'data': {
        'directory_file': 'data/directory.txt',
        'find_file': 'data/find.txt',
        'limit': None,
    },
    'output': {
        'dir': 'output',
        'save_results': True,
        'report': True,
    },
    'generator': {
        'entries': 20000,
        'queries': 500,
        'hit_ratio': 1.0,
        'seed': 42,
    },
    'logging': {
        'level': 'INFO',
    },
}

logger = logging.getLogger('PHONEBOOK_MAIN')


def _merge(base: dict, override: dict) -> dict:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(config_path: Optional[str] = None) -> dict:
    """
    Load benchmark configuration from YAML, merged over the built-in defaults.

    Args:
        config_path: Path to YAML config. Defaults to config/benchmark_config.yaml;
            if that default is absent the built-in defaults are used as is.

    Returns:
        Configuration dictionary
    """
    path = Path(config_path) if config_path is not None else DEFAULT_CONFIG_PATH
    if not path.exists():
        if config_path is not None:
            raise FileNotFoundError(f"Config file not found: {path}")
        return copy.deepcopy(DEFAULT_CONFIG)

    with open(path, 'r') as f:
        loaded = yaml.safe_load(f) or {}
    return _merge(DEFAULT_CONFIG, loaded)


def setup_logging(output_dir: Path, level: str = 'INFO') -> None:
    """Log to stdout and to <output_dir>/benchmark.log."""
    output_dir.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        handlers=[
            logging.StreamHandler(sys.stdout),
            logging.FileHandler(output_dir / 'benchmark.log', mode='w'),
        ]
    )


def _non_negative_int(text: str) -> int:
    value = int(text)
    if value < 0:
        raise argparse.ArgumentTypeError(f"must be non-negative, got {value}")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Phone book search benchmark: linear, jump, binary and hash-table lookup',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  phonebook-bench                                   Files from the config
  phonebook-bench --directory directory.txt --find find.txt
  phonebook-bench --generate 5000 --seed 7          Synthetic data
  phonebook-bench --generate --write-data data      Synthetic data, saved as input files
        """
    )
    parser.add_argument('--config', type=str, default=None,
                        help='Path to benchmark config YAML')
    parser.add_argument('--directory', type=str, default=None,
                        help='Directory file (overrides config)')
    parser.add_argument('--find', type=str, default=None,
                        help='File of names to find (overrides config)')
    parser.add_argument('--limit', type=_non_negative_int, default=None,
                        help='Use only the first N directory entries')
    parser.add_argument('--output', type=str, default=None,
                        help='Output directory (overrides config)')
    parser.add_argument('--generate', type=int, nargs='?', const=0, default=None,
                        help='Generate a synthetic directory of N entries (default: from config)')
    parser.add_argument('--seed', type=int, default=None,
                        help='Random seed for --generate')
    parser.add_argument('--write-data', type=str, default=None, metavar='DIR',
                        help='With --generate, also write directory.txt and find.txt to DIR')
    parser.add_argument('--no-save', action='store_true',
                        help='Skip CSV, plot and report output')
    parser.add_argument('--verbose', action='store_true',
                        help='Debug logging')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point. Parses command line arguments, loads data, and runs
    every strategy. Returns the process exit status.
    """
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args.config)
    except FileNotFoundError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    output_dir = Path(args.output or config['output']['dir'])
    level = 'DEBUG' if args.verbose else config['logging']['level']
    setup_logging(output_dir, level)
    config_path = Path(args.config) if args.config else DEFAULT_CONFIG_PATH
    if config_path.exists():
        logger.debug(f"Configuration loaded from {config_path}")
    else:
        logger.debug(f"No config file at {config_path}, using built-in defaults")

    # --- Input data ---
    try:
        if args.generate is not None:
            gen = config['generator']
            n_entries = args.generate or gen['entries']
            seed = args.seed if args.seed is not None else gen['seed']
            logger.info(f"Generating {n_entries} entries (seed {seed})")
            entries = generate_directory(n_entries, seed=seed)
            queries = generate_queries(entries, gen['queries'], gen['hit_ratio'], seed=seed)
            if args.write_data:
                data_dir = Path(args.write_data)
                write_dataset(entries, queries, data_dir / 'directory.txt', data_dir / 'find.txt')
                logger.info(f"Synthetic data written to {data_dir.resolve()}")
        else:
            limit = args.limit if args.limit is not None else config['data']['limit']
            entries = load_directory(args.directory or config['data']['directory_file'], limit=limit)
            queries = load_queries(args.find or config['data']['find_file'])
    except (FileNotFoundError, ValueError) as e:
        logger.error(str(e))
        return 2

    # --- Benchmark ---
    driver = BenchmarkDriver(entries, queries)
    try:
        driver.run_all()
    except MissingFallbackError as e:
        logger.error(f"Benchmark aborted: {e}")
        return 1

    if not args.no_save and config['output']['save_results']:
        driver.save_results(str(output_dir))
        if config['output']['report']:
            BenchmarkDriver.generate_report(str(output_dir))
        logger.info(f"Outputs saved to {output_dir.resolve()}")

    return 0


if __name__ == '__main__':
    sys.exit(main())
