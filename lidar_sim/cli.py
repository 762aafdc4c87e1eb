"""Command line options for a lidar data generation run."""

import argparse
from typing import List, Optional, Union

from loguru import logger

from lidar_sim.config import DEFAULT_ITERATIONS, DEFAULT_OUT_DIR, SimulationConfig

TRUE_VALUES = ('1', 'true', 'yes', 'on')
FALSE_VALUES = ('0', 'false', 'no', 'off')


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Generate synthetic 2D lidar sweeps along planned paths')
    parser.add_argument('--out_dir', type=str, nargs='?', default=DEFAULT_OUT_DIR, help='Output directory for JSON files')
    parser.add_argument('--n_iterations', type=str, nargs='?', default=None,
                        help=f'Number of episodes to record (default {DEFAULT_ITERATIONS})')
    parser.add_argument('--label', type=str, nargs='?', default=None, help='Text drawn at the arena centre')
    # Switches also accept an explicit value, e.g. --render=yes or --suppress_lines=0
    parser.add_argument('--suppress_lines', nargs='?', const=True, default=False, help='Do not draw ray segments')
    parser.add_argument('--seed', type=str, nargs='?', default=None, help='Seed for the first episode layout')
    parser.add_argument('--render', nargs='?', const=True, default=False, help='Show the matplotlib view while running')
    parser.add_argument('--count_empty_episodes', nargs='?', const=True, default=False,
                        help='Count episodes without a viable path toward the limit')
    return parser


def _int_or_default(value: Optional[str], default: Optional[int], name: str,
                    minimum: Optional[int] = None) -> Optional[int]:
    if value is None:
        return default
    try:
        parsed = int(value)
    except ValueError:
        logger.warning(f"Ignoring malformed --{name} {value!r}; using {default}")
        return default
    if minimum is not None and parsed < minimum:
        logger.warning(f"Ignoring out-of-range --{name} {parsed}; using {default}")
        return default
    return parsed


def _flag(value: Union[bool, str], name: str) -> bool:
    """A switch given bare is on; an explicit value is read as a boolean word."""
    if isinstance(value, bool):
        return value
    word = value.strip().lower()
    if word in TRUE_VALUES:
        return True
    if word in FALSE_VALUES:
        return False
    logger.warning(f"Unrecognised value {value!r} for --{name}; treating the switch as set")
    return True


def parse_args(argv: Optional[List[str]] = None) -> SimulationConfig:
    """Parse argv into a SimulationConfig; unknown options are ignored."""
    args, unknown = build_parser().parse_known_args(argv)
    if unknown:
        logger.debug(f"Ignoring unrecognised arguments: {unknown}")

    return SimulationConfig(
        out_dir=args.out_dir or DEFAULT_OUT_DIR,
        n_iterations=_int_or_default(args.n_iterations, DEFAULT_ITERATIONS, 'n_iterations', minimum=1),
        label=args.label,
        suppress_lines=_flag(args.suppress_lines, 'suppress_lines'),
        seed=_int_or_default(args.seed, None, 'seed', minimum=0),
        render=_flag(args.render, 'render'),
        count_empty_episodes=_flag(args.count_empty_episodes, 'count_empty_episodes'),
    )
