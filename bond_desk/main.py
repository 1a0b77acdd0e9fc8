"""
bond-desk command line

    bond-desk run [--env-file .env] [--input-dir DIR] [--output-dir DIR] [--concurrent]
    bond-desk generate [--count 60] [--seed 7] [--output-dir data]
"""

import argparse
import dataclasses
import logging
import sys
from typing import List, Optional

from .engine.config_loader import DEFAULT_ENV_FILE, load_desk_config
from .engine.engine_core.orchestrator import TradingSystem
from .packages.soa.errors import DeskError
from .packages.utils.data_generator import generate_data

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='bond-desk', description='Fixed-income desk service graph')
    sub = parser.add_subparsers(dest='command', required=True)

    run = sub.add_parser('run', help='process the input files through every pipeline')
    run.add_argument('--env-file', default=DEFAULT_ENV_FILE, help='env file with DESK_* settings')
    run.add_argument('--input-dir', help='directory holding trades/prices/marketdata/inquiries.txt')
    run.add_argument('--output-dir', help='directory for the output files')
    run.add_argument('--concurrent', action='store_true', help='run services as asyncio actors')

    gen = sub.add_parser('generate', help='write random input files')
    gen.add_argument('--count', type=int, default=60, help='records per file')
    gen.add_argument('--seed', type=int, default=None, help='random seed')
    gen.add_argument('--output-dir', default='data', help='target directory')
    return parser


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )


def _log_summary(stats: dict) -> None:
    for name, service_stats in stats['services'].items():
        logger.info(f"[Summary] {name}: {service_stats}")
    for name, reader_stats in stats['readers'].items():
        logger.info(f"[Summary] reader {name}: {reader_stats}")
    for sector, value in stats['bucketed_risk'].items():
        logger.info(f"[Summary] bucketed risk {sector}: {value:g}")
    if stats['records_skipped']:
        logger.warning(f"[Summary] {stats['records_skipped']} input records skipped")


def cmd_run(args: argparse.Namespace) -> int:
    config = load_desk_config(args.env_file)
    overrides = {}
    if args.input_dir:
        overrides['input_dir'] = args.input_dir
    if args.output_dir:
        overrides['output_dir'] = args.output_dir
    if args.concurrent:
        overrides['concurrent'] = True
    if overrides:
        config = dataclasses.replace(config, **overrides)

    logging.getLogger().setLevel(getattr(logging, config.log_level, logging.INFO))
    system = TradingSystem(config)
    stats = system.run()
    _log_summary(stats)
    return 0


def cmd_generate(args: argparse.Namespace) -> int:
    generate_data(args.output_dir, args.count, args.seed)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    _setup_logging('INFO')

    try:
        if args.command == 'run':
            return cmd_run(args)
        return cmd_generate(args)
    except DeskError as e:
        logger.error(f"[bond-desk] {e}")
        return 1


if __name__ == '__main__':
    sys.exit(main())
