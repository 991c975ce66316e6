#!/usr/bin/env python
"""
Load a benchmark workload and print its block layout.

Either loads a named workload from configs/workloads.yaml (files resolved
under <root>/workloads/<name>/dataset/) or ad-hoc CSV files given on the
command line.

Usage:
    python scripts/load_workload.py higgs_2M --root /data/bench
    python scripts/load_workload.py --full data.csv --num-features 5 --num-blocks 4
    python scripts/load_workload.py --train tr.csv --test te.csv --num-features 4 --regression
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from loguru import logger

from benchdata.config import GlobalConfig, load_workloads
from benchdata.data import BufferType, DatasetFromCsv
from benchdata.errors import BenchDataError
from benchdata.utils.logger import setup_logging
from benchdata.workload import Workload, set_global_config


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("workload", nargs="?", help="Workload name from the workloads file")
    parser.add_argument("--workloads", type=Path, default=None,
                        help="Workloads YAML (default: configs/workloads.yaml)")
    parser.add_argument("--root", type=Path, default=None,
                        help="Root directory holding workloads/")
    parser.add_argument("--full", help="CSV with the full dataset")
    parser.add_argument("--train", help="CSV with the training data")
    parser.add_argument("--test", help="CSV with the test data")
    parser.add_argument("--index", help="CSV with index data")
    parser.add_argument("--num-features", type=int, default=0)
    parser.add_argument("--num-responses", type=int, default=0)
    parser.add_argument("--regression", action="store_true",
                        help="Last column is a single response")
    parser.add_argument("--num-blocks", type=int, default=1)
    parser.add_argument("--buffer-type", choices=[t.value for t in BufferType],
                        default=BufferType.HOMOGEN_DOUBLE.value)
    parser.add_argument("--progress", action="store_true", help="Show block copy progress")
    parser.add_argument("--log-level", default=None,
                        help="Log level (default: log_level from configs/global.yaml)")
    return parser.parse_args(argv)


def build_loader(args: argparse.Namespace) -> tuple[DatasetFromCsv, BufferType]:
    """Recipe for either a named workload or the ad-hoc paths."""
    if args.workload:
        workloads = load_workloads(args.workloads)
        if args.workload not in workloads:
            raise SystemExit(
                f"Unknown workload '{args.workload}'. Known: {sorted(workloads)}"
            )
        cfg = workloads[args.workload]
        return Workload(cfg.name).dataset(cfg), BufferType.from_name(cfg.buffer_type)

    loader = (
        DatasetFromCsv()
        .path_to_full(args.full)
        .path_to_train(args.train)
        .path_to_test(args.test)
        .path_to_index(args.index)
        .num_features(args.num_features)
        .num_responses(args.num_responses)
        .num_blocks(args.num_blocks)
    )
    if args.regression:
        loader.regression()
    return loader, BufferType.from_name(args.buffer_type)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)

    global_cfg = GlobalConfig.from_yaml()
    setup_logging(args.log_level or global_cfg.log_level)
    if args.root is not None:
        global_cfg.root_path = str(args.root)
    set_global_config(global_cfg)

    loader, buffer_type = build_loader(args)
    loader.show_progress(args.progress)

    try:
        dataset = loader.load(buffer_type)
    except BenchDataError as exc:
        logger.error("Load failed: {}", exc)
        return 1

    print(json.dumps(dataset.summary(), indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
