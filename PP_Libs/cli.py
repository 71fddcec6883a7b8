"""
Command-line runner for Pixel Pipeline.

Reads a JSON pipeline configuration, applies its operations and writes the
output image.

Usage:
    pixel-pipeline config.json
    pixel-pipeline config.json --output out.png --seed 7 --create-dirs -v
"""

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

import numpy as np

from PP_Libs import __version__
from PP_Libs.errors import PipelineError
from PP_Libs.PipelineLib.pipeline_config import load_pipeline_config
from PP_Libs.PipelineLib.pipeline_executor import get_pipeline_summary, run_config

logger = logging.getLogger(__name__)


def build_argparser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="pixel-pipeline",
        description="Apply a JSON-described image operation pipeline",
    )
    p.add_argument("config", type=str, help="Path to the pipeline configuration (JSON)")
    p.add_argument("--output", type=str, default=None,
                   help="Override output.destination from the configuration")
    p.add_argument("--seed", type=int, default=None,
                   help="Seed for the grain noise generator (reproducible output)")
    p.add_argument("--create-dirs", action="store_true",
                   help="Create the destination directory if it is missing")
    p.add_argument("--summary", action="store_true",
                   help="Print the operation list before running")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return p


def main(argv: Optional[List[str]] = None) -> int:
    args = build_argparser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_pipeline_config(args.config)
        if args.output:
            config = replace(config, output=replace(config.output, destination=Path(args.output)))

        if args.summary:
            print(get_pipeline_summary(config.operations))

        rng = np.random.default_rng(args.seed)
        output_path = run_config(config, rng=rng, create_directories=args.create_dirs)
    except PipelineError as e:
        if e.operation_index is not None:
            logger.error(f"Pipeline failed at operation {e.operation_index}: {e}")
        else:
            logger.error(f"Pipeline failed: {e}")
        return 1

    logger.info(f"Saved {output_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
