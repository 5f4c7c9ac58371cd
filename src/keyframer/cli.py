"""Command line entry point: extract key frames from a video into a report."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional

from keyframer import __version__
from keyframer.core.exceptions import KeyframerError
from keyframer.session import AnalysisSession
from keyframer.utils.config import load_config

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="keyframer",
        description="Sample evenly spaced key frames from a video and export an HTML report.",
    )
    parser.add_argument("video", type=Path, help="Path to the video file")
    parser.add_argument(
        "-n", "--frames", type=int, default=None,
        help="Number of frames to extract (default: from config, 8)",
    )
    parser.add_argument(
        "-o", "--output", type=Path, default=None,
        help="Directory for the report (default: from config)",
    )
    parser.add_argument("-c", "--config", type=Path, default=None, help="YAML config file")
    parser.add_argument("--title", default=None, help="Report title")
    parser.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING, ...")
    parser.add_argument("--version", action="version", version=f"keyframer {__version__}")
    return parser


async def run(args: argparse.Namespace) -> Path:
    overrides = {}
    if args.frames is not None:
        overrides["extraction.frame_count"] = args.frames
    if args.title is not None:
        overrides["export.title"] = args.title
    if args.log_level is not None:
        overrides["logging.level"] = args.log_level

    config = load_config(args.config, overrides=overrides)
    output_dir = args.output or Path(config.export.output_directory)

    async with AnalysisSession(config) as session:
        await session.load(args.video)
        result = await session.auto_extract()
        logger.info(f"Extracted {len(result)} frames ({result.state.name})")
        document = session.export()
        return document.save(output_dir)


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the keyframer command."""
    args = build_parser().parse_args(argv)
    try:
        path = asyncio.run(run(args))
    except KeyframerError as e:
        logger.error(f"keyframer failed: {e}")
        return 1
    except OSError as e:
        logger.error(f"Could not write report: {e}")
        return 1
    print(path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
