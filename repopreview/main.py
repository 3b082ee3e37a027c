"""Main entry point for the preview generator."""

import sys
import asyncio
import argparse
import logging
from pathlib import Path
from typing import List, Optional
from .config import Config
from .pipeline import run_pipeline

logger = logging.getLogger(__name__)


def find_config(path: Optional[str]) -> Path:
    """Resolve the configuration file, falling back to the one beside the package."""
    if path:
        return Path(path)
    config_path = Path("config.yaml")
    if not config_path.exists():
        config_path = Path(__file__).parent.parent / "config.yaml"
    return config_path


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Capture GitHub Pages preview thumbnails")
    parser.add_argument("-c", "--config", help="Configuration YAML file (default: config.yaml)")
    parser.add_argument("-o", "--output-dir", help="Directory for the screenshots")
    parser.add_argument("--owner", help="Account whose repositories are captured")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point. Returns the process exit code."""
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    config = Config(str(find_config(args.config)))
    if args.output_dir:
        config.override("output", "dir", args.output_dir)
    if args.owner:
        config.override("github", "owner", args.owner)

    try:
        asyncio.run(run_pipeline(config))
    except Exception as e:
        logger.error(f"A critical error occurred during main execution: {e}", exc_info=True)
        return 1
    finally:
        logger.info("--- Script finished ---")

    return 0


if __name__ == "__main__":
    sys.exit(main())
