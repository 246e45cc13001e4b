"""Main entry point for Recess."""

import argparse
import logging
import sys
from pathlib import Path

from recess.errors import RecessError
from recess.runtime.controller import RuntimeController


def main() -> int:
    """Main entry point.

    Returns:
        Exit code (0 for success).
    """
    parser = argparse.ArgumentParser(
        description="Recess - learning app client with inactivity session timeout"
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=Path("config/default.yaml"),
        help="Path to configuration file (default: config/default.yaml)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )
    parser.add_argument(
        "--version",
        "-v",
        action="store_true",
        help="Show version and exit",
    )

    args = parser.parse_args()

    if args.version:
        from recess import __version__

        print(f"Recess v{__version__}")
        return 0

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    try:
        controller = RuntimeController(config_path=args.config)
        controller.start()
    except KeyboardInterrupt:
        print("\nInterrupted by user.")
    except RecessError as e:
        print(f"Error: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
