import argparse
from pathlib import Path
from typing import Optional


def positive_float(value: str) -> float:
    try:
        number = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected a number, got {value!r}") from None
    if number <= 0:
        raise argparse.ArgumentTypeError("must be greater than zero")
    return number


def non_negative_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected an integer, got {value!r}") from None
    if number < 0:
        raise argparse.ArgumentTypeError("must not be negative")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="uiproducer",
        description="Drive refreshable UI state from a cancellable producer.",
        epilog=(
            "Examples:\n"
            "  uiproducer watch notes.txt\n"
            "  uiproducer watch notes.txt --interval 0.5 --max-refreshes 10\n"
            "  uiproducer watch notes.txt --config ~/.config/uiproducer/config.toml -v\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--config", type=Path, default=None, help="Path to the configuration file")
    parser.add_argument("-v", "--verbose", action="store_true", default=None, help="Enable debug logging.")
    parser.add_argument("--log-file", type=str, default=None, help="Write logs to a rotating file.")

    color = parser.add_mutually_exclusive_group()
    color.add_argument("--force-color", dest="force_color", action="store_const", const=True, default=None,
                       help="Always color console output.")
    color.add_argument("--no-color", dest="force_color", action="store_const", const=False,
                       help="Never color console output.")

    subparsers = parser.add_subparsers(dest="command", required=True)

    watch = subparsers.add_parser("watch", help="Render a file through a refreshing producer.")
    watch.add_argument("path", type=Path, help="File to read on every refresh")
    watch.add_argument(
        "--interval",
        type=positive_float,
        default=None,
        help="Seconds between refresh requests (default from configuration).",
    )
    watch.add_argument(
        "--max-refreshes",
        type=non_negative_int,
        default=None,
        help="Stop after this many refresh requests (runs until interrupted when omitted).",
    )
    return parser


def parse_arguments(argv: Optional[list[str]] = None) -> argparse.Namespace:
    return build_parser().parse_args(argv)
