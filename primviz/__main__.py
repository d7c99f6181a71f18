import argparse
import logging
import sys
from typing import List, Optional

from .playback import DEFAULT_DELAY_MS


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="primviz",
        description="Draw a weighted graph and watch Prim's algorithm build its minimum spanning tree.",
    )
    parser.add_argument("--delay", type=int, default=DEFAULT_DELAY_MS, metavar="MS",
                        help=f"milliseconds between animation steps (default: {DEFAULT_DELAY_MS})")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="console log level (default: INFO)")
    parser.add_argument("--demo", action="store_true",
                        help="play Prim's on a sample graph in a matplotlib window")
    parser.add_argument("--source", default="A",
                        help="source node for --demo (default: A)")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = create_parser().parse_args(argv)
    if args.delay <= 0:
        print("Invalid input: --delay must be positive.", file=sys.stderr)
        return 2
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(asctime)s [%(levelname)s] %(message)s")

    if args.demo:
        from .errors import MstError
        from .plot import sample_graph, visualize_run

        try:
            visualize_run(sample_graph(), args.source, args.delay)
        except MstError as exc:
            print(f"Error: {exc.message}", file=sys.stderr)
            return 1
        return 0

    from .app import main as run_app

    run_app(args.delay)
    return 0


if __name__ == "__main__":
    sys.exit(main())
