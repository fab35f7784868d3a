"""Command line entry point: new, bench and merge."""

import argparse
import json
import logging
import sys
from pathlib import Path

from .errors import SearchBenchError, SetupError
from .evaluation.benchmark import BenchmarkRunner, format_summary, summarize
from .index.merge import run_merge
from .index.queries import read_query_file
from .index.schema import run_new
from .index.searcher import TantivySearchHandle

logger = logging.getLogger("searchbench")


def non_negative_int(value: str) -> int:
    try:
        n = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"Failed to read num_repeat argument as an integer: {value!r}"
        ) from None
    if n < 0:
        raise argparse.ArgumentTypeError(f"num_repeat must be non-negative, got {n}")
    return n


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="searchbench", description="Operator commands for a tantivy index"
    )
    parser.add_argument("-v", "--verbose", action="count", default=0,
                        help="More logging on stderr (repeat for debug)")
    sub = parser.add_subparsers(dest="command", required=True)

    new = sub.add_parser("new", help="Create a new index, defining its schema interactively")
    new.add_argument("-i", "--index", required=True, help="Index directory to create")

    bench = sub.add_parser("bench", help="Run a benchmark over a list of queries")
    bench.add_argument("-i", "--index", required=True, help="Index directory")
    bench.add_argument("-q", "--queries", required=True, help="File with one query per line")
    bench.add_argument("-n", "--num-repeat", type=non_negative_int, required=True,
                       help="Number of passes over the query list")
    bench.add_argument("--summary", action="store_true",
                       help="Print per-query latency statistics after both passes")
    bench.add_argument("--output-dir", type=str, default=None,
                       help="Directory to save JSON results (and plots) into")
    bench.add_argument("--plot", action="store_true",
                       help="Save a latency plot into --output-dir")
    bench.add_argument("--progress", action="store_true",
                       help="Show a progress bar on stderr")

    merge = sub.add_parser("merge", help="Merge segments and garbage-collect old files")
    merge.add_argument("-i", "--index", required=True, help="Index directory")
    return parser


def setup_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity > 1:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def run_bench(args: argparse.Namespace) -> None:
    if args.plot and not args.output_dir:
        raise SetupError("--plot requires --output-dir")

    print(f"index_path : {args.index}")
    print(f"queries : {args.queries}")
    print("-------------------------------\n\n\n")

    handle = TantivySearchHandle.from_path(args.index)
    queries = read_query_file(args.queries)

    runner = BenchmarkRunner(handle, queries, args.num_repeat, progress=args.progress)
    results = runner.run()

    if args.summary:
        print("\n\nSUMMARY\n")
        for line in format_summary(summarize(results)):
            print(line)

    if args.output_dir:
        output_dir = Path(args.output_dir)
        json_path = output_dir / "bench_results.json"
        try:
            output_dir.mkdir(parents=True, exist_ok=True)
            with open(json_path, "w") as f:
                json.dump([r.to_dict() for r in results], f, indent=2)
        except OSError as e:
            raise SetupError(f"Failed to write results to {json_path}.\n{e}") from e
        logger.info("Results saved to %s", json_path)

        if args.plot:
            # Imported lazily: matplotlib is slow to import.
            from .evaluation.plotting import plot_latency_by_query

            plot_latency_by_query(results, save_path=output_dir / "bench_latency.png")


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)
    try:
        if args.command == "new":
            run_new(args.index)
        elif args.command == "bench":
            run_bench(args)
        elif args.command == "merge":
            run_merge(args.index)
    except SearchBenchError as e:
        logger.error("%s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
