"""Command-line interface for evalbench."""

import argparse
import json
import sys
from pathlib import Path

from evalbench import __version__
from evalbench.config import EvalbenchConfig, SuiteConfig, load_config
from evalbench.log import configure_logging
from evalbench.loggers import ProgressLogger
from evalbench.problems.registry import INTEGER_PROBLEMS, REAL_PROBLEMS, RegistryError
from evalbench.runner import ExperimentResults, run_experiment


def _parse_list(value: str | None, convert=str) -> list:
    if not value:
        return []
    return [convert(v.strip()) for v in value.split(",") if v.strip()]


def _parse_key(value: str) -> int | str:
    return int(value) if value.isdigit() else value


def _print_results(results: ExperimentResults) -> None:
    print("Results:")
    print("-" * 60)
    for summary in results.summaries:
        print(f"\n{summary.problem} (instance {summary.instance}, n={summary.n_variables}):")
        print(f"  Best: {summary.best_y:.6g}")
        print(f"  Mean: {summary.best_y_mean:.6g} +/- {summary.best_y_std:.6g}")
        print(f"  Success rate: {summary.success_rate:.0%}")
        print(f"  Run time: {summary.run_time_mean * 1000:.3f} ms")
        if summary.peak_memory_max_mb is not None:
            print(f"  Peak memory: {summary.peak_memory_max_mb:.2f} MB")


def cmd_run(args: argparse.Namespace) -> int:
    """Run random search over one or more problem suites."""
    config = load_config(args.config) if args.config else EvalbenchConfig()
    configure_logging((args.log_level or config.log_level).upper())

    budget = args.budget if args.budget is not None else config.budget
    repeats = args.repeats if args.repeats is not None else config.repeats
    seed = args.seed if args.seed is not None else config.seed
    if budget <= 0 or repeats <= 0:
        print(f"Error: budget and repeats must be positive, got {budget} and {repeats}", file=sys.stderr)
        return 1

    if args.problems or not config.suites:
        suites = [
            SuiteConfig(
                family="integer" if args.integer else "real",
                problems=[_parse_key(p) for p in _parse_list(args.problems)],
                instances=_parse_list(args.instances, int) or [1],
                dimensions=_parse_list(args.dims, int) or [5],
            )
        ]
    else:
        suites = config.suites

    try:
        problems = [problem for suite in suites for problem in suite.build()]
    except (RegistryError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"evalbench - Running {len(problems)} problem(s)")
    print("=" * 60)
    print(f"Budget: {budget}, Repeats: {repeats}, Seed: {seed}")
    print()

    progress = ProgressLogger(interval=args.progress) if args.progress else None
    results = run_experiment(
        problems,
        budget=budget,
        repeats=repeats,
        seed=seed,
        logger=progress,
        track_memory=args.memory or config.track_memory,
    )
    _print_results(results)

    if args.output:
        output_path = Path(args.output)
        output_data = {
            "summaries": [s.to_dict() for s in results.summaries],
            "config": {"budget": budget, "repeats": repeats, "seed": seed},
        }
        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(output_data, f, indent=2)
        print(f"\nResults saved to: {output_path}")

    return 0


def cmd_list_problems(args: argparse.Namespace) -> int:
    """List registered problems."""
    registry = INTEGER_PROBLEMS if args.integer else REAL_PROBLEMS
    print(f"evalbench - {registry.family.capitalize()} Problem Registry")
    print("=" * 60)
    print()

    for problem_id, name in registry.list():
        print(f"  {problem_id:>4}  {name}")

    return 0


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="evalbench",
        description="evalbench - Benchmark problems for optimization algorithms",
    )
    parser.add_argument("--version", action="version", version=f"evalbench {__version__}")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # run command
    run_parser = subparsers.add_parser("run", help="Run random search on benchmark problems")
    run_parser.add_argument(
        "--problems", "-p",
        help="Comma-separated problem ids or names (default: all)"
    )
    run_parser.add_argument(
        "--integer",
        action="store_true",
        help="Use the integer (pseudo-boolean) problem family"
    )
    run_parser.add_argument(
        "--instances", "-i",
        help="Comma-separated instance numbers (default: 1)"
    )
    run_parser.add_argument(
        "--dims", "-d",
        help="Comma-separated dimensions (default: 5)"
    )
    run_parser.add_argument(
        "--budget", "-b",
        type=int,
        help="Evaluation budget per run (default: 1000)"
    )
    run_parser.add_argument(
        "--repeats", "-r",
        type=int,
        help="Number of runs per problem (default: 1)"
    )
    run_parser.add_argument(
        "--seed",
        type=int,
        help="Random seed for reproducibility (default: 42)"
    )
    run_parser.add_argument(
        "--memory", "-m",
        action="store_true",
        help="Track memory usage"
    )
    run_parser.add_argument(
        "--progress",
        type=int,
        help="Print progress every N evaluations"
    )
    run_parser.add_argument(
        "--config", "-c",
        help="YAML experiment configuration"
    )
    run_parser.add_argument(
        "--log-level",
        help="Logging level (default: WARNING)"
    )
    run_parser.add_argument(
        "--output", "-o",
        help="Output file for results (JSON)"
    )

    # list-problems command
    list_parser = subparsers.add_parser("list-problems", help="List problems")
    list_parser.add_argument(
        "--integer",
        action="store_true",
        help="List integer (pseudo-boolean) problems"
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    if args.command == "run":
        return cmd_run(args)
    elif args.command == "list-problems":
        return cmd_list_problems(args)

    return 0


if __name__ == "__main__":
    sys.exit(main())
