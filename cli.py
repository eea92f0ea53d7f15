"""
Command line interface for the EvoPool SDK.

Examples
--------
Evolve a network against a labeled dataset::

    python cli.py run --data data/xor.json --generations 50 --seed 7

Show the configuration reference::

    python cli.py describe-config --section mutation
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from evopool import EvoPool


def _default_config_path(path: str) -> Path:
    candidate = Path(path)
    if candidate.exists():
        return candidate
    raise FileNotFoundError(f"Configuration file not found: {candidate}")


def _run_command(args: argparse.Namespace) -> None:
    overrides: dict = {}
    if args.generations is not None:
        overrides.setdefault("engine", {})["generations"] = args.generations
    if args.seed is not None:
        overrides.setdefault("pool", {})["seed"] = args.seed
    if args.checkpoint:
        overrides.setdefault("reporting", {})["checkpoint_path"] = args.checkpoint
    config_source = _default_config_path(args.config) if args.config else None
    pool = EvoPool(
        data=Path(args.data),
        config=overrides or None,
        global_config=config_source,
        run_name=args.run_name,
    )
    result = pool.run()
    standings = result.history[-1].standings if result.history else []
    top = [{"name": name, "score": score} for name, score in standings]
    print(json.dumps({"run_id": result.run_id, "metrics": result.metrics, "top": top}, indent=2))


def _describe_config_command(args: argparse.Namespace) -> None:
    if args.key:
        print(EvoPool.explain(args.key))
        return
    EvoPool.describe_config(section=args.section, as_markdown=args.markdown, to_console=True)


def _generate_config_docs_command(args: argparse.Namespace) -> None:
    output = Path(args.output)
    path = EvoPool.generate_config_docs(output)
    print(f"Configuration reference generated at {path.resolve()}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="evopool", description="EvoPool neuroevolution CLI")
    subparsers = parser.add_subparsers(dest="command")

    run_parser = subparsers.add_parser("run", help="Evolve a population against a labeled dataset.")
    run_parser.add_argument("--data", required=True, help="Dataset file (CSV or JSON).")
    run_parser.add_argument("--config", help="Optional configuration file (YAML/JSON).")
    run_parser.add_argument("--generations", type=int, help="Override engine.generations.")
    run_parser.add_argument("--seed", type=int, help="Override pool.seed for a reproducible run.")
    run_parser.add_argument("--checkpoint", help="Append the best individual of each generation to this file.")
    run_parser.add_argument("--run-name", help="Optional name used for the run identifier (slugified).")
    run_parser.set_defaults(func=_run_command)

    describe_parser = subparsers.add_parser("describe-config", help="Display EvoPool configuration schema.")
    describe_parser.add_argument("--section", help="Optional configuration section to filter.")
    describe_parser.add_argument("--markdown", action="store_true", help="Render the output as markdown.")
    describe_parser.add_argument("--key", help="Explain a single configuration key instead of listing the table.")
    describe_parser.set_defaults(func=_describe_config_command)

    config_doc_parser = subparsers.add_parser("generate-config-docs", help="Write CONFIG.md from the schema.")
    config_doc_parser.add_argument("--output", default="CONFIG.md", help="Destination markdown file (default: CONFIG.md).")
    config_doc_parser.set_defaults(func=_generate_config_docs_command)

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    argv = list(sys.argv[1:] if argv is None else argv)
    if argv and argv[0].startswith("--"):
        argv = ["run", *argv]
    if not argv:
        parser.print_help()
        return
    parsed = parser.parse_args(argv)
    if not hasattr(parsed, "func"):
        parser.print_help()
        return
    parsed.func(parsed)


if __name__ == "__main__":
    main()
