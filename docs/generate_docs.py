"""
Utility script to regenerate EvoPool documentation artifacts.

Usage:
    python docs/generate_docs.py

Refreshes the configuration reference markdown from the packaged schema and,
when pdoc is available, renders API documentation into ``docs/site``.
"""

from __future__ import annotations

import subprocess
import sys
from pathlib import Path

from evopool.utils.config_reference import write_markdown


def build_config_reference() -> None:
    docs_dir = Path(__file__).resolve().parent
    write_markdown(docs_dir / "config_reference.md")
    write_markdown(docs_dir.parent / "CONFIG.md")


def build_api_docs() -> None:
    output_dir = Path(__file__).resolve().parent / "site"
    output_dir.mkdir(parents=True, exist_ok=True)
    subprocess.run(
        [sys.executable, "-m", "pdoc", "evopool", "--output-dir", str(output_dir)],
        check=True,
    )


def main() -> None:
    build_config_reference()
    try:
        build_api_docs()
    except subprocess.CalledProcessError:
        print("pdoc not installed or failed to run; skipping API docs build.")


if __name__ == "__main__":
    main()
