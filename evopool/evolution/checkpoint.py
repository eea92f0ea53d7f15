"""
Append-only checkpoint log of the best individual per generation.

Each line is a JSON object ``{"generation", "name", "score", "weights"}``.
Writing is best effort: an unwritable log is reported and the run continues.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Union

from loguru import logger

from .individual import Individual


class CheckpointLog:
    """Appends one record per generation to a JSON-lines file."""

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)
        self.failures = 0

    def append(self, generation: int, individual: Individual) -> bool:
        record = {
            "generation": generation,
            "name": individual.name,
            "score": float(individual.generation_score),
            "weights": [float(w) for w in individual.weights],
        }
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("a", encoding="utf-8") as handle:
                handle.write(json.dumps(record) + "\n")
        except OSError as exc:
            self.failures += 1
            logger.warning("Checkpoint write to {} failed: {}", self.path, exc)
            return False
        return True


def read_checkpoints(path: Union[str, Path]) -> List[Dict[str, Any]]:
    """Load every record of a checkpoint log, oldest first."""

    records = []
    with Path(path).open("r", encoding="utf-8") as handle:
        for line in handle:
            line = line.strip()
            if line:
                records.append(json.loads(line))
    return records
