"""
Unified logging utilities that wrap Loguru and MLflow.

The `ExperimentLogger` is the reporting sink of an evolution run: generation
standings go to the Loguru console, while per-generation metrics are also
forwarded to MLflow when it is installed and tracking is enabled.
"""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator, Optional, Sequence, Tuple

from loguru import logger

try:
    import mlflow
except ImportError:  # pragma: no cover - fallback path is best effort only.
    mlflow = None  # type: ignore[assignment]


class ExperimentLogger:
    """Thin convenience wrapper around Loguru and MLflow."""

    def __init__(
        self,
        experiment_name: str,
        tracking_uri: Optional[str] = None,
        enabled: bool = False,
    ) -> None:
        self.experiment_name = experiment_name
        self.tracking_uri = tracking_uri
        self.enabled = enabled

    @property
    def tracking(self) -> bool:
        return bool(self.enabled and mlflow is not None)

    def _ensure_mlflow(self) -> None:
        """Configure the MLflow tracking URI and experiment if MLflow is available."""
        if not self.tracking:
            return
        if self.tracking_uri:
            mlflow.set_tracking_uri(self.tracking_uri)
        mlflow.set_experiment(self.experiment_name)

    @contextmanager
    def start_run(self, run_name: str, params: Optional[Dict[str, str]] = None) -> Iterator[None]:
        """
        Context manager that opens and closes an MLflow run while emitting log messages.

        When tracking is disabled the context still works, so the scheduler can rely
        on the same interface without extra guards.
        """

        logger.info("Starting EvoPool run: {}", run_name)
        if self.tracking:
            self._ensure_mlflow()
            with mlflow.start_run(run_name=run_name):
                if params:
                    mlflow.log_params(params)
                yield
        else:
            yield
        logger.info("Completed EvoPool run: {}", run_name)

    def log_metrics(self, metrics: Dict[str, float], step: Optional[int] = None) -> None:
        """Emit metrics to both the console and MLflow if available."""
        logger.debug("Metrics@{}: {}", step if step is not None else "-", metrics)
        if self.tracking:
            mlflow.log_metrics(metrics, step=step)

    def log_standings(self, generation: int, standings: Sequence[Tuple[str, float]]) -> None:
        """Print the top individuals of a generation, one per line."""
        lines = [f"  {rank + 1:>2}. {name:<12} {score:.6f}" for rank, (name, score) in enumerate(standings)]
        logger.info("Generation {} standings\n{}", generation, "\n".join(lines))

    def log_artifact(self, path: Path) -> None:
        """Record an artifact with MLflow when available."""
        if self.tracking and path.exists():
            mlflow.log_artifact(str(path))

    def log_message(self, message: str) -> None:
        """Log a simple info message."""
        logger.info(message)
