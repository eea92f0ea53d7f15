"""
SDK entry point exposing the `EvoPool` orchestration class.

The runner wires a fitness source (dataset, scoring function or challenge),
the merged configuration, the population and the reporting stack together,
then drives the generation loop. It is the backbone of the CLI.
"""

from __future__ import annotations

import re
import threading
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd

from evopool.evolution import (
    Challenge,
    CheckpointLog,
    EvolutionConfig,
    EvolutionEngine,
    EvolutionScheduler,
    GenerationStats,
    Individual,
    ParallelExecutor,
    Population,
    SchedulerConfig,
    select_evaluator,
)
from evopool.evolution.fitness import Scorer
from evopool.exceptions import EvoPoolConfigError
from evopool.utils import ConfigLoader, ExperimentLogger
from evopool.utils.config_reference import (
    CONFIG_SCHEMA,
    as_dict as _config_schema_dict,
    to_console as _config_schema_console,
    to_markdown as _config_schema_markdown,
    write_markdown as _config_write_markdown,
)
from evopool.utils.data_utils import load_dataset, split_features

DataSource = Union[str, Path, pd.DataFrame, Tuple[Sequence[Sequence[float]], Sequence[float]]]


def _slugify_name(name: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")
    return slug or "run"


@dataclass
class EvoPoolResult:
    """Return payload exposed by the SDK."""

    run_id: str
    population: Population
    history: List[GenerationStats]
    config: EvolutionConfig
    cancelled: bool = False
    duration: float = 0.0
    champion: Optional[Individual] = None

    @property
    def best(self) -> Individual:
        if self.champion is not None:
            return self.champion
        return self.population[0]

    @property
    def metrics(self) -> Dict[str, float]:
        if not self.history:
            return {"generations": 0}
        last = self.history[-1]
        return {
            "generations": len(self.history),
            "best_score": max(stats.best_score for stats in self.history),
            "final_best_score": last.best_score,
            "final_mean_score": last.mean_score,
        }


class EvoPool:
    """Primary interface: configure once, then :meth:`run` the evolution.

    Exactly one fitness source is used, with the precedence ``scorer``, then
    ``data``, then ``challenge``.
    """

    @classmethod
    def describe_config(
        cls,
        section: Optional[str] = None,
        *,
        as_markdown: bool = False,
        to_console: bool = False,
    ) -> Union[str, Dict[str, Dict[str, Dict[str, object]]]]:
        """Return metadata describing EvoPool configuration keys.

        Parameters
        ----------
        section : str, optional
            When provided, only return information for a single section
            (for example ``"pool"``). If omitted, all sections are returned.
        as_markdown : bool, default False
            When True, the result is formatted as Markdown text.
        to_console : bool, default False
            When True, pretty-print the configuration table to stdout.
        """

        if as_markdown:
            markdown = _config_schema_markdown(section=section)
            if to_console:
                print(markdown)
            return markdown

        if to_console:
            print(_config_schema_console(section=section))
        return _config_schema_dict(section)

    @classmethod
    def explain(cls, key: str) -> str:
        """Return a human readable description for a configuration key."""

        normalized = key.strip().lower().replace("-", "_")
        for section_name, fields in CONFIG_SCHEMA.items():
            for field in fields.values():
                if field.name.lower() == normalized:
                    description = field.description or "No description available."
                    return (
                        f"{field.name} (section={section_name}, type={field.type}, "
                        f"default={field.default_text()}) -> {description}"
                    )
        raise EvoPoolConfigError(
            f"Unknown configuration key '{key}'.",
            context={"key": key},
        )

    @classmethod
    def generate_config_docs(cls, path: Union[str, Path] = Path("CONFIG.md")) -> Path:
        """Render the configuration reference to a markdown file."""

        return _config_write_markdown(Path(path))

    def __init__(
        self,
        data: Optional[DataSource] = None,
        *,
        scorer: Optional[Scorer] = None,
        challenge: Optional[Challenge] = None,
        config: Optional[Union[str, Path, Dict[str, Any]]] = None,
        global_config: Optional[Union[str, Path, Dict[str, Any]]] = None,
        run_name: Optional[str] = None,
    ) -> None:
        """Create a new EvoPool orchestrator.

        Parameters
        ----------
        data : str | Path | pandas.DataFrame | tuple, optional
            Labeled dataset: a CSV/JSON path, a dataframe, or an
            ``(inputs, targets)`` pair. The target is the last column unless
            ``evaluation.target_column`` says otherwise.
        scorer : callable, optional
            ``scorer(individuals, generation)`` writing every ``generation_score``.
        challenge : Challenge, optional
            Two-player match used for tournament scoring.
        config : str | Path | dict, optional
            YAML/JSON file or mapping merged over the defaults.
        global_config : str | Path | dict, optional
            Base configuration merged before ``config``.
        run_name : str, optional
            Slug used for the run identifier and the MLflow run name.
        """

        loader = ConfigLoader(global_config)
        if isinstance(config, dict):
            loaded = loader.load(overrides=config)
        else:
            loaded = loader.load(config=config)
        self.config = loaded.to_dict()
        self.evolution_config = EvolutionConfig.from_mapping(self.config)

        reporting_cfg = self.config.get("reporting", {})
        self.logger = ExperimentLogger(
            experiment_name=reporting_cfg.get("experiment_name") or "EvoPool",
            tracking_uri=reporting_cfg.get("mlflow_uri"),
            enabled=bool(reporting_cfg.get("enable_mlflow", False)),
        )

        self.scorer = scorer
        self.challenge = challenge
        self.inputs: Optional[np.ndarray] = None
        self.targets: Optional[np.ndarray] = None
        if data is not None:
            self.inputs, self.targets = self._load_data(data)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        self.run_id = f"{_slugify_name(run_name or 'evopool')}_{timestamp}"

    def _load_data(self, data: DataSource) -> Tuple[np.ndarray, np.ndarray]:
        target_column = self.config.get("evaluation", {}).get("target_column")
        if isinstance(data, pd.DataFrame):
            return split_features(data, target_column)
        if isinstance(data, (str, Path)):
            return load_dataset(Path(data), target_column)
        if isinstance(data, tuple) and len(data) == 2:
            inputs, targets = data
            return np.asarray(inputs, dtype=np.float64), np.asarray(targets, dtype=np.float64)
        raise TypeError("Unsupported data source type. Provide a path, DataFrame, or (inputs, targets) pair.")

    def build_engine(self) -> EvolutionEngine:
        """Create the population, evaluator and engine for one run."""

        cfg = self.evolution_config
        rng = np.random.default_rng(cfg.seed)
        population = Population.create(
            cfg.population_size,
            cfg.input_size,
            cfg.hidden_size,
            cfg.layers,
            cfg.output_size,
            rng=rng,
        )
        if self.inputs is not None and self.inputs.ndim != 2:
            raise EvoPoolConfigError(
                "Dataset inputs must be a two-dimensional table of input rows.",
                context={"shape": self.inputs.shape},
            )
        if self.inputs is not None and self.inputs.shape[1] != cfg.input_size:
            raise EvoPoolConfigError(
                f"Dataset rows have {self.inputs.shape[1]} inputs but the network expects {cfg.input_size}.",
                context={"dataset_inputs": self.inputs.shape[1], "input_size": cfg.input_size},
            )
        evaluator = select_evaluator(
            scorer=self.scorer,
            inputs=self.inputs,
            targets=self.targets,
            challenge=self.challenge,
            pairing=cfg.pairing,
            executor=ParallelExecutor(cfg.max_workers),
        )
        checkpoint = CheckpointLog(cfg.checkpoint_path) if cfg.checkpoint_path else None
        return EvolutionEngine(population, evaluator, self.logger, config=cfg, checkpoint=checkpoint)

    def run(self, cancel_event: Optional[threading.Event] = None) -> EvoPoolResult:
        """Run every configured generation and return the population sorted best first."""

        engine = self.build_engine()
        cfg = self.evolution_config
        self.logger.log_message(
            f"Evolving {cfg.population_size} individuals for {cfg.generations} generations "
            f"using {engine.evaluator.name} fitness"
        )
        scheduler = EvolutionScheduler(
            engine=engine,
            logger=self.logger,
            config=SchedulerConfig(
                generations=cfg.generations,
                run_name=self.run_id,
                time_budget=cfg.time_budget,
            ),
        )
        outcome = scheduler.run(cancel_event=cancel_event)
        if cfg.checkpoint_path:
            self.logger.log_artifact(Path(cfg.checkpoint_path))
        return EvoPoolResult(
            run_id=self.run_id,
            population=outcome.population,
            history=outcome.history,
            config=cfg,
            cancelled=outcome.cancelled,
            duration=outcome.duration,
            champion=outcome.champion,
        )
