"""
Evolution engine running one evaluate-select-breed-reset cycle at a time.

A generation walks through the same states in the same order every time:
the evaluator scores the whole population, the population is sorted and the
roulette table rebuilt, every non-elite slot is replaced by an offspring of
two parents drawn from the table, and finally the transient scores are reset.
The multi-generation loop lives in :mod:`evopool.evolution.scheduler`.
"""

from __future__ import annotations

import copy
import math
import time
from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Mapping, Optional, Tuple

from evopool.exceptions import EvoPoolConfigError, EvoPoolEvaluationError
from evopool.utils.logger import ExperimentLogger

from .checkpoint import CheckpointLog
from .fitness import PAIRINGS, FitnessEvaluator
from .individual import Individual
from .population import Population
from .reproduction import CROSSOVER_SEGMENTS, Reproducer
from .selection import RouletteSelector, elite_indices

# Elite ranks below this one are never touched by the diversity mutation.
PROTECTED_ELITE = 2

_SECTION_KEYS = {
    "pool": {"population_size": "population_size", "elite_count": "elite_count", "seed": "seed"},
    "mutation": {"rate": "mutation_rate", "strength": "mutation_strength", "elite_mutation": "elite_mutation"},
    "network": {
        "input_size": "input_size",
        "hidden_size": "hidden_size",
        "layers": "layers",
        "output_size": "output_size",
    },
    "engine": {
        "generations": "generations",
        "crossover_segments": "crossover_segments",
        "self_breeding": "self_breeding",
        "max_workers": "max_workers",
        "time_budget": "time_budget",
    },
    "evaluation": {"pairing": "pairing"},
    "reporting": {"top_k": "report_top", "checkpoint_path": "checkpoint_path"},
}

# Keys whose null value is passed through instead of falling back to the dataclass default.
_NULLABLE = frozenset({"max_workers", "seed", "time_budget", "checkpoint_path"})


@dataclass
class EvolutionConfig:
    """Hyperparameters of an evolution run."""

    population_size: int = 10
    elite_count: int = 2
    mutation_rate: float = 0.2
    mutation_strength: float = 1.0
    generations: int = 50
    input_size: int = 2
    hidden_size: int = 2
    layers: int = 3
    output_size: int = 1
    crossover_segments: int = CROSSOVER_SEGMENTS
    self_breeding: bool = False
    elite_mutation: bool = False
    pairing: str = "round_robin"
    report_top: int = 5
    max_workers: Optional[int] = 1
    seed: Optional[int] = None
    time_budget: Optional[float] = None
    checkpoint_path: Optional[str] = None

    @classmethod
    def from_mapping(cls, config: Mapping[str, Mapping[str, Any]]) -> "EvolutionConfig":
        """Build a validated config from the sectioned mapping produced by the config loader."""

        known = {f.name for f in fields(cls)}
        values: Dict[str, Any] = {}
        for section, keys in _SECTION_KEYS.items():
            entries = config.get(section) or {}
            for key, attr in keys.items():
                if key not in entries or attr not in known:
                    continue
                if entries[key] is not None or attr in _NULLABLE:
                    values[attr] = entries[key]
        return cls(**values).validate()

    def validate(self) -> "EvolutionConfig":
        """Raise :class:`EvoPoolConfigError` for settings no run can use."""

        def fail(message: str, **context: Any) -> None:
            raise EvoPoolConfigError(message, context=context)

        if self.population_size < 2:
            fail(f"population_size must be at least 2, got {self.population_size}.", population_size=self.population_size)
        if not 0 <= self.elite_count < self.population_size:
            fail(
                f"elite_count must be in [0, {self.population_size}), got {self.elite_count}.",
                elite_count=self.elite_count,
                population_size=self.population_size,
            )
        if not 0.0 <= self.mutation_rate <= 1.0:
            fail(f"mutation_rate must be in [0, 1], got {self.mutation_rate}.", mutation_rate=self.mutation_rate)
        if not self.mutation_strength > 0:
            fail(
                f"mutation_strength must be positive, got {self.mutation_strength}.",
                mutation_strength=self.mutation_strength,
            )
        if self.generations < 0:
            fail(f"generations must not be negative, got {self.generations}.", generations=self.generations)
        if self.layers < 2 or min(self.input_size, self.hidden_size, self.output_size) < 1:
            fail(
                "Network topology needs layers >= 2 and positive layer sizes.",
                input_size=self.input_size,
                hidden_size=self.hidden_size,
                layers=self.layers,
                output_size=self.output_size,
            )
        if self.crossover_segments < 1:
            fail(f"crossover_segments must be positive, got {self.crossover_segments}.")
        if self.pairing not in PAIRINGS:
            fail(f"Unknown pairing '{self.pairing}'. Options: {list(PAIRINGS)}", pairing=self.pairing)
        if self.max_workers is not None and self.max_workers < 1:
            fail(f"max_workers must be positive, got {self.max_workers}.", max_workers=self.max_workers)
        return self


@dataclass
class GenerationStats:
    """Scores of one generation, captured after sorting and before the reset."""

    generation: int
    best_score: float
    mean_score: float
    worst_score: float
    best_name: str
    standings: List[Tuple[str, float]] = field(default_factory=list)
    uniform_selection: bool = False
    duration: float = 0.0

    def as_metrics(self) -> Dict[str, float]:
        return {
            "best_score": self.best_score,
            "mean_score": self.mean_score,
            "worst_score": self.worst_score,
        }


class EvolutionEngine:
    """Central coordinator for one population."""

    def __init__(
        self,
        population: Population,
        evaluator: FitnessEvaluator,
        logger: ExperimentLogger,
        config: Optional[EvolutionConfig] = None,
        checkpoint: Optional[CheckpointLog] = None,
    ) -> None:
        """Create a new evolution engine.

        Parameters
        ----------
        population : Population
            Individuals evolved in place.
        evaluator : FitnessEvaluator
            Strategy writing ``generation_score`` for the whole population.
        logger : ExperimentLogger
            Reporting sink for standings and metrics.
        config : EvolutionConfig, optional
            Hyper-parameters for selection, reproduction and reporting.
        checkpoint : CheckpointLog, optional
            Receives the best individual of every generation.
        """
        self.population = population
        self.evaluator = evaluator
        self.logger = logger
        self.config = (config or EvolutionConfig(population_size=population.size)).validate()
        if self.config.elite_count >= population.size:
            raise EvoPoolConfigError(
                f"elite_count {self.config.elite_count} leaves no slot to breed in a population of {population.size}.",
                context={"elite_count": self.config.elite_count, "population_size": population.size},
            )
        self.checkpoint = checkpoint
        self.champion: Optional[Individual] = None
        self.selector = RouletteSelector(population.rng)
        self.reproducer = Reproducer(
            rng=population.rng,
            mutation_rate=self.config.mutation_rate,
            mutation_strength=self.config.mutation_strength,
            segments=self.config.crossover_segments,
        )

    def evaluate_generation(self, generation: int) -> None:
        self.evaluator.evaluate(self.population.individuals, generation)
        invalid = [ind.name for ind in self.population if not math.isfinite(ind.generation_score)]
        if invalid:
            raise EvoPoolEvaluationError(
                f"Evaluator '{self.evaluator.name}' left non-finite scores for {invalid}.",
                context={"generation": generation, "individuals": invalid},
            )

    def select(self) -> None:
        self.population.sort()
        self.selector.build(self.population.scores())

    def breed(self) -> int:
        """Replace every non-elite slot with an offspring; returns the number replaced.

        Parents are read from a snapshot taken before the first replacement, so
        offspring only ever inherit from this generation's evaluated weights.
        """

        parents = self.population.weights_snapshot()
        elite = elite_indices(self.config.elite_count)
        replaced = 0
        for slot in range(self.population.size):
            if slot in elite:
                continue
            mother, father = self.selector.draw_parents(slot, self_breeding=self.config.self_breeding)
            self.population[slot].weights = self.reproducer.offspring(parents[mother], parents[father])
            replaced += 1
        return replaced

    def mutate_elite_band(self) -> List[int]:
        """Mutate elite ranks ``[2, elite_count)`` in place; returns the ranks touched."""

        ranks = list(range(PROTECTED_ELITE, self.config.elite_count))
        for rank in ranks:
            individual = self.population[rank]
            genes = individual.weights
            self.reproducer.mutate(genes)
            individual.weights = genes
        return ranks

    def _summarise(self, generation: int) -> GenerationStats:
        scores = self.population.scores()
        return GenerationStats(
            generation=generation,
            best_score=float(scores[0]),
            mean_score=float(scores.mean()),
            worst_score=float(scores[-1]),
            best_name=self.population[0].name,
            standings=self.population.standings(self.config.report_top),
            uniform_selection=self.selector.uniform,
        )

    def run_generation(self, generation: int) -> GenerationStats:
        """Full generation: evaluation, selection, reproduction, reset and reporting."""

        start = time.perf_counter()
        self.evaluate_generation(generation)
        self.select()
        stats = self._summarise(generation)
        if self.checkpoint is not None:
            self.checkpoint.append(generation, self.population[0])
        # Breeding may overwrite rank 0 when elite_count is 0.
        self.champion = copy.deepcopy(self.population[0])
        self.breed()
        self.population.reset_scores()
        if self.config.elite_mutation:
            self.mutate_elite_band()
        stats.duration = time.perf_counter() - start

        self.logger.log_standings(generation, stats.standings)
        self.logger.log_metrics(stats.as_metrics(), step=generation)
        return stats
