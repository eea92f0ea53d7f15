"""
Scheduler utilities orchestrating multiple generations of evolution.

Generations run strictly one after another. Cancellation (an event set by the
caller) and the optional time budget are only honoured between generations,
never inside one.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field
from typing import List, Optional

from evopool.utils.logger import ExperimentLogger

from .engine import EvolutionEngine, GenerationStats
from .individual import Individual
from .population import Population


@dataclass
class SchedulerConfig:
    """Configuration for the generation scheduler."""

    generations: int = 50
    run_name: str = "evopool-run"
    time_budget: Optional[float] = None


@dataclass
class EvolutionResult:
    """Population sorted best first plus the per-generation history.

    ``champion`` is a copy of the best individual of the last evaluated
    generation, taken before breeding could overwrite it.
    """

    population: Population
    history: List[GenerationStats]
    cancelled: bool = False
    duration: float = 0.0
    champion: Optional[Individual] = None

    @property
    def best(self) -> Individual:
        if self.champion is not None:
            return self.champion
        return self.population[0]

    @property
    def best_scores(self) -> List[float]:
        return [stats.best_score for stats in self.history]

    @property
    def generations_run(self) -> int:
        return len(self.history)


@dataclass
class EvolutionScheduler:
    """Drive the end-to-end evolution workflow."""

    engine: EvolutionEngine
    logger: ExperimentLogger
    config: SchedulerConfig
    history: List[GenerationStats] = field(default_factory=list)

    def _should_stop(self, cancel_event: Optional[threading.Event], started: float) -> bool:
        if cancel_event is not None and cancel_event.is_set():
            self.logger.log_message("Cancellation requested, stopping before the next generation.")
            return True
        budget = self.config.time_budget
        if budget is not None and time.perf_counter() - started >= budget:
            self.logger.log_message(f"Time budget of {budget}s exhausted, stopping.")
            return True
        return False

    def run(self, cancel_event: Optional[threading.Event] = None) -> EvolutionResult:
        """Execute the configured number of generations and return the sorted population."""

        started = time.perf_counter()
        cancelled = False
        with self.logger.start_run(self.config.run_name):
            for generation in range(self.config.generations):
                if self._should_stop(cancel_event, started):
                    cancelled = True
                    break
                self.history.append(self.engine.run_generation(generation))
        population = self.engine.population
        population.sort()
        return EvolutionResult(
            population=population,
            history=list(self.history),
            cancelled=cancelled,
            duration=time.perf_counter() - started,
            champion=self.engine.champion,
        )
