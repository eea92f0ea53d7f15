"""Evolution module exports."""

from .checkpoint import CheckpointLog, read_checkpoints
from .engine import EvolutionConfig, EvolutionEngine, GenerationStats
from .executor import ParallelExecutor
from .fitness import (
    Challenge,
    ChallengeEvaluator,
    CustomEvaluator,
    DatasetEvaluator,
    FitnessEvaluator,
    dataset_score,
    select_evaluator,
)
from .individual import Individual
from .network import FeedForwardNet
from .population import Population
from .reproduction import Reproducer
from .scheduler import EvolutionResult, EvolutionScheduler, SchedulerConfig
from .selection import RouletteSelector

__all__ = [
    "CheckpointLog",
    "read_checkpoints",
    "EvolutionConfig",
    "EvolutionEngine",
    "GenerationStats",
    "ParallelExecutor",
    "Challenge",
    "ChallengeEvaluator",
    "CustomEvaluator",
    "DatasetEvaluator",
    "FitnessEvaluator",
    "dataset_score",
    "select_evaluator",
    "Individual",
    "FeedForwardNet",
    "Population",
    "Reproducer",
    "EvolutionResult",
    "EvolutionScheduler",
    "SchedulerConfig",
    "RouletteSelector",
]
