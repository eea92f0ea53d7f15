"""
Fitness evaluation strategies for EvoPool.

Exactly one strategy fills ``generation_score`` for the whole population each
generation:

* :class:`DatasetEvaluator` scores every individual against a labeled dataset.
* :class:`CustomEvaluator` hands the population to a caller supplied function.
* :class:`ChallengeEvaluator` plays pairwise matches between individuals.

:func:`select_evaluator` picks the strategy with the precedence custom scorer,
then dataset, then challenge.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable, List, Optional, Sequence, Tuple

import numpy as np
from loguru import logger

from evopool.exceptions import EvoPoolConfigError

from .executor import ParallelExecutor
from .individual import Individual

Scorer = Callable[[List[Individual], int], None]
PAIRINGS = ("round_robin", "bracket")


def dataset_score(output: float, target: float) -> float:
    """Reward confidence toward the labeled class: ``output`` for positives, ``1 - output`` otherwise."""
    if target == 0:
        return 1.0 - output
    return output


class FitnessEvaluator(ABC):
    """Base class for the evaluation strategies."""

    name = "base"

    @abstractmethod
    def evaluate(self, individuals: List[Individual], generation: int) -> None:
        """Write ``generation_score`` for every individual."""


class DatasetEvaluator(FitnessEvaluator):
    """Sum of :func:`dataset_score` over every dataset row."""

    name = "dataset"

    def __init__(
        self,
        inputs: Sequence[Sequence[float]],
        targets: Sequence[float],
        executor: Optional[ParallelExecutor] = None,
    ) -> None:
        self.inputs = np.asarray(inputs, dtype=np.float64)
        self.targets = np.asarray(targets, dtype=np.float64).reshape(-1)
        if self.inputs.ndim != 2 or len(self.inputs) == 0:
            raise EvoPoolConfigError(
                "Dataset inputs must be a non-empty list of input vectors.",
                context={"shape": self.inputs.shape},
            )
        if len(self.inputs) != len(self.targets):
            raise EvoPoolConfigError(
                f"Dataset has {len(self.inputs)} input rows but {len(self.targets)} targets.",
                context={"inputs": len(self.inputs), "targets": len(self.targets)},
            )
        self.executor = executor or ParallelExecutor()

    def score(self, individual: Individual) -> float:
        total = 0.0
        for row, target in zip(self.inputs, self.targets):
            output = individual.infer(row)
            total += dataset_score(float(output[0]), float(target))
        return total

    def evaluate(self, individuals: List[Individual], generation: int) -> None:
        scores = self.executor.map(self.score, individuals)
        for individual, score in zip(individuals, scores):
            individual.generation_score = score


class CustomEvaluator(FitnessEvaluator):
    """Delegates the whole pass to ``scorer(individuals, generation)``.

    The scorer must overwrite every score; stale values from an earlier
    generation cannot be detected here.
    """

    name = "custom"

    def __init__(self, scorer: Scorer) -> None:
        self.scorer = scorer

    def evaluate(self, individuals: List[Individual], generation: int) -> None:
        self.scorer(individuals, generation)


class Challenge(ABC):
    """A two-player match. Implementations return one score per player."""

    @abstractmethod
    def play(self, first: Individual, second: Individual) -> Tuple[float, float]:
        """Play one match with ``first`` moving first."""


class ChallengeEvaluator(FitnessEvaluator):
    """
    Scores individuals through pairwise matches.

    Every pairing is played twice with the roles swapped to cancel any
    first-mover advantage. With ``(s1, s2)`` from the first match and
    ``(s3, s4)`` from the swapped one, the players are awarded
    ``(s1 + s4) / 2`` and ``(s2 + s3) / 2``.

    Parameters
    ----------
    challenge : Challenge
        Match implementation.
    pairing : str, default "round_robin"
        ``"round_robin"`` plays every unordered pair once. ``"bracket"`` runs a
        single-elimination bracket in population order until one champion is
        left; an odd contender out advances with a bye.
    executor : ParallelExecutor, optional
        Used to play the matches of one round concurrently. Awards are applied
        after the round joined.
    """

    name = "challenge"

    def __init__(
        self,
        challenge: Challenge,
        pairing: str = "round_robin",
        executor: Optional[ParallelExecutor] = None,
    ) -> None:
        if pairing not in PAIRINGS:
            raise EvoPoolConfigError(
                f"Unknown pairing '{pairing}'. Options: {list(PAIRINGS)}",
                context={"pairing": pairing},
            )
        self.challenge = challenge
        self.pairing = pairing
        self.executor = executor or ParallelExecutor()
        self.champion: Optional[Individual] = None

    def play_pair(self, pair: Tuple[Individual, Individual]) -> Tuple[float, float]:
        """Return the awards of ``pair`` after both role orders were played."""
        first, second = pair
        s1, s2 = self.challenge.play(first, second)
        s3, s4 = self.challenge.play(second, first)
        return (s1 + s4) / 2.0, (s2 + s3) / 2.0

    def _play_round(self, pairs: List[Tuple[Individual, Individual]]) -> List[Tuple[float, float]]:
        awards = self.executor.map(self.play_pair, pairs)
        for (first, second), (first_award, second_award) in zip(pairs, awards):
            first.award(first_award)
            second.award(second_award)
        return awards

    def evaluate(self, individuals: List[Individual], generation: int) -> None:
        for individual in individuals:
            individual.reset()
        if self.pairing == "bracket":
            self.champion = self._bracket(individuals)
            logger.debug("Generation {} bracket champion: {}", generation, self.champion.name)
        else:
            self._round_robin(individuals)

    def _round_robin(self, individuals: List[Individual]) -> None:
        pairs = [
            (individuals[i], individuals[j])
            for i in range(len(individuals))
            for j in range(i + 1, len(individuals))
        ]
        self._play_round(pairs)

    def _bracket(self, individuals: List[Individual]) -> Individual:
        contenders = list(individuals)
        while len(contenders) > 1:
            pairs = [(contenders[i], contenders[i + 1]) for i in range(0, len(contenders) - 1, 2)]
            awards = self._play_round(pairs)
            survivors = [
                first if first_award >= second_award else second
                for (first, second), (first_award, second_award) in zip(pairs, awards)
            ]
            if len(contenders) % 2:
                survivors.append(contenders[-1])
            contenders = survivors
        return contenders[0]


def select_evaluator(
    scorer: Optional[Scorer] = None,
    inputs: Optional[Sequence[Sequence[float]]] = None,
    targets: Optional[Sequence[float]] = None,
    challenge: Optional[Challenge] = None,
    pairing: str = "round_robin",
    executor: Optional[ParallelExecutor] = None,
) -> FitnessEvaluator:
    """Build the evaluator for the configured strategy (custom > dataset > challenge)."""

    if scorer is not None:
        return CustomEvaluator(scorer)
    if inputs is not None and targets is not None:
        return DatasetEvaluator(inputs, targets, executor=executor)
    if challenge is not None:
        return ChallengeEvaluator(challenge, pairing=pairing, executor=executor)
    raise EvoPoolConfigError("No fitness strategy configured: provide a scorer, a dataset, or a challenge.")
