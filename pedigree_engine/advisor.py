"""Mate recommendations combining inbreeding risk with simple fitness heuristics."""

import logging
from typing import Any, Iterable, List, Optional, Tuple

from .config import AdvisorConfig
from .inbreeding import InbreedingCalculator
from .models.animal import Animal, Sex
from .models.results import BreedingRecommendation, BreedingValidation, GeneticGain
from .models.snapshot import AnimalSnapshot
from .traits import TraitPredictor
from .validation import ParentageValidator

logger = logging.getLogger(__name__)


def _numeric(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


class BreedingAdvisor:
    """Ranks candidate mates and gates already-chosen pairs."""

    def __init__(
        self,
        config: Optional[AdvisorConfig] = None,
        calculator: Optional[InbreedingCalculator] = None,
        validator: Optional[ParentageValidator] = None,
        predictor: Optional[TraitPredictor] = None
    ):
        self.config = config or AdvisorConfig()
        self.calculator = calculator or InbreedingCalculator()
        self.validator = validator or ParentageValidator(calculator=self.calculator)
        self.predictor = predictor or TraitPredictor()

    def recommend_mates(
        self,
        animal: Animal,
        candidates: Iterable[Animal],
        snapshot: AnimalSnapshot,
        goal_trait: Optional[str] = None
    ) -> List[BreedingRecommendation]:
        """
        Rank the best mates for an animal.

        Candidates of the same sex, the animal itself, and any pairing with
        high or extreme inbreeding risk are excluded outright. The rest are
        scored as (1 - F) * (1 - health penalty) * (1 - fertility penalty)
        and kept only above the confidence threshold. A candidate whose sex
        is unknown is considered when the animal's own sex is known.

        Args:
            animal: Animal looking for a mate
            candidates: Potential mates
            snapshot: Herd snapshot
            goal_trait: Genetics field used for the genetic-gain figure

        Returns:
            Up to ``max_recommendations`` results, best first
        """
        goal = goal_trait or self.config.default_goal_trait
        recommendations: List[BreedingRecommendation] = []

        for mate in candidates:
            if mate.animal_id == animal.animal_id:
                continue
            pair = self._orient(animal, mate)
            if pair is None:
                continue

            sire, dam = pair
            analysis = self.calculator.calculate_coefficient(sire.animal_id, dam.animal_id, snapshot)
            if analysis.risk.is_excluded:
                logger.debug(
                    "Skipping %s for %s: %s inbreeding risk",
                    mate.animal_id, animal.animal_id, analysis.risk.value
                )
                continue

            health_penalty = 0.0 if mate.is_active else self.config.inactive_penalty
            fertility_penalty = self.fertility_penalty(mate)
            confidence = (1 - analysis.coefficient) * (1 - health_penalty) * (1 - fertility_penalty)

            if confidence <= self.config.min_confidence:
                continue

            recommendations.append(BreedingRecommendation(
                animal_id=animal.animal_id,
                mate_id=mate.animal_id,
                confidence=confidence,
                reason=f'Low inbreeding ({analysis.percentage:.1f}%) and good health/fertility.',
                inbreeding_coefficient=analysis.coefficient,
                genetic_gain=self.genetic_gain(animal, mate, goal),
                predicted_traits=tuple(self.predictor.predict_offspring(sire, dam))
            ))

        recommendations.sort(key=lambda r: r.confidence, reverse=True)
        return recommendations[:self.config.max_recommendations]

    @staticmethod
    def _orient(animal: Animal, mate: Animal) -> Optional[Tuple[Animal, Animal]]:
        """
        (sire, dam) for a candidate pairing, or None for a same-sex pair.

        When one sex is unknown the pair is oriented from the known one; when
        both are unknown no orientation is possible.
        """
        if animal.sex is None and mate.sex is None:
            logger.debug("Skipping %s for %s: sex unknown for both", mate.animal_id, animal.animal_id)
            return None
        if animal.sex is mate.sex:
            return None
        if animal.sex is None or mate.sex is None:
            logger.warning(
                "Sex unknown for %s; pairing it with %s unchecked",
                animal.animal_id if animal.sex is None else mate.animal_id,
                mate.animal_id if animal.sex is None else animal.animal_id
            )
        if animal.sex is Sex.MALE or mate.sex is Sex.FEMALE:
            return animal, mate
        return mate, animal

    def fertility_penalty(self, animal: Animal) -> float:
        """
        Penalty in [0, 0.5] for a fertility score below the maximum.

        A missing or zero score counts as the default score.
        """
        max_score = self.config.max_fertility_score
        score = _numeric(animal.genetics.fertility_score)
        if not score:
            score = self.config.default_fertility_score
        score = max(0.0, min(max_score, score))
        return (max_score - score) / (2 * max_score)

    @staticmethod
    def genetic_gain(animal: Animal, mate: Animal, trait: str) -> GeneticGain:
        """Mid-parent value of ``trait`` and its percent change over the animal."""
        animal_value = _numeric(animal.genetics.value_of(trait)) or 0.0
        mate_value = _numeric(mate.genetics.value_of(trait)) or 0.0
        offspring_value = (animal_value + mate_value) / 2
        improvement = (offspring_value - animal_value) / animal_value * 100 if animal_value > 0 else 0.0
        return GeneticGain(trait=trait, value=offspring_value, improvement=improvement)

    def validate_breeding(self, sire_id: str, dam_id: str, snapshot: AnimalSnapshot) -> BreedingValidation:
        """One-shot relationship and inbreeding check for a chosen pair."""
        return self.validator.validate_breeding(sire_id, dam_id, snapshot)
