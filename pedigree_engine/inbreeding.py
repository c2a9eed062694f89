"""Inbreeding coefficient and risk tier for a prospective sire/dam pairing."""

import logging
from typing import Dict, Optional, Tuple

from .ancestry import AncestryGraph, DEFAULT_MAX_GENERATIONS
from .config import RiskThresholds
from .models.results import InbreedingAnalysis, RiskTier
from .models.snapshot import AnimalSnapshot

logger = logging.getLogger(__name__)

SELF_PAIRING_RECOMMENDATIONS = ('Do not breed an animal to itself.',)

RECOMMENDATIONS: Dict[RiskTier, Tuple[str, ...]] = {
    RiskTier.EXTREME: (
        'Extreme risk: equivalent to full-sibling mating, avoid this pairing.',
        'Consider using unrelated breeding stock.',
    ),
    RiskTier.HIGH: (
        'High risk: equivalent to half-sibling or grandparent-grandchild mating, not recommended.',
        'Monitor any offspring closely for genetic defects.',
    ),
    RiskTier.MODERATE: (
        'Moderate risk: equivalent to first-cousin mating, proceed with caution.',
        'Plan an outcross in the next generation.',
    ),
    RiskTier.LOW: (
        'Low risk: generally safe for most breeding programs.',
    ),
    RiskTier.NONE: (
        'No common ancestors found, ideal outcross.',
    ),
}


class InbreedingCalculator:
    """
    Path-counting approximation of Wright's coefficient.

    F = sum over common ancestors A of 0.5 ** (n_sire + n_dam + 1), using the
    minimal generation distance from each parent. The (1 + F_A) factor for
    inbred common ancestors is intentionally left out.
    """

    def __init__(
        self,
        thresholds: Optional[RiskThresholds] = None,
        max_generations: int = DEFAULT_MAX_GENERATIONS
    ):
        """
        Initialize calculator.

        Args:
            thresholds: Lower bounds of the moderate/high/extreme tiers
            max_generations: Pedigree depth searched for common ancestors
        """
        self.thresholds = thresholds or RiskThresholds()
        self.max_generations = max_generations

    def calculate_coefficient(self, sire_id: str, dam_id: str, snapshot: AnimalSnapshot) -> InbreedingAnalysis:
        """
        Estimate inbreeding of a hypothetical offspring of sire and dam.

        Unknown ids simply have no ancestors, so they score as an outcross.

        Args:
            sire_id: Prospective father
            dam_id: Prospective mother
            snapshot: Herd snapshot

        Returns:
            InbreedingAnalysis with coefficient, tier, common ancestor ids and
            canned recommendations
        """
        if sire_id == dam_id:
            return InbreedingAnalysis(
                coefficient=1.0,
                risk=RiskTier.EXTREME,
                common_ancestors=(sire_id,),
                recommendations=SELF_PAIRING_RECOMMENDATIONS
            )

        graph = AncestryGraph(snapshot)
        common = graph.get_common_ancestors(sire_id, dam_id, self.max_generations)

        coefficient = 0.0
        for sire_generation, dam_generation in common.values():
            coefficient += 0.5 ** (sire_generation + dam_generation + 1)

        # Clamp to valid range
        coefficient = min(1.0, coefficient)
        risk = self.classify(coefficient)

        logger.debug(
            "Inbreeding %s x %s: F=%.4f (%s), %d common ancestors",
            sire_id, dam_id, coefficient, risk.value, len(common)
        )

        return InbreedingAnalysis(
            coefficient=coefficient,
            risk=risk,
            common_ancestors=tuple(common),
            recommendations=self.recommendations_for(risk)
        )

    def classify(self, coefficient: float) -> RiskTier:
        """Bucket a coefficient into a risk tier."""
        if coefficient >= self.thresholds.extreme:
            return RiskTier.EXTREME
        if coefficient >= self.thresholds.high:
            return RiskTier.HIGH
        if coefficient >= self.thresholds.moderate:
            return RiskTier.MODERATE
        if coefficient > 0:
            return RiskTier.LOW
        return RiskTier.NONE

    @staticmethod
    def recommendations_for(risk: RiskTier) -> Tuple[str, ...]:
        return RECOMMENDATIONS[risk]

    def calculate_for_animal(self, animal_id: str, snapshot: AnimalSnapshot) -> Optional[InbreedingAnalysis]:
        """
        Inbreeding of an existing animal from its recorded parents.

        Returns:
            InbreedingAnalysis, or None when the animal or either parent is
            missing from the snapshot
        """
        animal = snapshot.get(animal_id)
        if animal is None or animal.father_id is None or animal.mother_id is None:
            return None
        if animal.father_id not in snapshot or animal.mother_id not in snapshot:
            return None
        return self.calculate_coefficient(animal.father_id, animal.mother_id, snapshot)
