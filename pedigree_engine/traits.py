"""Punnett-square predictions for single biallelic traits."""

import logging
from typing import Dict, List, Mapping, Optional, Sequence

from .config import default_config
from .models.animal import Animal
from .models.results import TraitOutcome, TraitPrediction
from .models.trait import Trait, normalize_genotype

logger = logging.getLogger(__name__)

COMBINATIONS = 4


def _is_genotype(value: object) -> bool:
    return isinstance(value, str) and len(value) == 2


class TraitPredictor:
    """Predicts offspring phenotype probabilities from parental genotypes."""

    def __init__(self, traits: Optional[Sequence[Trait]] = None):
        """
        Initialize predictor.

        Args:
            traits: Trait tables used by predict_offspring; defaults to the
                horn status and coat color tables of the default config
        """
        if traits is None:
            traits = [Trait.from_config(tc) for tc in default_config().traits]
        self.traits: Dict[str, Trait] = {t.name: t for t in traits}

    @staticmethod
    def punnett_square(
        genotype1: str,
        genotype2: str,
        phenotype_map: Mapping[str, str]
    ) -> List[TraitOutcome]:
        """
        Enumerate the four allele combinations of two parents.

        Each combination is normalized by sorting its letters, tallied, and
        turned into a probability of count / 4. Genotypes missing from the
        phenotype map are dropped.

        Args:
            genotype1: First parent's genotype, e.g. "Pp"
            genotype2: Second parent's genotype, e.g. "pp"
            phenotype_map: Genotype -> phenotype (allele order ignored)

        Returns:
            Outcomes in order of first appearance; empty for malformed input
        """
        if not (_is_genotype(genotype1) and _is_genotype(genotype2)):
            logger.warning("Cannot build Punnett square for %r x %r", genotype1, genotype2)
            return []

        phenotypes = {normalize_genotype(g): p for g, p in phenotype_map.items()}

        counts: Dict[str, int] = {}
        for allele1 in genotype1:
            for allele2 in genotype2:
                genotype = normalize_genotype(allele1 + allele2)
                counts[genotype] = counts.get(genotype, 0) + 1

        return [
            TraitOutcome(genotype=genotype, phenotype=phenotypes[genotype], probability=count / COMBINATIONS)
            for genotype, count in counts.items()
            if genotype in phenotypes
        ]

    def get_trait(self, name: str) -> Optional[Trait]:
        return self.traits.get(name)

    def genotype_for(self, animal: Animal, trait: Trait) -> Optional[str]:
        """
        Resolve an animal's genotype for a trait.

        An explicitly recorded genotype wins; otherwise the genotype is
        inferred from the observed phenotype (e.g. horn status or color).
        """
        if trait.genotype_field:
            explicit = animal.genetics.value_of(trait.genotype_field)
            if _is_genotype(explicit):
                return normalize_genotype(explicit)
        if trait.status_field:
            status = animal.genetics.value_of(trait.status_field)
            if isinstance(status, str):
                return trait.genotype_for_status(status)
        return None

    def predict(self, sire: Animal, dam: Animal, trait: Trait) -> Optional[TraitPrediction]:
        """Outcome table for one trait, or None when a parent's genotype is unknown."""
        sire_genotype = self.genotype_for(sire, trait)
        dam_genotype = self.genotype_for(dam, trait)
        if sire_genotype is None or dam_genotype is None:
            return None

        outcomes = self.punnett_square(sire_genotype, dam_genotype, trait.phenotype_map)
        return TraitPrediction(trait=trait.display_name, outcomes=tuple(outcomes))

    def predict_offspring(self, sire: Animal, dam: Animal) -> List[TraitPrediction]:
        """Predictions for every configured trait both parents can be typed for."""
        predictions = []
        for trait in self.traits.values():
            prediction = self.predict(sire, dam, trait)
            if prediction is not None:
                predictions.append(prediction)
        return predictions
