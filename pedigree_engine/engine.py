"""Pedigree engine facade wiring every component from one configuration."""

import logging
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

import numpy as np

from .advisor import BreedingAdvisor
from .ancestry import AncestryGraph
from .config import EngineConfig, default_config, load_config
from .herd import HerdAnalyzer
from .inbreeding import InbreedingCalculator
from .models.animal import Animal
from .models.results import (
    BreedingRecommendation, BreedingValidation, DiversityReport, InbreedingAnalysis, IntegrityIssue,
    ParentageProposal, ParentRole, PedigreeTree, TraitOutcome, TraitPrediction,
    TreeStats, ValidationResult,
)
from .models.snapshot import AnimalSnapshot
from .models.trait import Trait
from .traits import TraitPredictor
from .validation import ParentageValidator

logger = logging.getLogger(__name__)


class PedigreeEngine:
    """
    Stateless entry point to the pedigree and breeding-genetics engine.

    The engine holds only configuration and component instances; every
    query takes the AnimalSnapshot it should read, so one engine can serve
    any number of callers.
    """

    def __init__(self, config: Optional[EngineConfig] = None):
        """
        Initialize engine components.

        Args:
            config: Engine configuration; defaults to default_config()
        """
        self.config = config or default_config()
        self.calculator = InbreedingCalculator(
            thresholds=self.config.risk_thresholds,
            max_generations=self.config.ancestry.max_generations
        )
        self.validator = ParentageValidator(config=self.config.validation, calculator=self.calculator)
        self.predictor = TraitPredictor([Trait.from_config(tc) for tc in self.config.traits])
        self.advisor = BreedingAdvisor(
            config=self.config.advisor,
            calculator=self.calculator,
            validator=self.validator,
            predictor=self.predictor
        )
        self.herd = HerdAnalyzer(calculator=self.calculator, predictor=self.predictor)

    @classmethod
    def from_config(cls, config_path: str) -> 'PedigreeEngine':
        """
        Create an engine from a YAML/JSON configuration file.

        Raises:
            ConfigurationError: If the file is missing or invalid
        """
        return cls(load_config(config_path))

    # Ancestry

    def ancestors(
        self, animal_id: str, snapshot: AnimalSnapshot, max_generations: Optional[int] = None
    ) -> Dict[str, int]:
        """Ancestor id -> minimal generation distance (config depth by default)."""
        depth = max_generations if max_generations is not None else self.config.ancestry.max_generations
        return AncestryGraph(snapshot).get_ancestors(animal_id, depth)

    def is_descendant(self, candidate_id: str, ancestor_id: str, snapshot: AnimalSnapshot) -> bool:
        return AncestryGraph(snapshot).is_descendant(candidate_id, ancestor_id)

    def generation_distance(self, descendant_id: str, ancestor_id: str, snapshot: AnimalSnapshot) -> int:
        return AncestryGraph(snapshot).get_generation_distance(descendant_id, ancestor_id)

    # Validation

    def validate_relationship(
        self,
        child: Animal,
        candidate_parent: Animal,
        snapshot: AnimalSnapshot,
        role: Optional[ParentRole] = None
    ) -> ValidationResult:
        return self.validator.validate_relationship(child, candidate_parent, snapshot, role)

    def propose_parents(
        self,
        child_id: str,
        father_id: Optional[str],
        mother_id: Optional[str],
        snapshot: AnimalSnapshot
    ) -> ParentageProposal:
        return self.validator.propose_parents(child_id, father_id, mother_id, snapshot)

    def validate_breeding(self, sire_id: str, dam_id: str, snapshot: AnimalSnapshot) -> BreedingValidation:
        return self.advisor.validate_breeding(sire_id, dam_id, snapshot)

    def audit(self, snapshot: AnimalSnapshot) -> List[IntegrityIssue]:
        """Integrity problems in records already stored (cycles, dangling links, ...)."""
        return self.validator.audit(snapshot)

    # Inbreeding and recommendations

    def calculate_coefficient(self, sire_id: str, dam_id: str, snapshot: AnimalSnapshot) -> InbreedingAnalysis:
        return self.calculator.calculate_coefficient(sire_id, dam_id, snapshot)

    def inbreeding_for_animal(self, animal_id: str, snapshot: AnimalSnapshot) -> Optional[InbreedingAnalysis]:
        return self.calculator.calculate_for_animal(animal_id, snapshot)

    def recommend_mates(
        self,
        animal: Animal,
        candidates: Iterable[Animal],
        snapshot: AnimalSnapshot,
        goal_trait: Optional[str] = None
    ) -> List[BreedingRecommendation]:
        return self.advisor.recommend_mates(animal, candidates, snapshot, goal_trait)

    # Traits

    def punnett_square(
        self, genotype1: str, genotype2: str, phenotype_map: Mapping[str, str]
    ) -> List[TraitOutcome]:
        return self.predictor.punnett_square(genotype1, genotype2, phenotype_map)

    def predict_offspring(self, sire: Animal, dam: Animal) -> List[TraitPrediction]:
        return self.predictor.predict_offspring(sire, dam)

    # Herd reports

    def maternal_line(self, animal_id: str, snapshot: AnimalSnapshot, generations: int = 3) -> PedigreeTree:
        return self.herd.maternal_line(animal_id, snapshot, generations)

    def maternal_roots(self, snapshot: AnimalSnapshot) -> List[str]:
        return self.herd.maternal_roots(snapshot)

    def descendants(self, animal_id: str, snapshot: AnimalSnapshot) -> List[str]:
        return self.herd.descendants(animal_id, snapshot)

    def tree_stats(self, animal_id: str, snapshot: AnimalSnapshot) -> TreeStats:
        return self.herd.tree_stats(animal_id, snapshot)

    def pedigree_insights(self, animal_id: str, snapshot: AnimalSnapshot) -> List[str]:
        return self.herd.pedigree_insights(animal_id, snapshot)

    def genetic_diversity(self, snapshot: AnimalSnapshot) -> DiversityReport:
        return self.herd.genetic_diversity(snapshot)

    def genotype_frequencies(self, snapshot: AnimalSnapshot, trait_name: str) -> Dict[str, float]:
        return self.herd.genotype_frequencies(snapshot, trait_name)

    def inbreeding_matrix(
        self, sire_ids: Sequence[str], dam_ids: Sequence[str], snapshot: AnimalSnapshot
    ) -> np.ndarray:
        return self.herd.inbreeding_matrix(sire_ids, dam_ids, snapshot)
