"""Result values returned by engine queries. Created per call, never cached."""

from enum import Enum
from typing import Any, Dict, Optional, Tuple
from dataclasses import dataclass, field


class RiskTier(Enum):
    """Inbreeding risk buckets, ordered from safest to worst."""
    NONE = "none"
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    EXTREME = "extreme"

    @property
    def is_excluded(self) -> bool:
        """High and extreme pairings are never recommended."""
        return self in (RiskTier.HIGH, RiskTier.EXTREME)


class ParentRole(Enum):
    """Which parent slot a candidate parent would fill."""
    FATHER = "father"
    MOTHER = "mother"


class IssueKind(Enum):
    """Categories of pedigree integrity problems found in stored records."""
    CIRCULAR_PEDIGREE = "circular_pedigree"
    MISSING_PARENT = "missing_parent"
    SAME_PARENT = "same_parent"
    PARENT_SEX = "parent_sex"
    PARENT_AGE = "parent_age"


@dataclass(frozen=True)
class IntegrityIssue:
    """One broken invariant on an existing animal record."""
    animal_id: str
    kind: IssueKind
    message: str


@dataclass(frozen=True)
class InbreedingAnalysis:
    """Inbreeding estimate for a prospective sire/dam pairing."""
    coefficient: float
    risk: RiskTier
    common_ancestors: Tuple[str, ...] = ()
    recommendations: Tuple[str, ...] = ()

    @property
    def percentage(self) -> float:
        return self.coefficient * 100


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a proposed edit. Lists every violated rule."""
    errors: Tuple[str, ...] = ()
    warnings: Tuple[str, ...] = ()

    @property
    def is_valid(self) -> bool:
        return not self.errors


@dataclass(frozen=True)
class BreedingValidation(ValidationResult):
    """Breeding-pair validation; analysis is None when an id did not resolve."""
    analysis: Optional[InbreedingAnalysis] = None


@dataclass(frozen=True)
class ParentLinkUpdate:
    """Parent-link change for the caller to persist in the animal store."""
    animal_id: str
    father_id: Optional[str]
    mother_id: Optional[str]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.animal_id,
            'fatherId': self.father_id,
            'motherId': self.mother_id,
        }


@dataclass(frozen=True)
class ParentageProposal:
    """Validation of a parent-link edit plus the payload to commit if valid."""
    validation: ValidationResult
    update: Optional[ParentLinkUpdate] = None

    @property
    def is_valid(self) -> bool:
        return self.validation.is_valid


@dataclass(frozen=True)
class TraitOutcome:
    """One row of a Punnett-square probability table."""
    genotype: str
    phenotype: str
    probability: float


@dataclass(frozen=True)
class TraitPrediction:
    """Offspring outcome table for one trait."""
    trait: str
    outcomes: Tuple[TraitOutcome, ...]


@dataclass(frozen=True)
class GeneticGain:
    """Mid-parent value of a trait and its change relative to the animal."""
    trait: str
    value: float
    improvement: float  # percent, relative to the animal's own value


@dataclass(frozen=True)
class BreedingRecommendation:
    """A ranked candidate mate."""
    animal_id: str
    mate_id: str
    confidence: float
    reason: str
    inbreeding_coefficient: float
    genetic_gain: GeneticGain
    predicted_traits: Tuple[TraitPrediction, ...] = ()


@dataclass(frozen=True)
class PedigreeNode:
    """An animal placed in a pedigree tree. Layout is left to the renderer."""
    animal_id: str
    generation: int
    father_id: Optional[str] = None


@dataclass(frozen=True)
class PedigreeEdge:
    """Parent -> child link in a pedigree tree."""
    source: str
    target: str


@dataclass(frozen=True)
class PedigreeTree:
    root_id: str
    nodes: Tuple[PedigreeNode, ...] = ()
    edges: Tuple[PedigreeEdge, ...] = ()


@dataclass(frozen=True)
class TreeStats:
    total_ancestors: int
    total_descendants: int
    generations_back: int
    tree_size: int


@dataclass(frozen=True)
class DiversityReport:
    """Herd-level genetic diversity summary (score 0-100)."""
    score: int
    analysis: str
    recommendations: Tuple[str, ...] = field(default_factory=tuple)
