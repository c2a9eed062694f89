"""Domain models for pedigree_engine."""

from .animal import Animal, AnimalStatus, Genetics, Sex
from .snapshot import AnimalSnapshot, AnimalStore
from .trait import Trait, Genotype, normalize_genotype
from .results import (
    RiskTier, ParentRole, IssueKind, IntegrityIssue, InbreedingAnalysis, ValidationResult,
    BreedingValidation, ParentLinkUpdate, ParentageProposal, TraitOutcome, TraitPrediction,
    GeneticGain, BreedingRecommendation, PedigreeNode, PedigreeEdge, PedigreeTree, TreeStats,
    DiversityReport,
)

__all__ = [
    'Animal', 'AnimalStatus', 'Genetics', 'Sex',
    'AnimalSnapshot', 'AnimalStore',
    'Trait', 'Genotype', 'normalize_genotype',
    'RiskTier', 'ParentRole', 'IssueKind', 'IntegrityIssue', 'InbreedingAnalysis', 'ValidationResult',
    'BreedingValidation', 'ParentLinkUpdate', 'ParentageProposal', 'TraitOutcome', 'TraitPrediction',
    'GeneticGain', 'BreedingRecommendation', 'PedigreeNode', 'PedigreeEdge', 'PedigreeTree', 'TreeStats',
    'DiversityReport',
]
