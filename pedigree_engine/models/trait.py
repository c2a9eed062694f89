"""Trait and Genotype models for pedigree_engine."""

from typing import Dict, Optional, Any, Sequence, TYPE_CHECKING
from dataclasses import dataclass, field

if TYPE_CHECKING:
    from ..config import TraitConfig


def normalize_genotype(genotype: str) -> str:
    """Sort the two allele letters so 'pP' and 'Pp' compare equal."""
    return ''.join(sorted(genotype))


@dataclass(frozen=True)
class Genotype:
    """Represents a genotype with its phenotype mapping."""
    genotype: str  # e.g., "PP", "Ph", "hh"
    phenotype: str  # e.g., "Polled", "Horned"

    def __post_init__(self):
        """Validate genotype data."""
        if len(self.genotype) != 2:
            raise ValueError(f"genotype must have exactly two alleles, got {self.genotype!r}")
        object.__setattr__(self, 'genotype', normalize_genotype(self.genotype))


@dataclass(frozen=True)
class Trait:
    """A single biallelic trait with its phenotype table."""
    name: str
    display_name: str
    genotypes: Sequence[Genotype]
    status_genotypes: Dict[str, str] = field(default_factory=dict, hash=False)
    genotype_field: Optional[str] = None  # Genetics field holding an explicit genotype
    status_field: Optional[str] = None  # Genetics field holding the observed phenotype

    def __post_init__(self):
        """Validate trait data."""
        object.__setattr__(self, 'genotypes', tuple(self.genotypes))
        if not self.genotypes:
            raise ValueError(f"Trait {self.name} must have at least one genotype")
        seen = set()
        for genotype in self.genotypes:
            if genotype.genotype in seen:
                raise ValueError(f"Trait {self.name} has duplicate genotype {genotype.genotype}")
            seen.add(genotype.genotype)

    @property
    def phenotype_map(self) -> Dict[str, str]:
        """Normalized genotype -> phenotype."""
        return {g.genotype: g.phenotype for g in self.genotypes}

    def get_phenotype(self, genotype_str: str) -> Optional[str]:
        """
        Get phenotype for a given genotype string.

        Args:
            genotype_str: Genotype string to look up (allele order ignored)

        Returns:
            Phenotype string, or None if not found
        """
        return self.phenotype_map.get(normalize_genotype(genotype_str))

    def genotype_for_status(self, status: Optional[str]) -> Optional[str]:
        """Assumed genotype for an observed status such as 'polled' or 'black'."""
        if not status:
            return None
        return self.status_genotypes.get(status.strip().lower())

    @classmethod
    def from_config(cls, config: 'TraitConfig') -> 'Trait':
        """
        Create Trait from a TraitConfig.

        Args:
            config: Validated trait configuration

        Returns:
            Trait instance
        """
        genotypes = [
            Genotype(genotype=g['genotype'], phenotype=g['phenotype'])
            for g in config.genotypes
        ]

        return cls(
            name=config.name,
            display_name=config.display_name,
            genotypes=genotypes,
            status_genotypes=dict(config.status_genotypes),
            genotype_field=config.genotype_field,
            status_field=config.status_field
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Trait':
        """Create Trait from an ad hoc dictionary (same keys as the config file)."""
        from ..config import TraitConfig

        return cls.from_config(TraitConfig(
            name=data['name'],
            display_name=data.get('display_name', data['name']),
            genotypes=data['genotypes'],
            status_genotypes={
                k.lower(): normalize_genotype(v)
                for k, v in data.get('status_genotypes', {}).items()
            },
            genotype_field=data.get('genotype_field'),
            status_field=data.get('status_field')
        ))
