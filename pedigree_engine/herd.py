"""Herd-level pedigree reports: maternal lines, descendants and genetic diversity."""

import logging
from typing import Dict, List, Optional, Sequence

import numpy as np

from .ancestry import AncestryGraph
from .inbreeding import InbreedingCalculator
from .models.results import DiversityReport, PedigreeEdge, PedigreeNode, PedigreeTree, TreeStats
from .models.snapshot import AnimalSnapshot
from .traits import TraitPredictor

logger = logging.getLogger(__name__)

STATS_TREE_DEPTH = 10


class HerdAnalyzer:
    """Read-only reports over a whole AnimalSnapshot."""

    def __init__(
        self,
        calculator: Optional[InbreedingCalculator] = None,
        predictor: Optional[TraitPredictor] = None
    ):
        self.calculator = calculator or InbreedingCalculator()
        self.predictor = predictor or TraitPredictor()

    def maternal_line(self, animal_id: str, snapshot: AnimalSnapshot, generations: int = 3) -> PedigreeTree:
        """
        Pedigree tree following mothers only.

        Each node carries the animal's recorded father id so a renderer can
        show it alongside, but fathers are not walked. Positions are left to
        the renderer.

        Args:
            animal_id: Root of the tree (generation 0)
            snapshot: Herd snapshot
            generations: Number of maternal generations to include

        Returns:
            PedigreeTree; empty when the animal is unknown
        """
        nodes: List[PedigreeNode] = []
        edges: List[PedigreeEdge] = []
        seen = set()

        current = snapshot.get(animal_id)
        generation = 0
        while current is not None and current.animal_id not in seen:
            seen.add(current.animal_id)
            nodes.append(PedigreeNode(
                animal_id=current.animal_id,
                generation=generation,
                father_id=current.father_id
            ))
            if generation >= generations:
                break
            mother = snapshot.get(current.mother_id)
            if mother is None:
                break
            if mother.animal_id in seen:
                logger.warning("Maternal line cycle at %s", mother.animal_id)
                break
            edges.append(PedigreeEdge(source=mother.animal_id, target=current.animal_id))
            current = mother
            generation += 1

        return PedigreeTree(root_id=animal_id, nodes=tuple(nodes), edges=tuple(edges))

    @staticmethod
    def is_tree_root(animal_id: str, snapshot: AnimalSnapshot) -> bool:
        """True for a known animal with no recorded mother."""
        animal = snapshot.get(animal_id)
        return animal is not None and animal.mother_id is None

    def maternal_roots(self, snapshot: AnimalSnapshot) -> List[str]:
        """Active animals that start a maternal line."""
        return [
            a.animal_id for a in snapshot.values()
            if a.is_active and self.is_tree_root(a.animal_id, snapshot)
        ]

    @staticmethod
    def descendants(animal_id: str, snapshot: AnimalSnapshot) -> List[str]:
        return AncestryGraph(snapshot).get_descendants(animal_id)

    def tree_stats(self, animal_id: str, snapshot: AnimalSnapshot) -> TreeStats:
        """Size of an animal's maternal line, both up and down."""
        if animal_id not in snapshot:
            return TreeStats(total_ancestors=0, total_descendants=0, generations_back=0, tree_size=0)

        tree = self.maternal_line(animal_id, snapshot, generations=STATS_TREE_DEPTH)
        descendants = AncestryGraph(snapshot).get_descendants(animal_id, maternal_only=True)
        return TreeStats(
            total_ancestors=len(tree.nodes) - 1,
            total_descendants=len(descendants),
            generations_back=max(node.generation for node in tree.nodes),
            tree_size=len(tree.nodes) + len(descendants)
        )

    @staticmethod
    def pedigree_insights(animal_id: str, snapshot: AnimalSnapshot) -> List[str]:
        """Notes on missing parentage and pedigree depth."""
        animal = snapshot.get(animal_id)
        if animal is None:
            return []

        insights = []
        if animal.father_id is None and animal.mother_id is None:
            insights.append('No parentage information available; consider adding it if known.')
        elif animal.father_id is None:
            insights.append('Father information missing; add it to complete the genetic record.')
        elif animal.mother_id is None:
            insights.append('Mother information missing; it matters for breeding decisions.')

        ancestors = AncestryGraph(snapshot).get_ancestors(animal_id, max_generations=None)
        if len(ancestors) > 10:
            insights.append(f'Rich pedigree with {len(ancestors)} known ancestors.')
        elif len(ancestors) > 5:
            insights.append('Good pedigree depth for breeding decisions.')
        elif ancestors:
            insights.append('Basic pedigree information available.')

        return insights

    @staticmethod
    def potential_inbreeding_rate(snapshot: AnimalSnapshot) -> float:
        """
        Share of animals with both parents recorded whose parents share a
        recorded father or mother.
        """
        total = 0
        related = 0
        for animal in snapshot.values():
            if animal.father_id is None or animal.mother_id is None:
                continue
            total += 1
            father = snapshot.get(animal.father_id)
            mother = snapshot.get(animal.mother_id)
            if father is None or mother is None:
                continue
            shares_father = father.father_id is not None and father.father_id == mother.father_id
            shares_mother = father.mother_id is not None and father.mother_id == mother.mother_id
            if shares_father or shares_mother:
                related += 1

        return related / total if total > 0 else 0.0

    def genetic_diversity(self, snapshot: AnimalSnapshot) -> DiversityReport:
        """Score herd diversity from breed, horn and color variety and parent relatedness."""
        animals = snapshot.animals
        score = 50
        recommendations = []

        breeds = {a.breed for a in animals if a.breed}
        score += min(len(breeds) * 5, 25)
        if len(breeds) < 3:
            recommendations.append('Consider introducing different breeds to increase genetic diversity.')

        horn_statuses = {a.genetics.horn_status for a in animals if a.genetics.horn_status}
        if len(horn_statuses) < 2:
            recommendations.append('Limited horn status variation; consider breeding polled and horned lines.')

        colors = {a.genetics.coat_color.lower() for a in animals if a.genetics.coat_color}
        score += min(len(colors) * 3, 15)
        if len(colors) < 3:
            recommendations.append('Limited color variation may indicate reduced genetic diversity.')

        if self.potential_inbreeding_rate(snapshot) > 0.2:
            score -= 20
            recommendations.append('High potential for inbreeding detected; introduce new bloodlines.')

        if score >= 80:
            analysis = 'Excellent genetic diversity'
        elif score >= 60:
            analysis = 'Good genetic diversity with room for improvement'
        elif score >= 40:
            analysis = 'Moderate genetic diversity - action recommended'
        else:
            analysis = 'Low genetic diversity - immediate action needed'

        return DiversityReport(
            score=max(0, min(100, score)),
            analysis=analysis,
            recommendations=tuple(recommendations)
        )

    def genotype_frequencies(self, snapshot: AnimalSnapshot, trait_name: str) -> Dict[str, float]:
        """
        Genotype frequencies for a trait over animals whose genotype resolves.

        Returns:
            Dictionary mapping genotype strings to frequencies
        """
        trait = self.predictor.get_trait(trait_name)
        if trait is None:
            return {}

        genotype_counts: Dict[str, int] = {}
        total = 0
        for animal in snapshot.values():
            genotype = self.predictor.genotype_for(animal, trait)
            if genotype is None:
                continue
            genotype_counts[genotype] = genotype_counts.get(genotype, 0) + 1
            total += 1

        if total == 0:
            return {}

        return {genotype: count / total for genotype, count in genotype_counts.items()}

    def heterozygosity(self, snapshot: AnimalSnapshot, trait_name: str) -> float:
        """Proportion of typed animals carrying two different alleles (0.0 to 1.0)."""
        frequencies = self.genotype_frequencies(snapshot, trait_name)
        return sum(freq for genotype, freq in frequencies.items() if genotype[0] != genotype[1])

    def inbreeding_matrix(
        self,
        sire_ids: Sequence[str],
        dam_ids: Sequence[str],
        snapshot: AnimalSnapshot
    ) -> np.ndarray:
        """
        Coefficients for every sire x dam pairing.

        Returns:
            Array of shape (len(sire_ids), len(dam_ids))
        """
        matrix = np.zeros((len(sire_ids), len(dam_ids)), dtype=np.float64)
        for i, sire_id in enumerate(sire_ids):
            for j, dam_id in enumerate(dam_ids):
                matrix[i, j] = self.calculator.calculate_coefficient(sire_id, dam_id, snapshot).coefficient
        return matrix
