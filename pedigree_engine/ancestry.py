"""Ancestor and generation-distance queries over father/mother links."""

import logging
from collections import deque
from typing import Dict, FrozenSet, List, Optional, Tuple

from .models.animal import Animal
from .models.snapshot import AnimalSnapshot

logger = logging.getLogger(__name__)

DEFAULT_MAX_GENERATIONS = 5
NOT_FOUND = -1


class AncestryGraph:
    """
    Read-only pedigree graph over one AnimalSnapshot.

    The snapshot is the id index; it is passed by reference through every
    recursive step, so a traversal never re-reads the herd.
    """

    def __init__(self, snapshot: AnimalSnapshot):
        self.snapshot = snapshot

    def get_ancestors(
        self,
        animal_id: str,
        max_generations: Optional[int] = DEFAULT_MAX_GENERATIONS
    ) -> Dict[str, int]:
        """
        Map every ancestor to its minimal generation distance.

        Parents are at distance 1, grandparents at 2, and so on. Multiple
        paths to the same ancestor keep the shortest one. Parent links that
        do not resolve in the snapshot end their branch.

        Args:
            animal_id: Animal whose ancestors are collected
            max_generations: Depth cap; None walks the whole pedigree

        Returns:
            Dict of ancestor id -> generation distance (empty for unknown ids
            and for animals without recorded parents)
        """
        found: Dict[str, int] = {}
        if animal_id not in self.snapshot:
            return found
        if max_generations is not None and max_generations < 1:
            return found

        self._walk(animal_id, 1, max_generations, frozenset([animal_id]), found)
        return found

    def _walk(
        self,
        animal_id: str,
        generation: int,
        max_generations: Optional[int],
        branch: FrozenSet[str],
        found: Dict[str, int]
    ) -> None:
        animal = self.snapshot[animal_id]

        for parent_id in (animal.father_id, animal.mother_id):
            if parent_id is None or parent_id not in self.snapshot:
                continue
            if parent_id in branch:
                # Corrupted data: the parent is also a descendant on this branch.
                logger.warning("Pedigree cycle: %s is recorded as an ancestor of itself", parent_id)
                continue

            known = found.get(parent_id)
            if known is not None and known <= generation:
                continue
            found[parent_id] = generation

            if max_generations is None or generation < max_generations:
                self._walk(parent_id, generation + 1, max_generations, branch | {parent_id}, found)

    def is_descendant(self, candidate_id: str, ancestor_id: str) -> bool:
        """True if ``ancestor_id`` appears anywhere in ``candidate_id``'s pedigree."""
        return ancestor_id in self.get_ancestors(candidate_id, max_generations=None)

    def get_generation_distance(self, descendant_id: str, ancestor_id: str) -> int:
        """
        Shortest number of parent-edge hops from descendant to ancestor.

        Returns:
            0 for the same (known) animal, NOT_FOUND (-1) when the ancestor is
            unreachable or either id is unknown
        """
        if descendant_id not in self.snapshot or ancestor_id not in self.snapshot:
            return NOT_FOUND
        if descendant_id == ancestor_id:
            return 0
        return self.get_ancestors(descendant_id, max_generations=None).get(ancestor_id, NOT_FOUND)

    def get_common_ancestors(
        self,
        first_id: str,
        second_id: str,
        max_generations: Optional[int] = DEFAULT_MAX_GENERATIONS
    ) -> Dict[str, Tuple[int, int]]:
        """Ancestors shared by two animals, with the distance from each."""
        first = self.get_ancestors(first_id, max_generations)
        second = self.get_ancestors(second_id, max_generations)
        return {
            ancestor_id: (distance, second[ancestor_id])
            for ancestor_id, distance in first.items()
            if ancestor_id in second
        }

    def parents_of(self, animal_id: str) -> Tuple[Optional[Animal], Optional[Animal]]:
        """Resolved (father, mother); either is None when unrecorded or unknown."""
        animal = self.snapshot.get(animal_id)
        if animal is None:
            return None, None
        return self.snapshot.get(animal.father_id), self.snapshot.get(animal.mother_id)

    def get_descendants(self, animal_id: str, maternal_only: bool = False) -> List[str]:
        """
        All descendants of an animal, nearest generation first.

        Args:
            animal_id: Ancestor to start from
            maternal_only: Follow only mother links (maternal line)

        Returns:
            Descendant ids; the animal itself is never included
        """
        if animal_id not in self.snapshot:
            return []

        children: Dict[str, List[str]] = {}
        for animal in self.snapshot.values():
            parent_ids = (animal.mother_id,) if maternal_only else (animal.father_id, animal.mother_id)
            for parent_id in parent_ids:
                if parent_id is not None:
                    children.setdefault(parent_id, []).append(animal.animal_id)

        descendants: List[str] = []
        seen = {animal_id}
        queue = deque([animal_id])
        while queue:
            current = queue.popleft()
            for child_id in children.get(current, []):
                if child_id in seen:
                    continue
                seen.add(child_id)
                descendants.append(child_id)
                queue.append(child_id)
        return descendants
