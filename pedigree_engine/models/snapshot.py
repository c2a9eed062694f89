"""Immutable, indexed view of a herd used by every engine query."""

import logging
from types import MappingProxyType
from typing import Any, Iterable, Iterator, List, Mapping, Optional, Protocol

from ..exceptions import SnapshotError
from .animal import Animal

logger = logging.getLogger(__name__)


class AnimalStore(Protocol):
    """Read-only collaborator that owns animal records."""

    def get_all_animals(self) -> Iterable[Any]:
        ...


class AnimalSnapshot(Mapping[str, Animal]):
    """Point-in-time mapping of animal id to Animal. Never mutated."""

    def __init__(self, animals: Iterable[Animal] = ()):
        """
        Index animals by id.

        Args:
            animals: Animal instances; ids must be unique

        Raises:
            SnapshotError: If two animals share an id
        """
        index = {}
        for animal in animals:
            if animal.animal_id in index:
                raise SnapshotError(f"Duplicate animal id in snapshot: {animal.animal_id}")
            index[animal.animal_id] = animal
        self._index = MappingProxyType(index)

    @classmethod
    def from_records(cls, records: Iterable[Mapping[str, Any]]) -> 'AnimalSnapshot':
        """
        Build a snapshot from raw store records (dicts).

        Records that cannot be parsed at all (no id, unreadable birth date)
        are logged and left out; incomplete or inconsistent records are kept.

        Raises:
            SnapshotError: If ids repeat
        """
        animals = []
        for record in records:
            try:
                animals.append(Animal.from_dict(record))
            except ValueError as e:
                logger.warning("Skipping animal record %r: %s", record.get('id'), e)
        return cls(animals)

    @classmethod
    def from_store(cls, store: AnimalStore) -> 'AnimalSnapshot':
        """Build a snapshot from a store exposing ``get_all_animals()``."""
        items = list(store.get_all_animals())
        animals = [item for item in items if isinstance(item, Animal)]
        records = [item for item in items if not isinstance(item, Animal)]
        return cls(animals + cls.from_records(records).animals)

    def __getitem__(self, animal_id: str) -> Animal:
        return self._index[animal_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self._index)

    def __len__(self) -> int:
        return len(self._index)

    def __repr__(self) -> str:
        return f"AnimalSnapshot({len(self)} animals)"

    def get(self, animal_id: Optional[str], default: Optional[Animal] = None) -> Optional[Animal]:
        if animal_id is None:
            return default
        return self._index.get(animal_id, default)

    @property
    def animals(self) -> List[Animal]:
        return list(self._index.values())

    def children_of(self, animal_id: str) -> List[Animal]:
        """Animals that record ``animal_id`` as father or mother."""
        return [
            a for a in self._index.values()
            if a.father_id == animal_id or a.mother_id == animal_id
        ]
