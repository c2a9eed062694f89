"""Animal model for pedigree_engine."""

import logging
import re
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Union
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)


class Sex(Enum):
    """Biological sex of an animal."""
    MALE = "male"
    FEMALE = "female"

    @classmethod
    def parse(cls, value: Union['Sex', str]) -> 'Sex':
        """
        Parse a free-form sex/gender value from a store record.

        Args:
            value: Sex instance or string such as 'male', 'F', 'buck', 'doe'

        Returns:
            Parsed Sex

        Raises:
            ValueError: If the value cannot be interpreted
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().lower()
            if key in _SEX_ALIASES:
                return _SEX_ALIASES[key]
        raise ValueError(f"sex must be 'male' or 'female', got {value!r}")

    @property
    def opposite(self) -> 'Sex':
        return Sex.FEMALE if self is Sex.MALE else Sex.MALE


_SEX_ALIASES = {
    'male': Sex.MALE, 'm': Sex.MALE, 'buck': Sex.MALE, 'ram': Sex.MALE,
    'bull': Sex.MALE, 'sire': Sex.MALE,
    'female': Sex.FEMALE, 'f': Sex.FEMALE, 'doe': Sex.FEMALE, 'ewe': Sex.FEMALE,
    'cow': Sex.FEMALE, 'dam': Sex.FEMALE,
}


class AnimalStatus(Enum):
    """Herd status of an animal. Only ACTIVE counts as healthy for breeding."""
    ACTIVE = "active"
    SOLD = "sold"
    DECEASED = "deceased"
    ARCHIVED = "archived"
    INACTIVE = "inactive"


@dataclass(frozen=True)
class Genetics:
    """Observed genetic traits and optional explicit genotypes."""
    coat_color: Optional[str] = None
    horn_status: Optional[str] = None  # 'horned', 'polled' or 'disbudded'
    fertility_score: Optional[float] = None  # 1-10
    milk_yield: Optional[float] = None
    horn_genotype: Optional[str] = None  # e.g. 'PP', 'Ph', 'hh'
    coat_genotype: Optional[str] = None  # e.g. 'BB', 'BW'
    # Extra numeric trait values and explicit genotypes of configured traits,
    # keyed in snake_case (e.g. 'butterfat', 'wattle_genotype')
    traits: Mapping[str, Any] = field(default_factory=dict, hash=False)

    def value_of(self, trait: str) -> Any:
        """Return a named trait value from the fixed fields or the extra traits."""
        key = _snake_case(trait)
        if key != 'traits' and key in self.__dataclass_fields__:
            return getattr(self, key)
        return self.traits.get(key)

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> 'Genetics':
        """Build from a store record, accepting snake_case or camelCase keys."""
        if not data:
            return cls()
        known = {
            'coat_color': _pick(data, 'coat_color', 'coatColor'),
            'horn_status': _pick(data, 'horn_status', 'hornStatus'),
            'fertility_score': _pick(data, 'fertility_score', 'fertilityScore'),
            'milk_yield': _pick(data, 'milk_yield', 'milkYieldGenetics', 'milkYield'),
            'horn_genotype': _pick(data, 'horn_genotype', 'hornGenotype'),
            'coat_genotype': _pick(data, 'coat_genotype', 'coatGenotype'),
        }
        used = {
            'coat_color', 'coatColor', 'horn_status', 'hornStatus',
            'fertility_score', 'fertilityScore', 'milk_yield', 'milkYieldGenetics',
            'milkYield', 'horn_genotype', 'hornGenotype', 'coat_genotype',
            'coatGenotype', 'traits',
        }
        extras = {}
        for key, value in list((data.get('traits') or {}).items()) + list(data.items()):
            if key in used:
                continue
            key = _snake_case(key)
            if isinstance(value, (int, float)) and not isinstance(value, bool):
                extras[key] = value
            elif key.endswith('_genotype') and isinstance(value, str) and len(value) == 2:
                extras[key] = value
        return cls(traits=extras, **known)


@dataclass(frozen=True)
class Animal:
    """
    A single animal record as seen by the engine.

    Parent links are weak references: ids resolved through an AnimalSnapshot,
    never object pointers. Links are stored as recorded, even when they are
    corrupted (self-parentage, the same id as father and mother); the
    validator and ``ParentageValidator.audit`` report such records.
    A ``sex`` of None means the record does not say.
    """
    animal_id: str
    sex: Optional[Sex]
    birth_date: Optional[date] = None
    father_id: Optional[str] = None
    mother_id: Optional[str] = None
    status: AnimalStatus = AnimalStatus.ACTIVE
    genetics: Genetics = field(default_factory=Genetics)
    name: Optional[str] = None
    breed: Optional[str] = None

    def __post_init__(self):
        """Validate animal data."""
        if not isinstance(self.animal_id, str) or not self.animal_id:
            raise ValueError(f"animal_id must be a non-empty string, got {self.animal_id!r}")
        if self.sex is not None and not isinstance(self.sex, Sex):
            object.__setattr__(self, 'sex', Sex.parse(self.sex))
        if not isinstance(self.status, AnimalStatus):
            object.__setattr__(self, 'status', AnimalStatus(str(self.status).lower()))
        if isinstance(self.birth_date, datetime):
            object.__setattr__(self, 'birth_date', self.birth_date.date())

    @property
    def is_active(self) -> bool:
        return self.status is AnimalStatus.ACTIVE

    @property
    def has_parents(self) -> bool:
        return self.father_id is not None or self.mother_id is not None

    @property
    def label(self) -> str:
        """Display name for messages, falling back to the id."""
        return self.name or self.animal_id

    @classmethod
    def from_dict(cls, record: Mapping[str, Any]) -> 'Animal':
        """
        Create an Animal from a store record.

        Accepts the engine's snake_case keys or the store's camelCase keys
        (``id``, ``gender``, ``birthDate``, ``fatherId``, ``motherId``).
        A missing or unrecognised sex is kept as unknown (None).

        Args:
            record: Raw animal record

        Returns:
            Animal instance

        Raises:
            ValueError: If the record is missing an id or has an unparseable
                birth date
        """
        animal_id = _pick(record, 'animal_id', 'id')
        if animal_id is None:
            raise ValueError("Animal record is missing 'id'")

        sex = _pick(record, 'sex', 'gender')
        if sex is not None:
            try:
                sex = Sex.parse(sex)
            except ValueError:
                logger.warning("Animal %s has unrecognised sex %r; treating it as unknown", animal_id, sex)
                sex = None

        status = _pick(record, 'status') or AnimalStatus.ACTIVE.value
        try:
            status = AnimalStatus(str(status).lower())
        except ValueError:
            status = AnimalStatus.INACTIVE

        return cls(
            animal_id=str(animal_id),
            sex=sex,
            birth_date=_parse_date(_pick(record, 'birth_date', 'birthDate', 'dateOfBirth')),
            father_id=_optional_id(_pick(record, 'father_id', 'fatherId')),
            mother_id=_optional_id(_pick(record, 'mother_id', 'motherId')),
            status=status,
            genetics=Genetics.from_dict(_pick(record, 'genetics')),
            name=_pick(record, 'name'),
            breed=_pick(record, 'breed')
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.animal_id,
            'sex': self.sex.value if self.sex else None,
            'birthDate': self.birth_date.isoformat() if self.birth_date else None,
            'fatherId': self.father_id,
            'motherId': self.mother_id,
            'status': self.status.value,
            'name': self.name,
            'breed': self.breed,
        }


def _pick(data: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in data and data[key] not in (None, ''):
            return data[key]
    return None


def _snake_case(key: str) -> str:
    return re.sub(r'(?<!^)(?=[A-Z])', '_', key).lower()


def _optional_id(value: Any) -> Optional[str]:
    return None if value is None else str(value)


def _parse_date(value: Any) -> Optional[date]:
    if value is None or isinstance(value, date):
        return value.date() if isinstance(value, datetime) else value
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.replace('Z', '+00:00')).date()
        except ValueError as e:
            raise ValueError(f"Invalid birth date: {value!r}") from e
    raise ValueError(f"Invalid birth date: {value!r}")
