"""Shared test fixtures."""

from datetime import date

import pytest

from pedigree_engine.models import Animal, AnimalSnapshot, AnimalStatus, Genetics, Sex


def animal(animal_id, sex="male", birth=date(2020, 1, 1), father_id=None, mother_id=None, **kwargs):
    """Build an Animal with terse defaults."""
    return Animal(
        animal_id=animal_id,
        sex=Sex.parse(sex) if sex is not None else None,
        birth_date=birth,
        father_id=father_id,
        mother_id=mother_id,
        **kwargs
    )


@pytest.fixture
def make_animal():
    """Factory fixture for Animal records."""
    return animal


@pytest.fixture
def sibling_herd():
    """
    Two founders with two full siblings, plus a second dam giving a half sibling.

        S x D  -> X (male), Y (female)
        S x D2 -> Z (female)
    """
    return AnimalSnapshot([
        animal("S", "male", date(2015, 1, 1)),
        animal("D", "female", date(2015, 2, 1)),
        animal("D2", "female", date(2015, 3, 1)),
        animal("X", "male", date(2018, 1, 1), "S", "D"),
        animal("Y", "female", date(2018, 1, 1), "S", "D"),
        animal("Z", "female", date(2018, 6, 1), "S", "D2"),
    ])


@pytest.fixture
def cousin_herd():
    """
    A single great-grandsire G shared by X1 and X2, three generations up
    on each side.

        G -> A1 -> B1 -> X1
        G -> A2 -> B2 -> X2
    """
    return AnimalSnapshot([
        animal("G", "male", date(2008, 1, 1)),
        animal("A1", "male", date(2010, 1, 1), "G"),
        animal("A2", "male", date(2010, 2, 1), "G"),
        animal("B1", "male", date(2012, 1, 1), "A1"),
        animal("B2", "male", date(2012, 2, 1), "A2"),
        animal("X1", "male", date(2014, 1, 1), "B1"),
        animal("X2", "female", date(2014, 2, 1), "B2"),
    ])


@pytest.fixture
def diamond_herd():
    """
    G is reachable from A through the father (3 hops) and mother (2 hops).

        A.father = F, F.father = H, H.father = G
        A.mother = M, M.father = G
        G.father = K
    """
    return AnimalSnapshot([
        animal("K", "male", date(2004, 1, 1)),
        animal("G", "male", date(2006, 1, 1), "K"),
        animal("H", "male", date(2008, 1, 1), "G"),
        animal("M", "female", date(2008, 6, 1), "G"),
        animal("F", "male", date(2010, 1, 1), "H"),
        animal("A", "female", date(2012, 1, 1), "F", "M"),
    ])


@pytest.fixture
def mating_herd():
    """
    A doe with unrelated, related and unfit bucks to choose from.

    Her own sire and dam are deceased, so the health penalty drops them.
    """
    return AnimalSnapshot([
        animal("SIRE", "male", date(2014, 1, 1), status=AnimalStatus.DECEASED),
        animal("DAM", "female", date(2014, 1, 1), status=AnimalStatus.DECEASED),
        animal("DOE", "female", date(2018, 1, 1), "SIRE", "DAM",
               genetics=Genetics(milk_yield=1000, horn_status="polled", fertility_score=8)),
        animal("BROTHER", "male", date(2018, 1, 1), "SIRE", "DAM",
               genetics=Genetics(fertility_score=10, milk_yield=1200)),
        animal("HALF", "male", date(2018, 3, 1), "SIRE",
               genetics=Genetics(fertility_score=10)),
        animal("OUT1", "male", date(2017, 1, 1),
               genetics=Genetics(fertility_score=10, milk_yield=1200, horn_status="horned")),
        animal("OUT2", "male", date(2017, 1, 1),
               genetics=Genetics(fertility_score=8, milk_yield=800)),
        animal("OUT3", "male", date(2017, 1, 1)),
        animal("RETIRED", "male", date(2012, 1, 1), status=AnimalStatus.SOLD,
               genetics=Genetics(fertility_score=10)),
        animal("WEAK", "male", date(2017, 1, 1), genetics=Genetics(fertility_score=2)),
        animal("OTHER_DOE", "female", date(2017, 1, 1), genetics=Genetics(fertility_score=10)),
    ])


@pytest.fixture
def corrupted_herd():
    """
    Store records with every kind of pedigree damage.

        LOOP1 and LOOP2 are each other's father
        SELF names itself as father
        ORPHAN points at a dam that was deleted
        TWIN records the same id as father and mother
        WRONG has a doe as father and a buck as mother
        EARLY is older than its recorded father
        UNSEXED has no sex recorded
    """
    return AnimalSnapshot.from_records([
        {'id': 'BUCK', 'gender': 'male', 'birthDate': '2015-01-01'},
        {'id': 'DOE', 'gender': 'female', 'birthDate': '2015-01-01'},
        {'id': 'LOOP1', 'gender': 'male', 'birthDate': '2016-01-01', 'fatherId': 'LOOP2'},
        {'id': 'LOOP2', 'gender': 'male', 'birthDate': '2016-06-01', 'fatherId': 'LOOP1'},
        {'id': 'SELF', 'gender': 'male', 'birthDate': '2017-01-01', 'fatherId': 'SELF'},
        {'id': 'ORPHAN', 'gender': 'female', 'birthDate': '2018-01-01', 'fatherId': 'BUCK', 'motherId': 'GONE'},
        {'id': 'TWIN', 'gender': 'female', 'birthDate': '2018-01-01', 'fatherId': 'BUCK', 'motherId': 'BUCK'},
        {'id': 'WRONG', 'gender': 'male', 'birthDate': '2018-01-01', 'fatherId': 'DOE', 'motherId': 'BUCK'},
        {'id': 'EARLY', 'gender': 'female', 'birthDate': '2014-01-01', 'fatherId': 'BUCK', 'motherId': 'DOE'},
        {'id': 'UNSEXED', 'birthDate': '2018-01-01', 'fatherId': 'BUCK', 'motherId': 'DOE'},
    ])
