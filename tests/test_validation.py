"""Tests for ParentageValidator."""

from datetime import date, timedelta

import pytest

from pedigree_engine.config import ValidationConfig
from pedigree_engine.models import AnimalSnapshot, IssueKind, ParentRole, RiskTier
from pedigree_engine.validation import ParentageValidator

from conftest import animal


@pytest.fixture
def validator():
    return ParentageValidator()


def test_valid_relationship(validator, sibling_herd):
    result = validator.validate_relationship(sibling_herd["X"], sibling_herd["S"], sibling_herd)
    assert result.is_valid
    assert result.errors == ()
    assert result.warnings == ()


def test_parent_born_after_child_is_error(validator):
    child = animal("C", "female", date(2020, 1, 1))
    parent = animal("P", "male", date(2020, 1, 1) + timedelta(days=1))
    result = validator.validate_relationship(child, parent, AnimalSnapshot([child, parent]))

    assert not result.is_valid
    assert "Parent must be born before the child." in result.errors


def test_same_birth_date_is_error(validator):
    child = animal("C", "female", date(2020, 1, 1))
    parent = animal("P", "male", date(2020, 1, 1))
    result = validator.validate_relationship(child, parent, AnimalSnapshot([child, parent]))
    assert not result.is_valid


def test_small_age_gap_is_warning_only(validator):
    child = animal("C", "female", date(2020, 5, 1))
    parent = animal("P", "female", date(2020, 1, 1))  # four months older
    result = validator.validate_relationship(child, parent, AnimalSnapshot([child, parent]))

    assert result.is_valid
    assert len(result.warnings) == 1
    assert "less than 5 months" in result.warnings[0]


def test_self_parent_reports_all_errors(validator):
    goat = animal("C", "female", date(2020, 1, 1))
    result = validator.validate_relationship(goat, goat, AnimalSnapshot([goat]))

    assert "An animal cannot be its own parent." in result.errors
    assert "Parent must be born before the child." in result.errors
    assert len(result.errors) == 2


def test_cycle_is_error(validator, sibling_herd):
    """Making X the father of his own father S would close a loop."""
    result = validator.validate_relationship(sibling_herd["S"], sibling_herd["X"], sibling_herd)

    assert not result.is_valid
    assert any("circular pedigree" in e for e in result.errors)
    # X is also younger than S
    assert "Parent must be born before the child." in result.errors


def test_role_sex_mismatch(validator, sibling_herd):
    result = validator.validate_relationship(
        sibling_herd["X"], sibling_herd["D"], sibling_herd, role=ParentRole.FATHER
    )
    assert not result.is_valid
    assert any("cannot be recorded as father" in e for e in result.errors)

    result = validator.validate_relationship(
        sibling_herd["X"], sibling_herd["D"], sibling_herd, role=ParentRole.MOTHER
    )
    assert result.is_valid


def test_missing_birth_date_skips_age_check(validator):
    child = animal("C", "female", None)
    parent = animal("P", "male", date(2020, 1, 1))
    result = validator.validate_relationship(child, parent, AnimalSnapshot([child, parent]))
    assert result.is_valid
    assert "age check skipped" in result.warnings[0]


def test_custom_minimum_gap():
    validator = ParentageValidator(ValidationConfig(min_parent_age_months=12.0))
    child = animal("C", "female", date(2021, 1, 1))
    parent = animal("P", "male", date(2020, 6, 1))
    result = validator.validate_relationship(child, parent, AnimalSnapshot([child, parent]))
    assert result.is_valid
    assert "less than 12 months" in result.warnings[0]


def test_propose_parents_valid(validator):
    snapshot = AnimalSnapshot([
        animal("S", "male", date(2015, 1, 1)),
        animal("D", "female", date(2015, 1, 1)),
        animal("KID", "female", date(2018, 1, 1)),
    ])
    proposal = validator.propose_parents("KID", "S", "D", snapshot)

    assert proposal.is_valid
    assert proposal.update.to_dict() == {'id': 'KID', 'fatherId': 'S', 'motherId': 'D'}
    # The snapshot itself is untouched
    assert snapshot["KID"].father_id is None


def test_propose_parents_collects_every_problem(validator, sibling_herd):
    proposal = validator.propose_parents("S", "X", "GHOST", sibling_herd)

    assert not proposal.is_valid
    assert proposal.update is None
    errors = proposal.validation.errors
    assert "Mother GHOST not found." in errors
    assert "Father: Parent must be born before the child." in errors
    assert any(e.startswith("Father: ") and "circular" in e for e in errors)


def test_propose_same_parent_twice(validator, sibling_herd):
    proposal = validator.propose_parents("X", "S", "S", sibling_herd)
    assert "The same animal cannot be both father and mother." in proposal.validation.errors
    assert any("cannot be recorded as mother" in e for e in proposal.validation.errors)


def test_propose_unknown_child(validator, sibling_herd):
    proposal = validator.propose_parents("nobody", "S", "D", sibling_herd)
    assert proposal.validation.errors == ("Animal nobody not found.",)


def test_propose_clearing_links(validator, sibling_herd):
    proposal = validator.propose_parents("X", None, None, sibling_herd)
    assert proposal.is_valid
    assert proposal.update.father_id is None
    assert proposal.update.mother_id is None


def test_validate_breeding_unknown_ids(validator, sibling_herd):
    result = validator.validate_breeding("nobody", "ghost", sibling_herd)
    assert not result.is_valid
    assert result.errors == ("Sire not found.", "Dam not found.")
    assert result.analysis is None


def test_validate_breeding_self(validator, sibling_herd):
    result = validator.validate_breeding("X", "X", sibling_herd)
    assert "Cannot breed an animal with itself." in result.errors
    assert result.analysis.risk == RiskTier.EXTREME


def test_validate_breeding_parent_child(validator, sibling_herd):
    result = validator.validate_breeding("S", "Y", sibling_herd)
    assert "Cannot breed direct parent-child relationships." in result.errors


def test_validate_breeding_full_siblings(validator, sibling_herd):
    result = validator.validate_breeding("X", "Y", sibling_herd)
    assert "Breeding between full siblings detected." in result.warnings
    assert any("Extreme inbreeding risk" in e for e in result.errors)
    assert not result.is_valid


def test_validate_breeding_half_siblings_warns(validator, sibling_herd):
    result = validator.validate_breeding("X", "Z", sibling_herd)
    assert result.is_valid
    assert result.warnings == ("High inbreeding risk: 12.5%.",)


def test_validate_breeding_wrong_sexes(validator, sibling_herd):
    result = validator.validate_breeding("Y", "X", sibling_herd)
    assert "Sire Y is not male." in result.errors
    assert "Dam X is not female." in result.errors


def test_validate_breeding_unrelated(validator, sibling_herd):
    result = validator.validate_breeding("S", "D2", sibling_herd)
    assert result.is_valid
    assert result.warnings == ()
    assert result.analysis.risk == RiskTier.NONE


def test_unknown_sex_skips_role_check(validator):
    child = animal("C", "female", date(2020, 1, 1))
    parent = animal("P", None, date(2017, 1, 1))
    result = validator.validate_relationship(child, parent, AnimalSnapshot([child, parent]), role=ParentRole.FATHER)

    assert result.is_valid
    assert result.warnings == ("Sex unknown for P; father check skipped.",)


def test_validate_breeding_unknown_sex_warns(validator):
    snapshot = AnimalSnapshot([animal("S", None), animal("D", None)])
    result = validator.validate_breeding("S", "D", snapshot)

    assert result.is_valid
    assert "Sex unknown for sire S; sex check skipped." in result.warnings
    assert "Sex unknown for dam D; sex check skipped." in result.warnings


def test_validate_breeding_on_self_parent_record(validator):
    snapshot = AnimalSnapshot([
        animal("A", "male", date(2018, 1, 1), father_id="A"),
        animal("D", "female", date(2018, 1, 1)),
    ])
    result = validator.validate_breeding("A", "D", snapshot)
    assert result.is_valid
    assert result.analysis.risk == RiskTier.NONE


def _issues_by_animal(issues):
    found = {}
    for issue in issues:
        found.setdefault(issue.animal_id, []).append(issue.kind)
    return found


def test_audit_reports_every_damaged_record(validator, corrupted_herd):
    found = _issues_by_animal(validator.audit(corrupted_herd))

    assert found["LOOP1"] == [IssueKind.CIRCULAR_PEDIGREE, IssueKind.PARENT_AGE]
    assert found["LOOP2"] == [IssueKind.CIRCULAR_PEDIGREE]
    assert found["SELF"] == [IssueKind.CIRCULAR_PEDIGREE]
    assert found["ORPHAN"] == [IssueKind.MISSING_PARENT]
    assert found["TWIN"] == [IssueKind.SAME_PARENT, IssueKind.PARENT_SEX]
    assert found["WRONG"] == [IssueKind.PARENT_SEX, IssueKind.PARENT_SEX]
    assert found["EARLY"] == [IssueKind.PARENT_AGE, IssueKind.PARENT_AGE]
    assert set(found) == {"LOOP1", "LOOP2", "SELF", "ORPHAN", "TWIN", "WRONG", "EARLY"}


def test_audit_messages(validator, corrupted_herd):
    messages = [issue.message for issue in validator.audit(corrupted_herd)]
    assert "ORPHAN references non-existent mother GONE." in messages
    assert "SELF (SELF) has circular pedigree relationship." in messages
    assert "Father DOE of WRONG is female." in messages


def test_audit_clean_herd(validator, sibling_herd, diamond_herd):
    assert validator.audit(sibling_herd) == []
    assert validator.audit(diamond_herd) == []
