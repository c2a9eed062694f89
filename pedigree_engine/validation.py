"""Structural and chronological checks for parentage edits and breeding pairs."""

import logging
from typing import List, Optional, Tuple

from .ancestry import AncestryGraph
from .config import ValidationConfig
from .inbreeding import InbreedingCalculator
from .models.animal import Animal, Sex
from .models.results import (
    BreedingValidation, IntegrityIssue, IssueKind, ParentageProposal, ParentLinkUpdate,
    ParentRole, RiskTier, ValidationResult,
)
from .models.snapshot import AnimalSnapshot

logger = logging.getLogger(__name__)

_ROLE_SEX = {ParentRole.FATHER: Sex.MALE, ParentRole.MOTHER: Sex.FEMALE}


class ParentageValidator:
    """Validates proposed edits before the caller commits them to the store."""

    def __init__(
        self,
        config: Optional[ValidationConfig] = None,
        calculator: Optional[InbreedingCalculator] = None
    ):
        self.config = config or ValidationConfig()
        self.calculator = calculator or InbreedingCalculator()

    def validate_relationship(
        self,
        child: Animal,
        candidate_parent: Animal,
        snapshot: AnimalSnapshot,
        role: Optional[ParentRole] = None
    ) -> ValidationResult:
        """
        Check whether ``candidate_parent`` may be recorded as a parent of ``child``.

        Every violated rule is reported, not just the first.

        Args:
            child: Animal receiving the parent link
            candidate_parent: Proposed parent
            snapshot: Herd snapshot used for cycle detection
            role: Parent slot being filled; enables the sex check

        Returns:
            ValidationResult with all errors and warnings
        """
        errors: List[str] = []
        warnings: List[str] = []

        if candidate_parent.animal_id == child.animal_id:
            errors.append('An animal cannot be its own parent.')

        if candidate_parent.birth_date is None or child.birth_date is None:
            missing = candidate_parent if candidate_parent.birth_date is None else child
            warnings.append(f'Birth date unknown for {missing.label}; age check skipped.')
        elif candidate_parent.birth_date >= child.birth_date:
            errors.append('Parent must be born before the child.')
        else:
            gap_days = (child.birth_date - candidate_parent.birth_date).days
            gap_months = gap_days / self.config.days_per_month
            if gap_months < self.config.min_parent_age_months:
                warnings.append(
                    f'Parent is less than {self.config.min_parent_age_months:g} months older '
                    f'than the child, which is biologically unlikely.'
                )

        graph = AncestryGraph(snapshot)
        if graph.is_descendant(candidate_parent.animal_id, child.animal_id):
            errors.append(
                f'Assigning {candidate_parent.label} as a parent to {child.label} '
                f'would create a circular pedigree.'
            )

        if role is not None and candidate_parent.sex is None:
            warnings.append(f'Sex unknown for {candidate_parent.label}; {role.value} check skipped.')
        elif role is not None and candidate_parent.sex is not _ROLE_SEX[role]:
            errors.append(
                f'{candidate_parent.label} cannot be recorded as {role.value}: '
                f'animal is {candidate_parent.sex.value}.'
            )

        return ValidationResult(errors=tuple(errors), warnings=tuple(warnings))

    def propose_parents(
        self,
        child_id: str,
        father_id: Optional[str],
        mother_id: Optional[str],
        snapshot: AnimalSnapshot
    ) -> ParentageProposal:
        """
        Validate a complete parent-link edit and build the update payload.

        A ``None`` parent id clears that link.

        Returns:
            ParentageProposal; ``update`` is set only when the edit is valid
        """
        errors: List[str] = []
        warnings: List[str] = []

        child = snapshot.get(child_id)
        if child is None:
            errors.append(f'Animal {child_id} not found.')
            return ParentageProposal(validation=ValidationResult(errors=tuple(errors)))

        if father_id is not None and father_id == mother_id:
            errors.append('The same animal cannot be both father and mother.')

        candidates: List[Tuple[ParentRole, Optional[str]]] = [
            (ParentRole.FATHER, father_id),
            (ParentRole.MOTHER, mother_id),
        ]
        for role, parent_id in candidates:
            if parent_id is None:
                continue
            prefix = role.value.capitalize()
            parent = snapshot.get(parent_id)
            if parent is None:
                errors.append(f'{prefix} {parent_id} not found.')
                continue
            result = self.validate_relationship(child, parent, snapshot, role=role)
            errors.extend(f'{prefix}: {message}' for message in result.errors)
            warnings.extend(f'{prefix}: {message}' for message in result.warnings)

        validation = ValidationResult(errors=tuple(errors), warnings=tuple(warnings))
        if not validation.is_valid:
            logger.debug("Rejected parent links for %s: %s", child_id, '; '.join(errors))
            return ParentageProposal(validation=validation)

        return ParentageProposal(
            validation=validation,
            update=ParentLinkUpdate(animal_id=child_id, father_id=father_id, mother_id=mother_id)
        )

    def validate_breeding(self, sire_id: str, dam_id: str, snapshot: AnimalSnapshot) -> BreedingValidation:
        """
        Check a sire/dam pair before a breeding record is committed.

        Extreme inbreeding risk is an error; high risk is a warning.

        Returns:
            BreedingValidation with all errors, warnings and the inbreeding
            analysis (None when either id does not resolve)
        """
        errors: List[str] = []
        warnings: List[str] = []

        sire = snapshot.get(sire_id)
        dam = snapshot.get(dam_id)
        if sire is None:
            errors.append('Sire not found.')
        if dam is None:
            errors.append('Dam not found.')
        if sire is None or dam is None:
            return BreedingValidation(errors=tuple(errors), warnings=tuple(warnings))

        if sire_id == dam_id:
            errors.append('Cannot breed an animal with itself.')

        if sire.sex is None:
            warnings.append(f'Sex unknown for sire {sire.label}; sex check skipped.')
        elif sire.sex is not Sex.MALE:
            errors.append(f'Sire {sire.label} is not male.')
        if dam.sex is None:
            warnings.append(f'Sex unknown for dam {dam.label}; sex check skipped.')
        elif dam.sex is not Sex.FEMALE:
            errors.append(f'Dam {dam.label} is not female.')

        if sire_id != dam_id and (
            dam_id in (sire.father_id, sire.mother_id) or sire_id in (dam.father_id, dam.mother_id)
        ):
            errors.append('Cannot breed direct parent-child relationships.')

        if (
            sire_id != dam_id
            and sire.father_id is not None and sire.mother_id is not None
            and sire.father_id == dam.father_id and sire.mother_id == dam.mother_id
        ):
            warnings.append('Breeding between full siblings detected.')

        analysis = self.calculator.calculate_coefficient(sire_id, dam_id, snapshot)
        if analysis.risk is RiskTier.EXTREME:
            errors.append(f'Extreme inbreeding risk detected: {analysis.percentage:.1f}%.')
        elif analysis.risk is RiskTier.HIGH:
            warnings.append(f'High inbreeding risk: {analysis.percentage:.1f}%.')

        return BreedingValidation(errors=tuple(errors), warnings=tuple(warnings), analysis=analysis)

    def audit(self, snapshot: AnimalSnapshot) -> List[IntegrityIssue]:
        """
        Scan records already in the herd for broken pedigree invariants.

        Reports animals that sit on a circular pedigree, parent links that
        do not resolve, the same id recorded as father and mother, parents
        of the wrong sex, and parents not born before their offspring.
        Unknown sexes and birth dates are not reported.

        Args:
            snapshot: Herd snapshot

        Returns:
            IntegrityIssue list, in snapshot order
        """
        issues: List[IntegrityIssue] = []

        for animal in snapshot.values():
            if self._in_cycle(animal.animal_id, snapshot):
                issues.append(IntegrityIssue(
                    animal.animal_id, IssueKind.CIRCULAR_PEDIGREE,
                    f'{animal.label} ({animal.animal_id}) has circular pedigree relationship.'
                ))

            if animal.father_id is not None and animal.father_id == animal.mother_id:
                issues.append(IntegrityIssue(
                    animal.animal_id, IssueKind.SAME_PARENT,
                    f'{animal.label} records {animal.father_id} as both father and mother.'
                ))

            for role, parent_id in ((ParentRole.FATHER, animal.father_id), (ParentRole.MOTHER, animal.mother_id)):
                if parent_id is None:
                    continue
                parent = snapshot.get(parent_id)
                if parent is None:
                    issues.append(IntegrityIssue(
                        animal.animal_id, IssueKind.MISSING_PARENT,
                        f'{animal.label} references non-existent {role.value} {parent_id}.'
                    ))
                    continue
                if parent.sex is not None and parent.sex is not _ROLE_SEX[role]:
                    issues.append(IntegrityIssue(
                        animal.animal_id, IssueKind.PARENT_SEX,
                        f'{role.value.capitalize()} {parent.label} of {animal.label} is {parent.sex.value}.'
                    ))
                if (
                    parent.animal_id != animal.animal_id
                    and parent.birth_date is not None and animal.birth_date is not None
                    and parent.birth_date >= animal.birth_date
                ):
                    issues.append(IntegrityIssue(
                        animal.animal_id, IssueKind.PARENT_AGE,
                        f'{role.value.capitalize()} {parent.label} is not born before {animal.label}.'
                    ))

        if issues:
            logger.info("Pedigree audit found %d issues in %d animals", len(issues), len(snapshot))
        return issues

    @staticmethod
    def _in_cycle(animal_id: str, snapshot: AnimalSnapshot) -> bool:
        """True if following parent links from the animal leads back to it."""
        animal = snapshot[animal_id]
        stack = [p for p in (animal.father_id, animal.mother_id) if p is not None]
        seen = set()
        while stack:
            current_id = stack.pop()
            if current_id == animal_id:
                return True
            if current_id in seen:
                continue
            seen.add(current_id)
            current = snapshot.get(current_id)
            if current is not None:
                stack.extend(p for p in (current.father_id, current.mother_id) if p is not None)
        return False
