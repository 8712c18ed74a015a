"""Service-layer tests that bypass HTTP: access gate, dates and race guards."""

from datetime import date
from types import SimpleNamespace

import pytest

from tenant_tracker.core.access import require_role
from tenant_tracker.core.dates import add_months, first_day_of_next_month
from tenant_tracker.core.exceptions import (
    ConflictException,
    ForbiddenException,
    UnauthorizedException,
)
from tenant_tracker.database import atomic
from tenant_tracker.models.assignment import Assignment, PaymentStatus
from tenant_tracker.models.property import Property
from tenant_tracker.models.role import UserRole
from tenant_tracker.repositories.assignment_repository import AssignmentRepository
from tenant_tracker.repositories.property_repository import PropertyRepository
from tenant_tracker.services.assignment_service import AssignmentService, OCCUPIED
from tenant_tracker.services.payment_service import PaymentService
from tests.conftest import context_for, make_property


# Dates


@pytest.mark.parametrize(
    "today, expected",
    [
        (date(2024, 3, 15), date(2024, 4, 1)),
        (date(2024, 12, 31), date(2025, 1, 1)),
        (date(2024, 1, 1), date(2024, 2, 1)),
    ],
)
def test_first_day_of_next_month(today, expected):
    assert first_day_of_next_month(today) == expected


def test_add_months():
    assert add_months(date(2024, 1, 1), 12) == date(2025, 1, 1)
    assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)
    assert add_months(date(2023, 11, 30), 3) == date(2024, 2, 29)


# Access gate


class _Guarded:
    @require_role(UserRole.LANDLORD)
    def landlord_only(self, context):
        return "ok"

    @require_role(UserRole.LANDLORD, UserRole.TENANT, message="Nope.")
    def anyone(self, value, context=None):
        return value


def test_require_role_allows_matching_role(db_session, landlord):
    assert _Guarded().landlord_only(context_for(landlord)) == "ok"


def test_require_role_denies_other_role_with_default_message(db_session, tenant):
    with pytest.raises(ForbiddenException) as exc:
        _Guarded().landlord_only(context=context_for(tenant))

    assert str(exc.value) == "Access denied. Only landlords can perform this action."


def test_require_role_without_context_is_unauthorized():
    with pytest.raises(UnauthorizedException):
        _Guarded().anyone(1)


def test_require_role_accepts_any_listed_role(db_session, tenant, landlord):
    assert _Guarded().anyone(5, context=context_for(tenant)) == 5
    assert _Guarded().anyone(6, context_for(landlord)) == 6


def test_require_role_needs_context_parameter():
    with pytest.raises(TypeError):

        @require_role(UserRole.TENANT)
        def no_context(self):
            pass


def test_ensure_owner(db_session, landlord, other_landlord):
    context = context_for(landlord)

    context.ensure_owner(landlord.id)
    with pytest.raises(ForbiddenException):
        context.ensure_owner(other_landlord.id, "Not yours.")
    with pytest.raises(ForbiddenException):
        context.ensure_owner(None)


# Transactions and race guards


def test_atomic_turns_unique_violation_into_conflict(db_session, landlord, tenant):
    first = make_property(db_session, landlord, address="1 First Lane")
    second = make_property(db_session, landlord, address="2 Second Lane")
    repo = AssignmentRepository(db_session)
    with atomic(db_session, "taken"):
        repo.add(
            Assignment(
                tenant_id=tenant.id,
                property_id=first.id,
                payment_status=PaymentStatus.PENDING,
                due_date=date(2024, 2, 1),
            )
        )

    with pytest.raises(ConflictException) as exc:
        with atomic(db_session, "taken"):
            repo.add(
                Assignment(
                    tenant_id=tenant.id,
                    property_id=second.id,
                    payment_status=PaymentStatus.PENDING,
                    due_date=date(2024, 2, 1),
                )
            )

    assert str(exc.value) == "taken"
    assert db_session.query(Assignment).count() == 1


def test_atomic_rolls_back_on_other_errors(db_session, landlord):
    property = make_property(db_session, landlord)

    with pytest.raises(RuntimeError):
        with atomic(db_session, "unused"):
            PropertyRepository(db_session).claim_for_tenant(property.id, landlord.id)
            raise RuntimeError("boom")

    db_session.expire_all()
    assert db_session.get(Property, property.id).tenant_id is None


def test_claim_and_release_are_compare_and_set(db_session, landlord, tenant, other_tenant):
    property = make_property(db_session, landlord)
    repo = PropertyRepository(db_session)

    assert repo.claim_for_tenant(property.id, tenant.id) is True
    assert repo.claim_for_tenant(property.id, other_tenant.id) is False
    assert repo.release_tenant(property.id, other_tenant.id) is False
    assert repo.release_tenant(property.id, tenant.id) is True
    db_session.rollback()


def test_assign_loses_race_for_property(db_session, monkeypatch, landlord, tenant, other_tenant):
    """A concurrent request occupied the property after our read"""
    property = make_property(db_session, landlord)
    PropertyRepository(db_session).claim_for_tenant(property.id, tenant.id)
    db_session.commit()
    stale = SimpleNamespace(id=property.id, landlord_id=landlord.id, tenant_id=None)
    monkeypatch.setattr(PropertyRepository, "get_by_id", lambda self, property_id: stale)

    service = AssignmentService(db_session)
    with pytest.raises(ConflictException) as exc:
        service.assign_tenant(property.id, other_tenant.id, context_for(landlord))

    assert str(exc.value) == OCCUPIED
    assert db_session.query(Assignment).count() == 0
    db_session.expire_all()
    assert db_session.get(Property, property.id).tenant_id == tenant.id


def test_assign_loses_race_for_tenant(db_session, monkeypatch, landlord, tenant):
    """A concurrent request assigned the tenant elsewhere after our read"""
    housed = make_property(db_session, landlord, address="1 First Lane")
    target = make_property(db_session, landlord, address="2 Second Lane")
    service = AssignmentService(db_session)
    service.assign_tenant(housed.id, tenant.id, context_for(landlord))
    monkeypatch.setattr(AssignmentRepository, "get_by_tenant", lambda self, tenant_id: None)

    with pytest.raises(ConflictException):
        service.assign_tenant(target.id, tenant.id, context_for(landlord))

    # The property claim was rolled back with the failed assignment insert
    db_session.expire_all()
    assert db_session.get(Property, target.id).tenant_id is None
    assert db_session.query(Assignment).count() == 1


def test_stale_assignment_version_conflicts(db_session, landlord, tenant):
    property = make_property(db_session, landlord)
    AssignmentService(db_session).assign_tenant(property.id, tenant.id, context_for(landlord))
    assignment = db_session.query(Assignment).one()
    # Another writer bumps the version behind this session's back
    db_session.execute(
        Assignment.__table__.update()
        .where(Assignment.__table__.c.id == assignment.id)
        .values(version=assignment.version + 1)
    )

    with pytest.raises(ConflictException):
        PaymentService(db_session).mark_paid(context_for(tenant))

    db_session.expire_all()
    assert db_session.query(Assignment).one().payment_status == PaymentStatus.PENDING


def test_service_call_without_context_is_unauthorized(db_session):
    with pytest.raises(UnauthorizedException):
        AssignmentService(db_session).list_tenants(None)
