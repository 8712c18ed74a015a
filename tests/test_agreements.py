import re

import pytest

from tenant_tracker.models.agreement import Agreement, AgreementStatus
from tests.conftest import make_property


def _terms(property_id, **overrides):
    payload = {
        "property_id": property_id,
        "rent_amount": 10000,
        "security_deposit": 20000,
        "lease_duration": 12,
        "start_date": "2024-01-01",
        "terms": "Rent due on the 1st. No subletting.",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def pending_agreement(client, landlord_headers, rental, tenant):
    """Landlord-created agreement awaiting the tenant's signature"""
    response = client.post(
        "/api/agreements", headers=landlord_headers, json=_terms(rental.id, tenant_id=tenant.id)
    )
    assert response.status_code == 201
    return response.json()["agreement"]


def _sign(client, headers, agreement_id):
    return client.post(f"/api/agreements/{agreement_id}/sign", headers=headers)


# Creation


def test_landlord_creates_agreement(client, landlord, tenant, landlord_headers, rental):
    response = client.post(
        "/api/agreements", headers=landlord_headers, json=_terms(rental.id, tenant_id=tenant.id)
    )

    assert response.status_code == 201
    agreement = response.json()["agreement"]
    assert re.fullmatch(r"AGR-\d+-[A-Z0-9]{6}", agreement["agreement_id"])
    assert agreement["status"] == "pending_tenant_signature"
    assert agreement["start_date"] == "2024-01-01"
    assert agreement["end_date"] == "2025-01-01"
    assert agreement["landlord_id"] == landlord.id
    assert agreement["tenant_id"] == tenant.id
    assert agreement["tenant"]["username"] == tenant.username
    assert agreement["property"]["id"] == rental.id
    assert agreement["tenant_signature"] == {"signed": False, "signed_at": None, "ip_address": None}
    assert agreement["landlord_signature"]["signed"] is False


def test_agreement_ids_are_unique(client, landlord_headers, rental, tenant):
    ids = {
        client.post(
            "/api/agreements", headers=landlord_headers, json=_terms(rental.id, tenant_id=tenant.id)
        ).json()["agreement"]["agreement_id"]
        for _ in range(3)
    }

    assert len(ids) == 3


def test_end_date_clamps_to_month_end(client, landlord_headers, rental, tenant):
    response = client.post(
        "/api/agreements",
        headers=landlord_headers,
        json=_terms(rental.id, tenant_id=tenant.id, start_date="2024-01-31", lease_duration=1),
    )

    assert response.json()["agreement"]["end_date"] == "2024-02-29"


def test_tenant_cannot_create_agreement(client, tenant, tenant_headers, rental):
    response = client.post(
        "/api/agreements", headers=tenant_headers, json=_terms(rental.id, tenant_id=tenant.id)
    )

    assert response.status_code == 403
    assert response.json()["detail"] == "Only landlords can create agreements."


def test_create_agreement_for_other_landlords_property(
    client, db_session, other_landlord_headers, rental, tenant
):
    response = client.post(
        "/api/agreements", headers=other_landlord_headers, json=_terms(rental.id, tenant_id=tenant.id)
    )

    assert response.status_code == 403
    assert db_session.query(Agreement).count() == 0


def test_create_agreement_with_unknown_tenant(client, landlord_headers, rental):
    response = client.post(
        "/api/agreements", headers=landlord_headers, json=_terms(rental.id, tenant_id=9999)
    )

    assert response.status_code == 404
    assert response.json()["detail"] == "Property or Tenant not found, or Tenant is invalid."


def test_create_agreement_with_landlord_as_tenant(client, landlord_headers, rental, other_landlord):
    response = client.post(
        "/api/agreements", headers=landlord_headers, json=_terms(rental.id, tenant_id=other_landlord.id)
    )

    assert response.status_code == 404


def test_create_agreement_with_unknown_property(client, landlord_headers, tenant):
    response = client.post(
        "/api/agreements", headers=landlord_headers, json=_terms(9999, tenant_id=tenant.id)
    )

    assert response.status_code == 404


def test_blank_terms_rejected(client, db_session, landlord_headers, rental, tenant):
    response = client.post(
        "/api/agreements",
        headers=landlord_headers,
        json=_terms(rental.id, tenant_id=tenant.id, terms="   "),
    )

    assert response.status_code == 400
    assert db_session.query(Agreement).count() == 0


@pytest.mark.parametrize(
    "overrides",
    [
        {"lease_duration": 0},
        {"rent_amount": 0},
        {"security_deposit": -1},
        {"start_date": "not-a-date"},
    ],
)
def test_invalid_terms_rejected(client, landlord_headers, rental, tenant, overrides):
    response = client.post(
        "/api/agreements",
        headers=landlord_headers,
        json=_terms(rental.id, tenant_id=tenant.id, **overrides),
    )

    assert response.status_code == 422


def test_tenant_requests_agreement(client, landlord, tenant, tenant_headers, assigned_rental):
    response = client.post(
        "/api/agreements/request", headers=tenant_headers, json=_terms(assigned_rental.id)
    )

    assert response.status_code == 201
    agreement = response.json()["agreement"]
    assert agreement["status"] == "pending_landlord_signature"
    assert agreement["tenant_id"] == tenant.id
    assert agreement["landlord_id"] == landlord.id


def test_request_for_property_not_rented_by_caller_forbidden(
    client, other_tenant_headers, rental, assigned_rental
):
    response = client.post("/api/agreements/request", headers=other_tenant_headers, json=_terms(rental.id))

    assert response.status_code == 403
    assert response.json()["detail"] == "You can only request agreements for the property you rent."


def test_request_for_vacant_property_forbidden(client, db_session, landlord, landlord_headers, tenant_headers):
    vacant = make_property(db_session, landlord, address="3 Residency Road")

    response = client.post("/api/agreements/request", headers=tenant_headers, json=_terms(vacant.id))

    assert response.status_code == 403
    assert db_session.query(Agreement).count() == 0
    # Nothing blocks the landlord from deleting it afterwards
    assert client.delete(f"/api/properties/{vacant.id}", headers=landlord_headers).status_code == 200


def test_landlord_cannot_request_agreement(client, landlord_headers, rental):
    response = client.post("/api/agreements/request", headers=landlord_headers, json=_terms(rental.id))

    assert response.status_code == 403


def test_request_for_unknown_property(client, tenant_headers):
    response = client.post("/api/agreements/request", headers=tenant_headers, json=_terms(9999))

    assert response.status_code == 404


# Signing


def test_bilateral_signing_landlord_created(
    client, tenant_headers, landlord_headers, pending_agreement
):
    agreement_id = pending_agreement["agreement_id"]

    response = _sign(client, tenant_headers, agreement_id)

    assert response.status_code == 200
    agreement = response.json()["agreement"]
    assert agreement["status"] == "pending_landlord_signature"
    assert agreement["tenant_signature"]["signed"] is True
    assert agreement["tenant_signature"]["signed_at"] is not None
    assert agreement["tenant_signature"]["ip_address"] == "testclient"
    assert agreement["landlord_signature"]["signed"] is False

    response = _sign(client, landlord_headers, agreement_id)

    assert response.status_code == 200
    agreement = response.json()["agreement"]
    assert agreement["status"] == "signed"
    assert agreement["landlord_signature"]["signed"] is True


def test_bilateral_signing_tenant_requested(client, tenant_headers, landlord_headers, assigned_rental):
    created = client.post(
        "/api/agreements/request", headers=tenant_headers, json=_terms(assigned_rental.id)
    )
    agreement_id = created.json()["agreement"]["agreement_id"]

    response = _sign(client, landlord_headers, agreement_id)
    assert response.json()["agreement"]["status"] == "pending_tenant_signature"

    response = _sign(client, tenant_headers, agreement_id)
    assert response.json()["agreement"]["status"] == "signed"


def test_signing_twice_conflicts(client, tenant_headers, landlord_headers, pending_agreement):
    agreement_id = pending_agreement["agreement_id"]
    _sign(client, tenant_headers, agreement_id)

    response = _sign(client, tenant_headers, agreement_id)

    assert response.status_code == 409
    assert response.json()["detail"] == "Tenant has already signed this agreement."


def test_landlord_signing_twice_after_signed_conflicts(
    client, tenant_headers, landlord_headers, pending_agreement
):
    agreement_id = pending_agreement["agreement_id"]
    _sign(client, tenant_headers, agreement_id)
    _sign(client, landlord_headers, agreement_id)

    response = _sign(client, landlord_headers, agreement_id)

    assert response.status_code == 409
    assert response.json()["detail"] == "Landlord has already signed this agreement."


def test_non_party_cannot_sign(
    client, db_session, other_tenant_headers, other_landlord_headers, pending_agreement
):
    agreement_id = pending_agreement["agreement_id"]

    assert _sign(client, other_tenant_headers, agreement_id).status_code == 403
    assert _sign(client, other_landlord_headers, agreement_id).status_code == 403

    db_session.expire_all()
    agreement = db_session.query(Agreement).one()
    assert agreement.tenant_signature.signed is False
    assert agreement.landlord_signature.signed is False


def test_sign_unknown_agreement(client, tenant_headers):
    response = _sign(client, tenant_headers, "AGR-0-NOPE00")

    assert response.status_code == 404


def test_cancelled_agreement_cannot_be_signed(
    client, db_session, landlord_headers, tenant_headers, rental, tenant, pending_agreement
):
    client.post(
        "/api/assignments",
        headers=landlord_headers,
        json={"property_id": rental.id, "tenant_id": tenant.id},
    )
    removed = client.post(
        "/api/assignments/remove",
        headers=landlord_headers,
        json={"property_id": rental.id, "tenant_id": tenant.id},
    )
    assert removed.json()["cancelled_agreements"] == 1

    response = _sign(client, tenant_headers, pending_agreement["agreement_id"])

    assert response.status_code == 409
    db_session.expire_all()
    assert db_session.query(Agreement).one().status == AgreementStatus.CANCELLED


# Listing and lookup


def test_list_agreements_per_role(
    client, db_session, landlord_headers, tenant_headers, other_tenant_headers, rental, tenant,
    other_tenant,
):
    first = client.post(
        "/api/agreements", headers=landlord_headers, json=_terms(rental.id, tenant_id=tenant.id)
    ).json()["agreement"]
    second = client.post(
        "/api/agreements", headers=landlord_headers, json=_terms(rental.id, tenant_id=other_tenant.id)
    ).json()["agreement"]

    landlord_view = client.get("/api/agreements", headers=landlord_headers).json()
    tenant_view = client.get("/api/agreements", headers=tenant_headers).json()
    other_view = client.get("/api/agreements", headers=other_tenant_headers).json()

    assert landlord_view["total"] == 2
    # Newest first
    assert [a["agreement_id"] for a in landlord_view["agreements"]] == [
        second["agreement_id"],
        first["agreement_id"],
    ]
    assert [a["agreement_id"] for a in tenant_view["agreements"]] == [first["agreement_id"]]
    assert [a["agreement_id"] for a in other_view["agreements"]] == [second["agreement_id"]]


def test_get_agreement_by_party(client, landlord_headers, tenant_headers, pending_agreement):
    agreement_id = pending_agreement["agreement_id"]

    for headers in (landlord_headers, tenant_headers):
        response = client.get(f"/api/agreements/{agreement_id}", headers=headers)
        assert response.status_code == 200
        assert response.json()["agreement_id"] == agreement_id


def test_get_agreement_by_non_party_forbidden(client, other_landlord_headers, pending_agreement):
    response = client.get(
        f"/api/agreements/{pending_agreement['agreement_id']}", headers=other_landlord_headers
    )

    assert response.status_code == 403


def test_get_unknown_agreement(client, landlord_headers):
    response = client.get("/api/agreements/AGR-0-NOPE00", headers=landlord_headers)

    assert response.status_code == 404
