from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from tenant_tracker.database import get_db
from tenant_tracker.dependencies import get_auth_context
from tenant_tracker.models.auth_context import AuthContext
from tenant_tracker.services.agreement_service import AgreementService
from tenant_tracker.schemas.agreement_schemas import (
    AgreementCreate,
    AgreementRequest,
    AgreementResponse,
    AgreementListResponse,
    AgreementActionResponse,
)

router = APIRouter()


@router.post("", response_model=AgreementActionResponse, status_code=status.HTTP_201_CREATED)
def create_agreement(
    data: AgreementCreate,
    context: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    """
    Create a rental agreement for one of the landlord's properties.

    - Requires landlord role and property ownership
    - end_date = start_date + lease_duration months
    - Starts in pending_tenant_signature
    """
    service = AgreementService(db)
    agreement = service.create_agreement(data, context)
    return AgreementActionResponse(message="Agreement created successfully!", agreement=agreement)


@router.post("/request", response_model=AgreementActionResponse, status_code=status.HTTP_201_CREATED)
def request_agreement(
    data: AgreementRequest,
    context: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    """
    Tenant requests an agreement for a property.

    - Requires tenant role
    - Starts in pending_landlord_signature
    """
    service = AgreementService(db)
    agreement = service.request_agreement(data, context)
    return AgreementActionResponse(
        message="Agreement request sent successfully!", agreement=agreement
    )


@router.get("", response_model=AgreementListResponse)
def list_agreements(
    context: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    """
    Agreements of the authenticated user, newest first.

    - Landlords see agreements they issued, tenants those they are party to
    """
    service = AgreementService(db)
    agreements = service.list_agreements(context)
    return AgreementListResponse(agreements=agreements, total=len(agreements))


@router.get("/{agreement_id}", response_model=AgreementResponse)
def get_agreement(
    agreement_id: str,
    context: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    """Get one agreement by its AGR-... reference (parties only)"""
    service = AgreementService(db)
    return service.get_agreement(agreement_id, context)


@router.post("/{agreement_id}/sign", response_model=AgreementActionResponse)
def sign_agreement(
    agreement_id: str,
    context: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    """
    Sign an agreement as the tenant or the landlord.

    - The caller signs as the party matching their role
    - Records signing time and client IP
    - 409 if the caller already signed or the agreement is cancelled
    """
    service = AgreementService(db)
    agreement = service.sign_agreement(agreement_id, context)
    return AgreementActionResponse(message="Agreement signed successfully!", agreement=agreement)
