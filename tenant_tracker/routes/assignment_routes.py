from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from tenant_tracker.database import get_db
from tenant_tracker.dependencies import get_auth_context
from tenant_tracker.models.auth_context import AuthContext
from tenant_tracker.services.assignment_service import AssignmentService
from tenant_tracker.schemas.assignment_schemas import (
    AssignmentRequest,
    AssignTenantResponse,
    RemoveTenantResponse,
    DashboardResponse,
)

router = APIRouter()


@router.post(
    "",
    response_model=AssignTenantResponse,
    status_code=status.HTTP_201_CREATED,
)
def assign_tenant(
    data: AssignmentRequest,
    response: Response,
    context: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    """
    Assign a tenant to one of the landlord's properties.

    - Requires landlord role and property ownership
    - 201 with the new assignment (payment pending, due on the 1st of next month)
    - 200 without changes if the tenant already occupies this property
    - 409 if the property is occupied or the tenant is assigned elsewhere
    """
    service = AssignmentService(db)
    property, assignment = service.assign_tenant(data.property_id, data.tenant_id, context)

    if assignment is None:
        response.status_code = status.HTTP_200_OK
        return AssignTenantResponse(
            message="Tenant is already assigned to this property.", property=property
        )

    return AssignTenantResponse(
        message="Tenant assigned successfully!", property=property, assignment=assignment
    )


@router.post("/remove", response_model=RemoveTenantResponse)
def remove_tenant(
    data: AssignmentRequest,
    context: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    """
    Remove a tenant from a property.

    - Requires landlord role and property ownership
    - Deletes the assignment and cancels the pair's agreements
    - Payment history is kept
    """
    service = AssignmentService(db)
    property, cancelled = service.remove_tenant(data.property_id, data.tenant_id, context)

    return RemoveTenantResponse(
        message="Tenant removed successfully! Property is now available for new tenants.",
        property=property,
        cancelled_agreements=cancelled,
    )


@router.get("/me", response_model=DashboardResponse)
def get_dashboard(
    context: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    """
    Tenant dashboard: current assignment with property and landlord details.

    - Requires tenant role
    - 404 if no property is assigned
    """
    service = AssignmentService(db)
    return service.get_dashboard(context)
