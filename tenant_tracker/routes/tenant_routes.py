from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from tenant_tracker.database import get_db
from tenant_tracker.dependencies import get_auth_context
from tenant_tracker.models.auth_context import AuthContext
from tenant_tracker.services.assignment_service import AssignmentService
from tenant_tracker.schemas.user_schemas import UserSummary

router = APIRouter()


@router.get("", response_model=list[UserSummary])
def list_tenants(
    context: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    """
    List every registered tenant.

    - Requires landlord role
    """
    service = AssignmentService(db)
    return service.list_tenants(context)


@router.get("/unassigned", response_model=list[UserSummary])
def list_unassigned_tenants(
    context: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    """
    List tenants who are not assigned to any property.

    - Requires landlord role
    - Used to pick a tenant for assignment
    """
    service = AssignmentService(db)
    return service.list_unassigned_tenants(context)
