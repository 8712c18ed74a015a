from typing import Optional
from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.orm import Session

from tenant_tracker.database import get_db
from tenant_tracker.dependencies import get_auth_context
from tenant_tracker.models.auth_context import AuthContext
from tenant_tracker.models.property import PropertyType
from tenant_tracker.services.property_service import PropertyService
from tenant_tracker.schemas.property_schemas import (
    PropertyCreate,
    PropertyResponse,
    PropertyListResponse,
    AvailablePropertyListResponse,
    PropertyFilter,
    ContactRequest,
    ContactResponse,
    MessageResponse,
)

router = APIRouter()


@router.post("", response_model=PropertyResponse, status_code=status.HTTP_201_CREATED)
def create_property(
    data: PropertyCreate,
    context: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    """
    List a new property.

    - Requires landlord role
    - Property starts vacant
    """
    service = PropertyService(db)
    return service.create_property(data, context)


@router.get("", response_model=PropertyListResponse)
def list_own_properties(
    context: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    """Get all properties owned by the authenticated landlord, with occupants"""
    service = PropertyService(db)
    properties = service.list_own_properties(context)
    return PropertyListResponse(properties=properties, total=len(properties))


@router.get("/available", response_model=AvailablePropertyListResponse)
def list_available_properties(
    location: Optional[str] = Query(None, description="Address contains (case-insensitive)"),
    type: Optional[PropertyType] = Query(None, description="Property type"),
    min_rent: Optional[float] = Query(None, ge=0, description="Minimum rent (inclusive)"),
    max_rent: Optional[float] = Query(None, ge=0, description="Maximum rent (inclusive)"),
    min_bedrooms: Optional[int] = Query(None, ge=0, description="Minimum bedrooms"),
    min_bathrooms: Optional[int] = Query(None, ge=0, description="Minimum bathrooms"),
    context: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    """
    Browse vacant properties.

    - Requires tenant role
    - Occupied properties are never returned
    - Each property includes landlord contact details
    """
    service = PropertyService(db)
    filters = PropertyFilter(
        location=location,
        type=type,
        min_rent=min_rent,
        max_rent=max_rent,
        min_bedrooms=min_bedrooms,
        min_bathrooms=min_bathrooms,
    )
    properties = service.list_available_properties(filters, context)
    return AvailablePropertyListResponse(properties=properties, total=len(properties))


@router.delete("/{property_id}", response_model=MessageResponse)
def delete_property(
    property_id: int,
    context: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    """
    Delete a property.

    - Requires landlord role and ownership
    - Returns 409 while a tenant is assigned or any agreement references it
    """
    service = PropertyService(db)
    service.delete_property(property_id, context)
    return MessageResponse(message="Property deleted successfully!")


@router.post("/{property_id}/contact", response_model=ContactResponse)
def contact_landlord(
    property_id: int,
    data: ContactRequest,
    context: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    """
    Send a contact request to the property's landlord.

    - Requires tenant role
    - Delivery is simulated; the landlord's contact details are returned
    """
    service = PropertyService(db)
    return service.contact_landlord(property_id, data.message, context)
