"""User role enum for role-based access control."""

from enum import Enum as PyEnum


class UserRole(str, PyEnum):
    """
    Account roles, fixed at registration.

    Permissions:
    - LANDLORD: list/delete own properties, assign/remove tenants, verify
      payments, create agreements for own properties
    - TENANT: browse vacant properties, view own dashboard, pay and mark
      rent as paid, request and sign own agreements
    """

    LANDLORD = "landlord"
    TENANT = "tenant"
