# hc_core/common/permissions.py

from __future__ import annotations

from typing import Set

from rest_framework.permissions import BasePermission, SAFE_METHODS

# Group/role names (Django auth Group names recommended)
ROLE_ADMIN = "ADMIN"
ROLE_DOCTOR = "DOCTOR"
ROLE_PHARMACIST = "PHARMACIST"
ROLE_PATIENT = "PATIENT"

ALL_ROLES = (ROLE_ADMIN, ROLE_DOCTOR, ROLE_PHARMACIST, ROLE_PATIENT)
STAFF_ROLES = {ROLE_ADMIN, ROLE_DOCTOR, ROLE_PHARMACIST}


def _user_roles(user) -> Set[str]:
    """
    Resolve roles from:
    1) Django groups: user.groups (recommended)
    2) Optional user.role attribute

    Returns set of role strings (empty for anonymous users).
    """
    roles: Set[str] = set()

    if not user or not getattr(user, "is_authenticated", False):
        return roles

    # Superuser treated as admin
    if getattr(user, "is_superuser", False):
        roles.add(ROLE_ADMIN)
        return roles

    # Django Groups
    if hasattr(user, "groups"):
        roles.update(user.groups.values_list("name", flat=True))

    # Optional user.role
    if hasattr(user, "role") and user.role:
        roles.add(str(user.role))

    return roles


def user_roles(user) -> Set[str]:
    return _user_roles(user)


def has_role(user, *roles: str) -> bool:
    return bool(_user_roles(user) & set(roles))


def primary_role(user) -> str | None:
    """
    Single role used for display (/me): highest privilege wins.
    """
    roles = _user_roles(user)
    for role in ALL_ROLES:
        if role in roles:
            return role
    return None


class BaseRolePermission(BasePermission):
    """
    Base permission class for role-based access control.

    Key behavior:
    - Requires authentication (the global IsAuthenticated already does this).
    - ADMIN bypass.
    - Uses allowed_roles_per_action for strict RBAC.
    - If action is unknown and request is SAFE, fall back to list/retrieve
      instead of denying.

    Row ownership is not decided here: viewsets narrow their querysets to the
    actor's rows, so a row owned by someone else is a 404, not a 403.
    """
    message = "You do not have permission to perform this action."

    # Override in subclasses: dict of action -> set of allowed roles
    allowed_roles_per_action = {
        "list": set(STAFF_ROLES),
        "retrieve": set(STAFF_ROLES),
        "create": {ROLE_ADMIN},
        "update": {ROLE_ADMIN},
        "partial_update": {ROLE_ADMIN},
        "destroy": {ROLE_ADMIN},
    }

    def _infer_action(self, request, view) -> str | None:
        action = getattr(view, "action", None)
        if action:
            return action

        # fallback inference when action isn't set
        kwargs = getattr(view, "kwargs", {}) or {}
        is_detail = "pk" in kwargs or "id" in kwargs

        method = request.method.upper()
        if method in ("GET", "HEAD", "OPTIONS"):
            return "retrieve" if is_detail else "list"
        if method == "POST":
            return "create"
        if method == "PUT":
            return "update"
        if method == "PATCH":
            return "partial_update"
        if method == "DELETE":
            return "destroy"
        return None

    def has_permission(self, request, view) -> bool:
        user = request.user
        if not user or not getattr(user, "is_authenticated", False):
            return False

        roles = _user_roles(user)

        # ADMIN can do everything
        if ROLE_ADMIN in roles:
            return True

        action = self._infer_action(request, view)
        allowed = self.allowed_roles_per_action.get(action)

        if allowed is None and request.method in SAFE_METHODS:
            kwargs = getattr(view, "kwargs", {}) or {}
            is_detail = "pk" in kwargs or "id" in kwargs
            read_action = "retrieve" if is_detail else "list"
            allowed = self.allowed_roles_per_action.get(read_action)

        if allowed is not None:
            return bool(roles & allowed)

        # Unknown action => deny by default
        return False

    def has_object_permission(self, request, view, obj) -> bool:
        return self.has_permission(request, view)


# Specific permission classes for each module

class PatientPermission(BaseRolePermission):
    """Shared patient directory: clinicians and pharmacists read, clinicians write."""
    allowed_roles_per_action = {
        "list": {ROLE_DOCTOR, ROLE_PHARMACIST},
        "retrieve": {ROLE_DOCTOR, ROLE_PHARMACIST},
        "create": {ROLE_DOCTOR, ROLE_PHARMACIST},
        "update": {ROLE_DOCTOR},
        "partial_update": {ROLE_DOCTOR},
        "destroy": {ROLE_DOCTOR},
        "search": {ROLE_DOCTOR, ROLE_PHARMACIST},
        "stats": {ROLE_DOCTOR, ROLE_PHARMACIST},
    }


class MedicalRecordPermission(BaseRolePermission):
    message = "Forbidden - Doctor access required"
    allowed_roles_per_action = {
        "list": {ROLE_DOCTOR},
        "retrieve": {ROLE_DOCTOR},
        "create": {ROLE_DOCTOR},
        "update": {ROLE_DOCTOR},
        "partial_update": {ROLE_DOCTOR},
        "destroy": {ROLE_DOCTOR},
        "set_status": {ROLE_DOCTOR},
        "stats": {ROLE_DOCTOR},
        "download": {ROLE_DOCTOR},
    }


class PrescriptionPermission(BaseRolePermission):
    message = "Forbidden - Doctor access required"
    allowed_roles_per_action = {
        "list": {ROLE_DOCTOR, ROLE_PHARMACIST},
        "retrieve": {ROLE_DOCTOR, ROLE_PHARMACIST},
        "create": {ROLE_DOCTOR},
        "update": {ROLE_DOCTOR},
        "partial_update": {ROLE_DOCTOR},
        "destroy": {ROLE_DOCTOR},
        "set_status": {ROLE_DOCTOR, ROLE_PHARMACIST},
        "stats": {ROLE_DOCTOR},
    }


class AppointmentPermission(BaseRolePermission):
    allowed_roles_per_action = {
        "list": {ROLE_DOCTOR, ROLE_PHARMACIST},
        "retrieve": {ROLE_DOCTOR, ROLE_PHARMACIST},
        "create": {ROLE_DOCTOR, ROLE_PHARMACIST},
        "update": {ROLE_DOCTOR, ROLE_PHARMACIST},
        "partial_update": {ROLE_DOCTOR, ROLE_PHARMACIST},
        "destroy": {ROLE_DOCTOR, ROLE_PHARMACIST},
        "set_status": {ROLE_DOCTOR, ROLE_PHARMACIST},
        "stats": {ROLE_DOCTOR, ROLE_PHARMACIST},
    }


class PharmacyPermission(BaseRolePermission):
    """Patients browse active pharmacies (shop); only pharmacists manage them."""
    allowed_roles_per_action = {
        "list": {ROLE_PHARMACIST, ROLE_DOCTOR, ROLE_PATIENT},
        "retrieve": {ROLE_PHARMACIST, ROLE_DOCTOR, ROLE_PATIENT},
        "create": {ROLE_PHARMACIST},
        "update": {ROLE_PHARMACIST},
        "partial_update": {ROLE_PHARMACIST},
        "destroy": {ROLE_PHARMACIST},
        "set_status": {ROLE_PHARMACIST},
        "stats": {ROLE_PHARMACIST},
    }


class ProductPermission(BaseRolePermission):
    allowed_roles_per_action = {
        "list": {ROLE_PHARMACIST, ROLE_PATIENT},
        "retrieve": {ROLE_PHARMACIST, ROLE_PATIENT},
        "create": {ROLE_PHARMACIST},
        "update": {ROLE_PHARMACIST},
        "partial_update": {ROLE_PHARMACIST},
        "destroy": {ROLE_PHARMACIST},
        "low_stock": {ROLE_PHARMACIST},
    }


class OrderPermission(BaseRolePermission):
    """Patients place and cancel their own orders; pharmacists progress them."""
    allowed_roles_per_action = {
        "list": {ROLE_PATIENT, ROLE_PHARMACIST},
        "retrieve": {ROLE_PATIENT, ROLE_PHARMACIST},
        "create": {ROLE_PATIENT},
        "destroy": {ROLE_PATIENT, ROLE_PHARMACIST},
        # answered with 405; orders change only through /status/ and DELETE
        "update": {ROLE_PATIENT, ROLE_PHARMACIST},
        "partial_update": {ROLE_PATIENT, ROLE_PHARMACIST},
        "set_status": {ROLE_PHARMACIST},
    }


class AuditPermission(BaseRolePermission):
    message = "Forbidden - Admin access required"
    allowed_roles_per_action = {
        "list": {ROLE_ADMIN},
    }


class DoctorDirectoryPermission(BaseRolePermission):
    """Everyone signed in can look up doctors when booking."""
    allowed_roles_per_action = {
        "list": set(ALL_ROLES),
        "retrieve": set(ALL_ROLES),
        "available": set(ALL_ROLES),
    }
