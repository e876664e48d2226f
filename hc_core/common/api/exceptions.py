# hc_core/common/api/exceptions.py

from __future__ import annotations

import logging
import uuid
from typing import Any

from django.core.exceptions import ObjectDoesNotExist, ValidationError as DjangoValidationError
from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import (
    APIException,
    AuthenticationFailed,
    NotAuthenticated,
    NotFound,
    PermissionDenied,
    ValidationError,
)
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

from hc_core.common.transitions import InvalidTransition

logger = logging.getLogger(__name__)

VALIDATION_FAILED_MSG = "Validation failed"
UNAUTHORIZED_MSG = "Unauthorized"
SERVER_ERROR_MSG = "Internal server error"

_PASSTHROUGH_HEADERS = {"www-authenticate", "retry-after", "allow"}


def ensure_request_id(request) -> str:
    """
    Ensures request has a stable request_id attribute and returns it.
    Safe to call from middleware and DRF exception handler.
    """
    rid = getattr(request, "request_id", None) if request is not None else None
    if not rid:
        rid = uuid.uuid4().hex
        if request is not None:
            setattr(request, "request_id", rid)
    return rid


def build_error_envelope(
    *,
    request=None,
    code: str,
    message: str,
    details: list[str] | None = None,
    fields: dict[str, str] | None = None,
) -> dict[str, Any]:
    """
    Canonical error envelope:

        {"success": false, "error": "...", "code": "...", "request_id": "...",
         "details": [...], "fields": {...}}

    `details` and `fields` are only present for validation failures.
    Reusable from Django middleware (JsonResponse) and DRF (Response).
    """
    body: dict[str, Any] = {
        "success": False,
        "error": message,
        "code": code,
        "request_id": ensure_request_id(request),
    }
    if details:
        body["details"] = details
    if fields:
        body["fields"] = fields
    return body


class ConflictError(APIException):
    """
    409 Conflict that still flows through the global exception handler.
    Use when business rules block an action (e.g. an illegal status change).
    """
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Conflict."
    default_code = "conflict"

    def __init__(self, detail=None, code=None):
        super().__init__(detail=detail or self.default_detail, code=code or self.default_code)


class InvalidIdError(APIException):
    """
    Malformed path id (not a UUID). Distinct from 404 so clients can tell
    "bad link" from "gone".
    """
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid ID"
    default_code = "invalid_id"


def flatten_errors(data: Any, prefix: str = "") -> list[str]:
    """
    Turn DRF's nested error structure into a flat list of human-readable strings.

      {"medications": [{"dosage": ["This field is required."]}]}
        -> ["medications[0].dosage: This field is required."]
    """
    out: list[str] = []

    if isinstance(data, dict):
        for key, value in data.items():
            if key in ("non_field_errors", "detail"):
                out.extend(flatten_errors(value, prefix))
                continue
            path = f"{prefix}.{key}" if prefix else str(key)
            out.extend(flatten_errors(value, path))
        return out

    if isinstance(data, (list, tuple)):
        for idx, item in enumerate(data):
            if isinstance(item, (dict, list, tuple)):
                out.extend(flatten_errors(item, f"{prefix}[{idx}]"))
            else:
                out.extend(flatten_errors(item, prefix))
        return out

    if data in (None, "", {}):
        return out

    msg = str(data)
    out.append(f"{prefix}: {msg}" if prefix else msg)
    return out


def _first_message(value: Any) -> str | None:
    if isinstance(value, dict):
        msgs = flatten_errors(value)
        return msgs[0] if msgs else None
    if isinstance(value, (list, tuple)):
        for item in value:
            found = _first_message(item)
            if found:
                return found
        return None
    return str(value) if value not in (None, "") else None


def _field_errors(data: Any) -> dict[str, str]:
    if not isinstance(data, dict):
        return {}
    fields: dict[str, str] = {}
    for key, value in data.items():
        if key in ("non_field_errors", "detail"):
            continue
        msg = _first_message(value)
        if msg:
            fields[str(key)] = msg
    return fields


def _to_drf(exc: Exception) -> Exception:
    """
    Map domain/Django exceptions raised below the view layer onto DRF ones.
    """
    if isinstance(exc, DjangoValidationError):
        if hasattr(exc, "error_dict"):
            return ValidationError(exc.message_dict)
        return ValidationError(exc.messages)
    if isinstance(exc, InvalidTransition):
        return ConflictError(str(exc), code="invalid_transition")
    if isinstance(exc, ObjectDoesNotExist):
        return NotFound("Not found.")
    return exc


def _code_for(exc: Exception, http_status: int) -> str:
    if isinstance(exc, ValidationError):
        return "validation_error"
    if isinstance(exc, (NotAuthenticated, AuthenticationFailed)) or http_status == 401:
        return "not_authenticated"
    if isinstance(exc, PermissionDenied):
        return "permission_denied"
    if isinstance(exc, (Http404, NotFound)):
        return "not_found"
    if isinstance(exc, APIException):
        codes = exc.get_codes()
        return codes if isinstance(codes, str) else (exc.default_code or "api_error")
    if http_status >= 500:
        return "server_error"
    return "error"


def api_exception_handler(exc: Exception, context: dict[str, Any]):
    request = context.get("request")
    exc = _to_drf(exc)
    response = drf_exception_handler(exc, context)

    # Truly unhandled error
    if response is None:
        view = context.get("view")
        logger.exception(
            "Unhandled API error view=%s request_id=%s",
            view.__class__.__name__ if view is not None else None,
            ensure_request_id(request),
        )
        return Response(
            build_error_envelope(request=request, code="server_error", message=SERVER_ERROR_MSG),
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    http_status = response.status_code
    code = _code_for(exc, http_status)
    data = response.data

    details: list[str] | None = None
    fields: dict[str, str] | None = None

    if isinstance(exc, ValidationError):
        message = VALIDATION_FAILED_MSG
        details = flatten_errors(data) or [VALIDATION_FAILED_MSG]
        fields = _field_errors(data) or None
    elif http_status == status.HTTP_401_UNAUTHORIZED:
        message = UNAUTHORIZED_MSG
        details = flatten_errors(data) or None
    elif isinstance(data, dict) and "detail" in data:
        message = str(data.get("detail"))
    else:
        message = _first_message(data) or "Request failed."

    if http_status >= 500:
        logger.error("API error %s: %s", http_status, message)

    return Response(
        build_error_envelope(
            request=request,
            code=code,
            message=message,
            details=details,
            fields=fields,
        ),
        status=http_status,
        headers={k: v for k, v in response.items() if k.lower() in _PASSTHROUGH_HEADERS},
    )
