# hc_core/client/transport.py
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Protocol

import requests

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:8000/api"
DEFAULT_TIMEOUT = 30


@dataclass
class ApiResponse:
    status: int
    body: Any = None
    content: bytes = b""
    headers: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


class ApiError(Exception):
    """
    Non-2xx answer from the API (or no answer at all: status 0).
    Carries the server's error envelope fields when there is one.
    """

    def __init__(
        self,
        status: int,
        message: str,
        *,
        code: str | None = None,
        details: list[str] | None = None,
        fields: dict[str, str] | None = None,
    ):
        super().__init__(message)
        self.status = status
        self.message = message
        self.code = code
        self.details = details or []
        self.fields = fields or {}

    @property
    def is_not_found(self) -> bool:
        return self.status == 404 or (self.status == 400 and self.code == "invalid_id")

    @classmethod
    def from_response(cls, response: ApiResponse) -> "ApiError":
        body = response.body if isinstance(response.body, Mapping) else {}
        message = body.get("error") or body.get("message") or f"Request failed ({response.status})"
        return cls(
            response.status,
            str(message),
            code=body.get("code"),
            details=list(body.get("details") or []),
            fields=dict(body.get("fields") or {}),
        )


class Transport(Protocol):
    def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Mapping[str, Any]] = None,
        json: Any = None,
    ) -> ApiResponse: ...


class HttpTransport:
    """
    requests-based transport against a running API.

    HC_API_BASE_URL picks the host (local dev server or deployed one);
    HC_API_TIMEOUT is the per-request timeout in seconds.
    """

    def __init__(
        self,
        base_url: str | None = None,
        *,
        token: str | None = None,
        timeout: float | None = None,
        session: requests.Session | None = None,
    ):
        self.base_url = (base_url or os.getenv("HC_API_BASE_URL") or DEFAULT_BASE_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else float(os.getenv("HC_API_TIMEOUT", DEFAULT_TIMEOUT))
        self.session = session or requests.Session()
        self.session.headers.update({"Accept": "application/json"})
        if token:
            self.session.headers["Authorization"] = f"Bearer {token}"

    def login(self, username: str, password: str) -> None:
        response = self.request("POST", "/auth/login/", json={"username": username, "password": password})
        if not response.ok:
            raise ApiError.from_response(response)
        self.session.headers["Authorization"] = f"Bearer {response.body['access']}"

    def request(self, method, path, *, params=None, json=None) -> ApiResponse:
        url = f"{self.base_url}{path}"
        logger.debug("%s %s params=%s", method, url, params)
        try:
            r = self.session.request(method, url, params=params, json=json, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error("API request failed: %s %s: %s", method, url, e)
            raise ApiError(0, "Network error, please try again") from e

        body = None
        if r.content and r.headers.get("Content-Type", "").startswith("application/json"):
            body = r.json()
        if r.status_code >= 400:
            logger.warning("API error %s for %s %s", r.status_code, method, url)
        return ApiResponse(status=r.status_code, body=body, content=r.content, headers=dict(r.headers))


class ApiClient:
    """
    Thin verb helpers over a Transport. Every non-2xx becomes an ApiError.
    """

    def __init__(self, transport: Transport):
        self.transport = transport

    def _call(self, method: str, path: str, *, params=None, json=None) -> ApiResponse:
        response = self.transport.request(method, path, params=params, json=json)
        if not response.ok:
            raise ApiError.from_response(response)
        return response

    def get(self, path: str, params: Mapping[str, Any] | None = None) -> Any:
        return self._call("GET", path, params=params).body

    def post(self, path: str, data: Any) -> Any:
        return self._call("POST", path, json=data).body

    def put(self, path: str, data: Any) -> Any:
        return self._call("PUT", path, json=data).body

    def patch(self, path: str, data: Any) -> Any:
        return self._call("PATCH", path, json=data).body

    def delete(self, path: str) -> Any:
        return self._call("DELETE", path).body

    def download(self, path: str, params: Mapping[str, Any] | None = None) -> bytes:
        return self._call("GET", path, params=params).content
