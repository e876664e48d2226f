# hc_core/client/detail_view.py
from __future__ import annotations

import logging
from datetime import date
from typing import Any

from hc_core.client.forms import FORMS, MutationForm
from hc_core.client.transport import ApiClient, ApiError
from hc_core.common.display import calculate_age, format_currency, format_duration
from hc_core.common.validators import parse_date

logger = logging.getLogger(__name__)

RECORD_DOWNLOAD_PATH = "/records/download/"


class ResourceDetailView:
    """
    One entity by id.

    A missing id, a 404, or a malformed id (400 invalid_id) all end in the
    terminal `not_found` state; any other failure is kept in `error`.
    Deleting asks for confirmation first and sends the user back to the list.
    """

    def __init__(self, client: ApiClient, resource: str, *, today: date | None = None):
        self.client = client
        self.resource = resource.strip("/")
        self.today = today

        self.entity: dict | None = None
        self.not_found = False
        self.error: str | None = None
        self.action_error: str | None = None
        self.redirect_to: str | None = None

    @property
    def list_route(self) -> str:
        return f"/{self.resource}"

    def load(self, item_id: Any) -> bool:
        self.entity = None
        self.error = None
        self.not_found = False

        if item_id in (None, ""):
            self.not_found = True
            return False

        try:
            body = self.client.get(f"/{self.resource}/{item_id}/")
        except ApiError as e:
            if e.is_not_found:
                self.not_found = True
            else:
                logger.warning("Loading %s %s failed: %s", self.resource, item_id, e.message)
                self.error = e.message
            return False

        self.entity = (body or {}).get("data")
        return True

    # ----------------------------
    # Display helpers
    # ----------------------------
    def age(self, field: str = "date_of_birth") -> int | None:
        if not self.entity:
            return None
        return calculate_age(parse_date(self.entity.get(field)), self.today)

    def currency(self, field: str) -> str:
        return format_currency((self.entity or {}).get(field) or 0)

    def duration(self, field: str = "duration") -> str:
        return format_duration((self.entity or {}).get(field))

    # ----------------------------
    # Actions
    # ----------------------------
    def edit_form(self) -> MutationForm:
        form_class = FORMS[self.resource]
        return form_class(self.client, self.entity, today=self.today)

    def delete(self, confirmed: bool = False) -> bool:
        if not confirmed or not self.entity:
            return False

        try:
            self.client.delete(f"/{self.resource}/{self.entity['id']}/")
        except ApiError as e:
            self.action_error = e.message
            return False

        self.action_error = None
        self.redirect_to = self.list_route
        return True

    def download_attachment(self, filename: str) -> bytes | None:
        try:
            return self.client.download(RECORD_DOWNLOAD_PATH, {"filename": filename})
        except ApiError as e:
            self.action_error = e.message
            return None
