# hc_core/records/storage.py
"""
Attachment files for medical records, kept under
MEDIA_ROOT/<HC_RECORD_UPLOAD_DIR>/ through Django's default storage.
"""
from __future__ import annotations

import logging
import os
import uuid

from django.conf import settings
from django.core.files.storage import default_storage
from django.utils.text import get_valid_filename

logger = logging.getLogger(__name__)

TRAVERSAL_MSG = "Invalid filename - path traversal not allowed"


class UnsafeFilename(ValueError):
    pass


def upload_dir() -> str:
    return getattr(settings, "HC_RECORD_UPLOAD_DIR", "uploads/records").strip("/")


def save_attachment(uploaded) -> str:
    """
    Store an uploaded file and return its stored name (unique, no directories).
    """
    base = get_valid_filename(os.path.basename(uploaded.name or "attachment")) or "attachment"
    name = f"{uuid.uuid4().hex[:12]}-{base}"
    stored = default_storage.save(f"{upload_dir()}/{name}", uploaded)
    logger.info("stored record attachment %s (%s bytes)", stored, getattr(uploaded, "size", None))
    return os.path.basename(stored)


def clean_filename(raw: str) -> str:
    """
    Accept a bare stored name or its public URL path; anything that would
    leave the upload directory raises UnsafeFilename.
    """
    name = (raw or "").strip().replace("\\", "/")
    for prefix in (f"{settings.MEDIA_URL.rstrip('/')}/{upload_dir()}/", f"/{upload_dir()}/", f"{upload_dir()}/"):
        if name.startswith(prefix):
            name = name[len(prefix):]
            break

    if not name or ".." in name or "/" in name or "\x00" in name:
        raise UnsafeFilename(TRAVERSAL_MSG)
    return name


def attachment_path(name: str) -> str:
    return f"{upload_dir()}/{name}"


def attachment_exists(name: str) -> bool:
    return default_storage.exists(attachment_path(name))


def open_attachment(name: str):
    return default_storage.open(attachment_path(name), "rb")
