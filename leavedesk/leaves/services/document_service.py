# -*- coding: utf-8 -*-
from __future__ import annotations
import logging
import os

from django.db import transaction

from leaves.exceptions import NotFoundError, ValidationError
from leaves.models import SupportingDocument
from leaves.selectors import directory_selector as directory

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {".pdf", ".jpg", ".jpeg", ".png"}
MAX_UPLOAD_BYTES = 5 * 1024 * 1024


@transaction.atomic
def upload_document(*, file, uploader_id: int, kind: str = SupportingDocument.Kind.PHYSICIAN_LETTER) -> SupportingDocument:
    """Store an uploaded file; the returned row's pk is the reference a submission carries."""
    if directory.get_employee(uploader_id) is None:
        raise NotFoundError(f"Employee {uploader_id} not found")
    if file is None:
        raise ValidationError("file is required")
    name = os.path.basename(getattr(file, "name", "") or "")
    ext = os.path.splitext(name)[1].lower()
    if ext not in ALLOWED_EXTENSIONS:
        raise ValidationError(f"Unsupported file type {ext or '(none)'}; allowed: {', '.join(sorted(ALLOWED_EXTENSIONS))}")
    if (getattr(file, "size", 0) or 0) > MAX_UPLOAD_BYTES:
        raise ValidationError("File is larger than 5 MB")
    if kind not in SupportingDocument.Kind.values:
        raise ValidationError(f"Invalid document kind: {kind!r}")

    doc = SupportingDocument.objects.create(file=file, kind=kind, original_name=name, uploaded_by_id=uploader_id)
    logger.info("[leave] document #%s uploaded by emp#%s (%s)", doc.pk, uploader_id, name)
    return doc
