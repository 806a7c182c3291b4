"""Lease template filling.

The lease workflow only depends on ``DocumentFillService``; the pypdf
implementation writes AcroForm field values into a copy of the template.
"""

import logging
from abc import ABC, abstractmethod
from datetime import date, datetime
from io import BytesIO
from typing import Any

from pypdf import PdfReader, PdfWriter
from pypdf.errors import PdfReadError

from rentdesk.core.exceptions import DomainValidationError

logger = logging.getLogger(__name__)


class DocumentFillService(ABC):
    """Fills a template document with field values."""

    @abstractmethod
    def fill(self, template: bytes, values: dict[str, Any]) -> bytes:
        """Return a new document with ``values`` written into its form fields."""


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return str(value)


class PypdfFillService(DocumentFillService):
    """AcroForm filling with pypdf."""

    def fill(self, template: bytes, values: dict[str, Any]) -> bytes:
        try:
            reader = PdfReader(BytesIO(template))
        except PdfReadError as e:
            raise DomainValidationError(f"Template is not a readable PDF: {e}")

        writer = PdfWriter(clone_from=reader)
        fields = reader.get_fields() or {}

        if fields:
            text_values = {name: _as_text(v) for name, v in values.items() if name in fields}
            skipped = sorted(set(values) - set(fields))
            if skipped:
                logger.info("[FILL] Ignoring values for unknown fields: %s", ", ".join(skipped))
            for page in writer.pages:
                writer.update_page_form_field_values(page, text_values, auto_regenerate=False)
            writer.set_need_appearances_writer(True)
            logger.info("[FILL] Filled %d of %d form fields", len(text_values), len(fields))
        else:
            logger.warning("[FILL] Template has no form fields; returning an unfilled copy")

        output = BytesIO()
        writer.write(output)
        return output.getvalue()


def get_fill_service() -> DocumentFillService:
    return PypdfFillService()
