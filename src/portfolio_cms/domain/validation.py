"""Field-level checks used by bindings before anything is dispatched."""

from __future__ import annotations

import re
from urllib.parse import urlparse

from portfolio_cms.domain.errors import ValidationError

_HEX_COLOR = re.compile(r"^#([A-Fa-f0-9]{6}|[A-Fa-f0-9]{3})$")
_EMAIL = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class FieldChecks:
    """Collect the first error per field, then raise them together."""

    def __init__(self) -> None:
        self._errors: dict[str, str] = {}

    @property
    def errors(self) -> dict[str, str]:
        return dict(self._errors)

    def add(self, field: str, message: str) -> None:
        self._errors.setdefault(field, message)

    def required(self, field: str, value: object, *, label: str) -> bool:
        if value is None or (isinstance(value, str) and not value.strip()):
            self.add(field, f"{label} is required")
            return False
        return True

    def length(
        self,
        field: str,
        value: str | None,
        *,
        label: str,
        min_length: int = 0,
        max_length: int | None = None,
    ) -> None:
        text = (value or "").strip()
        if min_length and len(text) < min_length:
            if not text:
                self.add(field, f"{label} is required")
            else:
                self.add(field, f"{label} must be at least {min_length} characters")
            return
        if max_length is not None and len(text) > max_length:
            self.add(field, f"{label} must be at most {max_length} characters")

    def url(self, field: str, value: str | None, *, label: str) -> None:
        """Optional URL: blank passes, anything else must be absolute http(s)."""
        if value is None or not value.strip():
            return
        parsed = urlparse(value.strip())
        if parsed.scheme not in {"http", "https"} or not parsed.netloc:
            self.add(field, f"{label} must be a valid URL")

    def hex_color(self, field: str, value: str, *, label: str) -> None:
        if not _HEX_COLOR.match(value):
            self.add(field, f"{label} must be a hex color")

    def email(self, field: str, value: str, *, label: str) -> None:
        if not self.required(field, value, label=label):
            return
        if not _EMAIL.match(value.strip()):
            self.add(field, f"{label} must be a valid email address")

    def raise_if_any(self) -> None:
        if self._errors:
            raise ValidationError(self._errors)


def blank_to_none(value: str | None) -> str | None:
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None
