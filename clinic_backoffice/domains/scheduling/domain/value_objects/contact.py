"""Contact value object: who receives a reminder."""

import re
from dataclasses import dataclass

from clinic_backoffice.core.domain.exceptions import ValidationException
from clinic_backoffice.core.domain.value_objects import ValueObject

_PHONE_SEPARATORS = re.compile(r"[\s\-().]")


@dataclass(frozen=True)
class Contact(ValueObject):
    """Reminder recipient resolved from an appointment."""

    display_name: str
    phone: str | None = None
    patient_id: int | None = None

    def normalized_phone(self) -> str:
        """
        Phone in E.164-like form with a leading '+'.

        Raises:
            ValidationException: If the contact has no usable phone.
        """
        raw = _PHONE_SEPARATORS.sub("", self.phone or "")
        if not raw or raw == "+":
            raise ValidationException("Patient has no phone number", field="phone")
        digits = raw[1:] if raw.startswith("+") else raw
        if not digits.isdigit():
            raise ValidationException(f"Invalid phone number: {self.phone}", field="phone")
        return f"+{digits}"
