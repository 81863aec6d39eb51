"""
Validation and commit of alert configuration edits
"""
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from ..errors import ValidationError
from ..models.alert import SNOOZE_CHOICES, AlertConfig

logger = logging.getLogger(__name__)


@dataclass
class ValidationResult:
    config: Optional[AlertConfig] = None
    errors: List[ValidationError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def messages(self) -> List[str]:
        return [error.message for error in self.errors]


class AlertConfigValidator:
    """Checks a draft AlertConfig and commits it to the engine when valid"""

    def __init__(self, engine=None):
        self.engine = engine

    def validate(self, draft: AlertConfig) -> ValidationResult:
        """Collect every problem with the draft; never touches the live config"""
        errors = []

        if draft.warning_threshold < 0:
            errors.append(ValidationError("warning_threshold", "Warning threshold cannot be negative"))
        if draft.danger_threshold < 0:
            errors.append(ValidationError("danger_threshold", "Danger threshold cannot be negative"))
        if draft.warning_threshold >= draft.danger_threshold:
            errors.append(ValidationError(
                "warning_threshold", "Warning threshold must be less than danger threshold"))

        if draft.enable_email_notifications and not draft.email_address.strip():
            errors.append(ValidationError(
                "email_address", "Email address is required for email notifications"))
        if not draft.enable_email_notifications and draft.email_address.strip():
            errors.append(ValidationError(
                "email_address", "Email address must be empty when email notifications are off"))

        if draft.enable_sms_notifications and not draft.phone_number.strip():
            errors.append(ValidationError(
                "phone_number", "Phone number is required for SMS notifications"))
        if not draft.enable_sms_notifications and draft.phone_number.strip():
            errors.append(ValidationError(
                "phone_number", "Phone number must be empty when SMS notifications are off"))

        if not 0 <= draft.alert_volume <= 100:
            errors.append(ValidationError("alert_volume", "Alert volume must be between 0 and 100"))
        if draft.snooze_time_minutes not in SNOOZE_CHOICES:
            errors.append(ValidationError(
                "snooze_time_minutes",
                f"Snooze time must be one of {', '.join(str(m) for m in SNOOZE_CHOICES)} minutes"))

        if errors:
            return ValidationResult(errors=errors)
        return ValidationResult(config=draft)

    def submit(self, draft: AlertConfig) -> ValidationResult:
        """Validate and, only if clean, replace the engine's active config"""
        result = self.validate(draft)
        if not result.ok:
            logger.warning(f"Rejected alert config edit: {'; '.join(result.messages())}")
            return result
        if self.engine is not None:
            self.engine.replace_config(result.config)
        return result
