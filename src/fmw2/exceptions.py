from datetime import date
from typing import Optional


class FMW2Error(Exception):
    """Base exception for FMW2 errors."""
    pass

class ConfigError(FMW2Error):
    """Configuration loading specific errors."""
    pass

class LogSinkError(FMW2Error):
    """Generation-log datastore errors."""
    pass

class UnknownTemplate(FMW2Error):
    def __init__(self, template_id: str):
        super().__init__(f"Unknown template: {template_id}")
        self.template_id = template_id

class UnsupportedTemplate(FMW2Error):
    """A custom-UI template was sent down the flat-form path."""
    def __init__(self, template_id: str):
        super().__init__(f"Template '{template_id}' has a dedicated builder and cannot be generated from form values")
        self.template_id = template_id

class GenerationFailed(FMW2Error):
    def __init__(self, message: str = "An unexpected error occurred. Try again."):
        super().__init__(message)
        self.message = message


class TemplateValidationError(FMW2Error, ValueError):
    """
    User-correctable validation outcome, surfaced to the caller as a message.
    """
    code = "validation_error"

    def __init__(self, message: str, *, label: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.label = label

    def to_dict(self) -> dict:
        payload = {"error": self.code, "detail": self.message}
        if self.label is not None:
            payload["label"] = self.label
        return payload


class MissingField(TemplateValidationError):
    code = "missing_field"

    def __init__(self, label: str):
        super().__init__(f'Please fill in the "{label}" field.', label=label)


class InvalidFormat(TemplateValidationError):
    code = "invalid_format"

    def __init__(self, label: str, message: Optional[str] = None):
        super().__init__(message or f'Invalid input in "{label}".', label=label)


class InvalidDate(TemplateValidationError):
    code = "invalid_date"

    def __init__(self, label: str):
        super().__init__(f'Please pick a valid date for "{label}".', label=label)


class DateRangeError(TemplateValidationError):
    code = "date_range"

    def __init__(self):
        super().__init__("End date must be after or same as start date.")


class NoEntries(TemplateValidationError):
    code = "no_entries"

    def __init__(self):
        super().__init__("Please add at least one date.")


class DuplicateDate(TemplateValidationError):
    code = "duplicate_date"

    def __init__(self, day: Optional[date] = None):
        super().__init__("This date is already added.")
        self.day = day
