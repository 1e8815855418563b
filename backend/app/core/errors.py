"""Domain errors raised by the lead engine."""


class LeadDeskError(Exception):
    """Base class for recoverable errors in the lead engine."""

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class ValidationError(LeadDeskError):
    """Missing or invalid input; prior state is left untouched."""


class NotFound(LeadDeskError):
    """The referenced lead does not exist (or is not visible to the caller)."""

    def __init__(self, detail: str = "Lead not found"):
        super().__init__(detail)
