class PlannerError(Exception):
    """Base for input problems reported back to the caller as a 400."""

    code = "invalid_payload"

    def __init__(self, detail: str = "", code: str = None):
        super().__init__(detail or self.code)
        self.detail = detail
        if code is not None:
            self.code = code


class ValidationError(PlannerError):
    """Settings are missing or malformed."""

    code = "invalid_settings"


class ParseError(PlannerError):
    """Request body is not well-formed structured data."""

    code = "invalid_payload"
