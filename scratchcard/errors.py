"""
Business-rule errors raised by the services.

Each error carries the HTTP status the API answers with; the app factory
registers a single handler that renders ``{"error": str(e)}``.
"""


class ScratchcardError(Exception):
    status_code = 400


class ValidationError(ScratchcardError):
    status_code = 400


class NotFoundError(ScratchcardError):
    status_code = 404


class DuplicateCodeError(ScratchcardError):
    status_code = 409

    def __init__(self, message: str = "A code with this value already exists"):
        super().__init__(message)


class ReferencedByAssignmentError(ScratchcardError):
    status_code = 409

    def __init__(
        self,
        message: str = "Cannot delete prize definition. It is assigned to one or more codes.",
    ):
        super().__init__(message)


class AlreadyClaimedError(ScratchcardError):
    status_code = 409

    def __init__(self, message: str = "Prize has already been claimed"):
        super().__init__(message)


class ForbiddenError(ScratchcardError):
    status_code = 403
