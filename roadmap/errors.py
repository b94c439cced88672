"""Application errors rendered as JSON by the handlers in ``create_app``."""


class RoadmapError(Exception):
    status_code = 400
    code = "bad_request"

    def __init__(self, message=None):
        super().__init__(message or self.code)
        self.message = message or self.code

    def to_dict(self):
        return {"error": self.code, "message": self.message, "code": self.status_code}


class ValidationError(RoadmapError):
    """Input failed validation; ``errors`` maps field name -> list of messages."""

    status_code = 422
    code = "validation_failed"

    def __init__(self, errors, message="The given data was invalid."):
        super().__init__(message)
        self.errors = errors

    def to_dict(self):
        return {"message": self.message, "errors": self.errors}


class AuthorizationError(RoadmapError):
    status_code = 403
    code = "forbidden"


class NotFoundError(RoadmapError):
    status_code = 404
    code = "not_found"


class ConflictError(RoadmapError):
    status_code = 409
    code = "conflict"


class PersistenceError(RoadmapError):
    status_code = 500
    code = "server_error"

    def to_dict(self):
        # Never leak driver messages to clients
        return {"error": self.code, "code": self.status_code}
