# robomatch/exceptions.py


class MissionError(Exception):
    """Base for failures surfaced to callers of the mission engine."""

    status_code = 400
    code = "error"

    def __init__(self, message: str = "", **details):
        super().__init__(message)
        self.message = message or self.__class__.__name__
        self.details = details

    def to_dict(self) -> dict:
        payload = {"error": self.code, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class ValidationError(MissionError):
    status_code = 400
    code = "validation_error"


class NotFound(MissionError):
    status_code = 404
    code = "not_found"


class Forbidden(MissionError):
    status_code = 403
    code = "forbidden"


class InvalidStateTransition(MissionError):
    status_code = 409
    code = "invalid_state_transition"
