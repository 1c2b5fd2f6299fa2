"""
Error kinds raised by the services and translated to HTTP status codes in main.py.

Routers and services raise these instead of HTTPException so the service layer
stays usable from scripts and tests.
"""


class EsportsError(Exception):
    """Base exception for all tournament API errors."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidRequestError(EsportsError):
    """Raised when request data is missing, malformed, or inconsistent (e.g. path/body id mismatch)."""

    status_code = 400


class EntityNotFoundError(EsportsError):
    """Raised when a requested or referenced entity does not exist."""

    status_code = 404

    def __init__(self, entity: str, entity_id: int):
        super().__init__(f"{entity} with ID {entity_id} not found.")
        self.entity = entity
        self.entity_id = entity_id


class ConflictError(EsportsError):
    """Raised when a unique name is taken or a row is still referenced."""

    status_code = 409


class NoWinnerYetError(EsportsError):
    """Raised when a tournament winner cannot be declared yet."""

    status_code = 404

    def __init__(self, tournament_id: int):
        super().__init__("No winner has been determined yet.")
        self.tournament_id = tournament_id
