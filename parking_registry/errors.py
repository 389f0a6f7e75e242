# parking_registry/errors.py
"""
Error taxonomy shared by services and routers.
Services raise these; main.py turns them into {"error": message} responses.
"""


class RegistryError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(RegistryError):
    """Malformed plate, missing field, duplicate plate across persons."""
    status_code = 400


class InvalidStateError(RegistryError):
    """Inventory session is not active."""
    status_code = 400


class AuthError(RegistryError):
    status_code = 401


class NotFoundError(RegistryError):
    status_code = 404


class ConflictError(RegistryError):
    """Delete blocked by a parked vehicle."""
    status_code = 409


class StoreError(RegistryError):
    status_code = 500
