from fastapi import HTTPException, status


class CredentialsException(HTTPException):
    """Exception for invalid credentials."""

    def __init__(self, detail: str = "Could not validate credentials"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class NotFoundException(HTTPException):
    """Exception for resource not found."""

    def __init__(self, detail: str = "Resource not found"):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail,
        )


class BadRequestException(HTTPException):
    """Exception for bad request."""

    def __init__(self, detail: str = "Bad request"):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
        )


class ServiceUnavailableException(HTTPException):
    """Exception for a failed write to the document store."""

    def __init__(self, detail: str = "Document store unavailable"):
        super().__init__(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=detail,
        )


class StoreError(Exception):
    """Raised by document store backends when a read or write fails."""


class MedicationValidationError(ValueError):
    """Raised when a medication draft is missing required fields."""

    def __init__(self, missing: list):
        self.missing = missing
        super().__init__(
            "Nombre, horario y frecuencia son campos obligatorios."
            f" Faltan: {', '.join(missing)}"
        )
