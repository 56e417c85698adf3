from fastapi import status

from app.response import CustomHTTPException


class RequestValidationError(CustomHTTPException):
    def __init__(self, message="Invalid Request", **errors):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            message=message,
            error_code="INVALID_REQUEST",
            errors=errors or None,
        )


class NotFoundError(CustomHTTPException):
    def __init__(self, message="Not found"):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            message=message,
            error_code="NOT_FOUND",
        )


class NotAuthenticatedError(CustomHTTPException):
    def __init__(self, message="Authentication required", error_code="NOT_AUTHENTICATED"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            message=message,
            error_code=error_code,
            headers={"WWW-Authenticate": "Bearer"},
        )


class PermissionDeniedError(CustomHTTPException):
    def __init__(self, message="Not Authorized", error_code="INSUFFICIENT_PERMISSIONS"):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            message=message,
            error_code=error_code,
        )


class UploadPolicyError(CustomHTTPException):
    """Rejected upload: wrong file type, too large, or too many files."""

    def __init__(self, message):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            message=message,
            error_code="UPLOAD_POLICY",
        )
