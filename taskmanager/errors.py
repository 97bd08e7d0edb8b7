from fastapi import status


class TaskManagerError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "internal_error"
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(TaskManagerError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "validation_error"
    default_message = "Invalid input"


class DuplicateUser(TaskManagerError):
    status_code = status.HTTP_409_CONFLICT
    code = "duplicate_user"
    default_message = "Email already registered"


class InvalidCredentials(TaskManagerError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "invalid_credentials"
    default_message = "Invalid email or password"


class Unauthenticated(TaskManagerError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "unauthenticated"
    default_message = "Not authenticated"


class NotFound(TaskManagerError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"
    default_message = "Task not found"


class InvalidToken(TaskManagerError):
    # swallowed by the identity resolver, never rendered
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "invalid_token"
    default_message = "Invalid token"
