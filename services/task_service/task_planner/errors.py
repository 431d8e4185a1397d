class TaskServiceError(Exception):
    """Base error. ``message`` is what the client sees."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(TaskServiceError):
    status_code = 400


class NotFound(TaskServiceError):
    status_code = 404

    def __init__(self, message: str = "Task not found"):
        super().__init__(message)


class StoreError(TaskServiceError):
    """Persistence failure. The driver error stays in ``__cause__`` and the logs."""

    status_code = 500
