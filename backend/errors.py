class ContentError(Exception):
    """Client-facing failure, rendered as {success: false, message} with status_code."""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class InvalidParameters(ContentError):
    def __init__(self, detail: str | None = None):
        message = "Invalid parameters" if not detail else f"Invalid parameters: {detail}"
        super().__init__(400, message)


class NotFound(ContentError):
    def __init__(self, message: str):
        super().__init__(404, message)
