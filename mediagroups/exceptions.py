class MediaGroupsError(Exception):
    """Base exception for mediagroups."""

    pass


class TelegramApiError(MediaGroupsError):
    """Raised when the Bot API answers a call with ok=false."""

    def __init__(self, method: str, error_code: int | None, description: str):
        self.method = method
        self.error_code = error_code
        self.description = description
        super().__init__(f"{method} failed ({error_code}): {description}")
