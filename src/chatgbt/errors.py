"""Shared error types for chatgbt."""


class ChatGBTError(Exception):
    """Base error for all chatgbt failures."""


class ConfigurationError(ChatGBTError):
    """Budget, context or model settings are missing or invalid."""


class CompletionError(ChatGBTError):
    """The completion capability failed; the turn was rolled back."""

    def __init__(self, detail: str = "", *, error_type: str = "unknown_error") -> None:
        self.detail = detail
        self.error_type = error_type
        super().__init__("Completion failed" + (f": {detail}" if detail else ""))


class CompletionTimeoutError(CompletionError):
    """The completion call exceeded the session timeout."""

    def __init__(self, timeout: float) -> None:
        self.timeout = timeout
        super().__init__(f"timed out after {timeout}s", error_type="timeout_error")


class SessionNotFoundError(ChatGBTError):
    """Requested session does not exist in the session manager."""

    def __init__(self, session_id: str) -> None:
        self.session_id = session_id
        super().__init__(f"Session not found: {session_id}")


class PersistenceWarning(UserWarning):
    """The interaction log sink failed to write a record."""
