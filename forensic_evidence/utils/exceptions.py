"""Custom exception classes for the forensic evidence core."""


class ForensicEvidenceException(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, original_error: Exception = None):
        super().__init__(message)
        self.original_error = original_error


class ConfigurationError(ForensicEvidenceException):
    """Exception raised when configuration is invalid or missing."""

    pass


class RuleTableError(ConfigurationError):
    """Exception raised when the redaction rule table cannot be loaded."""

    pass


class ContentHashError(ForensicEvidenceException):
    """Exception raised when a content digest cannot be computed."""

    pass


class InvalidStatusTransitionError(ForensicEvidenceException):
    """Exception raised when a validation status change is not allowed."""

    pass


class RevalidationTimeoutError(ForensicEvidenceException):
    """Exception raised when a revalidation sweep exceeds its deadline."""

    def __init__(self, message: str, completed: int = 0, total: int = 0):
        super().__init__(message)
        self.completed = completed
        self.total = total
