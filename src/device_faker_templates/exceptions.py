"""
Custom exceptions for device-faker-templates.

This module defines the exceptions raised inside the package. Discovery and
download errors never escape the aggregator or the download pipeline; they are
converted into fallbacks or empty results there.
"""


class TemplatesError(Exception):
    """
    Base exception for all device-faker-templates errors.

    All custom exceptions in the package inherit from this class to allow for
    easy catching of application-specific errors.
    """

    def __init__(self, message: str, details: str | None = None) -> None:
        """
        Initialize the exception.

        Args:
            message: The primary error message.
            details: Optional additional context about the error.
        """
        self.message = message
        self.details = details
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - {self.details}"
        return self.message


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(TemplatesError):
    """Exception raised when configuration is invalid or cannot be loaded."""

    pass


class ConfigFileError(ConfigurationError):
    """Exception raised when the configuration file cannot be read or parsed."""

    pass


class ConfigValidationError(ConfigurationError):
    """
    Exception raised when a configuration value fails validation.

    Attributes:
        key: The configuration key that failed validation.
        value: The offending value.
    """

    def __init__(
        self,
        message: str,
        key: str | None = None,
        value: object = None,
        details: str | None = None,
    ) -> None:
        super().__init__(message, details)
        self.key = key
        self.value = value


# =============================================================================
# Network and Discovery Errors
# =============================================================================


class FetchError(TemplatesError):
    """
    Exception raised when an HTTP request cannot be completed.

    Attributes:
        url: The URL that was being fetched.
        status_code: The HTTP status code, when a response was received.
    """

    def __init__(
        self,
        message: str,
        url: str | None = None,
        status_code: int | None = None,
        details: str | None = None,
    ) -> None:
        super().__init__(message, details)
        self.url = url
        self.status_code = status_code


class DiscoveryError(TemplatesError):
    """
    Exception raised when a tree walker cannot list a remote directory.

    This distinguishes "source unusable" from "source used and found nothing".

    Attributes:
        path: Repository-relative path that was being listed.
        strategy: Discovery strategy that failed ("api" or "html").
        status_code: The HTTP status code, when the failure was a bad response.
    """

    def __init__(
        self,
        message: str,
        path: str | None = None,
        strategy: str | None = None,
        status_code: int | None = None,
        details: str | None = None,
    ) -> None:
        super().__init__(message, details)
        self.path = path
        self.strategy = strategy
        self.status_code = status_code


# =============================================================================
# Download Pipeline Errors
# =============================================================================


class CommandError(TemplatesError):
    """
    Exception raised when an external command exits unsuccessfully.

    Attributes:
        command: The command line that was executed.
        returncode: The process exit status.
        stderr: Captured standard error output.
    """

    def __init__(
        self,
        message: str,
        command: str | None = None,
        returncode: int | None = None,
        stderr: str | None = None,
    ) -> None:
        super().__init__(message, stderr or None)
        self.command = command
        self.returncode = returncode
        self.stderr = stderr


class TemplateParseError(TemplatesError):
    """Exception raised when downloaded template content cannot be parsed."""

    pass
