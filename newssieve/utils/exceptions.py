"""
NewsSieve Custom Exceptions
===========================

Exception hierarchy for the feed filtering pipeline with error codes,
context information and user-friendly messages.
"""

from typing import Optional, Dict, Any
from enum import Enum


class ErrorCode(str, Enum):
    """Error codes for categorizing exceptions."""

    # Configuration errors (C001-C099)
    CONFIG_INVALID = "C001"
    CONFIG_MISSING = "C002"
    CONFIG_PARSE_ERROR = "C003"
    CONFIG_CREDENTIAL_MISSING = "C004"

    # Feed ingestion errors (F001-F099)
    FEED_INVALID_URL = "F001"
    FEED_FETCH_TIMEOUT = "F002"
    FEED_PARSE_ERROR = "F003"
    FEED_NETWORK_ERROR = "F004"
    FEED_BAD_STATUS = "F005"
    FEED_TOO_MANY_REDIRECTS = "F006"

    # Content processing errors (P001-P099)
    CONTENT_INVALID = "P001"
    CONTENT_EXTRACTION_FAILED = "P002"
    CONTENT_CLEANING_FAILED = "P003"

    # AI processing errors (A001-A099)
    AI_API_ERROR = "A001"
    AI_INVALID_RESPONSE = "A002"
    AI_TIMEOUT = "A003"
    AI_RATE_LIMIT = "A004"
    AI_PROVIDER_UNAVAILABLE = "A005"
    AI_INVALID_CREDENTIALS = "A006"
    AI_CONNECTION_ERROR = "A007"
    AI_EMPTY_RESPONSE = "A008"

    # Storage errors (S001-S099)
    STORAGE_WRITE_FAILED = "S001"
    STORAGE_READ_FAILED = "S002"
    STORAGE_PERMISSION_DENIED = "S003"

    # Validation errors (V001-V099)
    VALIDATION_REQUIRED_FIELD = "V001"
    VALIDATION_INVALID_FORMAT = "V002"
    VALIDATION_OUT_OF_RANGE = "V003"

    # External service errors (E001-E099)
    EXTERNAL_SERVICE_ERROR = "E001"
    EXTERNAL_SERVICE_TIMEOUT = "E002"


class NewsSieveError(Exception):
    """Base exception for all NewsSieve errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[ErrorCode] = None,
        context: Optional[Dict[str, Any]] = None,
        user_message: Optional[str] = None,
        recoverable: bool = False,
    ):
        """Initialize NewsSieve error.

        Args:
            message: Technical error message for logging
            error_code: Categorized error code
            context: Additional context information
            user_message: User-friendly error message
            recoverable: Whether the error is recoverable
        """
        super().__init__(message)
        self.error_code = error_code
        self.context = context or {}
        self.user_message = user_message or message
        self.recoverable = recoverable

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code.value if self.error_code else None,
            "error_message": str(self),
            "user_message": self.user_message,
            "context": self.context,
            "recoverable": self.recoverable,
        }

    def __str__(self) -> str:
        """String representation with error code."""
        if self.error_code:
            return f"[{self.error_code.value}] {super().__str__()}"
        return super().__str__()


def _split_kwargs(kwargs: Dict[str, Any], *consumed: str) -> Dict[str, Any]:
    return {k: v for k, v in kwargs.items() if k not in consumed}


class ConfigurationError(NewsSieveError):
    """Configuration-related errors, including missing credentials."""

    def __init__(self, message: str, config_key: Optional[str] = None, **kwargs):
        """Initialize configuration error.

        Args:
            message: Error message
            config_key: Configuration key that caused the error
            **kwargs: Additional arguments for NewsSieveError
        """
        context = kwargs.get("context", {})
        if config_key:
            context["config_key"] = config_key

        super().__init__(
            message=message,
            error_code=kwargs.get("error_code", ErrorCode.CONFIG_INVALID),
            context=context,
            user_message=kwargs.get("user_message", f"Configuration error: {message}"),
            **_split_kwargs(kwargs, "context", "error_code", "user_message"),
        )


class TransportError(NewsSieveError):
    """HTTP transport failures (network, timeout, redirect loops)."""

    def __init__(self, message: str, url: Optional[str] = None, **kwargs):
        context = kwargs.get("context", {})
        if url:
            context["url"] = url

        super().__init__(
            message=message,
            error_code=kwargs.get("error_code", ErrorCode.FEED_NETWORK_ERROR),
            context=context,
            user_message=kwargs.get("user_message", "Network request failed"),
            recoverable=kwargs.get("recoverable", True),
            **_split_kwargs(kwargs, "context", "error_code", "user_message", "recoverable"),
        )


class FeedError(NewsSieveError):
    """Feed ingestion and parsing errors."""

    def __init__(self, message: str, feed_url: Optional[str] = None, **kwargs):
        """Initialize feed error.

        Args:
            message: Error message
            feed_url: Feed URL that caused the error
            **kwargs: Additional arguments for NewsSieveError
        """
        context = kwargs.get("context", {})
        if feed_url:
            context["feed_url"] = feed_url

        super().__init__(
            message=message,
            error_code=kwargs.get("error_code", ErrorCode.FEED_NETWORK_ERROR),
            context=context,
            user_message=kwargs.get(
                "user_message", f"Feed processing failed: {message}"
            ),
            recoverable=kwargs.get("recoverable", True),
            **_split_kwargs(kwargs, "context", "error_code", "user_message", "recoverable"),
        )


class FeedParseError(FeedError):
    """Malformed feed documents."""

    def __init__(self, message: str, feed_url: Optional[str] = None, **kwargs):
        kwargs.setdefault("error_code", ErrorCode.FEED_PARSE_ERROR)
        super().__init__(message, feed_url=feed_url, **kwargs)


class ContentExtractionError(NewsSieveError):
    """Content resolution and HTML cleaning errors."""

    def __init__(self, message: str, item_title: Optional[str] = None, **kwargs):
        context = kwargs.get("context", {})
        if item_title:
            context["item_title"] = item_title

        super().__init__(
            message=message,
            error_code=kwargs.get("error_code", ErrorCode.CONTENT_EXTRACTION_FAILED),
            context=context,
            user_message=kwargs.get("user_message", "Article content could not be extracted"),
            recoverable=kwargs.get("recoverable", True),
            **_split_kwargs(kwargs, "context", "error_code", "user_message", "recoverable"),
        )


class AIError(NewsSieveError):
    """AI oracle call errors."""

    def __init__(self, message: str, provider: Optional[str] = None, **kwargs):
        """Initialize AI error.

        Args:
            message: Error message
            provider: AI provider name (e.g., 'groq', 'gemini')
            **kwargs: Additional arguments for NewsSieveError
        """
        context = kwargs.get("context", {})
        if provider:
            context["ai_provider"] = provider
        self.provider = provider

        super().__init__(
            message=message,
            error_code=kwargs.get("error_code", ErrorCode.AI_API_ERROR),
            context=context,
            user_message=kwargs.get(
                "user_message", "AI processing temporarily unavailable"
            ),
            recoverable=kwargs.get("recoverable", True),
            **_split_kwargs(kwargs, "context", "error_code", "user_message", "recoverable"),
        )


class ClassificationError(AIError):
    """Oracle replied, but not in the ``flag,category`` shape."""

    def __init__(self, message: str, response_text: Optional[str] = None, **kwargs):
        context = kwargs.get("context", {})
        if response_text is not None:
            context["response_text"] = response_text[:200]
        kwargs["context"] = context
        kwargs.setdefault("error_code", ErrorCode.AI_INVALID_RESPONSE)
        super().__init__(message, **kwargs)


class ValidationError(NewsSieveError):
    """Data validation errors."""

    def __init__(self, message: str, field_name: Optional[str] = None, **kwargs):
        """Initialize validation error.

        Args:
            message: Error message
            field_name: Field name that failed validation
            **kwargs: Additional arguments for NewsSieveError
        """
        context = kwargs.get("context", {})
        if field_name:
            context["field_name"] = field_name

        super().__init__(
            message=message,
            error_code=kwargs.get("error_code", ErrorCode.VALIDATION_INVALID_FORMAT),
            context=context,
            user_message=kwargs.get(
                "user_message", f"Invalid {field_name or 'input'}: {message}"
            ),
            recoverable=kwargs.get("recoverable", False),
            **_split_kwargs(kwargs, "context", "error_code", "user_message", "recoverable"),
        )


class PersistenceError(NewsSieveError):
    """Collection store read/write errors."""

    def __init__(
        self,
        message: str,
        collection: Optional[str] = None,
        key: Optional[str] = None,
        **kwargs,
    ):
        context = kwargs.get("context", {})
        if collection:
            context["collection"] = collection
        if key:
            context["key"] = key

        super().__init__(
            message=message,
            error_code=kwargs.get("error_code", ErrorCode.STORAGE_WRITE_FAILED),
            context=context,
            user_message=kwargs.get("user_message", "Saving the news record failed"),
            recoverable=kwargs.get("recoverable", True),
            **_split_kwargs(kwargs, "context", "error_code", "user_message", "recoverable"),
        )


# Exception handling utilities


def handle_exception(
    exception: Exception,
    logger,
    operation: str,
    context: Optional[Dict[str, Any]] = None,
) -> NewsSieveError:
    """Convert generic exceptions to NewsSieve exceptions with proper logging.

    Args:
        exception: Original exception
        logger: Logger instance for error logging
        operation: Operation that was being performed
        context: Additional context information

    Returns:
        NewsSieve exception with proper categorization
    """
    context = context or {}
    context["operation"] = operation
    context["original_exception_type"] = type(exception).__name__

    if isinstance(exception, NewsSieveError):
        logger.error(f"Operation '{operation}' failed: {exception}", extra=exception.to_dict())
        return exception

    elif isinstance(exception, (ConnectionError, TimeoutError)):
        error = TransportError(
            message=f"Network error during {operation}: {str(exception)}",
            context=context,
        )

    elif isinstance(exception, PermissionError):
        error = PersistenceError(
            message=f"Permission denied during {operation}: {str(exception)}",
            error_code=ErrorCode.STORAGE_PERMISSION_DENIED,
            context=context,
            user_message="Access denied",
            recoverable=False,
        )

    elif isinstance(exception, FileNotFoundError):
        error = ConfigurationError(
            message=f"Required file not found during {operation}: {str(exception)}",
            error_code=ErrorCode.CONFIG_MISSING,
            context=context,
            user_message="Configuration file missing",
        )

    elif isinstance(exception, OSError):
        error = PersistenceError(
            message=f"I/O error during {operation}: {str(exception)}",
            context=context,
        )

    else:
        error = NewsSieveError(
            message=f"Unexpected error during {operation}: {str(exception)}",
            context=context,
            user_message="An unexpected error occurred",
            recoverable=True,
        )

    logger.error(f"Operation '{operation}' failed: {error}", extra=error.to_dict())
    return error


def get_user_friendly_message(exception: Exception) -> str:
    """Get user-friendly error message for any exception.

    Args:
        exception: Exception to get message for

    Returns:
        User-friendly error message
    """
    if isinstance(exception, NewsSieveError):
        return exception.user_message

    return "An unexpected error occurred. Please try again later."
