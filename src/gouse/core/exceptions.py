"""Custom exception hierarchy for gouse.

All custom exceptions inherit from GouseError to enable:
- Unified exception handling in the CLI
- Clear distinction from built-in exceptions
- Messages prefixed with the operation that failed
"""

__all__ = [
    "GouseError",
    "ConfigError",
    "BuildError",
    "BuildIOError",
    "DiagnosticParseError",
]


class GouseError(Exception):
    """Base exception for all gouse errors."""

    pass


class ConfigError(GouseError):
    """Configuration loading or validation error.

    Raised when:
    - Configuration file does not exist or cannot be read
    - Configuration file is not valid YAML or not a mapping
    - Configuration validation fails (wraps Pydantic ValidationError)
    """

    pass


class BuildError(GouseError):
    """Go build invocation error.

    Raised when:
    - Go executable not found (FileNotFoundError)
    - Permission denied executing the Go executable
    - Build exceeds the configured timeout

    A build that runs and fails with compile errors is NOT a BuildError;
    it is the normal path that produces diagnostics.
    """

    pass


class BuildIOError(BuildError):
    """Temporary build workspace error.

    Raised when:
    - Temporary directory cannot be created
    - Temporary source file cannot be created or written
    """

    pass


class DiagnosticParseError(GouseError):
    """Build diagnostic does not describe a usable source position.

    Raised when:
    - The line field of a recognized diagnostic is not an integer
    - The line number is below 1
    - The line number points past the end of the toggled source

    Partial edits would corrupt the buffer, so the whole toggle is aborted.

    Attributes:
        diagnostic: The diagnostic line that could not be used.

    """

    def __init__(self, message: str, diagnostic: str = "") -> None:
        """Initialize DiagnosticParseError with the offending diagnostic.

        Args:
            message: Human-readable error message.
            diagnostic: Raw diagnostic line (empty when not available).

        """
        super().__init__(message)
        self.diagnostic = diagnostic
