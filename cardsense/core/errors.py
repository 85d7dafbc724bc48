"""Error types raised by the statement pipeline.

Each error carries the HTTP status the API layer answers with, so services can
raise them without knowing about FastAPI.
"""


class CardSenseError(Exception):
    """Base class for user-visible pipeline failures."""

    status_code = 500

    def __init__(self, message: str) -> None:
        """Store the user-facing message."""
        super().__init__(message)
        self.message = message


class UnsupportedFileError(CardSenseError):
    """The upload is missing or is not a CSV/PDF statement."""

    status_code = 400


class StatementParseError(CardSenseError):
    """The statement could not be read at all (bad PDF, unusable CSV layout)."""

    status_code = 400


class EmptyStatementError(CardSenseError):
    """The statement was read but produced no usable transactions."""

    status_code = 400


class PersistenceError(CardSenseError):
    """Writing transactions to the spending store failed."""

    status_code = 500


class AnalysisUnavailableError(CardSenseError):
    """LLM statement analysis is not configured."""

    status_code = 503


class AnalysisError(CardSenseError):
    """The LLM returned nothing usable for a statement."""

    status_code = 500
