"""FastAPI dependencies for DI (settings, DB, services, agent, etc).

This module provides dependency injection helpers for the caller identity, database-backed repositories, the statement pipeline, file archiving and the analysis agent, enabling modular and testable API endpoints.
"""

from collections.abc import Callable

from botocore.exceptions import BotoCoreError, ClientError
from fastapi import Depends, Header, HTTPException
from groq import Groq
from sqlalchemy.orm import Session

from cardsense.agents.statement_agent import StatementAnalysisAgent
from cardsense.core.db import DocumentRepository, SpendingRepository, get_session
from cardsense.core.errors import AnalysisUnavailableError
from cardsense.core.settings import Settings, get_settings
from cardsense.core.utils import get_logger
from cardsense.parsers.pdf import extract_text
from cardsense.services.file_service import FileService
from cardsense.services.s3_file_service import S3FileService
from cardsense.services.statement_service import StatementService

logger = get_logger("cardsense.api.dependencies")


def get_current_user_id(x_user_id: str | None = Header(None)) -> str:
    """Return the authenticated caller's id, forwarded by the auth gateway."""
    if not x_user_id:
        raise HTTPException(401, "Unauthorized")
    return x_user_id


def get_pdf_text_extractor() -> Callable[[bytes], str]:
    """Provide the PDF-to-text function."""
    return extract_text


def get_spending_repository(session: Session = Depends(get_session)) -> SpendingRepository:
    """Provide a spending repository bound to the request session."""
    return SpendingRepository(session)


def get_document_repository(session: Session = Depends(get_session)) -> DocumentRepository:
    """Provide an uploaded-document repository bound to the request session."""
    return DocumentRepository(session)


def get_statement_service(
    repository: SpendingRepository = Depends(get_spending_repository),
    pdf_to_text: Callable[[bytes], str] = Depends(get_pdf_text_extractor),
) -> StatementService:
    """Provide the statement upload pipeline."""
    return StatementService(repository, pdf_to_text)


def get_analysis_agent(settings: Settings = Depends(get_settings)) -> StatementAnalysisAgent:
    """Provide a StatementAnalysisAgent instance for dependency injection."""
    if not settings.groq_api_key:
        msg = "Statement analysis is not configured"
        raise AnalysisUnavailableError(msg)
    client = Groq(api_key=settings.groq_api_key)
    return StatementAnalysisAgent(client, settings)


def get_file_service(settings: Settings = Depends(get_settings)) -> FileService | None:
    """Provide statement archiving, or None when no bucket is configured."""
    if not settings.s3_bucket:
        return None
    try:
        return FileService(S3FileService(settings))
    except (BotoCoreError, ClientError):
        logger.exception(f"Statement archiving unavailable for bucket {settings.s3_bucket!r}")
        return None
