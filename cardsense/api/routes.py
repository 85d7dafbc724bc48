"""FastAPI endpoints for the CardSense statement API.

This module defines the API routes for uploading bank statements, quick and LLM-assisted statement analysis, the spending history, and health checks. It wires together the statement pipeline, repositories, file archiving and the analysis agent.
"""

from collections.abc import Callable

from botocore.exceptions import BotoCoreError, ClientError
from fastapi import APIRouter, Depends, HTTPException, Query, UploadFile
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from cardsense.agents.statement_agent import StatementAnalysisAgent
from cardsense.api.dependencies import (
    get_analysis_agent,
    get_current_user_id,
    get_document_repository,
    get_file_service,
    get_pdf_text_extractor,
    get_spending_repository,
    get_statement_service,
)
from cardsense.core.db import DocumentRepository, SpendingRepository
from cardsense.core.errors import UnsupportedFileError
from cardsense.core.models import SpendingTransactionIn, SpendingTransactionOut, UploadResult
from cardsense.core.utils import get_logger
from cardsense.parsers.text_extractor import extract_transactions
from cardsense.services.file_service import FileService, statement_key
from cardsense.services.spending_service import summarize_history
from cardsense.services.statement_service import (
    StatementKind,
    StatementService,
    analyze_transactions,
    detect_statement_kind,
)

router = APIRouter()
logger = get_logger("cardsense.api")


def _require_file(file: UploadFile | None) -> UploadFile:
    if file is None or not file.filename:
        msg = "No file provided"
        raise UnsupportedFileError(msg)
    return file


def _require_pdf(file: UploadFile) -> None:
    try:
        kind = detect_statement_kind(file.filename, file.content_type)
    except UnsupportedFileError:
        kind = None
    if kind != StatementKind.PDF:
        logger.warning(f"Rejected file (not PDF): {file.filename}")
        msg = "Only PDF files are allowed"
        raise UnsupportedFileError(msg)


@router.post(
    "/api/spending/upload",
    response_model=UploadResult,
    summary="Upload a bank statement and store its transactions",
    description=(
        "Upload a CSV or PDF bank statement. Transactions are extracted, categorized and stored in the "
        "caller's spending history. Uploading the same statement twice stores its transactions twice.\n\n"
        "**Request:**\n"
        "- Content-Type: multipart/form-data\n"
        "- Form field: `file` (CSV or PDF file)\n"
        "- Header: `X-User-Id`\n\n"
        "**Response:**\n"
        "- 200 OK: `{ 'success': true, 'inserted': n, 'summary': {...} }`.\n"
        "- 400 Bad Request: No file, unsupported type, or no transactions found.\n"
        "- 500 Internal Server Error: Transactions could not be saved."
    ),
    responses={
        200: {
            "description": "Statement stored.",
            "content": {
                "application/json": {
                    "example": {
                        "success": True,
                        "inserted": 2,
                        "summary": {
                            "total": 450.0,
                            "byCategory": {"dining": 450.0},
                            "count": 2,
                            "debits": 1,
                            "credits": 1,
                        },
                    }
                }
            },
        },
        400: {
            "description": "Unsupported or unreadable statement.",
            "content": {"application/json": {"example": {"error": "Only CSV and PDF files are supported"}}},
        },
        500: {
            "description": "Persistence failure.",
            "content": {"application/json": {"example": {"error": "Failed to save transactions to database"}}},
        },
    },
)
def upload_statement(
    file: UploadFile | None = None,
    user_id: str = Depends(get_current_user_id),
    service: StatementService = Depends(get_statement_service),
) -> UploadResult:
    """Upload a statement, store its transactions and return the upload summary."""
    file = _require_file(file)
    logger.info(f"Received statement upload: filename={file.filename}, content_type={file.content_type}")
    # Reject unsupported types before reading the body.
    detect_statement_kind(file.filename, file.content_type)
    data = file.file.read()
    return service.ingest(user_id, file.filename, file.content_type, data)


@router.post(
    "/api/upload/bank-statement",
    summary="Quick analysis of a PDF bank statement",
    description=(
        "Extract transactions from a PDF statement and return spend totals, category breakdown, "
        "top merchants and the statement period. Nothing is stored."
    ),
)
def quick_analysis(
    file: UploadFile | None = None,
    user_id: str = Depends(get_current_user_id),
    pdf_to_text: Callable[[bytes], str] = Depends(get_pdf_text_extractor),
) -> JSONResponse:
    """Analyze a PDF statement without persisting anything."""
    file = _require_file(file)
    _require_pdf(file)
    data = file.file.read()
    transactions = extract_transactions(pdf_to_text(data))
    analysis = analyze_transactions(transactions)
    logger.info(f"Quick analysis for user {user_id}: {analysis.transaction_count} transactions")
    return JSONResponse({"success": True, "analysis": analysis.model_dump(by_alias=True)})


@router.post(
    "/api/analyze-statement",
    summary="LLM analysis of a PDF bank statement",
    description=(
        "Send the statement text to the LLM for a structured analysis (totals, categories, monthly "
        "spending, insights). The analysis is stored as an uploaded document.\n\n"
        "- Form field: `statement` (PDF file)\n"
        "- 503 Service Unavailable: analysis is not configured."
    ),
)
def analyze_statement(
    statement: UploadFile | None = None,
    user_id: str = Depends(get_current_user_id),
    agent: StatementAnalysisAgent = Depends(get_analysis_agent),
    pdf_to_text: Callable[[bytes], str] = Depends(get_pdf_text_extractor),
    documents: DocumentRepository = Depends(get_document_repository),
    file_service: FileService | None = Depends(get_file_service),
) -> JSONResponse:
    """Analyze a statement with the LLM and record the result."""
    statement = _require_file(statement)
    _require_pdf(statement)
    data = statement.file.read()
    analysis = agent.analyze(pdf_to_text(data))

    file_path = statement_key(user_id, statement.filename)
    if file_service is not None:
        try:
            file_path = file_service.archive_statement(user_id, statement.filename, data, statement.content_type)
        except (BotoCoreError, ClientError):
            logger.exception(f"Failed to archive statement {statement.filename!r} for user {user_id}")
    try:
        document_id = documents.record_analysis(
            user_id,
            statement.filename,
            analysis,
            file_path=file_path,
            file_size_bytes=len(data),
            mime_type=statement.content_type,
        )
    except SQLAlchemyError:
        # The analysis is still returned when it cannot be recorded.
        logger.exception(f"Failed to record statement analysis for user {user_id}")
        documents.session.rollback()
        document_id = None
    return JSONResponse({"success": True, "analysis": analysis, "documentId": document_id})


@router.get(
    "/api/spending",
    summary="List the caller's spending transactions",
    description="Return stored transactions, newest first, with totals by category and by month.",
)
def list_spending(
    date_from: str | None = Query(None, alias="from"),
    date_to: str | None = Query(None, alias="to"),
    user_id: str = Depends(get_current_user_id),
    repository: SpendingRepository = Depends(get_spending_repository),
) -> JSONResponse:
    """List spending transactions with aggregates."""
    rows = repository.list_for_user(user_id, date_from, date_to)
    payload = {
        "transactions": [SpendingTransactionOut.model_validate(row).model_dump() for row in rows],
        "aggregates": summarize_history(rows).model_dump(),
    }
    return JSONResponse(payload, headers={"Cache-Control": "private, no-store"})


@router.post(
    "/api/spending",
    summary="Add a manual spending transaction",
)
def create_spending(
    payload: SpendingTransactionIn,
    user_id: str = Depends(get_current_user_id),
    repository: SpendingRepository = Depends(get_spending_repository),
) -> dict:
    """Store a manually entered transaction."""
    row = repository.create(user_id, payload)
    return {"transaction": SpendingTransactionOut.model_validate(row).model_dump()}


@router.delete(
    "/api/spending",
    summary="Delete a spending transaction",
    responses={
        400: {"content": {"application/json": {"example": {"error": "Transaction ID required"}}}},
        404: {"content": {"application/json": {"example": {"error": "Transaction not found"}}}},
    },
)
def delete_spending(
    transaction_id: str | None = Query(None, alias="id"),
    user_id: str = Depends(get_current_user_id),
    repository: SpendingRepository = Depends(get_spending_repository),
) -> dict:
    """Delete one of the caller's transactions."""
    if not transaction_id:
        raise HTTPException(400, "Transaction ID required")
    if not repository.delete(user_id, transaction_id):
        raise HTTPException(404, "Transaction not found")
    return {"success": True}


@router.get(
    "/health",
    summary="Health check",
    description="Simple health check endpoint. Returns status ok.",
    response_description="Status ok.",
    responses={200: {"description": "API is healthy.", "content": {"application/json": {"example": {"status": "ok"}}}}},
)
async def health() -> dict:
    """Health check endpoint."""
    return {"status": "ok"}
