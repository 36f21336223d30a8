"""Statements router: upload a bank export, download the canonical CSV."""

from typing import Optional

import structlog
from fastapi import APIRouter, File, Form, UploadFile
from fastapi.responses import Response

from apps.api.core.config import get_settings
from apps.api.domains.statements.service import normalize_upload
from packages.statement_normalizer import BankKind, StatementError

router = APIRouter(prefix="/statements", tags=["statements"])
logger = structlog.get_logger()


@router.post("/normalize")
async def normalize_statement(
    file: UploadFile = File(...),
    quote_text_fields: Optional[bool] = Form(None),
    bank: Optional[BankKind] = Form(None),
):
    """Accept a statement export and stream back the normalized CSV.

    The bank is picked from the file name (idfc, axis, hdfc, icici) unless
    given explicitly; anything else goes through the generic path, which
    detects the bank from the statement header.
    """
    settings = get_settings()
    filename = file.filename or ""
    contents = await file.read()

    if quote_text_fields is None:
        quote_text_fields = settings.QUOTE_TEXT_FIELDS

    try:
        result = normalize_upload(
            filename,
            contents,
            max_bytes=settings.MAX_UPLOAD_BYTES,
            quote_text_fields=quote_text_fields,
            bank=bank,
        )
    except StatementError as e:
        logger.warning("statement_rejected", filename=filename, error=str(e))
        raise

    logger.info(
        "statement_normalized",
        filename=filename,
        bank=result.bank.value,
        size=len(result.content),
    )
    return Response(
        content=result.content,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{result.filename}"'},
    )
