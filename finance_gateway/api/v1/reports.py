"""GET /v1/finance/p-and-l - Profit & loss report endpoint"""

import asyncio
import time
import logging
from datetime import datetime
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from starlette.responses import Response

from finance_gateway.api.v1.schemas import ProfitAndLossDocument, ProfitAndLossResponse
from finance_gateway.api.dependencies import (
    get_document_renderer,
    get_fee_schedule,
    get_ledger_store,
    get_now,
    get_principal,
    get_request_id,
)
from finance_gateway.config import settings
from finance_gateway.domain.exceptions import InvalidFormat, InvalidPeriod, RenderFailure, StoreUnavailable
from finance_gateway.domain.fees import FeeSchedule
from finance_gateway.domain.models import Principal
from finance_gateway.domain.periods import SUPPORTED_PERIODS, resolve_period
from finance_gateway.domain.reports import (
    REPORT_FORMATS,
    document_filename,
    document_payload,
    generate_report,
    structured_report,
    validate_format,
)
from finance_gateway.infrastructure.clients.renderer import PDF_MEDIA_TYPE, DocumentRenderer
from finance_gateway.infrastructure.database.ledger_store import LedgerStore
from finance_gateway.infrastructure.observability.metrics import record_report
from finance_gateway.infrastructure.observability.logging import log_report
from finance_gateway.utils.date_utils import utc_now

router = APIRouter()

REPORT_FAILED = "Failed to generate P&L report"


def _format_label(report_format: str) -> str:
    return report_format if report_format in REPORT_FORMATS else "invalid"


@router.get(
    "/finance/p-and-l",
    response_model=ProfitAndLossResponse,
    responses={200: {"content": {PDF_MEDIA_TYPE: {}}}},
)
async def get_profit_and_loss(
    request: Request,
    period: Optional[str] = Query(None, description=f"One of: {', '.join(SUPPORTED_PERIODS)}"),
    report_format: str = Query("json", alias="format", description="json or pdf"),
    principal: Principal = Depends(get_principal),
    store: LedgerStore = Depends(get_ledger_store),
    renderer: DocumentRenderer = Depends(get_document_renderer),
    fees: FeeSchedule = Depends(get_fee_schedule),
    now: datetime = Depends(get_now),
):
    """
    Build a P&L report for the authenticated user.

    Flow:
    1. Validate period and format
    2. Resolve the period to a half-open date window
    3. Fetch income, refund and withdrawal transactions concurrently
    4. Fold totals and fees, rank top clients
    5. Return JSON, or render the report to PDF
    """
    start_time = time.time()
    request_id = get_request_id(request)
    report_format = report_format or "json"

    # 1-2. Validate parameters
    if not period:
        record_report(_format_label(report_format), "rejected")
        raise HTTPException(
            status_code=400,
            detail=f"period parameter is required ({', '.join(SUPPORTED_PERIODS)})",
        )

    try:
        period_range = resolve_period(period, now)
        validate_format(report_format)
    except (InvalidPeriod, InvalidFormat) as e:
        record_report(_format_label(report_format), "rejected")
        raise HTTPException(status_code=400, detail=str(e))

    try:
        # 3-4. Aggregate and assemble
        report = await generate_report(
            store,
            principal.user_id,
            period_range,
            fees,
            currency=settings.report_currency,
            top_clients_limit=settings.top_clients_limit,
        )

        # 5. Encode
        if report_format == "pdf":
            owner = await store.report_owner(principal)
            payload = ProfitAndLossDocument.model_validate(document_payload(report, owner))
            content = await asyncio.wait_for(
                renderer.render(payload.model_dump(mode="json", by_alias=True)),
                timeout=settings.render_timeout_seconds,
            )
            response = Response(
                content=content,
                media_type=PDF_MEDIA_TYPE,
                headers={
                    "Content-Disposition": f'attachment; filename="{document_filename(period, utc_now())}"'
                },
            )
        else:
            response = ProfitAndLossResponse.model_validate(structured_report(report))

        duration = time.time() - start_time
        record_report(report_format, "success", duration)
        log_report(request_id, principal.user_id, period, report_format, report.totals.net_profit, duration * 1000)

        return response

    except StoreUnavailable as e:
        record_report(report_format, "failed", time.time() - start_time)
        logging.error(f"Ledger store error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail=REPORT_FAILED)

    except (RenderFailure, asyncio.TimeoutError) as e:
        record_report(report_format, "failed", time.time() - start_time)
        logging.error(f"Document render error: {e!r}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail=REPORT_FAILED)

    except Exception as e:
        record_report(report_format, "failed", time.time() - start_time)
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail=REPORT_FAILED)
