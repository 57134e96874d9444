"""Dependency injection for FastAPI endpoints"""

import logging
from datetime import datetime
from fastapi import Depends, HTTPException, Request
from finance_gateway.config import settings
from finance_gateway.domain.exceptions import AuthServiceError, Unauthenticated
from finance_gateway.domain.fees import FeeSchedule
from finance_gateway.domain.models import Principal
from finance_gateway.infrastructure.clients.auth import AuthClient
from finance_gateway.infrastructure.clients.renderer import DocumentRenderer
from finance_gateway.infrastructure.database.ledger_store import LedgerStore
from finance_gateway.utils.date_utils import utc_now


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_auth_client() -> AuthClient:
    """Provide auth service client instance"""
    return AuthClient()


def get_ledger_store() -> LedgerStore:
    """Provide read-only ledger store"""
    return LedgerStore()


def get_document_renderer() -> DocumentRenderer:
    """Provide document renderer client instance"""
    return DocumentRenderer()


def get_fee_schedule() -> FeeSchedule:
    """Fee rates from settings"""
    return FeeSchedule(
        platform_fee_bps=settings.platform_fee_bps,
        withdrawal_fee_bps=settings.withdrawal_fee_bps,
    )


def get_now() -> datetime:
    """Instant that reporting periods are anchored to"""
    return utc_now()


async def get_principal(request: Request, auth_client: AuthClient = Depends(get_auth_client)) -> Principal:
    """Resolve the authenticated user; identity never comes from request parameters"""
    try:
        return await auth_client.resolve_principal(dict(request.headers))
    except Unauthenticated:
        raise HTTPException(status_code=401, detail="Unauthorized")
    except AuthServiceError as e:
        logging.error(f"Auth service error: {e}", extra={"request_id": get_request_id(request)})
        raise HTTPException(status_code=503, detail="Authentication service unavailable")
