"""
Gmail OAuth endpoints that store a refresh token per sync purpose.
"""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import RedirectResponse

from ..models import GmailConnectionResponse, ErrorResponse
from ..dependencies import get_credential_store, get_logger
from ...credentials.store import CredentialStore
from ...email_reader.oauth import build_auth_url, exchange_code, purpose_from_state
from ...utils.models import SyncPurpose


router = APIRouter(prefix="/gmail", tags=["gmail"])


@router.get(
    "/auth",
    summary="Start Gmail consent flow",
    responses={307: {"description": "Redirect to Google"}, 500: {"model": ErrorResponse}}
)
def gmail_auth(type: str = Query("transactions", description="Sync purpose: transactions or bookings")):
    try:
        url = build_auth_url(SyncPurpose.from_value(type))
    except Exception as e:
        get_logger().error("Error generating auth URL", error=str(e))
        raise HTTPException(status_code=500, detail={"message": "Failed to generate authentication URL"})
    return RedirectResponse(url)


@router.get(
    "/callback",
    response_model=GmailConnectionResponse,
    summary="OAuth redirect target",
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}
)
def gmail_callback(
    code: Optional[str] = Query(None),
    state: Optional[str] = Query(None),
    error: Optional[str] = Query(None),
    credential_store: CredentialStore = Depends(get_credential_store),
):
    logger = get_logger()
    if error:
        raise HTTPException(status_code=400, detail={"message": error})
    if not code:
        raise HTTPException(status_code=400, detail={"message": "No code provided"})

    purpose = purpose_from_state(state)
    try:
        stored = exchange_code(code, purpose, credential_store)
    except Exception as e:
        logger.error("Error exchanging code for token", purpose=purpose.value, error=str(e))
        raise HTTPException(status_code=500, detail={"message": "Failed to authenticate with Google"})

    return GmailConnectionResponse(
        success=True,
        message="Gmail connected" if stored else "Gmail already authorized, no new refresh token issued",
        data={"purpose": purpose.value, "refresh_token_stored": stored},
    )
