"""
Mailbox sync trigger endpoints, called by cron or the admin UI.
"""
from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from ..models import SyncResponse, ErrorResponse, AuthRequiredResponse
from ..dependencies import get_mailbox_sync, get_logger, verify_cron_secret
from ...main import MailboxSync
from ...utils.errors import AuthorizationRequiredError
from ...utils.models import SyncPurpose


router = APIRouter(tags=["sync"], dependencies=[Depends(verify_cron_secret)])


def _run_sync(purpose: SyncPurpose, mailbox_sync: MailboxSync, dry_run: bool):
    logger = get_logger()
    try:
        summary = mailbox_sync.sync(purpose, dry_run=dry_run)
        return SyncResponse(
            success=True,
            message=f"{purpose.value.capitalize()} sync completed",
            added=summary.added,
            total_processed=summary.total_processed,
        )
    except AuthorizationRequiredError as e:
        logger.warning("Gmail authorization required", purpose=purpose.value, reason=e.reason)
        return JSONResponse(
            status_code=401,
            content=AuthRequiredResponse(
                success=False,
                message="Auth Required",
                error_code="AUTH_REQUIRED",
                details={"error": e.reason},
                auth_url=e.auth_url,
            ).model_dump(mode="json"),
        )
    except Exception as e:
        logger.error("Sync failed", purpose=purpose.value, error=str(e))
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(
                success=False,
                message=f"Failed to sync {purpose.value}",
                error_code="SYNC_FAILED",
            ).model_dump(mode="json"),
        )


@router.get(
    "/transactions/sync",
    response_model=SyncResponse,
    summary="Sync bank credit alerts",
    responses={
        401: {"description": "Gmail re-authorization required", "model": AuthRequiredResponse},
        500: {"description": "Sync failed", "model": ErrorResponse},
    }
)
def sync_transactions(
    dry_run: bool = Query(False, description="Parse and check duplicates without inserting"),
    mailbox_sync: MailboxSync = Depends(get_mailbox_sync),
):
    return _run_sync(SyncPurpose.TRANSACTIONS, mailbox_sync, dry_run)


@router.get(
    "/bookings/sync",
    response_model=SyncResponse,
    summary="Sync MakeMyTrip booking vouchers",
    responses={
        401: {"description": "Gmail re-authorization required", "model": AuthRequiredResponse},
        500: {"description": "Sync failed", "model": ErrorResponse},
    }
)
def sync_bookings(
    dry_run: bool = Query(False, description="Parse and check duplicates without inserting"),
    mailbox_sync: MailboxSync = Depends(get_mailbox_sync),
):
    return _run_sync(SyncPurpose.BOOKINGS, mailbox_sync, dry_run)
