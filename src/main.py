"""
Main orchestrator for the Hostel Mailbox Sync system.
"""
import click
from typing import Optional, Callable, List

from .email_reader.gmail_client import GmailClient
from .email_reader.mime_decoder import decode_body
from .booking_parser.parser import BookingParser
from .transaction_parser.parser import TransactionParser
from .credentials.store import CredentialStore
from .supabase_sync.supabase_client import SupabaseClient
from .utils.errors import AuthorizationRequiredError
from .utils.models import SyncPurpose, SyncResult, SyncSummary
from .utils.logger import setup_logger, SyncLogger
from config.settings import gmail_config, app_config, api_config


class MailboxSync:
    """Pulls alert and voucher emails from Gmail and stores new records."""

    def __init__(
        self,
        log_level: str = "INFO",
        log_file: Optional[str] = None,
        supabase_client: Optional[SupabaseClient] = None,
        credential_store: Optional[CredentialStore] = None,
    ):
        self.logger = setup_logger("mailbox_sync", log_level, log_file)
        self.sync_logger = SyncLogger(self.logger)

        self.supabase_client = supabase_client or SupabaseClient()
        self._credential_store = credential_store
        self.transaction_parser = TransactionParser()
        self.booking_parser = BookingParser()

    @property
    def credential_store(self) -> CredentialStore:
        if self._credential_store is None:
            self._credential_store = CredentialStore(self.supabase_client)
        return self._credential_store

    def sync(self, purpose: SyncPurpose, limit: Optional[int] = None, dry_run: bool = False) -> SyncSummary:
        if purpose is SyncPurpose.BOOKINGS:
            return self.sync_bookings(limit, dry_run)
        return self.sync_transactions(limit, dry_run)

    def sync_transactions(self, limit: Optional[int] = None, dry_run: bool = False) -> SyncSummary:
        """Sync SBM Bank credit alerts into the transactions table."""
        return self._sync(
            SyncPurpose.TRANSACTIONS,
            self.transaction_parser.parse_message,
            self.supabase_client.sync_transaction,
            limit,
            dry_run,
        )

    def sync_bookings(self, limit: Optional[int] = None, dry_run: bool = False) -> SyncSummary:
        """Sync MakeMyTrip vouchers into the bookings table."""
        return self._sync(
            SyncPurpose.BOOKINGS,
            self.booking_parser.parse_message,
            self.supabase_client.sync_booking,
            limit,
            dry_run,
        )

    def clear_credentials(self) -> int:
        """Remove the stored Gmail credentials for every purpose."""
        return self.credential_store.clear_all()

    def _sync(
        self,
        purpose: SyncPurpose,
        parse: Callable,
        persist: Callable[..., SyncResult],
        limit: Optional[int],
        dry_run: bool,
    ) -> SyncSummary:
        """
        Run one sync for a purpose.

        Each message is handled independently: a failure while fetching,
        parsing or storing one message is logged and the batch continues.
        Authorization failures and a failing search abort the run.
        """
        query = gmail_config.search_queries[purpose.value]
        max_results = limit or gmail_config.max_results[purpose.value]

        self.logger.info("Starting mailbox sync",
                         purpose=purpose.value,
                         query=query,
                         max_results=max_results,
                         dry_run=dry_run)

        gmail = GmailClient(purpose, self.credential_store).connect()
        message_ids: List[str] = gmail.list_message_ids(query, max_results)

        summary = SyncSummary(purpose=purpose, total_processed=len(message_ids), dry_run=dry_run)

        for message_id in message_ids:
            try:
                self._process_message(gmail, message_id, purpose, parse, persist, summary, dry_run)
            except Exception as e:
                summary.errors += 1
                self.sync_logger.log_error(e, f"Message processing failed: {message_id}")

        self.logger.info("Mailbox sync finished", **summary.to_dict())
        return summary

    def _process_message(self, gmail, message_id, purpose, parse, persist, summary, dry_run):
        self.sync_logger.log_message_processed(purpose.value, message_id)

        message = gmail.get_message(message_id)
        if message is None:
            summary.parse_failures += 1
            self.sync_logger.log_parse_miss(purpose.value, message_id, "", "")
            return

        record = parse(message)
        if record is None:
            summary.parse_failures += 1
            snippet = decode_body(message.payload)[:app_config.snippet_lengths[purpose.value]]
            self.sync_logger.log_parse_miss(purpose.value, message_id, message.payload.mime_type, snippet)
            return

        self.sync_logger.log_record_parsed(purpose.value, record)

        result = persist(record, dry_run)
        if not result.success:
            summary.errors += 1
            self.sync_logger.log_error(
                Exception(result.error_message),
                f"Database sync failed: {result.record_key}"
            )
        elif result.is_new:
            summary.added += 1
            self.sync_logger.log_new_record(purpose.value, result.record_key)
        else:
            summary.duplicates += 1
            self.sync_logger.log_duplicate(purpose.value, result.record_key)


@click.command()
@click.option('--purpose', type=click.Choice(['transactions', 'bookings', 'all']),
              default='all', help='Which mailbox sync to run')
@click.option('--limit', type=int,
              help='Maximum number of emails to fetch per sync')
@click.option('--dry-run', is_flag=True,
              help='Parse and check for duplicates without writing to the database')
@click.option('--log-level', type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR']),
              default='INFO', help='Logging level')
@click.option('--log-file', type=str,
              help='Log file path (optional)')
@click.option('--clear-credentials', is_flag=True,
              help='Delete stored Gmail refresh tokens and exit')
def main(purpose, limit, dry_run, log_level, log_file, clear_credentials):
    """
    Hostel Mailbox Sync.

    Extracts bank credit transactions and MakeMyTrip bookings from Gmail
    and stores new ones in Supabase.
    """
    try:
        automation = MailboxSync(log_level, log_file)

        if clear_credentials:
            count = automation.clear_credentials()
            click.echo(f"Deleted {count} stored token(s)")
            click.echo(f"Re-authorize at {api_config.base_url}{api_config.auth_path('transactions')}")
            return 0

        if purpose == 'all':
            purposes = [SyncPurpose.TRANSACTIONS, SyncPurpose.BOOKINGS]
        else:
            purposes = [SyncPurpose(purpose)]

        for sync_purpose in purposes:
            summary = automation.sync(sync_purpose, limit=limit, dry_run=dry_run)
            click.echo(f"\n{sync_purpose.value.capitalize()} sync completed:")
            click.echo(f"  Messages processed: {summary.total_processed}")
            click.echo(f"  Added: {summary.added}")
            click.echo(f"  Duplicates: {summary.duplicates}")
            click.echo(f"  Parse failures: {summary.parse_failures}")
            click.echo(f"  Errors: {summary.errors}")

        automation.sync_logger.print_summary()

        if dry_run:
            click.echo("\n⚠️  DRY RUN MODE - No data was actually written to the database")

        return 0

    except AuthorizationRequiredError as e:
        click.echo(f"Authorization required: {e.reason}")
        click.echo(f"Visit {api_config.base_url}{e.auth_url}")
        click.get_current_context().exit(1)
    except Exception as e:
        click.echo(f"Fatal error: {str(e)}")
        click.get_current_context().exit(1)


if __name__ == "__main__":
    main()
