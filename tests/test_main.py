"""
Unit tests for the main orchestrator and CLI functionality.
"""
import pytest
from unittest.mock import Mock, patch
from click.testing import CliRunner

from src.main import MailboxSync, main
from src.utils.errors import AuthorizationRequiredError
from src.utils.models import SyncPurpose, SyncResult, SyncSummary

from conftest import make_message, ALERT_BODY, ALERT_DATE, VOUCHER_HTML, VOUCHER_DATE


class InMemoryStore:
    """Records persisted keys the way the Supabase client dedupes them."""

    def __init__(self):
        self.transactions = {}
        self.bookings = {}

    def sync_transaction(self, transaction, dry_run=False):
        key = f"{transaction.description}|{transaction.amount}|{transaction.date.isoformat()}"
        return self._sync(self.transactions, key, transaction, dry_run)

    def sync_booking(self, booking, dry_run=False):
        return self._sync(self.bookings, booking.book_number, booking, dry_run)

    def _sync(self, table, key, record, dry_run):
        if key in table:
            return SyncResult(success=True, is_new=False, record_key=key)
        if not dry_run:
            table[key] = record
        return SyncResult(success=True, is_new=True, record_key=key)


def _gmail_with(messages):
    gmail = Mock()
    gmail.list_message_ids.return_value = [m.message_id for m in messages]
    by_id = {m.message_id: m for m in messages}
    gmail.get_message.side_effect = lambda message_id: by_id[message_id]
    return gmail


class TestMailboxSync:
    """Test cases for MailboxSync."""

    @pytest.fixture
    def store(self):
        return InMemoryStore()

    @pytest.fixture
    def automation(self, store):
        return MailboxSync(supabase_client=store, credential_store=Mock())

    @pytest.fixture
    def alerts(self):
        return [
            make_message("m1", ALERT_BODY, ALERT_DATE),
            make_message("m2", ALERT_BODY.replace("1,250.50", "99.00").replace("RANGUVEN", "ASHA"), ALERT_DATE),
        ]

    @patch("src.main.GmailClient")
    def test_sync_transactions(self, mock_gmail, automation, store, alerts):
        mock_gmail.return_value.connect.return_value = _gmail_with(alerts)

        summary = automation.sync_transactions()

        assert summary.total_processed == 2
        assert summary.added == 2
        assert len(store.transactions) == 2
        mock_gmail.assert_called_once_with(SyncPurpose.TRANSACTIONS, automation.credential_store)

    @patch("src.main.GmailClient")
    def test_second_run_adds_nothing(self, mock_gmail, automation, store, alerts):
        mock_gmail.return_value.connect.return_value = _gmail_with(alerts)

        first = automation.sync_transactions()
        second = automation.sync_transactions()

        assert first.added == 2
        assert second.added == 0
        assert second.duplicates == 2
        assert second.total_processed == first.total_processed
        assert len(store.transactions) == 2

    @patch("src.main.GmailClient")
    def test_default_query_and_limit(self, mock_gmail, automation):
        gmail = _gmail_with([])
        mock_gmail.return_value.connect.return_value = gmail

        automation.sync_transactions()
        automation.sync_bookings(limit=3)

        gmail.list_message_ids.assert_any_call('from:info@sbmbank.co.in subject:"Credit Transaction Alert"', 5)
        gmail.list_message_ids.assert_any_call('from:no-reply@go-mmt.com subject:"New Booking Received"', 3)

    @patch("src.main.GmailClient")
    def test_sync_bookings(self, mock_gmail, automation, store):
        mock_gmail.return_value.connect.return_value = _gmail_with([
            make_message("v1", VOUCHER_HTML, VOUCHER_DATE, mime_type="text/html"),
        ])

        summary = automation.sync(SyncPurpose.BOOKINGS)

        assert summary.added == 1
        assert "NH78235454389498" in store.bookings

    @patch("src.main.GmailClient")
    def test_parse_miss_is_counted_and_skipped(self, mock_gmail, automation, store, alerts):
        junk = make_message("junk", "Your statement is ready", ALERT_DATE)
        mock_gmail.return_value.connect.return_value = _gmail_with([junk] + alerts)

        summary = automation.sync_transactions()

        assert summary.total_processed == 3
        assert summary.parse_failures == 1
        assert summary.added == 2
        assert automation.sync_logger.stats["parse_failures"] == 1

    @patch("src.main.GmailClient")
    def test_message_error_does_not_stop_batch(self, mock_gmail, automation, store, alerts):
        gmail = _gmail_with(alerts)
        by_id = {m.message_id: m for m in alerts}

        def flaky_get(message_id):
            if message_id == "m1":
                raise ConnectionError("fetch failed")
            return by_id[message_id]

        gmail.get_message.side_effect = flaky_get
        mock_gmail.return_value.connect.return_value = gmail

        summary = automation.sync_transactions()

        assert summary.errors == 1
        assert summary.added == 1

    @patch("src.main.GmailClient")
    def test_persist_failure_counted_as_error(self, mock_gmail, alerts):
        failing = Mock()
        failing.sync_transaction.return_value = SyncResult(success=False, error_message="db down", record_key="k")
        automation = MailboxSync(supabase_client=failing, credential_store=Mock())
        mock_gmail.return_value.connect.return_value = _gmail_with(alerts)

        summary = automation.sync_transactions()

        assert summary.errors == 2
        assert summary.added == 0

    @patch("src.main.GmailClient")
    def test_dry_run_passed_through(self, mock_gmail, automation, store, alerts):
        mock_gmail.return_value.connect.return_value = _gmail_with(alerts)

        summary = automation.sync_transactions(dry_run=True)

        assert summary.dry_run is True
        assert summary.added == 2
        assert store.transactions == {}

    @patch("src.main.GmailClient")
    def test_authorization_error_propagates(self, mock_gmail, automation):
        mock_gmail.return_value.connect.side_effect = AuthorizationRequiredError(SyncPurpose.BOOKINGS)

        with pytest.raises(AuthorizationRequiredError):
            automation.sync_bookings()

    def test_clear_credentials(self, automation):
        automation.credential_store.clear_all.return_value = 2
        assert automation.clear_credentials() == 2


class TestCLI:
    """Test cases for CLI functionality."""

    @pytest.fixture
    def runner(self):
        return CliRunner()

    @patch("src.main.MailboxSync")
    def test_runs_both_purposes_by_default(self, mock_sync, runner):
        instance = mock_sync.return_value
        instance.sync.side_effect = lambda purpose, limit=None, dry_run=False: SyncSummary(
            purpose=purpose, total_processed=2, added=1, duplicates=1
        )

        result = runner.invoke(main, [])

        assert result.exit_code == 0
        assert [c.args[0] for c in instance.sync.call_args_list] == [
            SyncPurpose.TRANSACTIONS, SyncPurpose.BOOKINGS
        ]
        assert "Transactions sync completed" in result.output
        assert "Bookings sync completed" in result.output

    @patch("src.main.MailboxSync")
    def test_single_purpose_with_limit_and_dry_run(self, mock_sync, runner):
        instance = mock_sync.return_value
        instance.sync.return_value = SyncSummary(purpose=SyncPurpose.BOOKINGS, dry_run=True)

        result = runner.invoke(main, ["--purpose", "bookings", "--limit", "10", "--dry-run"])

        assert result.exit_code == 0
        instance.sync.assert_called_once_with(SyncPurpose.BOOKINGS, limit=10, dry_run=True)
        assert "DRY RUN MODE" in result.output

    @patch("src.main.MailboxSync")
    def test_authorization_required_exits_nonzero(self, mock_sync, runner):
        mock_sync.return_value.sync.side_effect = AuthorizationRequiredError(SyncPurpose.TRANSACTIONS)

        result = runner.invoke(main, ["--purpose", "transactions"])

        assert result.exit_code == 1
        assert "/api/v1/gmail/auth?type=transactions" in result.output

    @patch("src.main.MailboxSync")
    def test_clear_credentials(self, mock_sync, runner):
        mock_sync.return_value.clear_credentials.return_value = 2

        result = runner.invoke(main, ["--clear-credentials"])

        assert result.exit_code == 0
        assert "Deleted 2 stored token(s)" in result.output
        mock_sync.return_value.sync.assert_not_called()

    def test_invalid_purpose(self, runner):
        result = runner.invoke(main, ["--purpose", "invoices"])
        assert result.exit_code != 0
