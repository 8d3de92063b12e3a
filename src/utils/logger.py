"""
Logging utility for the Hostel Mailbox Sync system.
"""
import logging
import sys
from typing import Optional
from colorama import Fore, Style, init
import structlog

# Initialize colorama for cross-platform colored output
init(autoreset=True)


class ColorizedFormatter(logging.Formatter):
    """Custom formatter with colorized output."""

    COLORS = {
        'DEBUG': Fore.CYAN,
        'INFO': Fore.GREEN,
        'WARNING': Fore.YELLOW,
        'ERROR': Fore.RED,
        'CRITICAL': Fore.MAGENTA + Style.BRIGHT,
    }

    def format(self, record):
        levelname = record.levelname
        if levelname in self.COLORS:
            record.levelname = f"{self.COLORS[levelname]}{levelname}{Style.RESET_ALL}"

        if record.levelno >= logging.WARNING:
            record.msg = f"{Fore.RED}{record.msg}{Style.RESET_ALL}"
        elif record.levelno == logging.INFO:
            record.msg = f"{Fore.GREEN}{record.msg}{Style.RESET_ALL}"

        return super().format(record)


def setup_logger(
    name: str = "hostel_mailbox_sync",
    level: str = "INFO",
    log_file: Optional[str] = None
) -> structlog.BoundLogger:
    """
    Set up structured logging with colorized console output.

    Args:
        name: Logger name
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional file path for logging to file

    Returns:
        Configured structured logger
    """
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer() if log_file else structlog.dev.ConsoleRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logger = structlog.get_logger(name)

    stdlib_logger = logging.getLogger(name)
    stdlib_logger.setLevel(getattr(logging, level.upper()))

    # setup_logger is called once per orchestrator; avoid stacking handlers
    if not stdlib_logger.handlers:
        console_handler = logging.StreamHandler(sys.stdout)
        console_formatter = ColorizedFormatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        console_handler.setFormatter(console_formatter)
        stdlib_logger.addHandler(console_handler)

        if log_file:
            file_handler = logging.FileHandler(log_file)
            file_formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
            file_handler.setFormatter(file_formatter)
            stdlib_logger.addHandler(file_handler)

    return logger


def get_logger(name: str = "hostel_mailbox_sync") -> structlog.BoundLogger:
    """
    Get a configured logger instance.

    Args:
        name: Logger name

    Returns:
        Configured structured logger
    """
    return structlog.get_logger(name)


class SyncLogger:
    """Specialized logger for mailbox sync runs with summary tracking."""

    def __init__(self, logger: structlog.BoundLogger):
        self.logger = logger
        self.reset_stats()

    def log_message_processed(self, purpose: str, message_id: str):
        """Log when a message is picked up for extraction."""
        self.stats['messages_processed'] += 1
        self.stats['purposes'][purpose] = self.stats['purposes'].get(purpose, 0) + 1
        self.logger.debug("Message processed", purpose=purpose, message_id=message_id)

    def log_record_parsed(self, purpose: str, record):
        """Log when a record is successfully extracted."""
        self.stats['records_parsed'] += 1
        self.logger.info("Record parsed", purpose=purpose, record=str(record))

    def log_new_record(self, purpose: str, key: str):
        """Log when a new record is stored."""
        self.stats['new_records'] += 1
        self.logger.info("New record stored", purpose=purpose, key=key)

    def log_duplicate(self, purpose: str, key: str):
        """Log when a record already exists and is skipped."""
        self.stats['duplicates'] += 1
        self.logger.info("Record already exists, skipping", purpose=purpose, key=key)

    def log_parse_miss(self, purpose: str, message_id: str, mime_type: str, snippet: str):
        """Log a message whose body did not yield a record."""
        self.stats['parse_failures'] += 1
        self.logger.warning(
            "Failed to parse message, skipped",
            purpose=purpose,
            message_id=message_id,
            mime_type=mime_type,
            body_snippet=snippet
        )

    def log_error(self, error: Exception, context: str = ""):
        """Log an error."""
        self.stats['errors'] += 1
        self.logger.error(
            "Error occurred",
            error=str(error),
            error_type=type(error).__name__,
            context=context
        )

    def print_summary(self):
        """Print a summary of all operations."""
        self.logger.info(
            "Sync summary",
            messages_processed=self.stats['messages_processed'],
            records_parsed=self.stats['records_parsed'],
            new_records=self.stats['new_records'],
            duplicates=self.stats['duplicates'],
            parse_failures=self.stats['parse_failures'],
            errors=self.stats['errors'],
            purposes=self.stats['purposes']
        )

        print(f"\n{Fore.CYAN}{'='*50}")
        print(f"{Fore.WHITE}SYNC SUMMARY")
        print(f"{Fore.CYAN}{'='*50}")
        print(f"{Fore.GREEN}✓ Messages processed: {self.stats['messages_processed']}")
        print(f"{Fore.GREEN}✓ Records parsed: {self.stats['records_parsed']}")
        print(f"{Fore.BLUE}✓ New records: {self.stats['new_records']}")
        print(f"{Fore.YELLOW}⚠ Duplicates: {self.stats['duplicates']}")
        print(f"{Fore.YELLOW}⚠ Parse failures: {self.stats['parse_failures']}")
        print(f"{Fore.RED}✗ Errors: {self.stats['errors']}")

        if self.stats['purposes']:
            print(f"\n{Fore.WHITE}By Purpose:")
            for purpose, count in self.stats['purposes'].items():
                print(f"  {Fore.CYAN}{purpose}: {count}")

        print(f"{Fore.CYAN}{'='*50}\n")

    def reset_stats(self):
        """Reset statistics."""
        self.stats = {
            'messages_processed': 0,
            'records_parsed': 0,
            'new_records': 0,
            'duplicates': 0,
            'parse_failures': 0,
            'errors': 0,
            'purposes': {}
        }
