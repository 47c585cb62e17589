"""
Main Orchestrator for Vola Auditor

Ties the parser, the audit agent and the history store together and
owns all UI state for one user session:
    CSV buffer -> parse for display -> audit via Gemini -> record history

DESIGN DECISION: A failed step never half-applies. On any failure the
current result, the history and the CSV buffer are left exactly as they
were; only the error message and the loading flag change.
"""

from typing import Optional

from vola.agents import AuditError, FinancialAuditAgent, MalformedResponseError
from vola.config import Settings, get_settings
from vola.events import EventLogger, configure_logging, create_correlation_id
from vola.history import AuditHistoryStore
from vola.models.audit import AuditResult, HistoryEntry
from vola.models.transaction import Transaction
from vola.parsing import CSVParseError, parse_csv
from vola.services.storage import (
    InMemoryStorage,
    JsonFileStorage,
    KeyValueStorageInterface,
    StorageError,
)


SAMPLE_CSV = """Date,Description,Category,Amount
2026-01-12,Starbucks,Coffee,-7.50
2026-01-12,Coinbase,Investment,-200.00
2026-01-13,Uber Eats,Dining,-45.20
2026-01-14,Shell Station,Gas,-50.00
2026-01-15,Netflix,Subscription,-18.99
2026-01-15,Direct Deposit,Income,+2500.00
2026-01-16,Apple Store,Tech,-1200.00
2026-01-16,Steam,Entertainment,-60.00"""

EMPTY_INPUT_MESSAGE = "Data feed is empty. Please provide CSV transactions."
FILE_READ_MESSAGE = "Failed to read the file."
MALFORMED_RESPONSE_MESSAGE = "Vola returned an unreadable analysis. Please try again."
SERVICE_FAILURE_MESSAGE = "Failed to audit data."
HISTORY_SAVE_MESSAGE = "Audit complete, but it could not be saved to history."


class SessionError(Exception):
    """Base exception for user-input problems in a session."""
    pass


class EmptyInputError(SessionError):
    """The CSV buffer is blank."""

    def __init__(self):
        super().__init__(EMPTY_INPUT_MESSAGE)


class FileReadError(SessionError):
    """An uploaded file could not be read as text."""

    def __init__(self, filename: str = ""):
        self.filename = filename
        super().__init__(FILE_READ_MESSAGE)


def decode_csv_upload(content: bytes, max_bytes: Optional[int] = None) -> str:
    """
    Decode uploaded bytes as UTF-8 text (a BOM is tolerated).

    Raises:
        FileReadError: If the bytes are empty, too large or not UTF-8 text
    """
    if not content:
        raise FileReadError()
    if max_bytes is not None and len(content) > max_bytes:
        raise FileReadError() from ValueError(
            f"File is {len(content)} bytes, limit is {max_bytes}"
        )
    try:
        text = content.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise FileReadError() from e
    if not text.strip():
        raise FileReadError()
    return text


def user_message_for(error: Exception) -> str:
    """The single human-readable message shown for a failure."""
    if isinstance(error, (SessionError, CSVParseError)):
        return str(error)
    if isinstance(error, MalformedResponseError):
        return MALFORMED_RESPONSE_MESSAGE
    return str(error) or SERVICE_FAILURE_MESSAGE


class AuditSession:
    """
    Orchestrates one user's audit session.

    Flow:
    1. Buffer → pasted text or an uploaded file
    2. Parse → transactions for the table (local, no network)
    3. Audit → one Gemini call with the raw CSV
    4. Record → prepend to history and persist

    Only one audit may be in flight; the trigger is ignored while
    ``loading`` is set.
    """

    def __init__(
        self,
        agent: FinancialAuditAgent,
        history: AuditHistoryStore,
        event_logger: Optional[EventLogger] = None,
        csv_text: str = SAMPLE_CSV,
        max_upload_bytes: Optional[int] = None,
    ):
        self._agent = agent
        self._history = history
        self._event_logger = event_logger
        self._max_upload_bytes = max_upload_bytes

        self.csv_text: str = csv_text
        self.transactions: list[Transaction] = []
        self.current_result: Optional[AuditResult] = None
        self.loading: bool = False
        self.error: Optional[str] = None

    @property
    def history(self) -> AuditHistoryStore:
        return self._history

    @property
    def event_logger(self) -> Optional[EventLogger]:
        return self._event_logger

    def set_csv_text(self, text: str) -> None:
        self.csv_text = text

    def load_file(self, content: bytes, filename: str = "") -> bool:
        """
        Replace the CSV buffer with an uploaded file's text.

        Returns True on success. On failure the buffer is untouched and
        the error message is set.
        """
        try:
            text = decode_csv_upload(content, max_bytes=self._max_upload_bytes)
        except FileReadError as e:
            self.error = str(e)
            if self._event_logger:
                cause = e.__cause__ or e
                self._event_logger.log_file_read_failed(
                    filename=filename,
                    error_message=str(cause),
                )
            return False

        self.csv_text = text
        self.error = None
        if self._event_logger:
            self._event_logger.log_csv_loaded(filename=filename, size=len(content))
        return True

    async def run_audit(self) -> Optional[AuditResult]:
        """
        Run one audit cycle on the current buffer.

        Returns:
            The new AuditResult, or None if the audit failed or another
            audit is already in flight. Failures are reported through
            ``error``, never raised.
        """
        if self.loading:
            return None

        correlation_id = create_correlation_id()
        csv_text = self.csv_text
        self.loading = True
        self.error = None
        try:
            if not csv_text.strip():
                if self._event_logger:
                    self._event_logger.log_empty_input(correlation_id)
                raise EmptyInputError()

            try:
                transactions = parse_csv(csv_text)
            except CSVParseError as e:
                if self._event_logger:
                    self._event_logger.log_csv_parse_failed(
                        line_number=e.line_number,
                        error_message=str(e),
                        correlation_id=correlation_id,
                    )
                raise
            self.transactions = transactions

            result = await self._agent.audit(csv_text, correlation_id=correlation_id)
        except (SessionError, AuditError, CSVParseError) as e:
            self.error = user_message_for(e)
            return None
        finally:
            self.loading = False

        self.current_result = result
        try:
            self._history.record(result, csv_text, correlation_id=correlation_id)
        except StorageError as e:
            # The audit itself succeeded, so it is still shown
            self.error = f"{HISTORY_SAVE_MESSAGE} ({e})"
        return result

    def load_historical(self, entry: HistoryEntry) -> None:
        """Show a past audit: its result, its CSV and its transactions."""
        self.current_result = entry.result
        self.csv_text = entry.raw_csv
        try:
            self.transactions = parse_csv(entry.raw_csv)
        except CSVParseError as e:
            self.transactions = []
            self.error = user_message_for(e)
        else:
            self.error = None

    def clear_history(self) -> None:
        """Clear all history. The UI confirms with the user first."""
        try:
            self._history.clear()
        except StorageError as e:
            self.error = str(e)


def create_storage(
    settings: Settings,
    event_logger: Optional[EventLogger] = None,
) -> KeyValueStorageInterface:
    """File storage in the configured data dir, or memory if unavailable."""
    data_dir = settings.history.data_dir
    try:
        return JsonFileStorage(data_dir)
    except StorageError as e:
        # History then lasts only for this process
        if event_logger:
            event_logger.log_storage_unavailable(
                directory=str(data_dir),
                error_message=str(e),
            )
        return InMemoryStorage()


def create_app_components(
    settings: Optional[Settings] = None,
    storage: Optional[KeyValueStorageInterface] = None,
    agent: Optional[FinancialAuditAgent] = None,
) -> AuditSession:
    """
    Factory function to create a fully wired session.

    Args:
        settings: Application settings. Loaded from the environment if None.
        storage: Storage backend. JSON files in the data dir if None.
        agent: Audit agent. A Gemini-backed agent if None.

    Returns:
        An AuditSession with its history already loaded
    """
    settings = settings or get_settings()
    configure_logging(settings.app.effective_log_level)
    event_logger = EventLogger()

    history_settings = settings.history
    history = AuditHistoryStore(
        storage=storage or create_storage(settings, event_logger),
        storage_key=history_settings.storage_key,
        max_entries=history_settings.max_entries,
        event_logger=event_logger,
    )
    history.load()

    agent = agent or FinancialAuditAgent(
        settings=settings.gemini,
        event_logger=event_logger,
    )

    return AuditSession(
        agent=agent,
        history=history,
        event_logger=event_logger,
        max_upload_bytes=settings.app.max_upload_size_bytes,
    )
