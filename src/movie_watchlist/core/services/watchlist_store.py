"""SQLite backed watchlist store."""

from contextlib import contextmanager
from typing import Iterator, List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, col, select

from ...config.models import Config
from ...infrastructure.database import create_engine_from_config, init_database, session_scope
from ...infrastructure.logging import LoggerMixin
from ...utils import AlreadyExistsError, StorageError
from ..interfaces import IWatchlistStore
from ..models import WatchlistEntry
from ..models.records import WatchlistRecord, normalize_year


class SqlWatchlistStore(IWatchlistStore, LoggerMixin):
    """Watchlist store keeping one ``watchlist_entries`` row per entry.

    The table has a unique constraint on title and year, so a duplicate insert
    fails in the database with ``AlreadyExistsError`` even when two processes
    share the file. Each call runs in its own transaction and is rolled back
    on failure. Database failures surface as ``StorageError``.
    """

    def __init__(self, config: Config) -> None:
        """Open the database and create missing tables.

        Args:
            config: Application configuration.

        Raises:
            StorageError: If the database cannot be opened or initialised.
        """
        database_url = config.storage.database_url
        try:
            self._engine = create_engine_from_config(config.storage)
            init_database(self._engine)
        except (OSError, SQLAlchemyError) as e:
            raise StorageError(f"Cannot open watchlist database {database_url}: {e}") from e

        self.logger.debug(f"Watchlist database ready at {database_url}")

    @contextmanager
    def _session(self) -> Iterator[Session]:
        try:
            with session_scope(self._engine) as session:
                yield session
        except IntegrityError:
            raise
        except SQLAlchemyError as e:
            self.logger.error(f"Watchlist database error: {e}")
            raise StorageError(f"Watchlist database error: {e}") from e

    def exists_by_title_and_year(self, title: str, year: Optional[str]) -> bool:
        statement = (
            select(WatchlistRecord.id)
            .where(WatchlistRecord.title == title)
            .where(WatchlistRecord.year_key == normalize_year(year))
        )
        with self._session() as session:
            return session.exec(statement).first() is not None

    def save(self, entry: WatchlistEntry) -> WatchlistEntry:
        """Insert or update an entry.

        Args:
            entry: Entry to save. Entries without an ID are inserted.

        Returns:
            Saved copy with its ID assigned.

        Raises:
            AlreadyExistsError: If the title and year belong to another entry.
            StorageError: If the write fails; nothing is saved.
        """
        try:
            with self._session() as session:
                record = None
                if entry.id is not None:
                    record = session.get(WatchlistRecord, entry.id)
                if record is None:
                    record = WatchlistRecord(id=entry.id)
                record.apply(entry)
                session.add(record)
                session.flush()
                saved = record.to_entry()
        except IntegrityError as e:
            raise AlreadyExistsError(
                f"'{entry.title}' ({entry.year}) is already on the watchlist"
            ) from e

        self.logger.debug(f"Saved entry {saved.id}: {saved.title}")
        return saved

    def find_by_id(self, entry_id: int) -> Optional[WatchlistEntry]:
        with self._session() as session:
            record = session.get(WatchlistRecord, entry_id)
            return record.to_entry() if record else None

    def exists_by_id(self, entry_id: int) -> bool:
        with self._session() as session:
            return session.get(WatchlistRecord, entry_id) is not None

    def delete_by_id(self, entry_id: int) -> None:
        with self._session() as session:
            record = session.get(WatchlistRecord, entry_id)
            if record is None:
                return
            session.delete(record)

        self.logger.debug(f"Deleted entry {entry_id}")

    def find_page(self, page_number: int, page_size: int) -> Tuple[List[WatchlistEntry], int]:
        """Get one page of entries ordered by ID.

        Args:
            page_number: Zero-based page number.
            page_size: Entries per page.

        Returns:
            Entries on the page and the total number of entries.
        """
        if page_number < 0 or page_size <= 0:
            raise ValueError("page_number must be >= 0 and page_size > 0")

        count_statement = select(func.count()).select_from(WatchlistRecord)
        items_statement = (
            select(WatchlistRecord)
            .order_by(col(WatchlistRecord.id))
            .offset(page_number * page_size)
            .limit(page_size)
        )
        with self._session() as session:
            total = session.exec(count_statement).one()
            items = [record.to_entry() for record in session.exec(items_statement).all()]
        return items, total
