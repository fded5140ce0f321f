"""
SQLAlchemy-based claim storage.

Stores claims and their audit events in a relational database. Defaults to a
local SQLite file, no external database setup required.
"""

import logging
import uuid
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Callable, Iterator, List, Optional

from sqlalchemy import create_engine, event, func, or_, select
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload, sessionmaker
from sqlalchemy.pool import StaticPool

from ..claims.clock import utc_now
from ..claims.errors import ClaimNumberConflictError
from ..claims.schema import Claim, ClaimDetail, ClaimDraft
from .base import ClaimFilter, ClaimStore
from .models import Base, ClaimEventRecord, ClaimRecord

logger = logging.getLogger(__name__)

# Database file location
DEFAULT_DATABASE_URL = "sqlite:///data/claims.db"


def _unicode_lower(value):
    return value.lower() if isinstance(value, str) else value


def create_claims_engine(database_url: str = DEFAULT_DATABASE_URL) -> Engine:
    """
    Create an engine for the claims database.

    SQLite connections are shared across worker threads, in-memory SQLite
    keeps a single connection, and the parent directory of a SQLite file is
    created if needed. SQLite's built-in lower() only folds ASCII, so it is
    replaced with Python's str.lower to keep search case-insensitive for
    accented names.
    """
    url = make_url(database_url)
    kwargs = {}

    if url.get_backend_name() == "sqlite":
        kwargs["connect_args"] = {"check_same_thread": False}
        if url.database in (None, "", ":memory:"):
            kwargs["poolclass"] = StaticPool
        else:
            Path(url.database).parent.mkdir(parents=True, exist_ok=True)

    engine = create_engine(url, **kwargs)

    if url.get_backend_name() == "sqlite":
        @event.listens_for(engine, "connect")
        def _configure_connection(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()
            dbapi_connection.create_function("lower", 1, _unicode_lower, deterministic=True)

    return engine


class SqlClaimStore(ClaimStore):
    """
    Relational storage for insurance claims.

    Usage:
        store = SqlClaimStore("sqlite:///data/claims.db")

        # Save a claim with its first event
        claim = store.create(draft)

        # Retrieve
        claim = store.find_one(claim.id)

        # List and count
        claims = store.find_many(ClaimFilter(search="rivers"), skip=0, take=20)
        total = store.count(ClaimFilter(search="rivers"))
    """

    def __init__(
        self,
        database_url: str = DEFAULT_DATABASE_URL,
        engine: Optional[Engine] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        """Initialize the claim store."""
        self.engine = engine or create_claims_engine(database_url)
        self._session_factory = sessionmaker(bind=self.engine, expire_on_commit=False)
        self._clock = clock
        self._init_db()

    def _init_db(self):
        """Create tables if they don't exist."""
        Base.metadata.create_all(self.engine)

    @contextmanager
    def _session(self) -> Iterator[Session]:
        """Open a session for a single store operation."""
        session = self._session_factory()
        try:
            yield session
        finally:
            session.close()

    def create(self, draft: ClaimDraft) -> ClaimDetail:
        now = self._clock()
        claim_id = str(uuid.uuid4())

        record = ClaimRecord(
            id=claim_id,
            claim_number=draft.claim_number,
            lob=draft.lob.value,
            policy_number=draft.policy_number,
            insured_name=draft.insured_name,
            loss_date=draft.loss_date,
            loss_type=draft.loss_type,
            description=draft.description,
            contact_email=draft.contact_email,
            priority=draft.priority.value,
            status=draft.status.value,
            assigned_to=None,
            created_at=now,
            updated_at=now,
            events=[
                ClaimEventRecord(
                    id=str(uuid.uuid4()),
                    claim_id=claim_id,
                    type=item.type.value,
                    message=item.message,
                    created_at=now,
                )
                for item in draft.events
            ],
        )

        with self._session() as session:
            session.add(record)
            try:
                session.commit()
            except IntegrityError:
                session.rollback()
                if self._claim_number_taken(session, draft.claim_number):
                    raise ClaimNumberConflictError(draft.claim_number)
                raise

            logger.debug(f"Stored claim {record.claim_number} with {len(record.events)} event(s)")
            return ClaimDetail.model_validate(record)

    def find_many(self, filters: ClaimFilter, skip: int = 0, take: int = 20) -> List[Claim]:
        query = (
            select(ClaimRecord)
            .where(*self._conditions(filters))
            .order_by(ClaimRecord.created_at.desc(), ClaimRecord.id.desc())
            .offset(skip)
            .limit(take)
        )
        with self._session() as session:
            return [Claim.model_validate(row) for row in session.scalars(query)]

    def count(self, filters: ClaimFilter) -> int:
        query = select(func.count()).select_from(ClaimRecord).where(*self._conditions(filters))
        with self._session() as session:
            return session.scalar(query) or 0

    def find_one(self, claim_id: str) -> Optional[ClaimDetail]:
        with self._session() as session:
            record = session.get(
                ClaimRecord,
                claim_id,
                options=[selectinload(ClaimRecord.events)],
            )
            if record is None:
                return None
            return ClaimDetail.model_validate(record)

    def _conditions(self, filters: ClaimFilter) -> list:
        """Translate a filter into WHERE clauses."""
        conditions = []

        if filters.status:
            conditions.append(ClaimRecord.status == filters.status)

        if filters.lob:
            conditions.append(ClaimRecord.lob == filters.lob)

        if filters.assigned_to:
            conditions.append(ClaimRecord.assigned_to == filters.assigned_to)

        if filters.search:
            conditions.append(
                or_(
                    ClaimRecord.claim_number.icontains(filters.search, autoescape=True),
                    ClaimRecord.insured_name.icontains(filters.search, autoescape=True),
                    ClaimRecord.policy_number.icontains(filters.search, autoescape=True),
                )
            )

        return conditions

    @staticmethod
    def _claim_number_taken(session: Session, claim_number: str) -> bool:
        query = select(ClaimRecord.id).where(ClaimRecord.claim_number == claim_number)
        return session.scalar(query) is not None
