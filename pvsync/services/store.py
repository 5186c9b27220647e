"""
Sample Store - pending sample selection and upload bookkeeping
"""

import logging
from collections.abc import Iterable

from sqlalchemy import func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from pvsync.core.exceptions import StorageError
from pvsync.models.sample import Sample

logger = logging.getLogger(__name__)


class SampleStore:
    """Reads pending samples and flips their uploaded flag."""

    def __init__(self, session_maker: sessionmaker[Session]):
        self._session_maker = session_maker

    def select_pending(self, device_id: int, tracker_id: int, limit: int) -> list[Sample]:
        """
        Get up to `limit` samples not yet uploaded for a tracker.

        Samples are ordered by ascending id. An empty list means the
        tracker is drained.
        """
        query = (
            select(Sample)
            .where(
                Sample.uploaded == False,
                Sample.device_id == device_id,
                Sample.tracker_id == tracker_id,
            )
            .order_by(Sample.id)
            .limit(limit)
        )
        try:
            with self._session_maker() as session:
                return list(session.execute(query).scalars().all())
        except SQLAlchemyError as e:
            raise StorageError(f"Cannot select pending samples for ({device_id},{tracker_id}): {e}") from e

    def count_pending(self, device_id: int, tracker_id: int) -> int:
        """Number of samples not yet uploaded for a tracker."""
        query = (
            select(func.count())
            .select_from(Sample)
            .where(
                Sample.uploaded == False,
                Sample.device_id == device_id,
                Sample.tracker_id == tracker_id,
            )
        )
        try:
            with self._session_maker() as session:
                return session.execute(query).scalar_one()
        except SQLAlchemyError as e:
            raise StorageError(f"Cannot count pending samples for ({device_id},{tracker_id}): {e}") from e

    def mark_uploaded(self, ids: Iterable[int]) -> None:
        """
        Mark exactly the given sample ids as uploaded.

        Runs as a single transaction: either every id is marked or, on
        error, none is. Ids need not be contiguous.
        """
        id_set = set(ids)
        if not id_set:
            return

        statement = (
            update(Sample)
            .where(Sample.id.in_(id_set))
            .values(uploaded=True)
        )
        try:
            with self._session_maker() as session, session.begin():
                session.execute(statement)
        except SQLAlchemyError as e:
            raise StorageError(f"Cannot mark {len(id_set)} samples as uploaded: {e}") from e

        logger.debug(f"Marked {len(id_set)} samples as uploaded")
