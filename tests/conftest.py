"""
Pytest configuration and fixtures for PVSync tests.
"""

import sys
from pathlib import Path

import pytest

# Add project root to path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

# 2024-06-01T10:00:00Z
BASE_TIMESTAMP = 1717236000


@pytest.fixture
def engine():
    """In-memory sample store with the solar table created."""
    import pvsync.models  # noqa: F401 (registers the solar table)
    from pvsync.core.database import Base, create_db_engine

    engine = create_db_engine(":memory:")
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_maker(engine):
    from pvsync.core.database import create_session_maker

    return create_session_maker(engine)


@pytest.fixture
def store(session_maker):
    from pvsync.services.store import SampleStore

    return SampleStore(session_maker)


@pytest.fixture
def add_samples(session_maker):
    """Insert `count` samples for a tracker, five minutes apart."""
    from pvsync.models.sample import Sample

    def _add(count, device_id=2, tracker_id=1, start=BASE_TIMESTAMP, uploaded=False):
        samples = [
            Sample(
                device_id=device_id,
                tracker_id=tracker_id,
                timestamp=start + i * 300,
                energy_generation=1000 + i,
                power_generation=100 + i,
                temperature=21.5,
                voltage=230.0,
                uploaded=uploaded,
            )
            for i in range(count)
        ]
        with session_maker() as session, session.begin():
            session.add_all(samples)
        return [s.id for s in samples]

    return _add


@pytest.fixture
def uploaded_ids(session_maker):
    """Return the ids currently flagged as uploaded."""
    from sqlalchemy import select

    from pvsync.models.sample import Sample

    def _ids():
        with session_maker() as session:
            return set(session.execute(select(Sample.id).where(Sample.uploaded == True)).scalars())

    return _ids


@pytest.fixture
def mock_uploader():
    """Uploader double that accepts every batch."""
    from unittest.mock import MagicMock

    uploader = MagicMock()
    uploader.send.return_value = 200
    return uploader


@pytest.fixture
def trackers():
    from pvsync.models.tracker import Tracker

    return [
        Tracker(device_id=2, tracker_id=1, system_id="92309"),
        Tracker(device_id=2, tracker_id=2, system_id="92748"),
        Tracker(device_id=3, tracker_id=1, system_id="92869"),
    ]
