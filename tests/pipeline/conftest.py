import pytest

from trndvi.pipeline.run_tracker import RunTracker


@pytest.fixture
def tracker(temp_dir):
    db_path = temp_dir / "tracker.db"
    t = RunTracker(db_path)
    yield t
    t.close()

