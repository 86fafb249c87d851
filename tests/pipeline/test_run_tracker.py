import pytest

pytestmark = [pytest.mark.unit, pytest.mark.pipeline]

VARIABLE = "MODIS/061/MOD13A2/NDVI/mean"


def test_start_and_fetch_run(tracker):
    created = tracker.start_run("run-1", VARIABLE, "month", "/data/store")
    assert created is True

    run = tracker.get_run("run-1")
    assert run["run_id"] == "run-1"
    assert run["variable"] == VARIABLE
    assert run["freq"] == "month"
    assert run["store_path"] == "/data/store"
    assert run["status"] == "running"


def test_start_duplicate_is_noop(tracker):
    tracker.start_run("run-2", VARIABLE, "month")
    created = tracker.start_run("run-2", VARIABLE, "year")

    assert created is False
    assert tracker.get_run("run-2")["freq"] == "month"


def test_stage_progression(tracker):
    tracker.start_run("run-3", VARIABLE, "month")

    tracker.mark_stage_complete("run-3", "loaded", num_cells=81)
    run = tracker.get_run("run-3")
    assert run["loaded_at"] is not None
    assert run["num_cells"] == 81
    assert run["status"] == "running"

    tracker.mark_stage_complete("run-3", "aggregated", num_periods=48)
    tracker.mark_stage_complete("run-3", "assessed", classification="improvement")
    tracker.mark_stage_complete("run-3", "reported")

    run = tracker.get_run("run-3")
    assert run["num_cells"] == 81  # not overwritten by later stages
    assert run["num_periods"] == 48
    assert run["classification"] == "improvement"
    assert run["status"] == "completed"


def test_invalid_stage_raises(tracker):
    tracker.start_run("run-4", VARIABLE, "month")

    with pytest.raises(ValueError, match="Invalid stage"):
        tracker.mark_stage_complete("run-4", "plotted")


def test_mark_failed_records_stage_and_kind(tracker):
    tracker.start_run("run-5", VARIABLE, "month")
    tracker.mark_failed("run-5", "load", "NotFoundError", "variable not found")

    run = tracker.get_run("run-5")
    assert run["status"] == "failed"
    assert run["failed_stage"] == "load"
    assert run["error_kind"] == "NotFoundError"
    assert run["error_message"] == "variable not found"


def test_unknown_run_is_none(tracker):
    assert tracker.get_run("missing") is None


def test_statistics(tracker):
    tracker.start_run("ok", VARIABLE, "month")
    tracker.mark_stage_complete("ok", "reported")
    tracker.start_run("bad", VARIABLE, "month")
    tracker.mark_failed("bad", "change", "InsufficientDataError", "empty")
    tracker.start_run("other", "MODIS/061/MOD13A2/NDVI/sd", "year")

    assert tracker.get_statistics() == {"total": 3, "completed": 1, "failed": 1, "running": 1}
    assert tracker.get_statistics(VARIABLE) == {"total": 2, "completed": 1, "failed": 1, "running": 0}


def test_empty_statistics(tracker):
    assert tracker.get_statistics() == {"total": 0, "completed": 0, "failed": 0, "running": 0}


def test_database_persists_across_instances(temp_dir):
    from trndvi.pipeline.run_tracker import RunTracker

    first = RunTracker(temp_dir / "nested" / "runs.db")
    first.start_run("run-6", VARIABLE, "month")
    first.close()

    second = RunTracker(temp_dir / "nested" / "runs.db")
    assert second.get_run("run-6")["status"] == "running"
    second.close()
