"""Tests for the garbage collection run against collaborator fakes.

Covers snapshot fetching, front end mode gating, plan execution,
dry runs, the not-found policy, and error propagation.
"""

from __future__ import annotations

import logging
from datetime import timedelta

import pytest

from pipegc import (
    ActivityNotFoundError,
    BuildNumberError,
    CollaboratorError,
    DeletionReason,
    FixedMode,
    GCResult,
    ModeDetector,
    RetentionConfig,
    gc_activities,
)
from tests.conftest import NOW, FakeStore, make_pipeline, make_record


def run(store: FakeStore, **kwargs) -> GCResult:
    kwargs.setdefault("now", NOW)
    return gc_activities(store, store, store, **kwargs)


class TestSnapshot:
    def test_no_activities(self, caplog):
        store = FakeStore([])
        with caplog.at_level(logging.INFO, logger="pipegc"):
            result = run(store)

        assert result.activities_removed == 0
        assert len(result.plan) == 0
        assert store.mode_calls == 0
        assert store.job_list_calls == 0
        assert "no activities found" in caplog.text

    def test_scanned_count(self):
        store = FakeStore(make_pipeline("app", range(1, 4)), jobs=["app"])
        assert run(store).activities_scanned == 3


class TestModeGating:
    def test_registry_consulted_when_not_event_driven(self):
        store = FakeStore([make_record("c-1", pipeline="c")], jobs=["a", "b"])
        result = run(store)

        assert store.job_list_calls == 1
        assert result.plan.by_reason(DeletionReason.ORPHANED)[0].name == "c-1"
        assert result.event_driven is False

    def test_registry_skipped_when_event_driven(self):
        store = FakeStore(
            [make_record("c-1", pipeline="c")], jobs=["a", "b"], event_driven=True
        )
        result = run(store)

        assert store.job_list_calls == 0
        assert len(result.plan) == 0
        assert result.event_driven is True

    def test_fixed_mode(self):
        store = FakeStore([make_record("c-1", pipeline="c")], jobs=[])
        result = gc_activities(store, store, FixedMode(True), now=NOW)
        assert store.job_list_calls == 0
        assert len(result.plan) == 0

    def test_fixed_mode_satisfies_protocol(self):
        assert isinstance(FixedMode(False), ModeDetector)


class TestExecution:
    def test_deletes_planned_activities(self):
        records = make_pipeline("app", range(1, 8))
        store = FakeStore(records, jobs=["app"])

        result = run(store, config=RetentionConfig(revision_history_limit=5))

        assert store.deleted == ["app-1", "app-2"]
        assert result.deleted == ("app-1", "app-2")
        assert result.activities_removed == 2
        assert sorted(store.records) == [f"app-{i}" for i in range(3, 8)]

    def test_default_config(self):
        store = FakeStore(make_pipeline("app", range(1, 7)), jobs=["app"])
        result = run(store)
        assert result.deleted == ("app-1",)

    def test_pull_request_window(self):
        old = make_record(
            "app-pr-1-1", pipeline="app/pr-1", completed_at=NOW - timedelta(hours=25)
        )
        store = FakeStore([old], jobs=["app/pr-1"])

        kept = run(store, config=RetentionConfig(pull_request_hours=48))
        assert kept.deleted == ()

        expired = run(store, config=RetentionConfig(pull_request_hours=24))
        assert expired.deleted == ("app-pr-1-1",)

    def test_dry_run_deletes_nothing(self, caplog):
        store = FakeStore(make_pipeline("app", range(1, 8)), jobs=["app"])

        with caplog.at_level(logging.INFO, logger="pipegc"):
            result = run(store, dry_run=True)

        assert store.deleted == []
        assert result.dry_run is True
        assert result.deleted == ()
        assert result.plan.names == ["app-1", "app-2"]
        assert "would delete activity app-1" in caplog.text

    def test_logs_each_deletion(self, caplog):
        store = FakeStore(make_pipeline("app", range(1, 7)), jobs=["app"])
        with caplog.at_level(logging.INFO, logger="pipegc"):
            run(store)
        assert "deleted activity app-1 (over-limit)" in caplog.text


class TestNotFoundPolicy:
    def _vanishing_store(self) -> FakeStore:
        # Build 1 is listed under another name, so its derived target is missing.
        records = [make_record("app-one", pipeline="app", build=1)]
        records += make_pipeline("app", range(2, 8))
        return FakeStore(records, jobs=["app"])

    def test_not_found_is_an_error_by_default(self):
        store = self._vanishing_store()
        with pytest.raises(ActivityNotFoundError) as exc_info:
            run(store)
        assert exc_info.value.name == "app-1"
        assert isinstance(exc_info.value, CollaboratorError)

    def test_not_found_aborts_remaining_deletions(self):
        store = self._vanishing_store()
        with pytest.raises(ActivityNotFoundError):
            run(store)
        assert store.deleted == []

    def test_ignore_not_found(self):
        store = self._vanishing_store()
        result = run(store, config=RetentionConfig(ignore_not_found=True))

        assert result.skipped_not_found == ("app-1",)
        assert result.deleted == ("app-2",)


class TestErrors:
    def test_delete_failure_is_wrapped(self):
        store = FakeStore(
            make_pipeline("app", range(1, 8)), jobs=["app"], fail_on_delete="app-1"
        )
        with pytest.raises(CollaboratorError, match="connection reset") as exc_info:
            run(store)
        assert isinstance(exc_info.value.__cause__, RuntimeError)
        assert store.deleted == []

    def test_list_failure_is_wrapped(self):
        class BrokenStore(FakeStore):
            def list_activities(self):
                raise OSError("api unavailable")

        with pytest.raises(CollaboratorError, match="list activities"):
            run(BrokenStore())

    def test_registry_failure_is_wrapped(self):
        class BrokenRegistry(FakeStore):
            def list_known_job_names(self):
                raise ConnectionError("registry down")

        store = BrokenRegistry([make_record("a-1", pipeline="a")])
        with pytest.raises(CollaboratorError, match="registry down"):
            run(store)

    def test_bad_build_deletes_nothing(self):
        records = make_pipeline("app", range(1, 8)) + [
            make_record("app-bad", pipeline="app", build="oops"),
        ]
        store = FakeStore(records, jobs=["app"])
        with pytest.raises(BuildNumberError):
            run(store)
        assert store.deleted == []
