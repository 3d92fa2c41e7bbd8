"""Tests for logging context propagation."""

import threading

import pytest

from sixfigure.logging import (
    bind_log_context,
    clear_log_context,
    get_log_context,
    log_context,
    unbind_log_context,
)


@pytest.fixture(autouse=True)
def clean_context():
    """Clear logging context before and after each test."""
    clear_log_context()
    yield
    clear_log_context()


def test_empty_context():
    assert get_log_context() == {}


def test_bind_and_unbind():
    token = bind_log_context(run_id="abc123", policy="default")
    assert get_log_context() == {"run_id": "abc123", "policy": "default"}

    unbind_log_context(token)
    assert get_log_context() == {}


def test_nested_scopes_merge_and_restore():
    with log_context(run_id="abc123"):
        with log_context(source_id="exampleco", job_key="job-1") as inner:
            assert inner == {"run_id": "abc123", "source_id": "exampleco", "job_key": "job-1"}
        assert get_log_context() == {"run_id": "abc123"}
    assert get_log_context() == {}


def test_inner_scope_overrides_field():
    with log_context(policy="default"):
        with log_context(policy="greenhouse-cents"):
            assert get_log_context()["policy"] == "greenhouse-cents"
        assert get_log_context()["policy"] == "default"


def test_scope_is_restored_after_exception():
    with pytest.raises(RuntimeError):
        with log_context(run_id="abc123"):
            raise RuntimeError("boom")

    assert get_log_context() == {}


def test_returned_context_is_a_copy():
    with log_context(run_id="abc123"):
        snapshot = get_log_context()
        snapshot["run_id"] = "changed"
        assert get_log_context()["run_id"] == "abc123"


def test_context_does_not_leak_between_threads():
    seen = {}

    def worker():
        seen["context"] = get_log_context()

    with log_context(run_id="main-thread"):
        thread = threading.Thread(target=worker)
        thread.start()
        thread.join()

    assert seen["context"] == {}
