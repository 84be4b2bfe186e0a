import errno

import pytest

from smite.connection import NoiseConnectionError
from smite.scenarios import (
    Scenario,
    ScenarioError,
    ScenarioOutcome,
    ScenarioResult,
    TargetCrashed,
    TargetError,
    TargetStartFailed,
    smite_run,
)


def _chained(outer, inner):
    try:
        raise outer from inner
    except Exception as exc:
        return exc


def _assert_is_timeout(err_no, expected):
    io_error = OSError(err_no, "test")
    conn = _chained(NoiseConnectionError(f"IO error: {io_error}"), io_error)
    assert ScenarioError(conn).is_timeout() is expected
    target = _chained(TargetError(f"io error: {io_error}"), io_error)
    assert ScenarioError(target).is_timeout() is expected


def test_is_timeout():
    for err_no in (errno.ETIMEDOUT, errno.EWOULDBLOCK):
        _assert_is_timeout(err_no, True)
    _assert_is_timeout(errno.ECONNREFUSED, False)


def test_plain_io_and_protocol_errors_are_not_timeouts():
    assert ScenarioError(TimeoutError("x")).is_timeout() is False
    assert ScenarioError("unexpected message").is_timeout() is False


def test_error_messages():
    assert str(ScenarioError("unexpected message")) == "protocol error: unexpected message"
    assert str(ScenarioError(TargetCrashed())) == "target error: target crashed"
    assert (
        str(ScenarioError(TargetStartFailed("no binary")))
        == "target error: failed to start: no binary"
    )
    assert str(ScenarioError(NoiseConnectionError("boom"))) == "connection failed: boom"


def test_unsupported_error_source():
    with pytest.raises(TypeError):
        ScenarioError(42)


def test_result_constructors():
    assert ScenarioResult.ok().outcome is ScenarioOutcome.OK
    assert ScenarioResult.skip().outcome is ScenarioOutcome.SKIP
    failed = ScenarioResult.fail("crash")
    assert failed.outcome is ScenarioOutcome.FAIL
    assert failed.reason == "crash"


class Recording(Scenario):
    seen = []

    def __init__(self, args):
        self.args = args

    def run(self, data):
        Recording.seen.append((self.args, data))
        if data == b"skip":
            return ScenarioResult.skip()
        if data == b"fail":
            return ScenarioResult.fail("boom")
        return ScenarioResult.ok()


class BrokenInit(Scenario):
    def __init__(self, args):
        raise ScenarioError(TargetStartFailed("no binary"))

    def run(self, data):
        return ScenarioResult.ok()


@pytest.fixture
def fuzz_input(tmp_path, monkeypatch):
    path = tmp_path / "input"

    def write(data):
        path.write_bytes(data)
        monkeypatch.setenv("SMITE_INPUT", str(path))

    Recording.seen.clear()
    return write


def test_smite_run_ok(fuzz_input):
    fuzz_input(b"hello")
    assert smite_run(Recording, ["prog", "--flag"]) == 0
    assert Recording.seen == [(["prog", "--flag"], b"hello")]


def test_smite_run_skip(fuzz_input, caplog):
    fuzz_input(b"skip")
    with caplog.at_level("WARNING"):
        assert smite_run(Recording, ["prog"]) == 0
    assert "Skipping test case" in caplog.text


def test_smite_run_fail(fuzz_input, caplog):
    fuzz_input(b"fail")
    with caplog.at_level("ERROR"):
        assert smite_run(Recording, ["prog"]) == 1
    assert "Test case failed: boom" in caplog.text


def test_smite_run_init_failure(fuzz_input, caplog):
    fuzz_input(b"hello")
    with caplog.at_level("ERROR"):
        assert smite_run(BrokenInit, ["prog"]) == 1
    assert "Failed to initialize scenario" in caplog.text
    assert Recording.seen == []