"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules: record
factories and in-memory stand-ins for the probe, the notifier, the
executor and the deferred-execution timer.
"""

import logging
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest
from recsweep.errors import NotifyError, ProbeError
from recsweep.notify.base import DeliveryReceipt, NotificationSink
from recsweep.storage.models import GIB, DeletionResult, DirectoryRecord, SpaceInfo

GB = GIB


class FakeProbe:
    """Probe returning canned snapshots per volume and counting calls."""

    def __init__(self, spaces: dict[str, SpaceInfo] | None = None) -> None:
        self.spaces: dict[str, SpaceInfo] = dict(spaces or {})
        self.failures: dict[str, str] = {}
        self.calls: list[str] = []

    def set_free(self, volume: str, free_gb: float, total_gb: float = 1000) -> None:
        self.spaces[volume] = SpaceInfo(
            volume_key=volume,
            total_bytes=int(total_gb * GB),
            free_bytes=int(free_gb * GB),
        )

    def probe(self, path: str | Path) -> SpaceInfo:
        key = str(path)
        self.calls.append(key)
        if key in self.failures:
            raise ProbeError(key, self.failures[key])
        return self.spaces[key]


class RecordingNotifier(NotificationSink):
    """Notifier that keeps every message in memory."""

    def __init__(self, fail: bool = False) -> None:
        self.sent: list[tuple[str, str]] = []
        self.fail = fail

    def send(self, subject: str, html_body: str) -> DeliveryReceipt:
        if self.fail:
            raise NotifyError("SMTP unreachable")
        self.sent.append((subject, html_body))
        return DeliveryReceipt(message_id=f"msg-{len(self.sent)}")

    @property
    def subjects(self) -> list[str]:
        return [subject for subject, _ in self.sent]


class StubExecutor:
    """Executor that records removals and fails on selected paths."""

    def __init__(self, failing: set[str] | None = None, dry_run: bool = False) -> None:
        self.failing = failing or set()
        self.removed: list[str] = []
        self.dry_run = dry_run

    def remove(self, path: str) -> DeletionResult:
        if path in self.failing:
            return DeletionResult(path=path, success=False, error="Permission denied")
        self.removed.append(path)
        return DeletionResult(path=path, success=True, dry_run=self.dry_run)


class ManualTimer:
    """Timer stand-in that only runs when fire() is called."""

    def __init__(self, interval: float, function: Callable[[], None]) -> None:
        self.interval = interval
        self.function = function
        self.started = False
        self.cancelled = False

    def start(self) -> None:
        self.started = True

    def cancel(self) -> None:
        self.cancelled = True

    def fire(self) -> None:
        if not self.cancelled:
            self.function()


class TimerRecorder:
    """Timer factory remembering every timer it built."""

    def __init__(self) -> None:
        self.timers: list[ManualTimer] = []

    def __call__(self, interval: float, function: Callable[[], None]) -> ManualTimer:
        timer = ManualTimer(interval, function)
        self.timers.append(timer)
        return timer

    @property
    def last(self) -> ManualTimer:
        return self.timers[-1]


@pytest.fixture
def make_record() -> Callable[..., DirectoryRecord]:
    """Factory for DirectoryRecords sized in GB."""

    def _make(name: str, size_gb: float, mtime: float, root: str = "/rec") -> DirectoryRecord:
        return DirectoryRecord(path=f"{root}/{name}", size_bytes=int(size_gb * GB), mtime=mtime)

    return _make


@pytest.fixture
def make_space() -> Callable[..., SpaceInfo]:
    """Factory for SpaceInfo snapshots sized in GB."""

    def _make(free_gb: float, volume: str = "/", total_gb: float = 1000) -> SpaceInfo:
        return SpaceInfo(
            volume_key=volume,
            total_bytes=int(total_gb * GB),
            free_bytes=int(free_gb * GB),
        )

    return _make


@pytest.fixture
def fake_probe() -> FakeProbe:
    return FakeProbe()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def stub_executor() -> StubExecutor:
    return StubExecutor()


@pytest.fixture
def timers() -> TimerRecorder:
    return TimerRecorder()


@pytest.fixture(autouse=True)
def isolated_xdg(tmp_path_factory: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point XDG config/state dirs at a temporary location."""
    base = tmp_path_factory.mktemp("xdg")
    monkeypatch.setenv("XDG_CONFIG_HOME", str(base / "config"))
    monkeypatch.setenv("XDG_STATE_HOME", str(base / "state"))
    monkeypatch.delenv("RECSWEEP_CONFIG", raising=False)
    return base


@pytest.fixture(autouse=True)
def restore_root_logger() -> Iterator[None]:
    """Undo handler and level changes made by configure_logging."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
