import itertools
from datetime import datetime

import numpy as np
import pytest

from qr_attendance.errors import StorageError
from qr_attendance.logic import AttendanceStore
from qr_attendance.models import AttendanceRecord
from qr_attendance.storage import RecordStorage


class FakeScheduler:
    """Stands in for the Tk root: records ``after`` jobs and runs them on demand."""

    def __init__(self):
        self._ids = itertools.count(1)
        self.jobs = {}
        self.cancelled = []

    def after(self, ms, callback):
        job_id = f"after#{next(self._ids)}"
        self.jobs[job_id] = (ms, callback)
        return job_id

    def after_cancel(self, job_id):
        self.cancelled.append(job_id)
        self.jobs.pop(job_id, None)

    def delays(self):
        return sorted(ms for ms, _ in self.jobs.values())

    def run(self, ms):
        """Run the oldest pending job scheduled with a delay of ``ms``."""
        for job_id, (delay, callback) in list(self.jobs.items()):
            if delay == ms:
                del self.jobs[job_id]
                callback()
                return
        raise AssertionError(f"no job pending with delay {ms}")


class FailingStorage:
    """Record storage whose saves always fail, as on a full or read-only disk."""

    def __init__(self, records=()):
        self.records = list(records)
        self.save_attempts = 0

    def load(self):
        return list(self.records)

    def save(self, records):
        self.save_attempts += 1
        raise StorageError("attendanceData.json", OSError(28, "No space left on device"))


class FakeCapture:
    def __init__(self, opened=True, frames=None):
        self.opened = opened
        self.frames = list(frames) if frames is not None else None
        self.released = False
        self.reads = 0

    def isOpened(self):
        return self.opened

    def read(self):
        self.reads += 1
        if self.frames is None:
            return True, np.zeros((48, 64, 3), dtype=np.uint8)
        if not self.frames:
            return False, None
        return True, self.frames.pop(0)

    def release(self):
        self.released = True


class FakeDetector:
    def __init__(self, payloads=()):
        self.payloads = list(payloads)
        self.calls = 0

    def detectAndDecode(self, frame):
        self.calls += 1
        data = self.payloads.pop(0) if self.payloads else ""
        return data, None, None


def make_record(student_id="1001", name="Alice", when=None):
    when = when or datetime(2026, 10, 19, 9, 30).astimezone()
    return AttendanceRecord(student_id=student_id, student_name=name, timestamp=when)


@pytest.fixture
def storage_file(tmp_path):
    return str(tmp_path / "data" / "attendanceData.json")


@pytest.fixture
def storage(storage_file):
    return RecordStorage(storage_file)


@pytest.fixture
def store(storage):
    return AttendanceStore(storage)


@pytest.fixture
def scheduler():
    return FakeScheduler()
