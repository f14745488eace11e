import logging
from datetime import datetime

from qr_attendance.constants import PAYLOAD_SEPARATOR
from qr_attendance.errors import PayloadFormatError, DuplicateRecordError
from qr_attendance.models import AttendanceRecord, ScanPayload
from qr_attendance.storage import RecordStorage

logger = logging.getLogger(__name__)

# ==================================================
# QR payload
# ==================================================

def parse_payload(payload):
    """Split ``studentId:studentName`` into a :class:`ScanPayload`.

    Exactly one separator is accepted and both parts must be non-empty once
    surrounding whitespace is stripped.
    """
    if not isinstance(payload, str) or payload.count(PAYLOAD_SEPARATOR) != 1:
        raise PayloadFormatError(payload)

    student_id, student_name = (part.strip() for part in payload.split(PAYLOAD_SEPARATOR))
    if not student_id or not student_name:
        raise PayloadFormatError(payload)

    return ScanPayload(student_id=student_id, student_name=student_name)

# ==================================================
# Record store
# ==================================================

class AttendanceStore:
    def __init__(self, storage=None):
        self.storage = storage if storage is not None else RecordStorage()
        self._records = list(self.storage.load())

    def __len__(self):
        return len(self._records)

    def has_checked_in(self, student_id, day):
        return any(
            r.student_id == student_id and r.local_day == day
            for r in self._records
        )

    def records_for_day(self, day):
        return [r for r in self._records if r.local_day == day]

    def add(self, record):
        if self.has_checked_in(record.student_id, record.local_day):
            raise DuplicateRecordError(record)

        self._records.append(record)
        self.storage.save(self._records)
        logger.info("Attendance marked for %s (%s)", record.student_name, record.student_id)
        return record

    def list(self):
        return list(self._records)

    def clear(self, confirm=None):
        if confirm is not None and not confirm():
            return False

        count = len(self._records)
        self._records = []
        self.storage.save(self._records)
        logger.info("Cleared %d attendance records", count)
        return True

# ==================================================
# Check-in
# ==================================================

def check_in(store, payload, now=None):
    scan = parse_payload(payload)
    timestamp = (now if now is not None else datetime.now()).astimezone()
    record = AttendanceRecord(
        student_id=scan.student_id,
        student_name=scan.student_name,
        timestamp=timestamp,
    )
    return store.add(record)
