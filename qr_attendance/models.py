from dataclasses import dataclass
from datetime import datetime


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp into an aware datetime.

    A trailing ``Z`` is accepted for UTC, and naive values are taken to be
    local time.
    """
    if not isinstance(value, str):
        raise TypeError(f"timestamp must be a string, not {type(value).__name__}")
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.astimezone()
    return parsed


@dataclass(frozen=True)
class ScanPayload:
    student_id: str
    student_name: str


@dataclass(frozen=True)
class AttendanceRecord:
    student_id: str
    student_name: str
    timestamp: datetime

    @property
    def local_day(self):
        return self.timestamp.astimezone().date()

    def to_dict(self):
        return {
            "studentId": self.student_id,
            "studentName": self.student_name,
            "timestamp": self.timestamp.isoformat(),
        }

    @classmethod
    def from_dict(cls, data):
        return cls(
            student_id=str(data["studentId"]),
            student_name=str(data["studentName"]),
            timestamp=parse_timestamp(data["timestamp"]),
        )
