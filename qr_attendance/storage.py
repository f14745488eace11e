import json
import logging
import os

from qr_attendance.constants import ATTENDANCE_FILE
from qr_attendance.errors import StorageError
from qr_attendance.models import AttendanceRecord

logger = logging.getLogger(__name__)


def create_folders(folders):
    for folder in folders:
        if folder and not os.path.exists(folder):
            os.makedirs(folder)


def load_data(filepath, default):
    if os.path.exists(filepath):
        try:
            with open(filepath, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, ValueError):
            logger.warning("Could not read %s, using default", filepath, exc_info=True)
            return default
    else:
        try:
            save_data(filepath, default)
        except StorageError:
            logger.warning("Could not create %s", filepath, exc_info=True)
        return default


def save_data(filepath, data):
    try:
        folder = os.path.dirname(filepath)
        if folder and not os.path.exists(folder):
            os.makedirs(folder)

        with open(filepath, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=4)
        return True
    except OSError as e:
        logger.exception("Failed to save %s", filepath)
        raise StorageError(filepath, e) from e


class RecordStorage:
    """Persists the full list of attendance records as one JSON array."""

    def __init__(self, filepath=ATTENDANCE_FILE):
        self.filepath = filepath

    def load(self):
        raw = load_data(self.filepath, [])
        if not isinstance(raw, list):
            logger.warning("Ignoring %s: expected a JSON array", self.filepath)
            return []

        records = []
        for item in raw:
            try:
                records.append(AttendanceRecord.from_dict(item))
            except (KeyError, TypeError, ValueError):
                logger.warning("Skipping malformed record in %s: %r", self.filepath, item)
        logger.info("Loaded %d attendance records from %s", len(records), self.filepath)
        return records

    def save(self, records):
        return save_data(self.filepath, [record.to_dict() for record in records])
