class AttendanceError(Exception):
    """Base class for every error the attendance tracker reports to the user."""


class DeviceAccessError(AttendanceError):
    def __init__(self, camera_index, reason="camera unavailable or access denied"):
        self.camera_index = camera_index
        self.reason = reason
        super().__init__(f"Error accessing camera {camera_index}: {reason}")


class PayloadFormatError(AttendanceError):
    def __init__(self, payload):
        self.payload = payload
        super().__init__(
            "Invalid QR code format. Expected 'studentId:studentName'"
        )


class DuplicateRecordError(AttendanceError):
    def __init__(self, record):
        self.record = record
        super().__init__(
            f"{record.student_name} ({record.student_id}) already marked present today."
        )


class EmptyStoreError(AttendanceError):
    def __init__(self):
        super().__init__("No attendance records to download.")


class StorageError(AttendanceError):
    def __init__(self, filepath, cause):
        self.filepath = filepath
        super().__init__(f"Failed to save data to {filepath}:\n{cause}")
