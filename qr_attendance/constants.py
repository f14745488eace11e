APP_NAME = "QR Attendance Tracker"
APP_VERSION = "1.0"

PROGRAM_STORAGE = "data"
STORAGE_KEY = "attendanceData"
ATTENDANCE_FILE = f"{PROGRAM_STORAGE}/{STORAGE_KEY}.json"
RECORDS_FOLDER = "records"

EXPORT_SHEET_NAME = "Attendance"
EXPORT_FILE_PREFIX = "attendance"
EXPORT_COLUMNS = ["Student ID", "Name", "Timestamp"]
DISPLAY_TIME_FORMAT = "%x %X"

PAYLOAD_SEPARATOR = ":"

CAMERA_INDEX = 0
FRAME_INTERVAL_MS = 15
SCAN_COOLDOWN_MS = 2000
MAX_FAILED_READS = 30
PREVIEW_WIDTH = 480
PREVIEW_HEIGHT = 360

WINDOW_WIDTH = 1000
WINDOW_HEIGHT = 640
TITLE_FONT = ("Arial", 18, "bold")
CLOCK_FONT = ("Arial", 14, "bold")
STATUS_FONT = ("Arial", 12)
SUCCESS_COLOR = "#27ae60"
ERROR_COLOR = "#c0392b"
