import logging

import cv2

from qr_attendance.constants import (
    CAMERA_INDEX,
    FRAME_INTERVAL_MS,
    MAX_FAILED_READS,
    SCAN_COOLDOWN_MS,
)
from qr_attendance.errors import AttendanceError, DeviceAccessError
from qr_attendance.logic import check_in

logger = logging.getLogger(__name__)


def decode_frame(frame, detector):
    """Return the QR payload found in ``frame`` or None."""
    data, _points, _ = detector.detectAndDecode(frame)
    return data or None


class QRScanner:
    """Camera capture loop that checks students in from QR codes.

    The loop runs on ``scheduler`` (anything with Tk's ``after`` and
    ``after_cancel``), reading at most one frame per tick.
    """

    def __init__(
        self,
        scheduler,
        store,
        on_record=None,
        on_error=None,
        on_frame=None,
        camera_index=CAMERA_INDEX,
        capture_factory=cv2.VideoCapture,
        detector=None,
        frame_interval_ms=FRAME_INTERVAL_MS,
        cooldown_ms=SCAN_COOLDOWN_MS,
        max_failed_reads=MAX_FAILED_READS,
    ):
        self.scheduler = scheduler
        self.store = store
        self.on_record = on_record
        self.on_error = on_error
        self.on_frame = on_frame
        self.camera_index = camera_index
        self.capture_factory = capture_factory
        self.detector = detector if detector is not None else cv2.QRCodeDetector()
        self.frame_interval_ms = frame_interval_ms
        self.cooldown_ms = cooldown_ms
        self.max_failed_reads = max_failed_reads

        self.running = False
        self.scanning = False
        self.cap = None
        self._frame_job = None
        self._cooldown_job = None
        self.failed_reads = 0

    def start(self):
        if self.running:
            logger.debug("Scanner already running, ignoring start")
            return False

        cap = self.capture_factory(self.camera_index)
        if cap is None or not cap.isOpened():
            if cap is not None:
                cap.release()
            logger.error("Could not open camera %s", self.camera_index)
            raise DeviceAccessError(self.camera_index)

        self.cap = cap
        self.failed_reads = 0
        self.running = True
        self.scanning = True
        logger.info("Scanner started on camera %s", self.camera_index)
        self._schedule_frame(0)
        return True

    def stop(self):
        for job in (self._frame_job, self._cooldown_job):
            if job is not None:
                self.scheduler.after_cancel(job)
        self._frame_job = None
        self._cooldown_job = None

        was_running = self.running
        self.running = False
        self.scanning = False
        if self.cap is not None:
            self.cap.release()
            self.cap = None
        if was_running:
            logger.info("Scanner stopped")

    @property
    def cooling_down(self):
        return self._cooldown_job is not None

    def _schedule_frame(self, delay):
        self._frame_job = self.scheduler.after(delay, self._tick)

    def _tick(self):
        self._frame_job = None
        if not self.running:
            return

        ok, frame = self.cap.read()
        if ok:
            self.failed_reads = 0
            if self.on_frame:
                self.on_frame(frame)
            if self.scanning:
                self.process_frame(frame)
        else:
            self.failed_reads += 1
            logger.debug("Camera %s returned no frame", self.camera_index)
            if self.failed_reads >= self.max_failed_reads:
                self._lose_device()
                return

        if self.running:
            self._schedule_frame(self.frame_interval_ms)

    def _lose_device(self):
        logger.error(
            "Camera %s returned no frame %d times in a row, stopping",
            self.camera_index, self.failed_reads
        )
        self.stop()
        if self.on_error:
            self.on_error(DeviceAccessError(self.camera_index, "camera stopped delivering frames"))

    def process_frame(self, frame):
        payload = decode_frame(frame, self.detector)
        if payload is None:
            return None
        return self.process_payload(payload)

    def process_payload(self, payload):
        try:
            record = check_in(self.store, payload)
        except AttendanceError as e:
            logger.debug("Rejected scan %r: %s", payload, e)
            if self.on_error:
                self.on_error(e)
            return None

        if self.on_record:
            self.on_record(record)
        self._begin_cooldown()
        return record

    def _begin_cooldown(self):
        self.scanning = False
        self._cooldown_job = self.scheduler.after(self.cooldown_ms, self._end_cooldown)

    def _end_cooldown(self):
        self._cooldown_job = None
        if self.running:
            self.scanning = True
