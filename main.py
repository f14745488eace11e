import argparse
import logging
import os

from qr_attendance.constants import (
    CAMERA_INDEX,
    PROGRAM_STORAGE,
    STORAGE_KEY,
    RECORDS_FOLDER,
)
from qr_attendance.logic import AttendanceStore
from qr_attendance.storage import RecordStorage, create_folders
from qr_attendance.ui import run_app


def setup_logging(log_dir, verbose=False):
    level = logging.DEBUG if verbose else logging.INFO
    formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    root.addHandler(console_handler)

    file_handler = logging.FileHandler(os.path.join(log_dir, "attendance.log"), encoding="utf-8")
    file_handler.setFormatter(formatter)
    root.addHandler(file_handler)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="QR code attendance tracker")
    parser.add_argument("--camera", type=int, default=CAMERA_INDEX, help="camera device index")
    parser.add_argument("--data-dir", default=PROGRAM_STORAGE, help="folder for attendance data and logs")
    parser.add_argument("--records-dir", default=RECORDS_FOLDER, help="folder for exported Excel files")
    parser.add_argument("--verbose", action="store_true", help="enable debug logging")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    log_dir = os.path.join(args.data_dir, "logs")
    create_folders([args.data_dir, log_dir, args.records_dir])
    setup_logging(log_dir, verbose=args.verbose)

    storage = RecordStorage(os.path.join(args.data_dir, f"{STORAGE_KEY}.json"))
    store = AttendanceStore(storage)
    run_app(store=store, camera_index=args.camera, records_folder=args.records_dir)


if __name__ == "__main__":
    main()
