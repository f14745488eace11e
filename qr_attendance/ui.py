import logging
from datetime import datetime, date

import tkinter as tk
from tkinter import messagebox, ttk

import cv2
from PIL import Image, ImageTk

from qr_attendance.constants import (
    APP_NAME,
    APP_VERSION,
    CAMERA_INDEX,
    RECORDS_FOLDER,
    WINDOW_WIDTH,
    WINDOW_HEIGHT,
    PREVIEW_WIDTH,
    PREVIEW_HEIGHT,
    TITLE_FONT,
    CLOCK_FONT,
    STATUS_FONT,
    SUCCESS_COLOR,
    ERROR_COLOR,
)
from qr_attendance.errors import AttendanceError, DeviceAccessError, StorageError
from qr_attendance.export import export_data, format_timestamp
from qr_attendance.logic import AttendanceStore
from qr_attendance.scanner import QRScanner

logger = logging.getLogger(__name__)


class AttendanceApp:
    def __init__(self, master, store=None, camera_index=CAMERA_INDEX, records_folder=RECORDS_FOLDER):
        self.master = master
        self.store = store if store is not None else AttendanceStore()
        self.records_folder = records_folder

        master.title(f"{APP_NAME} v{APP_VERSION}")
        master.geometry(f"{WINDOW_WIDTH}x{WINDOW_HEIGHT}")
        master.configure(bg="white")
        master.option_add('*Font', 'Arial 10')
        master.protocol("WM_DELETE_WINDOW", self.on_close)

        self.scanner = QRScanner(
            master,
            self.store,
            on_record=self.on_record,
            on_error=self.on_scan_error,
            on_frame=self.show_frame,
            camera_index=camera_index,
        )
        self.preview_image = None

        title_label = tk.Label(master, text=APP_NAME, font=TITLE_FONT,
                               fg="#2c3e50", bg="white", pady=10)
        title_label.pack()

        self.clock_label = tk.Label(master, font=CLOCK_FONT, fg="black", bg="white")
        self.clock_label.pack()
        self.update_clock()

        body = tk.Frame(master, bg="white")
        body.pack(fill="both", expand=True, padx=15, pady=10)

        left = tk.Frame(body, bg="white")
        left.pack(side="left", fill="y")

        self.video_label = tk.Label(left, bg="#2c3e50")
        self.video_label.pack(pady=5)

        button_style = {"font": ("Arial", 11), "relief": "raised", "bd": 1, "padx": 8, "pady": 3}

        scanner_buttons = tk.Frame(left, bg="white")
        scanner_buttons.pack(pady=5)

        self.start_btn = tk.Button(
            scanner_buttons, text="Start Scanner ▶", **button_style,
            command=self.start_scanner, bg="#16a085", fg="white"
        )
        self.start_btn.grid(row=0, column=0, padx=3, pady=3)

        self.stop_btn = tk.Button(
            scanner_buttons, text="Stop Scanner ⏹", **button_style,
            command=self.stop_scanner, bg="#e74c3c", fg="white", state="disabled"
        )
        self.stop_btn.grid(row=0, column=1, padx=3, pady=3)

        self.status_label = tk.Label(left, text="Scanner stopped.", font=STATUS_FONT,
                                     fg="#2c3e50", bg="white", wraplength=PREVIEW_WIDTH)
        self.status_label.pack(pady=5)

        right = tk.Frame(body, bg="white")
        right.pack(side="left", fill="both", expand=True, padx=(15, 0))

        self.count_label = tk.Label(right, font=("Arial", 12, "bold"), fg="#3498db", bg="white")
        self.count_label.pack(anchor="w")

        self.create_records_tree(right)

        record_buttons = tk.Frame(right, bg="white")
        record_buttons.pack(pady=8)

        tk.Button(
            record_buttons, text="Download Excel 💾", **button_style,
            command=self.download_excel, bg="#d35400", fg="white"
        ).grid(row=0, column=0, padx=3, pady=3)

        tk.Button(
            record_buttons, text="Clear Records 🗑", **button_style,
            command=self.clear_records, bg="#8e44ad", fg="white"
        ).grid(row=0, column=1, padx=3, pady=3)

        self.update_records_display()

    def update_clock(self):
        current_time = datetime.now().strftime("%I:%M:%S %p")
        self.clock_label.config(text=current_time)
        self.master.after(1000, self.update_clock)

    def create_records_tree(self, parent):
        tree_frame = tk.Frame(parent, bg="white")
        tree_frame.pack(fill="both", expand=True)

        self.records_tree = ttk.Treeview(
            tree_frame,
            columns=("id", "name", "time"),
            show="headings",
            height=15
        )
        self.records_tree.heading("id", text="Student ID", anchor="center")
        self.records_tree.heading("name", text="Name", anchor="center")
        self.records_tree.heading("time", text="Timestamp", anchor="center")

        self.records_tree.column("id", width=100, anchor="center")
        self.records_tree.column("name", width=180, anchor="center")
        self.records_tree.column("time", width=160, anchor="center")

        tree_scrollbar = ttk.Scrollbar(tree_frame, orient="vertical", command=self.records_tree.yview)
        self.records_tree.configure(yscrollcommand=tree_scrollbar.set)

        self.records_tree.pack(side="left", fill="both", expand=True)
        tree_scrollbar.pack(side="right", fill="y")

    def update_records_display(self):
        for item in self.records_tree.get_children():
            self.records_tree.delete(item)

        for record in self.store.list():
            self.records_tree.insert(
                "", "end",
                values=(record.student_id, record.student_name, format_timestamp(record.timestamp))
            )

        present_today = len(self.store.records_for_day(date.today()))
        self.count_label.config(text=f"Present today: {present_today}   Total records: {len(self.store)}")

    def set_status(self, text, ok=None):
        if ok is None:
            color = "#2c3e50"
        else:
            color = SUCCESS_COLOR if ok else ERROR_COLOR
        self.status_label.config(text=text, fg=color)

    # ==================================================
    # Scanner
    # ==================================================

    def start_scanner(self):
        try:
            started = self.scanner.start()
        except DeviceAccessError as e:
            self.set_status(str(e), ok=False)
            messagebox.showerror("❌ Error", str(e))
            return

        if started:
            self.start_btn.config(state="disabled")
            self.stop_btn.config(state="normal")
            self.set_status("Scanner started. Point camera at QR code.", ok=True)

    def stop_scanner(self):
        self.scanner.stop()
        self.start_btn.config(state="normal")
        self.stop_btn.config(state="disabled")
        self.video_label.config(image="")
        self.preview_image = None
        self.set_status("Scanner stopped.")

    def show_frame(self, frame):
        rgb = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
        image = Image.fromarray(rgb)
        image.thumbnail((PREVIEW_WIDTH, PREVIEW_HEIGHT))
        # keep a reference or Tk drops the image
        self.preview_image = ImageTk.PhotoImage(image)
        self.video_label.config(image=self.preview_image, width=image.width, height=image.height)

    def on_record(self, record):
        self.update_records_display()
        self.set_status(f"Attendance marked for {record.student_name} ({record.student_id})", ok=True)

    def on_scan_error(self, error):
        if isinstance(error, DeviceAccessError):
            self.stop_scanner()
            self.set_status(str(error), ok=False)
            messagebox.showerror("❌ Error", str(error))
            return

        self.set_status(str(error), ok=False)
        if isinstance(error, StorageError):
            self.update_records_display()
            messagebox.showerror("❌ Error", str(error))

    # ==================================================
    # Records
    # ==================================================

    def download_excel(self):
        try:
            file_path = export_data(self.store.list(), folder=self.records_folder)
        except AttendanceError as e:
            self.set_status(str(e), ok=False)
            return
        except Exception as e:
            logger.exception("Export failed")
            messagebox.showerror("❌ Error", f"Failed to export data:\n{e}")
            return
        self.set_status(f"Excel file downloaded successfully: {file_path}", ok=True)

    def clear_records(self):
        def confirm():
            return messagebox.askyesno(
                "Confirm",
                "Are you sure you want to clear all attendance records?"
            )

        try:
            cleared = self.store.clear(confirm=confirm)
        except AttendanceError as e:
            messagebox.showerror("❌ Error", str(e))
            self.update_records_display()
            return

        if cleared:
            self.update_records_display()
            self.set_status("All attendance records cleared.", ok=True)

    def on_close(self):
        self.scanner.stop()
        self.master.destroy()


def run_app(store=None, camera_index=CAMERA_INDEX, records_folder=RECORDS_FOLDER):
    root = tk.Tk()
    app = AttendanceApp(root, store=store, camera_index=camera_index, records_folder=records_folder)
    root.mainloop()
    return app
