import faulthandler
import os
from typing import IO, Optional


_crash_file_handle: Optional[IO[str]] = None


def enable_crash_logging(logs_dir: Optional[str] = None) -> str:
    """Dump tracebacks of all threads to ``crash.log`` on fatal signals."""
    global _crash_file_handle
    logs_dir = logs_dir or os.path.join(os.getcwd(), "logs")
    os.makedirs(logs_dir, exist_ok=True)
    crash_log_path = os.path.join(logs_dir, "crash.log")

    if _crash_file_handle is None:
        _crash_file_handle = open(crash_log_path, "a", encoding="utf-8")
        faulthandler.enable(file=_crash_file_handle, all_threads=True)
    return crash_log_path
