# utils/note_numbers.py
import threading
import time

NOTE_PREFIX = "NT-"

_lock = threading.Lock()
_last_millis = 0


def generate_note_number() -> str:
    """Return "NT-<epoch millis>", bumped by one when called twice within a millisecond."""
    global _last_millis
    with _lock:
        now = int(time.time() * 1000)
        if now <= _last_millis:
            now = _last_millis + 1
        _last_millis = now
    return f"{NOTE_PREFIX}{now}"
