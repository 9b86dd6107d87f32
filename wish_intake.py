# wish_intake.py

import csv
import logging
from collections import namedtuple
from datetime import datetime, timezone

logger = logging.getLogger("lantern_scene")

WishRecord = namedtuple('WishRecord', ['id', 'wish', 'timestamp'])


class WishIntake:
    """
    Collects typed wishes, forwards them to the scene and keeps a best-effort log.

    The scene only ever sees trimmed, non-empty text. The history is plain
    in-memory state that can be exported as CSV; nothing here is required for
    the scene to keep running.
    """
    def __init__(self, scene, max_length: int = 120):
        self.scene = scene
        self.max_length = max_length
        self.buffer = ""
        self.history = []
        self.launched_count = 0
        self.toast_remaining = 0.0

    def type_text(self, text: str):
        room = self.max_length - len(self.buffer)
        if room > 0:
            self.buffer += text[:room]

    def backspace(self):
        self.buffer = self.buffer[:-1]

    def clear(self):
        self.buffer = ""

    def submit(self, toast_duration: float = 3.0):
        """Launches the buffered wish. Returns the new record, or None if the buffer was blank."""
        wish = self.buffer.strip()
        if not wish:
            logger.debug("Blank wish ignored.")
            return None

        self.scene.launch(wish)
        self.launched_count += 1
        record = WishRecord(
            id=self.launched_count,
            wish=wish,
            timestamp=datetime.now(timezone.utc).isoformat(),
        )
        self.history.append(record)
        self.buffer = ""
        self.toast_remaining = toast_duration
        logger.info(f"Wish #{record.id} launched.")
        return record

    def update(self, dt: float):
        self.toast_remaining = max(0.0, self.toast_remaining - dt)

    @property
    def toast_visible(self) -> bool:
        return self.toast_remaining > 0

    def reset(self):
        """Resets the scene and forgets every recorded wish."""
        self.scene.reset()
        self.history = []
        self.launched_count = 0
        self.buffer = ""
        self.toast_remaining = 0.0

    def export_csv(self, path: str) -> bool:
        """Writes the wish history as ID,Wish,Timestamp rows. Returns False if there is nothing to write."""
        if not self.history:
            logger.warning("No wishes recorded yet, CSV export skipped.")
            return False

        with open(path, 'w', newline='', encoding='utf-8') as f:
            writer = csv.writer(f)
            writer.writerow(['ID', 'Wish', 'Timestamp'])
            for record in self.history:
                writer.writerow([record.id, record.wish.replace('\n', ' '), record.timestamp])

        logger.info(f"Exported {len(self.history)} wishes to {path}.")
        return True
