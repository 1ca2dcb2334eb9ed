from collections import deque
from typing import List

from cyberbot.config import MAX_COMMAND_HISTORY
from cyberbot.utils import is_blank


# -----------------------------
# Command History
# -----------------------------
class CommandHistory:
    """Most-recent-first list of submitted lines, bounded to `capacity`."""

    def __init__(self, capacity: int = MAX_COMMAND_HISTORY):
        if capacity < 1:
            raise ValueError("history capacity must be at least 1")
        self.capacity = capacity
        self.entries: deque[str] = deque(maxlen=capacity)

    def add(self, line: str) -> bool:
        """Records a submitted line. Returns False if it was not stored."""
        if is_blank(line):
            return False
        if self.entries and self.entries[0] == line:
            return False
        # appendleft on a full deque drops the oldest entry from the right
        self.entries.appendleft(line)
        return True

    def get(self, index: int) -> str:
        return self.entries[index]

    def to_list(self) -> List[str]:
        return list(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __bool__(self) -> bool:
        return bool(self.entries)
