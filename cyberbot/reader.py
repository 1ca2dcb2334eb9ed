import logging
from typing import Optional

from cyberbot.config import MAX_COMMAND_HISTORY
from cyberbot.history import CommandHistory
from cyberbot.terminal import Key, KeyEvent, TerminalError, TerminalSession

logger = logging.getLogger(__name__)

NO_SELECTION = -1


# -----------------------------
# Input Reader (line editor)
# -----------------------------
class InputReader:
    """Reads one line at a time with backspace editing and up/down history recall.

    Each request starts in the composing state with an empty buffer and no
    history entry selected; Enter submits the buffer, records it in the
    history and returns it. Redraw failures degrade to simpler echoing.
    """

    def __init__(self, terminal: TerminalSession, history: Optional[CommandHistory] = None,
                 capacity: int = MAX_COMMAND_HISTORY):
        self.terminal = terminal
        self.history = history if history is not None else CommandHistory(capacity)
        self.buffer = ""
        self.history_index = NO_SELECTION
        self.prompt = ""
        self.max_len = 0

    def begin(self, prompt: str):
        self.prompt = prompt
        self.buffer = ""
        self.history_index = NO_SELECTION
        # Measured from the prompt's column so a wrapped prompt still leaves room
        width = self.terminal.width()
        self.max_len = max(1, width - (len(prompt) % width) - 2)

    def read_line(self, user_name: str) -> str:
        prompt = f"{user_name}> "
        self.terminal.write("\n" + prompt)
        self.begin(prompt)

        if not self.terminal.interactive:
            return self._read_cooked()

        try:
            with self.terminal.raw_keys() as next_key:
                while True:
                    line = self.handle_key(next_key())
                    if line is not None:
                        return line
        except TerminalError as e:
            logger.warning("Raw key input unavailable, using line input: %s", e)
            return self._read_cooked()

    def _read_cooked(self) -> str:
        line = self.terminal.readline()
        self.history.add(line)
        self.history_index = NO_SELECTION
        return line

    def handle_key(self, event: KeyEvent) -> Optional[str]:
        """Applies one key press. Returns the submitted line on Enter, else None."""
        if event.key == Key.ENTER:
            return self._submit()
        if event.key == Key.BACKSPACE:
            if self.buffer:
                self.buffer = self.buffer[:-1]
                self._redraw(erase=True)
        elif event.key == Key.UP:
            if self.history and self.history_index < len(self.history) - 1:
                self.history_index += 1
                self.buffer = self.history.get(self.history_index)
                self._redraw()
        elif event.key == Key.DOWN:
            if self.history_index > 0:
                self.history_index -= 1
                self.buffer = self.history.get(self.history_index)
            elif self.history_index == 0:
                self.history_index = NO_SELECTION
                self.buffer = ""
            self._redraw()
        elif event.key == Key.INTERRUPT:
            raise KeyboardInterrupt
        elif event.key == Key.EOF:
            if not self.buffer:
                raise EOFError
        elif event.key == Key.CHAR:
            if len(self.buffer) < self.max_len:
                self.buffer += event.char
                self.terminal.write(event.char)
        return None

    def _submit(self) -> str:
        self.terminal.write("\n")
        line = self.buffer
        self.history.add(line)
        self.buffer = ""
        self.history_index = NO_SELECTION
        return line

    def _redraw(self, erase: bool = False):
        try:
            self.terminal.redraw_input(self.prompt, self.buffer, self.max_len)
        except TerminalError as e:
            logger.debug("Redraw failed, falling back: %s", e)
            if erase:
                self.terminal.write("\b \b")
            else:
                self.terminal.write(f"\n{self.prompt}{self.buffer}")
