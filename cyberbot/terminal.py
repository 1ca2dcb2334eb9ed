import os
import sys
import time
import codecs
import random
import shutil
import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Iterator, Optional

import colorama
from colorama import Cursor, Fore, Style

from cyberbot.config import SENTENCE_ENDINGS, CLAUSE_SEPARATORS, SENTENCE_PAUSE_MS, CLAUSE_PAUSE_MS
from cyberbot.utils import random_delay_ms, sleep_ms

if os.name == 'nt':
    import msvcrt
else:
    import select
    import termios
    import tty

logger = logging.getLogger(__name__)

COLORS = {
    'red': Fore.RED,
    'green': Fore.GREEN,
    'yellow': Fore.YELLOW,
    'blue': Fore.BLUE,
    'magenta': Fore.MAGENTA,
    'cyan': Fore.CYAN,
    'white': Fore.WHITE,
}


class TerminalError(Exception):
    """A console operation (cursor move, redraw, raw input) could not be done."""


# -----------------------------
# Keys
# -----------------------------
class Key:
    CHAR = 'char'
    ENTER = 'enter'
    BACKSPACE = 'backspace'
    UP = 'up'
    DOWN = 'down'
    LEFT = 'left'
    RIGHT = 'right'
    TAB = 'tab'
    INTERRUPT = 'interrupt'
    EOF = 'eof'
    OTHER = 'other'


@dataclass(frozen=True)
class KeyEvent:
    key: str
    char: str = ""

    @classmethod
    def of(cls, char: str) -> "KeyEvent":
        return cls(Key.CHAR, char)


_CONTROL_KEYS = {
    '\r': Key.ENTER,
    '\n': Key.ENTER,
    '\x7f': Key.BACKSPACE,
    '\x08': Key.BACKSPACE,
    '\t': Key.TAB,
    '\x03': Key.INTERRUPT,
    '\x04': Key.EOF,
    '\x1a': Key.EOF,
}
_ARROWS = {'A': Key.UP, 'B': Key.DOWN, 'C': Key.RIGHT, 'D': Key.LEFT}
_WINDOWS_SCAN_CODES = {'H': Key.UP, 'P': Key.DOWN, 'M': Key.RIGHT, 'K': Key.LEFT}


def decode_key(read_char: Callable[[], str], has_more: Callable[[], bool] = lambda: True) -> KeyEvent:
    """Turns the next raw character(s) from a cbreak-mode terminal into a KeyEvent.

    `has_more` reports whether another character is already waiting, which
    separates a lone Escape press from the start of an escape sequence.
    """
    ch = read_char()
    if ch == '':
        return KeyEvent(Key.EOF)
    if ch in _CONTROL_KEYS:
        return KeyEvent(_CONTROL_KEYS[ch])
    if ch == '\x1b':
        if not has_more():
            return KeyEvent(Key.OTHER)
        lead = read_char()
        if lead not in ('[', 'O'):
            return KeyEvent(Key.OTHER)
        code = read_char()
        if code in _ARROWS:
            return KeyEvent(_ARROWS[code])
        # Swallow the rest of sequences like ESC [ 3 ~
        while code and (code.isdigit() or code == ';'):
            code = read_char()
        return KeyEvent(Key.OTHER)
    if not ch.isprintable():
        return KeyEvent(Key.OTHER)
    return KeyEvent.of(ch)


def decode_windows_key(read_char: Callable[[], str]) -> KeyEvent:
    ch = read_char()
    if ch in ('\x00', '\xe0'):
        return KeyEvent(_WINDOWS_SCAN_CODES.get(read_char(), Key.OTHER))
    if ch in _CONTROL_KEYS:
        return KeyEvent(_CONTROL_KEYS[ch])
    if not ch.isprintable():
        return KeyEvent(Key.OTHER)
    return KeyEvent.of(ch)


# -----------------------------
# Terminal Session
# -----------------------------
class TerminalSession:
    """Owns the console for the lifetime of the app.

    Tracks the active colour so temporary changes can be undone, exposes the
    usable width and does the low-level cursor work for line redraws. Use it
    as a context manager so colours are reset however the app exits.
    """

    def __init__(self, stream=None, stdin=None, interactive: Optional[bool] = None, width: Optional[int] = None):
        self.stream = sys.stdout if stream is None else stream
        self.stdin = sys.stdin if stdin is None else stdin
        self._interactive = interactive
        self._width = width
        self._color: Optional[str] = None

    def __enter__(self) -> "TerminalSession":
        if self.interactive:
            colorama.just_fix_windows_console()
        return self

    def __exit__(self, exc_type, exc, tb):
        if self.interactive:
            try:
                self.write(Style.RESET_ALL)
            except OSError as e:
                logger.debug("Could not reset terminal style: %s", e)
        self._color = None
        return False

    @property
    def interactive(self) -> bool:
        if self._interactive is None:
            try:
                self._interactive = self.stdin.isatty() and self.stream.isatty()
            except (AttributeError, ValueError):
                self._interactive = False
        return self._interactive

    def width(self) -> int:
        if self._width is not None:
            return self._width
        return shutil.get_terminal_size((80, 24)).columns

    def write(self, text: str):
        try:
            self.stream.write(text)
        except UnicodeEncodeError:
            # Console can't show emoji and the like; substitute rather than fail
            encoding = getattr(self.stream, "encoding", None) or "ascii"
            self.stream.write(text.encode(encoding, "replace").decode(encoding))
        self.stream.flush()

    def readline(self) -> str:
        """Cooked-mode line read; raises EOFError at end of input."""
        line = self.stdin.readline()
        if line == '':
            raise EOFError
        return line.rstrip('\r\n')

    # --- Colour ---
    @property
    def color(self) -> Optional[str]:
        return self._color

    def _apply_color(self, color: Optional[str]):
        self._color = color
        if not self.interactive:
            return
        self.write(Style.RESET_ALL + COLORS.get(color, ""))

    @contextmanager
    def colored(self, color: Optional[str]) -> Iterator[None]:
        """Switches colour for the block and restores the previous one afterwards."""
        if not color:
            yield
            return
        previous = self._color
        self._apply_color(color)
        try:
            yield
        finally:
            self._apply_color(previous)

    # --- Cursor ---
    def set_title(self, title: str):
        if not self.interactive:
            raise TerminalError("console title is not supported here")
        try:
            self.write(colorama.ansi.set_title(title))
        except OSError as e:
            raise TerminalError(str(e)) from e

    def redraw_input(self, prompt: str, buffer: str, max_len: int):
        """Rewrites the input line in place, padding to erase stale characters."""
        if max_len <= 0 or len(buffer) > max_len:
            raise TerminalError("cursor position out of range")
        padding = max_len - len(buffer)
        # Only the last screen row of a wrapped prompt is rewritten
        column = len(prompt) % self.width()
        line = "\r" + prompt[len(prompt) - column:] + buffer + " " * padding
        if padding:
            line += Cursor.BACK(padding)
        try:
            self.write(line)
        except OSError as e:
            raise TerminalError(str(e)) from e

    @contextmanager
    def raw_keys(self) -> Iterator[Callable[[], KeyEvent]]:
        """Yields a function returning one KeyEvent per key press, without echo."""
        if os.name == 'nt':
            yield lambda: decode_windows_key(msvcrt.getwch)
            return

        try:
            fd = self.stdin.fileno()
            saved = termios.tcgetattr(fd)
            tty.setcbreak(fd)
        except (termios.error, OSError, ValueError) as e:
            raise TerminalError(f"raw input unavailable: {e}") from e

        decoder = codecs.getincrementaldecoder('utf-8')(errors='replace')

        def read_char() -> str:
            while True:
                data = os.read(fd, 1)
                if not data:
                    return ''
                ch = decoder.decode(data)
                if ch:
                    return ch

        def has_more() -> bool:
            ready, _, _ = select.select([fd], [], [], 0.05)
            return bool(ready)

        try:
            yield lambda: decode_key(read_char, has_more)
        finally:
            termios.tcsetattr(fd, termios.TCSADRAIN, saved)


# -----------------------------
# Typing Renderer
# -----------------------------
class TypingRenderer:
    """Writes text one character at a time with a human-looking rhythm."""

    def __init__(self, terminal: TerminalSession, rng: Optional[random.Random] = None,
                 sleep: Callable[[float], None] = time.sleep, animate: bool = True):
        self.terminal = terminal
        self.rng = rng or random.Random()
        self.sleep = sleep
        self.animate = animate

    def render(self, text: Optional[str], min_delay: int = 10, max_delay: int = 50,
               color: Optional[str] = None, newline: bool = True):
        if not text:
            return
        if not self.animate:
            self.write(text, color=color, newline=newline)
            return

        try:
            with self.terminal.colored(color):
                for c in text:
                    self.terminal.write(c)
                    sleep_ms(random_delay_ms(self.rng, (min_delay, max_delay)), self.sleep)
                    if c in SENTENCE_ENDINGS:
                        sleep_ms(random_delay_ms(self.rng, SENTENCE_PAUSE_MS), self.sleep)
                    elif c in CLAUSE_SEPARATORS:
                        sleep_ms(random_delay_ms(self.rng, CLAUSE_PAUSE_MS), self.sleep)
                if newline:
                    self.terminal.write("\n")
        except (OSError, TerminalError) as e:
            logger.error("Error during animated typing: %s", e)

    def write(self, text: str = "", color: Optional[str] = None, newline: bool = True):
        """Plain, non-animated output."""
        try:
            with self.terminal.colored(color):
                self.terminal.write(text + ("\n" if newline else ""))
        except (OSError, TerminalError) as e:
            logger.error("Error writing to terminal: %s", e)

    def pause(self, ms: int):
        sleep_ms(ms, self.sleep)
