# keypress.py
# Unbuffered single-key input for the terminal front end.

from enum import Enum
from typing import Optional, TextIO
import sys
import termios
import tty


class Key(Enum):
    """Keys the interaction loop reacts to."""
    UP = 1
    DOWN = 2
    LEFT = 3
    RIGHT = 4
    QUIT = 5
    RESTART = 6
    YES = 7
    OTHER = 8

# Arrow keys arrive as ESC [ A..D, or ESC O A..D in application cursor mode.
# A bare final byte is treated the same way.
_ARROWS = {"A": Key.UP, "B": Key.DOWN, "C": Key.RIGHT, "D": Key.LEFT}

_LETTERS = {
    # wasd
    "w": Key.UP, "a": Key.LEFT, "s": Key.DOWN, "d": Key.RIGHT,
    # vim
    "k": Key.UP, "h": Key.LEFT, "j": Key.DOWN, "l": Key.RIGHT,
    "q": Key.QUIT,
    "r": Key.RESTART,
    "y": Key.YES,
}


class RawTerminal:
    """
    Puts stdin in cbreak mode (no line buffering, no echo) while active.

    The saved settings are held on the instance, so restore() can be called
    from a signal handler as well as from __exit__.
    """

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream if stream is not None else sys.stdin
        self.fd = self.stream.fileno()
        self._saved = None

    def __enter__(self) -> "RawTerminal":
        self._saved = termios.tcgetattr(self.fd)
        tty.setcbreak(self.fd)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.restore()

    @property
    def active(self) -> bool:
        return self._saved is not None

    def restore(self) -> None:
        if self._saved is not None:
            termios.tcsetattr(self.fd, termios.TCSADRAIN, self._saved)
            self._saved = None


def decode_key(ch: str, stream: TextIO) -> Key:
    """Maps one character read from the stream (plus any escape tail) to a Key."""
    if ch == "\x1b":
        if stream.read(1) in ("[", "O"):
            return _ARROWS.get(stream.read(1), Key.OTHER)
        return Key.OTHER
    if ch in _ARROWS:
        return _ARROWS[ch]
    return _LETTERS.get(ch, Key.OTHER)


def read_key(stream: Optional[TextIO] = None) -> Optional[Key]:
    """
    Blocks for one key press.
    Returns:
        Optional[Key]: The decoded key, or None at end of input.
    """
    stream = stream if stream is not None else sys.stdin
    ch = stream.read(1)
    if not ch:
        return None
    return decode_key(ch, stream)
