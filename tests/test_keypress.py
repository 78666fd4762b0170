import io
import unittest
from unittest.mock import ANY, Mock, patch

from keypress import Key, RawTerminal, read_key


class TestReadKey(unittest.TestCase):

    def test_arrow_keys(self):
        stream = io.StringIO("\x1b[A\x1b[B\x1b[C\x1b[D")
        keys = [read_key(stream) for _ in range(4)]
        self.assertEqual(keys, [Key.UP, Key.DOWN, Key.RIGHT, Key.LEFT])

    def test_letter_keys(self):
        stream = io.StringIO("wasdkhjlqryx")
        keys = [read_key(stream) for _ in range(12)]
        self.assertEqual(keys, [
            Key.UP, Key.LEFT, Key.DOWN, Key.RIGHT,
            Key.UP, Key.LEFT, Key.DOWN, Key.RIGHT,
            Key.QUIT, Key.RESTART, Key.YES, Key.OTHER,
        ])

    def test_application_mode_arrow_keys(self):
        stream = io.StringIO("\x1bOA\x1bOB\x1bOC\x1bOD")
        keys = [read_key(stream) for _ in range(4)]
        self.assertEqual(keys, [Key.UP, Key.DOWN, Key.RIGHT, Key.LEFT])
        self.assertIsNone(read_key(stream))

    def test_bare_arrow_bytes_keep_their_direction(self):
        stream = io.StringIO("ACD")
        keys = [read_key(stream) for _ in range(3)]
        self.assertEqual(keys, [Key.UP, Key.RIGHT, Key.LEFT])

    def test_uppercase_letters_are_not_folded(self):
        stream = io.StringIO("WQY")
        keys = [read_key(stream) for _ in range(3)]
        self.assertEqual(keys, [Key.OTHER, Key.OTHER, Key.OTHER])

    def test_lone_escape(self):
        self.assertEqual(read_key(io.StringIO("\x1bq")), Key.OTHER)

    def test_end_of_input(self):
        self.assertIsNone(read_key(io.StringIO("")))


class TestRawTerminal(unittest.TestCase):

    @patch("keypress.tty.setcbreak")
    @patch("keypress.termios.tcsetattr")
    @patch("keypress.termios.tcgetattr", return_value=["saved"])
    def test_settings_restored_once(self, tcgetattr, tcsetattr, setcbreak):
        stream = Mock()
        stream.fileno.return_value = 0
        with RawTerminal(stream) as terminal:
            self.assertTrue(terminal.active)
            setcbreak.assert_called_once_with(0)
            terminal.restore()
        self.assertFalse(terminal.active)
        tcsetattr.assert_called_once_with(0, ANY, ["saved"])


if __name__ == "__main__":
    unittest.main()
