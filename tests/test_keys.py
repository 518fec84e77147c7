"""Tests for raw input chunk decoding."""

from __future__ import annotations

import unittest

from lambdactl.menu import keys as k
from lambdactl.menu.keys import Key, decode_key, is_graphic


class DecodeKeyTests(unittest.TestCase):
    def test_control_and_meta_navigation(self) -> None:
        cases = {
            "\x0e": k.DOWN,
            "\x0a": k.DOWN,
            "\x1bn": k.DOWN,
            "\x1bj": k.DOWN,
            "\x10": k.UP,
            "\x0b": k.UP,
            "\x1bp": k.UP,
            "\x1bk": k.UP,
            "\x07": k.TOP,
            "\x1bg": k.TOP,
            "\x1bG": k.BOTTOM,
            "\x08": k.BACKSPACE,
            "\x7f": k.BACKSPACE,
        }
        for chunk, action in cases.items():
            with self.subTest(chunk=chunk):
                self.assertEqual(decode_key(chunk), Key(action))

    def test_submit_cancel_and_submit_text(self) -> None:
        self.assertEqual(decode_key("\r").action, k.SUBMIT)
        self.assertEqual(decode_key("\x1b\r").action, k.SUBMIT_TEXT)
        self.assertEqual(decode_key("\x1b\n").action, k.SUBMIT_TEXT)
        self.assertEqual(decode_key("\x04").action, k.CANCEL)
        self.assertEqual(decode_key("\x1b").action, k.CANCEL)

    def test_arrow_keys_navigate_and_other_sequences_are_ignored(self) -> None:
        self.assertEqual(decode_key("\x1b[A").action, k.UP)
        self.assertEqual(decode_key("\x1b[B").action, k.DOWN)
        self.assertEqual(decode_key("\x1bOB").action, k.DOWN)
        self.assertEqual(decode_key("\x1b[C").action, k.IGNORE)
        self.assertEqual(decode_key("\x1b[1;5D").action, k.IGNORE)

    def test_text_keeps_only_graphic_code_points(self) -> None:
        self.assertEqual(decode_key("foo"), Key(k.TEXT, "foo"))
        self.assertEqual(decode_key("a\tb\x01c"), Key(k.TEXT, "abc"))
        self.assertEqual(decode_key("naïve café"), Key(k.TEXT, "naïve café"))
        self.assertEqual(decode_key("\x03"), Key(k.IGNORE))

    def test_is_graphic(self) -> None:
        self.assertTrue(is_graphic(" "))
        self.assertTrue(is_graphic("/"))
        self.assertTrue(is_graphic("é"))
        self.assertFalse(is_graphic("\t"))
        self.assertFalse(is_graphic("\x1b"))
        self.assertFalse(is_graphic("\u200b"))


if __name__ == "__main__":
    unittest.main()
