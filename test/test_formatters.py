#!/usr/bin/env python3
import os
import re
import sys
import unittest
from datetime import datetime, timedelta, timezone

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from telegram_proxy.formatters import (
    FormattedMessage,
    format_message,
    format_rfc3339,
    markdown_bold,
    markdown_safe,
)
from telegram_proxy.notification import Notification


def unescape(text):
    return re.sub(r'\\(.)', r'\1', text, flags=re.DOTALL)


SAMPLES = [
    "",
    "disk full",
    "a_b*c[d](e)~`>#+-=|{}.!",
    "back\\slash",
    "line\nbreak\ttab",
    "\x00nul and \x7f del",
    "привет мир",
    "🔥 emoji ✅",
    "ção € ß",
]


class TestMarkdownSafe(unittest.TestCase):
    def test_escapes_every_codepoint_in_range(self):
        for s in SAMPLES:
            out = markdown_safe(s)
            i = 0
            for ch in s:
                with self.subTest(sample=s, ch=ch):
                    if 1 <= ord(ch) <= 126:
                        self.assertEqual(out[i], '\\')
                        self.assertEqual(out[i + 1], ch)
                        i += 2
                    else:
                        self.assertEqual(out[i], ch)
                        i += 1
            self.assertEqual(i, len(out))

    def test_unescape_reconstructs_input(self):
        for s in SAMPLES:
            with self.subTest(sample=s):
                self.assertEqual(unescape(markdown_safe(s)), s)

    def test_boundaries(self):
        self.assertEqual(markdown_safe('\x00'), '\x00')
        self.assertEqual(markdown_safe('\x01'), '\\\x01')
        self.assertEqual(markdown_safe('~'), '\\~')
        self.assertEqual(markdown_safe('\x7f'), '\x7f')

    def test_bold_wraps_escaped_text(self):
        self.assertEqual(markdown_bold("OK!"), "*\\O\\K\\!*")


class TestFormatRFC3339(unittest.TestCase):
    def test_utc_renders_z(self):
        self.assertEqual(format_rfc3339(datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)), "2024-01-02T03:04:05Z")

    def test_zero_offset_renders_z(self):
        dt = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone(timedelta(0)))
        self.assertEqual(format_rfc3339(dt), "2024-01-02T03:04:05Z")

    def test_numeric_offsets(self):
        dt = datetime(2024, 1, 2, 3, 4, 5, 999, tzinfo=timezone(timedelta(hours=5, minutes=30)))
        self.assertEqual(format_rfc3339(dt), "2024-01-02T03:04:05+05:30")
        dt = datetime(999, 1, 2, 3, 4, 5, tzinfo=timezone(-timedelta(hours=3)))
        self.assertEqual(format_rfc3339(dt), "0999-01-02T03:04:05-03:00")


class TestFormatMessage(unittest.TestCase):
    def setUp(self):
        self.notification = Notification(
            check_id="1",
            check_name="disk",
            level="critical",
            message="disk full",
            time=datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
            type="alert",
        )

    def test_composition(self):
        msg = format_message(self.notification)
        expected = (
            "*\\C\\R\\I\\T\\I\\C\\A\\L*"
            " on \\d\\i\\s\\k"
            " at \\2\\0\\2\\4\\-\\0\\1\\-\\0\\2\\T\\0\\3\\:\\0\\4\\:\\0\\5\\Z"
            "\n\n\\d\\i\\s\\k\\ \\f\\u\\l\\l"
        )
        self.assertEqual(msg.text, expected)
        self.assertEqual(msg.parse_mode, "MarkdownV2")

    def test_unescaped_fields_match_scenario(self):
        msg = format_message(self.notification)
        head, body = msg.text.split("\n\n", 1)
        level_part, rest = head[1:].split("*", 1)
        self.assertEqual(unescape(level_part), "CRITICAL")
        self.assertEqual(rest, " on " + markdown_safe("disk") + " at " + markdown_safe("2024-01-02T03:04:05Z"))
        self.assertEqual(unescape(body), "disk full")

    def test_uppercase_is_unicode_aware(self):
        n = Notification("1", "c", "straße", "m", self.notification.time, "t")
        self.assertTrue(format_message(n).text.startswith("*\\S\\T\\R\\A\\S\\S\\E*"))

    def test_is_pure(self):
        self.assertEqual(format_message(self.notification), format_message(self.notification))
        self.assertIsInstance(format_message(self.notification), FormattedMessage)


if __name__ == '__main__':
    unittest.main()
