"""Tests for the tray icon images."""

import unittest

from linkfixer.ui.icons import make_icon


class TestIcons(unittest.TestCase):
    def test_size_and_mode(self):
        img = make_icon(True)
        self.assertEqual(img.size, (64, 64))
        self.assertEqual(img.mode, 'RGBA')

    def test_enabled_and_disabled_differ(self):
        self.assertNotEqual(make_icon(True).tobytes(), make_icon(False).tobytes())

    def test_images_are_cached(self):
        self.assertIs(make_icon(False), make_icon(False))
        self.assertEqual(make_icon(True, size=32).size, (32, 32))


if __name__ == '__main__':
    unittest.main()
