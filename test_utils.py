"""
Тесты для утилит URL и форматирования
"""
import unittest

from hyperdownload.utils import (
    extract_video_id,
    is_short_url,
    normalize_url,
    round_half_up,
    format_size_mb,
    format_duration,
    format_views,
    watch_url_for
)


class TestExtractVideoId(unittest.TestCase):
    """Тесты извлечения video_id"""

    def test_watch_url(self):
        self.assertEqual(extract_video_id("https://www.youtube.com/watch?v=dQw4w9WgXcQ"), "dQw4w9WgXcQ")

    def test_watch_url_with_params(self):
        self.assertEqual(
            extract_video_id("https://www.youtube.com/watch?feature=share&v=dQw4w9WgXcQ&t=42"),
            "dQw4w9WgXcQ"
        )

    def test_short_link(self):
        self.assertEqual(extract_video_id("https://youtu.be/dQw4w9WgXcQ?si=xyz"), "dQw4w9WgXcQ")

    def test_shorts(self):
        self.assertEqual(extract_video_id("https://youtube.com/shorts/abc123XYZ_-?feature=share"), "abc123XYZ_-")

    def test_invalid(self):
        self.assertIsNone(extract_video_id("https://vimeo.com/12345"))
        self.assertIsNone(extract_video_id("https://www.youtube.com/feed/trending"))
        self.assertIsNone(extract_video_id(""))

    def test_is_short_url(self):
        self.assertTrue(is_short_url("https://www.youtube.com/shorts/abc"))
        self.assertFalse(is_short_url("https://www.youtube.com/watch?v=abc"))

    def test_watch_url_for(self):
        self.assertEqual(watch_url_for(' dQw4w9WgXcQ '), 'https://www.youtube.com/watch?v=dQw4w9WgXcQ')
        self.assertIsNone(watch_url_for('a/b'))
        self.assertIsNone(watch_url_for(''))
        self.assertIsNone(watch_url_for(None))

    def test_normalize_url(self):
        self.assertEqual(normalize_url("youtu.be/abc"), "https://www.youtube.com/watch?v=abc")
        self.assertIsNone(normalize_url("not a url"))


class TestFormatting(unittest.TestCase):
    """Тесты форматирования значений"""

    def test_round_half_up(self):
        self.assertEqual(round_half_up(2.5), 3)
        self.assertEqual(round_half_up(3.5), 4)
        self.assertEqual(round_half_up(2.49), 2)

    def test_format_size_mb(self):
        self.assertEqual(format_size_mb(104857600), '100 MB')
        self.assertEqual(format_size_mb(0), '0 MB')
        self.assertEqual(format_size_mb(None), 'Unknown')

    def test_format_duration(self):
        self.assertEqual(format_duration(0), '0:00')
        self.assertEqual(format_duration(65), '1:05')
        self.assertEqual(format_duration(3723), '1:02:03')

    def test_negative_duration(self):
        self.assertEqual(format_duration(-5), '0:00')
        self.assertEqual(format_duration(-3723), '0:00')

    def test_format_views(self):
        self.assertEqual(format_views(999), '999')
        self.assertEqual(format_views(1500), '1.5K')
        self.assertEqual(format_views(2500000), '2.5M')


if __name__ == '__main__':
    unittest.main(verbosity=2)
