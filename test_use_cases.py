"""
Тесты для use case'ов и защиты от устаревших ответов
"""
import asyncio
import unittest
from unittest.mock import AsyncMock, MagicMock

from hyperdownload.errors import RequestFailed, TransportError, EmptyResult
from hyperdownload.models.quality import NormalizedQuality
from hyperdownload.models.video_metadata import VideoMetadata
from hyperdownload.services.presentation_state import PresentationState, RequestGenerationTracker, SessionRegistry
from hyperdownload.services.quality_fetcher import FetchResult
from hyperdownload.use_cases import LookupVideoUseCase, ResolveDownloadUseCase

URL = "https://www.youtube.com/watch?v=abc"


def make_info(video_id='abc', title='Clip', is_short=False):
    return VideoMetadata(
        title=title,
        thumbnail_url='thumb',
        duration_label='1:00',
        views_label='1 views',
        video_id=video_id,
        is_short=is_short,
    )


def make_quality(id=137, type='video', quality='1080p'):
    return NormalizedQuality(id=id, type=type, quality=quality, format='MP4', size_label='1 MB', bitrate_bps=1000)


class TestRequestGenerationTracker(unittest.TestCase):

    def test_monotonic(self):
        tracker = RequestGenerationTracker()
        self.assertEqual(tracker.current(), 0)
        first = tracker.issue()
        second = tracker.issue()

        self.assertLess(first, second)
        self.assertFalse(tracker.is_current('lookup', first))
        self.assertTrue(tracker.is_current('lookup', second))

    def test_scopes_independent(self):
        tracker = RequestGenerationTracker()
        tracker.issue('a')
        tracker.issue('a')
        self.assertEqual(tracker.issue('b'), 1)


class TestSessionRegistry(unittest.TestCase):

    def test_same_session(self):
        registry = SessionRegistry()
        self.assertIs(registry.get('s1'), registry.get('s1'))
        self.assertEqual(len(registry), 1)

    def test_anonymous_not_stored(self):
        registry = SessionRegistry()
        self.assertIsNot(registry.get(None), registry.get(None))
        self.assertEqual(len(registry), 0)

    def test_least_recently_used_evicted(self):
        registry = SessionRegistry(max_sessions=2)
        first = registry.get('s1')
        registry.get('s2')
        self.assertIs(registry.get('s1'), first)

        registry.get('s3')

        self.assertEqual(len(registry), 2)
        self.assertIn('s1', registry)
        self.assertNotIn('s2', registry)

    def test_expired_sessions_removed(self):
        """Сессии без обращений дольше TTL удаляются"""
        now = [0.0]
        registry = SessionRegistry(ttl_seconds=60, clock=lambda: now[0])
        old = registry.get('s1')
        registry.get('s2')

        now[0] = 30.0
        registry.get('s2')
        now[0] = 70.0
        registry.get('s3')

        self.assertNotIn('s1', registry)
        self.assertIn('s2', registry)
        self.assertEqual(len(registry), 2)
        self.assertIsNot(registry.get('s1'), old)

    def test_many_sessions_stay_bounded(self):
        registry = SessionRegistry(max_sessions=10)
        for i in range(100):
            registry.get(f"s{i}")
        self.assertEqual(len(registry), 10)


class TestPresentationState(unittest.TestCase):

    def test_new_lookup_drops_download_counters(self):
        state = PresentationState()
        state.apply_lookup(state.begin_lookup(), make_info(), [])
        for i in range(5):
            state.begin_download(make_quality(id=i))
        self.assertEqual(len(state.tracker), 6)

        state.begin_lookup()

        self.assertEqual(len(state.tracker), 1)
        self.assertEqual(state.tracker.current('lookup'), 2)

    def test_download_started_before_lookup_applied(self):
        """Запрос ссылки между началом и применением поиска не считается устаревшим"""
        state = PresentationState()
        generation = state.begin_lookup()
        quality = make_quality()
        ticket = state.begin_download(quality)
        state.apply_lookup(generation, make_info(), [quality])

        self.assertTrue(state.apply_download(quality, ticket, 'https://cdn.test/file.mp4'))


class TestLookupVideoUseCase(unittest.IsolatedAsyncioTestCase):
    """Тесты поиска качеств"""

    def setUp(self):
        self.fetcher = MagicMock()
        self.fetcher.fetch = AsyncMock(return_value=FetchResult(
            video_info=make_info(),
            qualities=[make_quality()],
        ))
        self.use_case = LookupVideoUseCase(self.fetcher)

    async def test_ready(self):
        state = PresentationState()
        response = await self.use_case.execute(URL, state)

        self.assertTrue(response.is_ready())
        self.assertEqual(response.generation, 1)
        self.assertEqual(state.qualities, [make_quality()])
        self.assertEqual(state.video_info.title, 'Clip')
        self.fetcher.fetch.assert_awaited_once_with('abc', is_short=False)

    async def test_shorts_flag(self):
        await self.use_case.execute("https://www.youtube.com/shorts/xyz")
        self.fetcher.fetch.assert_awaited_once_with('xyz', is_short=True)

    async def test_invalid_url(self):
        response = await self.use_case.execute("https://example.com/video")

        self.assertTrue(response.is_error())
        self.assertEqual(response.error, 'invalid_input')
        self.fetcher.fetch.assert_not_awaited()

    async def test_blank_url(self):
        response = await self.use_case.execute("   ")
        self.assertEqual(response.error, 'invalid_input')

    async def test_fetch_errors(self):
        for error, code in (
            (RequestFailed(500), 'request_failed'),
            (TransportError('dns'), 'transport_error'),
        ):
            self.fetcher.fetch = AsyncMock(side_effect=error)
            response = await LookupVideoUseCase(self.fetcher).execute(URL)

            self.assertTrue(response.is_error())
            self.assertEqual(response.error, code)
            self.assertEqual(response.error_message, 'Failed to fetch video qualities')

    async def test_empty(self):
        self.fetcher.fetch = AsyncMock(return_value=FetchResult(video_info=make_info(), qualities=[]))

        response = await LookupVideoUseCase(self.fetcher).execute(URL)

        self.assertTrue(response.is_empty())
        self.assertEqual(response.error, 'empty_result')
        self.assertEqual(response.video_info.video_id, 'abc')

    async def test_stale_lookup_discarded(self):
        """Ответ на старый поиск не перезаписывает результат нового"""
        state = PresentationState()
        slow_started = asyncio.Event()
        release_slow = asyncio.Event()

        async def fetch(video_id, is_short=False):
            if video_id == 'old':
                slow_started.set()
                await release_slow.wait()
            return FetchResult(video_info=make_info(video_id, title=video_id), qualities=[make_quality()])

        self.fetcher.fetch = fetch
        use_case = LookupVideoUseCase(self.fetcher)

        old_task = asyncio.create_task(use_case.execute("https://youtu.be/old", state))
        await slow_started.wait()
        new_response = await use_case.execute("https://youtu.be/new", state)
        release_slow.set()
        old_response = await old_task

        self.assertTrue(new_response.is_ready())
        self.assertTrue(old_response.is_stale())
        self.assertEqual(state.video_info.title, 'new')


class TestResolveDownloadUseCase(unittest.IsolatedAsyncioTestCase):
    """Тесты получения ссылки"""

    def setUp(self):
        self.fetcher = MagicMock()
        self.fetcher.resolve = AsyncMock(return_value='https://cdn.test/file.mp4')
        self.use_case = ResolveDownloadUseCase(self.fetcher)

    async def test_ready_uses_known_quality(self):
        state = PresentationState()
        known = make_quality(140, 'audio', 'High Quality')
        state.apply_lookup(state.begin_lookup(), make_info(), [make_quality(140, 'audio', '128kbps'), known])

        response = await self.use_case.execute('abc', '140', 'audio', quality_label='High Quality', state=state)

        self.assertTrue(response.is_ready())
        self.assertEqual(response.download_url, 'https://cdn.test/file.mp4')
        self.fetcher.resolve.assert_awaited_once_with('abc', known, is_short=False)
        self.assertEqual(state.download_urls[('audio', 'High Quality')], 'https://cdn.test/file.mp4')

    async def test_unknown_quality_still_resolved(self):
        response = await self.use_case.execute('abc', 22, 'video', is_short=True)

        self.assertTrue(response.is_ready())
        args, kwargs = self.fetcher.resolve.call_args
        self.assertEqual(args[1].id, 22)
        self.assertTrue(kwargs['is_short'])

    async def test_invalid_request(self):
        for args in (('', 1, 'video'), ('abc', None, 'video'), ('abc', 1, 'subtitles')):
            response = await self.use_case.execute(*args)
            self.assertEqual(response.error, 'invalid_input', args)
        self.fetcher.resolve.assert_not_awaited()

    async def test_fetch_error(self):
        self.fetcher.resolve = AsyncMock(side_effect=EmptyResult('no url'))

        response = await ResolveDownloadUseCase(self.fetcher).execute('abc', 1, 'video')

        self.assertTrue(response.is_error())
        self.assertEqual(response.error, 'empty_result')

    async def test_download_after_new_lookup_is_stale(self):
        state = PresentationState()
        state.apply_lookup(state.begin_lookup(), make_info(), [make_quality()])

        async def resolve(video_id, quality, is_short=False):
            # Пользователь успел начать новый поиск
            state.begin_lookup()
            return 'https://cdn.test/old.mp4'

        self.fetcher.resolve = resolve
        response = await ResolveDownloadUseCase(self.fetcher).execute('abc', 137, 'video', state=state)

        self.assertTrue(response.is_stale())
        self.assertEqual(state.download_urls, {})


if __name__ == '__main__':
    unittest.main(verbosity=2)
