"""
Use case: Поиск доступных качеств по ссылке на видео
"""
import logging
from typing import Optional

from hyperdownload.errors import FetchError
from hyperdownload.models.lookup_response import LookupResponse, READY, EMPTY, ERROR, STALE
from hyperdownload.services.presentation_state import PresentationState
from hyperdownload.services.quality_fetcher import QualityFetcher
from hyperdownload.utils.utils import extract_video_id, is_short_url

logger = logging.getLogger(__name__)

INVALID_URL_MESSAGE = 'Invalid YouTube URL'
EMPTY_URL_MESSAGE = 'Please enter a YouTube URL'
FETCH_FAILED_MESSAGE = 'Failed to fetch video qualities'
EMPTY_MESSAGE = 'No downloadable qualities found for this video'


class LookupVideoUseCase:
    """Use case для получения метаданных и списка качеств"""

    def __init__(self, fetcher: QualityFetcher):
        """
        Args:
            fetcher: Экземпляр QualityFetcher
        """
        self.fetcher = fetcher

    async def execute(self, url: str, state: Optional[PresentationState] = None) -> LookupResponse:
        """
        Найти качества для видео

        Алгоритм:
        1. Извлекает video_id из URL
        2. Выдает новое поколение запроса в сессии
        3. Параллельно получает метаданные и качества
        4. Применяет результат, только если поколение все еще последнее

        Args:
            url: Ссылка, введенная пользователем
            state: Состояние сессии (None - одноразовое)

        Returns:
            LookupResponse со статусом READY, EMPTY, ERROR или STALE
        """
        if not url or not url.strip():
            return LookupResponse(status=ERROR, error='invalid_input', error_message=EMPTY_URL_MESSAGE)

        video_id = extract_video_id(url)
        if not video_id:
            logger.info(f"[lookup] Не удалось извлечь video_id из {url!r}")
            return LookupResponse(status=ERROR, error='invalid_input', error_message=INVALID_URL_MESSAGE)

        if state is None:
            state = PresentationState()
        generation = state.begin_lookup()

        try:
            result = await self.fetcher.fetch(video_id, is_short=is_short_url(url))
        except FetchError as e:
            logger.error(f"[lookup] Ошибка при получении качеств для {video_id}: {e}")
            return LookupResponse(
                status=ERROR,
                error=e.code,
                error_message=FETCH_FAILED_MESSAGE,
                generation=generation
            )

        if not state.apply_lookup(generation, result.video_info, result.qualities):
            return LookupResponse(status=STALE, generation=generation)

        if not result.qualities:
            logger.warning(f"[lookup] API не вернул ни одного качества для {video_id}")
            return LookupResponse(
                status=EMPTY,
                video_info=result.video_info,
                error='empty_result',
                error_message=EMPTY_MESSAGE,
                generation=generation
            )

        return LookupResponse(
            status=READY,
            qualities=result.qualities,
            video_info=result.video_info,
            generation=generation
        )
