"""
Use case: Получение ссылки на скачивание выбранного качества
"""
import logging
from typing import Optional, Union

from hyperdownload.errors import FetchError
from hyperdownload.models.lookup_response import DownloadLinkResponse, READY, ERROR, STALE
from hyperdownload.models.quality import NormalizedQuality
from hyperdownload.models.raw_format import MEDIA_TYPES
from hyperdownload.services.presentation_state import PresentationState
from hyperdownload.services.quality_fetcher import QualityFetcher

logger = logging.getLogger(__name__)

INVALID_REQUEST_MESSAGE = 'Invalid download request'
DOWNLOAD_FAILED_MESSAGE = 'Failed to get download link'


class ResolveDownloadUseCase:
    """Use case для ленивого получения ссылки на файл"""

    def __init__(self, fetcher: QualityFetcher):
        self.fetcher = fetcher

    @staticmethod
    def _find_quality(
        state: PresentationState,
        quality_id,
        media_type: str,
        quality_label: Optional[str]
    ) -> Optional[NormalizedQuality]:
        """Найти запись среди последних показанных качеств"""
        for quality in state.qualities:
            if str(quality.id) != str(quality_id) or quality.type != media_type:
                continue
            if quality_label is None or quality.quality == quality_label:
                return quality
        return None

    async def execute(
        self,
        video_id: str,
        quality_id: Union[int, str],
        media_type: str,
        is_short: bool = False,
        quality_label: Optional[str] = None,
        state: Optional[PresentationState] = None
    ) -> DownloadLinkResponse:
        """
        Получить ссылку на скачивание

        Args:
            video_id: ID видео
            quality_id: ID формата
            media_type: 'video' или 'audio'
            is_short: Видео является Shorts
            quality_label: Метка качества (различает синтетическую запись и исходное аудио)
            state: Состояние сессии (None - одноразовое)

        Returns:
            DownloadLinkResponse со статусом READY, ERROR или STALE
        """
        if not video_id or quality_id is None or quality_id == '' or media_type not in MEDIA_TYPES:
            return DownloadLinkResponse(
                status=ERROR,
                error='invalid_input',
                error_message=INVALID_REQUEST_MESSAGE
            )

        if state is None:
            state = PresentationState()

        quality = self._find_quality(state, quality_id, media_type, quality_label)
        if quality is None:
            quality = NormalizedQuality(
                id=quality_id,
                type=media_type,
                quality=quality_label or 'Unknown',
                format='',
                size_label='Unknown',
                bitrate_bps=0,
            )

        ticket = state.begin_download(quality)
        try:
            download_url = await self.fetcher.resolve(video_id, quality, is_short=is_short)
        except FetchError as e:
            logger.error(f"[download] Не удалось получить ссылку для {video_id}/{quality_id}: {e}")
            return DownloadLinkResponse(
                status=ERROR,
                error=e.code,
                error_message=DOWNLOAD_FAILED_MESSAGE,
                generation=ticket[1]
            )

        if not state.apply_download(quality, ticket, download_url):
            return DownloadLinkResponse(status=STALE, generation=ticket[1])

        logger.info(f"[download] Ссылка получена для {video_id}/{quality_id} ({quality.quality})")
        return DownloadLinkResponse(status=READY, download_url=download_url, generation=ticket[1])
