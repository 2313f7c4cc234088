"""
QualityFetcher - получение списка качеств и метаданных видео
Граница между недоверенной схемой внешнего API и остальной системой
"""
import asyncio
import logging
from dataclasses import dataclass, field
from typing import List

from hyperdownload.models.quality import NormalizedQuality
from hyperdownload.models.raw_format import RawFormatRecord
from hyperdownload.models.video_metadata import VideoMetadata
from hyperdownload.services.api_client import RapidApiClient
from hyperdownload.services.normalizer import QualityNormalizer
from hyperdownload.services.parsing import parse_raw_records, parse_video_metadata

logger = logging.getLogger(__name__)


@dataclass
class FetchResult:
    """Результат поиска: метаданные и уже нормализованный список качеств"""
    video_info: VideoMetadata
    qualities: List[NormalizedQuality] = field(default_factory=list)
    raw_records: List[RawFormatRecord] = field(default_factory=list)


class QualityFetcher:
    """
    Сервис получения качеств

    Ответственность:
    - Параллельный запрос метаданных и списка форматов
    - Разбор ответов через parsing
    - Нормализация через QualityNormalizer
    - Ленивое получение ссылки на скачивание для выбранного качества

    НЕ делает:
    - Не повторяет запросы
    - Не отменяет запросы
    - Не хранит состояние между поисками
    """

    def __init__(self, client: RapidApiClient, normalizer: QualityNormalizer):
        self.client = client
        self.normalizer = normalizer

    async def fetch(self, video_id: str, is_short: bool = False) -> FetchResult:
        """
        Получить метаданные и качества видео

        Оба запроса выполняются параллельно; ошибка любого из них
        прерывает весь поиск.

        Args:
            video_id: ID видео
            is_short: Признак Shorts, определенный по URL

        Returns:
            FetchResult

        Raises:
            RequestFailed, TransportError
        """
        logger.info(f"[fetcher] Запрашиваю метаданные и качества для {video_id}")
        info_payload, quality_payload = await asyncio.gather(
            self.client.get_video_info(video_id),
            self.client.get_available_quality(video_id),
        )

        video_info = parse_video_metadata(info_payload, video_id, is_short=is_short)
        raw_records = parse_raw_records(quality_payload)
        qualities = self.normalizer.normalize(raw_records)

        logger.info(
            f"[fetcher] {video_id}: получено {len(raw_records)} форматов, "
            f"после нормализации {len(qualities)}"
        )
        return FetchResult(video_info=video_info, qualities=qualities, raw_records=raw_records)

    async def resolve(self, video_id: str, quality: NormalizedQuality, is_short: bool = False) -> str:
        """
        Получить ссылку на скачивание для выбранного качества

        Raises:
            RequestFailed, TransportError, EmptyResult
        """
        logger.info(
            f"[fetcher] Запрашиваю ссылку: video_id={video_id}, quality_id={quality.id}, "
            f"type={quality.type}, is_short={is_short}"
        )
        return await self.client.resolve_download_url(
            video_id,
            quality.id,
            quality.type,
            is_short=is_short and quality.is_video,
        )
