"""
QualityNormalizer - дедупликация, разметка и сортировка списка качеств
Чистая логика: без I/O, входной список не изменяется
"""
import logging
from typing import Dict, Iterable, List, Optional, Tuple

from hyperdownload.config import DEDUP_COARSE, DEDUP_FINE, DEDUP_POLICIES
from hyperdownload.models.quality import NormalizedQuality
from hyperdownload.models.raw_format import RawFormatRecord, VIDEO, AUDIO
from hyperdownload.utils.utils import format_size_mb, round_half_up

logger = logging.getLogger(__name__)

# Метка и формат синтетической записи "сжатое аудио"
HIGH_QUALITY_LABEL = 'High Quality'
COMPRESSED_AUDIO_FORMAT = 'MP3'
COMPRESSED_AUDIO_MAX_BITRATE = 320000
COMPRESSED_AUDIO_SIZE_RATIO = 0.8

RESOLUTION_ORDER = {
    '144p': 144,
    '240p': 240,
    '360p': 360,
    '480p': 480,
    '720p': 720,
    '1080p': 1080,
    '1440p': 1440,
    '2160p': 2160,
    '4320p': 4320,
}

# Порядок важен: audio/mp4 проверяется раньше общего mp4
_FORMAT_RULES = (
    ('mp4a', 'M4A'),
    ('audio/mp4', 'M4A'),
    ('mp4', 'MP4'),
    ('webm', 'WEBM'),
    ('opus', 'OPUS'),
    ('mp3', 'MP3'),
)
DEFAULT_FORMAT = 'MP4'


def format_label(mime: Optional[str]) -> str:
    """
    Короткий тег формата по MIME строке

    Правила проверяются по порядку, побеждает первое совпадение.
    Пустой или неизвестный MIME дает MP4.
    """
    if not mime:
        return DEFAULT_FORMAT
    mime = mime.lower()
    for needle, label in _FORMAT_RULES:
        if needle in mime:
            return label
    return DEFAULT_FORMAT


def resolution_rank(quality: str) -> int:
    """'1080p' -> 1080, неизвестные метки -> 0"""
    return RESOLUTION_ORDER.get(quality, 0)


class QualityNormalizer:
    """
    Превращает сырые записи API в упорядоченный список для показа

    Шаги:
    1. Дедупликация по ключу политики, остается запись с максимальным битрейтом
    2. Разметка формата по MIME
    3. Синтетическая запись "High Quality" MP3 на основе лучшего аудио
    4. Форматирование размера
    5. Сортировка: сначала видео (по разрешению, затем битрейту), затем аудио (по битрейту)
    """

    def __init__(self, dedup_policy: str = DEDUP_COARSE):
        """
        Args:
            dedup_policy: 'coarse' - ключ (type, quality),
                          'fine' - ключ (quality, type, mime)
        """
        if dedup_policy not in DEDUP_POLICIES:
            raise ValueError(f"Неизвестная политика дедупликации: {dedup_policy}")
        self.dedup_policy = dedup_policy

    def dedup_key(self, record: RawFormatRecord) -> Tuple[str, ...]:
        if self.dedup_policy == DEDUP_FINE:
            return (record.quality, record.type, record.mime)
        return (record.type, record.quality)

    def deduplicate(self, records: Iterable[RawFormatRecord]) -> List[RawFormatRecord]:
        """Оставить по одной записи на ключ, порядок групп - порядок первого появления"""
        best: Dict[Tuple[str, ...], RawFormatRecord] = {}
        for record in records:
            key = self.dedup_key(record)
            current = best.get(key)
            # Строгое сравнение: при равенстве остается первая запись
            if current is None or record.bitrate > current.bitrate:
                best[key] = record
        return list(best.values())

    @staticmethod
    def _to_normalized(record: RawFormatRecord) -> NormalizedQuality:
        return NormalizedQuality(
            id=record.id,
            type=record.type,
            quality=record.quality,
            format=format_label(record.mime),
            size_label=format_size_mb(record.size_bytes),
            bitrate_bps=record.bitrate,
            mime=record.mime,
        )

    @staticmethod
    def synthesize_compressed_audio(records: List[RawFormatRecord]) -> Optional[NormalizedQuality]:
        """
        Синтетическая запись MP3 на основе аудио с максимальным битрейтом

        Returns:
            NormalizedQuality или None, если аудио записей нет
        """
        source = None
        for record in records:
            if record.type != AUDIO:
                continue
            if source is None or record.bitrate > source.bitrate:
                source = record
        if source is None:
            return None

        size_bytes = source.size_bytes
        estimated = round_half_up(size_bytes * COMPRESSED_AUDIO_SIZE_RATIO) if size_bytes is not None else None

        return NormalizedQuality(
            id=source.id,
            type=AUDIO,
            quality=HIGH_QUALITY_LABEL,
            format=COMPRESSED_AUDIO_FORMAT,
            size_label=format_size_mb(estimated),
            bitrate_bps=min(COMPRESSED_AUDIO_MAX_BITRATE, source.bitrate),
            mime=source.mime,
        )

    @staticmethod
    def sort(qualities: List[NormalizedQuality]) -> List[NormalizedQuality]:
        """Видео перед аудио; сортировка стабильная"""
        videos = [q for q in qualities if q.type == VIDEO]
        audios = [q for q in qualities if q.type != VIDEO]
        videos.sort(key=lambda q: (resolution_rank(q.quality), q.bitrate_bps), reverse=True)
        audios.sort(key=lambda q: q.bitrate_bps, reverse=True)
        return videos + audios

    def normalize(self, records: Iterable[RawFormatRecord]) -> List[NormalizedQuality]:
        """
        Полный цикл нормализации

        Args:
            records: Сырые записи (после parse_raw_records)

        Returns:
            Упорядоченный список NormalizedQuality
        """
        records = list(records)
        survivors = self.deduplicate(records)
        qualities = [self._to_normalized(record) for record in survivors]

        compressed = self.synthesize_compressed_audio(survivors)
        if compressed is not None:
            qualities.append(compressed)

        result = self.sort(qualities)
        logger.debug(
            f"[normalizer] {len(records)} записей -> {len(result)} качеств "
            f"(политика {self.dedup_policy})"
        )
        return result
