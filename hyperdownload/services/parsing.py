"""
Разбор ответов внешнего API
Единственное место, где недоверенный JSON превращается в модели.
Схема API менялась несколько раз, поэтому все поля читаются с запасными вариантами.
"""
import logging
from typing import Any, Dict, List, Optional

from hyperdownload.models.raw_format import (
    RawFormatRecord,
    ParseError,
    ParseResult,
    MEDIA_TYPES,
    coerce_number,
)
from hyperdownload.models.video_metadata import VideoMetadata
from hyperdownload.utils.utils import format_duration, format_views

logger = logging.getLogger(__name__)

# Ключи, под которыми разные ревизии API прятали список форматов
_LIST_KEYS = ('qualities', 'formats', 'data')


def parse_raw_record(item: Any) -> ParseResult:
    """
    Разобрать одну запись о формате

    Args:
        item: Элемент JSON массива от get_available_quality

    Returns:
        ParseResult с record или с error
    """
    if not isinstance(item, dict):
        return ParseResult(error=ParseError.NOT_AN_OBJECT)

    format_id = item.get('id')
    if format_id is None or format_id == '':
        return ParseResult(error=ParseError.MISSING_ID)

    media_type = str(item.get('type') or '').lower()
    if media_type not in MEDIA_TYPES:
        return ParseResult(error=ParseError.UNKNOWN_TYPE)

    quality = item.get('quality') or item.get('format_note') or 'Unknown'
    bitrate = coerce_number(item.get('bitrate')) or 0
    mime = item.get('mime') or ''
    if not isinstance(mime, str):
        mime = ''

    return ParseResult(record=RawFormatRecord(
        id=format_id,
        type=media_type,
        quality=str(quality),
        bitrate=bitrate,
        mime=mime,
        size=item.get('size'),
    ))


def parse_raw_records(payload: Any) -> List[RawFormatRecord]:
    """
    Разобрать весь ответ get_available_quality

    Принимает массив или объект, в котором массив лежит под одним из ключей
    qualities / formats / data. Некорректные записи пропускаются.
    """
    items = payload
    if isinstance(payload, dict):
        items = None
        for key in _LIST_KEYS:
            if isinstance(payload.get(key), list):
                items = payload[key]
                break

    if not isinstance(items, list):
        logger.warning(f"[parser] Неожиданный формат списка качеств: {type(payload).__name__}")
        return []

    records = []
    skipped = 0
    for item in items:
        result = parse_raw_record(item)
        if result.ok:
            records.append(result.record)
        else:
            skipped += 1
            logger.debug(f"[parser] Пропускаю запись ({result.error.value}): {item!r}")

    if skipped:
        logger.warning(f"[parser] Пропущено некорректных записей: {skipped} из {len(items)}")
    return records


def _pick_thumbnail(value: Any) -> Optional[str]:
    """Строка как есть; из списка вариантов - самый большой по площади"""
    if isinstance(value, str):
        return value or None

    if isinstance(value, list):
        variants = [v for v in value if isinstance(v, dict) and v.get('url')]
        if not variants:
            return None
        variants.sort(
            key=lambda v: (coerce_number(v.get('width')) or 0) * (coerce_number(v.get('height')) or 0),
            reverse=True
        )
        return variants[0]['url']

    return None


def _is_number_text(value: Any) -> bool:
    """Строка, которую float() разбирает (включая NaN и inf)"""
    if not isinstance(value, str):
        return False
    try:
        float(value.strip())
    except ValueError:
        return False
    return True


def _duration_label(value: Any) -> str:
    if isinstance(value, str) and value.strip() and not _is_number_text(value):
        # Уже отформатировано на стороне API
        return value.strip()
    seconds = coerce_number(value)
    if seconds is None:
        return '0:00'
    return format_duration(seconds)


def _views_label(value: Any) -> str:
    views = coerce_number(value)
    if views is not None:
        return f"{format_views(views)} views"
    if isinstance(value, str) and value.strip() and not _is_number_text(value):
        # Уже отформатировано: '1.2M' или '1.2M views'
        text = value.strip()
        return text if text.endswith('views') else f"{text} views"
    return '0 views'


_TRUE_STRINGS = ('true', '1', 'yes')
_FALSE_STRINGS = ('false', '0', 'no', '')


def _parse_flag(value: Any) -> Optional[bool]:
    """bool, число или строка 'true'/'false' -> bool; непонятное значение -> None"""
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        number = coerce_number(value)
        return bool(number) if number is not None else None
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
    return None


def parse_video_metadata(payload: Any, video_id: str, is_short: bool = False) -> VideoMetadata:
    """
    Собрать VideoMetadata из ответа get-video-info

    Args:
        payload: JSON ответ (любой формы)
        video_id: ID видео из URL
        is_short: Признак Shorts из URL (используется, если API его не вернул)

    Returns:
        VideoMetadata с подставленными значениями по умолчанию
    """
    data: Dict[str, Any] = payload if isinstance(payload, dict) else {}

    thumbnail = (
        _pick_thumbnail(data.get('thumbnail'))
        or _pick_thumbnail(data.get('thumbnails'))
        or f"https://img.youtube.com/vi/{video_id}/maxresdefault.jpg"
    )

    views = data.get('view_count')
    if views is None:
        views = data.get('viewCount')

    short_flag = _parse_flag(data.get('isShort'))
    if short_flag is None:
        short_flag = _parse_flag(data.get('is_short'))

    return VideoMetadata(
        title=data.get('title') or 'Unknown Title',
        thumbnail_url=thumbnail,
        duration_label=_duration_label(data.get('duration')),
        views_label=_views_label(views),
        video_id=video_id,
        is_short=short_flag if short_flag is not None else is_short,
    )
