"""
Утилиты для работы с URL и форматирования значений для показа
"""
import math
import re
from typing import Optional

_VIDEO_ID_PATTERNS = (
    # youtube.com/watch?v=ID
    re.compile(r'youtube\.com/watch\?(?:[^#]*&)?v=([^&\n?#]+)'),
    # youtu.be/ID
    re.compile(r'youtu\.be/([^&\n?#/]+)'),
    # youtube.com/shorts/ID
    re.compile(r'youtube\.com/shorts/([^&\n?#/]+)'),
)


def extract_video_id(url: str) -> Optional[str]:
    """
    Извлечь video_id из ссылки YouTube

    Поддерживаются формы watch?v=, youtu.be/ и shorts/.

    Args:
        url: Ссылка, введенная пользователем

    Returns:
        video_id или None, если ссылка не распознана
    """
    if not url:
        return None
    url = url.strip()
    for pattern in _VIDEO_ID_PATTERNS:
        match = pattern.search(url)
        if match:
            return match.group(1)
    return None


_BARE_VIDEO_ID = re.compile(r'^[A-Za-z0-9_-]+$')


def watch_url_for(video_id: Optional[str]) -> Optional[str]:
    """Ссылка watch?v= для голого video_id или None, если ID некорректен"""
    if not video_id or not _BARE_VIDEO_ID.match(video_id.strip()):
        return None
    return f"https://www.youtube.com/watch?v={video_id.strip()}"


def is_short_url(url: str) -> bool:
    """Является ли ссылка ссылкой на Shorts"""
    return bool(url) and '/shorts/' in url.lower()


def normalize_url(url: str) -> Optional[str]:
    """Каноническая ссылка youtube.com/watch?v=ID или None"""
    video_id = extract_video_id(url)
    if not video_id:
        return None
    return f"https://www.youtube.com/watch?v={video_id}"


def round_half_up(value: float) -> int:
    """Округление как Math.round: .5 всегда вверх"""
    return int(math.floor(value + 0.5))


def format_size_mb(size_bytes: Optional[float]) -> str:
    """Размер в байтах -> '12 MB' или 'Unknown'"""
    if size_bytes is None:
        return 'Unknown'
    return f"{round_half_up(size_bytes / 1024 / 1024)} MB"


def format_duration(seconds: float) -> str:
    """Секунды -> 'H:MM:SS' или 'M:SS', отрицательные значения считаются нулем"""
    seconds = max(int(seconds), 0)
    hours = seconds // 3600
    minutes = (seconds % 3600) // 60
    secs = seconds % 60

    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def format_views(views: float) -> str:
    """Количество просмотров -> '1.2M', '3.4K' или '12'"""
    if views >= 1000000:
        return f"{views / 1000000:.1f}M"
    elif views >= 1000:
        return f"{views / 1000:.1f}K"
    return str(int(views))
