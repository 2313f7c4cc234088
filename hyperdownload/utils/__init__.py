"""
Утилиты для работы с URL и форматирования
"""
from .utils import (
    extract_video_id,
    is_short_url,
    normalize_url,
    watch_url_for,
    round_half_up,
    format_size_mb,
    format_duration,
    format_views
)

__all__ = [
    'extract_video_id',
    'is_short_url',
    'normalize_url',
    'watch_url_for',
    'round_half_up',
    'format_size_mb',
    'format_duration',
    'format_views'
]
