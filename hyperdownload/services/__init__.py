"""
Сервисы: клиент внешнего API, разбор ответов, нормализация качеств
"""
from .api_client import RapidApiClient
from .normalizer import QualityNormalizer
from .parsing import parse_raw_record, parse_raw_records, parse_video_metadata
from .presentation_state import PresentationState, RequestGenerationTracker, SessionRegistry
from .quality_fetcher import QualityFetcher, FetchResult

__all__ = [
    'RapidApiClient',
    'QualityNormalizer',
    'parse_raw_record',
    'parse_raw_records',
    'parse_video_metadata',
    'PresentationState',
    'RequestGenerationTracker',
    'SessionRegistry',
    'QualityFetcher',
    'FetchResult',
]
