"""
Модели данных сервиса качеств
"""
from .raw_format import RawFormatRecord, ParseError, ParseResult
from .quality import NormalizedQuality
from .video_metadata import VideoMetadata
from .lookup_response import LookupResponse, DownloadLinkResponse

__all__ = [
    'RawFormatRecord',
    'ParseError',
    'ParseResult',
    'NormalizedQuality',
    'VideoMetadata',
    'LookupResponse',
    'DownloadLinkResponse',
]
