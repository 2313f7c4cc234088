"""
LookupResponse / DownloadLinkResponse - ответы use case'ов слою представления
"""
from dataclasses import dataclass, field
from typing import Optional, List

from .quality import NormalizedQuality
from .video_metadata import VideoMetadata

READY = 'READY'
EMPTY = 'EMPTY'
ERROR = 'ERROR'
STALE = 'STALE'


@dataclass
class LookupResponse:
    """
    Ответ на поиск качеств по URL

    Attributes:
        status: Статус обработки:
            - READY: Качества получены
            - EMPTY: API не вернул ни одного качества
            - ERROR: Ошибка ввода или запроса
            - STALE: Пришел ответ на устаревший запрос, результат отброшен
        qualities: Отсортированный список качеств (если READY)
        video_info: Метаданные видео (если READY или EMPTY)
        error: Код ошибки (если ERROR)
        error_message: Сообщение для пользователя (если ERROR)
        generation: Номер запроса внутри сессии
    """
    status: str
    qualities: List[NormalizedQuality] = field(default_factory=list)
    video_info: Optional[VideoMetadata] = None
    error: Optional[str] = None
    error_message: Optional[str] = None
    generation: Optional[int] = None

    def is_ready(self) -> bool:
        return self.status == READY

    def is_empty(self) -> bool:
        return self.status == EMPTY

    def is_error(self) -> bool:
        return self.status == ERROR

    def is_stale(self) -> bool:
        return self.status == STALE


@dataclass
class DownloadLinkResponse:
    """Ответ на запрос ссылки скачивания для выбранного качества"""
    status: str  # READY | ERROR | STALE
    download_url: Optional[str] = None
    error: Optional[str] = None
    error_message: Optional[str] = None
    generation: Optional[int] = None

    def is_ready(self) -> bool:
        return self.status == READY

    def is_error(self) -> bool:
        return self.status == ERROR

    def is_stale(self) -> bool:
        return self.status == STALE
