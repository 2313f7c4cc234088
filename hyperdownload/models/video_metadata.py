"""
VideoMetadata - человекочитаемая информация о видео
"""
from dataclasses import dataclass
from typing import Dict, Any


@dataclass(frozen=True)
class VideoMetadata:
    """
    Метаданные видео для показа рядом со списком качеств

    Attributes:
        title: Название видео
        thumbnail_url: URL превью
        duration_label: Длительность ('3:45', '1:02:03')
        views_label: Просмотры ('1.2M views')
        video_id: ID видео
        is_short: Является ли видео Shorts (влияет на endpoint скачивания)
    """
    title: str
    thumbnail_url: str
    duration_label: str
    views_label: str
    video_id: str
    is_short: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            'title': self.title,
            'thumbnail': self.thumbnail_url,
            'duration': self.duration_label,
            'views': self.views_label,
            'videoId': self.video_id,
            'isShort': self.is_short,
        }
