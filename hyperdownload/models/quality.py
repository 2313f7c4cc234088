"""
NormalizedQuality - запись о качестве, готовая к показу пользователю
"""
from dataclasses import dataclass, asdict, replace
from typing import Union, Dict, Any


@dataclass(frozen=True)
class NormalizedQuality:
    """
    Дедуплицированная, размеченная и отсортированная запись о качестве

    Attributes:
        id: ID формата у внешнего API
        type: 'video' или 'audio'
        quality: Метка качества ('1080p', '128kbps', 'High Quality')
        format: Короткий тег формата (MP4, M4A, WEBM, OPUS, MP3)
        size_label: Размер для показа ('100 MB' или 'Unknown')
        bitrate_bps: Битрейт в bps
        mime: Исходная MIME строка
        download_url: Ссылка на скачивание, пустая до resolve
    """
    id: Union[int, str]
    type: str
    quality: str
    format: str
    size_label: str
    bitrate_bps: float
    mime: str = ''
    download_url: str = ''

    @property
    def is_video(self) -> bool:
        return self.type == 'video'

    @property
    def is_audio(self) -> bool:
        return self.type == 'audio'

    def with_download_url(self, download_url: str) -> 'NormalizedQuality':
        """Копия записи с заполненной ссылкой"""
        return replace(self, download_url=download_url)

    def to_dict(self) -> Dict[str, Any]:
        """Сериализация в JSON-совместимый словарь (camelCase, как ждет фронтенд)"""
        data = asdict(self)
        return {
            'id': data['id'],
            'type': data['type'],
            'quality': data['quality'],
            'format': data['format'],
            'size': data['size_label'],
            'bitrate': data['bitrate_bps'],
            'mime': data['mime'],
            'downloadUrl': data['download_url'],
        }
