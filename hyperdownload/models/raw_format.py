"""
RawFormatRecord - запись о формате в том виде, в котором ее вернул внешний API
Создается только через parse_raw_record(), которое подставляет значения по умолчанию
"""
import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

VIDEO = 'video'
AUDIO = 'audio'
MEDIA_TYPES = (VIDEO, AUDIO)


@dataclass(frozen=True)
class RawFormatRecord:
    """
    Сырая запись о доступном качестве

    Attributes:
        id: ID формата у внешнего API (передается в ?quality=)
        type: 'video' или 'audio'
        quality: Метка качества ('1080p', '128kbps', ...) или 'Unknown'
        bitrate: Битрейт в bps (0 если неизвестен)
        mime: MIME строка ('video/mp4; codecs=...') или ''
        size: Размер в байтах как пришел от API (число, строка или None)
    """
    id: Union[int, str]
    type: str
    quality: str = 'Unknown'
    bitrate: float = 0
    mime: str = ''
    size: Optional[Union[int, float, str]] = None

    @property
    def size_bytes(self) -> Optional[float]:
        """Размер в байтах, если он разбирается как ненулевое число"""
        value = coerce_number(self.size)
        return value if value else None


class ParseError(Enum):
    """Причина, по которой запись API не может быть использована"""
    NOT_AN_OBJECT = 'not_an_object'
    MISSING_ID = 'missing_id'
    UNKNOWN_TYPE = 'unknown_type'


@dataclass(frozen=True)
class ParseResult:
    """Результат разбора одной записи: либо record, либо error"""
    record: Optional[RawFormatRecord] = None
    error: Optional[ParseError] = None

    @property
    def ok(self) -> bool:
        return self.record is not None


def coerce_number(value) -> Optional[float]:
    """Привести число или числовую строку к конечному float, иначе None (NaN и Infinity тоже None)"""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return None
    if not isinstance(value, (int, float)):
        return None
    try:
        if not math.isfinite(float(value)):
            return None
    except OverflowError:
        # int больше диапазона float
        return None
    return value
