"""
RapidApiClient - низкоуровневый клиент внешнего API конвертера
Знает только HTTP: пути, заголовки, коды ответов.
НЕ знает о нормализации качеств и о слое представления.
"""
import asyncio
import json
import logging
from typing import Any, Optional

import aiohttp

from hyperdownload.config import Settings
from hyperdownload.errors import RequestFailed, TransportError, EmptyResult
from hyperdownload.models.raw_format import AUDIO

logger = logging.getLogger(__name__)

QUALITY_PATH = "/get_available_quality/{video_id}"
# Имя endpoint'а метаданных менялось между ревизиями API
VIDEO_INFO_PATHS = ("/get-video-info/{video_id}", "/get_video_info/{video_id}")
DOWNLOAD_VIDEO_PATH = "/download_video/{video_id}"
DOWNLOAD_SHORT_PATH = "/download_short/{video_id}"
DOWNLOAD_AUDIO_PATH = "/download_audio/{video_id}"

_DOWNLOAD_URL_KEYS = ('file', 'downloadUrl', 'url')


def download_path(media_type: str, is_short: bool = False) -> str:
    """Шаблон пути скачивания для типа записи"""
    if media_type == AUDIO:
        return DOWNLOAD_AUDIO_PATH
    if is_short:
        return DOWNLOAD_SHORT_PATH
    return DOWNLOAD_VIDEO_PATH


def extract_download_url(body: str) -> Optional[str]:
    """
    Достать ссылку из тела ответа download_*

    Встречались три формы: URL простым текстом, JSON строка
    и JSON объект с полем file / downloadUrl.
    """
    text = (body or '').strip()
    if not text:
        return None

    try:
        data = json.loads(text)
    except ValueError:
        return text

    if isinstance(data, str):
        return data.strip() or None
    if isinstance(data, dict):
        for key in _DOWNLOAD_URL_KEYS:
            value = data.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()
    return None


class RapidApiClient:
    """
    Клиент RapidAPI на aiohttp

    Все запросы - GET с заголовками x-rapidapi-key / x-rapidapi-host.
    Повторов и таймаутов сверх стандартных для aiohttp нет.
    """

    def __init__(self, settings: Settings, session: Optional[aiohttp.ClientSession] = None):
        """
        Args:
            settings: Настройки с ключом и хостом RapidAPI
            session: Внешняя aiohttp сессия (если None - создается при первом запросе)
        """
        self.settings = settings
        self._session = session
        self._owns_session = session is None

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
            self._owns_session = True
        return self._session

    async def close(self):
        """Закрыть сессию, если она создана клиентом"""
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None

    async def __aenter__(self) -> 'RapidApiClient':
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()

    async def _get_text(self, path: str, params: Optional[dict] = None) -> str:
        """
        Выполнить GET и вернуть тело ответа

        Raises:
            RequestFailed: статус не 2xx
            TransportError: сетевая ошибка
        """
        url = f"{self.settings.base_url}{path}"
        session = self._get_session()
        try:
            async with session.get(url, headers=self.settings.headers, params=params) as response:
                if not 200 <= response.status < 300:
                    logger.error(f"[api] {path} вернул статус {response.status}")
                    raise RequestFailed(response.status, path)
                body = await response.read()
                charset = response.charset or 'utf-8'
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"[api] Сетевая ошибка при запросе {path}: {e}")
            raise TransportError(f"Transport error for {path}: {e}") from e

        try:
            return body.decode(charset)
        except (UnicodeDecodeError, LookupError) as e:
            # Тело не декодируется - дальше оно считается пустым ответом
            logger.warning(f"[api] {path} вернул тело, которое не декодируется как {charset}: {e}")
            return ''

    async def _get_json(self, path: str, params: Optional[dict] = None) -> Any:
        """GET + JSON; тело, которое не разбирается как JSON, дает None"""
        body = await self._get_text(path, params=params)
        try:
            return json.loads(body)
        except ValueError:
            logger.warning(f"[api] {path} вернул не-JSON ответ: {body[:200]!r}")
            return None

    async def get_available_quality(self, video_id: str) -> Any:
        """Сырой список форматов для видео"""
        return await self._get_json(QUALITY_PATH.format(video_id=video_id))

    async def get_video_info(self, video_id: str) -> Any:
        """
        Сырые метаданные видео

        Если основной endpoint отвечает 404, один раз пробуется
        альтернативное написание пути.
        """
        primary, fallback = VIDEO_INFO_PATHS
        try:
            return await self._get_json(primary.format(video_id=video_id))
        except RequestFailed as e:
            if e.status != 404:
                raise
            logger.info(f"[api] {primary} не найден, пробую {fallback}")
            return await self._get_json(fallback.format(video_id=video_id))

    async def resolve_download_url(
        self,
        video_id: str,
        quality_id,
        media_type: str,
        is_short: bool = False
    ) -> str:
        """
        Получить итоговую ссылку на скачивание

        Args:
            video_id: ID видео
            quality_id: ID формата (NormalizedQuality.id)
            media_type: 'video' или 'audio'
            is_short: Для видео - использовать download_short

        Returns:
            URL файла

        Raises:
            EmptyResult: В ответе нет ссылки
        """
        path = download_path(media_type, is_short).format(video_id=video_id)
        body = await self._get_text(path, params={'quality': str(quality_id)})
        download_url = extract_download_url(body)
        if not download_url:
            raise EmptyResult(f"No download URL in response of {path}")
        return download_url
