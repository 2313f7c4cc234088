"""
Временное состояние слоя представления и защита от устаревших ответов
Каждый новый запрос получает номер поколения; ответ применяется только
если его поколение все еще последнее.
"""
import logging
import time
from collections import OrderedDict
from typing import Callable, Dict, List, Optional, Tuple

from hyperdownload.models.quality import NormalizedQuality
from hyperdownload.models.video_metadata import VideoMetadata

logger = logging.getLogger(__name__)

LOOKUP_SCOPE = 'lookup'
DOWNLOAD_SCOPE_PREFIX = 'download:'

# Ограничения реестра сессий
MAX_SESSIONS = 1000
SESSION_TTL_SECONDS = 30 * 60  # 1800 секунд


class RequestGenerationTracker:
    """Монотонные счетчики поколений запросов по областям (scope)"""

    def __init__(self):
        self._generations: Dict[str, int] = {}

    def issue(self, scope: str = LOOKUP_SCOPE) -> int:
        """Выдать новый номер поколения для области"""
        generation = self._generations.get(scope, 0) + 1
        self._generations[scope] = generation
        return generation

    def current(self, scope: str = LOOKUP_SCOPE) -> int:
        """Последний выданный номер (0 если запросов не было)"""
        return self._generations.get(scope, 0)

    def is_current(self, scope: str, generation: int) -> bool:
        return self._generations.get(scope, 0) == generation

    def forget(self, prefix: str):
        """Удалить счетчики всех областей, начинающихся с prefix"""
        for scope in [s for s in self._generations if s.startswith(prefix)]:
            del self._generations[scope]

    def __len__(self) -> int:
        return len(self._generations)


DownloadTicket = Tuple[int, int]  # (поколение поиска, поколение скачивания)


class PresentationState:
    """
    Состояние одной пользовательской сессии

    Хранит только последний примененный результат поиска и ссылки
    на скачивание. Ничего не сохраняется между перезапусками.
    """

    def __init__(self):
        self.tracker = RequestGenerationTracker()
        self.video_info: Optional[VideoMetadata] = None
        self.qualities: List[NormalizedQuality] = []
        self.download_urls: Dict[Tuple[str, str], str] = {}

    @staticmethod
    def _download_scope(quality: NormalizedQuality) -> str:
        return f"{DOWNLOAD_SCOPE_PREFIX}{quality.type}:{quality.id}:{quality.quality}"

    def begin_lookup(self) -> int:
        """
        Начать новый поиск

        Все начатые ранее запросы ссылок становятся устаревшими по поколению поиска,
        поэтому их счетчики больше не нужны.
        """
        self.tracker.forget(DOWNLOAD_SCOPE_PREFIX)
        return self.tracker.issue(LOOKUP_SCOPE)

    def apply_lookup(
        self,
        generation: int,
        video_info: Optional[VideoMetadata],
        qualities: List[NormalizedQuality]
    ) -> bool:
        """
        Применить результат поиска

        Returns:
            False если за это время был начат более новый поиск
        """
        if not self.tracker.is_current(LOOKUP_SCOPE, generation):
            logger.info(
                f"[state] Отбрасываю устаревший результат поиска: поколение {generation}, "
                f"текущее {self.tracker.current(LOOKUP_SCOPE)}"
            )
            return False
        self.video_info = video_info
        self.qualities = list(qualities)
        self.download_urls = {}
        return True

    def begin_download(self, quality: NormalizedQuality) -> DownloadTicket:
        return (
            self.tracker.current(LOOKUP_SCOPE),
            self.tracker.issue(self._download_scope(quality)),
        )

    def apply_download(self, quality: NormalizedQuality, ticket: DownloadTicket, download_url: str) -> bool:
        """
        Запомнить ссылку на скачивание

        Returns:
            False если был начат новый поиск или повторный запрос этого же качества
        """
        lookup_generation, download_generation = ticket
        if not self.tracker.is_current(LOOKUP_SCOPE, lookup_generation):
            logger.info(f"[state] Ссылка для {quality.id} пришла после нового поиска, отбрасываю")
            return False
        if not self.tracker.is_current(self._download_scope(quality), download_generation):
            logger.info(f"[state] Ссылка для {quality.id} устарела, отбрасываю")
            return False
        self.download_urls[(quality.type, quality.quality)] = download_url
        return True


class SessionRegistry:
    """
    In-memory реестр сессий по их ID

    Сессия удаляется, если к ней не обращались дольше ttl_seconds,
    а при превышении max_sessions вытесняется самая давно использованная.
    """

    def __init__(
        self,
        max_sessions: int = MAX_SESSIONS,
        ttl_seconds: float = SESSION_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic
    ):
        self.max_sessions = max_sessions
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        # session_id -> (state, время последнего обращения)
        self._sessions: 'OrderedDict[str, Tuple[PresentationState, float]]' = OrderedDict()

    def _evict_expired(self, now: float):
        while self._sessions:
            session_id, (_, last_seen) = next(iter(self._sessions.items()))
            if now - last_seen <= self.ttl_seconds:
                break
            del self._sessions[session_id]
            logger.debug(f"[state] Сессия {session_id} истекла")

    def get(self, session_id: Optional[str]) -> PresentationState:
        """
        Получить состояние сессии

        Без session_id создается одноразовое состояние, которое нигде не хранится.
        """
        if not session_id:
            return PresentationState()

        now = self._clock()
        self._evict_expired(now)

        entry = self._sessions.pop(session_id, None)
        if entry is None:
            state = PresentationState()
            logger.debug(f"[state] Новая сессия {session_id}")
        else:
            state = entry[0]
        self._sessions[session_id] = (state, now)

        while len(self._sessions) > self.max_sessions:
            evicted_id, _ = self._sessions.popitem(last=False)
            logger.debug(f"[state] Сессия {evicted_id} вытеснена")
        return state

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions
