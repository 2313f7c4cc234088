"""
Настройки сервиса из переменных окружения (.env)
"""
import os
from dataclasses import dataclass
from typing import Optional
from dotenv import load_dotenv

DEFAULT_RAPIDAPI_HOST = "youtube-video-fast-downloader-24-7.p.rapidapi.com"

DEDUP_COARSE = 'coarse'  # (type, quality)
DEDUP_FINE = 'fine'  # (quality, type, mime)
DEDUP_POLICIES = (DEDUP_COARSE, DEDUP_FINE)


@dataclass(frozen=True)
class Settings:
    """
    Конфигурация доступа к RapidAPI и HTTP API сервиса

    Attributes:
        rapidapi_key: Ключ RapidAPI (x-rapidapi-key)
        rapidapi_host: Хост RapidAPI (x-rapidapi-host)
        base_url: Базовый URL API (по умолчанию https://<rapidapi_host>)
        dedup_policy: 'coarse' или 'fine'
        api_port: Порт HTTP API
        log_level: Уровень логирования
    """
    rapidapi_key: str
    rapidapi_host: str = DEFAULT_RAPIDAPI_HOST
    base_url: Optional[str] = None
    dedup_policy: str = DEDUP_COARSE
    api_port: int = 8000
    log_level: str = "INFO"

    def __post_init__(self):
        if not self.rapidapi_key:
            raise ValueError("RAPIDAPI_KEY не установлен в переменных окружения")
        if self.dedup_policy not in DEDUP_POLICIES:
            raise ValueError(
                f"DEDUP_POLICY должен быть одним из {DEDUP_POLICIES}, получено: {self.dedup_policy}"
            )
        if not self.base_url:
            # frozen dataclass
            object.__setattr__(self, 'base_url', f"https://{self.rapidapi_host}")

    @property
    def headers(self) -> dict:
        """Заголовки авторизации, передаются как есть"""
        return {
            'x-rapidapi-key': self.rapidapi_key,
            'x-rapidapi-host': self.rapidapi_host,
        }

    @classmethod
    def from_env(cls) -> 'Settings':
        """
        Собрать настройки из окружения

        Raises:
            ValueError: Если RAPIDAPI_KEY не задан или значение некорректно
        """
        load_dotenv()

        api_port = os.getenv("API_PORT", "8000")
        try:
            api_port = int(api_port)
        except ValueError:
            raise ValueError(f"API_PORT должен быть числом, получено: {api_port}")

        return cls(
            rapidapi_key=os.getenv("RAPIDAPI_KEY", ""),
            rapidapi_host=os.getenv("RAPIDAPI_HOST", DEFAULT_RAPIDAPI_HOST),
            base_url=os.getenv("RAPIDAPI_BASE_URL") or None,
            dedup_policy=os.getenv("DEDUP_POLICY", DEDUP_COARSE).lower(),
            api_port=api_port,
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )
