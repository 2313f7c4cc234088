"""
Исключения для работы с внешним API и пользовательским вводом
"""
from typing import Optional


class HyperDownloadError(Exception):
    """Базовое исключение сервиса"""

    code = 'error'


class InvalidInput(HyperDownloadError):
    """URL не похож на ссылку на видео (watch?v=, youtu.be/, shorts/)"""

    code = 'invalid_input'


class FetchError(HyperDownloadError):
    """Базовое исключение для ошибок при запросах к внешнему API"""

    code = 'fetch_error'


class RequestFailed(FetchError):
    """Внешний API вернул не-2xx статус"""

    code = 'request_failed'

    def __init__(self, status: int, endpoint: Optional[str] = None):
        self.status = status
        self.endpoint = endpoint
        message = f"API request failed: {status}"
        if endpoint:
            message = f"{message} ({endpoint})"
        super().__init__(message)


class TransportError(FetchError):
    """Сетевая ошибка (DNS, соединение, таймаут)"""

    code = 'transport_error'


class EmptyResult(FetchError):
    """API ответил успешно, но без полезных данных"""

    code = 'empty_result'
