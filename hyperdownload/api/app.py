"""
HTTP API для фронтенда: список качеств и ссылки на скачивание.
Отдельный сервис, состояние сессий хранится только в памяти.
"""
import os
import logging
from typing import Optional

from fastapi import FastAPI, Query
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from hyperdownload import __version__
from hyperdownload.config import Settings
from hyperdownload.models.lookup_response import LookupResponse, DownloadLinkResponse, EMPTY, ERROR, STALE
from hyperdownload.services.api_client import RapidApiClient
from hyperdownload.services.normalizer import QualityNormalizer
from hyperdownload.services.presentation_state import SessionRegistry
from hyperdownload.services.quality_fetcher import QualityFetcher
from hyperdownload.use_cases import LookupVideoUseCase, ResolveDownloadUseCase
from hyperdownload.utils.utils import watch_url_for

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app = FastAPI(title="HyperDownload", version=__version__)

api_client: Optional[RapidApiClient] = None
fetcher: Optional[QualityFetcher] = None
sessions = SessionRegistry()


class LookupRequest(BaseModel):
    # Старый фронтенд присылает только videoId
    url: Optional[str] = None
    videoId: Optional[str] = None
    sessionId: Optional[str] = None

    def lookup_url(self) -> str:
        if self.url:
            return self.url
        return watch_url_for(self.videoId) or self.videoId or ''


def build_fetcher(settings: Settings) -> QualityFetcher:
    """Собрать QualityFetcher из настроек"""
    global api_client
    api_client = RapidApiClient(settings)
    return QualityFetcher(api_client, QualityNormalizer(settings.dedup_policy))


@app.on_event("startup")
async def on_startup():
    global fetcher
    if fetcher is None:
        settings = Settings.from_env()
        logging.getLogger().setLevel(settings.log_level)
        fetcher = build_fetcher(settings)
        logger.info(f"QualityFetcher готов: {settings.base_url}, политика {settings.dedup_policy}")


@app.on_event("shutdown")
async def on_shutdown():
    global api_client
    if api_client:
        await api_client.close()
        api_client = None
        logger.info("Сессия RapidAPI закрыта")


def _status_code(status: str, error: Optional[str]) -> int:
    if status == EMPTY:
        return 404
    if status == STALE:
        return 409
    if status == ERROR:
        return 400 if error == 'invalid_input' else 502
    return 200


def _lookup_payload(response: LookupResponse) -> dict:
    return {
        'status': response.status.lower(),
        'qualities': [q.to_dict() for q in response.qualities],
        'videoInfo': response.video_info.to_dict() if response.video_info else None,
        'error': response.error,
        'message': response.error_message,
        'generation': response.generation,
    }


def _download_payload(response: DownloadLinkResponse) -> dict:
    return {
        'status': response.status.lower(),
        'downloadUrl': response.download_url,
        'error': response.error,
        'message': response.error_message,
        'generation': response.generation,
    }


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.post("/api/get-qualities")
async def get_qualities(request: LookupRequest):
    """
    Метаданные и отсортированный список качеств по ссылке.
    """
    state = sessions.get(request.sessionId)
    response = await LookupVideoUseCase(fetcher).execute(request.lookup_url(), state)
    return JSONResponse(
        status_code=_status_code(response.status, response.error),
        content=_lookup_payload(response)
    )


@app.get("/api/download-url")
async def download_url(
    video_id: str = Query(..., alias="videoId"),
    quality_id: str = Query(..., alias="qualityId"),
    media_type: str = Query("video", alias="type"),
    is_short: bool = Query(False, alias="isShort"),
    quality: Optional[str] = Query(None),
    session_id: Optional[str] = Query(None, alias="sessionId"),
):
    """
    Ссылка на скачивание выбранного качества (запрашивается только по клику).
    """
    state = sessions.get(session_id)
    response = await ResolveDownloadUseCase(fetcher).execute(
        video_id,
        quality_id,
        media_type,
        is_short=is_short,
        quality_label=quality,
        state=state
    )
    return JSONResponse(
        status_code=_status_code(response.status, response.error),
        content=_download_payload(response)
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("hyperdownload.api.app:app", host="0.0.0.0", port=int(os.getenv("API_PORT", "8000")), reload=False)
