"""
Use cases сервиса качеств
"""
from hyperdownload.use_cases.lookup_video import LookupVideoUseCase
from hyperdownload.use_cases.resolve_download import ResolveDownloadUseCase

__all__ = [
    'LookupVideoUseCase',
    'ResolveDownloadUseCase',
]
