"""
HyperDownload - сервис получения списка качеств видео и ссылок на скачивание
через сторонний RapidAPI конвертер
"""
__version__ = "0.1.0"
