"""
Скрипт для запуска HTTP API
Запускать из корневой директории проекта: python run_api.py
"""
import logging
import sys
import os

# Добавляем корневую директорию в PYTHONPATH
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

import uvicorn

from hyperdownload.config import Settings

if __name__ == "__main__":
    settings = Settings.from_env()
    logging.basicConfig(
        level=settings.log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    uvicorn.run("hyperdownload.api.app:app", host="0.0.0.0", port=settings.api_port, reload=False)
