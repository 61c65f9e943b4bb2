"""
School Transport Trip Coordination Backend
==========================================
Entry point. Run with ``python main.py`` or ``uvicorn main:app``; host, port
and reload come from the same settings as the rest of the app.
"""

import uvicorn

from src.api.app import create_app
from src.config import settings

app = create_app()

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
        log_level=settings.log_level.lower(),
    )
