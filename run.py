#!/usr/bin/env python3
"""
Development server runner
"""

import os

import uvicorn

from app.core.config import settings

if __name__ == "__main__":
    port = int(os.environ.get("PORT", 3000))
    host = os.environ.get("HOST", "0.0.0.0")

    uvicorn.run(
        "app.main:app",
        host=host,
        port=port,
        reload=not settings.is_production() and settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower(),
        access_log=False,
    )
