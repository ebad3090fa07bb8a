# run_dev.py
"""
Local development launcher for FastAPI.
Equivalent to: `uvicorn travelbot.app:app --reload --host 0.0.0.0 --port 4000`
Startup (logging, required-variable check) lives in the app's lifespan.
"""

import uvicorn

from travelbot.settings import get_settings

if __name__ == "__main__":
    settings = get_settings()
    uvicorn.run(
        "travelbot.app:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=not settings.is_production,
    )
