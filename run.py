"""Run the Speed Learning FastAPI application with uvicorn."""

import uvicorn

from speedlearn.application.config import settings

if __name__ == "__main__":
    uvicorn.run(
        "speedlearn.application.api:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
