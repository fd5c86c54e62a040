import logging

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tickify.api.router import api_router
from tickify.core.config import get_settings
from tickify.core.errors import register_exception_handlers
from tickify.core.logging import configure_logging

settings = get_settings()
configure_logging(settings)

logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.app_name,
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)
app.include_router(api_router, prefix=settings.api_prefix)

logger.info("%s started in %s mode", settings.app_name, settings.app_env)


@app.get("/")
def root() -> dict[str, str]:
    return {"message": "Tickify API is running"}


def run() -> None:
    uvicorn.run(
        "tickify.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.app_debug,
        log_config=None,
    )
