from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from prbridge.errors import BridgeError
from prbridge.github.webhook import WebhookDelivery, handle_delivery
from prbridge.logger import get_logger, set_log_level
from prbridge.settings import (
    Settings,
    load_settings,
    redact_secret,
    validate_github_settings,
)


logger = get_logger()


def _log_configuration(settings: Settings) -> None:
    logger.info("GITHUB_WEBHOOK_SECRET: %s", redact_secret(settings.github_webhook_secret))
    logger.info("GITHUB_APP_ID: %s", settings.github_app_id or "(not set)")
    logger.info("GITHUB_PRIVATE_KEY: %s", "(set)" if settings.github_private_key else "(not set)")
    logger.info(
        "GITHUB_INSTALLATION_ID: %s",
        settings.github_installation_id or "(not set, app mode)",
    )
    logger.info("GitHub API: %s", settings.github_api_url)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or load_settings()
    set_log_level(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        _log_configuration(settings)
        validate_github_settings(settings)
        logger.info("Listening for GitHub webhooks on port %s", settings.port)
        yield

    app = FastAPI(title="PR Sandbox Bridge", lifespan=lifespan)
    app.state.settings = settings

    @app.exception_handler(BridgeError)
    async def bridge_error_handler(request: Request, exc: BridgeError):
        return JSONResponse(exc.to_body(), status_code=exc.status_code)

    @app.get("/", response_class=PlainTextResponse)
    async def index():
        return "Hello Hono!"

    @app.get("/api/hello")
    async def hello():
        return {"ok": True, "message": "Hello Hono!"}

    @app.post("/api/webhooks")
    async def github_webhook(request: Request):
        body = await request.body()
        delivery = WebhookDelivery.from_headers(request.headers, body)
        return handle_delivery(delivery, request.app.state.settings)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    _settings = app.state.settings
    uvicorn.run(
        app,
        host=_settings.host,
        port=_settings.port,
        reload=False,
    )
