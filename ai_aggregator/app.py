from __future__ import annotations
import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse

from . import __version__
from .aggregate import aggregate
from .config import Settings, load_settings
from .errors import PromptRequiredError
from .providers.registry import ProviderRegistry
from .render import Reporter
from .schemas import ErrorBody, Health, ProviderInfo, VersionInfo

logger = logging.getLogger(__name__)

INTERNAL_ERROR = "Internal server error"


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def create_app(settings: Optional[Settings] = None, registry: Optional[ProviderRegistry] = None) -> FastAPI:
    settings = settings or load_settings()
    configure_logging(settings.log_level)

    app = FastAPI(title="AI Response Aggregator", version=__version__)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.settings = settings
    app.state.providers = registry or ProviderRegistry.from_settings(settings)
    app.state.reporter = Reporter()

    simulated = [p.name for p in settings.providers if not p.has_credential]
    if simulated:
        logger.info("No credential for %s; serving simulated responses", ", ".join(simulated))

    @app.get("/health", response_model=Health)
    async def health():
        return Health(status="ok")

    @app.get("/version", response_model=VersionInfo)
    async def version():
        s: Settings = app.state.settings
        return VersionInfo(
            version=__version__,
            providers=s.provider_names,
            credentials={p.name: p.has_credential for p in s.providers},
            max_output_tokens=s.max_output_tokens,
        )

    @app.get("/api/providers", response_model=list[ProviderInfo])
    async def list_providers():
        s: Settings = app.state.settings
        return [ProviderInfo(name=p.name, model=p.model, simulated=not p.has_credential) for p in s.providers]

    @app.post("/api/aggregate")
    async def aggregate_prompt(request: Request):
        s: Settings = app.state.settings
        try:
            body = await request.json()
            prompt = body.get("prompt") if isinstance(body, dict) else None
            result = await aggregate(
                prompt,
                s.providers,
                registry=app.state.providers,
                max_output_tokens=s.max_output_tokens,
            )
        except PromptRequiredError as e:
            return JSONResponse(status_code=400, content=ErrorBody(error=e.message).model_dump())
        except Exception:
            logger.exception("API Error")
            return JSONResponse(status_code=500, content=ErrorBody(error=INTERNAL_ERROR).model_dump())
        return JSONResponse(content=result.to_wire())

    @app.get("/", response_class=HTMLResponse)
    async def dashboard():
        s: Settings = app.state.settings
        return HTMLResponse(app.state.reporter.render_dashboard(s.provider_names))

    return app
