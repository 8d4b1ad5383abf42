"""slacklog - FastAPI application forwarding process events to Slack."""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator

import uvicorn
from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse

from slacklog.config import get_settings
from slacklog.router import EventRouter, load_reporters_config
from slacklog.sources.base import BaseSource
from slacklog.sources.good import GoodSource

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Global router instance
router: EventRouter | None = None

# Source parsers registry
sources: dict[str, BaseSource] = {}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    global router

    settings = get_settings()

    # Configure logging level
    logging.getLogger().setLevel(settings.log_level.upper())

    # Register source parsers
    sources["good"] = GoodSource()
    logger.info(f"Registered {len(sources)} source parser(s): {list(sources.keys())}")

    # Load reporters configuration
    try:
        reporters_config = load_reporters_config(settings.reporters_config_path)
        router = EventRouter(reporters_config)
        logger.info(
            f"Loaded {len(reporters_config.reporters)} reporter(s) from {settings.reporters_config}"
        )
    except FileNotFoundError:
        logger.error(
            f"Reporters config not found: {settings.reporters_config}. "
            "Create a reporters.yaml file or set REPORTERS_CONFIG environment variable."
        )
        router = None
    except Exception as e:
        logger.exception(f"Failed to load reporters config: {e}")
        router = None

    logger.info("slacklog started")

    yield

    # Let in-flight sends finish before shutdown
    if router:
        await router.drain()
    router = None
    sources.clear()
    logger.info("slacklog stopped")


app = FastAPI(
    title="slacklog",
    description="Forwards process events (ops, response, request, error, log) to Slack webhooks",
    version="0.1.0",
    lifespan=lifespan,
)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}


@app.get("/sources")
async def list_sources() -> dict[str, list[str]]:
    """List registered event sources."""
    return {"sources": list(sources.keys())}


@app.get("/reporters")
async def list_reporters() -> dict[str, list[dict]]:
    """List configured reporters."""
    if not router:
        return {"reporters": []}

    return {
        "reporters": [
            {
                "name": reporter.name,
                "events": reporter.events.model_dump(),
                "basic": reporter.slack.basic,
            }
            for reporter in router.reporters
        ]
    }


@app.post("/events/{source_name}")
async def receive_events(source_name: str, request: Request) -> JSONResponse:
    """Receive one event record, or a list of them, from a source."""
    if not router:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Router not configured. Check reporters.yaml file.",
        )

    source = sources.get(source_name)
    if not source:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown source: {source_name}",
        )

    body = await request.json()
    records: list[Any] = body if isinstance(body, list) else [body]

    # One result per record, in arrival order
    results: list[dict[str, Any]] = []
    for record in records:
        if not isinstance(record, dict):
            results.append({"status": "invalid", "error": "Event record must be an object"})
            continue
        try:
            dispatched = router.route_record(source, record)
        except Exception as e:
            logger.warning(f"Rejected {source_name} record: {e}")
            results.append({"status": "invalid", "error": str(e)})
            continue

        results.append({
            "status": "dispatched" if dispatched else "discarded",
            "dispatched": dispatched,
        })

    return JSONResponse(
        status_code=status.HTTP_202_ACCEPTED,
        content={"source": source_name, "results": results},
    )


def run() -> None:
    """Run the application using uvicorn."""
    settings = get_settings()
    uvicorn.run(
        "slacklog.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        reload=False,
    )


if __name__ == "__main__":
    run()
