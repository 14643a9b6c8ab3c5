"""FastAPI application."""

import argparse
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from configs import settings
from product_scout.controllers.check_controllers import check_router, retailer_router
from product_scout.logger_config import get_logger
from product_scout.services.tracking.orchestrator import shutdown_orchestrator

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    logger.info("Starting Product Scout API...")
    yield
    logger.info("Closing browsers...")
    await shutdown_orchestrator()


app = FastAPI(
    title="Product Scout API",
    root_path=settings.ROOT_PATH_BACKEND,
    description="Price and stock checks for Best Buy, Target, Canon and Ricoh product pages",
    lifespan=lifespan,
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(retailer_router)
app.include_router(check_router)


@app.get("/", response_description="Api healthcheck")  # type: ignore[misc]
async def index() -> Dict[str, str]:
    """Define a route for handling HTTP GET requests to the root URL ("/")."""
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    parser = argparse.ArgumentParser()
    parser.add_argument("--docker", action="store_true", help="Running with docker")
    parser.add_argument("--host", required=True, help="Application host.")
    parser.add_argument("--port", required=True, help="Application port.")
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload for development purposes.",
    )
    args = parser.parse_args()
    if not args.docker:
        from dotenv import load_dotenv

        load_dotenv()

    uvicorn.run("app:app", host=args.host, port=int(args.port), reload=args.reload)
