import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from ..common.exceptions import CubeStudioError, TransportError
from ..config import StudioConfig
from ..core.session import EditorSession
from ..transport.base import CubeLink
from . import studio

logger = logging.getLogger(__name__)


def init_app(
    session: Optional[EditorSession] = None,
    link: Optional[CubeLink] = None,
    config: Optional[StudioConfig] = None,
) -> FastAPI:
    """Create and configure the FastAPI application"""
    app = FastAPI(
        title="Cube Studio API",
        description="Frame editor for a 3x3x3 LED cube",
        version=__version__,
    )

    # Enable CORS for frontend development
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.config = config or StudioConfig.create_default()
    app.state.session = session or EditorSession(config=app.state.config)
    app.state.link = link

    app.include_router(studio.router)

    @app.exception_handler(TransportError)
    async def transport_error_handler(request: Request, exc: TransportError):
        logger.error(f"Link error on {request.url.path}: {exc}")
        return JSONResponse(status_code=502, content={"detail": str(exc)})

    @app.exception_handler(CubeStudioError)
    async def studio_error_handler(request: Request, exc: CubeStudioError):
        logger.warning(f"Rejected request on {request.url.path}: {exc}")
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.on_event("shutdown")
    async def shutdown_event():
        """Stop playback and close the cube link"""
        logger.info("Shutting down Cube Studio API")
        app.state.session.close()
        if app.state.link is not None and app.state.link.is_connected:
            try:
                await app.state.link.close()
            except TransportError as e:
                logger.error(f"Error closing cube link: {e}")

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        return {
            "status": "healthy",
            "frames": len(app.state.session.sequence),
            "playing": app.state.session.playback.is_playing,
            "link": app.state.link is not None and app.state.link.is_connected,
        }

    return app


__all__ = ["init_app"]
