"""Signature Router API.

Serves the template signature catalog and the routing decisions built on it:
- Signature definitions (family/signature id -> template id, actions)
- Detection of the right template for a tool result
- Payload normalization for a template
- Tool metadata, action descriptions and direct execution
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from signature_router import __version__
from signature_router.api.routes import detection, signatures, tools
from signature_router.state import get_registry_state

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup: build the registry state and load built-in definitions
    logger.info("Loading template signatures...")
    state = get_registry_state()
    logger.info(f"Loaded {state.signatures.count()} signatures")
    logger.info(f"Loaded {state.families.count} capability families")

    logger.info("Signature Router API ready")
    yield
    # Shutdown
    logger.info("Shutting down Signature Router API")


# Create FastAPI app
app = FastAPI(
    title="Signature Router API",
    description="""
## Tool Result Signature Router

Decides which pre-built presentation template renders a tool result and
reshapes the payload into the fields that template reads.

### Key Endpoints

- `GET /v1/signatures` - List all signatures
- `GET /v1/signatures/{family}/{signature_id}` - Get one signature
- `POST /v1/detect` - Pick a template for a tool name and/or payload
- `POST /v1/normalize/{family}/{signature_id}` - Normalize a payload
- `GET /v1/tools/{name}/actions` - Action descriptions for UI generation
- `POST /v1/tools/{name}/execute` - Run a tool directly
""",
    version=__version__,
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers with /v1 prefix
app.include_router(signatures.router, prefix="/v1")
app.include_router(detection.router, prefix="/v1")
app.include_router(tools.router, prefix="/v1")


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "service": "Signature Router API",
        "version": __version__,
        "docs": "/docs",
        "endpoints": {
            "signatures": "/v1/signatures",
            "families": "/v1/signatures/families",
            "detect": "/v1/detect",
            "tools": "/v1/tools",
        },
    }


@app.get("/health")
async def health():
    """Health check endpoint."""
    state = get_registry_state()
    return {
        "status": "healthy",
        "signatures_loaded": state.signatures.count(),
        "data_hints": len(state.signatures.list_hints()),
        "dynamic_prefixes": len(state.dynamic_prefixes),
        "capability_families": state.families.count,
        "action_maps": len(state.action_maps.list_prefixes()),
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "signature_router.api.main:app",
        host="0.0.0.0",
        port=8001,
        reload=True,
    )
