"""
AlloyShare FastAPI Application

A REST API server for publishing Alloy models as shareable links.
Provides endpoints for sharing models, resolving links, and inspecting
derivation lineage and secret regions.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from alloyshare.config import Config
from alloyshare.core.model_store import ModelStore, ModelStoreFactory
from alloyshare.core.secrets import SecretExtractor
from alloyshare.models.secret import SecretRegion
from alloyshare.models.share import ResolvedLink, ShareResult
from alloyshare.services.derivation_linker import DerivationLinker
from alloyshare.services.link_resolver import LinkResolver
from alloyshare.utils.exceptions import DanglingParent, NotFoundError, ValidationError
from alloyshare.utils.logger import get_logger, setup_logging

# Global service instances
store: ModelStore | None = None
linker: DerivationLinker | None = None
resolver: LinkResolver | None = None
extractor: SecretExtractor = SecretExtractor()
logger = get_logger(__name__)


# Pydantic models for API
class ShareRequest(BaseModel):
    """Request model for sharing a model."""

    source_text: str = Field(..., description="Full Alloy source text, secrets included")
    parent_model_id: str | None = Field(
        default=None, description="Model the text was derived from"
    )


class LineageEntry(BaseModel):
    """One model of a derivation chain."""

    id: str
    created_at: str
    derivation_of: str | None
    original: str | None


class LineageResponse(BaseModel):
    """Derivation chain of a model, newest first."""

    model_id: str
    root_id: str
    models: list[LineageEntry]


class SecretRegionsRequest(BaseModel):
    """Request model for locating secret regions."""

    source_text: str


class SecretRegionsResponse(BaseModel):
    """Secret regions for editor highlighting."""

    contains_secret: bool
    regions: list[SecretRegion]


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    store_initialized: bool
    store_backend: str
    models: int = 0
    links: int = 0


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup/shutdown."""
    global store, linker, resolver, extractor

    # Load configuration from environment or use defaults
    config = Config.from_env()

    # Initialize logging with config
    setup_logging(
        level=config.logging.level,
        log_to_file=config.logging.log_to_file,
        log_dir=config.logging.log_dir,
        file_rotation=config.logging.file_rotation,
        file_retention=config.logging.file_retention,
        compression=config.logging.compression,
        serialize=config.logging.serialize,
    )

    logger.info("Starting AlloyShare server")
    logger.info(
        f"Configuration: Store={config.store.backend} ({config.store.db_path}), "
        f"Solver={config.solver.url}"
    )

    extractor = SecretExtractor(
        start_marker=config.secrets.start_marker,
        end_marker=config.secrets.end_marker,
    )

    logger.info("Creating model store")
    store = ModelStoreFactory.create(config.store)
    await store.initialize()

    linker = DerivationLinker(store, extractor)
    resolver = LinkResolver(store, extractor)
    logger.info("AlloyShare services initialized")

    yield

    # Cleanup
    logger.info("Shutting down AlloyShare server")
    await store.close()
    store = None
    linker = None
    resolver = None
    logger.info("Cleanup complete")


# Create FastAPI app
app = FastAPI(
    title="AlloyShare API",
    description="Sharing of Alloy models with derivation tracking and secret redaction",
    version="1.0.0",
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


# Health check endpoint
@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    if not store:
        return HealthResponse(status="initializing", store_initialized=False, store_backend="")

    return HealthResponse(
        status="healthy",
        store_initialized=True,
        store_backend=type(store).__name__,
        models=await store.count_models(),
        links=await store.count_links(),
    )


# Sharing endpoints
@app.post("/models/share", response_model=ShareResult)
async def share_model(request: ShareRequest):
    """
    Publish a model as shareable links.

    Always creates a public link. When the text holds secret regions a
    private link is created too, and the new model becomes the visibility
    root of its lineage.
    """
    if not linker:
        raise HTTPException(status_code=503, detail="Services not initialized")

    try:
        return await linker.share(request.source_text, request.parent_model_id)
    except DanglingParent as e:
        raise HTTPException(status_code=409, detail=e.message) from e
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=e.message) from e
    except Exception as e:
        logger.error(f"Error sharing model: {e}")
        raise HTTPException(status_code=500, detail=str(e)) from e


@app.get("/links/{link_id}", response_model=ResolvedLink)
async def resolve_link(link_id: str):
    """
    Load the model behind a link.

    Public links return the text with secret regions removed; private links
    return the full text.
    """
    if not resolver:
        raise HTTPException(status_code=503, detail="Services not initialized")

    try:
        return await resolver.resolve(link_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message) from e
    except DanglingParent as e:
        raise HTTPException(status_code=409, detail=e.message) from e
    except Exception as e:
        logger.error(f"Error resolving link: {e}")
        raise HTTPException(status_code=500, detail=str(e)) from e


@app.get("/models/{model_id}/lineage", response_model=LineageResponse)
async def get_lineage(model_id: str):
    """Derivation chain of a model, from the model back to the first one."""
    if not linker:
        raise HTTPException(status_code=503, detail="Services not initialized")

    try:
        chain = await linker.lineage(model_id)
        root = await linker.root_of(model_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message) from e
    except DanglingParent as e:
        raise HTTPException(status_code=409, detail=e.message) from e
    except Exception as e:
        logger.error(f"Error getting lineage: {e}")
        raise HTTPException(status_code=500, detail=str(e)) from e

    return LineageResponse(
        model_id=model_id,
        root_id=root.id,
        models=[
            LineageEntry(
                id=model.id,
                created_at=model.created_at.isoformat(),
                derivation_of=model.derivation_of,
                original=model.original,
            )
            for model in chain
        ],
    )


@app.post("/secrets/regions", response_model=SecretRegionsResponse)
async def secret_regions(request: SecretRegionsRequest):
    """Locate secret regions, for highlighting in the editor."""
    return SecretRegionsResponse(
        contains_secret=extractor.contains_secret(request.source_text),
        regions=extractor.find_regions(request.source_text),
    )
