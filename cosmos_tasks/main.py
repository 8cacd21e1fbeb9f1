import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import COSMOS_CREATE_CONTAINERS, CORS_ORIGINS, LOG_LEVEL
from .database import close_client, create_containers, get_client
from .routers import tasks

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Cosmos Task API",
    description="CRUD API for task documents stored in Azure Cosmos DB",
    version="1.0.0"
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(tasks.router, prefix="/api/cosmos", tags=["cosmos"])


# Provision containers on startup when asked to
@app.on_event("startup")
async def on_startup():
    if COSMOS_CREATE_CONTAINERS:
        await create_containers(get_client())


@app.on_event("shutdown")
async def on_shutdown():
    await close_client()
    logger.info("Cosmos client closed")


@app.get("/")
def read_root():
    return {"message": "Cosmos Task API"}


@app.get("/health")
def health_check():
    return {"status": "healthy"}
