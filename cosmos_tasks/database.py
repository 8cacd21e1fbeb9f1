import logging
import threading
from typing import FrozenSet, Optional

from azure.cosmos import PartitionKey
from azure.cosmos.aio import CosmosClient
from fastapi import HTTPException, status

from .config import (
    ALLOWED_CONTAINERS,
    COSMOS_DATABASE,
    COSMOS_ENDPOINT,
    COSMOS_KEY,
    PARTITION_KEY_PATH,
)
from .services.cosmos_service import CosmosService

logger = logging.getLogger(__name__)

_client: Optional[CosmosClient] = None
_client_lock = threading.Lock()


def get_client() -> CosmosClient:
    """Return the shared Cosmos client, creating it on first use."""
    global _client
    # Sync dependencies run in the threadpool; only one thread may create the client.
    with _client_lock:
        if _client is None:
            if not COSMOS_ENDPOINT:
                raise RuntimeError("COSMOS_ENDPOINT is not configured")
            _client = CosmosClient(COSMOS_ENDPOINT, credential=COSMOS_KEY)
            logger.info("Cosmos client created for %s", COSMOS_ENDPOINT)
        return _client


async def close_client() -> None:
    """Close the shared Cosmos client if it was created."""
    global _client
    with _client_lock:
        client, _client = _client, None
    if client is not None:
        await client.close()


def get_cosmos_service() -> CosmosService:
    """Dependency to get the data access service."""
    try:
        client = get_client()
    except Exception as e:
        logger.exception("Cosmos client is unavailable")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e),
        )
    return CosmosService(client, COSMOS_DATABASE)


def get_allowed_containers() -> FrozenSet[str]:
    """Dependency to get the container allow-list."""
    return ALLOWED_CONTAINERS


async def create_containers(client: CosmosClient, database_name: str = COSMOS_DATABASE, container_names=None):
    """Create the database and every allow-listed container if missing.

    Returns the container proxies, keyed by name.
    """
    database = await client.create_database_if_not_exists(id=database_name)

    containers = {}
    for name in sorted(container_names or ALLOWED_CONTAINERS):
        containers[name] = await database.create_container_if_not_exists(
            id=name,
            partition_key=PartitionKey(path=PARTITION_KEY_PATH),
        )
        logger.info("Container %s/%s is ready", database_name, name)
    return containers
