import logging
from typing import List, Optional

from azure.cosmos import exceptions
from azure.cosmos.aio import ContainerProxy, CosmosClient

from ..config import (
    COSMOS_BULK_INSERT_SPROC,
    COSMOS_POST_TRIGGER,
    COSMOS_PRE_TRIGGER,
    TASK_PARTITION_KEY,
)
from ..models import TaskItem

logger = logging.getLogger(__name__)


class CosmosService:
    """Data manipulation functions for the task containers.

    Each method resolves the container by name and issues exactly one SDK
    call. Retries, if any, are left to the Cosmos client itself.
    """

    def __init__(
        self,
        client: CosmosClient,
        database_name: str,
        partition_key: str = TASK_PARTITION_KEY,
        pre_trigger: Optional[str] = COSMOS_PRE_TRIGGER,
        post_trigger: Optional[str] = COSMOS_POST_TRIGGER,
        bulk_insert_sproc: str = COSMOS_BULK_INSERT_SPROC,
    ):
        self._client = client
        self._database_name = database_name
        self.partition_key = partition_key
        self.pre_trigger = pre_trigger
        self.post_trigger = post_trigger
        self.bulk_insert_sproc = bulk_insert_sproc

    def _get_container(self, container_name: str) -> ContainerProxy:
        database = self._client.get_database_client(self._database_name)
        return database.get_container_client(container_name)

    def _to_document(self, task: TaskItem) -> dict:
        document = task.to_document()
        document["PartitionKey"] = self.partition_key
        return document

    async def add_task(self, task: TaskItem, container_name: str) -> dict:
        """Create a new task document, running the configured triggers."""
        container = self._get_container(container_name)

        options = {}
        if self.pre_trigger:
            options["pre_trigger_include"] = self.pre_trigger
        if self.post_trigger:
            options["post_trigger_include"] = self.post_trigger

        logger.debug("Creating task %s in %s", task.id, container_name)
        return await container.create_item(body=self._to_document(task), **options)

    async def get_task(self, task_id: str, container_name: str) -> Optional[dict]:
        """Point-read a task; returns None if the document does not exist."""
        container = self._get_container(container_name)
        try:
            return await container.read_item(item=task_id, partition_key=self.partition_key)
        except exceptions.CosmosResourceNotFoundError:
            logger.debug("Task %s not found in %s", task_id, container_name)
            return None

    async def get_tasks(self, query: str, container_name: str) -> List[dict]:
        """Run a query and collect every result page into one list."""
        container = self._get_container(container_name)

        results: List[dict] = []
        pages = container.query_items(query=query).by_page()
        async for page in pages:
            async for item in page:
                results.append(item)

        logger.debug("Query against %s returned %d items", container_name, len(results))
        return results

    async def update_task(self, task_id: str, container_name: str, task: TaskItem) -> dict:
        """Replace the whole document stored under task_id."""
        container = self._get_container(container_name)

        document = self._to_document(task)
        document["id"] = task_id

        logger.debug("Replacing task %s in %s", task_id, container_name)
        return await container.replace_item(item=task_id, body=document)

    async def delete_task(self, task_id: str, container_name: str) -> None:
        container = self._get_container(container_name)

        logger.debug("Deleting task %s from %s", task_id, container_name)
        await container.delete_item(item=task_id, partition_key=self.partition_key)

    async def execute_bulk_insert(self, container_name: str, tasks: List[TaskItem]) -> int:
        """Insert a batch through the bulk-insert stored procedure.

        The whole batch is passed as the procedure's single argument and the
        procedure reports how many documents it created.
        """
        container = self._get_container(container_name)

        documents = [self._to_document(task) for task in tasks]
        logger.debug("Bulk inserting %d tasks into %s", len(documents), container_name)
        result = await container.scripts.execute_stored_procedure(
            sproc=self.bulk_insert_sproc,
            partition_key=self.partition_key,
            params=[documents],
        )
        return int(result or 0)
