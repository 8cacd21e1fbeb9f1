from typing import Dict, List, Optional, Tuple

import pytest
from azure.cosmos import exceptions
from fastapi.testclient import TestClient

from cosmos_tasks.database import get_allowed_containers, get_cosmos_service
from cosmos_tasks.main import app
from cosmos_tasks.services.cosmos_service import CosmosService

ALLOWED = frozenset({"Tasks", "Archive"})


async def _aiter(items):
    for item in items:
        yield item


class FakeQueryResult:
    """Stand-in for the SDK's AsyncItemPaged."""

    def __init__(self, rows: List[dict], page_size: int):
        self.rows = rows
        self.page_size = page_size
        self.pages_read = 0

    def by_page(self):
        return self._pages()

    async def _pages(self):
        for start in range(0, len(self.rows), self.page_size):
            self.pages_read += 1
            yield _aiter(self.rows[start:start + self.page_size])


class FakeScripts:
    def __init__(self, container: "FakeContainer"):
        self.container = container
        self.calls: List[dict] = []
        self.result: Optional[int] = None

    async def execute_stored_procedure(self, sproc, partition_key=None, params=None):
        self.container._raise_if_failing()
        self.calls.append({"sproc": sproc, "partition_key": partition_key, "params": params})
        if self.result is not None:
            return self.result
        for document in params[0]:
            await self.container.create_item(body=document)
        return len(params[0])


class FakeContainer:
    """In-memory Cosmos container keyed by (id, partition key)."""

    def __init__(self, name: str, page_size: int = 2):
        self.id = name
        self.page_size = page_size
        self.documents: Dict[Tuple[str, str], dict] = {}
        self.projection_rows: List[dict] = []
        self.create_options: List[dict] = []
        self.last_query: Optional[FakeQueryResult] = None
        self.error: Optional[Exception] = None
        self.scripts = FakeScripts(self)

    def _raise_if_failing(self):
        if self.error is not None:
            raise self.error

    async def create_item(self, body, **options):
        self._raise_if_failing()
        key = (body["id"], body["PartitionKey"])
        if key in self.documents:
            raise exceptions.CosmosResourceExistsError(status_code=409, message="Entity with the specified id already exists in the system.")
        self.create_options.append(options)
        stored = dict(body, _rid="rid", _etag="etag", _ts=1)
        self.documents[key] = stored
        return dict(stored)

    async def read_item(self, item, partition_key):
        self._raise_if_failing()
        try:
            return dict(self.documents[(item, partition_key)])
        except KeyError:
            raise exceptions.CosmosResourceNotFoundError(status_code=404, message="Entity with the specified id does not exist in the system.")

    def query_items(self, query):
        self._raise_if_failing()
        if "udf.getDaysLeft" in query:
            rows = list(self.projection_rows)
        else:
            rows = [dict(doc) for doc in self.documents.values()]
        self.last_query = FakeQueryResult(rows, self.page_size)
        return self.last_query

    async def replace_item(self, item, body):
        self._raise_if_failing()
        key = (item, body["PartitionKey"])
        if key not in self.documents:
            raise exceptions.CosmosResourceNotFoundError(status_code=404, message="Entity with the specified id does not exist in the system.")
        self.documents[key] = dict(body)
        return dict(body)

    async def delete_item(self, item, partition_key):
        self._raise_if_failing()
        try:
            del self.documents[(item, partition_key)]
        except KeyError:
            raise exceptions.CosmosResourceNotFoundError(status_code=404, message="Entity with the specified id does not exist in the system.")


class FakeDatabase:
    def __init__(self):
        self.containers: Dict[str, FakeContainer] = {}

    def get_container_client(self, name):
        if name not in self.containers:
            self.containers[name] = FakeContainer(name)
        return self.containers[name]


class FakeCosmosClient:
    def __init__(self):
        self.databases: Dict[str, FakeDatabase] = {}

    def get_database_client(self, name):
        if name not in self.databases:
            self.databases[name] = FakeDatabase()
        return self.databases[name]


@pytest.fixture
def cosmos_client():
    return FakeCosmosClient()


@pytest.fixture
def service(cosmos_client):
    return CosmosService(cosmos_client, "TestDb", partition_key="TaskPartitionKey", pre_trigger=None, post_trigger=None)


@pytest.fixture
def container(cosmos_client):
    return cosmos_client.get_database_client("TestDb").get_container_client("Tasks")


@pytest.fixture
def client(service):
    app.dependency_overrides[get_cosmos_service] = lambda: service
    app.dependency_overrides[get_allowed_containers] = lambda: ALLOWED
    yield TestClient(app)
    app.dependency_overrides.clear()
