from datetime import datetime
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from ..config import TASK_PARTITION_KEY


class TaskItem(BaseModel):
    """Task document as stored in a Cosmos container.

    Field aliases are the document keys; Cosmos requires the lowercase ``id``.
    """

    id: UUID = Field(default_factory=uuid4)
    task_name: str = Field(alias="TaskName")
    assignee: str = Field(alias="Assignee")
    deadline: datetime = Field(alias="Deadline")
    partition_key: str = Field(default=TASK_PARTITION_KEY, alias="PartitionKey")

    class Config:
        populate_by_name = True

    def to_document(self) -> dict:
        """Serialize to the JSON-safe dict the SDK sends over the wire."""
        return self.model_dump(mode="json", by_alias=True)
