from typing import Optional

from pydantic import BaseModel, Field


class RemainingDays(BaseModel):
    """Assignee, task name and days left until the deadline."""
    task_name: Optional[str] = Field(default=None, alias="TaskName")
    assignee: Optional[str] = Field(default=None, alias="Assignee")
    day_left: int = Field(default=0, alias="DayLeft")

    class Config:
        populate_by_name = True

    @classmethod
    def from_row(cls, row: dict) -> "RemainingDays":
        day_left = row.get("DayLeft")
        return cls(
            task_name=None if row.get("TaskName") is None else str(row["TaskName"]),
            assignee=None if row.get("Assignee") is None else str(row["Assignee"]),
            day_left=0 if day_left is None else int(day_left),
        )


class BulkInsertResult(BaseModel):
    inserted_count: int = Field(alias="InsertedCount")

    class Config:
        populate_by_name = True


class DeleteResult(BaseModel):
    detail: str
