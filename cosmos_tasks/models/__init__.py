from .task import TaskItem

__all__ = ["TaskItem"]
