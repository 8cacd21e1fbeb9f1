from pathlib import Path
import os

from dotenv import load_dotenv

# Load environment variables from repo root and package/.env (if present).
REPO_ROOT = Path(__file__).resolve().parents[1]
load_dotenv(REPO_ROOT / ".env")
load_dotenv(Path(__file__).resolve().parent / ".env")


def _split_csv(value: str) -> list:
    return [item.strip() for item in value.split(",") if item.strip()]


COSMOS_ENDPOINT = os.getenv("COSMOS_ENDPOINT", "")
COSMOS_KEY = os.getenv("COSMOS_KEY", "")
COSMOS_DATABASE = os.getenv("COSMOS_DATABASE", "TasksDb")
ALLOWED_CONTAINERS = frozenset(_split_csv(os.getenv("COSMOS_ALLOWED_CONTAINERS", "Tasks")))
COSMOS_CREATE_CONTAINERS = os.getenv("COSMOS_CREATE_CONTAINERS", "false").lower() in ("1", "true", "yes")

# Every task document lives under this partition key value.
TASK_PARTITION_KEY = os.getenv("TASK_PARTITION_KEY", "TaskPartitionKey")
PARTITION_KEY_PATH = "/PartitionKey"

COSMOS_PRE_TRIGGER = os.getenv("COSMOS_PRE_TRIGGER", "") or None
COSMOS_POST_TRIGGER = os.getenv("COSMOS_POST_TRIGGER", "") or None
COSMOS_BULK_INSERT_SPROC = os.getenv("COSMOS_BULK_INSERT_SPROC", "bulkInsert")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

CORS_ORIGINS = _split_csv(os.getenv("CORS_ORIGINS", "http://localhost:3000"))
