"""
Pytest fixtures for TaskETA tests.
"""

import json
import os

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Ensure test config is set before importing tasketa modules.
os.environ.setdefault("TASKETA_ENV", "development")
os.environ.setdefault("TASKETA_LOG_LEVEL", "DEBUG")

pytest_plugins = ("pytest_asyncio",)


def make_task(
    node: str = "node-a",
    id: int = 42,
    total: int = 1000,
    updated: int = 100,
    start_time_in_millis: int = 0,
    running_time_in_nanos: int = 100_000_000,
    description: str = "reindex from [src] to [dst]",
    parent_task_id=None,
    **status_fields,
) -> dict:
    """Build one task envelope as a task-status API returns it."""
    task = {
        "node": node,
        "id": id,
        "action": "indices:data/write/reindex",
        "status": {"total": total, "updated": updated, **status_fields},
        "description": description,
        "start_time_in_millis": start_time_in_millis,
        "running_time_in_nanos": running_time_in_nanos,
    }
    if parent_task_id is not None:
        task["parent_task_id"] = parent_task_id
    return task


def single_document(completed: bool = False, **task_fields) -> dict:
    return {"completed": completed, "task": make_task(**task_fields)}


def sliced_document(*tasks: dict) -> dict:
    nodes: dict = {}
    for task in tasks:
        node = nodes.setdefault(task["node"], {"name": task["node"], "tasks": {}})
        node["tasks"][f"{task['node']}:{task['id']}"] = task
    return {"nodes": nodes}


class FakeClock:
    """Clock returning scripted epoch-ms samples, repeating the last one."""

    def __init__(self, *samples: int):
        self.samples = list(samples)
        self.calls = 0

    def __call__(self) -> int:
        index = min(self.calls, len(self.samples) - 1)
        self.calls += 1
        return self.samples[index]


@pytest.fixture
def single_task_text() -> str:
    """Single running task: 100 of 1000 docs after 100 ms, started at epoch 0."""
    return json.dumps(single_document(), indent=2)


@pytest.fixture
def completed_task_text() -> str:
    return json.dumps(single_document(completed=True), indent=2)


@pytest.fixture
def null_slices_text() -> str:
    document = sliced_document(
        make_task(slices=[None, None], parent_task_id="node-a:1")
    )
    return json.dumps(document, indent=2)


@pytest_asyncio.fixture
async def client():
    """Async test client for the API."""
    from tasketa.main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
