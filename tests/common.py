import logging
LOGGER = logging.getLogger(__name__)

import asyncio
from types import SimpleNamespace
from typing import List, Optional
from unittest.mock import AsyncMock, MagicMock

from aiassistant.service.secrets import AssistantSecrets


VALID_SECRETS = AssistantSecrets(
    endpoint="https://my-resource.openai.azure.com/",
    key="test-key",
    id="asst_123",
)


def text_message(role: str, value: str):
    return SimpleNamespace(role=role, content=[SimpleNamespace(type="text", text=SimpleNamespace(value=value))])


def image_message(role: str):
    return SimpleNamespace(role=role, content=[SimpleNamespace(type="image_file", image_file=SimpleNamespace(file_id="file_1"))])


def make_client(statuses: List[str], messages: Optional[list] = None, thread_id: str = "thread_1"):
    """
    Builds a mock async assistants client. Each runs.retrieve call returns
    the next status from statuses (the last one repeats) and records the
    loop time of the call in client.poll_times.
    """
    client = MagicMock()
    client.poll_times = []
    remaining = list(statuses)

    async def retrieve(run_id, thread_id):
        client.poll_times.append(asyncio.get_running_loop().time())
        status = remaining.pop(0) if len(remaining) > 1 else remaining[0]
        return SimpleNamespace(id=run_id, status=status)

    threads = client.beta.threads
    threads.create = AsyncMock(return_value=SimpleNamespace(id=thread_id))
    threads.delete = AsyncMock(return_value=SimpleNamespace(id=thread_id, deleted=True))
    threads.messages.create = AsyncMock(return_value=SimpleNamespace(id="msg_1"))
    threads.messages.list = AsyncMock(return_value=SimpleNamespace(data=messages or []))
    threads.runs.create = AsyncMock(return_value=SimpleNamespace(id="run_1", status="queued"))
    threads.runs.retrieve = AsyncMock(side_effect=retrieve)
    return client


def factory_for(client):
    return lambda endpoint, key: client
