import logging
LOGGER = logging.getLogger(__name__)

import asyncio
import os
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional, Set, Union
from openai import AsyncAzureOpenAI
from aiassistant.service.secrets import AssistantSecrets
from aiassistant.utils.url_validation import is_absolute_url

DEFAULT_POLL_INTERVAL = 0.5
DEFAULT_API_VERSION = "2024-05-01-preview"

# a run keeps being polled only while it is in one of these states,
# any other status is terminal
IN_FLIGHT_STATUSES = frozenset({"queued", "in_progress"})

ECHO_PREFIX = "Echo (test mode): "
RUN_FAILED_TEXT = "Error: Assistant run did not complete successfully!"
NO_RESPONSE_TEXT = "Error: No valid response from assistant!"


class ResultKind(str, Enum):
    ANSWER = "answer"
    ECHO = "echo"
    RUN_FAILED = "run_failed"
    NO_RESPONSE = "no_response"
    TIMED_OUT = "timed_out"
    ERROR = "error"


@dataclass(frozen=True)
class AssistantResult:
    kind: ResultKind
    text: str

    @property
    def ok(self) -> bool:
        return self.kind in (ResultKind.ANSWER, ResultKind.ECHO)


@dataclass(frozen=True)
class LiveMode:
    client: Any
    assistant_id: str


@dataclass(frozen=True)
class DegradedMode:
    reason: str


AssistantMode = Union[LiveMode, DegradedMode]


def default_client_factory(endpoint: str, key: str):
    return AsyncAzureOpenAI(
        azure_endpoint=endpoint,
        api_key=key,
        api_version=os.getenv('AZURE_OPENAI_API_VERSION', DEFAULT_API_VERSION),
    )


class AIAssistantService:
    """
    Sends one user message to a hosted assistant and returns its answer.

    Each call creates a fresh remote thread, posts the message, starts a
    run, polls the run until it leaves the queued/in_progress states, reads
    the first assistant message and then deletes the thread. Nothing about
    a call is kept once it returns.

    When the endpoint, key or assistant id is missing or unusable the
    service runs in degraded mode for its whole lifetime and simply echoes
    the message back.
    """

    def __init__(self,
                 secrets: AssistantSecrets,
                 client_factory: Optional[Callable[[str, str], Any]] = None,
                 poll_interval: float = DEFAULT_POLL_INTERVAL,
                 max_poll_attempts: Optional[int] = None,
                 poll_timeout: Optional[float] = None):
        self.poll_interval = poll_interval
        self.max_poll_attempts = max_poll_attempts
        self.poll_timeout = poll_timeout
        self._cleanup_tasks: Set[asyncio.Task] = set()
        self.mode = self._select_mode(secrets, client_factory or default_client_factory)

    @staticmethod
    def _select_mode(secrets: AssistantSecrets, client_factory) -> AssistantMode:
        endpoint = (secrets.endpoint or "").strip()
        key = (secrets.key or "").strip()
        assistant_id = (secrets.id or "").strip()

        if not secrets.is_complete():
            LOGGER.warning("AI Assistant is not configured - using test mode")
            return DegradedMode(reason="missing configuration")

        LOGGER.info(f"AI Assistant endpoint: '{endpoint}' assistant_id: '{assistant_id}'")

        if not is_absolute_url(endpoint):
            LOGGER.error(f"Invalid endpoint URI format: '{endpoint}' - using test mode")
            return DegradedMode(reason="invalid endpoint")

        try:
            client = client_factory(endpoint, key)
            LOGGER.info("Assistants client initialized successfully")
            return LiveMode(client=client, assistant_id=assistant_id)
        except Exception as e:
            LOGGER.error(f"Error initializing assistants client: {e} - using test mode")
            return DegradedMode(reason="client construction failed")

    @property
    def is_live(self) -> bool:
        return isinstance(self.mode, LiveMode)

    async def send_message_and_get_response(self, message: str) -> str:
        """Always returns a string; failures come back as text starting with "Error:"."""
        result = await self.converse(message)
        return result.text

    async def converse(self, message: str) -> AssistantResult:
        match self.mode:
            case LiveMode(client=client, assistant_id=assistant_id):
                return await self._converse_live(client, assistant_id, message)
            case DegradedMode():
                return AssistantResult(ResultKind.ECHO, f"{ECHO_PREFIX}{message}")

    async def _converse_live(self, client, assistant_id: str, message: str) -> AssistantResult:
        thread_id = None
        try:
            thread = await client.beta.threads.create()
            thread_id = thread.id
            LOGGER.debug(f"Created thread {thread_id}")
            result = await self._exchange(client, assistant_id, thread_id, message)
        except Exception as e:
            LOGGER.error(f"Error in send_message_and_get_response: {e}", exc_info=True)
            result = AssistantResult(ResultKind.ERROR, f"Error: {e}")
        finally:
            # also runs when the call is cancelled mid-flight
            if thread_id is not None:
                self._schedule_thread_delete(client, thread_id)
        return result

    async def _exchange(self, client, assistant_id: str, thread_id: str, message: str) -> AssistantResult:
        await client.beta.threads.messages.create(thread_id=thread_id, role="user", content=message)
        run = await client.beta.threads.runs.create(thread_id=thread_id, assistant_id=assistant_id)

        run, polls = await self._wait_for_run(client, thread_id, run.id)

        if run.status in IN_FLIGHT_STATUSES:
            LOGGER.warning(f"Run {run.id} on thread {thread_id} still '{run.status}' after {polls} polls")
            return AssistantResult(ResultKind.TIMED_OUT, f"Error: Assistant run timed out after {polls} polls!")

        if run.status != "completed":
            LOGGER.warning(f"Run {run.id} on thread {thread_id} ended with status '{run.status}'")
            return AssistantResult(ResultKind.RUN_FAILED, RUN_FAILED_TEXT)

        messages = await client.beta.threads.messages.list(thread_id=thread_id)
        assistant_message = next((m for m in messages.data if m.role == "assistant"), None)
        content = assistant_message.content if assistant_message is not None else None
        first_item = content[0] if content else None
        if first_item is None or first_item.type != "text":
            LOGGER.warning(f"No text response from assistant on thread {thread_id}")
            return AssistantResult(ResultKind.NO_RESPONSE, NO_RESPONSE_TEXT)

        return AssistantResult(ResultKind.ANSWER, first_item.text.value)

    async def _wait_for_run(self, client, thread_id: str, run_id: str):
        """
        Fetch the run, then sleep, until it is no longer queued or in progress.
        Unbounded unless max_poll_attempts or poll_timeout is set.
        """
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self.poll_timeout if self.poll_timeout is not None else None
        polls = 0
        while True:
            run = await client.beta.threads.runs.retrieve(run_id=run_id, thread_id=thread_id)
            polls += 1
            await asyncio.sleep(self.poll_interval)
            if run.status not in IN_FLIGHT_STATUSES:
                return run, polls
            if self.max_poll_attempts is not None and polls >= self.max_poll_attempts:
                return run, polls
            if deadline is not None and loop.time() >= deadline:
                return run, polls

    def _schedule_thread_delete(self, client, thread_id: str) -> asyncio.Task:
        """Delete the thread in the background; the caller does not wait for it."""
        task = asyncio.create_task(self._delete_thread(client, thread_id))
        self._cleanup_tasks.add(task)
        task.add_done_callback(self._cleanup_tasks.discard)
        return task

    async def _delete_thread(self, client, thread_id: str) -> bool:
        try:
            await client.beta.threads.delete(thread_id)
            LOGGER.debug(f"Deleted thread {thread_id}")
            return True
        except Exception as e:
            LOGGER.error(f"Error deleting thread {thread_id}: {e}")
            return False

    async def drain_cleanup(self) -> None:
        """Wait for any outstanding thread deletions."""
        if self._cleanup_tasks:
            await asyncio.gather(*list(self._cleanup_tasks))
