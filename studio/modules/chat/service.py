"""
Streaming completion gateway.

A CompletionSession owns one upstream streaming request. The relay turns the
session's tokens into Server-Sent Event frames and guarantees that the
upstream handle is released on every way out: completion, upstream error,
client disconnect and task cancellation.
"""

import json
import logging
from contextlib import AsyncExitStack, aclosing
from enum import Enum
from typing import AsyncContextManager, AsyncIterator, Awaitable, Callable, Protocol

import anyio
from anthropic import AsyncAnthropic

from studio.config import Settings
from studio.core.errors import StreamFault

logger = logging.getLogger(__name__)

STREAM_ERROR_MESSAGE = "Stream error occurred"


class UpstreamStream(Protocol):
    text_stream: AsyncIterator[str]


class CompletionProvider(Protocol):
    def stream(self, *, system: str, message: str) -> AsyncContextManager[UpstreamStream]:
        ...


class AnthropicProvider:
    def __init__(self, client: AsyncAnthropic, model: str, max_tokens: int):
        self.client = client
        self.model = model
        self.max_tokens = max_tokens

    @classmethod
    def from_settings(cls, settings: Settings) -> "AnthropicProvider":
        return cls(
            AsyncAnthropic(api_key=settings.anthropic_api_key),
            model=settings.anthropic_model,
            max_tokens=settings.anthropic_max_tokens,
        )

    def stream(self, *, system: str, message: str):
        return self.client.messages.stream(
            model=self.model,
            max_tokens=self.max_tokens,
            system=system,
            messages=[{"role": "user", "content": message}],
        )


class SessionState(str, Enum):
    VALIDATED = "validated"
    STREAMING = "streaming"
    COMPLETED = "completed"
    UPSTREAM_ERROR = "upstream_error"
    CLIENT_ABORTED = "client_aborted"


TERMINAL_STATES = {SessionState.COMPLETED, SessionState.UPSTREAM_ERROR, SessionState.CLIENT_ABORTED}


class CompletionSession:
    def __init__(self, provider: CompletionProvider, *, system: str, message: str):
        self.provider = provider
        self.system = system
        self.message = message
        self.state = SessionState.VALIDATED
        self._stack = AsyncExitStack()

    @property
    def finished(self) -> bool:
        return self.state in TERMINAL_STATES

    def _finish(self, state: SessionState) -> None:
        if not self.finished:
            self.state = state
            logger.info(f"Completion session finished: {state.value}")

    async def tokens(self) -> AsyncIterator[str]:
        """Open the upstream stream and yield text deltas in arrival order."""
        self.state = SessionState.STREAMING
        try:
            stream = await self._stack.enter_async_context(
                self.provider.stream(system=self.system, message=self.message)
            )
            async for text in stream.text_stream:
                yield text
        except Exception as e:
            self._finish(SessionState.UPSTREAM_ERROR)
            raise StreamFault(str(e)) from e
        self._finish(SessionState.COMPLETED)

    async def cancel(self) -> None:
        """Stop the upstream generation. Called when the client has gone away."""
        self._finish(SessionState.CLIENT_ABORTED)
        await self.release()

    async def release(self) -> None:
        # Leaving mid-stream without an explicit outcome means the task was torn down
        if self.state == SessionState.STREAMING:
            self._finish(SessionState.CLIENT_ABORTED)
        # Shielded so a cancelled response task still closes the upstream request
        with anyio.CancelScope(shield=True):
            await self._stack.aclose()


def format_event(payload: dict) -> str:
    return f"data: {json.dumps(payload)}\n\n"


async def relay_completion(
    session: CompletionSession,
    is_disconnected: Callable[[], Awaitable[bool]],
) -> AsyncIterator[str]:
    """Yield one SSE frame per upstream token, then exactly one terminal frame."""
    try:
        async with aclosing(session.tokens()) as tokens:
            async for text in tokens:
                if await is_disconnected():
                    await session.cancel()
                    return
                yield format_event({"content": text})
    except StreamFault as e:
        logger.error(f"Streaming error: {str(e)}")
        yield format_event({"error": STREAM_ERROR_MESSAGE})
        return
    finally:
        await session.release()
    yield format_event({"done": True})
