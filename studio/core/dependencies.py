"""
Request-scoped access to the handles created by create_app.
"""

from fastapi import Request

from studio.modules.chat.service import AnthropicProvider, CompletionProvider
from studio.storage import Storage


def get_storage(request: Request) -> Storage:
    return request.app.state.storage


def get_completion_provider(request: Request) -> CompletionProvider:
    """Build the Anthropic provider on first use so the API starts without a key."""
    state = request.app.state
    if state.provider is None:
        state.provider = AnthropicProvider.from_settings(state.settings)
    return state.provider
