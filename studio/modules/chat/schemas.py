from pydantic import BaseModel, field_validator

from studio.modules.chat.prompts import ChatMode


class ChatRequest(BaseModel):
    message: str
    mode: ChatMode = ChatMode.CHAT

    @field_validator("message")
    @classmethod
    def require_text(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Message is required")
        return value

    @field_validator("mode", mode="before")
    @classmethod
    def fallback_to_chat(cls, value):
        # Unknown or missing modes use the general chat prompt
        if value is None or value not in [m.value for m in ChatMode]:
            return ChatMode.CHAT
        return value
