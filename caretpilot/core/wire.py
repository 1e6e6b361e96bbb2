"""Request/response bodies for the chat-completions endpoint."""

from typing import Optional

from pydantic import BaseModel


class ChatMessage(BaseModel):
    role: str
    content: str


class ChatRequest(BaseModel):
    model: str
    messages: list[ChatMessage]
    max_tokens: int
    n: int = 1
    temperature: float


class ChoiceMessage(BaseModel):
    # Only the content is required on the way back
    role: Optional[str] = None
    content: str


class ChatChoice(BaseModel):
    message: ChoiceMessage


class ChatResponse(BaseModel):
    choices: list[ChatChoice] = []

    def first_text(self) -> str:
        """Content of the first candidate, stripped; empty when there is none."""
        if not self.choices:
            return ""
        return self.choices[0].message.content.strip()
