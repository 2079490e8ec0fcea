from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

SuggestionSet = tuple[str, ...]


class Segments(BaseModel):
    model_config = ConfigDict(frozen=True)

    prefix: str
    # None means the cursor sits at the end of the buffer; the field is then
    # left out of the payload instead of being sent as "".
    suffix: str | None = None


class CompletionRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    language: str
    segments: Segments

    @property
    def prefix(self) -> str:
        return self.segments.prefix

    @property
    def suffix(self) -> str | None:
        return self.segments.suffix

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> CompletionRequest:
        return cls.model_validate(payload)


class CompletionChoice(BaseModel):
    model_config = ConfigDict(extra="ignore")

    index: int | None = None
    text: str


class CompletionResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str | None = None
    choices: list[CompletionChoice] | None = Field(default=None)

    def suggestions(self) -> SuggestionSet:
        return tuple(choice.text for choice in self.choices or ())
