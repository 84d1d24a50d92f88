# backend/tour_planner/models/conversation_models.py

from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class ConversationMessage(BaseModel):
    role: Literal["user", "assistant"]
    content: str


# ----------------------------------------------------------
# STOP REASON
# ----------------------------------------------------------
class StopReason(str, Enum):
    END_TURN = "end_turn"
    MAX_TOKENS = "max_tokens"
    PAUSE_TURN = "pause_turn"
    TOOL_USE = "tool_use"
    REFUSAL = "refusal"
    OTHER = "other"

    @classmethod
    def parse(cls, value: Optional[str]) -> "StopReason":
        try:
            return cls(value)
        except ValueError:
            return cls.OTHER


# ----------------------------------------------------------
# CONTENT SEGMENTS (tagged on `kind`)
# ----------------------------------------------------------
class TextSegment(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["text"] = "text"
    text: str = ""


class ToolUseSegment(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["tool_use"] = "tool_use"
    type: str = "tool_use"
    id: Optional[str] = None
    name: Optional[str] = None


class ToolResultSegment(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["tool_result"] = "tool_result"
    type: str = "tool_result"
    tool_use_id: Optional[str] = None


class OtherSegment(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["other"] = "other"
    type: str = "unknown"


ContentSegment = Union[TextSegment, ToolUseSegment, ToolResultSegment, OtherSegment]


def segment_from_payload(item: Dict[str, Any]) -> ContentSegment:
    """Map one raw `content[]` entry of the Messages API onto a segment."""
    seg_type = str(item.get("type") or "unknown")

    if seg_type == "text":
        return TextSegment(text=item.get("text") or "")
    if seg_type.endswith("tool_result"):
        return ToolResultSegment(type=seg_type, tool_use_id=item.get("tool_use_id"))
    if seg_type.endswith("tool_use"):
        return ToolUseSegment(type=seg_type, id=item.get("id"), name=item.get("name"))
    return OtherSegment(type=seg_type)


# ----------------------------------------------------------
# COMPLETION RESULT
# ----------------------------------------------------------
class CompletionResult(BaseModel):
    """One response of the completion endpoint. Never mutated after parsing."""
    model_config = ConfigDict(frozen=True)

    stop_reason: StopReason
    raw_stop_reason: Optional[str] = None
    content: List[ContentSegment] = Field(default_factory=list)
    usage: Dict[str, Any] = Field(default_factory=dict)
    model: Optional[str] = None

    @classmethod
    def from_payload(cls, data: Dict[str, Any]) -> "CompletionResult":
        raw_reason = data.get("stop_reason")
        return cls(
            stop_reason=StopReason.parse(raw_reason),
            raw_stop_reason=raw_reason,
            content=[segment_from_payload(item) for item in data.get("content") or [] if isinstance(item, dict)],
            usage=data.get("usage") or {},
            model=data.get("model"),
        )

    @property
    def text_segments(self) -> List[str]:
        return [seg.text for seg in self.content if isinstance(seg, TextSegment) and seg.text]

    @property
    def text(self) -> str:
        return "\n".join(self.text_segments)
