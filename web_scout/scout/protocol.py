"""Scout worker output protocol.

The worker writes one JSON object per line on stdout.  Only assistant
``message_end`` events matter to us; everything else decodes to
``UnknownEvent`` and malformed lines decode to ``None``.  The protocol is
advisory: the process exit code is what decides success.
"""

import codecs
import json
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple, Union


class LineDecoder:
    """Reassembles newline-delimited frames from arbitrary byte chunks.

    A line (or a multi-byte UTF-8 character) may be split across chunks.
    """

    def __init__(self):
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._buffer = ""

    def feed(self, chunk: bytes) -> List[str]:
        """Add *chunk* and return every complete, non-blank line."""
        self._buffer += self._decoder.decode(chunk)
        *lines, self._buffer = self._buffer.split("\n")
        return [line for line in lines if line.strip()]

    def flush(self) -> Optional[str]:
        """Return whatever partial line is left once the stream has closed."""
        self._buffer += self._decoder.decode(b"", final=True)
        rest, self._buffer = self._buffer, ""
        return rest if rest.strip() else None


@dataclass(frozen=True)
class TurnCompleted:
    """An assistant turn finished."""

    texts: Tuple[str, ...] = ()
    model: Optional[str] = None
    input_tokens: int = 0
    output_tokens: int = 0
    cost: float = 0.0


@dataclass(frozen=True)
class UnknownEvent:
    type: str = ""


ScoutEvent = Union[TurnCompleted, UnknownEvent]


def _number(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    return value


def _turn_from_message(message: dict) -> TurnCompleted:
    usage = message.get("usage") if isinstance(message.get("usage"), dict) else {}
    cost = usage.get("cost") if isinstance(usage.get("cost"), dict) else {}

    texts = []
    content = message.get("content")
    if isinstance(content, list):
        for part in content:
            if isinstance(part, dict) and part.get("type") == "text":
                texts.append(str(part.get("text", "")))

    model = message.get("model")
    return TurnCompleted(
        texts=tuple(texts),
        model=model if isinstance(model, str) and model else None,
        input_tokens=int(_number(usage.get("input"))),
        output_tokens=int(_number(usage.get("output"))),
        cost=float(_number(cost.get("total"))),
    )


def decode_event(line: str) -> Optional[ScoutEvent]:
    """Decode one protocol line.  Returns None for malformed input."""
    try:
        raw = json.loads(line)
    except json.JSONDecodeError:
        return None
    if not isinstance(raw, dict):
        return None

    event_type = raw.get("type")
    message = raw.get("message")
    if (
        event_type == "message_end"
        and isinstance(message, dict)
        and message.get("role") == "assistant"
    ):
        return _turn_from_message(message)
    return UnknownEvent(type=str(event_type or ""))
