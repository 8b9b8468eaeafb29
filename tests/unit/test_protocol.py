"""Unit tests for the scout's JSON-lines output protocol."""

import json

from web_scout.scout.protocol import LineDecoder, TurnCompleted, UnknownEvent, decode_event


def message_end(texts, model="claude-haiku-4-5", inp=10, out=5, cost=0.001):
    return json.dumps({
        "type": "message_end",
        "message": {
            "role": "assistant",
            "model": model,
            "content": [{"type": "text", "text": t} for t in texts]
            + [{"type": "toolCall", "name": "fetch_url"}],
            "usage": {"input": inp, "output": out, "cost": {"total": cost}},
        },
    })


class TestDecodeEvent:
    def test_assistant_turn(self):
        event = decode_event(message_end(["first", "second"]))
        assert isinstance(event, TurnCompleted)
        assert event.texts == ("first", "second")
        assert event.model == "claude-haiku-4-5"
        assert (event.input_tokens, event.output_tokens) == (10, 5)
        assert event.cost == 0.001

    def test_missing_usage_defaults_to_zero(self):
        line = json.dumps({"type": "message_end", "message": {"role": "assistant", "content": []}})
        event = decode_event(line)
        assert event == TurnCompleted()

    def test_user_message_end_is_unknown(self):
        line = json.dumps({"type": "message_end", "message": {"role": "user"}})
        assert decode_event(line) == UnknownEvent(type="message_end")

    def test_other_event_types(self):
        assert decode_event('{"type": "tool_execution_start"}') == UnknownEvent(
            type="tool_execution_start"
        )

    def test_malformed(self):
        assert decode_event("not json at all") is None
        assert decode_event("[1, 2, 3]") is None
        assert decode_event('{"type": ') is None


class TestLineDecoder:
    def test_splits_lines_across_chunks(self):
        dec = LineDecoder()
        assert dec.feed(b'{"a":') == []
        assert dec.feed(b' 1}\n{"b": 2}\n') == ['{"a": 1}', '{"b": 2}']

    def test_skips_blank_lines(self):
        assert LineDecoder().feed(b"\n\n  \nx\n") == ["x"]

    def test_multibyte_character_split(self):
        data = "héllo\n".encode("utf-8")
        dec = LineDecoder()
        lines = dec.feed(data[:2]) + dec.feed(data[2:])
        assert lines == ["héllo"]

    def test_flush_returns_partial_line(self):
        dec = LineDecoder()
        dec.feed(b'{"tail": true}')
        assert dec.flush() == '{"tail": true}'
        assert dec.flush() is None
