from doit_core.domain.models import ResponseRecord
from doit_core.streaming import LineReassembler, decode_record


def test_decode_generate_record():
    rec = decode_record('{"response": "Hi", "done": false}', "generate")
    assert rec == ResponseRecord(text="Hi", is_final=False)


def test_decode_chat_record_with_role():
    rec = decode_record('{"message": {"role": "assistant", "content": "Hi"}, "done": true}', "chat")
    assert rec == ResponseRecord(text="Hi", is_final=True, role="assistant")


def test_decode_chat_record_without_role():
    rec = decode_record('{"message": {"content": "Hel"}, "done": false}', "chat")
    assert rec is not None
    assert rec.text == "Hel"
    assert rec.role is None


def test_malformed_lines_return_none():
    bad_lines = [
        "not json",
        '{"response": "x", "done": fal',
        "[1, 2, 3]",
        '"just a string"',
        '{"response": "x"}',
        '{"response": 1, "done": false}',
        '{"response": "x", "done": "no"}',
    ]
    for line in bad_lines:
        assert decode_record(line, "generate") is None, line


def test_chat_shape_mismatch_returns_none():
    assert decode_record('{"response": "x", "done": false}', "chat") is None
    assert decode_record('{"message": "x", "done": false}', "chat") is None
    assert decode_record('{"message": {"role": "assistant"}, "done": false}', "chat") is None
    assert decode_record('{"message": {"role": 3, "content": "x"}, "done": false}', "chat") is None


def test_generate_shape_rejects_chat_record():
    assert decode_record('{"message": {"content": "x"}, "done": false}', "generate") is None


def test_extra_fields_are_ignored():
    rec = decode_record('{"model": "m", "created_at": "t", "response": "ok", "done": true, "eval_count": 3}', "generate")
    assert rec == ResponseRecord(text="ok", is_final=True)


def test_malformed_line_between_valid_ones_is_skipped():
    stream = b'{"response":"a","done":false}\n{oops\n{"response":"b","done":true}\n'
    reassembler = LineReassembler()
    records = [decode_record(line, "generate") for line in reassembler.feed(stream)]
    valid = [r for r in records if r is not None]
    assert [r.text for r in valid] == ["a", "b"]
    assert valid[-1].is_final
