"""测试 LineReassembler 对任意 chunk 切分的处理。"""

import json

from doit_core.streaming import LineReassembler, decode_record


STREAM = (
    json.dumps({"message": {"role": "assistant", "content": "Héllo "}, "done": False}, ensure_ascii=False)
    + "\n"
    + json.dumps({"message": {"role": "assistant", "content": "世界 🎉"}, "done": False}, ensure_ascii=False)
    + "\n"
    + json.dumps({"message": {"role": "assistant", "content": ""}, "done": True})
    + "\n"
).encode("utf-8")


def _decode_all(chunks, mode="chat"):
    reassembler = LineReassembler()
    records = []
    for chunk in chunks:
        for line in reassembler.feed(chunk):
            if not line.strip():
                continue
            record = decode_record(line, mode)
            if record is not None:
                records.append(record)
    return records


def _split(data: bytes, cuts):
    pieces = []
    prev = 0
    for cut in cuts:
        pieces.append(data[prev:cut])
        prev = cut
    pieces.append(data[prev:])
    return pieces


def test_single_chunk_yields_all_records():
    records = _decode_all([STREAM])
    assert [r.text for r in records] == ["Héllo ", "世界 🎉", ""]
    assert [r.is_final for r in records] == [False, False, True]


def test_every_single_split_point_gives_same_records():
    expected = _decode_all([STREAM])
    for cut in range(len(STREAM) + 1):
        assert _decode_all(_split(STREAM, [cut])) == expected, cut


def test_byte_by_byte_feeding_gives_same_records():
    expected = _decode_all([STREAM])
    chunks = [STREAM[i : i + 1] for i in range(len(STREAM))]
    assert _decode_all(chunks) == expected


def test_split_inside_multibyte_character_is_not_replaced():
    idx = STREAM.index("世".encode("utf-8"))
    # 切在“世”的三个字节中间
    chunks = _split(STREAM, [idx + 1, idx + 2])
    records = _decode_all(chunks)
    assert records[1].text == "世界 🎉"
    assert all("\ufffd" not in r.text for r in records)


def test_split_pairs_inside_json_tokens():
    expected = _decode_all([STREAM])
    for first in range(0, len(STREAM), 7):
        for second in range(first, len(STREAM), 11):
            assert _decode_all(_split(STREAM, [first, second])) == expected


def test_chunk_with_multiple_lines_and_partial_tail():
    reassembler = LineReassembler()
    lines = list(reassembler.feed(b'{"a":1}\n{"b":2}\n{"c"'))
    assert lines == ['{"a":1}', '{"b":2}']
    assert reassembler.pending == '{"c"'
    assert list(reassembler.feed(b":3}\n")) == ['{"c":3}']
    assert reassembler.pending == ""


def test_empty_chunk_yields_nothing():
    reassembler = LineReassembler()
    assert list(reassembler.feed(b"")) == []
    assert reassembler.pending == ""


def test_blank_lines_are_passed_through_to_caller():
    reassembler = LineReassembler()
    assert list(reassembler.feed(b"\n  \nx\n")) == ["", "  ", "x"]


def test_unterminated_tail_is_left_pending():
    reassembler = LineReassembler()
    lines = list(reassembler.iter_lines([b'{"response":"a","done":false}\n', b'{"response":"b"']))
    assert lines == ['{"response":"a","done":false}']
    assert reassembler.pending == '{"response":"b"'


def test_invalid_bytes_become_replacement_character():
    reassembler = LineReassembler()
    assert list(reassembler.feed(b"ab\xffcd\n")) == ["ab\ufffdcd"]


def test_feed_buffers_chunk_even_if_result_not_consumed():
    reassembler = LineReassembler()
    reassembler.feed(b"partial")
    assert reassembler.pending == "partial"


def test_reassembly_is_repeatable_across_runs():
    chunks = _split(STREAM, [5, 40, 41, 90])
    first = "".join(r.text for r in _decode_all(chunks))
    second = "".join(r.text for r in _decode_all(chunks))
    assert first == second == "Héllo 世界 🎉"
