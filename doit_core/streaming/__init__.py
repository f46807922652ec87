"""NDJSON 流式响应解码。

- line_reassembler: 字节块 -> 完整文本行。
- record_decoder: 文本行 -> ResponseRecord（坏行返回 None）。
- turn_accumulator: ResponseRecord -> 打印输出与最终 assistant 消息。
"""

from .line_reassembler import LineReassembler
from .record_decoder import decode_record
from .turn_accumulator import TurnAccumulator

__all__ = ["LineReassembler", "decode_record", "TurnAccumulator"]
