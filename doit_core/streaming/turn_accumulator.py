"""一轮模型回答的增量拼接。"""

import sys
from typing import Iterable, Optional, TextIO

from doit_core.domain.models import ChatMessage, ResponseRecord, StreamMode
from doit_core.infrastructure.logging.logger import logger

from .record_decoder import decode_record


class TurnAccumulator:
    """按到达顺序消费 ResponseRecord，边打印边拼接本轮回答。

    每个片段写出后立即 flush，保证用户看到的是逐 token 的输出；
    打印内容始终是 partial_text 的前缀，不乱序、不丢失、不重复。
    """

    def __init__(self, mode: StreamMode, out: Optional[TextIO] = None):
        self.mode = mode
        self.partial_text = ""
        self.done = False
        self.fragments = 0
        self._out = out if out is not None else sys.stdout

    def consume(self, record: ResponseRecord) -> bool:
        """处理一条记录，返回本轮是否已结束。"""

        if self.done:
            return True
        if record.text:
            self._out.write(record.text)
            self._out.flush()
            self.partial_text += record.text
            self.fragments += 1
        if record.is_final:
            self._complete()
        return self.done

    def consume_lines(self, lines: Iterable[str]) -> "TurnAccumulator":
        """从行迭代器驱动本轮，遇到终止记录后立即停止读取后续行。"""

        for line in lines:
            if not line.strip():
                continue
            record = decode_record(line, self.mode)
            if record is None:
                continue
            if self.consume(record):
                return self
        if not self.done:
            logger.warning(
                "Stream ended without a final record",
                extra={"extra": {"mode": self.mode, "fragments": self.fragments}},
            )
            self._complete()
        return self

    def final_message(self) -> Optional[ChatMessage]:
        """chat 模式下返回拼接完成的 assistant 消息；generate 模式没有历史可更新。"""

        if not self.done or self.mode != "chat":
            return None
        return ChatMessage(role="assistant", content=self.partial_text)

    def _complete(self) -> None:
        self.done = True
        self._out.write("\n")
        self._out.flush()
