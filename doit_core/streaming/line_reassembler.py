"""把任意切分的字节块重组为完整的文本行。

传输层的 chunk 与行边界、字符边界都没有对齐关系：一个 chunk 可能在行中间结束，
可能包含多行，也可能把一个多字节 UTF-8 字符切成两半。
"""

import codecs
from typing import Iterator


class LineReassembler:
    """按换行符切分 NDJSON 字节流。

    未以换行结尾的残余文本保留在 pending 中，等待下一个 chunk。
    流结束时仍未结束的残余文本会被直接丢弃，不会成为一条记录。
    """

    def __init__(self, encoding: str = "utf-8"):
        # 增量解码器会把被切断的多字节字符留到下一个 chunk 再解码，
        # 真正非法的字节序列替换为 U+FFFD，而不是抛出异常。
        self._decoder = codecs.getincrementaldecoder(encoding)(errors="replace")
        self._pending = ""

    @property
    def pending(self) -> str:
        return self._pending

    def feed(self, chunk: bytes) -> Iterator[str]:
        """追加一个 chunk，并逐个产出其中已完整的行（不含换行符）。

        chunk 在调用时立即进入缓冲区，返回的迭代器只负责取出完整行。
        """

        self._pending += self._decoder.decode(chunk)
        return self._drain()

    def _drain(self) -> Iterator[str]:
        while True:
            idx = self._pending.find("\n")
            if idx < 0:
                return
            line = self._pending[:idx]
            self._pending = self._pending[idx + 1 :]
            yield line

    def iter_lines(self, chunks) -> Iterator[str]:
        """依次喂入所有 chunk，产出完整的行。"""

        for chunk in chunks:
            yield from self.feed(chunk)
