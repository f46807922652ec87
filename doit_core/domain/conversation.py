"""单次对话会话的内存历史。

历史只在一次 chat 会话内有效，不跨进程持久化。
"""

from typing import Iterator, List, Optional

from .exceptions import ValidationError
from .models import ChatMessage


class ConversationHistory:
    """按插入顺序保存的消息序列，只允许追加。

    第一条消息（若存在）一定是 system 消息，且只会插入一次。
    """

    def __init__(self) -> None:
        self._messages: List[ChatMessage] = []

    def seed(self, system_prompt: str) -> ChatMessage:
        """在会话开始时插入唯一的 system 消息。"""

        if self._messages:
            raise ValidationError(
                code="HISTORY_ALREADY_SEEDED",
                message="system message must be the first and only seed of a conversation",
            )
        msg = ChatMessage(role="system", content=system_prompt)
        self._messages.append(msg)
        return msg

    def add_user(self, content: str) -> ChatMessage:
        return self.append(ChatMessage(role="user", content=content))

    def add_assistant(self, content: str) -> ChatMessage:
        return self.append(ChatMessage(role="assistant", content=content))

    def append(self, message: ChatMessage) -> ChatMessage:
        if message.role == "system":
            return self.seed(message.content)
        if not self._messages:
            raise ValidationError(
                code="HISTORY_NOT_SEEDED",
                message="conversation must start with a system message",
            )
        self._messages.append(message)
        return message

    @property
    def system_message(self) -> Optional[ChatMessage]:
        if self._messages and self._messages[0].role == "system":
            return self._messages[0]
        return None

    def messages(self) -> List[ChatMessage]:
        """返回历史的快照副本，调用方修改列表不会影响历史。"""

        return list(self._messages)

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[ChatMessage]:
        return iter(self.messages())
