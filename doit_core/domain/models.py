"""统一的任务、消息与流式响应数据模型。

- Task: 任务列表中的一条任务。
- ChatMessage: 一条对话消息（system/user/assistant）。
- GenerateRequest / ChatRequest: 发给模型服务的请求。
- ResponseRecord: NDJSON 响应中一行解码后的增量事件。
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional


# 对话消息角色
Role = Literal["system", "user", "assistant"]

# 会话模式：generate 对应单次问答，chat 对应多轮对话
StreamMode = Literal["generate", "chat"]


@dataclass
class Task:
    """任务列表中的一条任务。"""

    id: int
    description: str
    completed: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "description": self.description, "completed": self.completed}


@dataclass(frozen=True)
class ChatMessage:
    """一条对话消息，追加到会话历史后不可再修改。"""

    role: Role
    content: str

    def to_payload(self) -> Dict[str, str]:
        return {"role": self.role, "content": self.content}


@dataclass
class GenerateRequest:
    """单次问答请求，对应 /api/generate。"""

    model: str
    prompt: str

    def to_payload(self) -> Dict[str, Any]:
        return {"model": self.model, "prompt": self.prompt, "stream": True}


@dataclass
class ChatRequest:
    """多轮对话请求，对应 /api/chat。

    messages 必须是完整的会话历史：服务端无状态，每一轮都依赖客户端重新提供上下文。
    """

    model: str
    messages: List[ChatMessage] = field(default_factory=list)

    def to_payload(self) -> Dict[str, Any]:
        return {
            "model": self.model,
            "messages": [m.to_payload() for m in self.messages],
            "stream": True,
        }


@dataclass(frozen=True)
class ResponseRecord:
    """NDJSON 响应中一行解码后的结果。

    - text: 本行携带的增量文本（generate 模式的 response，或 chat 模式的 message.content）。
    - is_final: 是否为本轮回答的最后一条记录（done=true）。
    - role: chat 模式下 message.role（可能缺省）。
    """

    text: str
    is_final: bool
    role: Optional[str] = None
