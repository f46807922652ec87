"""Provider 抽象接口。

上层 Interaction Loop 不直接依赖 HTTP 库，而是依赖此协议：
Provider 只负责发出请求并原样产出响应体的字节块，
分行、解码与拼接都由 streaming 包完成。
"""

from typing import Iterable, Protocol

from doit_core.domain.models import ChatRequest, GenerateRequest


class ProviderClient(Protocol):
    """流式模型服务客户端协议。

    - name: Provider 名称，用于日志。
    - generate_stream(req): 单次问答，逐个产出响应体字节块。
    - chat_stream(req): 多轮对话，逐个产出响应体字节块。
    """

    name: str

    def generate_stream(self, req: GenerateRequest) -> Iterable[bytes]:
        ...

    def chat_stream(self, req: ChatRequest) -> Iterable[bytes]:
        ...
