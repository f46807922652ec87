"""本地模型服务（Ollama 风格 HTTP 接口）适配器。

- 单次问答: POST {base_url}/api/generate，请求体 {model, prompt, stream: true}
- 多轮对话: POST {base_url}/api/chat，请求体 {model, messages, stream: true}

响应体为 NDJSON。本模块不做任何分行处理，只把传输层收到的字节块原样交给调用方。
"""

from typing import Any, Dict, Iterable

import httpx

from doit_core.config.settings import settings
from doit_core.domain.exceptions import ApiError, NetworkError
from doit_core.domain.models import ChatRequest, GenerateRequest

GENERATE_PATH = "/api/generate"
CHAT_PATH = "/api/chat"


class OllamaClient:
    """本地模型服务客户端实现。"""

    name = "ollama"

    def __init__(self, cfg=settings):
        self._settings = cfg

    def generate_stream(self, req: GenerateRequest) -> Iterable[bytes]:
        return self._stream(GENERATE_PATH, req.to_payload())

    def chat_stream(self, req: ChatRequest) -> Iterable[bytes]:
        return self._stream(CHAT_PATH, req.to_payload())

    # ---- 辅助方法 ----

    def _stream(self, path: str, payload: Dict[str, Any]) -> Iterable[bytes]:
        base = getattr(self._settings, "ollama_base_url", None) or "http://localhost:11434"
        url = f"{base.rstrip('/')}{path}"
        timeout = getattr(self._settings, "http_timeout", None)
        try:
            with httpx.Client(timeout=timeout, trust_env=False) as client:
                with client.stream(
                    "POST",
                    url,
                    json=payload,
                    headers={"Content-Type": "application/json"},
                ) as resp:
                    if resp.status_code >= 400:
                        resp.read()
                        raise ApiError(
                            code="API_ERROR",
                            message=resp.text or f"HTTP {resp.status_code}",
                            http_status=resp.status_code,
                        )
                    for chunk in resp.iter_bytes():
                        if chunk:
                            yield chunk
        except httpx.RequestError as e:
            raise NetworkError(code="NETWORK_ERROR", message=str(e) or type(e).__name__, url=url)
