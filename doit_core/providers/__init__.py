"""模型服务集成层。

- base: Provider 抽象接口。
- ollama_client: 本地 NDJSON 流式 HTTP 服务的实现。
"""

from doit_core.config.settings import settings
from doit_core.providers.base import ProviderClient
from doit_core.providers.ollama_client import OllamaClient


def create_provider() -> ProviderClient:
    """根据当前配置创建 Provider 实例。"""

    return OllamaClient(settings)
