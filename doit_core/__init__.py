"""doit 顶层包。

一个极简的命令行待办清单，并可把任务列表作为上下文转发给本地模型服务，
以流式方式显示模型回答。包括配置加载、领域模型、任务存储、
NDJSON 流式解码与交互循环等能力。
"""

from doit_core.cli import main

__all__ = ["main"]
