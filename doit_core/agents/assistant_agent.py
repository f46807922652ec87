"""任务助手的交互循环。

负责构造请求、驱动流式解码并维护 chat 模式下的会话历史：

    idle -> awaiting_input -> request_in_flight -> streaming_response
         -> awaiting_input (chat) | terminated (generate)

同一时刻只有一个请求在途，会话历史只由本循环持有并显式传递。
"""

import builtins
import itertools
import logging
import sys
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Iterator, Literal, Optional, TextIO
from uuid import uuid4

from doit_core.config.settings import settings
from doit_core.domain.conversation import ConversationHistory
from doit_core.domain.exceptions import ApiError, NetworkError, ValidationError
from doit_core.domain.models import ChatMessage, ChatRequest, GenerateRequest, StreamMode
from doit_core.infrastructure.logging.logger import logger
from doit_core.prompts import build_question_prompt, build_system_prompt
from doit_core.providers.base import ProviderClient
from doit_core.streaming import LineReassembler, TurnAccumulator

InteractionState = Literal[
    "idle",
    "awaiting_input",
    "request_in_flight",
    "streaming_response",
    "terminated",
]

EXIT_KEYWORDS = frozenset({"exit", "quit"})


@dataclass
class AssistantConfig:
    model: str
    input_prompt: str = "> "


class AssistantAgent:
    def __init__(
        self,
        provider_client: ProviderClient,
        tasks_json: str = "[]",
        config: Optional[AssistantConfig] = None,
        out: Optional[TextIO] = None,
        err: Optional[TextIO] = None,
        input_func: Optional[Callable[[str], str]] = None,
    ):
        """初始化任务助手。

        Args:
            provider_client: 模型服务客户端
            tasks_json: 序列化后的任务列表，作为模型上下文
            config: 模型与提示符配置，默认取 settings.default_model
            out: 回答输出流，默认 stdout
            err: 错误输出流，默认 stderr
            input_func: 读取一行交互输入的函数，默认内置 input
        """
        self._provider_client = provider_client
        self._tasks_json = tasks_json
        self._config = config or AssistantConfig(model=getattr(settings, "default_model", "llama3.2"))
        self._out = out if out is not None else sys.stdout
        self._err = err if err is not None else sys.stderr
        self._input = input_func or builtins.input
        self.state: InteractionState = "idle"

    def ask(self, question: str) -> str:
        """单次问答：发送一次请求，流式打印回答并返回完整文本。

        传输层错误（NetworkError / ApiError）直接向上抛出。
        """
        text = (question or "").strip()
        if not text:
            raise ValidationError(code="EMPTY_QUESTION", message="Please provide a question.")
        self._transition("awaiting_input")
        req = GenerateRequest(model=self._config.model, prompt=build_question_prompt(self._tasks_json, text))
        try:
            acc = self._run_turn("generate", lambda: self._provider_client.generate_stream(req), messages=1)
        finally:
            self._transition("terminated")
        return acc.partial_text

    def chat(self, first_input: Optional[str] = None, history: Optional[ConversationHistory] = None) -> ConversationHistory:
        """多轮对话循环，返回本次会话的完整历史。

        第一轮使用命令行传入的问题，之后每轮从交互输入读取一行。
        输入 exit/quit（不区分大小写）或输入结束时退出；空输入直接重新提示。
        传输层错误会被报告到错误输出并结束会话，不做重试。
        """
        if history is None:
            history = ConversationHistory()
        if history.system_message is None:
            history.seed(build_system_prompt(self._tasks_json))

        pending = first_input
        self._transition("awaiting_input")
        while self.state != "terminated":
            if pending is not None:
                raw, pending = pending, None
            else:
                try:
                    raw = self._input(self._config.input_prompt)
                except EOFError:
                    self._transition("terminated")
                    break
            text = raw.strip()
            if not text:
                continue
            if text.lower() in EXIT_KEYWORDS:
                self._transition("terminated")
                break

            history.add_user(text)
            try:
                reply = self.chat_turn(history)
            except (NetworkError, ApiError) as e:
                self._err.write(f"Error: {e.message}\n")
                self._err.flush()
                self._transition("terminated")
                break
            history.add_assistant(reply.content)
            self._transition("awaiting_input")
        return history

    def chat_turn(self, history: ConversationHistory) -> ChatMessage:
        """把完整历史发给服务端，返回本轮拼接完成的 assistant 消息（不写入历史）。"""

        messages = history.messages()
        req = ChatRequest(model=self._config.model, messages=messages)
        acc = self._run_turn("chat", lambda: self._provider_client.chat_stream(req), messages=len(messages))
        reply = acc.final_message()
        if reply is None:
            reply = ChatMessage(role="assistant", content=acc.partial_text)
        return reply

    # ---- 内部方法 ----

    def _run_turn(
        self,
        mode: StreamMode,
        open_stream: Callable[[], Iterable[bytes]],
        messages: int,
    ) -> TurnAccumulator:
        start_time = time.time()
        log_ctx: Dict[str, Any] = {
            "trace_id": f"tr-{uuid4().hex}",
            "mode": mode,
            "model": self._config.model,
        }
        self._log(logging.INFO, "Sending request", log_ctx, messages=messages)
        self._transition("request_in_flight")
        chunks: Optional[Iterator[bytes]] = None
        reassembler = LineReassembler()
        acc = TurnAccumulator(mode, out=self._out)
        try:
            chunks = iter(open_stream())
            # 惰性生成器在取第一个 chunk 时才真正发出请求
            first = next(chunks, None)
            self._transition("streaming_response")
            body = chunks if first is None else itertools.chain([first], chunks)
            acc.consume_lines(reassembler.iter_lines(body))
        except (NetworkError, ApiError) as e:
            self._log(logging.ERROR, "Request failed", log_ctx, code=e.code, error=e.message)
            raise
        finally:
            close = getattr(chunks, "close", None)
            if close is not None:
                close()
        if reassembler.pending.strip():
            self._log(logging.DEBUG, "Discarded unterminated trailing data", log_ctx, size=len(reassembler.pending))
        self._log(
            logging.INFO,
            "Completed turn",
            log_ctx,
            fragments=acc.fragments,
            chars=len(acc.partial_text),
            elapsed_seconds=round(time.time() - start_time, 2),
        )
        return acc

    def _transition(self, new_state: InteractionState) -> None:
        if new_state != self.state:
            logger.debug("State transition", extra={"extra": {"from": self.state, "to": new_state}})
        self.state = new_state

    @staticmethod
    def _log(level: int, message: str, log_ctx: Dict[str, Any], **fields: Any) -> None:
        payload = dict(log_ctx)
        payload.update(fields)
        logger.log(level, message, extra={"extra": payload})
