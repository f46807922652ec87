"""把一行 NDJSON 文本解码为 ResponseRecord。

解码失败（非法 JSON、缺少字段、类型不符）时返回 None，由调用方跳过该行；
偶发的坏行不能中断一次本来成功的长时间流式输出。
"""

import json
from typing import Any, Dict, Optional

from doit_core.domain.models import ResponseRecord, StreamMode
from doit_core.infrastructure.logging.logger import logger


def decode_record(line: str, mode: StreamMode) -> Optional[ResponseRecord]:
    """按当前会话模式解析一行文本，失败时返回 None。"""

    try:
        data = json.loads(line)
    except json.JSONDecodeError:
        _log_dropped(line, "invalid_json")
        return None
    if not isinstance(data, dict):
        _log_dropped(line, "not_an_object")
        return None

    done = data.get("done")
    if not isinstance(done, bool):
        _log_dropped(line, "missing_done")
        return None

    if mode == "chat":
        return _decode_chat(data, done, line)
    return _decode_generate(data, done, line)


def _decode_generate(data: Dict[str, Any], done: bool, line: str) -> Optional[ResponseRecord]:
    text = data.get("response")
    if not isinstance(text, str):
        _log_dropped(line, "missing_response")
        return None
    return ResponseRecord(text=text, is_final=done)


def _decode_chat(data: Dict[str, Any], done: bool, line: str) -> Optional[ResponseRecord]:
    message = data.get("message")
    if not isinstance(message, dict):
        _log_dropped(line, "missing_message")
        return None
    content = message.get("content")
    role = message.get("role")
    if not isinstance(content, str) or (role is not None and not isinstance(role, str)):
        _log_dropped(line, "bad_message")
        return None
    return ResponseRecord(text=content, is_final=done, role=role)


def _log_dropped(line: str, reason: str) -> None:
    logger.debug("Dropped stream record", extra={"extra": {"reason": reason, "line_preview": line[:80]}})
