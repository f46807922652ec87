"""提示词加载工具。

按语言(locale) 从 prompts/<locale> 目录读取模板，并把序列化后的任务列表填入其中：
- task_assistant_system.md: chat 模式下唯一的 system 消息。
- task_question.md: generate 模式下的单次问答 prompt。
"""

from pathlib import Path


PROMPTS_DIR = Path(__file__).resolve().parent


def _load_template(name: str, locale: str) -> str:
    return (PROMPTS_DIR / locale / name).read_text(encoding="utf-8")


def build_system_prompt(tasks_json: str, locale: str = "en") -> str:
    """构造带有任务上下文的 system 提示词。"""

    return _load_template("task_assistant_system.md", locale).format(tasks=tasks_json).strip()


def build_question_prompt(tasks_json: str, question: str, locale: str = "en") -> str:
    """构造单次问答的 prompt：任务上下文在前，问题在后。"""

    template = _load_template("task_question.md", locale)
    return template.format(tasks=tasks_json, question=question).strip()
