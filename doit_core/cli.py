"""命令行入口：任务管理子命令与 ask 问答。

    doit list
    doit add "Buy milk"
    doit done 1
    doit remove 1
    doit ask "What should I do first?" [--chat] [--model NAME]
"""

import argparse
import sys
from typing import List, Optional, TextIO

from doit_core.agents.assistant_agent import AssistantAgent, AssistantConfig
from doit_core.config.settings import settings
from doit_core.domain.exceptions import BusinessError, TaskNotFoundError
from doit_core.infrastructure.logging.logger import logger
from doit_core.infrastructure.storage.json_store import JsonTaskStore
from doit_core.providers import create_provider


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="doit", description="A tiny CLI todo app with a local AI assistant")
    parser.add_argument("--tasks-file", default=None, help="Path of the tasks JSON file")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("list", help="Show the whole todo list")

    p_add = sub.add_parser("add", help="Add a new task")
    p_add.add_argument("task", metavar="TASK", help="Text of the new task")

    p_done = sub.add_parser("done", help="Mark a task as completed")
    p_done.add_argument("id", metavar="ID", type=int, help="ID of the task to mark done")

    p_remove = sub.add_parser("remove", help="Delete a task")
    p_remove.add_argument("id", metavar="ID", type=int, help="ID of the task to delete")

    p_ask = sub.add_parser("ask", help="Ask the local model about your tasks")
    p_ask.add_argument("question", metavar="QUESTION", help="Question to send to the model")
    p_ask.add_argument("--chat", action="store_true", help="Keep an interactive conversation going")
    p_ask.add_argument("--model", default=None, help="Model identifier (default: settings.default_model)")

    return parser


def main(argv: Optional[List[str]] = None, out: Optional[TextIO] = None, err: Optional[TextIO] = None) -> int:
    out = out if out is not None else sys.stdout
    err = err if err is not None else sys.stderr
    args = build_parser().parse_args(argv)
    store = JsonTaskStore(args.tasks_file or settings.tasks_file)

    try:
        if args.command == "list":
            _cmd_list(store, out)
        elif args.command == "add":
            task = store.add_task(args.task)
            out.write(f"✅  Adding task: {task.description}\n")
        elif args.command == "done":
            _cmd_done(store, args.id, out)
        elif args.command == "remove":
            _cmd_remove(store, args.id, out)
        elif args.command == "ask":
            return _cmd_ask(store, args, out, err)
    except BusinessError as e:
        logger.error("Command failed", extra={"extra": {"command": args.command, "code": e.code}})
        err.write(f"Error: {e.message}\n")
        return 1
    except KeyboardInterrupt:
        err.write("\n")
        return 130
    return 0


def _cmd_list(store: JsonTaskStore, out: TextIO) -> None:
    tasks = store.load_tasks()
    if not tasks:
        out.write("📝 No tasks yet!\n")
        return
    out.write("🗒️  Todo List:\n")
    for task in tasks:
        status = "✅" if task.completed else "⬜"
        out.write(f"  {status} [{task.id}] {task.description}\n")


def _cmd_done(store: JsonTaskStore, task_id: int, out: TextIO) -> None:
    try:
        store.complete_task(task_id)
    except TaskNotFoundError:
        out.write(f"❌ Task #{task_id} not found\n")
        return
    out.write(f"✔️  Marked task #{task_id} as done\n")


def _cmd_remove(store: JsonTaskStore, task_id: int, out: TextIO) -> None:
    try:
        store.remove_task(task_id)
    except TaskNotFoundError:
        out.write(f"❌ Task #{task_id} not found\n")
        return
    out.write(f"🗑️  Removed task #{task_id}\n")


def _cmd_ask(store: JsonTaskStore, args: argparse.Namespace, out: TextIO, err: TextIO) -> int:
    question = args.question.strip()
    if not question:
        out.write("Please provide a question.\n")
        return 0
    agent = AssistantAgent(
        provider_client=create_provider(),
        tasks_json=store.load_tasks_as_serialized_text(),
        config=AssistantConfig(model=args.model or settings.default_model),
        out=out,
        err=err,
    )
    if args.chat:
        out.write("Chat mode. Type 'exit' or 'quit' to leave.\n")
        agent.chat(first_input=question)
    else:
        agent.ask(question)
    return 0


if __name__ == "__main__":
    sys.exit(main())
