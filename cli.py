# cli.py
import argparse
import sys
from pathlib import Path

import config
from logging_setup import setup_logging
from models import Task
from storage import PersistenceError
from task_store import TaskStore


def format_task(task: Task) -> str:
    mark = "x" if task.completed else " "
    line = f"[{mark}] #{task.id} {task.title}"
    if task.description:
        line += f" - {task.description}"
    return line


def serve(args) -> int:
    import uvicorn

    from main import create_app

    app = create_app(tasks_file=args.tasks_file, frontend_dir=args.frontend_dir)
    print(f"Server starting on http://{args.host}:{args.port}")
    uvicorn.run(app, host=args.host, port=args.port, log_config=None)
    return 0


def list_tasks(store: TaskStore, args) -> int:
    tasks = store.list_tasks()
    if not tasks:
        print("No tasks.")
        return 0
    for task in tasks:
        print(format_task(task))
    return 0


def add_task(store: TaskStore, args) -> int:
    task = store.create_task(args.title, args.description)
    print(f"Created: {format_task(task)}")
    return 0


def update_task(store: TaskStore, args) -> int:
    task = store.update_task(
        args.id, title=args.title, description=args.description, completed=args.completed
    )
    if task is None:
        print(f"Error: task {args.id} not found.", file=sys.stderr)
        return 1
    print(f"Updated: {format_task(task)}")
    return 0


def delete_task(store: TaskStore, args) -> int:
    if not store.delete_task(args.id):
        print(f"Error: task {args.id} not found.", file=sys.stderr)
        return 1
    print(f"Deleted task {args.id}.")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Manage tasks or run the task API server.")
    parser.add_argument("--tasks-file", type=Path, default=config.TASKS_FILE, help="Path to the JSON task file.")
    parser.add_argument("--log-level", type=str, default=config.LOG_LEVEL, help="Logging level.")
    subparsers = parser.add_subparsers(dest="command", required=True, help="Available commands")

    parser_serve = subparsers.add_parser("serve", help="Run the HTTP API server.")
    parser_serve.add_argument("--host", type=str, default=config.HOST, help="Interface to bind.")
    parser_serve.add_argument("--port", type=int, default=config.PORT, help="Port to listen on.")
    parser_serve.add_argument("--frontend-dir", type=Path, default=config.FRONTEND_DIR, help="Static files directory.")

    subparsers.add_parser("list", help="List all tasks.")

    parser_add = subparsers.add_parser("add", help="Create a task.")
    parser_add.add_argument("--title", type=str, required=True, help="Task title.")
    parser_add.add_argument("--description", type=str, default="", help="Task description.")

    parser_update = subparsers.add_parser("update", help="Update fields of a task.")
    parser_update.add_argument("id", type=int, help="Task id.")
    parser_update.add_argument("--title", type=str, default=None, help="New title.")
    parser_update.add_argument("--description", type=str, default=None, help="New description.")
    done = parser_update.add_mutually_exclusive_group()
    done.add_argument("--completed", dest="completed", action="store_true", default=None, help="Mark as completed.")
    done.add_argument("--not-completed", dest="completed", action="store_false", default=None, help="Mark as not completed.")

    parser_delete = subparsers.add_parser("delete", help="Delete a task.")
    parser_delete.add_argument("id", type=int, help="Task id.")

    return parser


COMMANDS = {
    "list": list_tasks,
    "add": add_task,
    "update": update_task,
    "delete": delete_task,
}


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level.upper(), config.LOG_FILE)

    if args.command == "serve":
        return serve(args)

    store = TaskStore(args.tasks_file)
    try:
        return COMMANDS[args.command](store, args)
    except PersistenceError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
