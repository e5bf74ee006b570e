#!/usr/bin/env python3
"""
タスク管理CLI - JSONタスクファイルを直接操作する管理用インターフェース

Usage:
    python -m src.tasks.cli list [--status S] [--priority P] [--search TEXT] [--format json|text]
    python -m src.tasks.cli add --title "タイトル" [--description "詳細"] [--status todo|in-progress|done] [--priority low|medium|high] [--assignee NAME] [--due-date YYYY-MM-DD]
    python -m src.tasks.cli update --id ID [--title ...] [--description ...] [--status ...] [--priority ...] [--assignee NAME] [--due-date YYYY-MM-DD] [--clear-due-date]
    python -m src.tasks.cli complete --id ID
    python -m src.tasks.cli delete --id ID
    python -m src.tasks.cli get --id ID [--format json|text]
    python -m src.tasks.cli stats [--format json|text]
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any, Dict, Optional

from .exceptions import TaskError
from .filters import filter_tasks
from .models import PRIORITY_VALUES, STATUS_VALUES, WILDCARD, FilterCriteria, Task, TaskPriority, TaskStatus
from .repository import TaskRepository, UNSET
from .statistics import aggregate, generate_insights
from .validation import errors, validate_form


def format_task_text(task: Task) -> str:
    """タスクをテキスト形式で整形"""
    due = task.due_date or "未設定"
    assignee = task.assignee or "未割当"
    description = task.description.strip() or "説明なし"
    return (
        f"[{task.id}] {task.status.value} | {task.priority.value} | 期限: {due} | "
        f"担当: {assignee} | {task.title} | {description}"
    )


def _print_task(task: Task, output_format: str, prefix: str = "") -> None:
    if output_format == "json":
        print(json.dumps(task.to_dict(), ensure_ascii=False))
    else:
        print(f"{prefix}{format_task_text(task)}")


def _validation_failed(data: Dict[str, Any], fields) -> bool:
    failed = errors(validate_form(data, fields=fields))
    for name, message in failed.items():
        print(f"Error: {name}: {message}", file=sys.stderr)
    return bool(failed)


def cmd_list(repo: TaskRepository, criteria: FilterCriteria, output_format: str) -> int:
    """タスク一覧を表示"""
    items = filter_tasks(repo.list(), criteria)
    if output_format == "json":
        print(json.dumps([item.to_dict() for item in items], ensure_ascii=False))
    else:
        if not items:
            print("タスクは登録されていません。")
        else:
            for item in items:
                print(format_task_text(item))
    return 0


def cmd_add(repo: TaskRepository, args: argparse.Namespace) -> int:
    """新しいタスクを追加"""
    data = {
        "title": args.title,
        "description": args.description,
        "status": args.status,
        "priority": args.priority,
        "dueDate": args.due_date,
    }
    if _validation_failed(data, None):
        return 1

    try:
        created = repo.create(
            title=args.title.strip(),
            description=args.description.strip(),
            status=TaskStatus(args.status),
            priority=TaskPriority(args.priority),
            assignee=args.assignee,
            due_date=args.due_date,
        )
    except (OSError, TaskError) as exc:
        print(f"Error: タスク追加に失敗しました: {exc}", file=sys.stderr)
        return 1

    _print_task(created, args.format, "追加しました: ")
    return 0


def cmd_update(repo: TaskRepository, args: argparse.Namespace) -> int:
    """既存のタスクを更新"""
    data = {
        "title": args.title,
        "description": args.description,
        "status": args.status,
        "priority": args.priority,
        "dueDate": args.due_date,
    }
    provided = [name for name, value in data.items() if value is not None]
    if _validation_failed(data, provided):
        return 1

    due_date_value: Any = UNSET
    if args.clear_due_date:
        due_date_value = None
    elif args.due_date is not None:
        due_date_value = args.due_date

    try:
        updated = repo.update(
            args.id,
            title=args.title.strip() if args.title else None,
            description=args.description.strip() if args.description else None,
            status=TaskStatus(args.status) if args.status else None,
            priority=TaskPriority(args.priority) if args.priority else None,
            assignee=args.assignee if args.assignee is not None else UNSET,
            due_date=due_date_value,
        )
    except (OSError, TaskError) as exc:
        print(f"Error: タスク更新に失敗しました: {exc}", file=sys.stderr)
        return 1

    if not updated:
        print(f"Error: ID {args.id} のタスクが見つかりません。", file=sys.stderr)
        return 1
    _print_task(updated, args.format, "更新しました: ")
    return 0


def cmd_complete(repo: TaskRepository, task_id: int, output_format: str) -> int:
    """タスクを完了状態にする"""
    try:
        updated = repo.update(task_id, status=TaskStatus.DONE)
    except (OSError, TaskError) as exc:
        print(f"Error: タスク完了処理に失敗しました: {exc}", file=sys.stderr)
        return 1
    if not updated:
        print(f"Error: ID {task_id} のタスクが見つかりません。", file=sys.stderr)
        return 1
    _print_task(updated, output_format, "完了しました: ")
    return 0


def cmd_delete(repo: TaskRepository, task_id: int, output_format: str) -> int:
    """タスクを削除"""
    try:
        deleted = repo.delete(task_id)
    except (OSError, TaskError) as exc:
        print(f"Error: タスク削除に失敗しました: {exc}", file=sys.stderr)
        return 1
    if not deleted:
        print(f"Error: ID {task_id} のタスクが見つかりません。", file=sys.stderr)
        return 1

    if output_format == "json":
        print(json.dumps({"deleted": True, "id": task_id}, ensure_ascii=False))
    else:
        print(f"削除しました: ID {task_id}")
    return 0


def cmd_get(repo: TaskRepository, task_id: int, output_format: str) -> int:
    """特定のタスクを取得"""
    task = repo.get(task_id)
    if not task:
        print(f"Error: ID {task_id} のタスクが見つかりません。", file=sys.stderr)
        return 1
    _print_task(task, output_format)
    return 0


def cmd_stats(repo: TaskRepository, output_format: str) -> int:
    """統計情報を表示"""
    snapshot = aggregate(repo.list())
    insights = generate_insights(snapshot)
    if output_format == "json":
        print(json.dumps({"statistics": snapshot.to_dict(), "insights": insights}, ensure_ascii=False))
        return 0

    print(f"合計: {snapshot.total} | 完了率: {snapshot.completion_rate}%")
    print("ステータス: " + ", ".join(f"{k}={v}" for k, v in snapshot.by_status.items()))
    print("優先度: " + ", ".join(f"{k}={v}" for k, v in snapshot.by_priority.items()))
    print("期限: " + ", ".join(f"{k}={v}" for k, v in snapshot.by_due_date.items()))
    for insight in insights:
        print(f"- {insight}")
    return 0


def _add_format_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--format",
        choices=["json", "text"],
        default="text",
        help="出力フォーマット（デフォルト: text）",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="タスク管理CLI - JSONタスクファイルを操作するインターフェース",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--data-path",
        type=str,
        help="タスクJSONファイルのパス（デフォルト: data/tasks.json）",
    )

    subparsers = parser.add_subparsers(dest="command", help="実行するコマンド", required=True)

    # list コマンド
    parser_list = subparsers.add_parser("list", help="タスク一覧を表示")
    parser_list.add_argument("--status", choices=(WILDCARD,) + STATUS_VALUES, default=WILDCARD)
    parser_list.add_argument("--priority", choices=(WILDCARD,) + PRIORITY_VALUES, default=WILDCARD)
    parser_list.add_argument("--search", default="", help="タイトル/説明/担当者の部分一致検索")
    _add_format_option(parser_list)

    # add コマンド
    parser_add = subparsers.add_parser("add", help="新しいタスクを追加")
    parser_add.add_argument("--title", required=True, help="タスクのタイトル")
    parser_add.add_argument("--description", default="", help="タスクの詳細説明")
    parser_add.add_argument("--status", choices=STATUS_VALUES, default=TaskStatus.TODO.value)
    parser_add.add_argument("--priority", choices=PRIORITY_VALUES, default=TaskPriority.MEDIUM.value)
    parser_add.add_argument("--assignee", help="担当者")
    parser_add.add_argument("--due-date", help="期限日（YYYY-MM-DD形式）")
    _add_format_option(parser_add)

    # update コマンド
    parser_update = subparsers.add_parser("update", help="既存のタスクを更新")
    parser_update.add_argument("--id", type=int, required=True, help="更新するタスクのID")
    parser_update.add_argument("--title", help="新しいタイトル")
    parser_update.add_argument("--description", help="新しい詳細説明")
    parser_update.add_argument("--status", choices=STATUS_VALUES, help="新しいステータス")
    parser_update.add_argument("--priority", choices=PRIORITY_VALUES, help="新しい優先度")
    parser_update.add_argument("--assignee", help="新しい担当者")
    parser_update.add_argument("--due-date", help="新しい期限日（YYYY-MM-DD形式）")
    parser_update.add_argument("--clear-due-date", action="store_true", help="期限日をクリア")
    _add_format_option(parser_update)

    # complete / delete / get コマンド
    for name, help_text in (
        ("complete", "タスクを完了状態にする"),
        ("delete", "タスクを削除"),
        ("get", "特定のタスクを取得"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("--id", type=int, required=True, help="対象タスクのID")
        _add_format_option(sub)

    # stats コマンド
    parser_stats = subparsers.add_parser("stats", help="統計情報を表示")
    _add_format_option(parser_stats)

    return parser


def main(argv: Optional[list] = None) -> int:
    """CLIエントリポイント"""
    args = build_parser().parse_args(argv)
    repo = TaskRepository(data_path=args.data_path if args.data_path else None)

    if args.command == "list":
        criteria = FilterCriteria(status=args.status, priority=args.priority, search=args.search)
        return cmd_list(repo, criteria, args.format)
    elif args.command == "add":
        return cmd_add(repo, args)
    elif args.command == "update":
        return cmd_update(repo, args)
    elif args.command == "complete":
        return cmd_complete(repo, args.id, args.format)
    elif args.command == "delete":
        return cmd_delete(repo, args.id, args.format)
    elif args.command == "get":
        return cmd_get(repo, args.id, args.format)
    elif args.command == "stats":
        return cmd_stats(repo, args.format)
    else:
        print(f"Error: 不明なコマンド: {args.command}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
