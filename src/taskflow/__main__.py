#!/usr/bin/env python3
"""
TaskFlowコンソールビュー - APIからタスクを取得しボード・統計をテキスト表示する

Usage:
    python -m src.taskflow [--api-url URL] [--status S] [--priority P] [--search TEXT] [--due BUCKET]
"""

from __future__ import annotations

import argparse
import sys
from typing import Optional

from .components.task_board import COLUMN_TITLES
from .config import Config
from .controller import TaskFlowController
from .logger import setup_logger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="TaskFlow console view")
    parser.add_argument("--config", default=None, help="設定ファイルパス")
    parser.add_argument("--api-url", default=None, help="APIのベースURL")
    parser.add_argument("--status", default="all")
    parser.add_argument("--priority", default="all")
    parser.add_argument("--search", default="")
    parser.add_argument("--due", default="all", choices=["all", "overdue", "today", "week", "none"])
    return parser


def render_board(controller: TaskFlowController) -> None:
    board = controller.board
    for status, title in COLUMN_TITLES.items():
        tasks = board.columns.get(status, [])
        print(f"== {title} ({len(tasks)}) ==")
        for task in tasks:
            card = board.card(task)
            due = f" due {card['dueDate']}" if card["dueDate"] else ""
            marker = f" [{card['dueClass']}]" if card["dueClass"] else ""
            assignee = f" @{card['assignee']}" if card["assignee"] else ""
            print(f"  #{card['id']} {card['title']} ({card['priorityLabel']}){assignee}{due}{marker}")


def render_statistics(controller: TaskFlowController) -> None:
    summary = controller.statistics.summary()
    print("== Statistics ==")
    print(
        f"  Total: {summary['total']}  Completed: {summary['completed']}  "
        f"In progress: {summary['inProgress']}  Pending: {summary['pending']}  "
        f"Overdue: {summary['overdue']}  Completion: {summary['completionRate']}%"
    )
    print(f"  Filters: {controller.filter_bar.summary()}")
    print("== Insights ==")
    for insight in controller.statistics.insights:
        print(f"  - {insight}")


def main(argv: Optional[list] = None) -> int:
    """コンソールビューのエントリポイント"""
    args = build_parser().parse_args(argv)
    config = Config.from_yaml(args.config) if args.config else Config.from_yaml()
    if args.api_url:
        config.client.api_url = args.api_url
    setup_logger(config.log_level, config.log_file)

    controller = TaskFlowController(config=config)
    try:
        controller.filter_bar.set_filters(
            status=args.status, priority=args.priority, search=args.search, due=args.due
        )
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        if not controller.load():
            error = controller.feedback.notifications.latest("error")
            print(f"Error: {error.message if error else 'Failed to load tasks'}", file=sys.stderr)
            return 1
        render_board(controller)
        render_statistics(controller)
        return 0
    finally:
        controller.close()


if __name__ == "__main__":
    sys.exit(main())
