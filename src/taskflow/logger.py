"""
ロギング設定モジュール

サーバー・管理CLI・コンソールビューで共通の設定を使う。
"""

import logging
from pathlib import Path
from typing import Iterable, List, Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# requests経由の接続ログは WARNING 以上のみ出す
NOISY_LOGGERS = ("urllib3", "multipart")


def setup_logger(
    log_level: str = "INFO",
    log_file: Optional[str] = "logs/taskflow.log",
    quiet: Iterable[str] = NOISY_LOGGERS,
) -> None:
    """
    ロガーのセットアップ

    Args:
        log_level: ログレベル (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: ログファイルのパス（Noneの場合は標準エラー出力のみ）
        quiet: WARNING以上に絞るロガー名
    """
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        # ログディレクトリの作成
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.insert(0, logging.FileHandler(log_path, encoding="utf-8"))

    # 既にハンドラが設定済みの場合、basicConfigは何もしない
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=handlers,
    )

    for name in quiet:
        logging.getLogger(name).setLevel(logging.WARNING)
