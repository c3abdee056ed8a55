"""ログ設定"""

import logging
from pathlib import Path

from .settings import Settings

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(settings: Settings) -> None:
    """コンソール出力と、設定に応じてファイル出力を有効にする。"""
    level = getattr(logging, settings.debug.log_level.upper(), logging.INFO)
    handlers: list[logging.Handler] = [logging.StreamHandler()]

    if settings.debug.log_to_file:
        log_path = Path(settings.debug.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))

    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=handlers, force=True)
    # urllib3 の接続ログは WARNING 以上のみ
    logging.getLogger("urllib3").setLevel(logging.WARNING)
