"""クールダウン管理

デバイスハンドルごとに 1 つ持つ。コマンド間の最小間隔を強制する。
判定とタイムスタンプ更新はロック内で一度に行い、ネットワーク送信中はロックを保持しない。
"""

import logging
import threading
import time
from typing import Callable

from .errors import CooldownExceeded

logger = logging.getLogger(__name__)


class CooldownGate:
    """最後の送信時刻を保持し、間隔未満の送信を拒否する。

    - 拒否時はタイムスタンプを更新しない（連続で拒否されてもタイマーは延びない）
    - 通過時は常に現在時刻を記録する（送信の成否とは無関係）
    - interval <= 0 なら判定は行わず記録のみ
    """

    def __init__(self, interval: float, clock: Callable[[], float] = time.monotonic):
        """
        Args:
            interval: 必要な最小間隔（秒）
            clock: 単調増加する時刻関数（テスト用に差し替え可能）
        """
        self.interval = interval
        self._clock = clock
        self._lock = threading.Lock()
        self._last_sent_at: float | None = None

    @property
    def last_sent_at(self) -> float | None:
        return self._last_sent_at

    def check_and_update(self) -> None:
        """間隔が経過していれば現在時刻を記録し、未経過なら CooldownExceeded を送出する。"""
        with self._lock:
            now = self._clock()
            if self._last_sent_at is not None and self.interval > 0:
                elapsed = now - self._last_sent_at
                if elapsed < self.interval:
                    remaining = self.interval - elapsed
                    logger.debug(f"[Cooldown] rejected: remaining={remaining * 1000:.0f}ms")
                    raise CooldownExceeded(remaining)
            self._last_sent_at = now

    def remaining(self) -> float:
        """残りクールダウン（秒）。副作用なし。"""
        with self._lock:
            if self._last_sent_at is None or self.interval <= 0:
                return 0.0
            return max(0.0, self.interval - (self._clock() - self._last_sent_at))

    def reset(self) -> None:
        with self._lock:
            self._last_sent_at = None
