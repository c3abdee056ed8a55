"""コマンドバリデーション

送信前にローカルで判定できる失敗を、リモートが返すのと同じエラー種別で送出する。
既知の制限値（DeviceLimits）がなければプロトコル上の絶対上限のみを使う。
"""

import logging
from datetime import timedelta

from .cooldown import CooldownGate
from .errors import InvalidDuration, InvalidIntensity, PiShockError, ShockerOffline, ShockerPaused
from .models import DeviceLimits, OpCode

logger = logging.getLogger(__name__)

# プロトコル上の絶対上限
ABSOLUTE_MAX_INTENSITY = 100
ABSOLUTE_MAX_SHOCK_DURATION = timedelta(seconds=15)
MIN_DURATION = timedelta(milliseconds=100)


def _seconds(duration: timedelta) -> int:
    return int(duration.total_seconds())


def max_intensity_error(intensity: int, limits: DeviceLimits | None) -> PiShockError | None:
    """limits の max_intensity を超えていればエラーを返す（不明なら None）。"""
    if limits is not None and limits.max_intensity is not None and intensity > limits.max_intensity:
        return InvalidIntensity(limits.max_intensity)
    return None


def max_duration_error(duration: timedelta, limits: DeviceLimits | None) -> PiShockError | None:
    """limits の max_duration を超えていればエラーを返す（不明なら None）。"""
    if limits is not None and limits.max_duration is not None and duration > limits.max_duration:
        return InvalidDuration(_seconds(limits.max_duration))
    return None


def _duration_ceiling(op: OpCode, limits: DeviceLimits | None) -> timedelta | None:
    known = limits.max_duration if limits is not None else None
    if op is OpCode.SHOCK:
        if known is None:
            return ABSOLUTE_MAX_SHOCK_DURATION
        return min(known, ABSOLUTE_MAX_SHOCK_DURATION)
    return known


def validate_command(
    op: OpCode,
    intensity: int,
    duration: timedelta,
    limits: DeviceLimits | None,
    cooldown: CooldownGate,
) -> None:
    """1 コマンド分のバリデーション。最初に失敗した判定のエラーを送出する。

    判定順：
      1. オフライン            → ShockerOffline
      2. 一時停止中            → ShockerPaused
      3. 最大時間超過          → InvalidDuration（Shock は 15 秒でも頭打ち）
      4. 最大強度超過          → InvalidIntensity
      5. クールダウン          → CooldownExceeded（通過時はここで時刻を記録）
      6. 強度 1 未満（Beep 以外）→ InvalidIntensity
      7. 100ms 未満            → InvalidDuration

    5 で記録した時刻は 6/7 で失敗しても巻き戻さない。
    """
    if limits is not None and limits.online is False:
        raise ShockerOffline()

    if limits is not None and limits.paused is True:
        raise ShockerPaused()

    ceiling = _duration_ceiling(op, limits)
    if ceiling is not None and duration > ceiling:
        raise InvalidDuration(_seconds(ceiling))

    max_intensity = ABSOLUTE_MAX_INTENSITY
    if limits is not None and limits.max_intensity is not None:
        max_intensity = limits.max_intensity
    if intensity > max_intensity:
        raise InvalidIntensity(max_intensity)

    cooldown.check_and_update()

    if op is not OpCode.BEEP and intensity < 1:
        raise InvalidIntensity(max_intensity)

    if duration < MIN_DURATION:
        if limits is not None and limits.max_duration is not None:
            raise InvalidDuration(_seconds(limits.max_duration))
        raise InvalidDuration(_seconds(ABSOLUTE_MAX_SHOCK_DURATION))
