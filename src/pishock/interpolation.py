"""
ショックカーブ補間モジュール

外部状態に依存しない純粋関数のみを提供する。
制御点（ShockPoint）の列を、解像度ごとの細かいコマンド列（InterpolatedStep）に分解する。
"""

import logging
from datetime import timedelta
from typing import Iterable

from .models import InterpolatedStep, ShockPoint

logger = logging.getLogger(__name__)

# 補間カーブの 1 ステップの長さ。短くしすぎると DeviceBusy / クールダウンで失敗する
DEFAULT_RESOLUTION = timedelta(milliseconds=500)
# 0 は特別な意味を持つため、開始値は 1
DEFAULT_START_INTENSITY = 1


def _millis(duration: timedelta) -> int:
    return duration // timedelta(milliseconds=1)


def linear_interpolation(start: int, end: int, time: int, duration: int) -> int:
    """
    start → end を duration の間で線形補間した time 時点の値を返す。

    下降区間では差分が負になるため符号付きで計算し、0 方向へ切り捨てた後に絶対値を取る。

    Args:
        start: 開始強度
        end: 目標強度
        time: 経過時間（ms）
        duration: 区間の長さ（ms）

    Returns:
        0 以上の強度
    """
    delta = (end - start) * time
    # Python の // は負方向へ丸めるので、0 方向への切り捨てを明示する
    step = abs(delta) // duration
    if delta < 0:
        step = -step
    return abs(start + step)


def interpolate_curve(
    points: Iterable[ShockPoint],
    resolution: timedelta = DEFAULT_RESOLUTION,
    start_intensity: int = DEFAULT_START_INTENSITY,
) -> list[InterpolatedStep]:
    """
    制御点の列を解像度ごとのステップ列に変換する。

    各制御点について、区間内カーソル t = 0, r, 2r, ... を t < duration の間だけ進め、
    直前の目標強度（最初は start_intensity）から制御点の強度へ線形補間した値を出力する。
    制御点ちょうどの値は独立したステップとしては出力せず、次の区間の起点として使う。

    duration が解像度の倍数でない場合、最後のステップは区間の終わりを越える
    （合計時間の超過は制御点 1 つあたり最大 1 ステップ分）。

    Args:
        points: 制御点（順序どおりに処理する）
        resolution: 1 ステップの長さ（ミリ秒単位の整数であること）
        start_intensity: 最初の区間の開始強度

    Returns:
        InterpolatedStep のリスト
    """
    if resolution <= timedelta(0):
        raise ValueError(f"resolution must be positive, got {resolution}")

    resolution_ms = _millis(resolution)
    if resolution_ms <= 0:
        raise ValueError(f"resolution must be at least 1ms, got {resolution}")
    # カーソルはミリ秒で進めるので、端数があるとステップ長とずれる
    if resolution % timedelta(milliseconds=1):
        raise ValueError(f"resolution must be a whole number of milliseconds, got {resolution}")

    steps: list[InterpolatedStep] = []
    current = start_intensity

    for point in points:
        duration_ms = _millis(point.duration)
        cursor = 0
        while cursor < duration_ms:
            intensity = linear_interpolation(current, point.intensity, cursor, duration_ms)
            steps.append(InterpolatedStep(duration=resolution, intensity=intensity))
            cursor += resolution_ms
        current = point.intensity

    logger.debug(f"[Curve] Interpolated {len(steps)} steps from start intensity {start_intensity}")
    return steps


def curve_duration(steps: Iterable[InterpolatedStep | ShockPoint]) -> timedelta:
    """ステップ（または制御点）の合計時間。"""
    return sum((s.duration for s in steps), timedelta(0))


def render_curve(steps: list[InterpolatedStep], height: int = 10) -> str:
    """ステップ列を簡易テキストグラフにする（デバッグログ用）。"""
    if not steps:
        return "(empty curve)"
    peak = max(max(s.intensity for s in steps), 1)
    rows = []
    for level in range(height, 0, -1):
        threshold = peak * level / height
        row = "".join("#" if s.intensity >= threshold else " " for s in steps)
        rows.append(f"{threshold:6.1f} |{row}")
    rows.append(" " * 7 + "+" + "-" * len(steps))
    return "\n".join(rows)
