"""ショックカーブ実行

状態遷移: 検証（全制御点） → 補間 → 送信（ステップごと） → 完了 / 失敗

- 制御点のどれかが制限値を超えていれば、1 件も送信せずに失敗する
- ステップは 1 件ずつ順番に送信し、成功したステップの間に command_delay だけ待つ
- 最初のエラーでそのまま中断して送出する（リトライ・スキップ・巻き戻しなし）
- 途中でキャンセルされた場合は以降のステップを送らないだけで、補償動作はしない
"""

import asyncio
import logging
from datetime import timedelta
from typing import Iterable

from .interpolation import (
    DEFAULT_RESOLUTION, DEFAULT_START_INTENSITY,
    curve_duration, interpolate_curve, render_curve,
)
from .models import InterpolatedStep, ShockPoint
from .validation import max_duration_error, max_intensity_error

logger = logging.getLogger(__name__)

# ファームウェアが要求するコマンド間の待ち（秒）
DEFAULT_COMMAND_DELAY = 0.1


def validate_points(points: list[ShockPoint], limits) -> None:
    """全制御点を現在の制限値で検証する。最初に見つかったエラーを送出する。"""
    for index, point in enumerate(points):
        error = max_intensity_error(point.intensity, limits) or max_duration_error(point.duration, limits)
        if error is not None:
            logger.warning(f"[Curve] point #{index} rejected before dispatch: {error}")
            raise error


async def run_shock_curve(
    shocker,
    points: Iterable[ShockPoint],
    resolution: timedelta = DEFAULT_RESOLUTION,
    command_delay: float = DEFAULT_COMMAND_DELAY,
    start_intensity: int = DEFAULT_START_INTENSITY,
    log_curve: bool = False,
) -> list[InterpolatedStep]:
    """
    制御点の列を補間し、PiShocker.shock() で 1 ステップずつ送信する。

    Args:
        shocker: PiShocker（metadata と shock() を使う）
        points: 制御点
        resolution: 補間ステップの長さ（クールダウンより十分長くすること）
        command_delay: 送信成功後、次のステップまでの待ち（秒）
        start_intensity: 最初の区間の開始強度
        log_curve: True ならテキストグラフを DEBUG 出力する

    Returns:
        送信したステップのリスト
    """
    points = list(points)
    validate_points(points, shocker.metadata)

    logger.debug(f"[Curve] Total length of raw curve: {curve_duration(points)}")
    steps = interpolate_curve(points, resolution, start_intensity)

    if log_curve and logger.isEnabledFor(logging.DEBUG):
        resolution_ms = resolution // timedelta(milliseconds=1)
        logger.debug(f"[Curve] Shock step graph - 1 step = {resolution_ms}ms\n{render_curve(steps)}")
    logger.debug(f"[Curve] Total length of interpolated curve: {curve_duration(steps)}")

    for index, step in enumerate(steps):
        if index > 0:
            await asyncio.sleep(command_delay)
        logger.debug(f"[Curve] step {index + 1}/{len(steps)}: intensity={step.intensity}, duration={step.duration}")
        try:
            await shocker.shock(step.intensity, step.duration)
        except Exception as e:
            logger.error(f"[Curve] aborted at step {index + 1}/{len(steps)}: {e}")
            raise

    logger.debug("[Curve] Finished sending shock curve")
    return steps
