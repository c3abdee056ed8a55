"""PiShocker デバイスハンドル

1 つのシェアコードに対応する。制限値スナップショットとクールダウン状態を所有し、
各操作で バリデーション → 送信 の順に処理する。
送信（ブロッキングな HTTP）はワーカースレッドで実行するので、await 中も他の処理は進む。
"""

import asyncio
import logging
from datetime import timedelta
from typing import Iterable

from .cooldown import CooldownGate
from .curve import run_shock_curve
from .models import DeviceLimits, InterpolatedStep, OpCode, ShockPoint
from .settings import CurveSettings, DebugSettings, DeviceSettings
from .transport import ApiTransport
from .validation import validate_command

logger = logging.getLogger(__name__)


class PiShocker:
    """シェアコード 1 つ分のショッカー。PiShockAccount.get_shocker() から取得する。"""

    def __init__(self, transport: ApiTransport, metadata: DeviceLimits | None = None,
                 device_settings: DeviceSettings | None = None,
                 curve_settings: CurveSettings | None = None,
                 debug_settings: DebugSettings | None = None,
                 cooldown: CooldownGate | None = None):
        self._transport = transport
        self.metadata = metadata
        self._device = device_settings or DeviceSettings()
        self._curve = curve_settings or CurveSettings()
        self._debug = debug_settings or DebugSettings()
        self._cooldown = cooldown or CooldownGate(self._device.cooldown)

    # ------------------------------------------------------------------ #
    # メタデータ                                                           #
    # ------------------------------------------------------------------ #

    @property
    def share_code(self) -> str:
        return self._transport.share_code

    @property
    def cooldown(self) -> CooldownGate:
        return self._cooldown

    @property
    def curve_settings(self) -> CurveSettings:
        return self._curve

    def _meta(self, name: str):
        return getattr(self.metadata, name) if self.metadata is not None else None

    @property
    def name(self) -> str | None:
        return self._meta("name")

    @property
    def client_id(self) -> int | None:
        return self._meta("client_id")

    @property
    def shocker_id(self) -> int | None:
        return self._meta("shocker_id")

    @property
    def max_intensity(self) -> int | None:
        return self._meta("max_intensity")

    @property
    def max_duration(self) -> timedelta | None:
        return self._meta("max_duration")

    @property
    def online(self) -> bool | None:
        return self._meta("online")

    @property
    def paused(self) -> bool | None:
        return self._meta("paused")

    async def refresh_metadata(self) -> DeviceLimits:
        """制限値を再取得する。次の refresh まで同じスナップショットを使う。"""
        self.metadata = await asyncio.to_thread(self._transport.fetch_metadata)
        logger.info(
            f"[Shocker] metadata refreshed: name={self.name}, online={self.online}, "
            f"paused={self.paused}, max_intensity={self.max_intensity}, max_duration={self.max_duration}"
        )
        return self.metadata

    # ------------------------------------------------------------------ #
    # 操作                                                                 #
    # ------------------------------------------------------------------ #

    async def beep(self, duration: timedelta) -> None:
        logger.debug(f"[Shocker] Beep for {duration.total_seconds():.1f}s")
        await self._action(OpCode.BEEP, 0, duration)

    async def vibrate(self, intensity: int, duration: timedelta) -> None:
        """intensity は 1〜100。"""
        logger.info(f"[Shocker] Vibrate: intensity={intensity}, duration={duration.total_seconds():.1f}s")
        await self._action(OpCode.VIBRATE, intensity, duration)

    async def shock(self, intensity: int, duration: timedelta) -> None:
        """事前警告なしで Shock を送る。通常は shock_with_warning を使う。"""
        logger.info(f"[Shocker] Shock: intensity={intensity}, duration={duration.total_seconds():.1f}s")
        await self._action(OpCode.SHOCK, intensity, duration)

    async def mini_shock(self, intensity: int) -> None:
        """短い Shock（既定 300ms）を送る。"""
        await self.shock(intensity, timedelta(seconds=self._device.mini_shock_duration))

    async def shock_with_warning(self, intensity: int, duration: timedelta) -> None:
        """弱いバイブで予告してから Shock を送る。

        max_intensity / max_duration はユーザー設定で 100 / 15 秒より低いことがあるので、
        InvalidIntensity / InvalidDuration は呼び出し側で必ず処理すること。
        """
        logger.debug("[Shocker] Sending warning vibration")
        await self.vibrate(self._device.warning_intensity, timedelta(seconds=self._device.warning_duration))

        # ファームウェアはコマンド間に待ちを必要とする
        await asyncio.sleep(self._device.warning_delay)
        logger.debug("[Shocker] Sending shock")
        await self.shock(intensity, duration)

    async def shock_curve(self, points: Iterable[ShockPoint]) -> list[InterpolatedStep]:
        """制御点の列を補間して順に Shock を送る（curve.run_shock_curve を参照）。"""
        return await run_shock_curve(
            self,
            points,
            resolution=self._curve.resolution,
            command_delay=self._curve.command_delay,
            start_intensity=self._curve.start_intensity,
            log_curve=self._debug.log_curve,
        )

    # ------------------------------------------------------------------ #
    # 内部                                                                 #
    # ------------------------------------------------------------------ #

    async def _action(self, op: OpCode, intensity: int, duration: timedelta) -> None:
        # 判定とクールダウン記録は await を挟まずに行う
        validate_command(op, intensity, duration, self.metadata, self._cooldown)
        await asyncio.to_thread(self._transport.send, op, intensity, duration)
