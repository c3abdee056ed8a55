"""データモデル

OpCode / DeviceLimits / ShockPoint / InterpolatedStep を定義する。
外部状態には依存しない。
"""

from dataclasses import dataclass
from datetime import timedelta
from enum import IntEnum


class OpCode(IntEnum):
    """apioperate の "Op" 値。"""
    SHOCK = 0
    VIBRATE = 1
    BEEP = 2


@dataclass(frozen=True)
class DeviceLimits:
    """GetShockerInfo で取得したシェアコードごとの制限値。

    各フィールドは不明なら None。None の項目はバリデーションでスキップされ、
    プロトコル上の絶対上限（強度 100 / 15 秒）だけが適用される。
    """
    online: bool | None = None
    paused: bool | None = None
    max_intensity: int | None = None
    max_duration: timedelta | None = None
    name: str | None = None
    client_id: int | None = None
    shocker_id: int | None = None

    @property
    def max_duration_seconds(self) -> int | None:
        if self.max_duration is None:
            return None
        return int(self.max_duration.total_seconds())

    @staticmethod
    def from_api(data: dict) -> "DeviceLimits":
        """GetShockerInfo の JSON（camelCase）から生成する。"""
        max_duration = data.get("maxDuration")
        return DeviceLimits(
            online=data.get("online"),
            paused=data.get("paused"),
            max_intensity=data.get("maxIntensity"),
            max_duration=timedelta(seconds=max_duration) if max_duration is not None else None,
            name=data.get("name"),
            client_id=data.get("clientId"),
            shocker_id=data.get("id"),
        )


@dataclass(frozen=True)
class ShockPoint:
    """カーブの制御点。duration の間に intensity へ向かって変化する。"""
    duration: timedelta
    intensity: int

    def __post_init__(self):
        if self.duration <= timedelta(0):
            raise ValueError(f"ShockPoint duration must be positive, got {self.duration}")
        if not 0 <= self.intensity <= 100:
            raise ValueError(f"ShockPoint intensity must be between 0 and 100, got {self.intensity}")


@dataclass(frozen=True)
class InterpolatedStep:
    """補間後の 1 コマンド分。duration は常に解像度と同じ。"""
    duration: timedelta
    intensity: int
