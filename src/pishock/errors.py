"""PiShock エラー定義

すべての失敗は PiShockError のサブクラスとして呼び出し元へ送出する。
上限値などの「対処に必要な数値」は文字列ではなく属性として保持する。
"""

import logging
import re

logger = logging.getLogger(__name__)


class PiShockError(Exception):
    """PiShock 操作で発生するエラーの基底クラス。"""

    message = "PiShock error"

    def __init__(self, *args):
        super().__init__(*(args or (self.message,)))


class ShareCodeNotFound(PiShockError):
    message = "Share code doesn't exist"


class InvalidCredentials(PiShockError):
    message = "Username or API key invalid"


class ShockerPaused(PiShockError):
    message = "Shocker is in paused state"


class ShockerOffline(PiShockError):
    message = "Shocker is offline"


class ShareCodeInUse(PiShockError):
    message = "Share code is already in use"


class DeviceBusy(PiShockError):
    message = "Shocker is busy with another command"


class InvalidOpCode(PiShockError):
    def __init__(self, op_code: int):
        self.op_code = op_code
        super().__init__(f"Invalid OP code specified: {op_code}")


class InvalidIntensity(PiShockError):
    def __init__(self, max_intensity: int):
        self.max_intensity = max_intensity
        super().__init__(f"Invalid intensity specified, max intensity: {max_intensity}")


class InvalidDuration(PiShockError):
    """max_duration は秒単位。"""

    def __init__(self, max_duration: int):
        self.max_duration = max_duration
        super().__init__(f"Invalid duration specified, max duration: {max_duration}s")


class CooldownExceeded(PiShockError):
    """remaining は残りクールダウン（秒）。"""

    def __init__(self, remaining: float):
        self.remaining = remaining
        super().__init__(f"Cooldown not over yet, remaining: {remaining * 1000:.0f}ms")


class PiShockConnectionError(PiShockError):
    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f"Connection error: {detail}")


class UnknownError(PiShockError):
    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f"Unknown error: {detail}")


# ------------------------------------------------------------------ #
# レスポンス本文 → エラー変換                                          #
# ------------------------------------------------------------------ #

_SUCCESS_BODIES = ("Operation Succeeded.", "Operation Attempted.")

_BODY_ERRORS: dict[str, type[PiShockError]] = {
    "Share code not found": ShareCodeNotFound,
    "This code doesn’t exist.": ShareCodeNotFound,
    "Not Authorized.": InvalidCredentials,
    "Shocker is Paused, unable to send command.": ShockerPaused,
    "Device currently not connected.": ShockerOffline,
    "This share code has already been used by somebody else.": ShareCodeInUse,
}

_INTENSITY_RANGE = re.compile(r"Intensity must be between 0 and (\d+)")
_DURATION_RANGE = re.compile(r"Duration must be between 0 and (\d+)")


def error_from_response(body: str) -> PiShockError | None:
    """API のレスポンス本文を PiShockError に変換する。

    成功本文なら None を返す。網羅的ではなく、未知の本文は UnknownError になる。
    """
    logger.debug(f"Resolving response body: {body!r}")
    text = body.strip()

    if text in _SUCCESS_BODIES:
        return None

    match = _INTENSITY_RANGE.search(text)
    if match:
        return InvalidIntensity(int(match.group(1)))

    match = _DURATION_RANGE.search(text)
    if match:
        return InvalidDuration(int(match.group(1)))

    error_cls = _BODY_ERRORS.get(text)
    if error_cls is not None:
        return error_cls()

    if "busy" in text.lower():
        return DeviceBusy()

    return UnknownError(text)
