"""API トランスポート実装（PiShock Cloud API 経由）

1 リクエスト = 1 コマンドの同期 HTTP 送信のみを担う。
バリデーション・クールダウン・ペーシングは呼び出し側（PiShocker）の責務。
"""

import logging
from datetime import timedelta

import requests

from .errors import InvalidOpCode, PiShockConnectionError, ShareCodeNotFound, UnknownError, error_from_response
from .models import DeviceLimits, OpCode

logger = logging.getLogger(__name__)


def duration_to_api(duration: timedelta) -> int:
    """API 送信用の duration 値に変換する。

    秒の整数部が 1 以上なら秒単位、それ未満ならミリ秒単位で送る。
    （例: 2.5 秒 → 2、300ms → 300）
    """
    seconds = int(duration.total_seconds())
    if seconds > 0:
        return seconds
    return duration // timedelta(milliseconds=1)


def _mask(secret: str) -> str:
    if len(secret) <= 4:
        return "****"
    return f"{secret[:4]}****"


class ApiTransport:
    """PiShock Cloud API への送信を担う。

    session には requests.Session 互換（post を持つ）オブジェクトを渡せる（テスト用）。
    """

    def __init__(self, username: str, api_key: str, share_code: str, app_name: str,
                 api_url: str, timeout: float = 10.0, session=None):
        self._username = username
        self._api_key = api_key
        self._share_code = share_code
        self._app_name = app_name
        self._api_url = api_url.rstrip("/")
        self._timeout = timeout
        self._session = session or requests.Session()

    @property
    def share_code(self) -> str:
        return self._share_code

    @property
    def api_url(self) -> str:
        return self._api_url

    # ------------------------------------------------------------------ #
    # コマンド送信                                                         #
    # ------------------------------------------------------------------ #

    def send(self, op: OpCode, intensity: int, duration: timedelta) -> None:
        """コマンドを 1 件送信する。失敗時は対応する PiShockError を送出する。"""
        try:
            op = OpCode(op)
        except ValueError:
            logger.error(f"[API] invalid op code: {op!r}")
            raise InvalidOpCode(op) from None

        payload = {
            "Op": int(op),
            "Intensity": intensity,
            "Duration": duration_to_api(duration),
            "Code": self._share_code,
            "Apikey": self._api_key,
            "Name": self._app_name,
            "Username": self._username,
        }
        logger.debug(
            f"[API] apioperate: Op={payload['Op']} Intensity={intensity} "
            f"Duration={payload['Duration']} Code={self._share_code} Apikey={_mask(self._api_key)}"
        )

        response = self._post("/apioperate/", payload)
        error = error_from_response(response.text)
        if isinstance(error, UnknownError) and response.status_code != 200:
            # 本文を解釈できない非 200 応答は接続エラー扱い
            error = PiShockConnectionError(
                f"Failed to connect to {self._api_url}/apioperate/, response code: {response.status_code}"
            )
        if error is not None:
            logger.warning(f"[API] {op.name} rejected: {error}")
            raise error
        logger.info(f"[API] {op.name} sent: intensity={intensity}, duration={duration.total_seconds():.1f}s")

    # ------------------------------------------------------------------ #
    # メタデータ取得                                                       #
    # ------------------------------------------------------------------ #

    def fetch_metadata(self) -> DeviceLimits:
        """GetShockerInfo からシェアコードの制限値を取得する。"""
        payload = {
            "Apikey": self._api_key,
            "Username": self._username,
            "Code": self._share_code,
        }
        logger.debug(f"[API] GetShockerInfo: Code={self._share_code} Apikey={_mask(self._api_key)}")

        response = self._post("/GetShockerInfo", payload)
        if response.status_code != 200:
            logger.error(f"[API] GetShockerInfo failed: {response.status_code} - {response.text}")
            raise ShareCodeNotFound()

        try:
            data = response.json()
        except ValueError as e:
            raise UnknownError(str(e)) from e
        if not isinstance(data, dict):
            raise UnknownError(f"Unexpected metadata payload: {data!r}")

        limits = DeviceLimits.from_api(data)
        logger.debug(f"[API] Shocker metadata: {limits}")
        return limits

    # ------------------------------------------------------------------ #
    # 内部送信                                                             #
    # ------------------------------------------------------------------ #

    def _post(self, path: str, payload: dict):
        url = self._api_url + path
        try:
            return self._session.post(url, json=payload, timeout=self._timeout)
        except requests.exceptions.RequestException as e:
            logger.error(f"[API] request failed ({url}): {e}")
            status = e.response.status_code if e.response is not None else None
            if status is not None:
                raise PiShockConnectionError(f"Failed to connect to {url}, response code: {status}") from e
            raise PiShockConnectionError(f"Failed to connect to {url}") from e
