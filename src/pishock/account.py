"""PiShock アカウント

認証情報（アプリ名・ユーザー名・API KEY）を保持し、シェアコードから PiShocker を生成する。
"""

import logging

from .cooldown import CooldownGate
from .errors import ShockerOffline
from . import settings as s_mod
from .settings import Settings
from .shocker import PiShocker
from .transport import ApiTransport

logger = logging.getLogger(__name__)

PUBLIC_PISHOCK_API_BASE = "https://do.pishock.com/api"


class PiShockAccount:
    """PiShock の API 認証情報。PiShocker の生成に使う。"""

    def __init__(self, app_name: str, username: str, api_key: str,
                 api_url: str = PUBLIC_PISHOCK_API_BASE,
                 settings: Settings | None = None, session=None):
        """
        Args:
            app_name: API に送るアプリ名（"Name"）
            username: PiShock のユーザー名
            api_key: PiShock の API KEY
            api_url: API のベース URL（テスト用に差し替え可能）
            settings: 省略時は読み込み済みの設定（default.toml → user.toml → .env）
            session: requests.Session 互換オブジェクト（テスト用）
        """
        self.app_name = app_name
        self.username = username
        self.api_key = api_key
        self.api_url = api_url
        self._settings = settings or s_mod.settings
        self._session = session

    @staticmethod
    def from_settings(settings: Settings | None = None, session=None) -> "PiShockAccount":
        """設定（.env の PISHOCK_USERNAME / PISHOCK_APIKEY）からアカウントを生成する。"""
        if settings is None:
            settings = s_mod.settings
        if not settings.api.username or not settings.api.api_key:
            raise ValueError("PISHOCK_USERNAME / PISHOCK_APIKEY が設定されていません（.env を確認してください）")
        return PiShockAccount(
            app_name=settings.api.app_name,
            username=settings.api.username,
            api_key=settings.api.api_key,
            api_url=settings.api.url,
            settings=settings,
            session=session,
        )

    async def get_shocker(self, share_code: str) -> PiShocker:
        """メタデータを取得済みの PiShocker を返す。

        オフラインなら ShockerOffline を送出する（一時停止中は失敗にしない）。
        """
        shocker = self.get_shocker_without_verification(share_code)
        await shocker.refresh_metadata()

        if shocker.online is False:
            logger.warning(f"[Account] shocker {share_code} is offline")
            raise ShockerOffline()

        return shocker

    def get_shocker_without_verification(self, share_code: str) -> PiShocker:
        """メタデータを取得せずに PiShocker を返す（制限値は不明のまま）。"""
        transport = ApiTransport(
            username=self.username,
            api_key=self.api_key,
            share_code=share_code,
            app_name=self.app_name,
            api_url=self.api_url,
            timeout=self._settings.api.timeout,
            session=self._session,
        )
        return PiShocker(
            transport,
            device_settings=self._settings.device,
            curve_settings=self._settings.curve,
            debug_settings=self._settings.debug,
            cooldown=CooldownGate(self._settings.device.cooldown),
        )
