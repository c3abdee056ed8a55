"""
shocker.py / account.py のテスト

FakeTransport / FakeSession を注入し、asyncio.run で非同期操作を実行する。
"""

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import asyncio
from datetime import timedelta

import pytest
from pishock.account import PiShockAccount
from pishock.cooldown import CooldownGate
from pishock.errors import CooldownExceeded, InvalidIntensity, ShareCodeNotFound, ShockerOffline, ShockerPaused
from pishock.models import DeviceLimits, OpCode
from pishock import settings as s_mod
from pishock.settings import ApiSettings, DeviceSettings, Settings
from pishock.shocker import PiShocker

from fakes import FakeClock, FakeResponse, FakeSession, FakeTransport

SEC = timedelta(seconds=1)


def make_shocker(metadata=None, cooldown=0.0, clock=None):
    transport = FakeTransport(metadata=metadata)
    shocker = PiShocker(
        transport,
        metadata=metadata,
        device_settings=DeviceSettings(warning_delay=0.0),
        cooldown=CooldownGate(cooldown, clock or FakeClock()),
    )
    return shocker, transport


class TestActions:

    def test_shock(self):
        shocker, transport = make_shocker()
        asyncio.run(shocker.shock(30, 2 * SEC))
        assert transport.calls == [(OpCode.SHOCK, 30, 2 * SEC)]

    def test_vibrate(self):
        shocker, transport = make_shocker()
        asyncio.run(shocker.vibrate(40, SEC))
        assert transport.calls == [(OpCode.VIBRATE, 40, SEC)]

    def test_beep_sends_zero_intensity(self):
        shocker, transport = make_shocker()
        asyncio.run(shocker.beep(3 * SEC))
        assert transport.calls == [(OpCode.BEEP, 0, 3 * SEC)]

    def test_mini_shock_is_300ms(self):
        shocker, transport = make_shocker()
        asyncio.run(shocker.mini_shock(15))
        assert transport.calls == [(OpCode.SHOCK, 15, timedelta(milliseconds=300))]

    def test_shock_with_warning(self):
        """弱いバイブ（20 / 1 秒）の後に Shock"""
        shocker, transport = make_shocker()
        asyncio.run(shocker.shock_with_warning(50, 2 * SEC))
        assert transport.calls == [
            (OpCode.VIBRATE, 20, SEC),
            (OpCode.SHOCK, 50, 2 * SEC),
        ]

    def test_policy_rejection_never_reaches_transport(self):
        limits = DeviceLimits(online=True, paused=False, max_intensity=50, max_duration=5 * SEC)
        shocker, transport = make_shocker(metadata=limits)
        with pytest.raises(InvalidIntensity):
            asyncio.run(shocker.shock(60, SEC))
        assert transport.calls == []

    def test_cooldown_between_commands(self):
        """300ms クールダウンで 50ms 後の 2 回目は拒否"""
        clock = FakeClock()
        shocker, transport = make_shocker(cooldown=0.3, clock=clock)
        asyncio.run(shocker.shock(10, SEC))
        clock.advance(0.05)
        with pytest.raises(CooldownExceeded) as exc:
            asyncio.run(shocker.shock(10, SEC))
        assert exc.value.remaining == pytest.approx(0.25)
        assert len(transport.calls) == 1

    def test_remote_error_propagates(self):
        shocker, transport = make_shocker()
        transport.fail_at = 0
        transport.error = ShockerPaused()
        with pytest.raises(ShockerPaused):
            asyncio.run(shocker.vibrate(10, SEC))


class TestMetadata:

    def test_unknown_before_refresh(self):
        shocker, _ = make_shocker()
        assert shocker.max_intensity is None
        assert shocker.online is None
        assert shocker.name is None

    def test_refresh_metadata(self):
        shocker, transport = make_shocker()
        transport.metadata = DeviceLimits(online=True, paused=False, max_intensity=70,
                                          max_duration=10 * SEC, name="arm", shocker_id=7)
        asyncio.run(shocker.refresh_metadata())
        assert shocker.max_intensity == 70
        assert shocker.max_duration == 10 * SEC
        assert shocker.name == "arm"
        assert shocker.shocker_id == 7


class TestAccount:

    def _account(self, session):
        settings = Settings(api=ApiSettings(url="http://mock"), device=DeviceSettings(cooldown=0.0))
        return PiShockAccount("pishock", "username", "apikey", api_url="http://mock",
                              settings=settings, session=session)

    def test_get_shocker_fetches_metadata(self):
        session = FakeSession()
        session.responses["/GetShockerInfo"] = FakeResponse(200, "", {
            "clientId": 1, "id": 2, "name": "leg", "paused": True,
            "maxIntensity": 40, "maxDuration": 3, "online": True,
        })
        shocker = asyncio.run(self._account(session).get_shocker("code"))
        assert shocker.share_code == "code"
        assert shocker.max_intensity == 40
        assert shocker.paused is True

    def test_get_shocker_offline(self):
        session = FakeSession()
        session.responses["/GetShockerInfo"] = FakeResponse(200, "", {"online": False, "paused": False})
        with pytest.raises(ShockerOffline):
            asyncio.run(self._account(session).get_shocker("code"))

    def test_get_shocker_unknown_code(self):
        session = FakeSession()
        with pytest.raises(ShareCodeNotFound):
            asyncio.run(self._account(session).get_shocker("missing"))

    def test_without_verification_sends_no_request(self):
        session = FakeSession()
        shocker = self._account(session).get_shocker_without_verification("code")
        assert shocker.metadata is None
        assert session.requests == []

    def test_from_settings_requires_credentials(self):
        with pytest.raises(ValueError):
            PiShockAccount.from_settings(Settings())

    def test_from_settings(self):
        settings = Settings(api=ApiSettings(username="u", api_key="k", app_name="app"))
        account = PiShockAccount.from_settings(settings)
        assert (account.app_name, account.username, account.api_key) == ("app", "u", "k")

    def test_defaults_to_loaded_settings(self, tmp_path, monkeypatch):
        """settings 省略時は user.toml を含む読み込み済みの設定を使う"""
        (tmp_path / "user.toml").write_text(
            "[device]\ncooldown = 0.7\n\n[curve]\nresolution_ms = 1000\n\n[debug]\nlog_curve = false\n",
            encoding="utf-8",
        )
        monkeypatch.setattr(s_mod, "settings", s_mod.load(tmp_path))

        shocker = PiShockAccount("pishock", "username", "apikey", session=FakeSession()) \
            .get_shocker_without_verification("code")
        assert shocker.cooldown.interval == 0.7
        assert shocker.curve_settings.resolution_ms == 1000
        assert shocker.curve_settings.resolution == timedelta(seconds=1)
