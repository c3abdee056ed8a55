"""
設定管理モジュール

読み込み優先順位（後勝ち）:
  1. config/default.toml  （デフォルト値・git管理）
  2. config/user.toml     （ユーザー上書き・gitignore）
  3. .env                 （秘密情報: ユーザー名, API KEY, シェアコード）

config ディレクトリは環境変数 PISHOCK_CONFIG_DIR で差し替え可能。
"""

import tomllib
import os
from pathlib import Path
from dataclasses import dataclass, field
from datetime import timedelta
from dotenv import load_dotenv

# .env を読み込む
load_dotenv()

# プロジェクトルート（src/pishock/ の二つ上）
_ROOT = Path(__file__).parent.parent.parent
_DEFAULT_CONFIG_DIR = _ROOT / "config"


def _config_dir() -> Path:
    override = os.getenv("PISHOCK_CONFIG_DIR")
    return Path(override) if override else _DEFAULT_CONFIG_DIR


def _load_toml(path: Path) -> dict:
    if not path.exists():
        return {}
    with open(path, "rb") as f:
        return tomllib.load(f)


def _deep_merge(base: dict, override: dict) -> dict:
    """override を base にマージ（ネストも対応）"""
    result = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


@dataclass
class ApiSettings:
    url: str = "https://do.pishock.com/api"
    app_name: str = "pishock"
    timeout: float = 10.0
    username: str = ""    # .env から読む
    api_key: str = ""     # .env から読む
    share_code: str = ""  # .env から読む


@dataclass
class DeviceSettings:
    cooldown: float = 0.1                 # コマンド間の最小間隔（秒）
    warning_intensity: int = 20           # shock_with_warning の事前バイブ強度
    warning_duration: float = 1.0         # 事前バイブの長さ（秒）
    warning_delay: float = 0.2            # ファームウェアが要求するコマンド間待ち（秒）
    mini_shock_duration: float = 0.3      # mini_shock の長さ（秒）


@dataclass
class CurveSettings:
    resolution_ms: int = 500      # 補間ステップの長さ
    command_delay_ms: int = 100   # ステップ送信間の待ち
    start_intensity: int = 1

    @property
    def resolution(self) -> timedelta:
        return timedelta(milliseconds=self.resolution_ms)

    @property
    def command_delay(self) -> float:
        return self.command_delay_ms / 1000.0


@dataclass
class DebugSettings:
    log_level: str = "INFO"
    log_to_file: bool = False
    log_file: str = "logs/pishock.log"
    log_curve: bool = True   # カーブ送信前にテキストグラフを DEBUG 出力


@dataclass
class Settings:
    api: ApiSettings = field(default_factory=ApiSettings)
    device: DeviceSettings = field(default_factory=DeviceSettings)
    curve: CurveSettings = field(default_factory=CurveSettings)
    debug: DebugSettings = field(default_factory=DebugSettings)


def _apply_toml(settings: Settings, data: dict) -> None:
    """TOML の dict を Settings に適用する（未知のキーは無視）"""
    def _walk(obj, d: dict):
        for k, v in d.items():
            if isinstance(v, dict):
                sub = getattr(obj, k, None)
                if sub is not None:
                    _walk(sub, v)
            elif hasattr(obj, k):
                setattr(obj, k, v)

    _walk(settings, data)


def load(config_dir: Path | None = None) -> Settings:
    """設定を読み込んで新しい Settings を返す"""
    directory = config_dir or _config_dir()
    default_data = _load_toml(directory / "default.toml")
    user_data = _load_toml(directory / "user.toml")
    merged = _deep_merge(default_data, user_data)

    s = Settings()
    _apply_toml(s, merged)

    # .env の秘密情報で上書き（未設定なら TOML の値を残す）
    s.api.username = os.getenv("PISHOCK_USERNAME", s.api.username)
    s.api.api_key = os.getenv("PISHOCK_APIKEY", s.api.api_key)
    s.api.share_code = os.getenv("PISHOCK_SHARECODE", s.api.share_code)

    return s


# モジュールロード時に一度だけ読み込む
settings = load()


def reload() -> None:
    """設定を再読み込みする"""
    global settings
    settings = load()
