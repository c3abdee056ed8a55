#!/usr/bin/env python3
"""
環境変数で指定した強度・時間で、警告バイブ付きの Shock を 1 回送るスクリプト

  PISHOCK_INTENSITY  強度（既定 20）
  PISHOCK_DURATION   時間・秒（既定 1）
  PISHOCK_SHARECODE / PISHOCK_APIKEY / PISHOCK_USERNAME は .env から読む
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '../src'))

import asyncio
import logging
from datetime import timedelta

from pishock import InvalidDuration, InvalidIntensity, PiShockAccount, PiShockError
from pishock.log import setup_logging
from pishock.settings import settings

logger = logging.getLogger("env_shock")


async def main() -> int:
    setup_logging(settings)

    intensity = int(os.getenv("PISHOCK_INTENSITY", "20"))
    duration = timedelta(seconds=float(os.getenv("PISHOCK_DURATION", "1")))
    share_code = settings.api.share_code

    if not share_code or not settings.api.username or not settings.api.api_key:
        logger.error("PISHOCK_SHARECODE, PISHOCK_APIKEY and PISHOCK_USERNAME must be set")
        return 1

    account = PiShockAccount.from_settings(settings)
    try:
        shocker = await account.get_shocker(share_code)
    except PiShockError as e:
        logger.error(f"Failed to get PiShocker instance: {e}")
        return 1

    print("Waiting 3 seconds before shocking! Press Ctrl+C to cancel...")
    for n in (3, 2, 1):
        print(f"{n}... ", end="", flush=True)
        await asyncio.sleep(1)
    print("SHOCK!")

    try:
        await shocker.shock_with_warning(intensity, duration)
    except InvalidIntensity as e:
        logger.error(f"Invalid intensity specified, max intensity: {e.max_intensity}")
        return 1
    except InvalidDuration as e:
        logger.error(f"Invalid duration specified, max duration: {e.max_duration}")
        return 1
    except PiShockError as e:
        logger.error(f"Shock failed: {e}")
        return 1

    print("Shock successfully sent!")
    return 0


if __name__ == "__main__":
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        print("\nCancelled")
        sys.exit(130)
