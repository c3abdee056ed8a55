#!/usr/bin/env python3
"""
シェアコードのメタデータ（名前・上限値・状態）を表示するスクリプト
認証情報とシェアコードは .env から読む
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '../src'))

import asyncio
import logging

from pishock import PiShockAccount, PiShockError
from pishock.log import setup_logging
from pishock.settings import settings

logger = logging.getLogger("shocker_info")


async def main() -> int:
    setup_logging(settings)

    if not settings.api.share_code:
        logger.error("PISHOCK_SHARECODE must be set")
        return 1

    try:
        account = PiShockAccount.from_settings(settings)
    except ValueError as e:
        logger.error(str(e))
        return 1
    shocker = account.get_shocker_without_verification(settings.api.share_code)
    try:
        await shocker.refresh_metadata()
    except PiShockError as e:
        logger.error(f"Failed to fetch shocker metadata: {e}")
        return 1

    print("PiShocker details:")
    print(f"  Name: {shocker.name}")
    print(f"  Max intensity: {shocker.max_intensity}")
    print(f"  Max duration: {shocker.max_duration}")
    print(f"  Client ID: {shocker.client_id}")
    print(f"  Shocker ID: {shocker.shocker_id}")
    print(f"  Online: {shocker.online}")
    print(f"  Paused: {shocker.paused}")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
