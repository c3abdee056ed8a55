"""PiShock API クライアント"""

from .account import PUBLIC_PISHOCK_API_BASE, PiShockAccount
from .cooldown import CooldownGate
from .curve import run_shock_curve
from .errors import (
    CooldownExceeded,
    DeviceBusy,
    InvalidCredentials,
    InvalidDuration,
    InvalidIntensity,
    InvalidOpCode,
    PiShockConnectionError,
    PiShockError,
    ShareCodeInUse,
    ShareCodeNotFound,
    ShockerOffline,
    ShockerPaused,
    UnknownError,
)
from .interpolation import interpolate_curve, linear_interpolation
from .models import DeviceLimits, InterpolatedStep, OpCode, ShockPoint
from .shocker import PiShocker

__version__ = "2.1.1"
