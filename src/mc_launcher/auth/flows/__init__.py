"""Auth Flows

Microsoft device code flow 와 Xbox Live / Minecraft 토큰 교환 요청.
"""

from mc_launcher.auth.flows.device_code import (
    TokenPollResult,
    display_instructions,
    poll_device_token,
    redeem_refresh_token,
    request_device_code,
)
from mc_launcher.auth.flows.xbox import (
    authenticate_console_identity,
    authorize_relying_party,
    fetch_profile,
    login_game_service,
)

__all__ = [
    # Device Code Flow
    "TokenPollResult",
    "request_device_code",
    "poll_device_token",
    "redeem_refresh_token",
    "display_instructions",
    # Xbox Live / Minecraft
    "authenticate_console_identity",
    "authorize_relying_party",
    "login_game_service",
    "fetch_profile",
]
