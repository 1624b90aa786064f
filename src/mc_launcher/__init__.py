"""MC Launcher - Minecraft 계정 인증 코어."""

from mc_launcher.auth import AuthService, AuthStatus, LauncherAccount

__version__ = "1.0.0"

__all__ = [
    "AuthService",
    "AuthStatus",
    "LauncherAccount",
]
