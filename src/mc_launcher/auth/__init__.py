"""MC Launcher Auth Module

Microsoft 계정 → Xbox Live → XSTS → Minecraft 인증 체인.
Device code 로그인, 토큰 갱신, OS 자격증명 저장소 관리.

Example:
    from mc_launcher.auth import AuthService

    service = AuthService()
    session = await service.start_auth()
    result = await service.poll_auth()
"""

from mc_launcher.auth.chain import AuthChain
from mc_launcher.auth.config import AuthConfig
from mc_launcher.auth.exceptions import (
    AuthenticationError,
    CredentialNotFoundError,
    MissingClaimError,
    NetworkError,
    NoPendingAuthError,
    ProfileMismatchError,
    ProtocolError,
    SecretStoreError,
)
from mc_launcher.auth.models import (
    AuthPollResult,
    AuthStatus,
    DeviceCodeSession,
    LauncherAccount,
)
from mc_launcher.auth.service import AuthService
from mc_launcher.auth.session import DeviceCodeStateMachine
from mc_launcher.auth.storage.secret_store import (
    FileSecretStore,
    KeyringSecretStore,
    SecretStore,
)

__all__ = [
    # Core
    "AuthService",
    "AuthChain",
    "AuthConfig",
    "DeviceCodeStateMachine",
    "SecretStore",
    "KeyringSecretStore",
    "FileSecretStore",
    # Models
    "AuthPollResult",
    "AuthStatus",
    "DeviceCodeSession",
    "LauncherAccount",
    # Exceptions
    "AuthenticationError",
    "NetworkError",
    "ProtocolError",
    "MissingClaimError",
    "CredentialNotFoundError",
    "NoPendingAuthError",
    "SecretStoreError",
    "ProfileMismatchError",
]
