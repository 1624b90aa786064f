"""Auth configuration.

Microsoft / Xbox Live / Minecraft 인증 체인의 고정 상수와 설정.
"""

import os
import platform
from dataclasses import dataclass
from pathlib import Path

import httpx

# Microsoft identity platform (consumers tenant)
MS_CLIENT_ID = "c36a9fb6-4f2a-41ff-90bd-ae7cc92031eb"
MS_TENANT = "consumers"
MS_SCOPE = "XboxLive.signin offline_access"
MS_LOGIN_BASE = "https://login.microsoftonline.com"

DEVICE_CODE_GRANT_TYPE = "urn:ietf:params:oauth:grant-type:device_code"
REFRESH_GRANT_TYPE = "refresh_token"

# Xbox Live
XBOX_USER_AUTH_URL = "https://user.auth.xboxlive.com/user/authenticate"
XBOX_RELYING_PARTY = "http://auth.xboxlive.com"
XBOX_SITE_NAME = "user.auth.xboxlive.com"
XSTS_AUTHORIZE_URL = "https://xsts.auth.xboxlive.com/xsts/authorize"
XSTS_SANDBOX_ID = "RETAIL"
IDENTITY_TOKEN_SCHEME = "XBL3.0"

# Minecraft services
MINECRAFT_RELYING_PARTY = "rp://api.minecraftservices.com/"
MINECRAFT_LOGIN_URL = "https://api.minecraftservices.com/authentication/login_with_xbox"
MINECRAFT_PROFILE_URL = "https://api.minecraftservices.com/minecraft/profile"

# Secret storage
KEYRING_SERVICE = "mc-server-manager"
GAME_ACCESS_TOKEN_KEY = "mc_access_token_{external_id}"
IDENTITY_REFRESH_TOKEN_KEY = "ms_refresh_token_{external_id}"
SECRET_FILE_NAME = "secure-storage.json"

ACCOUNT_KIND = "federated"
DEFAULT_HTTP_TIMEOUT = 30.0

SECRET_BACKEND_KEYRING = "keyring"
SECRET_BACKEND_FILE = "file"


def default_storage_dir() -> Path:
    """OS별 기본 저장 디렉토리"""
    system = platform.system()
    if system == "Windows":
        base = Path(os.environ.get("APPDATA", Path.home()))
    elif system == "Darwin":  # macOS
        base = Path.home() / "Library" / "Application Support"
    else:  # Linux
        base = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
    return base / KEYRING_SERVICE


def game_access_token_key(external_id: str) -> str:
    return GAME_ACCESS_TOKEN_KEY.format(external_id=external_id)


def identity_refresh_token_key(external_id: str) -> str:
    return IDENTITY_REFRESH_TOKEN_KEY.format(external_id=external_id)


@dataclass
class AuthConfig:
    """인증 체인 설정.

    기본값은 실제 서비스 엔드포인트. 테스트에서는 transport 를
    httpx.MockTransport 로 교체해 fixture 응답을 사용.

    Attributes:
        client_id: Microsoft OAuth Client ID
        tenant: Microsoft tenant
        scope: 요청할 scope
        keyring_service: keyring 서비스 이름
        secret_backend: 'keyring' 또는 'file'
        secret_file: file 백엔드 사용 시 JSON 파일 경로
        http_timeout: 요청당 타임아웃 (초)
        transport: httpx transport (테스트용)
    """

    client_id: str = MS_CLIENT_ID
    tenant: str = MS_TENANT
    scope: str = MS_SCOPE
    xbox_user_auth_url: str = XBOX_USER_AUTH_URL
    xsts_authorize_url: str = XSTS_AUTHORIZE_URL
    minecraft_login_url: str = MINECRAFT_LOGIN_URL
    minecraft_profile_url: str = MINECRAFT_PROFILE_URL
    keyring_service: str = KEYRING_SERVICE
    secret_backend: str = SECRET_BACKEND_KEYRING
    secret_file: Path | None = None
    http_timeout: float = DEFAULT_HTTP_TIMEOUT
    transport: httpx.AsyncBaseTransport | None = None

    @property
    def device_code_url(self) -> str:
        return f"{MS_LOGIN_BASE}/{self.tenant}/oauth2/v2.0/devicecode"

    @property
    def token_url(self) -> str:
        return f"{MS_LOGIN_BASE}/{self.tenant}/oauth2/v2.0/token"

    @property
    def secret_file_path(self) -> Path:
        return self.secret_file or default_storage_dir() / SECRET_FILE_NAME

    def http_client(self) -> httpx.AsyncClient:
        """요청 한 번(또는 체인 한 번)에 쓸 AsyncClient 생성."""
        return httpx.AsyncClient(timeout=self.http_timeout, transport=self.transport)

    @classmethod
    def from_env(cls) -> "AuthConfig":
        """환경 변수로 기본값 덮어쓰기.

        Raises:
            ValueError: MC_LAUNCHER_HTTP_TIMEOUT 이 숫자가 아닐 때
        """
        secret_file = os.environ.get("MC_LAUNCHER_SECRET_FILE")
        timeout = os.environ.get("MC_LAUNCHER_HTTP_TIMEOUT")
        try:
            http_timeout = float(timeout) if timeout else DEFAULT_HTTP_TIMEOUT
        except ValueError as e:
            raise ValueError(f"MC_LAUNCHER_HTTP_TIMEOUT 값이 올바르지 않음: {timeout!r}") from e

        return cls(
            client_id=os.environ.get("MC_LAUNCHER_CLIENT_ID", MS_CLIENT_ID),
            tenant=os.environ.get("MC_LAUNCHER_TENANT", MS_TENANT),
            keyring_service=os.environ.get("MC_LAUNCHER_KEYRING_SERVICE", KEYRING_SERVICE),
            secret_backend=os.environ.get("MC_LAUNCHER_SECRET_BACKEND", SECRET_BACKEND_KEYRING),
            secret_file=Path(secret_file) if secret_file else None,
            http_timeout=http_timeout,
        )
