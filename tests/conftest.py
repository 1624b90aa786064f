"""Shared test fixtures."""

import httpx
import pytest

from mc_launcher.auth.config import AuthConfig
from mc_launcher.auth.exceptions import CredentialNotFoundError, SecretStoreError
from mc_launcher.auth.service import AuthService
from mc_launcher.auth.storage.secret_store import SecretStore

DEVICE_CODE_URL = "https://login.microsoftonline.com/consumers/oauth2/v2.0/devicecode"
TOKEN_URL = "https://login.microsoftonline.com/consumers/oauth2/v2.0/token"
XBOX_URL = "https://user.auth.xboxlive.com/user/authenticate"
XSTS_URL = "https://xsts.auth.xboxlive.com/xsts/authorize"
MC_LOGIN_URL = "https://api.minecraftservices.com/authentication/login_with_xbox"
MC_PROFILE_URL = "https://api.minecraftservices.com/minecraft/profile"

PROFILE_ID = "069a79f444e94726a5befca90e38aaf5"
PROFILE_NAME = "Notch"

DEVICE_CODE_FIXTURE = {
    "user_code": "ABC-123",
    "device_code": "dc1",
    "verification_uri": "https://example/verify",
    "expires_in": 900,
    "interval": 5,
}
TOKEN_FIXTURE = {
    "access_token": "ms-access",
    "refresh_token": "ms-refresh",
    "expires_in": 3600,
}


class FakeEndpoints:
    """httpx.MockTransport 용 가짜 엔드포인트 라우터.

    (method, url) 별로 응답 큐를 가지며 마지막 응답은 반복 사용.
    등록되지 않은 요청은 404.
    """

    def __init__(self):
        self._routes: dict[tuple[str, str], list] = {}
        self.requests: list[httpx.Request] = []

    def add(self, method: str, url: str, status: int = 200, json=None, text: str | None = None):
        def build(request: httpx.Request) -> httpx.Response:
            if text is not None:
                return httpx.Response(status, text=text)
            return httpx.Response(status, json=json)

        self._routes.setdefault((method, url), []).append(build)
        return self

    def add_error(self, method: str, url: str, exc_type=httpx.ConnectError):
        def build(request: httpx.Request) -> httpx.Response:
            raise exc_type("connection refused", request=request)

        self._routes.setdefault((method, url), []).append(build)
        return self

    def calls(self, url: str) -> list[httpx.Request]:
        return [r for r in self.requests if str(r.url) == url]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        queue = self._routes.get((request.method, str(request.url)))
        if not queue:
            return httpx.Response(404, text="not found")
        build = queue.pop(0) if len(queue) > 1 else queue[0]
        return build(request)

    def add_chain_success(self, profile_id: str = PROFILE_ID, name: str = PROFILE_NAME):
        self.add("POST", XBOX_URL, json={"Token": "xbl-token", "DisplayClaims": {"xui": [{"uhs": "uhs123"}]}})
        self.add("POST", XSTS_URL, json={"Token": "xsts-token", "DisplayClaims": {"xui": [{"uhs": "uhs123"}]}})
        self.add("POST", MC_LOGIN_URL, json={"access_token": "mc-access", "expires_in": 86400})
        self.add("GET", MC_PROFILE_URL, json={"id": profile_id, "name": name})
        return self


class MemorySecretStore(SecretStore):
    """메모리 secret store. 키 prefix 로 실패 주입 가능."""

    def __init__(self):
        self.data: dict[str, str] = {}
        self.writes: list[str] = []
        self.fail_put_prefixes: set[str] = set()
        self.fail_delete_prefixes: set[str] = set()

    async def put(self, key: str, value: str) -> None:
        if any(key.startswith(p) for p in self.fail_put_prefixes):
            raise SecretStoreError(f"keyring set: injected failure for {key}", key=key)
        self.writes.append(key)
        self.data[key] = value

    async def get(self, key: str) -> str:
        if key not in self.data:
            raise CredentialNotFoundError(f"No credential stored for {key}", key=key)
        return self.data[key]

    async def delete(self, key: str) -> None:
        if any(key.startswith(p) for p in self.fail_delete_prefixes):
            raise SecretStoreError(f"keyring delete: injected failure for {key}", key=key)
        self.data.pop(key, None)


@pytest.fixture
def endpoints():
    return FakeEndpoints()


@pytest.fixture
def config(endpoints):
    return AuthConfig(transport=httpx.MockTransport(endpoints.handler))


@pytest.fixture
def store():
    return MemorySecretStore()


@pytest.fixture
def service(config, store):
    return AuthService(config=config, store=store)
