"""Auth Service

UI 계층(데스크톱 앱, CLI)이 호출하는 인증 API.
앱 시작 시 한 번 생성하며, pending device code 세션을 소유.
"""

from mc_launcher.auth.chain import AuthChain
from mc_launcher.auth.config import AuthConfig
from mc_launcher.auth.models import AuthPollResult, DeviceCodeSession, LauncherAccount
from mc_launcher.auth.session import DeviceCodeStateMachine
from mc_launcher.auth.storage.secret_store import SecretStore, create_secret_store


class AuthService:
    """인증 서비스

    Example:
        service = AuthService()
        session = await service.start_auth()
        result = await service.poll_auth()
        token = await service.get_session_token(result.account.external_id)
    """

    def __init__(self, config: AuthConfig | None = None, store: SecretStore | None = None):
        self.config = config or AuthConfig.from_env()
        self.store = store or create_secret_store(self.config)
        self.chain = AuthChain(self.config, self.store)
        self.device_flow = DeviceCodeStateMachine(self.config, self.chain)

    @property
    def has_pending_auth(self) -> bool:
        return self.device_flow.pending is not None

    async def start_auth(self) -> DeviceCodeSession:
        return await self.device_flow.start()

    async def poll_auth(self) -> AuthPollResult:
        return await self.device_flow.poll()

    async def refresh_auth(self, external_id: str) -> LauncherAccount:
        return await self.chain.refresh(external_id)

    async def get_session_token(self, external_id: str) -> str:
        return await self.chain.get_session_token(external_id)

    async def remove_account(self, external_id: str) -> None:
        await self.chain.remove_account(external_id)
