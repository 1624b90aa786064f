"""Device-Code Session State Machine

프로세스당 최대 1개의 device code 인증 시도를 관리.

상태: Idle → Pending → {Complete, Expired, Error} → (slot 비움) Idle

lock 은 메모리 상태 갱신에만 사용하고 네트워크 요청 중에는 잡지 않음.
start 가 이전 세션을 덮어쓰므로 start/poll 직렬화는 호출자 책임.
"""

import asyncio
import logging

from mc_launcher.auth.chain import AuthChain
from mc_launcher.auth.config import AuthConfig
from mc_launcher.auth.exceptions import AuthenticationError, NetworkError, NoPendingAuthError
from mc_launcher.auth.flows.device_code import (
    ERROR_AUTHORIZATION_PENDING,
    ERROR_EXPIRED_TOKEN,
    poll_device_token,
    request_device_code,
)
from mc_launcher.auth.models import AuthPollResult, AuthStatus, DeviceCodeSession

logger = logging.getLogger(__name__)


class DeviceCodeStateMachine:
    """Pending device code 세션 slot 과 start/poll 전이.

    Example:
        machine = DeviceCodeStateMachine(config, chain)
        session = await machine.start()
        # session.user_code / verification_uri 표시
        result = await machine.poll()  # session.interval 초마다 반복
    """

    def __init__(self, config: AuthConfig, chain: AuthChain):
        self.config = config
        self.chain = chain
        self._lock = asyncio.Lock()
        self._pending: DeviceCodeSession | None = None

    @property
    def pending(self) -> DeviceCodeSession | None:
        return self._pending

    async def _clear(self, session: DeviceCodeSession) -> None:
        # 그 사이 start 로 교체된 세션은 건드리지 않음
        async with self._lock:
            if self._pending is session:
                self._pending = None

    async def start(self) -> DeviceCodeSession:
        """새 device code 발급 후 pending 세션으로 저장.

        실패하면 pending 세션이 남지 않음.

        Raises:
            NetworkError: 요청 전송 실패 시
            ProtocolError: non-2xx 또는 파싱 실패 시
        """
        async with self._lock:
            self._pending = None

        async with self.config.http_client() as client:
            session = await request_device_code(client, self.config)

        async with self._lock:
            self._pending = session
        logger.info("Device code issued (expires in %ds)", session.expires_in)
        return session

    async def poll(self) -> AuthPollResult:
        """토큰 엔드포인트 1회 폴링.

        Returns:
            AuthPollResult: pending 은 정상 상태값이며 예외가 아님

        Raises:
            NoPendingAuthError: pending 세션이 없을 때
            NetworkError: 요청 전송 실패 (세션 유지, 재시도 가능)
            ProtocolError: 예상치 못한 status 또는 파싱 실패 (세션 제거)
        """
        async with self._lock:
            session = self._pending
        if session is None:
            raise NoPendingAuthError("No pending auth")

        async with self.config.http_client() as client:
            try:
                result = await poll_device_token(client, self.config, session.device_code)
            except NetworkError:
                raise
            except AuthenticationError:
                await self._clear(session)
                raise

            if result.tokens is None:
                return await self._provider_outcome(session, result.error_code)

            # device code 는 1회용
            await self._clear(session)
            try:
                account = await self.chain.complete_auth_chain(result.tokens, client=client)
            except AuthenticationError as e:
                logger.warning("Auth chain failed: %s", e)
                return AuthPollResult(status=AuthStatus.ERROR, error=str(e))

        logger.info("Device code login complete for profile %s", account.external_id)
        return AuthPollResult(status=AuthStatus.COMPLETE, account=account)

    async def _provider_outcome(self, session: DeviceCodeSession, error_code: str) -> AuthPollResult:
        if error_code == ERROR_AUTHORIZATION_PENDING:
            return AuthPollResult(status=AuthStatus.PENDING)

        await self._clear(session)
        if error_code == ERROR_EXPIRED_TOKEN:
            logger.info("Device code expired")
            return AuthPollResult(status=AuthStatus.EXPIRED, error="Device code expired")

        logger.warning("Device code login failed: %s", error_code)
        return AuthPollResult(status=AuthStatus.ERROR, error=f"Auth error: {error_code}")
