"""Auth Chain Orchestrator

Microsoft 토큰 쌍 → Xbox Live → XSTS → Minecraft → 프로필 순으로 교환 후
게임 access token 과 Microsoft refresh token 을 저장.

네트워크 단계는 부작용이 없고, 모든 단계가 성공한 뒤에만 저장소에 씀.
"""

import logging

import httpx

from mc_launcher.auth.config import AuthConfig, game_access_token_key, identity_refresh_token_key
from mc_launcher.auth.exceptions import ProfileMismatchError, SecretStoreError
from mc_launcher.auth.flows.device_code import redeem_refresh_token
from mc_launcher.auth.flows.xbox import (
    authenticate_console_identity,
    authorize_relying_party,
    fetch_profile,
    login_game_service,
)
from mc_launcher.auth.models import BearerTokenPair, LauncherAccount
from mc_launcher.auth.storage.secret_store import SecretStore

logger = logging.getLogger(__name__)


class AuthChain:
    """인증 체인 실행 및 자격증명 수명 관리.

    Example:
        chain = AuthChain(AuthConfig(), KeyringSecretStore("mc-server-manager"))
        account = await chain.complete_auth_chain(tokens)
        token = await chain.get_session_token(account.external_id)
    """

    def __init__(self, config: AuthConfig, store: SecretStore):
        self.config = config
        self.store = store

    async def complete_auth_chain(
        self,
        bearer_tokens: BearerTokenPair,
        expected_external_id: str | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> LauncherAccount:
        """전체 체인 실행.

        Args:
            bearer_tokens: Microsoft access/refresh token
            expected_external_id: 설정 시 프로필 id 가 다르면 저장 없이 실패
            client: 재사용할 AsyncClient (없으면 새로 생성)

        Returns:
            LauncherAccount: 새 internal_id 를 가진 계정 레코드

        Raises:
            NetworkError, ProtocolError, MissingClaimError: 교환 단계 실패 시
            ProfileMismatchError: 프로필 id 불일치
            SecretStoreError: 저장 실패 시
        """
        if client is None:
            async with self.config.http_client() as owned:
                return await self.complete_auth_chain(bearer_tokens, expected_external_id, owned)

        console_identity = await authenticate_console_identity(client, self.config, bearer_tokens.access_token)
        relying_party = await authorize_relying_party(client, self.config, console_identity.token)
        game_session = await login_game_service(
            client, self.config, console_identity.user_hash, relying_party.token
        )
        profile = await fetch_profile(client, self.config, game_session.access_token)
        logger.debug("Auth chain resolved profile %s", profile.id)

        if expected_external_id is not None and profile.id != expected_external_id:
            raise ProfileMismatchError(
                f"Refreshed profile {profile.id} does not match account {expected_external_id}",
                expected=expected_external_id,
                actual=profile.id,
            )

        await self._persist(profile.id, game_session.access_token, bearer_tokens.refresh_token)
        logger.info("Stored credentials for profile %s", profile.id)
        return LauncherAccount.create(profile)

    async def _persist(self, external_id: str, game_access_token: str, refresh_token: str) -> None:
        """두 secret 모두 저장. 두 번째 실패 시 첫 번째를 되돌림."""
        access_key = game_access_token_key(external_id)
        await self.store.put(access_key, game_access_token)
        try:
            await self.store.put(identity_refresh_token_key(external_id), refresh_token)
        except SecretStoreError:
            try:
                await self.store.delete(access_key)
            except SecretStoreError as rollback_error:
                logger.warning("Rollback of %s failed: %s", access_key, rollback_error)
            raise

    async def refresh(self, external_id: str) -> LauncherAccount:
        """저장된 refresh token 으로 전체 체인 재실행.

        Raises:
            CredentialNotFoundError: refresh token 이 없을 때
            ProfileMismatchError: 다른 프로필이 나왔을 때
        """
        refresh_token = await self.store.get(identity_refresh_token_key(external_id))
        async with self.config.http_client() as client:
            tokens = await redeem_refresh_token(client, self.config, refresh_token)
            return await self.complete_auth_chain(tokens, expected_external_id=external_id, client=client)

    async def get_session_token(self, external_id: str) -> str:
        """저장된 게임 access token 반환 (자동 refresh 없음).

        Raises:
            CredentialNotFoundError: 토큰이 없을 때
        """
        return await self.store.get(game_access_token_key(external_id))

    async def remove_account(self, external_id: str) -> None:
        """두 secret 모두 삭제. 없는 키는 무시."""
        await self.store.delete(game_access_token_key(external_id))
        await self.store.delete(identity_refresh_token_key(external_id))
        logger.info("Removed credentials for profile %s", external_id)
