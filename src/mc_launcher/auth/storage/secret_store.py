"""Secret Store

OS 자격증명 저장소를 사용한 secret 관리.
값은 변환 없이 그대로 저장/반환.
"""

import json
import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path

import keyring
from keyring.errors import KeyringError

from mc_launcher.auth.config import SECRET_BACKEND_FILE, SECRET_BACKEND_KEYRING, AuthConfig
from mc_launcher.auth.exceptions import CredentialNotFoundError, SecretStoreError

logger = logging.getLogger(__name__)


class SecretStore(ABC):
    """Secret 저장소 추상 베이스 클래스

    단일 키 put/get/delete 가 원자적이라고 가정.
    """

    @abstractmethod
    async def put(self, key: str, value: str) -> None:
        """Secret 저장 (기존 값 덮어쓰기)

        Raises:
            SecretStoreError: 백엔드 실패 시
        """

    @abstractmethod
    async def get(self, key: str) -> str:
        """Secret 조회

        Raises:
            CredentialNotFoundError: 키가 없을 때
            SecretStoreError: 백엔드 실패 시
        """

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Secret 삭제. 없는 키 삭제는 성공.

        Raises:
            SecretStoreError: 백엔드 실패 시
        """

    async def contains(self, key: str) -> bool:
        try:
            await self.get(key)
        except CredentialNotFoundError:
            return False
        return True


class KeyringSecretStore(SecretStore):
    """keyring 기반 저장소

    OS별 백엔드 사용:
    - Windows: Credential Manager
    - macOS: Keychain
    - Linux: Secret Service (GNOME Keyring, KWallet)

    Example:
        store = KeyringSecretStore()
        await store.put("mc_access_token_abc", token)
        token = await store.get("mc_access_token_abc")
        await store.delete("mc_access_token_abc")
    """

    def __init__(self, service: str):
        self.service = service

    async def put(self, key: str, value: str) -> None:
        try:
            keyring.set_password(self.service, key, value)
        except KeyringError as e:
            raise SecretStoreError(f"keyring set: {e}", key=key) from e

    async def get(self, key: str) -> str:
        try:
            value = keyring.get_password(self.service, key)
        except KeyringError as e:
            raise SecretStoreError(f"keyring get: {e}", key=key) from e
        if value is None:
            raise CredentialNotFoundError(f"No credential stored for {key}", key=key)
        return value

    async def delete(self, key: str) -> None:
        # 백엔드마다 "없음" 을 PasswordDeleteError 로 알리는 방식이 달라 먼저 조회
        if not await self.contains(key):
            return
        try:
            keyring.delete_password(self.service, key)
        except KeyringError as e:
            raise SecretStoreError(f"keyring delete: {e}", key=key) from e


class FileSecretStore(SecretStore):
    """JSON 파일 기반 저장소

    keyring 백엔드가 없는 환경(headless Linux 등)용.
    파일 권한은 사용자 읽기/쓰기(0600)로 제한.
    """

    def __init__(self, path: Path):
        self.path = path

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise SecretStoreError(f"secret file read: {e}") from e
        if not isinstance(data, dict):
            raise SecretStoreError(f"secret file is not a JSON object: {self.path}")
        return data

    def _write(self, data: dict[str, str]) -> None:
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            # 남아 있던 tmp 의 권한을 물려받지 않도록 새로 생성
            tmp_path.unlink(missing_ok=True)
            fd = os.open(tmp_path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o600)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
            os.replace(tmp_path, self.path)
        except OSError as e:
            try:
                tmp_path.unlink(missing_ok=True)
            except OSError:
                logger.warning("Failed to remove temp secret file %s", tmp_path)
            raise SecretStoreError(f"secret file write: {e}") from e

    async def put(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    async def get(self, key: str) -> str:
        data = self._read()
        if key not in data:
            raise CredentialNotFoundError(f"No credential stored for {key}", key=key)
        return data[key]

    async def delete(self, key: str) -> None:
        data = self._read()
        if key not in data:
            return
        del data[key]
        self._write(data)


def create_secret_store(config: AuthConfig) -> SecretStore:
    """설정에 따라 저장소 백엔드 선택.

    Raises:
        ValueError: 알 수 없는 백엔드 이름
    """
    if config.secret_backend == SECRET_BACKEND_KEYRING:
        return KeyringSecretStore(config.keyring_service)
    if config.secret_backend == SECRET_BACKEND_FILE:
        logger.debug("Using file secret store: %s", config.secret_file_path)
        return FileSecretStore(config.secret_file_path)
    raise ValueError(f"Unknown secret backend: {config.secret_backend!r}")
