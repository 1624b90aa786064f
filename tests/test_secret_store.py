"""Secret Store 테스트"""

import stat
import sys

import keyring
import pytest
from keyring.errors import KeyringError, PasswordDeleteError

from mc_launcher.auth.config import AuthConfig
from mc_launcher.auth.exceptions import CredentialNotFoundError, SecretStoreError
from mc_launcher.auth.storage.secret_store import (
    FileSecretStore,
    KeyringSecretStore,
    create_secret_store,
)


@pytest.fixture
def fake_keyring(monkeypatch):
    """keyring 모듈 함수를 dict 기반으로 교체."""
    entries: dict[tuple[str, str], str] = {}

    def set_password(service, key, value):
        entries[(service, key)] = value

    def get_password(service, key):
        return entries.get((service, key))

    def delete_password(service, key):
        if (service, key) not in entries:
            raise PasswordDeleteError("Password not found")
        del entries[(service, key)]

    monkeypatch.setattr(keyring, "set_password", set_password)
    monkeypatch.setattr(keyring, "get_password", get_password)
    monkeypatch.setattr(keyring, "delete_password", delete_password)
    return entries


@pytest.fixture
def file_store(tmp_path):
    return FileSecretStore(tmp_path / "nested" / "secure-storage.json")


class TestKeyringSecretStore:
    """KeyringSecretStore 테스트"""

    @pytest.mark.asyncio
    async def test_put_and_get(self, fake_keyring):
        """저장 및 로드"""
        store = KeyringSecretStore("mc-server-manager")
        await store.put("mc_access_token_abc", "token-value")

        assert await store.get("mc_access_token_abc") == "token-value"
        assert fake_keyring[("mc-server-manager", "mc_access_token_abc")] == "token-value"

    @pytest.mark.asyncio
    async def test_get_missing(self, fake_keyring):
        store = KeyringSecretStore("mc-server-manager")
        with pytest.raises(CredentialNotFoundError) as exc:
            await store.get("nope")
        assert exc.value.key == "nope"

    @pytest.mark.asyncio
    async def test_delete_missing_is_noop(self, fake_keyring):
        store = KeyringSecretStore("mc-server-manager")
        await store.delete("nope")

    @pytest.mark.asyncio
    async def test_delete(self, fake_keyring):
        store = KeyringSecretStore("mc-server-manager")
        await store.put("k", "v")
        await store.delete("k")
        assert not await store.contains("k")

    @pytest.mark.asyncio
    async def test_backend_failure(self, fake_keyring, monkeypatch):
        def broken(service, key, value):
            raise KeyringError("locked")

        monkeypatch.setattr(keyring, "set_password", broken)
        store = KeyringSecretStore("mc-server-manager")

        with pytest.raises(SecretStoreError) as exc:
            await store.put("k", "v")
        assert "locked" in str(exc.value)

    @pytest.mark.asyncio
    async def test_delete_failure_surfaces(self, fake_keyring, monkeypatch):
        def broken(service, key):
            raise PasswordDeleteError("access denied")

        store = KeyringSecretStore("mc-server-manager")
        await store.put("k", "v")
        monkeypatch.setattr(keyring, "delete_password", broken)

        with pytest.raises(SecretStoreError):
            await store.delete("k")


class TestFileSecretStore:
    """FileSecretStore 테스트"""

    @pytest.mark.asyncio
    async def test_round_trip_exact(self, file_store):
        """저장한 값을 그대로 반환"""
        value = "eyJhbGciOi.é中=\n  spaced "
        await file_store.put("k", value)
        assert await file_store.get("k") == value

    @pytest.mark.asyncio
    async def test_get_missing(self, file_store):
        with pytest.raises(CredentialNotFoundError):
            await file_store.get("missing")

    @pytest.mark.asyncio
    async def test_delete_missing_is_noop(self, file_store):
        await file_store.delete("missing")
        assert not file_store.path.exists()

    @pytest.mark.asyncio
    async def test_delete_keeps_other_keys(self, file_store):
        await file_store.put("a", "1")
        await file_store.put("b", "2")
        await file_store.delete("a")

        assert not await file_store.contains("a")
        assert await file_store.get("b") == "2"

    @pytest.mark.asyncio
    @pytest.mark.skipif(sys.platform == "win32", reason="POSIX permissions")
    async def test_file_permissions(self, file_store):
        """보안: 사용자만 읽기/쓰기"""
        await file_store.put("k", "v")
        assert stat.S_IMODE(file_store.path.stat().st_mode) == 0o600

    @pytest.mark.asyncio
    @pytest.mark.skipif(sys.platform == "win32", reason="POSIX permissions")
    async def test_stale_temp_file_permissions_not_inherited(self, file_store):
        file_store.path.parent.mkdir(parents=True)
        stale = file_store.path.with_name(file_store.path.name + ".tmp")
        stale.write_text("{}")
        stale.chmod(0o644)

        await file_store.put("k", "v")

        assert stat.S_IMODE(file_store.path.stat().st_mode) == 0o600
        assert not stale.exists()

    @pytest.mark.asyncio
    async def test_failed_write_removes_temp_file(self, file_store, monkeypatch):
        def fail_replace(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr("mc_launcher.auth.storage.secret_store.os.replace", fail_replace)

        with pytest.raises(SecretStoreError):
            await file_store.put("k", "v")

        assert not file_store.path.with_name(file_store.path.name + ".tmp").exists()
        assert not file_store.path.exists()

    @pytest.mark.asyncio
    async def test_corrupt_file(self, file_store):
        file_store.path.parent.mkdir(parents=True)
        file_store.path.write_text("{not json")

        with pytest.raises(SecretStoreError):
            await file_store.get("k")


class TestCreateSecretStore:
    def test_keyring_backend(self):
        store = create_secret_store(AuthConfig(keyring_service="svc"))
        assert isinstance(store, KeyringSecretStore)
        assert store.service == "svc"

    def test_file_backend(self, tmp_path):
        path = tmp_path / "secrets.json"
        store = create_secret_store(AuthConfig(secret_backend="file", secret_file=path))
        assert isinstance(store, FileSecretStore)
        assert store.path == path

    def test_unknown_backend(self):
        with pytest.raises(ValueError):
            create_secret_store(AuthConfig(secret_backend="vault"))
