"""Auth data models

인증 체인 각 단계의 요청/응답 데이터 클래스.
Wire 응답은 from_response, 호출자에게 돌려주는 값은 to_dict 제공.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum

from mc_launcher.auth.config import ACCOUNT_KIND


@dataclass
class DeviceCodeSession:
    """Device Code 응답 (pending 세션).

    Attributes:
        user_code: 사용자가 입력해야 하는 코드
        device_code: 토큰 교환에 사용되는 device code
        verification_uri: 사용자가 접속해야 하는 URL
        expires_in: device_code 만료 시간 (발급 시점부터 초)
        interval: 폴링 간격 (초)
    """

    user_code: str
    device_code: str
    verification_uri: str
    expires_in: int = 900
    interval: int = 5

    @classmethod
    def from_response(cls, data: dict) -> "DeviceCodeSession":
        return cls(
            user_code=data["user_code"],
            device_code=data["device_code"],
            verification_uri=data["verification_uri"],
            expires_in=int(data.get("expires_in", 900)),  # 기본 15분
            interval=int(data.get("interval", 5)),
        )

    def to_dict(self) -> dict:
        return {
            "user_code": self.user_code,
            "device_code": self.device_code,
            "verification_uri": self.verification_uri,
            "expires_in": self.expires_in,
            "interval": self.interval,
        }


@dataclass
class BearerTokenPair:
    """Microsoft 토큰 엔드포인트 응답. 저장하지 않음."""

    access_token: str
    refresh_token: str
    expires_in: int = 3600


@dataclass
class ConsoleIdentityToken:
    """Xbox Live user token + user hash (uhs)."""

    token: str
    user_hash: str


@dataclass
class RelyingPartyToken:
    """XSTS token (Minecraft relying party)."""

    token: str


@dataclass
class GameServiceSession:
    """Minecraft services access token."""

    access_token: str
    expires_in: int = 86400


@dataclass
class Profile:
    """Minecraft 프로필. id 가 모든 secret 의 키."""

    id: str
    display_name: str

    @classmethod
    def from_response(cls, data: dict) -> "Profile":
        return cls(id=data["id"], display_name=data["name"])


@dataclass
class LauncherAccount:
    """체인 완료 후 호출자(로컬 백엔드)에게 돌려주는 계정 레코드.

    영속 저장은 호출자 책임. 여기서는 값만 생성.
    """

    internal_id: str
    external_id: str
    display_name: str
    account_kind: str
    created_at: datetime
    last_used: datetime | None = None

    @classmethod
    def create(cls, profile: Profile) -> "LauncherAccount":
        """프로필로 새 계정 레코드 생성 (internal_id 는 매번 새로 발급)."""
        return cls(
            internal_id=str(uuid.uuid4()),
            external_id=profile.id,
            display_name=profile.display_name,
            account_kind=ACCOUNT_KIND,
            created_at=datetime.now(timezone.utc),
        )

    def to_dict(self) -> dict:
        return {
            "internal_id": self.internal_id,
            "external_id": self.external_id,
            "display_name": self.display_name,
            "account_kind": self.account_kind,
            "last_used": self.last_used.isoformat() if self.last_used else None,
            "created_at": self.created_at.isoformat(),
        }


class AuthStatus(str, Enum):
    """poll_auth 결과 상태."""

    PENDING = "pending"
    EXPIRED = "expired"
    ERROR = "error"
    COMPLETE = "complete"


@dataclass
class AuthPollResult:
    """poll_auth 결과.

    Attributes:
        status: pending / expired / error / complete
        account: complete 일 때만 설정
        error: expired / error 일 때 표시용 메시지
    """

    status: AuthStatus
    account: LauncherAccount | None = None
    error: str | None = None

    @property
    def is_terminal(self) -> bool:
        return self.status is not AuthStatus.PENDING

    def to_dict(self) -> dict:
        return {
            "status": self.status.value,
            "account": self.account.to_dict() if self.account else None,
            "error": self.error,
        }
