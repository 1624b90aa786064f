"""Custom authentication exceptions.

인증 체인 관련 예외 클래스 정의.
Device code 폴링의 pending/expired/denied 는 예외가 아니라 AuthStatus 값으로 처리.
"""


class AuthenticationError(Exception):
    """기본 인증 예외.

    모든 인증 관련 예외의 베이스 클래스.

    Attributes:
        provider: 실패한 엔드포인트 제공자 (예: 'microsoft', 'xbox', 'minecraft')
    """

    def __init__(self, message: str, provider: str | None = None):
        self.provider = provider
        super().__init__(message)


class NetworkError(AuthenticationError):
    """엔드포인트 접속 자체가 실패함 (transport 레벨).

    Attributes:
        hop: 실패한 단계 이름
    """

    def __init__(self, message: str, hop: str, provider: str | None = None):
        self.hop = hop
        super().__init__(message, provider)


class ProtocolError(AuthenticationError):
    """예상치 못한 HTTP status 또는 파싱 불가능한 응답 본문.

    Attributes:
        hop: 실패한 단계 이름
        status_code: HTTP status (본문 파싱 실패 시 200 등 성공 코드일 수 있음)
    """

    def __init__(
        self,
        message: str,
        hop: str,
        status_code: int | None = None,
        provider: str | None = None,
    ):
        self.hop = hop
        self.status_code = status_code
        super().__init__(message, provider)


class MissingClaimError(AuthenticationError):
    """정상 응답에 필수 필드가 없음 (예: xui 목록이 비어 있음).

    Attributes:
        claim: 누락된 필드 이름
    """

    def __init__(self, message: str, claim: str, provider: str | None = None):
        self.claim = claim
        super().__init__(message, provider)


class CredentialNotFoundError(AuthenticationError):
    """저장된 자격증명이 없음.

    새 로그인 또는 명시적 refresh 가 필요함을 나타냄.

    Attributes:
        key: 조회한 secret 키
    """

    def __init__(self, message: str, key: str | None = None):
        self.key = key
        super().__init__(message)


class NoPendingAuthError(AuthenticationError):
    """진행 중인 device code 인증이 없는데 poll 이 호출됨."""

    pass


class SecretStoreError(AuthenticationError):
    """Secret store 백엔드 실패 ("없음" 이외의 모든 실패).

    Attributes:
        key: 작업 대상 secret 키
    """

    def __init__(self, message: str, key: str | None = None):
        self.key = key
        super().__init__(message)


class ProfileMismatchError(AuthenticationError):
    """Refresh 결과 프로필 id 가 요청한 계정과 다름.

    Attributes:
        expected: 요청한 external_id
        actual: 새로 받은 profile id
    """

    def __init__(self, message: str, expected: str, actual: str):
        self.expected = expected
        self.actual = actual
        super().__init__(message, provider="minecraft")
