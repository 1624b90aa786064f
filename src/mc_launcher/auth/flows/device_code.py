"""Device Code OAuth Flow (RFC 8628)

Microsoft identity platform 의 Device Authorization Grant 요청 함수.
폴링 타이밍은 호출자가 결정하므로 여기서는 요청 한 번 = 함수 한 번.

플로우:
1. 앱이 device_code, user_code 요청
2. 사용자에게 verification_uri + user_code 표시
3. 사용자가 브라우저에서 URL 접속 → 코드 입력 → 로그인
4. 앱이 interval 마다 토큰 엔드포인트 폴링
5. 인증 완료 시 access_token + refresh_token 수신
"""

from dataclasses import dataclass

import httpx
from rich.console import Console
from rich.panel import Panel

from mc_launcher.auth.config import DEVICE_CODE_GRANT_TYPE, REFRESH_GRANT_TYPE, AuthConfig
from mc_launcher.auth.exceptions import MissingClaimError, ProtocolError
from mc_launcher.auth.flows._http import (
    FORM_HEADERS,
    ensure_success,
    expires_in_field,
    parse_json,
    require_field,
    send,
)
from mc_launcher.auth.models import BearerTokenPair, DeviceCodeSession

PROVIDER = "microsoft"

HOP_DEVICE_CODE = "device code"
HOP_TOKEN_POLL = "token poll"
HOP_REFRESH = "refresh token"

# 폴링 에러 코드 (RFC 8628)
ERROR_AUTHORIZATION_PENDING = "authorization_pending"
ERROR_EXPIRED_TOKEN = "expired_token"
ERROR_UNKNOWN = "unknown"

console = Console()


@dataclass
class TokenPollResult:
    """토큰 폴링 한 번의 결과.

    성공하면 tokens, HTTP 400 이면 provider 의 error 코드.
    """

    tokens: BearerTokenPair | None = None
    error_code: str | None = None


def _token_pair(
    data: dict,
    hop: str,
    status_code: int,
    fallback_refresh_token: str | None = None,
) -> BearerTokenPair:
    access_token = require_field(data, "access_token", hop, PROVIDER, status_code)
    refresh_token = data.get("refresh_token")
    if not isinstance(refresh_token, str) or not refresh_token:
        refresh_token = fallback_refresh_token
    if not refresh_token:
        raise MissingClaimError(
            f"{hop} response has no refresh_token", claim="refresh_token", provider=PROVIDER
        )
    return BearerTokenPair(
        access_token=access_token,
        refresh_token=refresh_token,
        expires_in=expires_in_field(data, 3600, hop, PROVIDER, status_code),
    )


async def request_device_code(client: httpx.AsyncClient, config: AuthConfig) -> DeviceCodeSession:
    """Device Code 요청.

    Returns:
        DeviceCodeSession: device_code, user_code, verification_uri 등

    Raises:
        NetworkError: 요청 전송 실패 시
        ProtocolError: non-2xx 또는 파싱 실패 시
    """
    response = await send(
        client,
        HOP_DEVICE_CODE,
        "POST",
        config.device_code_url,
        provider=PROVIDER,
        data={"client_id": config.client_id, "scope": config.scope},
        headers=FORM_HEADERS,
    )
    ensure_success(response, HOP_DEVICE_CODE, PROVIDER)
    data = parse_json(response, HOP_DEVICE_CODE, PROVIDER)
    try:
        return DeviceCodeSession.from_response(data)
    except (KeyError, TypeError, ValueError) as e:
        raise ProtocolError(
            f"{HOP_DEVICE_CODE} response parse failed: {e!r}",
            hop=HOP_DEVICE_CODE,
            status_code=response.status_code,
            provider=PROVIDER,
        ) from e


async def poll_device_token(
    client: httpx.AsyncClient,
    config: AuthConfig,
    device_code: str,
) -> TokenPollResult:
    """토큰 엔드포인트 1회 폴링.

    Args:
        client: AsyncClient
        config: 인증 설정
        device_code: request_device_code 에서 받은 device_code

    Returns:
        TokenPollResult: 성공 시 tokens, HTTP 400 이면 error_code

    Raises:
        NetworkError: 요청 전송 실패 시
        ProtocolError: 400 이외의 실패 status 또는 파싱 실패 시
    """
    response = await send(
        client,
        HOP_TOKEN_POLL,
        "POST",
        config.token_url,
        provider=PROVIDER,
        data={
            "client_id": config.client_id,
            "grant_type": DEVICE_CODE_GRANT_TYPE,
            "device_code": device_code,
        },
        headers=FORM_HEADERS,
    )

    if response.status_code == httpx.codes.BAD_REQUEST:
        error_data = parse_json(response, HOP_TOKEN_POLL, PROVIDER)
        error_code = error_data.get("error") or ERROR_UNKNOWN
        return TokenPollResult(error_code=str(error_code))

    ensure_success(response, HOP_TOKEN_POLL, PROVIDER)
    data = parse_json(response, HOP_TOKEN_POLL, PROVIDER)
    return TokenPollResult(tokens=_token_pair(data, HOP_TOKEN_POLL, response.status_code))


async def redeem_refresh_token(
    client: httpx.AsyncClient,
    config: AuthConfig,
    refresh_token: str,
) -> BearerTokenPair:
    """Refresh token 으로 새 토큰 쌍 발급.

    응답에 refresh_token 이 없으면 기존 refresh_token 을 그대로 사용.

    Raises:
        NetworkError: 요청 전송 실패 시
        ProtocolError: non-2xx 또는 파싱 실패 시
    """
    response = await send(
        client,
        HOP_REFRESH,
        "POST",
        config.token_url,
        provider=PROVIDER,
        data={
            "client_id": config.client_id,
            "grant_type": REFRESH_GRANT_TYPE,
            "refresh_token": refresh_token,
            "scope": config.scope,
        },
        headers=FORM_HEADERS,
    )
    ensure_success(response, HOP_REFRESH, PROVIDER)
    data = parse_json(response, HOP_REFRESH, PROVIDER)
    return _token_pair(data, HOP_REFRESH, response.status_code, fallback_refresh_token=refresh_token)


def display_instructions(session: DeviceCodeSession) -> None:
    """사용자 안내 메시지 출력.

    Args:
        session: device code 세션
    """
    expires_min = session.expires_in // 60

    console.print()
    console.print(
        Panel.fit(
            f"[bold cyan]Microsoft 계정 로그인[/bold cyan]\n\n"
            f"다음 URL을 브라우저에서 열고 코드를 입력하세요:\n\n"
            f"[bold]URL:[/bold] [link={session.verification_uri}]{session.verification_uri}[/link]\n"
            f"[bold]코드:[/bold] [bold yellow]{session.user_code}[/bold yellow]\n\n"
            f"[dim]만료: {expires_min}분[/dim]",
            title="[AUTH] Device Code Login",
            border_style="cyan",
        )
    )
    console.print()
