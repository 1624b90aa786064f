"""체인 단계 공통 HTTP 처리.

httpx 예외와 응답 상태를 인증 예외로 변환.
"""

import logging

import httpx

from mc_launcher.auth.exceptions import NetworkError, ProtocolError

logger = logging.getLogger(__name__)

# 에러 메시지에 포함할 응답 본문 최대 길이
MAX_BODY_PREVIEW = 200

JSON_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}
FORM_HEADERS = {"Content-Type": "application/x-www-form-urlencoded"}


async def send(
    client: httpx.AsyncClient,
    hop: str,
    method: str,
    url: str,
    provider: str | None = None,
    **kwargs,
) -> httpx.Response:
    """요청 전송. transport 실패는 NetworkError.

    Args:
        client: 공유 AsyncClient
        hop: 단계 이름 (에러 메시지/로그용)
        method: HTTP 메서드
        url: 요청 URL
        provider: 엔드포인트 제공자 이름
        **kwargs: httpx.AsyncClient.request 에 그대로 전달

    Raises:
        NetworkError: 연결/타임아웃 등 transport 실패
    """
    logger.debug("%s: %s %s", hop, method, url)
    try:
        response = await client.request(method, url, **kwargs)
    except httpx.TransportError as e:
        raise NetworkError(f"{hop} request failed: {e}", hop=hop, provider=provider) from e
    logger.debug("%s: HTTP %d", hop, response.status_code)
    return response


def body_preview(response: httpx.Response) -> str:
    text = response.text
    if len(text) > MAX_BODY_PREVIEW:
        return text[:MAX_BODY_PREVIEW] + "..."
    return text


def ensure_success(response: httpx.Response, hop: str, provider: str | None = None) -> None:
    """2xx 가 아니면 ProtocolError."""
    if not response.is_success:
        raise ProtocolError(
            f"{hop} returned HTTP {response.status_code}: {body_preview(response)}",
            hop=hop,
            status_code=response.status_code,
            provider=provider,
        )


def parse_json(response: httpx.Response, hop: str, provider: str | None = None) -> dict:
    """JSON 객체 본문 파싱. 실패하면 ProtocolError."""
    try:
        data = response.json()
    except ValueError as e:
        raise ProtocolError(
            f"{hop} response parse failed: {e}",
            hop=hop,
            status_code=response.status_code,
            provider=provider,
        ) from e
    if not isinstance(data, dict):
        raise ProtocolError(
            f"{hop} response parse failed: expected JSON object",
            hop=hop,
            status_code=response.status_code,
            provider=provider,
        )
    return data


def require_field(data: dict, field: str, hop: str, provider: str | None = None, status_code: int | None = None) -> str:
    """필수 문자열 필드 추출. 없거나 빈 값이면 ProtocolError."""
    value = data.get(field)
    if not isinstance(value, str) or not value:
        raise ProtocolError(
            f"{hop} response parse failed: missing field '{field}'",
            hop=hop,
            status_code=status_code,
            provider=provider,
        )
    return value


def expires_in_field(
    data: dict,
    default: int,
    hop: str,
    provider: str | None = None,
    status_code: int | None = None,
) -> int:
    """expires_in 초 값. 없으면 default, 숫자가 아니면 ProtocolError."""
    value = data.get("expires_in", default)
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ProtocolError(
            f"{hop} response parse failed: invalid expires_in {value!r}",
            hop=hop,
            status_code=status_code,
            provider=provider,
        ) from e
