"""Xbox Live → XSTS → Minecraft 토큰 교환.

Microsoft access token 을 Minecraft 게임 세션 토큰으로 바꾸는 4단계.
각 함수는 상태 없는 요청/응답 변환이며 재시도하지 않음.
"""

import httpx

from mc_launcher.auth.config import (
    IDENTITY_TOKEN_SCHEME,
    MINECRAFT_RELYING_PARTY,
    XBOX_RELYING_PARTY,
    XBOX_SITE_NAME,
    XSTS_SANDBOX_ID,
    AuthConfig,
)
from mc_launcher.auth.exceptions import MissingClaimError, ProtocolError
from mc_launcher.auth.flows._http import (
    JSON_HEADERS,
    ensure_success,
    expires_in_field,
    parse_json,
    require_field,
    send,
)
from mc_launcher.auth.models import (
    ConsoleIdentityToken,
    GameServiceSession,
    Profile,
    RelyingPartyToken,
)

HOP_XBOX_LIVE = "Xbox Live auth"
HOP_XSTS = "XSTS auth"
HOP_MINECRAFT_LOGIN = "Minecraft auth"
HOP_MINECRAFT_PROFILE = "Minecraft profile fetch"


def console_identity_request(access_token: str) -> dict:
    return {
        "Properties": {
            "AuthMethod": "RPS",
            "SiteName": XBOX_SITE_NAME,
            "RpsTicket": f"d={access_token}",
        },
        "RelyingParty": XBOX_RELYING_PARTY,
        "TokenType": "JWT",
    }


def relying_party_request(console_token: str) -> dict:
    return {
        "Properties": {
            "SandboxId": XSTS_SANDBOX_ID,
            "UserTokens": [console_token],
        },
        "RelyingParty": MINECRAFT_RELYING_PARTY,
        "TokenType": "JWT",
    }


def identity_token(user_hash: str, relying_party_token: str) -> str:
    """Minecraft login 용 identityToken 문자열."""
    return f"{IDENTITY_TOKEN_SCHEME} x={user_hash};{relying_party_token}"


async def _post_xbox(client: httpx.AsyncClient, hop: str, url: str, body: dict) -> tuple[dict, int]:
    response = await send(client, hop, "POST", url, provider="xbox", json=body, headers=JSON_HEADERS)
    ensure_success(response, hop, "xbox")
    return parse_json(response, hop, "xbox"), response.status_code


async def authenticate_console_identity(
    client: httpx.AsyncClient,
    config: AuthConfig,
    access_token: str,
) -> ConsoleIdentityToken:
    """Microsoft access token → Xbox Live user token.

    user_hash 는 DisplayClaims.xui 첫 항목의 uhs.

    Raises:
        NetworkError, ProtocolError: 요청 실패 시
        MissingClaimError: xui 목록이 비어 있거나 uhs 가 없을 때
    """
    data, status = await _post_xbox(
        client, HOP_XBOX_LIVE, config.xbox_user_auth_url, console_identity_request(access_token)
    )
    token = require_field(data, "Token", HOP_XBOX_LIVE, "xbox", status)
    try:
        xui = data["DisplayClaims"]["xui"]
    except (KeyError, TypeError) as e:
        raise ProtocolError(
            f"{HOP_XBOX_LIVE} response parse failed: missing DisplayClaims.xui",
            hop=HOP_XBOX_LIVE,
            status_code=status,
            provider="xbox",
        ) from e

    if not xui or not isinstance(xui[0], dict) or not xui[0].get("uhs"):
        raise MissingClaimError("No Xbox user hash in response", claim="uhs", provider="xbox")

    return ConsoleIdentityToken(token=token, user_hash=xui[0]["uhs"])


async def authorize_relying_party(
    client: httpx.AsyncClient,
    config: AuthConfig,
    console_token: str,
) -> RelyingPartyToken:
    """Xbox Live user token → XSTS token (Minecraft relying party)."""
    data, status = await _post_xbox(
        client, HOP_XSTS, config.xsts_authorize_url, relying_party_request(console_token)
    )
    return RelyingPartyToken(token=require_field(data, "Token", HOP_XSTS, "xbox", status))


async def login_game_service(
    client: httpx.AsyncClient,
    config: AuthConfig,
    user_hash: str,
    relying_party_token: str,
) -> GameServiceSession:
    """XSTS token → Minecraft access token."""
    response = await send(
        client,
        HOP_MINECRAFT_LOGIN,
        "POST",
        config.minecraft_login_url,
        provider="minecraft",
        json={"identityToken": identity_token(user_hash, relying_party_token)},
        headers=JSON_HEADERS,
    )
    ensure_success(response, HOP_MINECRAFT_LOGIN, "minecraft")
    data = parse_json(response, HOP_MINECRAFT_LOGIN, "minecraft")
    access_token = require_field(data, "access_token", HOP_MINECRAFT_LOGIN, "minecraft", response.status_code)
    expires_in = expires_in_field(data, 86400, HOP_MINECRAFT_LOGIN, "minecraft", response.status_code)
    return GameServiceSession(access_token=access_token, expires_in=expires_in)


async def fetch_profile(
    client: httpx.AsyncClient,
    config: AuthConfig,
    game_access_token: str,
) -> Profile:
    """Minecraft access token 으로 프로필 조회."""
    response = await send(
        client,
        HOP_MINECRAFT_PROFILE,
        "GET",
        config.minecraft_profile_url,
        provider="minecraft",
        headers={"Authorization": f"Bearer {game_access_token}"},
    )
    ensure_success(response, HOP_MINECRAFT_PROFILE, "minecraft")
    data = parse_json(response, HOP_MINECRAFT_PROFILE, "minecraft")
    try:
        return Profile.from_response(data)
    except KeyError as e:
        raise ProtocolError(
            f"{HOP_MINECRAFT_PROFILE} response parse failed: missing field {e}",
            hop=HOP_MINECRAFT_PROFILE,
            status_code=response.status_code,
            provider="minecraft",
        ) from e
