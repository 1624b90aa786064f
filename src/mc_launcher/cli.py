"""mc-launcher-auth 명령줄 도구.

데스크톱 UI 와 같은 방식으로 AuthService 를 호출:
로그인은 코드 표시 후 interval 마다 poll_auth 반복.
"""

import argparse
import asyncio
import logging
import sys
import webbrowser

from rich.console import Console
from rich.logging import RichHandler

from mc_launcher.auth.exceptions import AuthenticationError, NetworkError
from mc_launcher.auth.flows.device_code import display_instructions
from mc_launcher.auth.models import AuthPollResult, AuthStatus, DeviceCodeSession
from mc_launcher.auth.service import AuthService

logger = logging.getLogger(__name__)
console = Console(stderr=True)


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
    )


async def wait_for_login(service: AuthService, session: DeviceCodeSession) -> AuthPollResult:
    """터미널 상태가 될 때까지 interval 마다 폴링.

    네트워크 실패는 경고 후 다음 interval 에 재시도.
    """
    loop = asyncio.get_running_loop()
    deadline = loop.time() + session.expires_in

    while True:
        await asyncio.sleep(session.interval)
        try:
            result = await service.poll_auth()
        except NetworkError as e:
            logger.warning("Poll failed, retrying: %s", e)
        else:
            if result.is_terminal:
                return result

        if loop.time() >= deadline:
            return AuthPollResult(status=AuthStatus.EXPIRED, error="Device code expired")


async def _login(service: AuthService, open_browser: bool) -> int:
    session = await service.start_auth()
    display_instructions(session)
    if open_browser:
        webbrowser.open(session.verification_uri)
        console.print("[dim]브라우저가 열렸습니다. 로그인 후 대기 중...[/dim]")

    with console.status("인증 대기 중..."):
        result = await wait_for_login(service, session)

    if result.status is not AuthStatus.COMPLETE:
        console.print(f"[bold red][FAIL][/bold red] {result.error}")
        return 1

    account = result.account
    console.print(
        f"[bold green][OK] 인증 성공![/bold green] {account.display_name} ({account.external_id})"
    )
    return 0


async def _refresh(service: AuthService, external_id: str) -> int:
    account = await service.refresh_auth(external_id)
    console.print(f"[bold green][OK][/bold green] Refreshed {account.display_name} ({account.external_id})")
    return 0


async def _token(service: AuthService, external_id: str) -> int:
    # stdout 에는 토큰만 출력 (파이프 용)
    print(await service.get_session_token(external_id))
    return 0


async def _logout(service: AuthService, external_id: str) -> int:
    await service.remove_account(external_id)
    console.print(f"[bold green][OK][/bold green] Removed credentials for {external_id}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mc-launcher-auth",
        description="Microsoft account sign-in for the Minecraft launcher",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p_login = sub.add_parser("login", help="Sign in with a device code")
    p_login.add_argument("--no-browser", action="store_true", help="Do not open the verification URL")

    for name, help_text in (
        ("refresh", "Refresh stored tokens for an account"),
        ("token", "Print the stored game access token"),
        ("logout", "Delete stored tokens for an account"),
    ):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("external_id", help="Minecraft profile id")

    return parser


async def run(args: argparse.Namespace, service: AuthService | None = None) -> int:
    service = service or AuthService()
    if args.command == "login":
        return await _login(service, open_browser=not args.no_browser)
    if args.command == "refresh":
        return await _refresh(service, args.external_id)
    if args.command == "token":
        return await _token(service, args.external_id)
    return await _logout(service, args.external_id)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)
    try:
        return asyncio.run(run(args))
    except AuthenticationError as e:
        console.print(f"[bold red][FAIL][/bold red] {e}")
        return 1
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    sys.exit(main())
