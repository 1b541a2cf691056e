#!/usr/bin/env python3
"""brew_bump CLI entry point."""

from __future__ import annotations

import asyncio
import sys
from dataclasses import dataclass
from types import SimpleNamespace
from typing import List, Optional, Sequence

import click
import typer

from .args import BumpArgs
from .auth import clear_stored_token, persist_token, resolve_token
from .config import (
    BumpConfig,
    build_bump_config,
    load_config,
    resolve_config_path,
    write_default_config,
)
from .console import configure_console, log, log_debug, log_error
from .constants import (
    EXIT_CODE_FAILURE,
    EXIT_CODE_INTERRUPT,
    EXIT_CODE_USAGE,
    PACKAGE_NAME,
    TOKEN_ENV_VAR,
)
from .context import AppContext
from .errors import CLIError, InvalidInputError
from .github import GitHubClient
from .hashing import ContentHasher
from .orchestrator import Orchestrator
from .publish import PublishResult
from .utils import mask_token, redact
from .version import cli_version

app = typer.Typer(help="Update Homebrew formulae and casks from GitHub releases")
auth_app = typer.Typer(help="GitHub token management")
config_app = typer.Typer(help="Configuration file helpers")
app.add_typer(auth_app, name="auth")
app.add_typer(config_app, name="config")


@dataclass
class CLIContext:
    app_context: AppContext


def exit_code_for(exc: CLIError) -> int:
    if isinstance(exc, InvalidInputError):
        return EXIT_CODE_USAGE
    return EXIT_CODE_FAILURE


async def run_bump(config: BumpConfig, context: AppContext) -> Optional[PublishResult]:
    async with context.new_http_client() as http_client:
        client = GitHubClient(http_client, config.token, base_url=config.api_url)
        hasher = ContentHasher(client_factory=context.http_client_factory)
        return await Orchestrator(config, client, hasher).run()


def handle_bump(args: BumpArgs, context: AppContext) -> int:
    if args.verbose:
        configure_console(verbose=True)
    config_file = load_config(context.config_path, context.environ)
    token = resolve_token(args.token, context.environ)
    log_debug(f"token source: {token.source}")
    config = build_bump_config(args, config_file, context.environ, token=token.token)

    result = asyncio.run(run_bump(config, context))
    if result is not None:
        log(result.describe())
    return 0


def handle_auth_login(args: SimpleNamespace) -> int:
    token = (getattr(args, "token", None) or "").strip()
    if getattr(args, "stdin", False):
        token = sys.stdin.read().strip()
    if not token:
        token = typer.prompt("GitHub token", hide_input=True).strip()
    persist_token(token)
    return 0


def handle_auth_logout(_: SimpleNamespace) -> int:
    if clear_stored_token():
        log("removed stored GitHub token from system keyring")
    else:
        log("no stored GitHub token found")
    return 0


def handle_auth_status(args: SimpleNamespace) -> int:
    context: AppContext = args.context
    resolved = resolve_token(None, context.environ)
    if not resolved.token:
        log(f"no GitHub token configured; run 'brew_bump auth login' or set {TOKEN_ENV_VAR}")
        return EXIT_CODE_FAILURE
    log(f"GitHub token {mask_token(resolved.token)} (source: {resolved.source})")
    return 0


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"{PACKAGE_NAME} {cli_version()}")
        raise typer.Exit()


def _app_context(ctx: typer.Context) -> AppContext:
    obj = ctx.obj
    if isinstance(obj, CLIContext):
        return obj.app_context
    if isinstance(obj, AppContext):
        return obj
    return AppContext()


@app.callback(invoke_without_command=True)
def cli_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="show the brew_bump version and exit",
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="suppress informational output"
    ),
) -> None:
    if quiet:
        configure_console(quiet=True)
    ctx.obj = CLIContext(app_context=_app_context(ctx))
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(code=EXIT_CODE_USAGE)


@app.command()
def bump(
    ctx: typer.Context,
    name: str = typer.Option(..., "--name", "-n", help="formula or cask name"),
    tap: Optional[str] = typer.Option(
        None, "--tap", "-t", help="tap repository as owner/repo[:branch]"
    ),
    branch: Optional[str] = typer.Option(
        None, "--branch", "-b", help="tap branch to update (default: repository default)"
    ),
    package_type: Optional[str] = typer.Option(
        None, "--type", help="package type: formula (default) or cask"
    ),
    version: Optional[str] = typer.Option(
        None, "--version", help="new version (derived from --asset when omitted)"
    ),
    sha256: Optional[str] = typer.Option(None, "--sha256", help="explicit checksum"),
    url: Optional[str] = typer.Option(
        None, "--url", help="download URL template; {{version}} is substituted"
    ),
    asset: List[str] = typer.Option(
        [],
        "--asset",
        "-a",
        help="regex matching one release asset (repeatable; the first one yields the version)",
    ),
    release_repo: Optional[str] = typer.Option(
        None, "--release-repo", help="owner/name of the release repository"
    ),
    release_tag: Optional[str] = typer.Option(
        None, "--release-tag", help="release tag to read assets from"
    ),
    message: Optional[str] = typer.Option(
        None,
        "--message",
        "-m",
        help="commit message template ({{name}}, {{file}}, {{type}}, {{version}})",
    ),
    pull_request: Optional[bool] = typer.Option(
        None,
        "--pull-request/--no-pull-request",
        help="always publish through a pull request",
    ),
    fork_owner: Optional[str] = typer.Option(
        None, "--fork-owner", help="organization to fork into when push access is missing"
    ),
    token: Optional[str] = typer.Option(
        None, "--token", help=f"GitHub token (or set {TOKEN_ENV_VAR})"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="enable debug output"),
) -> None:
    args = BumpArgs(
        name=name,
        tap=tap,
        branch=branch,
        package_type=package_type,
        version=version,
        sha256=sha256,
        url=url,
        assets=list(asset),
        release_repo=release_repo,
        release_tag=release_tag,
        message=message,
        pull_request=pull_request,
        fork_owner=fork_owner,
        token=token,
        verbose=verbose,
    )
    try:
        rc = handle_bump(args, _app_context(ctx))
    except CLIError as exc:
        log_error(f"error: {redact(str(exc))}")
        raise typer.Exit(code=exit_code_for(exc)) from exc
    raise typer.Exit(code=rc)


@auth_app.command("login")
def auth_login(
    token: Optional[str] = typer.Option(
        None, "--token", help="GitHub token to store (prompted when omitted)"
    ),
    stdin: bool = typer.Option(False, "--stdin", help="read the token from standard input"),
) -> None:
    args = SimpleNamespace(token=token, stdin=stdin)
    try:
        rc = handle_auth_login(args)
    except CLIError as exc:
        log_error(f"error: {redact(str(exc))}")
        raise typer.Exit(code=exit_code_for(exc)) from exc
    raise typer.Exit(code=rc)


@auth_app.command("logout")
def auth_logout() -> None:
    rc = handle_auth_logout(SimpleNamespace())
    raise typer.Exit(code=rc)


@auth_app.command("status")
def auth_status(ctx: typer.Context) -> None:
    rc = handle_auth_status(SimpleNamespace(context=_app_context(ctx)))
    raise typer.Exit(code=rc)


@config_app.command("path")
def config_path(ctx: typer.Context) -> None:
    context = _app_context(ctx)
    typer.echo(str(context.config_path or resolve_config_path(context.environ)))


@config_app.command("init")
def config_init(
    ctx: typer.Context,
    force: bool = typer.Option(False, "--force", help="overwrite an existing file"),
) -> None:
    try:
        context = _app_context(ctx)
        path = write_default_config(context.config_path, force=force, environ=context.environ)
    except CLIError as exc:
        log_error(f"error: {redact(str(exc))}")
        raise typer.Exit(code=exit_code_for(exc)) from exc
    log(f"wrote {path}")


def main(argv: Optional[Sequence[str]] = None) -> int:
    command = typer.main.get_command(app)
    try:
        rc = command.main(
            args=list(argv) if argv is not None else None,
            prog_name=PACKAGE_NAME,
            standalone_mode=False,
        )
    except (KeyboardInterrupt, typer.Abort):
        log_error("interrupted")
        return EXIT_CODE_INTERRUPT
    except click.ClickException as exc:
        exc.show()
        return EXIT_CODE_USAGE
    except SystemExit as exc:
        return int(exc.code or 0)
    return int(rc or 0)


if __name__ == "__main__":
    sys.exit(main())
