import asyncio
from collections.abc import Callable
from functools import wraps
from logging import getLogger
from typing import Any

import typer
from rich.console import Console
from rich.markup import escape

from .conf.settings import Settings
from .exceptions import ConfigurationError
from .services.events import load_event
from .services.github.auth import GitHubClient
from .services.github.models import Repository
from .services.merge import MergeCoordinator
from .settings import settings

app = typer.Typer()
logger = getLogger(__name__)
console = Console()


def syncify(f: Callable[..., Any]) -> Callable[..., Any]:
    """This simple decorator converts an async function into a sync function,
    allowing it to work with Typer.
    """

    @wraps(f)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        return asyncio.run(f(*args, **kwargs))

    return wrapper


def _fail(message: str) -> typer.Exit:
    """Report a failed run as a workflow error annotation."""
    typer.echo(f"::error::{message}")
    return typer.Exit(1)


def _get_repository(config: Settings) -> Repository:
    repository = config.repository
    if repository is None:
        raise ConfigurationError("GITHUB_REPOSITORY is not set")
    return repository


@app.command(help=f"Display the current installed version of {settings.project_name}.")
def version() -> None:
    from . import __version__

    typer.echo(f"{settings.project_name} - {__version__}")


@app.command(help="Merge the pull requests made eligible by the triggering workflow event.")
@syncify
async def run(
    token: str | None = typer.Option(
        None,
        "--token",
        help="GitHub token (overrides the repo-token input)",
    ),
) -> None:
    """Merge the pull requests made eligible by the triggering workflow event."""
    event_name = settings.github_event_name
    logger.debug(event_name or "")

    try:
        # Client first: a missing token fails the run before anything else
        github_client = GitHubClient(settings, token_override=token).get_authenticated_client()
        repository = _get_repository(settings)
        event = load_event(event_name, settings.github_event_path)

        async with github_client:
            coordinator = MergeCoordinator(github_client, repository)
            await coordinator.handle(event)

    except Exception as e:
        logger.error(str(e))
        raise _fail(str(e))


@app.command(help="Show how a pull request would be merged, without merging it.")
@syncify
async def plan(
    number: int = typer.Argument(
        ...,
        help="Pull request number",
    ),
    token: str | None = typer.Option(
        None,
        "--token",
        help="GitHub token (overrides the repo-token input)",
    ),
) -> None:
    """Show how a pull request would be merged, without merging it."""
    try:
        github_client = GitHubClient(settings, token_override=token).get_authenticated_client()
        repository = _get_repository(settings)

        async with github_client:
            coordinator = MergeCoordinator(github_client, repository)
            pull_request, merge_plan = await coordinator.fetch_plan(number)

    except Exception as e:
        logger.exception("Unexpected error while planning merge")
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    if merge_plan is None:
        console.print(f"#{pull_request.number} is not mergeable (state: {pull_request.mergeable_state})")
        return

    console.print(f"[bold]Method:[/bold] {merge_plan.method.value}")
    console.print(f"[bold]Title:[/bold] {escape(merge_plan.title)}", highlight=False)
    console.print("[bold]Body:[/bold]")
    console.print(merge_plan.body, markup=False, highlight=False)


if __name__ == "__main__":
    app()
