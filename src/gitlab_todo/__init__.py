"""Terminal dashboard of the GitLab merge requests that need your attention."""

import asyncio
import logging
import os

import click
from dotenv import load_dotenv
from pydantic import ValidationError

from .config import GitLabConfig
from .exceptions import GitLabError


@click.command()
@click.argument("username")
@click.option("--gitlab-url", envvar="GITLAB_URL", help="GitLab instance URL")
@click.option("--gitlab-token", envvar="GITLAB_TOKEN", help="GitLab personal access token")
@click.option(
    "--interval",
    envvar="GITLAB_TODO_INTERVAL",
    type=click.IntRange(min=1),
    default=30,
    show_default=True,
    help="Seconds between refreshes",
)
@click.option("--once", is_flag=True, help="Render the table once and exit")
@click.option("--fail-fast", is_flag=True, help="Exit on the first failed refresh")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
def main(
    username: str,
    gitlab_url: str | None,
    gitlab_token: str | None,
    interval: int,
    once: bool,
    fail_fast: bool,
    verbose: bool,
) -> None:
    """Show open merge requests relevant to USERNAME, most actionable first."""
    load_dotenv()
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if gitlab_url:
        os.environ["GITLAB_URL"] = gitlab_url
    if gitlab_token:
        os.environ["GITLAB_TOKEN"] = gitlab_token

    from .dashboard import watch

    config = GitLabConfig.from_env()
    config.interval = interval
    try:
        config.validate()
    except ValueError as e:
        raise click.ClickException(str(e)) from e

    try:
        asyncio.run(watch(config, username, once=once, fail_fast=fail_fast))
    except (GitLabError, ValidationError) as e:
        raise click.ClickException(str(e)) from e
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
