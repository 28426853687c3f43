"""Click CLI interface for release actions."""

import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console

from release_actions import __version__
from release_actions.config import ConfigError, ConfigManager
from release_actions.integrations import actions
from release_actions.integrations.git import GitError
from release_actions.utils.logger import enable_verbose_logging, get_logger
from release_actions.utils.shell import ShellError
from release_actions.workflows.dependabot import DependabotError, generate_dependabot
from release_actions.workflows.merge_forward import MergeForwardError, merge_forward

logger = get_logger(__name__)
console = Console()

HANDLED_ERRORS = (ConfigError, MergeForwardError, DependabotError, GitError, ShellError)


def fail(message: str) -> None:
    """Report a failure to the runner and exit non-zero."""
    actions.set_failed(message)
    console.print(f"[red]Error:[/red] {message}")
    sys.exit(1)


@click.group(invoke_without_command=True)
@click.option("--version", is_flag=True, help="Show version and exit")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.option(
    "--config", "-c", "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="YAML file with 'merge_forward' and 'dependabot' sections",
)
@click.pass_context
def cli(ctx: click.Context, version: bool, verbose: bool, config_path: Optional[Path]) -> None:
    """Release Actions - CI automation for release branches.

    Merges bot-authored commits forward across release branches and generates
    per-branch Dependabot configuration.
    """
    if version:
        click.echo(f"release-actions version {__version__}")
        sys.exit(0)

    if verbose:
        enable_verbose_logging()

    ctx.obj = ConfigManager(config_path)

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cli.command("merge-forward")
@click.option("--from-author", help="Author whose commits may be merged forward")
@click.option("--branches", help="Comma-separated branches in merge-forward order")
@click.option("--merge-strategy", help="Strategy passed to 'git merge -s'")
@click.option("--dry-run/--no-dry-run", default=None, help="Merge locally without pushing")
@click.option(
    "--use-author-email/--use-author-name", default=None,
    help="Attribute commits by author email instead of name",
)
@click.option("--remote", help="Remote to fetch from and push to (default: origin)")
@click.option("--ref", help="Ref of the current checkout (default: $GITHUB_REF)")
@click.pass_obj
def merge_forward_command(
    manager: ConfigManager,
    from_author: Optional[str],
    branches: Optional[str],
    merge_strategy: Optional[str],
    dry_run: Optional[bool],
    use_author_email: Optional[bool],
    remote: Optional[str],
    ref: Optional[str],
) -> None:
    """Merge bot-authored commits forward across release branches."""
    try:
        config = manager.merge_forward_config({
            "from_author": from_author,
            "branches": branches,
            "merge_strategy": merge_strategy,
            "dry_run": dry_run,
            "use_author_email": use_author_email,
            "remote": remote,
            "ref": ref,
        })
        result = merge_forward(config)
    except HANDLED_ERRORS as e:
        fail(str(e))
        return
    except Exception as e:
        logger.debug("Unexpected error", exc_info=True)
        fail(str(e))
        return

    if not result.pending_pushes:
        console.print("[yellow]No branches merged[/yellow]")
    elif result.pushed:
        console.print(f"[green]✓[/green] Pushed {', '.join(result.pending_pushes)}")
    else:
        console.print(f"[cyan]Dry run:[/cyan] would push {', '.join(result.pending_pushes)}")


@cli.command("generate-dependabot")
@click.option("--gradle-branches", help="Comma-separated target branches for gradle updates")
@click.option(
    "--github-actions-branches",
    help="Comma-separated target branches for github-actions updates",
)
@click.option(
    "--template-file", type=click.Path(dir_okay=False, path_type=Path),
    help="Dependabot template",
)
@click.option(
    "--output-file", type=click.Path(dir_okay=False, path_type=Path),
    help="Output path (default: .github/dependabot.yml)",
)
@click.pass_obj
def generate_dependabot_command(
    manager: ConfigManager,
    gradle_branches: Optional[str],
    github_actions_branches: Optional[str],
    template_file: Optional[Path],
    output_file: Optional[Path],
) -> None:
    """Generate per-branch Dependabot configuration from a template."""
    try:
        config = manager.dependabot_config({
            "gradle_branches": gradle_branches,
            "github_actions_branches": github_actions_branches,
            "template_file": template_file,
            "output_file": output_file,
        })
        document = generate_dependabot(config)
    except HANDLED_ERRORS as e:
        fail(str(e))
        return
    except Exception as e:
        logger.debug("Unexpected error", exc_info=True)
        fail(str(e))
        return

    console.print(
        f"[green]✓[/green] Wrote {len(document['updates'])} updates to {config.output_file}"
    )


if __name__ == "__main__":
    cli()
