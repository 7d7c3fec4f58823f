"""Command-line entry point for codeswitch."""

import sys

import click
import structlog

from codeswitch import __version__
from codeswitch.config.logging import configure_logging
from codeswitch.config.settings import Settings
from codeswitch.core.exceptions import CodeswitchError, InvalidIndexError
from codeswitch.core.models.query import AmbiguousMatch, NoMatch, Query, UniqueMatch
from codeswitch.services.switching import SwitchService

logger = structlog.get_logger(__name__)

LIST_NAMES = "_"


def _error(message: str) -> None:
    click.echo(f"{click.style('error:', fg='red', bold=True)} {message}", err=True)


def _print_candidates(paths: list[str]) -> None:
    for i, path in enumerate(paths, 1):
        click.echo(f"  {i:2}  {path}")


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(__version__, prog_name="codeswitch")
@click.argument("root", type=click.Path(file_okay=False))
@click.argument("name")
@click.argument("filter_arg", metavar="FILTER", required=False)
@click.option("--rebuild", "-f", is_flag=True, help="Force rebuild of the cache")
@click.option("--cache-dir", type=click.Path(file_okay=False), help="Cache directory")
@click.option("--config", "config_path", type=click.Path(dir_okay=False), help="User config file")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
def cli(
    root: str,
    name: str,
    filter_arg: str | None,
    rebuild: bool,
    cache_dir: str | None,
    config_path: str | None,
    verbose: bool,
) -> None:
    """Print the path of the repository called NAME under ROOT.

    FILTER is either a substring of the wanted path or the number of an entry
    from a previous ambiguous listing. NAME '_' lists every repository name,
    for shell completion.
    """
    overrides: dict[str, str] = {}
    if cache_dir:
        overrides["cache_dir"] = cache_dir
    if config_path:
        overrides["config_path"] = config_path
    settings = Settings(**overrides)

    configure_logging(
        log_level="DEBUG" if verbose else settings.log_level,
        json_logs=settings.json_logs,
    )
    service = SwitchService(settings)

    try:
        if name == LIST_NAMES:
            for repo_name in service.list_names(root, rebuild=rebuild):
                click.echo(repo_name)
            return

        outcome = service.resolve_cli(root, Query.from_args(name, filter_arg), rebuild=rebuild)
    except InvalidIndexError as e:
        _print_candidates(e.candidates)
        _error(e.message)
        sys.exit(1)
    except CodeswitchError as e:
        logger.debug("Lookup failed", error=e.message, details=e.details)
        _error(e.message)
        sys.exit(1)

    if isinstance(outcome, UniqueMatch):
        click.echo(outcome.path)
    elif isinstance(outcome, NoMatch):
        _error("no matches found")
        sys.exit(1)
    elif isinstance(outcome, AmbiguousMatch):
        _print_candidates(outcome.paths)
        _error("multiple matches found")
        sys.exit(1)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
