"""CLI interface for vimstat."""

import logging
import sys
from dataclasses import dataclass

import click
from rich.console import Console
from rich.markup import escape

from vimstat import __version__
from vimstat.config import init_config, load_config
from vimstat.fetcher import PageFetcher, build_fetcher
from vimstat.formatters import OutputFormat, get_formatter
from vimstat.pipeline import StatError, process_lines

logger = logging.getLogger(__name__)

err_console = Console(stderr=True, highlight=False, emoji=False)


@dataclass
class RunSettings:
    """Settings resolved before argument parsing."""

    fetcher: PageFetcher
    scrape_title: bool = True


class VimstatCommand(click.Command):
    """Command that verifies the page fetcher before parsing arguments.

    The check runs ahead of every option, including --help, so a missing
    external tool is always reported first.
    """

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        if ctx.obj is None:
            try:
                config = load_config()
            except ValueError as e:
                raise click.ClickException(str(e))
            ctx.obj = RunSettings(
                fetcher=build_fetcher(config),
                scrape_title=config['scrape_title'],
            )

        missing = ctx.obj.fetcher.missing_tool()
        if missing:
            raise click.ClickException(missing)

        return super().parse_args(ctx, args)


def report_error(error: StatError) -> None:
    """Print a one-line diagnostic for a failed input line."""
    err_console.print(f"[red]✗[/] {escape(str(error))}", soft_wrap=True)


def emit_record(text: str) -> None:
    click.echo(text, nl=False)


@click.command(cls=VimstatCommand, options_metavar='[OPTIONS] < URL-FILE')
@click.option(
    '--html',
    is_flag=True,
    help='Output each record as an HTML <table> row',
)
@click.option(
    '--init-config',
    'write_config',
    is_flag=True,
    help='Write an example ~/.vimstat.yml and exit',
)
@click.option(
    '-v', '--verbose',
    is_flag=True,
    help='Verbose output',
)
@click.version_option(version=__version__)
@click.pass_obj
def main(
    settings: RunSettings,
    html: bool,
    write_config: bool,
    verbose: bool,
) -> None:
    """Print view, like and comment counts of Vimeo videos.

    Reads one URL per line from standard input. Blank lines and lines
    starting with # are ignored. URLs must look like http://vimeo.com/NNNNNNNN.

    Example:

        vimstat --html < urls.txt
    """
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format='%(levelname)s %(name)s: %(message)s',
        )

    if write_config:
        try:
            path = init_config()
        except FileExistsError as e:
            raise click.ClickException(str(e))
        err_console.print(f"[green]✓[/] Wrote {escape(str(path))}")
        return

    output_format = OutputFormat.HTML if html else OutputFormat.TEXT
    summary = process_lines(
        sys.stdin,
        settings.fetcher,
        get_formatter(output_format),
        scrape_title=settings.scrape_title,
        emit=emit_record,
        report=report_error,
    )

    logger.info(
        "%d processed, %d failed, %d skipped",
        summary.processed, summary.failed, summary.skipped,
    )


if __name__ == '__main__':
    main()
