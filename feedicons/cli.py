"""Entrypoint for the command line interface."""

from typing import Optional

import typer

from feedicons.config_logging import configure_logging
from feedicons.exceptions import FeedDiscoveryError
from feedicons.favicon import FaviconFetcher
from feedicons.feeds.discovery import FeedLinkDiscoverer
from feedicons.utils.urls import extract_unique_domains

cli = typer.Typer(no_args_is_help=True, add_completion=False)

urls_argument = typer.Argument(..., help="Feed URLs whose domains need a favicon")

page_url_argument = typer.Argument(..., help="Page to look for RSS or Atom feed links")

workers_option = typer.Option(
    None,
    "--workers",
    min=1,
    help="Number of concurrent workers, defaults to the configured value",
)


@cli.command()
def fetch_favicons(urls: list[str] = urls_argument, workers: Optional[int] = workers_option):
    """Resolve the favicons of the domains of the given feed URLs."""
    fetcher = FaviconFetcher(max_workers=workers)
    fetcher.fetch_favicons_for_domains(urls)

    for domain in extract_unique_domains(urls):
        data_url = fetcher.get_favicon_data_url(domain)
        typer.echo(f"{domain}\t{data_url or '-'}")


@cli.command()
def discover_feeds(page_url: str = page_url_argument):
    """List the feeds advertised by a web page."""
    try:
        feeds = FeedLinkDiscoverer().discover_feed_links(page_url)
    except FeedDiscoveryError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=1)

    if not feeds:
        typer.echo("No RSS/Atom feeds found")
    for feed in feeds:
        typer.echo(feed)


@cli.callback()
def setup():
    """CLI Entrypoint"""
    configure_logging()


if __name__ == "__main__":
    cli()
