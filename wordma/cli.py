"""Command-line interface for Wordma.

This module defines the CLI commands using Click framework.

Commands:
- version: Show version information.
- theme add/dev/build/update: Manage themes cloned from git.
- deploy init/delete: Manage the deploy directory.
- site create/list/open: Manage sites and open the last used one.
- article list: List articles.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Iterator
from pathlib import Path

import click
import questionary

from . import __description__, __version__
from .articles import get_all_articles
from .config import load_config, resolve_path
from .deploy import delete_deploy, init_deploy
from .errors import DeployError, DuplicateName, DuplicatePath, StoreUnavailable, ThemeError
from .navigation import CREATE_SITE, NavigationGuard, Route
from .settings import Settings
from .sites import SiteRegistry
from .store import Store
from .themes import add_theme, build_theme, dev_theme, theme_name_from_url, update_theme


@click.group()
@click.version_option(version=__version__, prog_name="wordma")
@click.option("--debug", is_flag=True, help="Enable debug logging")
def cli(debug: bool):
    """Wordma blog toolkit."""
    if debug:
        logging.basicConfig(
            level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s"
        )


@cli.command()
def version():
    """Show the current Wordma version."""
    click.echo(click.style("Wordma", fg="blue", bold=True))
    click.echo(click.style(f"Version: {__version__}", fg="green"))
    click.echo(f"Description: {__description__}")


# -- themes -----------------------------------------------------------------


@cli.group()
def theme():
    """Manage themes."""


@theme.command("add")
@click.argument("url")
def theme_add(url: str):
    """Clone a theme from a git URL into the themes folder."""
    with _reporting(ThemeError, "Adding theme failed"):
        name = theme_name_from_url(url)
        click.echo(f"Adding theme {name} from {url}")
        theme_dir = add_theme(Path.cwd(), url)
    if theme_dir is None:
        click.echo(click.style(f'Theme "{name}" already exists', fg="yellow"))
        return
    click.echo(click.style(f'Theme "{name}" added at {theme_dir}', fg="green"))


@theme.command("dev")
@click.argument("name")
def theme_dev(name: str):
    """Start the development mode of a theme."""
    click.echo(f'Starting development mode for theme "{name}"...')
    with _reporting(ThemeError, "Starting development mode failed"):
        dev_theme(Path.cwd(), name)


@theme.command("build")
@click.argument("name")
def theme_build(name: str):
    """Build a theme and collect its output in the deploy directory."""
    click.echo(f'Building theme "{name}"...')
    with _reporting(ThemeError, "Building theme failed"):
        target = build_theme(Path.cwd(), name)
    click.echo(click.style(f'Theme "{name}" built', fg="green"))
    if target is None:
        click.echo(click.style("No build output directory found", fg="yellow"))
    else:
        click.echo(f"Build output saved to {target}")


@theme.command("update")
@click.argument("name")
def theme_update(name: str):
    """Update a theme to its latest version."""
    click.echo(f'Updating theme "{name}"...')
    with _reporting(ThemeError, "Updating theme failed"):
        branch = update_theme(Path.cwd(), name)
    click.echo(click.style(f'Theme "{name}" updated from {branch}', fg="green"))


# -- deploy -----------------------------------------------------------------


@cli.group()
def deploy():
    """Manage the deploy directory."""


@deploy.command("init")
@click.argument("url")
@click.option("--yes", "-y", is_flag=True, help="Replace an existing deploy directory without asking")
def deploy_init(url: str, yes: bool):
    """Clone URL into the deploy directory, replacing an existing one."""
    confirm = (lambda message: True) if yes else _confirm
    with _reporting(DeployError, "Initializing deploy directory failed"):
        cloned = init_deploy(Path.cwd(), url, confirm)
    if not cloned:
        click.echo("Cancelled")
        return
    click.echo(click.style("Deploy repository cloned", fg="green"))
    click.echo("Next: build a theme with 'wordma theme build <name>'")


@deploy.command("delete")
@click.option("--yes", "-y", is_flag=True, help="Delete without asking")
def deploy_delete(yes: bool):
    """Delete the deploy directory and everything in it."""
    confirm = (lambda message: True) if yes else _confirm
    with _reporting(DeployError, "Deleting deploy directory failed"):
        deleted = delete_deploy(Path.cwd(), confirm)
    if not deleted:
        click.echo("Nothing deleted")
        return
    click.echo(click.style("Deploy directory deleted", fg="green"))
    click.echo("Initialize it again with 'wordma deploy init <git-repo-url>'")


# -- sites ------------------------------------------------------------------


@cli.group()
def site():
    """Manage sites."""


@site.command("create")
@click.argument("name", required=False)
@click.option("--description", "-d", help="Site description")
@click.option(
    "--path",
    "site_path",
    type=click.Path(file_okay=False),
    help="Directory holding the site's content",
)
def site_create(name: str | None, description: str | None, site_path: str | None):
    """Create a new site."""
    if name is None:
        name = _ask(
            questionary.text(
                "Site name:",
                validate=lambda x: len(x.strip()) > 0 or "Site name cannot be empty",
                style=_questionary_style(),
            )
        )
    name = name.strip()
    if not name:
        raise click.BadParameter("Site name cannot be empty", param_hint="NAME")
    path = str(Path(site_path).expanduser().resolve()) if site_path else None

    with _open_store() as store:
        registry = SiteRegistry(store)
        if asyncio.run(registry.check_site_name_exists(name)):
            raise click.ClickException(str(DuplicateName(name)))
        if path and asyncio.run(registry.check_site_path_exists(path)):
            raise click.ClickException(str(DuplicatePath(path)))

        if description is None:
            description = _ask(
                questionary.text("Description:", style=_questionary_style())
            )
        try:
            site_id = asyncio.run(registry.create_site(name, description, path))
        except (DuplicateName, DuplicatePath) as exc:
            raise click.ClickException(str(exc)) from None
    click.echo(click.style(f'Created site "{name}" (id {site_id})', fg="green"))


@site.command("list")
def site_list():
    """List sites, most recent first."""
    with _open_store() as store:
        sites = asyncio.run(SiteRegistry(store).get_all_sites())
        last_id = asyncio.run(Settings(store).get_last_site_id())
    if not sites:
        click.echo("No sites yet. Create one with 'wordma site create <name>'")
        return
    for item in sites:
        marker = "*" if item.id == last_id else " "
        line = f"{marker} {item.id:>4}  {item.name}"
        if item.path:
            line += click.style(f"  {item.path}", fg="bright_black")
        click.echo(line)


@site.command("open")
@click.argument("site_id", type=int, required=False)
@click.option("--create", "create", is_flag=True, help="Open the create site page")
def site_open(site_id: int | None, create: bool):
    """Open a site, or the last opened site when SITE_ID is omitted."""
    if create:
        to = Route.create_site()
    elif site_id is not None:
        to = Route.workspace(site_id)
    else:
        to = Route.landing()

    with _open_store() as store:
        registry = SiteRegistry(store)
        if site_id is not None and asyncio.run(registry.get_site(site_id)) is None:
            raise click.ClickException(f"Site {site_id} not found")
        guard = NavigationGuard(registry, Settings(store))
        resolved = asyncio.run(guard.navigate(to))
        opened = (
            asyncio.run(registry.get_site(resolved.site_id))
            if resolved.site_id is not None
            else None
        )

    if resolved.name == CREATE_SITE:
        click.echo("No site selected. Create one with 'wordma site create <name>'")
        return
    if opened is None:
        click.echo(f"Opened {resolved.name}")
        return
    click.echo(click.style(f'Opened site "{opened.name}" (id {opened.id})', fg="green"))
    if opened.description:
        click.echo(opened.description)
    if opened.path:
        click.echo(f"Content: {opened.path}")


# -- articles ---------------------------------------------------------------


@cli.group()
def article():
    """Browse articles."""


@article.command("list")
@click.option("--drafts/--no-drafts", default=True, help="Include draft articles")
def article_list(drafts: bool):
    """List articles, most recent first."""
    with _open_store() as store:
        articles = asyncio.run(get_all_articles(store))
    if not drafts:
        articles = [a for a in articles if not a.draft]
    if not articles:
        click.echo("No articles")
        return
    for item in articles:
        status = click.style(f"{item.status:<9}", fg="yellow" if item.draft else "green")
        click.echo(f"{item.id:>4}  {status}  {item.type:<8}  {item.title}")


def main():
    """Entry point for the CLI application."""
    cli()


@contextlib.contextmanager
def _open_store() -> Iterator[Store]:
    """Yield the project's store and close it afterwards.

    StoreUnavailable is reported as a CLI error.
    """
    project_root = Path.cwd()
    config = load_config(project_root)
    store = Store(resolve_path(project_root, config["database"]))
    try:
        yield store
    except StoreUnavailable as exc:
        raise click.ClickException(str(exc)) from None
    finally:
        store.close()


@contextlib.contextmanager
def _reporting(error: type[Exception], headline: str) -> Iterator[None]:
    try:
        yield
    except error as exc:
        raise click.ClickException(f"{headline}: {exc}") from None


def _confirm(message: str) -> bool:
    answer = questionary.confirm(message, default=False, style=_questionary_style()).ask()
    return bool(answer)


def _ask(question: questionary.Question) -> str:
    answer = question.ask()
    if answer is None:
        raise click.Abort()
    return answer


def _questionary_style():
    """Return consistent questionary style."""
    return questionary.Style(
        [
            ("qmark", "fg:cyan bold"),
            ("question", "bold"),
            ("answer", "fg:cyan"),
            ("pointer", "fg:cyan bold"),
            ("highlighted", "fg:cyan bold"),
            ("selected", "fg:cyan"),
        ]
    )
