"""
CLI entry point for krlib.

Running ``krlib`` with no command checks every component and offers to
install or upgrade kr-library. ``krlib check`` is meant for build scripts.
"""

import asyncio

import click

from . import console
from .config import LibraryConfig
from .errors import KrlibError
from .git_ops import GitRepository
from .orchestrator import Orchestrator
from .registry import ComponentRegistry


@click.group(invoke_without_command=True)
@click.version_option(package_name="krlib")
@click.pass_context
def cli(ctx: click.Context):
    """krlib - Keep kr-library in sync across the monorepo components."""
    if ctx.invoked_subcommand is not None:
        return
    result = asyncio.run(Orchestrator().run())
    ctx.exit(result.exit_code)


@cli.command()
@click.argument("component_name")
def check(component_name: str):
    """Fail if kr-library is missing or outdated in COMPONENT_NAME."""
    try:
        git_repo = GitRepository()
        root = git_repo.get_root_directory()
        registry = ComponentRegistry.discover(root, LibraryConfig.load(root))
    except KrlibError as e:
        console.error(f"Failed to run krlib, err: {e}")
        raise SystemExit(1)

    component = registry.find(component_name)
    if component is None:
        console.error(f"Unknown component: {component_name}")
        raise SystemExit(1)

    if registry.is_outdated(component):
        console.error("Oops, The kr-library is outdated, Please run `krlib` to update")
        raise SystemExit(1)

    console.success(
        f"kr-library {component.installed_version} is up to date in {component_name}"
    )


if __name__ == "__main__":
    cli()
