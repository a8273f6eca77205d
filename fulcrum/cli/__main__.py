"""Fulcrum CLI - Main Entry Point.

The `fulcrum` command inspects how requests route and dispatch.

Commands:
    routes   - List configured routes
    resolve  - Show the route and dispatch token for a path
    check    - Check a controller/action pair resolves to a real class
    dispatch - Dispatch a path and print the response
"""

import sys
from typing import Optional, Tuple

import click

from . import __version__, __cli_name__
from .utils.colors import (
    success, error, warning, dim,
    section, kv, table,
    _CHECK, _CROSS,
)
from ..faults import Fault


# ═══════════════════════════════════════════════════════════════════════════
# Custom Click help formatter
# ═══════════════════════════════════════════════════════════════════════════


class FulcrumGroup(click.Group):
    """Click group subclass with aligned command listing."""

    def format_commands(
        self, ctx: click.Context, formatter: click.HelpFormatter
    ) -> None:
        """Format command listing with aligned columns."""
        commands = []
        for subcommand in self.list_commands(ctx):
            cmd = self.get_command(ctx, subcommand)
            if cmd is None or cmd.hidden:
                continue
            commands.append((subcommand, cmd.get_short_help_str(limit=48)))

        if commands:
            with formatter.section(
                click.style("Commands", fg="cyan", bold=True)
            ):
                max_len = max(len(c[0]) for c in commands) + 2
                for name, help_text in commands:
                    styled_name = click.style(name.ljust(max_len), fg="green")
                    formatter.write(f"  {styled_name} {help_text}\n")


@click.group(cls=FulcrumGroup)
@click.version_option(version=__version__, prog_name=__cli_name__)
@click.option('--config', '-c', 'config_paths', multiple=True, type=click.Path(),
              help='Config file (YAML/JSON); repeatable')
@click.option('--controllers', type=click.Path(), help='Controllers directory')
@click.option('--debug', is_flag=True, help='Verify controller class integrity')
@click.option('--no-cache', is_flag=True, help='Check controller files on every lookup')
@click.option('--verbose', '-v', is_flag=True, help='Verbose output')
@click.option('--quiet', '-q', is_flag=True, help='Minimal output')
@click.pass_context
def cli(
    ctx,
    config_paths: Tuple[str, ...],
    controllers: Optional[str],
    debug: bool,
    no_cache: bool,
    verbose: bool,
    quiet: bool,
):
    """Inspect routing and controller dispatch.

    \b
    Quick start:
      fulcrum routes
      fulcrum resolve /blog/show/id/42
      fulcrum check blog show --instantiate
      fulcrum dispatch /blog/show/id/42
    """
    overrides = {}
    if controllers:
        overrides['controllers_path'] = controllers
    if debug:
        overrides['debug'] = True
    if no_cache:
        overrides['use_system_cache'] = False
    if verbose:
        overrides['log_level'] = 'DEBUG'

    ctx.ensure_object(dict)
    ctx.obj['config_paths'] = list(config_paths) or None
    ctx.obj['overrides'] = overrides
    ctx.obj['verbose'] = verbose
    ctx.obj['quiet'] = quiet


def _load_app(ctx):
    """Build the Application once per invocation."""
    if 'app' not in ctx.obj:
        from ..app import Application
        try:
            ctx.obj['app'] = Application.from_config(
                ctx.obj['config_paths'], **ctx.obj['overrides']
            )
        except Fault as e:
            _fail(e)
    return ctx.obj['app']


def _fail(exc: BaseException) -> None:
    error(f"  {_CROSS} {exc}")
    sys.exit(1)


# ============================================================================
# Commands
# ============================================================================

@cli.command('routes')
@click.pass_context
def routes_cmd(ctx):
    """List configured routes."""
    from .commands.inspect import list_routes

    rows = list_routes(_load_app(ctx))
    if not rows:
        warning("  No routes configured (direct routes only)")
        return

    section("Routes")
    table(["Name", "Pattern", "Target"], rows)


@cli.command('resolve')
@click.argument('path')
@click.option('--method', '-m', default='GET', show_default=True, help='HTTP method')
@click.pass_context
def resolve_cmd(ctx, path: str, method: str):
    """
    Show the route and dispatch token for a path.

    Examples:
      fulcrum resolve /blog/show/id/42
      fulcrum resolve /posts/7 --method POST
    """
    from .commands.inspect import resolve_path

    app = _load_app(ctx)
    try:
        resolution = resolve_path(app, path, method)
    except Fault as e:
        _fail(e)

    route, token = resolution.route, resolution.token

    if ctx.obj['quiet']:
        click.echo(f"{token.controller_class_name}.{token.action_method_name}")
        return

    section("Route")
    kv("Source", resolution.source)
    kv("Name", route.name)
    kv("Pattern", route.pattern)
    kv("Target", f"{route.controller}.{route.action}")
    kv("Params", route.params)

    click.echo()
    section("Dispatch token")
    kv("Class", token.controller_class_name)
    kv("Method", token.action_method_name)
    kv("File", token.controller_class_filename)
    kv("Params", token.get_params())


@cli.command('check')
@click.argument('controller')
@click.argument('action', default='index')
@click.option('--instantiate', is_flag=True, help='Load the file and create the controller')
@click.pass_context
def check_cmd(ctx, controller: str, action: str, instantiate: bool):
    """
    Check a controller/action pair resolves to a real class.

    Examples:
      fulcrum check blog
      fulcrum check blog show --instantiate
    """
    from .commands.inspect import check_controller

    app = _load_app(ctx)
    try:
        report = check_controller(app, controller, action, instantiate)
    except (Fault, NameError) as e:
        _fail(e)

    token = report.token
    section("Controller")
    kv("Class", token.controller_class_name)
    kv("Method", token.action_method_name)
    kv("File", token.controller_class_filename)

    if not report.file_exists:
        error(f"  {_CROSS} Controller file not found")
        sys.exit(1)
    success(f"  {_CHECK} Controller file exists")

    if instantiate:
        kv("Instance", report.instance_class)
        if report.action_callable:
            success(f"  {_CHECK} Action is callable")
        else:
            error(f"  {_CROSS} Action '{token.action_method_name}' is not callable")
            sys.exit(1)
    elif not ctx.obj['quiet']:
        dim("  Pass --instantiate to load the class")


@cli.command('dispatch')
@click.argument('path')
@click.option('--method', '-m', default='GET', show_default=True, help='HTTP method')
@click.pass_context
def dispatch_cmd(ctx, path: str, method: str):
    """
    Dispatch a path and print the response.

    Examples:
      fulcrum dispatch /blog/show/id/42
      fulcrum --debug dispatch /admin/users
    """
    from .commands.inspect import dispatch_path

    app = _load_app(ctx)
    try:
        response = dispatch_path(app, path, method)
    except (Fault, NameError) as e:
        _fail(e)

    if not ctx.obj['quiet']:
        section("Response")
        kv("Status", response.status)
        for name, value in response.headers.items():
            kv(name, value)
        click.echo()
    click.echo(response.content)


def main():
    """Entry point for `fulcrum` command."""
    cli(obj={})


if __name__ == '__main__':
    main()
