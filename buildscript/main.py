"""
buildscript — CLI entrypoint.

Usage:
    buildscript --help
    buildscript compile --output build.sh
    buildscript slug
    buildscript config check
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from buildscript import __version__
from buildscript.core.observability.logging_config import setup_logging

# Ambient endpoint for tool self-updates; read here and nowhere else
APP_HOST_ENV = "BUILDSCRIPT_APP_HOST"


@click.group()
@click.version_option(version=__version__, prog_name="buildscript")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to .build.yml (default: auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """buildscript — compile CI build configs into shell scripts."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    if debug:
        level = "DEBUG"
    elif verbose:
        level = "INFO"
    elif quiet:
        level = "ERROR"
    else:
        level = os.environ.get("BUILDSCRIPT_LOG_LEVEL", "WARNING")

    setup_logging(
        level=level,
        log_file=os.environ.get("BUILDSCRIPT_LOG_FILE"),
        log_file_level=os.environ.get("BUILDSCRIPT_LOG_FILE_LEVEL"),
    )


def _overrides(language: str | None, version: str | None) -> dict:
    return {
        "language": language,
        "version": version,
        "app_host": os.environ.get(APP_HOST_ENV) or None,
    }


_language_option = click.option("--language", "-l", default=None, help="Override the language.")
_version_option = click.option("--version", "version", default=None, help="Override the version.")
_json_option = click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")


@cli.command("compile")
@_language_option
@_version_option
@click.option(
    "--output", "-o",
    type=click.Path(dir_okay=False, writable=True),
    default=None,
    help="Write the script to a file instead of stdout.",
)
@_json_option
@click.pass_context
def compile_cmd(
    ctx: click.Context,
    language: str | None,
    version: str | None,
    output: str | None,
    as_json: bool,
) -> None:
    """Compile the build config into a shell script.

    Examples:

        buildscript compile

        buildscript compile --language node --version 6 -o build.sh
    """
    from buildscript.core.use_cases.compile import run_compile

    result = run_compile(
        config_path=ctx.obj.get("config_path"),
        **_overrides(language, version),
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(1 if result.error else 0)
        return

    if result.error:
        click.secho(f"❌ {result.error}", fg="red", err=True)
        sys.exit(1)

    script = result.script
    assert script is not None

    if output:
        path = Path(output)
        path.write_text(script.text, encoding="utf-8")
        path.chmod(0o755)
        if not ctx.obj.get("quiet"):
            click.secho(f"✅ {script.language} script written to {path}", fg="green", err=True)
            click.echo(f"   Cache: {script.cache_slug}", err=True)
        return

    click.echo(script.text, nl=False)


@cli.command()
@_language_option
@_version_option
@_json_option
@click.pass_context
def slug(
    ctx: click.Context,
    language: str | None,
    version: str | None,
    as_json: bool,
) -> None:
    """Print the dependency cache key for the build."""
    from buildscript.core.use_cases.compile import run_slug

    result = run_slug(
        config_path=ctx.obj.get("config_path"),
        **_overrides(language, version),
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(1 if result.error else 0)
        return

    if result.error:
        click.secho(f"❌ {result.error}", fg="red", err=True)
        sys.exit(1)

    click.echo(result.cache_slug)


@cli.command()
@_json_option
def languages(as_json: bool) -> None:
    """List the languages that have adapters."""
    from buildscript.adapters.registry import default_registry
    from buildscript.core.lifecycle import PHASES

    registry = default_registry()
    data = {}
    for name in registry.list_adapters():
        adapter = registry.get(name)
        data[name] = {
            "aliases": registry.aliases(name),
            "overrides": [p.value for p in PHASES if adapter.overrides(p)],
        }

    if as_json:
        click.echo(json.dumps(data, indent=2))
        return

    for name, info in data.items():
        alias_label = f" ({', '.join(info['aliases'])})" if info["aliases"] else ""
        click.echo(f"   • {name}{alias_label}")
        click.echo(f"     overrides: {', '.join(info['overrides']) or '(defaults only)'}")


@cli.group()
def config() -> None:
    """Build configuration commands."""


@config.command("check")
@_json_option
@click.pass_context
def config_check(ctx: click.Context, as_json: bool) -> None:
    """Validate .build.yml."""
    from buildscript.core.use_cases.compile import run_slug

    result = run_slug(config_path=ctx.obj.get("config_path"))

    if as_json:
        click.echo(json.dumps({"valid": result.error is None, **result.to_dict()}, indent=2))
        sys.exit(1 if result.error else 0)
        return

    if result.error:
        click.secho("❌ Configuration error:", fg="red", bold=True)
        click.echo(f"   • {result.error}")
        sys.exit(1)

    assert result.config is not None and result.adapter is not None
    click.secho("✅ Configuration is valid", fg="green", bold=True)
    click.echo(f"   Language: {result.config.language} → {result.adapter.name}")
    click.echo(f"   Version:  {result.config.version or '(pin file or default)'}")
    click.echo(f"   Cache:    {result.cache_slug}")


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
