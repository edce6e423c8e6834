# schemata/cli.py
"""
schemata CLI -- Click commands with a themed terminal UI.

Provides the ``schemata`` console entry-point declared in pyproject.toml as
``schemata.cli:cli``.

- compile:  describe Python types, compile them through one registry and
            print the definitions table as JSON or YAML
- config:   SchemataConfig display
"""

from __future__ import annotations

import importlib
import json
from pathlib import Path
from typing import Any, Optional

import click
import yaml
from rich.console import Console

from . import __version__
from . import cli_theme as theme
from .adapter import DescriptorAdapter
from .config import get_config
from .documentation import DocumentationFilter, YamlDocumentationSource
from .errors import SchemataError
from .nodes import definitions_to_dict
from .options import SchemaOptions
from .registry import SchemaRegistry
from .utils.logging import setup_logging

console = Console()

# ---------------------------------------------------------------------------
# Version
# ---------------------------------------------------------------------------


def _print_version(
    ctx: click.Context,
    _param: click.Parameter,
    value: bool,
) -> None:
    if not value or ctx.resilient_parsing:
        return
    theme.print_version(__version__, console)
    ctx.exit()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _import_target(target: str) -> Any:
    """Resolve ``package.module:Name`` (or ``Outer.Inner``) to an object."""
    module_name, sep, attr_path = target.partition(":")
    if not sep or not module_name or not attr_path:
        raise click.BadParameter(
            f"{target!r} is not of the form MODULE:NAME", param_hint="TARGETS"
        )
    try:
        obj: Any = importlib.import_module(module_name)
    except ImportError as exc:
        raise click.BadParameter(
            f"Cannot import module {module_name!r}: {exc}", param_hint="TARGETS"
        ) from exc
    for part in attr_path.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError as exc:
            raise click.BadParameter(
                f"{module_name!r} has no attribute {attr_path!r}", param_hint="TARGETS"
            ) from exc
    return obj


def _render(payload: dict[str, Any], fmt: str) -> str:
    if fmt == "yaml":
        return yaml.safe_dump(payload, sort_keys=False, allow_unicode=True)
    return json.dumps(payload, indent=2, ensure_ascii=False)


# ---------------------------------------------------------------------------
# Main CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.option(
    "--version",
    is_flag=True,
    callback=_print_version,
    expose_value=False,
    is_eager=True,
    help="Show version and exit.",
)
@click.option("--log", "enable_log", is_flag=True, default=False, help="Write a session log under the configured home directory.")
def cli(enable_log: bool) -> None:
    """schemata -- compile Python type graphs into cross-referenced schemas."""
    if enable_log:
        cfg = get_config()
        setup_logging(level=cfg.log_level, log_dir=cfg.log_dir)


# ---------------------------------------------------------------------------
# compile
# ---------------------------------------------------------------------------


@cli.command("compile")
@click.argument("targets", nargs=-1, required=True)
@click.option("--format", "fmt", type=click.Choice(["json", "yaml"], case_sensitive=False), default="json", show_default=True, help="Output format.")
@click.option("--enums-as-strings", is_flag=True, default=False, help="Describe every enum by its member names.")
@click.option("--camel-case-enums", is_flag=True, default=False, help="camelCase enum names in string mode.")
@click.option("--full-names", is_flag=True, default=False, help="Use fully qualified type names as schema ids.")
@click.option("--ignore-obsolete", is_flag=True, default=False, help="Drop properties marked deprecated.")
@click.option("--docs", "docs_file", type=click.Path(exists=True, dir_okay=False, path_type=Path), default=None, help="YAML file with type and property summaries.")
@click.option("--output", "-o", type=click.Path(dir_okay=False, path_type=Path), default=None, help="Write the definitions to a file instead of stdout.")
def compile_cmd(
    targets: tuple[str, ...],
    fmt: str,
    enums_as_strings: bool,
    camel_case_enums: bool,
    full_names: bool,
    ignore_obsolete: bool,
    docs_file: Optional[Path],
    output: Optional[Path],
) -> None:
    """Compile TARGETS into a definitions table.

    \b
    Each TARGET is MODULE:NAME, e.g. ``shop.models:Order``.

    \b
    Examples:
      schemata compile shop.models:Order
      schemata compile shop.models:Order shop.models:Customer --format yaml
      schemata compile shop.models:Order --docs docs.yaml -o schemas.json
    """
    options = SchemaOptions.from_config(get_config())
    if enums_as_strings:
        options.describe_all_enums_as_strings = True
    if camel_case_enums:
        options.camel_case_enum_strings = True
    if full_names:
        options.use_full_type_names = True
    if ignore_obsolete:
        options.ignore_obsolete_properties = True

    objects = [_import_target(t) for t in targets]

    try:
        if docs_file is not None:
            options.add_model_filter(
                DocumentationFilter(YamlDocumentationSource.from_file(docs_file))
            )
        adapter = DescriptorAdapter()
        registry = SchemaRegistry(options)
        for obj in objects:
            registry.get_or_register(adapter.describe(obj))
        definitions = registry.complete()
    except SchemataError as exc:
        raise click.ClickException(str(exc)) from exc

    text = _render(definitions_to_dict(definitions, options.ref_prefix), fmt.lower())
    if output is None:
        click.echo(text)
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text if text.endswith("\n") else text + "\n", encoding="utf-8")
    console.print(theme.ok(f"Wrote {len(definitions)} definitions to {output}"))


# ---------------------------------------------------------------------------
# config
# ---------------------------------------------------------------------------


@cli.command("config")
def config_show() -> None:
    """Show the effective configuration.

    \b
    Values come from SCHEMATA_* environment variables, then .env, then
    defaults.
    """
    cfg = get_config()
    dump = cfg.model_dump()

    # 01 · Schemas
    theme.section("Schemas", console, "01")
    t = theme.make_kv_table()
    t.add_row("describe_all_enums_as_strings", str(dump["describe_all_enums_as_strings"]))
    t.add_row("camel_case_enum_strings", str(dump["camel_case_enum_strings"]))
    t.add_row("use_full_type_names", str(dump["use_full_type_names"]))
    t.add_row("ref_prefix", dump["ref_prefix"])
    t.add_row("ignore_obsolete_properties", str(dump["ignore_obsolete_properties"]))
    t.add_row("property_precedence", dump["property_precedence"])
    console.print(t)

    # 02 · Paths
    theme.section("Paths", console, "02")
    t = theme.make_kv_table()
    t.add_row("home_dir", str(cfg.home_dir))
    t.add_row("log_dir", str(cfg.log_dir))
    t.add_row("log_level", dump["log_level"])
    console.print(t)
    console.print()
    console.print(theme.info("Override with SCHEMATA_* environment variables or a .env file"))
