import argparse
import logging
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Callable, List, Optional

from rich.console import Console
from rich.logging import RichHandler

from . import __version__
from .agents import FAIL, OK, SUPPORTED_AGENTS, WARN, add_agent, agent_rows, check_agent, configure_agent, switch_agent
from .claude import claude_settings_path, is_claude_configured, load_claude_settings, update_claude_env_config
from .config import ModixConfig, VendorConfig
from .errors import AlreadyExistsError, ModixError, NotFoundError
from .project import check_dependencies, init_project, inspect_project, validate_project
from .store import ConfigManager
from .ui import ModixUI

logger = logging.getLogger(__name__)


@dataclass
class CommandContext:
    """Everything a command handler needs, resolved from the global flags."""

    store: ConfigManager
    ui: ModixUI
    claude_settings: Optional[Path] = None
    output_format: str = "human"

    @property
    def as_json(self) -> bool:
        return self.output_format == "json"


def configure_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=debug)],
        force=True,
    )


# ---------------------------------------------------------------------------
# shared helpers
# ---------------------------------------------------------------------------


def sync_current(ctx: CommandContext, config: ModixConfig) -> None:
    """Propagate the current selection into Claude Code's settings."""
    update_claude_env_config(config, config.current_model, config.current_vendor, ctx.claude_settings)


def switch_model(ctx: CommandContext, model: str) -> str:
    config = ctx.store.load()
    vendor = config.find_vendor_for_model(model)
    if vendor is None:
        raise NotFoundError(f"model '{model}' not found in any vendor configuration")

    config.set_current_vendor_and_model(vendor, model)
    ctx.store.save(config)
    sync_current(ctx, config)
    logger.debug("switched to %s@%s", model, vendor)
    return vendor


def update_vendor(
    ctx: CommandContext,
    vendor: str,
    company: Optional[str] = None,
    endpoint: Optional[str] = None,
    api_key: Optional[str] = None,
    add_model: Optional[str] = None,
) -> List[str]:
    """Apply field updates to a vendor; returns a description of each change."""
    config = ctx.store.load()
    vendor_config = config.get_vendor(vendor)
    if vendor_config is None:
        raise NotFoundError(f"vendor '{vendor}' not found. Use 'modix vendor add {vendor}' to create it first")

    updates = []
    if company:
        vendor_config.company = company
        updates.append(f"Company: {company}")
    if endpoint:
        vendor_config.api_endpoint = endpoint
        updates.append(f"API Endpoint: {endpoint}")
    if api_key:
        vendor_config.api_key = api_key
        updates.append("API Key: (updated)")
    if add_model:
        if not config.add_model_to_vendor(vendor, add_model):
            raise AlreadyExistsError(f"model '{add_model}' already exists in vendor '{vendor}'")
        updates.append(f"Added model: {add_model}")

    if not updates:
        return updates

    ctx.store.save(config)
    if config.current_vendor == vendor:
        sync_current(ctx, config)
    return updates


def remove_model(ctx: CommandContext, vendor: str, model: str, drop_empty_vendor: bool = False) -> None:
    config = ctx.store.load()
    fell_back = config.remove_model(vendor, model)

    if drop_empty_vendor and not config.vendors[vendor].models and vendor != config.default_vendor:
        config.remove_vendor(vendor)
        ctx.ui.info(f"Vendor '{vendor}' had no remaining models and was removed")

    ctx.store.save(config)
    if fell_back:
        sync_current(ctx, config)
        ctx.ui.warning(f"Removed current model. Switched to default: {config.default_model}@{config.default_vendor}")
    ctx.ui.success(f"Removed model '{model}' from vendor '{vendor}'")


def _report_updates(ctx: CommandContext, vendor: str, updates: List[str]) -> None:
    ctx.ui.success(f"Updated vendor '{vendor}':")
    for update in updates:
        ctx.ui.display_message(f"  - {update}", style=None)


# ---------------------------------------------------------------------------
# top-level commands
# ---------------------------------------------------------------------------


def cmd_init(ctx: CommandContext, args: argparse.Namespace) -> int:
    if ctx.store.exists():
        ctx.ui.display_message(f"Configuration already exists at: {ctx.store.path}")
        ctx.ui.info("Use 'modix config show' to view it or 'modix config reset --force' to restore defaults")
        return 0

    ctx.store.reset()
    ctx.ui.success(f"Initialized configuration at: {ctx.store.path}")
    ctx.ui.display_message("\nNext steps:", style="bold")
    ctx.ui.display_message("  1. Add API keys to vendors: modix vendor update <vendor> --api-key <key>")
    ctx.ui.display_message("  2. Add models: modix vendor model add <vendor> <model>")
    ctx.ui.display_message("  3. Switch to a model: modix switch <model>")
    ctx.ui.display_message("  4. Configure agents: modix agent add claude-code")
    return 0


def cmd_list(ctx: CommandContext, args: argparse.Namespace) -> int:
    config = ctx.store.load()
    if ctx.as_json:
        ctx.ui.display_json(
            {
                "current_vendor": config.current_vendor,
                "current_model": config.current_model,
                "models": [asdict(info) for info in config.model_infos()],
            }
        )
        return 0
    if not config.vendors:
        ctx.ui.display_message("No vendors configured", style="yellow")
        return 0
    ctx.ui.display_models(config)
    return 0


def cmd_status(ctx: CommandContext, args: argparse.Namespace) -> int:
    config = ctx.store.load()
    if ctx.as_json:
        current = config.get_current_model()
        ctx.ui.display_json(
            {
                "current_model": config.current_model if current else None,
                "current_vendor": config.current_vendor if current else None,
                "company": current[1].company if current else None,
                "api_endpoint": current[1].api_endpoint if current else None,
                "current_agent": config.current_agent or None,
            }
        )
        return 0
    ctx.ui.display_status(config)
    return 0


def cmd_switch(ctx: CommandContext, args: argparse.Namespace) -> int:
    vendor = switch_model(ctx, args.model)
    ctx.ui.success(f"Switched to model: {args.model}@{vendor}")
    return 0


def cmd_remove(ctx: CommandContext, args: argparse.Namespace) -> int:
    config = ctx.store.load()
    vendor = config.find_vendor_for_model(args.model)
    if vendor is None:
        raise NotFoundError(f"model '{args.model}' not found")
    remove_model(ctx, vendor, args.model, drop_empty_vendor=True)
    return 0


def cmd_path(ctx: CommandContext, args: argparse.Namespace) -> int:
    ctx.ui.display_message(f"Configuration file: {ctx.store.path}")
    return 0


def cmd_version(ctx: CommandContext, args: argparse.Namespace) -> int:
    ctx.ui.display_message(f"modix {__version__}")
    return 0


def cmd_check(ctx: CommandContext, args: argparse.Namespace) -> int:
    if args.tool == "claude-code":
        path = claude_settings_path(ctx.claude_settings)
        ctx.ui.display_message("Checking Claude Code configuration...", style="yellow")
        ctx.ui.display_message(f"Config file path: {path}", style="cyan")
        if not is_claude_configured(ctx.claude_settings):
            ctx.ui.display_message(f"Configuration file not found: {path}", style="red")
            return 0
        ctx.ui.display_json(load_claude_settings(ctx.claude_settings), title="Claude Code Configuration")
        return 0

    if args.tool == "modix":
        ctx.ui.display_message("Checking Modix configuration...", style="yellow")
        ctx.ui.display_message(f"Config file path: {ctx.store.path}", style="cyan")
        if not ctx.store.exists():
            ctx.ui.display_message(f"Configuration file not found: {ctx.store.path}", style="red")
            ctx.ui.info("Run 'modix init' to create a default configuration")
            return 0

        config = ctx.store.load()
        ctx.ui.display_json(config.to_dict(), title="Modix Configuration")
        status = config.status()
        ctx.ui.display_message("--- Configuration Summary ---", style="cyan")
        ctx.ui.display_message(f"Total vendors: {status.total_vendors}")
        ctx.ui.display_message(f"Total models: {status.total_models}")
        ctx.ui.display_message(f"Configured vendors: {status.configured_vendors}")
        ctx.ui.display_message(f"Current selection: {status.current_model}")

        ctx.ui.display_message("--- Configuration Health Check ---", style="cyan")
        issues = config.health_issues()
        if not issues:
            ctx.ui.success("Health Check: All checks passed!")
        else:
            ctx.ui.display_message(f"Health Check: Found {len(issues)} issue(s)", style="red")
            for issue in issues:
                ctx.ui.display_message(f"  - {issue}", style="red")
        return 0

    if args.tool in ("codex", "gemini-cli"):
        ctx.ui.display_message(f"{args.tool} configuration check is not yet implemented", style="yellow")
        return 0

    raise ModixError(f"unknown tool '{args.tool}'. Supported tools: claude-code, modix, codex, gemini-cli")


def cmd_tui(ctx: CommandContext, args: argparse.Namespace) -> int:
    from .tui import run_tui

    return run_tui(ctx)


# ---------------------------------------------------------------------------
# vendor / model
# ---------------------------------------------------------------------------


def cmd_vendor_add(ctx: CommandContext, args: argparse.Namespace) -> int:
    config = ctx.store.load()
    if config.get_vendor(args.vendor) is not None:
        raise AlreadyExistsError(f"vendor '{args.vendor}' already exists")

    models = list(args.model or [])
    config.add_vendor(
        args.vendor,
        VendorConfig(company=args.company, api_endpoint=args.endpoint, api_key=args.api_key, models=models),
    )
    ctx.store.save(config)
    ctx.ui.success(f"Added vendor '{args.vendor}' ({args.company})")
    if not models:
        ctx.ui.info(f"Next step: add models with 'modix vendor model add {args.vendor} <model-name>'")
    return 0


def cmd_vendor_remove(ctx: CommandContext, args: argparse.Namespace) -> int:
    config = ctx.store.load()
    vendor_config = config.get_vendor(args.vendor)
    if vendor_config is None:
        raise NotFoundError(f"vendor '{args.vendor}' not found")
    if args.vendor == config.default_vendor:
        raise ModixError(f"cannot remove default vendor '{args.vendor}'")

    was_current = config.current_vendor == args.vendor
    config.remove_vendor(args.vendor)
    if was_current:
        config.set_current_vendor_and_model(config.default_vendor, config.default_model)
    ctx.store.save(config)

    if was_current:
        sync_current(ctx, config)
        ctx.ui.warning(
            f"'{args.vendor}' was the current vendor. Switched to default: "
            f"{config.default_model}@{config.default_vendor}"
        )
    ctx.ui.success(f"Removed vendor '{args.vendor}' ({len(vendor_config.models)} models)")
    return 0


def cmd_vendor_update(ctx: CommandContext, args: argparse.Namespace) -> int:
    updates = update_vendor(ctx, args.vendor, args.company, args.endpoint, args.api_key)
    if not updates:
        raise ModixError("no updates specified")
    _report_updates(ctx, args.vendor, updates)
    return 0


def cmd_update(ctx: CommandContext, args: argparse.Namespace) -> int:
    updates = update_vendor(ctx, args.vendor, args.company, args.endpoint, args.api_key, args.add_model)
    if not updates:
        ctx.ui.display_message("No updates were specified. Use --help to see available options.", style="yellow")
        return 0
    _report_updates(ctx, args.vendor, updates)
    return 0


def cmd_vendor_list(ctx: CommandContext, args: argparse.Namespace) -> int:
    config = ctx.store.load()
    if ctx.as_json:
        ctx.ui.display_json({vendor: item.to_dict() for vendor, item in config.vendors.items()})
        return 0
    ctx.ui.display_vendors(config)
    return 0


def cmd_vendor_show(ctx: CommandContext, args: argparse.Namespace) -> int:
    config = ctx.store.load()
    vendor_config = config.get_vendor(args.vendor)
    if vendor_config is None:
        raise NotFoundError(f"vendor '{args.vendor}' not found")
    if ctx.as_json:
        ctx.ui.display_json({"vendor": args.vendor, **vendor_config.to_dict()})
        return 0
    ctx.ui.display_vendor(config, args.vendor, vendor_config)
    return 0


def cmd_vendor_model_add(ctx: CommandContext, args: argparse.Namespace) -> int:
    config = ctx.store.load()
    try:
        added = config.add_model_to_vendor(args.vendor, args.model)
    except NotFoundError as exc:
        raise NotFoundError(f"{exc}. Use 'modix vendor add {args.vendor}' to create it first") from exc
    if not added:
        raise AlreadyExistsError(f"model '{args.model}' already exists in vendor '{args.vendor}'")

    ctx.store.save(config)
    ctx.ui.success(f"Added model '{args.model}' to vendor '{args.vendor}'")
    ctx.ui.info(f"Switch to it with: modix switch {args.model}")
    return 0


def cmd_vendor_model_remove(ctx: CommandContext, args: argparse.Namespace) -> int:
    remove_model(ctx, args.vendor, args.model)
    return 0


# ---------------------------------------------------------------------------
# agent
# ---------------------------------------------------------------------------


def cmd_agent_add(ctx: CommandContext, args: argparse.Namespace) -> int:
    config = ctx.store.load()
    agent_config = add_agent(config, args.agent)
    ctx.store.save(config)
    ctx.ui.success(f"Added agent '{args.agent}' ({agent_config.name})")
    ctx.ui.info(f"Configure it with: modix agent config {args.agent}")
    return 0


def cmd_agent_remove(ctx: CommandContext, args: argparse.Namespace) -> int:
    config = ctx.store.load()
    config.remove_agent(args.agent)
    ctx.store.save(config)
    ctx.ui.success(f"Removed agent: {args.agent}")
    return 0


def cmd_agent_list(ctx: CommandContext, args: argparse.Namespace) -> int:
    config = ctx.store.load()
    if ctx.as_json:
        ctx.ui.display_json(
            {"current_agent": config.current_agent or None, "agents": {k: v.to_dict() for k, v in config.agents.items()}}
        )
        return 0
    if not config.agents:
        ctx.ui.display_message("No agents configured", style="yellow")
        ctx.ui.display_message("\nSupported agents:", style="bold")
        for name, info in SUPPORTED_AGENTS.items():
            ctx.ui.display_message(f"  - {name:<15} {info.description}")
        return 0
    ctx.ui.display_agents(config, agent_rows(config))
    return 0


def cmd_agent_config(ctx: CommandContext, args: argparse.Namespace) -> int:
    config = ctx.store.load()
    agent_config = configure_agent(config, args.agent, ctx.claude_settings)
    ctx.ui.success(f"Configured {agent_config.name} to use: {config.current_model}@{config.current_vendor}")
    ctx.ui.info(f"Config file: {agent_config.config_path}")
    return 0


def cmd_agent_check(ctx: CommandContext, args: argparse.Namespace) -> int:
    config = ctx.store.load()
    results = check_agent(config, args.agent, ctx.claude_settings)
    ctx.ui.display_message(f"Checking {SUPPORTED_AGENTS[args.agent].name} configuration...", style="yellow")
    ctx.ui.display_checks(results)
    return 0


def cmd_agent_switch(ctx: CommandContext, args: argparse.Namespace) -> int:
    config = ctx.store.load()
    agent_config = switch_agent(config, args.agent)
    ctx.store.save(config)
    ctx.ui.success(f"Switched to agent: {args.agent} ({agent_config.name})")
    return 0


# ---------------------------------------------------------------------------
# config
# ---------------------------------------------------------------------------


def cmd_config_show(ctx: CommandContext, args: argparse.Namespace) -> int:
    config = ctx.store.load()
    if ctx.as_json:
        ctx.ui.display_json(config.to_dict())
        return 0
    ctx.ui.display_config(config)
    return 0


def cmd_config_reset(ctx: CommandContext, args: argparse.Namespace) -> int:
    if not args.force:
        raise ModixError("use --force to confirm reset")
    ctx.store.reset()
    ctx.ui.success("Configuration reset to defaults")
    return 0


def cmd_config_check(ctx: CommandContext, args: argparse.Namespace) -> int:
    config = ctx.store.load()
    status = config.status()
    ui = ctx.ui
    ui.display_message("=== Configuration Check ===", style="bold cyan")

    ui.display_message(f"Vendors: {status.total_vendors}")
    ui.display_checks([(OK, "Vendors configured") if status.total_vendors else (FAIL, "No vendors configured")])
    ui.display_message(f"Models: {status.total_models}")
    ui.display_checks([(OK, "Models configured") if status.total_models else (FAIL, "No models configured")])
    ui.display_message(f"Configured vendors: {status.configured_vendors}")
    ui.display_checks(
        [
            (OK, "Some vendors have complete API configuration")
            if status.configured_vendors
            else (WARN, "No vendors with complete API configuration")
        ]
    )
    ui.display_message(f"Current model: {config.current_model}@{config.current_vendor}")
    ui.display_message(f"Agents: {len(config.agents) or 'None'}")

    ready = status.configured_vendors > 0 and status.total_models > 0 and bool(config.current_model)
    if ready:
        ui.success("Configuration is ready to use")
        return 0

    ui.warning("Configuration needs setup")
    ui.display_message("Recommended actions:", style="bold")
    if not status.configured_vendors:
        ui.display_message("  - Add API keys to vendors: modix vendor update <vendor> --api-key <key>")
    if not status.total_models:
        ui.display_message("  - Add models: modix vendor model add <vendor> <model>")
    return 0


# ---------------------------------------------------------------------------
# project
# ---------------------------------------------------------------------------


def cmd_project_init(ctx: CommandContext, args: argparse.Namespace) -> int:
    files = init_project(args.dir)
    if ctx.as_json:
        ctx.ui.display_json({"success": True, "message": "Modix project initialized successfully", "files": files})
        return 0
    ctx.ui.success("Modix project initialized successfully")
    ctx.ui.display_message("  Created .modix/ directory with configuration files:")
    for filename in files:
        ctx.ui.display_message(f"    - {filename}")
    return 0


def cmd_project_check(ctx: CommandContext, args: argparse.Namespace) -> int:
    results = check_dependencies()
    if ctx.as_json:
        ctx.ui.display_json({"success": all(item["installed"] for item in results), "tools": results})
        return 0
    ctx.ui.display_dependencies(results)
    return 0


def cmd_project_validate(ctx: CommandContext, args: argparse.Namespace) -> int:
    results = validate_project(args.dir)
    valid = all(item["valid"] for item in results)
    if ctx.as_json:
        ctx.ui.display_json({"success": valid, "files": results})
    else:
        ctx.ui.display_validation(results)
    return 0 if valid else 1


def cmd_project_inspect(ctx: CommandContext, args: argparse.Namespace) -> int:
    contents = inspect_project(args.dir)
    if ctx.as_json:
        ctx.ui.display_json({"success": True, **contents})
        return 0
    ctx.ui.display_project(contents)
    return 0


# ---------------------------------------------------------------------------
# parser
# ---------------------------------------------------------------------------


def _show_help(parser: argparse.ArgumentParser) -> Callable[[CommandContext, argparse.Namespace], int]:
    def handler(ctx: CommandContext, args: argparse.Namespace) -> int:
        parser.print_help()
        return 0

    return handler


def _add_group(subparsers, name: str, help_text: str):
    parser = subparsers.add_parser(name, help=help_text, description=help_text)
    parser.set_defaults(handler=_show_help(parser))
    return parser, parser.add_subparsers(title="subcommands", metavar="<command>")


def _add_vendor_fields(parser: argparse.ArgumentParser, required: bool) -> None:
    parser.add_argument("-c", "--company", required=required, help="Company name")
    parser.add_argument("-u", "--endpoint", required=required, help="API endpoint URL")
    parser.add_argument("-k", "--api-key", required=required, help="API key")


def _add_vendor_commands(subparsers) -> None:
    _, vendor_sub = _add_group(subparsers, "vendor", "Manage LLM vendors")

    sp = vendor_sub.add_parser("add", help="Add a new vendor")
    sp.add_argument("vendor", help="Vendor id, e.g. deepseek")
    _add_vendor_fields(sp, required=True)
    sp.add_argument("-m", "--model", action="append", default=[], help="Model name (repeatable)")
    sp.set_defaults(handler=cmd_vendor_add)

    sp = vendor_sub.add_parser("remove", help="Remove a vendor and its models")
    sp.add_argument("vendor")
    sp.set_defaults(handler=cmd_vendor_remove)

    sp = vendor_sub.add_parser("update", help="Update vendor configuration")
    sp.add_argument("vendor")
    _add_vendor_fields(sp, required=False)
    sp.set_defaults(handler=cmd_vendor_update)

    sp = vendor_sub.add_parser("list", help="List all vendors")
    sp.set_defaults(handler=cmd_vendor_list)

    sp = vendor_sub.add_parser("show", help="Show vendor details including API key")
    sp.add_argument("vendor")
    sp.set_defaults(handler=cmd_vendor_show)

    _, model_sub = _add_group(vendor_sub, "model", "Manage models for a vendor")
    sp = model_sub.add_parser("add", help="Add a model to a vendor")
    sp.add_argument("vendor")
    sp.add_argument("model")
    sp.set_defaults(handler=cmd_vendor_model_add)

    sp = model_sub.add_parser("remove", help="Remove a model from a vendor")
    sp.add_argument("vendor")
    sp.add_argument("model")
    sp.set_defaults(handler=cmd_vendor_model_remove)


def _add_model_commands(subparsers) -> None:
    _, model_sub = _add_group(subparsers, "model", "Manage and switch LLM models")

    sp = model_sub.add_parser("list", help="List all models across all vendors")
    sp.set_defaults(handler=cmd_list)

    sp = model_sub.add_parser("switch", help="Switch to a model and update Claude Code")
    sp.add_argument("model")
    sp.set_defaults(handler=cmd_switch)

    sp = model_sub.add_parser("status", help="Show current model status")
    sp.set_defaults(handler=cmd_status)


def build_arg_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="modix",
        description="Manage LLM vendors and models, and switch coding agents like Claude Code between them.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--config", type=Path, help="Path to the modix settings file (default: ~/.modix/settings.json)")
    parser.add_argument(
        "--claude-settings",
        type=Path,
        help="Path to Claude Code settings.json (default: ~/.claude/settings.json)",
    )
    parser.add_argument("-f", "--format", choices=["human", "json"], default="human", help="Output format")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.set_defaults(handler=_show_help(parser))

    sub = parser.add_subparsers(title="commands", metavar="<command>")

    sp = sub.add_parser("init", help="Initialize configuration with vendor presets")
    sp.set_defaults(handler=cmd_init)

    sp = sub.add_parser("list", help="List configured models")
    sp.set_defaults(handler=cmd_list)

    sp = sub.add_parser("status", help="Show current model status")
    sp.set_defaults(handler=cmd_status)

    sp = sub.add_parser("switch", help="Switch to a different model")
    sp.add_argument("model")
    sp.set_defaults(handler=cmd_switch)

    sp = sub.add_parser("remove", help="Remove a model (drops its vendor when left empty)")
    sp.add_argument("model")
    sp.set_defaults(handler=cmd_remove)

    sp = sub.add_parser("show", help="Show details for a specific vendor")
    sp.add_argument("vendor")
    sp.set_defaults(handler=cmd_vendor_show)

    sp = sub.add_parser("update", help="Update an existing vendor configuration")
    sp.add_argument("vendor")
    sp.add_argument("-m", "--add-model", help="Add a model to the vendor")
    _add_vendor_fields(sp, required=False)
    sp.set_defaults(handler=cmd_update)

    sp = sub.add_parser("path", help="Show configuration file path")
    sp.set_defaults(handler=cmd_path)

    sp = sub.add_parser("check", help="Check configuration for a tool")
    sp.add_argument("tool", help="claude-code, modix, codex or gemini-cli")
    sp.set_defaults(handler=cmd_check)

    sp = sub.add_parser("version", help="Show version information")
    sp.set_defaults(handler=cmd_version)

    sp = sub.add_parser("tui", help="Launch the interactive terminal UI")
    sp.set_defaults(handler=cmd_tui)

    _add_vendor_commands(sub)
    _add_model_commands(sub)

    _, agent_sub = _add_group(sub, "agent", "Manage coding agents")
    for name, handler, help_text in (
        ("add", cmd_agent_add, "Add a coding agent"),
        ("remove", cmd_agent_remove, "Stop tracking an agent"),
        ("config", cmd_agent_config, "Point an agent at the current model"),
        ("check", cmd_agent_check, "Check agent configuration and status"),
        ("switch", cmd_agent_switch, "Switch the current agent"),
    ):
        sp = agent_sub.add_parser(name, help=help_text)
        sp.add_argument("agent", help="claude-code, gemini-cli or codex")
        sp.set_defaults(handler=handler)
    sp = agent_sub.add_parser("list", help="List configured agents")
    sp.set_defaults(handler=cmd_agent_list)

    _, config_sub = _add_group(sub, "config", "Manage the modix configuration file")
    sp = config_sub.add_parser("init", help="Initialize configuration with vendor presets")
    sp.set_defaults(handler=cmd_init)
    sp = config_sub.add_parser("path", help="Show configuration file path")
    sp.set_defaults(handler=cmd_path)
    sp = config_sub.add_parser("show", help="Show current configuration")
    sp.set_defaults(handler=cmd_config_show)
    sp = config_sub.add_parser("reset", help="Reset configuration to vendor presets")
    sp.add_argument("-f", "--force", action="store_true", help="Confirm overwriting the configuration")
    sp.set_defaults(handler=cmd_config_reset)
    sp = config_sub.add_parser("check", help="Validate configuration completeness")
    sp.set_defaults(handler=cmd_config_check)

    _, project_sub = _add_group(sub, "project", "Manage the .modix/ project directory")
    for name, handler, help_text in (
        ("init", cmd_project_init, "Initialize a new modix project"),
        ("check", cmd_project_check, "Check dependencies for a modix project"),
        ("validate", cmd_project_validate, "Validate modix project configuration"),
        ("inspect", cmd_project_inspect, "Inspect modix project configuration"),
    ):
        sp = project_sub.add_parser(name, help=help_text)
        sp.add_argument("--dir", type=Path, default=Path("."), help="Project root (default: current directory)")
        sp.set_defaults(handler=handler)

    _, llm_sub = _add_group(sub, "llm", "Legacy alias for the vendor and model commands")
    _add_vendor_commands(llm_sub)
    _add_model_commands(llm_sub)
    return parser


def main(argv: Optional[List[str]] = None, ui: Optional[ModixUI] = None) -> int:
    """Main entry point."""
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    configure_logging(args.debug)

    ctx = CommandContext(
        store=ConfigManager(args.config),
        ui=ui or ModixUI(),
        claude_settings=args.claude_settings,
        output_format=args.format,
    )
    try:
        return args.handler(ctx, args)
    except ModixError as exc:
        logger.debug("command failed", exc_info=True)
        ctx.ui.error(str(exc))
        return 1


def run() -> None:
    raise SystemExit(main())
