import json
from typing import Any, Dict, Iterable, List, Optional, Tuple

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from .agents import FAIL, OK, WARN
from .config import ModixConfig, VendorConfig

CHECK_MARKS = {
    OK: "[bold green]✓[/]",
    WARN: "[bold yellow]⚠[/]",
    FAIL: "[bold red]✗[/]",
}


def mask_api_key(key: str) -> str:
    if not key:
        return "[Not set]"
    if len(key) <= 8:
        return "***"
    return f"{key[:4]}...{key[-4:]}"


class ModixUI:
    """Rich rendering shared by the command line and the TUI."""

    def __init__(self, console: Optional[Console] = None, err_console: Optional[Console] = None):
        self.console = console or Console()
        self.err_console = err_console or Console(stderr=True)

    # -- plain messages -----------------------------------------------------

    def display_message(self, content: Any, style: Optional[str] = None, end: str = "\n") -> None:
        # Plain strings are shown verbatim; values may contain brackets.
        self.console.print(content, style=style, end=end, markup=False)

    def success(self, message: str) -> None:
        self.console.print(f"{CHECK_MARKS[OK]} {escape(message)}")

    def warning(self, message: str) -> None:
        self.console.print(f"{CHECK_MARKS[WARN]} {escape(message)}")

    def info(self, message: str) -> None:
        self.console.print(message, style="dim")

    def error(self, message: str) -> None:
        self.err_console.print(f"Error: {message}", style="bold red", markup=False)

    def display_json(self, data: Any, title: str = "") -> None:
        text = json.dumps(data, ensure_ascii=False, indent=2, default=str)
        if title:
            self.console.print(Panel(Syntax(text, "json", theme="monokai"), title=title, border_style="blue"))
        else:
            # Machine-readable output stays free of markup and wrapping.
            self.console.print(text, markup=False, highlight=False, soft_wrap=True)

    def display_checks(self, results: Iterable[Tuple[str, str]]) -> None:
        for level, message in results:
            self.console.print(f"{CHECK_MARKS[level]} {escape(message)}")

    # -- config views -------------------------------------------------------

    def display_models(self, config: ModixConfig) -> None:
        table = Table(title="Models", title_style="bold cyan", header_style="bold magenta")
        table.add_column("Model", style="bold")
        table.add_column("Company")
        table.add_column("Vendor")
        table.add_column("Endpoint", justify="center")
        table.add_column("API Key", justify="center")

        for info in config.model_infos():
            if info.vendor.lower() == "anthropic":
                endpoint = api_key = "[blue]-[/blue]"
            else:
                endpoint = "[green]Y[/green]" if info.has_endpoint else "[red]N[/red]"
                api_key = "[green]Y[/green]" if info.has_api_key else "[red]N[/red]"
            is_current = info.vendor == config.current_vendor and info.model == config.current_model
            table.add_row(
                escape(f"{info.model} (current)" if is_current else info.model),
                escape(info.company),
                escape(info.vendor),
                endpoint,
                api_key,
                style="yellow" if is_current else None,
            )
        self.console.print(table)

        infos = config.model_infos()
        configured = sum(1 for info in infos if info.has_api_key and info.has_endpoint)
        current = config.get_current_model()
        current_text = escape(f"{current[0]}@{config.current_vendor}") if current else "None"
        self.console.print(f"Total models: [yellow]{len(infos)}[/yellow]")
        self.console.print(f"Configured models: [green]{configured}[/green]")
        self.console.print(f"Current model: [yellow]{current_text}[/yellow]")

    def display_vendors(self, config: ModixConfig) -> None:
        if not config.vendors:
            self.display_message("No vendors configured", style="yellow")
            return
        table = Table(title="Vendors", title_style="bold cyan", header_style="bold magenta")
        table.add_column("Vendor", style="bold")
        table.add_column("Company")
        table.add_column("Endpoint")
        table.add_column("Models", justify="right")
        for vendor, vendor_config in sorted(config.vendors.items()):
            table.add_row(
                escape(vendor),
                escape(vendor_config.company),
                escape(vendor_config.api_endpoint or "[Not set]"),
                str(len(vendor_config.models)),
                style="yellow" if vendor == config.current_vendor else None,
            )
        self.console.print(table)

    def display_vendor(self, config: ModixConfig, vendor: str, vendor_config: VendorConfig) -> None:
        lines = [
            f"[bold]Vendor:[/bold] {escape(vendor)}",
            f"[bold]Company:[/bold] {escape(vendor_config.company)}",
            f"[bold]API Endpoint:[/bold] {escape(vendor_config.api_endpoint or '[Not set]')}",
            f"[bold]API Key:[/bold] {escape(vendor_config.api_key or '[Not set]')}",
            "",
            "[bold]Models:[/bold]",
        ]
        for model in vendor_config.models:
            marker = " (current)" if vendor == config.current_vendor and model == config.current_model else ""
            lines.append(f"  - {escape(model)}{marker}")
        title = f"[bold cyan]{escape(vendor)}[/bold cyan]"
        self.console.print(Panel.fit("\n".join(lines), title=title, border_style="blue"))

    def display_status(self, config: ModixConfig) -> None:
        current = config.get_current_model()
        if current is None:
            self.display_message("No current model configured", style="bold red")
            return
        model, vendor_config = current
        lines = [
            f"[bold]Model:[/bold] [cyan]{escape(model)}[/cyan]",
            f"[bold]Vendor:[/bold] [cyan]{escape(config.current_vendor)}[/cyan]",
            f"[bold]Company:[/bold] {escape(vendor_config.company)}",
            f"[bold]API Endpoint:[/bold] {escape(vendor_config.api_endpoint or '[Not set]')}",
            f"[bold]API Key:[/bold] {escape(mask_api_key(vendor_config.api_key))}",
        ]
        if config.current_agent:
            lines.append(f"[bold]Agent:[/bold] {escape(config.current_agent)}")
        self.console.print(
            Panel.fit("\n".join(lines), title="[bold yellow]Current model status[/bold yellow]", border_style="blue")
        )

    def display_config(self, config: ModixConfig) -> None:
        self.display_message("=== Modix Configuration ===", style="bold cyan")
        self.display_message(f"Current model: {config.current_model}")
        self.display_message(f"Current vendor: {config.current_vendor}")
        self.display_message(f"Current agent: {config.current_agent or 'None'}")
        self.display_message(f"Default: {config.default_model}@{config.default_vendor}")
        self.display_vendors(config)
        self.display_agents(config)

    def display_agents(self, config: ModixConfig, rows: Optional[List[Tuple[str, ...]]] = None) -> None:
        if not config.agents:
            self.display_message("No agents configured", style="yellow")
            return
        table = Table(title="Agents", title_style="bold cyan", header_style="bold magenta")
        if rows is None:
            table.add_column("Agent", style="bold")
            table.add_column("Name")
            table.add_column("Provider")
            table.add_column("Status")
            for agent, agent_config in sorted(config.agents.items()):
                status = "Enabled" if agent_config.enabled else "Disabled"
                table.add_row(escape(agent), escape(agent_config.name), escape(agent_config.provider), status)
        else:
            for column in ("Agent", "Provider", "LLM Model", "Status", "Config"):
                table.add_column(column)
            for row in rows:
                style = "yellow" if row[0] == config.current_agent else None
                table.add_row(*(escape(cell) for cell in row), style=style)
        self.console.print(table)

    # -- project views ------------------------------------------------------

    def display_validation(self, results: List[Dict[str, Any]]) -> None:
        self.display_message("Configuration Validation Results:", style="bold")
        for result in results:
            if result["valid"]:
                self.console.print(f"{CHECK_MARKS[OK]} {escape(result['filename'])}")
            else:
                self.console.print(f"{CHECK_MARKS[FAIL]} {escape(result['filename'])}: {escape(result['error'])}")
        if all(result["valid"] for result in results):
            self.success("All configuration files are valid")
        else:
            self.console.print(f"{CHECK_MARKS[FAIL]} Some configuration files have errors")

    def display_dependencies(self, results: List[Dict[str, Any]]) -> None:
        table = Table(title="Dependency Check Results", title_style="bold cyan", header_style="bold magenta")
        table.add_column("", width=2)
        table.add_column("Tool", style="bold")
        table.add_column("Description")
        table.add_column("Version")
        for result in results:
            mark = CHECK_MARKS[OK] if result["installed"] else CHECK_MARKS[FAIL]
            version = result["version"] if result["installed"] else "not installed"
            table.add_row(mark, escape(result["name"]), escape(result["description"]), escape(version))
        self.console.print(table)
        if all(result["installed"] for result in results):
            self.success("All required tools are installed")
        else:
            self.console.print(f"{CHECK_MARKS[FAIL]} Some required tools are missing")

    def display_project(self, contents: Dict[str, Any]) -> None:
        version = contents.get("version", {})
        self.display_message("Modix Project Inspection", style="bold cyan")
        self.display_message(
            f"Version: {version.get('version')} (config {version.get('configVersion')}), "
            f"created {version.get('createdAt')}"
        )
        for name in ("shells", "brains", "agents", "runtimes", "projects"):
            entries = contents.get(name, {}).get(name) or {}
            self.display_message(f"{name.capitalize()}: {len(entries)}", style="bold")
            for entry_name, entry in entries.items():
                self.display_message(f"  {entry_name}: {json.dumps(entry, ensure_ascii=False)}", style="dim")
        state = contents.get("state", {})
        self.display_message(f"Last Updated: {state.get('lastUpdated')}")
        for key, value in (state.get("counts") or {}).items():
            self.display_message(f"  {key}: {value}")
