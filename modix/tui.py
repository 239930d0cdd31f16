"""Interactive dashboard over the same config store as the CLI."""

import shlex
import sys
from enum import Enum, auto
from pathlib import Path
from typing import Callable, Dict, Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.auto_suggest import AutoSuggestFromHistory
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.history import FileHistory
from rich.panel import Panel

from .agents import switch_agent
from .errors import ModixError, NotFoundError
from .project import PROJECT_DIR, validate_project

HELP_TEXT = """[bold cyan]Modix dashboard[/bold cyan]

[bold yellow]Commands:[/bold yellow]
[green]/status[/green]            Current model, vendor and agent
[green]/models[/green]            All models across vendors
[green]/vendors[/green]           Configured vendors
[green]/vendor <id>[/green]       Vendor details
[green]/switch <model>[/green]    Switch model and update Claude Code
[green]/agents[/green]            Configured agents
[green]/agent <name>[/green]      Switch the current agent
[green]/project[/green]           Validate .modix/ in the current directory
[green]/check[/green]             Configuration health check
[green]/help[/green]              Show this help

[yellow]Enter 'q', 'exit' or 'quit' to leave[/yellow]
"""

EXIT_WORDS = {"q", "quit", "exit", "/q", "/quit", "/exit"}


class TuiState(Enum):
    """States of the dashboard loop."""

    IDLE = auto()
    WAITING_FOR_INPUT = auto()
    DISPATCHING = auto()
    ERROR = auto()
    EXITING = auto()


class DashboardCommands:
    """Dispatches slash commands to handlers."""

    def __init__(self, ctx):
        self.ctx = ctx
        self.ui = ctx.ui
        self.handlers: Dict[str, Callable[[str], None]] = {
            "status": self._handle_status,
            "models": self._handle_models,
            "vendors": self._handle_vendors,
            "vendor": self._handle_vendor,
            "switch": self._handle_switch,
            "agents": self._handle_agents,
            "agent": self._handle_agent,
            "project": self._handle_project,
            "check": self._handle_check,
            "help": self._handle_help,
        }

    def execute(self, command_name: str, command_args: str) -> bool:
        """Execute a command by name. Returns False when command is unknown."""
        handler = self.handlers.get(command_name)
        if not handler:
            return False
        handler(command_args)
        return True

    def _handle_status(self, args: str) -> None:
        self.ui.display_status(self.ctx.store.load())

    def _handle_models(self, args: str) -> None:
        self.ui.display_models(self.ctx.store.load())

    def _handle_vendors(self, args: str) -> None:
        self.ui.display_vendors(self.ctx.store.load())

    def _handle_vendor(self, args: str) -> None:
        if not args:
            self.ui.display_message("Usage: /vendor <id>", style="yellow")
            return
        config = self.ctx.store.load()
        vendor_config = config.get_vendor(args)
        if vendor_config is None:
            raise NotFoundError(f"vendor '{args}' not found")
        self.ui.display_vendor(config, args, vendor_config)

    def _handle_switch(self, args: str) -> None:
        if not args:
            self.ui.display_message("Usage: /switch <model>", style="yellow")
            return
        from .cli import switch_model

        vendor = switch_model(self.ctx, args)
        self.ui.success(f"Switched to model: {args}@{vendor}")

    def _handle_agents(self, args: str) -> None:
        self.ui.display_agents(self.ctx.store.load())

    def _handle_agent(self, args: str) -> None:
        if not args:
            self.ui.display_message("Usage: /agent <name>", style="yellow")
            return
        config = self.ctx.store.load()
        agent_config = switch_agent(config, args)
        self.ctx.store.save(config)
        self.ui.success(f"Switched to agent: {args} ({agent_config.name})")

    def _handle_project(self, args: str) -> None:
        root = Path(args) if args else Path(".")
        if not (root / PROJECT_DIR).is_dir():
            self.ui.display_message("No .modix/ project here. Run 'modix project init' first.", style="yellow")
            return
        self.ui.display_validation(validate_project(root))

    def _handle_check(self, args: str) -> None:
        issues = self.ctx.store.load().health_issues()
        if not issues:
            self.ui.success("Health Check: All checks passed!")
            return
        for issue in issues:
            self.ui.warning(issue)

    def _handle_help(self, args: str) -> None:
        self.ui.display_message(Panel.fit(HELP_TEXT, border_style="blue"))


class ModixTUI:
    """Dashboard loop using a state machine, one command per render."""

    def __init__(self, ctx, session: Optional[PromptSession] = None):
        self.ctx = ctx
        self.ui = ctx.ui
        self.commands = DashboardCommands(ctx)
        self.session = session or self._create_prompt_session()
        self.current_state = TuiState.IDLE
        self.context = {"user_input": "", "error_message": ""}
        self.transitions = {
            TuiState.IDLE: self._handle_idle_state,
            TuiState.WAITING_FOR_INPUT: self._handle_waiting_state,
            TuiState.DISPATCHING: self._handle_dispatching_state,
            TuiState.ERROR: self._handle_error_state,
            TuiState.EXITING: lambda: TuiState.EXITING,
        }

    def _create_prompt_session(self) -> PromptSession:
        completer = WordCompleter([f"/{name}" for name in self.commands.handlers] + ["quit"], sentence=True)
        history_file = self.ctx.store.path.parent / "tui_history"
        history_file.parent.mkdir(parents=True, exist_ok=True)
        return PromptSession(
            history=FileHistory(str(history_file)),
            auto_suggest=AutoSuggestFromHistory(),
            completer=completer,
        )

    def run(self) -> None:
        """Run the state machine until exit state is reached."""
        while self.current_state != TuiState.EXITING:
            self.current_state = self.transitions[self.current_state]()

    def _handle_idle_state(self) -> TuiState:
        self.ui.display_status(self.ctx.store.load())
        self.ui.display_message("Type /help for commands.", style="dim")
        return TuiState.WAITING_FOR_INPUT

    def _handle_waiting_state(self) -> TuiState:
        try:
            text = self.session.prompt("modix> ").strip()
        except (EOFError, KeyboardInterrupt):
            return TuiState.EXITING

        if not text:
            return TuiState.WAITING_FOR_INPUT
        if text.lower() in EXIT_WORDS:
            return TuiState.EXITING
        self.context["user_input"] = text
        return TuiState.DISPATCHING

    def _handle_dispatching_state(self) -> TuiState:
        text = self.context["user_input"]
        if not text.startswith("/"):
            self.ui.display_message("Commands start with '/'. Type /help for a list.", style="yellow")
            return TuiState.WAITING_FOR_INPUT

        name, _, rest = text[1:].partition(" ")
        try:
            args = " ".join(shlex.split(rest))
            if not self.commands.execute(name.lower(), args):
                self.ui.display_message(f"Unknown command: /{name}", style="red")
        except (ModixError, ValueError) as exc:
            self.context["error_message"] = str(exc)
            return TuiState.ERROR
        return TuiState.WAITING_FOR_INPUT

    def _handle_error_state(self) -> TuiState:
        self.ui.error(self.context["error_message"])
        self.context["error_message"] = ""
        return TuiState.WAITING_FOR_INPUT


def run_tui(ctx) -> int:
    if not sys.stdin.isatty() or not sys.stdout.isatty():
        ctx.ui.error("the TUI requires a terminal. Use the CLI commands instead, e.g. 'modix list'.")
        return 1
    ModixTUI(ctx).run()
    return 0
