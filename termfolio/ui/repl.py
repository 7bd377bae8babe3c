"""Interactive REPL for termfolio - the primary interface."""

import asyncio

from prompt_toolkit import PromptSession
from prompt_toolkit.buffer import Buffer
from prompt_toolkit.document import Document
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.patch_stdout import patch_stdout
from prompt_toolkit.styles import Style
from rich.console import Console
from rich.text import Text

from termfolio.config import Config
from termfolio.engine.session import (
    EventKind,
    SessionController,
    SessionEvent,
    create_session,
)
from termfolio.services.portfolio import PortfolioSource
from termfolio.ui.render import render_entry, render_payload
from termfolio.ui.status import (
    SYMBOLS,
    credits_style,
    dropdown_fragments,
    format_credits,
    format_thinking,
)
from termfolio.ui.theme import PROMPT_STYLE, RICH_THEME

# Use themed console
console = Console(theme=RICH_THEME)


# Keybinding action flags (set by keybindings, checked in loop)
class KeybindingAction:
    """Store keybinding action to execute."""

    action: str | None = None


_kb_action = KeybindingAction()


def _sync_buffer(buf: Buffer, controller: SessionController) -> None:
    """Mirror the controller's input into the prompt buffer, cursor at the end."""
    if buf.text != controller.input:
        buf.document = Document(controller.input, cursor_position=len(controller.input))


def _create_keybindings(controller: SessionController, config: Config) -> KeyBindings:
    """Create prompt_toolkit keybindings that drive the session controller."""
    kb = KeyBindings()
    keys = {name: key.replace("ctrl+", "c-") for name, key in config.keybindings.items()}

    @kb.add("up")
    def _(event):
        """Up: move the dropdown highlight, or recall an older command."""
        controller.history_previous()
        _sync_buffer(event.app.current_buffer, controller)

    @kb.add("down")
    def _(event):
        """Down: move the dropdown highlight, or recall a newer command."""
        controller.history_next()
        _sync_buffer(event.app.current_buffer, controller)

    @kb.add("tab")
    def _(event):
        """Tab: accept the highlighted (or first) suggestion."""
        if controller.accept_autocomplete():
            _sync_buffer(event.app.current_buffer, controller)

    @kb.add(keys["run_equivalent"])
    def _(event):
        """Run the command suggested by the latest AI answer."""
        _kb_action.action = "equivalent"
        event.app.exit(result="")

    @kb.add(keys["clear_screen"])
    def _(event):
        """Clear the transcript."""
        _kb_action.action = "clear"
        event.app.exit(result="")

    return kb


def _get_prompt_session(controller: SessionController, config: Config) -> PromptSession:
    """Create a prompt_toolkit session whose buffer, arrows and toolbar follow the controller."""

    def toolbar():
        fragments = dropdown_fragments(controller.matches, controller.autocomplete_index)

        thinking_id = controller.thinking_entry_id
        if thinking_id is not None:
            entry = controller.get_entry(thinking_id)
            if entry:
                fragments.append(("class:thinking", f" {format_thinking(entry.text)}\n"))

        fragments.append(("class:disclaimer", " ⚠ AI can make mistakes. Use / for command suggestions. "))
        fragments.append(
            (credits_style(controller.credits), format_credits(controller.credits, controller.credit_limit))
        )
        return fragments

    session = PromptSession(
        key_bindings=_create_keybindings(controller, config),
        bottom_toolbar=toolbar,
        style=Style.from_dict(PROMPT_STYLE),
    )

    def on_text_changed(buf: Buffer) -> None:
        if buf.text != controller.input:
            controller.set_input(buf.text)

    session.default_buffer.on_text_changed += on_text_changed
    return session


def _show_welcome() -> None:
    """Display welcome banner."""
    hints = """[heading]termfolio[/heading] [muted]— a portfolio you can ls[/muted]

[bold]Quick Start:[/bold]
  [command]help[/command]             All commands
  [command]skills[/command]           Technical skills by category
  [command]projects --ls[/command]    Project names only
  [command]curl resume.pdf[/command]  Open the resume

[muted]Or just ask: "what kind of projects have you built?"
/ for suggestions • ↑↓ history • Tab complete • Ctrl+E run suggested command • Ctrl+C exit[/muted]
"""
    console.print(hints)


def _make_printer(controller: SessionController, prompt_session: PromptSession):
    """Listener that prints session events above the prompt."""

    def on_event(event: SessionEvent) -> None:
        entry = event.entry

        match event.kind:
            case EventKind.APPENDED if entry is not None:
                console.print(render_entry(entry))
            case EventKind.RESOLVED if entry is not None:
                console.print(Text(f"{SYMBOLS['ai']} re: {entry.text}", style="muted"))
                console.print(render_payload(entry.payload, entry.text))
            case EventKind.CLEARED:
                console.clear()
            case EventKind.DATA_LOADED:
                name = controller.data.personal.name if controller.data else ""
                console.print(f"[success]✓[/success] [muted]Portfolio loaded: {name}[/muted]\n")
            case _:
                pass

        prompt_session.app.invalidate()

    return on_event


def run_repl(config: Config, skip_welcome: bool = False) -> None:
    """Run the interactive REPL loop."""
    asyncio.run(_async_repl(config, skip_welcome))


async def _async_repl(config: Config, skip_welcome: bool = False) -> None:
    """Async REPL implementation."""
    controller, source = create_session(config)
    prompt_session = _get_prompt_session(controller, config)
    controller.subscribe(_make_printer(controller, prompt_session))

    if not skip_welcome and config.show_welcome:
        _show_welcome()

    await _repl_loop(controller, source, prompt_session)


async def _load_portfolio(controller: SessionController, source: PortfolioSource) -> None:
    if not await controller.load_data(source):
        console.print(
            "[error]✗ Could not load portfolio data.[/error] "
            "[muted]Commands will show a loading notice; see --debug logs.[/muted]\n"
        )


async def _repl_loop(
    controller: SessionController,
    source: PortfolioSource,
    prompt_session: PromptSession,
) -> None:
    """Core REPL loop."""
    loader = asyncio.create_task(_load_portfolio(controller, source))

    with patch_stdout(raw=True):
        while True:
            try:
                # Reset keybinding action
                _kb_action.action = None

                text = await prompt_session.prompt_async([("class:prompt", f"{SYMBOLS['prompt']} ")])

                if _kb_action.action:
                    action = _kb_action.action
                    _kb_action.action = None

                    if action == "equivalent":
                        entry = controller.latest_equivalent()
                        if entry:
                            controller.run_equivalent(entry.id)
                        else:
                            console.print("[muted]No suggested command yet. Ask a question first.[/muted]")
                    elif action == "clear":
                        controller.clear()
                    continue

            except (KeyboardInterrupt, EOFError):
                console.print("\n[muted]Goodbye![/muted]")
                break

            # Normally mirrored already; setting it again would drop the highlight
            if text != controller.input:
                controller.set_input(text)
            controller.submit()

    if not loader.done():
        loader.cancel()
