"""Terminal theme and styling for termfolio."""

from rich.theme import Theme

from termfolio.engine.output import Tone

# Color palette - warm terminal on deep indigo (dark mode)
COLORS = {
    # Prompt
    "chevron": "#e87040",  # Orange prompt chevron
    "cmd_text": "#e8e0d4",  # Typed command text
    "output_text": "#8a8a9a",  # Regular output
    # Accents
    "orange": "#e87040",
    "purple": "#c084fc",
    "green": "#4ade80",
    "red": "#f87171",
    "cyan": "#67e8f9",
    # Text colors
    "text_muted": "#5a5a7a",
    "text_bright": "#e8e0d4",
    # Backgrounds
    "bg": "#16162a",
    "bg_panel": "#1e1e3a",
    "bg_highlight": "#2d2d50",
    "bg_ai": "#1c1c36",
    "border": "#2d2d50",
}


# Rich theme for console
RICH_THEME = Theme(
    {
        # Base styles
        "info": f"{COLORS['cyan']}",
        "warning": f"{COLORS['orange']}",
        "error": f"{COLORS['red']}",
        "success": f"{COLORS['green']}",
        # Output tones
        "plain": f"{COLORS['output_text']}",
        "muted": f"{COLORS['text_muted']}",
        "bright": f"{COLORS['text_bright']}",
        "heading": f"bold {COLORS['orange']}",
        "project": f"bold {COLORS['purple']}",
        "hint": f"italic {COLORS['output_text']}",
        "link": f"underline {COLORS['cyan']}",
        "art": f"{COLORS['orange']}",
        # UI elements
        "prompt.chevron": f"bold {COLORS['chevron']}",
        "prompt.text": f"{COLORS['cmd_text']}",
        "label": f"bold {COLORS['green']}",
        "bullet": f"{COLORS['green']}",
        "tag": f"{COLORS['purple']} on {COLORS['bg_panel']}",
        "command": f"bold {COLORS['green']}",
        # AI bubble
        "ai.star": f"bold {COLORS['orange']}",
        "ai.text": f"{COLORS['cmd_text']}",
        "ai.error": f"bold {COLORS['red']}",
    }
)

# Output tone -> Rich theme style
TONE_STYLES: dict[Tone, str] = {
    Tone.PLAIN: "plain",
    Tone.MUTED: "muted",
    Tone.BRIGHT: "bright",
    Tone.HEADING: "heading",
    Tone.PROJECT: "project",
    Tone.SUCCESS: "success",
    Tone.ERROR: "error",
    Tone.HINT: "hint",
    Tone.LINK: "link",
    Tone.ART: "art",
}


# prompt_toolkit style for input, dropdown and toolbar
PROMPT_STYLE = {
    "prompt": f"bold {COLORS['chevron']}",
    "bottom-toolbar": f"noreverse bg:{COLORS['bg']} {COLORS['output_text']}",
    "dropdown": f"bg:{COLORS['bg_panel']} {COLORS['cmd_text']}",
    "dropdown.current": f"bg:{COLORS['bg_highlight']} {COLORS['text_bright']} bold",
    "dropdown.meta": f"bg:{COLORS['bg_panel']} {COLORS['text_muted']} italic",
    "credits.ok": f"bold {COLORS['green']}",
    "credits.low": f"bold {COLORS['orange']}",
    "credits.out": f"bold {COLORS['red']}",
    "thinking": f"italic {COLORS['orange']}",
    "disclaimer": "#f8a0a0",
}
