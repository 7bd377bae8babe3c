"""Terminal UI: theme, renderers, toolbar status and the interactive REPL."""
