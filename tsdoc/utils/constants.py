"""
Centralized UI constants for consistent styling across tsdoc.

Standard symbols and styles used in Rich console output (tree view, tables).
"""

SYMBOLS = {
    "sequence": "📋 ",
    "group": "📁 ",
    "step": "→ ",
    "subsequence": "🔗 ",
    "condition": "❓ ",
    "disabled": "[bold red]✗[/bold red] ",
}

STYLE = {
    "header": "bold cyan",
    "dim": "dim",
    "group": "magenta",
    "step": "cyan",
    "subsequence": "blue",
    "condition": "yellow",
    "disabled": "strike dim",
    "success": "green",
    "error": "red",
}
