from __future__ import annotations

"""Step tree helpers (no side-effects).

iter_nodes(sequence) yields (depth, node) depth-first.
build_rich_tree(sequence) returns a Rich *Tree* ready for printing.
"""
from dataclasses import dataclass
from typing import Iterator, Sequence, Tuple

from rich.markup import escape
from rich.tree import Tree

from tsdoc.core.conditions import ConditionRenderer
from tsdoc.core.markup import convert
from tsdoc.core.nodes import Group, StepNode, SubTaskSequence, TaskSequence
from tsdoc.utils.constants import STYLE, SYMBOLS

__all__ = [
    "RenderOptions",
    "iter_nodes",
    "build_rich_tree",
]


@dataclass
class RenderOptions:  # noqa: D101
    icons_on: bool = True
    show_conditions: bool = False
    max_children: int | None = None  # collapse long groups ("+N more")


# --------------------------------------------------------------------------- #
# Core traverser
# --------------------------------------------------------------------------- #

def iter_nodes(sequence: TaskSequence) -> Iterator[Tuple[int, StepNode]]:  # noqa: D401
    """Yield *(depth, node)* for every step/group in *sequence* (DFS)."""

    def _walk(nodes: Sequence[StepNode], depth: int):
        for node in nodes:
            yield depth, node
            if isinstance(node, Group):
                yield from _walk(node.children, depth + 1)

    yield from _walk(sequence.steps, 0)


# --------------------------------------------------------------------------- #
# Rich tree builder
# --------------------------------------------------------------------------- #

def _label(node: StepNode, opts: RenderOptions) -> str:
    if isinstance(node, Group):
        kind = "group"
    elif isinstance(node, SubTaskSequence):
        kind = "subsequence"
    else:
        kind = "step"
    icon = SYMBOLS[kind] if opts.icons_on else ""
    style = STYLE["disabled"] if node.disabled else STYLE[kind]
    label = f"{icon}[{style}]{escape(node.name)}[/]"
    if isinstance(node, SubTaskSequence):
        label += f" [dim]→ {escape(node.ts_name)} ({escape(node.ts_package_id)})[/]"
    elif not isinstance(node, Group) and node.action:
        label += f" [dim]({escape(node.action)})[/]"
    if not isinstance(node, Group) and node.type:
        label += " [dim]" + escape(f"[{_short_type(node.type)}]") + "[/]"
    if node.disabled:
        flag = SYMBOLS["disabled"] if opts.icons_on else ""
        label = f"{flag}{label} [dim]disabled[/]"
    return label


def _short_type(type_name: str) -> str:
    """SMS_TaskSequence_RunCommandLineAction -> RunCommandLine"""
    name = type_name
    if name.startswith("SMS_TaskSequence_"):
        name = name[len("SMS_TaskSequence_"):]
    if name.endswith("Action") and len(name) > len("Action"):
        name = name[: -len("Action")]
    return name


def build_rich_tree(sequence: TaskSequence, opts: RenderOptions | None = None) -> Tree:  # noqa: D401
    """Return a *rich.tree.Tree* visualisation of *sequence*."""
    opts = opts or RenderOptions()
    icon = SYMBOLS["sequence"] if opts.icons_on else ""
    tree = Tree(f"{icon}[{STYLE['header']}]{escape(sequence.name)}[/]")
    conditions = ConditionRenderer()
    cond_icon = SYMBOLS["condition"] if opts.icons_on else ""

    def _add(parent: Tree, nodes: Sequence[StepNode]):
        shown = nodes if opts.max_children is None else nodes[: opts.max_children]
        for node in shown:
            branch = parent.add(_label(node, opts))
            if opts.show_conditions and node.condition is not None:
                for line in conditions.render(node.condition):
                    text = convert(line, plain=True).replace("\t", "  ")
                    branch.add(f"{cond_icon}[{STYLE['condition']}]{escape(text)}[/]")
            if isinstance(node, Group):
                _add(branch, node.children)
        hidden = len(nodes) - len(shown)
        if hidden > 0:
            parent.add(f"[dim]+{hidden} more…[/]")

    _add(tree, sequence.steps)
    return tree
