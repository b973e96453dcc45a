"""Single-keystroke shortcut menus over a hierarchical account taxonomy.

``build_shortcuts`` is a pure function: the same accounts and reserved
controls always produce the same key assignment. Account names are split on
the separator (``Expenses:Travel`` → ``Expenses`` → ``Travel``) and each
level with children becomes a nested :class:`ShortcutContext`. Every context
carries the reserved control keys.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum

from .logging_setup import get_logger

_logger = get_logger("ledger_classify.shortcuts")

ROOT_CONTEXT = "default"
_ASSIGNABLE = "abcdefghijklmnopqrstuvwxyz0123456789"


class Control(Enum):
    BACK = ".back"
    SKIP = ".skip"
    QUIT = ".quit"
    SHOW_SAME_AMOUNT = ".show same amount"
    SHOW_SAME_PAYEE = ".show same payee"
    SHOW_ALL = ".show all"


DEFAULT_CONTROLS: Mapping[str, Control] = {
    "b": Control.BACK,
    "s": Control.SKIP,
    "q": Control.QUIT,
    "a": Control.SHOW_ALL,
    "p": Control.SHOW_SAME_PAYEE,
    "m": Control.SHOW_SAME_AMOUNT,
}


@dataclass(frozen=True, slots=True)
class Binding:
    """What a key maps to: a control action, or a label (maybe with children)."""

    key: str
    control: Control | None = None
    label: str | None = None
    child: ShortcutContext | None = None

    @property
    def is_control(self) -> bool:
        return self.control is not None


@dataclass(frozen=True, slots=True)
class ShortcutContext:
    name: str
    bindings: dict[str, Binding] = field(default_factory=dict)

    def labels(self) -> list[Binding]:
        return [b for b in self.bindings.values() if not b.is_control]

    def maps_to(self, ch: str) -> Binding | None:
        return self.bindings.get(ch)


# ----------------------------------------------------------------------------
# Construction
# ----------------------------------------------------------------------------

type _Tree = dict[str, _Tree]


def _taxonomy(accounts: Iterable[str], separator: str) -> _Tree:
    root: _Tree = {}
    for account in accounts:
        node = root
        for part in (p.strip() for p in account.split(separator)):
            if not part:
                continue
            node = node.setdefault(part, {})
    return root


def _pick_key(label: str, used: set[str]) -> str | None:
    for ch in label.lower():
        if ch in _ASSIGNABLE and ch not in used:
            return ch
    for ch in _ASSIGNABLE:
        if ch not in used:
            return ch
    return None


def _build_context(name: str, tree: _Tree, controls: Mapping[str, Control]) -> ShortcutContext:
    bindings: dict[str, Binding] = {}
    used = set(controls)
    for label, children in tree.items():
        key = _pick_key(label, used)
        if key is None:
            _logger.debug("no free key for %r in context %r", label, name)
            continue
        used.add(key)
        child = _build_context(label, children, controls) if children else None
        bindings[key] = Binding(key=key, label=label, child=child)
    for key, control in controls.items():
        bindings[key] = Binding(key=key, control=control)
    return ShortcutContext(name=name, bindings=bindings)


def build_shortcuts(
    accounts: Iterable[str],
    *,
    controls: Mapping[str, Control] = DEFAULT_CONTROLS,
    separator: str = ":",
) -> ShortcutContext:
    """Return the root (``"default"``) context for ``accounts``.

    Labels take the first unused letter or digit of their own name, then the
    first unused character of ``a-z0-9``; labels left without a key are
    omitted from the menu. Assignment follows first appearance order.
    """

    return _build_context(ROOT_CONTEXT, _taxonomy(accounts, separator), controls)


# ----------------------------------------------------------------------------
# Rendering
# ----------------------------------------------------------------------------


def render(context: ShortcutContext) -> str:
    """Return a printable menu: one label per line, then the control keys."""

    lines = []
    for b in context.labels():
        more = " ..." if b.child is not None else ""
        lines.append(f"  [{b.key}] {b.label}{more}")
    controls = [b for b in context.bindings.values() if b.is_control]
    if controls:
        lines.append("  " + "  ".join(f"{b.key}:{b.control.value.lstrip('.')}" for b in controls))
    return "\n".join(lines)


__all__ = [
    "ROOT_CONTEXT",
    "Control",
    "DEFAULT_CONTROLS",
    "Binding",
    "ShortcutContext",
    "build_shortcuts",
    "render",
]
