"""Registration sequence produced by one discovery pass."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Sequence

from ..cache import DiscoveredDeclaration
from ..symbols import SymbolPath

DEFAULT_PLUGIN_NAME = "DiscoveryPlugin"


@dataclass(frozen=True, slots=True)
class Registration:
    path: SymbolPath
    stage: str | None = None

    @property
    def path_text(self) -> str:
        return str(self.path)


@dataclass(slots=True)
class RegistrationSink:
    """Ordered, non-deduplicating accumulator for a whole pass."""

    registrations: list[Registration] = field(default_factory=list)

    def register(self, declaration: DiscoveredDeclaration) -> Registration:
        registration = Registration(declaration.path, declaration.stage)
        self.registrations.append(registration)
        return registration

    def register_all(self, declarations: Iterable[DiscoveredDeclaration]) -> None:
        for declaration in declarations:
            self.register(declaration)

    def __len__(self) -> int:
        return len(self.registrations)


def render_registration(registration: Registration) -> str:
    if registration.stage is None:
        return f".add_system({registration.path_text}.system())"
    return f".add_system_to_stage({registration.stage}, {registration.path_text}.system())"


def render_plugin_impl(
    registrations: Sequence[Registration],
    plugin_name: str = DEFAULT_PLUGIN_NAME,
) -> str:
    """Render the ``impl Plugin`` block that registers every discovered system."""
    lines = [
        f"impl Plugin for {plugin_name} {{",
        "    fn build(&self, app: &mut App) {",
        "        app",
    ]
    lines.extend(f"            {render_registration(reg)}" for reg in registrations)
    lines[-1] += ";"
    lines.extend(["    }", "}"])
    return "\n".join(lines)
