"""Upstream path templates with named placeholders."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from string import Formatter
from typing import Any
from urllib.parse import quote

from core.exceptions import ConfigurationError, MissingParameterError


@dataclass(frozen=True)
class PathTemplate:
    """A path such as ``/restaurants/{restaurant_id}/menu/items/{item_id}``."""

    template: str
    fields: tuple[str, ...] = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", self._parse(self.template))

    def resolve(self, params: Mapping[str, Any]) -> str:
        """Substitute every placeholder, URL-quoting the values."""
        values = {}
        for name in self.fields:
            value = params.get(name)
            if value is None or not str(value).strip():
                raise MissingParameterError(name)
            values[name] = quote(str(value), safe="")
        return self.template.format(**values)

    @staticmethod
    def _parse(template: str) -> tuple[str, ...]:
        if not template.startswith("/"):
            raise ConfigurationError(f"Path template must start with '/': {template!r}")
        names: list[str] = []
        for _, name, spec, conversion in Formatter().parse(template):
            if name is None:
                continue
            if not name.isidentifier() or spec or conversion:
                raise ConfigurationError(f"Unsupported placeholder {{{name}}} in {template!r}")
            if name not in names:
                names.append(name)
        return tuple(names)
