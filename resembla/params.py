"""Parameter management from defaults, a JSON config file and the command line."""

from __future__ import annotations

import json
import re
import sys
from dataclasses import dataclass
from typing import Any, Iterable, Sequence

_INT_RE = re.compile(r"\s*([+-]?\d+)")
_FLOAT_RE = re.compile(
    r"\s*([+-]?(?:infinity|inf|nan|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?))",
    re.IGNORECASE,
)


def _to_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return f"{value:f}"
    return str(value)


def as_bool(value: str) -> bool:
    """Interpret a parameter string: empty, "0" and "false" (any case) are false."""
    if not value or value == "0":
        return False
    return value.lower() != "false"


def _as_int(value: str) -> int:
    match = _INT_RE.match(value)
    if match is None:
        raise ValueError(f"invalid integer value: {value!r}")
    return int(match.group(1))


def _as_float(value: str) -> float:
    match = _FLOAT_RE.match(value)
    if match is None:
        raise ValueError(f"invalid number value: {value!r}")
    return float(match.group(1))


_CONVERTERS = {str: str, int: _as_int, float: _as_float, bool: as_bool}


@dataclass
class Definition:
    """Declares one parameter, its default and where it may be set from."""

    name: str
    default: Any = ""
    json_path: Sequence[str] = ()
    long_option: str = ""
    short_option: str = ""
    description: str = ""
    required: bool = False

    def __post_init__(self) -> None:
        self.json_path = tuple(self.json_path)


class _CommandLine:
    """Parses options that each take a value."""

    def __init__(self, definitions: Iterable[Definition], prog: str) -> None:
        self.prog = prog
        self.options = [d for d in definitions if d.long_option]
        self.by_long = {d.long_option: d for d in self.options}
        self.by_short = {d.short_option: d for d in self.options if d.short_option}

    def parse(self, argv: Sequence[str]) -> tuple[dict[str, str], list[str], list[str]]:
        values: dict[str, str] = {}
        rest: list[str] = []
        errors: list[str] = []
        tokens = iter(argv)
        for token in tokens:
            if token == "--":
                rest.extend(tokens)
                break
            if token.startswith("--"):
                name, eq, value = token[2:].partition("=")
                definition = self.by_long.get(name)
                if definition is None:
                    errors.append(f"undefined option: --{name}")
                    continue
                if not eq:
                    value = next(tokens, None)
                    if value is None:
                        errors.append(f"option needs value: --{name}")
                        continue
                values[name] = value
            elif token.startswith("-") and len(token) > 1:
                short = token[1]
                definition = self.by_short.get(short)
                if definition is None:
                    errors.append(f"undefined short option: -{short}")
                    continue
                value = token[2:] if len(token) > 2 else next(tokens, None)
                if value is None:
                    errors.append(f"option needs value: -{short}")
                    continue
                values[definition.long_option] = value
            else:
                rest.append(token)
        for definition in self.options:
            if definition.required and definition.long_option not in values:
                errors.append(f"need option: --{definition.long_option}")
        return values, rest, errors

    def usage(self) -> str:
        lines = [f"usage: {self.prog} [options] ...", "options:"]
        for d in self.options:
            flag = f"-{d.short_option}, " if d.short_option else "    "
            note = "" if d.required else f" [={_to_text(d.default)}]"
            lines.append(f"  {flag}--{d.long_option:<20} {d.description}{note}")
        return "\n".join(lines) + "\n"


class ParameterManager:
    """Holds parameter values as strings, converted on demand."""

    def __init__(self, definitions: Iterable[Definition], prog: str = "resembla") -> None:
        self.definitions = tuple(definitions)
        self.prog = prog
        self.rest: list[str] = []
        self._params = {d.name: _to_text(d.default) for d in self.definitions}

    def load(self, argv: Sequence[str] | None = None, conf_option: str = "",
             min_unnamed_argc: int = 0) -> None:
        """Apply a config file named by ``conf_option`` and then the command line."""
        if argv is None:
            argv = sys.argv[1:]
        parser = _CommandLine(self.definitions, self.prog)
        values, rest, errors = parser.parse(argv)
        if errors:
            raise ValueError("".join(e + "\n" for e in errors) + parser.usage())

        if conf_option and conf_option in values:
            with open(values[conf_option], encoding="utf-8") as handle:
                config = json.load(handle)
            for definition in self.definitions:
                if definition.json_path:
                    self._load_json(config, definition)

        for definition in self.definitions:
            if definition.long_option and definition.long_option in values:
                self._params[definition.name] = values[definition.long_option]

        self.rest.extend(rest)
        if len(self.rest) < min_unnamed_argc:
            plural = "s" if min_unnamed_argc > 1 else ""
            raise ValueError(
                f"requires {min_unnamed_argc} unnamed option{plural}\n{parser.usage()}"
            )

    def _load_json(self, config: Any, definition: Definition) -> None:
        node = config
        for key in definition.json_path:
            if not isinstance(node, dict) or key not in node:
                return
            node = node[key]
        if isinstance(node, str):
            self._params[definition.name] = node
        else:
            self._params[definition.name] = json.dumps(
                node, ensure_ascii=False, separators=(",", ":")
            )

    def __getitem__(self, name: str) -> str:
        return self._params.setdefault(name, "")

    def __setitem__(self, name: str, value: Any) -> None:
        self._params[name] = _to_text(value)

    def get(self, name: str, kind: type = str) -> Any:
        """Return a parameter converted to ``kind`` (str, int, float or bool)."""
        try:
            converter = _CONVERTERS[kind]
        except KeyError:
            raise TypeError(f"unsupported parameter type: {kind!r}") from None
        return converter(self._params[name])