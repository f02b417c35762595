"""Invocation logging — one Verbose line describing a call and its bound arguments."""

from __future__ import annotations

import dataclasses
import functools
import inspect
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Optional

from dualsink.models import AppendResult, Level
from dualsink.writer import LogWriter

logger = logging.getLogger(__name__)

REDACTED = "<redacted>"
UNSERIALIZABLE = "<unserializable>"
DEFAULT_DEPTH = 20

# Parameters never rendered, and parameters whose values are always hidden.
ALWAYS_EXCLUDE: frozenset[str] = frozenset()
ALWAYS_REDACT: frozenset[str] = frozenset({"AccessToken"})


@dataclass
class InvocationDescriptor:
    name: str
    version: str = ""
    arguments: list[tuple[str, Any]] = field(default_factory=list)

    @classmethod
    def from_call(cls, func: Callable, args: tuple = (), kwargs: Optional[dict] = None,
                  version: str = "", name: Optional[str] = None) -> InvocationDescriptor:
        """Describe a call from the arguments actually passed to *func*.

        Defaults are not applied, a leading ``self``/``cls`` is dropped and
        ``**kwargs`` are flattened in the order they were given.
        """
        signature = inspect.signature(func)
        bound = signature.bind(*args, **(kwargs or {}))
        first = next(iter(signature.parameters), None)

        arguments: list[tuple[str, Any]] = []
        for param_name, value in bound.arguments.items():
            param = signature.parameters[param_name]
            if param_name == first and param_name in ("self", "cls"):
                continue
            if param.kind is inspect.Parameter.VAR_KEYWORD:
                arguments.extend(value.items())
            elif param.kind is inspect.Parameter.VAR_POSITIONAL:
                arguments.append((param_name, list(value)))
            else:
                arguments.append((param_name, value))
        return cls(name=name or func.__qualname__, version=version, arguments=arguments)


def _limit_depth(value: Any, depth: int) -> Any:
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if depth <= 0:
        return str(value)
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        value = {f.name: getattr(value, f.name) for f in dataclasses.fields(value)}
    if isinstance(value, dict):
        return {str(k): _limit_depth(v, depth - 1) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [_limit_depth(v, depth - 1) for v in value]
    return str(value)


def serialize_value(value: Any, depth: int = DEFAULT_DEPTH) -> str:
    """Compact JSON rendering of *value*, nesting cut off at *depth* levels."""
    return json.dumps(_limit_depth(value, depth), separators=(",", ":"),
                      ensure_ascii=False, default=str)


def _folded(names: Optional[Iterable[str]]) -> set[str]:
    return {n.casefold() for n in names or ()}


def render_argument(name: str, value: Any, redact: bool = False,
                    depth: int = DEFAULT_DEPTH) -> str:
    if redact:
        return f"-{name} {REDACTED}"
    if isinstance(value, bool):
        return f"-{name}:${str(value).lower()}"
    try:
        rendered = serialize_value(value, depth)
    except Exception as exc:
        logger.debug("Could not serialize argument %s: %s", name, exc)
        rendered = UNSERIALIZABLE
    return f"-{name} {rendered}"


def render_arguments(descriptor: InvocationDescriptor,
                     redact: Optional[Iterable[str]] = None,
                     exclude: Optional[Iterable[str]] = None,
                     depth: int = DEFAULT_DEPTH,
                     always_redact: Iterable[str] = ALWAYS_REDACT,
                     always_exclude: Iterable[str] = ALWAYS_EXCLUDE) -> list[str]:
    """Render ``-name value`` tokens in parameter order.

    Exclusion beats redaction; names match case-insensitively.
    """
    excluded = _folded(always_exclude) | _folded(exclude)
    redacted = _folded(always_redact) | _folded(redact)

    tokens = []
    for name, value in descriptor.arguments:
        key = name.casefold()
        if key in excluded:
            continue
        tokens.append(render_argument(name, value, key in redacted, depth))
    return tokens


def format_invocation(descriptor: InvocationDescriptor, tokens: list[str]) -> str:
    return " ".join([f"[{descriptor.version}] Executing:", descriptor.name, *tokens])


class InvocationLogger:
    def __init__(self, writer: LogWriter, depth: int = DEFAULT_DEPTH,
                 always_exclude: Iterable[str] = ALWAYS_EXCLUDE,
                 always_redact: Iterable[str] = ALWAYS_REDACT):
        self._writer = writer
        self._depth = depth
        self._always_exclude = frozenset(always_exclude)
        self._always_redact = frozenset(always_redact)

    def render(self, descriptor: InvocationDescriptor,
               redact: Optional[Iterable[str]] = None,
               exclude: Optional[Iterable[str]] = None) -> str:
        tokens = render_arguments(
            descriptor, redact, exclude, self._depth,
            always_redact=self._always_redact,
            always_exclude=self._always_exclude,
        )
        return format_invocation(descriptor, tokens)

    def log_invocation(self, descriptor: InvocationDescriptor,
                       redact: Optional[Iterable[str]] = None,
                       exclude: Optional[Iterable[str]] = None) -> AppendResult:
        return self._writer.log([self.render(descriptor, redact, exclude)],
                                level=Level.VERBOSE, indent=0)


def logged(invocation_logger: InvocationLogger, version: str = "",
           redact: Iterable[str] = (), exclude: Iterable[str] = (),
           name: Optional[str] = None):
    """Decorator: log each call of the wrapped function before running it."""
    redact = tuple(redact)
    exclude = tuple(exclude)

    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            descriptor = InvocationDescriptor.from_call(func, args, kwargs, version, name)
            invocation_logger.log_invocation(descriptor, redact, exclude)
            return func(*args, **kwargs)
        return wrapper

    return decorator
