"""Typed filter-graph fragments rendered in a single serialization step."""

from typing import Optional, Tuple, Union
from pydantic import BaseModel

ArgValue = Union[bool, int, float, str]


def format_number(value: ArgValue) -> str:
    """Render a number the same way every time (``10.0`` becomes ``10``)."""
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return repr(round(value, 6))
    return str(value)


def quote(expr: str) -> str:
    """Wrap an expression in single quotes when it contains graph separators."""
    if any(ch in expr for ch in ",;[]") and not expr.startswith("'"):
        return f"'{expr}'"
    return expr


def escape_text(text: str) -> str:
    """
    Escape literal text for a single-quoted drawtext ``text`` argument.

    Args:
        text: Raw caption text

    Returns:
        Text safe to embed between single quotes inside a filter graph
    """
    return (
        text.replace("\\", "\\\\")
        .replace("'", "'\\''")
        .replace(":", "\\:")
        .replace("%", "\\%")
    )


class FilterNode(BaseModel):
    """One filter invocation: a name plus ordered ``key=value`` arguments."""

    model_config = {"frozen": True}

    name: str
    args: Tuple[Tuple[Optional[str], ArgValue], ...] = ()

    @classmethod
    def of(cls, name: str, *positional: ArgValue, **named: ArgValue) -> "FilterNode":
        """
        Build a node from positional and keyword arguments.

        Keyword arguments whose value is None are dropped, so optional
        parameters can be passed straight through.
        """
        args = tuple((None, value) for value in positional)
        args += tuple((key, value) for key, value in named.items() if value is not None)
        return cls(name=name, args=args)

    def render(self) -> str:
        if not self.args:
            return self.name
        parts = []
        for key, value in self.args:
            rendered = format_number(value)
            parts.append(rendered if key is None else f"{key}={rendered}")
        return f"{self.name}=" + ":".join(parts)


class FilterChain(BaseModel):
    """Comma-joined nodes reading from input labels and writing output labels."""

    model_config = {"frozen": True}

    inputs: Tuple[str, ...] = ()
    nodes: Tuple[FilterNode, ...]
    outputs: Tuple[str, ...] = ()

    def render(self) -> str:
        ins = "".join(f"[{label}]" for label in self.inputs)
        outs = "".join(f"[{label}]" for label in self.outputs)
        return ins + ",".join(node.render() for node in self.nodes) + outs


class FilterGraph(BaseModel):
    """Ordered chains joined with ``;`` into a ``-filter_complex`` value."""

    model_config = {"frozen": True}

    chains: Tuple[FilterChain, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.chains

    def render(self) -> str:
        return ";".join(chain.render() for chain in self.chains)
