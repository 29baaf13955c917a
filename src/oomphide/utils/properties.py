"""Minimal `.properties` / `.prefs` rendering."""

from __future__ import annotations

from typing import Callable, Dict, Mapping

PropsAction = Callable[[Dict[str, str]], None]

_ESCAPES = {"\\": "\\\\", "\n": "\\n", "\r": "\\r", "\t": "\\t", "=": "\\=", ":": "\\:", "#": "\\#", "!": "\\!"}


def _escape(text: str, *, is_key: bool) -> str:
    out = []
    for index, char in enumerate(text):
        if char == " " and (is_key or index == 0):
            out.append("\\ ")
        elif char in _ESCAPES:
            out.append(_ESCAPES[char])
        else:
            out.append(char)
    return "".join(out)


def render_properties(props: Mapping[str, str]) -> bytes:
    lines = [f"{_escape(key, is_key=True)}={_escape(str(props[key]), is_key=False)}" for key in sorted(props)]
    return ("\n".join(lines) + "\n").encode("utf-8")


def props_producer(action: PropsAction) -> Callable[[], bytes]:
    """Wrap a mapping-populating action into a lazy content producer."""

    def produce() -> bytes:
        props: Dict[str, str] = {}
        action(props)
        return render_properties(props)

    return produce


__all__ = ["PropsAction", "props_producer", "render_properties"]
