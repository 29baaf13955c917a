"""Reader/writer for the launcher's `eclipse.ini`."""

from __future__ import annotations

from pathlib import Path
from typing import List, Tuple

VMARGS = "-vmargs"


class EclipseIniError(RuntimeError):
    """Raised when an `eclipse.ini` cannot be interpreted."""


class EclipseIni:
    """Ordered launcher options followed by the JVM arguments.

    An option is a line starting with ``-``; when the next line does not
    start with ``-`` it is that option's value. Everything after
    ``-vmargs`` is passed through to the JVM untouched.
    """

    def __init__(self, options: List[Tuple[str, str | None]], vmargs: List[str]) -> None:
        self._options = options
        self._vmargs = vmargs

    @classmethod
    def parse(cls, text: str) -> "EclipseIni":
        lines = [line.strip() for line in text.splitlines() if line.strip()]
        options: List[Tuple[str, str | None]] = []
        vmargs: List[str] = []
        index = 0
        while index < len(lines):
            line = lines[index]
            if line == VMARGS:
                vmargs = lines[index + 1 :]
                break
            if not line.startswith("-"):
                raise EclipseIniError(f"Unexpected value without option: {line}")
            value = None
            if index + 1 < len(lines) and not lines[index + 1].startswith("-"):
                value = lines[index + 1]
                index += 1
            options.append((line, value))
            index += 1
        return cls(options, vmargs)

    @classmethod
    def parse_from(cls, path: Path) -> "EclipseIni":
        return cls.parse(path.read_text(encoding="utf-8"))

    def get(self, key: str) -> str | None:
        for option, value in self._options:
            if option == key:
                return value
        return None

    def set(self, key: str, value: str | Path | None = None) -> None:
        rendered = None if value is None else str(value)
        for index, (option, _) in enumerate(self._options):
            if option == key:
                self._options[index] = (key, rendered)
                return
        self._options.append((key, rendered))

    def remove(self, key: str) -> None:
        self._options = [(option, value) for option, value in self._options if option != key]

    @property
    def vmargs(self) -> List[str]:
        return list(self._vmargs)

    def add_vmarg(self, arg: str) -> None:
        if arg not in self._vmargs:
            self._vmargs.append(arg)

    def render(self) -> str:
        lines: List[str] = []
        for option, value in self._options:
            lines.append(option)
            if value is not None:
                lines.append(value)
        if self._vmargs:
            lines.append(VMARGS)
            lines.extend(self._vmargs)
        return "\n".join(lines) + "\n"

    def write_to(self, path: Path) -> None:
        path.write_text(self.render(), encoding="utf-8")


__all__ = ["EclipseIni", "EclipseIniError", "VMARGS"]
