"""Declarative model of an IDE install."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Callable, Dict, List, Tuple

from oomphide.domain.ide.staleness import fingerprint
from oomphide.domain.ide.value_objects import IdeLayout, P2Model, TargetPlatform
from oomphide.utils.properties import PropsAction, props_producer

if TYPE_CHECKING:  # pragma: no cover
    from oomphide.adapters.eclipse_ini import EclipseIni

PROJECT_FILE = ".project"
DEFAULT_IDE_DIR = "build/oomph-ide"
WORKSPACE_SETTINGS = "workspace/.metadata/.plugins/org.eclipse.core.runtime/.settings/"

ContentProducer = Callable[[], bytes]
EclipseIniAction = Callable[["EclipseIni"], None]
TargetPlatformAction = Callable[[TargetPlatform], None]


class IdeConfigurationError(ValueError):
    """Raised when the model is configured inconsistently."""


class IdeModel:
    """Everything that determines the content of one IDE install.

    Configuration calls never touch the filesystem: generated files are
    registered as producers and only evaluated by the setup pipeline.
    """

    def __init__(self, project_root: Path, *, name: str | None = None, layout: IdeLayout | None = None) -> None:
        self._project_root = project_root.expanduser().resolve()
        self._name = name or self._project_root.name
        self._layout = layout or IdeLayout.native()
        self._p2 = P2Model()
        self._ide_dir: Path | str = DEFAULT_IDE_DIR + self._layout.app_suffix
        self._eclipse_ini: EclipseIniAction | None = None
        self._target_platform_name: str | None = None
        self._target_platform: TargetPlatformAction | None = None
        self._project_files: set[Path] = set()
        self._path_to_content: Dict[str, ContentProducer] = {}

    @property
    def name(self) -> str:
        return self._name

    @property
    def project_root(self) -> Path:
        return self._project_root

    @property
    def layout(self) -> IdeLayout:
        return self._layout

    @property
    def p2(self) -> P2Model:
        """The p2 model, so callers can add the features they'd like."""

        return self._p2

    @property
    def ide_dir(self) -> Path:
        path = Path(self._ide_dir).expanduser()
        if not path.is_absolute():
            path = self._project_root / path
        return path.resolve()

    def set_ide_dir(self, ide_dir: Path | str) -> None:
        self._ide_dir = ide_dir

    @property
    def eclipse_ini_action(self) -> EclipseIniAction | None:
        return self._eclipse_ini

    def eclipse_ini(self, action: EclipseIniAction) -> None:
        """Customises `eclipse.ini` after the workspace keys are set."""

        if self._eclipse_ini is not None:
            raise IdeConfigurationError("Can only set eclipse_ini once")
        self._eclipse_ini = action

    @property
    def target_platform_name(self) -> str | None:
        return self._target_platform_name

    def target_platform(self, name: str, action: TargetPlatformAction) -> None:
        if self._target_platform is not None:
            raise IdeConfigurationError("Can only set target_platform once")
        if not name:
            raise IdeConfigurationError("Target platform requires a name")
        self._target_platform_name = name
        self._target_platform = action

    def resolve_target_platform(self) -> TargetPlatform | None:
        if self._target_platform is None:
            return None
        return self._build_target_platform()

    def _build_target_platform(self) -> TargetPlatform:
        instance = TargetPlatform(root=self._project_root, name=self._target_platform_name)
        if self._target_platform is not None:
            self._target_platform(instance)
        return instance

    def add_project_file(self, project_file: Path | str) -> None:
        path = Path(project_file).expanduser()
        if path.name != PROJECT_FILE:
            raise IdeConfigurationError(f"Project file must be '{PROJECT_FILE}', was {path}")
        if not path.is_absolute():
            path = self._project_root / path
        self._project_files.add(path.resolve())

    def add_all_projects(self, root: Path | None = None) -> List[Path]:
        """Adds every `.project` found below ``root`` (default: the project root)."""

        base = (root or self._project_root).resolve()
        ide_dir = self.ide_dir
        found: List[Path] = []
        for candidate in sorted(base.rglob(PROJECT_FILE)):
            if not candidate.is_file() or ide_dir in candidate.parents:
                continue
            self.add_project_file(candidate)
            found.append(candidate)
        return found

    @property
    def project_files(self) -> Tuple[Path, ...]:
        return tuple(sorted(self._project_files))

    def config_prop(self, path: str, action: PropsAction) -> None:
        """Sets the given path within the ide directory to be a property file."""

        self._path_to_content[path] = props_producer(action)

    @property
    def generated_files(self) -> Dict[str, ContentProducer]:
        return dict(self._path_to_content)

    def classic_theme(self) -> None:
        def theme(props: Dict[str, str]) -> None:
            props["eclipse.preferences.version"] = "1"
            props["themeid"] = "org.eclipse.e4.ui.css.theme.e4_classic"

        self.config_prop(WORKSPACE_SETTINGS + "org.eclipse.e4.ui.css.swt.theme.prefs", theme)

    def nice_text(self, font_size: str | None = None) -> None:
        """Visible whitespace and a monospace font sized for the platform."""

        size = font_size or self._layout.win_mac_linux("9.0", "11.0", "10.0")
        font = self._layout.win_mac_linux("Consolas", "Monaco", "Monospace")

        def whitespace(props: Dict[str, str]) -> None:
            props["eclipse.preferences.version"] = "1"
            props["showCarriageReturn"] = "false"
            props["showLineFeed"] = "false"
            props["showWhitespaceCharacters"] = "true"

        def fonts(props: Dict[str, str]) -> None:
            props["eclipse.preferences.version"] = "1"
            props["org.eclipse.jface.textfont"] = (
                f"1|{font}|{size}|0|WINDOWS|1|-12|0|0|0|400|0|0|0|0|3|2|1|49|{font}"
            )

        self.config_prop(WORKSPACE_SETTINGS + "org.eclipse.ui.editors.prefs", whitespace)
        self.config_prop(WORKSPACE_SETTINGS + "org.eclipse.ui.workbench.prefs", fonts)

    def state(self) -> str:
        return fingerprint(self.ide_dir, self._build_target_platform(), self._p2, self.project_files)


__all__ = [
    "ContentProducer",
    "DEFAULT_IDE_DIR",
    "EclipseIniAction",
    "IdeConfigurationError",
    "IdeModel",
    "PROJECT_FILE",
    "TargetPlatformAction",
    "WORKSPACE_SETTINGS",
]
