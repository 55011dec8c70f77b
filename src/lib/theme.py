"""
Theme loader for micron rendering.

Themes provide the inline CSS applied to every rendered fragment and the
page colours of standalone preview documents. Each theme is a directory
containing a theme.yaml with:
  - styles: CSS declarations per fragment (bold, link, header1, ...)
  - page: colours and sizes of the standalone preview page
  - code: Pygments style used for source highlighting
"""

import yaml
from pathlib import Path
from typing import Dict, Any, Optional

from .errors import ThemeError


THEMES_DIR: Path = Path(__file__).parent.parent / "themes"
THEME_FILE: str = "theme.yaml"


class Theme:
    """
    A named set of fragment styles and page colours.

    Fragment styles come from the ``styles`` mapping of theme.yaml and are
    emitted as inline ``style`` attributes, so rendered fragments carry
    their look with them and need no stylesheet.
    """

    def __init__(self, theme_name: str = "default", themes_dir: Optional[Path] = None):
        """
        Args:
            theme_name: Directory name under the themes root ("default", "light")
            themes_dir: Alternative themes root, mostly for tests

        Raises:
            ThemeError: Unknown theme, or a theme.yaml that is absent or unreadable
        """
        self.name = theme_name
        self.themes_dir = Path(themes_dir) if themes_dir else THEMES_DIR
        self.theme_dir = self.themes_dir / theme_name
        self.config_path = self.theme_dir / THEME_FILE

        if not self.theme_dir.is_dir():
            raise ThemeError(f"Unknown theme '{theme_name}' (looked in {self.themes_dir})")
        if not self.config_path.is_file():
            raise ThemeError(f"Theme '{theme_name}' has no {THEME_FILE}")

        self.config = self._config_load()

    def _config_load(self) -> Dict[str, Any]:
        try:
            loaded: Any = yaml.safe_load(self.config_path.read_text(encoding='utf-8'))
        except yaml.YAMLError as e:
            raise ThemeError(f"Theme '{self.name}': invalid YAML: {e}") from e
        except OSError as e:
            raise ThemeError(f"Theme '{self.name}': cannot read {THEME_FILE}: {e}") from e

        loaded = {} if loaded is None else loaded
        if not isinstance(loaded, dict):
            raise ThemeError(f"Theme '{self.name}': {THEME_FILE} must be a mapping")
        return loaded

    def config_get(self, key: str, default: Any = None) -> Any:
        """
        Look up a dotted key, e.g. ``theme.config_get('page.background', '#000')``.

        Returns ``default`` as soon as any segment is missing.
        """
        node: Any = self.config
        for segment in key.split('.'):
            if not isinstance(node, dict) or segment not in node:
                return default
            node = node[segment]
        return node

    def style_get(self, fragment: str) -> str:
        """CSS declarations for a fragment, empty string when unstyled"""
        return str(self.config_get(f'styles.{fragment}', '') or '')

    def styleAttr_get(self, fragment: str, prefix: str = "") -> str:
        """
        Build a ``style="..."`` attribute for a fragment.

        Args:
            fragment: Fragment name in theme.yaml ``styles``
            prefix: Declarations placed before the theme's own

        Returns:
            Attribute text with a leading space, or "" when nothing to emit
        """
        declarations = " ".join(part for part in (prefix, self.style_get(fragment)) if part)
        return f' style="{declarations}"' if declarations else ''

    def pygmentsStyle_get(self) -> str:
        """Pygments style used by source highlighting ('monokai' when unset)"""
        return self.config_get('code.pygments_style', 'monokai')

    def __repr__(self) -> str:
        return f"Theme(name='{self.name}', path='{self.theme_dir}')"


def themes_listAvailable(themes_dir: Optional[Path] = None) -> list[str]:
    """Sorted names of theme directories that contain a theme.yaml"""
    root: Path = Path(themes_dir) if themes_dir else THEMES_DIR
    if not root.is_dir():
        return []
    return sorted(
        entry.name for entry in root.iterdir()
        if entry.is_dir() and (entry / THEME_FILE).is_file()
    )
