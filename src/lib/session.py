"""
Editor session: content, undo history, persistence and preview

An EditorSession holds what the page composer keeps per open page: the
micron source, the cursor, a bounded undo history and the last good
preview. Content is persisted to a key/value store after every change so
a reopened session resumes where it left off.

Example:
    >>> session = EditorSession.session_open(MemoryStore())
    >>> session.content_set("`!Hello`!")
    >>> session.preview()
    '<div style="..."><strong style="...">Hello</strong></div>'
"""

from pathlib import Path
from typing import Dict, List, Optional, Union

import yaml

from ..config import appsettings
from ..models.editor import CursorInfo, Insertion, MicronInfo
from .compiler import Compiler
from .errors import MicronError, RenderError, ThemeError
from .log import LOG
from .parser import escape
from .stripper import strip


DEFAULT_TEMPLATE = """\
`c
> `Ff00`Bff0Welcome to Micron Page Composer!`b`f 🎨

This WYSIWYG editor helps you create beautiful .mu pages for NomadNet using the Micron markup language.

----------
`a

>Getting Started

Use the toolbar above to format your text. Select text to see the floating toolbar for quick editing, or click buttons to insert code directly at the cursor.

>>Text Formatting Examples

Make text `!bold`!, `*italic`*, or `_underlined`_. You can also combine formats like `!`*bold italic`*`!.

>>Colors & Backgrounds

Add colors with `Ff00red text`f or `F000`B0f0green background`b`f. Combine both: `Fff0`B00fcolored text`b`f.

>>Alignment

`cCenter your text`a, `lleft align`a, or `rright align`a using alignment codes. Use the `a button to close alignment tags.

>>Headers & Structure

>Main Header
>>Subheader
>>>Sub-subheader

Use headers to organize your content into sections.

>>Links & Navigation

Create links: `[This is a link!`:/page/example.mu]` to connect pages together.

>>Dividers & Decorations

----------
-★
-═

Add horizontal lines with different styles to separate content. Use ASCII art for visual appeal:

    ╔════════════════╗
    ║   Welcome! ✨  ║
    ╚════════════════╝

>>Emojis & Special Characters

Add personality with emojis 😊 ⭐ 🔥 💎 or use the ASCII picker for symbols: ★ ◆ ► ✓

>>Magic Auto-Format ✨

Try the experimental Magic button to automatically beautify your page with colors and decorations!

>>Tips

- Keep lines under 130 characters for MeshChat compatibility
- Select any text to bring up the floating toolbar for quick formatting
- Click tabs above to preview your page or view the raw code
- Use "Strip Codes" to remove all formatting and start fresh
- Download your page as a .mu file when ready!

Delete this template and start creating your own content!
"""


class MemoryStore:
    """In-memory key/value store"""

    def __init__(self, data: Optional[Dict[str, str]] = None) -> None:
        self.data: Dict[str, str] = dict(data or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def remove(self, key: str) -> None:
        self.data.pop(key, None)


class YamlFileStore:
    """
    Key/value store persisted as a YAML mapping

    The file is read on every access, so several sessions sharing a file
    see each other's writes.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)

    def _load(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise MicronError(f"Failed to parse store {self.path}: {e}") from e
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise MicronError(f"Store {self.path} must hold a mapping")
        return data

    def _save(self, data: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, 'w', encoding='utf-8') as f:
            yaml.safe_dump(data, f, allow_unicode=True, default_flow_style=False)

    def get(self, key: str) -> Optional[str]:
        value = self._load().get(key)
        return None if value is None else str(value)

    def set(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._save(data)

    def remove(self, key: str) -> None:
        data = self._load()
        if key in data:
            del data[key]
            self._save(data)


Store = Union[MemoryStore, YamlFileStore]


class EditorSession:
    """
    One open page in the composer

    Attributes:
        content: Current micron source
        cursor: Cursor offset into content
        selection_end: End of the current selection (== cursor when none)
        history: Undo states, oldest first
        history_index: Position of the current state in history
        parser_ready: The renderer loaded; False falls back to plain preview
        last_html: HTML of the last successful preview
        last_error: Error of the most recent failed preview, if any
    """

    def __init__(
        self,
        store: Optional[Store] = None,
        content: str = '',
        theme_name: Optional[str] = None,
        history_limit: Optional[int] = None,
    ) -> None:
        self.store: Store = store if store is not None else MemoryStore()
        self.storage_key = appsettings.storage_key
        self.history_limit = history_limit if history_limit is not None else appsettings.history_limit

        self.content = content
        self.cursor = 0
        self.selection_end = 0
        self.history: List[str] = [content]
        self.history_index = 0

        self.last_html = ''
        self.last_error: Optional[RenderError] = None

        self.compiler: Optional[Compiler] = None
        self.parser_ready = False
        try:
            self.compiler = Compiler(theme_name=theme_name)
            self.parser_ready = True
        except ThemeError as e:
            LOG(f"Renderer unavailable, previews fall back to plain text: {e}", level=1)

    @classmethod
    def session_open(
        cls, store: Optional[Store] = None, theme_name: Optional[str] = None
    ) -> "EditorSession":
        """
        Open a session on a store.

        Resumes the content saved under the storage key, or starts from the
        default page template.
        """
        store = store if store is not None else MemoryStore()
        saved = store.get(appsettings.storage_key)
        if saved is not None:
            LOG(f"Resumed saved content ({len(saved)} chars)", level=2)
        session = cls(store, saved if saved is not None else DEFAULT_TEMPLATE, theme_name)
        session.persist()
        return session

    def persist(self) -> None:
        self.store.set(self.storage_key, self.content)

    def history_push(self) -> None:
        """Record the current content; any redo branch is dropped"""
        self.history = self.history[:self.history_index + 1]
        self.history.append(self.content)
        self.history_index += 1
        if len(self.history) > self.history_limit:
            self.history.pop(0)
            self.history_index -= 1

    def content_set(self, text: str, cursor: Optional[int] = None, selection_end: Optional[int] = None) -> None:
        """
        Replace the content, recording an undo state and persisting it.

        Args:
            text: New content
            cursor: Cursor offset (default: end of text)
            selection_end: Selection end (default: cursor)
        """
        self.content = text
        self.cursor_set(len(text) if cursor is None else cursor, selection_end)
        self.history_push()
        self.persist()

    def cursor_set(self, cursor: int, selection_end: Optional[int] = None) -> None:
        self.cursor = max(0, min(cursor, len(self.content)))
        end = self.cursor if selection_end is None else selection_end
        self.selection_end = max(self.cursor, min(end, len(self.content)))

    def history_restore(self) -> None:
        self.content = self.history[self.history_index]
        self.cursor_set(min(self.cursor, len(self.content)))
        self.persist()

    def undo(self) -> bool:
        """Step back one state; False when there is none"""
        if self.history_index <= 0:
            return False
        self.history_index -= 1
        self.history_restore()
        LOG("Undo", level=3)
        return True

    def redo(self) -> bool:
        """Step forward one state; False when there is none"""
        if self.history_index >= len(self.history) - 1:
            return False
        self.history_index += 1
        self.history_restore()
        LOG("Redo", level=3)
        return True

    def selection_get(self) -> str:
        return self.content[self.cursor:self.selection_end]

    def snippet_apply(self, insertion: Insertion) -> None:
        """Take over the text and cursor of a snippet insertion"""
        self.content_set(insertion.text, insertion.cursor, insertion.selection_end)

    def stripped_apply(self) -> None:
        """Replace the content with its plain text"""
        self.content_set(strip(self.content))

    def page_new(self) -> None:
        """Start over from the default page template, cursor at the top"""
        self.content_set(DEFAULT_TEMPLATE, 0)

    def clear(self) -> None:
        """Empty the page and forget the saved content; undo brings it back"""
        self.content = ''
        self.cursor_set(0)
        self.history_push()
        self.last_html = ''
        self.last_error = None
        self.store.remove(self.storage_key)

    def cursor_info(self) -> CursorInfo:
        lines = self.content[:self.cursor].split('\n')
        return CursorInfo(line=len(lines), column=len(lines[-1]) + 1, chars=len(self.content))

    def micron_info(self) -> MicronInfo:
        return MicronInfo(lines=len(self.content.split('\n')), chars=len(self.content))

    def lines_overLimit(self) -> List[int]:
        """One-based numbers of lines longer than the configured maximum"""
        return [
            number
            for number, line in enumerate(self.content.split('\n'), start=1)
            if len(line) > appsettings.max_line_length
        ]

    def preview(self) -> str:
        """
        Render the content.

        On a RenderError the error is kept in ``last_error`` and the last
        good HTML is returned.
        """
        if self.compiler is None:
            self.last_html = '<br>'.join(escape(line) for line in self.content.split('\n'))
            return self.last_html

        try:
            document = self.compiler.render(self.content)
        except RenderError as e:
            LOG(f"Preview failed, keeping last good render: {e}", level=1)
            self.last_error = e
            return self.last_html

        self.last_html = document.html
        self.last_error = None
        return self.last_html

    def download(self, path: Optional[Union[str, Path]] = None) -> Path:
        """
        Write the content to a .mu file.

        Args:
            path: Destination (default: the configured download filename)

        Raises:
            MicronError: Nothing to download
        """
        if not self.content:
            raise MicronError("No content to download")
        target = Path(path) if path is not None else Path(appsettings.download_filename)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.content, encoding='utf-8')
        LOG(f"Downloaded {target}", level=2)
        return target
