"""
Compiler for micron source to sanitized HTML

Runs the full transducer: marker extraction, escaping, directive rendering,
placeholder substitution and line-level block rules.
"""

import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Set
from urllib.parse import urlsplit

from ..config import appsettings
from ..models.directives import Directive
from ..models.document import SafeDocument
from ..models.parser import ExtractionResult, MarkerToken
from .blocks import BlockRules
from .directives import DirectiveRegistry
from .errors import RenderError
from .log import LOG
from .parser import Parser, escape
from .theme import Theme


STANDALONE_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
    <meta charset="UTF-8">
    <title>{title}</title>
    <style>
        * {{ margin: 0; padding: 0; box-sizing: border-box; }}
        body {{
            background: {background};
            color: {foreground};
            font-family: 'Courier New', monospace;
            padding: 20px;
        }}
        .preview-content {{
            padding: 20px;
            font-size: {font_size};
            line-height: 1.6;
            width: {width};
            white-space: pre-wrap;
            overflow-wrap: break-word;
            margin: 0 auto;
        }}
        a:hover {{ color: {link_hover}; }}
    </style>
</head>
<body>
    <div class="preview-content">
{content}
    </div>
</body>
</html>
"""


class Compiler:
    """
    Compiles micron source to a SafeDocument

    Responsibilities:
    - Extract directives into placeholders (Parser)
    - Escape literal text exactly once
    - Render directives through the registry handlers
    - Substitute every placeholder exactly once
    - Apply line-level block rules
    - Optionally wrap the result in a standalone page
    """

    def __init__(
        self,
        theme_name: Optional[str] = None,
        registry: Optional[DirectiveRegistry] = None,
        blocked_schemes: Optional[List[str]] = None,
    ) -> None:
        """
        Initialize compiler

        Args:
            theme_name: Theme to style fragments with (default from settings)
            registry: Directive registry (default: built-in directives)
            blocked_schemes: Link URL schemes rendered inert (default from settings)
        """
        self.theme = Theme(theme_name or appsettings.theme_name)
        LOG(f"Loaded theme: {self.theme.name}", level=3)
        self.directives = registry or DirectiveRegistry()
        self.block_rules = BlockRules(self.theme)
        self.blocked_schemes: Set[str] = {
            scheme.lower() for scheme in (blocked_schemes or appsettings.blocked_url_schemes)
        }

        # Per-render state, reset by render()
        self.parser: Optional[Parser] = None
        self.extraction: Optional[ExtractionResult] = None
        self.fragments: Dict[int, str] = {}
        self.substitutions = 0

    def render(self, text: str) -> SafeDocument:
        """
        Render micron source to sanitized HTML.

        Args:
            text: Raw micron source

        Returns:
            SafeDocument whose html holds no unescaped user content

        Raises:
            RenderError: A handler failed or a placeholder was not
                         substituted exactly once
        """
        self.parser = Parser(text, registry=self.directives)
        self.extraction = self.parser.parse()
        self.fragments = {}
        self.substitutions = 0

        body = ''.join(
            self.marker_render(token.index) if isinstance(token, MarkerToken) else escape(token.value)
            for token in self.extraction.tokens
        )

        self.substitutions_verify(body)

        body = self.block_rules.rules_apply(body)
        container_style = self.theme.styleAttr_get('container')
        html = f'<div{container_style}>{body}</div>'

        LOG(
            f"Rendered {len(self.extraction.directives)} directive(s), "
            f"{self.substitutions} substitution(s)",
            level=2,
        )
        return SafeDocument(
            html=html,
            directives=list(self.extraction.directives),
            substitutions=self.substitutions,
        )

    def marker_render(self, index: int) -> str:
        """
        Render the directive behind a placeholder index.

        An index may be substituted once per render call.
        """
        if index in self.fragments:
            raise RenderError(f"Placeholder M{index} substituted more than once")

        directive = self.extraction.directive_get(index) if self.extraction else None
        if directive is None:
            raise RenderError(f"Placeholder M{index} has no recorded directive")

        handler = self.directives.handler_get(directive)
        if handler is None:
            raise RenderError(f"No handler registered for directive '{directive.kind.value}'")

        try:
            fragment = handler(directive, self)
        except RenderError:
            raise
        except Exception as e:
            LOG(f"Handler for '{directive.kind.value}' failed: {e}", level=1)
            raise RenderError(
                f"Failed to render {directive.kind.value} directive {directive.source!r}: {e}"
            ) from e

        self.fragments[index] = fragment
        self.substitutions += 1
        return fragment

    def content_render(self, content: str) -> str:
        """
        Render captured directive content.

        Literal runs are escaped; nested placeholders become the fragments of
        the directives they stand for.
        """
        if self.parser is None:
            return escape(content)
        return ''.join(
            self.marker_render(token.index) if isinstance(token, MarkerToken) else escape(token.value)
            for token in self.parser.tokens_scan(content)
        )

    def attribute_render(self, value: str) -> str:
        """
        Render a value destined for an HTML attribute.

        Nested placeholders are restored to their raw source rather than
        rendered, so no markup ever lands inside an attribute. The nested
        directives still count as substituted.
        """
        if self.parser is None:
            return escape(value)
        for token in self.parser.tokens_scan(value):
            if isinstance(token, MarkerToken):
                self.marker_consume(token.index)
        return escape(self.parser.source_restore(value))

    def marker_consume(self, index: int) -> None:
        """Account for a placeholder folded back into literal source"""
        directive = self.extraction.directive_get(index) if self.extraction else None
        if directive is None:
            raise RenderError(f"Placeholder M{index} has no recorded directive")
        if index in self.fragments:
            raise RenderError(f"Placeholder M{index} substituted more than once")
        self.fragments[index] = ''
        self.substitutions += 1
        if self.parser is not None:
            for token in self.parser.tokens_scan(directive.source):
                if isinstance(token, MarkerToken):
                    self.marker_consume(token.index)

    def source_restore(self, text: str) -> str:
        """Raw author text of a value, nested placeholders included"""
        if self.parser is None:
            return text
        return self.parser.source_restore(text)

    def literal_render(self, directive: Directive) -> str:
        """Render a directive as its escaped source text"""
        return self.attribute_render(directive.source)

    def url_isBlocked(self, url: str) -> bool:
        """Check whether a link URL uses a blocked scheme"""
        candidate = re.sub(r'[\s\x00-\x1f]', '', url)
        try:
            scheme = urlsplit(candidate).scheme
        except ValueError:
            return True
        return scheme.lower() in self.blocked_schemes

    def substitutions_verify(self, body: str) -> None:
        """
        Check that every directive was substituted exactly once and that no
        placeholder survived.
        """
        expected = len(self.extraction.directives) if self.extraction else 0
        if self.substitutions != expected:
            raise RenderError(
                f"Substituted {self.substitutions} placeholder(s) for {expected} directive(s)"
            )
        if appsettings.placeholder_pattern().search(body):
            raise RenderError("Placeholder left in rendered output")

    def document_build(self, content: str) -> str:
        """
        Wrap rendered HTML in a standalone preview page.

        Args:
            content: Rendered fragment HTML (SafeDocument.html)

        Returns:
            Complete HTML document styled from the theme's ``page`` settings
        """
        page: Dict[str, Any] = {
            'title': escape(str(self.theme.config_get('page.title', 'Micron Preview'))),
            'background': self.theme.config_get('page.background', '#000'),
            'foreground': self.theme.config_get('page.foreground', '#e6edf3'),
            'link_hover': self.theme.config_get('page.link_hover', '#79c0ff'),
            'width': self.theme.config_get('page.width', '1210px'),
            'font_size': self.theme.config_get('page.font_size', '15px'),
        }
        return STANDALONE_TEMPLATE.format(content=content, **page)

    def compile(self, text: str, output_file: Path, standalone: bool = False) -> Dict[str, Any]:
        """
        Render source and write the HTML to a file.

        Args:
            text: Raw micron source
            output_file: Destination path (parent directories are created)
            standalone: Wrap the fragment in a complete page

        Returns:
            dict with compilation results and statistics
        """
        document = self.render(text)
        html = self.document_build(document.html) if standalone else document.html

        output_file = Path(output_file)
        output_file.parent.mkdir(parents=True, exist_ok=True)
        output_file.write_text(html, encoding='utf-8')
        LOG(f"Wrote {output_file}", level=2)

        return {
            'status': True,
            'output_file': str(output_file),
            'directive_count': len(document.directives),
            'substitutions': document.substitutions,
        }


def render(text: str, theme_name: Optional[str] = None) -> SafeDocument:
    """
    Render micron source to a SafeDocument.

    Example:
        >>> render("`!Hi`!").html
        '<div style="..."><strong style="...">Hi</strong></div>'
    """
    return Compiler(theme_name=theme_name).render(text)
