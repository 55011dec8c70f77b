"""
Directive implementations for micron

Each directive pairs an extraction pattern with a handler that turns the
extracted record into an HTML fragment. Uses DirectiveSpec for metadata and
keeps specs in rule priority order: the order of registration IS the order
in which the parser applies the rules.
"""

import re
from typing import Any, Callable, Dict, List, Optional

from ..models.directives import (
    AlignCenter,
    AlignLeft,
    AlignRight,
    BackgroundColor,
    Bold,
    Checkbox,
    Directive,
    DirectiveCategory,
    DirectiveKind,
    DirectiveSpec,
    ForegroundColor,
    Italic,
    Link,
    Radio,
    TextField,
    Underline,
    color_isValid,
)
from .log import LOG


DEFAULT_FIELD_WIDTH = 24


class DirectiveRegistry:
    """
    Registry of directive specifications and handlers

    Maps directive names to DirectiveSpec objects containing the extraction
    pattern, record factory and rendering handler.
    """

    def __init__(self) -> None:
        """Initialize the directive registry and register all built-in directives"""
        self.specs: Dict[str, DirectiveSpec] = {}
        self.formattingDirectives_register()
        self.linkDirectives_register()
        self.formDirectives_register()
        self.colorDirectives_register()
        self.layoutDirectives_register()

    def register(self, spec: DirectiveSpec) -> None:
        """Register a directive specification (appended to the rule order)"""
        self.specs[spec.name] = spec

    def get(self, name: str) -> Optional[Callable[[Any, Any], str]]:
        """
        Get directive handler by name

        Args:
            name: Directive name to look up (e.g., "bold", "fg")

        Returns:
            Handler function or None if not found
        """
        spec = self.specs.get(name)
        return spec.handler if spec else None

    def spec_get(self, name: str) -> Optional[DirectiveSpec]:
        """Get full directive specification by name"""
        return self.specs.get(name)

    def handler_get(self, directive: Directive) -> Optional[Callable[[Any, Any], str]]:
        """Get the handler rendering a directive record"""
        return self.get(directive.kind.value)

    def rules(self) -> List[DirectiveSpec]:
        """All specs in rule priority order"""
        return list(self.specs.values())

    def directives_listByCategory(self, category: DirectiveCategory) -> list[DirectiveSpec]:
        """Get all directives in a category"""
        return [spec for spec in self.specs.values() if spec.category == category]

    def formattingDirectives_register(self) -> None:
        """Register paired text formatting directives"""

        def make_html_wrapper(tag: str, fragment: str) -> Callable[[Any, Any], str]:
            """Factory for simple HTML tag wrappers"""
            def handler(directive: Any, compiler: Any) -> str:
                """Wrap rendered content in HTML tag with the theme's style"""
                style_attr = compiler.theme.styleAttr_get(fragment)
                content = compiler.content_render(directive.content)
                return f'<{tag}{style_attr}>{content}</{tag}>'
            return handler

        formatting_specs = [
            (DirectiveKind.BOLD, Bold, r'`!([^`]*)`!', 'strong', 'Bold text', ['`!bold text`!']),
            (DirectiveKind.ITALIC, Italic, r'`\*([^`]*)`\*', 'em', 'Italic text', ['`*italic text`*']),
            (DirectiveKind.UNDERLINE, Underline, r'`_([^`]*)`_', 'span', 'Underlined text', ['`_underlined`_']),
        ]

        for kind, record, pattern, tag, desc, examples in formatting_specs:
            self.register(DirectiveSpec(
                kind=kind,
                category=DirectiveCategory.FORMATTING,
                description=desc,
                pattern=re.compile(pattern),
                build=lambda m, record=record: record(content=m.group(1), source=m.group(0)),
                handler=make_html_wrapper(tag, kind.value),
                examples=examples
            ))

    def linkDirectives_register(self) -> None:
        """Register the link directive"""

        def link_handler(directive: Any, compiler: Any) -> str:
            """Handle `[text`url] - anchor with inert href for blocked schemes"""
            url = compiler.attribute_render(directive.url)
            if compiler.url_isBlocked(compiler.source_restore(directive.url)):
                LOG(f"Blocked link URL {directive.url!r}", level=2)
                url = '#'
            text = compiler.content_render(directive.text)
            style_attr = compiler.theme.styleAttr_get('link')
            return f'<a href="{url}"{style_attr}>{text}</a>'

        # A trailing backtick (toolbar form) belongs to the link unless it
        # opens another code
        self.register(DirectiveSpec(
            kind=DirectiveKind.LINK,
            category=DirectiveCategory.LINK,
            description='Hyperlink to another page or node',
            pattern=re.compile(r'`\[([^`]*)`([^\]\n]+)\](?:`(?![!*_\[<FBfbclra`]))?'),
            build=lambda m: Link(text=m.group(1), url=m.group(2), source=m.group(0)),
            handler=link_handler,
            examples=['`[Home`:/page/index.mu]']
        ))

    def formDirectives_register(self) -> None:
        """Register form widget directives"""

        def make_choice_handler(input_type: str, name_attr: str) -> Callable[[Any, Any], str]:
            """Factory for checkbox and radio inputs followed by their label"""
            def handler(directive: Any, compiler: Any) -> str:
                """Render a pre-checkable input bound to its field/group"""
                name = compiler.attribute_render(getattr(directive, name_attr))
                value = compiler.attribute_render(directive.value)
                checked = ' checked' if directive.checked else ''
                label = compiler.content_render(directive.label)
                label_style = compiler.theme.styleAttr_get('label')
                return (
                    f'<input type="{input_type}" name="{name}" value="{value}"{checked}>'
                    f' <span{label_style}>{label}</span>'
                )
            return handler

        def field_handler(directive: Any, compiler: Any) -> str:
            """Handle `<[!][width]|name`default> - text or masked input"""
            input_type = 'password' if directive.masked else 'text'
            name = compiler.attribute_render(directive.name)
            value = compiler.attribute_render(directive.default)
            style_attr = compiler.theme.styleAttr_get('field')
            return (
                f'<input type="{input_type}" name="{name}" value="{value}"'
                f' size="{directive.width}"{style_attr}>'
            )

        def field_build(m: "re.Match[str]") -> TextField:
            return TextField(
                name=m.group(3),
                default=m.group(4),
                width=int(m.group(2)) if m.group(2) else DEFAULT_FIELD_WIDTH,
                masked=m.group(1) == '!',
                source=m.group(0),
            )

        # Both the bare form `<?field|value|*>label and the toolbar form
        # `<?|field|value|*`>label are accepted
        self.register(DirectiveSpec(
            kind=DirectiveKind.CHECKBOX,
            category=DirectiveCategory.FORM,
            description='Checkbox bound to a form field, optionally pre-checked',
            pattern=re.compile(r'`<\?\|?([^|>`\n]+)\|([^|>`\n]*)(\|\*)?`?>([^`\n]*)'),
            build=lambda m: Checkbox(
                field=m.group(1), value=m.group(2), checked=m.group(3) is not None,
                label=m.group(4), source=m.group(0),
            ),
            handler=make_choice_handler('checkbox', 'field'),
            examples=['`<?subscribe|yes>Subscribe', '`<?subscribe|yes|*>Subscribe']
        ))

        self.register(DirectiveSpec(
            kind=DirectiveKind.RADIO,
            category=DirectiveCategory.FORM,
            description='Radio button in a group, optionally pre-checked',
            pattern=re.compile(r'`<\^\|?([^|>`\n]+)\|([^|>`\n]*)(\|\*)?`?>([^`\n]*)'),
            build=lambda m: Radio(
                group=m.group(1), value=m.group(2), checked=m.group(3) is not None,
                label=m.group(4), source=m.group(0),
            ),
            handler=make_choice_handler('radio', 'group'),
            examples=['`<^size|small>Small', '`<^size|large|*>Large']
        ))

        self.register(DirectiveSpec(
            kind=DirectiveKind.TEXT_FIELD,
            category=DirectiveCategory.FORM,
            description='Text input field; a leading ! masks the input',
            pattern=re.compile(r'`<(!?)(\d*)\|([^|>`\n]+)`([^>`\n]*)>'),
            build=field_build,
            handler=field_handler,
            examples=['`<24|username`Enter text>', '`<!16|password`>']
        ))

    def colorDirectives_register(self) -> None:
        """Register foreground and background colour directives"""

        def make_color_handler(css_property: str, fragment: str) -> Callable[[Any, Any], str]:
            """Factory for colour spans; invalid colours fall back to literal text"""
            def handler(directive: Any, compiler: Any) -> str:
                """Wrap rendered content in a coloured span"""
                if not color_isValid(directive.color):
                    return compiler.literal_render(directive)
                content = compiler.content_render(directive.content)
                style_attr = compiler.theme.styleAttr_get(
                    fragment, prefix=f'{css_property}: #{directive.color};'
                )
                return f'<span{style_attr}>{content}</span>'
            return handler

        def color_build(record: type) -> Callable[["re.Match[str]"], Optional[Directive]]:
            def build(m: "re.Match[str]") -> Optional[Directive]:
                if not color_isValid(m.group(1)):
                    return None
                return record(color=m.group(1), content=m.group(2), source=m.group(0))
            return build

        self.register(DirectiveSpec(
            kind=DirectiveKind.FOREGROUND,
            category=DirectiveCategory.COLOR,
            description='Foreground (text) colour from a 3-digit hex triplet',
            pattern=re.compile(r'`F([0-9a-fA-F]{3})([^`]*)`f'),
            build=color_build(ForegroundColor),
            handler=make_color_handler('color', 'foreground'),
            examples=['`Ff00red text`f']
        ))

        self.register(DirectiveSpec(
            kind=DirectiveKind.BACKGROUND,
            category=DirectiveCategory.COLOR,
            description='Background colour from a 3-digit hex triplet',
            pattern=re.compile(r'`B([0-9a-fA-F]{3})([^`]*)`b'),
            build=color_build(BackgroundColor),
            handler=make_color_handler('background-color', 'background'),
            examples=['`B0f0green background`b']
        ))

    def layoutDirectives_register(self) -> None:
        """Register alignment block directives"""

        def make_align_handler(alignment: str) -> Callable[[Any, Any], str]:
            """Factory for aligned div blocks"""
            def handler(directive: Any, compiler: Any) -> str:
                """Wrap rendered content in an aligned block"""
                content = compiler.content_render(directive.content)
                style_attr = compiler.theme.styleAttr_get(
                    'align', prefix=f'text-align: {alignment};'
                )
                return f'<div{style_attr}>{content}</div>'
            return handler

        align_specs = [
            (DirectiveKind.ALIGN_CENTER, AlignCenter, 'c', 'center', ['`cCentered`a']),
            (DirectiveKind.ALIGN_LEFT, AlignLeft, 'l', 'left', ['`lLeft aligned`a']),
            (DirectiveKind.ALIGN_RIGHT, AlignRight, 'r', 'right', ['`rRight aligned`a']),
        ]

        for kind, record, opener, alignment, examples in align_specs:
            self.register(DirectiveSpec(
                kind=kind,
                category=DirectiveCategory.LAYOUT,
                description=f'{alignment.capitalize()}-aligned block closed by `a',
                pattern=re.compile(rf'`{opener}([^`]*)`a'),
                build=lambda m, record=record: record(content=m.group(1), source=m.group(0)),
                handler=make_align_handler(alignment),
                examples=examples
            ))
