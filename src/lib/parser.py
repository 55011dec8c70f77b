"""
Marker extraction for micron inline directives

Transforms micron source into working text plus an ordered list of
directive records.

The parser operates in staged rule rounds:
1. Normalisation: unify line endings, drop reserved placeholder characters
2. Extraction: apply every rule of the registry, in priority order, to the
   current working text; each match becomes a placeholder and a record
3. Repeat the ordered rules while the previous round still matched
   something, so spans that only close once an inner span has been folded
   into a placeholder are picked up
4. Tokenizing: split the working text into text and marker tokens

Key features:
- First-match-wins, non-overlapping: a span consumed by a rule is invisible
  to every later rule
- Placeholder chaining: a directive's captured content may hold placeholders
  of directives matched earlier (\x00###M0###\x00)
- Malformed spans (unterminated, bad colour) stay literal text; nothing here
  raises on bad markup

Example:
    >>> result = Parser("`!Hello`! world").parse()
    >>> result.directives[0].content
    'Hello'
    >>> result.working_text
    '\\x00###M0###\\x00 world'
"""

import html
import re
from typing import Dict, List, Optional

from ..config import appsettings
from ..models.directives import Directive, DirectiveSpec
from ..models.parser import ExtractionResult, MarkerToken, TextToken, Token
from .log import LOG


def escape(text: str) -> str:
    """
    Escape literal text for embedding in HTML.

    Escapes &, <, >, " and '. Not idempotent: callers apply it exactly once
    per piece of literal text.
    """
    return html.escape(text, quote=True)


class Parser:
    r"""
    Parser for micron inline escape sequences

    Handles:
    - Paired formatting (`!bold`!, `*italic`*, `_underline`_)
    - Links (`[text`url])
    - Form widgets (`<?field|value|*>label, `<^group|value>label, `<|name`default>)
    - Colours (`Ff00text`f, `B0f0text`b)
    - Alignment blocks (`c...`a, `l...`a, `r...`a)
    """

    def __init__(self, source: str, registry=None):
        """
        Initialize parser with source text

        Args:
            source: Raw micron source text (.mu file contents)
            registry: Optional DirectiveRegistry providing the ordered rules

        Attributes:
            source: Source text being parsed
            directives: Records accumulated during extraction
            placeholder_re: Pattern matching any placeholder
        """
        self.source = source
        self.directives: List[Directive] = []
        self.placeholder_re = appsettings.placeholder_pattern()

        if registry is None:
            from .directives import DirectiveRegistry
            registry = DirectiveRegistry()
        self.registry = registry

    def source_normalize(self, source: str) -> str:
        """
        Unify line endings, drop reserved characters and comment lines.

        Placeholders are delimited by characters that can never survive
        normalisation, so no literal text can collide with one. Comment
        lines go before extraction, so no directive can open or close
        inside one.
        """
        text = source.replace('\r\n', '\n').replace('\r', '\n')
        for reserved in appsettings.reservedChars_get():
            if reserved in text:
                LOG(f"Removed {text.count(reserved)} reserved character(s) from input", level=2)
                text = text.replace(reserved, '')

        lines = text.split('\n')
        kept = [line for line in lines if not line.startswith('#')]
        if len(kept) != len(lines):
            LOG(f"Dropped {len(lines) - len(kept)} comment line(s)", level=3)
            text = '\n'.join(kept)
        return text

    def parse(self) -> ExtractionResult:
        """
        Extract every inline directive from the source.

        Returns:
            ExtractionResult with working text, ordered directives and tokens.
            Source without directives yields its normalised text unchanged
            and an empty directive list.
        """
        self.directives = []
        working = self.source_normalize(self.source)

        rounds = 0
        while rounds < appsettings.extract_round_cap:
            rounds += 1
            before = len(self.directives)
            for spec in self.registry.rules():
                working = self.rule_apply(spec, working)
            if len(self.directives) == before:
                break
        else:
            LOG(f"Extraction stopped at round cap ({appsettings.extract_round_cap})", level=2)

        LOG(f"Extracted {len(self.directives)} directive(s) in {rounds} round(s)", level=2)

        return ExtractionResult(
            working_text=working,
            directives=list(self.directives),
            tokens=self.tokens_scan(working),
            rounds=rounds,
        )

    def rule_apply(self, spec: DirectiveSpec, working: str) -> str:
        """
        Apply one rule to the working text.

        Every non-overlapping match is replaced by a fresh placeholder and a
        record is appended. When the rule's factory declines a match, the
        match stays literal.

        Args:
            spec: Rule to apply
            working: Current working text

        Returns:
            Working text with this rule's matches folded into placeholders
        """
        def placeholder_substitute(match: "re.Match[str]") -> str:
            directive = spec.build(match)
            if directive is None:
                LOG(f"Left malformed {spec.name} span as text: {match.group(0)!r}", level=3)
                return match.group(0)
            index = len(self.directives)
            self.directives.append(directive)
            LOG(f"M{index} <- {spec.name}", level=3)
            return appsettings.placeHolder_make(index)

        return spec.pattern.sub(placeholder_substitute, working)

    def tokens_scan(self, working: str) -> List[Token]:
        """
        Split working text into literal text and marker tokens.

        Args:
            working: Text possibly containing placeholders

        Returns:
            Tokens in source order; empty text runs are omitted

        Example:
            "a\x00###M0###\x00b" -> [TextToken("a"), MarkerToken(0, ...), TextToken("b")]
        """
        tokens: List[Token] = []
        pos = 0
        for match in self.placeholder_re.finditer(working):
            if match.start() > pos:
                tokens.append(TextToken(working[pos:match.start()]))
            tokens.append(MarkerToken(index=int(match.group(1)), placeholder=match.group(0)))
            pos = match.end()
        if pos < len(working):
            tokens.append(TextToken(working[pos:]))
        return tokens

    def source_restore(self, text: str, directives: Optional[List[Directive]] = None) -> str:
        """
        Replace placeholders with the raw source of their directives.

        Nested placeholders are restored recursively, giving back the text
        exactly as the author wrote it.
        """
        records = self.directives if directives is None else directives
        cache: Dict[int, str] = {}

        def restore(match: "re.Match[str]") -> str:
            index = int(match.group(1))
            if index >= len(records):
                return ''
            if index not in cache:
                cache[index] = self.placeholder_re.sub(restore, records[index].source)
            return cache[index]

        return self.placeholder_re.sub(restore, text)
