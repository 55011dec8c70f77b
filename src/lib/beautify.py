"""
Automatic page beautification ("magic format")

Decorates plain text with colours, backgrounds, emojis and dividers based
on the shape of each line: ALL CAPS lines become section banners, short
capitalised lines become titles, list items get coloured bullets, and so
on. Lines that already carry micron formatting are kept as they are.

Choices are drawn from an explicit ``random.Random`` so a fixed seed gives
reproducible output.
"""

import random
import re
from typing import Dict, List, Optional

from .errors import SnippetError
from .log import LOG


DIVIDERS = ['-━', '-═', '-★', '-▬', '-●', '-◆', '-▲', '-•', '-─']

TITLE_COLORS = ['F58a', 'Ff0a', 'Fa0f', 'F0af', 'Ffa0', 'F8f0']
SUBTITLE_COLORS = ['Ff80', 'Ff08', 'F80f', 'Ffa5', 'Ff5a']
IMPORTANT_COLORS = ['Ff00', 'Fff0', 'Ff0f', 'Ffa0']
TEXT_COLORS = ['F0f0', 'F0af', 'F5af', 'Fa0f', 'F0fa', 'Faaf']
BG_COLORS = ['Bff0', 'B0ff', 'Bf0f', 'B08f', 'Bf80', 'B8f0']

HEADER_EMOJIS = ['🌟', '⭐', '✨', '💫', '🎯', '🔥', '💎', '👑', '🎨']
BULLET_EMOJIS = ['◆', '▶', '➤', '★', '•', '►', '⚡']
ACCENT_EMOJIS = ['✦', '❖', '◈', '◉', '⬥']
QUESTION_EMOJIS = ['❓', '🤔', '💭', '🧐']
EXCLAIM_EMOJIS = ['✨', '⚡', '💥', '🎉', '✅']
FOOTER_EMOJIS = ['✨', '🌟', '⭐', '💫']

KEYWORD_EMOJIS: Dict[str, List[str]] = {
    'important': ['⚠️', '❗', '‼️'],
    'note': ['📝', '📌', '✏️'],
    'warning': ['⚠️', '🚨', '⛔'],
    'attention': ['👁️', '👀', '🔔'],
    'caution': ['⚠️', '🚧', '⚡'],
    'tip': ['💡', '💭', '🌟'],
    'info': ['ℹ️', '📢', '📣'],
    'error': ['❌', '⛔', '🚫'],
    'success': ['✅', '✔️', '🎉', '🏆'],
}

SELECTION_COLORS = ['F58a', 'Ff0a', 'Fa0f', 'F0af', 'Ffa0', 'F8f0', 'Ff80', 'Ff08', 'F0f0', 'F0fa']
SELECTION_EMOJIS = ['✨', '⭐', '🌟', '💫', '🎯', '🔥', '💎', '⚡']

LIST_ITEM = re.compile(r'^[-•*]|^\d+\.')
LIST_MARKER = re.compile(r'^[-•*\d+.]+')
SENTENCE_END = re.compile(r'[.!?]\s')

# Title detection thresholds
TITLE_MIN_LENGTH = 3
TITLE_MAX_LENGTH = 60
TITLE_CAPITAL_RATIO = 0.6
MAIN_TITLE_LINES = 5
LONG_LINE = 80
MEDIUM_LINE = 40


class MagicFormatter:
    """
    Line-by-line beautifier

    One instance formats one text; ``section_count`` and ``in_list`` carry
    state between lines.
    """

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self.rng = rng or random.Random()
        self.section_count = 0
        self.in_list = False
        self.result: List[str] = []

    def divider(self) -> str:
        return self.rng.choice(DIVIDERS)

    def line_isFormatted(self, line: str) -> bool:
        """Lines with line markers or colour/bold codes are left alone"""
        if line.startswith(('>', '#', '-')):
            return True
        return any(code in line for code in ('`F', '`B', '`!'))

    def caps_format(self, line: str) -> None:
        """ALL CAPS line: centred banner with background, divider between sections"""
        if self.section_count > 0:
            self.result.extend(['', self.divider(), ''])
        emoji = self.rng.choice(HEADER_EMOJIS)
        title = self.rng.choice(TITLE_COLORS)
        bg = self.rng.choice(BG_COLORS)
        self.result.append(f'`c`{title}`{bg}{emoji} {line} {emoji}`b`f`a')
        self.result.append('')
        self.section_count += 1

    def title_format(self, line: str, number: int) -> None:
        """Capitalised short line: main title near the top, section header below"""
        if number < MAIN_TITLE_LINES:
            emoji = self.rng.choice(HEADER_EMOJIS)
            title = self.rng.choice(TITLE_COLORS)
            self.result.extend([
                '',
                f'`c`{title}`!{emoji} {line} {emoji}`!`f`a',
                '',
                self.divider(),
                '',
            ])
        else:
            accent = self.rng.choice(ACCENT_EMOJIS)
            subtitle = self.rng.choice(SUBTITLE_COLORS)
            bg = self.rng.choice(BG_COLORS)
            self.result.extend(['', f'`{subtitle}`{bg}{accent} {line}`b`f', ''])
        self.section_count += 1

    def listItem_format(self, line: str) -> None:
        if not self.in_list and self.result and self.result[-1] != '':
            self.result.append('')
        marker = LIST_MARKER.match(line)
        content = line[marker.end():].strip() if marker else line
        text = self.rng.choice(TEXT_COLORS)
        bullet = self.rng.choice(BULLET_EMOJIS)
        self.result.append(f'  `{text}{bullet}`f {content}')
        self.in_list = True

    def keyword_format(self, line: str) -> bool:
        """Lines mentioning a keyword get its emoji and a highlight; False if none"""
        lower = line.lower()
        for keyword, emojis in KEYWORD_EMOJIS.items():
            if keyword in lower:
                emoji = self.rng.choice(emojis)
                important = self.rng.choice(IMPORTANT_COLORS)
                bg = self.rng.choice(BG_COLORS)
                self.result.append(f'`{important}`{bg}{emoji} {line}`b`f')
                return True
        return False

    def paragraph_format(self, line: str) -> None:
        if len(line) > LONG_LINE:
            # First sentence bold and coloured
            end = SENTENCE_END.search(line)
            if end and 0 < end.start() < len(line) - 2:
                first = line[:end.start() + 1]
                rest = line[end.start() + 1:].strip()
                subtitle = self.rng.choice(SUBTITLE_COLORS)
                self.result.append(f'`{subtitle}`!{first}`!`f {rest}')
            else:
                self.result.append(line)
        elif len(line) > MEDIUM_LINE:
            self.result.append(f'`{self.rng.choice(TEXT_COLORS)}{line}`f')
        else:
            styles = [
                f'`c`_{line}`_`a',
                f'`c`{self.rng.choice(TEXT_COLORS)}{line}`f`a',
                f'`{self.rng.choice(TEXT_COLORS)}`!{line}`!`f',
            ]
            self.result.append(self.rng.choice(styles))

    def line_format(self, line: str, number: int) -> None:
        if line == '':
            self.result.append('')
            self.in_list = False
            return

        if self.line_isFormatted(line):
            self.result.append(line)
            return

        if line == line.upper() and len(line) > 2 and re.search(r'[A-Z]', line):
            self.caps_format(line)
            return

        if TITLE_MIN_LENGTH < len(line) < TITLE_MAX_LENGTH:
            words = line.split(' ')
            capitalized = sum(1 for w in words if w and w[0] == w[0].upper())
            if capitalized / len(words) > TITLE_CAPITAL_RATIO:
                self.title_format(line, number)
                return

        if LIST_ITEM.match(line):
            self.listItem_format(line)
            return

        if line.endswith('?'):
            important = self.rng.choice(IMPORTANT_COLORS)
            emoji = self.rng.choice(QUESTION_EMOJIS)
            self.result.append(f'`{important}`!{emoji} {line}`!`f')
            return

        if line.endswith('!'):
            text = self.rng.choice(TEXT_COLORS)
            emoji = self.rng.choice(EXCLAIM_EMOJIS)
            self.result.append(f'`{text}`!{emoji} {line}`!`f')
            return

        if self.keyword_format(line):
            return

        self.paragraph_format(line)
        self.in_list = False

    def format(self, text: str) -> str:
        for number, line in enumerate(text.split('\n')):
            self.line_format(line.strip(), number)

        formatted = '\n'.join(self.result)

        if not formatted.startswith(('>', '`')):
            emoji = self.rng.choice(HEADER_EMOJIS)
            title = self.rng.choice(TITLE_COLORS)
            bg = self.rng.choice(BG_COLORS)
            formatted = (
                f'{self.divider()}\n'
                f'`c`{title}`{bg}{emoji} FORMATTED PAGE {emoji}`b`f`a\n'
                f'{self.divider()}\n\n'
                f'{formatted}'
            )

        emoji = self.rng.choice(FOOTER_EMOJIS)
        title = self.rng.choice(TITLE_COLORS)
        formatted += (
            f'\n\n{self.divider()}\n'
            f'`c`{title}`_{emoji} End of Page {emoji}`_`f`a\n'
            f'{self.divider()}'
        )
        return formatted


def magic_format(text: str, rng: Optional[random.Random] = None) -> str:
    """
    Beautify a whole page.

    Args:
        text: Page source; surrounding whitespace is dropped
        rng: Random source (default: a fresh unseeded one)

    Returns:
        Decorated micron source, framed by a header (unless the page already
        starts with a header or a code) and an "End of Page" footer

    Raises:
        SnippetError: Text is empty
    """
    text = text.strip()
    if not text:
        raise SnippetError("Nothing to format: add some text first")

    formatter = MagicFormatter(rng)
    formatted = formatter.format(text)
    LOG(f"Magic format: {formatter.section_count} section(s)", level=2)
    return formatted


def selection_magic(text: str, rng: Optional[random.Random] = None) -> str:
    """
    Apply one random decoration to a selection.

    Raises:
        SnippetError: Selection is blank
    """
    if not text.strip():
        raise SnippetError("Select some text first")

    rng = rng or random.Random()
    color = rng.choice(SELECTION_COLORS)
    bg = rng.choice(BG_COLORS)
    emoji = rng.choice(SELECTION_EMOJIS)

    styles = [
        f'`{color}`!{text}`!`f',
        f'`{color}`{bg}{text}`b`f',
        f'`{color}`_{text}`_`f',
        f'`c`{color}`!{emoji} {text} {emoji}`!`f`a',
        f'`{color}`{bg}`!{text}`!`b`f',
    ]
    return rng.choice(styles)
