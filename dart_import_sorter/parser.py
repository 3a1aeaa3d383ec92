"""Parser module for dart-import-sorter.

This module splits the lines of a Dart file into its header zone: the prefix
(file comments, annotations, ``library``/``part of`` declarations), the
import/export directives with their attached comments, and the remainder of
the file which is never touched.
"""

from dataclasses import dataclass
import re
from typing import List
from typing import Optional
from typing import Tuple


DIRECTIVE_RE = re.compile(r"^\s*(import|export)(?=[\s'\"]|$)")
DECLARATION_RE = re.compile(r"^\s*(library|part\s+of)(?=[\s;'\"]|$)")
TARGET_RE = re.compile(r"""(['"])(.*?)\1""")
CATEGORY_HEADER_RE = re.compile(
    r"^\s*//\s*(?:[^\x00-\x7f]\S*\s+)?(?:Dart|Flutter|Package|Workspace|Project|Relative) imports:\s*$"
)


class HeaderParseError(ValueError):
    """Raised when the header zone of a file cannot be parsed safely."""

    def __init__(self, lineno: int, message: str):
        super().__init__(f"line {lineno}: {message}")
        self.lineno = lineno
        self.message = message


@dataclass(frozen=True)
class Directive:
    """One import or export statement with its attached comments."""

    keyword: str
    target: str
    lines: Tuple[str, ...]
    comments: Tuple[str, ...] = ()
    trailing: str = ""

    @property
    def has_trailing_comment(self) -> bool:
        stripped = self.trailing.strip()
        return stripped.startswith("//") or stripped.startswith("/*")

    def render(self, strip_comments: bool = False) -> List[str]:
        """Return the physical lines of the directive, comments included."""
        body = list(self.lines)
        if strip_comments:
            if not self.has_trailing_comment:
                body[-1] += self.trailing
            return body
        body[-1] += self.trailing
        return list(self.comments) + body


@dataclass(frozen=True)
class HeaderZone:
    prefix: Tuple[str, ...]
    directives: Tuple[Directive, ...]
    remainder: Tuple[str, ...]


def split_trailing_comment(line: str) -> Tuple[str, str]:
    """Split a line into its code part and a trailing comment.

    Quotes are tracked so that a ``//`` or ``/*`` inside a string literal is
    not taken for a comment.
    """
    quote: Optional[str] = None
    i = 0
    while i < len(line):
        char = line[i]
        if quote:
            if char == "\\":
                i += 2
                continue
            if char == quote:
                quote = None
        elif char in ("'", '"'):
            quote = char
        elif line.startswith("//", i) or line.startswith("/*", i):
            return line[:i], line[i:]
        i += 1
    return line, ""


def is_category_header(line: str) -> bool:
    """Return True for a category comment generated by the sorter."""
    return bool(CATEGORY_HEADER_RE.match(line))


def extract_target(text: str) -> str:
    """Return the first quoted string of a directive, or '' if there is none."""
    match = TARGET_RE.search(text)
    return match.group(2) if match else ""


def _statement_end(lines: List[str], start: int, what: str) -> int:
    """Return the index of the line terminating the statement opened at start."""
    for i in range(start, len(lines)):
        code, _ = split_trailing_comment(lines[i])
        if code.rstrip().endswith(";"):
            return i
    raise HeaderParseError(start + 1, f"{what} is missing its terminating ';'")


def _block_comment_end(lines: List[str], start: int) -> Tuple[int, str]:
    """Return the line closing a block comment and the text that follows it."""
    search_from = lines[start].index("/*") + 2
    for i in range(start, len(lines)):
        pos = lines[i].find("*/", search_from if i == start else 0)
        if pos != -1:
            return i, lines[i][pos + 2:]
    raise HeaderParseError(start + 1, "unterminated block comment")


def _count_statements(body: List[str]) -> int:
    code = (split_trailing_comment(line)[0] for line in body)
    return sum(TARGET_RE.sub("", part).count(";") for part in code)


def _read_directive(lines: List[str], start: int, comments: List[str]) -> Tuple[Directive, int]:
    end = _statement_end(lines, start, "directive")
    body = list(lines[start:end + 1])
    if _count_statements(body) != 1:
        raise HeaderParseError(start + 1, "more than one statement on the lines of a directive")
    code, comment = split_trailing_comment(body[-1])
    if comment.startswith("/*"):
        close = comment.find("*/", 2)
        rest = comment[close + 2:].strip() if close != -1 else ";"
        if rest and not rest.startswith("//"):
            raise HeaderParseError(end + 1, "code or an open comment follows the directive")
    code_end = code.rstrip()
    body[-1] = code_end
    trailing = code[len(code_end):] + comment
    keyword = DIRECTIVE_RE.match(body[0]).group(1)
    directive = Directive(
        keyword=keyword,
        target=extract_target("\n".join(body)),
        lines=tuple(body),
        comments=tuple(comments),
        trailing=trailing,
    )
    return directive, end + 1


def parse_header(lines: List[str]) -> HeaderZone:
    """Split the lines of a Dart file into prefix, directives and remainder.

    Args:
        lines: The physical lines of the file, without line terminators.

    Returns:
        A HeaderZone. When the file has no directives, the prefix is empty and
        the remainder holds every line of the file.

    Raises:
        HeaderParseError: If a directive or a block comment in the header is
            never terminated, or if a directive shares a line with other code
            or with a block comment.
    """
    prefix: List[str] = []
    directives: List[Directive] = []
    pending: List[str] = []
    zone_end = 0
    i = 0

    while i < len(lines):
        line = lines[i]
        stripped = line.strip()

        if not stripped:
            if not directives:
                prefix.extend(pending)
                prefix.append(line)
                pending = []
            i += 1
            continue

        if is_category_header(line):
            i += 1
            continue

        if stripped.startswith("/*"):
            end, after = _block_comment_end(lines, i)
            after = after.strip()
            if after and not after.startswith("//"):
                if DIRECTIVE_RE.match(after):
                    raise HeaderParseError(end + 1, "directive shares a line with a block comment")
                break
            pending.extend(lines[i:end + 1])
            i = end + 1
            continue

        if stripped.startswith("//"):
            pending.append(line)
            i += 1
            continue

        if DIRECTIVE_RE.match(line):
            directive, i = _read_directive(lines, i, pending)
            directives.append(directive)
            pending = []
            zone_end = i
            continue

        if not directives and (DECLARATION_RE.match(line) or stripped.startswith("@")):
            prefix.extend(pending)
            pending = []
            end = _statement_end(lines, i, "declaration") if DECLARATION_RE.match(line) else i
            prefix.extend(lines[i:end + 1])
            i = end + 1
            continue

        break

    if not directives:
        return HeaderZone(prefix=(), directives=(), remainder=tuple(lines))

    while prefix and not prefix[-1].strip():
        prefix.pop()

    remainder = list(lines[zone_end:])
    while remainder and not remainder[0].strip():
        remainder.pop(0)

    return HeaderZone(
        prefix=tuple(prefix),
        directives=tuple(directives),
        remainder=tuple(remainder),
    )
