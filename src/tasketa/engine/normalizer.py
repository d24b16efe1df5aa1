"""Tolerant normalizer for pasted task-status documents.

Pasted documents often deviate from strict JSON in a few predictable ways:

- an HTTP request line (``GET /_tasks/...``) in front of the body
- triple-quoted block strings (``"source": \"\"\" ... \"\"\"``) holding raw
  quotes and newlines, as the console's readable-string syntax allows
- ``//`` line comments

``normalize`` rewrites exactly those deviations and leaves everything else
alone. It never fails; text that is still broken afterwards is rejected by
the decoder.
"""

import re

BLOCK_STRING_PATTERN = re.compile(r'"([^"]+)"\s*:\s*"""(.*?)"""', re.DOTALL)

# Backslash must go first so later substitutions are not escaped twice.
_BLOCK_ESCAPES = (
    ("\\", "\\\\"),
    ('"', '\\"'),
    ("\n", "\\n"),
    ("\r", "\\r"),
    ("\t", "\\t"),
)


def strip_leading_junk(text: str) -> str:
    """Drop anything in front of the first ``{``."""
    start = text.find("{")
    if start > 0:
        return text[start:]
    return text


def escape_block_content(content: str) -> str:
    """Escape raw block-string content for use inside a JSON string."""
    for raw, escaped in _BLOCK_ESCAPES:
        content = content.replace(raw, escaped)
    return content


def convert_block_strings(text: str) -> str:
    """Rewrite every ``"key": \"\"\"...\"\"\"`` field as an ordinary JSON string."""

    def _replace(match: re.Match) -> str:
        key, content = match.group(1), match.group(2)
        return f'"{key}": "{escape_block_content(content)}"'

    return BLOCK_STRING_PATTERN.sub(_replace, text)


def strip_line_comments(text: str) -> str:
    """Remove ``//`` comments that sit outside string literals.

    The newline closing a comment is kept so line structure survives.
    """
    out: list[str] = []
    in_string = False
    escape_next = False
    i = 0
    length = len(text)

    while i < length:
        char = text[i]

        if escape_next:
            out.append(char)
            escape_next = False
            i += 1
            continue

        if char == "\\":
            out.append(char)
            # Only meaningful inside a string literal.
            if in_string:
                escape_next = True
            i += 1
            continue

        if char == '"':
            in_string = not in_string
            out.append(char)
            i += 1
            continue

        if not in_string and char == "/" and i + 1 < length and text[i + 1] == "/":
            newline = text.find("\n", i)
            if newline == -1:
                break
            out.append("\n")
            i = newline + 1
            continue

        out.append(char)
        i += 1

    return "".join(out)


def normalize(text: str) -> str:
    """Turn a relaxed, hand-pasted document into strict JSON text."""
    text = strip_leading_junk(text)
    text = convert_block_strings(text)
    text = strip_line_comments(text)
    return text.replace("\n", " ")
