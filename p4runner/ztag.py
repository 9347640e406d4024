"""This module provides a parser for the Perforce tagged (-ztag) output format.

The tagged format is not a single grammar. Output can start with free text (login prompts, warnings),
fields are introduced by a '... ' marker at the start of a line, records are separated by a blank line
and some values (descriptions) legitimately span several lines. The parser tolerates all of these without
a schema and never raises.

Attributes:
    FIELD_MARKER: The token which introduces a tagged field.
    FieldValue: The value of a tagged field. A key with no value is the flag True.
    Record: A single tagged record.
    OutputSequence: The parsed output in source order.
"""

# Import standard modules
from dataclasses import dataclass, field
from re import compile as re_compile
from typing import Dict, Iterator, List, Optional, Tuple, TypeAlias

FIELD_MARKER = '...'

_GROUP_REX = re_compile(r'\n\n\.\.\.\s')
_FIELD_REX = re_compile(r'(?:\n|^)\.\.\.\s')
_NEWLINE_REX = re_compile(r'\r\n|\n|\r')
_INTEGER_REX = re_compile(r'^(?:0|[1-9][0-9]*)\s*$')

FieldValue: TypeAlias = str | int | bool
Record: TypeAlias = Dict[str, FieldValue]


@dataclass(frozen=True)
class Preamble:
    """Free text found ahead of the first tagged field.

        Attributes:
            lines: The trimmed lines of text.
    """
    lines: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class OverflowText:
    """Lines of a multi-line value which were not kept in the owning record.

        Attributes:
            lines: The non-empty lines following the first line of the value.
    """
    lines: List[str] = field(default_factory=list)


OutputEntry: TypeAlias = Preamble | Record | OverflowText
OutputSequence: TypeAlias = List[OutputEntry]


def parse_ztag(buffer: str, /, multi_line: bool = False) -> OutputSequence:
    """Parse Perforce tagged output into a sequence of entries.

    Args:
        buffer: The raw command output.
        multi_line (optional, default=False): If True, values with embedded newlines are kept whole,
            otherwise only the first line is kept and the rest is emitted as OverflowText after the record.

    Returns:
        The list of Preamble, Record and OverflowText entries in the order they appear in the buffer.
    """
    output: OutputSequence = []
    (preamble, buffer) = _split_preamble(buffer)
    if preamble:
        output.append(preamble)

    for group in _split_groups(buffer):
        record: Record = {}
        overflow: List[str] = []
        for chunk in _split_fields(group):
            (key, value, extra) = _parse_field(chunk, multi_line)
            record[key] = value
            overflow += extra

        if not record:
            continue
        output.append(record)
        if overflow:
            output.append(OverflowText(overflow))
    return output


def records(output: OutputSequence, /) -> List[Record]:
    """Return only the records from a parsed output sequence."""
    return [entry for entry in output if isinstance(entry, dict)]


def _split_preamble(buffer: str, /) -> Tuple[Optional[Preamble], str]:
    """Separate any text ahead of the first field marker from the tagged content.

    Returns:
        A tuple of the preamble (None if there is none) and the remaining buffer.
    """
    start = buffer.find(FIELD_MARKER)
    if start == 0:
        return (None, buffer)
    leading = (buffer[:start] if (start > 0) else buffer).strip()
    remainder = buffer[start:] if (start > 0) else ''
    return ((Preamble(_NEWLINE_REX.split(leading)) if leading else None), remainder)


def _split_groups(buffer: str, /) -> List[str]:
    """Split tagged content into record groups on a blank line followed by a field marker."""
    return _GROUP_REX.split(buffer) if buffer else []


def _split_fields(group: str, /) -> Iterator[str]:
    """Yield the non-empty field chunks of a record group."""
    chunks = _FIELD_REX.split(group)
    if chunks and (chunks[0] == ''):
        chunks.pop(0)
    for chunk in chunks:
        if chunk := chunk.strip():
            yield chunk


def _parse_field(chunk: str, multi_line: bool, /) -> Tuple[str, FieldValue, List[str]]:
    """Parse a single trimmed field chunk.

    Returns:
        A tuple of the key, the typed value and any overflow lines.
    """
    if ' ' not in chunk:
        return (chunk, True, [])

    (key, value) = chunk.split(' ', 1)
    overflow: List[str] = []
    if ('\n' in value) and not multi_line:
        (value, *rest) = value.split('\n')
        overflow = [line for line in rest if line != '']
    return (key, _coerce_value(value), overflow)


def _coerce_value(value: str, /) -> FieldValue:
    """Convert a value to an int if it is a plain number, leave it as text otherwise."""
    if _INTEGER_REX.match(value):
        return int(value)
    return value
