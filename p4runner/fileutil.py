"""This module provides utilities for working with files."""

# Import standard modules
from json import dumps as json_dumps, loads as json_loads
from typing import Any, Iterable, List

# Import internal modules
from .lang import DEFAULT_ENCODING, PathName


def slurp(filename: PathName, /) -> List[str]:
    """Return all the lines of a file as a list.

    Args:
        filename: The filename to return the lines from.

    Returns:
        The list of lines from the file.
    """
    with open(filename, encoding=DEFAULT_ENCODING) as input_stream:
        return list(input_stream)


def spew(filename: PathName, outlines: Iterable, /) -> None:
    """Write the list of lines to a file.

    Args:
        filename: The filename to which to write the lines.
        outlines: The lines to write.

    Returns:
        Nothing.
    """
    with open(filename, 'w', encoding=DEFAULT_ENCODING) as output_stream:
        output_stream.writelines(outlines)


def read_json(filename: PathName, /) -> Any:
    """Return the parsed content of a JSON file."""
    return json_loads(''.join(slurp(filename)))


def write_json(filename: PathName, content: Any, /) -> None:
    """Write content to a file as JSON indented by two spaces."""
    spew(filename, [json_dumps(content, indent=2)])
