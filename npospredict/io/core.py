"""Shared functionality for voter list and forecast file I/O. Internal."""

import json
import typing
from typing import Any, Callable, TextIO, Tuple


class ParseError(Exception):
    """An input that is invalid according to the given format was detected."""
    pass


def loaders(document_loader: Callable[..., Any]
            ) -> Tuple[Callable[..., Any], Callable[..., Any]]:
    """Create load() and loads() functions from a JSON document parser.

    The parser receives the decoded JSON document; malformed JSON is
    reported as a :class:`ParseError`.
    """
    return_annot = typing.get_type_hints(document_loader).get('return')
    if return_annot is None:
        return_annot = Any

    def loads(text: str, **kwargs) -> return_annot:
        try:
            document = json.loads(text)
        except json.JSONDecodeError as err:
            raise ParseError(f'invalid JSON: {err}') from err
        return document_loader(document, **kwargs)

    def load(file: TextIO, **kwargs) -> return_annot:
        return loads(file.read(), **kwargs)

    return load, loads


def dumpers(document_dumper: Callable[..., Any]
            ) -> Tuple[Callable[..., None], Callable[..., str]]:
    """Create dump() and dumps() functions from a JSON document builder."""

    def dumps(*args, indent: int = 2, **kwargs) -> str:
        return json.dumps(
            document_dumper(*args, **kwargs), indent=indent
        ) + '\n'

    def dump(file: TextIO, *args, **kwargs) -> None:
        file.write(dumps(*args, **kwargs))

    return dump, dumps
