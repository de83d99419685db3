"""Locate dictionary literals in JavaScript source.

Parses a script with esprima and walks the syntax tree looking for the two
shapes a translation dictionary is declared with:

    systemDictionary = {...};            (expression statement)
    var systemDictionary = {...};        (variable declarator)

Each hit is reported as a LiteralMatch carrying the character spans of the
whole statement/declarator and of the literal value itself.

Python 3.13+.
"""

import logging
from collections.abc import Iterable, Iterator

import esprima
from esprima.error_handler import Error as EsprimaError
from esprima.nodes import Node

from ioblate.constants import DICTIONARY_IDENTIFIERS, MAX_SOURCE_SIZE
from ioblate.diagnostics import Diagnostic, ErrorTemplate, ParseError

from .nodes import LiteralMatch, Span
from .position import source_span

__all__ = ["locate", "parse_program"]

logger = logging.getLogger(__name__)


def parse_program(source_text: str) -> Node:
    """Parse source_text into an esprima Program node with ranges.

    Tries script grammar first and falls back to module grammar so that
    files using import/export still parse.

    Raises:
        ParseError: If the text is too large or is not valid JavaScript
    """
    if len(source_text) > MAX_SOURCE_SIZE:
        raise ParseError(ErrorTemplate.source_too_large(len(source_text), MAX_SOURCE_SIZE))

    try:
        return esprima.parseScript(source_text, {"range": True})
    except EsprimaError as script_error:
        try:
            return esprima.parseModule(source_text, {"range": True})
        except EsprimaError:
            logger.debug("Module grammar fallback failed as well", exc_info=True)
        raise ParseError(_script_diagnostic(source_text, script_error)) from script_error
    except RecursionError as e:
        raise ParseError(ErrorTemplate.script_parse_failed("Nesting too deep")) from e


def _script_diagnostic(source_text: str, error: EsprimaError) -> Diagnostic:
    """Build a diagnostic from an esprima error, keeping its position."""
    index = getattr(error, "index", None)
    description = getattr(error, "description", None) or str(error)
    span = None
    if isinstance(index, int) and 0 <= index <= len(source_text):
        span = source_span(source_text, index)
    return ErrorTemplate.script_parse_failed(description, span)


def _children(node: Node) -> list[Node]:
    """Direct child nodes in source order."""
    found: list[Node] = []
    for value in vars(node).values():
        if isinstance(value, Node):
            found.append(value)
        elif isinstance(value, list):
            found.extend(item for item in value if isinstance(item, Node))
    found.sort(key=lambda child: child.range[0] if child.range else 0)
    return found


def _is_target(node: Node | None, identifiers: frozenset[str]) -> bool:
    return node is not None and node.type == "Identifier" and node.name in identifiers


def _match(node: Node, identifiers: frozenset[str]) -> LiteralMatch | None:
    """Return the match for node, or None if it is not a dictionary binding."""
    if node.type == "ExpressionStatement":
        expression = node.expression
        if (
            expression is not None
            and expression.type == "AssignmentExpression"
            and expression.operator == "="
            and _is_target(expression.left, identifiers)
        ):
            return LiteralMatch(
                match_span=Span(*node.range),
                value_span=Span(*expression.right.range),
            )
    elif node.type == "VariableDeclarator":
        if _is_target(node.id, identifiers) and node.init is not None:
            return LiteralMatch(
                match_span=Span(*node.range),
                value_span=Span(*node.init.range),
            )
    return None


def _walk(program: Node, identifiers: frozenset[str]) -> Iterator[LiteralMatch]:
    """Depth-first pre-order traversal yielding matches in source order."""
    stack = [program]
    while stack:
        node = stack.pop()
        match = _match(node, identifiers)
        if match is not None:
            logger.debug(
                "Matched %s at [%d, %d)", node.type, match.match_span.start, match.match_span.end
            )
            yield match
        stack.extend(reversed(_children(node)))


def locate(
    source_text: str, identifiers: Iterable[str] = DICTIONARY_IDENTIFIERS
) -> Iterator[LiteralMatch]:
    """Find every dictionary literal in source_text.

    The text is parsed immediately; the returned iterator walks the tree
    lazily.

    Args:
        source_text: JavaScript program text
        identifiers: Accepted dictionary variable names

    Returns:
        Iterator of LiteralMatch in source order

    Raises:
        ParseError: If source_text is not valid JavaScript

    Example:
        >>> [m.value_span for m in locate("systemDictionary = {};")]
        [Span(start=19, end=21)]
    """
    program = parse_program(source_text)
    return _walk(program, frozenset(identifiers))
