"""
Path expression resolution against JSON documents.

A path expression is a dot separated list of segments. A segment is an object
key, an array index, ``*`` (every element of the array or object at that
level) or ``$`` (the whole document, only valid on its own).

Resolving never fails for data that is simply not there: missing keys,
out-of-range indexes, scalars and ``None`` end that branch and the caller gets
fewer (possibly zero) resolutions. Only a malformed expression raises.
"""

from typing import Any, Iterator, List, Sequence, Tuple, Union

from ..errors import PathSyntaxError
from ..models.envelope import Resolution

ROOT = "$"
WILDCARD = "*"
SEPARATOR = "."


def parse_path(expr: str) -> List[str]:
    """
    Split a path expression into segments.

    Args:
        expr: Path expression such as ``elem1.encryptedData`` or ``*.items``

    Returns:
        List of segments

    Raises:
        PathSyntaxError: If the expression is empty, has an empty segment or
            uses ``$`` alongside other segments
    """
    if not expr:
        raise PathSyntaxError("Path expression is empty", path=expr)
    segments = expr.split(SEPARATOR)
    if any(not segment for segment in segments):
        raise PathSyntaxError(f"Path expression '{expr}' has an empty segment", path=expr)
    if ROOT in segments and len(segments) > 1:
        raise PathSyntaxError(
            f"Path expression '{expr}' uses '{ROOT}' but it must be the only segment", path=expr
        )
    return segments


def is_root(expr: str) -> bool:
    """Whether the expression addresses the whole document."""
    return expr == ROOT


def count_wildcards(expr: str) -> int:
    """Number of ``*`` segments in a path expression."""
    return parse_path(expr).count(WILDCARD)


def to_segments(path: Union[str, Sequence[str]]) -> List[str]:
    """
    Concrete segments of a location, ``[]`` for the whole document.

    A string is parsed as a path expression. A sequence is taken as already
    split, so keys containing ``.`` or equal to ``$`` or ``*`` stay intact.
    """
    if isinstance(path, str):
        segments = parse_path(path)
        return [] if segments == [ROOT] else segments
    return list(path)


def format_path(segments: Sequence[str]) -> str:
    """Dotted rendering of concrete segments, for messages only."""
    return SEPARATOR.join(segments) if segments else ROOT


def _children(current: Any) -> Iterator[Tuple[str, Any]]:
    if isinstance(current, dict):
        for key, value in current.items():
            yield str(key), value
    elif isinstance(current, list):
        for index, value in enumerate(current):
            yield str(index), value


def lookup(current: Any, segment: str) -> Tuple[bool, Any]:
    """Look up one literal segment, returning (found, value)."""
    if isinstance(current, dict):
        if segment in current:
            return True, current[segment]
    elif isinstance(current, list):
        if segment.isdigit() and int(segment) < len(current):
            return True, current[int(segment)]
    return False, None


def resolve(expr: str, doc: Any) -> List[Resolution]:
    """
    Resolve a path expression against a document.

    Wildcards fan out in document order (ascending index for arrays, insertion
    order for objects), so two expressions expanded against the same document
    produce branches in the same order.

    Args:
        expr: Path expression
        doc: JSON document (dict, list or scalar)

    Returns:
        Ordered list of resolutions, empty when nothing is found

    Raises:
        PathSyntaxError: If the expression is malformed
    """
    segments = parse_path(expr)
    if segments == [ROOT]:
        return [Resolution(path=ROOT, segments=[], node=doc, parent=None)]

    # (concrete segments, parent, node, wildcard bindings)
    branches: List[Tuple[List[str], Any, Any, List[str]]] = [([], None, doc, [])]
    for segment in segments:
        expanded = []
        for concrete, _, current, bindings in branches:
            if segment == WILDCARD:
                for key, child in _children(current):
                    expanded.append((concrete + [key], current, child, bindings + [key]))
            else:
                found, child = lookup(current, segment)
                if found:
                    expanded.append((concrete + [segment], current, child, bindings))
        branches = [branch for branch in expanded if branch[2] is not None]
        if not branches:
            return []

    return [
        Resolution(
            path=format_path(concrete), segments=concrete, node=node, parent=parent, bindings=bindings
        )
        for concrete, parent, node, bindings in branches
    ]


def bind_wildcards(expr: str, bindings: Sequence[str]) -> List[str]:
    """
    Replace the Nth ``*`` of ``expr`` with the Nth binding.

    Segments after the last wildcard are kept verbatim. The result is the
    concrete segment list (``[]`` for ``$``); bindings are never re-parsed, so
    a key such as ``a.b`` or ``""`` lands as a single segment.

    Raises:
        PathSyntaxError: If the number of bindings differs from the number of wildcards
    """
    segments = parse_path(expr)
    if segments.count(WILDCARD) != len(bindings):
        raise PathSyntaxError(
            f"Path expression '{expr}' has {segments.count(WILDCARD)} wildcard(s), "
            f"got {len(bindings)} binding(s)",
            path=expr,
        )
    if segments == [ROOT]:
        return []
    values = iter(bindings)
    return [next(values) if segment == WILDCARD else segment for segment in segments]


def pair_resolutions(element: str, obj: str, doc: Any) -> List[Tuple[Resolution, List[str]]]:
    """
    Expand a source and a destination expression in lockstep.

    Every resolution of ``element`` is paired with the destination obtained by
    binding the wildcards of ``obj`` to the keys that resolution went through,
    so the Nth source branch always lands in the Nth destination branch.

    Args:
        element: Source path expression
        obj: Destination path expression
        doc: Document to resolve the source against

    Returns:
        List of (source resolution, concrete destination segments)

    Raises:
        PathSyntaxError: If either expression is malformed or the two carry a
            different number of wildcards
    """
    if count_wildcards(element) != count_wildcards(obj):
        raise PathSyntaxError(
            f"Source '{element}' and destination '{obj}' must use the same number of wildcards",
            path=obj,
        )
    return [(resolution, bind_wildcards(obj, resolution.bindings)) for resolution in resolve(element, doc)]
