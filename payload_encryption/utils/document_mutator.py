"""
Document mutation for encrypted and decrypted elements.

Writes and deletions happen in place on the document, except that a write to
``$`` replaces the document itself. ``write_value`` therefore always returns
the root to use afterwards and callers must keep that reference.

Locations are either path expressions or concrete segment lists as produced
by the path resolver (``[]`` for the whole document). Segment lists are used
as-is, so keys containing ``.`` are addressed correctly.
"""

from typing import Any, Iterable, List, Optional, Sequence, Union

from ..errors import DocumentMutationError
from .path_resolver import format_path, lookup, to_segments

Location = Union[str, Sequence[str]]


def _clear(node: Any) -> None:
    if isinstance(node, (dict, list)):
        node.clear()


def _strip(node: Any, keys: Iterable[str]) -> None:
    if isinstance(node, dict):
        for key in keys:
            node.pop(key, None)


def _descend(container: Any, segment: str, path: str) -> Any:
    """Step into ``segment``, creating a missing object along the way."""
    if isinstance(container, dict):
        child = container.get(segment)
        if child is None:
            child = container[segment] = {}
    elif isinstance(container, list):
        found, child = lookup(container, segment)
        if not found:
            raise DocumentMutationError(
                f"Cannot write '{path}': array has no index '{segment}'", path=path
            )
    else:
        raise DocumentMutationError(f"Cannot write '{path}': '{segment}' is not a container", path=path)

    if not isinstance(child, (dict, list)):
        raise DocumentMutationError(
            f"Cannot write '{path}': '{segment}' holds a {type(child).__name__}", path=path
        )
    return child


def _assign(container: Any, key: str, value: Any, path: str) -> None:
    if isinstance(container, dict):
        container[key] = value
    elif isinstance(container, list) and key.isdigit() and int(key) < len(container):
        container[int(key)] = value
    else:
        raise DocumentMutationError(f"Cannot write '{path}': no slot '{key}'", path=path)


def _check_writable(
    segments: List[str],
    doc: Any,
    removed: Optional[List[str]] = None,
    removed_keys: Optional[Iterable[str]] = None,
) -> None:
    """
    Walk ``segments`` the way ``write_value`` will, without changing anything.

    ``removed`` is the source about to be deleted: once the walk reaches a
    part of the document that the deletion drops, everything below it will be
    created and needs no further checks.

    Raises:
        DocumentMutationError: If the write would go through a scalar or a
            missing array index
    """
    path = format_path(segments)
    keys = None if removed_keys is None else set(removed_keys)
    if removed == [] and keys is None:
        return

    container = doc
    for depth, segment in enumerate(segments[:-1]):
        if isinstance(container, dict):
            if removed is not None:
                if keys is None and segments[: depth + 1] == removed:
                    return
                if keys is not None and segments[:depth] == removed and segment in keys:
                    return
            child = container.get(segment)
            if child is None:
                return
        elif isinstance(container, list):
            found, child = lookup(container, segment)
            if not found:
                raise DocumentMutationError(
                    f"Cannot write '{path}': array has no index '{segment}'", path=path
                )
            if removed is not None and keys is None and segments[: depth + 1] == removed:
                # array slots are emptied in place, not removed
                if isinstance(child, dict):
                    return
                child = [] if isinstance(child, list) else None
        else:
            raise DocumentMutationError(f"Cannot write '{path}': '{segment}' is not a container", path=path)

        if not isinstance(child, (dict, list)):
            raise DocumentMutationError(
                f"Cannot write '{path}': '{segment}' holds a {type(child).__name__}", path=path
            )
        container = child

    last = segments[-1]
    if isinstance(container, dict):
        return
    if not (isinstance(container, list) and last.isdigit() and int(last) < len(container)):
        raise DocumentMutationError(f"Cannot write '{path}': no slot '{last}'", path=path)


def delete_node(path: Location, doc: Any, delete_keys: Optional[Iterable[str]] = None) -> None:
    """
    Remove the node at ``path`` from the document.

    With ``delete_keys`` only those keys are stripped from the node, and the
    node itself is removed once nothing else is left in it. For ``$`` the
    keys are stripped from the top level; without keys the whole document is
    emptied in place.

    A node addressed by an array index is emptied rather than removed so the
    indexes of its siblings do not shift.

    Args:
        path: Concrete path or segment list of the node
        doc: Document to mutate
        delete_keys: Keys to strip instead of removing the whole node
    """
    if doc is None:
        return
    segments = to_segments(path)
    if not segments:
        if delete_keys is None:
            _clear(doc)
        else:
            _strip(doc, delete_keys)
        return

    container = doc
    for segment in segments[:-1]:
        found, container = lookup(container, segment)
        if not found:
            return

    last = segments[-1]
    found, node = lookup(container, last)
    if not found:
        return
    if delete_keys is not None:
        _strip(node, delete_keys)
        if node:
            return

    if isinstance(container, list):
        if isinstance(node, (dict, list)):
            _clear(node)
        else:
            container[int(last)] = None
    else:
        del container[last]


def write_value(
    dest: Location,
    value: Any,
    doc: Any,
    src_to_delete: Optional[Location] = None,
    delete_keys: Optional[Iterable[str]] = None,
) -> Any:
    """
    Write ``value`` at ``dest`` and return the (possibly new) document root.

    Missing intermediate objects are created; arrays never are. An object
    value written over an existing object is merged into it, keeping the
    existing sibling keys; any other value replaces the destination.

    The destination is checked before the source is deleted, so a write that
    cannot happen leaves the document untouched.

    Args:
        dest: Concrete destination path or segments, ``$`` (or ``[]``) to
            replace the whole document
        value: Value to write
        doc: Document to mutate
        src_to_delete: Source removed before writing, ignored when equal to ``dest``
        delete_keys: Keys to strip from the source instead of removing it, see ``delete_node``

    Returns:
        Document root to use from now on

    Raises:
        PathSyntaxError: If a path expression is malformed
        DocumentMutationError: If ``dest`` goes through a scalar or a missing array index
    """
    segments = to_segments(dest)
    path = format_path(segments)
    source = None if src_to_delete is None else to_segments(src_to_delete)
    if delete_keys is not None:
        delete_keys = list(delete_keys)

    if source is not None and source != segments:
        if not source and segments and not isinstance(doc, dict):
            # the emptied root was an array or a scalar, fields need an object
            delete_node(source, doc, delete_keys)
            doc = {}
        else:
            if segments:
                _check_writable(segments, doc, source, delete_keys)
            delete_node(source, doc, delete_keys)

    if not segments:
        return value

    container = doc
    for segment in segments[:-1]:
        container = _descend(container, segment, path)

    last = segments[-1]
    if isinstance(value, dict):
        found, existing = lookup(container, last)
        if not found or not isinstance(existing, dict):
            existing = {}
            _assign(container, last, existing, path)
        existing.update(value)
    else:
        _assign(container, last, value, path)
    return doc
