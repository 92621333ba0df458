"""
Path addressing for form-definition documents.

Snapshots are immutable and every edit produces new node objects, so nodes have
no stable identity across edits. The only durable handle on a node is its
path: a sequence alternating container keys and indexes, for example
``('steps', 0, 'questionGroups', 1, 'elements', 3)``.

`resolve` walks such a path and records the chain of parents it went through.
That chain is what the editor needs to rebuild a snapshot: replacing a node
only reallocates the nodes on the spine from the root down to it, everything
else is shared with the previous snapshot.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple, Union

from form_editor.exceptions.editing import InvalidPathError
from form_editor.models.document import Document, FormNode

PathSegment = Union[str, int]
NodePath = Tuple[PathSegment, ...]


@dataclass(frozen=True)
class PathLink:
    """One step of a resolved path: `parent.<field>[index]`"""
    parent: FormNode
    field: str
    index: int


@dataclass(frozen=True)
class ResolvedNode:
    """A node located inside a snapshot, with the links leading to it"""
    document: Document
    path: NodePath
    node: FormNode
    links: Tuple[PathLink, ...]

    @property
    def parent(self) -> Optional[FormNode]:
        return self.links[-1].parent if self.links else None

    @property
    def index(self) -> Optional[int]:
        return self.links[-1].index if self.links else None

    def owner(self) -> "ResolvedNode":
        """The resolved node owning the sequence this node sits in"""
        if not self.links:
            raise InvalidPathError("The document has no parent", self.path)
        return ResolvedNode(
            document=self.document,
            path=self.path[:-2],
            node=self.links[-1].parent,
            links=self.links[:-1],
        )

    def replace(self, new_node: FormNode) -> Document:
        """Return a new document in which this node is replaced by `new_node`"""
        for link in reversed(self.links):
            siblings = list(getattr(link.parent, link.field))
            siblings[link.index] = new_node
            new_node = link.parent.model_copy(update={link.field: siblings})
        return new_node

    def replace_children(self, children: List[FormNode]) -> Document:
        """Return a new document in which this node's child sequence is `children`"""
        if self.node.children_field is None:
            raise InvalidPathError(
                f"{type(self.node).__name__} has no child sequence", self.path
            )
        updated = self.node.model_copy(update={self.node.children_field: children})
        return self.replace(updated)


def resolve(document: Document, path: Sequence[PathSegment]) -> ResolvedNode:
    """Walk `path` inside `document`.

    Args:
        document: The snapshot to look into
        path: Alternating container keys and indexes. The empty path is the
            document itself.

    Returns:
        The resolved node and its ancestor links

    Raises:
        InvalidPathError: If a key is not the child container of the node
            reached so far, an index is not an int or is out of range, or
            the path has odd length
    """
    path = tuple(path)
    if len(path) % 2:
        raise InvalidPathError(
            "Path must alternate container keys and indexes", path, len(path) - 1
        )

    node: FormNode = document
    links = []
    for position in range(0, len(path), 2):
        key, index = path[position], path[position + 1]
        if not isinstance(key, str) or key != node.children_key():
            raise InvalidPathError(
                f"'{key}' is not a child container of {type(node).__name__}",
                path,
                position,
            )
        # bool is an int subclass but never a valid index
        if isinstance(index, bool) or not isinstance(index, int):
            raise InvalidPathError(f"Index {index!r} is not an integer", path, position + 1)

        children = node.children()
        if not 0 <= index < len(children):
            raise InvalidPathError(
                f"Index {index} out of range for '{key}' ({len(children)} entries)",
                path,
                position + 1,
            )
        links.append(PathLink(parent=node, field=node.children_field, index=index))
        node = children[index]

    return ResolvedNode(document=document, path=path, node=node, links=tuple(links))


def step_path(step_idx: int) -> NodePath:
    return ("steps", step_idx)


def group_path(step_idx: int, group_idx: int) -> NodePath:
    return step_path(step_idx) + ("questionGroups", group_idx)


def element_path(step_idx: int, group_idx: int, element_idx: int) -> NodePath:
    return group_path(step_idx, group_idx) + ("elements", element_idx)


def parent_path(path: Sequence[PathSegment]) -> NodePath:
    """Path of the node owning the sequence `path` points into"""
    if not path:
        raise InvalidPathError("The document has no parent", path)
    return tuple(path)[:-2]


def same_path(a: Optional[Sequence[PathSegment]], b: Optional[Sequence[PathSegment]]) -> bool:
    """Selection equality: compares addresses, never node identity"""
    if a is None or b is None:
        return a is None and b is None
    return tuple(a) == tuple(b)
