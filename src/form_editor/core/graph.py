"""Graph view of a form-definition document.

The tree is mirrored into a NetworkX DiGraph whose nodes are the paths of the
document nodes (the document itself is the empty path). The graph is a
read-only view used for outlines, summaries and diagnostics; edits always go
through `form_editor.core.editor`.
"""

from collections import Counter
from typing import Dict, Iterator, List, Tuple

import networkx as nx

from form_editor.core.paths import NodePath
from form_editor.models.document import (
    Document,
    Element,
    ElementItem,
    FormNode,
    QuestionGroup,
    Step,
)

NODE_KINDS = {
    Document: "document",
    Step: "step",
    QuestionGroup: "group",
    Element: "element",
    ElementItem: "item",
}

ROOT: NodePath = ()


def build_document_graph(document: Document) -> nx.DiGraph:
    """Convert a document into a DiGraph keyed by node path"""
    graph = nx.DiGraph()
    graph.add_node(ROOT, kind="document", label="", position=0)
    _add_children(graph, document, ROOT)
    return graph


def _add_children(graph: nx.DiGraph, node: FormNode, path: NodePath) -> None:
    key = node.children_key()
    for index, child in enumerate(node.children()):
        child_path = path + (key, index)
        attrs = {
            "kind": NODE_KINDS[type(child)],
            "label": child.display_label,
            "position": index,
        }
        for name in ("tag", "identifier", "type"):
            if hasattr(child, name):
                attrs[name] = getattr(child, name)
        graph.add_node(child_path, **attrs)
        graph.add_edge(path, child_path)
        _add_children(graph, child, child_path)


def iter_nodes_of_kind(graph: nx.DiGraph, kind: str) -> Iterator[Tuple[NodePath, Dict]]:
    for path, attrs in graph.nodes(data=True):
        if attrs["kind"] == kind:
            yield path, attrs


def outline(document: Document, include_items: bool = False) -> List[str]:
    """Indented one-line-per-node listing in document order"""
    graph = build_document_graph(document)
    lines = []
    for path in nx.dfs_preorder_nodes(graph, source=ROOT):
        if path == ROOT:
            continue
        attrs = graph.nodes[path]
        if attrs["kind"] == "item" and not include_items:
            continue
        indent = "  " * (len(path) // 2 - 1)
        if attrs["kind"] == "element":
            lines.append(f"{indent}- {attrs['label']} ({attrs['type']})")
        elif attrs["kind"] == "item":
            lines.append(f"{indent}* {attrs['label']}")
        else:
            lines.append(f"{indent}[{attrs['kind']}] {attrs['label']}")
    return lines


def summarize(document: Document) -> Dict[str, Dict[str, int]]:
    """Count nodes per kind and elements per type"""
    graph = build_document_graph(document)
    kinds = Counter(attrs["kind"] for path, attrs in graph.nodes(data=True) if path != ROOT)
    types = Counter(str(attrs["type"]) for _, attrs in iter_nodes_of_kind(graph, "element"))
    return {
        "kinds": {kind: kinds.get(kind, 0) for kind in ("step", "group", "element", "item")},
        "element_types": dict(types),
    }
