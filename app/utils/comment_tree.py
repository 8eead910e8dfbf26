from typing import Any, Dict, Iterable, List


def build_comment_tree(comments: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Assemble flat comment rows into a reply tree.

    Each row is a dict with at least ``id`` and ``parent_comment_id``. Every
    node gets a ``replies`` list. A row without a parent reference becomes a
    root; a row whose parent is not among ``comments`` is dropped. Input
    order is kept at every level.
    """
    nodes: Dict[int, Dict[str, Any]] = {}
    ordered: List[Dict[str, Any]] = []
    for row in comments:
        node = dict(row)
        node["replies"] = []
        nodes[node["id"]] = node
        ordered.append(node)

    roots: List[Dict[str, Any]] = []
    for node in ordered:
        parent_id = node.get("parent_comment_id")
        if parent_id is None:
            roots.append(node)
        elif parent_id in nodes:
            nodes[parent_id]["replies"].append(node)

    return roots
