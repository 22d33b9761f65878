"""
Reply tree built once from a flat, chronologically ordered comment fetch.

Nodes are linked through an id index, never through recursive lookups,
so a malformed parent chain cannot loop.
"""

from typing import Dict, List, Optional

from adoptd.modules.forum.domain.models.forum import MAX_REPLY_DEPTH, Comment


def _break_cycles(index: Dict[str, Comment]):
    # a reply chain that loops back on itself is cut where the loop closes
    for comment_id in index:
        seen = set()
        current: Optional[str] = comment_id
        while current is not None and current in index:
            if current in seen:
                index[current].parent_id = None
                break
            seen.add(current)
            current = index[current].parent_id


def _resolve_depths(index: Dict[str, Comment]) -> Dict[str, int]:
    depths: Dict[str, int] = {}
    for comment_id in index:
        chain = []
        seen = set()
        current: Optional[str] = comment_id
        while current is not None and current not in depths:
            if current in seen or current not in index:
                break
            seen.add(current)
            chain.append(current)
            current = index[current].parent_id

        base = depths.get(current, -1) if current in depths else -1
        for node_id in reversed(chain):
            base += 1
            depths[node_id] = base
    return depths


def build_comment_tree(comments: List[Comment], max_depth: int = MAX_REPLY_DEPTH) -> List[Comment]:
    """
    Arrange comments into reply trees.

    A comment whose parent is missing or sits on another post becomes a root.
    Anything nested deeper than ``max_depth`` is attached to its ancestor at
    ``max_depth - 1`` so the rendered tree never exceeds the cap.
    """
    index: Dict[str, Comment] = {}
    for comment in comments:
        node = comment.model_copy(update={"replies": [], "depth": 0})
        index[node.id] = node

    for node in index.values():
        parent = index.get(node.parent_id) if node.parent_id else None
        if parent is None or parent.post_id != node.post_id:
            node.parent_id = None

    _break_cycles(index)
    depths = _resolve_depths(index)

    roots: List[Comment] = []
    for node in index.values():
        depth = depths.get(node.id, 0)
        parent_id = node.parent_id
        while parent_id is not None and depth > max_depth:
            parent_id = index[parent_id].parent_id
            depth -= 1
        node.depth = depth

        if parent_id is None:
            roots.append(node)
        else:
            index[parent_id].replies.append(node)

    return roots


def find_comment(roots: List[Comment], comment_id: str) -> Optional[Comment]:
    stack = list(roots)
    while stack:
        node = stack.pop()
        if node.id == comment_id:
            return node
        stack.extend(node.replies)
    return None
