# btree.py
"""
In-memory B-tree over totally ordered keys. Supports:
  - insert(value): add a key (duplicates are kept as separate entries)
  - delete(value): remove one occurrence; returns True if something was removed
  - contains(value) / "k" in tree: membership test
  - to_sequence(): every stored key in ascending order
  - len(tree), iter(tree), clear(), stats()

Design:
  - Classic B-tree with minimum degree `t`: keys live in every node, not only
    in leaves (unlike a B+ tree)
  - Every node holds at most 2t-1 keys; every non-root node holds at least t-1
  - Internal nodes have len(children) == len(keys) + 1
  - Insertion splits full children on the way down, so the parent always has
    room for the promoted median
  - Deletion recurses first and repairs underflow on the way back up
    (rotate from a sibling with spare keys, otherwise merge)
"""

from __future__ import annotations

import os
import sys
import logging
from bisect import bisect_left, bisect_right
from typing import Any, Dict, Iterator, List, Optional, Tuple

# --------------------------- Logging ---------------------------
_logger = logging.getLogger("btree")
if not _logger.handlers:
    _h = logging.StreamHandler(stream=sys.stderr)
    _h.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    _logger.addHandler(_h)
_logger.setLevel(os.getenv("BTREE_LOG_LEVEL", "WARNING").upper())

# --------------------------- Defaults --------------------------
DEFAULT_MIN_DEGREE = 3


# -------------------- Node --------------------
class _Node:
    """One B-tree node: sorted `keys`, and `children` when internal."""
    __slots__ = ("leaf", "keys", "children", "t")

    def __init__(self, t: int, leaf: bool = True) -> None:
        self.t = t
        self.leaf = leaf
        self.keys: List[Any] = []
        self.children: List[_Node] = []

    def __repr__(self) -> str:
        kind = "leaf" if self.leaf else "internal"
        return f"_Node({kind}, keys={self.keys!r})"

    @property
    def count(self) -> int:
        return len(self.keys)

    def is_full(self) -> bool:
        return self.count == 2 * self.t - 1

    def is_child_full(self, i: int) -> bool:
        return self.children[i].is_full()

    def siblings(self, i: int) -> Tuple[Optional[int], int, Optional[int]]:
        """Return (left, i, right) child indices; None marks a missing sibling."""
        left = i - 1 if i > 0 else None
        right = i + 1 if i + 1 < len(self.children) else None
        return left, i, right

    # -------- Search & traversal --------
    def contains(self, value: Any) -> bool:
        node = self
        while True:
            # i = first index where keys[i] >= value
            i = bisect_left(node.keys, value)
            if i < node.count and node.keys[i] == value:
                return True
            if node.leaf:
                return False
            node = node.children[i]

    def to_sequence(self) -> List[Any]:
        """In-order keys: child0, key0, child1, key1, ..., child[count]."""
        if self.leaf:
            return list(self.keys)
        acc: List[Any] = []
        for i, key in enumerate(self.keys):
            acc.extend(self.children[i].to_sequence())
            acc.append(key)
        acc.extend(self.children[-1].to_sequence())
        return acc

    def iter_keys(self) -> Iterator[Any]:
        if self.leaf:
            yield from self.keys
            return
        for i, key in enumerate(self.keys):
            yield from self.children[i].iter_keys()
            yield key
        yield from self.children[-1].iter_keys()

    # -------- Insertion --------
    def insert_nonfull(self, value: Any) -> None:
        """Insert into the subtree rooted here. Pre: this node is not full."""
        if self.leaf:
            # Equal keys stay in arrival order: the new one goes after them.
            self.keys.insert(bisect_right(self.keys, value), value)
            return

        # Rightmost child whose preceding key is < value.
        i = self.count
        while i > 0 and self.keys[i - 1] >= value:
            i -= 1

        if self.is_child_full(i):
            self.split(i)
            # The promoted median now sits at keys[i]; pick the half to enter.
            if value > self.keys[i]:
                i += 1

        self.children[i].insert_nonfull(value)

    def split(self, i: int) -> None:
        """Split the full child `children[i]` around its median.

        Pre: this node is not full, children[i] holds 2t-1 keys.

            before (t=3):  parent: [.. p ..]   child: [k0, k1, k2, k3, k4]
            after:         parent: [.. k2 p ..]
                           child:  [k0, k1]    sibling: [k3, k4]

        For internal children the top t child pointers move to the sibling.
        """
        t = self.t
        left = self.children[i]
        right = _Node(t, leaf=left.leaf)

        right.keys = left.keys[t:]
        del left.keys[t:]
        if not left.leaf:
            right.children = left.children[t:]
            del left.children[t:]

        # Median is the last key left behind after the top half moved out.
        self.keys.insert(i, left.keys.pop())
        self.children.insert(i + 1, right)
        _logger.debug("split child %d -> %r | %r", i, left.keys, right.keys)

    # -------- Deletion --------
    def remove_key(self, value: Any) -> bool:
        """Drop the first key equal to `value` from this node's own keys."""
        for i, key in enumerate(self.keys):
            if key == value:
                del self.keys[i]
                return True
        return False

    def delete(self, value: Any) -> bool:
        """Remove one occurrence of `value` from the subtree rooted here.

        Pre: this node is internal. Children that drop below t-1 keys are
        repaired before returning; this node itself may be left short, which
        its parent (or the tree, for the root) takes care of.
        """
        i = bisect_left(self.keys, value)
        if i < self.count and self.keys[i] == value:
            # The in-order successor is cut out of the right subtree and takes
            # over the slot; keys[i] is written before any repair at this level
            # can move it.
            right = self.children[i + 1]
            self.keys[i] = right.pop_min()
            if right.count < self.t - 1:
                self.rebalance(i + 1)
            return True

        child = self.children[i]
        if child.leaf:
            return self.delete_from_leaf(value, i)

        removed = child.delete(value)
        if child.count < self.t - 1:
            self.rebalance(i)
        return removed

    def delete_from_leaf(self, value: Any, i: int) -> bool:
        """Remove `value` from the leaf `children[i]`, keeping it >= t-1 keys.

        A leaf with only t-1 keys is topped up first (borrow from a sibling,
        or merge with one), so that removing a key cannot underflow it.
        """
        if self.children[i].count < self.t:
            i = self.rebalance(i)
        return self.children[i].remove_key(value)

    def rebalance(self, i: int) -> int:
        """Give children[i] at least one more key; return its (new) index."""
        left, _, right = self.siblings(i)
        if left is not None and self.children[left].count >= self.t:
            self.rotate_from_left(i)
            return i
        if right is not None and self.children[right].count >= self.t:
            self.rotate_from_right(i)
            return i
        return self.merge(i)

    def rotate_from_left(self, i: int) -> None:
        """Left sibling's max -> parent delimiter -> front of children[i]."""
        target = self.children[i]
        left = self.children[i - 1]
        target.keys.insert(0, self.keys[i - 1])
        self.keys[i - 1] = left.keys.pop()
        if not left.leaf:
            target.children.insert(0, left.children.pop())
        _logger.debug("rotated key from left sibling into child %d", i)

    def rotate_from_right(self, i: int) -> None:
        """Right sibling's min -> parent delimiter -> back of children[i]."""
        target = self.children[i]
        right = self.children[i + 1]
        target.keys.append(self.keys[i])
        self.keys[i] = right.keys.pop(0)
        if not right.leaf:
            target.children.append(right.children.pop(0))
        _logger.debug("rotated key from right sibling into child %d", i)

    def merge(self, i: int) -> int:
        """Merge children[i] with a sibling and the key that separates them.

        Prefers the left sibling. Returns the index of the merged node.
        """
        left, _, right = self.siblings(i)
        if left is not None:
            return self._merge_pair(left)
        if right is not None:
            return self._merge_pair(i)
        raise RuntimeError(f"child {i} has no sibling to merge with")

    def _merge_pair(self, j: int) -> int:
        """children[j] absorbs keys[j] and children[j + 1]; the latter is dropped."""
        dst = self.children[j]
        src = self.children.pop(j + 1)
        dst.keys.append(self.keys.pop(j))
        dst.keys.extend(src.keys)
        dst.children.extend(src.children)
        _logger.debug("merged children %d and %d -> %d keys", j, j + 1, dst.count)
        return j

    def pop_min(self) -> Any:
        """Remove and return the smallest key of the subtree rooted here.

        Like `delete`, this repairs short children but may leave this node
        itself one key short.
        """
        if self.leaf:
            return self.keys.pop(0)
        first = self.children[0]
        smallest = first.pop_min()
        if first.count < self.t - 1:
            self.rebalance(0)
        return smallest


# -------------------- Public Tree --------------------
class BTree:
    """B-tree multiset over keys supporting <, > and ==.

    Invariants (after every public call):
      - Keys in a node are non-decreasing
      - keys[i] bounds children[i] from above and children[i+1] from below
      - All leaves are at the same depth
      - Non-root nodes hold t-1..2t-1 keys; the root holds at most 2t-1
      - Internal nodes: len(children) == len(keys) + 1

    Complexity: insert/delete/contains visit O(log_t N) nodes, O(t) work each.
    """

    # Set True during testing to assert invariants after each write
    _ENABLE_VALIDATE_AFTER_WRITE = False

    def __init__(self, t: int = DEFAULT_MIN_DEGREE) -> None:
        if isinstance(t, bool) or not isinstance(t, int):
            raise TypeError(f"t must be an int, got {type(t).__name__}")
        if t < 2:
            raise ValueError(f"t must be >= 2, got {t}")
        self.t: int = t
        self._root: _Node = _Node(t, leaf=True)
        self._size: int = 0

    def __repr__(self) -> str:
        return f"BTree(t={self.t}, size={self._size}, height={self.height})"

    # -------------------- Public API --------------------
    def insert(self, value: Any) -> None:
        """Add `value`; equal keys are stored as separate entries."""
        root = self._root
        if root.is_full():
            # Height grows only here: the old root becomes the sole child of a
            # fresh internal root and is split.
            new_root = _Node(self.t, leaf=False)
            new_root.children.append(root)
            new_root.split(0)
            self._root = new_root
            _logger.debug("root split; height is now %d", self.height)
        self._root.insert_nonfull(value)
        self._size += 1

        if self._ENABLE_VALIDATE_AFTER_WRITE:
            self._validate()

    def delete(self, value: Any) -> bool:
        """Remove one occurrence of `value`. Returns False if it was absent."""
        root = self._root
        if root.leaf:
            # A leaf root has no siblings and no minimum fill.
            removed = root.remove_key(value)
        else:
            removed = root.delete(value)
            if root.count == 0:
                # Merges emptied the root: its only child takes over.
                self._root = root.children[0]
                _logger.debug("root collapsed; height is now %d", self.height)
        if removed:
            self._size -= 1

        if self._ENABLE_VALIDATE_AFTER_WRITE:
            self._validate()
        return removed

    def contains(self, value: Any) -> bool:
        return self._root.contains(value)

    def to_sequence(self) -> List[Any]:
        """All keys in ascending order (duplicates included)."""
        return self._root.to_sequence()

    def clear(self) -> None:
        """Remove all entries (reset to a single empty leaf)."""
        self._root = _Node(self.t, leaf=True)
        self._size = 0

    def __len__(self) -> int:
        """Number of stored keys, counting duplicates."""
        return self._size

    def __contains__(self, value: Any) -> bool:
        return self.contains(value)

    def __iter__(self) -> Iterator[Any]:
        return self._root.iter_keys()

    @property
    def height(self) -> int:
        """Number of levels; an empty or single-leaf tree has height 1."""
        h = 1
        node = self._root
        while not node.leaf:
            h += 1
            node = node.children[0]
        return h

    def stats(self) -> Dict[str, Any]:
        """Return simple stats (height, node counts, avg node fill)."""
        internal_cnt = 0
        leaf_cnt = 0
        total_keys = 0
        q: List[_Node] = [self._root]
        while q:
            cur = q.pop()
            total_keys += cur.count
            if cur.leaf:
                leaf_cnt += 1
            else:
                internal_cnt += 1
                q.extend(cur.children)
        node_cnt = internal_cnt + leaf_cnt
        max_keys = 2 * self.t - 1
        return {
            "min_degree": self.t,
            "height": self.height,
            "internal_nodes": internal_cnt,
            "leaf_nodes": leaf_cnt,
            "size": self._size,
            "avg_fill_ratio": total_keys / (node_cnt * max_keys),
        }

    # -------------------- Validation (debug helper) --------------------
    def _validate(self) -> None:
        """Validate B-tree invariants; raise AssertionError if violated.

        Checks:
          - Keys are non-decreasing in every node.
          - Key counts are within [t-1, 2t-1] (root: [0, 2t-1]).
          - Internal: len(children) == len(keys) + 1, same `t` everywhere.
          - Separators bound their neighbouring subtrees.
          - Every leaf sits at the same depth.
          - The tracked size matches the number of stored keys.
        """
        t = self.t
        leaf_depths = set()

        def dfs(node: _Node, depth: int, is_root: bool) -> Tuple[Any, Any, int]:
            # Returns (min_key, max_key, key_count) for the subtree.
            assert node.t == t, "node has a foreign branching parameter"
            assert node.keys == sorted(node.keys), f"unsorted keys {node.keys!r}"
            assert node.count <= 2 * t - 1, f"overfull node {node!r}"
            if not is_root:
                assert node.count >= t - 1, f"underfull node {node!r}"

            if node.leaf:
                assert not node.children, "leaf with children"
                leaf_depths.add(depth)
                if not node.keys:
                    return None, None, 0
                return node.keys[0], node.keys[-1], node.count

            assert len(node.children) == node.count + 1, "child count mismatch"
            ranges = [dfs(ch, depth + 1, False) for ch in node.children]
            for i, k in enumerate(node.keys):
                left_max = ranges[i][1]
                right_min = ranges[i + 1][0]
                assert left_max is not None and left_max <= k, "left subtree exceeds separator"
                assert right_min is not None and k <= right_min, "right subtree below separator"
            total = node.count + sum(r[2] for r in ranges)
            return ranges[0][0], ranges[-1][1], total

        _, _, total = dfs(self._root, 0, True)
        assert len(leaf_depths) == 1, f"leaves at different depths {sorted(leaf_depths)}"
        assert total == self._size, f"size {self._size} != stored keys {total}"
