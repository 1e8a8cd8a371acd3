#!/usr/bin/env python3
"""Line-oriented REPL over one in-memory B-tree of integer keys.

Usage: main.py [t]

`t` is the minimum degree (default 3). Anything `int()` rejects, or a value
below 2, is reported on STDERR and the process exits with status 2 before
any input is read.

Each input line is one command; each command answers exactly one line on
STDOUT. Blank lines are skipped, command names are case-insensitive, and
EOF or EXIT ends the session with status 0. Malformed input gets an
`ERR ...` reply naming the problem; `ERR internal` is reserved for an
unexpected exception inside the tree, whose traceback goes to the `btree`
logger (STDERR) and the session carries on.
"""

import sys
import shlex
import logging
from typing import List, Callable, Dict, Optional
from btree import BTree, DEFAULT_MIN_DEGREE

# Handlers and level come from the parent "btree" logger.
_logger = logging.getLogger("btree.main")

# -------------------- Command & message constants --------------------
CMD_INSERT   = "INSERT"
CMD_DELETE   = "DELETE"
CMD_CONTAINS = "CONTAINS"
CMD_LIST     = "LIST"
CMD_STATS    = "STATS"
CMD_EXIT     = "EXIT"

MSG_OK             = "OK"
MSG_TRUE           = "1"
MSG_FALSE          = "0"
ERR_SYNTAX         = "ERR syntax"
ERR_UNKNOWN_CMD    = "ERR unknown command"
ERR_USAGE_INSERT   = "ERR usage: INSERT <key> [<key>...]"
ERR_USAGE_DELETE   = "ERR usage: DELETE <key>"
ERR_USAGE_CONTAINS = "ERR usage: CONTAINS <key>"
ERR_USAGE_NOARGS   = "ERR usage: command takes no arguments"
ERR_KEY_NOT_INT    = "ERR key must be an integer"
ERR_INTERNAL       = "ERR internal"

# Sentinel a handler returns to end the session.
_STOP = object()


def _reply(line: str) -> None:
    sys.stdout.write(line + "\n")
    sys.stdout.flush()


def _parse_keys(args: List[str]) -> Optional[List[int]]:
    try:
        return [int(a) for a in args]
    except ValueError:
        return None


def _single_key(args: List[str], usage: str) -> Optional[int]:
    """Return the one integer argument, or reply with an error and return None."""
    if len(args) != 1:
        _reply(usage)
        return None
    keys = _parse_keys(args)
    if keys is None:
        _reply(ERR_KEY_NOT_INT)
        return None
    return keys[0]


# -------------------- Command handlers --------------------
def handle_insert(args: List[str], tree: BTree) -> None:
    """INSERT k1 [k2 ...] -> OK. All keys are parsed before any is inserted."""
    if not args:
        _reply(ERR_USAGE_INSERT)
        return
    keys = _parse_keys(args)
    if keys is None:
        _reply(ERR_KEY_NOT_INT)
        return
    for k in keys:
        tree.insert(k)
    _reply(MSG_OK)


def handle_delete(args: List[str], tree: BTree) -> None:
    """DELETE k -> 1 when one occurrence was removed, 0 when k was absent."""
    key = _single_key(args, ERR_USAGE_DELETE)
    if key is not None:
        _reply(MSG_TRUE if tree.delete(key) else MSG_FALSE)


def handle_contains(args: List[str], tree: BTree) -> None:
    key = _single_key(args, ERR_USAGE_CONTAINS)
    if key is not None:
        _reply(MSG_TRUE if key in tree else MSG_FALSE)


def handle_list(args: List[str], tree: BTree) -> None:
    """LIST -> every key ascending, duplicates repeated; empty line for an empty tree."""
    if args:
        _reply(ERR_USAGE_NOARGS)
        return
    _reply(" ".join(str(k) for k in tree.to_sequence()))


def handle_stats(args: List[str], tree: BTree) -> None:
    """STATS -> BTree.stats() as name=value pairs, ratios to three decimals."""
    if args:
        _reply(ERR_USAGE_NOARGS)
        return
    _reply(" ".join(
        f"{name}={value:.3f}" if isinstance(value, float) else f"{name}={value}"
        for name, value in tree.stats().items()
    ))


def handle_exit(args: List[str], tree: BTree) -> object:
    return _STOP


DISPATCH: Dict[str, Callable[[List[str], BTree], Optional[object]]] = {
    CMD_INSERT: handle_insert,
    CMD_DELETE: handle_delete,
    CMD_CONTAINS: handle_contains,
    CMD_LIST: handle_list,
    CMD_STATS: handle_stats,
    CMD_EXIT: handle_exit,
}


def execute(line: str, tree: BTree) -> bool:
    """Run one non-blank command line against `tree`; False means stop."""
    try:
        tokens = shlex.split(line)
    except ValueError:  # unbalanced quotes
        tokens = []
    if not tokens:
        _reply(ERR_SYNTAX)
        return True

    handler = DISPATCH.get(tokens[0].upper())
    if handler is None:
        _reply(ERR_UNKNOWN_CMD)
        return True

    try:
        return handler(tokens[1:], tree) is not _STOP
    except Exception:
        _logger.exception("command failed: %r", line)
        _reply(ERR_INTERNAL)
        return True


def main(argv: List[str]) -> int:
    try:
        tree = BTree(int(argv[1]) if len(argv) > 1 else DEFAULT_MIN_DEGREE)
    except ValueError as e:
        sys.stderr.write(f"invalid minimum degree: {e}\n")
        return 2

    try:
        for raw in iter(sys.stdin.readline, ""):
            line = raw.strip()
            if line and not execute(line, tree):
                break
    except KeyboardInterrupt:
        pass
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv))
