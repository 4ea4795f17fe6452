import asyncio
import copy
import uuid
from collections import OrderedDict
from datetime import datetime, timezone
from typing import Dict, Any, List, Optional, Tuple

from .config import settings

# This file holds the in-memory tables that stand in for the hosted data
# service, plus the per-key locks used to serialise cart mutations.

TABLES: Dict[str, Dict[str, Dict[str, Any]]] = {
    "categories": {},
    "products": {},
    "cart_items": {},
    "orders": {},
    "order_items": {},
}
# tables whose rows get a created_at stamp on insert
_TIMESTAMPED = {"cart_items", "orders"}

# (session_id, idempotency key) -> stored response, oldest evicted first
IDEMPOTENCY: "OrderedDict[Tuple[str, str], Dict[str, Any]]" = OrderedDict()
IDEMPOTENCY_MAX = settings.idempotency_max

# a lock only lives while some request holds or waits on it
_LOCKS: Dict[str, asyncio.Lock] = {}
_LOCK_USERS: Dict[str, int] = {}


class TableError(Exception):
    """Raised by the table store for unknown tables or missing rows."""


def _get_lock(key: str) -> asyncio.Lock:
    if key not in _LOCKS:
        _LOCKS[key] = asyncio.Lock()
    return _LOCKS[key]


def _forget_lock(key: str) -> None:
    users = _LOCK_USERS.get(key, 1) - 1
    if users > 0:
        _LOCK_USERS[key] = users
    else:
        _LOCK_USERS.pop(key, None)
        _LOCKS.pop(key, None)


async def _acquire_lock(key: str) -> asyncio.Lock:
    lock = _get_lock(key)
    _LOCK_USERS[key] = _LOCK_USERS.get(key, 0) + 1
    try:
        await lock.acquire()
    except BaseException:
        _forget_lock(key)
        raise
    return lock


def _release_lock(key: str, lock: asyncio.Lock) -> None:
    lock.release()
    _forget_lock(key)


def recall_idempotent(session_id: str, key: str) -> Optional[Dict[str, Any]]:
    return IDEMPOTENCY.get((session_id, key))


def remember_idempotent(session_id: str, key: str, response: Dict[str, Any]) -> None:
    IDEMPOTENCY[(session_id, key)] = response
    while len(IDEMPOTENCY) > IDEMPOTENCY_MAX:
        IDEMPOTENCY.popitem(last=False)


def _table(name: str) -> Dict[str, Dict[str, Any]]:
    try:
        return TABLES[name]
    except KeyError:
        raise TableError(f"unknown table: {name}")


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def select(table: str, order_by: Optional[str] = None, descending: bool = False, **eq) -> List[Dict[str, Any]]:
    rows = [r for r in _table(table).values() if all(r.get(k) == v for k, v in eq.items())]
    if order_by:
        rows.sort(key=lambda r: (r.get(order_by) is None, r.get(order_by)), reverse=descending)
    return [copy.deepcopy(r) for r in rows]


def select_one(table: str, **eq) -> Optional[Dict[str, Any]]:
    if list(eq) == ["id"]:
        row = _table(table).get(eq["id"])
        return copy.deepcopy(row) if row else None
    rows = select(table, **eq)
    return rows[0] if rows else None


def insert(table: str, row: Dict[str, Any]) -> Dict[str, Any]:
    rows = _table(table)
    record = dict(row)
    record["id"] = uuid.uuid4().hex
    if table in _TIMESTAMPED:
        record.setdefault("created_at", _now())
    rows[record["id"]] = record
    return copy.deepcopy(record)


def insert_many(table: str, rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return [insert(table, r) for r in rows]


def update(table: str, row_id: str, changes: Dict[str, Any]) -> Dict[str, Any]:
    rows = _table(table)
    if row_id not in rows:
        raise TableError(f"{table} row not found: {row_id}")
    changes = {k: v for k, v in changes.items() if k != "id"}
    rows[row_id].update(changes)
    return copy.deepcopy(rows[row_id])


def delete(table: str, **eq) -> int:
    rows = _table(table)
    doomed = [rid for rid, r in rows.items() if all(r.get(k) == v for k, v in eq.items())]
    for rid in doomed:
        del rows[rid]
    return len(doomed)


def count(table: str) -> int:
    return len(_table(table))


def clear_all() -> None:
    for rows in TABLES.values():
        rows.clear()
    IDEMPOTENCY.clear()
    _LOCKS.clear()
    _LOCK_USERS.clear()
