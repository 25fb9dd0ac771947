"""
Read-side helpers over a party's entries.
"""

from typing import Iterable, List, Tuple

from backend.app.schemas.ledger import Entry


def split_records(entries: Iterable[Entry]) -> Tuple[List[Entry], List[Entry]]:
    """Partition into (live, archived), preserving order within each."""
    live, old = [], []
    for entry in entries:
        (old if entry.is_old_record else live).append(entry)
    return live, old


def search_entries(entries: Iterable[Entry], term: str) -> List[Entry]:
    """Case-insensitive match on party name, counterparty label or note."""
    needle = term.strip().lower()
    if not needle:
        return list(entries)
    return [
        entry for entry in entries
        if needle in entry.party_name.lower()
        or needle in entry.counterparty_label.lower()
        or needle in entry.note.lower()
    ]
