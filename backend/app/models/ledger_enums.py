"""
Ledger enumerations.
"""

import enum


class EntrySide(str, enum.Enum):
    """Which side of a party's ledger an amount lands on."""
    CREDIT = "CREDIT"  # Positive amount
    DEBIT = "DEBIT"  # Negative amount


class EntryKind(str, enum.Enum):
    """Origin of a ledger entry."""
    MANUAL = "MANUAL"  # Hand-entered transaction
    COMMISSION = "COMMISSION"  # Synthesized by the commission calculator
    SETTLEMENT = "SETTLEMENT"  # Monday Final carry-forward
    TRANSFER = "TRANSFER"  # Counter-entry of a party-to-party transfer


class CommissionMode(str, enum.Enum):
    """Commission arrangement with a party."""
    NONE = "NONE"
    TAKE = "TAKE"  # Business deducts commission from the party
    GIVE = "GIVE"  # Business pays commission to the party


class LedgerState(str, enum.Enum):
    """Settlement state of a party's ledger."""
    ACTIVE = "ACTIVE"  # Live transactions since the last settlement
    SETTLED = "SETTLED"  # Only the carry-forward entry stands
