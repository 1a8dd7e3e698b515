"""
Domain models — Pydantic types for minidnf.

All models are re-exported here for convenient access:

    from minidnf.core.models import Package, TransactionItem, TransactionRecord
"""

from minidnf.core.models.config import MainConfig, RepoConfig
from minidnf.core.models.package import Package, version_key
from minidnf.core.models.receipt import Receipt
from minidnf.core.models.transaction import (
    ItemAction,
    ItemReason,
    TransactionItem,
    TransactionRecord,
    TransactionState,
    TransactionStateError,
)

__all__ = [
    # transaction.py
    "ItemAction",
    "ItemReason",
    # config.py
    "MainConfig",
    # package.py
    "Package",
    "Receipt",
    "RepoConfig",
    "TransactionItem",
    "TransactionRecord",
    "TransactionState",
    "TransactionStateError",
    "version_key",
]
