"""Public interface for the ``personal_ledger`` package.

This module re-exports the record model, the snapshot/aggregation type and the
ledger service as the stable import surface. There is no runtime logic here;
the dashboard (``personal_ledger.term_ui``) and the CLI are imported from their
own modules so that importing the package stays free of prompt_toolkit/Typer.
"""

from .input_state import InputStateMachine, RecordDraft, validate_input
from .ledger import FatalStorageError, LedgerService
from .models import Category, Direction, Record
from .persistence import GatewayConfig, PersistenceGateway, StorageOutcome
from .record_manager import RecordManager
from .sequencer import Sequencer

__all__ = [
    # Model
    "Category",
    "Direction",
    "Record",
    "RecordDraft",
    # Snapshot and commands
    "RecordManager",
    "LedgerService",
    "FatalStorageError",
    "InputStateMachine",
    "validate_input",
    # Storage
    "GatewayConfig",
    "PersistenceGateway",
    "Sequencer",
    "StorageOutcome",
]
