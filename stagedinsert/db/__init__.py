from .dialects import StatementBuilder, make_statement_builder
from .inserter import BaseInserter
from .models import ColumnKind, ColumnMapping
from .naming import StagingNameSource
from .registry import MappingRegistry
from .session import InsertSession
from .staging import StagingRoundTrip, StagingState
from .tx import DbTx

__all__ = [
    "BaseInserter",
    "ColumnKind",
    "ColumnMapping",
    "MappingRegistry",
    "StatementBuilder",
    "make_statement_builder",
    "StagingNameSource",
    "InsertSession",
    "StagingRoundTrip",
    "StagingState",
    "DbTx",
]
