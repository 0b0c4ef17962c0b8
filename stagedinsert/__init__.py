from .db.inserter import BaseInserter
from .db.models import ColumnKind, ColumnMapping
from .db.registry import MappingRegistry
from .db.dialects import StatementBuilder, make_statement_builder
from .db.naming import StagingNameSource
from .config import InsertConfig
from .errors import (
    ConfigurationError,
    PreconditionError,
    RetrievalError,
    StagedInsertError,
)

__all__ = [
    "BaseInserter",
    "ColumnKind",
    "ColumnMapping",
    "MappingRegistry",
    "StatementBuilder",
    "make_statement_builder",
    "StagingNameSource",
    "InsertConfig",
    "StagedInsertError",
    "ConfigurationError",
    "PreconditionError",
    "RetrievalError",
]
