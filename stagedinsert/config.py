from dataclasses import dataclass

from .errors import ConfigurationError
from .db.helpers import validate_identifier


@dataclass
class InsertConfig:
    chunk_size: int = 10_000
    ordinal_column: str = "_ordinal"
    staging_name_max_length: int = 63

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        if self.chunk_size <= 0:
            raise ConfigurationError("chunk_size must be > 0")
        validate_identifier(self.ordinal_column, "ordinal_column")
        if self.staging_name_max_length < 24:
            raise ConfigurationError(
                "staging_name_max_length must be >= 24 to fit the unique suffix"
            )
