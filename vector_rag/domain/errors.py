from __future__ import annotations


class ConfigurationError(ValueError):
    """Raised when a required setting (e.g., an API key) is missing."""


class ContractError(ValueError):
    """Raised when request violates documented contract (e.g., k < 1)."""


class DimensionMismatchError(ValueError):
    """Raised when vectors compared or stored together differ in length."""


class InvalidVectorError(ValueError):
    """Raised when a vector cannot take part in cosine similarity (zero magnitude)."""


class RemoteServiceError(RuntimeError):
    """Raised when a remote service call fails."""


class EmbeddingError(RemoteServiceError):
    """Raised when embedding provider fails."""


class VectorStoreError(RemoteServiceError):
    """Raised when vector store provider fails."""


class GenerationError(RemoteServiceError):
    """Raised when the generation provider fails."""
