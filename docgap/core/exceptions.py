"""Exception types raised by the gap analysis core."""


class InvalidInputError(TypeError):
    """Raised when text handed to the embedding service is empty or not a string."""


class EmbeddingDimensionMismatchError(ValueError):
    """Raised when chunk embeddings of one text disagree on dimensionality."""

    def __init__(self, expected: int, actual: int) -> None:
        super().__init__(
            f"Embedding dimension mismatch across chunks: expected {expected}, "
            f"got {actual}"
        )
        self.expected = expected
        self.actual = actual


class ProviderNotConfiguredError(ValueError):
    """Raised when a provider is requested without the credentials it needs."""

    def __init__(self, role: str, missing: list[str]) -> None:
        super().__init__(
            f"{role} provider is not configured; missing: {', '.join(missing)}"
        )
        self.role = role
        self.missing = missing
