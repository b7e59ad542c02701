"""Exception types raised by the chunking and retrieval engine."""


class DocSearchError(Exception):
    """Base class for all docsearch errors."""


class InvalidParameterError(DocSearchError, ValueError):
    """Malformed chunking or retrieval parameters."""


class DimensionMismatchError(DocSearchError, ValueError):
    """Chunk/embedding count mismatch, or incompatible vector lengths."""


class EmbeddingFailureError(DocSearchError):
    """The embedder returned no usable vector."""


class EmbedderUnavailableError(DocSearchError):
    """The embedder errored or timed out.

    Never retried inside docsearch; retry policy belongs to the caller.
    """
