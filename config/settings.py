"""Application configuration management."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """docsearch settings loaded from environment variables."""

    # Chunking
    docsearch_chunk_size: int = 1200
    docsearch_chunk_overlap: int = 200
    docsearch_min_chunk_size: int = 100

    # Retrieval
    docsearch_top_k: int = 5
    docsearch_min_score: float = 0.1

    # Embedding
    docsearch_embedding_model: str = "all-MiniLM-L6-v2"
    docsearch_query_prefix: str = ""

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


def get_settings() -> Settings:
    """Get application settings."""
    return Settings()
