"""Core utilities package."""

from .embedding_utils import approx_token_count, chunk_text_for_embedding
from .vector_math import cosine_similarity, mean_vector, update_running_mean

__all__ = [
    "approx_token_count",
    "chunk_text_for_embedding",
    "cosine_similarity",
    "mean_vector",
    "update_running_mean",
]
