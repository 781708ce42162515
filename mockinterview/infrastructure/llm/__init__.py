"""LLM completion client."""

from .client import LLMClientError, VertexRestClient

__all__ = ["LLMClientError", "VertexRestClient"]
