"""Shared library helpers."""

from compass.libs.file_storage import FileStorageError, LocalFileStorage
from compass.libs.gpt_client import (
    GPTClientError,
    GPTClientProtocol,
    GPTResponse,
    OpenAIClient,
)
from compass.libs.llm import GenerationFailure, LLMProtocol, LLMService

__all__ = [
    "FileStorageError",
    "GenerationFailure",
    "GPTClientError",
    "GPTClientProtocol",
    "GPTResponse",
    "LLMProtocol",
    "LLMService",
    "LocalFileStorage",
    "OpenAIClient",
]
