"""Core module: configuration, LLM streaming, prompt and record extraction."""
from .config import (
    DEFAULT_MODEL,
    DEFAULT_PROVIDER,
    EMPTY_QUERY_MESSAGE,
    FETCH_ERROR_MESSAGE,
    LINK_NOT_WORKING,
    get_connect_timeout,
    get_llm_config,
    get_log_level,
    load_env,
)
from .error import (
    ErrorType,
    InvalidInputError,
    ProfFinderError,
    StreamError,
    classify_error,
    log_error,
)
from .logger import get_logger, setup_logger
from .llm_client import LlmError, stream_chat
from .prompt import build_prompt
from .extractor import LineAssembler, extract, iter_records

__all__ = [
    # Extraction
    "LineAssembler",
    "extract",
    "iter_records",
    # Config
    "DEFAULT_MODEL",
    "DEFAULT_PROVIDER",
    "EMPTY_QUERY_MESSAGE",
    "FETCH_ERROR_MESSAGE",
    "LINK_NOT_WORKING",
    "get_connect_timeout",
    "get_llm_config",
    "get_log_level",
    "load_env",
    # LLM
    "LlmError",
    "stream_chat",
    "build_prompt",
    # Error handling
    "ErrorType",
    "InvalidInputError",
    "ProfFinderError",
    "StreamError",
    "classify_error",
    "log_error",
    # Logging
    "setup_logger",
    "get_logger",
]
