import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

DEFAULT_PROVIDER = "gemini"
DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_CONNECT_TIMEOUT = 10.0

# Placeholder the model must return when it cannot verify a professor's page.
LINK_NOT_WORKING = "Link not working"

FETCH_ERROR_MESSAGE = (
    "Failed to fetch professor details. "
    "The model may be unable to find information for the given query."
)
EMPTY_QUERY_MESSAGE = (
    "Please provide an institute, department, or keyword to start the search."
)


def load_env(project_root: Optional[Path] = None) -> None:
    """
    Load environment variables from the project root `.env`.

    Falls back to the current working directory when the project root has none.
    """
    if project_root is None:
        project_root = Path(__file__).resolve().parents[2]
    env_path = project_root / ".env"
    if env_path.exists():
        load_dotenv(env_path, override=True)
        return

    cwd_env = Path.cwd() / ".env"
    if cwd_env.exists():
        load_dotenv(cwd_env, override=True)


def get_llm_config() -> dict:
    """
    LLM config is read from environment variables.
    - LLM_PROVIDER: "gemini" | "deepseek" | "openai" | "custom"
    - LLM_MODEL: model name, e.g. "gemini-2.5-flash"
    - LLM_API_BASE: optional base URL override
    - LLM_API_KEY: secret key (must be set in env)
    """
    return {
        "provider": os.getenv("LLM_PROVIDER", DEFAULT_PROVIDER).strip().lower(),
        "model": os.getenv("LLM_MODEL", "").strip() or DEFAULT_MODEL,
        "api_base": os.getenv("LLM_API_BASE", "").strip() or None,
        "api_key": os.getenv("LLM_API_KEY", "").strip() or None,
    }


def get_connect_timeout() -> float:
    """
    Seconds allowed to open the streaming connection.
    - LLM_CONNECT_TIMEOUT: default 10, never below 1

    Reading the stream itself is not bounded; callers wrap the call if they need that.
    """
    try:
        value = float(os.getenv("LLM_CONNECT_TIMEOUT", str(DEFAULT_CONNECT_TIMEOUT)))
    except ValueError:
        value = DEFAULT_CONNECT_TIMEOUT
    return max(1.0, value)


def get_log_level() -> str:
    """
    - PROFFINDER_LOG_LEVEL: DEBUG | INFO | WARNING | ERROR (default INFO)
    """
    return os.getenv("PROFFINDER_LOG_LEVEL", "INFO").strip().upper() or "INFO"
