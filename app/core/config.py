"""
Application configuration (env, settings, constants).

Responsibility: Centralize config loading, environment variables, and app-wide
constants. Keeps the rest of the app decoupled from how config is sourced.
"""

import os

from dotenv import load_dotenv

load_dotenv()


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    return float(raw) if raw else default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    return int(raw) if raw else default


# Anthropic (agent LLM)
ANTHROPIC_API_KEY: str = os.getenv("ANTHROPIC_API_KEY", "").strip()
ANTHROPIC_MODEL: str = (
    os.getenv("ANTHROPIC_MODEL", "claude-sonnet-4-5-20250929").strip()
    or "claude-sonnet-4-5-20250929"
)
LLM_TEMPERATURE: float = _env_float("LLM_TEMPERATURE", 0.1)
LLM_MAX_TOKENS: int = _env_int("LLM_MAX_TOKENS", 1024)

# Remote MCP server the model searches through (tool-driven mode)
MCP_SERVER_URL: str = os.getenv("MCP_SERVER_URL", "").strip()
MCP_SERVER_NAME: str = os.getenv("MCP_SERVER_NAME", "near-docs").strip() or "near-docs"
MCP_BETA: str = os.getenv("MCP_BETA", "mcp-client-2025-11-20").strip() or "mcp-client-2025-11-20"

# "tool": the model decides when to search; "retrieval_first": search once, inject context
RETRIEVAL_MODE: str = os.getenv("RETRIEVAL_MODE", "tool").strip().lower() or "tool"

# Meilisearch (documentation index)
MEILI_HOST: str = os.getenv("MEILI_HOST", "http://127.0.0.1:7700").strip().rstrip("/")
MEILI_API_KEY: str = os.getenv("MEILI_API_KEY", "").strip()
MEILI_INDEX_NAME: str = os.getenv("MEILI_INDEX_NAME", "near-docs").strip() or "near-docs"
MEILI_EMBEDDER: str = os.getenv("MEILI_EMBEDDER", "default").strip() or "default"
SEARCH_DEFAULT_LIMIT: int = _env_int("SEARCH_DEFAULT_LIMIT", 20)

# API timeouts (seconds)
LLM_API_TIMEOUT: float = _env_float("LLM_API_TIMEOUT", 120.0)
SEARCH_API_TIMEOUT: float = _env_float("SEARCH_API_TIMEOUT", 15.0)

# Agent loop
MAX_ITERATIONS: int = _env_int("MAX_ITERATIONS", 5)
HISTORY_WINDOW: int = _env_int("HISTORY_WINDOW", 4)

# Session store
MAX_SESSIONS: int = _env_int("MAX_SESSIONS", 100)

# Retrieval-first context (tuning these affects prompt size)
CONTEXT_TOP_K: int = _env_int("CONTEXT_TOP_K", 5)
CONTEXT_CHAR_LIMIT: int = _env_int("CONTEXT_CHAR_LIMIT", 2000)
HYBRID_SEMANTIC_RATIO: float = _env_float("HYBRID_SEMANTIC_RATIO", 0.5)

# Citations harvested per tool result / search
SOURCES_PER_RESULT: int = _env_int("SOURCES_PER_RESULT", 3)

# HTTP server (python -m app.main)
PORT: int = _env_int("PORT", 3000)
