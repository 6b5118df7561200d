"""Shared CLI utilities."""

import json
import sys
from pathlib import Path

import structlog
from rich.console import Console

console = Console()
logger = structlog.get_logger()


def get_config():
    """Load the typed config, exiting with a readable message if it is invalid."""
    from cli.config import load_config_model

    try:
        return load_config_model()
    except ValueError as e:
        console.print(f"[red]Config error:[/] {e}")
        sys.exit(1)


def get_profile_storage(user_id: str = "default", config=None):
    """ProfileStorage for ``user_id`` under the configured profiles directory."""
    from style.storage import ProfileDirectory

    config = config or get_config()
    return ProfileDirectory(config.paths.profiles_dir).for_user(user_id)


def get_analyzer(config=None):
    """StyleAnalyzer wired to the configured LLM provider."""
    from analysis.analyzer import StyleAnalyzer
    from llm import LLMError, create_llm_provider

    config = config or get_config()
    try:
        provider = create_llm_provider(
            provider=config.llm.provider,
            api_key=config.llm.api_key or None,
            model=config.llm.model,
        )
    except LLMError as e:
        console.print(f"[red]LLM error:[/] {e}")
        sys.exit(1)

    return StyleAnalyzer.from_config(provider, config)


def read_json_file(path: Path):
    """Load JSON from ``path`` or stdin (``-``)."""
    if str(path) == "-":
        return json.load(sys.stdin)
    with open(path) as f:
        return json.load(f)


def read_messages(path: Path) -> list[str]:
    """Messages from a JSON array file, or blank-line separated plain text."""
    text = sys.stdin.read() if str(path) == "-" else Path(path).read_text()
    stripped = text.strip()
    if stripped.startswith("["):
        data = json.loads(stripped)
        return [m for m in data if isinstance(m, str)]
    return [block.strip() for block in stripped.split("\n\n") if block.strip()]
