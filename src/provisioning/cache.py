"""Local model cache lookup.

A model counts as cached when its folder exists in either the project-local
cache or the Hugging Face hub cache under the user's home directory:

    <local_cache_dir>/<namespace>/<name>
    <home>/.cache/huggingface/hub/models--<namespace>--<name>

Only directory existence is checked. An interrupted download that left a
partial folder behind is reported as cached.
"""

import logging
from pathlib import Path
from typing import Callable

from src.config import settings

logger = logging.getLogger(__name__)

# Returns the directory the hub cache lives under (the user's home by default)
CacheRootResolver = Callable[[], Path]


def hub_cache_dir(resolve_home: CacheRootResolver = Path.home) -> Path:
    """Hugging Face hub cache directory under the resolved home."""
    return resolve_home() / ".cache" / "huggingface" / "hub"


def hub_folder_name(model_id: str) -> str:
    """Folder name the hub uses for a model repo, e.g. models--org--name."""
    return "models--" + model_id.replace("/", "--")


def candidate_paths(
    model_id: str,
    local_cache_dir: Path | None = None,
    resolve_home: CacheRootResolver = Path.home,
) -> list[Path]:
    """All locations a cached copy of the model may live in, in lookup order."""
    local_cache_dir = Path(local_cache_dir or settings.local_cache_dir)
    return [
        local_cache_dir / model_id,
        hub_cache_dir(resolve_home) / hub_folder_name(model_id),
    ]


def is_model_cached(
    model_id: str,
    local_cache_dir: Path | None = None,
    resolve_home: CacheRootResolver = Path.home,
) -> bool:
    """Check whether a local copy of the model already exists.

    Args:
        model_id: Hugging Face repo id in namespace/name form.
        local_cache_dir: Project-local cache root. Defaults to config setting.
        resolve_home: Returns the root of the hub cache (the home directory).

    Returns:
        True if any candidate directory exists. Missing directories are
        not an error.
    """
    for path in candidate_paths(model_id, local_cache_dir, resolve_home):
        if path.is_dir():
            logger.info(f"Found cached model '{model_id}' at {path}")
            return True

    logger.info(f"No cached copy of '{model_id}'")
    return False
