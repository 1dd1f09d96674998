"""Model provisioning run.

Pre-fetches the embedding model(s) so they are cached before the host
application starts. Runs as a Docker build step or install hook:

    python -m scripts.download_model

Fetch failures are reported and counted but never fail the process; the
models are downloaded lazily on first use instead.
"""

import asyncio
import logging
import sys
from pathlib import Path
from typing import TextIO

from src.config import settings
from src.provisioning.cache import CacheRootResolver, is_model_cached
from src.provisioning.fetcher import ModelFetcher
from src.provisioning.models import ModelSpec, RunSummary, default_model_specs

logger = logging.getLogger(__name__)

BANNER_WIDTH = 50


def banner(title: str, width: int = BANNER_WIDTH) -> str:
    """Box-drawn banner around a title."""
    inner = width - 2
    return "\n".join(
        [
            "╔" + "═" * inner + "╗",
            "║" + title.center(inner) + "║",
            "╚" + "═" * inner + "╝",
        ]
    )


class Provisioner:
    """Ensures every configured model is present in the local cache.

    Models are processed one at a time; each fetch is awaited before the
    next model starts so progress output never interleaves.
    """

    def __init__(
        self,
        fetcher: ModelFetcher | None = None,
        local_cache_dir: Path | None = None,
        resolve_home: CacheRootResolver = Path.home,
        stream: TextIO | None = None,
    ):
        self.stream = stream or sys.stdout
        self.fetcher = fetcher or ModelFetcher(stream=self.stream)
        self.local_cache_dir = local_cache_dir or settings.local_cache_dir
        self.resolve_home = resolve_home

    def _print(self, text: str = "") -> None:
        print(text, file=self.stream)

    def print_header(self, spec: ModelSpec) -> None:
        self._print(f"\n📦 {spec.description or spec.model_id}")
        self._print(f"   Model:     {spec.model_id}")
        self._print(f"   Task:      {spec.task}")
        self._print(f"   Precision: {spec.precision.value}")

    async def provision(self, spec: ModelSpec) -> bool:
        """Provision a single model.

        Returns:
            True if the model was already cached or fetched successfully.
        """
        self.print_header(spec)

        if is_model_cached(spec.model_id, self.local_cache_dir, self.resolve_home):
            self._print("   ✅ Model already cached, skipping download")
            return True

        self._print("   ⬇️  Downloading...")
        ok = await asyncio.to_thread(self.fetcher.fetch, spec)
        if ok:
            self._print("   ✅ Download complete")
        return ok

    async def run(self, specs: list[ModelSpec]) -> RunSummary:
        """Provision all models sequentially and print a summary.

        Args:
            specs: Models to provision, in order.

        Returns:
            RunSummary with one count per model attempted.
        """
        self._print(banner("Model Provisioning"))

        summary = RunSummary()
        for spec in specs:
            summary.record(await self.provision(spec))

        logger.info(
            f"Provisioning finished | success={summary.success} | failure={summary.failure}"
        )
        self._print()
        self._print("─" * BANNER_WIDTH)
        self._print(f"📊 Downloaded: {summary.success} | Failed: {summary.failure}")
        if summary.failure > 0:
            self._print(
                "⚠️  Some models could not be pre-downloaded. "
                "They will be downloaded on first use."
            )
        return summary


def main() -> int:
    """Command-line entry point. Returns the process exit status."""
    logging.basicConfig(level=settings.log_level.upper())

    try:
        specs = default_model_specs()
        asyncio.run(Provisioner().run(specs))
    except Exception:
        logger.exception("Model provisioning aborted")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
