"""Model download with progress reporting.

Fetches model weights through huggingface_hub, file by file so progress can
be reported per file, then loads the snapshot with sentence-transformers on
the requested device and precision to confirm it is usable.
"""

import logging
import sys
from pathlib import Path
from typing import Callable, Protocol, TextIO

from huggingface_hub import HfApi, hf_hub_download
from huggingface_hub.utils import (
    are_progress_bars_disabled,
    disable_progress_bars,
    enable_progress_bars,
    filter_repo_objects,
)
from sentence_transformers import SentenceTransformer

from src.config import settings
from src.provisioning.cache import hub_cache_dir
from src.provisioning.models import ModelSpec, Precision, ProgressEvent
from src.provisioning.progress import ConsoleProgressSink, ProgressSink

logger = logging.getLogger(__name__)

# Weights for other runtimes, not needed by sentence-transformers
IGNORE_PATTERNS = [
    "*.h5",
    "*.ot",
    "*.msgpack",
    "onnx/*",
    "openvino/*",
    "*.onnx",
]

SUPPORTED_TASKS = {"feature-extraction", "sentence-similarity"}

EventCallback = Callable[[ProgressEvent], None]


class ModelLoader(Protocol):
    """Anything that can fetch a model while reporting progress."""

    def __call__(
        self,
        task: str,
        model_id: str,
        precision: Precision,
        device: str,
        on_event: EventCallback,
    ) -> None: ...


class HuggingFaceModelLoader:
    """Downloads a model repo into the hub cache and loads it.

    Progress is byte-weighted across the repo files when the hub reports
    file sizes, otherwise each file counts equally.
    """

    def __init__(self, cache_dir: Path | None = None, api: HfApi | None = None):
        self.cache_dir = Path(cache_dir) if cache_dir else hub_cache_dir()
        self.api = api or HfApi()

    def list_files(self, model_id: str) -> list[tuple[str, int]]:
        """Repo files to download as (filename, size) pairs."""
        info = self.api.model_info(model_id, files_metadata=True)
        siblings = list(
            filter_repo_objects(
                info.siblings or [],
                ignore_patterns=IGNORE_PATTERNS,
                key=lambda s: s.rfilename,
            )
        )
        filenames = {s.rfilename for s in siblings}
        files = []
        for sibling in siblings:
            # Prefer safetensors when both formats are published
            if sibling.rfilename.endswith("pytorch_model.bin") and (
                sibling.rfilename.replace("pytorch_model.bin", "model.safetensors")
                in filenames
            ):
                continue
            files.append((sibling.rfilename, sibling.size or 0))
        return files

    def __call__(
        self,
        task: str,
        model_id: str,
        precision: Precision,
        device: str,
        on_event: EventCallback,
    ) -> None:
        if task not in SUPPORTED_TASKS:
            raise ValueError(
                f"Unsupported task: {task}. Supported tasks: {', '.join(sorted(SUPPORTED_TASKS))}"
            )

        files = self.list_files(model_id)
        total_bytes = sum(size for _, size in files)
        total = total_bytes or len(files) or 1
        done = 0

        logger.info(f"Downloading {len(files)} files for '{model_id}' into {self.cache_dir}")
        # The hub draws its own tqdm bars, which would overwrite ours
        bars_were_disabled = are_progress_bars_disabled()
        disable_progress_bars()
        try:
            for filename, size in files:
                on_event(ProgressEvent("in-progress", percentage=done * 100 / total, file=filename))
                hf_hub_download(
                    repo_id=model_id,
                    filename=filename,
                    cache_dir=self.cache_dir,
                )
                done += size if total_bytes else 1
                on_event(ProgressEvent("in-progress", percentage=done * 100 / total, file=filename))
                on_event(ProgressEvent("complete", percentage=done * 100 / total, file=filename))
        finally:
            if not bars_were_disabled:
                enable_progress_bars()

        # Loading surfaces broken or incompatible downloads as errors
        logger.info(f"Loading '{model_id}' on {device} ({precision.value})")
        SentenceTransformer(
            model_id,
            device=device,
            cache_folder=str(self.cache_dir),
            model_kwargs={"dtype": precision.torch_dtype},
        )


class ModelFetcher:
    """Fetches one model, reporting progress and never raising.

    A failed pre-download is not fatal for the host application: the model
    is downloaded lazily on first use instead.
    """

    def __init__(
        self,
        loader: ModelLoader | None = None,
        sink: ProgressSink | None = None,
        device: str | None = None,
        stream: TextIO | None = None,
    ):
        self.stream = stream or sys.stdout
        self.loader = loader or HuggingFaceModelLoader()
        self.sink = sink or ConsoleProgressSink(self.stream)
        self.device = device or settings.device

    def _dispatch(self, event: ProgressEvent) -> None:
        if event.status == "complete":
            self.sink.on_complete(event)
        else:
            self.sink.on_progress(event)

    def fetch(self, spec: ModelSpec) -> bool:
        """Download a model.

        Args:
            spec: The model to fetch.

        Returns:
            True if the loader finished, False if it raised.
        """
        logger.info(f"Fetching '{spec.model_id}' ({spec.task}, {spec.precision.value})")
        try:
            self.loader(
                spec.task,
                spec.model_id,
                spec.precision,
                self.device,
                self._dispatch,
            )
        except Exception as e:
            logger.error(f"Failed to download '{spec.model_id}': {e}")
            print(f"\n  ❌ Failed to download: {e}", file=self.stream)
            return False

        logger.info(f"Model '{spec.model_id}' downloaded successfully.")
        return True
