"""Data types shared by the provisioning components.

ModelSpec describes one downloadable model, ProgressEvent is a transient
update emitted while it downloads, and RunSummary tallies one invocation.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field

from src.config import settings


class Precision(str, Enum):
    """Numeric precision the model weights are loaded with."""

    FP32 = "fp32"
    FP16 = "fp16"
    BF16 = "bf16"

    @property
    def torch_dtype(self) -> str:
        return {
            Precision.FP32: "float32",
            Precision.FP16: "float16",
            Precision.BF16: "bfloat16",
        }[self]


class ModelSpec(BaseModel):
    """Static descriptor of one model to provision."""

    task: str = Field(..., description="Pipeline task, e.g. feature-extraction")
    model_id: str = Field(..., pattern=r"^(?:[^/\s]+/)?[^/\s]+$", description="[namespace/]name")
    precision: Precision = Field(default=Precision.FP32)
    description: str = Field(default="")

    model_config = {"frozen": True, "protected_namespaces": ()}


ProgressStatus = Literal["in-progress", "complete"]


@dataclass(frozen=True)
class ProgressEvent:
    """A single progress update from the model loader."""

    status: ProgressStatus
    percentage: int = 0
    file: str = ""

    def __post_init__(self):
        # Clamp so callers can pass raw ratios * 100 without pre-checking
        object.__setattr__(self, "percentage", max(0, min(100, round(self.percentage))))


@dataclass
class RunSummary:
    """Success/failure counters for one provisioning run."""

    success: int = 0
    failure: int = 0

    @property
    def total(self) -> int:
        return self.success + self.failure

    def record(self, ok: bool) -> None:
        if ok:
            self.success += 1
        else:
            self.failure += 1


# Quality presets mirroring the embedding service of the host application
MODEL_PRESETS: dict[str, ModelSpec] = {
    "fast": ModelSpec(
        task="feature-extraction",
        model_id="sentence-transformers/paraphrase-MiniLM-L3-v2",
        precision=Precision.FP32,
        description="Small model for quick indexing",
    ),
    "balanced": ModelSpec(
        task="feature-extraction",
        model_id="sentence-transformers/all-MiniLM-L6-v2",
        precision=Precision.FP32,
        description="Embedding model for semantic search",
    ),
    "quality": ModelSpec(
        task="feature-extraction",
        model_id="sentence-transformers/all-mpnet-base-v2",
        precision=Precision.FP32,
        description="Larger model for highest quality embeddings",
    ),
}


def get_preset(name: str) -> ModelSpec:
    """Look up a model preset by name.

    Raises:
        ValueError: If the preset is not registered.
    """
    if name not in MODEL_PRESETS:
        available = ", ".join(MODEL_PRESETS.keys())
        raise ValueError(f"Unknown model preset: {name}. Available presets: {available}")
    return MODEL_PRESETS[name]


def default_model_specs(quality: str | None = None) -> list[ModelSpec]:
    """Build the list of models to provision from settings."""
    return [get_preset(quality or settings.embedding_quality)]
