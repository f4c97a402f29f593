"""Normalization, classification, duplicate gating and orchestration."""

__all__ = [
    "classifier",
    "dedupe",
    "editorial",
    "normalizer",
    "pipeline",
    "scheduler",
]
