"""Artifact collection into the consumer's jniLibs/{arch}/ layout."""

from .collect import (
    CollectionReport,
    collect_artifacts,
    destination_path,
    verify_artifacts,
)

__all__ = [
    "CollectionReport",
    "collect_artifacts",
    "destination_path",
    "verify_artifacts",
]
