"""Transforms module - per-row column rewrites for rows and sequences."""

from rowfold.transforms.string import BaseColumnTransform, ReplaceEmptyStringTransform

__all__ = [
    "BaseColumnTransform",
    "ReplaceEmptyStringTransform",
]
