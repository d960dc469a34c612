"""Procedural cube fills and example animations."""

from typing import List, Optional

import numpy as np

from .base import (
    AnimationRegistry,
    AnimationSpec,
    PatternRegistry,
    PatternSpec,
    animation_registry,
    pattern_registry,
    register_animation,
    register_pattern,
)

# Importing the generator modules registers them
from . import animations, fills  # noqa: F401


def get_pattern(name: str) -> Optional[PatternSpec]:
    return pattern_registry.get(name)


def generate(name: str, rng: Optional[np.random.Generator] = None) -> Optional[np.ndarray]:
    """Generate a grid for ``name``, or None for an unknown id"""
    spec = pattern_registry.get(name)
    if spec is None:
        return None
    return spec.generate(rng=rng)


def list_patterns() -> List[str]:
    return pattern_registry.names()


def get_animation(name: str) -> Optional[AnimationSpec]:
    return animation_registry.get(name)


def list_animations() -> List[str]:
    return animation_registry.names()


__all__ = [
    "AnimationRegistry",
    "AnimationSpec",
    "PatternRegistry",
    "PatternSpec",
    "animation_registry",
    "pattern_registry",
    "register_animation",
    "register_pattern",
    "get_pattern",
    "generate",
    "list_patterns",
    "get_animation",
    "list_animations",
]
