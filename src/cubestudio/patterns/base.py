"""Pattern and animation registries.

Pattern ids dispatch through lookup tables rather than conditionals, so a
new fill or animation only needs a registered generator function.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional
import logging

import numpy as np

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PatternSpec:
    """A procedural fill for a single cube grid"""

    name: str
    description: str
    generator: Callable[..., np.ndarray]
    deterministic: bool = True

    def generate(self, rng: Optional[np.random.Generator] = None) -> np.ndarray:
        if self.deterministic:
            return self.generator()
        return self.generator(rng=rng)


@dataclass(frozen=True)
class AnimationSpec:
    """A generator of whole frame sequences"""

    name: str
    scene_name: str
    description: str
    builder: Callable[..., Any]
    deterministic: bool = True

    def build(self, rng: Optional[np.random.Generator] = None) -> Any:
        if self.deterministic:
            return self.builder()
        return self.builder(rng=rng)


class PatternRegistry:
    """Lookup table from pattern id to generator"""

    def __init__(self):
        self._patterns: Dict[str, PatternSpec] = {}

    def register(self, spec: PatternSpec) -> None:
        key = spec.name.lower()
        if key in self._patterns:
            logger.warning(f"Replacing registered pattern: {key}")
        self._patterns[key] = spec
        logger.debug(f"Registered pattern: {key}")

    def get(self, name: str) -> Optional[PatternSpec]:
        if not isinstance(name, str):
            return None
        return self._patterns.get(name.lower())

    def names(self) -> List[str]:
        return list(self._patterns)

    def describe(self) -> List[Dict[str, Any]]:
        return [
            {
                "name": spec.name,
                "description": spec.description,
                "deterministic": spec.deterministic,
            }
            for spec in self._patterns.values()
        ]

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._patterns


class AnimationRegistry:
    """Lookup table from animation id to sequence builder"""

    def __init__(self):
        self._animations: Dict[str, AnimationSpec] = {}

    def register(self, spec: AnimationSpec) -> None:
        self._animations[spec.name.lower()] = spec

    def get(self, name: str) -> Optional[AnimationSpec]:
        if not isinstance(name, str):
            return None
        return self._animations.get(name.lower())

    def names(self) -> List[str]:
        return list(self._animations)


pattern_registry = PatternRegistry()
animation_registry = AnimationRegistry()


def register_pattern(name: str, description: str, deterministic: bool = True):
    """Decorator registering a fill generator under ``name``"""

    def decorator(func: Callable[..., np.ndarray]) -> Callable[..., np.ndarray]:
        pattern_registry.register(PatternSpec(name, description, func, deterministic))
        return func

    return decorator


def register_animation(
    name: str, scene_name: str, description: str, deterministic: bool = True
):
    """Decorator registering an animation builder under ``name``"""

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        animation_registry.register(
            AnimationSpec(name, scene_name, description, func, deterministic)
        )
        return func

    return decorator
