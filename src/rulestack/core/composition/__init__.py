"""Composition: merging sources into a scratch tree and running the generator."""
from __future__ import annotations

from .composer import (
    ComposedTree,
    Composer,
    available_profiles_on_disk,
    compose,
    detect_profile_type,
)
from .generator import GeneratorRunner, build_generator_config, write_generator_config

__all__ = [
    "ComposedTree",
    "Composer",
    "GeneratorRunner",
    "available_profiles_on_disk",
    "build_generator_config",
    "compose",
    "detect_profile_type",
    "write_generator_config",
]
