"""Animation module: per-frame driver and particle disintegration."""

from asciitorus.animation.particles import (
    Particle,
    ExplosionConfig,
    DisintegrationEngine,
    stride_sample,
)
from asciitorus.animation.engine import AnimationDriver

__all__ = [
    # Particles
    "Particle",
    "ExplosionConfig",
    "DisintegrationEngine",
    "stride_sample",
    # Driver
    "AnimationDriver",
]
