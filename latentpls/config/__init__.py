"""
Configuration module for latentpls.

Provides the ModelConfig dataclass, JSON/YAML loading and the factory
that turns a configuration into an unfitted model.
"""

from latentpls.config.model_config import ALGORITHMS, ModelConfig, build_model, load_config

__all__ = [
    'ModelConfig',
    'build_model',
    'load_config',
    'ALGORITHMS',
]
