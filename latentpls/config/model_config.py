"""Declarative model configuration.

A :class:`ModelConfig` describes one PLS model (algorithm, components,
preprocessing and algorithm-specific settings) and can be round-tripped
through dicts, JSON and YAML files. :func:`build_model` turns it into an
unfitted :class:`~latentpls.operators.models.sklearn.PLSModel`.

Example YAML::

    algorithm: kernel_pls
    n_components: 3
    preprocessing: standardize
    kernel: poly
    kernel_params: {degree: 3}
    tol: 1.0e-8
    max_iter: 1000
"""

from __future__ import annotations

import dataclasses
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from latentpls.core.exceptions import ValidationError
from latentpls.operators.kernels import KernelType, create_kernel
from latentpls.operators.models.sklearn import OPLS, PLS1, SIMPLS, KernelPLS, PLSModel
from latentpls.operators.transforms.preprocessing import PreprocessingType

ALGORITHMS = ("pls1", "simpls", "kernel_pls", "opls")


@dataclass
class ModelConfig:
    """Configuration of a single PLS model.

    Attributes:
        algorithm: One of ``pls1``, ``simpls``, ``kernel_pls``, ``opls``.
        n_components: Number of latent (for OPLS: orthogonal) components.
        preprocessing: ``none``, ``center`` or ``standardize``.
        kernel: Kernel PLS kernel, ``linear``, ``poly`` or ``rbf``.
        kernel_params: Keyword arguments of the kernel (e.g. ``gamma``, ``degree``).
        tol: Kernel PLS inner-loop tolerance.
        max_iter: Kernel PLS inner-loop iteration cap.
        seed: Kernel PLS start-vector seed.
        num_coefficients: SIMPLS weight coefficients kept per component (0 = all).
        base: OPLS base model configuration (``None`` = one-component PLS1).
    """

    algorithm: str = "pls1"
    n_components: int = 5
    preprocessing: str = "center"
    kernel: str = "rbf"
    kernel_params: Dict[str, Any] = field(default_factory=dict)
    tol: float = 1e-6
    max_iter: int = 500
    seed: int = 0
    num_coefficients: int = 0
    base: Optional["ModelConfig"] = None

    def validate(self) -> "ModelConfig":
        """Raise :class:`ValidationError` on invalid settings; return ``self``."""
        if self.algorithm not in ALGORITHMS:
            raise ValidationError(f"algorithm must be one of {ALGORITHMS}, got {self.algorithm!r}")
        if isinstance(self.n_components, bool) or not isinstance(self.n_components, int) or self.n_components < 1:
            raise ValidationError(f"n_components must be a positive integer, got {self.n_components!r}")
        try:
            PreprocessingType.parse(self.preprocessing)
        except ValueError as exc:
            raise ValidationError(str(exc)) from exc
        if str(self.kernel).lower() not in {k.value for k in KernelType}:
            raise ValidationError(f"kernel must be one of {[k.value for k in KernelType]}, got {self.kernel!r}")
        if not self.tol > 0:
            raise ValidationError(f"tol must be positive, got {self.tol!r}")
        if not isinstance(self.max_iter, int) or self.max_iter < 1:
            raise ValidationError(f"max_iter must be a positive integer, got {self.max_iter!r}")
        if isinstance(self.seed, bool) or not isinstance(self.seed, int) or self.seed < 0:
            raise ValidationError(f"seed must be a non-negative integer, got {self.seed!r}")
        if not isinstance(self.num_coefficients, int) or self.num_coefficients < 0:
            raise ValidationError(f"num_coefficients must be a non-negative integer, got {self.num_coefficients!r}")
        if self.base is not None:
            if self.algorithm != "opls":
                raise ValidationError("base is only used by the 'opls' algorithm")
            self.base.validate()
        return self

    def to_dict(self) -> dict:
        data = dataclasses.asdict(self)
        data["base"] = self.base.to_dict() if self.base is not None else None
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ModelConfig":
        """Create a config from a dict; unknown keys are rejected."""
        data = dict(data)
        known = {f.name for f in dataclasses.fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValidationError(f"Unknown configuration key(s): {', '.join(unknown)}")
        base = data.pop("base", None)
        if isinstance(base, dict):
            base = cls.from_dict(base)
        return cls(base=base, **data)

    def to_json_file(self, filepath: Union[str, Path], indent: int = 4) -> None:
        with open(filepath, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=indent)

    @classmethod
    def from_json_file(cls, filepath: Union[str, Path]) -> "ModelConfig":
        with open(filepath, "r", encoding="utf-8") as f:
            return cls.from_dict(json.load(f))

    def to_yaml_file(self, filepath: Union[str, Path]) -> None:
        with open(filepath, "w", encoding="utf-8") as f:
            yaml.safe_dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)

    @classmethod
    def from_yaml_file(cls, filepath: Union[str, Path]) -> "ModelConfig":
        with open(filepath, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValidationError(f"{filepath}: expected a mapping at top level, got {type(data).__name__}")
        return cls.from_dict(data)


def load_config(filepath: Union[str, Path]) -> ModelConfig:
    """Load a JSON or YAML configuration, chosen by file extension."""
    suffix = Path(filepath).suffix.lower()
    if suffix == ".json":
        return ModelConfig.from_json_file(filepath)
    if suffix in (".yaml", ".yml"):
        return ModelConfig.from_yaml_file(filepath)
    raise ValidationError(f"Unsupported configuration file type: {suffix!r}")


def build_model(config: ModelConfig) -> PLSModel:
    """Create the unfitted :class:`PLSModel` described by ``config``."""
    config.validate()
    if config.algorithm == "pls1":
        algorithm = PLS1()
    elif config.algorithm == "simpls":
        algorithm = SIMPLS(num_coefficients=config.num_coefficients)
    elif config.algorithm == "kernel_pls":
        algorithm = KernelPLS(
            kernel=create_kernel(config.kernel, **config.kernel_params),
            tol=config.tol,
            max_iter=config.max_iter,
            seed=config.seed,
        )
    else:
        algorithm = OPLS(base=build_model(config.base) if config.base is not None else None)
    return PLSModel(algorithm, n_components=config.n_components, preprocessing=config.preprocessing)
