"""Tests for ModelConfig serialization and model building."""

import json

import numpy as np
import pytest
import yaml

from latentpls.config import ALGORITHMS, ModelConfig, build_model, load_config
from latentpls.core.exceptions import ValidationError
from latentpls.operators.kernels import PolyKernel
from latentpls.operators.models.sklearn import OPLS, PLS1, SIMPLS, KernelPLS, PLSModel


class TestModelConfig:
    """Test ModelConfig defaults and validation."""

    def test_defaults(self):
        config = ModelConfig()
        assert config.algorithm == "pls1"
        assert config.n_components == 5
        assert config.preprocessing == "center"
        assert config.base is None
        assert config.validate() is config

    @pytest.mark.parametrize(
        "kwargs, match",
        [
            ({"algorithm": "pls2"}, "algorithm"),
            ({"n_components": 0}, "n_components"),
            ({"preprocessing": "scale"}, "preprocessing"),
            ({"kernel": "sigmoid"}, "kernel"),
            ({"tol": 0.0}, "tol"),
            ({"max_iter": 0}, "max_iter"),
            ({"seed": -1}, "seed"),
            ({"seed": 1.5}, "seed"),
            ({"seed": True}, "seed"),
            ({"num_coefficients": -2}, "num_coefficients"),
            ({"algorithm": "pls1", "base": ModelConfig()}, "base"),
        ],
    )
    def test_invalid(self, kwargs, match):
        with pytest.raises(ValidationError, match=match):
            ModelConfig(**kwargs).validate()

    def test_algorithms(self):
        assert ALGORITHMS == ("pls1", "simpls", "kernel_pls", "opls")


class TestSerialization:
    """Round trips through dicts and files."""

    @pytest.fixture
    def opls_config(self):
        return ModelConfig(
            algorithm="opls",
            n_components=2,
            preprocessing="standardize",
            base=ModelConfig(algorithm="simpls", n_components=1, num_coefficients=3),
        )

    def test_dict_round_trip(self, opls_config):
        data = opls_config.to_dict()

        assert data["base"]["algorithm"] == "simpls"
        assert ModelConfig.from_dict(data) == opls_config

    def test_unknown_key(self):
        with pytest.raises(ValidationError, match="n_comp"):
            ModelConfig.from_dict({"algorithm": "pls1", "n_comp": 3})

    def test_json_file(self, opls_config, tmp_path):
        path = tmp_path / "model.json"
        opls_config.to_json_file(path)

        assert json.loads(path.read_text())["n_components"] == 2
        assert ModelConfig.from_json_file(path) == opls_config
        assert load_config(path) == opls_config

    def test_yaml_file(self, opls_config, tmp_path):
        path = tmp_path / "model.yaml"
        opls_config.to_yaml_file(path)

        assert yaml.safe_load(path.read_text())["preprocessing"] == "standardize"
        assert load_config(path) == opls_config

    def test_yaml_written_by_hand(self, tmp_path):
        path = tmp_path / "kernel.yml"
        path.write_text(
            "algorithm: kernel_pls\n"
            "n_components: 3\n"
            "kernel: poly\n"
            "kernel_params: {degree: 3}\n"
            "tol: 1.0e-8\n"
        )

        config = load_config(path)

        assert config.kernel_params == {"degree": 3}
        assert config.tol == 1e-8

    def test_yaml_not_a_mapping(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("- pls1\n- simpls\n")

        with pytest.raises(ValidationError, match="mapping"):
            load_config(path)

    def test_unsupported_extension(self, tmp_path):
        with pytest.raises(ValidationError, match="Unsupported"):
            load_config(tmp_path / "model.toml")


class TestBuildModel:
    """Turning configurations into unfitted models."""

    @pytest.mark.parametrize(
        "algorithm, expected",
        [("pls1", PLS1), ("simpls", SIMPLS), ("kernel_pls", KernelPLS), ("opls", OPLS)],
    )
    def test_algorithm_type(self, algorithm, expected):
        model = build_model(ModelConfig(algorithm=algorithm, n_components=2))

        assert isinstance(model, PLSModel)
        assert isinstance(model.algorithm, expected)
        assert model.n_components == 2

    def test_kernel_settings(self):
        config = ModelConfig(algorithm="kernel_pls", kernel="poly", kernel_params={"degree": 3}, seed=4, max_iter=50)
        algorithm = build_model(config).algorithm

        assert isinstance(algorithm.kernel, PolyKernel)
        assert algorithm.kernel.degree == 3
        assert algorithm.seed == 4
        assert algorithm.max_iter == 50

    def test_opls_base(self):
        config = ModelConfig(algorithm="opls", n_components=1, base=ModelConfig(algorithm="simpls", n_components=2))
        base = build_model(config).algorithm.base

        assert isinstance(base.algorithm, SIMPLS)
        assert base.n_components == 2

    def test_built_model_fits(self):
        rng = np.random.default_rng(9)
        X = rng.normal(size=(25, 6))
        y = X[:, 0] - X[:, 4]
        model = build_model(ModelConfig(algorithm="simpls", n_components=2, num_coefficients=2))

        assert model.fit(X, y).predict(X).shape == (25,)

    def test_invalid_config_not_built(self):
        with pytest.raises(ValidationError):
            build_model(ModelConfig(n_components=-1))

    def test_invalid_seed_from_yaml(self, tmp_path):
        path = tmp_path / "model.yaml"
        path.write_text("algorithm: kernel_pls\nseed: -3\n", encoding="utf-8")

        with pytest.raises(ValidationError, match="seed"):
            build_model(load_config(path))
