"""Shared fixtures: isolated registries, settings files and catalogs."""

from types import SimpleNamespace

import pytest

from LearnerIndex.config import SettingsManager
from LearnerIndex.models import LearnerCatalog, LearnerRegistry, HyperParamSpec
from LearnerIndex.models.learner_registry import MOCK_MARKER


NOT_INSTALLED = "learnerindex_pkg_that_is_not_installed"


def _namespace(params):
    return SimpleNamespace(**params)


@pytest.fixture
def registry():
    """A registry holding only lightweight mock constructors."""
    reg = LearnerRegistry()

    @reg.learner(
        "classif.alpha",
        name="Alpha Classifier",
        short_name="alpha",
        package=["math"],
        properties=["numerics", "twoclass", "multiclass", "prob"],
        params=[HyperParamSpec("depth", 3, "int", 1, 10, 1)],
    )
    def _alpha(params):
        return _namespace(params)

    @reg.learner(
        "classif.beta",
        name="Beta Classifier",
        short_name="beta",
        package=["!json"],
        properties=["numerics", "factors", "missings", "twoclass"],
    )
    def _beta(params):
        return _namespace(params)

    @reg.learner(
        "classif.gamma",
        name="Gamma Classifier",
        short_name="gamma",
        package=["math", "_" + NOT_INSTALLED],
        properties=["numerics", "twoclass", "prob"],
    )
    def _gamma(params):
        raise AssertionError("constructor of a learner with missing packages must not run")

    @reg.learner(
        "regr.delta",
        name="Delta Regression",
        short_name="delta",
        package=["math"],
        properties=["numerics", "weights", "se"],
        note="plain",
    )
    def _delta(params):
        return _namespace(params)

    @reg.learner("cluster.epsilon", name="Epsilon Clustering", short_name="eps", properties=["numerics"])
    def _epsilon(params):
        print("epsilon startup banner")
        return _namespace(params)

    @reg.learner(f"classif.{MOCK_MARKER}hidden", name="Hidden", short_name="hidden", properties=["numerics"])
    def _hidden(params):
        return _namespace(params)

    return reg


@pytest.fixture
def settings(tmp_path):
    return SettingsManager(user_config_path=str(tmp_path / "settings.json"))


@pytest.fixture
def catalog(registry, settings):
    return LearnerCatalog(registry=registry, settings=settings)
