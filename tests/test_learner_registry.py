"""Tests for the learner registry, cards and supported properties."""

import pytest

from LearnerIndex.models import LearnerCard, LearnerRegistry, build_registry
from LearnerIndex.models.learner_registry import (
    MOCK_MARKER,
    get_supported_learner_properties,
    get_supported_task_types,
    is_package_installed,
    strip_package_marker,
)
from LearnerIndex.utils.errors import RegistryError, UnknownLearnerError

from .conftest import NOT_INSTALLED


class TestSupportedValues:
    def test_task_types(self):
        assert get_supported_task_types() == ["classif", "regr", "surv", "costsens", "cluster", "multilabel"]

    def test_properties_per_type(self):
        assert "se" in get_supported_learner_properties("regr")
        assert "se" not in get_supported_learner_properties("classif")
        assert "rcens" in get_supported_learner_properties("surv")
        assert get_supported_learner_properties("cluster") == [
            "numerics", "factors", "ordered", "missings", "weights", "prob",
        ]

    def test_union_is_ordered_and_unique(self):
        props = get_supported_learner_properties()
        assert len(props) == len(set(props))
        assert props[:6] == ["numerics", "factors", "ordered", "missings", "weights", "prob"]
        for t in get_supported_task_types():
            assert set(get_supported_learner_properties(t)) <= set(props)

    def test_unknown_type(self):
        with pytest.raises(RegistryError):
            get_supported_learner_properties("ranking")


class TestPackages:
    def test_strip_marker(self):
        assert strip_package_marker("!sksurv") == "sksurv"
        assert strip_package_marker("_foo") == "foo"
        assert strip_package_marker("sklearn") == "sklearn"

    def test_installed(self):
        assert is_package_installed("json")
        assert is_package_installed("!json")
        assert not is_package_installed(NOT_INSTALLED)
        assert not is_package_installed(f"{NOT_INSTALLED}.sub")


class TestRegistry:
    def test_decorator_registers_in_order(self, registry):
        assert registry.ids() == ["classif.alpha", "classif.beta", "classif.gamma", "regr.delta", "cluster.epsilon"]
        assert f"classif.{MOCK_MARKER}hidden" in registry
        assert f"classif.{MOCK_MARKER}hidden" in registry.ids(include_mocks=True)
        assert len(registry) == 6

    def test_card_metadata(self, registry):
        card = registry.get("classif.gamma").card
        assert card.type == "classif"
        assert card.package == ["math", f"_{NOT_INSTALLED}"]
        assert card.packages == ["math", NOT_INSTALLED]
        assert registry.get("classif.alpha").card.defaults() == {"depth": 3}

    def test_availability(self, registry):
        assert registry.get("classif.alpha").is_available() == (True, "")
        available, reason = registry.get("classif.gamma").is_available()
        assert not available
        assert NOT_INSTALLED in reason

    def test_unknown_learner(self, registry):
        with pytest.raises(UnknownLearnerError, match="classif.nope"):
            registry.get("classif.nope")
        with pytest.raises(KeyError):
            registry.get("classif.nope")

    def test_duplicate_rejected_unless_replaced(self, registry):
        card = LearnerCard(cl="classif.alpha", name="Other", short_name="other")
        with pytest.raises(RegistryError, match="already registered"):
            registry.register(card, dict)
        registry.register(card, dict, replace=True)
        assert registry.get("classif.alpha").card.name == "Other"

    @pytest.mark.parametrize(
        "card",
        [
            LearnerCard(cl="nodot", name="x", short_name="x"),
            LearnerCard(cl="ranking.x", name="x", short_name="x"),
            LearnerCard(cl="classif.x", name="x", short_name="x", properties=["se"]),
        ],
    )
    def test_invalid_cards(self, card):
        with pytest.raises(RegistryError):
            LearnerRegistry().register(card, dict)

    def test_unregister(self, registry):
        registry.unregister("regr.delta")
        assert "regr.delta" not in registry
        with pytest.raises(UnknownLearnerError):
            registry.unregister("regr.delta")

    def test_discover_runs_entry_point_hooks(self, monkeypatch):
        class _EntryPoint:
            name = "extra"

            def load(self):
                def hook(reg):
                    reg.register(LearnerCard(cl="regr.plugin", name="Plugin", short_name="plugin"), dict)

                return hook

        calls = []

        def fake_entry_points(group):
            calls.append(group)
            return [_EntryPoint()]

        monkeypatch.setattr("importlib.metadata.entry_points", fake_entry_points)
        reg = LearnerRegistry()
        assert reg.discover("my.group") == 1
        assert calls == ["my.group"]
        assert "regr.plugin" in reg


class TestBuiltinCatalog:
    def test_builtin_learners_are_valid(self):
        reg = build_registry(discover=False)
        ids = reg.ids()
        assert "classif.random_forest" in ids
        assert "regr.lm" in ids
        assert "cluster.kmeans" in ids
        assert "surv.coxph" in ids
        assert "multilabel.knn" in ids
        assert not any(cl.startswith("costsens.") for cl in ids)
        for spec in reg:
            assert spec.card.type in get_supported_task_types()
            assert spec.card.package

    def test_survival_learners_load_sksurv_eagerly(self):
        reg = build_registry(discover=False)
        assert reg.get("surv.coxph").card.package == ["!sksurv"]
        assert reg.get("surv.coxph").card.packages == ["sksurv"]


class _FakeEntryPoint:
    def __init__(self, name, hook=None, error=None):
        self.name = name
        self._hook = hook
        self._error = error

    def load(self):
        if self._error is not None:
            raise self._error
        return self._hook


class TestDiscoverFailures:
    def _install(self, monkeypatch, *eps):
        monkeypatch.setattr("importlib.metadata.entry_points", lambda group: list(eps))

    def test_clashing_plugin_is_skipped(self, monkeypatch):
        def clash(reg):
            reg.register(LearnerCard(cl="classif.logreg", name="Clash", short_name="clash"), dict)

        self._install(monkeypatch, _FakeEntryPoint("clash", hook=clash))
        reg = build_registry()
        assert reg.get("classif.logreg").card.name == "Logistic Regression"
        assert len(reg) == len(build_registry(discover=False))

    def test_failing_hook_leaves_no_partial_registrations(self, monkeypatch):
        def half(reg):
            reg.register(LearnerCard(cl="regr.first", name="First", short_name="first"), dict)
            raise RuntimeError("plugin crashed")

        def good(reg):
            reg.register(LearnerCard(cl="regr.good", name="Good", short_name="good"), dict)

        self._install(
            monkeypatch,
            _FakeEntryPoint("broken_import", error=ModuleNotFoundError("no module")),
            _FakeEntryPoint("half", hook=half),
            _FakeEntryPoint("good", hook=good),
        )
        reg = LearnerRegistry()
        assert reg.discover() == 1
        assert reg.ids() == ["regr.good"]

    def test_failing_hook_restores_replaced_learner(self, monkeypatch, registry):
        def replace_then_fail(reg):
            reg.register(LearnerCard(cl="regr.delta", name="Replaced", short_name="r"), dict, replace=True)
            raise ValueError("bad plugin")

        self._install(monkeypatch, _FakeEntryPoint("replace", hook=replace_then_fail))
        assert registry.discover() == 0
        assert registry.get("regr.delta").card.name == "Delta Regression"


def test_builtin_card_without_factory_is_an_error(monkeypatch):
    from LearnerIndex.models import learner_catalog

    orphan = LearnerCard(cl="regr.orphan", name="Orphan", short_name="orphan", package=["sklearn"])
    monkeypatch.setattr(learner_catalog, "_multilabel_cards", lambda: [orphan])
    with pytest.raises(RegistryError, match="regr.orphan"):
        build_registry(discover=False)


class TestDottedPackages:
    def test_only_top_level_module_is_located(self, monkeypatch):
        located = []

        def fake_find_spec(name, package=None):
            located.append(name)
            return object()

        monkeypatch.setattr("importlib.util.find_spec", fake_find_spec)
        assert is_package_installed("!sklearn_extra.cluster")
        assert located == ["sklearn_extra"]

    def test_dotted_name_does_not_import_parent(self, monkeypatch):
        import sys

        monkeypatch.delitem(sys.modules, "email", raising=False)
        monkeypatch.delitem(sys.modules, "email.mime", raising=False)
        assert is_package_installed("email.mime")
        assert "email" not in sys.modules
