"""Tests for list_learners: validation, dispatch, warnings and creation."""

import sys
import warnings

import pytest

from LearnerIndex.models import Learner, ListLearners, TaskDescription, get_catalog, list_learners, set_catalog
from LearnerIndex.utils.errors import MissingPackagesWarning, ValidationError


def _classes(listing):
    return listing["class"].tolist()


class TestValidation:
    def test_unknown_property(self, catalog):
        with pytest.raises(ValidationError, match="Unsupported learner properties"):
            catalog.list_learners(properties=["fast"])

    @pytest.mark.parametrize("flag", ["quiet", "warn_missing_packages", "check_packages", "create"])
    def test_flags_must_be_bool(self, catalog, flag):
        with pytest.raises(ValidationError, match=flag):
            catalog.list_learners(**{flag: "yes"})

    def test_unknown_task_type(self, catalog):
        with pytest.raises(ValidationError, match="Unsupported task type"):
            catalog.list_learners("ranking")
        with pytest.raises(ValidationError):
            catalog.list_learners(["classif", "ranking"])


class TestDispatch:
    def test_all_types(self, catalog):
        listing = catalog.list_learners(warn_missing_packages=False)
        assert isinstance(listing, ListLearners)
        assert _classes(listing) == ["classif.alpha", "classif.beta", "regr.delta", "cluster.epsilon"]

    def test_unrecognised_object_lists_everything(self, catalog):
        listing = catalog.list_learners(42, warn_missing_packages=False)
        assert len(listing) == 4

    def test_single_and_multiple_types(self, catalog):
        assert _classes(catalog.list_learners("regr", warn_missing_packages=False)) == ["regr.delta"]
        listing = catalog.list_learners(("regr", "cluster"), warn_missing_packages=False)
        assert _classes(listing) == ["regr.delta", "cluster.epsilon"]

    def test_properties(self, catalog):
        listing = catalog.list_learners("classif", properties=["multiclass", "prob"], warn_missing_packages=False)
        assert _classes(listing) == ["classif.alpha"]
        listing = catalog.list_learners(properties="se", warn_missing_packages=False)
        assert _classes(listing) == ["regr.delta"]

    def test_without_package_check(self, catalog):
        listing = catalog.list_learners("classif", check_packages=False, warn_missing_packages=False)
        assert _classes(listing) == ["classif.alpha", "classif.beta", "classif.gamma"]
        assert listing.set_index("class").loc["classif.gamma", "installed"] == False  # noqa: E712

    def test_mock_learners_never_listed(self, catalog):
        listing = catalog.list_learners(check_packages=False, warn_missing_packages=False)
        assert not any("hidden" in cl for cl in _classes(listing))


class TestTaskDispatch:
    def test_twoclass_task_with_factors_and_missings(self, catalog):
        task = TaskDescription(
            type="classif",
            n_feat={"numerics": 2, "factors": 1, "ordered": 0},
            has_missings=True,
            class_levels=["no", "yes"],
        )
        assert task.learner_properties() == ["numerics", "factors", "missings", "twoclass"]
        assert _classes(catalog.list_learners(task, warn_missing_packages=False)) == ["classif.beta"]

    def test_task_properties_merge_with_requested(self, catalog):
        task = TaskDescription(type="classif", n_feat={"numerics": 3}, class_levels=["a", "b", "c"])
        assert task.learner_properties() == ["numerics", "multiclass"]
        listing = catalog.list_learners(task, properties=["prob"], warn_missing_packages=False)
        assert _classes(listing) == ["classif.alpha"]

    def test_oneclass(self):
        task = TaskDescription(type="classif", n_feat={"numerics": 1}, class_levels=["only"])
        assert task.learner_properties() == ["numerics", "oneclass"]

    def test_class_count_only_matters_for_classif(self, catalog):
        task = TaskDescription(type="regr", n_feat={"numerics": 1}, class_levels=["a", "b"])
        assert task.learner_properties() == ["numerics"]
        assert _classes(catalog.list_learners(task, warn_missing_packages=False)) == ["regr.delta"]


class TestMissingPackageWarning:
    def test_warns_with_all_missing_ids(self, catalog):
        with pytest.warns(MissingPackagesWarning, match="classif.gamma"):
            catalog.list_learners("regr")

    def test_warning_points_at_caller(self, catalog):
        with pytest.warns(MissingPackagesWarning) as record:
            catalog.list_learners("regr")
        assert record[0].filename == __file__

    def test_module_level_warning_points_at_caller(self, catalog):
        set_catalog(catalog)
        try:
            with pytest.warns(MissingPackagesWarning) as record:
                list_learners("regr")
        finally:
            set_catalog(None)
        assert record[0].filename == __file__

    def test_no_warning_when_disabled(self, catalog):
        with warnings.catch_warnings():
            warnings.simplefilter("error", MissingPackagesWarning)
            catalog.list_learners(warn_missing_packages=False)

    def test_no_warning_when_everything_installed(self, catalog):
        catalog.registry.unregister("classif.gamma")
        with warnings.catch_warnings():
            warnings.simplefilter("error", MissingPackagesWarning)
            catalog.list_learners()


class TestCreate:
    def test_returns_installed_learners_by_id(self, catalog):
        learners = catalog.list_learners("classif", create=True, warn_missing_packages=False)
        assert list(learners) == ["classif.alpha", "classif.beta"]
        assert all(isinstance(lrn, Learner) for lrn in learners.values())
        assert learners["classif.alpha"].estimator.depth == 3

    def test_create_ignores_check_packages(self, catalog):
        learners = catalog.list_learners("classif", create=True, check_packages=False, warn_missing_packages=False)
        assert "classif.gamma" not in learners

    def test_quiet_suppresses_startup_output(self, catalog, capsys):
        catalog.list_learners("cluster", create=True, warn_missing_packages=False)
        assert "banner" not in capsys.readouterr().out
        catalog.list_learners("cluster", create=True, quiet=False, warn_missing_packages=False)
        assert "epsilon startup banner" in capsys.readouterr().out


    def test_quiet_suppresses_stderr_and_warnings(self, catalog, capsys):
        @catalog.registry.learner("cluster.noisy", name="Noisy", short_name="noisy", properties=["numerics"])
        def _noisy(params):
            sys.stderr.write("noisy stderr\n")
            warnings.warn("noisy warning", UserWarning)
            return params

        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            learners = catalog.list_learners("cluster", create=True, warn_missing_packages=False)
        assert "cluster.noisy" in learners
        assert not [w for w in caught if "noisy" in str(w.message)]
        assert "noisy" not in capsys.readouterr().err

        with pytest.warns(UserWarning, match="noisy warning"):
            catalog.list_learners("cluster", create=True, quiet=False, warn_missing_packages=False)
        assert "noisy stderr" in capsys.readouterr().err


class TestSettingsDefaults:
    def test_flags_fall_back_to_settings(self, catalog):
        catalog.settings.set("listing.check_packages", False)
        catalog.settings.set("listing.warn_missing_packages", False)
        listing = catalog.list_learners("classif")
        assert "classif.gamma" in _classes(listing)

    def test_create_from_settings(self, catalog):
        catalog.settings.set("listing.create", True)
        learners = catalog.list_learners("regr", warn_missing_packages=False)
        assert list(learners) == ["regr.delta"]

    def test_print_rows_from_settings(self, catalog):
        catalog.settings.set("listing.print_rows", 1)
        listing = catalog.list_learners(warn_missing_packages=False)
        assert listing.print_rows == 1

    def test_availability(self, catalog):
        info = catalog.availability()
        assert info["classif.alpha"]["available"]
        assert not info["classif.gamma"]["available"]
        assert info["classif.gamma"]["card"].name == "Gamma Classifier"


class TestModuleLevel:
    def test_uses_shared_catalog(self, catalog):
        set_catalog(catalog)
        try:
            assert get_catalog() is catalog
            listing = list_learners("regr", warn_missing_packages=False)
            assert listing["class"].tolist() == ["regr.delta"]
        finally:
            set_catalog(None)
