"""Finding learners that match a task type or a task.

``list_learners`` returns learners with specific characteristics, e.g. whether
they support missing values or case weights. Without ``create`` only learner
cards are inspected, which is fast and loads no packages. With ``create`` every
matching learner is constructed, which loads all of their packages.

Wrapper approaches (cost-sensitive weighting, multilabel binary relevance and
the like) are not basic learners and are never listed.
"""

from __future__ import annotations

import contextlib
import io
import warnings
from functools import singledispatch
from typing import Any, Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

import pandas as pd

from ..config import SettingsManager
from .learner import Learner, make_learner
from .learner_registry import (
    ENTRY_POINT_GROUP,
    LearnerRegistry,
    build_registry,
    get_supported_learner_properties,
    get_supported_task_types,
)
from .learner_table import ListLearners, filter_learner_table, get_learner_table, to_listing
from .task_description import TaskDescription
from ..utils.errors import MissingPackagesWarning, ValidationError
from ..utils.logger import get_logger, set_level


_log = get_logger("listing")

_FLAGS = ("quiet", "warn_missing_packages", "check_packages", "create")


@contextlib.contextmanager
def _quietly(enabled: bool) -> Iterator[None]:
    """Swallow output and warnings printed while packages load."""
    if not enabled:
        yield
        return
    with warnings.catch_warnings(), contextlib.redirect_stdout(io.StringIO()), contextlib.redirect_stderr(io.StringIO()):
        warnings.simplefilter("ignore")
        yield


def _as_properties(properties: Optional[Iterable[str] | str]) -> List[str]:
    if properties is None:
        return []
    if isinstance(properties, str):
        return [properties]
    return list(properties)


def _check_types(types: Sequence[str]) -> None:
    supported = get_supported_task_types()
    bad = [t for t in types if t not in supported]
    if bad:
        raise ValidationError(
            f"Unsupported task type(s): {', '.join(map(str, bad))}. Must be a subset of {{{', '.join(supported)}}}"
        )


class LearnerCatalog:
    """Binds a learner registry to settings and answers listing queries."""

    def __init__(self, registry: Optional[LearnerRegistry] = None, settings: Optional[SettingsManager] = None):
        self.settings = settings if settings is not None else SettingsManager()
        if registry is None:
            registry = build_registry(
                discover=bool(self.settings.get("registry.discover_plugins", True)),
                group=str(self.settings.get("registry.entry_point_group", ENTRY_POINT_GROUP)),
            )
        self.registry = registry
        self.settings.settings_changed.connect(self._on_settings_changed)

    def _on_settings_changed(self, key: str, value: Any) -> None:
        if key == "logging.level":
            set_level(value)

    def learner_table(self) -> pd.DataFrame:
        return get_learner_table(self.registry)

    def filter(self, types=None, properties: Iterable[str] = (), check_packages: bool = True) -> pd.DataFrame:
        return filter_learner_table(self.learner_table(), types=types, properties=properties, check_packages=check_packages)

    def availability(self) -> Dict[str, Dict[str, Any]]:
        """Return {id: {available, unavailable_reason, card}} for every listed learner."""
        out: Dict[str, Dict[str, Any]] = {}
        for cl in self.registry.ids():
            spec = self.registry.get(cl)
            available, reason = spec.is_available()
            out[cl] = {
                "available": bool(available),
                "unavailable_reason": reason,
                "card": spec.card,
            }
        return out

    def make_learner(self, cl: str, **kwargs: Any) -> Learner:
        return make_learner(cl, registry=self.registry, **kwargs)

    def list_learners(
        self,
        obj: Any = None,
        properties: Optional[Iterable[str] | str] = None,
        quiet: Optional[bool] = None,
        warn_missing_packages: Optional[bool] = None,
        check_packages: Optional[bool] = None,
        create: Optional[bool] = None,
    ) -> ListLearners | Dict[str, Learner]:
        """Find learners matching ``obj`` and ``properties``.

        Args:
            obj: None for all task types, a task type or list of task types, or a
                TaskDescription whose feature kinds, missing values and class
                count add to the required properties.
            properties: Properties every returned learner must have.
            quiet: Construct learners without package startup output.
            warn_missing_packages: Warn about learners whose packages are missing.
            check_packages: Drop learners whose packages are missing. Ignored
                with ``create``, which only ever builds installed learners.
            create: Return constructed learners instead of the descriptive table.

        Flags left as None use the ``listing.*`` settings.

        Returns:
            A ListLearners DataFrame, or a dict of Learner objects keyed by id.
        """
        return self._query(
            obj,
            properties,
            {
                "quiet": quiet,
                "warn_missing_packages": warn_missing_packages,
                "check_packages": check_packages,
                "create": create,
            },
            stacklevel=3,
        )

    def _query(self, obj: Any, properties: Optional[Iterable[str] | str], given: Dict[str, Optional[bool]], *, stacklevel: int):
        # stacklevel counts frames up to the caller of the public entry point
        props = _as_properties(properties)
        supported = get_supported_learner_properties()
        bad = [p for p in props if p not in supported]
        if bad:
            raise ValidationError(
                f"Unsupported learner properties: {', '.join(map(str, bad))}. Must be a subset of {{{', '.join(supported)}}}"
            )

        flags: Dict[str, bool] = {}
        for name in _FLAGS:
            value = given[name]
            if value is None:
                value = self.settings.get(f"listing.{name}", name != "create")
            if not isinstance(value, bool):
                raise ValidationError(f"'{name}' must be a single boolean, got {value!r}")
            flags[name] = value

        types, props = _resolve_query(obj, props)
        tab = self.learner_table()

        if flags["warn_missing_packages"] and not tab["installed"].all():
            missing = tab.loc[~tab["installed"].astype(bool), "id"].tolist()
            warnings.warn(
                "The following learners could not be constructed, probably because their packages are not installed:\n"
                f"{','.join(missing)}\n"
                "Check the learner catalog to see which packages you need or install learnerindex with all extras.",
                MissingPackagesWarning,
                stacklevel=stacklevel,
            )

        tab = filter_learner_table(
            tab,
            types=types,
            properties=props,
            check_packages=flags["check_packages"] and not flags["create"],
        )
        _log.debug("Listing %d learner(s) for types=%s properties=%s", len(tab), types, props)

        if flags["create"]:
            learners: Dict[str, Learner] = {}
            for cl in tab.loc[tab["installed"].astype(bool), "id"]:
                with _quietly(flags["quiet"]):
                    learners[cl] = make_learner(cl, registry=self.registry)
            return learners

        return to_listing(tab, print_rows=int(self.settings.get("listing.print_rows", 6)))


@singledispatch
def _resolve_query(obj: Any, properties: List[str]) -> Tuple[Optional[List[str]], List[str]]:
    """Turn a query object into (task types, required properties)."""
    # None and anything unrecognised mean all task types
    if obj is not None:
        _log.debug("Ignoring object of type %s; listing all task types", type(obj).__name__)
    return None, properties


@_resolve_query.register(str)
def _(obj: str, properties: List[str]):
    _check_types([obj])
    return [obj], properties


@_resolve_query.register(list)
@_resolve_query.register(tuple)
def _(obj: Sequence[str], properties: List[str]):
    types = list(obj)
    _check_types(types)
    return types or None, properties


@_resolve_query.register(TaskDescription)
def _(obj: TaskDescription, properties: List[str]):
    props = obj.learner_properties()
    props += [p for p in properties if p not in props]
    return [obj.type], props


_catalog: Optional[LearnerCatalog] = None


def get_catalog() -> LearnerCatalog:
    """Return the shared catalog, building it on first use."""
    global _catalog
    if _catalog is None:
        _catalog = LearnerCatalog()
    return _catalog


def set_catalog(catalog: Optional[LearnerCatalog]) -> None:
    """Replace the shared catalog; None rebuilds it on next use."""
    global _catalog
    _catalog = catalog


def list_learners(
    obj: Any = None,
    properties: Optional[Iterable[str] | str] = None,
    quiet: Optional[bool] = None,
    warn_missing_packages: Optional[bool] = None,
    check_packages: Optional[bool] = None,
    create: Optional[bool] = None,
) -> ListLearners | Dict[str, Learner]:
    """Find matching learners in the shared catalog. See LearnerCatalog.list_learners."""
    return get_catalog()._query(
        obj,
        properties,
        {
            "quiet": quiet,
            "warn_missing_packages": warn_missing_packages,
            "check_packages": check_packages,
            "create": create,
        },
        stacklevel=3,
    )
