"""Learner registry and learner cards for LearnerIndex.

This module defines:
- The supported task types and the learner properties valid for each type.
- Learner cards (class id, names, required packages, properties, defaults).
- A registry of constructor functions keyed by learner class id.

Notes
- Packages are import names. A leading "!" or "_" is a loader marker and is
  stripped whenever packages are listed or checked; "!" also means the package
  is imported before the constructor runs.
- Constructors whose id contains MOCK_MARKER are kept in the registry but never
  listed.
- Availability checks locate packages without importing them.
"""

from __future__ import annotations

import importlib.metadata
import importlib.util
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, List, Optional, Sequence

from ..utils.errors import RegistryError, UnknownLearnerError
from ..utils.logger import get_logger


_log = get_logger("registry")

MOCK_MARKER = "__mocklearners__"
PACKAGE_MARKERS = "!_"
ENTRY_POINT_GROUP = "learnerindex.learners"

_LEARNER_PROPERTIES: Dict[str, List[str]] = {
    "classif": [
        "numerics", "factors", "ordered", "missings", "weights", "prob",
        "oneclass", "twoclass", "multiclass", "class_weights", "featimp",
        "oobpreds", "functionals", "single_functional",
    ],
    "multilabel": [
        "numerics", "factors", "ordered", "missings", "weights", "prob",
        "oneclass", "twoclass", "multiclass",
    ],
    "regr": [
        "numerics", "factors", "ordered", "missings", "weights", "se",
        "featimp", "oobpreds", "functionals", "single_functional",
    ],
    "cluster": ["numerics", "factors", "ordered", "missings", "weights", "prob"],
    "surv": [
        "numerics", "factors", "ordered", "missings", "weights", "prob",
        "lcens", "rcens", "icens", "featimp", "oobpreds",
    ],
    "costsens": [
        "numerics", "factors", "ordered", "missings", "weights", "prob",
        "twoclass", "multiclass",
    ],
}


def get_supported_task_types() -> List[str]:
    return ["classif", "regr", "surv", "costsens", "cluster", "multilabel"]


def get_supported_learner_properties(type: Optional[str] = None) -> List[str]:
    """Return the properties a learner of ``type`` may declare.

    Without a type, the union over all task types is returned in first-seen order.
    """
    if type is None:
        out: List[str] = []
        for props in _LEARNER_PROPERTIES.values():
            out.extend(p for p in props if p not in out)
        return out
    try:
        return list(_LEARNER_PROPERTIES[type])
    except KeyError:
        raise RegistryError(f"Unsupported task type: {type}") from None


def strip_package_marker(package: str) -> str:
    if package and package[0] in PACKAGE_MARKERS:
        return package[1:]
    return package


def is_package_installed(package: str) -> bool:
    """Check whether ``package`` can be imported, without importing it.

    Only the top-level module of a dotted name is located; locating a
    submodule would import its parent package.
    """
    name = strip_package_marker(package).split(".", 1)[0]
    try:
        return importlib.util.find_spec(name) is not None
    except (ImportError, ValueError):
        return False


def learner_type(cl: str) -> str:
    return cl.split(".", 1)[0]


@dataclass(frozen=True)
class HyperParamSpec:
    name: str
    default: Any
    kind: str  # int|float|bool|str|choice
    min_value: Optional[float] = None
    max_value: Optional[float] = None
    step: Optional[float] = None
    choices: Optional[List[Any]] = None


@dataclass(frozen=True)
class LearnerCard:
    cl: str
    name: str
    short_name: str
    package: List[str] = field(default_factory=list)
    properties: List[str] = field(default_factory=list)
    note: Optional[str] = None
    params: List[HyperParamSpec] = field(default_factory=list)

    @property
    def type(self) -> str:
        return learner_type(self.cl)

    @property
    def packages(self) -> List[str]:
        """Required packages without loader markers."""
        return [strip_package_marker(p) for p in self.package]

    def defaults(self) -> Dict[str, Any]:
        return {p.name: p.default for p in self.params}


@dataclass(frozen=True)
class LearnerSpec:
    card: LearnerCard
    factory: Callable[[Dict[str, Any]], Any]

    def missing_packages(self) -> List[str]:
        return [p for p in self.card.packages if not is_package_installed(p)]

    def is_available(self) -> tuple[bool, str]:
        missing = self.missing_packages()
        if missing:
            return (False, f"Missing dependency: {', '.join(missing)}")
        return (True, "")


class LearnerRegistry:
    """Learner constructors keyed by class id, in registration order."""

    def __init__(self):
        self._specs: Dict[str, LearnerSpec] = {}

    def __contains__(self, cl: object) -> bool:
        return cl in self._specs

    def __len__(self) -> int:
        return len(self._specs)

    def __iter__(self) -> Iterator[LearnerSpec]:
        return iter(list(self._specs.values()))

    def ids(self, include_mocks: bool = False) -> List[str]:
        return [cl for cl in self._specs if include_mocks or MOCK_MARKER not in cl]

    def get(self, cl: str) -> LearnerSpec:
        try:
            return self._specs[cl]
        except KeyError:
            raise UnknownLearnerError(f"No learner registered under '{cl}'") from None

    def register(self, card: LearnerCard, factory: Callable[[Dict[str, Any]], Any], *, replace: bool = False) -> LearnerSpec:
        self._validate(card)
        if card.cl in self._specs and not replace:
            raise RegistryError(f"Learner '{card.cl}' is already registered")
        spec = LearnerSpec(card=card, factory=factory)
        self._specs[card.cl] = spec
        _log.debug("Registered learner %s", card.cl)
        return spec

    def learner(
        self,
        cl: str,
        *,
        name: str,
        short_name: str,
        package: Sequence[str] = (),
        properties: Sequence[str] = (),
        note: Optional[str] = None,
        params: Sequence[HyperParamSpec] = (),
        replace: bool = False,
    ) -> Callable[[Callable[[Dict[str, Any]], Any]], Callable[[Dict[str, Any]], Any]]:
        """Decorator registering the wrapped function as the constructor of ``cl``."""

        def _decorate(fn: Callable[[Dict[str, Any]], Any]) -> Callable[[Dict[str, Any]], Any]:
            card = LearnerCard(
                cl=cl,
                name=name,
                short_name=short_name,
                package=list(package),
                properties=list(properties),
                note=note,
                params=list(params),
            )
            self.register(card, fn, replace=replace)
            return fn

        return _decorate

    def unregister(self, cl: str) -> None:
        self.get(cl)
        del self._specs[cl]

    def discover(self, group: str = ENTRY_POINT_GROUP) -> int:
        """Load plugin learners advertised under the ``group`` entry point.

        Each entry point resolves to a callable taking this registry.
        Returns the number of learners added.
        """
        before = len(self)
        for ep in importlib.metadata.entry_points(group=group):
            snapshot = dict(self._specs)
            try:
                hook = ep.load()
                hook(self)
            except Exception as e:
                # a broken plugin leaves no partial registrations behind
                self._specs = snapshot
                _log.warning("Skipping learner plugin %s: %s", ep.name, e)
                continue
            _log.debug("Loaded learner plugin %s", ep.name)
        return len(self) - before

    def _validate(self, card: LearnerCard) -> None:
        if "." not in card.cl:
            raise RegistryError(f"Learner id '{card.cl}' must look like '<type>.<name>'")
        if card.type not in get_supported_task_types():
            raise RegistryError(f"Learner '{card.cl}' has unsupported task type '{card.type}'")
        allowed = get_supported_learner_properties(card.type)
        bad = [p for p in card.properties if p not in allowed]
        if bad:
            raise RegistryError(
                f"Learner '{card.cl}' declares properties not supported for {card.type}: {', '.join(bad)}"
            )


def build_registry(*, discover: bool = True, group: str = ENTRY_POINT_GROUP) -> LearnerRegistry:
    """Return a registry with the built-in catalog and, optionally, plugin learners."""
    from .learner_catalog import register_builtin_learners

    registry = LearnerRegistry()
    register_builtin_learners(registry)
    if discover:
        added = registry.discover(group)
        if added:
            _log.info("Discovered %d plugin learner(s)", added)
    return registry
