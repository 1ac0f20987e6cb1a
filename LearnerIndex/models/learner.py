"""Learner objects for LearnerIndex.

A Learner couples a registered card with a constructed estimator, the chosen
prediction type and the parameter values it was built with.
"""

import importlib
from typing import Any, Dict, List, Optional

from .learner_registry import LearnerRegistry
from ..utils.errors import LearnerConstructionError, MissingPackageError, ValidationError
from ..utils.logger import get_logger


_log = get_logger("learner")

PREDICT_TYPES = ("response", "prob", "se")


class Learner:
    """A constructed learner with its metadata."""

    def __init__(
        self,
        estimator,
        cl: str,
        name: str,
        short_name: str,
        package: List[str],
        properties: List[str],
        par_vals: Dict[str, Any],
        *,
        id: Optional[str] = None,
        note: str = "",
        predict_type: str = "response",
    ):
        """
        Initialize a learner.

        Args:
            estimator: The constructed estimator object
            cl: Registered learner class id (e.g. 'classif.random_forest')
            par_vals: Parameters the estimator was constructed with
            id: Custom id, defaults to the class id
        """
        self.estimator = estimator
        self.cl = cl
        self.id = id or cl
        self.type = cl.split(".", 1)[0]
        self.name = name
        self.short_name = short_name
        self.package = list(package)
        self.properties = list(properties)
        self.par_vals = dict(par_vals)
        self.note = note
        self.predict_type = predict_type

    def has_properties(self, *props: str) -> bool:
        return all(p in self.properties for p in props)

    def to_dict(self) -> Dict[str, Any]:
        """Convert learner info to dictionary."""
        return {
            'id': self.id,
            'class': self.cl,
            'type': self.type,
            'name': self.name,
            'short_name': self.short_name,
            'package': self.package,
            'properties': self.properties,
            'note': self.note,
            'predict_type': self.predict_type,
            'par_vals': self.par_vals,
        }

    def __repr__(self) -> str:
        pars = ", ".join(f"{k}={v!r}" for k, v in self.par_vals.items())
        lines = [
            f"Learner {self.id} from package {','.join(self.package) or '-'}",
            f"Type: {self.type}",
            f"Name: {self.name}; Short name: {self.short_name}",
            f"Class: {self.cl}",
            f"Properties: {','.join(self.properties)}",
            f"Predict-Type: {self.predict_type}",
            f"Hyperparameters: {pars}",
        ]
        return "\n".join(lines)


def make_learner(
    cl: str,
    id: Optional[str] = None,
    predict_type: str = "response",
    par_vals: Optional[Dict[str, Any]] = None,
    *,
    registry: Optional[LearnerRegistry] = None,
    **kwargs: Any,
) -> Learner:
    """Construct the learner registered as ``cl``.

    Parameters are the card defaults, updated with ``par_vals`` and then with
    ``kwargs``. Packages marked with "!" are imported before the constructor
    runs.
    """
    if registry is None:
        from .learner_listing import get_catalog

        registry = get_catalog().registry

    spec = registry.get(cl)
    card = spec.card

    if predict_type not in PREDICT_TYPES:
        raise ValidationError(f"predict_type must be one of {', '.join(PREDICT_TYPES)}, got '{predict_type}'")
    if predict_type in ("prob", "se") and predict_type not in card.properties:
        raise ValidationError(f"Trying to predict {predict_type}, but {cl} does not support that")

    missing = spec.missing_packages()
    if missing:
        raise MissingPackageError(cl, missing)

    for pkg in card.package:
        if pkg.startswith("!"):
            importlib.import_module(pkg[1:])

    params = card.defaults()
    params.update(par_vals or {})
    params.update(kwargs)

    try:
        estimator = spec.factory(dict(params))
    except Exception as e:
        raise LearnerConstructionError(f"Could not construct learner {cl}: {e}") from e

    _log.debug("Constructed learner %s", cl)
    return Learner(
        estimator,
        cl=cl,
        name=card.name,
        short_name=card.short_name,
        package=card.packages,
        properties=card.properties,
        par_vals=params,
        id=id,
        note=card.note or "",
        predict_type=predict_type,
    )
