"""Task descriptions for LearnerIndex.

A task description summarises what a learner must cope with: the task type,
how many numeric, unordered and ordered categorical features there are,
whether features have missing values and, for classification, the class levels.

``describe_task`` derives one from a pandas DataFrame. When no task type is
given it is inferred from the target the same way the recommender heuristics
do: no target means clustering, several targets mean multilabel, and a target
with few distinct values means classification.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

import pandas as pd

from .learner_registry import get_supported_task_types
from ..utils.errors import ValidationError


@dataclass
class TaskDescription:
    type: str  # classif | regr | surv | costsens | cluster | multilabel
    n_feat: Dict[str, int] = field(default_factory=lambda: {"numerics": 0, "factors": 0, "ordered": 0})
    has_missings: bool = False
    class_levels: List[Any] = field(default_factory=list)
    target: List[str] = field(default_factory=list)
    size: int = 0

    def __post_init__(self):
        if self.type not in get_supported_task_types():
            raise ValidationError(f"Unsupported task type: {self.type}")
        for kind in ("numerics", "factors", "ordered"):
            self.n_feat.setdefault(kind, 0)

    def learner_properties(self) -> List[str]:
        """Properties a learner needs to handle this task."""
        props: List[str] = []
        if self.n_feat["numerics"] > 0:
            props.append("numerics")
        if self.n_feat["factors"] > 0:
            props.append("factors")
        if self.n_feat["ordered"] > 0:
            props.append("ordered")
        if self.has_missings:
            props.append("missings")
        if self.type == "classif":
            n = len(self.class_levels)
            if n == 1:
                props.append("oneclass")
            elif n == 2:
                props.append("twoclass")
            elif n >= 3:
                props.append("multiclass")
        return props


def _targets(target: Optional[str | Sequence[str]]) -> List[str]:
    if target is None:
        return []
    if isinstance(target, str):
        return [target]
    return [str(t) for t in target]


def _infer_type(df: pd.DataFrame, targets: List[str]) -> str:
    if not targets:
        return "cluster"
    if len(targets) > 1:
        return "multilabel"

    y = df[targets[0]]
    if not pd.api.types.is_numeric_dtype(y) or pd.api.types.is_bool_dtype(y):
        return "classif"

    # Typical integer labels: 0/1, 1..K, etc.
    nunique = int(y.nunique(dropna=True))
    unique_ratio = float(nunique / max(1, len(df)))
    if nunique <= 20 or unique_ratio <= 0.05:
        return "classif"
    return "regr"


def _feature_kinds(features: pd.DataFrame) -> Dict[str, int]:
    counts = {"numerics": 0, "factors": 0, "ordered": 0}
    for col in features.columns:
        s = features[col]
        if isinstance(s.dtype, pd.CategoricalDtype):
            counts["ordered" if s.dtype.ordered else "factors"] += 1
        elif pd.api.types.is_bool_dtype(s):
            counts["factors"] += 1
        elif pd.api.types.is_numeric_dtype(s):
            counts["numerics"] += 1
        else:
            counts["factors"] += 1
    return counts


def describe_task(
    df: pd.DataFrame,
    target: Optional[str | Sequence[str]] = None,
    task_type: Optional[str] = None,
) -> TaskDescription:
    """Describe the learning task posed by ``df`` with the given target column(s)."""
    if df is None or df.empty:
        raise ValidationError("Cannot describe a task on an empty dataset")

    targets = _targets(target)
    missing = [t for t in targets if t not in df.columns]
    if missing:
        raise ValidationError(f"Target column(s) not in data: {', '.join(missing)}")

    if task_type is None:
        task_type = _infer_type(df, targets)
    elif task_type not in get_supported_task_types():
        raise ValidationError(f"Unsupported task type: {task_type}")

    if task_type == "cluster" and targets:
        raise ValidationError("Cluster tasks have no target")
    if task_type in ("classif", "regr", "costsens") and len(targets) != 1:
        raise ValidationError(f"A {task_type} task needs exactly one target column")

    features = df.drop(columns=targets)

    class_levels: List[Any] = []
    if task_type == "classif":
        levels = df[targets[0]].dropna().unique().tolist()
        try:
            class_levels = sorted(levels)
        except TypeError:
            # mixed label types
            class_levels = sorted(levels, key=str)
    elif task_type == "multilabel":
        class_levels = list(targets)

    return TaskDescription(
        type=task_type,
        n_feat=_feature_kinds(features),
        has_missings=bool(features.isna().to_numpy().any()),
        class_levels=class_levels,
        target=targets,
        size=len(df),
    )
