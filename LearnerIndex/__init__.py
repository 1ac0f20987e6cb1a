"""LearnerIndex: find and construct machine-learning learners by capability."""

from .models import (
    HyperParamSpec,
    LearnerCard,
    LearnerRegistry,
    Learner,
    ListLearners,
    LearnerCatalog,
    TaskDescription,
    build_registry,
    describe_task,
    filter_learner_table,
    get_catalog,
    get_learner_table,
    get_supported_learner_properties,
    get_supported_task_types,
    list_learners,
    make_learner,
    set_catalog,
)

__version__ = "0.1.0"

__all__ = [
    "HyperParamSpec",
    "LearnerCard",
    "LearnerRegistry",
    "Learner",
    "ListLearners",
    "LearnerCatalog",
    "TaskDescription",
    "build_registry",
    "describe_task",
    "filter_learner_table",
    "get_catalog",
    "get_learner_table",
    "get_supported_learner_properties",
    "get_supported_task_types",
    "list_learners",
    "make_learner",
    "set_catalog",
]
