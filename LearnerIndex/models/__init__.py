"""
Models module for LearnerIndex.
Contains the learner registry, the learner table and listing logic.
"""

from .learner_registry import (
	HyperParamSpec,
	LearnerCard,
	LearnerSpec,
	LearnerRegistry,
	build_registry,
	get_supported_learner_properties,
	get_supported_task_types,
)
from .learner import Learner, make_learner
from .learner_table import ListLearners, get_learner_table, filter_learner_table
from .task_description import TaskDescription, describe_task
from .learner_listing import LearnerCatalog, get_catalog, set_catalog, list_learners

__all__ = [
	'HyperParamSpec',
	'LearnerCard',
	'LearnerSpec',
	'LearnerRegistry',
	'build_registry',
	'get_supported_learner_properties',
	'get_supported_task_types',
	'Learner',
	'make_learner',
	'ListLearners',
	'get_learner_table',
	'filter_learner_table',
	'TaskDescription',
	'describe_task',
	'LearnerCatalog',
	'get_catalog',
	'set_catalog',
	'list_learners',
]
