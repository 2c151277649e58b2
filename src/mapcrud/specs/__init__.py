"""
Specification types.

Declarative records that mapping tables and resources are built from.
"""

from mapcrud.specs.field import (
    FieldConstraints,
    FieldKind,
    FieldRule,
    InputMapping,
    ResponseFieldConfig,
    ResponseMapping,
    RuleProducer,
    infer_kind,
)
from mapcrud.specs.state_machine import StateMachineSpec, StateTransitionSpec

__all__ = [
    "FieldConstraints",
    "FieldKind",
    "FieldRule",
    "InputMapping",
    "ResponseFieldConfig",
    "ResponseMapping",
    "RuleProducer",
    "StateMachineSpec",
    "StateTransitionSpec",
    "infer_kind",
]
