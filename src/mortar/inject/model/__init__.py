"""
Model subpackage containing the injection plan and its supporting indexes.

Kept free of container logic so that the introspection layer can produce
plan entries without circular imports.
"""

from .plan import FieldInjection, InjectionPlan, MethodInjection, PlanCache
from .relationships import RelationshipIndex

__all__ = ["FieldInjection", "InjectionPlan", "MethodInjection", "PlanCache", "RelationshipIndex"]
