"""
Parent/child model reconciliation.

Generated C# models use real class inheritance, so a child model must not
redeclare what it inherits. Flattening ``allOf`` compositions can leave the
child with copies of its parent's inline enums and with duplicated entries
in its read-write property list; this module cleans both up and records the
properties contributed by the parent for the templates.
"""

from __future__ import annotations

import logging
from dataclasses import replace

from csharp_oas_generator.parser.models import Model, Property

logger = logging.getLogger(__name__)


def reconcile_inline_enums(child: Model, parent: Model) -> Model:
    """Remove child enum properties that duplicate an enum of the parent.

    Inline enums are generated as nested types. When a child redeclares the
    parent's enum property, the nested type would be defined twice; the child
    inherits it from the parent instead.
    """
    parent_enums = [p for p in parent.effective_vars if p.is_enum]
    if not parent_enums:
        return child

    kept = [p for p in child.vars if not (p.is_enum and any(_same_property(p, e) for e in parent_enums))]

    if len(kept) != len(child.vars):
        logger.debug("removed %d inherited enum(s) from %s", len(child.vars) - len(kept), child.name)
        child.vars = kept
        child.refresh_var_views()
    return child


def _same_property(a: Property, b: Property) -> bool:
    # Copies made for grandparents carry is_inherited, which is not part of the definition.
    return replace(a, is_inherited=False) == replace(b, is_inherited=False)


def dedupe_properties(properties: list[Property]) -> list[Property]:
    """Drop later entries that are structurally equal to an earlier one."""
    result: list[Property] = []
    for prop in properties:
        if prop not in result:
            result.append(prop)
    return result


def reconcile(child: Model, parent: Model | None) -> Model:
    """Reconcile a child model with its parent.

    Args:
        child: The model to adjust in place.
        parent: The parent model, or None when the parent could not be found.

    Returns:
        The adjusted child model. Reconciliation never raises; a missing
        parent leaves the child as declared.
    """
    if parent is None:
        if child.parent:
            logger.debug("parent %s of %s not found, skipping reconciliation", child.parent, child.name)
        return child

    if child.has_enums:
        child = reconcile_inline_enums(child, parent)

    declared = {p.name for p in child.vars}

    for prop in parent.effective_vars:
        if prop.name in declared:
            continue
        parent_var = prop.copy()
        parent_var.is_inherited = True
        logger.debug("adding parent variable %s", prop.name)
        child.parent_vars.append(parent_var)

    if parent.discriminator is not None:
        discriminator_name = parent.discriminator.property_name
        for prop in child.read_write_vars + child.parent_vars:
            if prop.is_read_only or prop.default_value is not None or prop.name != discriminator_name:
                continue
            prop.default_value = f'"{child.name}"'

    child.read_write_vars = dedupe_properties(child.read_write_vars)
    return child
