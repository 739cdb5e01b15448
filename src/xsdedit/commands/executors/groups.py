"""
Executors for model group and attribute group commands.
"""

import logging

from xsdedit.core.addressing import SchemaNodeType, build_address
from xsdedit.model import (
    COMPOSITOR_CLASSES,
    NamedAttributeGroup,
    NamedGroup,
    SchemaDocument,
)
from xsdedit.commands.executors.common import append_child, remove_child
from xsdedit.commands.executors.types import switch_compositor
from xsdedit.commands.models import (
    AddAttributeGroupPayload,
    AddGroupPayload,
    ModifyAttributeGroupPayload,
    ModifyGroupPayload,
    RemoveAttributeGroupPayload,
    RemoveGroupPayload,
)
from xsdedit.commands.validation import resolve_target
from xsdedit.commands.validators.groups import (
    ATTRIBUTE_GROUP_TARGETS,
    GROUP_TARGETS,
    check_group_name,
)

logger = logging.getLogger(__name__)


def execute_add_group(payload: AddGroupPayload, document: SchemaDocument) -> None:
    """
    Append a named model group holding an empty compositor.

    Raises:
        DuplicateIdentifierError: When a group with the same name exists
    """
    check_group_name(payload.group_name, document.groups)
    group = NamedGroup(name=payload.group_name)
    group.set_compositor(COMPOSITOR_CLASSES[payload.content_model]())
    if payload.documentation is not None:
        group.set_documentation(payload.documentation)
    append_child(document, "groups", group)
    logger.info(
        "Group added",
        extra={"address": build_address(SchemaNodeType.GROUP, name=payload.group_name)},
    )


def execute_remove_group(payload: RemoveGroupPayload, document: SchemaDocument) -> None:
    location = resolve_target(document, payload.group_id, GROUP_TARGETS, "groupId")
    remove_child(location)
    logger.info("Group removed", extra={"address": payload.group_id})


def execute_modify_group(payload: ModifyGroupPayload, document: SchemaDocument) -> None:
    location = resolve_target(document, payload.group_id, GROUP_TARGETS, "groupId")
    group = location.node
    if payload.group_name is not None:
        check_group_name(payload.group_name, document.groups, exclude=group)
        group.name = payload.group_name
    if payload.content_model is not None:
        switch_compositor(group, payload.content_model)
    if payload.documentation is not None:
        group.set_documentation(payload.documentation)
    logger.info("Group modified", extra={"address": payload.group_id})


def execute_add_attribute_group(payload: AddAttributeGroupPayload, document: SchemaDocument) -> None:
    check_group_name(payload.group_name, document.attribute_groups)
    attribute_group = NamedAttributeGroup(name=payload.group_name)
    if payload.documentation is not None:
        attribute_group.set_documentation(payload.documentation)
    append_child(document, "attribute_groups", attribute_group)
    logger.info(
        "Attribute group added",
        extra={
            "address": build_address(SchemaNodeType.ATTRIBUTE_GROUP, name=payload.group_name)
        },
    )


def execute_remove_attribute_group(
    payload: RemoveAttributeGroupPayload, document: SchemaDocument
) -> None:
    location = resolve_target(document, payload.group_id, ATTRIBUTE_GROUP_TARGETS, "groupId")
    remove_child(location)
    logger.info("Attribute group removed", extra={"address": payload.group_id})


def execute_modify_attribute_group(
    payload: ModifyAttributeGroupPayload, document: SchemaDocument
) -> None:
    location = resolve_target(document, payload.group_id, ATTRIBUTE_GROUP_TARGETS, "groupId")
    attribute_group = location.node
    if payload.group_name is not None:
        check_group_name(payload.group_name, document.attribute_groups, exclude=attribute_group)
        attribute_group.name = payload.group_name
    if payload.documentation is not None:
        attribute_group.set_documentation(payload.documentation)
    logger.info("Attribute group modified", extra={"address": payload.group_id})
