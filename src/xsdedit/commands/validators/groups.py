"""
Validators for model group and attribute group commands.

Named groups and attribute groups are top-level only and addressed as
``/group:G`` and ``/attributeGroup:G``.
"""

from xsdedit.core.addressing import SchemaNodeType
from xsdedit.model import SchemaDocument
from xsdedit.commands.models import (
    AddAttributeGroupPayload,
    AddGroupPayload,
    ModifyAttributeGroupPayload,
    ModifyGroupPayload,
    RemoveAttributeGroupPayload,
    RemoveGroupPayload,
)
from xsdedit.commands.validation import (
    check_unique,
    resolve_target,
    validate_xml_name,
)

GROUP_TARGETS = frozenset({SchemaNodeType.GROUP})
ATTRIBUTE_GROUP_TARGETS = frozenset({SchemaNodeType.ATTRIBUTE_GROUP})


def check_group_name(name: str, declarations, exclude=None) -> None:
    """
    Raises:
        InvalidNameError: When the name violates XML name syntax
        DuplicateIdentifierError: When another declaration already uses it
    """
    validate_xml_name(name, "groupName")
    others = [decl for decl in declarations or [] if decl is not exclude]
    check_unique(name, others, "the schema")


def validate_add_group(payload: AddGroupPayload, document: SchemaDocument) -> None:
    check_group_name(payload.group_name, document.groups)


def validate_remove_group(payload: RemoveGroupPayload, document: SchemaDocument) -> None:
    resolve_target(document, payload.group_id, GROUP_TARGETS, "groupId")


def validate_modify_group(payload: ModifyGroupPayload, document: SchemaDocument) -> None:
    """
    Validate a modifyGroup command.

    Raises:
        XsdEditError: The first failing rule
    """
    location = resolve_target(document, payload.group_id, GROUP_TARGETS, "groupId")
    if payload.group_name is not None:
        check_group_name(payload.group_name, document.groups, exclude=location.node)


def validate_add_attribute_group(payload: AddAttributeGroupPayload, document: SchemaDocument) -> None:
    check_group_name(payload.group_name, document.attribute_groups)


def validate_remove_attribute_group(
    payload: RemoveAttributeGroupPayload, document: SchemaDocument
) -> None:
    resolve_target(document, payload.group_id, ATTRIBUTE_GROUP_TARGETS, "groupId")


def validate_modify_attribute_group(
    payload: ModifyAttributeGroupPayload, document: SchemaDocument
) -> None:
    location = resolve_target(document, payload.group_id, ATTRIBUTE_GROUP_TARGETS, "groupId")
    if payload.group_name is not None:
        check_group_name(payload.group_name, document.attribute_groups, exclude=location.node)
