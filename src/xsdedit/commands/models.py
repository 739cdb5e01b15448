"""
Command surface of the editing engine.

Every command has the wire shape ``{"type": <tag>, "payload": {...}}``. Tags
form the closed ``CommandType`` set; payloads are pydantic models whose field
aliases match the camelCase wire names (``parentId``, ``minOccurs``,
``schemaLocation`` ...). Addresses in payloads (``parentId``, ``elementId``
and the other ``*Id`` fields) use the grammar of ``xsdedit.core.addressing``.

Occurrence fields are accepted as integers or strings at this level; the
validators decide whether a value is a legal bound so that range errors are
reported as occurrence errors rather than payload shape errors.
"""

from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError
from pydantic.alias_generators import to_camel

from xsdedit.core.types import ContentModel
from xsdedit.exceptions import InvalidPayloadError, UnknownCommandError
from xsdedit.model import RestrictionFacets


class CommandType(str, Enum):
    """Closed set of command tags."""

    ADD_ELEMENT = "addElement"
    REMOVE_ELEMENT = "removeElement"
    MODIFY_ELEMENT = "modifyElement"
    ADD_ATTRIBUTE = "addAttribute"
    REMOVE_ATTRIBUTE = "removeAttribute"
    MODIFY_ATTRIBUTE = "modifyAttribute"
    ADD_SIMPLE_TYPE = "addSimpleType"
    REMOVE_SIMPLE_TYPE = "removeSimpleType"
    MODIFY_SIMPLE_TYPE = "modifySimpleType"
    ADD_COMPLEX_TYPE = "addComplexType"
    REMOVE_COMPLEX_TYPE = "removeComplexType"
    MODIFY_COMPLEX_TYPE = "modifyComplexType"
    ADD_GROUP = "addGroup"
    REMOVE_GROUP = "removeGroup"
    MODIFY_GROUP = "modifyGroup"
    ADD_ATTRIBUTE_GROUP = "addAttributeGroup"
    REMOVE_ATTRIBUTE_GROUP = "removeAttributeGroup"
    MODIFY_ATTRIBUTE_GROUP = "modifyAttributeGroup"
    ADD_ANNOTATION = "addAnnotation"
    REMOVE_ANNOTATION = "removeAnnotation"
    MODIFY_ANNOTATION = "modifyAnnotation"
    ADD_DOCUMENTATION = "addDocumentation"
    REMOVE_DOCUMENTATION = "removeDocumentation"
    MODIFY_DOCUMENTATION = "modifyDocumentation"
    ADD_IMPORT = "addImport"
    REMOVE_IMPORT = "removeImport"
    MODIFY_IMPORT = "modifyImport"
    ADD_INCLUDE = "addInclude"
    REMOVE_INCLUDE = "removeInclude"
    MODIFY_INCLUDE = "modifyInclude"


OccursInput = int | str


class CommandPayload(BaseModel):
    """Base class for payloads: camelCase aliases, unknown fields rejected."""

    model_config = ConfigDict(
        extra="forbid", alias_generator=to_camel, populate_by_name=True
    )


# Element family


class AddElementPayload(CommandPayload):
    parent_id: str
    name: str | None = None
    type: str | None = None
    ref: str | None = None
    min_occurs: OccursInput | None = None
    max_occurs: OccursInput | None = None
    documentation: str | None = None


class RemoveElementPayload(CommandPayload):
    element_id: str


class ModifyElementPayload(CommandPayload):
    element_id: str
    name: str | None = None
    type: str | None = None
    ref: str | None = None
    min_occurs: OccursInput | None = None
    max_occurs: OccursInput | None = None
    documentation: str | None = None


# Attribute family


class AddAttributePayload(CommandPayload):
    parent_id: str
    name: str | None = None
    type: str | None = None
    ref: str | None = None
    required: bool | None = None
    default_value: str | None = None
    fixed_value: str | None = None
    documentation: str | None = None


class RemoveAttributePayload(CommandPayload):
    attribute_id: str


class ModifyAttributePayload(CommandPayload):
    attribute_id: str
    name: str | None = None
    type: str | None = None
    ref: str | None = None
    required: bool | None = None
    default_value: str | None = None
    fixed_value: str | None = None
    documentation: str | None = None


# Type family


class AddSimpleTypePayload(CommandPayload):
    type_name: str
    base_type: str
    restrictions: RestrictionFacets | None = None
    documentation: str | None = None


class RemoveSimpleTypePayload(CommandPayload):
    type_id: str


class ModifySimpleTypePayload(CommandPayload):
    type_id: str
    type_name: str | None = None
    base_type: str | None = None
    restrictions: RestrictionFacets | None = None
    documentation: str | None = None


class AddComplexTypePayload(CommandPayload):
    type_name: str
    content_model: ContentModel
    abstract: bool | None = None
    base_type: str | None = None
    mixed: bool | None = None
    documentation: str | None = None


class RemoveComplexTypePayload(CommandPayload):
    type_id: str


class ModifyComplexTypePayload(CommandPayload):
    type_id: str
    type_name: str | None = None
    content_model: ContentModel | None = None
    abstract: bool | None = None
    base_type: str | None = None
    mixed: bool | None = None
    documentation: str | None = None


# Group family


class AddGroupPayload(CommandPayload):
    group_name: str
    content_model: ContentModel
    documentation: str | None = None


class RemoveGroupPayload(CommandPayload):
    group_id: str


class ModifyGroupPayload(CommandPayload):
    group_id: str
    group_name: str | None = None
    content_model: ContentModel | None = None
    documentation: str | None = None


class AddAttributeGroupPayload(CommandPayload):
    group_name: str
    documentation: str | None = None


class RemoveAttributeGroupPayload(CommandPayload):
    group_id: str


class ModifyAttributeGroupPayload(CommandPayload):
    group_id: str
    group_name: str | None = None
    documentation: str | None = None


# Annotation family


class AddAnnotationPayload(CommandPayload):
    target_id: str
    documentation: str | None = None
    app_info: str | None = None


class RemoveAnnotationPayload(CommandPayload):
    annotation_id: str


class ModifyAnnotationPayload(CommandPayload):
    annotation_id: str
    documentation: str | None = None
    app_info: str | None = None


class AddDocumentationPayload(CommandPayload):
    target_id: str
    content: str
    lang: str | None = None


class RemoveDocumentationPayload(CommandPayload):
    documentation_id: str


class ModifyDocumentationPayload(CommandPayload):
    documentation_id: str
    content: str | None = None
    lang: str | None = None


# Schema reference family


class AddImportPayload(CommandPayload):
    namespace: str
    schema_location: str


class RemoveImportPayload(CommandPayload):
    import_id: str


class ModifyImportPayload(CommandPayload):
    import_id: str
    namespace: str | None = None
    schema_location: str | None = None


class AddIncludePayload(CommandPayload):
    schema_location: str


class RemoveIncludePayload(CommandPayload):
    include_id: str


class ModifyIncludePayload(CommandPayload):
    include_id: str
    schema_location: str | None = None


class BaseCommand(BaseModel):
    """A tagged command; subclasses fix ``type`` and the payload model."""

    model_config = ConfigDict(extra="forbid")

    @property
    def command_type(self) -> CommandType:
        return CommandType(self.type)


class AddElementCommand(BaseCommand):
    type: Literal["addElement"] = "addElement"
    payload: AddElementPayload


class RemoveElementCommand(BaseCommand):
    type: Literal["removeElement"] = "removeElement"
    payload: RemoveElementPayload


class ModifyElementCommand(BaseCommand):
    type: Literal["modifyElement"] = "modifyElement"
    payload: ModifyElementPayload


class AddAttributeCommand(BaseCommand):
    type: Literal["addAttribute"] = "addAttribute"
    payload: AddAttributePayload


class RemoveAttributeCommand(BaseCommand):
    type: Literal["removeAttribute"] = "removeAttribute"
    payload: RemoveAttributePayload


class ModifyAttributeCommand(BaseCommand):
    type: Literal["modifyAttribute"] = "modifyAttribute"
    payload: ModifyAttributePayload


class AddSimpleTypeCommand(BaseCommand):
    type: Literal["addSimpleType"] = "addSimpleType"
    payload: AddSimpleTypePayload


class RemoveSimpleTypeCommand(BaseCommand):
    type: Literal["removeSimpleType"] = "removeSimpleType"
    payload: RemoveSimpleTypePayload


class ModifySimpleTypeCommand(BaseCommand):
    type: Literal["modifySimpleType"] = "modifySimpleType"
    payload: ModifySimpleTypePayload


class AddComplexTypeCommand(BaseCommand):
    type: Literal["addComplexType"] = "addComplexType"
    payload: AddComplexTypePayload


class RemoveComplexTypeCommand(BaseCommand):
    type: Literal["removeComplexType"] = "removeComplexType"
    payload: RemoveComplexTypePayload


class ModifyComplexTypeCommand(BaseCommand):
    type: Literal["modifyComplexType"] = "modifyComplexType"
    payload: ModifyComplexTypePayload


class AddGroupCommand(BaseCommand):
    type: Literal["addGroup"] = "addGroup"
    payload: AddGroupPayload


class RemoveGroupCommand(BaseCommand):
    type: Literal["removeGroup"] = "removeGroup"
    payload: RemoveGroupPayload


class ModifyGroupCommand(BaseCommand):
    type: Literal["modifyGroup"] = "modifyGroup"
    payload: ModifyGroupPayload


class AddAttributeGroupCommand(BaseCommand):
    type: Literal["addAttributeGroup"] = "addAttributeGroup"
    payload: AddAttributeGroupPayload


class RemoveAttributeGroupCommand(BaseCommand):
    type: Literal["removeAttributeGroup"] = "removeAttributeGroup"
    payload: RemoveAttributeGroupPayload


class ModifyAttributeGroupCommand(BaseCommand):
    type: Literal["modifyAttributeGroup"] = "modifyAttributeGroup"
    payload: ModifyAttributeGroupPayload


class AddAnnotationCommand(BaseCommand):
    type: Literal["addAnnotation"] = "addAnnotation"
    payload: AddAnnotationPayload


class RemoveAnnotationCommand(BaseCommand):
    type: Literal["removeAnnotation"] = "removeAnnotation"
    payload: RemoveAnnotationPayload


class ModifyAnnotationCommand(BaseCommand):
    type: Literal["modifyAnnotation"] = "modifyAnnotation"
    payload: ModifyAnnotationPayload


class AddDocumentationCommand(BaseCommand):
    type: Literal["addDocumentation"] = "addDocumentation"
    payload: AddDocumentationPayload


class RemoveDocumentationCommand(BaseCommand):
    type: Literal["removeDocumentation"] = "removeDocumentation"
    payload: RemoveDocumentationPayload


class ModifyDocumentationCommand(BaseCommand):
    type: Literal["modifyDocumentation"] = "modifyDocumentation"
    payload: ModifyDocumentationPayload


class AddImportCommand(BaseCommand):
    type: Literal["addImport"] = "addImport"
    payload: AddImportPayload


class RemoveImportCommand(BaseCommand):
    type: Literal["removeImport"] = "removeImport"
    payload: RemoveImportPayload


class ModifyImportCommand(BaseCommand):
    type: Literal["modifyImport"] = "modifyImport"
    payload: ModifyImportPayload


class AddIncludeCommand(BaseCommand):
    type: Literal["addInclude"] = "addInclude"
    payload: AddIncludePayload


class RemoveIncludeCommand(BaseCommand):
    type: Literal["removeInclude"] = "removeInclude"
    payload: RemoveIncludePayload


class ModifyIncludeCommand(BaseCommand):
    type: Literal["modifyInclude"] = "modifyInclude"
    payload: ModifyIncludePayload


SchemaCommand = Annotated[
    Union[
        AddElementCommand,
        RemoveElementCommand,
        ModifyElementCommand,
        AddAttributeCommand,
        RemoveAttributeCommand,
        ModifyAttributeCommand,
        AddSimpleTypeCommand,
        RemoveSimpleTypeCommand,
        ModifySimpleTypeCommand,
        AddComplexTypeCommand,
        RemoveComplexTypeCommand,
        ModifyComplexTypeCommand,
        AddGroupCommand,
        RemoveGroupCommand,
        ModifyGroupCommand,
        AddAttributeGroupCommand,
        RemoveAttributeGroupCommand,
        ModifyAttributeGroupCommand,
        AddAnnotationCommand,
        RemoveAnnotationCommand,
        ModifyAnnotationCommand,
        AddDocumentationCommand,
        RemoveDocumentationCommand,
        ModifyDocumentationCommand,
        AddImportCommand,
        RemoveImportCommand,
        ModifyImportCommand,
        AddIncludeCommand,
        RemoveIncludeCommand,
        ModifyIncludeCommand,
    ],
    Field(discriminator="type"),
]

_COMMAND_ADAPTER: TypeAdapter = TypeAdapter(SchemaCommand)


def _format_validation_error(error: ValidationError) -> str:
    parts = []
    for detail in error.errors():
        location = ".".join(str(item) for item in detail["loc"] if item != "payload")
        parts.append(f"{location}: {detail['msg']}" if location else detail["msg"])
    return "; ".join(parts)


def parse_command(raw: Any) -> BaseCommand:
    """
    Build a typed command from its wire shape.

    Params:
        raw: Mapping with "type" and "payload" keys, or an already-built command

    Returns:
        The concrete command model for the tag

    Raises:
        UnknownCommandError: When the tag is not in the closed command set
        InvalidPayloadError: When the payload does not match the tag's schema

    Examples:
        parse_command({"type": "addElement",
                       "payload": {"parentId": "schema", "name": "person", "type": "string"}})
            -> AddElementCommand(...)
    """
    if isinstance(raw, BaseCommand):
        return raw
    if not isinstance(raw, dict):
        raise InvalidPayloadError("command", "a command must be a mapping with 'type' and 'payload'")

    tag = raw.get("type")
    try:
        command_type = CommandType(tag)
    except ValueError:
        raise UnknownCommandError(tag) from None

    try:
        return _COMMAND_ADAPTER.validate_python(raw)
    except ValidationError as error:
        raise InvalidPayloadError(command_type.value, _format_validation_error(error)) from None
