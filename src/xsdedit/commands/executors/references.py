"""
Executors for import and include commands.
"""

import logging

from xsdedit.core.addressing import SchemaNodeType, build_address
from xsdedit.model import Import, Include, SchemaDocument
from xsdedit.commands.executors.common import append_child, remove_child
from xsdedit.commands.models import (
    AddImportPayload,
    AddIncludePayload,
    ModifyImportPayload,
    ModifyIncludePayload,
    RemoveImportPayload,
    RemoveIncludePayload,
)
from xsdedit.commands.validation import resolve_target
from xsdedit.commands.validators.references import (
    IMPORT_TARGETS,
    INCLUDE_TARGETS,
    check_import_namespace,
    check_include_location,
)

logger = logging.getLogger(__name__)


def execute_add_import(payload: AddImportPayload, document: SchemaDocument) -> None:
    check_import_namespace(document, payload.namespace)
    position = append_child(
        document,
        "imports",
        Import(namespace=payload.namespace, schema_location=payload.schema_location),
    )
    logger.info(
        "Import added",
        extra={"address": build_address(SchemaNodeType.IMPORT, position=position)},
    )


def execute_remove_import(payload: RemoveImportPayload, document: SchemaDocument) -> None:
    location = resolve_target(document, payload.import_id, IMPORT_TARGETS, "importId")
    remove_child(location)
    logger.info("Import removed", extra={"address": payload.import_id})


def execute_modify_import(payload: ModifyImportPayload, document: SchemaDocument) -> None:
    location = resolve_target(document, payload.import_id, IMPORT_TARGETS, "importId")
    imported = location.node
    if payload.namespace is not None:
        check_import_namespace(document, payload.namespace, exclude=imported)
        imported.namespace = payload.namespace
    if payload.schema_location is not None:
        imported.schema_location = payload.schema_location
    logger.info("Import modified", extra={"address": payload.import_id})


def execute_add_include(payload: AddIncludePayload, document: SchemaDocument) -> None:
    check_include_location(document, payload.schema_location)
    position = append_child(document, "includes", Include(schema_location=payload.schema_location))
    logger.info(
        "Include added",
        extra={"address": build_address(SchemaNodeType.INCLUDE, position=position)},
    )


def execute_remove_include(payload: RemoveIncludePayload, document: SchemaDocument) -> None:
    location = resolve_target(document, payload.include_id, INCLUDE_TARGETS, "includeId")
    remove_child(location)
    logger.info("Include removed", extra={"address": payload.include_id})


def execute_modify_include(payload: ModifyIncludePayload, document: SchemaDocument) -> None:
    location = resolve_target(document, payload.include_id, INCLUDE_TARGETS, "includeId")
    included = location.node
    if payload.schema_location is not None:
        check_include_location(document, payload.schema_location, exclude=included)
        included.schema_location = payload.schema_location
    logger.info("Include modified", extra={"address": payload.include_id})
