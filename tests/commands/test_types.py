"""
Tests for the simple type and complex type command families.
"""

import pytest

from xsdedit.codec import parse_schema, serialize_schema
from xsdedit.commands.executors.types import execute_modify_complex_type
from xsdedit.commands.models import ModifyComplexTypePayload
from xsdedit.exceptions import ConflictingFieldsError, ErrorCode
from xsdedit.model import LocalSimpleType, SchemaDocument, TopLevelElement


@pytest.fixture
def inline_simple_document():
    """A schema whose only element carries an anonymous simple type."""
    return SchemaDocument(
        elements=[TopLevelElement(name="size", simple_type=LocalSimpleType(base_type="xs:int"))]
    )


class TestSimpleTypes:
    """Tests for addSimpleType, removeSimpleType and modifySimpleType."""

    def test_add_with_restrictions(self, document, execute):
        """Test a simple type is added with its facets."""
        result = execute(
            document,
            "addSimpleType",
            typeName="Percent",
            baseType="xs:decimal",
            restrictions={"minInclusive": "0", "maxInclusive": "100", "fractionDigits": 2},
            documentation="A percentage.",
        )
        assert result.success
        percent = document.simple_types[-1]
        assert percent.name == "Percent"
        assert percent.base_type == "xs:decimal"
        assert percent.facets.max_inclusive == "100"
        assert percent.facets.fraction_digits == 2
        assert percent.documentation_text == "A percentage."

    def test_add_enumeration(self, empty_document, execute):
        """Test enumeration facets keep their order."""
        execute(
            empty_document,
            "addSimpleType",
            typeName="Color",
            baseType="string",
            restrictions={"enumeration": ["red", "green", "blue"]},
        )
        assert empty_document.simple_types[0].facets.enumeration == ["red", "green", "blue"]

    @pytest.mark.parametrize(
        "payload, code",
        [
            ({"typeName": "AddressType", "baseType": "string"}, ErrorCode.DUPLICATE_IDENTIFIER),
            ({"typeName": "CodeType", "baseType": "string"}, ErrorCode.DUPLICATE_IDENTIFIER),
            ({"typeName": "9Lives", "baseType": "string"}, ErrorCode.INVALID_NAME),
            ({"typeName": "T", "baseType": "AddressType"}, ErrorCode.UNRESOLVED_TYPE),
            ({"typeName": "T", "baseType": "Missing"}, ErrorCode.UNRESOLVED_TYPE),
            ({"typeName": "T", "baseType": "string", "restrictions": {"minLength": 5, "maxLength": 2}}, ErrorCode.CONFLICTING_FIELDS),
            ({"typeName": "T", "baseType": "string", "restrictions": {"length": 3, "minLength": 1}}, ErrorCode.CONFLICTING_FIELDS),
            ({"typeName": "T", "baseType": "decimal", "restrictions": {"totalDigits": 2, "fractionDigits": 3}}, ErrorCode.CONFLICTING_FIELDS),
            ({"typeName": "T", "baseType": "string", "restrictions": {"minLength": -1}}, ErrorCode.INVALID_PAYLOAD),
            ({"typeName": "T", "baseType": "decimal", "restrictions": {"totalDigits": 0}}, ErrorCode.INVALID_PAYLOAD),
            ({"typeName": "T", "baseType": "string", "restrictions": {"whiteSpace": "squash"}}, ErrorCode.INVALID_PAYLOAD),
        ],
    )
    def test_add_rejected(self, document, execute, payload, code):
        """Test each invalid addSimpleType is rejected without mutation."""
        before = document.model_dump()
        result = execute(document, "addSimpleType", **payload)
        assert result.code == code
        assert document.model_dump() == before

    def test_remove(self, document, execute):
        """Test removing the only simple type resets the list."""
        assert execute(document, "removeSimpleType", typeId="/simpleType:CodeType").success
        assert document.simple_types is None

    def test_remove_wrong_kind(self, document, execute):
        """Test a complex type address is malformed for removeSimpleType."""
        result = execute(document, "removeSimpleType", typeId="/complexType:AddressType")
        assert result.code == ErrorCode.MALFORMED_ADDRESS

    def test_modify_rename_and_restrictions(self, document, execute):
        """Test renaming and replacing the facet set."""
        result = execute(
            document,
            "modifySimpleType",
            typeId="/simpleType:CodeType",
            typeName="Code",
            restrictions={"pattern": "[A-Z]{3}"},
        )
        assert result.success
        code = document.simple_types[0]
        assert code.name == "Code"
        assert code.facets.pattern == "[A-Z]{3}"
        assert code.facets.max_length is None

    def test_modify_rename_collision(self, document, execute):
        """Test renaming onto a complex type name is a duplicate."""
        result = execute(document, "modifySimpleType", typeId="/simpleType:CodeType", typeName="AddressType")
        assert result.code == ErrorCode.DUPLICATE_IDENTIFIER

    def test_modify_keep_own_name(self, document, execute):
        """Test re-submitting the current name is not a duplicate of itself."""
        result = execute(document, "modifySimpleType", typeId="/simpleType:CodeType", typeName="CodeType")
        assert result.success

    def test_anonymous_type_base(self, inline_simple_document, execute):
        """Test an inline simple type can change its base type."""
        result = execute(
            inline_simple_document, "modifySimpleType", typeId="/element:size/anonymousSimpleType", baseType="xs:long"
        )
        assert result.success
        assert inline_simple_document.elements[0].simple_type.base_type == "xs:long"

    def test_anonymous_type_cannot_be_named(self, inline_simple_document, execute):
        """Test an inline simple type cannot be renamed."""
        result = execute(
            inline_simple_document, "modifySimpleType", typeId="/element:size/anonymousSimpleType", typeName="Size"
        )
        assert result.code == ErrorCode.CONFLICTING_FIELDS


class TestComplexTypes:
    """Tests for addComplexType, removeComplexType and modifyComplexType."""

    def test_add(self, document, execute):
        """Test a complex type is added with an empty compositor of the requested kind."""
        result = execute(
            document, "addComplexType", typeName="PersonType", contentModel="sequence", abstract=True
        )
        assert result.success
        person_type = document.complex_types[-1]
        assert person_type.name == "PersonType"
        assert person_type.sequence is not None
        assert person_type.sequence.elements is None
        assert person_type.abstract is True

    def test_add_with_base(self, document, execute):
        """Test a complex base type is stored."""
        result = execute(
            document, "addComplexType", typeName="UsAddress", contentModel="sequence", baseType="AddressType"
        )
        assert result.success
        assert document.complex_types[-1].base_type == "AddressType"

    @pytest.mark.parametrize(
        "payload, code",
        [
            ({"typeName": "T", "contentModel": "bag"}, ErrorCode.INVALID_PAYLOAD),
            ({"typeName": "CodeType", "contentModel": "sequence"}, ErrorCode.DUPLICATE_IDENTIFIER),
            ({"typeName": "T", "contentModel": "all", "baseType": "Missing"}, ErrorCode.UNRESOLVED_TYPE),
            ({"typeName": "T"}, ErrorCode.INVALID_PAYLOAD),
        ],
    )
    def test_add_rejected(self, document, execute, payload, code):
        """Test each invalid addComplexType is rejected."""
        result = execute(document, "addComplexType", **payload)
        assert result.code == code
        assert len(document.complex_types) == 1

    def test_switch_content_model_keeps_children(self, document, execute):
        """Test switching sequence to choice moves the children and their bounds."""
        result = execute(document, "modifyComplexType", typeId="/complexType:AddressType", contentModel="choice")
        assert result.success
        address_type = document.complex_types[0]
        assert address_type.sequence is None
        assert [e.name for e in address_type.choice.elements] == ["street"]
        assert address_type.choice.elements[0].max_occurs == "unbounded"

    def test_switch_to_all_keeps_occurrences(self, document, execute):
        """Test all-compositor children keep the same semantic occurrence values."""
        execute(document, "modifyComplexType", typeId="/element:person/anonymousComplexType", contentModel="all")
        person_type = document.elements[0].complex_type
        assert person_type.sequence is None
        assert [e.min_occurs for e in person_type.all.elements] == [None, 0]

    def test_modify_flags(self, document, execute):
        """Test mixed and abstract flags are applied."""
        execute(document, "modifyComplexType", typeId="/complexType:AddressType", mixed=True, abstract=False)
        address_type = document.complex_types[0]
        assert (address_type.mixed, address_type.abstract) == (True, False)

    def test_rename(self, document, execute):
        """Test renaming a named complex type."""
        assert execute(document, "modifyComplexType", typeId="/complexType:AddressType", typeName="Addr").success
        assert document.complex_types[0].name == "Addr"

    def test_anonymous_rename_rejected(self, document, execute):
        """Test an anonymous complex type cannot be named."""
        result = execute(
            document, "modifyComplexType", typeId="/element:person/anonymousComplexType[0]", typeName="PersonType"
        )
        assert result.code == ErrorCode.CONFLICTING_FIELDS

    def test_anonymous_abstract_rejected(self, document, execute):
        """Test an inline complex type cannot be made abstract."""
        before = document.model_dump()
        result = execute(
            document, "modifyComplexType", typeId="/element:person/anonymousComplexType", abstract=True
        )
        assert result.code == ErrorCode.CONFLICTING_FIELDS
        assert result.error.context.field_name == "abstract"
        assert document.model_dump() == before

    def test_anonymous_abstract_rejected_by_executor(self, document):
        """Test the executor refuses abstract on an inline type without mutating it."""
        payload = ModifyComplexTypePayload(
            type_id="/element:person/anonymousComplexType", mixed=True, abstract=False
        )
        with pytest.raises(ConflictingFieldsError):
            execute_modify_complex_type(payload, document)
        assert document.elements[0].complex_type.mixed is None

    def test_anonymous_flags_round_trip(self, document, execute):
        """Test an edited inline complex type still reads back from its text."""
        assert execute(
            document, "modifyComplexType", typeId="/element:person/anonymousComplexType", mixed=True
        ).success
        assert parse_schema(serialize_schema(document)) == document

    def test_remove_named(self, document, execute):
        """Test removing the only named complex type."""
        assert execute(document, "removeComplexType", typeId="/complexType:AddressType").success
        assert document.complex_types is None

    def test_remove_anonymous(self, document, execute):
        """Test removing an inline complex type clears the element's slot."""
        assert execute(document, "removeComplexType", typeId="/element:person/anonymousComplexType").success
        assert document.elements[0].complex_type is None

    def test_remove_missing(self, document, execute):
        """Test removing an absent type is NodeNotFound."""
        result = execute(document, "removeComplexType", typeId="/complexType:Ghost")
        assert result.code == ErrorCode.NODE_NOT_FOUND
