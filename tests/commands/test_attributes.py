"""
Tests for the attribute command family.
"""

import pytest

from xsdedit.exceptions import ErrorCode

PERSON_TYPE = "/element:person/anonymousComplexType[0]"
ADDRESS_TYPE = "/complexType:AddressType"


@pytest.fixture
def with_lang(document, execute):
    """The people schema plus a top-level attribute lang."""
    result = execute(document, "addAttribute", parentId="schema", name="lang", type="xs:language")
    assert result.success
    return document


class TestAddAttribute:
    """Tests for addAttribute."""

    def test_add_local_attribute(self, document, execute):
        """Test a named attribute is appended to a complex type."""
        result = execute(
            document, "addAttribute", parentId=ADDRESS_TYPE, name="country", type="xs:string", required=True
        )
        assert result.success
        added = document.complex_types[0].attributes[0]
        assert (added.name, added.type, added.use) == ("country", "xs:string", "required")

    def test_optional_marker(self, document, execute):
        """Test required=False is stored as use="optional"."""
        execute(document, "addAttribute", parentId=ADDRESS_TYPE, name="zip", type="string", required=False)
        assert document.complex_types[0].attributes[0].use == "optional"

    def test_add_top_level_attribute(self, with_lang):
        """Test a top-level attribute has no use marker."""
        lang = with_lang.attributes[0]
        assert lang.name == "lang"
        assert not hasattr(lang, "use")

    def test_reference_attribute_may_carry_use(self, with_lang, execute):
        """Test a reference attribute accepts a required marker."""
        result = execute(with_lang, "addAttribute", parentId=ADDRESS_TYPE, ref="lang", required=True)
        assert result.success
        added = with_lang.complex_types[0].attributes[0]
        assert (added.ref, added.use, added.name) == ("lang", "required", None)

    def test_undeclared_reference(self, document, execute):
        """Test ref="lang" without a top-level lang is an unresolved reference."""
        result = execute(document, "addAttribute", parentId=ADDRESS_TYPE, ref="lang")
        assert result.code == ErrorCode.UNRESOLVED_TYPE
        assert document.complex_types[0].attributes is None

    def test_attribute_group_parent(self, document, execute):
        """Test attributes can be added to a named attribute group."""
        execute(document, "addAttributeGroup", groupName="common")
        result = execute(document, "addAttribute", parentId="/attributeGroup:common", name="lang", type="string")
        assert result.success
        assert document.attribute_groups[0].attributes[0].name == "lang"

    @pytest.mark.parametrize(
        "payload, code",
        [
            ({"parentId": "schema", "name": "a", "required": True}, ErrorCode.CONFLICTING_FIELDS),
            ({"parentId": "schema", "ref": "lang"}, ErrorCode.UNSUPPORTED_PARENT),
            ({"parentId": ADDRESS_TYPE, "name": "a", "defaultValue": "x", "fixedValue": "y"}, ErrorCode.CONFLICTING_FIELDS),
            ({"parentId": ADDRESS_TYPE, "name": "a", "required": True, "defaultValue": "x"}, ErrorCode.CONFLICTING_FIELDS),
            ({"parentId": ADDRESS_TYPE, "ref": "lang", "defaultValue": "x"}, ErrorCode.CONFLICTING_FIELDS),
            ({"parentId": ADDRESS_TYPE, "ref": "lang", "type": "string"}, ErrorCode.CONFLICTING_FIELDS),
            ({"parentId": ADDRESS_TYPE, "name": "a", "type": "AddressType"}, ErrorCode.UNRESOLVED_TYPE),
            ({"parentId": ADDRESS_TYPE, "name": "a b"}, ErrorCode.INVALID_NAME),
            ({"parentId": PERSON_TYPE, "name": "id", "type": "string"}, ErrorCode.DUPLICATE_IDENTIFIER),
            ({"parentId": f"{ADDRESS_TYPE}/sequence[0]", "name": "a"}, ErrorCode.UNSUPPORTED_PARENT),
            ({"parentId": "/complexType:Missing", "name": "a"}, ErrorCode.NODE_NOT_FOUND),
        ],
    )
    def test_rejected_without_mutation(self, with_lang, execute, payload, code):
        """Test each invalid addAttribute is rejected and the tree is unchanged."""
        before = with_lang.model_dump()
        result = execute(with_lang, "addAttribute", **payload)
        assert result.code == code
        assert with_lang.model_dump() == before


class TestRemoveAttribute:
    """Tests for removeAttribute."""

    def test_remove_only_attribute(self, document, execute):
        """Test removing the last attribute resets the list to None."""
        result = execute(document, "removeAttribute", attributeId=f"{PERSON_TYPE}/attribute:id")
        assert result.success
        assert document.elements[0].complex_type.attributes is None

    def test_remove_reference_by_ref(self, with_lang, execute):
        """Test a reference attribute is addressed by its ref."""
        execute(with_lang, "addAttribute", parentId=ADDRESS_TYPE, ref="lang")
        assert execute(with_lang, "removeAttribute", attributeId=f"{ADDRESS_TYPE}/attribute:lang").success
        assert with_lang.complex_types[0].attributes is None
        assert with_lang.attributes[0].name == "lang"

    def test_remove_missing(self, document, execute):
        """Test removing an absent attribute is NodeNotFound."""
        result = execute(document, "removeAttribute", attributeId=f"{PERSON_TYPE}/attribute:ghost")
        assert result.code == ErrorCode.NODE_NOT_FOUND


class TestModifyAttribute:
    """Tests for modifyAttribute."""

    def test_default_replaces_fixed(self, document, execute):
        """Test setting a default clears a stored fixed value."""
        execute(document, "addAttribute", parentId=ADDRESS_TYPE, name="kind", type="string", fixedValue="a")
        result = execute(document, "modifyAttribute", attributeId=f"{ADDRESS_TYPE}/attribute:kind", defaultValue="b")
        assert result.success
        kind = document.complex_types[0].attributes[0]
        assert (kind.default, kind.fixed) == ("b", None)

    def test_required_conflicts_with_stored_default(self, document, execute):
        """Test marking an attribute required while it keeps a default is a conflict."""
        execute(document, "addAttribute", parentId=ADDRESS_TYPE, name="kind", type="string", defaultValue="x")
        result = execute(document, "modifyAttribute", attributeId=f"{ADDRESS_TYPE}/attribute:kind", required=True)
        assert result.code == ErrorCode.CONFLICTING_FIELDS
        assert document.complex_types[0].attributes[0].use is None

    def test_required_with_fixed_replaces_default(self, document, execute):
        """Test a fixed value set alongside required drops the stored default."""
        execute(document, "addAttribute", parentId=ADDRESS_TYPE, name="kind", type="string", defaultValue="x")
        result = execute(
            document,
            "modifyAttribute",
            attributeId=f"{ADDRESS_TYPE}/attribute:kind",
            required=True,
            fixedValue="y",
        )
        assert result.success
        kind = document.complex_types[0].attributes[0]
        assert (kind.use, kind.default, kind.fixed) == ("required", None, "y")

    def test_top_level_required_rejected(self, with_lang, execute):
        """Test a top-level attribute cannot be marked required."""
        result = execute(with_lang, "modifyAttribute", attributeId="/attribute:lang", required=True)
        assert result.code == ErrorCode.CONFLICTING_FIELDS

    def test_switch_to_reference(self, with_lang, execute):
        """Test a named attribute becomes a reference and keeps its use marker."""
        result = execute(with_lang, "modifyAttribute", attributeId=f"{PERSON_TYPE}/attribute:id", ref="lang")
        assert result.success
        switched = with_lang.elements[0].complex_type.attributes[0]
        assert (switched.ref, switched.name, switched.type, switched.use) == ("lang", None, None, "required")

    def test_rename_collision(self, document, execute):
        """Test renaming onto an existing sibling is a duplicate."""
        execute(document, "addAttribute", parentId=PERSON_TYPE, name="code", type="string")
        result = execute(document, "modifyAttribute", attributeId=f"{PERSON_TYPE}/attribute:code", name="id")
        assert result.code == ErrorCode.DUPLICATE_IDENTIFIER

    def test_rename(self, document, execute):
        """Test a plain rename."""
        assert execute(document, "modifyAttribute", attributeId=f"{PERSON_TYPE}/attribute:id", name="key").success
        assert document.elements[0].complex_type.attributes[0].name == "key"
