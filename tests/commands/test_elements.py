"""
Tests for the element command family.
"""

import pytest

from xsdedit.exceptions import DuplicateIdentifierError, ErrorCode, NodeNotFoundError
from xsdedit.commands.executors.elements import execute_add_element, execute_remove_element
from xsdedit.commands.models import AddElementPayload, RemoveElementPayload

PERSON_TYPE = "/element:person/anonymousComplexType[0]"
PERSON_SEQUENCE = f"{PERSON_TYPE}/sequence[0]"


def sequence_names(document):
    sequence = document.elements[0].complex_type.sequence
    return [element.name or element.ref for element in sequence.elements or []]


class TestAddElement:
    """Tests for addElement."""

    def test_add_top_level_element(self, empty_document, execute):
        """Test adding person:string under the root creates one top-level element."""
        result = execute(empty_document, "addElement", parentId="schema", name="person", type="string")
        assert result.success
        assert len(empty_document.elements) == 1
        assert empty_document.elements[0].name == "person"
        assert empty_document.elements[0].type == "string"

    def test_add_local_element_with_occurrences(self, document, execute):
        """Test a local element keeps its normalized occurrence bounds."""
        result = execute(
            document,
            "addElement",
            parentId=PERSON_SEQUENCE,
            name="email",
            type="xs:string",
            minOccurs="0",
            maxOccurs="unbounded",
        )
        assert result.success
        added = document.elements[0].complex_type.sequence.elements[-1]
        assert added.min_occurs == 0
        assert added.max_occurs == "unbounded"

    def test_add_reference_element(self, document, execute):
        """Test a reference element stores only ref and bounds."""
        result = execute(document, "addElement", parentId=PERSON_SEQUENCE, ref="tns:person", maxOccurs=3)
        assert result.success
        added = document.elements[0].complex_type.sequence.elements[-1]
        assert added.ref == "tns:person"
        assert added.name is None and added.type is None
        assert added.max_occurs == 3

    def test_add_with_documentation(self, empty_document, execute):
        """Test documentation text becomes an annotation on the new element."""
        execute(empty_document, "addElement", parentId="schema", name="a", type="string", documentation="An a.")
        assert empty_document.elements[0].documentation_text == "An a."

    def test_add_into_empty_compositor(self, document, execute):
        """Test adding to a compositor without children creates its list."""
        execute(document, "addComplexType", typeName="EmptyType", contentModel="choice")
        result = execute(
            document, "addElement", parentId="/complexType:EmptyType/choice", name="x", type="string"
        )
        assert result.success
        assert [e.name for e in document.complex_types[-1].choice.elements] == ["x"]

    def test_reference_to_named_sibling_is_duplicate(self, document, execute):
        """Test ref="person" collides with a named sibling person."""
        execute(document, "addElement", parentId=PERSON_SEQUENCE, name="person", type="string")
        result = execute(document, "addElement", parentId=PERSON_SEQUENCE, ref="person")
        assert not result.success
        assert result.code == ErrorCode.DUPLICATE_IDENTIFIER
        assert result.stage == "validate"

    def test_duplicate_top_level_name(self, document, execute):
        """Test a second top-level element with the same name is rejected."""
        result = execute(document, "addElement", parentId="schema", name="person", type="string")
        assert result.code == ErrorCode.DUPLICATE_IDENTIFIER
        assert len(document.elements) == 1

    @pytest.mark.parametrize(
        "payload, code",
        [
            ({"parentId": "schema", "name": "a", "type": "string", "minOccurs": 0}, ErrorCode.INVALID_OCCURRENCE),
            ({"parentId": "schema", "ref": "person"}, ErrorCode.UNSUPPORTED_PARENT),
            ({"parentId": PERSON_SEQUENCE, "ref": "person", "name": "a"}, ErrorCode.CONFLICTING_FIELDS),
            ({"parentId": PERSON_SEQUENCE, "ref": "nobody"}, ErrorCode.UNRESOLVED_TYPE),
            ({"parentId": PERSON_SEQUENCE, "name": "a"}, ErrorCode.INVALID_PAYLOAD),
            ({"parentId": PERSON_SEQUENCE, "name": "1a", "type": "string"}, ErrorCode.INVALID_NAME),
            ({"parentId": PERSON_SEQUENCE, "name": "a", "type": "Nope"}, ErrorCode.UNRESOLVED_TYPE),
            ({"parentId": PERSON_SEQUENCE, "name": "a", "type": "string", "minOccurs": -1}, ErrorCode.INVALID_OCCURRENCE),
            ({"parentId": PERSON_SEQUENCE, "name": "a", "type": "string", "minOccurs": 3, "maxOccurs": 2}, ErrorCode.INVALID_OCCURRENCE),
            ({"parentId": PERSON_SEQUENCE, "name": "a", "type": "string", "minOccurs": 3}, ErrorCode.INVALID_OCCURRENCE),
            ({"parentId": PERSON_SEQUENCE, "name": "a", "type": "string", "maxOccurs": 0}, ErrorCode.INVALID_OCCURRENCE),
            ({"parentId": "/element:nobody", "name": "a", "type": "string"}, ErrorCode.NODE_NOT_FOUND),
            ({"parentId": PERSON_TYPE, "name": "a", "type": "string"}, ErrorCode.UNSUPPORTED_PARENT),
            ({"parentId": "", "name": "a", "type": "string"}, ErrorCode.MALFORMED_ADDRESS),
            ({"parentId": "element:person", "name": "a", "type": "string"}, ErrorCode.MALFORMED_ADDRESS),
        ],
    )
    def test_rejected_without_mutation(self, document, execute, payload, code):
        """Test each invalid addElement is rejected and the tree is unchanged."""
        before = document.model_dump()
        result = execute(document, "addElement", **payload)
        assert not result.success
        assert result.code == code
        assert document.model_dump() == before


class TestRemoveElement:
    """Tests for removeElement."""

    def test_remove_from_two_child_sequence(self, document, execute):
        """Test removing one child leaves exactly the other one."""
        result = execute(document, "removeElement", elementId=f"{PERSON_SEQUENCE}/element:name")
        assert result.success
        assert sequence_names(document) == ["age"]

    def test_remove_by_position(self, document, execute):
        """Test an ordinal address removes the child at that position."""
        execute(document, "removeElement", elementId=f"{PERSON_SEQUENCE}/element[1]")
        assert sequence_names(document) == ["name"]

    def test_remove_last_child_resets_list(self, document, execute):
        """Test emptying a compositor leaves elements=None."""
        execute(document, "removeElement", elementId=f"{PERSON_SEQUENCE}/element:name")
        execute(document, "removeElement", elementId=f"{PERSON_SEQUENCE}/element:age")
        assert document.elements[0].complex_type.sequence.elements is None

    def test_remove_top_level(self, document, execute):
        """Test removing the only top-level element leaves elements=None."""
        assert execute(document, "removeElement", elementId="/element:person").success
        assert document.elements is None

    def test_remove_missing_is_not_found(self, document, execute):
        """Test removing an absent child fails and leaves the container intact."""
        before = document.model_dump()
        result = execute(document, "removeElement", elementId=f"{PERSON_SEQUENCE}/element:ghost")
        assert result.code == ErrorCode.NODE_NOT_FOUND
        assert document.model_dump() == before

    def test_remove_twice(self, document, execute):
        """Test a second removal of the same child is NodeNotFound."""
        address = f"{PERSON_SEQUENCE}/element:age"
        assert execute(document, "removeElement", elementId=address).success
        assert execute(document, "removeElement", elementId=address).code == ErrorCode.NODE_NOT_FOUND
        assert sequence_names(document) == ["name"]

    def test_remove_with_non_element_address(self, document, execute):
        """Test an address of another kind is malformed for removeElement."""
        result = execute(document, "removeElement", elementId=f"{PERSON_TYPE}/attribute:id")
        assert result.code == ErrorCode.MALFORMED_ADDRESS


class TestModifyElement:
    """Tests for modifyElement."""

    def test_rename(self, document, execute):
        """Test renaming a local element."""
        assert execute(document, "modifyElement", elementId=f"{PERSON_SEQUENCE}/element:name", name="fullName").success
        assert sequence_names(document) == ["fullName", "age"]

    def test_rename_to_sibling_name(self, document, execute):
        """Test renaming onto a sibling's identifier is a duplicate."""
        result = execute(document, "modifyElement", elementId=f"{PERSON_SEQUENCE}/element:name", name="age")
        assert result.code == ErrorCode.DUPLICATE_IDENTIFIER

    def test_change_type_drops_inline_type(self, document, execute):
        """Test setting a named type replaces the anonymous complex type."""
        assert execute(document, "modifyElement", elementId="/element:person", type="AddressType").success
        person = document.elements[0]
        assert person.type == "AddressType"
        assert person.complex_type is None

    def test_occurrences_combine_with_stored_values(self, document, execute):
        """Test a new minOccurs is checked against the stored maxOccurs."""
        age = f"{PERSON_SEQUENCE}/element:age"
        assert execute(document, "modifyElement", elementId=age, maxOccurs=3).success
        result = execute(document, "modifyElement", elementId=age, minOccurs=4)
        assert result.code == ErrorCode.INVALID_OCCURRENCE
        stored = document.elements[0].complex_type.sequence.elements[1]
        assert (stored.min_occurs, stored.max_occurs) == (0, 3)

    def test_occurrences_combine_with_default_bounds(self, document, execute):
        """Test an element without stored bounds is checked against maxOccurs=1."""
        name = f"{PERSON_SEQUENCE}/element:name"
        result = execute(document, "modifyElement", elementId=name, minOccurs=2)
        assert result.code == ErrorCode.INVALID_OCCURRENCE
        assert document.elements[0].complex_type.sequence.elements[0].min_occurs is None
        assert execute(document, "modifyElement", elementId=name, minOccurs=2, maxOccurs="unbounded").success

    def test_min_greater_than_max_on_top_level(self, document, execute):
        """Test minOccurs=10, maxOccurs=5 is rejected and nothing changes."""
        before = document.model_dump()
        result = execute(document, "modifyElement", elementId="/element:person", minOccurs=10, maxOccurs=5)
        assert result.code == ErrorCode.INVALID_OCCURRENCE
        assert document.model_dump() == before

    def test_top_level_occurrences_rejected(self, document, execute):
        """Test top-level elements never take occurrence bounds."""
        result = execute(document, "modifyElement", elementId="/element:person", maxOccurs=2)
        assert result.code == ErrorCode.INVALID_OCCURRENCE

    def test_switch_to_reference(self, document, execute):
        """Test switching a named element to reference form clears its named fields."""
        result = execute(document, "modifyElement", elementId=f"{PERSON_SEQUENCE}/element:age", ref="person")
        assert result.success
        switched = document.elements[0].complex_type.sequence.elements[1]
        assert switched.ref == "person"
        assert switched.name is None and switched.type is None
        assert switched.min_occurs == 0

    def test_reference_to_named_needs_name(self, document, execute):
        """Test giving a reference element a type without a name is a conflict."""
        execute(document, "addElement", parentId=PERSON_SEQUENCE, ref="person")
        result = execute(document, "modifyElement", elementId=f"{PERSON_SEQUENCE}/element:person", type="string")
        assert result.code == ErrorCode.CONFLICTING_FIELDS

    def test_reference_back_to_named(self, document, execute):
        """Test a name switches a reference element back to named form."""
        execute(document, "addElement", parentId=PERSON_SEQUENCE, ref="person")
        result = execute(
            document, "modifyElement", elementId=f"{PERSON_SEQUENCE}/element:person", name="nick", type="string"
        )
        assert result.success
        switched = document.elements[0].complex_type.sequence.elements[-1]
        assert (switched.name, switched.type, switched.ref) == ("nick", "string", None)

    def test_documentation(self, document, execute):
        """Test documentation is created, then replaced."""
        execute(document, "modifyElement", elementId="/element:person", documentation="first")
        execute(document, "modifyElement", elementId="/element:person", documentation="second")
        assert document.elements[0].annotation.documentation[0].text == "second"
        assert len(document.elements[0].annotation.documentation) == 1

    def test_missing_target(self, document, execute):
        """Test modifying an absent element is NodeNotFound."""
        result = execute(document, "modifyElement", elementId="/element:ghost", name="x")
        assert result.code == ErrorCode.NODE_NOT_FOUND


class TestElementExecutorsFailClosed:
    """Tests for executors re-checking preconditions on their own."""

    def test_add_rechecks_duplicates(self, document):
        """Test the executor refuses a duplicate even without validation."""
        payload = AddElementPayload(parent_id="schema", name="person", type="string")
        with pytest.raises(DuplicateIdentifierError):
            execute_add_element(payload, document)
        assert len(document.elements) == 1

    def test_remove_stale_address(self, document):
        """Test the executor fails with NodeNotFound for a stale address."""
        with pytest.raises(NodeNotFoundError):
            execute_remove_element(RemoveElementPayload(element_id="/element:ghost"), document)
