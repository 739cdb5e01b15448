"""
Shared test fixtures for the xsdedit test suite.
"""

import pytest

from xsdedit.codec import parse_schema
from xsdedit.commands import CommandDispatcher
from xsdedit.model import (
    LocalComplexType,
    LocalElement,
    SchemaDocument,
    Sequence,
    TopLevelElement,
)

PEOPLE_XSD = """<?xml version="1.0" encoding="UTF-8"?>
<xs:schema xmlns:xs="http://www.w3.org/2001/XMLSchema"
           xmlns:tns="urn:example:people"
           targetNamespace="urn:example:people"
           elementFormDefault="qualified">
  <xs:element name="person">
    <xs:complexType>
      <xs:sequence>
        <xs:element name="name" type="xs:string"/>
        <xs:element name="age" type="xs:int" minOccurs="0"/>
      </xs:sequence>
      <xs:attribute name="id" type="xs:ID" use="required"/>
    </xs:complexType>
  </xs:element>
  <xs:complexType name="AddressType">
    <xs:sequence>
      <xs:element name="street" type="xs:string" maxOccurs="unbounded"/>
    </xs:sequence>
  </xs:complexType>
  <xs:simpleType name="CodeType">
    <xs:restriction base="xs:string">
      <xs:maxLength value="10"/>
    </xs:restriction>
  </xs:simpleType>
</xs:schema>
"""



@pytest.fixture
def people_xsd():
    """Schema text with one element, one named complex type and one simple type."""
    return PEOPLE_XSD


@pytest.fixture
def document():
    """The people schema parsed into a tree."""
    return parse_schema(PEOPLE_XSD)


@pytest.fixture
def empty_document():
    """A schema with no declarations."""
    return SchemaDocument()


@pytest.fixture
def model_document():
    """A person schema built directly from model classes, without the codec."""
    return SchemaDocument(
        elements=[
            TopLevelElement(
                name="person",
                complex_type=LocalComplexType(
                    sequence=Sequence(
                        elements=[
                            LocalElement(name="name", type="string"),
                            LocalElement(name="email", type="string"),
                        ]
                    )
                ),
            )
        ]
    )


@pytest.fixture
def dispatcher():
    return CommandDispatcher()


@pytest.fixture
def execute(dispatcher):
    """Run a command given as tag plus camelCase payload fields.

    Usage:
        result = execute(document, "addElement", parentId="schema", name="a", type="string")
    """

    def _execute(document, command_type, **payload):
        return dispatcher.execute({"type": command_type, "payload": payload}, document)

    return _execute


@pytest.fixture
def validate(dispatcher):
    """Validate a command given as tag plus camelCase payload fields."""

    def _validate(document, command_type, **payload):
        return dispatcher.validate({"type": command_type, "payload": payload}, document)

    return _validate
