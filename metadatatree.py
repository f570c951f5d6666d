#!/usr/bin/python3

"""
The labeled tree that every Metadata API payload is converted into before it
is serialized. Callers hand in ordinary Python values (strings, numbers,
dicts, lists and Table objects) and build() turns them into one of three node
types: Scalar, Record or NodeList. Everything downstream only has to deal
with those three.
"""

import logging
import warnings
from collections.abc import Mapping

from metadataerrors import ValidationWarning

logger = logging.getLogger(__name__)


class MetadataNode:
    """
    Base class for the three node types.
    """

    def __eq__(self, other):
        return type(self) is type(other) and self.__dict__ == other.__dict__

    def __ne__(self, other):
        return not self.__eq__(other)


class Scalar(MetadataNode):
    """
    A leaf value. The value is always stored as a string.
    """

    def __init__(self, value):
        self.value = value

    def __repr__(self):
        return 'Scalar({!r})'.format(self.value)


class Record(MetadataNode):
    """
    An ordered mapping of element names to child nodes. If type_tag is set,
    it is written out as the xsi:type attribute of the element.
    """

    def __init__(self, fields, type_tag=None):
        self.fields = dict(fields)
        self.type_tag = type_tag

    def __repr__(self):
        return 'Record({!r}, type_tag={!r})'.format(self.fields, self.type_tag)


class NodeList(MetadataNode):
    """
    A sequence of nodes that are written as repeated sibling elements sharing
    one element name, in order.
    """

    def __init__(self, items):
        self.items = list(items)

    def __repr__(self):
        return 'NodeList({!r})'.format(self.items)


class Table:
    """
    A rectangular set of rows. Every row has every column, and a missing
    value is None.

    Tables are accepted as input by build(), one record per row, and are
    returned by the result normalizer for operations that confirm each
    submitted component with a flat row (fullName, success, ...).

    Args:
        columns (array): The column names, in order
        rows (array): The rows, each a dict. Keys missing from a row are
                      filled with None.
    """

    def __init__(self, columns, rows=None):
        self.columns = list(columns)
        self.rows = []

        for row in rows or []:
            self.rows.append({column: row.get(column) for column in self.columns})

    @classmethod
    def from_columns(cls, columns):
        """
        Builds a table from a mapping of column name to a list of values. All
        of the lists must be the same length.

        Args:
            columns (dict): e.g. {'fullName': ['A__c', 'B__c'],
                                  'label': ['A', 'B']}

        Returns:
            Table: one row per list position
        """
        lengths = set(len(values) for values in columns.values())

        if len(lengths) > 1:
            raise ValueError('All columns must have the same number of values, got lengths {}'.format(sorted(lengths)))

        row_count = lengths.pop() if lengths else 0
        rows = [{name: values[i] for name, values in columns.items()} for i in range(row_count)]

        return cls(columns.keys(), rows)

    @classmethod
    def from_records(cls, records):
        """
        Builds a table from a list of dicts that may not all have the same keys.
        The columns are the union of the keys in the order they are first seen.
        """
        columns = []

        for record in records:
            for name in record:
                if name not in columns:
                    columns.append(name)

        return cls(columns, records)

    def column(self, name):
        return [row[name] for row in self.rows]

    def __len__(self):
        return len(self.rows)

    def __iter__(self):
        return iter(self.rows)

    def __getitem__(self, index):
        return self.rows[index]

    def __eq__(self, other):
        return isinstance(other, Table) and self.columns == other.columns and self.rows == other.rows

    def __ne__(self, other):
        return not self.__eq__(other)

    def __repr__(self):
        return 'Table(columns={!r}, rows={!r})'.format(self.columns, self.rows)


def build(value, type_tag=None, permitted_fields=None):
    """
    Converts a Python value into a MetadataNode.

        * None becomes an empty Scalar
        * str, int, float and bool become a Scalar. Booleans are written the
          way XML schema expects them, 'true' and 'false'
        * a dict becomes a Record, tagged with type_tag
        * a list or tuple becomes a NodeList, with each item built with the
          same type_tag
        * a Table becomes a NodeList with one Record per row. Every Record
          gets every column, and missing values are written as empty Scalars

    Args:
        value (object): The value to convert
        type_tag (str): The metadata type name, e.g. 'CustomField'. This is
                        only applied to the outermost records.
        permitted_fields (dict): Optional table of metadata type to permitted
                                 field names. If it is given along with
                                 type_tag, the fields are checked against it
                                 and a ValidationWarning is issued for any
                                 that are not recognized.

    Returns:
        MetadataNode: The tree for this value
    """
    if permitted_fields is not None and type_tag is not None:
        validate(value, type_tag, permitted_fields)

    return _build(value, type_tag)


def _build(value, type_tag=None):
    if isinstance(value, MetadataNode):
        return value

    if value is None:
        return Scalar('')

    if isinstance(value, bool):
        return Scalar('true' if value else 'false')

    if isinstance(value, float):
        # 44.0 is sent as 44
        return Scalar(str(int(value)) if value.is_integer() else repr(value))

    if isinstance(value, (str, int)):
        return Scalar(str(value))

    if isinstance(value, Table):
        return NodeList(Record([(column, _build(row[column])) for column in value.columns], type_tag)
                        for row in value.rows)

    if isinstance(value, Mapping):
        return Record([(name, _build(child)) for name, child in value.items()], type_tag)

    if isinstance(value, (list, tuple)):
        return NodeList(_build(item, type_tag) for item in value)

    raise TypeError('Cannot convert a value of type {} to metadata'.format(type(value).__name__))


def field_names(value):
    """
    Returns the top level field names of a value that will become one or more
    records, in the order they are first seen.
    """
    if isinstance(value, Table):
        return list(value.columns)

    if isinstance(value, Mapping):
        return list(value.keys())

    names = []

    if isinstance(value, (list, tuple)):
        for item in value:
            for name in field_names(item):
                if name not in names:
                    names.append(name)

    return names


def validate(value, type_tag, permitted_fields):
    """
    Checks the field names of value against the permitted field table for
    type_tag. Unknown types and fields produce a ValidationWarning; nothing
    is raised.

    Returns:
        array: the field names that were not recognized
    """
    permitted = permitted_fields.get(type_tag)

    if permitted is None:
        message = "{} wasn't found in the list of acceptable metadata types".format(type_tag)
        logger.debug(message)
        warnings.warn(message, ValidationWarning, stacklevel=3)
        return []

    unknown = [name for name in field_names(value) if name not in permitted]

    for name in unknown:
        message = "{} is not a recognized field for {}".format(name, type_tag)
        logger.debug(message)
        warnings.warn(message, ValidationWarning, stacklevel=3)

    return unknown


def validate_type(type_tag, permitted_fields):
    """
    Warns if type_tag is not in the permitted field table. Used by the
    operations that only take a type name, like readMetadata.
    """
    if permitted_fields is not None and type_tag not in permitted_fields:
        message = "{} wasn't found in the list of acceptable metadata types".format(type_tag)
        logger.debug(message)
        warnings.warn(message, ValidationWarning, stacklevel=3)
        return False

    return True
