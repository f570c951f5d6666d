#!/usr/bin/python3

"""
Reads SOAP responses from the Metadata API.

A response can fail in two places. A SOAP fault sits at Body/Fault and is
checked first. An application fault sits somewhere inside the operation's
<operation>Response element, and where exactly depends on the operation:
most operations nest it at result/errors, but renameMetadata puts errors
directly under the response element. That difference comes from the API
itself, so it is kept per operation in OPERATIONS instead of being guessed.

If neither fault is populated, the response element is normalized into a
Table, a list of records, a summary dict or a single value, depending on the
operation's shape.
"""

import base64
import logging
from collections import namedtuple

from lxml import etree

from metadataerrors import ApplicationFaultError, MalformedResponseError, ProtocolFaultError
from metadatatree import Table

logger = logging.getLogger(__name__)

XSI_NIL = '{http://www.w3.org/2001/XMLSchema-instance}nil'

# Result shapes
TABLE = 'table'          # one flat row per <result>, missing fields are None
RECORDS = 'records'      # a list of nested dicts from result/records
SUMMARY = 'summary'      # one dict from <result>, with some children collected into Tables
VALUE = 'value'          # the text of a single element

OperationDescriptor = namedtuple('OperationDescriptor',
                                 ['name', 'fault_path', 'result_path', 'shape', 'tables'])

OPERATIONS = {
    'createMetadata': OperationDescriptor('createMetadata', 'result/errors', 'result', TABLE, ()),
    'updateMetadata': OperationDescriptor('updateMetadata', 'result/errors', 'result', TABLE, ()),
    'upsertMetadata': OperationDescriptor('upsertMetadata', 'result/errors', 'result', TABLE, ()),
    'deleteMetadata': OperationDescriptor('deleteMetadata', 'result/errors', 'result', TABLE, ()),
    'renameMetadata': OperationDescriptor('renameMetadata', 'errors', 'result', TABLE, ()),
    'listMetadata': OperationDescriptor('listMetadata', 'result/errors', 'result', TABLE, ()),
    'readMetadata': OperationDescriptor('readMetadata', 'result/errors', 'result/records', RECORDS, ()),
    'describeMetadata': OperationDescriptor('describeMetadata', 'result/errors', 'result', SUMMARY,
                                            ('metadataObjects',)),
    'describeValueType': OperationDescriptor('describeValueType', 'result/errors', 'result', SUMMARY, ()),
    'retrieve': OperationDescriptor('retrieve', 'result/errors', 'result', SUMMARY, ()),
    'checkRetrieveStatus': OperationDescriptor('checkRetrieveStatus', 'result/errors', 'result', SUMMARY,
                                               ('fileProperties', 'messages')),
    'deploy': OperationDescriptor('deploy', 'result/errors', 'result', SUMMARY, ()),
    'checkDeployStatus': OperationDescriptor('checkDeployStatus', 'result/errors', 'result', SUMMARY, ()),
    'cancelDeploy': OperationDescriptor('cancelDeploy', 'result/errors', 'result', SUMMARY, ()),
    'deployRecentValidation': OperationDescriptor('deployRecentValidation', 'result/errors', 'result', VALUE, ()),
    'login': OperationDescriptor('login', 'result/errors', 'result', SUMMARY, ()),
    'logout': OperationDescriptor('logout', 'result/errors', 'result', VALUE, ()),
}

_PARSER = etree.XMLParser(resolve_entities=False, no_network=True, remove_comments=True)


def get_descriptor(operation):
    try:
        return OPERATIONS[operation]
    except KeyError:
        raise ValueError('Unknown Metadata API operation: {}'.format(operation)) from None


def local_name(element):
    return etree.QName(element).localname


def find_children(element, name):
    """
    Returns the child elements with the given local name, ignoring namespaces.
    """
    return [child for child in element if isinstance(child.tag, str) and local_name(child) == name]


def find_child(element, name):
    children = find_children(element, name)
    return children[0] if children else None


def find_path(element, path):
    """
    Follows a slash separated path of local names, taking the first match at
    each step. Returns None if any step is missing.
    """
    for name in path.split('/'):
        if element is None:
            return None
        element = find_child(element, name)

    return element


def child_text(element, name):
    child = find_child(element, name)

    if child is None or child.text is None:
        return None

    return child.text.strip() or None


def parse(response_body, operation):
    """
    Parses a response and checks it for faults.

    Args:
        response_body (bytes): The raw response from the transport
        operation (str): The operation that was called, e.g. 'createMetadata'

    Returns:
        Element: The <operation>Response element

    Raises:
        MalformedResponseError: The body isn't XML or has no response element
        ProtocolFaultError: Body/Fault has a faultcode and faultstring
        ApplicationFaultError: The operation's fault position has a
                               statusCode and message
    """
    descriptor = get_descriptor(operation)

    if isinstance(response_body, str):
        response_body = response_body.encode('utf-8')

    try:
        root = etree.fromstring(response_body, parser=_PARSER)
    except (etree.XMLSyntaxError, ValueError, TypeError) as e:
        raise MalformedResponseError('Could not parse the {} response: {}'.format(operation, e)) from e

    body = find_child(root, 'Body')

    if body is None:
        raise MalformedResponseError('The {} response has no SOAP Body'.format(operation))

    fault = find_child(body, 'Fault')

    if fault is not None:
        fault_code = child_text(fault, 'faultcode')
        fault_string = child_text(fault, 'faultstring')

        if fault_code and fault_string:
            logger.debug('%s returned a SOAP fault: %s', operation, fault_code)
            raise ProtocolFaultError(fault_code, fault_string)

    response = find_child(body, operation + 'Response')

    if response is None:
        raise MalformedResponseError('The response did not contain a {}Response element'.format(operation))

    errors = find_path(response, descriptor.fault_path)

    if errors is not None:
        status_code = child_text(errors, 'statusCode')
        message = child_text(errors, 'message')

        if status_code and message:
            logger.debug('%s returned an error at %s: %s', operation, descriptor.fault_path, status_code)
            raise ApplicationFaultError(status_code, message)

    return response


def to_value(element):
    """
    Converts an element into plain Python values. Leaves become their text,
    or None if they are empty or nil. Elements with children become dicts,
    and a child name that repeats becomes a list. Attributes are dropped.
    """
    if element.get(XSI_NIL) == 'true':
        return None

    children = [child for child in element if isinstance(child.tag, str)]

    if not children:
        return element.text

    return _group(children)


def _group(children):
    record = {}
    repeated = set()

    for child in children:
        name = local_name(child)
        value = to_value(child)

        if name not in record:
            record[name] = value
        elif name in repeated:
            record[name].append(value)
        else:
            record[name] = [record[name], value]
            repeated.add(name)

    return record


def flatten(value, prefix=''):
    """
    Flattens a nested dict into a single row. Nested keys are joined with
    dots (errors.statusCode) and repeated values get a numeric suffix after
    the first one (errors, errors.1, errors.2).
    """
    if not isinstance(value, dict):
        return {prefix.rstrip('.') or 'value': value}

    row = {}

    for name, child in value.items():
        key = prefix + name

        if isinstance(child, list):
            for i, item in enumerate(child):
                row.update(_flatten_item(item, key if i == 0 else '{}.{}'.format(key, i)))
        else:
            row.update(_flatten_item(child, key))

    return row


def _flatten_item(value, key):
    if isinstance(value, dict):
        return flatten(value, key + '.')

    return {key: value}


def normalize(response, operation):
    """
    Normalizes a response element returned by parse().

    The shapes are:
        * table: every <result> becomes a row of a Table. Fields a result
          doesn't have are None, so the table is always rectangular.
          Per-item failures stay in the rows, e.g. success='false' with the
          errors.statusCode and errors.message columns filled in.
        * records: every result/records element becomes a nested dict
        * summary: the <result> element becomes a dict, and the children
          named in the descriptor's tables are collected into Tables
        * value: the text of the result element, or None

    Args:
        response (Element): The element returned by parse()
        operation (str): The operation that was called

    Returns:
        Table, list, dict or str depending on the operation
    """
    descriptor = get_descriptor(operation)

    if descriptor.shape == TABLE:
        results = find_children(response, descriptor.result_path)
        return Table.from_records([flatten(to_value(result)) for result in results])

    if descriptor.shape == RECORDS:
        parent_path, _, name = descriptor.result_path.rpartition('/')
        parent = find_path(response, parent_path) if parent_path else response

        if parent is None:
            return []

        return [to_value(record) or {} for record in find_children(parent, name)]

    result = find_path(response, descriptor.result_path)

    if descriptor.shape == VALUE:
        return None if result is None else to_value(result)

    return summarize(result, descriptor.tables)


def summarize(result, tables=()):
    summary = {}
    table_rows = {name: [] for name in tables}
    other = []

    for child in (result if result is not None else []):
        if not isinstance(child.tag, str):
            continue

        if local_name(child) in table_rows:
            table_rows[local_name(child)].append(flatten(to_value(child)))
        else:
            other.append(child)

    if other:
        summary.update(_group(other))

    for name, rows in table_rows.items():
        summary[name] = Table.from_records(rows)

    return summary


def is_complete(summary):
    """
    True when an asynchronous job result reports that it is done, Succeeded
    and successful.
    """
    return (summary.get('done') == 'true' and
            summary.get('status') == 'Succeeded' and
            summary.get('success') == 'true')


def persist_archive(encoded_zip, filename):
    """
    Decodes a base64 zip file from a retrieve result and writes it to
    filename.

    Args:
        encoded_zip (str): The base64 zipFile value
        filename (str): Where to save the archive. Must end with .zip.

    Returns:
        str: The filename the archive was written to
    """
    with open(filename, 'wb') as zip_file:
        zip_file.write(base64.b64decode(encoded_zip))

    logger.info('Package Manifest Files Saved at: %s', filename)

    return filename
