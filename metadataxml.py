#!/usr/bin/python3

"""
Turns MetadataNode trees into XML and wraps them in a SOAP envelope.
"""

from lxml import etree

from metadatatree import NodeList, Record, Scalar, build

SOAP_ENVELOPE_NAMESPACE = 'http://schemas.xmlsoap.org/soap/envelope/'
METADATA_NAMESPACE = 'http://soap.sforce.com/2006/04/metadata'
PARTNER_NAMESPACE = 'urn:partner.soap.sforce.com'
XSI_NAMESPACE = 'http://www.w3.org/2001/XMLSchema-instance'
XSD_NAMESPACE = 'http://www.w3.org/2001/XMLSchema'

XSI_TYPE = '{' + XSI_NAMESPACE + '}type'

ENVELOPE_TEMPLATE = (
    '<?xml version="1.0" encoding="UTF-8"?>'
    '<env:Envelope xmlns:env="' + SOAP_ENVELOPE_NAMESPACE + '" '
    'xmlns:xsd="' + XSD_NAMESPACE + '" '
    'xmlns:xsi="' + XSI_NAMESPACE + '">'
    '<env:Header>{header}</env:Header>'
    '<env:Body>{body}</env:Body>'
    '</env:Envelope>'
)


def to_elements(node, element_name, namespace=METADATA_NAMESPACE):
    """
    Builds lxml elements for a node. A NodeList gives one element per item,
    all named element_name; anything else gives a single element. Each
    returned element is an outermost element and carries the namespace
    declarations, so nested elements never repeat them.

    Args:
        node (MetadataNode): The tree to convert
        element_name (str): The tag name of the outermost element(s)
        namespace (str): The default namespace for every element

    Returns:
        array: The list of lxml elements
    """
    if isinstance(node, NodeList):
        elements = []

        for item in node.items:
            elements.extend(to_elements(item, element_name, namespace))

        return elements

    element = etree.Element(_qualify(element_name, namespace), nsmap={None: namespace, 'xsi': XSI_NAMESPACE})
    _fill(element, node, namespace)

    return [element]


def serialize(node, element_name, namespace=METADATA_NAMESPACE):
    """
    Renders a node as an XML fragment string. Reserved characters in scalar
    values are escaped.

    For example a Record tagged 'CustomField' named 'Metadata' becomes
    <Metadata xsi:type="CustomField"><fullName>Foo__c</fullName>...</Metadata>

    Args:
        node (MetadataNode): The tree to render
        element_name (str): The tag name of the outermost element(s)
        namespace (str): The default namespace for every element

    Returns:
        str: The XML fragment
    """
    return ''.join(etree.tostring(element, encoding='unicode')
                   for element in to_elements(node, element_name, namespace))


def _qualify(name, namespace):
    return '{' + namespace + '}' + name


def _fill(element, node, namespace):
    if isinstance(node, Scalar):
        element.text = node.value
    elif isinstance(node, Record):
        if node.type_tag is not None:
            element.set(XSI_TYPE, node.type_tag)

        for name, child in node.fields.items():
            _append(element, name, child, namespace)
    else:
        raise TypeError('Cannot write {!r} as the content of a single element'.format(node))


def _append(parent, name, node, namespace):
    # lists repeat the same tag once per item
    if isinstance(node, NodeList):
        for item in node.items:
            _append(parent, name, item, namespace)
        return

    child = etree.SubElement(parent, _qualify(name, namespace))
    _fill(child, node, namespace)


def build_operation(operation, arguments, namespace=METADATA_NAMESPACE):
    """
    Renders the body element of an operation request. The arguments are
    written in the order given.

    Args:
        operation (str): The operation name, e.g. 'deleteMetadata'
        arguments (array): A list of (element name, MetadataNode) pairs
        namespace (str): The namespace of the operation

    Returns:
        str: The XML fragment for the SOAP body
    """
    return serialize(Record(arguments), operation, namespace)


def build_headers(session, headers=None, namespace=METADATA_NAMESPACE):
    """
    Renders the SOAP header elements. The SessionHeader is always first and
    is taken from the session on every call.

    Args:
        session (Session): The session to authenticate with, or None for calls
                           like login that don't have one yet
        headers (dict): Other header elements, header name to a dict of its
                        fields, e.g. {'AllOrNoneHeader': {'allOrNone': True}}
        namespace (str): The namespace of the header elements

    Returns:
        str: The header XML fragments
    """
    fragments = []

    if session is not None:
        fragments.append(serialize(build({'sessionId': session.session_id}), 'SessionHeader', namespace))

    for name, fields in (headers or {}).items():
        fragments.append(serialize(build(fields), name, namespace))

    return ''.join(fragments)


def wrap(session, operation_fragment, headers=None, namespace=METADATA_NAMESPACE):
    """
    Puts an operation fragment into a complete SOAP envelope.

    Args:
        session (Session): The session whose session_id goes in the header
        operation_fragment (str): The body element from build_operation()
        headers (dict): Additional header elements, see build_headers()
        namespace (str): The namespace of the header elements

    Returns:
        str: The request document
    """
    return ENVELOPE_TEMPLATE.format(header=build_headers(session, headers, namespace), body=operation_fragment)
