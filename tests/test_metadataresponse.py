import base64

import pytest
from lxml import etree

from conftest import soap_fault, soap_response
from metadataerrors import ApiError, ApplicationFaultError, MalformedResponseError, ProtocolFaultError
from metadataresponse import flatten, is_complete, normalize, parse, persist_archive, to_value
from metadatatree import Table


def read(operation, content):
    return normalize(parse(soap_response(operation, content), operation), operation)


def test_session_fault_message():
    with pytest.raises(ProtocolFaultError) as excinfo:
        parse(soap_fault('INVALID_SESSION_ID', 'Session expired'), 'createMetadata')

    assert str(excinfo.value) == 'INVALID_SESSION_ID: Session expired'
    assert excinfo.value.message == 'Session expired'


def test_fault_is_checked_for_any_operation():
    for operation in ('readMetadata', 'deploy', 'checkRetrieveStatus'):
        with pytest.raises(ApiError):
            parse(soap_fault('INVALID_SESSION_ID', 'Session expired'), operation)


def test_fault_wins_over_a_result():
    body = soap_fault('INVALID_SESSION_ID', 'Session expired').replace(
        b'</soapenv:Body>',
        b'<createMetadataResponse><result><fullName>A__c</fullName><success>true</success></result>'
        b'</createMetadataResponse></soapenv:Body>')

    with pytest.raises(ProtocolFaultError, match='INVALID_SESSION_ID: Session expired'):
        parse(body, 'createMetadata')


def test_fault_without_string_is_not_raised():
    body = soap_fault('INVALID_SESSION_ID', '')

    with pytest.raises(MalformedResponseError):
        parse(body, 'createMetadata')


def test_first_result_error_raises():
    content = ('<result><errors><message>Must specify a non-empty label</message>'
               '<statusCode>FIELD_INTEGRITY_EXCEPTION</statusCode></errors>'
               '<fullName>Foo__c</fullName><success>false</success></result>')

    with pytest.raises(ApplicationFaultError) as excinfo:
        parse(soap_response('createMetadata', content), 'createMetadata')

    assert str(excinfo.value) == 'FIELD_INTEGRITY_EXCEPTION: Must specify a non-empty label'


def test_rename_errors_are_top_level():
    content = ('<errors><message>No such component</message><statusCode>INVALID_CROSS_REFERENCE_KEY</statusCode>'
               '</errors>')

    with pytest.raises(ApplicationFaultError, match='INVALID_CROSS_REFERENCE_KEY: No such component'):
        parse(soap_response('renameMetadata', content), 'renameMetadata')


def test_rename_ignores_nested_errors():
    content = ('<result><errors><message>Name in use</message><statusCode>DUPLICATE_VALUE</statusCode></errors>'
               '<fullName>New__c</fullName><success>false</success></result>')

    table = read('renameMetadata', content)

    assert table[0]['errors.statusCode'] == 'DUPLICATE_VALUE'


def test_second_item_failure_returns_every_row():
    content = ('<result><fullName>A__c</fullName><success>true</success></result>'
               '<result><errors><message>bad label</message><statusCode>FIELD_INTEGRITY_EXCEPTION</statusCode>'
               '</errors><fullName>B__c</fullName><success>false</success></result>'
               '<result><fullName>C__c</fullName><success>true</success></result>')

    table = read('createMetadata', content)

    assert len(table) == 3
    assert table.column('fullName') == ['A__c', 'B__c', 'C__c']
    assert table.column('success') == ['true', 'false', 'true']
    assert table[1]['errors.message'] == 'bad label'
    assert table[0]['errors.message'] is None


def test_list_metadata_fills_missing_fields():
    content = ('<result><fullName>Account</fullName><manageableState>unmanaged</manageableState>'
               '<type>CustomObject</type></result>'
               '<result><fullName>Widget__c</fullName><namespacePrefix>acme</namespacePrefix>'
               '<type>CustomObject</type></result>')

    table = read('listMetadata', content)

    assert table.columns == ['fullName', 'manageableState', 'type', 'namespacePrefix']
    assert table[0]['namespacePrefix'] is None
    assert table[1]['manageableState'] is None


def test_empty_result_is_an_empty_table():
    table = read('listMetadata', '')

    assert table == Table([])
    assert len(table) == 0


def test_read_metadata_returns_records():
    content = ('<result><records xsi:type="CustomObject"><fullName>Account</fullName>'
               '<fields><fullName>A__c</fullName></fields><fields><fullName>B__c</fullName></fields>'
               '<label>Account</label></records><records xsi:nil="true"/></result>')

    records = read('readMetadata', content)

    assert records[0]['fullName'] == 'Account'
    assert records[0]['fields'] == [{'fullName': 'A__c'}, {'fullName': 'B__c'}]
    assert records[1] == {}


def test_describe_metadata_collects_metadata_objects():
    content = ('<result><metadataObjects><directoryName>classes</directoryName><inFolder>false</inFolder>'
               '<metaFile>true</metaFile><suffix>cls</suffix><xmlName>ApexClass</xmlName></metadataObjects>'
               '<metadataObjects><childXmlNames>CustomField</childXmlNames>'
               '<directoryName>objects</directoryName><xmlName>CustomObject</xmlName></metadataObjects>'
               '<organizationNamespace></organizationNamespace><partialSaveAllowed>true</partialSaveAllowed>'
               '<testRequired>false</testRequired></result>')

    summary = read('describeMetadata', content)

    assert summary['partialSaveAllowed'] == 'true'
    assert summary['organizationNamespace'] is None
    assert summary['metadataObjects'].column('xmlName') == ['ApexClass', 'CustomObject']
    assert summary['metadataObjects'][1]['suffix'] is None


def test_deploy_recent_validation_returns_the_id():
    assert read('deployRecentValidation', '<result>0Af1t00000abcde</result>') == '0Af1t00000abcde'


def test_malformed_body():
    with pytest.raises(MalformedResponseError):
        parse(b'<html>502 Bad Gateway', 'createMetadata')


def test_missing_operation_response():
    with pytest.raises(MalformedResponseError):
        parse(soap_response('updateMetadata', ''), 'createMetadata')


def test_unknown_operation():
    with pytest.raises(ValueError):
        parse(soap_response('createMetadata', ''), 'notAnOperation')


def test_flatten_repeats():
    value = {'fullName': 'A', 'errors': [{'statusCode': 'X'}, {'statusCode': 'Y'}]}

    assert flatten(value) == {'fullName': 'A', 'errors.statusCode': 'X', 'errors.1.statusCode': 'Y'}


def test_to_value_groups_repeated_children():
    element = etree.fromstring('<a><b>1</b><b>2</b><c>3</c></a>')

    assert to_value(element) == {'b': ['1', '2'], 'c': '3'}


def test_is_complete():
    assert is_complete({'done': 'true', 'status': 'Succeeded', 'success': 'true'})
    assert not is_complete({'done': 'true', 'status': 'Failed', 'success': 'false'})
    assert not is_complete({'done': 'false', 'status': 'InProgress'})


def test_persist_archive(tmp_path):
    filename = str(tmp_path / 'package.zip')

    assert persist_archive(base64.b64encode(b'PK\x03\x04').decode('ascii'), filename) == filename

    with open(filename, 'rb') as zip_file:
        assert zip_file.read() == b'PK\x03\x04'
