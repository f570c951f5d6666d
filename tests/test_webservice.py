from types import SimpleNamespace

import pytest
import requests
from zeep.transports import Transport

import webservice
from metadataerrors import TransportError


def test_invoke_posts_the_envelope(monkeypatch):
    calls = []

    def post(self, address, message, headers):
        calls.append((address, message, headers))
        return SimpleNamespace(status_code=500, content=b'<fault/>')

    monkeypatch.setattr(Transport, 'post', post)

    body = webservice.SoapTransport(timeout=30).invoke('https://na34.salesforce.com/services/Soap/m/50.0',
                                                       '<env:Envelope/>', 'readMetadata')

    assert body == b'<fault/>'
    address, message, headers = calls[0]
    assert address == 'https://na34.salesforce.com/services/Soap/m/50.0'
    assert message == b'<env:Envelope/>'
    assert headers == {'Content-Type': 'text/xml', 'SOAPAction': 'readMetadata'}


def test_invoke_wraps_connection_errors(monkeypatch):
    def post(self, address, message, headers):
        raise requests.exceptions.ConnectionError('connection refused')

    monkeypatch.setattr(Transport, 'post', post)

    with pytest.raises(TransportError) as excinfo:
        webservice.SoapTransport().invoke('https://na34.salesforce.com', '<env:Envelope/>', 'deploy')

    assert isinstance(excinfo.value.__cause__, requests.exceptions.ConnectionError)


def test_session_mounts_the_ssl_adapter():
    session = webservice.Tools.get_session()

    assert isinstance(session.get_adapter('https://login.salesforce.com'), webservice.SslHttpAdapter)


def test_http_request_wraps_errors(monkeypatch):
    def send(self, request, **kwargs):
        raise requests.exceptions.Timeout('timed out')

    monkeypatch.setattr(requests.Session, 'send', send)

    with pytest.raises(TransportError):
        webservice.Tools.post_http_response('https://login.salesforce.com/services/oauth2/token', {}, None)
