import pytest

from pysalesforcemetadata import Session

ENVELOPE = (
    '<?xml version="1.0" encoding="UTF-8"?>'
    '<soapenv:Envelope xmlns:soapenv="http://schemas.xmlsoap.org/soap/envelope/" '
    'xmlns="http://soap.sforce.com/2006/04/metadata" '
    'xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance">'
    '<soapenv:Body>{}</soapenv:Body>'
    '</soapenv:Envelope>'
)


def soap_response(operation, content):
    """
    Wraps result XML in an <operation>Response inside a SOAP envelope.
    """
    return ENVELOPE.format('<{0}Response>{1}</{0}Response>'.format(operation, content)).encode('utf-8')


def soap_fault(code, message):
    return ENVELOPE.format('<soapenv:Fault><faultcode>{}</faultcode><faultstring>{}</faultstring>'
                           '</soapenv:Fault>'.format(code, message)).encode('utf-8')


class FakeTransport:
    """
    Records each request and answers with the canned responses in order.
    """

    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests = []

    def invoke(self, url, request_body, action_label):
        self.requests.append({'url': url, 'body': request_body, 'action': action_label})
        return self.responses.pop(0)

    @property
    def last_body(self):
        return self.requests[-1]['body']


@pytest.fixture
def session():
    return Session('https://na34.salesforce.com/', '00Dxx0000001gPL!AQ4AQ', '50.0')


@pytest.fixture
def transport_for():
    def _transport_for(*responses):
        return FakeTransport(*responses)

    return _transport_for
