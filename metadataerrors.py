#!/usr/bin/python3

"""
Errors raised while talking to the Salesforce Metadata API.
"""


class MetadataError(Exception):
    """
    Base class for everything this package raises.
    """


class TransportError(MetadataError):
    """
    The request never produced a response body: connection refused, DNS
    failure, TLS failure or a timeout enforced by the transport.
    """


class MalformedResponseError(MetadataError):
    """
    The response body could not be parsed as a SOAP envelope, or the envelope
    did not contain the expected operation response.
    """


class ApiError(MetadataError):
    """
    A fault reported by Salesforce. The string form is always
    "{code}: {message}", matching what the API returned.

    Args:
        code (str): The fault code or status code from the response
        message (str): The fault string or error message from the response
    """

    def __init__(self, code, message):
        self.code = code
        self.message = message
        super().__init__('{}: {}'.format(code, message))


class ProtocolFaultError(ApiError):
    """
    A SOAP-level fault found at Body/Fault, e.g. INVALID_SESSION_ID.
    """


class ApplicationFaultError(ApiError):
    """
    The envelope was accepted, but the operation response reported errors at
    its application fault position.
    """


class ValidationWarning(UserWarning):
    """
    A metadata type or field name was not found in the permitted field table.
    This is advisory only and the request is still sent.
    """
