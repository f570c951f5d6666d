#!/usr/bin/python3
import logging
import ssl

import requests
from urllib3.poolmanager import PoolManager
from zeep.transports import Transport

from metadataerrors import TransportError

logger = logging.getLogger(__name__)


class Tools:

    @staticmethod
    def get_session():
        """
        Creates a requests session with the TLS adapter mounted for https.

        Returns:
            Session: The session used for every request
        """
        session = requests.Session()
        session.mount('https://', SslHttpAdapter())

        return session

    @staticmethod
    def http_request(**kwargs):
        """
        This method is the generic method used for creating HTTP requests.

        Args:
            request_type (str): The request type: GET, POST, PATCH, DELETE, etc
            URL (str): The full URL to call
            header_details (dict): Object containing the headers for the request.
                                   Defaults to None
            data_body (dict): The body to send for the POST. Defaults to None

        Returns:
            Response: Returns the response for the HTTP Request.

        Raises:
            TransportError: The request could not be completed
        """
        request_type = kwargs.get('request_type')
        URL = kwargs.get('URL')
        header_details = kwargs.get('header_details', None)
        data_body = kwargs.get('data_body', None)

        try:
            req = requests.Request(request_type, URL, data=data_body, headers=header_details)
            prep_req = req.prepare()
            session = Tools.get_session()
            response = session.send(prep_req)
        except requests.exceptions.RequestException as e:
            logger.error('Errors with response from %s: %r', URL, e)
            raise TransportError('Errors with response from {}: {!r}'.format(URL, e)) from e

        return response

    @staticmethod
    def post_http_response(URL, data_body, header_details):
        """
        This returns the response from an HTTP POST request

        Args:
            URL (str): The full URL to call
            data_body (str): The body to send for the POST
            header_details (dict): Object containing the headers for the request

        Returns:
            Response: Returns the result of the HTTP POST request.
        """
        response = Tools.http_request(request_type='POST', URL=URL, data_body=data_body, header_details=header_details)

        return response


class SoapTransport:
    """
    Sends SOAP envelopes and hands back the raw response body. Any HTTP
    status is returned as-is, because Salesforce reports SOAP faults with a
    500 and the fault is read from the body. Only a failure to get a response
    at all is an error here.

    Args:
        timeout (int): Seconds to wait for a response. None waits forever.
        session (Session): An existing requests session to use. Defaults to
                           a new one from Tools.get_session().
    """

    def __init__(self, timeout=None, session=None):
        self.transport = Transport(session=session or Tools.get_session(), operation_timeout=timeout)

    def invoke(self, url, request_body, action_label):
        """
        Posts the request.

        Args:
            url (str): The endpoint url
            request_body (str): The SOAP envelope
            action_label (str): The SOAPAction header value, e.g. 'readMetadata'

        Returns:
            bytes: The response body

        Raises:
            TransportError: The request could not be completed
        """
        headers = {'Content-Type': 'text/xml', 'SOAPAction': action_label}

        if isinstance(request_body, str):
            request_body = request_body.encode('utf-8')

        try:
            response = self.transport.post(url, request_body, headers)
        except requests.exceptions.RequestException as e:
            logger.error('Errors with response from %s: %r', url, e)
            raise TransportError('Errors with response from {}: {!r}'.format(url, e)) from e

        logger.debug('%s returned HTTP %s', action_label, response.status_code)

        return response.content


class SslHttpAdapter(requests.adapters.HTTPAdapter):
    def init_poolmanager(self, connections, maxsize, block=False, **pool_kwargs):
        self.poolmanager = PoolManager(
                                num_pools=connections, maxsize=maxsize,
                                block=block, ssl_context=ssl.create_default_context(),
                                **pool_kwargs)
