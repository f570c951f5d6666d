#!/usr/bin/python3

"""
This package creates methods to easily call the Salesforce Metadata API.

Every Metadata call goes through the same steps: the arguments are converted
into a metadata tree, serialized into the operation's XML, wrapped in a SOAP
envelope with the session header and posted to the org. The response is then
checked for SOAP faults and application faults before being normalized into
a Table, a list of records or a summary dict.
"""

import base64
import json
import logging
from collections import namedtuple
from urllib.parse import urlparse

import metadataresponse
import metadataxml
import webservice
from metadataerrors import ApiError
from metadatainputs import METADATA_INPUTS
from metadatatree import Scalar, build, validate_type

API_VERSION = '50.0'
METADATA_ENDPOINT_PATH = '/services/Soap/m/{}'
PARTNER_ENDPOINT_PATH = '/services/Soap/u/{}'
PRODUCTION_LOGIN_URL = 'https://login.salesforce.com'
SANDBOX_LOGIN_URL = 'https://test.salesforce.com'
LOG_BODY_LIMIT = 2000

logger = logging.getLogger(__name__)

Session = namedtuple('Session', ['instance_url', 'session_id', 'api_version'])
Session.__doc__ = """
The details of a logged in session. This is created once by one of the
Authentication login methods (or by hand from an existing token) and passed
to every Metadata call.

Args:
    instance_url (str): The base url of the org, e.g. https://na34.salesforce.com
    session_id (str): The session ID or OAuth access token
    api_version (str): The API version to call, e.g. '50.0'
"""


class Util:
    """
    This is a collection of utilities that will need to be reused by the methods
    within the classes.
    """

    @staticmethod
    def get_metadata_url(session):
        """
        Builds the Metadata API endpoint for the session's instance and API version.

        Args:
            session (Session): The session returned from the login call

        Returns:
            str: e.g. https://na34.salesforce.com/services/Soap/m/50.0
        """
        return session.instance_url.rstrip('/') + METADATA_ENDPOINT_PATH.format(session.api_version)

    @staticmethod
    def get_log_level(verbose):
        return logging.INFO if verbose else logging.DEBUG

    @staticmethod
    def validate_zip_filename(filename):
        if not str(filename).endswith('.zip'):
            raise ValueError('The filename must end with .zip, got {}'.format(filename))

    @staticmethod
    def call(session, operation, arguments, headers=None, transport=None, verbose=False, url=None,
             namespace=metadataxml.METADATA_NAMESPACE, log_body=True):
        """
        Sends one SOAP request and returns the normalized result.

        Args:
            session (Session): The session to authenticate with. None is only
                               used for login.
            operation (str): The operation name, which is also the SOAPAction
            arguments (array): (element name, MetadataNode) pairs for the body
            headers (dict): Extra SOAP headers, see Metadata.get_soap_headers()
            transport (object): Anything with an invoke(url, body, action)
                                method. Defaults to webservice.SoapTransport()
            verbose (bool): Log the request and response at INFO instead of
                            DEBUG for this call
            url (str): The endpoint. Defaults to the session's Metadata API url
            namespace (str): The namespace of the operation
            log_body (bool): Set to False to keep the request and response
                             bodies out of the logs, e.g. when they hold a
                             password or a session id

        Returns:
            object: The result from metadataresponse.normalize()
        """
        log_level = Util.get_log_level(verbose)

        if url is None:
            url = Util.get_metadata_url(session)

        if transport is None:
            transport = webservice.SoapTransport()

        fragment = metadataxml.build_operation(operation, arguments, namespace)
        envelope = metadataxml.wrap(session, fragment, headers, namespace)

        logger.log(log_level, 'Calling %s at %s', operation, url)

        if log_body:
            logger.log(log_level, 'Request body: %s', fragment)

        response_body = transport.invoke(url, envelope, operation)
        logger.log(log_level, 'Response from %s: %d bytes', operation, len(response_body))

        if log_body:
            # zipFile values can run to megabytes
            logger.log(log_level, 'Response body: %s', response_body[:LOG_BODY_LIMIT])

        response = metadataresponse.parse(response_body, operation)

        return metadataresponse.normalize(response, operation)


class Authentication:
    """
    The Authentication class is used to log in and out of Salesforce
    """

    @staticmethod
    def get_soap_login(login_username, login_password, is_production=True, api_version=API_VERSION,
                       transport=None, verbose=False):
        """
        This method logs into Salesforce with the SOAP partner API.

        Args:
            login_username (str): this is the salesforce login
            login_password (str): this is the salesforce password AND security
                                  token
            is_production (bool): this is a boolean value to set whether or not
                                  the login will be in production or a sandbox
                                  environment.
            api_version (str): The API version the session will use
            transport (object): Optional transport, see Util.call()
            verbose (bool): Log the request at INFO level

        Returns:
            Session: The session for the Metadata calls
        """
        base_url = PRODUCTION_LOGIN_URL if is_production else SANDBOX_LOGIN_URL
        arguments = [('username', Scalar(login_username)), ('password', Scalar(login_password))]

        login_result = Util.call(None, 'login', arguments, transport=transport, verbose=verbose,
                                 url=base_url + PARTNER_ENDPOINT_PATH.format(api_version),
                                 namespace=metadataxml.PARTNER_NAMESPACE, log_body=False)

        server_url = urlparse(login_result['serverUrl'])

        return Session('{}://{}'.format(server_url.scheme, server_url.netloc), login_result['sessionId'], api_version)

    @staticmethod
    def get_soap_logout(session, transport=None, verbose=False):
        """
        Ends the session with the SOAP partner API.

        Args:
            session (Session): The session returned from the login call

        Returns:
            bool: True once the logout call returns without a fault
        """
        Util.call(session, 'logout', [], transport=transport, verbose=verbose,
                  url=session.instance_url.rstrip('/') + PARTNER_ENDPOINT_PATH.format(session.api_version),
                  namespace=metadataxml.PARTNER_NAMESPACE)

        return True

    @staticmethod
    def get_oauth_login(login_username, login_password, login_client_id, login_client_secret, is_production=True,
                        api_version=API_VERSION):
        """
        this function logs into Salesforce using the oAuth 2.0 password grant type.
        In order for this function to work, a connected app must be set up in
        Salesforce, which is where the client id and client secret come from.
        The Client Id is the connected app Consumer Key, and the client secret
        is the consumer secret.

        Args:
            login_username (str): this is the salesforce login
            login_password (str): this is the salesforce password AND security
                                  token
            login_client_id (str): this is the client Id from the oAuth settings
                                   in the Salesforce app setup
            login_client_secret (str): this is the secret from the oAuth settings
                                       in the Salesforce app setup
            is_production (bool): this is a boolean value to set whether or not
                                  the base oAuth connection will be in production
                                  or a sandbox environment
            api_version (str): The API version the session will use

        Returns:
            Session: The access_token and instance_url from the response,
                     wrapped as a Session
        """
        base_url = PRODUCTION_LOGIN_URL if is_production else SANDBOX_LOGIN_URL

        login_body_data = {'grant_type': 'password', 'client_id': login_client_id,
                           'client_secret': login_client_secret, 'username': login_username,
                           'password': login_password}

        response = webservice.Tools.post_http_response(base_url + '/services/oauth2/token', login_body_data, None)
        json_response = json.loads(response.text)

        if 'error' in json_response:
            raise ApiError(json_response['error'], json_response.get('error_description'))

        return Session(json_response['instance_url'], json_response['access_token'], api_version)

    @staticmethod
    def get_oauth_logout(session, is_production=True):
        """
        this function calls the correct endpoint for the oauth logout by providing
        the token and whether or not the login is production or test.

        Args:
            session (Session): The session from get_oauth_login
            is_production (bool): this is a boolean value to set whether or not
                                  the base oAuth connection will be in production
                                  or a sandbox environment.
        Returns:
            dict: returns a response with success (True or False), and the
                  status_code returned by the call to revoke the token
        """
        base_url = PRODUCTION_LOGIN_URL if is_production else SANDBOX_LOGIN_URL
        logout_body_data = {'token': session.session_id}

        response = webservice.Tools.post_http_response(base_url + '/services/oauth2/revoke', logout_body_data,
                                                       {'Content-Type': 'application/x-www-form-urlencoded'})

        return {'success': response.status_code == 200, 'status_code': response.status_code}


class Metadata:
    """
    Use Metadata API to retrieve, deploy, create, update or delete customization
    information, such as custom object definitions and page layouts, for your
    organization. This API is intended for managing customizations and for
    building tools that can manage the metadata model, not the data itself.

    Every method takes these keyword options:
        client_name (str): A value that identifies an API client. This is
                           used for partner applications
        transport (object): Anything with an invoke(url, body, action) method
        verbose (bool): Log the request and response at INFO level
    """

    @staticmethod
    def get_soap_headers(client_name=None, all_or_none=None, debug_categories=None):
        """
        This builds the SOAP headers for the Metadata requests, other than the
        SessionHeader, which is added from the session on every call.

        Args:
            client_name (str): A value that identifies an API client.
            all_or_none (bool): Set to true to cause all metadata changes to be
                                rolled back if any records in the call cause
                                failures. Set to false to enable saving only the
                                records that are processed successfully when
                                other records in the call cause failures.
            debug_categories (dict): Log categories with their associated log
                                     levels, e.g. {'Apex_code': 'Debug'}

        Returns:
            dict: Returns the headers for SOAP Metadata requests
        """
        soap_headers = {}

        if client_name is not None:
            soap_headers['CallOptions'] = {'client': client_name}

        if all_or_none is not None:
            soap_headers['AllOrNoneHeader'] = {'allOrNone': all_or_none}

        if debug_categories is not None:
            soap_headers['DebuggingHeader'] = {
                'categories': [{'category': category, 'level': level}
                               for category, level in debug_categories.items()]
            }

        return soap_headers

    @staticmethod
    def get_package_type_members(member_name, member_list):
        """
        This builds the list of members for a specific type. For example this
        will store the list of all the ApexClass members you want to reference.

        Args:
            member_name (str): This is the Metadata type being referenced.
            member_list (array): An array of the members you're working with in
                                 the package. '*' retrieves all of them.

        Returns:
            dict: Returns the package type members for a Package
        """
        return {'members': list(member_list), 'name': member_name}

    @staticmethod
    def get_package(**kwargs):
        """
        Specifies which metadata components to retrieve as part of a retrieve()
        call or defines a package of components.

        Args:
            full_name (str): The package name used as a unique identifier for
                             API access.
            api_access_level (str): Unrestricted or Restricted
            description (str): A short description of the package.
            namespace_prefix (str): The namespace of the developer organization
                                    where the package was created.
            object_permissions (array): Indicates which objects are accessible to
                                        the package, and the kind of access
                                        available (create, read, update, delete)
            package_type (str): Reserved for future use.
            post_install_class (str): The name of the Apex class that specifies
                                      the actions to execute after the package
                                      has been installed or upgraded.
            setup_web_link (str): The weblink used to describe package
                                  installation.
            types (array): The type of component being retrieved. You can build
                           the types with the get_package_type_members()
                           method. The order is kept.
            uninstall_class (str): The name of the Apex class that specifies
                                   the actions to execute after the package has
                                   been uninstalled.
            version (str): Required. The version of the component type.

        Returns:
            dict: Returns the package that was requested.
        """
        if kwargs.get('version') is None:
            raise ValueError('The version parameter is required to create a package.')

        return Metadata._drop_unset([
            ('fullName', kwargs.get('full_name')),
            ('apiAccessLevel', kwargs.get('api_access_level')),
            ('description', kwargs.get('description')),
            ('namespacePrefix', kwargs.get('namespace_prefix')),
            ('objectPermissions', kwargs.get('object_permissions')),
            ('packageType', kwargs.get('package_type')),
            ('postInstallClass', kwargs.get('post_install_class')),
            ('setupWeblink', kwargs.get('setup_web_link')),
            ('types', kwargs.get('types')),
            ('uninstallClass', kwargs.get('uninstall_class')),
            ('version', kwargs.get('version')),
        ])

    @staticmethod
    def get_deploy_options(**kwargs):
        """
        The options that can be set for deploying a metadata package

        Args:
            allow_missing_files (bool): If files that are specified in package.xml
                                        are not in the .zip file, specifies whether
                                        a deployment can still succeed.
            auto_update_package (bool): If a file is in the .zip file but not
                                        specified in package.xml, specifies whether
                                        the file is automatically added to the
                                        package.
            check_only (bool): Set to true to perform a test deployment
                               (validation) of components without saving the
                               components in the target org. See
                               deploy_recent_validation().
            ignore_warnings (bool): Indicates whether a warning should allow a
                                    deployment to complete successfully (true)
                                    or not (false).
            perform_retrieve (bool): Indicates whether a retrieve() call is
                                     performed immediately after the deployment
            purge_on_delete (bool): If true, the deleted components in the
                                    destructiveChanges.xml manifest file aren't
                                    stored in the Recycle Bin.
            rollback_on_error (bool): Indicates whether any failure causes a
                                      complete rollback (true) or not (false).
                                      Must be true for production orgs.
            run_tests (array): A list of Apex tests to run during deployment.
                               To use this option, set test_level to
                               RunSpecifiedTests.
            single_package (bool): Indicates whether the specified .zip file
                                   points to a directory structure with a
                                   single package (true) or a set of packages
                                   (false).
            test_level (str): NoTestRun, RunSpecifiedTests, RunLocalTests or
                              RunAllTestsInOrg

        Returns:
            dict: Returns the deploy options for a deploy request
        """
        return Metadata._drop_unset([
            ('allowMissingFiles', kwargs.get('allow_missing_files')),
            ('autoUpdatePackage', kwargs.get('auto_update_package')),
            ('checkOnly', kwargs.get('check_only')),
            ('ignoreWarnings', kwargs.get('ignore_warnings')),
            ('performRetrieve', kwargs.get('perform_retrieve')),
            ('purgeOnDelete', kwargs.get('purge_on_delete')),
            ('rollbackOnError', kwargs.get('rollback_on_error')),
            ('runTests', kwargs.get('run_tests')),
            ('singlePackage', kwargs.get('single_package')),
            ('testLevel', kwargs.get('test_level')),
        ])

    @staticmethod
    def get_retrieve_request(**kwargs):
        """
        This is the package of data needed to retrieve metadata

        Args:
            api_version (str): Required. The API version for the retrieve
                               request. The API version determines the fields
                               retrieved for each metadata type.
            package_names (array): A list of package names to be retrieved. If
                                   you are retrieving only unpackaged components,
                                   do not specify a name here.
            single_package (bool): Specifies whether only a single package is
                                   being retrieved (true) or not (false).
            specific_files (array): A list of file names to be retrieved. If a
                                    value is specified for this property,
                                    package_names must be set to None and
                                    single_package must be set to true.
            unpackaged (dict): The components to retrieve that are not in a
                               package. You can build this with the
                               get_package() method.

        Returns:
            dict: Returns the retrieve request for retrieve()
        """
        if kwargs.get('api_version') is None:
            raise ValueError('The api_version parameter is required to create a retrieve request.')

        return Metadata._drop_unset([
            ('apiVersion', kwargs.get('api_version')),
            ('packageNames', kwargs.get('package_names')),
            ('singlePackage', kwargs.get('single_package')),
            ('specificFiles', kwargs.get('specific_files')),
            ('unpackaged', kwargs.get('unpackaged')),
        ])

    @staticmethod
    def get_list_metadata_query(metadata_type, folder=None):
        """
        Builds one query for list_metadata().

        Args:
            metadata_type (str): The metadata type to list, e.g. 'CustomObject'
            folder (str): Required for folder based types like EmailTemplate
                          or Report, e.g. 'unfiled$public'

        Returns:
            dict: The ListMetadataQuery
        """
        return Metadata._drop_unset([('folder', folder), ('type', metadata_type)])

    @staticmethod
    def _drop_unset(fields):
        return {name: value for name, value in fields if value is not None}

    @staticmethod
    def _save(operation, session, metadata_type, metadata, all_or_none, permitted_fields, **kwargs):
        if metadata is None or len(metadata) == 0:
            raise ValueError('At least one metadata component is required for {}'.format(operation))

        metadata_node = build(metadata, type_tag=metadata_type, permitted_fields=permitted_fields)
        headers = Metadata.get_soap_headers(kwargs.pop('client_name', None), all_or_none)

        return Util.call(session, operation, [('Metadata', metadata_node)], headers=headers, **kwargs)

    @staticmethod
    def _full_names(full_names):
        if isinstance(full_names, str):
            full_names = [full_names]

        full_names = list(full_names)

        if len(full_names) == 0:
            raise ValueError('At least one full name is required')

        if not all(isinstance(full_name, str) for full_name in full_names):
            raise TypeError('Full names must all be strings')

        return full_names

    @staticmethod
    def _api_version(version):
        # strings are sent as given, so '50.0' stays '50.0'
        if isinstance(version, bool) or not isinstance(version, (str, int, float)):
            raise TypeError('The API version must be a number or a numeric string, got {!r}'.format(version))

        if isinstance(version, str):
            try:
                float(version)
            except ValueError:
                raise ValueError('The API version must be numeric, got {!r}'.format(version)) from None

        return version

    @staticmethod
    def create_metadata(session, metadata_type, metadata, all_or_none=None, permitted_fields=METADATA_INPUTS,
                        **kwargs):
        """
        Adds one or more new metadata components to your organization synchronously.

        Args:
            session (Session): The session returned from the login call
            metadata_type (str): The type of the components, e.g. 'CustomField'.
                                 It is sent as the xsi:type of each component.
            metadata (object): One component as a dict, a list of dicts, or a
                               Table with one component per row. Limit: 10.
                               (For CustomMetadata and CustomApplication only,
                               the limit is 200.)
            all_or_none (bool): Set to true to cause all metadata changes to
                                be rolled back if any records in the call
                                cause failures.
            permitted_fields (dict): The table used to warn about unknown
                                     fields. Pass None to skip the check.

        Returns:
            Table: One row per component, e.g. fullName and success. A
                   component that failed has success 'false' and its
                   errors.statusCode and errors.message filled in.

        Example:
            Metadata.create_metadata(session, 'CustomField', [
                {'fullName': 'Custom_Account1__c.CustomField1__c',
                 'label': 'Test Field1', 'length': 100, 'type': 'Text'}])
        """
        return Metadata._save('createMetadata', session, metadata_type, metadata, all_or_none, permitted_fields,
                              **kwargs)

    @staticmethod
    def update_metadata(session, metadata_type, metadata, all_or_none=None, permitted_fields=METADATA_INPUTS,
                        **kwargs):
        """
        Updates one or more metadata components in your organization
        synchronously. Takes the same arguments as create_metadata().

        Returns:
            Table: One row per component with fullName and success
        """
        return Metadata._save('updateMetadata', session, metadata_type, metadata, all_or_none, permitted_fields,
                              **kwargs)

    @staticmethod
    def upsert_metadata(session, metadata_type, metadata, all_or_none=None, permitted_fields=METADATA_INPUTS,
                        **kwargs):
        """
        Creates or updates one or more metadata components in your organization
        synchronously. Takes the same arguments as create_metadata().

        Returns:
            Table: One row per component with created, fullName and success
        """
        return Metadata._save('upsertMetadata', session, metadata_type, metadata, all_or_none, permitted_fields,
                              **kwargs)

    @staticmethod
    def delete_metadata(session, metadata_type, full_names, all_or_none=None, permitted_fields=METADATA_INPUTS,
                        **kwargs):
        """
        Deletes one or more metadata components from your organization synchronously.

        Args:
            session (Session): The session returned from the login call
            metadata_type (str): The metadata type of the components to delete.
            full_names (array): Array of full names of the components to delete.
                                Limit: 10. You must submit arrays of only one
                                type of component.
            all_or_none (bool): Set to true to cause all metadata changes to
                                be rolled back if any records in the call
                                cause failures.

        Returns:
            Table: One row per full name with fullName and success
        """
        validate_type(metadata_type, permitted_fields)
        arguments = [('type', Scalar(metadata_type)), ('fullNames', build(Metadata._full_names(full_names)))]
        headers = Metadata.get_soap_headers(kwargs.pop('client_name', None), all_or_none)

        return Util.call(session, 'deleteMetadata', arguments, headers=headers, **kwargs)

    @staticmethod
    def read_metadata(session, metadata_type, full_names, permitted_fields=METADATA_INPUTS, **kwargs):
        """
        Returns one or more metadata components from your organization synchronously.

        Args:
            session (Session): The session returned from the login call
            metadata_type (str): The metadata type of the components to read,
                                 e.g. 'CustomObject'
            full_names (array): The full names of the components to read

        Returns:
            array: One nested dict per component. The dicts can be changed and
                   sent back with create_metadata() or update_metadata().
        """
        validate_type(metadata_type, permitted_fields)
        arguments = [('type', Scalar(metadata_type)), ('fullNames', build(Metadata._full_names(full_names)))]
        headers = Metadata.get_soap_headers(kwargs.pop('client_name', None))

        return Util.call(session, 'readMetadata', arguments, headers=headers, **kwargs)

    @staticmethod
    def rename_metadata(session, metadata_type, old_full_name, new_full_name, **kwargs):
        """
        Renames a metadata component in your organization synchronously.

        Args:
            session (Session): The session returned from the login call
            metadata_type (str): The metadata type of the component
            old_full_name (str): The current full name of the component
            new_full_name (str): The new full name for the component

        Returns:
            Table: One row with fullName and success
        """
        arguments = [('type', Scalar(metadata_type)),
                     ('oldFullName', Scalar(old_full_name)),
                     ('newFullName', Scalar(new_full_name))]
        headers = Metadata.get_soap_headers(kwargs.pop('client_name', None))

        return Util.call(session, 'renameMetadata', arguments, headers=headers, **kwargs)

    @staticmethod
    def list_metadata(session, queries, as_of_version=None, permitted_fields=METADATA_INPUTS, **kwargs):
        """
        Retrieves property information about metadata components in your
        organization.

        Args:
            session (Session): The session returned from the login call
            queries (array): One query dict or a list of them, each with type
                             and optionally folder. Limit: 3 queries. See
                             get_list_metadata_query().
            as_of_version (str): The API version for the metadata listing
                                 request, e.g. '50.0' or 50.0. Defaults to
                                 the org's version.

        Returns:
            Table: One row per component found. Properties a component doesn't
                   have are None.
        """
        if isinstance(queries, dict):
            queries = [queries]

        arguments = [('queries', build(queries, type_tag='ListMetadataQuery', permitted_fields=permitted_fields))]

        if as_of_version is not None:
            arguments.append(('asOfVersion', build(Metadata._api_version(as_of_version))))

        headers = Metadata.get_soap_headers(kwargs.pop('client_name', None))

        return Util.call(session, 'listMetadata', arguments, headers=headers, **kwargs)

    @staticmethod
    def describe_metadata(session, as_of_version=None, **kwargs):
        """
        This call retrieves the metadata which describes your organization.
        This information includes Apex classes and triggers, custom objects,
        custom fields on standard objects, tab sets that define an app, and
        many other components.

        Args:
            session (Session): The session returned from the login call
            as_of_version (str): The API version to describe. Defaults to the
                                 session's api_version.

        Returns:
            dict: The organization details, with metadataObjects as a Table
        """
        if as_of_version is None:
            as_of_version = session.api_version

        headers = Metadata.get_soap_headers(kwargs.pop('client_name', None))

        return Util.call(session, 'describeMetadata', [('asOfVersion', build(as_of_version))], headers=headers,
                         **kwargs)

    @staticmethod
    def describe_value_type(session, value_type, **kwargs):
        """
        Retrieves the metadata describing a given metadata type (value type).

        Args:
            session (Session): The session returned from the login call
            value_type (str): The type to describe, e.g. 'CustomObject'. The
                              metadata namespace is added if it isn't given.

        Returns:
            dict: The description of the value type
        """
        if not value_type.startswith('{'):
            value_type = '{' + metadataxml.METADATA_NAMESPACE + '}' + value_type

        headers = Metadata.get_soap_headers(kwargs.pop('client_name', None))

        return Util.call(session, 'describeValueType', [('type', Scalar(value_type))], headers=headers, **kwargs)

    @staticmethod
    def retrieve(session, retrieve_request, **kwargs):
        """
        This returns the async result of a retrieve request that can then be
        used to check the retrieve status with check_retrieve_status().

        Args:
            session (Session): The session returned from the login call
            retrieve_request (dict): The request settings which can be created
                                     using the get_retrieve_request() method

        Returns:
            dict: The async result, including the id to poll with
        """
        arguments = [('retrieveRequest', build(retrieve_request, type_tag='RetrieveRequest'))]
        headers = Metadata.get_soap_headers(kwargs.pop('client_name', None))

        return Util.call(session, 'retrieve', arguments, headers=headers, **kwargs)

    @staticmethod
    def check_retrieve_status(session, async_process_id, include_zip=True, filename='package.zip', **kwargs):
        """
        This checks the status of the retrieve request. When the retrieve is
        done and succeeded and include_zip is true, the zip file in the
        response is saved to filename. Call this until done is 'true'.

        Args:
            session (Session): The session returned from the login call
            async_process_id (str): Required. The id returned by retrieve()
            include_zip (bool): Whether to include the zip file in the result.
                                Set to false to check the status without
                                downloading the file.
            filename (str): Where to save the zip file. Must end with .zip.

        Returns:
            dict: The retrieve result without the zipFile, and with
                  fileProperties and messages as Tables
        """
        Util.validate_zip_filename(filename)

        arguments = [('asyncProcessId', Scalar(async_process_id)), ('includeZip', build(include_zip))]
        headers = Metadata.get_soap_headers(kwargs.pop('client_name', None))

        summary = Util.call(session, 'checkRetrieveStatus', arguments, headers=headers, **kwargs)
        zip_file = summary.pop('zipFile', None)

        if include_zip and zip_file and metadataresponse.is_complete(summary):
            metadataresponse.persist_archive(zip_file, filename)

        return summary

    @staticmethod
    def deploy(session, zip_file, deploy_options=None, debug_categories=None, **kwargs):
        """
        Uses file representations of components to create, update, or delete those
        components in a Salesforce org.

        Args:
            session (Session): The session returned from the login call
            zip_file (str): The path of the .zip package to deploy. It is
                            base64 encoded before it is sent.
            deploy_options (dict): Options for determining which packages or
                                   files are deployed, see get_deploy_options()
            debug_categories (dict): Log categories with their associated log
                                     levels for the debug log output

        Returns:
            dict: The async result, including the id to poll with
                  check_deploy_status()
        """
        Util.validate_zip_filename(zip_file)

        with open(zip_file, 'rb') as package:
            encoded_zip = base64.b64encode(package.read()).decode('ascii')

        arguments = [('ZipFile', Scalar(encoded_zip)), ('DeployOptions', build(deploy_options or {}))]
        headers = Metadata.get_soap_headers(kwargs.pop('client_name', None), debug_categories=debug_categories)

        return Util.call(session, 'deploy', arguments, headers=headers, **kwargs)

    @staticmethod
    def check_deploy_status(session, async_process_id, include_details=True, filename=None, **kwargs):
        """
        This method checks the status of the requested deploy

        Args:
            session (Session): The session returned from the login call
            async_process_id (str): The Id returned from the deploy request
            include_details (bool): Sets the DeployResult object to include
                                    DeployDetails information.
            filename (str): If the deploy used perform_retrieve, the retrieved
                            zip file is saved here once the deploy succeeds.
                            Must end with .zip.

        Returns:
            dict: The deploy result
        """
        if filename is not None:
            Util.validate_zip_filename(filename)

        arguments = [('asyncProcessId', Scalar(async_process_id)), ('includeDetails', build(include_details))]
        headers = Metadata.get_soap_headers(kwargs.pop('client_name', None))

        summary = Util.call(session, 'checkDeployStatus', arguments, headers=headers, **kwargs)
        details = summary.get('details')

        if isinstance(details, dict) and isinstance(details.get('retrieveResult'), dict):
            zip_file = details['retrieveResult'].pop('zipFile', None)

            if filename is not None and zip_file and metadataresponse.is_complete(summary):
                metadataresponse.persist_archive(zip_file, filename)

        return summary

    @staticmethod
    def cancel_deploy(session, async_process_id, **kwargs):
        """
        This method cancels the deploy

        Args:
            session (Session): The session returned from the login call
            async_process_id (str): The Id returned from the deploy request

        Returns:
            dict: The cancel result with done and id
        """
        headers = Metadata.get_soap_headers(kwargs.pop('client_name', None))

        return Util.call(session, 'cancelDeploy', [('String', Scalar(async_process_id))], headers=headers, **kwargs)

    @staticmethod
    def deploy_recent_validation(session, validation_id, debug_categories=None, **kwargs):
        """
        Deploys a recently validated component set without running Apex tests.

        Args:
            session (Session): The session returned from the login call
            validation_id (str): The id of a deploy that was run with
                                 check_only set to true
            debug_categories (dict): Log categories with their associated log
                                     levels

        Returns:
            str: The id of the new deploy, for check_deploy_status()
        """
        headers = Metadata.get_soap_headers(kwargs.pop('client_name', None), debug_categories=debug_categories)

        return Util.call(session, 'deployRecentValidation', [('validationId', Scalar(validation_id))],
                         headers=headers, **kwargs)
