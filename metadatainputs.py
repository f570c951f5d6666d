#!/usr/bin/python3

"""
Default table of metadata types and the elements that may be submitted for
each of them in a create, update or upsert request. This is only used for
advisory validation; Salesforce remains the authority on what is accepted.

A list of types can be found here: https://developer.salesforce.com/docs/
atlas.en-us.api_meta.meta/api_meta/meta_types_list.htm
"""

METADATA_INPUTS = {
    'CustomField': (
        'fullName', 'businessOwnerGroup', 'businessOwnerUser', 'businessStatus',
        'caseSensitive', 'complianceGroup', 'customDataType', 'defaultValue',
        'deleteConstraint', 'deprecated', 'description', 'displayFormat',
        'encrypted', 'escapeMarkup', 'externalDeveloperName', 'externalId',
        'fieldManageability', 'formula', 'formulaTreatBlanksAs',
        'inlineHelpText', 'isConvertLeadDisabled', 'isFilteringDisabled',
        'isNameField', 'isSortingDisabled', 'label', 'length', 'lookupFilter',
        'maskChar', 'maskType', 'metadataRelationshipControllingField',
        'picklist', 'populateExistingRows', 'precision', 'referenceTargetField',
        'referenceTo', 'relationshipLabel', 'relationshipName',
        'relationshipOrder', 'reparentableMasterDetail', 'required',
        'restrictedAdminField', 'scale', 'securityClassification',
        'startingNumber', 'stripMarkup', 'summarizedField',
        'summaryFilterItems', 'summaryForeignKey', 'summaryOperation',
        'trackFeedHistory', 'trackHistory', 'trackTrending', 'type', 'unique',
        'valueSet', 'visibleLines', 'writeRequiresMasterRead'),
    'CustomObject': (
        'fullName', 'actionOverrides', 'allowInChatterGroups',
        'businessProcesses', 'compactLayoutAssignment', 'compactLayouts',
        'customHelp', 'customHelpPage', 'customSettingsType',
        'deploymentStatus', 'deprecated', 'description', 'enableActivities',
        'enableBulkApi', 'enableDivisions', 'enableEnhancedLookup',
        'enableFeeds', 'enableHistory', 'enableLicensing', 'enableReports',
        'enableSearch', 'enableSharing', 'enableStreamingApi',
        'externalDataSource', 'externalName', 'externalRepository',
        'externalSharingModel', 'fieldSets', 'fields', 'gender',
        'historyRetentionPolicy', 'household', 'indexes', 'label',
        'listViews', 'nameField', 'pluralLabel', 'recordTypeTrackFeedHistory',
        'recordTypeTrackHistory', 'recordTypes', 'searchLayouts',
        'sharingModel', 'sharingReasons', 'sharingRecalculations',
        'startsWith', 'validationRules', 'visibility', 'webLinks'),
    'CustomTab': (
        'fullName', 'auraComponent', 'customObject', 'description',
        'flexiPage', 'frameHeight', 'hasSidebar', 'icon', 'label',
        'mobileReady', 'motif', 'page', 'scontrol', 'splashPageLink', 'url',
        'urlEncodingKey'),
    'ApexClass': (
        'fullName', 'apiVersion', 'content', 'packageVersions', 'status'),
    'ApexTrigger': (
        'fullName', 'apiVersion', 'content', 'packageVersions', 'status'),
    'ApexPage': (
        'fullName', 'apiVersion', 'availableInTouch', 'confirmationTokenRequired',
        'content', 'description', 'label', 'packageVersions'),
    'ValidationRule': (
        'fullName', 'active', 'description', 'errorConditionFormula',
        'errorDisplayField', 'errorMessage'),
    'RemoteSiteSetting': (
        'fullName', 'description', 'disableProtocolSecurity', 'isActive',
        'url'),
    'CustomLabel': (
        'fullName', 'categories', 'language', 'protected', 'shortDescription',
        'value'),
    'Profile': (
        'fullName', 'applicationVisibilities', 'categoryGroupVisibilities',
        'classAccesses', 'custom', 'customMetadataTypeAccesses',
        'customPermissions', 'customSettingAccesses', 'description',
        'externalDataSourceAccesses', 'fieldPermissions', 'flowAccesses',
        'layoutAssignments', 'loginHours', 'loginIpRanges',
        'objectPermissions', 'pageAccesses', 'profileActionOverrides',
        'recordTypeVisibilities', 'tabVisibilities', 'userLicense',
        'userPermissions'),
    'PermissionSet': (
        'fullName', 'applicationVisibilities', 'classAccesses',
        'customMetadataTypeAccesses', 'customPermissions',
        'customSettingAccesses', 'description', 'externalDataSourceAccesses',
        'fieldPermissions', 'flowAccesses', 'hasActivationRequired', 'label',
        'license', 'objectPermissions', 'pageAccesses',
        'recordTypeVisibilities', 'tabSettings', 'userPermissions'),
    'ListMetadataQuery': ('folder', 'type'),
    'RetrieveRequest': (
        'apiVersion', 'packageNames', 'singlePackage', 'specificFiles',
        'unpackaged'),
    'Package': (
        'fullName', 'apiAccessLevel', 'description', 'namespacePrefix',
        'objectPermissions', 'packageType', 'postInstallClass',
        'setupWeblink', 'types', 'uninstallClass', 'version'),
    'PackageTypeMembers': ('members', 'name'),
    'DeployOptions': (
        'allowMissingFiles', 'autoUpdatePackage', 'checkOnly',
        'ignoreWarnings', 'performRetrieve', 'purgeOnDelete',
        'rollbackOnError', 'runTests', 'singlePackage', 'testLevel'),
}
