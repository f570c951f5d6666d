from setuptools import setup

with open("README.md", "r") as fh:
    long_description = fh.read()

setup(
    name='pysalesforcemetadata',
    version='1.0.0',
    author='Glen Barger',
    author_email='gbarger@gmail.com',
    description='Python module to call the Salesforce Metadata API',
    long_description=long_description,
    long_description_content_type="text/markdown",
    url='https://github.com/gbarger/PySalesforce',
    py_modules=[
        'pysalesforcemetadata',
        'metadataerrors',
        'metadatainputs',
        'metadataresponse',
        'metadatatree',
        'metadataxml',
        'webservice'
        ],
    install_requires=[
        'lxml',
        'requests',
        'urllib3',
        'zeep'
    ],
    extras_require={
        'test': [
            'pytest'
        ]
    })
