"""
All the structures coming from/to the Redfish API.

Everything marked "raw" is a plain unwrapped unprocessed data as JSON-decoded
from the Redfish API, usually as retrieved in the fetching API calls.
Only the keys the client reads are declared; the rest is not type-checked.

These definitions are only used for type-checking of the few fields
the framework itself relies upon (links, collections, errors).
The typed resources are built from the raw bodies in `redsync.models`.
"""
from typing import List

from typing_extensions import TypedDict

# The link key of the OData envelope.
ODATA_ID = '@odata.id'


# TypedDict cannot have keys with dots in the class syntax, hence the functional syntax.
RawLink = TypedDict('RawLink', {
    '@odata.id': str,
}, total=False)

RawCollection = TypedDict('RawCollection', {
    '@odata.context': str,
    '@odata.id': str,
    '@odata.type': str,
    'Name': str,
    'Members': List[RawLink],
    'Members@odata.count': int,
}, total=False)


class RawMessage(TypedDict, total=False):
    MessageId: str
    Message: str
    Severity: str
    Resolution: str


# https://www.dmtf.org/sites/default/files/standards/documents/DSP0266_1.11.0.html#error-responses
RawErrorDetails = TypedDict('RawErrorDetails', {
    'code': str,
    'message': str,
    '@Message.ExtendedInfo': List[RawMessage],
}, total=False)


class RawError(TypedDict, total=False):
    error: RawErrorDetails
