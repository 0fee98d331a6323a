"""
Copyright 2017-2019 Government of Canada - Public Services and Procurement Canada - buyandsell.gc.ca

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at

http://www.apache.org/licenses/LICENSE-2.0

Unless required by applicable law or agreed to in writing, software
distributed under the License is distributed on an "AS IS" BASIS,
WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
See the License for the specific language governing permissions and
limitations under the License.
"""



import json
import logging

from von_agency.error import BadMessage
from von_agency.messages import types
from von_agency.util import b64_decode, b64_encode


LOGGER = logging.getLogger(__name__)


class ContentMessage:
    """
    Base class for decrypted protocol messages: a type URI (on the wire at '@type') plus fields.

    Subclasses set TYPE, FIELDS (wire keys, in order, besides '@type') and REQUIRED (fields that must be
    present and non-empty for the message to be well-formed).
    """

    TYPE = None
    FIELDS = ()
    REQUIRED = ()

    @property
    def type(self) -> str:
        """
        Accessor for message type URI.

        :return: message type URI
        """

        return self.TYPE

    def to_dict(self) -> dict:
        """
        Return dict representation, as on the wire.

        :return: dict representation
        """

        rv = {'@type': self.type}
        rv.update({k: getattr(self, k) for k in self.FIELDS if getattr(self, k) is not None})
        return rv

    def to_json(self) -> str:
        """
        Return json representation, as on the wire.

        :return: json representation
        """

        return json.dumps(self.to_dict())

    @classmethod
    def from_dict(cls, payload: dict) -> 'ContentMessage':
        """
        Build message from its dict representation. Raise BadMessage on missing required field.

        :param payload: dict representation
        :return: message
        """

        missing = [k for k in cls.REQUIRED if payload.get(k) in (None, '')]
        if missing:
            LOGGER.debug('ContentMessage.from_dict <!< %s message missing %s', cls.__name__, missing)
            raise BadMessage('{} message missing {}'.format(cls.__name__, ', '.join(missing)))
        return cls(**{k: payload.get(k) for k in cls.FIELDS})

    def __eq__(self, other: 'ContentMessage') -> bool:
        return isinstance(other, ContentMessage) and self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        """
        Return representation, eliding field values: they may carry credential content.

        :return: representation
        """

        return '{}({})'.format(type(self).__name__, ', '.join(k for k in self.FIELDS if getattr(self, k) is not None))


class UnknownMessage(ContentMessage):
    """
    Message of a type that this agent does not recognize. It is never processed, only rejected.
    """

    def __init__(self, msg_type: str, payload: dict = None):
        self._type = msg_type
        self.payload = {k: v for k, v in (payload or {}).items() if k != '@type'}

    @property
    def type(self) -> str:
        return self._type

    def to_dict(self) -> dict:
        return {'@type': self._type, **self.payload}


class InvitationMessage(ContentMessage):
    """
    Connection invitation, for transmission out of band: there is no shared key yet to pack it with.
    """

    TYPE = types.CONNECTION_INVITATION
    FIELDS = ('connection_id', 'connection_key', 'endpoint', 'name', 'image_url')
    REQUIRED = ('connection_id', 'connection_key', 'endpoint')

    def __init__(
            self,
            connection_id: str,
            connection_key: str,
            endpoint: dict,
            name: str = None,
            image_url: str = None):
        """
        Initialize invitation.

        :param connection_id: connection identifier that both parties share
        :param connection_key: inviter's verification key for the connection
        :param endpoint: inviter's endpoint dict (uri, verkey)
        :param name: inviter's name for invitee to display
        :param image_url: inviter's image URL for invitee to display
        """

        self.connection_id = connection_id
        self.connection_key = connection_key
        self.endpoint = endpoint
        self.name = name
        self.image_url = image_url

    def encode(self) -> str:
        """
        Return URL-safe base64 encoding of invitation, for use in a link.

        :return: encoded invitation
        """

        return b64_encode(self.to_json())

    @staticmethod
    def decode(token: str) -> 'InvitationMessage':
        """
        Decode invitation from URL-safe base64. Raise BadMessage if it is not an invitation.

        :param token: encoded invitation
        :return: invitation
        """

        try:
            rv = decode(b64_decode(token).decode('utf-8'))
        except (ValueError, UnicodeDecodeError):
            LOGGER.debug('InvitationMessage.decode <!< Bad invitation encoding')
            raise BadMessage('Bad invitation encoding')
        if not isinstance(rv, InvitationMessage):
            LOGGER.debug('InvitationMessage.decode <!< Not an invitation: %s', rv.type)
            raise BadMessage('Not an invitation: {}'.format(rv.type))
        return rv


class ConnectionRequest(ContentMessage):
    TYPE = types.CONNECTION_REQUEST
    FIELDS = ('connection_id', 'did', 'verkey', 'endpoint', 'name', 'image_url')
    REQUIRED = ('connection_id', 'did', 'verkey', 'endpoint')

    def __init__(
            self,
            connection_id: str,
            did: str,
            verkey: str,
            endpoint: dict,
            name: str = None,
            image_url: str = None):
        self.connection_id = connection_id
        self.did = did
        self.verkey = verkey
        self.endpoint = endpoint
        self.name = name
        self.image_url = image_url


class ConnectionResponse(ContentMessage):
    TYPE = types.CONNECTION_RESPONSE
    FIELDS = ('connection_id', 'did', 'verkey', 'endpoint')
    REQUIRED = ('connection_id', 'did', 'verkey', 'endpoint')

    def __init__(self, connection_id: str, did: str, verkey: str, endpoint: dict):
        self.connection_id = connection_id
        self.did = did
        self.verkey = verkey
        self.endpoint = endpoint


class ConnectionAcknowledgement(ContentMessage):
    TYPE = types.CONNECTION_ACKNOWLEDGEMENT
    FIELDS = ('connection_id',)
    REQUIRED = ('connection_id',)

    def __init__(self, connection_id: str):
        self.connection_id = connection_id


class CredentialOffer(ContentMessage):
    """
    Credential offer; thread_id is the issuer's credential record identifier, and the preview
    maps attribute names to the raw values on offer.
    """

    TYPE = types.CREDENTIAL_OFFER
    FIELDS = ('thread_id', 'offer_json', 'preview')
    REQUIRED = ('thread_id', 'offer_json')

    def __init__(self, thread_id: str, offer_json: str, preview: dict = None):
        self.thread_id = thread_id
        self.offer_json = offer_json
        self.preview = preview


class CredentialRequest(ContentMessage):
    TYPE = types.CREDENTIAL_REQUEST
    FIELDS = ('thread_id', 'request_json')
    REQUIRED = ('thread_id', 'request_json')

    def __init__(self, thread_id: str, request_json: str):
        self.thread_id = thread_id
        self.request_json = request_json


class Credential(ContentMessage):
    TYPE = types.CREDENTIAL
    FIELDS = ('thread_id', 'credential_json')
    REQUIRED = ('thread_id', 'credential_json')

    def __init__(self, thread_id: str, credential_json: str):
        self.thread_id = thread_id
        self.credential_json = credential_json


class ProofRequestMessage(ContentMessage):
    """
    Proof request; thread_id is the requester's proof request record identifier.
    """

    TYPE = types.PROOF_REQUEST
    FIELDS = ('thread_id', 'proof_request_json')
    REQUIRED = ('thread_id', 'proof_request_json')

    def __init__(self, thread_id: str, proof_request_json: str):
        self.thread_id = thread_id
        self.proof_request_json = proof_request_json


class ProofMessage(ContentMessage):
    """
    Proof: content carries the serialized proof json.
    """

    TYPE = types.PROOF
    FIELDS = ('content', 'thread_id')
    REQUIRED = ('content', 'thread_id')

    def __init__(self, content: str, thread_id: str):
        self.content = content
        self.thread_id = thread_id


MESSAGE_TYPES = {
    cls.TYPE: cls for cls in (
        InvitationMessage,
        ConnectionRequest,
        ConnectionResponse,
        ConnectionAcknowledgement,
        CredentialOffer,
        CredentialRequest,
        Credential,
        ProofRequestMessage,
        ProofMessage)
}


def decode(message_json: str) -> ContentMessage:
    """
    Decode content message from json, selecting its class by '@type'. Return UnknownMessage for
    a type outside MESSAGE_TYPES. Raise BadMessage on malformed json or missing '@type'.

    :param message_json: json content message
    :return: content message
    """

    try:
        payload = json.loads(message_json)
    except (TypeError, ValueError):
        LOGGER.debug('decode <!< Content message is not json')
        raise BadMessage('Content message is not json')

    if not isinstance(payload, dict) or not isinstance(payload.get('@type'), str):
        LOGGER.debug('decode <!< Content message has no @type')
        raise BadMessage('Content message has no @type')

    msg_type = payload['@type']
    cls = MESSAGE_TYPES.get(msg_type)
    if cls is None:
        LOGGER.info('Decoded message of unknown type %s', msg_type)
        return UnknownMessage(msg_type, payload)
    return cls.from_dict(payload)
