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

from base64 import b64decode, b64encode
from binascii import Error as BinasciiError

from von_agency.error import BadMessage


LOGGER = logging.getLogger(__name__)


class EnvelopeMessage:
    """
    Transport unit: message type URI (for routing) plus opaque ciphertext that packs the content message.
    """

    def __init__(self, msg_type: str, content: bytes) -> None:
        """
        Initialize envelope.

        :param msg_type: message type URI of packed content message
        :param content: ciphertext
        """

        self._type = msg_type
        self._content = content

    @property
    def type(self) -> str:
        """
        Accessor for message type URI.

        :return: message type URI
        """

        return self._type

    @property
    def content(self) -> bytes:
        """
        Accessor for ciphertext.

        :return: ciphertext
        """

        return self._content

    def to_bytes(self) -> bytes:
        """
        Serialize for HTTP body.

        :return: serialized envelope
        """

        return json.dumps({
            'type': self.type,
            'content': b64encode(self.content).decode('ascii')
        }).encode('utf-8')

    @staticmethod
    def from_bytes(payload: bytes) -> 'EnvelopeMessage':
        """
        Deserialize from HTTP body. Raise BadMessage on malformed payload.

        :param payload: serialized envelope
        :return: envelope
        """

        try:
            envelope = json.loads(payload.decode('utf-8') if isinstance(payload, bytes) else payload)
            rv = EnvelopeMessage(envelope['type'], b64decode(envelope['content'], validate=True))
        except (AttributeError, BinasciiError, KeyError, TypeError, ValueError):
            LOGGER.debug('EnvelopeMessage.from_bytes <!< Malformed envelope')
            raise BadMessage('Malformed envelope')

        return rv

    def __eq__(self, other: 'EnvelopeMessage') -> bool:
        return isinstance(other, EnvelopeMessage) and self.type == other.type and self.content == other.content

    def __repr__(self) -> str:
        return 'EnvelopeMessage({}, [{} bytes])'.format(self.type, len(self.content or b''))
