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



from von_agency.error import BadMessage


class AgentEndpoint:
    """
    Agent endpoint: URI to post envelopes to, with the verification key (and optionally DID) that it serves.
    """

    def __init__(self, uri: str, verkey: str = None, did: str = None) -> None:
        """
        Initialize endpoint.

        :param uri: endpoint URI
        :param verkey: endpoint verification key
        :param did: endpoint DID
        """

        self._uri = uri
        self._verkey = verkey
        self._did = did

    @property
    def uri(self) -> str:
        """
        Accessor for URI.

        :return: URI
        """

        return self._uri

    @property
    def verkey(self) -> str:
        """
        Accessor for verification key.

        :return: verification key
        """

        return self._verkey

    @property
    def did(self) -> str:
        """
        Accessor for DID.

        :return: DID
        """

        return self._did

    def to_dict(self) -> dict:
        """
        Return dict representation, omitting absent values.

        :return: dict representation
        """

        return {k: v for k, v in (('uri', self.uri), ('verkey', self.verkey), ('did', self.did)) if v is not None}

    @staticmethod
    def from_dict(endpoint: dict) -> 'AgentEndpoint':
        """
        Build endpoint from dict representation. Raise BadMessage if it has no URI.

        :param endpoint: dict representation
        :return: endpoint
        """

        if not isinstance(endpoint, dict) or not endpoint.get('uri'):
            raise BadMessage('Endpoint {} has no URI'.format(endpoint))
        return AgentEndpoint(endpoint['uri'], endpoint.get('verkey'), endpoint.get('did'))

    def __eq__(self, other: 'AgentEndpoint') -> bool:
        return isinstance(other, AgentEndpoint) and self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        return 'AgentEndpoint({}, {}, {})'.format(self.uri, self.verkey, self.did)


class ConnectionAlias:
    """
    Display particulars of a party: for an agent's owner, or for either side of a connection.
    """

    def __init__(self, name: str = None, image_url: str = None) -> None:
        self.name = name
        self.image_url = image_url

    def to_dict(self) -> dict:
        return {k: v for k, v in (('name', self.name), ('image_url', self.image_url)) if v is not None}

    @staticmethod
    def from_dict(alias: dict) -> 'ConnectionAlias':
        return ConnectionAlias((alias or {}).get('name'), (alias or {}).get('image_url'))

    def __eq__(self, other: 'ConnectionAlias') -> bool:
        return isinstance(other, ConnectionAlias) and self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        return 'ConnectionAlias({}, {})'.format(self.name, self.image_url)
