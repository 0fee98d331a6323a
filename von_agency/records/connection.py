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



from enum import Enum

from von_agency.models import AgentEndpoint, ConnectionAlias
from von_agency.records.base import BaseRecord


class ConnectionState(Enum):
    INVITED = 'Invited'
    NEGOTIATING = 'Negotiating'
    CONNECTED = 'Connected'


class ConnectionRecord(BaseRecord):
    """
    Connection with a peer. The inviter's record starts Invited, the invitee's Negotiating; both end Connected.
    The connection_id is shared with the peer; the record id is local.
    """

    RECORD_TYPE = 'connection'
    STATE = ConnectionState
    TRANSITIONS = {
        None: {ConnectionState.INVITED, ConnectionState.NEGOTIATING},
        ConnectionState.INVITED: {ConnectionState.NEGOTIATING},
        ConnectionState.NEGOTIATING: {ConnectionState.CONNECTED}
    }
    VALUES = ('connection_id', 'my_did', 'my_key', 'their_did', 'their_key', 'endpoint', 'my_alias', 'their_alias')
    TAG_NAMES = ('connection_id', 'my_key', 'their_key')

    def __init__(
            self,
            ident: str = None,
            state: ConnectionState = None,
            connection_id: str = None,
            my_did: str = None,
            my_key: str = None,
            their_did: str = None,
            their_key: str = None,
            endpoint: dict = None,
            my_alias: dict = None,
            their_alias: dict = None) -> None:
        super().__init__(ident, state)
        self.connection_id = connection_id
        self.my_did = my_did
        self.my_key = my_key
        self.their_did = their_did
        self.their_key = their_key
        self.endpoint = endpoint
        self.my_alias = my_alias
        self.their_alias = their_alias

    @property
    def their_endpoint(self) -> AgentEndpoint:
        """
        Accessor for peer endpoint.

        :return: peer endpoint, None if not yet known
        """

        return AgentEndpoint.from_dict(self.endpoint) if self.endpoint else None

    @property
    def alias(self) -> ConnectionAlias:
        """
        Accessor for local alias of peer.

        :return: peer alias
        """

        return ConnectionAlias.from_dict(self.their_alias)
