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



from von_agency.models import AgentEndpoint, ConnectionAlias
from von_agency.records.base import BaseRecord


class ProvisioningRecord(BaseRecord):
    """
    The agent's own particulars: endpoint, owner, master secret, and issuer DID. One per wallet.
    """

    RECORD_TYPE = 'provisioning'
    UNIQUE_ID = 'singleton'
    VALUES = ('endpoint', 'owner', 'master_secret_id', 'issuer_did', 'issuer_verkey')

    def __init__(
            self,
            ident: str = None,
            state: None = None,
            endpoint: dict = None,
            owner: dict = None,
            master_secret_id: str = None,
            issuer_did: str = None,
            issuer_verkey: str = None) -> None:
        super().__init__(ident or ProvisioningRecord.UNIQUE_ID, state)
        self.endpoint = endpoint
        self.owner = owner
        self.master_secret_id = master_secret_id
        self.issuer_did = issuer_did
        self.issuer_verkey = issuer_verkey

    @property
    def agent_endpoint(self) -> AgentEndpoint:
        """
        Accessor for agent endpoint.

        :return: agent endpoint
        """

        return AgentEndpoint.from_dict(self.endpoint)

    @property
    def agent_owner(self) -> ConnectionAlias:
        """
        Accessor for agent owner particulars.

        :return: agent owner
        """

        return ConnectionAlias.from_dict(self.owner)
