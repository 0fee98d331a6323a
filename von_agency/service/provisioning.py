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



import logging

from uuid import uuid4

from von_agency.error import AbsentRecord
from von_agency.models import AgentEndpoint, ConnectionAlias
from von_agency.records import ProvisioningRecord
from von_agency.wallet import RecordStore, Wallet


LOGGER = logging.getLogger(__name__)


class ProvisioningService:
    """
    Keeps the agent's own particulars: endpoint and its key, owner, master secret label, issuer DID.
    """

    def __init__(self, wallet: Wallet, store: RecordStore) -> None:
        self._wallet = wallet
        self._store = store

    async def provision(
            self,
            endpoint_uri: str,
            owner: ConnectionAlias = None,
            master_secret_id: str = None,
            issuer_seed: str = None) -> ProvisioningRecord:
        """
        Provision agent: create endpoint key, master secret and issuer DID, and store them.
        Return existing provisioning record if agent is already provisioned.

        :param endpoint_uri: URI of agent endpoint, for peers to post envelopes to
        :param owner: agent owner particulars, to present in invitations
        :param master_secret_id: label for master (link) secret (default generated)
        :param issuer_seed: seed for issuer DID (default random); anchor on the ledger requires a
            DID that a trustee has written there
        :return: provisioning record
        """

        LOGGER.debug('ProvisioningService.provision >>> endpoint_uri: %s, owner: %s', endpoint_uri, owner)

        rv = await self._store.get(ProvisioningRecord, ProvisioningRecord.UNIQUE_ID)
        if rv:
            LOGGER.info('Wallet %s already provisioned: keeping endpoint %s', self._wallet.name, rv.endpoint)
            LOGGER.debug('ProvisioningService.provision <<< %s', rv)
            return rv

        AgentEndpoint.from_dict({'uri': endpoint_uri})  # raises BadMessage on no URI
        endpoint_verkey = await self._wallet.create_signing_key()
        master_secret_id = await self._wallet.create_link_secret(master_secret_id or str(uuid4()))
        issuer = await self._wallet.create_local_did(issuer_seed)

        rv = ProvisioningRecord(
            endpoint=AgentEndpoint(endpoint_uri, endpoint_verkey).to_dict(),
            owner=(owner or ConnectionAlias()).to_dict(),
            master_secret_id=master_secret_id,
            issuer_did=issuer.did,
            issuer_verkey=issuer.verkey)
        await self._store.add(rv)

        LOGGER.info(
            'Provisioned wallet %s with endpoint %s, issuer DID %s',
            self._wallet.name,
            endpoint_uri,
            issuer.did)
        LOGGER.debug('ProvisioningService.provision <<< %s', rv)
        return rv

    async def get(self) -> ProvisioningRecord:
        """
        Return provisioning record. Raise AbsentRecord if agent is not provisioned.

        :return: provisioning record
        """

        rv = await self._store.get(ProvisioningRecord, ProvisioningRecord.UNIQUE_ID)
        if rv is None:
            LOGGER.debug('ProvisioningService.get <!< Wallet %s is not provisioned', self._wallet.name)
            raise AbsentRecord('Wallet {} is not provisioned'.format(self._wallet.name))
        return rv

    async def update_endpoint(self, endpoint_uri: str) -> ProvisioningRecord:
        """
        Move agent endpoint to a new URI, keeping its key. Existing connections keep the endpoint
        they learned at connection time.

        :param endpoint_uri: new endpoint URI
        :return: updated provisioning record
        """

        LOGGER.debug('ProvisioningService.update_endpoint >>> endpoint_uri: %s', endpoint_uri)

        rv = await self.get()
        old = rv.agent_endpoint
        rv.endpoint = AgentEndpoint.from_dict({**old.to_dict(), 'uri': endpoint_uri}).to_dict()
        await self._store.update(rv)

        LOGGER.debug('ProvisioningService.update_endpoint <<< %s', rv)
        return rv
