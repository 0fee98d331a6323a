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

from typing import Sequence

from von_agency.error import AbsentCredDef, AbsentRecord, AbsentRevReg, BadMessage
from von_agency.ledger import Ledger
from von_agency.messages import Credential, CredentialOffer, CredentialRequest
from von_agency.nodepool import NodePool
from von_agency.records import ConnectionRecord, CredentialRecord, CredentialState, DefinitionRecord
from von_agency.service.base import BaseService
from von_agency.service.provisioning import ProvisioningService
from von_agency.tails import TailsCache
from von_agency.transport import EnvelopeCodec, Router
from von_agency.util import cred_attr_value, ok_rev_reg_id, raw, rev_reg_id2cred_def_id
from von_agency.wallet import RecordStore, Wallet


LOGGER = logging.getLogger(__name__)


class CredentialService(BaseService):
    """
    Credential issuance protocol, issuer and holder sides: offer, request, issue, store; plus revocation.

    The issuer's credential record identifier is the thread identifier on every message of the exchange;
    the holder finds its own record by connection and thread.
    """

    def __init__(
            self,
            wallet: Wallet,
            store: RecordStore,
            codec: EnvelopeCodec,
            router: Router,
            ledger: Ledger,
            tails: TailsCache,
            provisioning: ProvisioningService) -> None:
        super().__init__(wallet, store, codec, router)
        self._ledger = ledger
        self._tails = tails
        self._provisioning = provisioning

    async def send_offer(
            self,
            connection_id: str,
            schema_id: str,
            attr_values: dict,
            cred_def_id: str = None) -> CredentialRecord:
        """
        Offer credential to peer (issuer), on issuer's credential definition for schema.

        Raise AbsentRecord for no such connection, ProtocolState if it is not Connected, or AbsentCredDef
        if issuer has no credential definition on schema.

        :param connection_id: connection identifier
        :param schema_id: schema identifier
        :param attr_values: dict mapping attribute names to values to issue
        :param cred_def_id: credential definition identifier (default issuer's on schema)
        :return: credential record, Offered
        """

        LOGGER.debug(
            'CredentialService.send_offer >>> connection_id: %s, schema_id: %s, cred_def_id: %s',
            connection_id,
            schema_id,
            cred_def_id)

        connection = await self._connected(connection_id)
        definition = await (
            self.store.get(DefinitionRecord, cred_def_id)
            if cred_def_id
            else self.store.search_one(DefinitionRecord, {'schema_id': schema_id}))
        if definition is None or definition.schema_id != schema_id:
            LOGGER.debug('CredentialService.send_offer <!< No cred def on schema %s in wallet', schema_id)
            raise AbsentCredDef('No cred def {} on schema {} in wallet'.format(cred_def_id or '', schema_id))

        offer_json = await self.wallet.create_cred_offer(definition.cred_def_id)
        rv = CredentialRecord(
            connection_id=connection.connection_id,
            schema_id=schema_id,
            cred_def_id=definition.cred_def_id,
            offer_json=offer_json,
            values={attr: raw(value) for attr, value in attr_values.items()},
            revocable=definition.revocable)
        rv.advance(CredentialState.OFFERED)
        await self.store.add(rv)

        await self._deliver(CredentialOffer(rv.thread_id, offer_json, rv.values), connection, (rv, None))

        LOGGER.debug('CredentialService.send_offer <<< %s', rv)
        return rv

    async def process_offer(self, offer: CredentialOffer, connection: ConnectionRecord) -> CredentialRecord:
        """
        Process credential offer (holder): file it as a credential record in state Offered.
        Redelivery of an offer already on file is a no-op.

        :param offer: credential offer
        :param connection: connection record on which offer arrived
        :return: credential record
        """

        LOGGER.debug('CredentialService.process_offer >>> offer: %s, connection: %s', offer, connection)

        rv = await self._by_thread(connection, offer.thread_id)
        if rv:
            LOGGER.info('Credential offer %s already on file: ignoring redelivery', offer.thread_id)
            LOGGER.debug('CredentialService.process_offer <<< %s', rv)
            return rv

        try:
            offer_data = json.loads(offer.offer_json)
            (schema_id, cred_def_id) = (offer_data['schema_id'], offer_data['cred_def_id'])
        except (KeyError, TypeError, ValueError):
            LOGGER.debug('CredentialService.process_offer <!< Malformed credential offer %s', offer.thread_id)
            raise BadMessage('Malformed credential offer {}'.format(offer.thread_id))

        rv = CredentialRecord(
            connection_id=connection.connection_id,
            thread_id=offer.thread_id,
            schema_id=schema_id,
            cred_def_id=cred_def_id,
            offer_json=offer.offer_json,
            values=offer.preview)
        rv.advance(CredentialState.OFFERED)
        await self.store.add(rv)

        LOGGER.debug('CredentialService.process_offer <<< %s', rv)
        return rv

    async def accept_offer(self, pool: NodePool, credential_id: str, master_secret_id: str = None) -> CredentialRecord:
        """
        Accept credential offer (holder): create credential request on master secret and send it to issuer.

        :param pool: node pool, for credential definition lookup
        :param credential_id: credential record identifier
        :param master_secret_id: master secret label (default as provisioned)
        :return: credential record, Requested
        """

        LOGGER.debug('CredentialService.accept_offer >>> credential_id: %s', credential_id)

        rv = await self.get(credential_id)
        rv.require(CredentialState.OFFERED)
        prior = rv.to_storage()
        connection = await self._connected(rv.connection_id)
        master_secret_id = master_secret_id or (await self._provisioning.get()).master_secret_id

        cd_json = await self._ledger.get_cred_def(pool, rv.cred_def_id)
        (rv.request_json, rv.request_metadata_json) = await self.wallet.create_cred_req(
            connection.my_did,
            rv.offer_json,
            cd_json,
            master_secret_id)
        rv.advance(CredentialState.REQUESTED)
        await self.store.update(rv)

        await self._deliver(CredentialRequest(rv.thread_id, rv.request_json), connection, (rv, prior))

        LOGGER.debug('CredentialService.accept_offer <<< %s', rv)
        return rv

    async def process_credential_request(
            self,
            request: CredentialRequest,
            connection: ConnectionRecord) -> CredentialRecord:
        """
        Process credential request (issuer): move credential record from Offered to Requested.
        Redelivery of the same request is a no-op.

        :param request: credential request
        :param connection: connection record on which request arrived
        :return: credential record
        """

        LOGGER.debug('CredentialService.process_credential_request >>> request: %s', request)

        rv = await self.store.get(CredentialRecord, request.thread_id)
        if rv is None or rv.connection_id != connection.connection_id:
            LOGGER.debug(
                'CredentialService.process_credential_request <!< No offer %s on connection',
                request.thread_id)
            raise AbsentRecord('No credential offer {} on connection {}'.format(
                request.thread_id,
                connection.connection_id))

        if rv.state == CredentialState.REQUESTED and rv.request_json == request.request_json:
            LOGGER.info('Credential request %s already on file: ignoring redelivery', request.thread_id)
        else:
            rv.advance(CredentialState.REQUESTED)
            rv.request_json = request.request_json
            await self.store.update(rv)

        LOGGER.debug('CredentialService.process_credential_request <<< %s', rv)
        return rv

    async def issue_credential(self, pool: NodePool, credential_id: str) -> CredentialRecord:
        """
        Issue credential on request (issuer) and send it to holder. For a revocable credential definition,
        issue into its revocation registry via the tails file and send the resulting delta to the ledger.

        If delivery fails, the record stays Requested with the credential it holds, and the next call sends
        that credential again rather than issuing anew.

        Raise ProtocolState if credential record is not Requested.

        :param pool: node pool
        :param credential_id: credential record identifier
        :return: credential record, Issued
        """

        LOGGER.debug('CredentialService.issue_credential >>> credential_id: %s', credential_id)

        rv = await self.get(credential_id)
        rv.require(CredentialState.REQUESTED)
        connection = await self._connected(rv.connection_id)
        if rv.credential_json:
            LOGGER.info('Credential %s already created on an undelivered issue: sending it again', rv.id)
        else:
            await self._create_credential(pool, rv)
            await self.store.update(rv)

        prior = rv.to_storage()
        rv.advance(CredentialState.ISSUED)
        await self.store.update(rv)

        await self._deliver(Credential(rv.thread_id, rv.credential_json), connection, (rv, prior))

        LOGGER.debug('CredentialService.issue_credential <<< %s', rv)
        return rv

    async def _create_credential(self, pool: NodePool, rv: CredentialRecord) -> None:
        """
        Create credential on request into credential record. For a revocable credential definition, issue into
        its revocation registry via the tails file and send the resulting delta to the ledger.

        :param pool: node pool
        :param rv: credential record, Requested
        """

        values_json = json.dumps({attr: cred_attr_value(value) for attr, value in (rv.values or {}).items()})

        if rv.revocable:
            definition = await self._definition(rv.cred_def_id)
            reader = await self._tails.open_for_read(definition.tails_file)
            (rv.credential_json, rv.cred_rev_id, rr_delta_json) = await self.wallet.create_cred(
                rv.offer_json,
                rv.request_json,
                values_json,
                definition.rev_reg_id,
                reader)
            rv.rev_reg_id = definition.rev_reg_id
            issuer_did = (await self._provisioning.get()).issuer_did
            await self._ledger.send_rev_reg_entry(pool, self.wallet, issuer_did, rv.rev_reg_id, rr_delta_json)
        else:
            (rv.credential_json, _, _) = await self.wallet.create_cred(rv.offer_json, rv.request_json, values_json)

    async def store_credential(
            self,
            pool: NodePool,
            credential: Credential,
            connection: ConnectionRecord) -> CredentialRecord:
        """
        Store issued credential in wallet (holder). Redelivery to a record already Issued is a no-op.
        Raise ProtocolState if credential record is not Requested. Tails files wait until proof creation.

        :param pool: node pool
        :param credential: credential message
        :param connection: connection record on which credential arrived
        :return: credential record, Issued
        """

        LOGGER.debug('CredentialService.store_credential >>> credential: %s', credential)

        rv = await self._by_thread(connection, credential.thread_id)
        if rv is None:
            LOGGER.debug('CredentialService.store_credential <!< No credential thread %s', credential.thread_id)
            raise AbsentRecord('No credential thread {} on connection {}'.format(
                credential.thread_id,
                connection.connection_id))
        if rv.state == CredentialState.ISSUED:
            LOGGER.info('Credential %s already stored: ignoring redelivery', credential.thread_id)
            LOGGER.debug('CredentialService.store_credential <<< %s', rv)
            return rv
        rv.require(CredentialState.REQUESTED)

        try:
            rr_id = json.loads(credential.credential_json).get('rev_reg_id')
        except (AttributeError, TypeError, ValueError):
            LOGGER.debug('CredentialService.store_credential <!< Malformed credential %s', credential.thread_id)
            raise BadMessage('Malformed credential {}'.format(credential.thread_id))
        if rr_id and (not ok_rev_reg_id(rr_id) or rev_reg_id2cred_def_id(rr_id) != rv.cred_def_id):
            LOGGER.debug(
                'CredentialService.store_credential <!< Rev reg %s is not on cred def %s',
                rr_id,
                rv.cred_def_id)
            raise BadMessage('Credential rev reg {} is not on cred def {}'.format(rr_id, rv.cred_def_id))

        cd_json = await self._ledger.get_cred_def(pool, rv.cred_def_id)
        rr_def_json = await self._ledger.get_rev_reg_def(pool, rr_id) if rr_id else None
        rv.credential_id = await self.wallet.store_cred(
            rv.request_metadata_json,
            credential.credential_json,
            cd_json,
            rr_def_json)
        rv.credential_json = credential.credential_json
        rv.revocable = bool(rr_id)
        rv.rev_reg_id = rr_id
        rv.advance(CredentialState.ISSUED)
        await self.store.update(rv)

        LOGGER.debug('CredentialService.store_credential <<< %s', rv)
        return rv

    async def revoke_credential(self, pool: NodePool, credential_id: str) -> CredentialRecord:
        """
        Revoke issued credential (issuer) and send the resulting revocation registry delta to the ledger.
        Raise ProtocolState if credential is not Issued, or AbsentRevReg if it is not revocable.

        :param pool: node pool
        :param credential_id: credential record identifier
        :return: credential record, Revoked
        """

        LOGGER.debug('CredentialService.revoke_credential >>> credential_id: %s', credential_id)

        rv = await self.get(credential_id)
        rv.require(CredentialState.ISSUED)
        if not (rv.revocable and rv.rev_reg_id and rv.cred_rev_id):
            LOGGER.debug('CredentialService.revoke_credential <!< Credential %s is not revocable', credential_id)
            raise AbsentRevReg('Credential {} has no revocation registry'.format(credential_id))

        definition = await self._definition(rv.cred_def_id)
        reader = await self._tails.open_for_read(definition.tails_file)
        rr_delta_json = await self.wallet.revoke_cred(rv.rev_reg_id, rv.cred_rev_id, reader)
        issuer_did = (await self._provisioning.get()).issuer_did
        await self._ledger.send_rev_reg_entry(pool, self.wallet, issuer_did, rv.rev_reg_id, rr_delta_json)

        rv.advance(CredentialState.REVOKED)
        await self.store.update(rv)

        LOGGER.info('Revoked credential %s (cred rev id %s on rev reg %s)', rv.id, rv.cred_rev_id, rv.rev_reg_id)
        LOGGER.debug('CredentialService.revoke_credential <<< %s', rv)
        return rv

    async def get(self, ident: str) -> CredentialRecord:
        """
        Return credential record on identifier. Raise AbsentRecord for no such record.

        :param ident: record identifier
        :return: credential record
        """

        rv = await self.store.get(CredentialRecord, ident)
        if rv is None:
            LOGGER.debug('CredentialService.get <!< No credential record %s', ident)
            raise AbsentRecord('No credential record {}'.format(ident))
        return rv

    async def list(self, state: CredentialState = None, connection_id: str = None) -> Sequence[CredentialRecord]:
        """
        Return credential records, optionally only those in input state or on input connection.

        :param state: state of interest (default any)
        :param connection_id: connection identifier of interest (default any)
        :return: credential records
        """

        query = {}
        if state:
            query['state'] = state.value
        if connection_id:
            query['connection_id'] = connection_id
        return await self.store.search(CredentialRecord, query)

    async def _by_thread(self, connection: ConnectionRecord, thread_id: str) -> CredentialRecord:
        return await self.store.search_one(
            CredentialRecord,
            {
                'connection_id': connection.connection_id,
                'thread_id': thread_id
            })

    async def _definition(self, cred_def_id: str) -> DefinitionRecord:
        rv = await self.store.get(DefinitionRecord, cred_def_id)
        if rv is None or not rv.tails_file:
            LOGGER.debug('CredentialService._definition <!< No revocable cred def %s in wallet', cred_def_id)
            raise AbsentRevReg('No revocable cred def {} in wallet'.format(cred_def_id))
        return rv
