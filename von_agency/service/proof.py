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

from von_agency.error import AbsentRecord, BadIdentifier, BadMessage
from von_agency.ledger import Ledger
from von_agency.messages import ProofMessage, ProofRequestMessage
from von_agency.models import ProofRequest, RequestedCredentials
from von_agency.nodepool import NodePool
from von_agency.records import (
    ConnectionRecord,
    ProofRecord,
    ProofRequestRecord,
    ProofRequestState,
    ProofState)
from von_agency.service.base import BaseService
from von_agency.service.provisioning import ProvisioningService
from von_agency.tails import TailsCache
from von_agency.transport import EnvelopeCodec, Router
from von_agency.util import encode, ok_cred_def_id, ok_rev_reg_id, ok_schema_id
from von_agency.wallet import RecordStore, Wallet


LOGGER = logging.getLogger(__name__)


class ProofService(BaseService):
    """
    Proof protocol: request, presentation, verification. The requester's proof request record identifier
    is the thread identifier; the prover files its copy of the request under a new identifier, and
    requests reusing a nonce remain distinct records.
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

    async def send_proof_request(self, connection_id: str, proof_request: ProofRequest) -> ProofRequestRecord:
        """
        Send proof request to peer (verifier).

        :param connection_id: connection identifier
        :param proof_request: proof request
        :return: proof request record, Requested
        """

        LOGGER.debug(
            'ProofService.send_proof_request >>> connection_id: %s, proof_request: %s',
            connection_id,
            proof_request)

        connection = await self._connected(connection_id)
        rv = ProofRequestRecord(connection_id=connection.connection_id, request_json=proof_request.to_json())
        rv.advance(ProofRequestState.REQUESTED)
        await self.store.add(rv)

        await self._deliver(ProofRequestMessage(rv.thread_id, rv.request_json), connection, (rv, None))

        LOGGER.debug('ProofService.send_proof_request <<< %s', rv)
        return rv

    async def process_proof_request(self, message: ProofRequestMessage, connection: ConnectionRecord) -> str:
        """
        Process proof request (prover): file it under a new proof request record, Requested.

        :param message: proof request message
        :param connection: connection record on which request arrived
        :return: proof request record identifier
        """

        LOGGER.debug('ProofService.process_proof_request >>> message: %s', message)

        ProofRequest.from_json(message.proof_request_json)  # raises BadMessage if malformed
        record = ProofRequestRecord(
            connection_id=connection.connection_id,
            thread_id=message.thread_id,
            request_json=message.proof_request_json)
        record.advance(ProofRequestState.REQUESTED)
        await self.store.add(record)

        rv = record.id
        LOGGER.debug('ProofService.process_proof_request <<< %s', rv)
        return rv

    async def list_credentials_for_request(self, proof_request: ProofRequest, referent: str) -> list:
        """
        Return credential info dicts (referent, attrs, schema_id, cred_def_id, rev_reg_id, cred_rev_id)
        of credentials in wallet satisfying proof request item, in no guaranteed order.
        Raise BadMessage if proof request has no such referent.

        :param proof_request: proof request
        :param referent: requested attribute or predicate referent
        :return: list of credential info dicts
        """

        LOGGER.debug('ProofService.list_credentials_for_request >>> referent: %s', referent)

        if referent not in proof_request.referents():
            LOGGER.debug('ProofService.list_credentials_for_request <!< No referent %s in proof request', referent)
            raise BadMessage('No referent {} in proof request'.format(referent))

        rv = await self.wallet.search_creds_for_proof_req(proof_request.to_json(), referent)
        LOGGER.debug('ProofService.list_credentials_for_request <<< %s candidates', len(rv))
        return rv

    async def accept_proof_request(
            self,
            pool: NodePool,
            request_id: str,
            requested_credentials: RequestedCredentials) -> ProofRecord:
        """
        Create proof on proof request from selected credentials (prover) and send it to requester.
        Ensure tails files are local for revocable credentials, and create revocation states for
        selections that carry a timestamp.

        Raise AbsentRecord for no such request, ProtocolState if it is not Requested, or BadMessage if
        the selections do not cover the request's referents.

        :param pool: node pool
        :param request_id: proof request record identifier
        :param requested_credentials: selected credentials
        :return: proof record, Accepted
        """

        LOGGER.debug('ProofService.accept_proof_request >>> request_id: %s', request_id)

        request = await self.get_request(request_id)
        request.require(ProofRequestState.REQUESTED)
        connection = await self._connected(request.connection_id)
        proof_request = request.proof_request

        selected = (
            set(requested_credentials.requested_attributes)
            | set(requested_credentials.requested_predicates)
            | set(requested_credentials.self_attested_attributes))
        if selected != proof_request.referents():
            LOGGER.debug(
                'ProofService.accept_proof_request <!< Selections %s do not match referents %s',
                sorted(selected),
                sorted(proof_request.referents()))
            raise BadMessage('Selections {} do not match proof request referents {}'.format(
                sorted(selected),
                sorted(proof_request.referents())))

        link_secret = (await self._provisioning.get()).master_secret_id
        s_id2schema = {}
        cd_id2cred_def = {}
        rr_id2rev_state = {}

        for selection in requested_credentials.selections():
            cred_info = json.loads(await self.wallet.get_cred(selection.cred_id))

            s_id = cred_info['schema_id']
            if s_id not in s_id2schema:
                s_id2schema[s_id] = json.loads(await self._ledger.get_schema(pool, s_id))
            cd_id = cred_info['cred_def_id']
            if cd_id not in cd_id2cred_def:
                cd_id2cred_def[cd_id] = json.loads(await self._ledger.get_cred_def(pool, cd_id))

            rr_id = cred_info.get('rev_reg_id')
            if not rr_id:
                continue
            filename = await self._tails.ensure_local(pool, rr_id)
            if selection.timestamp is None or selection.timestamp in rr_id2rev_state.get(rr_id, {}):
                continue

            reader = await self._tails.open_for_read(filename)
            rr_def_json = await self._ledger.get_rev_reg_def(pool, rr_id)
            (rr_delta_json, ledger_timestamp) = await self._ledger.get_rev_reg_delta(
                pool,
                rr_id,
                None,
                selection.timestamp)
            rev_state_json = await self.wallet.create_rev_state(
                reader,
                rr_def_json,
                rr_delta_json,
                ledger_timestamp,
                cred_info['cred_rev_id'])
            rr_id2rev_state.setdefault(rr_id, {})[selection.timestamp] = json.loads(rev_state_json)

        proof_json = await self.wallet.create_proof(
            request.request_json,
            requested_credentials.to_json(),
            link_secret,
            json.dumps(s_id2schema),
            json.dumps(cd_id2cred_def),
            json.dumps(rr_id2rev_state))

        rv = ProofRecord(
            connection_id=connection.connection_id,
            proof_request_id=request.id,
            thread_id=request.thread_id,
            proof_json=proof_json)
        rv.advance(ProofState.ACCEPTED)
        await self.store.add(rv)
        prior = request.to_storage()
        request.advance(ProofRequestState.ACCEPTED)
        await self.store.update(request)

        await self._deliver(
            ProofMessage(proof_json, request.thread_id),
            connection,
            (rv, None),
            (request, prior))

        LOGGER.debug('ProofService.accept_proof_request <<< %s', rv)
        return rv

    async def reject_proof_request(self, request_id: str) -> ProofRequestRecord:
        """
        Reject proof request (prover). Nothing goes to the requester.

        :param request_id: proof request record identifier
        :return: proof request record, Rejected
        """

        LOGGER.debug('ProofService.reject_proof_request >>> request_id: %s', request_id)

        rv = await self.get_request(request_id)
        rv.advance(ProofRequestState.REJECTED)
        await self.store.update(rv)

        LOGGER.debug('ProofService.reject_proof_request <<< %s', rv)
        return rv

    async def process_proof(self, message: ProofMessage, connection: ConnectionRecord) -> str:
        """
        Process proof (verifier): file it as a proof record, Proposed, and mark its request Accepted.
        Raise AbsentRecord if connection has no such outstanding proof request.

        :param message: proof message
        :param connection: connection record on which proof arrived
        :return: proof record identifier
        """

        LOGGER.debug('ProofService.process_proof >>> message: %s', message)

        request = await self.store.get(ProofRequestRecord, message.thread_id)
        if request is None or request.connection_id != connection.connection_id:
            LOGGER.debug('ProofService.process_proof <!< No proof request %s on connection', message.thread_id)
            raise AbsentRecord('No proof request {} on connection {}'.format(
                message.thread_id,
                connection.connection_id))
        request.require(ProofRequestState.REQUESTED)

        try:
            proof = json.loads(message.content)
        except (TypeError, ValueError):
            proof = None
        if not isinstance(proof, dict) or 'identifiers' not in proof:
            LOGGER.debug('ProofService.process_proof <!< Malformed proof on thread %s', message.thread_id)
            raise BadMessage('Malformed proof on thread {}'.format(message.thread_id))

        record = ProofRecord(
            connection_id=connection.connection_id,
            proof_request_id=request.id,
            thread_id=message.thread_id,
            proof_json=message.content)
        record.advance(ProofState.PROPOSED)
        await self.store.add(record)
        request.advance(ProofRequestState.ACCEPTED)
        await self.store.update(request)

        rv = record.id
        LOGGER.debug('ProofService.process_proof <<< %s', rv)
        return rv

    async def verify_proof(self, pool: NodePool, proof_id: str) -> bool:
        """
        Verify proof (verifier) against its proof request, resolving schemata, credential definitions,
        and revocation registry definitions and states from the ledger by the proof's identifiers.
        A proof whose revealed raw values do not match their encodings fails. Move proof record
        to Verified on success; return True for a proof already Verified, without change.

        :param pool: node pool
        :param proof_id: proof record identifier
        :return: whether proof verifies
        """

        LOGGER.debug('ProofService.verify_proof >>> proof_id: %s', proof_id)

        record = await self.get_proof(proof_id)
        record.require(ProofState.PROPOSED, ProofState.VERIFIED)
        if record.state == ProofState.VERIFIED:
            LOGGER.debug('ProofService.verify_proof <<< True')
            return True
        request = await self.get_request(record.proof_request_id)
        proof = json.loads(record.proof_json)

        if not ProofService.check_encoding(proof):
            LOGGER.info('Proof %s revealed values do not match their encodings: failing verification', proof_id)
            LOGGER.debug('ProofService.verify_proof <<< False')
            return False

        s_id2schema = {}
        cd_id2cred_def = {}
        rr_id2rr_def = {}
        rr_id2rr = {}
        for proof_ident in proof['identifiers']:
            s_id = proof_ident['schema_id']
            if not ok_schema_id(s_id):
                LOGGER.debug('ProofService.verify_proof <!< Bad schema id %s', s_id)
                raise BadIdentifier('Bad schema id {}'.format(s_id))
            if s_id not in s_id2schema:
                s_id2schema[s_id] = json.loads(await self._ledger.get_schema(pool, s_id))

            cd_id = proof_ident['cred_def_id']
            if not ok_cred_def_id(cd_id):
                LOGGER.debug('ProofService.verify_proof <!< Bad cred def id %s', cd_id)
                raise BadIdentifier('Bad cred def id {}'.format(cd_id))
            if cd_id not in cd_id2cred_def:
                cd_id2cred_def[cd_id] = json.loads(await self._ledger.get_cred_def(pool, cd_id))

            rr_id = proof_ident.get('rev_reg_id')
            if not rr_id:
                continue
            if not ok_rev_reg_id(rr_id):
                LOGGER.debug('ProofService.verify_proof <!< Bad rev reg id %s', rr_id)
                raise BadIdentifier('Bad rev reg id {}'.format(rr_id))
            if rr_id not in rr_id2rr_def:
                rr_id2rr_def[rr_id] = json.loads(await self._ledger.get_rev_reg_def(pool, rr_id))
            timestamp = proof_ident.get('timestamp')
            if timestamp is not None and timestamp not in rr_id2rr.get(rr_id, {}):
                (rr_json, _) = await self._ledger.get_rev_reg(pool, rr_id, timestamp)
                rr_id2rr.setdefault(rr_id, {})[timestamp] = json.loads(rr_json)

        rv = await self.wallet.verify_proof(
            request.request_json,
            record.proof_json,
            json.dumps(s_id2schema),
            json.dumps(cd_id2cred_def),
            json.dumps(rr_id2rr_def),
            json.dumps(rr_id2rr))

        if rv:
            record.advance(ProofState.VERIFIED)
            await self.store.update(record)

        LOGGER.debug('ProofService.verify_proof <<< %s', rv)
        return rv

    @staticmethod
    def check_encoding(proof: dict) -> bool:
        """
        Return whether every revealed attribute's raw value in proof matches its encoding.

        :param proof: proof
        :return: True if OK, False for encoding mismatch
        """

        for (referent, revealed) in ((proof.get('requested_proof') or {}).get('revealed_attrs') or {}).items():
            if encode(revealed.get('raw')) != revealed.get('encoded'):
                LOGGER.debug('ProofService.check_encoding <<< False on referent %s', referent)
                return False
        return True

    async def get_request(self, ident: str) -> ProofRequestRecord:
        """
        Return proof request record on identifier. Raise AbsentRecord for no such record.

        :param ident: record identifier
        :return: proof request record
        """

        rv = await self.store.get(ProofRequestRecord, ident)
        if rv is None:
            LOGGER.debug('ProofService.get_request <!< No proof request record %s', ident)
            raise AbsentRecord('No proof request record {}'.format(ident))
        return rv

    async def get_proof(self, ident: str) -> ProofRecord:
        """
        Return proof record on identifier. Raise AbsentRecord for no such record.

        :param ident: record identifier
        :return: proof record
        """

        rv = await self.store.get(ProofRecord, ident)
        if rv is None:
            LOGGER.debug('ProofService.get_proof <!< No proof record %s', ident)
            raise AbsentRecord('No proof record {}'.format(ident))
        return rv

    async def list_requests(self, state: ProofRequestState = None) -> Sequence[ProofRequestRecord]:
        return await self.store.search(ProofRequestRecord, {'state': state.value} if state else None)

    async def list_proofs(self, state: ProofState = None) -> Sequence[ProofRecord]:
        return await self.store.search(ProofRecord, {'state': state.value} if state else None)
