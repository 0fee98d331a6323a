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



import asyncio
import json
import logging

from indy import ledger
from indy.error import IndyError

from von_agency.error import (
    AbsentCredDef,
    AbsentPool,
    AbsentRevReg,
    AbsentSchema,
    BadIdentifier,
    BadLedgerTxn,
    ClosedPool,
    WalletState)
from von_agency.nodepool import NodePool
from von_agency.util import ok_cred_def_id, ok_did, ok_rev_reg_id, ok_schema_id
from von_agency.wallet import Wallet


LOGGER = logging.getLogger(__name__)


class Ledger:
    """
    Ledger client: lookups and writes of schemata, credential definitions and revocation registries.
    Holds no pool: every operation takes the node pool to use.
    """

    async def _submit(self, pool: NodePool, req_json: str) -> str:
        """
        Submit (json) request to ledger; return (json) result.

        Raise AbsentPool for no pool, ClosedPool if pool is not yet open, or BadLedgerTxn on failure.

        :param pool: node pool
        :param req_json: json of request to submit
        :return: json response
        """

        LOGGER.debug('Ledger._submit >>> req_json: %s', req_json)

        if not pool:
            LOGGER.debug('Ledger._submit <!< absent pool')
            raise AbsentPool('Cannot submit request: absent pool')

        if not pool.handle:
            LOGGER.debug('Ledger._submit <!< closed pool %s', pool.name)
            raise ClosedPool('Cannot submit request to closed pool {}'.format(pool.name))

        try:
            rv_json = await ledger.submit_request(pool.handle, req_json)
            await asyncio.sleep(0)
        except IndyError as x_indy:
            LOGGER.debug('Ledger._submit <!< cannot submit request: indy error code %s', x_indy.error_code)
            raise BadLedgerTxn('Cannot submit request: indy error code {}'.format(x_indy.error_code))

        resp = json.loads(rv_json)
        if resp.get('op', '') in ('REQNACK', 'REJECT'):
            LOGGER.debug('Ledger._submit <!< ledger rejected request: %s', resp['reason'])
            raise BadLedgerTxn('Ledger rejected transaction request: {}'.format(resp['reason']))

        LOGGER.debug('Ledger._submit <<< %s', rv_json)
        return rv_json

    async def _sign_submit(self, pool: NodePool, wallet: Wallet, submitter_did: str, req_json: str) -> str:
        """
        Sign and submit (json) request to ledger; return (json) result.

        Raise AbsentPool for no pool, ClosedPool if pool is not yet open, WalletState if wallet is closed,
        or BadLedgerTxn on failure.

        :param pool: node pool
        :param wallet: wallet holding submitter signing key
        :param submitter_did: submitter DID
        :param req_json: json of request to sign and submit
        :return: json response
        """

        LOGGER.debug('Ledger._sign_submit >>> submitter_did: %s, req_json: %s', submitter_did, req_json)

        if not pool:
            LOGGER.debug('Ledger._sign_submit <!< absent pool')
            raise AbsentPool('Cannot sign and submit request: absent pool')

        if not pool.handle:
            LOGGER.debug('Ledger._sign_submit <!< closed pool %s', pool.name)
            raise ClosedPool('Cannot sign and submit request to closed pool {}'.format(pool.name))

        if not wallet.handle:
            LOGGER.debug('Ledger._sign_submit <!< Wallet %s is closed', wallet.name)
            raise WalletState('Wallet {} is closed'.format(wallet.name))

        try:
            rv_json = await ledger.sign_and_submit_request(pool.handle, wallet.handle, submitter_did, req_json)
            await asyncio.sleep(0)
        except IndyError as x_indy:
            LOGGER.debug(
                'Ledger._sign_submit <!< cannot sign/submit request for ledger: indy error code %s',
                x_indy.error_code)
            raise BadLedgerTxn('Cannot sign/submit request for ledger: indy error code {}'.format(x_indy.error_code))

        resp = json.loads(rv_json)
        if resp.get('op', '') in ('REQNACK', 'REJECT'):
            LOGGER.debug('Ledger._sign_submit <!< ledger rejected request: %s', resp['reason'])
            raise BadLedgerTxn('Ledger rejected transaction request: {}'.format(resp['reason']))

        LOGGER.debug('Ledger._sign_submit <<< %s', rv_json)
        return rv_json

    async def get_schema(self, pool: NodePool, s_id: str) -> str:
        """
        Get schema from ledger by its identifier. Raise AbsentSchema for no such schema.

        :param pool: node pool
        :param s_id: schema identifier
        :return: schema json
        """

        LOGGER.debug('Ledger.get_schema >>> s_id: %s', s_id)

        if not ok_schema_id(s_id):
            LOGGER.debug('Ledger.get_schema <!< Bad schema id %s', s_id)
            raise BadIdentifier('Bad schema id {}'.format(s_id))

        resp_json = await self._submit(pool, await ledger.build_get_schema_request(None, s_id))
        try:
            (_, rv_json) = await ledger.parse_get_schema_response(resp_json)
        except IndyError:  # ledger replied, but there is no such schema
            LOGGER.debug('Ledger.get_schema <!< no schema exists on %s', s_id)
            raise AbsentSchema('No schema exists on {}'.format(s_id))

        LOGGER.debug('Ledger.get_schema <<< %s', rv_json)
        return rv_json

    async def get_cred_def(self, pool: NodePool, cd_id: str) -> str:
        """
        Get credential definition from ledger by its identifier. Raise AbsentCredDef for no such definition.

        :param pool: node pool
        :param cd_id: credential definition identifier
        :return: credential definition json
        """

        LOGGER.debug('Ledger.get_cred_def >>> cd_id: %s', cd_id)

        if not ok_cred_def_id(cd_id):
            LOGGER.debug('Ledger.get_cred_def <!< Bad cred def id %s', cd_id)
            raise BadIdentifier('Bad cred def id {}'.format(cd_id))

        resp_json = await self._submit(pool, await ledger.build_get_cred_def_request(None, cd_id))
        try:
            (_, rv_json) = await ledger.parse_get_cred_def_response(resp_json)
        except IndyError:  # ledger replied, but there is no such cred def
            LOGGER.debug('Ledger.get_cred_def <!< no cred def exists on %s', cd_id)
            raise AbsentCredDef('No cred def exists on {}'.format(cd_id))

        LOGGER.debug('Ledger.get_cred_def <<< %s', rv_json)
        return rv_json

    async def get_rev_reg_def(self, pool: NodePool, rr_id: str) -> str:
        """
        Get revocation registry definition from ledger by its identifier. Raise AbsentRevReg
        for no such revocation registry.

        :param pool: node pool
        :param rr_id: revocation registry identifier
        :return: revocation registry definition json
        """

        LOGGER.debug('Ledger.get_rev_reg_def >>> rr_id: %s', rr_id)

        if not ok_rev_reg_id(rr_id):
            LOGGER.debug('Ledger.get_rev_reg_def <!< Bad rev reg id %s', rr_id)
            raise BadIdentifier('Bad rev reg id {}'.format(rr_id))

        resp_json = await self._submit(pool, await ledger.build_get_revoc_reg_def_request(None, rr_id))
        try:
            (_, rv_json) = await ledger.parse_get_revoc_reg_def_response(resp_json)
        except IndyError:  # ledger replied, but there is no such rev reg
            LOGGER.debug('Ledger.get_rev_reg_def <!< no rev reg exists on %s', rr_id)
            raise AbsentRevReg('No rev reg exists on {}'.format(rr_id))

        LOGGER.debug('Ledger.get_rev_reg_def <<< %s', rv_json)
        return rv_json

    async def get_rev_reg_delta(self, pool: NodePool, rr_id: str, fro: int = None, to: int = None) -> (str, int):
        """
        Get revocation registry delta from ledger, from registry creation (or input time) to input time.
        Raise AbsentRevReg for no such revocation registry.

        :param pool: node pool
        :param rr_id: revocation registry identifier
        :param fro: earliest interest, epoch seconds (default registry creation)
        :param to: latest interest, epoch seconds
        :return: revocation registry delta json and its ledger timestamp
        """

        LOGGER.debug('Ledger.get_rev_reg_delta >>> rr_id: %s, fro: %s, to: %s', rr_id, fro, to)

        resp_json = await self._submit(pool, await ledger.build_get_revoc_reg_delta_request(None, rr_id, fro, to))
        try:
            (_, delta_json, timestamp) = await ledger.parse_get_revoc_reg_delta_response(resp_json)
        except IndyError:
            LOGGER.debug('Ledger.get_rev_reg_delta <!< no rev reg delta exists on %s to %s', rr_id, to)
            raise AbsentRevReg('No rev reg delta exists on {} to {}'.format(rr_id, to))

        rv = (delta_json, timestamp)
        LOGGER.debug('Ledger.get_rev_reg_delta <<< %s', rv)
        return rv

    async def get_rev_reg(self, pool: NodePool, rr_id: str, timestamp: int) -> (str, int):
        """
        Get revocation registry state from ledger as at input time. Raise AbsentRevReg for no such state.

        :param pool: node pool
        :param rr_id: revocation registry identifier
        :param timestamp: time of interest, epoch seconds
        :return: revocation registry json and its ledger timestamp
        """

        LOGGER.debug('Ledger.get_rev_reg >>> rr_id: %s, timestamp: %s', rr_id, timestamp)

        resp_json = await self._submit(pool, await ledger.build_get_revoc_reg_request(None, rr_id, timestamp))
        try:
            (_, rr_json, ledger_timestamp) = await ledger.parse_get_revoc_reg_response(resp_json)
        except IndyError:
            LOGGER.debug('Ledger.get_rev_reg <!< no rev reg state exists on %s at %s', rr_id, timestamp)
            raise AbsentRevReg('No rev reg state exists on {} at {}'.format(rr_id, timestamp))

        rv = (rr_json, ledger_timestamp)
        LOGGER.debug('Ledger.get_rev_reg <<< %s', rv)
        return rv

    async def send_schema(self, pool: NodePool, wallet: Wallet, did: str, schema_json: str) -> str:
        """
        Send schema to ledger.

        :param pool: node pool
        :param wallet: wallet holding submitter signing key
        :param did: submitter (schema originator) DID
        :param schema_json: schema json as wallet.create_schema() returns it
        :return: ledger response json
        """

        LOGGER.debug('Ledger.send_schema >>> did: %s, schema_json: %s', did, schema_json)

        if not ok_did(did):
            LOGGER.debug('Ledger.send_schema <!< Bad DID %s', did)
            raise BadIdentifier('Bad DID {}'.format(did))

        rv = await self._sign_submit(pool, wallet, did, await ledger.build_schema_request(did, schema_json))

        LOGGER.debug('Ledger.send_schema <<< %s', rv)
        return rv

    async def send_cred_def(self, pool: NodePool, wallet: Wallet, did: str, cd_json: str) -> str:
        """
        Send credential definition to ledger.

        :param pool: node pool
        :param wallet: wallet holding submitter signing key
        :param did: submitter (issuer) DID
        :param cd_json: credential definition json
        :return: ledger response json
        """

        LOGGER.debug('Ledger.send_cred_def >>> did: %s', did)

        rv = await self._sign_submit(pool, wallet, did, await ledger.build_cred_def_request(did, cd_json))

        LOGGER.debug('Ledger.send_cred_def <<< %s', rv)
        return rv

    async def send_rev_reg_def(self, pool: NodePool, wallet: Wallet, did: str, rr_def_json: str) -> str:
        """
        Send revocation registry definition to ledger.

        :param pool: node pool
        :param wallet: wallet holding submitter signing key
        :param did: submitter (issuer) DID
        :param rr_def_json: revocation registry definition json
        :return: ledger response json
        """

        LOGGER.debug('Ledger.send_rev_reg_def >>> did: %s, rr_def_json: %s', did, rr_def_json)

        rv = await self._sign_submit(pool, wallet, did, await ledger.build_revoc_reg_def_request(did, rr_def_json))

        LOGGER.debug('Ledger.send_rev_reg_def <<< %s', rv)
        return rv

    async def send_rev_reg_entry(self, pool: NodePool, wallet: Wallet, did: str, rr_id: str, rr_ent_json: str) -> str:
        """
        Send revocation registry entry (initial state or delta) to ledger.

        :param pool: node pool
        :param wallet: wallet holding submitter signing key
        :param did: submitter (issuer) DID
        :param rr_id: revocation registry identifier
        :param rr_ent_json: revocation registry entry or delta json
        :return: ledger response json
        """

        LOGGER.debug('Ledger.send_rev_reg_entry >>> did: %s, rr_id: %s', did, rr_id)

        rv = await self._sign_submit(
            pool,
            wallet,
            did,
            await ledger.build_revoc_reg_entry_request(did, rr_id, 'CL_ACCUM', rr_ent_json))

        LOGGER.debug('Ledger.send_rev_reg_entry <<< %s', rv)
        return rv

    async def send_nym(
            self,
            pool: NodePool,
            wallet: Wallet,
            submitter_did: str,
            did: str,
            verkey: str = None,
            role: str = None) -> str:
        """
        Send cryptonym (DID, verification key, and optional role) to ledger: a trustee or steward
        does this for an issuer DID before the issuer can write schemata and credential definitions.

        Raise BadIdentifier for bad DID, BadLedgerTxn on failure.

        :param pool: node pool
        :param wallet: wallet holding submitter signing key
        :param submitter_did: submitter (trustee or steward) DID
        :param did: DID to send
        :param verkey: verification key for DID
        :param role: ledger role token (e.g., 'TRUST_ANCHOR'), None for user
        :return: ledger response json
        """

        LOGGER.debug(
            'Ledger.send_nym >>> submitter_did: %s, did: %s, verkey: %s, role: %s',
            submitter_did,
            did,
            verkey,
            role)

        if not ok_did(did):
            LOGGER.debug('Ledger.send_nym <!< Bad DID %s', did)
            raise BadIdentifier('Bad DID {}'.format(did))

        rv = await self._sign_submit(
            pool,
            wallet,
            submitter_did,
            await ledger.build_nym_request(submitter_did, did, verkey, None, role))

        LOGGER.debug('Ledger.send_nym <<< %s', rv)
        return rv
