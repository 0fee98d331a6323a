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

from von_agency.error import AbsentRecord, AbsentSchema, AbsentTails, ExtantRecord
from von_agency.ledger import Ledger
from von_agency.nodepool import NodePool
from von_agency.records import DefinitionRecord
from von_agency.service.provisioning import ProvisioningService
from von_agency.tails import TailsCache
from von_agency.util import schema_id, tails_filename
from von_agency.wallet import RecordStore, Wallet


LOGGER = logging.getLogger(__name__)


class SchemaService:
    """
    Issuer setup: schemata, credential definitions, and revocation registries with their tails files.
    """

    DEFAULT_MAX_CRED_NUM = 64
    REV_REG_TAG = '0'

    def __init__(
            self,
            wallet: Wallet,
            store: RecordStore,
            ledger: Ledger,
            tails: TailsCache,
            provisioning: ProvisioningService,
            tails_base_uri: str = None,
            max_cred_num: int = None) -> None:
        """
        Initializer for schema service.

        :param wallet: issuer wallet
        :param store: record store
        :param ledger: ledger client
        :param tails: tails cache, to write tails files into
        :param provisioning: provisioning service, for issuer DID
        :param tails_base_uri: base URI at which tails files are published, by file name; required
            for revocable credential definitions
        :param max_cred_num: default revocation registry capacity
        """

        self._wallet = wallet
        self._store = store
        self._ledger = ledger
        self._tails = tails
        self._provisioning = provisioning
        self._tails_base_uri = tails_base_uri
        self._max_cred_num = max_cred_num or SchemaService.DEFAULT_MAX_CRED_NUM

    async def create_schema(self, pool: NodePool, name: str, version: str, attr_names: Sequence[str]) -> str:
        """
        Create schema and send it to the ledger, if the ledger does not already have it.

        :param pool: node pool
        :param name: schema name
        :param version: schema version
        :param attr_names: attribute names
        :return: schema identifier
        """

        LOGGER.debug('SchemaService.create_schema >>> name: %s, version: %s, attr_names: %s', name, version, attr_names)

        issuer_did = (await self._provisioning.get()).issuer_did
        rv = schema_id(issuer_did, name, version)
        try:
            await self._ledger.get_schema(pool, rv)
            LOGGER.warning('Schema %s already on ledger: not sending', rv)
        except AbsentSchema:
            (_, schema_json) = await self._wallet.create_schema(issuer_did, name, version, attr_names)
            await self._ledger.send_schema(pool, self._wallet, issuer_did, schema_json)

        LOGGER.debug('SchemaService.create_schema <<< %s', rv)
        return rv

    async def create_credential_definition(
            self,
            pool: NodePool,
            schema_id: str,
            revocable: bool = False,
            max_cred_num: int = None,
            tag: str = 'tag') -> str:
        """
        Create credential definition on schema and send it to the ledger. If revocable, create its
        revocation registry too, writing the tails file into the tails directory and publishing
        its location as tails base URI plus file name. Return existing credential definition
        identifier if issuer already has one on the schema.

        Raise ExtantRecord if issuer already has a definition on the schema that differs in revocability,
        AbsentTails for a revocable definition without a tails base URI, or AbsentSchema if the ledger
        has no such schema.

        :param pool: node pool
        :param schema_id: schema identifier
        :param revocable: whether credentials on definition are revocable
        :param max_cred_num: revocation registry capacity (default as per initializer)
        :param tag: credential definition tag
        :return: credential definition identifier
        """

        LOGGER.debug(
            'SchemaService.create_credential_definition >>> schema_id: %s, revocable: %s, max_cred_num: %s, tag: %s',
            schema_id,
            revocable,
            max_cred_num,
            tag)

        existing = await self.lookup_definition(schema_id)
        if existing and bool(existing.revocable) != bool(revocable):
            LOGGER.debug(
                'SchemaService.create_credential_definition <!< Cred def %s on schema %s has revocable=%s',
                existing.cred_def_id,
                schema_id,
                bool(existing.revocable))
            raise ExtantRecord('Cred def {} on schema {} has revocable={}'.format(
                existing.cred_def_id,
                schema_id,
                bool(existing.revocable)))
        if existing:
            LOGGER.info('Issuer already has cred def %s on schema %s', existing.cred_def_id, schema_id)
            LOGGER.debug('SchemaService.create_credential_definition <<< %s', existing.cred_def_id)
            return existing.cred_def_id

        if revocable and not self._tails_base_uri:
            LOGGER.debug('SchemaService.create_credential_definition <!< No tails base URI to publish tails files')
            raise AbsentTails('No tails base URI to publish tails files')

        issuer_did = (await self._provisioning.get()).issuer_did
        schema_json = await self._ledger.get_schema(pool, schema_id)
        (cd_id, cd_json) = await self._wallet.create_cred_def(issuer_did, schema_json, tag, revocable)
        await self._ledger.send_cred_def(pool, self._wallet, issuer_did, cd_json)

        record = DefinitionRecord(schema_id=schema_id, cred_def_id=cd_id, revocable=revocable)
        if revocable:
            (record.rev_reg_id, record.tails_file) = await self._create_rev_reg(
                pool,
                issuer_did,
                cd_id,
                max_cred_num or self._max_cred_num)
        await self._store.add(record)

        LOGGER.debug('SchemaService.create_credential_definition <<< %s', cd_id)
        return cd_id

    async def _create_rev_reg(self, pool: NodePool, issuer_did: str, cd_id: str, max_cred_num: int) -> (str, str):
        """
        Create revocation registry and its tails file, and send its definition and initial entry to the ledger.

        :param pool: node pool
        :param issuer_did: issuer DID
        :param cd_id: credential definition identifier
        :param max_cred_num: registry capacity
        :return: revocation registry identifier and tails file name
        """

        LOGGER.debug('SchemaService._create_rev_reg >>> cd_id: %s, max_cred_num: %s', cd_id, max_cred_num)

        writer = await self._tails.open_for_write()
        (rr_id, rr_def_json, rr_ent_json) = await self._wallet.create_rev_reg(
            issuer_did,
            cd_id,
            SchemaService.REV_REG_TAG,
            max_cred_num,
            writer)

        rr_def = json.loads(rr_def_json)
        tails_file = tails_filename(rr_def['value']['tailsLocation'])  # local path as written
        rr_def['value']['tailsLocation'] = '{}/{}'.format(self._tails_base_uri.rstrip('/'), tails_file)
        await self._ledger.send_rev_reg_def(pool, self._wallet, issuer_did, json.dumps(rr_def))
        await self._ledger.send_rev_reg_entry(pool, self._wallet, issuer_did, rr_id, rr_ent_json)

        LOGGER.info('Created rev reg %s with tails file %s at %s', rr_id, tails_file, rr_def['value']['tailsLocation'])
        rv = (rr_id, tails_file)
        LOGGER.debug('SchemaService._create_rev_reg <<< %s', rv)
        return rv

    async def get_definition(self, cred_def_id: str) -> DefinitionRecord:
        """
        Return issuer's definition record on credential definition identifier. Raise AbsentRecord if none.

        :param cred_def_id: credential definition identifier
        :return: definition record
        """

        rv = await self._store.get(DefinitionRecord, cred_def_id)
        if rv is None:
            LOGGER.debug('SchemaService.get_definition <!< No cred def %s in wallet', cred_def_id)
            raise AbsentRecord('No cred def {} in wallet {}'.format(cred_def_id, self._wallet.name))
        return rv

    async def lookup_definition(self, schema_id: str) -> DefinitionRecord:
        """
        Return issuer's definition record on schema, None if there is none.

        :param schema_id: schema identifier
        :return: definition record or None
        """

        return await self._store.search_one(DefinitionRecord, {'schema_id': schema_id})
