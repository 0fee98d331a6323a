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

from hashlib import sha256
from itertools import count
from os import environ, urandom
from os.path import isfile, join
from uuid import uuid4

import pytest

from aiohttp import web
from base58 import b58encode

from von_agency import Agency
from von_agency.error import (
    AbsentCredDef,
    AbsentLinkSecret,
    AbsentMessage,
    AbsentRecord,
    AbsentRevReg,
    AbsentSchema,
    BadCryptoOp,
    BadTransport,
    ExtantRecord,
    VonAgencyError,
    WalletState)
from von_agency.ledger import Ledger
from von_agency.models import ConnectionAlias
from von_agency.nodepool import NodePool
from von_agency.util import tails_hash
from von_agency.wallet import DIDInfo, RecordStore


logging.basicConfig(level=logging.WARNING, format='%(levelname)-8s | %(name)-12s | %(message)s')
logging.getLogger('test.conftest').setLevel(logging.INFO)
logging.getLogger('asyncio').setLevel(logging.WARNING)
logging.getLogger('von_agency').setLevel(logging.WARNING)
logging.getLogger('indy').setLevel(logging.ERROR)


def fake_did() -> str:
    return b58encode(bytes([0x80 | urandom(1)[0]]) + urandom(15)).decode('ascii')


def fake_verkey() -> str:
    return b58encode(bytes([0x80 | urandom(1)[0]]) + urandom(31)).decode('ascii')


class FakeBlobStorage:
    """
    Stand-in for indy blob storage: hands out reader and writer handles, and remembers their configurations.
    """

    def __init__(self):
        self._handles = count(1)
        self.readers = {}
        self.writers = {}

    async def open_reader(self, typ: str, config_json: str) -> int:
        await asyncio.sleep(0.01)
        rv = next(self._handles)
        self.readers[rv] = json.loads(config_json)
        return rv

    async def open_writer(self, typ: str, config_json: str) -> int:
        rv = next(self._handles)
        self.writers[rv] = json.loads(config_json)
        return rv


class FakeWallet:
    """
    Stand-in for an indy wallet and the crypto runtime operations on it. Packs messages as plain json
    and checks anoncreds inputs for consistency, without the cryptography.
    """

    def __init__(self, name: str, blobs: FakeBlobStorage):
        self._name = name
        self._blobs = blobs
        self._handle = None
        self._keys = set()
        self._link_secrets = set()
        self._cred_defs = {}  # cd_id -> schema id and revocability
        self._cr_ids = {}  # rr_id -> issue counter
        self._creds = {}  # cred_id -> (cred_info, values)

    @property
    def name(self) -> str:
        return self._name

    @property
    def handle(self) -> int:
        return self._handle

    @property
    def opened(self) -> bool:
        return self._handle is not None

    async def open(self) -> 'FakeWallet':
        self._handle = 1
        return self

    async def close(self) -> None:
        self._handle = None

    def _check_open(self) -> None:
        if not self.opened:
            raise WalletState('Wallet {} is closed'.format(self.name))

    async def create_local_did(self, seed: str = None, metadata: dict = None) -> DIDInfo:
        self._check_open()
        rv = DIDInfo(fake_did(), fake_verkey(), metadata or {})
        self._keys.add(rv.verkey)
        return rv

    async def create_signing_key(self, seed: str = None) -> str:
        self._check_open()
        rv = fake_verkey()
        self._keys.add(rv)
        return rv

    async def create_link_secret(self, label: str) -> str:
        self._check_open()
        self._link_secrets.add(label)
        return label

    async def pack(self, message: str, recip_verkeys, sender_verkey: str = None) -> bytes:
        self._check_open()
        if message is None:
            raise AbsentMessage('No message to pack')
        if sender_verkey and sender_verkey not in self._keys:
            raise BadCryptoOp('Wallet {} has no key {}'.format(self.name, sender_verkey))
        return json.dumps({
            'recipients': [recip_verkeys] if isinstance(recip_verkeys, str) else list(recip_verkeys),
            'sender': sender_verkey,
            'message': message
        }).encode()

    async def unpack(self, ciphertext: bytes) -> (str, str, str):
        self._check_open()
        if not ciphertext:
            raise AbsentMessage('No ciphertext to unpack')
        try:
            packed = json.loads(ciphertext.decode())
            recipients = packed['recipients']
        except (KeyError, TypeError, ValueError):
            raise BadCryptoOp('Not a packed message')
        for recip in recipients:
            if recip in self._keys:
                return (packed['message'], packed['sender'], recip)
        raise AbsentRecord('Wallet {} has no local key to unpack ciphertext'.format(self.name))

    async def create_schema(self, issuer_did: str, name: str, version: str, attr_names) -> (str, str):
        s_id = '{}:2:{}:{}'.format(issuer_did, name, version)
        return (s_id, json.dumps({
            'ver': '1.0',
            'id': s_id,
            'name': name,
            'version': version,
            'attrNames': list(attr_names)
        }))

    async def create_cred_def(
            self,
            issuer_did: str,
            schema_json: str,
            tag: str,
            revocation: bool = False) -> (str, str):
        self._check_open()
        schema = json.loads(schema_json)
        cd_id = '{}:3:CL:{}:{}'.format(issuer_did, schema['seqNo'], tag)
        self._cred_defs[cd_id] = {'schema_id': schema['id'], 'revocable': revocation}
        return (cd_id, json.dumps({
            'ver': '1.0',
            'id': cd_id,
            'schemaId': str(schema['seqNo']),
            'type': 'CL',
            'tag': tag,
            'value': {'revocation': {} if revocation else None}
        }))

    async def create_rev_reg(
            self,
            issuer_did: str,
            cd_id: str,
            tag: str,
            max_cred_num: int,
            tails_writer_handle: int) -> (str, str, str):
        self._check_open()
        if not self._cred_defs.get(cd_id, {}).get('revocable'):
            raise BadCryptoOp('No revocable cred def {}'.format(cd_id))
        base_dir = self._blobs.writers[tails_writer_handle]['base_dir']
        content = urandom(256 + max_cred_num)
        t_hash = tails_hash(content)
        with open(join(base_dir, t_hash), 'wb') as fh_tails:
            fh_tails.write(content)
        rr_id = '{}:4:{}:CL_ACCUM:{}'.format(issuer_did, cd_id, tag)
        self._cr_ids[rr_id] = count(1)
        rr_def = {
            'ver': '1.0',
            'id': rr_id,
            'revocDefType': 'CL_ACCUM',
            'tag': tag,
            'credDefId': cd_id,
            'value': {
                'issuanceType': 'ISSUANCE_BY_DEFAULT',
                'maxCredNum': max_cred_num,
                'publicKeys': {},
                'tailsHash': t_hash,
                'tailsLocation': join(base_dir, t_hash)
            }
        }
        return (rr_id, json.dumps(rr_def), json.dumps({'ver': '1.0', 'value': {'accum': uuid4().hex}}))

    async def create_cred_offer(self, cd_id: str) -> str:
        self._check_open()
        if cd_id not in self._cred_defs:
            raise BadCryptoOp('No cred def {}'.format(cd_id))
        return json.dumps({
            'schema_id': self._cred_defs[cd_id]['schema_id'],
            'cred_def_id': cd_id,
            'nonce': str(int.from_bytes(urandom(10), 'big'))
        })

    async def create_cred_req(self, prover_did: str, offer_json: str, cd_json: str, link_secret: str) -> (str, str):
        self._check_open()
        if link_secret not in self._link_secrets:
            raise AbsentLinkSecret('Wallet {} has no link secret {}'.format(self.name, link_secret))
        offer = json.loads(offer_json)
        return (
            json.dumps({'prover_did': prover_did, 'cred_def_id': offer['cred_def_id'], 'nonce': offer['nonce']}),
            json.dumps({'master_secret_name': link_secret}))

    async def create_cred(
            self,
            offer_json: str,
            req_json: str,
            values_json: str,
            rr_id: str = None,
            tails_reader_handle: int = None) -> (str, str, str):
        self._check_open()
        offer = json.loads(offer_json)
        if offer['cred_def_id'] not in self._cred_defs:
            raise BadCryptoOp('No cred def {}'.format(offer['cred_def_id']))
        if json.loads(req_json)['nonce'] != offer['nonce']:
            raise BadCryptoOp('Credential request does not answer offer')
        cr_id = None
        rr_delta_json = None
        if rr_id:
            if tails_reader_handle not in self._blobs.readers:
                raise BadCryptoOp('Bad tails reader handle {}'.format(tails_reader_handle))
            cr_id = str(next(self._cr_ids[rr_id]))
            rr_delta_json = json.dumps({'ver': '1.0', 'value': {'issued': [cr_id]}})
        cred_json = json.dumps({
            'schema_id': offer['schema_id'],
            'cred_def_id': offer['cred_def_id'],
            'rev_reg_id': rr_id,
            'cred_rev_id': cr_id,
            'values': json.loads(values_json)
        })
        return (cred_json, cr_id, rr_delta_json)

    async def revoke_cred(self, rr_id: str, cr_id: str, tails_reader_handle: int) -> str:
        self._check_open()
        if tails_reader_handle not in self._blobs.readers:
            raise BadCryptoOp('Bad tails reader handle {}'.format(tails_reader_handle))
        return json.dumps({'ver': '1.0', 'value': {'revoked': [cr_id]}})

    async def store_cred(self, req_meta_json: str, cred_json: str, cd_json: str, rr_def_json: str = None) -> str:
        self._check_open()
        cred = json.loads(cred_json)
        if cred['rev_reg_id'] and not rr_def_json:
            raise BadCryptoOp('Revocable credential needs rev reg def')
        rv = uuid4().hex
        cred_info = {
            'referent': rv,
            'attrs': {attr: value['raw'] for attr, value in cred['values'].items()},
            'schema_id': cred['schema_id'],
            'cred_def_id': cred['cred_def_id'],
            'rev_reg_id': cred['rev_reg_id'],
            'cred_rev_id': cred['cred_rev_id']
        }
        self._creds[rv] = (cred_info, cred['values'])
        return rv

    async def get_cred(self, cred_id: str) -> str:
        self._check_open()
        if cred_id not in self._creds:
            raise AbsentRecord('Wallet {} has no credential {}'.format(self.name, cred_id))
        return json.dumps(self._creds[cred_id][0])

    async def search_creds_for_proof_req(self, proof_req_json: str, referent: str) -> list:
        self._check_open()
        proof_req = json.loads(proof_req_json)
        item = proof_req['requested_attributes'].get(referent) or proof_req['requested_predicates'].get(referent)
        return [
            cred_info for (cred_info, _) in self._creds.values()
            if item['name'] in cred_info['attrs'] and (
                not item.get('restrictions') or any(
                    all(cred_info.get(k) == v for k, v in restriction.items())
                    for restriction in item['restrictions']))
        ]

    async def create_rev_state(
            self,
            tails_reader_handle: int,
            rr_def_json: str,
            rr_delta_json: str,
            timestamp: int,
            cr_id: str) -> str:
        if tails_reader_handle not in self._blobs.readers:
            raise BadCryptoOp('Bad tails reader handle {}'.format(tails_reader_handle))
        return json.dumps({
            'rev_reg': json.loads(rr_delta_json)['value'],
            'timestamp': timestamp,
            'witness': {'cred_rev_id': cr_id}
        })

    async def create_proof(
            self,
            proof_req_json: str,
            requested_creds_json: str,
            link_secret: str,
            schemas_json: str,
            cred_defs_json: str,
            rev_states_json: str) -> str:
        self._check_open()
        if link_secret not in self._link_secrets:
            raise BadCryptoOp('No link secret {}'.format(link_secret))
        proof_req = json.loads(proof_req_json)
        requested = json.loads(requested_creds_json)
        schemas = json.loads(schemas_json)
        cred_defs = json.loads(cred_defs_json)
        rev_states = json.loads(rev_states_json)

        proofs = []
        identifiers = []
        sub_proofs = {}  # (cred_id, timestamp) -> sub proof index
        requested_proof = {
            'revealed_attrs': {},
            'unrevealed_attrs': {},
            'self_attested_attrs': dict(requested['self_attested_attributes']),
            'predicates': {}
        }

        def _sub_proof(selection: dict) -> (int, dict):
            (cred_id, timestamp) = (selection['cred_id'], selection.get('timestamp'))
            if cred_id not in self._creds:
                raise BadCryptoOp('No credential {}'.format(cred_id))
            (cred_info, values) = self._creds[cred_id]
            if cred_info['schema_id'] not in schemas or cred_info['cred_def_id'] not in cred_defs:
                raise BadCryptoOp('Proof needs schema and cred def for credential {}'.format(cred_id))
            if (cred_id, timestamp) not in sub_proofs:
                if cred_info['rev_reg_id'] and timestamp is not None:
                    if str(timestamp) not in rev_states.get(cred_info['rev_reg_id'], {}):
                        raise BadCryptoOp('No rev state for {} at {}'.format(cred_info['rev_reg_id'], timestamp))
                sub_proofs[(cred_id, timestamp)] = len(proofs)
                proofs.append({'cred_rev_id': cred_info['cred_rev_id']})
                identifiers.append({
                    'schema_id': cred_info['schema_id'],
                    'cred_def_id': cred_info['cred_def_id'],
                    'rev_reg_id': cred_info['rev_reg_id'],
                    'timestamp': timestamp if cred_info['rev_reg_id'] else None
                })
            return (sub_proofs[(cred_id, timestamp)], values)

        for (referent, selection) in requested['requested_attributes'].items():
            (index, values) = _sub_proof(selection)
            name = proof_req['requested_attributes'][referent]['name']
            if selection['revealed']:
                requested_proof['revealed_attrs'][referent] = {
                    'sub_proof_index': index,
                    'raw': values[name]['raw'],
                    'encoded': values[name]['encoded']
                }
            else:
                requested_proof['unrevealed_attrs'][referent] = {'sub_proof_index': index}

        for (referent, selection) in requested['requested_predicates'].items():
            (index, values) = _sub_proof(selection)
            predicate = proof_req['requested_predicates'][referent]
            actual = int(values[predicate['name']]['encoded'])
            if not {
                    '>=': actual >= predicate['p_value'],
                    '>': actual > predicate['p_value'],
                    '<=': actual <= predicate['p_value'],
                    '<': actual < predicate['p_value']}[predicate['p_type']]:
                raise BadCryptoOp('Predicate {} does not hold'.format(referent))
            requested_proof['predicates'][referent] = {'sub_proof_index': index}

        return json.dumps({
            'proof': {
                'proofs': proofs,
                'nonce_digest': sha256(proof_req['nonce'].encode()).hexdigest()
            },
            'requested_proof': requested_proof,
            'identifiers': identifiers
        })

    async def verify_proof(
            self,
            proof_req_json: str,
            proof_json: str,
            schemas_json: str,
            cred_defs_json: str,
            rr_defs_json: str,
            rrs_json: str) -> bool:
        proof_req = json.loads(proof_req_json)
        proof = json.loads(proof_json)
        (schemas, cred_defs) = (json.loads(schemas_json), json.loads(cred_defs_json))
        (rr_defs, rrs) = (json.loads(rr_defs_json), json.loads(rrs_json))

        if proof['proof']['nonce_digest'] != sha256(proof_req['nonce'].encode()).hexdigest():
            return False
        requested_proof = proof['requested_proof']
        attr_refts = (
            set(requested_proof['revealed_attrs'])
            | set(requested_proof['unrevealed_attrs'])
            | set(requested_proof['self_attested_attrs']))
        if attr_refts != set(proof_req['requested_attributes']):
            return False
        if set(requested_proof['predicates']) != set(proof_req['requested_predicates']):
            return False

        for (index, proof_ident) in enumerate(proof['identifiers']):
            if proof_ident['schema_id'] not in schemas or proof_ident['cred_def_id'] not in cred_defs:
                raise BadCryptoOp('Verification needs schema and cred def for sub-proof {}'.format(index))
            rr_id = proof_ident.get('rev_reg_id')
            if not rr_id or proof_ident.get('timestamp') is None:
                continue
            if rr_id not in rr_defs or str(proof_ident['timestamp']) not in rrs.get(rr_id, {}):
                raise BadCryptoOp('Verification needs rev reg {} at {}'.format(rr_id, proof_ident['timestamp']))
            rr_state = rrs[rr_id][str(proof_ident['timestamp'])]
            if proof['proof']['proofs'][index]['cred_rev_id'] in rr_state['value']['revoked']:
                return False

        return True


class MemoryStore(RecordStore):
    """
    Record store over a dict in place of wallet non-secret storage.
    """

    def __init__(self, wallet):
        super().__init__(wallet)
        self._records = {}  # (type, id) -> storage record

    async def _add(self, storec) -> None:
        self._check_open('_add')
        if (storec.type, storec.id) in self._records:
            raise ExtantRecord('{} record {} already present'.format(storec.type, storec.id))
        self._records[(storec.type, storec.id)] = storec

    async def _update(self, storec) -> None:
        self._check_open('_update')
        if (storec.type, storec.id) not in self._records:
            raise AbsentRecord('No {} record {}'.format(storec.type, storec.id))
        self._records[(storec.type, storec.id)] = storec

    async def _fetch(self, typ: str, ident: str):
        self._check_open('_fetch')
        return self._records.get((typ, ident))

    async def _query(self, typ: str, query: dict, limit: int = None) -> list:
        self._check_open('_query')
        rv = [
            storec for ((s_type, _), storec) in self._records.items()
            if s_type == typ and all(storec.tags.get(k) == v for k, v in query.items())
        ]
        return rv if limit is None else rv[:limit]

    async def _remove(self, typ: str, ident: str) -> bool:
        self._check_open('_remove')
        return self._records.pop((typ, ident), None) is not None


class FakeLedger(Ledger):
    """
    Ledger in memory: records writes, and keeps a clock that ticks once per revocation registry entry.
    """

    def __init__(self):
        self.now = 1500000000
        self.schemas = {}
        self.cred_defs = {}
        self.rev_reg_defs = {}
        self.rev_reg_entries = {}  # rr_id -> list of (timestamp, entry value)
        self.writes = []

    async def get_schema(self, pool, s_id: str) -> str:
        if s_id not in self.schemas:
            raise AbsentSchema('No schema exists on {}'.format(s_id))
        return self.schemas[s_id]

    async def get_cred_def(self, pool, cd_id: str) -> str:
        if cd_id not in self.cred_defs:
            raise AbsentCredDef('No cred def exists on {}'.format(cd_id))
        return self.cred_defs[cd_id]

    async def get_rev_reg_def(self, pool, rr_id: str) -> str:
        if rr_id not in self.rev_reg_defs:
            raise AbsentRevReg('No rev reg exists on {}'.format(rr_id))
        return self.rev_reg_defs[rr_id]

    def _state(self, rr_id: str, to: int = None) -> (set, set, int):
        entries = [(ts, value) for (ts, value) in self.rev_reg_entries.get(rr_id, []) if to is None or ts <= to]
        if not entries:
            raise AbsentRevReg('No rev reg state exists on {} to {}'.format(rr_id, to))
        (issued, revoked) = (set(), set())
        for (_, value) in entries:
            issued.update(value.get('issued') or [])
            revoked.update(value.get('revoked') or [])
        return (issued, revoked, entries[-1][0])

    async def get_rev_reg_delta(self, pool, rr_id: str, fro: int = None, to: int = None) -> (str, int):
        (issued, revoked, timestamp) = self._state(rr_id, to)
        return (
            json.dumps({'ver': '1.0', 'value': {'issued': sorted(issued), 'revoked': sorted(revoked)}}),
            timestamp)

    async def get_rev_reg(self, pool, rr_id: str, timestamp: int) -> (str, int):
        (_, revoked, ledger_timestamp) = self._state(rr_id, timestamp)
        return (json.dumps({'ver': '1.0', 'value': {'revoked': sorted(revoked)}}), ledger_timestamp)

    async def send_schema(self, pool, wallet, did: str, schema_json: str) -> str:
        schema = json.loads(schema_json)
        schema['seqNo'] = len(self.schemas) + 1
        self.schemas[schema['id']] = json.dumps(schema)
        self.writes.append(('schema', schema['id']))
        return '{}'

    async def send_cred_def(self, pool, wallet, did: str, cd_json: str) -> str:
        cd_id = json.loads(cd_json)['id']
        self.cred_defs[cd_id] = cd_json
        self.writes.append(('cred_def', cd_id))
        return '{}'

    async def send_rev_reg_def(self, pool, wallet, did: str, rr_def_json: str) -> str:
        rr_id = json.loads(rr_def_json)['id']
        self.rev_reg_defs[rr_id] = rr_def_json
        self.writes.append(('rev_reg_def', rr_id))
        return '{}'

    async def send_rev_reg_entry(self, pool, wallet, did: str, rr_id: str, rr_ent_json: str) -> str:
        self.now += 1
        self.rev_reg_entries.setdefault(rr_id, []).append((self.now, json.loads(rr_ent_json)['value']))
        self.writes.append(('rev_reg_entry', rr_id))
        return '{}'


class LoopbackRouter:
    """
    Router delivering envelopes straight to the agency registered on the endpoint URI, in place of HTTP.
    A recipient's refusal surfaces as BadTransport, as a non-2xx status would.
    """

    def __init__(self):
        self.agencies = {}
        self.sent = []  # (uri, envelope)
        self.refused = []  # recipient errors

    def register(self, agency: Agency, uri: str) -> None:
        self.agencies[uri] = agency

    async def forward(self, envelope, endpoint) -> int:
        self.sent.append((endpoint.uri, envelope))
        agency = self.agencies.get(endpoint.uri)
        if agency is None:
            raise BadTransport('No agency at {}'.format(endpoint.uri))
        try:
            await agency.receive(envelope.to_bytes())
        except VonAgencyError as x_von:
            self.refused.append(x_von)
            raise BadTransport('Delivery to {} refused: {}'.format(endpoint.uri, x_von))
        return 202


@pytest.fixture
def blobs(monkeypatch):
    logger = logging.getLogger(__name__)
    logger.debug('blobs: >>>')

    res = FakeBlobStorage()
    monkeypatch.setattr('von_agency.tails.blob_storage', res)

    logger.debug('blobs: <<< res: %r', res)
    return res


@pytest.fixture
def ledger():
    return FakeLedger()


@pytest.fixture
def router():
    return LoopbackRouter()


@pytest.fixture
def pool():
    return NodePool('von-agency-test')


@pytest.fixture
def make_agency(tmp_path, blobs, ledger, router, pool):
    logger = logging.getLogger(__name__)

    async def _make_agency(name: str, provision: bool = True, agency_router=None, **config) -> Agency:
        logger.debug('make_agency: >>> name: %r, config: %r', name, config)

        wallet = await FakeWallet(name, blobs).open()
        config.setdefault('tails_dir', str(tmp_path.joinpath(name, 'tails')))
        rv = Agency(
            wallet,
            pool,
            config,
            store=MemoryStore(wallet),
            ledger=ledger,
            router=agency_router or router)
        if provision:
            uri = 'http://{}.example/agent'.format(name)
            await rv.provisioning.provision(uri, ConnectionAlias(name.title()))
            router.register(rv, uri)

        logger.debug('make_agency: <<< res: %r', rv)
        return rv

    return _make_agency


@pytest.fixture
def connect():

    async def _connect(inviter: Agency, invitee: Agency) -> tuple:
        (record, invitation) = await inviter.connections.create_invitation()
        accepted = await invitee.connections.accept_invitation(invitation)
        return (await inviter.connections.get(record.id), await invitee.connections.get(accepted.id))

    return _connect


@pytest.fixture
def pool_ip():
    logger = logging.getLogger(__name__)
    logger.debug('pool_ip: >>>')

    res = environ.get('TEST_POOL_IP', None)

    logger.debug('pool_ip: <<< res: %r', res)
    return res


@pytest.fixture
def pool_genesis_txn_data(pool_ip):
    logger = logging.getLogger(__name__)
    logger.debug('pool_genesis_txn_data: >>> pool_ip: %r', pool_ip)

    res = '\n'.join([
        '{{"reqSignature":{{}},"txn":{{"data":{{"data":{{"alias":"Node{0}","blskey":"{1}","blskey_pop":"{8}","client_ip":"{2}","client_port":{3},"node_ip":"{2}","node_port":{4},"services":["VALIDATOR"]}},"dest":"{5}"}},"metadata":{{"from":"{6}"}},"type":"0"}},"txnMetadata":{{"seqNo":{0},"txnId":"{7}"}},"ver":"1"}}'.format(
            i + 1, node[0], pool_ip, 9702 + 2 * i, 9701 + 2 * i, node[1], node[2], node[3], node[4])
        for (i, node) in enumerate([
            (
                '4N8aUNHSgjQVgkpm8nhNEfDf6txHznoYREg9kirmJrkivgL4oSEimFF6nsQ6M41QvhM2Z33nves5vfSn9n1UwNFJBYtWVnHYMATn76vLuL3zU88KyeAYcHfsih3He6UHcXDxcaecHVz6jhCYz1P2UZn2bDVruL5wXpehgBfBaLKm3Ba',
                'Gw6pDLhcBcoQesN72qfotTgFa7cbuqZpkX3Xo6pLhPhv',
                'Th7MpTaRZVRYnPiabds81Y',
                'fea82e10e894419fe2bea7d96296a6d46f50f93f9eeda954ec461b2ed2950b62',
                'RahHYiCvoNCtPTrVtP7nMC5eTYrsUA8WjXbdhNc8debh1agE9bGiJxWBXYNFbnJXoXhWFMvyqhqhRoq737YQemH5ik9oL7R4NTTCz2LEZhkgLJzB3QRQqJyBNyv7acbdHrAT8nQ9UkLbaVL9NBpnWXBTw4LEMePaSHEw66RzPNdAX1'),
            (
                '37rAPpXVoxzKhz7d9gkUe52XuXryuLXoM6P6LbWDB7LSbG62Lsb33sfG7zqS8TK1MXwuCHj1FKNzVpsnafmqLG1vXN88rt38mNFs9TENzm4QHdBzsvCuoBnPH7rpYYDo9DZNJePaDvRvqJKByCabubJz3XXKbEeshzpz4Ma5QYpJqjk',
                '8ECVSk179mjsjKRLWiQtssMLgp6EPhWXtaYyStWPSGAb',
                'EbP4aYNeTHL6q385GuVpRV',
                '1ac8aece2a18ced660fef8694b61aac3af08ba875ce3026a160acbc3a3af35fc',
                'Qr658mWZ2YC8JXGXwMDQTzuZCWF7NK9EwxphGmcBvCh6ybUuLxbG65nsX4JvD4SPNtkJ2w9ug1yLTj6fgmuDg41TgECXjLCij3RMsV8CwewBVgVN67wsA45DFWvqvLtu4rjNnE9JbdFTc1Z4WCPA3Xan44K1HoHAq9EVeaRYs8zoF5'),
            (
                '3WFpdbg7C5cnLYZwFZevJqhubkFALBfCBBok15GdrKMUhUjGsk3jV6QKj6MZgEubF7oqCafxNdkm7eswgA4sdKTRc82tLGzZBd6vNqU8dupzup6uYUf32KTHTPQbuUM8Yk4QFXjEf2Usu2TJcNkdgpyeUSX42u5LqdDDpNSWUK5deC5',
                'DKVxG2fXXTU8yT5N7hGEbXB3dfdAnYv1JczDUHpmDxya',
                '4cU41vWW82ArfxJxHkzXPG',
                '7e9f355dffa78ed24668f0e0e369fd8c224076571c51e2ea8be5f26479edebe4',
                'QwDeb2CkNSx6r8QC8vGQK3GRv7Yndn84TGNijX8YXHPiagXajyfTjoR87rXUu4G4QLk2cF8NNyqWiYMus1623dELWwx57rLCFqGh7N4ZRbGDRP4fnVcaKg1BcUxQ866Ven4gw8y4N56S5HzxXNBZtLYmhGHvDtk6PFkFwCvxYrNYjh'),
            (
                '2zN3bHM1m4rLz54MJHYSwvqzPchYp8jkHswveCLAEJVcX6Mm1wHQD1SkPYMzUDTZvWvhuE6VNAkK3KxVeEmsanSmvjVkReDeBEMxeDaayjcZjFGPydyey1qxBHmTvAnBKoPydvuTAqx5f7YNNRAdeLmUi99gERUU7TD8KfAa6MpQ9bw',
                '4PS3EDQ3dW1tci1Bp6543CfuuebjFrg36kLAUcskGfaA',
                'TWwCRQRZ2ZHMJFn9TzLp7W',
                'aa5e817d7cc626170eca175822029339a444eb0ee8f0bd20d3b0b76e566fb008',
                'RPLagxaR5xdimFzwmzYnz4ZhWtYQEj8iR5ZU53T2gitPCyCHQneUn2Huc4oeLd2B2HzkGnjAff4hWTJT6C7qHYB1Mv2wU5iHHGFWkhnTX9WsEAbunJCV2qcaXScKj4tTfvdDKfLiVuU2av6hbsMztirRze7LvYBkRHV3tGwyCptsrP')])
    ])

    logger.debug('pool_genesis_txn_data: <<< res: %r', res)
    return res


@pytest.fixture
def tails_app():

    def _tails_app(tails_dir: str, delay: float = 0) -> (web.Application, list):
        hits = []

        async def _get(request: web.Request) -> web.Response:
            name = request.match_info['name']
            hits.append(name)
            if delay:
                await asyncio.sleep(delay)
            path = join(tails_dir, name)
            if not isfile(path):
                raise web.HTTPNotFound()
            with open(path, 'rb') as fh_tails:
                return web.Response(body=fh_tails.read(), content_type='application/octet-stream')

        app = web.Application()
        app.router.add_get('/tails/{name}', _get)
        return (app, hits)

    return _tails_app
