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

import pytest

from von_agency.error import AbsentCredDef, AbsentRecord, AbsentRevReg, BadTransport, ProtocolState
from von_agency.frill import Ink, ppjson
from von_agency.messages import CredentialOffer
from von_agency.records import ConnectionState, CredentialState
from von_agency.transport import EnvelopeCodec
from von_agency.util import encode


class Outbox:
    """
    Router that takes envelopes without delivering them, as for a peer that has yet to answer.
    """

    def __init__(self):
        self.sent = []

    async def forward(self, envelope, endpoint) -> int:
        self.sent.append((endpoint.uri, envelope))
        return 202


@pytest.mark.asyncio
async def test_issue(make_agency, router, connect, ledger, pool):
    print(Ink.YELLOW('\n\n== Testing credential issuance =='))

    issuer = await make_agency('issuer')
    holder = await make_agency('holder')
    (i_conn, h_conn) = await connect(issuer, holder)

    s_id = await issuer.schemas.create_schema(pool, 'drinks', '1.0', ['name', 'age'])
    cd_id = await issuer.schemas.create_credential_definition(pool, s_id)
    print('\n\n== 1 == Issuer has cred def {} on schema {}'.format(cd_id, s_id))

    i_rec = await issuer.credentials.send_offer(i_conn.connection_id, s_id, {'name': 'Alice', 'age': 30})
    assert i_rec.state == CredentialState.OFFERED
    assert i_rec.thread_id == i_rec.id
    assert i_rec.cred_def_id == cd_id
    assert i_rec.values == {'name': 'Alice', 'age': '30'}
    (_, offer) = router.sent[-1]

    (h_rec,) = await holder.credentials.list(CredentialState.OFFERED)
    assert h_rec.id != i_rec.id
    assert h_rec.thread_id == i_rec.id
    assert h_rec.connection_id == h_conn.connection_id
    assert (h_rec.schema_id, h_rec.cred_def_id) == (s_id, cd_id)
    assert h_rec.values == i_rec.values
    assert (await holder.receive(offer.to_bytes())).id == h_rec.id
    assert len(await holder.credentials.list()) == 1
    print('\n\n== 2 == Holder files offer as {}; redelivery is a no-op OK'.format(h_rec.id))

    with pytest.raises(ProtocolState):
        await issuer.credentials.issue_credential(pool, i_rec.id)
    print('\n\n== 3 == Issue before request raises ProtocolState as expected')

    h_rec = await holder.credentials.accept_offer(pool, h_rec.id)
    assert h_rec.state == CredentialState.REQUESTED
    (_, request) = router.sent[-1]
    i_rec = await issuer.credentials.get(i_rec.id)
    assert i_rec.state == CredentialState.REQUESTED
    assert i_rec.request_json == h_rec.request_json
    assert json.loads(i_rec.request_json)['prover_did'] == h_conn.my_did
    assert await issuer.receive(request.to_bytes()) == i_rec
    print('\n\n== 4 == Issuer has request: {}; redelivery is a no-op OK'.format(ppjson(i_rec.request_json)))

    i_rec = await issuer.credentials.issue_credential(pool, i_rec.id)
    assert i_rec.state == CredentialState.ISSUED
    assert i_rec.cred_rev_id is None
    (_, credential) = router.sent[-1]
    h_rec = await holder.credentials.get(h_rec.id)
    assert h_rec.state == CredentialState.ISSUED
    assert h_rec.credential_id
    assert not h_rec.revocable
    cred_info = json.loads(await holder.wallet.get_cred(h_rec.credential_id))
    print('\n\n== 5 == Holder stored credential: {}'.format(ppjson(cred_info)))
    assert cred_info['attrs'] == {'name': 'Alice', 'age': '30'}
    assert json.loads(h_rec.credential_json)['values']['age'] == {'raw': '30', 'encoded': encode(30)}
    assert json.loads(h_rec.credential_json)['values']['name']['encoded'] == encode('Alice')

    sent = len(router.sent)
    assert (await holder.receive(credential.to_bytes())).credential_id == h_rec.credential_id
    assert len(router.sent) == sent
    print('\n\n== 6 == Redelivered credential is a no-op OK')

    with pytest.raises(AbsentRevReg):
        await issuer.credentials.revoke_credential(pool, i_rec.id)
    assert (await issuer.credentials.get(i_rec.id)).state == CredentialState.ISSUED
    print('\n\n== 7 == Revoking non-revocable credential raises AbsentRevReg as expected')

    assert [r.id for r in await issuer.credentials.list(CredentialState.ISSUED, i_conn.connection_id)] == [i_rec.id]
    assert await issuer.credentials.list(CredentialState.OFFERED) == []
    with pytest.raises(AbsentRecord):
        await issuer.credentials.get('no-such-credential')
    print('\n\n== 8 == Listing and absent records OK')


@pytest.mark.asyncio
async def test_revocable(make_agency, router, connect, ledger, pool):
    print(Ink.YELLOW('\n\n== Testing revocable credential issuance =='))

    issuer = await make_agency('issuer', tails_base_uri='https://tails.example/tails')
    holder = await make_agency('holder')
    (i_conn, _) = await connect(issuer, holder)

    s_id = await issuer.schemas.create_schema(pool, 'licence', '1.0', ['name', 'class'])
    cd_id = await issuer.schemas.create_credential_definition(pool, s_id, revocable=True)
    definition = await issuer.schemas.get_definition(cd_id)

    cred_rev_ids = []
    for name in ('Alice', 'Bob'):
        i_rec = await issuer.credentials.send_offer(i_conn.connection_id, s_id, {'name': name, 'class': 'C'})
        h_rec = (await holder.credentials.list(CredentialState.OFFERED))[0]
        await holder.credentials.accept_offer(pool, h_rec.id)
        i_rec = await issuer.credentials.issue_credential(pool, i_rec.id)
        assert i_rec.rev_reg_id == definition.rev_reg_id
        cred_rev_ids.append(i_rec.cred_rev_id)
        h_rec = await holder.credentials.get(h_rec.id)
        assert h_rec.revocable
        assert h_rec.rev_reg_id == definition.rev_reg_id
    assert cred_rev_ids == ['1', '2']
    assert [value.get('issued') for (_, value) in ledger.rev_reg_entries[definition.rev_reg_id][1:]] == [['1'], ['2']]
    print('\n\n== 1 == Issued revocable credentials on cred rev ids {}'.format(cred_rev_ids))

    now = ledger.now
    i_rec = await issuer.credentials.revoke_credential(pool, i_rec.id)
    assert i_rec.state == CredentialState.REVOKED
    assert ledger.now == now + 1
    assert ledger.rev_reg_entries[definition.rev_reg_id][-1] == (ledger.now, {'revoked': ['2']})
    with pytest.raises(ProtocolState):
        await issuer.credentials.revoke_credential(pool, i_rec.id)
    print('\n\n== 2 == Revoked credential on cred rev id 2; second revocation raises ProtocolState as expected')


@pytest.mark.asyncio
async def test_offer_errors(make_agency, router, connect, pool):
    print(Ink.YELLOW('\n\n== Testing credential offer errors =='))

    issuer = await make_agency('issuer')
    holder = await make_agency('holder')
    (i_conn, _) = await connect(issuer, holder)

    s_id = await issuer.schemas.create_schema(pool, 'drinks', '1.0', ['name', 'age'])
    with pytest.raises(AbsentCredDef):
        await issuer.credentials.send_offer(i_conn.connection_id, s_id, {'name': 'Alice', 'age': 30})
    cd_id = await issuer.schemas.create_credential_definition(pool, s_id)
    s_id_other = await issuer.schemas.create_schema(pool, 'pets', '1.0', ['name'])
    with pytest.raises(AbsentCredDef):
        await issuer.credentials.send_offer(i_conn.connection_id, s_id_other, {'name': 'Rex'}, cd_id)
    with pytest.raises(AbsentRecord):
        await issuer.credentials.send_offer('no-such-connection', s_id, {'name': 'Alice', 'age': 30})
    print('\n\n== 1 == Offers without cred def or connection raise as expected')

    (i_pending, invitation) = await issuer.connections.create_invitation()
    with pytest.raises(ProtocolState):
        await issuer.credentials.send_offer(i_pending.connection_id, s_id, {'name': 'Alice', 'age': 30})
    print('\n\n== 2 == Offer on connection not yet connected raises ProtocolState as expected')

    dave = await make_agency('dave', agency_router=Outbox())
    (_, invitation) = await issuer.connections.create_invitation()
    d_pending = await dave.connections.accept_invitation(invitation)
    assert d_pending.state == ConnectionState.NEGOTIATING

    offer_json = await issuer.wallet.create_cred_offer(cd_id)
    envelope = await EnvelopeCodec(issuer.wallet).seal(
        CredentialOffer('some-thread', offer_json, {'name': 'Alice', 'age': '30'}),
        d_pending.my_key,
        invitation.connection_key)
    with pytest.raises(ProtocolState):
        await dave.receive(envelope.to_bytes())
    assert await dave.credentials.list() == []
    print('\n\n== 3 == Offer from peer on connection not yet connected raises ProtocolState as expected')


@pytest.mark.asyncio
async def test_undelivered(make_agency, router, connect, ledger, pool):
    print(Ink.YELLOW('\n\n== Testing credential exchange steps on undelivered messages =='))

    issuer = await make_agency('issuer', tails_base_uri='https://tails.example/tails')
    holder = await make_agency('holder')
    (i_conn, _) = await connect(issuer, holder)
    (i_uri, h_uri) = ('http://issuer.example/agent', 'http://holder.example/agent')

    s_id = await issuer.schemas.create_schema(pool, 'licence', '1.0', ['name', 'class'])
    cd_id = await issuer.schemas.create_credential_definition(pool, s_id, revocable=True)
    definition = await issuer.schemas.get_definition(cd_id)

    router.agencies.pop(h_uri)
    with pytest.raises(BadTransport):
        await issuer.credentials.send_offer(i_conn.connection_id, s_id, {'name': 'Alice', 'class': 'C'})
    assert await issuer.credentials.list() == []
    router.register(holder, h_uri)
    i_rec = await issuer.credentials.send_offer(i_conn.connection_id, s_id, {'name': 'Alice', 'class': 'C'})
    (h_rec,) = await holder.credentials.list(CredentialState.OFFERED)
    print('\n\n== 1 == Undelivered offer leaves no record; offer on retry reaches holder OK')

    router.agencies.pop(i_uri)
    with pytest.raises(BadTransport):
        await holder.credentials.accept_offer(pool, h_rec.id)
    h_rec = await holder.credentials.get(h_rec.id)
    assert h_rec.state == CredentialState.OFFERED
    assert h_rec.request_json is None
    assert (await issuer.credentials.get(i_rec.id)).state == CredentialState.OFFERED
    router.register(issuer, i_uri)
    h_rec = await holder.credentials.accept_offer(pool, h_rec.id)
    assert h_rec.state == CredentialState.REQUESTED
    assert (await issuer.credentials.get(i_rec.id)).request_json == h_rec.request_json
    print('\n\n== 2 == Undelivered request leaves holder record Offered; request on retry reaches issuer OK')

    entries = len(ledger.rev_reg_entries[definition.rev_reg_id])
    router.agencies.pop(h_uri)
    with pytest.raises(BadTransport):
        await issuer.credentials.issue_credential(pool, i_rec.id)
    i_rec = await issuer.credentials.get(i_rec.id)
    assert i_rec.state == CredentialState.REQUESTED
    assert i_rec.cred_rev_id == '1'
    assert len(ledger.rev_reg_entries[definition.rev_reg_id]) == entries + 1
    assert (await holder.credentials.get(h_rec.id)).state == CredentialState.REQUESTED
    print('\n\n== 3 == Undelivered credential leaves issuer record Requested, holding its credential, as expected')

    router.register(holder, h_uri)
    i_rec = await issuer.credentials.issue_credential(pool, i_rec.id)
    assert i_rec.state == CredentialState.ISSUED
    assert i_rec.cred_rev_id == '1'
    assert len(ledger.rev_reg_entries[definition.rev_reg_id]) == entries + 1
    h_rec = await holder.credentials.get(h_rec.id)
    assert h_rec.state == CredentialState.ISSUED
    assert h_rec.credential_json == i_rec.credential_json
    print('\n\n== 4 == Credential on retry goes out again without reissue, and holder stores it, OK')
