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


import pytest

from von_agency.error import JSONValidation
from von_agency.frill import Ink
from von_agency.models import ConnectionAlias, InviteConfig
from von_agency.nodepool import NodePool
from von_agency.validcfg import validate_config


@pytest.mark.asyncio
async def test_validate_config():
    print(Ink.YELLOW('\n\n== Testing configuration validation =='))

    for config in ({}, {'timeout': 5}, {'timeout': 5, 'extended_timeout': 10, 'preordered_nodes': ['Node1']}):
        validate_config('pool', config)
    for config in ({'timeout': 'five'}, {'proxy': 'sure'}, {'preordered_nodes': 'Node1'}):
        with pytest.raises(JSONValidation):
            validate_config('pool', config)
    with pytest.raises(JSONValidation):
        NodePool('bad-pool', None, {'timeout': 'five'})
    print('\n\n== 1 == Pool configuration validation passes OK')

    for config in (
            {},
            {'tails_dir': '/tmp/tails'},
            {'tails_base_uri': 'https://tails.example/tails', 'http_timeout': 10, 'max_cred_num': 256}):
        validate_config('agency', config)
    for config in (
            {'tails_dir': ''},
            {'tails_base_uri': 'ftp://tails.example/tails'},
            {'http_timeout': 0},
            {'max_cred_num': '64'},
            {'auto_accept': True}):
        with pytest.raises(JSONValidation):
            validate_config('agency', config)
    print('\n\n== 2 == Agency configuration validation passes OK')

    config = InviteConfig.from_dict({
        'record_id': 'my-record',
        'my_alias': {'name': 'Alice', 'image_url': 'https://alice.example/me.png'},
        'their_alias': {'name': 'Bob'}
    })
    assert config.record_id == 'my-record'
    assert config.my_alias == ConnectionAlias('Alice', 'https://alice.example/me.png')
    assert config.their_alias == ConnectionAlias('Bob')
    assert InviteConfig.from_dict(None).my_alias is None
    for config in ({'record_id': ''}, {'my_alias': {'nickname': 'Al'}}, {'channel': 'email'}):
        with pytest.raises(JSONValidation):
            InviteConfig.from_dict(config)
    print('\n\n== 3 == Invitation configuration validation passes OK')


@pytest.mark.asyncio
async def test_agency_config(make_agency):
    print(Ink.YELLOW('\n\n== Testing agency configuration =='))

    with pytest.raises(JSONValidation):
        await make_agency('bad', tails_base_uri='tails.example/tails')
    print('\n\n== 1 == Agency on bad configuration raises JSONValidation as expected')

    agency = await make_agency('good', http_timeout=5, max_cred_num=16)
    assert agency.config['http_timeout'] == 5
    assert agency.wallet.opened
    async with agency:
        assert agency.wallet.opened
    assert not agency.wallet.opened
    await agency.open()
    assert agency.wallet.opened
    print('\n\n== 2 == Agency on good configuration opens and closes its wallet OK')
