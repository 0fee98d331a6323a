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
import threading

from os import listdir, urandom

import pytest

from aiohttp import test_utils

from von_agency.error import AbsentRevReg, AbsentTails, BadTailsDownload, CorruptTails
from von_agency.frill import Ink
from von_agency.tails import TailsCache
from von_agency.util import tails_file_hash, tails_hash


RR_ID = 'LjgpST2rjsoxYegQDRm7EL:4:LjgpST2rjsoxYegQDRm7EL:3:CL:20:tag:CL_ACCUM:{}'


def publish(ledger, rr_id: str, location: str = None, t_hash: str = None) -> None:
    value = {'issuanceType': 'ISSUANCE_BY_DEFAULT', 'maxCredNum': 64}
    if location:
        value['tailsLocation'] = location
    if t_hash:
        value['tailsHash'] = t_hash
    ledger.rev_reg_defs[rr_id] = json.dumps({'ver': '1.0', 'id': rr_id, 'value': value})


@pytest.mark.asyncio
async def test_ensure_local(tmp_path, ledger, pool, tails_app):
    print(Ink.YELLOW('\n\n== Testing tails download =='))

    issuer_dir = tmp_path.joinpath('issuer')
    issuer_dir.mkdir()
    content = urandom(2048)
    name = tails_hash(content)
    issuer_dir.joinpath(name).write_bytes(content)
    issuer_dir.joinpath('bogus').write_bytes(urandom(64))

    cache = TailsCache(ledger, str(tmp_path.joinpath('holder')))
    (app, hits) = tails_app(str(issuer_dir), 0.1)
    async with test_utils.TestServer(app) as server:
        publish(ledger, RR_ID.format(0), str(server.make_url('/tails/{}'.format(name))), name)
        publish(ledger, RR_ID.format(1), str(server.make_url('/tails/bogus')), tails_hash(b'not bogus'))
        publish(ledger, RR_ID.format(2), str(server.make_url('/tails/absent')), tails_hash(b'absent'))

        names = await asyncio.gather(*[cache.ensure_local(pool, RR_ID.format(0)) for _ in range(3)])
        assert names == [name] * 3
        assert hits == [name]
        with open(cache.path(name), 'rb') as fh_tails:
            assert fh_tails.read() == content
        print('\n\n== 1 == Concurrent requests for absent tails file download it once OK')

        assert await cache.ensure_local(pool, RR_ID.format(0)) == name
        assert hits == [name]
        print('\n\n== 2 == Request for verified local tails file downloads nothing OK')

        with open(cache.path(name), 'wb') as fh_tails:
            fh_tails.write(b'truncated')
        assert await TailsCache(ledger, cache.base_dir).ensure_local(pool, RR_ID.format(0)) == name
        assert hits == [name, name]
        with open(cache.path(name), 'rb') as fh_tails:
            assert fh_tails.read() == content
        print('\n\n== 3 == Local tails file not matching its hash is fetched afresh OK')

        with pytest.raises(CorruptTails):
            await cache.ensure_local(pool, RR_ID.format(1))
        assert sorted(listdir(cache.base_dir)) == [name]
        print('\n\n== 4 == Download not matching tails hash raises CorruptTails, leaving no file, as expected')

        results = await asyncio.gather(
            *[cache.ensure_local(pool, RR_ID.format(2)) for _ in range(2)],
            return_exceptions=True)
        assert all(isinstance(x, BadTailsDownload) for x in results)
        assert hits.count('absent') == 1
        with pytest.raises(BadTailsDownload):
            await cache.ensure_local(pool, RR_ID.format(2))
        assert hits.count('absent') == 2
        print('\n\n== 5 == Failed download raises BadTailsDownload to every waiter, and is not memoized, as expected')

    with pytest.raises(AbsentRevReg):
        await cache.ensure_local(pool, RR_ID.format(9))
    publish(ledger, RR_ID.format(3))
    with pytest.raises(AbsentRevReg):
        await cache.ensure_local(pool, RR_ID.format(3))
    print('\n\n== 6 == Absent rev reg or tails location raises AbsentRevReg as expected')


@pytest.mark.asyncio
async def test_ensure_local_chunks(tmp_path, ledger, pool, tails_app, monkeypatch):
    print(Ink.YELLOW('\n\n== Testing tails download and verification in chunks =='))

    issuer_dir = tmp_path.joinpath('issuer')
    issuer_dir.mkdir()
    content = urandom(3 * TailsCache.CHUNK_SIZE + 17)
    name = tails_hash(content)
    issuer_dir.joinpath(name).write_bytes(content)

    hash_threads = []

    def _tails_file_hash(path: str) -> str:
        hash_threads.append(threading.current_thread())
        return tails_file_hash(path)

    monkeypatch.setattr('von_agency.tails.tails_file_hash', _tails_file_hash)

    cache = TailsCache(ledger, str(tmp_path.joinpath('holder')))
    (app, hits) = tails_app(str(issuer_dir))
    async with test_utils.TestServer(app) as server:
        publish(ledger, RR_ID.format(0), str(server.make_url('/tails/{}'.format(name))), name)

        assert await cache.ensure_local(pool, RR_ID.format(0)) == name
        with open(cache.path(name), 'rb') as fh_tails:
            assert fh_tails.read() == content
        assert sorted(listdir(cache.base_dir)) == [name]
        assert hash_threads == []
        print('\n\n== 1 == Tails file of several chunks downloads and verifies on the way OK')

        assert await TailsCache(ledger, cache.base_dir).ensure_local(pool, RR_ID.format(0)) == name
        assert hits == [name]
        assert len(hash_threads) == 1
        assert hash_threads[0] is not threading.main_thread()
        print('\n\n== 2 == Local tails file verifies off the event loop, without download, OK')


@pytest.mark.asyncio
async def test_open(tmp_path, blobs, ledger, monkeypatch):
    print(Ink.YELLOW('\n\n== Testing tails readers and writers =='))

    cache = TailsCache(ledger, str(tmp_path.joinpath('tails')))
    with open(cache.path('abc'), 'wb') as fh_tails:
        fh_tails.write(urandom(64))

    handles = await asyncio.gather(*[cache.open_for_read('abc') for _ in range(3)])
    assert len(set(handles)) == 1
    assert len(blobs.readers) == 1
    assert blobs.readers[handles[0]]['base_dir'] == cache.base_dir
    assert blobs.readers[handles[0]]['file'] == 'abc'
    assert await cache.open_for_read('abc') == handles[0]
    print('\n\n== 1 == Concurrent reads on tails file share one reader handle OK')

    with pytest.raises(AbsentTails):
        await cache.open_for_read('def')
    with open(cache.path('def'), 'wb') as fh_tails:
        fh_tails.write(urandom(64))
    assert await cache.open_for_read('def') not in handles
    assert len(blobs.readers) == 2
    print('\n\n== 2 == Read on absent tails file raises AbsentTails, without memoizing failure, as expected')

    writers = [await cache.open_for_write() for _ in range(2)]
    assert len(set(writers)) == 2
    assert all(blobs.writers[w]['base_dir'] == cache.base_dir for w in writers)
    print('\n\n== 3 == Each writer request gets a new handle OK')

    monkeypatch.setenv('VON_TAILS_DIR', str(tmp_path.joinpath('elsewhere')))
    assert TailsCache.default_dir() == str(tmp_path.joinpath('elsewhere'))
    assert TailsCache(ledger).base_dir == str(tmp_path.joinpath('elsewhere'))
    print('\n\n== 4 == Default tails directory follows environment OK')
