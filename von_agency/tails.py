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
from os import environ, makedirs, remove, replace
from os.path import expanduser, isfile, join
from tempfile import NamedTemporaryFile

import aiohttp

from indy import blob_storage
from indy.error import IndyError

from von_agency.error import AbsentRevReg, AbsentTails, BadTailsDownload, CorruptTails
from von_agency.ledger import Ledger
from von_agency.nodepool import NodePool
from von_agency.util import digest_tails_hash, tails_file_hash, tails_filename


LOGGER = logging.getLogger(__name__)


class TailsCache:
    """
    Local cache of revocation registry tails files, in one flat directory, keyed by file name.

    Reader handles are memoized per file name for the life of the instance; downloads run at most once
    per file name at a time. Each per-name entry is an asyncio future that only its first requester
    fills: later requesters await the same future.
    """

    DEFAULT_TIMEOUT = 60  # seconds, for tails file download
    CHUNK_SIZE = 1 << 16  # bytes, per read of tails file download

    def __init__(self, ledger: Ledger, base_dir: str = None, timeout: int = None) -> None:
        """
        Initializer for tails cache. Create tails directory if need be.

        :param ledger: ledger client, to look up revocation registry definitions
        :param base_dir: tails directory (default from VON_TAILS_DIR environment variable,
            else ~/.indy_client/tails)
        :param timeout: download timeout in seconds
        """

        LOGGER.debug('TailsCache.__init__ >>> base_dir: %s, timeout: %s', base_dir, timeout)

        self._ledger = ledger
        self._base_dir = base_dir or TailsCache.default_dir()
        self._timeout = timeout or TailsCache.DEFAULT_TIMEOUT
        self._readers = {}  # file name -> future of reader handle
        self._downloads = {}  # file name -> future of in-flight download
        self._verified = set()  # file names whose content matched their registry's tails hash

        makedirs(self._base_dir, exist_ok=True)

        LOGGER.debug('TailsCache.__init__ <<<')

    @staticmethod
    def default_dir() -> str:
        """
        Return default tails directory: VON_TAILS_DIR environment variable if set, else ~/.indy_client/tails.

        :return: default tails directory
        """

        return environ.get('VON_TAILS_DIR') or join(expanduser('~'), '.indy_client', 'tails')

    @property
    def base_dir(self) -> str:
        """
        Accessor for tails directory.

        :return: tails directory
        """

        return self._base_dir

    def path(self, filename: str) -> str:
        """
        Return local path for tails file name.

        :param filename: tails file name
        :return: path in tails directory
        """

        return join(self._base_dir, filename)

    async def open_for_read(self, filename: str) -> int:
        """
        Return blob storage reader handle on tails file, opening it only on first request for its name.
        Raise AbsentTails if file is not present or cannot be opened.

        :param filename: tails file name
        :return: reader handle
        """

        LOGGER.debug('TailsCache.open_for_read >>> filename: %s', filename)

        future = asyncio.get_event_loop().create_future()
        winner = self._readers.setdefault(filename, future)
        if winner is future:
            try:
                handle = await self._open_reader(filename)
            except Exception as x:
                self._readers.pop(filename, None)  # next request tries afresh
                future.set_exception(x)
                future.exception()  # retrieved: waiters, if any, see it too
                raise
            except BaseException:
                self._readers.pop(filename, None)
                future.cancel()
                raise
            future.set_result(handle)
            LOGGER.info('Opened tails file %s for read on handle %s', filename, handle)

        rv = await asyncio.shield(winner)
        LOGGER.debug('TailsCache.open_for_read <<< %s', rv)
        return rv

    async def _open_reader(self, filename: str) -> int:
        """
        Open blob storage reader on tails file. Raise AbsentTails if file is not present or cannot be opened.

        :param filename: tails file name
        :return: reader handle
        """

        if not isfile(self.path(filename)):
            LOGGER.debug('TailsCache._open_reader <!< No tails file %s in %s', filename, self._base_dir)
            raise AbsentTails('No tails file {} in {}'.format(filename, self._base_dir))

        try:
            return await blob_storage.open_reader(
                'default',
                json.dumps({
                    'base_dir': self._base_dir,
                    'uri_pattern': '',
                    'file': filename
                }))
        except IndyError as x_indy:
            LOGGER.debug(
                'TailsCache._open_reader <!< Cannot open tails file %s: indy error code %s',
                filename,
                x_indy.error_code)
            raise AbsentTails('Cannot open tails file {}: indy error code {}'.format(filename, x_indy.error_code))

    async def open_for_write(self) -> int:
        """
        Return new blob storage writer handle into tails directory, for an issuer to create a revocation registry.

        :return: writer handle
        """

        LOGGER.debug('TailsCache.open_for_write >>>')

        rv = await blob_storage.open_writer(
            'default',
            json.dumps({
                'base_dir': self._base_dir,
                'uri_pattern': ''
            }))

        LOGGER.debug('TailsCache.open_for_write <<< %s', rv)
        return rv

    async def ensure_local(self, pool: NodePool, rr_id: str) -> str:
        """
        Ensure that the tails file for revocation registry is present locally, with content matching the tails
        hash that the registry declares; download it from the registry's tails location if not. Return its
        file name in the tails directory.

        Raise AbsentRevReg if ledger has no such revocation registry, BadTailsDownload on download failure,
        or CorruptTails if downloaded content does not match the registry's tails hash.

        :param pool: node pool
        :param rr_id: revocation registry identifier
        :return: tails file name
        """

        LOGGER.debug('TailsCache.ensure_local >>> rr_id: %s', rr_id)

        rr_def = json.loads(await self._ledger.get_rev_reg_def(pool, rr_id) or '{}')
        value = rr_def.get('value') or {}
        if not value.get('tailsLocation'):
            LOGGER.debug('TailsCache.ensure_local <!< Rev reg %s declares no tails location', rr_id)
            raise AbsentRevReg('Rev reg {} declares no tails location'.format(rr_id))

        location = value['tailsLocation']
        rv = tails_filename(location)
        expect = value.get('tailsHash')

        if not await self._is_good(rv, expect):
            future = asyncio.get_event_loop().create_future()
            winner = self._downloads.setdefault(rv, future)
            if winner is future:
                try:
                    if not await self._is_good(rv, expect):  # a download may have completed since the first check
                        await self._download(location, rv, expect)
                except Exception as x:
                    future.set_exception(x)
                    future.exception()
                    raise
                except BaseException:
                    future.cancel()
                    raise
                else:
                    future.set_result(rv)
                finally:
                    self._downloads.pop(rv, None)
            else:
                await asyncio.shield(winner)

        LOGGER.debug('TailsCache.ensure_local <<< %s', rv)
        return rv

    async def _is_good(self, filename: str, expect: str) -> bool:
        """
        Whether tails file is present locally with content matching expected hash (if any).
        Log a warning on a present file that does not match. Hash the file in an executor, off the event loop.

        :param filename: tails file name
        :param expect: expected tails hash, None to skip verification
        :return: whether file is present and verified
        """

        path = self.path(filename)
        if not isfile(path):
            return False
        if not expect or filename in self._verified:
            return True

        actual = await asyncio.get_event_loop().run_in_executor(None, tails_file_hash, path)
        if actual == expect:
            self._verified.add(filename)
            return True

        LOGGER.warning('Tails file %s has hash %s, not %s as its rev reg declares: re-fetching', path, actual, expect)
        return False

    async def _download(self, uri: str, filename: str, expect: str) -> None:
        """
        Stream tails file into a temporary file in tails directory, hashing it on the way, and move it
        into place once complete and verified. Remove the temporary file on any failure.

        :param uri: tails location
        :param filename: tails file name
        :param expect: expected tails hash, None to skip verification
        """

        LOGGER.debug('TailsCache._download >>> uri: %s, filename: %s', uri, filename)

        digest = sha256()
        size = 0
        tmp = NamedTemporaryFile(dir=self._base_dir, prefix='.{}.'.format(filename), delete=False)
        try:
            with tmp:
                try:
                    async with aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=self._timeout)) as session:
                        async with session.get(uri) as response:
                            if response.status != 200:
                                LOGGER.debug('TailsCache._download <!< GET %s returned HTTP %s', uri, response.status)
                                raise BadTailsDownload('GET {} returned HTTP {}'.format(uri, response.status))
                            async for chunk in response.content.iter_chunked(TailsCache.CHUNK_SIZE):
                                digest.update(chunk)
                                tmp.write(chunk)
                                size += len(chunk)
                except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as x_http:
                    LOGGER.debug('TailsCache._download <!< GET %s failed: %s', uri, x_http)
                    raise BadTailsDownload('GET {} failed: {}'.format(uri, x_http))

            actual = digest_tails_hash(digest)
            if expect and actual != expect:
                LOGGER.debug('TailsCache._download <!< Tails from %s have hash %s, not %s', uri, actual, expect)
                raise CorruptTails('Tails from {} have hash {}, not {}'.format(uri, actual, expect))

            replace(tmp.name, self.path(filename))
        finally:
            if isfile(tmp.name):
                remove(tmp.name)

        if expect:
            self._verified.add(filename)

        LOGGER.info('Downloaded tails file %s (%s bytes) from %s', filename, size, uri)
        LOGGER.debug('TailsCache._download <<<')
