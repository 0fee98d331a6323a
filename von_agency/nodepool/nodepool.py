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

from os.path import expanduser, expandvars, isfile, realpath

from indy import pool
from indy.error import IndyError, ErrorCode

from von_agency.error import AbsentPool, ExtantPool
from von_agency.validcfg import validate_config


LOGGER = logging.getLogger(__name__)


class NodePool:
    """
    Class encapsulating indy-sdk node pool.
    """

    PROTOCOL_VERSION = 2

    def __init__(self, name: str, genesis_txn_path: str = None, config: dict = None) -> None:
        """
        Initializer for node pool. Does not open the pool, only retains input parameters.

        :param name: name of the pool
        :param genesis_txn_path: path to genesis transaction file, for ledger configuration on first open
        :param config: configuration, None for default
        """

        LOGGER.debug('NodePool.__init__ >>> name: %s, genesis_txn_path: %s, config: %s', name, genesis_txn_path, config)

        self._name = name
        self._genesis_txn_path = genesis_txn_path
        self._handle = None
        self._config = config or {}
        validate_config('pool', self._config)

        LOGGER.debug('NodePool.__init__ <<<')

    @property
    def name(self) -> str:
        """
        Accessor for pool name.

        :return: pool name
        """

        return self._name

    @property
    def handle(self) -> int:
        """
        Accessor for indy-sdk pool handle.

        :return: indy-sdk pool handle
        """

        return self._handle

    @property
    def config(self) -> dict:
        """
        Accessor for pool config.

        :return: pool config
        """

        return self._config

    async def add_config(self) -> None:
        """
        Add node pool ledger configuration from genesis transaction file. Raise ExtantPool if configuration
        is already present, AbsentPool if there is no genesis transaction file to configure from.
        """

        LOGGER.debug('NodePool.add_config >>>')

        path_gen = realpath(expanduser(expandvars(self._genesis_txn_path or '')))
        if not self._genesis_txn_path or not isfile(path_gen):
            LOGGER.debug('NodePool.add_config <!< No genesis transaction file at %s', self._genesis_txn_path)
            raise AbsentPool('No genesis transaction file at {}'.format(self._genesis_txn_path))

        try:
            await pool.create_pool_ledger_config(self.name, json.dumps({'genesis_txn': path_gen}))
        except IndyError as x_indy:
            if x_indy.error_code == ErrorCode.PoolLedgerConfigAlreadyExistsError:
                LOGGER.debug('NodePool.add_config <!< Node pool %s configuration already present', self.name)
                raise ExtantPool('Node pool {} configuration already present'.format(self.name))
            LOGGER.debug(
                'NodePool.add_config <!< cannot create pool %s ledger configuration: indy error %s',
                self.name,
                x_indy.error_code)
            raise AbsentPool('Cannot create pool {} ledger configuration: indy error {}'.format(
                self.name,
                x_indy.error_code))

        LOGGER.info('Added node pool %s ledger configuration from %s', self.name, path_gen)
        LOGGER.debug('NodePool.add_config <<<')

    async def __aenter__(self) -> 'NodePool':
        """
        Context manager entry. Opens pool as configured, for closure on context manager exit.

        :return: current object
        """

        LOGGER.debug('NodePool.__aenter__ >>>')

        rv = await self.open()

        LOGGER.debug('NodePool.__aenter__ <<<')
        return rv

    async def open(self) -> 'NodePool':
        """
        Explicit entry. Opens pool as configured, for later closure via close().
        Adds pool ledger configuration first if absent and genesis transaction file is available.

        Raise AbsentPool if node pool ledger configuration is not available.

        :return: current object
        """

        LOGGER.debug('NodePool.open >>>')

        await pool.set_protocol_version(NodePool.PROTOCOL_VERSION)

        configured = False
        while True:
            try:
                self._handle = await pool.open_pool_ledger(self.name, json.dumps(self.config))
                break
            except IndyError as x_indy:
                if x_indy.error_code == ErrorCode.PoolLedgerNotCreatedError:
                    if self._genesis_txn_path and not configured:
                        await self.add_config()
                        configured = True
                        continue
                    LOGGER.debug('NodePool.open <!< Absent node pool %s ledger configuration', self.name)
                    raise AbsentPool('Absent node pool {} ledger configuration'.format(self.name))
                LOGGER.debug(
                    'NodePool.open <!< cannot open node pool %s: indy error code %s',
                    self.name,
                    x_indy.error_code)
                raise AbsentPool('Cannot open node pool {}: indy error code {}'.format(self.name, x_indy.error_code))

        LOGGER.info('Opened node pool %s on handle %s', self.name, self.handle)
        LOGGER.debug('NodePool.open <<<')
        return self

    async def __aexit__(self, exc_type, exc, traceback) -> None:
        """
        Context manager exit. Closes pool.

        :param exc_type:
        :param exc:
        :param traceback:
        """

        LOGGER.debug('NodePool.__aexit__ >>>')

        await self.close()

        LOGGER.debug('NodePool.__aexit__ <<<')

    async def close(self) -> None:
        """
        Explicit exit. Closes pool.
        """

        LOGGER.debug('NodePool.close >>>')

        if not self.handle:
            LOGGER.warning('Abstaining from closing pool %s: already closed', self.name)
        else:
            await pool.close_pool_ledger(self.handle)
        self._handle = None

        LOGGER.debug('NodePool.close <<<')

    def __repr__(self) -> str:
        """
        Return representation for current object.

        :return: representation for current object
        """

        return 'NodePool({}, {}, {})'.format(self.name, self._genesis_txn_path, self.config)
