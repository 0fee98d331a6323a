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



import logging

from aiohttp import web

from von_agency.dispatch import Dispatcher
from von_agency.ledger import Ledger
from von_agency.nodepool import NodePool
from von_agency.records import BaseRecord
from von_agency.service import (
    ConnectionService,
    CredentialService,
    ProofService,
    ProvisioningService,
    SchemaService)
from von_agency.tails import TailsCache
from von_agency.transport import EnvelopeCodec, Router
from von_agency.validcfg import validate_config
from von_agency.wallet import RecordStore, Wallet


LOGGER = logging.getLogger(__name__)


class Agency:
    """
    One party's agent: wallet and node pool, with the services and dispatcher that operate on them.

    Configuration keys (all optional):

    - 'tails_dir': tails directory (default per TailsCache)
    - 'tails_base_uri': base URI where this party publishes tails files, as issuer of revocable credentials
    - 'http_timeout': timeout for envelope delivery and tails download, seconds
    - 'max_cred_num': default revocation registry capacity
    """

    def __init__(
            self,
            wallet: Wallet,
            pool: NodePool,
            config: dict = None,
            store: RecordStore = None,
            ledger: Ledger = None,
            router: Router = None,
            tails: TailsCache = None) -> None:
        """
        Initializer for agency. Raise JSONValidation on bad configuration.

        :param wallet: wallet (opened here on open() if not already open)
        :param pool: node pool, opened by caller
        :param config: configuration dict as above
        :param store: record store (default on wallet non-secrets)
        :param ledger: ledger client
        :param router: router
        :param tails: tails cache
        """

        LOGGER.debug('Agency.__init__ >>> wallet: %s, pool: %s, config: %s', wallet, pool, config)

        self._config = config or {}
        validate_config('agency', self._config)

        self._wallet = wallet
        self._pool = pool
        self._store = store or RecordStore(wallet)
        self._ledger = ledger or Ledger()
        self._router = router or Router(self._config.get('http_timeout'))
        self._tails = tails or TailsCache(
            self._ledger,
            self._config.get('tails_dir'),
            self._config.get('http_timeout'))
        self._codec = EnvelopeCodec(wallet)

        self._provisioning = ProvisioningService(wallet, self._store)
        self._schemas = SchemaService(
            wallet,
            self._store,
            self._ledger,
            self._tails,
            self._provisioning,
            self._config.get('tails_base_uri'),
            self._config.get('max_cred_num'))
        self._connections = ConnectionService(wallet, self._store, self._codec, self._router, self._provisioning)
        self._credentials = CredentialService(
            wallet,
            self._store,
            self._codec,
            self._router,
            self._ledger,
            self._tails,
            self._provisioning)
        self._proofs = ProofService(
            wallet,
            self._store,
            self._codec,
            self._router,
            self._ledger,
            self._tails,
            self._provisioning)
        self._dispatcher = Dispatcher(self._codec, self._connections, self._credentials, self._proofs, pool)

        LOGGER.debug('Agency.__init__ <<<')

    @property
    def wallet(self) -> Wallet:
        return self._wallet

    @property
    def pool(self) -> NodePool:
        return self._pool

    @property
    def config(self) -> dict:
        return self._config

    @property
    def store(self) -> RecordStore:
        return self._store

    @property
    def ledger(self) -> Ledger:
        return self._ledger

    @property
    def tails(self) -> TailsCache:
        return self._tails

    @property
    def provisioning(self) -> ProvisioningService:
        return self._provisioning

    @property
    def schemas(self) -> SchemaService:
        return self._schemas

    @property
    def connections(self) -> ConnectionService:
        return self._connections

    @property
    def credentials(self) -> CredentialService:
        return self._credentials

    @property
    def proofs(self) -> ProofService:
        return self._proofs

    @property
    def dispatcher(self) -> Dispatcher:
        return self._dispatcher

    async def __aenter__(self) -> 'Agency':
        """
        Context manager entry: open wallet if need be.

        :return: current object
        """

        return await self.open()

    async def open(self) -> 'Agency':
        """
        Open wallet if need be.

        :return: current object
        """

        LOGGER.debug('Agency.open >>>')

        if not self._wallet.opened:
            await self._wallet.open()

        LOGGER.debug('Agency.open <<<')
        return self

    async def __aexit__(self, exc_type, exc, traceback) -> None:
        await self.close()

    async def close(self) -> None:
        """
        Close wallet if open. The node pool is the caller's to close.
        """

        LOGGER.debug('Agency.close >>>')

        if self._wallet.opened:
            await self._wallet.close()

        LOGGER.debug('Agency.close <<<')

    async def receive(self, payload: bytes) -> BaseRecord:
        """
        Process inbound envelope bytes.

        :param payload: envelope bytes
        :return: record that message created or updated
        """

        return await self._dispatcher.receive(payload)

    def app(self, path: str = '/') -> web.Application:
        """
        Return aiohttp application serving this agency's endpoint.

        :param path: endpoint path
        :return: application
        """

        return self._dispatcher.app(path)
