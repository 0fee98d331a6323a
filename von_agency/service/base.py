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

from von_agency.error import AbsentRecord, BadMessage, VonAgencyError
from von_agency.messages import ContentMessage
from von_agency.records import ConnectionRecord, ConnectionState
from von_agency.transport import EnvelopeCodec, Router
from von_agency.wallet import RecordStore, Wallet


LOGGER = logging.getLogger(__name__)


class BaseService:
    """
    Base class for protocol services: holds wallet, record store, envelope codec and router, and
    sends content messages to the peer on a connection.
    """

    def __init__(self, wallet: Wallet, store: RecordStore, codec: EnvelopeCodec, router: Router) -> None:
        """
        Initializer for service.

        :param wallet: wallet for keys and anoncreds
        :param store: record store
        :param codec: envelope codec
        :param router: router to peer endpoints
        """

        self._wallet = wallet
        self._store = store
        self._codec = codec
        self._router = router

    @property
    def wallet(self) -> Wallet:
        """
        Accessor for wallet.

        :return: wallet
        """

        return self._wallet

    @property
    def store(self) -> RecordStore:
        """
        Accessor for record store.

        :return: record store
        """

        return self._store

    async def _connection(self, connection_id: str) -> ConnectionRecord:
        """
        Return connection record on shared connection identifier. Raise AbsentRecord for no such connection.

        :param connection_id: connection identifier
        :return: connection record
        """

        rv = await self._store.search_one(ConnectionRecord, {'connection_id': connection_id})
        if rv is None:
            LOGGER.debug('%s._connection <!< No connection %s', type(self).__name__, connection_id)
            raise AbsentRecord('No connection {}'.format(connection_id))
        return rv

    async def _connected(self, connection_id: str) -> ConnectionRecord:
        """
        Return connection record on shared connection identifier. Raise AbsentRecord for no such connection,
        ProtocolState if it is not yet connected.

        :param connection_id: connection identifier
        :return: connection record
        """

        rv = await self._connection(connection_id)
        rv.require(ConnectionState.CONNECTED)
        return rv

    async def _send(self, content: ContentMessage, connection: ConnectionRecord) -> int:
        """
        Pack content message from local key to peer key on connection, and deliver it to peer endpoint.

        :param content: content message
        :param connection: connection record
        :return: HTTP status of delivery
        """

        endpoint = connection.their_endpoint
        if endpoint is None:
            LOGGER.debug(
                '%s._send <!< Connection %s has no peer endpoint',
                type(self).__name__,
                connection.connection_id)
            raise BadMessage('Connection {} has no peer endpoint'.format(connection.connection_id))

        envelope = await self._codec.seal(content, connection.their_key, connection.my_key)
        return await self._router.forward(envelope, endpoint)

    async def _deliver(self, content: ContentMessage, connection: ConnectionRecord, *changes) -> int:
        """
        Send content message to peer on connection. If delivery fails, restore each record that the
        protocol step changed to its prior storage form, removing any record new to the store, then
        re-raise: the step may run again from where it started.

        :param content: content message
        :param connection: connection record
        :param changes: (record, prior storage record or None for a record new to the store) pairs
        :return: HTTP status of delivery
        """

        try:
            return await self._send(content, connection)
        except VonAgencyError as x_von:
            for (record, prior) in changes:
                if prior is None:
                    await self._store.delete(type(record), record.id)
                else:
                    await self._store.update(type(record).from_storage(prior))
            LOGGER.warning(
                '%s could not deliver %s on connection %s, reverted %s: %s',
                type(self).__name__,
                content.TYPE,
                connection.connection_id,
                ', '.join(repr(record) for (record, _) in changes),
                x_von)
            raise
