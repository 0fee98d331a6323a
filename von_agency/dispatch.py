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

from von_agency.error import (
    AbsentRecord,
    BadMessage,
    ErrorCode,
    VonAgencyError)
from von_agency.messages import ContentMessage, EnvelopeMessage, types
from von_agency.nodepool import NodePool
from von_agency.records import BaseRecord, ConnectionRecord, ConnectionState
from von_agency.service import ConnectionService, CredentialService, ProofService
from von_agency.transport import EnvelopeCodec


LOGGER = logging.getLogger(__name__)


class Dispatcher:
    """
    Receiving side of an agent: unpack inbound envelopes and route their content messages, by type,
    to the service that processes them.

    Connection messages carry their own connection identifier; every other message must come
    from the peer key of a Connected connection.
    """

    STATUS = {
        ErrorCode.BadMessage: 400,
        ErrorCode.BadEnvelope: 400,
        ErrorCode.AbsentRecord: 404,
        ErrorCode.ProtocolState: 409
    }

    def __init__(
            self,
            codec: EnvelopeCodec,
            connections: ConnectionService,
            credentials: CredentialService,
            proofs: ProofService,
            pool: NodePool = None) -> None:
        """
        Initializer for dispatcher.

        :param codec: envelope codec on local wallet
        :param connections: connection service
        :param credentials: credential service
        :param proofs: proof service
        :param pool: node pool, for ledger lookups that inbound credentials need
        """

        self._codec = codec
        self._connections = connections
        self._credentials = credentials
        self._proofs = proofs
        self._pool = pool
        self._handlers = {
            types.CONNECTION_REQUEST: self._on_connection_request,
            types.CONNECTION_RESPONSE: self._on_connection_response,
            types.CONNECTION_ACKNOWLEDGEMENT: self._on_connection_ack,
            types.CREDENTIAL_OFFER: self._on_credential_offer,
            types.CREDENTIAL_REQUEST: self._on_credential_request,
            types.CREDENTIAL: self._on_credential,
            types.PROOF_REQUEST: self._on_proof_request,
            types.PROOF: self._on_proof
        }

    async def receive(self, payload: bytes) -> BaseRecord:
        """
        Process inbound envelope bytes: unpack, check, and dispatch content message.

        Raise BadMessage for a malformed envelope or content, a content type differing from the envelope's,
        an anonymous sender, or a type that does not travel in envelopes (unknown types, invitations);
        BadEnvelope if envelope does not open with a local key; AbsentRecord or ProtocolState if
        sender has no connection in the state the message needs.

        :param payload: envelope bytes as posted to endpoint
        :return: record that message created or updated
        """

        LOGGER.debug('Dispatcher.receive >>> (%s bytes)', len(payload or b''))

        envelope = EnvelopeMessage.from_bytes(payload)
        (content, sender_key) = await self._codec.unpack(envelope.content)
        if content.type != envelope.type:
            LOGGER.debug('Dispatcher.receive <!< Envelope type %s carries %s', envelope.type, content.type)
            raise BadMessage('Envelope type {} carries {}'.format(envelope.type, content.type))
        if not sender_key:
            LOGGER.debug('Dispatcher.receive <!< Anonymous %s message', content.type)
            raise BadMessage('Anonymous {} message'.format(content.type))

        handler = self._handlers.get(content.type)
        if handler is None:
            LOGGER.debug('Dispatcher.receive <!< No handler for message type %s', content.type)
            raise BadMessage('No handler for message type {}'.format(content.type))

        rv = await handler(content, sender_key)
        LOGGER.debug('Dispatcher.receive <<< %s', rv)
        return rv

    async def handle(self, request: web.Request) -> web.Response:
        """
        HTTP handler for the agent endpoint: process posted envelope, answering 202 on success
        or an error status for a message that this agent cannot process.

        :param request: aiohttp request
        :return: aiohttp response
        """

        payload = await request.read()
        try:
            await self.receive(payload)
        except VonAgencyError as x_von:
            status = Dispatcher.STATUS.get(x_von.error_code, 500)
            LOGGER.warning('Inbound message refused with HTTP %s: %s', status, x_von)
            return web.Response(status=status, text=x_von.message)
        return web.Response(status=202)

    def app(self, path: str = '/') -> web.Application:
        """
        Return aiohttp application serving agent endpoint at input path.

        :param path: endpoint path
        :return: application
        """

        rv = web.Application()
        rv.router.add_post(path, self.handle)
        return rv

    async def _connected(self, sender_key: str) -> ConnectionRecord:
        try:
            rv = await self._connections.resolve_by_their_key(sender_key)
        except AbsentRecord:
            LOGGER.debug('Dispatcher._connected <!< No connection for sender key %s', sender_key)
            raise
        rv.require(ConnectionState.CONNECTED)
        return rv

    async def _on_connection_request(self, content: ContentMessage, sender_key: str) -> BaseRecord:
        return await self._connections.process_request(content, sender_key)

    async def _on_connection_response(self, content: ContentMessage, sender_key: str) -> BaseRecord:
        return await self._connections.process_response(content, sender_key)

    async def _on_connection_ack(self, content: ContentMessage, sender_key: str) -> BaseRecord:
        return await self._connections.process_acknowledgement(content, sender_key)

    async def _on_credential_offer(self, content: ContentMessage, sender_key: str) -> BaseRecord:
        return await self._credentials.process_offer(content, await self._connected(sender_key))

    async def _on_credential_request(self, content: ContentMessage, sender_key: str) -> BaseRecord:
        return await self._credentials.process_credential_request(content, await self._connected(sender_key))

    async def _on_credential(self, content: ContentMessage, sender_key: str) -> BaseRecord:
        return await self._credentials.store_credential(self._pool, content, await self._connected(sender_key))

    async def _on_proof_request(self, content: ContentMessage, sender_key: str) -> BaseRecord:
        request_id = await self._proofs.process_proof_request(content, await self._connected(sender_key))
        return await self._proofs.get_request(request_id)

    async def _on_proof(self, content: ContentMessage, sender_key: str) -> BaseRecord:
        proof_id = await self._proofs.process_proof(content, await self._connected(sender_key))
        return await self._proofs.get_proof(proof_id)
