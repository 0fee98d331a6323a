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

from typing import Sequence
from uuid import uuid4

from von_agency.error import AbsentRecord, BadMessage, ProtocolState
from von_agency.messages import (
    ConnectionAcknowledgement,
    ConnectionRequest,
    ConnectionResponse,
    InvitationMessage)
from von_agency.models import AgentEndpoint, ConnectionAlias, InviteConfig
from von_agency.records import ConnectionRecord, ConnectionState
from von_agency.service.base import BaseService
from von_agency.service.provisioning import ProvisioningService
from von_agency.transport import EnvelopeCodec, Router
from von_agency.util import ok_did, ok_verkey
from von_agency.wallet import RecordStore, Wallet


LOGGER = logging.getLogger(__name__)


class ConnectionService(BaseService):
    """
    Connection protocol: invitation, request, response, acknowledgement.

    Each party creates a pairwise DID for the connection. The inviter's pairwise key is the connection key
    in the invitation; every message after the invitation is packed from the sender's pairwise key to the
    recipient's.
    """

    def __init__(
            self,
            wallet: Wallet,
            store: RecordStore,
            codec: EnvelopeCodec,
            router: Router,
            provisioning: ProvisioningService) -> None:
        super().__init__(wallet, store, codec, router)
        self._provisioning = provisioning

    async def create_invitation(self, config: InviteConfig = None) -> (ConnectionRecord, InvitationMessage):
        """
        Create invitation for a new connection, and its connection record in state Invited.

        :param config: invitation configuration (default generated record identifier, owner as presented alias)
        :return: connection record and invitation message
        """

        LOGGER.debug('ConnectionService.create_invitation >>> config: %s', config)

        config = config or InviteConfig()
        prov = await self._provisioning.get()
        my_alias = config.my_alias or prov.agent_owner
        pairwise = await self.wallet.create_local_did()

        record = ConnectionRecord(
            ident=config.record_id,
            connection_id=str(uuid4()),
            my_did=pairwise.did,
            my_key=pairwise.verkey,
            my_alias=my_alias.to_dict(),
            their_alias=(config.their_alias or ConnectionAlias()).to_dict())
        record.advance(ConnectionState.INVITED)
        await self.store.add(record)

        invitation = InvitationMessage(
            record.connection_id,
            pairwise.verkey,
            prov.agent_endpoint.to_dict(),
            my_alias.name,
            my_alias.image_url)

        rv = (record, invitation)
        LOGGER.debug('ConnectionService.create_invitation <<< %s', rv)
        return rv

    async def accept_invitation(self, invitation: InvitationMessage) -> ConnectionRecord:
        """
        Accept invitation: create connection record in state Negotiating and send connection request
        to inviter. Raise BadMessage for an invitation without a valid key and endpoint, or ProtocolState
        if its connection is already in the wallet. If the request does not reach the inviter, raise
        BadTransport and keep no record, so the invitation may be accepted again.

        :param invitation: invitation message
        :return: connection record
        """

        LOGGER.debug('ConnectionService.accept_invitation >>> invitation: %s', invitation)

        if not ok_verkey(invitation.connection_key):
            LOGGER.debug('ConnectionService.accept_invitation <!< Bad connection key %s', invitation.connection_key)
            raise BadMessage('Bad connection key {}'.format(invitation.connection_key))
        endpoint = AgentEndpoint.from_dict(invitation.endpoint)
        if await self._store.search_one(ConnectionRecord, {'connection_id': invitation.connection_id}):
            LOGGER.debug('ConnectionService.accept_invitation <!< Connection %s exists', invitation.connection_id)
            raise ProtocolState('Connection {} exists'.format(invitation.connection_id))

        prov = await self._provisioning.get()
        pairwise = await self.wallet.create_local_did()

        rv = ConnectionRecord(
            connection_id=invitation.connection_id,
            my_did=pairwise.did,
            my_key=pairwise.verkey,
            their_key=invitation.connection_key,
            endpoint=endpoint.to_dict(),
            my_alias=prov.owner,
            their_alias=ConnectionAlias(invitation.name, invitation.image_url).to_dict())
        rv.advance(ConnectionState.NEGOTIATING)
        await self.store.add(rv)

        owner = prov.agent_owner
        await self._deliver(
            ConnectionRequest(
                rv.connection_id,
                pairwise.did,
                pairwise.verkey,
                prov.agent_endpoint.to_dict(),
                owner.name,
                owner.image_url),
            rv,
            (rv, None))

        LOGGER.debug('ConnectionService.accept_invitation <<< %s', rv)
        return rv

    async def process_request(self, request: ConnectionRequest, sender_key: str) -> ConnectionRecord:
        """
        Process connection request (inviter): move connection record from Invited to Negotiating and send
        connection response. Raise AbsentRecord for no such invitation, BadMessage if request does not come
        from the key it presents, or ProtocolState if invitation is not outstanding.

        :param request: connection request
        :param sender_key: verification key that packed the request
        :return: connection record
        """

        LOGGER.debug('ConnectionService.process_request >>> request: %s, sender_key: %s', request, sender_key)

        if sender_key != request.verkey or not ok_verkey(request.verkey) or not ok_did(request.did):
            LOGGER.debug('ConnectionService.process_request <!< Request does not come from its DID and key')
            raise BadMessage('Connection request does not come from its DID and key')
        endpoint = AgentEndpoint.from_dict(request.endpoint)

        rv = await self._connection(request.connection_id)
        prior = rv.to_storage()
        rv.advance(ConnectionState.NEGOTIATING)
        rv.their_did = request.did
        rv.their_key = request.verkey
        rv.endpoint = endpoint.to_dict()
        if not rv.their_alias:
            rv.their_alias = ConnectionAlias(request.name, request.image_url).to_dict()
        await self.store.update(rv)

        prov = await self._provisioning.get()
        await self._deliver(
            ConnectionResponse(rv.connection_id, rv.my_did, rv.my_key, prov.agent_endpoint.to_dict()),
            rv,
            (rv, prior))

        LOGGER.debug('ConnectionService.process_request <<< %s', rv)
        return rv

    async def process_response(self, response: ConnectionResponse, sender_key: str) -> ConnectionRecord:
        """
        Process connection response (invitee): move connection record from Negotiating to Connected and
        send acknowledgement. A response for a connection already Connected is a no-op.

        Raise AbsentRecord for no such connection, BadMessage if response does not come from the
        invitation's connection key, or ProtocolState if connection is not awaiting a response.

        :param response: connection response
        :param sender_key: verification key that packed the response
        :return: connection record
        """

        LOGGER.debug('ConnectionService.process_response >>> response: %s, sender_key: %s', response, sender_key)

        rv = await self._connection(response.connection_id)
        if rv.state == ConnectionState.CONNECTED and sender_key == rv.their_key:
            LOGGER.info('Connection %s already connected: ignoring redelivered response', rv.connection_id)
            LOGGER.debug('ConnectionService.process_response <<< %s', rv)
            return rv

        rv.require(ConnectionState.NEGOTIATING)
        if rv.their_did:
            LOGGER.debug('ConnectionService.process_response <!< Connection %s is not awaiting a response', rv.id)
            raise ProtocolState('Connection {} is not awaiting a response'.format(rv.connection_id))
        if sender_key != rv.their_key or sender_key != response.verkey or not ok_did(response.did):
            LOGGER.debug('ConnectionService.process_response <!< Response does not come from connection key')
            raise BadMessage('Connection response does not come from connection key')
        endpoint = AgentEndpoint.from_dict(response.endpoint)

        prior = rv.to_storage()
        rv.advance(ConnectionState.CONNECTED)
        rv.their_did = response.did
        rv.endpoint = endpoint.to_dict()
        await self.store.update(rv)

        await self._deliver(ConnectionAcknowledgement(rv.connection_id), rv, (rv, prior))

        LOGGER.info('Connection %s connected to %s', rv.connection_id, rv.their_did)
        LOGGER.debug('ConnectionService.process_response <<< %s', rv)
        return rv

    async def process_acknowledgement(self, ack: ConnectionAcknowledgement, sender_key: str) -> ConnectionRecord:
        """
        Process connection acknowledgement (inviter): move connection record from Negotiating to Connected.
        An acknowledgement for a connection already Connected is a no-op.

        :param ack: connection acknowledgement
        :param sender_key: verification key that packed the acknowledgement
        :return: connection record
        """

        LOGGER.debug('ConnectionService.process_acknowledgement >>> ack: %s, sender_key: %s', ack, sender_key)

        rv = await self._connection(ack.connection_id)
        if sender_key != rv.their_key:
            LOGGER.debug('ConnectionService.process_acknowledgement <!< Ack does not come from peer key')
            raise BadMessage('Connection acknowledgement does not come from peer key')

        if rv.state == ConnectionState.CONNECTED:
            LOGGER.info('Connection %s already connected: ignoring redelivered acknowledgement', rv.connection_id)
        else:
            rv.advance(ConnectionState.CONNECTED)
            await self.store.update(rv)
            LOGGER.info('Connection %s connected to %s', rv.connection_id, rv.their_did)

        LOGGER.debug('ConnectionService.process_acknowledgement <<< %s', rv)
        return rv

    async def get(self, ident: str) -> ConnectionRecord:
        """
        Return connection record on record identifier. Raise AbsentRecord for no such record.

        :param ident: record identifier
        :return: connection record
        """

        rv = await self.store.get(ConnectionRecord, ident)
        if rv is None:
            LOGGER.debug('ConnectionService.get <!< No connection record %s', ident)
            raise AbsentRecord('No connection record {}'.format(ident))
        return rv

    async def list(self, state: ConnectionState = None) -> Sequence[ConnectionRecord]:
        """
        Return connection records, optionally only those in input state.

        :param state: state of interest (default any)
        :return: connection records
        """

        return await self.store.search(ConnectionRecord, {'state': state.value} if state else None)

    async def resolve_by_their_key(self, their_key: str) -> ConnectionRecord:
        """
        Return connection record on peer verification key. Raise AbsentRecord for no such connection.

        :param their_key: peer verification key
        :return: connection record
        """

        rv = await self.store.search_one(ConnectionRecord, {'their_key': their_key})
        if rv is None:
            LOGGER.debug('ConnectionService.resolve_by_their_key <!< No connection for key %s', their_key)
            raise AbsentRecord('No connection for key {}'.format(their_key))
        return rv

    async def delete(self, ident: str) -> bool:
        """
        Delete connection record. Return whether it was present.

        :param ident: record identifier
        :return: whether record was present
        """

        return await self.store.delete(ConnectionRecord, ident)
