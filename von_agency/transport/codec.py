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

from von_agency.error import (
    AbsentMessage,
    AbsentRecord,
    BadCryptoOp,
    BadEnvelope,
    WalletState)
from von_agency.messages import ContentMessage, EnvelopeMessage, decode
from von_agency.util import ok_verkey
from von_agency.wallet import Wallet


LOGGER = logging.getLogger(__name__)


class EnvelopeCodec:
    """
    Pack content messages into envelopes for a recipient key, and unpack them, via wallet crypto.
    Never logs plaintext.
    """

    def __init__(self, wallet: Wallet) -> None:
        """
        Initializer for codec on wallet holding local keys.

        :param wallet: wallet
        """

        self._wallet = wallet

    async def pack(self, content: ContentMessage, recip_verkey: str, sender_verkey: str = None) -> bytes:
        """
        Pack content message for recipient: authenticated if sender verification key is present,
        anonymous otherwise. Raise BadEnvelope on malformed recipient key or crypto runtime failure.

        :param content: content message
        :param recip_verkey: recipient verification key
        :param sender_verkey: sender verification key (default anonymous)
        :return: ciphertext
        """

        LOGGER.debug(
            'EnvelopeCodec.pack >>> type: %s, recip_verkey: %s, sender_verkey: %s',
            content.type,
            recip_verkey,
            sender_verkey)

        if not ok_verkey(recip_verkey):
            LOGGER.debug('EnvelopeCodec.pack <!< Bad recipient verification key %s', recip_verkey)
            raise BadEnvelope('Bad recipient verification key {}'.format(recip_verkey))
        if sender_verkey is not None and not ok_verkey(sender_verkey):
            LOGGER.debug('EnvelopeCodec.pack <!< Bad sender verification key %s', sender_verkey)
            raise BadEnvelope('Bad sender verification key {}'.format(sender_verkey))

        try:
            rv = await self._wallet.pack(content.to_json(), recip_verkey, sender_verkey)
        except (AbsentMessage, BadCryptoOp, WalletState) as x:
            LOGGER.debug('EnvelopeCodec.pack <!< Cannot pack %s message: %s', content.type, x)
            raise BadEnvelope('Cannot pack {} message: {}'.format(content.type, x))

        LOGGER.debug('EnvelopeCodec.pack <<< (%s bytes)', len(rv))
        return rv

    async def unpack(self, ciphertext: bytes, my_verkey: str = None) -> (ContentMessage, str):
        """
        Unpack ciphertext to content message and sender verification key (None for anonymous sender).
        Raise BadEnvelope if ciphertext is not for input recipient key (when specified), or on crypto runtime
        failure; raise BadMessage if plaintext is not a content message.

        :param ciphertext: ciphertext
        :param my_verkey: local verification key that ciphertext must address, None for any local key
        :return: content message and sender verification key
        """

        LOGGER.debug('EnvelopeCodec.unpack >>> (%s bytes), my_verkey: %s', len(ciphertext or b''), my_verkey)

        try:
            (plaintext, sender_verkey, recip_verkey) = await self._wallet.unpack(ciphertext)
        except (AbsentMessage, AbsentRecord, BadCryptoOp, WalletState) as x:
            LOGGER.debug('EnvelopeCodec.unpack <!< Cannot unpack: %s', x)
            raise BadEnvelope('Cannot unpack: {}'.format(x))

        if my_verkey and recip_verkey != my_verkey:
            LOGGER.debug('EnvelopeCodec.unpack <!< Envelope addresses %s, not %s', recip_verkey, my_verkey)
            raise BadEnvelope('Envelope addresses {}, not {}'.format(recip_verkey, my_verkey))

        rv = (decode(plaintext), sender_verkey)
        LOGGER.debug('EnvelopeCodec.unpack <<< type: %s, sender_verkey: %s', rv[0].type, sender_verkey)
        return rv

    async def seal(self, content: ContentMessage, recip_verkey: str, sender_verkey: str = None) -> EnvelopeMessage:
        """
        Pack content message into envelope message, for the router.

        :param content: content message
        :param recip_verkey: recipient verification key
        :param sender_verkey: sender verification key (default anonymous)
        :return: envelope message
        """

        return EnvelopeMessage(content.type, await self.pack(content, recip_verkey, sender_verkey))
