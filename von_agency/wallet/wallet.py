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

from typing import Any, Awaitable, Sequence, Union

from indy import anoncreds, crypto, did, wallet
from indy.error import IndyError, ErrorCode

from von_agency.error import (
    AbsentLinkSecret,
    AbsentMessage,
    AbsentRecord,
    AbsentWallet,
    BadAccess,
    BadCryptoOp,
    ExtantWallet,
    WalletState)
from von_agency.wallet import DIDInfo


LOGGER = logging.getLogger(__name__)


async def _indy_call(action: str, coro: Awaitable) -> Any:
    """
    Await indy-sdk coroutine, wrapping any indy error as BadCryptoOp.

    :param action: description of operation, for logging and error message
    :param coro: indy-sdk coroutine
    :return: coroutine result
    """

    try:
        return await coro
    except IndyError as x_indy:
        LOGGER.debug('Wallet <!< %s raised indy error code %s', action, x_indy.error_code)
        raise BadCryptoOp('{} raised indy error code {}'.format(action, x_indy.error_code), x_indy.error_code)


class Wallet:
    """
    Class encapsulating indy-sdk wallet, and the crypto runtime operations that run against it:
    keys and DIDs, message packing, link secret, and anonymous credentials.
    """

    DEFAULT_CHUNK = 256  # chunk size in searching credentials, non-secret storage records

    def __init__(self, indy_config: dict, von_config: dict = None) -> None:
        """
        Initializer for wallet. Store configuration and access credentials value.

        :param indy_config: configuration for indy-sdk wallet; 'id' key sets its name
        :param von_config: VON wallet configuration particulars:

            - 'auto_create': whether to create wallet automatically on first open (default True)
            - 'auto_remove': whether to remove wallet automatically on next close (default False)
            - 'access': wallet access credentials value

        """

        LOGGER.debug('Wallet.__init__ >>> indy_config %s, von_config %s', indy_config, von_config)

        self._handle = None
        self._indy_config = {**indy_config}
        self._von_config = {
            'auto_create': True,
            'auto_remove': False,
            'access': 'key',
            **(von_config or {})
        }

        LOGGER.debug('Wallet.__init__ <<<')

    @property
    def name(self) -> str:
        """
        Accessor for wallet name, as configuration retains at key 'id'.

        :return: wallet name
        """

        return self._indy_config['id']

    @property
    def handle(self) -> int:
        """
        Accessor for indy-sdk wallet handle.

        :return: indy-sdk wallet handle
        """

        return self._handle

    @property
    def opened(self) -> bool:
        """
        Accessor for indy-sdk wallet state: True for open, False for closed.

        :return: indy-sdk wallet state
        """

        return bool(self._handle)

    @property
    def auto_remove(self) -> bool:
        """
        Accessor for auto_remove wallet config setting.

        :return: auto_remove wallet config setting
        """

        return self._von_config['auto_remove']

    @property
    def access_creds(self) -> dict:
        """
        Accessor for wallet access credentials.

        :return: wallet access credentials
        """

        return {'key': self._von_config['access']}

    def _check_open(self, method: str) -> None:
        if not self.handle:
            LOGGER.debug('Wallet.%s <!< Wallet %s is closed', method, self.name)
            raise WalletState('Wallet {} is closed'.format(self.name))

    async def __aenter__(self) -> 'Wallet':
        """
        Context manager entry. Open wallet as configured, for closure on context manager exit.

        :return: current object
        """

        LOGGER.debug('Wallet.__aenter__ >>>')

        rv = await self.open()

        LOGGER.debug('Wallet.__aenter__ <<<')
        return rv

    async def open(self) -> 'Wallet':
        """
        Explicit entry. Open wallet as configured, for later closure via close().
        Create wallet first if absent and so configured.

        Raise WalletState if wallet already open, BadAccess on bad access credentials,
        or AbsentWallet on attempt to open wallet not yet created.

        :return: current object
        """

        LOGGER.debug('Wallet.open >>>')

        created = False
        while True:
            try:
                self._handle = await wallet.open_wallet(
                    json.dumps(self._indy_config),
                    json.dumps(self.access_creds))
                LOGGER.info('Opened wallet %s on handle %s', self.name, self.handle)
                break
            except IndyError as x_indy:
                if x_indy.error_code == ErrorCode.WalletNotFoundError:
                    if created or not self._von_config['auto_create']:
                        LOGGER.debug('Wallet.open <!< Wallet %s not found', self.name)
                        raise AbsentWallet('Wallet {} not found'.format(self.name))
                    await self.create()
                    created = True
                    continue
                if x_indy.error_code == ErrorCode.WalletAlreadyOpenedError:
                    LOGGER.debug('Wallet.open <!< Wallet %s is already open', self.name)
                    raise WalletState('Wallet {} is already open'.format(self.name))
                if x_indy.error_code == ErrorCode.WalletAccessFailed:
                    LOGGER.debug('Wallet.open <!< Bad access credentials value for wallet %s', self.name)
                    raise BadAccess('Bad access credentials value for wallet {}'.format(self.name))

                LOGGER.debug('Wallet.open <!< Wallet %s open raised indy error %s', self.name, x_indy.error_code)
                raise BadCryptoOp(
                    'Wallet {} open raised indy error code {}'.format(self.name, x_indy.error_code),
                    x_indy.error_code)

        LOGGER.debug('Wallet.open <<<')
        return self

    async def create(self) -> None:
        """
        Persist the wallet. Raise ExtantWallet if it already exists.
        """

        LOGGER.debug('Wallet.create >>>')

        try:
            await wallet.create_wallet(
                config=json.dumps(self._indy_config),
                credentials=json.dumps(self.access_creds))
            LOGGER.info('Created wallet %s', self.name)
        except IndyError as x_indy:
            if x_indy.error_code == ErrorCode.WalletAlreadyExistsError:
                LOGGER.debug('Wallet.create <!< Wallet %s already exists', self.name)
                raise ExtantWallet('Wallet {} already exists'.format(self.name))
            LOGGER.debug('Wallet.create <!< indy error code %s on creation of wallet %s', x_indy.error_code, self.name)
            raise BadCryptoOp(
                'Wallet {} creation raised indy error code {}'.format(self.name, x_indy.error_code),
                x_indy.error_code)

        LOGGER.debug('Wallet.create <<<')

    async def __aexit__(self, exc_type, exc, traceback) -> None:
        """
        Context manager exit. Close wallet (and delete if so configured).

        :param exc_type:
        :param exc:
        :param traceback:
        """

        LOGGER.debug('Wallet.__aexit__ >>>')

        await self.close()

        LOGGER.debug('Wallet.__aexit__ <<<')

    async def close(self) -> None:
        """
        Explicit exit. Close wallet (and delete if so configured).
        """

        LOGGER.debug('Wallet.close >>>')

        if not self.handle:
            LOGGER.warning('Abstaining from closing wallet %s: already closed', self.name)
        else:
            await wallet.close_wallet(self.handle)
            self._handle = None
            if self.auto_remove:
                LOGGER.info('Automatically removing wallet %s', self.name)
                await self.remove()

        LOGGER.debug('Wallet.close <<<')

    async def remove(self) -> bool:
        """
        Remove serialized wallet, best effort, if it exists. Return whether wallet absent after operation.
        Raise WalletState if wallet is open.

        :return: whether wallet gone from persistent storage
        """

        LOGGER.debug('Wallet.remove >>>')

        if self.handle:
            LOGGER.debug('Wallet.remove <!< Wallet %s is open', self.name)
            raise WalletState('Wallet {} is open'.format(self.name))

        rv = True
        try:
            await wallet.delete_wallet(json.dumps(self._indy_config), json.dumps(self.access_creds))
        except IndyError as x_indy:
            if x_indy.error_code == ErrorCode.WalletNotFoundError:
                LOGGER.info('Wallet %s not present; abstaining from removal', self.name)
            else:
                LOGGER.info('Failed wallet %s removal; indy-sdk error code %s', self.name, x_indy.error_code)
                rv = False

        LOGGER.debug('Wallet.remove <<< %s', rv)
        return rv

    async def create_local_did(self, seed: str = None, metadata: dict = None) -> DIDInfo:
        """
        Create and store a new local DID, for use as a pairwise or issuer DID.

        :param seed: optional seed for deterministic key pair
        :param metadata: optional metadata to store with DID
        :return: DIDInfo for new DID
        """

        LOGGER.debug('Wallet.create_local_did >>> seed: [SEED], metadata: %s', metadata)

        self._check_open('create_local_did')

        (created_did, verkey) = await _indy_call(
            'Create local DID',
            did.create_and_store_my_did(self.handle, json.dumps({'seed': seed} if seed else {})))
        if metadata:
            await _indy_call(
                'Set DID metadata',
                did.set_did_metadata(self.handle, created_did, json.dumps(metadata)))

        rv = DIDInfo(created_did, verkey, metadata or {})
        LOGGER.debug('Wallet.create_local_did <<< %s', rv)
        return rv

    async def create_signing_key(self, seed: str = None) -> str:
        """
        Create a new signing key pair in the wallet; return its verification key.

        :param seed: optional seed for deterministic key pair
        :return: verification key
        """

        LOGGER.debug('Wallet.create_signing_key >>>')

        self._check_open('create_signing_key')
        rv = await _indy_call(
            'Create signing key',
            crypto.create_key(self.handle, json.dumps({'seed': seed} if seed else {})))

        LOGGER.debug('Wallet.create_signing_key <<< %s', rv)
        return rv

    async def create_link_secret(self, label: str) -> str:
        """
        Create link (master) secret on input label. Creating one on a label already in use is not an error.

        :param label: label for link secret
        :return: link secret label
        """

        LOGGER.debug('Wallet.create_link_secret >>> label: %s', label)

        self._check_open('create_link_secret')
        try:
            await anoncreds.prover_create_master_secret(self.handle, label)
        except IndyError as x_indy:
            if x_indy.error_code == ErrorCode.AnoncredsMasterSecretDuplicateNameError:
                LOGGER.warning('Wallet %s link secret already present on label %s', self.name, label)
            else:
                LOGGER.debug(
                    'Wallet.create_link_secret <!< cannot create link secret for wallet %s, indy error code %s',
                    self.name,
                    x_indy.error_code)
                raise BadCryptoOp('Cannot create link secret: indy error code {}'.format(x_indy.error_code))

        LOGGER.debug('Wallet.create_link_secret <<< %s', label)
        return label

    async def pack(
            self,
            message: str,
            recip_verkeys: Union[str, Sequence[str]],
            sender_verkey: str = None) -> bytes:
        """
        Pack a message for one or more recipients; authenticated if sender verification key is present.
        Raise AbsentMessage for missing message, or WalletState if wallet is closed.

        :param message: message to pack
        :param recip_verkeys: verification keys of recipients
        :param sender_verkey: sender verification key (default anonymous encryption)
        :return: packed message
        """

        LOGGER.debug('Wallet.pack >>> recip_verkeys: %s, sender_verkey: %s', recip_verkeys, sender_verkey)

        self._check_open('pack')
        if message is None:
            LOGGER.debug('Wallet.pack <!< No message to pack')
            raise AbsentMessage('No message to pack')

        rv = await _indy_call(
            'Pack message',
            crypto.pack_message(
                self.handle,
                message,
                [recip_verkeys] if isinstance(recip_verkeys, str) else list(recip_verkeys),
                sender_verkey))

        LOGGER.debug('Wallet.pack <<< (%s bytes)', len(rv))
        return rv

    async def unpack(self, ciphertext: bytes) -> (str, str, str):
        """
        Unpack a message. Return triple with cleartext, sender verification key, and recipient verification key.
        Raise AbsentMessage for missing ciphertext, WalletState if wallet is closed, or AbsentRecord
        if wallet has no key to unpack ciphertext.

        :param ciphertext: JWE-like formatted message as pack() produces
        :return: cleartext, sender verification key (None for anonymous), recipient verification key
        """

        LOGGER.debug('Wallet.unpack >>> (%s bytes)', len(ciphertext or b''))

        self._check_open('unpack')
        if not ciphertext:
            LOGGER.debug('Wallet.unpack <!< No ciphertext to unpack')
            raise AbsentMessage('No ciphertext to unpack')

        try:
            unpacked = json.loads(await crypto.unpack_message(self.handle, ciphertext))
        except IndyError as x_indy:
            if x_indy.error_code == ErrorCode.WalletItemNotFound:
                LOGGER.debug('Wallet.unpack <!< Wallet %s has no local key to unpack ciphertext', self.name)
                raise AbsentRecord('Wallet {} has no local key to unpack ciphertext'.format(self.name))
            LOGGER.debug('Wallet.unpack <!< Wallet %s unpack raised indy error code %s', self.name, x_indy.error_code)
            raise BadCryptoOp('Unpack raised indy error code {}'.format(x_indy.error_code), x_indy.error_code)

        rv = (unpacked['message'], unpacked.get('sender_verkey', None), unpacked.get('recipient_verkey', None))
        LOGGER.debug('Wallet.unpack <<< sender %s, recipient %s', rv[1], rv[2])
        return rv

    async def create_schema(self, issuer_did: str, name: str, version: str, attr_names: Sequence[str]) -> (str, str):
        """
        Create schema (not yet on the ledger).

        :param issuer_did: schema originator DID
        :param name: schema name
        :param version: schema version
        :param attr_names: attribute names
        :return: schema identifier and schema json
        """

        LOGGER.debug('Wallet.create_schema >>> issuer_did: %s, name: %s, version: %s', issuer_did, name, version)

        rv = await _indy_call(
            'Create schema',
            anoncreds.issuer_create_schema(issuer_did, name, version, json.dumps(list(attr_names))))

        LOGGER.debug('Wallet.create_schema <<< %s', rv[0])
        return rv

    async def create_cred_def(
            self,
            issuer_did: str,
            schema_json: str,
            tag: str,
            revocation: bool = False) -> (str, str):
        """
        Create and store credential definition (private key in the wallet).

        :param issuer_did: issuer DID
        :param schema_json: schema json as the ledger returns it
        :param tag: credential definition tag
        :param revocation: whether credential definition supports revocation
        :return: credential definition identifier and json
        """

        LOGGER.debug('Wallet.create_cred_def >>> issuer_did: %s, tag: %s, revocation: %s', issuer_did, tag, revocation)

        self._check_open('create_cred_def')
        rv = await _indy_call(
            'Create credential definition',
            anoncreds.issuer_create_and_store_credential_def(
                self.handle,
                issuer_did,
                schema_json,
                tag,
                'CL',
                json.dumps({'support_revocation': revocation})))

        LOGGER.debug('Wallet.create_cred_def <<< %s', rv[0])
        return rv

    async def create_rev_reg(
            self,
            issuer_did: str,
            cd_id: str,
            tag: str,
            max_cred_num: int,
            tails_writer_handle: int) -> (str, str, str):
        """
        Create and store revocation registry, writing its tails file via the input blob storage writer.

        :param issuer_did: issuer DID
        :param cd_id: credential definition identifier
        :param tag: revocation registry tag
        :param max_cred_num: maximum number of credentials that the registry can hold
        :param tails_writer_handle: blob storage writer handle
        :return: revocation registry identifier, definition json, and initial entry json
        """

        LOGGER.debug('Wallet.create_rev_reg >>> cd_id: %s, tag: %s, max_cred_num: %s', cd_id, tag, max_cred_num)

        self._check_open('create_rev_reg')
        rv = await _indy_call(
            'Create revocation registry',
            anoncreds.issuer_create_and_store_revoc_reg(
                self.handle,
                issuer_did,
                'CL_ACCUM',
                tag,
                cd_id,
                json.dumps({
                    'max_cred_num': max_cred_num,
                    'issuance_type': 'ISSUANCE_BY_DEFAULT'
                }),
                tails_writer_handle))

        LOGGER.debug('Wallet.create_rev_reg <<< %s', rv[0])
        return rv

    async def create_cred_offer(self, cd_id: str) -> str:
        """
        Create credential offer on credential definition that the wallet holds.

        :param cd_id: credential definition identifier
        :return: credential offer json
        """

        LOGGER.debug('Wallet.create_cred_offer >>> cd_id: %s', cd_id)

        self._check_open('create_cred_offer')
        rv = await _indy_call('Create credential offer', anoncreds.issuer_create_credential_offer(self.handle, cd_id))

        LOGGER.debug('Wallet.create_cred_offer <<< %s', rv)
        return rv

    async def create_cred_req(
            self,
            prover_did: str,
            offer_json: str,
            cd_json: str,
            link_secret: str) -> (str, str):
        """
        Create credential request on offer, blinding the link secret.
        Raise AbsentLinkSecret if the wallet has no such link secret.

        :param prover_did: prover DID (pairwise DID on the connection)
        :param offer_json: credential offer json
        :param cd_json: credential definition json
        :param link_secret: link (master) secret label
        :return: credential request json and credential request metadata json
        """

        LOGGER.debug('Wallet.create_cred_req >>> prover_did: %s, link_secret: %s', prover_did, link_secret)

        self._check_open('create_cred_req')
        if not link_secret:
            LOGGER.debug('Wallet.create_cred_req <!< No link secret')
            raise AbsentLinkSecret('No link secret')
        try:
            rv = await anoncreds.prover_create_credential_req(
                self.handle,
                prover_did,
                offer_json,
                cd_json,
                link_secret)
        except IndyError as x_indy:
            if x_indy.error_code == ErrorCode.WalletItemNotFound:
                LOGGER.debug('Wallet.create_cred_req <!< Wallet %s has no link secret %s', self.name, link_secret)
                raise AbsentLinkSecret('Wallet {} has no link secret {}'.format(self.name, link_secret))
            LOGGER.debug('Wallet.create_cred_req <!< indy error code %s', x_indy.error_code)
            raise BadCryptoOp(
                'Create credential request raised indy error code {}'.format(x_indy.error_code),
                x_indy.error_code)

        LOGGER.debug('Wallet.create_cred_req <<< %s', rv[0])
        return rv

    async def create_cred(
            self,
            offer_json: str,
            req_json: str,
            values_json: str,
            rr_id: str = None,
            tails_reader_handle: int = None) -> (str, str, str):
        """
        Create credential on offer and request, for revocation registry if credential definition is revocable.

        :param offer_json: credential offer json
        :param req_json: credential request json
        :param values_json: credential values json mapping attribute names to raw/encoded dicts
        :param rr_id: revocation registry identifier, None for non-revocable
        :param tails_reader_handle: tails blob storage reader handle, None for non-revocable
        :return: credential json, credential revocation identifier and revocation registry delta json
            (the latter two None for non-revocable)
        """

        LOGGER.debug('Wallet.create_cred >>> rr_id: %s', rr_id)

        self._check_open('create_cred')
        rv = await _indy_call(
            'Create credential',
            anoncreds.issuer_create_credential(
                self.handle,
                offer_json,
                req_json,
                values_json,
                rr_id,
                tails_reader_handle))

        LOGGER.debug('Wallet.create_cred <<< cred_rev_id: %s', rv[1])
        return rv

    async def revoke_cred(self, rr_id: str, cr_id: str, tails_reader_handle: int) -> str:
        """
        Revoke credential; return resulting revocation registry delta json to post to the ledger.

        :param rr_id: revocation registry identifier
        :param cr_id: credential revocation identifier
        :param tails_reader_handle: tails blob storage reader handle
        :return: revocation registry delta json
        """

        LOGGER.debug('Wallet.revoke_cred >>> rr_id: %s, cr_id: %s', rr_id, cr_id)

        self._check_open('revoke_cred')
        rv = await _indy_call(
            'Revoke credential',
            anoncreds.issuer_revoke_credential(self.handle, tails_reader_handle, rr_id, cr_id))

        LOGGER.debug('Wallet.revoke_cred <<< %s', rv)
        return rv

    async def store_cred(
            self,
            req_meta_json: str,
            cred_json: str,
            cd_json: str,
            rr_def_json: str = None) -> str:
        """
        Store credential in wallet; return its wallet credential identifier.

        :param req_meta_json: credential request metadata json
        :param cred_json: credential json
        :param cd_json: credential definition json
        :param rr_def_json: revocation registry definition json, None for non-revocable
        :return: wallet credential identifier
        """

        LOGGER.debug('Wallet.store_cred >>> rr_def: %s', bool(rr_def_json))

        self._check_open('store_cred')
        rv = await _indy_call(
            'Store credential',
            anoncreds.prover_store_credential(self.handle, None, req_meta_json, cred_json, cd_json, rr_def_json))

        LOGGER.debug('Wallet.store_cred <<< %s', rv)
        return rv

    async def get_cred(self, cred_id: str) -> str:
        """
        Get credential info json for wallet credential identifier. Raise AbsentRecord if absent.

        :param cred_id: wallet credential identifier
        :return: credential info json
        """

        LOGGER.debug('Wallet.get_cred >>> cred_id: %s', cred_id)

        self._check_open('get_cred')
        try:
            rv = await anoncreds.prover_get_credential(self.handle, cred_id)
        except IndyError as x_indy:
            if x_indy.error_code == ErrorCode.WalletItemNotFound:
                LOGGER.debug('Wallet.get_cred <!< Wallet %s has no credential %s', self.name, cred_id)
                raise AbsentRecord('Wallet {} has no credential {}'.format(self.name, cred_id))
            LOGGER.debug('Wallet.get_cred <!< indy error code %s', x_indy.error_code)
            raise BadCryptoOp('Get credential raised indy error code {}'.format(x_indy.error_code), x_indy.error_code)

        LOGGER.debug('Wallet.get_cred <<< %s', rv)
        return rv

    async def search_creds_for_proof_req(self, proof_req_json: str, referent: str) -> list:
        """
        Return credentials satisfying a proof request item, in wallet order.

        :param proof_req_json: proof request json
        :param referent: requested attribute or predicate referent
        :return: list of credential info dicts
        """

        LOGGER.debug('Wallet.search_creds_for_proof_req >>> referent: %s', referent)

        self._check_open('search_creds_for_proof_req')
        rv = []
        s_handle = await _indy_call(
            'Open credential search',
            anoncreds.prover_search_credentials_for_proof_req(self.handle, proof_req_json, None))
        try:
            while True:
                batch = json.loads(await _indy_call(
                    'Fetch credential search results',
                    anoncreds.prover_fetch_credentials_for_proof_req(s_handle, referent, Wallet.DEFAULT_CHUNK)))
                rv.extend(item['cred_info'] for item in batch)
                if len(batch) < Wallet.DEFAULT_CHUNK:
                    break
        finally:
            await anoncreds.prover_close_credentials_search_for_proof_req(s_handle)

        LOGGER.debug('Wallet.search_creds_for_proof_req <<< %s', rv)
        return rv

    async def create_rev_state(
            self,
            tails_reader_handle: int,
            rr_def_json: str,
            rr_delta_json: str,
            timestamp: int,
            cr_id: str) -> str:
        """
        Create revocation state for a credential at a revocation registry delta.

        :param tails_reader_handle: tails blob storage reader handle
        :param rr_def_json: revocation registry definition json
        :param rr_delta_json: revocation registry delta json
        :param timestamp: ledger timestamp of delta
        :param cr_id: credential revocation identifier
        :return: revocation state json
        """

        LOGGER.debug('Wallet.create_rev_state >>> timestamp: %s, cr_id: %s', timestamp, cr_id)

        rv = await _indy_call(
            'Create revocation state',
            anoncreds.create_revocation_state(tails_reader_handle, rr_def_json, rr_delta_json, timestamp, cr_id))

        LOGGER.debug('Wallet.create_rev_state <<< %s', rv)
        return rv

    async def create_proof(
            self,
            proof_req_json: str,
            requested_creds_json: str,
            link_secret: str,
            schemas_json: str,
            cred_defs_json: str,
            rev_states_json: str) -> str:
        """
        Create proof.

        :param proof_req_json: proof request json
        :param requested_creds_json: requested credentials json
        :param link_secret: link (master) secret label
        :param schemas_json: json mapping schema identifiers to schemata
        :param cred_defs_json: json mapping credential definition identifiers to credential definitions
        :param rev_states_json: json mapping revocation registry identifiers to timestamps to revocation states
        :return: proof json
        """

        LOGGER.debug('Wallet.create_proof >>> link_secret: %s', link_secret)

        self._check_open('create_proof')
        rv = await _indy_call(
            'Create proof',
            anoncreds.prover_create_proof(
                self.handle,
                proof_req_json,
                requested_creds_json,
                link_secret,
                schemas_json,
                cred_defs_json,
                rev_states_json))

        LOGGER.debug('Wallet.create_proof <<<')
        return rv

    async def verify_proof(
            self,
            proof_req_json: str,
            proof_json: str,
            schemas_json: str,
            cred_defs_json: str,
            rr_defs_json: str,
            rrs_json: str) -> bool:
        """
        Verify proof. Return False for a proof that does not verify; raise BadCryptoOp only
        when verification cannot run.

        :param proof_req_json: proof request json
        :param proof_json: proof json
        :param schemas_json: json mapping schema identifiers to schemata
        :param cred_defs_json: json mapping credential definition identifiers to credential definitions
        :param rr_defs_json: json mapping revocation registry identifiers to definitions
        :param rrs_json: json mapping revocation registry identifiers to timestamps to registry states
        :return: whether proof verifies
        """

        LOGGER.debug('Wallet.verify_proof >>>')

        rv = await _indy_call(
            'Verify proof',
            anoncreds.verifier_verify_proof(
                proof_req_json,
                proof_json,
                schemas_json,
                cred_defs_json,
                rr_defs_json,
                rrs_json))

        LOGGER.debug('Wallet.verify_proof <<< %s', rv)
        return rv

    def __repr__(self) -> str:
        """
        Return representation for current object.

        :return: representation for current object
        """

        return 'Wallet({}, [VON CONFIG])'.format(self._indy_config)
