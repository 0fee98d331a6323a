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

from typing import Sequence

from indy import non_secrets
from indy.error import IndyError, ErrorCode

from von_agency.error import AbsentRecord, BadCryptoOp, ExtantRecord, WalletState
from von_agency.wallet.record import StorageRecord
from von_agency.wallet.wallet import Wallet


LOGGER = logging.getLogger(__name__)


class RecordStore:
    """
    Store for protocol records, over the non-secret storage of an indy-sdk wallet.

    Record classes implement RECORD_TYPE, to_storage() and from_storage() (see von_agency.records).
    """

    CHUNK = 256
    OPTIONS_JSON = json.dumps({
        'retrieveRecords': True,
        'retrieveTotalCount': True,
        'retrieveType': False,
        'retrieveValue': True,
        'retrieveTags': True
    })

    def __init__(self, wallet: Wallet) -> None:
        """
        Initializer for record store on input wallet.

        :param wallet: wallet to hold records
        """

        self._wallet = wallet

    @property
    def wallet(self) -> Wallet:
        """
        Accessor for wallet.

        :return: wallet
        """

        return self._wallet

    async def add(self, record: 'BaseRecord') -> 'BaseRecord':
        """
        Add new record. Raise ExtantRecord if a record of its type is present on its identifier.

        :param record: record to add
        :return: record
        """

        LOGGER.debug('RecordStore.add >>> record: %s', record)

        await self._add(record.to_storage())

        LOGGER.debug('RecordStore.add <<< %s', record.id)
        return record

    async def update(self, record: 'BaseRecord') -> 'BaseRecord':
        """
        Replace value and tags of existing record. Raise AbsentRecord if there is no such record.

        :param record: record to update
        :return: record
        """

        LOGGER.debug('RecordStore.update >>> record: %s', record)

        await self._update(record.to_storage())

        LOGGER.debug('RecordStore.update <<< %s', record.id)
        return record

    async def get(self, record_cls: type, ident: str) -> 'BaseRecord':
        """
        Get record of input class on identifier; return None if absent.

        :param record_cls: record class
        :param ident: record identifier
        :return: record, or None for no such record
        """

        LOGGER.debug('RecordStore.get >>> record_cls: %s, ident: %s', record_cls.__name__, ident)

        storec = await self._fetch(record_cls.RECORD_TYPE, ident) if ident else None
        rv = record_cls.from_storage(storec) if storec else None

        LOGGER.debug('RecordStore.get <<< %s', rv)
        return rv

    async def search(self, record_cls: type, query: dict = None, limit: int = None) -> Sequence['BaseRecord']:
        """
        Return records of input class whose tags match every (tag, value) pair in input query.

        :param record_cls: record class
        :param query: dict mapping tag names to values (default all records)
        :param limit: maximum number of records to return (default no limit)
        :return: list of matching records
        """

        LOGGER.debug('RecordStore.search >>> record_cls: %s, query: %s', record_cls.__name__, query)

        storecs = await self._query(record_cls.RECORD_TYPE, {k: str(v) for k, v in (query or {}).items()}, limit)
        rv = [record_cls.from_storage(storec) for storec in storecs]

        LOGGER.debug('RecordStore.search <<< %s records', len(rv))
        return rv

    async def search_one(self, record_cls: type, query: dict) -> 'BaseRecord':
        """
        Return single record of input class matching query, None for no match.

        :param record_cls: record class
        :param query: dict mapping tag names to values
        :return: matching record or None
        """

        found = await self.search(record_cls, query, limit=1)
        return found[0] if found else None

    async def delete(self, record_cls: type, ident: str) -> bool:
        """
        Delete record of input class on identifier. Return whether a record was there to delete.

        :param record_cls: record class
        :param ident: record identifier
        :return: whether record was present
        """

        LOGGER.debug('RecordStore.delete >>> record_cls: %s, ident: %s', record_cls.__name__, ident)

        rv = await self._remove(record_cls.RECORD_TYPE, ident)

        LOGGER.debug('RecordStore.delete <<< %s', rv)
        return rv

    def _check_open(self, method: str) -> None:
        if not self.wallet.opened:
            LOGGER.debug('RecordStore.%s <!< Wallet %s is closed', method, self.wallet.name)
            raise WalletState('Wallet {} is closed'.format(self.wallet.name))

    async def _add(self, storec: StorageRecord) -> None:
        self._check_open('_add')
        try:
            await non_secrets.add_wallet_record(
                self.wallet.handle,
                storec.type,
                storec.id,
                storec.value,
                json.dumps(storec.tags))
        except IndyError as x_indy:
            if x_indy.error_code == ErrorCode.WalletItemAlreadyExists:
                LOGGER.debug('RecordStore._add <!< %s record %s already present', storec.type, storec.id)
                raise ExtantRecord('{} record {} already present'.format(storec.type, storec.id))
            LOGGER.debug('RecordStore._add <!< indy error code %s', x_indy.error_code)
            raise BadCryptoOp('Add wallet record raised indy error code {}'.format(x_indy.error_code))

    async def _update(self, storec: StorageRecord) -> None:
        self._check_open('_update')
        try:
            await non_secrets.update_wallet_record_value(self.wallet.handle, storec.type, storec.id, storec.value)
            await non_secrets.update_wallet_record_tags(
                self.wallet.handle,
                storec.type,
                storec.id,
                json.dumps(storec.tags))
        except IndyError as x_indy:
            if x_indy.error_code == ErrorCode.WalletItemNotFound:
                LOGGER.debug('RecordStore._update <!< No %s record %s', storec.type, storec.id)
                raise AbsentRecord('No {} record {}'.format(storec.type, storec.id))
            LOGGER.debug('RecordStore._update <!< indy error code %s', x_indy.error_code)
            raise BadCryptoOp('Update wallet record raised indy error code {}'.format(x_indy.error_code))

    async def _fetch(self, typ: str, ident: str) -> StorageRecord:
        self._check_open('_fetch')
        try:
            record = json.loads(await non_secrets.get_wallet_record(
                self.wallet.handle,
                typ,
                ident,
                json.dumps({
                    'retrieveType': False,
                    'retrieveValue': True,
                    'retrieveTags': True
                })))
        except IndyError as x_indy:
            if x_indy.error_code == ErrorCode.WalletItemNotFound:
                return None
            LOGGER.debug('RecordStore._fetch <!< indy error code %s', x_indy.error_code)
            raise BadCryptoOp('Get wallet record raised indy error code {}'.format(x_indy.error_code))
        return StorageRecord(typ, record['value'], record.get('tags') or None, record['id'])

    async def _query(self, typ: str, query: dict, limit: int = None) -> Sequence[StorageRecord]:
        self._check_open('_query')
        records = []
        s_handle = await non_secrets.open_wallet_search(
            self.wallet.handle,
            typ,
            json.dumps(query),
            RecordStore.OPTIONS_JSON)
        try:
            while limit is None or len(records) < limit:
                chunk = RecordStore.CHUNK if limit is None else min(RecordStore.CHUNK, limit - len(records))
                batch = json.loads(await non_secrets.fetch_wallet_search_next_records(
                    self.wallet.handle,
                    s_handle,
                    chunk)).get('records') or []
                records.extend(batch)
                if len(batch) < chunk:
                    break
        finally:
            await non_secrets.close_wallet_search(s_handle)

        return [StorageRecord(typ, record['value'], record.get('tags') or None, record['id']) for record in records]

    async def _remove(self, typ: str, ident: str) -> bool:
        self._check_open('_remove')
        try:
            await non_secrets.delete_wallet_record(self.wallet.handle, typ, ident)
        except IndyError as x_indy:
            if x_indy.error_code == ErrorCode.WalletItemNotFound:
                LOGGER.info('RecordStore._remove: no %s record on identifier %s', typ, ident)
                return False
            LOGGER.debug('RecordStore._remove <!< indy error code %s', x_indy.error_code)
            raise BadCryptoOp('Delete wallet record raised indy error code {}'.format(x_indy.error_code))
        return True
