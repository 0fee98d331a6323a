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

from enum import Enum
from time import time
from uuid import uuid4

from von_agency.error import BadRecord, ProtocolState
from von_agency.wallet.record import StorageRecord


LOGGER = logging.getLogger(__name__)


class BaseRecord:
    """
    Base class for persistent protocol records.

    Subclasses set:

    - RECORD_TYPE: storage record type
    - STATE: Enum class of states, None for a record without state
    - TRANSITIONS: dict mapping each state (None for a new record) to the set of states it may advance to
    - VALUES: names of attributes to persist, each an initializer keyword parameter
    - TAG_NAMES: names of attributes to tag the storage record with, for search
    """

    RECORD_TYPE = None
    STATE = None
    TRANSITIONS = {}
    VALUES = ()
    TAG_NAMES = ()

    def __init__(self, ident: str = None, state: Enum = None) -> None:
        """
        Initialize record.

        :param ident: record identifier (default generated)
        :param state: current state (default None, for a record that no transition has yet placed)
        """

        self._id = ident or str(uuid4())
        self._state = state
        self.created_at = int(time())
        self.updated_at = self.created_at

    @property
    def id(self) -> str:
        """
        Accessor for record identifier.

        :return: record identifier
        """

        return self._id

    @property
    def state(self) -> Enum:
        """
        Accessor for record state.

        :return: record state
        """

        return self._state

    def advance(self, state: Enum) -> None:
        """
        Move record to input state. Raise ProtocolState if its protocol does not define the transition.

        :param state: next state
        """

        if state not in self.TRANSITIONS.get(self._state, ()):
            LOGGER.debug(
                '%s.advance <!< %s %s cannot move from %s to %s',
                type(self).__name__,
                self.RECORD_TYPE,
                self.id,
                self._state.value if self._state else None,
                state.value)
            raise ProtocolState('{} {} cannot move from {} to {}'.format(
                self.RECORD_TYPE,
                self.id,
                self._state.value if self._state else None,
                state.value))

        self._state = state
        self.updated_at = int(time())

    def require(self, *states: Enum) -> None:
        """
        Raise ProtocolState unless record is in one of input states.

        :param states: acceptable states
        """

        if self._state not in states:
            LOGGER.debug(
                '%s.require <!< %s %s is %s, not %s',
                type(self).__name__,
                self.RECORD_TYPE,
                self.id,
                self._state.value if self._state else None,
                ' or '.join(s.value for s in states))
            raise ProtocolState('{} {} is {}, not {}'.format(
                self.RECORD_TYPE,
                self.id,
                self._state.value if self._state else None,
                ' or '.join(s.value for s in states)))

    @property
    def tags(self) -> dict:
        """
        Accessor for storage record tags: state (if any) and the tag attributes that have values.

        :return: tags dict
        """

        rv = {name: str(getattr(self, name)) for name in self.TAG_NAMES if getattr(self, name) is not None}
        if self._state is not None:
            rv['state'] = self._state.value
        return rv

    def to_dict(self) -> dict:
        """
        Return dict representation.

        :return: dict representation
        """

        return {
            'id': self.id,
            'state': self._state.value if self._state else None,
            'created_at': self.created_at,
            'updated_at': self.updated_at,
            **{name: getattr(self, name) for name in self.VALUES}
        }

    def to_storage(self) -> StorageRecord:
        """
        Return storage record for wallet.

        :return: storage record
        """

        return StorageRecord(self.RECORD_TYPE, json.dumps(self.to_dict()), self.tags, self.id)

    @classmethod
    def from_storage(cls, storec: StorageRecord) -> 'BaseRecord':
        """
        Build record from storage record. Raise BadRecord if it is not of this record type.

        :param storec: storage record
        :return: record
        """

        if storec.type != cls.RECORD_TYPE:
            LOGGER.debug(
                '%s.from_storage <!< Storage record type %s is not %s',
                cls.__name__,
                storec.type,
                cls.RECORD_TYPE)
            raise BadRecord('Storage record type {} is not {}'.format(storec.type, cls.RECORD_TYPE))

        value = json.loads(storec.value)
        rv = cls(
            ident=storec.id,
            state=cls.STATE(value['state']) if cls.STATE and value.get('state') else None,
            **{name: value.get(name) for name in cls.VALUES})
        rv.created_at = value.get('created_at', rv.created_at)
        rv.updated_at = value.get('updated_at', rv.updated_at)
        return rv

    def __eq__(self, other: 'BaseRecord') -> bool:
        return type(self) is type(other) and self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        return '{}({}, {})'.format(type(self).__name__, self.id, self._state.value if self._state else None)
