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

from uuid import uuid4

from von_agency.error import BadRecord


LOGGER = logging.getLogger(__name__)


class StorageRecord:
    """
    Non-secret wallet record: the persistent form of a protocol record.
    """

    def __init__(self, typ: str, value: str, tags: dict = None, ident: str = None) -> None:
        """
        Initialize non-secret record. Raise BadRecord if input tags are not legitimate indy non-secret record tags.

        :param typ: record type - (typ, ident) identifies a non-secret record in the wallet
        :param value: record value (json)
        :param tags: record tags (metadata) dict
        :param ident: record identifier - (typ, ident) identifies a non-secret record in the wallet
        """

        if not StorageRecord.ok_tags(tags):
            LOGGER.debug('StorageRecord.__init__ <!< Tags %s must map strings to strings', tags)
            raise BadRecord('Tags {} must map strings to strings'.format(tags))

        self._type = typ
        self._id = ident or uuid4().hex
        self._value = value
        self._tags = tags or {}

    @staticmethod
    def ok_tags(tags: dict) -> bool:
        """
        Whether input tags dict is OK as an indy-sdk tags structure (flat, string keys and values).

        :param tags: candidate tags
        :return: whether tags are flat, mapping strings to strings
        """

        if not tags:
            return True
        return isinstance(tags, dict) and all(isinstance(k, str) and isinstance(tags[k], str) for k in tags)

    @property
    def type(self) -> str:
        """
        Accessor for record type.

        :return: type
        """

        return self._type

    @property
    def id(self) -> str:
        """
        Accessor for record identifier.

        :return: record identifier
        """

        return self._id

    @property
    def value(self) -> str:
        """
        Accessor for record value.

        :return: record value
        """

        return self._value

    @property
    def tags(self) -> dict:
        """
        Accessor for record tags (metadata).

        :return: record tags
        """

        return self._tags

    def __eq__(self, other: 'StorageRecord') -> bool:
        """
        Equivalence operator. Two instances are equivalent when their attributes are.

        :param other: instance to test for equivalence
        :return: whether instances are equivalent
        """

        return isinstance(other, StorageRecord) and (
            self.type == other.type and self.id == other.id and self.value == other.value and self.tags == other.tags)

    def __repr__(self) -> str:
        """
        Return representation.

        :return: string representation evaluating to construction call
        """

        return 'StorageRecord({}, {}, {}, {})'.format(self.type, self.value, self.tags, self.id)
