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



from enum import Enum

from von_agency.records.base import BaseRecord


class CredentialState(Enum):
    OFFERED = 'Offered'
    REQUESTED = 'Requested'
    ISSUED = 'Issued'
    REVOKED = 'Revoked'


class CredentialRecord(BaseRecord):
    """
    One credential exchange, issuer or holder side. The issuer's record identifier is the thread identifier
    that both sides' messages carry.
    """

    RECORD_TYPE = 'credential'
    STATE = CredentialState
    TRANSITIONS = {
        None: {CredentialState.OFFERED},
        CredentialState.OFFERED: {CredentialState.REQUESTED},
        CredentialState.REQUESTED: {CredentialState.ISSUED},
        CredentialState.ISSUED: {CredentialState.REVOKED}
    }
    VALUES = (
        'connection_id',
        'thread_id',
        'schema_id',
        'cred_def_id',
        'offer_json',
        'values',
        'request_json',
        'request_metadata_json',
        'credential_json',
        'credential_id',
        'revocable',
        'rev_reg_id',
        'cred_rev_id')
    TAG_NAMES = ('connection_id', 'thread_id', 'cred_def_id')

    def __init__(
            self,
            ident: str = None,
            state: CredentialState = None,
            connection_id: str = None,
            thread_id: str = None,
            schema_id: str = None,
            cred_def_id: str = None,
            offer_json: str = None,
            values: dict = None,
            request_json: str = None,
            request_metadata_json: str = None,
            credential_json: str = None,
            credential_id: str = None,
            revocable: bool = False,
            rev_reg_id: str = None,
            cred_rev_id: str = None) -> None:
        super().__init__(ident, state)
        self.connection_id = connection_id
        self.thread_id = thread_id or self.id
        self.schema_id = schema_id
        self.cred_def_id = cred_def_id
        self.offer_json = offer_json
        self.values = values
        self.request_json = request_json
        self.request_metadata_json = request_metadata_json
        self.credential_json = credential_json
        self.credential_id = credential_id  # wallet credential identifier (holder)
        self.revocable = bool(revocable)
        self.rev_reg_id = rev_reg_id
        self.cred_rev_id = cred_rev_id
