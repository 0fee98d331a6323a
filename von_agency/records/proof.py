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

from von_agency.models import ProofRequest
from von_agency.records.base import BaseRecord


class ProofRequestState(Enum):
    REQUESTED = 'Requested'
    ACCEPTED = 'Accepted'
    REJECTED = 'Rejected'


class ProofState(Enum):
    PROPOSED = 'Proposed'
    ACCEPTED = 'Accepted'
    VERIFIED = 'Verified'


class ProofRequestRecord(BaseRecord):
    """
    Proof request, requester or prover side. The requester's record identifier is the thread identifier;
    the prover files its inbound copy under a new local identifier.
    """

    RECORD_TYPE = 'proof_request'
    STATE = ProofRequestState
    TRANSITIONS = {
        None: {ProofRequestState.REQUESTED},
        ProofRequestState.REQUESTED: {ProofRequestState.ACCEPTED, ProofRequestState.REJECTED}
    }
    VALUES = ('connection_id', 'thread_id', 'request_json')
    TAG_NAMES = ('connection_id', 'thread_id')

    def __init__(
            self,
            ident: str = None,
            state: ProofRequestState = None,
            connection_id: str = None,
            thread_id: str = None,
            request_json: str = None) -> None:
        super().__init__(ident, state)
        self.connection_id = connection_id
        self.thread_id = thread_id or self.id
        self.request_json = request_json

    @property
    def proof_request(self) -> ProofRequest:
        """
        Accessor for proof request.

        :return: proof request
        """

        return ProofRequest.from_json(self.request_json)


class ProofRecord(BaseRecord):
    """
    Proof: the verifier's copy starts Proposed and becomes Verified on successful verification;
    the prover's own copy is Accepted.
    """

    RECORD_TYPE = 'proof'
    STATE = ProofState
    TRANSITIONS = {
        None: {ProofState.PROPOSED, ProofState.ACCEPTED},
        ProofState.PROPOSED: {ProofState.VERIFIED}
    }
    VALUES = ('connection_id', 'proof_request_id', 'thread_id', 'proof_json')
    TAG_NAMES = ('connection_id', 'proof_request_id', 'thread_id')

    def __init__(
            self,
            ident: str = None,
            state: ProofState = None,
            connection_id: str = None,
            proof_request_id: str = None,
            thread_id: str = None,
            proof_json: str = None) -> None:
        super().__init__(ident, state)
        self.connection_id = connection_id
        self.proof_request_id = proof_request_id
        self.thread_id = thread_id
        self.proof_json = proof_json
