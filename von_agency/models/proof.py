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

from os import urandom

from von_agency.error import BadMessage


class AttributeInfo:
    """
    Requested attribute in a proof request: attribute name and optional restrictions (list of WQL dicts).
    """

    def __init__(self, name: str, restrictions: list = None) -> None:
        self.name = name
        self.restrictions = restrictions

    def to_dict(self) -> dict:
        rv = {'name': self.name}
        if self.restrictions:
            rv['restrictions'] = self.restrictions
        return rv


class PredicateInfo:
    """
    Requested predicate in a proof request: attribute name, predicate type (e.g., '>='), value, and
    optional restrictions.
    """

    def __init__(self, name: str, p_type: str, p_value: int, restrictions: list = None) -> None:
        self.name = name
        self.p_type = p_type
        self.p_value = p_value
        self.restrictions = restrictions

    def to_dict(self) -> dict:
        rv = {'name': self.name, 'p_type': self.p_type, 'p_value': self.p_value}
        if self.restrictions:
            rv['restrictions'] = self.restrictions
        return rv


class ProofRequest:
    """
    Proof request. The nonce is the requester's to supply, unique per request; nothing here deduplicates on it.
    """

    def __init__(
            self,
            name: str,
            version: str,
            nonce: str,
            requested_attributes: dict = None,
            requested_predicates: dict = None,
            non_revoked: dict = None) -> None:
        """
        Initialize proof request.

        :param name: proof request name
        :param version: proof request version
        :param nonce: decimal string nonce
        :param requested_attributes: dict mapping referents to AttributeInfo instances
        :param requested_predicates: dict mapping referents to PredicateInfo instances
        :param non_revoked: non-revocation interval dict ('from', 'to' epoch seconds), None for none
        """

        self.name = name
        self.version = version
        self.nonce = nonce
        self.requested_attributes = requested_attributes or {}
        self.requested_predicates = requested_predicates or {}
        self.non_revoked = non_revoked

    @staticmethod
    def new_nonce() -> str:
        """
        Return fresh random decimal nonce, for callers with no nonce source of their own.

        :return: nonce
        """

        return str(int.from_bytes(urandom(10), 'big'))

    def referents(self) -> set:
        """
        Return all requested attribute and predicate referents.

        :return: set of referents
        """

        return set(self.requested_attributes) | set(self.requested_predicates)

    def to_dict(self) -> dict:
        """
        Return dict representation in indy-sdk proof request form.

        :return: dict representation
        """

        rv = {
            'name': self.name,
            'version': self.version,
            'nonce': self.nonce,
            'requested_attributes': {ref: info.to_dict() for ref, info in self.requested_attributes.items()},
            'requested_predicates': {ref: info.to_dict() for ref, info in self.requested_predicates.items()}
        }
        if self.non_revoked:
            rv['non_revoked'] = self.non_revoked
        return rv

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @staticmethod
    def from_json(proof_req_json: str) -> 'ProofRequest':
        """
        Build proof request from indy-sdk proof request json. Raise BadMessage on malformed input.

        :param proof_req_json: proof request json
        :return: proof request
        """

        try:
            proof_req = json.loads(proof_req_json)
            return ProofRequest(
                proof_req['name'],
                proof_req['version'],
                proof_req['nonce'],
                {
                    ref: AttributeInfo(info['name'], info.get('restrictions'))
                    for ref, info in (proof_req.get('requested_attributes') or {}).items()
                },
                {
                    ref: PredicateInfo(info['name'], info['p_type'], info['p_value'], info.get('restrictions'))
                    for ref, info in (proof_req.get('requested_predicates') or {}).items()
                },
                proof_req.get('non_revoked'))
        except (AttributeError, KeyError, TypeError, ValueError):
            raise BadMessage('Malformed proof request')

    def __eq__(self, other: 'ProofRequest') -> bool:
        return isinstance(other, ProofRequest) and self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        return 'ProofRequest({}, {}, {})'.format(self.name, self.version, sorted(self.referents()))


class RequestedAttribute:
    """
    Holder's choice of credential for a proof request referent: wallet credential identifier, whether to reveal
    the attribute, and optionally a timestamp pinning the revocation registry state to prove non-revocation at.
    """

    def __init__(self, cred_id: str, revealed: bool = True, timestamp: int = None) -> None:
        self.cred_id = cred_id
        self.revealed = revealed
        self.timestamp = timestamp


class RequestedCredentials:
    """
    Holder's selection of credentials to fill a proof request.
    """

    def __init__(
            self,
            requested_attributes: dict = None,
            requested_predicates: dict = None,
            self_attested_attributes: dict = None) -> None:
        """
        Initialize requested credentials.

        :param requested_attributes: dict mapping attribute referents to RequestedAttribute instances
        :param requested_predicates: dict mapping predicate referents to RequestedAttribute instances
            (revealed flag does not apply)
        :param self_attested_attributes: dict mapping referents to self-attested values
        """

        self.requested_attributes = requested_attributes or {}
        self.requested_predicates = requested_predicates or {}
        self.self_attested_attributes = self_attested_attributes or {}

    def selections(self) -> list:
        """
        Return all requested attribute and predicate selections.

        :return: list of RequestedAttribute instances
        """

        return list(self.requested_attributes.values()) + list(self.requested_predicates.values())

    def to_dict(self) -> dict:
        """
        Return dict representation in indy-sdk requested credentials form.

        :return: dict representation
        """

        def _item(sel: RequestedAttribute, with_revealed: bool) -> dict:
            rv = {'cred_id': sel.cred_id}
            if with_revealed:
                rv['revealed'] = bool(sel.revealed)
            if sel.timestamp is not None:
                rv['timestamp'] = sel.timestamp
            return rv

        return {
            'self_attested_attributes': dict(self.self_attested_attributes),
            'requested_attributes': {ref: _item(sel, True) for ref, sel in self.requested_attributes.items()},
            'requested_predicates': {ref: _item(sel, False) for ref, sel in self.requested_predicates.items()}
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict())
