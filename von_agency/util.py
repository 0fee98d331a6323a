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



import re

from base64 import urlsafe_b64decode, urlsafe_b64encode
from hashlib import sha256
from typing import Any, Union
from urllib.parse import urlparse

from base58 import alphabet, b58decode, b58encode

from von_agency.error import BadIdentifier


B58 = alphabet if isinstance(alphabet, str) else alphabet.decode('ascii')
I32_BOUND = 2**31


def schema_id(origin_did: str, name: str, version: str) -> str:
    """
    Return schema identifier for input origin DID, schema name, and schema version.

    :param origin_did: DID of schema originator
    :param name: schema name
    :param version: schema version
    :return: schema identifier
    """

    return '{}:2:{}:{}'.format(origin_did, name, version)  # 2 marks indy-sdk schema id


def ok_did(token: str) -> bool:
    """
    Whether input token looks like a valid distributed identifier.

    :param token: candidate string
    :return: whether input token looks like a valid distributed identifier
    """

    try:
        return len(b58decode(token)) == 16 if token else False
    except ValueError:
        return False


def ok_verkey(token: str) -> bool:
    """
    Whether input token looks like a valid (full, not abbreviated) verification key.

    :param token: candidate string
    :return: whether input token looks like a valid verification key
    """

    try:
        return len(b58decode(token)) == 32 if isinstance(token, str) and token else False
    except ValueError:
        return False


def ok_schema_id(token: str) -> bool:
    """
    Whether input token looks like a valid schema identifier;
    i.e., <issuer-did>:2:<name>:<version>.

    :param token: candidate string
    :return: whether input token looks like a valid schema identifier
    """

    return bool(re.match('[{}]{{21,22}}:2:.+:[0-9.]+$'.format(B58), token or ''))


def ok_cred_def_id(token: str, issuer_did: str = None) -> bool:
    """
    Whether input token looks like a valid credential definition identifier from input issuer DID (default any);
    i.e., <issuer-did>:3:CL:<schema-seq-no>:<cred-def-id-tag>.

    :param token: candidate string
    :param issuer_did: issuer DID to match, if specified
    :return: whether input token looks like a valid credential definition identifier
    """

    cd_id_m = re.match('([{}]{{21,22}}):3:CL:[1-9][0-9]*(:.+)?$'.format(B58), token or '')
    return bool(cd_id_m) and ((not issuer_did) or cd_id_m.group(1) == issuer_did)


def ok_rev_reg_id(token: str, issuer_did: str = None) -> bool:
    """
    Whether input token looks like a valid revocation registry identifier from input issuer DID (default any); i.e.,
    <issuer-did>:4:<issuer-did>:3:CL:<schema-seq-no>:<cred-def-id-tag>:CL_ACCUM:<rev-reg-id-tag>.

    :param token: candidate string
    :param issuer_did: issuer DID to match, if specified
    :return: whether input token looks like a valid revocation registry identifier
    """

    rr_id_m = re.match(
        '([{0}]{{21,22}}):4:([{0}]{{21,22}}):3:CL:[1-9][0-9]*(:.+)?:CL_ACCUM:.+$'.format(B58),
        token or '')
    return bool(rr_id_m) and ((not issuer_did) or (rr_id_m.group(1) == issuer_did and rr_id_m.group(2) == issuer_did))


def rev_reg_id2cred_def_id(rr_id: str) -> str:
    """
    Given a revocation registry identifier, return its corresponding credential definition identifier.
    Raise BadIdentifier if input is not a revocation registry identifier.

    :param rr_id: revocation registry identifier
    :return: credential definition identifier
    """

    if ok_rev_reg_id(rr_id):
        return ':'.join(rr_id.split(':')[2:-2])  # rev reg id comprises (prefixes):<cred_def_id>:(suffixes)
    raise BadIdentifier('Bad revocation registry identifier {}'.format(rr_id))


def tails_filename(tails_location: str) -> str:
    """
    Return tails file name from the tails location that a revocation registry definition declares:
    the last path segment of its URI (or file path).
    Raise BadIdentifier if the location has no such segment.

    :param tails_location: tails location URI or path
    :return: tails file name
    """

    path = urlparse(tails_location or '').path
    rv = path.rstrip('/').split('/')[-1] if path else ''
    if not rv or rv in ('.', '..'):
        raise BadIdentifier('Tails location {} has no file name'.format(tails_location))
    return rv


def tails_hash(content: bytes) -> str:
    """
    Return tails hash as indy-sdk computes it on writing a tails file: base58 of its SHA-256 digest.

    :param content: tails file content
    :return: tails hash
    """

    return digest_tails_hash(sha256(content))


def digest_tails_hash(digest) -> str:
    """
    Return tails hash on SHA-256 hash object that has taken in all of a tails file's content.

    :param digest: SHA-256 hash object
    :return: tails hash
    """

    return b58encode(digest.digest()).decode('ascii')


def tails_file_hash(path: str, chunk_size: int = 1 << 16) -> str:
    """
    Return tails hash of tails file, reading it in chunks. Blocks on file I/O: run it in an executor
    from a coroutine.

    :param path: path to tails file
    :param chunk_size: read size in bytes
    :return: tails hash
    """

    digest = sha256()
    with open(path, 'rb') as fh_tails:
        for chunk in iter(lambda: fh_tails.read(chunk_size), b''):
            digest.update(chunk)
    return digest_tails_hash(digest)


def raw(orig: Any) -> str:
    """
    Stringify input value, empty string for None.

    :param orig: original attribute value of any stringifiable type
    :return: stringified raw value
    """

    return '' if orig is None else str(orig)


def encode(orig: Any) -> str:
    """
    Encode credential attribute value, purely stringifying any int32 and leaving numeric int32 strings alone,
    but mapping any other input to a stringified 256-bit (but not 32-bit) integer. Predicates in indy-sdk operate
    on int32 values properly only when their encoded values match their raw values.

    :param orig: original value to encode
    :return: encoded value
    """

    if isinstance(orig, int) and -I32_BOUND <= orig < I32_BOUND:
        return str(int(orig))  # python bools are ints

    try:
        i32orig = int(str(orig))  # don't encode floats as ints
        if -I32_BOUND <= i32orig < I32_BOUND:
            return str(i32orig)
    except (ValueError, TypeError):
        pass

    return str(int.from_bytes(sha256(raw(orig).encode()).digest(), 'big'))


def cred_attr_value(orig: Any) -> dict:
    """
    Given a value, return corresponding credential attribute value dict for indy-sdk processing.

    :param orig: original attribute value of any stringifiable type
    :return: dict on 'raw' and 'encoded' keys for indy-sdk processing
    """

    return {'raw': raw(orig), 'encoded': encode(orig)}


def b64_encode(content: Union[str, bytes]) -> str:
    """
    Return unpadded URL-safe base64 encoding of input.

    :param content: str (as UTF-8) or bytes to encode
    :return: encoding
    """

    return urlsafe_b64encode(content.encode() if isinstance(content, str) else content).decode('ascii').rstrip('=')


def b64_decode(token: str) -> bytes:
    """
    Decode URL-safe base64, padded or not. Raise ValueError on bad input.

    :param token: encoded token
    :return: decoded bytes
    """

    token = (token or '').strip()
    return urlsafe_b64decode(token + '=' * (-len(token) % 4))
