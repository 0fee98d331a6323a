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


from enum import IntEnum


class ErrorCode(IntEnum):
    """
    Error codes particular to von_agency operation.
    """

    Success = 0

    # Errors to do with protocol operation
    ProtocolState = 1001
    BadMessage = 1002
    AbsentLinkSecret = 1005
    AbsentSchema = 1007
    AbsentCredDef = 1008
    AbsentTails = 1009
    CorruptTails = 1010
    BadLedgerTxn = 1012
    AbsentRevReg = 1015
    BadIdentifier = 1016

    # Errors to do with wallet operation
    AbsentWallet = 3000
    ExtantWallet = 3004
    WalletState = 3005
    ExtantRecord = 3006
    AbsentRecord = 3007
    AbsentMessage = 3008
    BadRecord = 3009
    BadAccess = 3010

    # Errors to do with node pool management and operation
    ClosedPool = 4000
    AbsentPool = 4002
    ExtantPool = 4003

    # Errors to do with transport
    BadTransport = 7000
    BadEnvelope = 7001
    BadTailsDownload = 7002

    # Errors passed through from the crypto runtime
    BadCryptoOp = 8000

    # JSON validation
    JSONValidation = 9000


class VonAgencyError(Exception):
    """
    Error class for von_agency operation.
    """

    def __init__(self, error_code: ErrorCode, message: str):
        """
        Initialize on code and message.

        :param error_code: error code
        :param message: error message
        """

        super().__init__(message)
        self.error_code = error_code
        self.message = message

    def __str__(self):
        """
        String representation of error.
        """

        return '({}) {}'.format(self.error_code, self.message)


class ProtocolState(VonAgencyError):
    """
    Message or operation arrives for a record not in the state that its protocol step expects.
    """

    def __init__(self, message: str):
        """
        Initialize on message.

        :param message: error message
        """

        super().__init__(ErrorCode.ProtocolState, message)


class BadMessage(VonAgencyError):
    """
    Content message is malformed, of unrecognized type, or not acceptable over its channel.
    """

    def __init__(self, message: str):
        """
        Initialize on message.

        :param message: error message
        """

        super().__init__(ErrorCode.BadMessage, message)


class AbsentLinkSecret(VonAgencyError):
    """
    Holder attempting operation requiring unavailable link (master) secret.
    """

    def __init__(self, message: str):
        """
        Initialize on message.

        :param message: error message
        """

        super().__init__(ErrorCode.AbsentLinkSecret, message)


class AbsentSchema(VonAgencyError):
    """
    Operation requires a schema that the ledger does not have.
    """

    def __init__(self, message: str):
        """
        Initialize on message.

        :param message: error message
        """

        super().__init__(ErrorCode.AbsentSchema, message)


class AbsentCredDef(VonAgencyError):
    """
    Operation requires a credential definition that the ledger does not have.
    """

    def __init__(self, message: str):
        """
        Initialize on message.

        :param message: error message
        """

        super().__init__(ErrorCode.AbsentCredDef, message)


class AbsentTails(VonAgencyError):
    """
    Tails file is not available locally, or has no location to publish.
    """

    def __init__(self, message: str):
        """
        Initialize on message.

        :param message: error message
        """

        super().__init__(ErrorCode.AbsentTails, message)


class CorruptTails(VonAgencyError):
    """
    Tails file content does not match the hash that its revocation registry declares.
    """

    def __init__(self, message: str):
        """
        Initialize on message.

        :param message: error message
        """

        super().__init__(ErrorCode.CorruptTails, message)


class BadLedgerTxn(VonAgencyError):
    """
    Ledger rejected transaction.
    """

    def __init__(self, message: str):
        """
        Initialize on message.

        :param message: error message
        """

        super().__init__(ErrorCode.BadLedgerTxn, message)


class AbsentRevReg(VonAgencyError):
    """
    Ledger has no revocation registry on the identifier of interest.
    """

    def __init__(self, message: str):
        """
        Initialize on message.

        :param message: error message
        """

        super().__init__(ErrorCode.AbsentRevReg, message)


class BadIdentifier(VonAgencyError):
    """
    Identifier is not of the form required.
    """

    def __init__(self, message: str):
        """
        Initialize on message.

        :param message: error message
        """

        super().__init__(ErrorCode.BadIdentifier, message)


class AbsentWallet(VonAgencyError):
    """
    Wallet does not exist.
    """

    def __init__(self, message: str):
        """
        Initialize on message.

        :param message: error message
        """

        super().__init__(ErrorCode.AbsentWallet, message)


class ExtantWallet(VonAgencyError):
    """
    Wallet already exists.
    """

    def __init__(self, message: str):
        """
        Initialize on message.

        :param message: error message
        """

        super().__init__(ErrorCode.ExtantWallet, message)


class WalletState(VonAgencyError):
    """
    Wallet is open when it must be closed or vice-versa.
    """

    def __init__(self, message: str):
        """
        Initialize on message.

        :param message: error message
        """

        super().__init__(ErrorCode.WalletState, message)


class ExtantRecord(VonAgencyError):
    """
    Record already exists in the store.
    """

    def __init__(self, message: str):
        """
        Initialize on message.

        :param message: error message
        """

        super().__init__(ErrorCode.ExtantRecord, message)


class AbsentRecord(VonAgencyError):
    """
    Referenced record (connection, credential, proof request, proof, provisioning) is not present.
    """

    def __init__(self, message: str):
        """
        Initialize on message.

        :param message: error message
        """

        super().__init__(ErrorCode.AbsentRecord, message)


class AbsentMessage(VonAgencyError):
    """
    Missing message or ciphertext.
    """

    def __init__(self, message: str):
        """
        Initialize on message.

        :param message: error message
        """

        super().__init__(ErrorCode.AbsentMessage, message)


class BadRecord(VonAgencyError):
    """
    Record is not of the form required (e.g., tags do not map strings to strings).
    """

    def __init__(self, message: str):
        """
        Initialize on message.

        :param message: error message
        """

        super().__init__(ErrorCode.BadRecord, message)


class BadAccess(VonAgencyError):
    """
    Bad wallet access credentials.
    """

    def __init__(self, message: str):
        """
        Initialize on message.

        :param message: error message
        """

        super().__init__(ErrorCode.BadAccess, message)


class ClosedPool(VonAgencyError):
    """
    Operation requires open node pool but it is closed.
    """

    def __init__(self, message: str):
        """
        Initialize on message.

        :param message: error message
        """

        super().__init__(ErrorCode.ClosedPool, message)


class AbsentPool(VonAgencyError):
    """
    Operation requires node pool but there is none, or its ledger configuration is absent.
    """

    def __init__(self, message: str):
        """
        Initialize on message.

        :param message: error message
        """

        super().__init__(ErrorCode.AbsentPool, message)


class ExtantPool(VonAgencyError):
    """
    Node pool ledger configuration already exists.
    """

    def __init__(self, message: str):
        """
        Initialize on message.

        :param message: error message
        """

        super().__init__(ErrorCode.ExtantPool, message)


class BadTransport(VonAgencyError):
    """
    Envelope delivery to a peer endpoint failed.
    """

    def __init__(self, message: str):
        """
        Initialize on message.

        :param message: error message
        """

        super().__init__(ErrorCode.BadTransport, message)


class BadEnvelope(VonAgencyError):
    """
    Envelope could not be packed or unpacked: bad key, foreign recipient, or crypto runtime failure.
    """

    def __init__(self, message: str):
        """
        Initialize on message.

        :param message: error message
        """

        super().__init__(ErrorCode.BadEnvelope, message)


class BadTailsDownload(VonAgencyError):
    """
    Tails file download failed.
    """

    def __init__(self, message: str):
        """
        Initialize on message.

        :param message: error message
        """

        super().__init__(ErrorCode.BadTailsDownload, message)


class BadCryptoOp(VonAgencyError):
    """
    Crypto runtime (indy-sdk wallet, crypto, anoncreds) operation failed.
    Retains indy-sdk error code, if any, as indy_error_code.
    """

    def __init__(self, message: str, indy_error_code: int = None):
        """
        Initialize on message and indy-sdk error code.

        :param message: error message
        :param indy_error_code: underlying indy-sdk error code
        """

        super().__init__(ErrorCode.BadCryptoOp, message)
        self.indy_error_code = indy_error_code


class JSONValidation(VonAgencyError):
    """
    Validation of a JSON-style configuration structure failed.
    """

    def __init__(self, message: str):
        """
        Initialize on message.

        :param message: error message
        """

        super().__init__(ErrorCode.JSONValidation, message)
