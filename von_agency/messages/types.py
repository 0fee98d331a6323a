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



MESSAGE_FAMILY = 'did:sov:BzCbsNYhMrjHiqZDTUASHg;spec/'

CONNECTIONS = '{}connections/1.0/'.format(MESSAGE_FAMILY)
CONNECTION_INVITATION = '{}invitation'.format(CONNECTIONS)
CONNECTION_REQUEST = '{}request'.format(CONNECTIONS)
CONNECTION_RESPONSE = '{}response'.format(CONNECTIONS)
CONNECTION_ACKNOWLEDGEMENT = '{}ack'.format(CONNECTIONS)

CREDENTIALS = '{}credential-issuance/1.0/'.format(MESSAGE_FAMILY)
CREDENTIAL_OFFER = '{}offer-credential'.format(CREDENTIALS)
CREDENTIAL_REQUEST = '{}request-credential'.format(CREDENTIALS)
CREDENTIAL = '{}issue-credential'.format(CREDENTIALS)

PROOFS = '{}present-proof/1.0/'.format(MESSAGE_FAMILY)
PROOF_REQUEST = '{}request-presentation'.format(PROOFS)
PROOF = '{}presentation'.format(PROOFS)
