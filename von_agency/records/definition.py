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



from von_agency.records.base import BaseRecord


class DefinitionRecord(BaseRecord):
    """
    Issuer's credential definition on a schema, with its current revocation registry if revocable.
    """

    RECORD_TYPE = 'cred_def'
    VALUES = ('schema_id', 'cred_def_id', 'revocable', 'rev_reg_id', 'tails_file')
    TAG_NAMES = ('schema_id', 'cred_def_id')

    def __init__(
            self,
            ident: str = None,
            state: None = None,
            schema_id: str = None,
            cred_def_id: str = None,
            revocable: bool = False,
            rev_reg_id: str = None,
            tails_file: str = None) -> None:
        super().__init__(ident or cred_def_id, state)
        self.schema_id = schema_id
        self.cred_def_id = cred_def_id
        self.revocable = bool(revocable)
        self.rev_reg_id = rev_reg_id
        self.tails_file = tails_file
