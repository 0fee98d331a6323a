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



from von_agency.models.endpoint import ConnectionAlias
from von_agency.validcfg import validate_config


class InviteConfig:
    """
    Configuration for connection invitation creation.
    """

    def __init__(
            self,
            record_id: str = None,
            my_alias: ConnectionAlias = None,
            their_alias: ConnectionAlias = None) -> None:
        """
        Initialize invitation configuration.

        :param record_id: identifier for the resulting connection record (default generated)
        :param my_alias: how to present the inviter to the invitee (default agent owner as provisioned)
        :param their_alias: local alias for the invitee
        """

        self.record_id = record_id
        self.my_alias = my_alias
        self.their_alias = their_alias

    @staticmethod
    def from_dict(config: dict) -> 'InviteConfig':
        """
        Build invitation configuration from dict. Raise JSONValidation on non-compliance with 'invite' schema.

        :param config: configuration dict
        :return: invitation configuration
        """

        validate_config('invite', config or {})
        return InviteConfig(
            (config or {}).get('record_id'),
            ConnectionAlias.from_dict(config['my_alias']) if (config or {}).get('my_alias') else None,
            ConnectionAlias.from_dict(config['their_alias']) if (config or {}).get('their_alias') else None)
