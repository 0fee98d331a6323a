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


import jsonschema

from von_agency.error import JSONValidation


CONFIG_JSON_SCHEMA = {
    'pool': {
        '$schema': 'http://json-schema.org/draft-04/schema',
        'type': 'object',
        'properties': {
            'timeout': {
                'type': 'integer'
            },
            'extended_timeout': {
                'type': 'integer'
            },
            'preordered_nodes': {
                'type': 'array',
                'items': {
                    'type': 'string',
                    'uniqueItems': True
                }
            }
        },
        'additionalProperties': False
    },
    'agency': {
        '$schema': 'http://json-schema.org/draft-04/schema',
        'type': 'object',
        'properties': {
            'tails_dir': {
                'type': 'string',
                'minLength': 1
            },
            'tails_base_uri': {
                'type': 'string',
                'pattern': '^https?://'
            },
            'http_timeout': {
                'type': 'integer',
                'minimum': 1
            },
            'max_cred_num': {
                'type': 'integer',
                'minimum': 1
            }
        },
        'additionalProperties': False
    },
    'invite': {
        '$schema': 'http://json-schema.org/draft-04/schema',
        'type': 'object',
        'properties': {
            'record_id': {
                'type': 'string',
                'minLength': 1
            },
            'my_alias': {
                'type': 'object',
                'properties': {
                    'name': {
                        'type': 'string'
                    },
                    'image_url': {
                        'type': 'string'
                    }
                },
                'additionalProperties': False
            },
            'their_alias': {
                'type': 'object',
                'properties': {
                    'name': {
                        'type': 'string'
                    },
                    'image_url': {
                        'type': 'string'
                    }
                },
                'additionalProperties': False
            }
        },
        'additionalProperties': False
    }
}


def validate_config(key: str, config: dict) -> None:
    """
    Call jsonschema validation to raise JSONValidation on non-compliance or silently pass.

    :param key: validation schema key of interest
    :param config: configuration dict to validate
    """

    try:
        jsonschema.validate(config, CONFIG_JSON_SCHEMA[key])
    except jsonschema.ValidationError as x_valid:
        raise JSONValidation('JSON validation error on {} configuration: {}'.format(key, x_valid.message))
    except jsonschema.SchemaError as x_schema:
        raise JSONValidation('JSON schema error on {} specification: {}'.format(key, x_schema.message))
