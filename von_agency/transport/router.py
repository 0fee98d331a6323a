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



import asyncio
import logging

import aiohttp

from von_agency.error import BadTransport
from von_agency.messages import EnvelopeMessage
from von_agency.models import AgentEndpoint


LOGGER = logging.getLogger(__name__)


class Router:
    """
    Deliver envelopes to peer endpoints: one HTTP POST each, no retry, no queue.
    """

    CONTENT_TYPE = 'application/octet-stream'
    DEFAULT_TIMEOUT = 30  # seconds

    def __init__(self, timeout: int = None) -> None:
        """
        Initializer for router.

        :param timeout: total timeout per delivery, seconds
        """

        self._timeout = timeout or Router.DEFAULT_TIMEOUT

    async def forward(self, envelope: EnvelopeMessage, endpoint: AgentEndpoint) -> int:
        """
        Post envelope to endpoint. A 2xx status means accepted for delivery.
        Raise BadTransport on any other status, connection failure, or timeout.

        :param envelope: envelope message
        :param endpoint: peer endpoint
        :return: HTTP status
        """

        LOGGER.debug('Router.forward >>> envelope: %s, endpoint: %s', envelope, endpoint)

        if not endpoint or not endpoint.uri:
            LOGGER.debug('Router.forward <!< No endpoint URI for %s', envelope.type)
            raise BadTransport('No endpoint URI for {}'.format(envelope.type))

        try:
            async with aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=self._timeout)) as session:
                async with session.post(
                        endpoint.uri,
                        data=envelope.to_bytes(),
                        headers={'Content-Type': Router.CONTENT_TYPE}) as response:
                    rv = response.status
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as x_http:
            LOGGER.debug('Router.forward <!< POST to %s failed: %s', endpoint.uri, x_http)
            raise BadTransport('POST to {} failed: {}'.format(endpoint.uri, x_http))

        if not 200 <= rv < 300:
            LOGGER.debug('Router.forward <!< POST to %s returned HTTP %s', endpoint.uri, rv)
            raise BadTransport('POST to {} returned HTTP {}'.format(endpoint.uri, rv))

        LOGGER.debug('Router.forward <<< %s', rv)
        return rv
