"""GraphQL client module for minigql.

Provides :class:`GraphQLClient`, the asynchronous request engine that
fingerprints requests, serves cached responses, and retries transient
failures against an injected transport.

Example::

    from minigql.client import GraphQLClient
    from minigql.transport import HttpxTransport

    async with HttpxTransport() as transport:
        client = GraphQLClient("https://example.com/graphql", transport=transport)
        result = await client.query("{ viewer { login } }")
"""

from minigql.client.async_client import GraphQLClient

__all__ = ["GraphQLClient"]
