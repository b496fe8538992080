"""A helper to create asynchronous HTTP client (via `httpx.AsyncClient`)
with common configurations.
"""

from httpx import AsyncBaseTransport, AsyncClient, Limits, Timeout


def create_http_client(
    max_connections: int = 100,
    connect_timeout: float = 10.0,
    request_timeout: float = 10.0,
    pool_timeout: float = 10.0,
    headers: dict[str, str] | None = None,
    follow_redirects: bool = True,
    transport: AsyncBaseTransport | None = None,
) -> AsyncClient:
    """Crete a new `httpx.AsyncClient` with common configurations.

    Args:
      - `max_connections` {int}: Max connections of the connection pool.
      - `connect_timeout` {float}: The timeout for establishing a connection to the host.
      - `request_timeout` {float}: The timeout for handling a request to the host.
      - `pool_timeout` {float}: The timeout for acquiring a connection from the pool.
      - `headers` {dict[str, str] | None}: Headers sent with every request.
      - `follow_redirects` {bool}: Whether redirects are followed transparently.
      - `transport` {AsyncBaseTransport | None}: A custom transport, mostly for tests.
    Returns:
      - {AsyncClient}: An async HTTP client.
    """
    return AsyncClient(
        limits=Limits(max_connections=max_connections),
        timeout=Timeout(request_timeout, connect=connect_timeout, pool=pool_timeout),
        headers=headers,
        follow_redirects=follow_redirects,
        transport=transport,
    )
