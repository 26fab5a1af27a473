"""
Per-request read and write timeouts.

uvicorn only bounds idle keep-alive connections, so read and write
timeouts are enforced on the ASGI channel:
- read: the whole request body must arrive within read_timeout of the
  request reaching the app
- write: the whole response must be sent within write_timeout of its
  first message

A timeout raises inside the app and uvicorn closes the connection (or
answers 500 if no response was started).
"""

import asyncio


class RequestReadTimeout(TimeoutError):
    """Raised when the client does not send request body in time."""


class ResponseWriteTimeout(TimeoutError):
    """Raised when a response cannot be written in time."""


class TimeoutMiddleware:
    """
    Pure ASGI middleware bounding request body reads and response writes.

    A timeout of 0 disables the corresponding bound. Once the request
    body is complete, further receive() calls (disconnect listeners)
    are not bounded.
    """

    def __init__(self, app, read_timeout: float = 0, write_timeout: float = 0):
        """
        Initialize middleware.

        Args:
            app: Wrapped ASGI application
            read_timeout: Seconds allowed to read the request body
            write_timeout: Seconds allowed to write the response
        """
        self.app = app
        self.read_timeout = read_timeout
        self.write_timeout = write_timeout

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        loop = asyncio.get_running_loop()
        read_deadline = loop.time() + self.read_timeout if self.read_timeout else None
        write_deadline = None
        body_complete = False

        async def receive_with_timeout():
            nonlocal body_complete
            if read_deadline is None or body_complete:
                return await receive()
            try:
                message = await asyncio.wait_for(
                    receive(), max(read_deadline - loop.time(), 0)
                )
            except asyncio.TimeoutError:
                raise RequestReadTimeout(
                    f"Request read timed out after {self.read_timeout}s"
                ) from None
            if not message.get("more_body", False):
                body_complete = True
            return message

        async def send_with_timeout(message):
            nonlocal write_deadline
            if not self.write_timeout:
                await send(message)
                return
            if write_deadline is None:
                write_deadline = loop.time() + self.write_timeout
            try:
                await asyncio.wait_for(
                    send(message), max(write_deadline - loop.time(), 0)
                )
            except asyncio.TimeoutError:
                raise ResponseWriteTimeout(
                    f"Response write timed out after {self.write_timeout}s"
                ) from None

        await self.app(scope, receive_with_timeout, send_with_timeout)
