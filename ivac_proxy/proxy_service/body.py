"""Streamed request body that can be sent again after a failed attempt."""

from collections.abc import AsyncIterable, AsyncIterator


class ReplayableBody:
    """
    Wraps the inbound byte stream so a retry re-sends the same bytes.

    The first pass streams straight from the source. Chunks are recorded as
    they go through, so a later pass yields the recorded chunks first and
    then continues with whatever the source has not produced yet.
    """

    def __init__(self, source: AsyncIterable[bytes]):
        self._source = source.__aiter__()
        self._chunks: list[bytes] = []
        self._exhausted = False

    async def __aiter__(self) -> AsyncIterator[bytes]:
        for chunk in list(self._chunks):
            yield chunk

        while not self._exhausted:
            try:
                chunk = await self._source.__anext__()
            except StopAsyncIteration:
                self._exhausted = True
                return
            if chunk:
                self._chunks.append(chunk)
                yield chunk
