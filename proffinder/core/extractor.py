"""
Streaming record extractor.

Turns the chunked text coming back from the completion endpoint into validated
professor records, one per line, handed over as soon as each line is complete.

Chunk boundaries have nothing to do with line boundaries, so text is buffered
until a newline shows up; whatever is left when the stream ends is parsed once
more as a final line. A bad line is logged, counted and skipped, never fatal.
A transport failure ends the call with a single StreamError.
"""
import codecs
import json
import logging
from typing import AsyncIterator, Callable, List, Optional, Union

from ..models.schema import ExtractStats, Query, Record, is_valid_record, normalize_record
from .error import InvalidInputError, StreamError, log_error
from .llm_client import stream_chat
from .prompt import build_prompt

logger = logging.getLogger(__name__)

# (prompt, model=None) -> async iterator of text (or utf-8 bytes) fragments
ChunkSource = Callable[..., AsyncIterator[Union[str, bytes]]]
RecordCallback = Callable[[Record], None]
ErrorCallback = Callable[[StreamError], None]


class LineAssembler:
    """
    Reassembles newline-delimited JSON from arbitrary fragments.

    One instance per stream; the buffer only ever holds the unterminated tail.
    """

    def __init__(self, stats: Optional[ExtractStats] = None):
        self.buffer = ""
        self.stats = stats if stats is not None else ExtractStats()
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")

    def feed(self, chunk: Union[str, bytes]) -> List[Record]:
        """Append a fragment; return the records of every line it completed, in order."""
        if isinstance(chunk, bytes):
            chunk = self._decoder.decode(chunk)
        self.buffer += chunk
        *lines, self.buffer = self.buffer.split("\n")
        records = []
        for line in lines:
            record = self._parse(line)
            if record is not None:
                records.append(record)
        return records

    def flush(self) -> List[Record]:
        """Parse whatever is left once the stream has ended."""
        tail = self.buffer + self._decoder.decode(b"", final=True)
        self.buffer = ""
        record = self._parse(tail, final=True)
        return [record] if record is not None else []

    def _parse(self, line: str, final: bool = False) -> Optional[Record]:
        line = line.strip()
        if not line:
            return None
        self.stats.lines += 1
        where = "the final buffer" if final else "a line"

        try:
            obj = json.loads(line)
        except ValueError as exc:
            self.stats.malformed += 1
            logger.warning("Could not parse %s of streamed JSON: %r (%s)", where, line[:200], exc)
            return None
        if not isinstance(obj, dict):
            self.stats.malformed += 1
            logger.warning("Streamed JSON in %s is not an object: %r", where, line[:200])
            return None
        if not is_valid_record(obj):
            self.stats.invalid += 1
            logger.warning("Skipping %s without Name/Designation: %r", where, line[:200])
            return None
        return normalize_record(obj)


def _stream_failed(exc: Exception, stats: ExtractStats) -> StreamError:
    stats.failed = True
    log_error(exc, logger, context={"stage": "stream", **stats.to_dict()})
    return StreamError()


async def _records(
    prompt: str,
    stream: ChunkSource,
    model: Optional[str],
    stats: ExtractStats,
) -> AsyncIterator[Union[Record, StreamError]]:
    assembler = LineAssembler(stats)
    try:
        chunks = stream(prompt, model=model).__aiter__()
    except Exception as exc:
        yield _stream_failed(exc, stats)
        return

    try:
        while True:
            try:
                chunk = await chunks.__anext__()
            except StopAsyncIteration:
                break
            except Exception as exc:
                yield _stream_failed(exc, stats)
                return
            if not chunk:
                continue
            for record in assembler.feed(chunk):
                stats.emitted += 1
                yield record
    finally:
        aclose = getattr(chunks, "aclose", None)
        if aclose is not None:
            await aclose()

    for record in assembler.flush():
        stats.emitted += 1
        yield record


def iter_records(
    query: Query,
    *,
    stream: Optional[ChunkSource] = None,
    model: Optional[str] = None,
    stats: Optional[ExtractStats] = None,
) -> AsyncIterator[Union[Record, StreamError]]:
    """
    Pull-based form of `extract`.

    The query is checked right away, so an empty one raises InvalidInputError
    here and nothing is requested. The returned iterator yields records in
    arrival order; on transport failure it yields one StreamError and stops.
    """
    if query.is_empty():
        raise InvalidInputError()
    return _records(
        build_prompt(query),
        stream or stream_chat,
        model,
        stats if stats is not None else ExtractStats(),
    )


async def extract(
    query: Query,
    on_record: RecordCallback,
    on_error: ErrorCallback,
    *,
    stream: Optional[ChunkSource] = None,
    model: Optional[str] = None,
) -> ExtractStats:
    """
    Stream professor records for `query`.

    Args:
        query: Search criteria; at least one must be non-empty
        on_record: Called once per valid record, in arrival order
        on_error: Called at most once, if the stream fails
        stream: Chunk source, defaults to the configured LLM endpoint
        model: Model override passed to the chunk source

    Returns:
        Counters for the call (emitted, malformed, invalid, failed)

    Raises:
        InvalidInputError: every criterion is empty (no request is made)
    """
    stats = ExtractStats()
    items = iter_records(query, stream=stream, model=model, stats=stats)
    try:
        async for item in items:
            if isinstance(item, StreamError):
                on_error(item)
            else:
                on_record(item)
    finally:
        await items.aclose()

    logger.info(
        "Professor stream finished: %d emitted, %d skipped (%d malformed, %d invalid)%s",
        stats.emitted,
        stats.skipped,
        stats.malformed,
        stats.invalid,
        ", stream failed" if stats.failed else "",
    )
    return stats
