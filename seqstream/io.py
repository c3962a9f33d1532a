"""
I/O module for reading FASTA files.

FastaReader parses a byte stream in a background thread. Records are
collected into chunks of fixed size and handed to the consumer, in order,
through a bounded queue. Reading can be cancelled at any time; the queue is
always closed once the last chunk has been delivered.
"""

import logging
import queue
import re
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO, Iterator, List, Optional, Union

from pydantic import ValidationError

from seqstream.alphabet import Alphabet, guess_alphabet
from seqstream.config import DEFAULT_ID_REGEXP, config as default_config
from seqstream.exceptions import ConfigurationError, ReadCancelledError
from seqstream.seq import Sequence, SequenceError

logger = logging.getLogger(__name__)

# Line width used by str(FastaRecord)
DEFAULT_LINE_WIDTH = 70

# An ID regular expression must capture something
_CHECK_ID_REGEXP = re.compile(r"\(.+\)")

_WHITESPACE = b" \t\n\r\x0b\x0c"

# Marks the end of the chunk queue
_CLOSED = object()


class FastaRecord:
    """A record from a FASTA file."""

    def __init__(self, id: str, name: str, seq: Sequence) -> None:
        """
        Initialize a FASTA record.

        Args:
            id: The sequence identifier parsed from the header
            name: The full header line without the '>'
            seq: The sequence
        """
        self.id = id
        self.name = name
        self.seq = seq

    @classmethod
    def new(cls, alphabet: Alphabet, id: str, name: str, seq: bytes,
            validate: bool = True) -> "FastaRecord":
        """
        Build a record from raw sequence bytes.

        Raises:
            SequenceError: If the sequence cannot be built; the error carries
                the record ID
        """
        try:
            sequence = Sequence(alphabet, seq, validate=validate)
        except SequenceError as err:
            err.record_id = id
            raise
        return cls(id, name, sequence)

    def __str__(self) -> str:
        """Get the record in FASTA format."""
        body = self.format_seq(DEFAULT_LINE_WIDTH).decode("ascii", errors="replace")
        return f">{self.name}\n{body}"

    def __repr__(self) -> str:
        return f"FastaRecord(id='{self.id}', name='{self.name}', seq={self.seq!r})"

    def format_seq(self, width: int) -> bytes:
        """Wrap the sequence into lines of fixed width."""
        return self.seq.format_seq(width)


@dataclass
class FastaRecordChunk:
    """
    A batch of records.

    Chunk IDs start at 0 and follow the order of emission. Only the last
    chunk of a session may carry an error; its records are still valid.
    """
    chunk_id: int
    records: List[FastaRecord] = field(default_factory=list)
    error: Optional[Exception] = None

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[FastaRecord]:
        return iter(self.records)


def parse_header_id(id_regexp: re.Pattern, name: str) -> str:
    """
    Extract the record ID from a header.

    Returns:
        The first capturing group of `id_regexp`, or the whole header when
        the expression does not match
    """
    found = id_regexp.search(name)
    if found is None or found.group(1) is None:
        return name
    return found.group(1)


def _compile_id_regexp(pattern: str) -> re.Pattern:
    if not pattern:
        return re.compile(DEFAULT_ID_REGEXP)
    if not _CHECK_ID_REGEXP.search(pattern):
        raise ConfigurationError(
            'regular expression must contain "(" and ")" to capture matched ID. '
            f"default: {DEFAULT_ID_REGEXP}"
        )
    try:
        regexp = re.compile(pattern)
    except re.error as err:
        raise ConfigurationError(f"fail to compile regexp: {pattern} ({err})") from err
    if regexp.groups < 1:
        raise ConfigurationError(f"regular expression has no capturing group: {pattern}")
    return regexp


class FastaReader:
    """
    Asynchronous FASTA parser.

    A worker thread reads the source line by line and publishes
    FastaRecordChunk objects to a bounded queue. The reader owns the source
    and closes it when the worker stops, whatever the reason.

    Iterate over the reader to get chunks until the queue is closed:

        reader = FastaReader(open("seqs.fa", "rb"), chunk_capacity=100)
        for chunk in reader:
            if chunk.error is not None:
                ...
            for record in chunk:
                ...

    Once `cancel()` is called the consumer should keep draining the reader
    until it is exhausted, or use `close()`, so that the worker can deliver
    its last chunk and exit.
    """

    def __init__(self, source: Union[BinaryIO, str, Path], alphabet: Optional[Alphabet] = None, *,
                 queue_capacity: Optional[int] = None, chunk_capacity: Optional[int] = None,
                 id_pattern: Optional[str] = None, validate_seq: Optional[bool] = None) -> None:
        """
        Initialize the reader and start parsing.

        Args:
            source: A binary stream with readline() and close(), or a path to
                open. Decompression is up to the caller.
            alphabet: Sequence alphabet; guessed from the first record if None
            queue_capacity: Number of chunks buffered for the consumer
            chunk_capacity: Number of records per chunk
            id_pattern: Regular expression with one capturing group for the
                record ID; "" for the default `^([^\\s]+)\\s?`
            validate_seq: Check sequences against the alphabet

        Raises:
            ConfigurationError: If the options are unusable
        """
        try:
            options = default_config.merged(queue_capacity=queue_capacity,
                                            chunk_capacity=chunk_capacity,
                                            id_pattern=id_pattern,
                                            validate_seq=validate_seq)
        except ValidationError as err:
            raise ConfigurationError(f"invalid reader options: {err}") from err

        self.id_regexp = _compile_id_regexp(options.id_pattern)
        self.queue_capacity = options.queue_capacity
        self.chunk_capacity = options.chunk_capacity
        self.validate_seq = options.validate_seq

        if isinstance(source, (str, Path)):
            source = open(source, "rb")
        self._source = source
        self._source_closed = False

        self._alphabet = alphabet
        self._alphabet_lock = threading.Lock()
        self._alphabet_ready = threading.Event()
        if alphabet is not None:
            self._alphabet_ready.set()
        self._first_seq = True

        self._state_lock = threading.Lock()
        self._done = threading.Event()
        self._finished = False
        self._cancelled = False

        # queue.Queue(0) is unbounded, a single slot is the closest to a hand-off
        self._queue: "queue.Queue" = queue.Queue(maxsize=max(self.queue_capacity, 1))

        self._worker = threading.Thread(target=self._read, name="FastaReader", daemon=True)
        self._worker.start()

    @property
    def alphabet(self) -> Optional[Alphabet]:
        """The alphabet in use; None until the first record is parsed when guessing."""
        with self._alphabet_lock:
            return self._alphabet

    def wait_alphabet(self, timeout: Optional[float] = None) -> Optional[Alphabet]:
        """
        Wait until the alphabet is known.

        Returns:
            The alphabet, or None if the session ended without any record or
            the timeout expired
        """
        self._alphabet_ready.wait(timeout)
        return self.alphabet

    @property
    def finished(self) -> bool:
        with self._state_lock:
            return self._finished

    @property
    def cancelled(self) -> bool:
        with self._state_lock:
            return self._cancelled

    def parse_head_id(self, name: str) -> str:
        return parse_header_id(self.id_regexp, name)

    def cancel(self) -> None:
        """
        Ask the worker to stop.

        Safe to call from any thread and more than once. The worker notices
        the request before reading its next line, emits the records of the
        current chunk with a ReadCancelledError and closes the queue. The
        record being read at that moment is dropped. Has no effect once the
        session finished.
        """
        with self._state_lock:
            if self._finished or self._cancelled:
                return
            self._cancelled = True
        self._done.set()
        logger.debug("cancellation requested")

    def next_chunk(self, timeout: Optional[float] = None) -> Optional[FastaRecordChunk]:
        """
        Get the next chunk.

        Args:
            timeout: Seconds to wait; None blocks until a chunk is available

        Returns:
            The next chunk, or None when the queue is closed

        Raises:
            queue.Empty: If the timeout expired
        """
        item = self._queue.get(timeout=timeout)
        if item is _CLOSED:
            # leave the marker for other consumers
            self._queue.put(_CLOSED)
            return None
        return item

    def __iter__(self) -> Iterator[FastaRecordChunk]:
        """
        Iterate over chunks until the queue is closed.

        A consumer that stops early must call `close()`, otherwise the worker
        stays blocked on the full queue and the source is not released.
        """
        while True:
            chunk = self.next_chunk()
            if chunk is None:
                return
            yield chunk

    def records(self) -> Iterator[FastaRecord]:
        """
        Iterate over records across chunks.

        The reader is closed when the iteration ends, including when the
        generator is closed or dropped before exhaustion.

        Raises:
            SequenceError: The error of the last chunk, after its records
            Exception: Whatever reading or decoding the source raised, e.g.
                OSError, EOFError from a truncated compressed stream or
                UnicodeDecodeError from a text stream
        """
        terminal = False
        try:
            for chunk in self:
                yield from chunk.records
                if chunk.error is not None:
                    terminal = True
                    raise chunk.error
            terminal = True
        finally:
            if terminal:
                # the worker is done with the queue after its last chunk
                self._worker.join()
            else:
                self.close()

    def close(self) -> None:
        """Cancel reading and drain the queue, so the source is released."""
        self.cancel()
        for _ in self:
            pass
        self._worker.join()

    def __enter__(self) -> "FastaReader":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()

    def _read(self) -> None:
        logger.debug("start reading, chunk capacity %d, queue capacity %d",
                     self.chunk_capacity, self.queue_capacity)
        try:
            self._parse()
        finally:
            with self._state_lock:
                self._finished = True
            self._close_source()
            self._alphabet_ready.set()
            self._queue.put(_CLOSED)

    def _parse(self) -> None:
        chunk_id = 0
        records: List[FastaRecord] = []
        name: Optional[str] = None
        body: List[bytes] = []
        readline = self._source.readline

        while True:
            if self._done.is_set():
                logger.warning("reading cancelled with %d record(s) in chunk %d",
                               len(records), chunk_id)
                self._emit(chunk_id, records, ReadCancelledError())
                return

            try:
                line = readline()
                if isinstance(line, str):
                    line = line.encode("utf-8")

                if not line:  # end of file
                    if name is not None:
                        records.append(self._new_record(name, body))
                    if records:
                        self._emit(chunk_id, records)
                    return

                if line.startswith(b">"):
                    this_name = line[1:].rstrip().decode("utf-8", errors="replace")
                    if name is not None:
                        records.append(self._new_record(name, body))
                        if len(records) == self.chunk_capacity:
                            self._emit(chunk_id, records)
                            chunk_id += 1
                            records = []
                    name = this_name
                    body = []
                elif name is not None:
                    body.append(line)
                # lines before the first header are ignored
            except Exception as err:
                # source, decoding and record errors all end on the terminal chunk
                logger.warning("reading stopped in chunk %d: %s", chunk_id, err)
                self._emit(chunk_id, records, err)
                return

    def _new_record(self, name: str, body: List[bytes]) -> FastaRecord:
        seq = b"".join(body).translate(None, _WHITESPACE)

        if self._first_seq:
            if self._alphabet is None:
                guessed = guess_alphabet(seq)
                with self._alphabet_lock:
                    self._alphabet = guessed
                logger.info("guessed alphabet %s from the first record", guessed)
            self._first_seq = False
            self._alphabet_ready.set()

        return FastaRecord.new(self._alphabet, self.parse_head_id(name), name, seq,
                               validate=self.validate_seq)

    def _emit(self, chunk_id: int, records: List[FastaRecord],
              error: Optional[Exception] = None) -> None:
        self._queue.put(FastaRecordChunk(chunk_id, records, error))
        logger.debug("chunk %d emitted with %d record(s)", chunk_id, len(records))

    def _close_source(self) -> None:
        if self._source_closed:
            return
        self._source_closed = True
        try:
            self._source.close()
        except OSError as err:
            logger.warning("failed to close source: %s", err)
        else:
            logger.debug("source closed")


def read_fasta(source: Union[BinaryIO, str, Path], alphabet: Optional[Alphabet] = None,
               **options) -> List[FastaRecord]:
    """
    Read all records of a FASTA file.

    Args:
        source: A binary stream or a path
        alphabet: Sequence alphabet; guessed from the first record if None
        **options: Other FastaReader options

    Returns:
        List of FastaRecord objects

    Raises:
        SequenceError: If a record is invalid
        ConfigurationError: If the options are unusable
        Exception: Whatever reading or decoding the source raised
    """
    reader = FastaReader(source, alphabet, **options)
    return list(reader.records())
