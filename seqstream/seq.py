"""
Sequence module for handling biological sequences.

This module provides the alphabet-aware Sequence class. A Sequence is never
modified in place: every transformation returns a new instance.
"""

from typing import Optional, Dict, Union, Iterable
import numpy as np
import pandas as pd

from seqstream.alphabet import Alphabet, AlphabetKind
from seqstream.exceptions import SequenceError, InvalidSymbolError, LengthMismatchError

__all__ = [
    "Sequence",
    "SequenceError",
    "InvalidSymbolError",
    "LengthMismatchError",
    "DEGENERATE_BASE_MAP_NUCL",
    "DEGENERATE_BASE_MAP_PROT",
]

# Nucleic acid degenerate bases as regular expression classes
DEGENERATE_BASE_MAP_NUCL: Dict[str, str] = {
    "A": "A", "T": "T", "U": "U", "C": "C", "G": "G",
    "R": "[AG]", "Y": "[CT]", "M": "[AC]", "K": "[GT]", "S": "[CG]", "W": "[AT]",
    "H": "[ACT]", "B": "[CGT]", "V": "[ACG]", "D": "[AGT]", "N": "[ACGT]",
    "a": "a", "t": "t", "u": "u", "c": "c", "g": "g",
    "r": "[ag]", "y": "[ct]", "m": "[ac]", "k": "[gt]", "s": "[cg]", "w": "[at]",
    "h": "[act]", "b": "[cgt]", "v": "[acg]", "d": "[agt]", "n": "[acgt]",
}

# Protein degenerate residues as regular expression classes
DEGENERATE_BASE_MAP_PROT: Dict[str, str] = {
    **{aa: aa for aa in "ACDEFGHIKLMNPQRSTVWY"},
    **{aa: aa for aa in "acdefghiklmnpqrstvwy"},
    "B": "[DN]", "J": "[IL]", "Z": "[QE]",
    "b": "[dn]", "j": "[il]", "z": "[qe]",
}

BytesLike = Union[str, bytes, bytearray]


def _to_bytes(data: BytesLike) -> bytes:
    if isinstance(data, str):
        return data.encode("ascii")
    if isinstance(data, (bytes, bytearray, memoryview)):
        return bytes(data)
    raise TypeError(f"Sequence data must be a string or bytes, not {type(data)}")


class Sequence:
    """
    An alphabet-tagged byte sequence with optional quality data.

    Attributes:
        alphabet: The Alphabet the symbols belong to
        seq: The symbols
        qual: Optional raw quality characters, one per symbol
        qual_values: Optional numeric quality values, one per symbol
    """

    __slots__ = ("alphabet", "seq", "qual", "qual_values")

    def __init__(self, alphabet: Alphabet, seq: BytesLike, qual: Optional[BytesLike] = None,
                 qual_values: Optional[Iterable[int]] = None, validate: bool = True) -> None:
        """
        Initialize a sequence.

        Args:
            alphabet: The alphabet of the sequence
            seq: The symbols as bytes or an ASCII string
            qual: Optional quality characters
            qual_values: Optional quality values
            validate: Check every symbol against the alphabet

        Raises:
            InvalidSymbolError: If a symbol is outside the alphabet
            LengthMismatchError: If quality data and symbols differ in length
        """
        seq = _to_bytes(seq)
        if qual is not None:
            qual = _to_bytes(qual)
            if len(qual) != len(seq):
                raise LengthMismatchError(len(seq), len(qual))
        if qual_values is not None:
            qual_values = list(qual_values)
            if len(qual_values) != len(seq):
                raise LengthMismatchError(len(seq), len(qual_values))
        if validate:
            alphabet.is_valid(seq)

        self.alphabet = alphabet
        self.seq = seq
        self.qual = qual
        self.qual_values = qual_values

    @classmethod
    def with_quality(cls, alphabet: Alphabet, seq: BytesLike, qual: BytesLike,
                     validate: bool = True) -> "Sequence":
        """Create a sequence carrying quality characters, e.g. from a FASTQ record."""
        return cls(alphabet, seq, qual=qual, validate=validate)

    @classmethod
    def without_validation(cls, alphabet: Alphabet, seq: BytesLike,
                           qual: Optional[BytesLike] = None,
                           qual_values: Optional[Iterable[int]] = None) -> "Sequence":
        """Create a sequence whose symbols are already known to be valid."""
        return cls(alphabet, seq, qual=qual, qual_values=qual_values, validate=False)

    def __len__(self) -> int:
        """Get the length of the sequence."""
        return len(self.seq)

    def __str__(self) -> str:
        return self.seq.decode("ascii", errors="replace")

    def __bytes__(self) -> bytes:
        return self.seq

    def __repr__(self) -> str:
        preview = str(self) if len(self) <= 20 else f"{str(self)[:20]}..."
        return (f"{self.__class__.__name__}('{preview}' length={len(self)} "
                f"alphabet={self.alphabet})")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Sequence):
            return NotImplemented
        return (self.alphabet is other.alphabet and self.seq == other.seq
                and self.qual == other.qual and self.qual_values == other.qual_values)

    @property
    def has_quality(self) -> bool:
        return self.qual is not None or self.qual_values is not None

    def _derive(self, seq: bytes, keep: Optional[np.ndarray] = None,
                reverse: bool = False, bounds: Optional[slice] = None) -> "Sequence":
        # Carry quality data through a positional transform of the symbols
        qual, qual_values = self.qual, self.qual_values
        if bounds is not None:
            qual = qual[bounds] if qual is not None else None
            qual_values = qual_values[bounds] if qual_values is not None else None
        if keep is not None:
            qual = np.frombuffer(qual, dtype=np.uint8)[keep].tobytes() if qual is not None else None
            qual_values = np.asarray(qual_values)[keep].tolist() if qual_values is not None else None
        if reverse:
            qual = qual[::-1] if qual is not None else None
            qual_values = qual_values[::-1] if qual_values is not None else None
        return Sequence.without_validation(self.alphabet, seq, qual, qual_values)

    def subseq(self, start: int, end: int) -> "Sequence":
        """
        Get a subsequence.

        Positions are 1-based and inclusive. `start` below 1 is treated as 1
        and `end` beyond the sequence as its last position. A negative `end`
        counts back from the last base, so `subseq(1, -1)` is the whole
        sequence and `subseq(1, -2)` drops the last base. `end == 0` behaves
        like `-2`, not `-1`: it also excludes the last base.

        Args:
            start: First position (1-based)
            end: Last position (1-based, inclusive)

        Returns:
            A new Sequence, with quality data sliced alike
        """
        length = len(self.seq)
        if start < 1:
            start = 1
        if end > length:
            end = length
        if end < 1:
            end = length - 1 if end == 0 else length + end + 1
        bounds = slice(start - 1, max(end, start - 1))
        return self._derive(self.seq[bounds], bounds=bounds)

    def remove_gaps(self, letters: str) -> "Sequence":
        """
        Remove gap letters.

        Args:
            letters: The gap letters, e.g. "-. "; an empty string removes nothing

        Returns:
            A new Sequence without the gap letters, quality data kept in step
        """
        if not letters:
            return self._derive(self.seq)

        gaps = _to_bytes(letters)
        if not self.has_quality:
            return self._derive(self.seq.translate(None, gaps))

        symbols = np.frombuffer(self.seq, dtype=np.uint8)
        keep = ~np.isin(symbols, np.frombuffer(gaps, dtype=np.uint8))
        return self._derive(symbols[keep].tobytes(), keep=keep)

    def reverse(self) -> "Sequence":
        """Reverse the sequence and its quality data."""
        return self._derive(self.seq[::-1], reverse=True)

    def complement(self) -> "Sequence":
        """
        Get the complement of the sequence.

        Quality data is not carried over. The complement of a sequence with
        the unlimited alphabet is empty; letters without a pair in the
        alphabet are kept as they are.
        """
        if self.alphabet.is_unlimited:
            return Sequence.without_validation(self.alphabet, b"")
        return Sequence.without_validation(
            self.alphabet, self.seq.translate(self.alphabet.complement_table)
        )

    def reverse_complement(self) -> "Sequence":
        """Get the reverse complement of the sequence."""
        return self.complement().reverse()

    def format_seq(self, width: int) -> bytes:
        """
        Wrap the sequence into lines of fixed width.

        Args:
            width: Line width; 0 or less keeps the sequence on a single line

        Returns:
            The wrapped sequence, lines joined by newlines, no trailing newline
        """
        if width <= 0 or len(self.seq) <= width:
            return self.seq
        return b"\n".join(self.seq[i:i + width] for i in range(0, len(self.seq), width))

    def base_content(self, letters: str) -> float:
        """
        Fraction of the sequence made of the given letters, ignoring case.

        Returns:
            A value between 0.0 and 1.0; 0.0 for an empty sequence
        """
        if not self.seq:
            return 0.0
        wanted = "".join(sorted(set(letters.upper() + letters.lower()))).encode("ascii")
        hits = len(self.seq) - len(self.seq.translate(None, wanted))
        return hits / len(self.seq)

    def gc_content(self) -> float:
        """Calculate the GC content of the sequence as a fraction."""
        return self.base_content("gc")

    def degenerate_to_regexp(self) -> str:
        """
        Transform a sequence with degenerate bases into a regular expression.

        Protein sequences use DEGENERATE_BASE_MAP_PROT, all others
        DEGENERATE_BASE_MAP_NUCL. Symbols missing from the map are kept.
        """
        if self.alphabet.kind is AlphabetKind.PROTEIN:
            table = DEGENERATE_BASE_MAP_PROT
        else:
            table = DEGENERATE_BASE_MAP_NUCL
        return "".join(table.get(chr(b), chr(b)) for b in self.seq)

    def to_bytes(self) -> bytes:
        """Get the raw bytes of the sequence."""
        return self.seq

    def to_numpy(self) -> np.ndarray:
        """Get the sequence as a NumPy array of bytes."""
        return np.frombuffer(self.seq, dtype=np.uint8)

    def qual_array(self, offset: int = 33) -> Optional[np.ndarray]:
        """
        Get quality values as a NumPy array.

        `qual_values` is used when present, otherwise the quality characters
        are decoded with the given Phred offset.

        Returns:
            An int array, or None without quality data
        """
        if self.qual_values is not None:
            return np.asarray(self.qual_values, dtype=np.int64)
        if self.qual is not None:
            return np.frombuffer(self.qual, dtype=np.uint8).astype(np.int64) - offset
        return None

    def composition(self) -> pd.Series:
        """
        Count every symbol of the sequence.

        Returns:
            A pandas Series of counts indexed by symbol, sorted by symbol
        """
        values, counts = np.unique(self.to_numpy(), return_counts=True)
        return pd.Series(counts, index=[chr(v) for v in values], name="count", dtype=np.int64)
