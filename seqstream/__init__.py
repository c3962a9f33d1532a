"""
seqstream: streaming FASTA reader and alphabet-aware sequences.

This package parses FASTA files in a background thread, delivering records
in ordered chunks, and provides a Sequence model with the usual
transformations (reverse, complement, subsequence, gap removal, composition).
"""

__version__ = "0.1.0"

# Import submodules
from seqstream import alphabet
from seqstream import seq
from seqstream import io

# Core functionality re-exported at the top level
from seqstream.alphabet import (
    Alphabet, AlphabetKind, DNA, DNA_REDUNDANT, RNA, RNA_REDUNDANT, PROTEIN, UNLIMITED,
    guess_alphabet,
)
from seqstream.seq import Sequence
from seqstream.io import FastaRecord, FastaRecordChunk, FastaReader, read_fasta
from seqstream.exceptions import (
    SequenceError, InvalidSymbolError, LengthMismatchError, ConfigurationError,
    ReadCancelledError,
)

__all__ = [
    "alphabet",
    "seq",
    "io",
    "Alphabet",
    "AlphabetKind",
    "DNA",
    "DNA_REDUNDANT",
    "RNA",
    "RNA_REDUNDANT",
    "PROTEIN",
    "UNLIMITED",
    "guess_alphabet",
    "Sequence",
    "FastaRecord",
    "FastaRecordChunk",
    "FastaReader",
    "read_fasta",
    "SequenceError",
    "InvalidSymbolError",
    "LengthMismatchError",
    "ConfigurationError",
    "ReadCancelledError",
]
