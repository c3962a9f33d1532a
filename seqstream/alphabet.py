"""
Alphabet module for sequence domains.

An alphabet is the immutable set of legal symbols of a sequence domain
(nucleic acid, protein or unrestricted) together with the pairing table used
to complement nucleic acid sequences.
"""

from typing import Dict, Tuple
from enum import Enum

from seqstream.exceptions import InvalidSymbolError


class AlphabetKind(Enum):
    """Domain of an alphabet."""
    NUCLEIC = "nucleic"
    PROTEIN = "protein"
    UNLIMITED = "unlimited"


class Alphabet:
    """
    Immutable set of valid symbols for a sequence domain.

    Membership is case-sensitive, so built-in alphabets list both cases.
    Gap letters and ambiguous letters are legal members; for nucleic acid
    alphabets they pair with themselves.
    """

    _REGISTRY: Dict[str, "Alphabet"] = {}

    __slots__ = ("_name", "_kind", "_letters", "_pairs", "_gaps", "_ambiguous",
                 "_valid", "_complement_table")

    def __init__(self, name: str, kind: AlphabetKind, letters: bytes = b"",
                 pairs: bytes = b"", gaps: bytes = b"", ambiguous: bytes = b"") -> None:
        """
        Initialize an alphabet.

        Args:
            name: Alphabet name, e.g. "DNA"
            kind: The sequence domain
            letters: Regular letters of the alphabet
            pairs: Complementary letter of each entry in `letters`
                (nucleic acid alphabets only)
            gaps: Gap letters
            ambiguous: Letters standing for any regular letter

        Raises:
            ValueError: If `pairs` does not line up with `letters`
        """
        if kind is AlphabetKind.NUCLEIC and len(letters) != len(pairs):
            raise ValueError(
                f"{name}: {len(letters)} letters but {len(pairs)} pair letters"
            )
        if kind is not AlphabetKind.NUCLEIC and pairs:
            raise ValueError(f"{name}: only nucleic acid alphabets have pair letters")

        self._name = name
        self._kind = kind
        self._letters = bytes(letters)
        self._pairs = bytes(pairs)
        self._gaps = bytes(gaps)
        self._ambiguous = bytes(ambiguous)
        self._valid = self._letters + self._gaps + self._ambiguous
        # unpaired bytes translate to themselves
        if self._pairs:
            self._complement_table = bytes.maketrans(self._letters, self._pairs)
        else:
            self._complement_table = bytes.maketrans(b"", b"")

    def __repr__(self) -> str:
        return f"Alphabet({self._name!r}, {self._kind.value})"

    def __str__(self) -> str:
        return self._name

    @property
    def name(self) -> str:
        return self._name

    @property
    def kind(self) -> AlphabetKind:
        return self._kind

    @property
    def letters(self) -> bytes:
        return self._letters

    @property
    def gaps(self) -> bytes:
        return self._gaps

    @property
    def ambiguous(self) -> bytes:
        return self._ambiguous

    @property
    def complement_table(self) -> bytes:
        """Translation table for `bytes.translate`; unpaired bytes map to themselves."""
        return self._complement_table

    @property
    def is_unlimited(self) -> bool:
        return self._kind is AlphabetKind.UNLIMITED

    def is_valid_letter(self, letter: int) -> bool:
        """Check whether a single byte belongs to the alphabet."""
        if self.is_unlimited:
            return True
        return letter in self._valid

    def is_valid(self, seq: bytes) -> None:
        """
        Check every symbol of a sequence.

        Args:
            seq: The sequence bytes

        Raises:
            InvalidSymbolError: For the first symbol outside the alphabet
        """
        if self.is_unlimited or not seq.translate(None, self._valid):
            return

        for i, b in enumerate(seq):
            if b not in self._valid:
                raise InvalidSymbolError(i, chr(b), self._name)

    def pair_letter(self, letter: int) -> Tuple[int, bool]:
        """
        Get the complementary letter.

        Returns:
            The pair letter and True, or the letter itself and False when the
            alphabet defines no pair for it
        """
        if self._kind is not AlphabetKind.NUCLEIC:
            return letter, False
        if letter in self._letters or letter in self._gaps or letter in self._ambiguous:
            return self._complement_table[letter], True
        return letter, False

    @classmethod
    def register(cls, alphabet: "Alphabet") -> "Alphabet":
        cls._REGISTRY[alphabet.name.lower()] = alphabet
        return alphabet

    @classmethod
    def by_name(cls, name: str) -> "Alphabet":
        """
        Look up a built-in alphabet by name (case-insensitive).

        Raises:
            KeyError: If no alphabet with that name exists
        """
        try:
            return cls._REGISTRY[name.lower()]
        except KeyError:
            raise KeyError(
                f"unknown alphabet {name!r}, choose from: {', '.join(sorted(cls._REGISTRY))}"
            ) from None


_GAP_LETTERS = b" -"

DNA = Alphabet.register(Alphabet(
    "DNA", AlphabetKind.NUCLEIC,
    b"acgtACGT", b"tgcaTGCA", _GAP_LETTERS, b"nN",
))

DNA_REDUNDANT = Alphabet.register(Alphabet(
    "DNAredundant", AlphabetKind.NUCLEIC,
    b"acgtryswkmbdhvACGTRYSWKMBDHV", b"tgcayrswmkvhdbTGCAYRSWMKVHDB", _GAP_LETTERS, b"nN",
))

RNA = Alphabet.register(Alphabet(
    "RNA", AlphabetKind.NUCLEIC,
    b"acguACGU", b"ugcaUGCA", _GAP_LETTERS, b"nN",
))

RNA_REDUNDANT = Alphabet.register(Alphabet(
    "RNAredundant", AlphabetKind.NUCLEIC,
    b"acguryswkmbdhvACGURYSWKMBDHV", b"ugcayrswmkvhdbUGCAYRSWMKVHDB", _GAP_LETTERS, b"nN",
))

PROTEIN = Alphabet.register(Alphabet(
    "Protein", AlphabetKind.PROTEIN,
    b"abcdefghijklmnpqrstvwyzABCDEFGHIJKLMNPQRSTVWYZ*_", b"", _GAP_LETTERS, b"xX",
))

UNLIMITED = Alphabet.register(Alphabet("Unlimit", AlphabetKind.UNLIMITED))


# Share of core bases a sample needs before it is called nucleic acid
NUCLEIC_CORE_THRESHOLD = 0.75

_DNA_CORE = b"acgtnACGTN"
_RNA_CORE = b"acgunACGUN"


def _core_fraction(symbols: bytes, core: bytes) -> float:
    return (len(symbols) - len(symbols.translate(None, core))) / len(symbols)


def guess_alphabet(sample: bytes) -> Alphabet:
    """
    Guess the alphabet of a sequence sample.

    Gap letters are ignored. A sample is nucleic acid when all of its symbols
    belong to the permissive nucleic alphabet and core bases make up at least
    NUCLEIC_CORE_THRESHOLD of it; DNA is tried before RNA. Otherwise it is
    protein when every symbol is a protein letter, else unlimited.

    Args:
        sample: Sequence bytes, typically the first record of a file

    Returns:
        One of DNA_REDUNDANT, RNA_REDUNDANT, PROTEIN or UNLIMITED
    """
    symbols = bytes(sample).translate(None, _GAP_LETTERS)
    if not symbols:
        return DNA_REDUNDANT

    for alphabet, core in ((DNA_REDUNDANT, _DNA_CORE), (RNA_REDUNDANT, _RNA_CORE)):
        if not symbols.translate(None, alphabet._valid) \
                and _core_fraction(symbols, core) >= NUCLEIC_CORE_THRESHOLD:
            return alphabet

    if not symbols.translate(None, PROTEIN._valid):
        return PROTEIN
    return UNLIMITED
