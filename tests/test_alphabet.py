"""
Tests for the alphabet module.
"""

import pytest

from seqstream.alphabet import (
    Alphabet, AlphabetKind, DNA, DNA_REDUNDANT, RNA, RNA_REDUNDANT, PROTEIN, UNLIMITED,
    guess_alphabet,
)
from seqstream.exceptions import InvalidSymbolError


class TestAlphabet:
    """Tests for membership and pairing."""

    def test_valid_sequences(self):
        """Test that letters, gaps and ambiguous letters are accepted."""
        DNA.is_valid(b"ACGTacgtNn- ")
        RNA.is_valid(b"ACGUacgu")
        PROTEIN.is_valid(b"MKVLAAGIXx*")
        DNA.is_valid(b"")

    def test_invalid_symbol(self):
        """Test that the first invalid symbol is reported."""
        with pytest.raises(InvalidSymbolError) as exc_info:
            DNA.is_valid(b"ACGUACGX")
        assert exc_info.value.position == 3
        assert exc_info.value.symbol == "U"
        assert exc_info.value.alphabet == "DNA"

    def test_membership_is_case_sensitive_per_letter(self):
        """Test single letter checks."""
        assert DNA.is_valid_letter(ord("a"))
        assert DNA.is_valid_letter(ord("A"))
        assert not DNA.is_valid_letter(ord("R"))
        assert DNA_REDUNDANT.is_valid_letter(ord("R"))

    def test_unlimited_accepts_everything(self):
        """Test that the unlimited alphabet has no restriction."""
        UNLIMITED.is_valid(b"\x00@!ACGT123")
        assert UNLIMITED.is_valid_letter(0)
        assert UNLIMITED.kind is AlphabetKind.UNLIMITED

    def test_pair_letter(self):
        """Test complement lookup."""
        assert DNA.pair_letter(ord("A")) == (ord("T"), True)
        assert DNA.pair_letter(ord("g")) == (ord("c"), True)
        assert RNA.pair_letter(ord("A")) == (ord("U"), True)
        assert DNA_REDUNDANT.pair_letter(ord("R")) == (ord("Y"), True)

        # Gaps and ambiguous letters pair with themselves
        assert DNA.pair_letter(ord("N")) == (ord("N"), True)
        assert DNA.pair_letter(ord("-")) == (ord("-"), True)

        # No pair defined
        assert DNA.pair_letter(ord("X")) == (ord("X"), False)
        assert PROTEIN.pair_letter(ord("A")) == (ord("A"), False)
        assert UNLIMITED.pair_letter(ord("A")) == (ord("A"), False)

    def test_pairing_is_an_involution(self):
        """Test that pairing a pair gives the letter back."""
        for alphabet in (DNA, DNA_REDUNDANT, RNA, RNA_REDUNDANT):
            for letter in alphabet.letters:
                pair, found = alphabet.pair_letter(letter)
                assert found
                assert alphabet.pair_letter(pair) == (letter, True)

    def test_by_name(self):
        """Test looking up built-in alphabets."""
        assert Alphabet.by_name("dna") is DNA
        assert Alphabet.by_name("Protein") is PROTEIN
        with pytest.raises(KeyError):
            Alphabet.by_name("klingon")

    def test_unbalanced_pairs(self):
        """Test that pair letters must line up with letters."""
        with pytest.raises(ValueError):
            Alphabet("broken", AlphabetKind.NUCLEIC, b"acgt", b"tgc")
        with pytest.raises(ValueError):
            Alphabet("broken", AlphabetKind.PROTEIN, b"ac", b"ca")


class TestGuessAlphabet:
    """Tests for alphabet guessing."""

    def test_guess_dna(self):
        """Test guessing DNA, with or without degenerate bases."""
        assert guess_alphabet(b"ACGTACGTNNacgt") is DNA_REDUNDANT
        assert guess_alphabet(b"ACGTRYACGTAC--") is DNA_REDUNDANT

    def test_guess_rna(self):
        """Test guessing RNA."""
        assert guess_alphabet(b"ACGUACGUacgu") is RNA_REDUNDANT

    def test_guess_protein(self):
        """Test guessing protein."""
        assert guess_alphabet(b"MKVLAAGIVGLLLAQE") is PROTEIN

        # Only degenerate nucleotide letters, too few core bases for DNA
        assert guess_alphabet(b"KMRSWYKMRSWY") is PROTEIN

    def test_guess_unlimited(self):
        """Test that unknown symbols give the unlimited alphabet."""
        assert guess_alphabet(b"ACGT1234") is UNLIMITED

    def test_guess_empty(self):
        """Test that an empty sample is taken for DNA."""
        assert guess_alphabet(b"") is DNA_REDUNDANT
        assert guess_alphabet(b"--") is DNA_REDUNDANT

    def test_guess_is_deterministic(self):
        """Test that the same sample always gives the same alphabet."""
        sample = b"MSTNPKPQRKTKRNTNRRPQDVKFPGG"
        assert guess_alphabet(sample) is guess_alphabet(sample)
