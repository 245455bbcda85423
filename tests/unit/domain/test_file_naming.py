"""
Unit tests for the key pair and stored filename value objects.
"""

import string

import pytest
from hypothesis import given
from hypothesis import strategies as st

from keydrop.domain.file_storage import (
    KEY_LENGTH,
    KeyPair,
    StoredFileName,
    generate_key_pair,
    matches_private_key,
    matches_public_key,
)
from keydrop.domain.file_storage.value_objects import is_valid_key, redact, split_original_name

PUB = "3f9a1c0b7d2e4a68"
PRIV = "b41e09c27f6d3a85"

hex_keys = st.text(alphabet="0123456789abcdef", min_size=KEY_LENGTH, max_size=KEY_LENGTH)
extensions = st.text(alphabet=st.characters(exclude_characters="."), max_size=10)


class TestKeyGeneration:
    """Test generate_key_pair and KeyPair validation."""

    def test_keys_are_sixteen_lowercase_hex_chars(self):
        key_pair = generate_key_pair()

        for key in (key_pair.public_key, key_pair.private_key):
            assert len(key) == 16
            assert set(key) <= set(string.hexdigits.lower())

    def test_public_and_private_keys_are_independent(self):
        pairs = [generate_key_pair() for _ in range(50)]

        assert all(p.public_key != p.private_key for p in pairs)
        assert len({p.public_key for p in pairs}) == 50

    @pytest.mark.parametrize("bad_key", ["", "abc", "3F9A1C0B7D2E4A68", "3f9a1c0b7d2e4a6_", "3f9a1c0b7d2e4a6800"])
    def test_key_pair_rejects_malformed_keys(self, bad_key):
        with pytest.raises(ValueError):
            KeyPair(public_key=bad_key, private_key=PRIV)

    def test_is_valid_key(self):
        assert is_valid_key(PUB)
        assert not is_valid_key(None)
        assert not is_valid_key("xyz")


class TestStoredFileNameEncoding:
    """Test the <public>_<private>_<base>.<ext> codec."""

    def test_encode_joins_keys_and_name(self):
        assert StoredFileName.encode(PUB, PRIV, "report.pdf") == f"{PUB}_{PRIV}_report.pdf"

    def test_encode_splits_on_last_dot(self):
        name = StoredFileName.encode(PUB, PRIV, "archive.tar.gz")
        parts = StoredFileName.decode(name)

        assert parts.base_name == "archive.tar"
        assert parts.extension == "gz"

    def test_extensionless_name_keeps_trailing_dot(self):
        name = StoredFileName.encode(PUB, PRIV, "README")

        assert name == f"{PUB}_{PRIV}_README."
        parts = StoredFileName.decode(name)
        assert parts.extension == ""
        assert parts.original_name == "README"

    def test_base_name_with_underscores_decodes(self):
        parts = StoredFileName.decode(f"{PUB}_{PRIV}_my_holiday_photo.jpg")

        assert parts.public_key == PUB
        assert parts.private_key == PRIV
        assert parts.base_name == "my_holiday_photo"
        assert parts.original_name == "my_holiday_photo.jpg"

    def test_physical_name_round_trips(self):
        name = f"{PUB}_{PRIV}_notes.md"

        assert StoredFileName.decode(name).physical_name == name

    @pytest.mark.parametrize("name", [
        "aaa_bbb_x.txt",
        f"{PUB}-{PRIV}-x.txt",
        f"{PUB}_{PRIV}_no-extension",
        f"{PUB}_{PRIV}",
        "",
    ])
    def test_decode_rejects_foreign_names(self, name):
        with pytest.raises(ValueError):
            StoredFileName.decode(name)

    @given(public_key=hex_keys, private_key=hex_keys, base_name=st.text(max_size=40), extension=extensions)
    def test_decode_recovers_encoded_parts(self, public_key, private_key, base_name, extension):
        original_name = f"{base_name}.{extension}"
        parts = StoredFileName.decode(StoredFileName.encode(public_key, private_key, original_name))

        assert parts.public_key == public_key
        assert parts.private_key == private_key
        assert parts.base_name == base_name
        assert parts.extension == extension

    def test_split_original_name(self):
        assert split_original_name("a.b.c") == ("a.b", "c")
        assert split_original_name("plain") == ("plain", "")
        assert split_original_name(".env") == ("", "env")


class TestKeyMatching:
    """Test the prefix and infix matching rules used for lookup."""

    def test_public_key_matches_prefix_only(self):
        name = f"{PUB}_{PRIV}_x.txt"

        assert matches_public_key(name, PUB)
        assert not matches_public_key(name, PRIV)

    def test_private_key_matches_between_separators(self):
        name = f"{PUB}_{PRIV}_x.txt"

        assert matches_private_key(name, PRIV)
        assert not matches_private_key(name, PUB)

    def test_short_keys_match_by_shape(self):
        assert matches_public_key("aaa_bbb_x.txt", "aaa")
        assert matches_private_key("aaa_bbb_x.txt", "bbb")
        assert not matches_public_key("aaa_bbb_x.txt", "aa")

    def test_redact_keeps_eight_characters(self):
        assert redact(PUB) == "3f9a1c0b..."
