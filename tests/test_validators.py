"""Tests for the built-in validators.

Only their (value, params) -> bool contract is exercised here; message
text is covered by the engine and message tests.
"""

import asyncio

import pytest
from PIL import Image

from ruleforge.validators import builtin, files
from ruleforge.validators.files import UploadedFile, pillow_probe, set_image_probe


class TestPresenceAndSize:
    @pytest.mark.parametrize(
        "value, expected",
        [
            (None, False),
            ("", False),
            ("   ", False),
            ([], False),
            ({}, False),
            ("x", True),
            (0, True),
            (False, True),
            ([1], True),
        ],
    )
    def test_required(self, value, expected):
        assert builtin.required(value, []) is expected

    def test_min_and_max_count_characters(self):
        assert builtin.min_length("abc", ["3"])
        assert not builtin.min_length("ab", ["3"])
        assert not builtin.min_length(None, ["1"])
        assert builtin.max_length("abc", ["3"])
        assert not builtin.max_length("abcd", ["3"])
        assert builtin.max_length(None, ["3"])
        assert builtin.min_length([1, 2], ["2"])

    def test_between(self):
        assert builtin.between("5", ["1", "10"])
        assert builtin.between(10, ["1", "10"])
        assert not builtin.between(11, ["1", "10"])
        assert not builtin.between("abc", ["1", "10"])

    def test_digits(self):
        assert builtin.digits("1234", ["4"])
        assert not builtin.digits("123", ["4"])
        assert not builtin.digits("12a4", ["4"])


class TestMembership:
    def test_in_compares_as_strings(self):
        assert builtin.in_list(1, ["1", "2", "3", "5"])
        assert not builtin.in_list(4, ["1", "2", "3", "5"])
        assert builtin.in_list("draft", ["draft", "published"])

    def test_not_in(self):
        assert builtin.not_in_list("x", ["a", "b"])
        assert not builtin.not_in_list("a", ["a", "b"])


class TestFormats:
    def test_alpha(self):
        assert builtin.alpha("John Snow", [])
        assert builtin.alpha("Jöhn", [])
        assert not builtin.alpha("0123", [])

    def test_alpha_num_and_dash(self):
        assert builtin.alpha_num("abc123", [])
        assert not builtin.alpha_num("abc-123", [])
        assert builtin.alpha_dash("abc-123_x", [])
        assert not builtin.alpha_dash("abc 123", [])

    def test_numeric(self):
        assert builtin.numeric("0123", [])
        assert builtin.numeric(42, [])
        assert not builtin.numeric("-1", [])
        assert not builtin.numeric("1.5", [])

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("foo@bar.com", True),
            ("first.last+tag@example.co.uk", True),
            ("foo@bar.c", False),
            ("foo", False),
            (None, False),
        ],
    )
    def test_email(self, value, expected):
        assert builtin.email(value, []) is expected

    def test_url(self):
        assert builtin.url("https://example.com/path", [])
        assert not builtin.url("example.com", [])

    def test_ip(self):
        assert builtin.ip("192.168.0.1", [])
        assert builtin.ip("::1", [])
        assert not builtin.ip("300.1.1.1", [])

    def test_regex_rejoins_commas(self):
        assert builtin.regex("aaa", ["^a{2", "3}$"])
        assert not builtin.regex("a", ["^a{2", "3}$"])


# =============================================================================
# File validators
# =============================================================================


def make_file(name="photo.jpg", mime_type="image/jpeg", size=1024, **kwargs):
    return UploadedFile(name=name, mime_type=mime_type, size=size, **kwargs)


class TestFileValidators:
    def test_size_in_kilobytes(self):
        assert files.size([make_file(size=10 * 1024)], ["10"])
        assert not files.size([make_file(size=10 * 1024 + 1)], ["10"])

    def test_mimes_with_wildcards(self):
        assert files.mimes([make_file()], ["image/*"])
        assert files.mimes([make_file(mime_type="application/pdf")], ["image/*", "application/pdf"])
        assert not files.mimes([make_file(mime_type="text/plain")], ["image/*"])

    def test_ext(self):
        assert files.ext(make_file("a.PNG"), ["png", "jpg"])
        assert not files.ext(make_file("a.gif"), ["png", "jpg"])

    def test_image(self):
        assert files.image([make_file("a.jpeg"), make_file("b.svg")], [])
        assert not files.image([make_file("a.pdf")], [])

    def test_non_file_values_are_ignored(self):
        assert files.as_files(None) == []
        assert files.as_files("photo.jpg") == []
        assert len(files.as_files(make_file())) == 1


class TestImageProbe:
    @pytest.mark.asyncio
    async def test_pillow_probe_reads_path(self, tmp_path):
        path = tmp_path / "pixel.png"
        Image.new("RGB", (3, 2)).save(path)

        assert await pillow_probe(make_file("pixel.png", "image/png", path=path)) == (3, 2)

    @pytest.mark.asyncio
    async def test_pillow_probe_reads_content(self, tmp_path):
        path = tmp_path / "pixel.png"
        Image.new("RGB", (5, 4)).save(path)

        file = make_file("pixel.png", "image/png", content=path.read_bytes())
        assert await pillow_probe(file) == (5, 4)

    @pytest.mark.asyncio
    async def test_pillow_probe_needs_a_source(self):
        with pytest.raises(ValueError):
            await pillow_probe(make_file())

    @pytest.mark.asyncio
    async def test_dimensions_probes_every_file(self):
        probed = []

        async def probe(file):
            probed.append(file.name)
            await asyncio.sleep(0)
            return (150, 100)

        previous = set_image_probe(probe)
        try:
            result = await files.dimensions([make_file("a.jpg"), make_file("b.png")], ["150", "100"])
        finally:
            set_image_probe(previous)

        assert result is True
        assert probed == ["a.jpg", "b.png"]
