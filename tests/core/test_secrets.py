"""
Tests for secret region extraction.

Tests cover:
1. Region finding with positional marker pairing
2. Unmatched and misordered markers
3. Redaction of public text
4. Configurable markers
"""

import pytest

from alloyshare.core.secrets import (
    SecretExtractor,
    contains_secret,
    extract_secrets,
    find_secret_regions,
)

START = "//START_SECRET"
END = "//END_SECRET"


@pytest.mark.unit
class TestFindSecretRegions:
    """Region boundaries."""

    def test_no_markers(self):
        assert find_secret_regions("sig A {}") == []
        assert contains_secret("sig A {}") is False

    def test_single_region(self):
        text = f"sig A {{}}\n{START}\nsecret\n{END}\n"

        regions = find_secret_regions(text)

        assert len(regions) == 1
        region = regions[0]
        assert region.start == text.index(START)
        assert region.end == text.index(END)
        assert region.closed is True
        assert region.text_of(text) == f"{START}\nsecret\n"

    def test_unterminated_region_runs_to_end(self):
        """A start marker without end marker extends to end-of-text."""
        text = f"sig A {{}}\n{START}\npred p {{}}"

        regions = find_secret_regions(text)

        assert len(regions) == 1
        assert regions[0].start == text.index(START)
        assert regions[0].end == len(text)
        assert regions[0].closed is False
        assert contains_secret(text) is True

    def test_multiple_regions_in_order(self):
        text = f"{START}\na\n{END}\nb\n{START}\nc\n{END}\n"

        regions = find_secret_regions(text)

        assert [r.text_of(text) for r in regions] == [f"{START}\na\n", f"{START}\nc\n"]

    def test_nested_markers_pair_positionally(self):
        text = f"{START}\n{START}\nx\n{END}\ny\n{END}\n"

        regions = find_secret_regions(text)

        first_end = text.index(END)
        second_end = text.index(END, first_end + 1)
        assert regions[0].start == 0
        assert regions[0].end == first_end
        assert regions[1].start == text.index(START, 1)
        assert regions[1].end == second_end

    def test_end_before_start_extends_to_end(self):
        text = f"{END}\nsig A {{}}\n{START}\nhidden"

        regions = find_secret_regions(text)

        assert len(regions) == 1
        assert regions[0].end == len(text)
        assert regions[0].closed is False

    def test_end_marker_alone_is_not_secret(self):
        assert contains_secret(f"sig A {{}}\n{END}\n") is False
        assert find_secret_regions(f"sig A {{}}\n{END}\n") == []


@pytest.mark.unit
class TestExtractSecrets:
    """Public text redaction."""

    def test_extract_removes_region_and_end_marker(self):
        text = f"sig A {{}}\n{START}\nfact {{}}\n{END}\nrun {{}}"

        split = extract_secrets(text)

        assert split.public_text == "sig A {}\n\nrun {}"
        assert split.secrets == [f"{START}\nfact {{}}\n{END}"]
        assert split.has_secrets

    def test_extract_without_secrets(self):
        split = extract_secrets("sig A {}")

        assert split.public_text == "sig A {}"
        assert split.secrets == []
        assert not split.has_secrets

    def test_extract_unterminated(self):
        split = extract_secrets(f"sig A {{}}\n{START}\nhidden")

        assert split.public_text == "sig A {}\n"
        assert split.secrets == [f"{START}\nhidden"]

    def test_extract_merges_nested_regions(self):
        text = f"a\n{START}\n{START}\nx\n{END}\ny\n{END}\nb"

        split = extract_secrets(text)

        assert split.public_text == "a\n\nb"
        assert len(split.secrets) == 1
        assert "x" not in split.public_text and "y" not in split.public_text


@pytest.mark.unit
class TestSecretExtractorMarkers:
    """Configurable markers."""

    def test_custom_markers(self):
        extractor = SecretExtractor(start_marker="/*HIDE*/", end_marker="/*SHOW*/")
        text = "sig A {}\n/*HIDE*/fact {}/*SHOW*/\n"

        assert extractor.contains_secret(text)
        assert extractor.extract(text).public_text == "sig A {}\n\n"
        assert not extractor.contains_secret(f"{START}\n")

    def test_markers_are_literal(self):
        extractor = SecretExtractor(start_marker="(.*)", end_marker="[end]")

        assert extractor.contains_secret("no parens here") is False
        assert extractor.contains_secret("x (.*) y") is True

    def test_empty_marker_rejected(self):
        with pytest.raises(ValueError):
            SecretExtractor(start_marker="", end_marker=END)
