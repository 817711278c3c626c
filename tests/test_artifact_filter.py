import pytest

from data_model.laws import Segment, SegmentType
from segmenter.artifact_filter import CLEAN, ArtifactFilter, detect_artifact


def _segment(text: str) -> Segment:
    return Segment(
        law_id=1,
        segment_type=SegmentType.ARTICLE,
        label="Član 1",
        number=1,
        text=text,
        page_hint=1,
    )


@pytest.mark.parametrize("text, reason", [
    ("{\\rtf1\\ansi\\deff0 Tekst", "rtf_header"),
    ("  { \\rtf1 ostatak", "rtf_header"),
    ("Naslov\n{\\fonttbl{\\f0 Arial;}}", "rtf_table:fonttbl"),
    ("x {\\colortbl;\\red0\\green0\\blue0;}", "rtf_table:colortbl"),
    ("\\ansi\\ansicpg1250\\deff0\\nouicompat\\deflang1050\\pard\\sa200 Tekst", "control_word_run"),
    (" ".join(["\\u268?"] * 10) + " ok", "escaped_codepoints"),
    ("&#268;&#353;&#273;&#382;&#263;&#268;&#353;&#273; ab", "escaped_codepoints"),
])
def test_markup_residue_is_detected(text, reason):
    verdict = detect_artifact(text)
    assert verdict.is_artifact
    assert verdict.reason == reason


@pytest.mark.parametrize("text", [
    "",
    None,
    "Poslodavac je dužan da zaposlenom isplati platu.",
    "Putanja C:\\dokumenti\\zakon.pdf se navodi u prilogu.",
    "Znak &#268; se javlja jednom u dugom tekstu člana koji je inače ispravan.",
    "Tekst koji pominje rtf format bez kontrolnih riječi.",
])
def test_ordinary_text_is_clean(text):
    assert detect_artifact(text) == CLEAN


def test_rtf_keyword_late_in_long_article_is_ignored():
    text = "Ispravan tekst. " * 60 + "\\fonttbl"
    assert not detect_artifact(text).is_artifact


def test_filter_tags_a_copy():
    original = _segment("{\\rtf1\\ansi Tekst")
    tagged, verdict = ArtifactFilter().check(original)

    assert verdict.is_artifact
    assert tagged.excluded is True
    assert tagged.exclusion_reason == "rtf_header"
    assert tagged.text == original.text
    assert original.excluded is False


def test_filter_passes_clean_segment_through():
    seg = _segment("Tekst člana.")
    tagged, verdict = ArtifactFilter().check(seg)
    assert tagged is seg
    assert verdict is CLEAN
