from hypothesis import given, strategies as st

from data_model.laws import SegmentType
from segmenter.parser import FALLBACK_EXCERPT_CHARS, Segmenter, segment_pages
from segmenter.script_profiles import PROFILES
from segmenter.text_cleaner import clean_page_text, repair_mojibake

RTF_BODY = "{\\rtf1\\ansi\\ansicpg1250\\deff0{\\fonttbl{\\f0 Times New Roman;}}\\pard Tekst"


# ---------------------------------------------------------------------------
# Segmentation
# ---------------------------------------------------------------------------

def test_segments_carry_page_of_their_heading():
    pages = [
        (1, "ZAKON O RADU\nČlan 1.\nPrvi tekst"),
        (2, "nastavak prvog\nČlan 2.\nDrugi tekst"),
        (3, "Član 3. Treći tekst"),
    ]
    result = segment_pages(pages, "RS", law_id=7)

    assert [s.number for s in result.segments] == [1, 2, 3]
    assert [s.page_hint for s in result.segments] == [1, 2, 3]
    assert [s.label for s in result.segments] == ["Član 1", "Član 2", "Član 3"]
    assert all(s.law_id == 7 and s.segment_type is SegmentType.ARTICLE for s in result.segments)
    assert result.segments[0].text == "Prvi tekst\n\nnastavak prvog"
    assert result.segments[2].text == "Treći tekst"
    assert not result.is_fallback


def test_text_before_first_heading_is_not_a_segment():
    result = segment_pages([(1, "Preambula\nČlan 1.\nTekst")])
    assert len(result.segments) == 1
    assert "Preambula" not in result.segments[0].text


def test_document_without_headings_gets_one_fallback():
    result = Segmenter().segment([(3, "x" * 5000), (4, "kraj")], law_id=1)

    assert result.is_fallback
    (seg,) = result.segments
    assert seg.segment_type is SegmentType.FALLBACK
    assert seg.number == 0
    assert seg.label == "Uvod"
    assert seg.page_hint == 3
    assert len(seg.text) == FALLBACK_EXCERPT_CHARS


def test_fallback_label_follows_profile():
    result = Segmenter(PROFILES["SRB"]).segment([(1, "Текст без чланова")])
    assert result.segments[0].label == "Увод"


def test_empty_or_non_text_pages_still_produce_fallback():
    for pages in ([], [(1, None)], [{"page": 1, "text": 12}], None):
        result = segment_pages(pages)
        assert len(result.segments) == 1
        assert result.segments[0].segment_type is SegmentType.FALLBACK
        assert result.segments[0].text == ""
        assert result.segments[0].page_hint == 1


def test_mapping_pages_and_missing_page_numbers():
    pages = [
        {"page": 5, "text": "Član 1.\nA"},
        {"text": "Član 2.\nB"},
    ]
    result = segment_pages(pages)
    assert [s.page_hint for s in result.segments] == [5, 6]


def test_repeated_ordinals_stay_separate():
    result = segment_pages([(1, "Član 1.\nprvi\nČlan 1.\nponovljeni")])
    assert [s.number for s in result.segments] == [1, 1]
    assert [s.text for s in result.segments] == ["prvi", "ponovljeni"]


def test_cross_reference_does_not_split_article():
    pages = [(1, "Član 1.\nPrava iz čl. 5. ovog zakona ostvaruju se pred sudom.\n"
                 "Član 2.\nDrugi tekst\nČlan 5.\nPravi tekst člana pet")]
    result = segment_pages(pages, "RS")
    assert [(s.number, s.text) for s in result.segments] == [
        (1, "Prava iz čl. 5. ovog zakona ostvaruju se pred sudom."),
        (2, "Drugi tekst"),
        (5, "Pravi tekst člana pet"),
    ]


def test_cyrillic_labels_for_serbian_profile():
    result = segment_pages([(1, "Члан 1.\nТекст\nЧлан 2.\nДруги")], "SRB")
    assert [s.label for s in result.segments] == ["Члан 1", "Члан 2"]


def test_markup_residue_is_excluded_and_reported():
    pages = [(1, f"Član 1.\n{RTF_BODY}\nČlan 2.\nIspravan tekst")]
    result = segment_pages(pages, law_id=9)

    first, second = result.segments
    assert first.excluded and first.exclusion_reason == "rtf_header"
    assert not second.excluded
    assert result.indexable == [second]
    assert len(result.reprocess) == 1
    assert result.reprocess[0].law_id == 9
    assert "rtf_header" in result.reprocess[0].reason


def test_clean_document_has_no_reprocess_event():
    assert segment_pages([(1, "Član 1.\nTekst")]).reprocess == []


def test_mojibake_heading_is_repaired_before_scanning():
    broken = "Član 1.\nTekst".encode("utf-8").decode("cp1252")
    result = segment_pages([(1, broken)])
    assert [s.number for s in result.segments] == [1]


@given(st.lists(st.text(max_size=200), max_size=5))
def test_any_input_yields_segments(texts):
    result = segment_pages(list(enumerate(texts, start=1)))
    assert result.segments
    pages = {n for n, _ in enumerate(texts, start=1)} or {1}
    assert all(s.page_hint in pages for s in result.segments)


# ---------------------------------------------------------------------------
# Page cleanup
# ---------------------------------------------------------------------------

def test_clean_page_text():
    raw = "\ufeffČ lan 5.\r\nTekst\u00a0sa\u200b razmakom\n\n\n\nkraj  "
    assert clean_page_text(raw) == "Član 5.\nTekst sa razmakom\n\nkraj"


def test_clean_page_text_non_text():
    assert clean_page_text(None) == ""
    assert clean_page_text(b"Clan 1") == ""


def test_repair_mojibake_leaves_clean_text_alone():
    assert repair_mojibake("Član i članak") == "Član i članak"
    assert repair_mojibake("ÄŒlan") == "Član"
