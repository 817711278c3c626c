import json

from data_model.laws import GroupStatus, Law
from dedup.resolver import DedupResolver, ScoringWeights, grouping_key, pick_canonical, score
from repository.base import LawFilter
from segmenter.ingest import segment_and_store


def _snapshot(repo):
    laws = repo.list_laws()
    return laws, {l.id: repo.get_segments(l.id) for l in laws}


def _three_copies(add_law, add_article):
    """Same act imported three times: Latin, upper-case and Cyrillic title."""
    a = add_law("Zakon o radu", gazette_number="12/05")
    b = add_law("ZAKON O RADU", gazette_key="12_05", slug="zakon-o-radu",
                document_path="pdf/rs/zakon_o_radu.pdf")
    c = add_law("Закон о раду", gazette_number="12/2005",
                document_path="PDF\\RS\\Zakon_o_radu.pdf")
    add_article(a.id, 1)
    add_article(a.id, 2)
    add_article(b.id, 1)
    add_article(c.id, 2)
    add_article(c.id, 3)
    return a, b, c


def test_three_imports_form_one_group(repo, add_law, add_article):
    a, b, c = _three_copies(add_law, add_article)

    report = DedupResolver(repo).run()

    (group,) = report.groups
    assert group.status is GroupStatus.EXACT
    assert group.member_ids == [a.id, b.id, c.id]
    assert group.canonical_id == b.id            # ties with c on score, lower id wins
    assert group.delete_ids == [a.id, c.id]
    assert group.gazette_key == "12_05"
    assert group.title_key == "radu"
    assert report.applied is False


def test_dry_run_is_read_only(repo, add_law, add_article):
    _three_copies(add_law, add_article)
    before = _snapshot(repo)
    DedupResolver(repo).run(confirm=False)
    assert _snapshot(repo) == before


def test_merge_keeps_canonical_with_union_of_segments(repo, add_law, add_article):
    a, b, c = _three_copies(add_law, add_article)

    report = DedupResolver(repo).run(confirm=True)

    assert report.applied is True
    assert [l.id for l in repo.list_laws()] == [b.id]
    assert sorted(s.number for s in repo.get_segments(b.id)) == [1, 2, 3]
    assert report.stats.laws_deleted == 2
    assert report.stats.reassigned == 2
    assert report.stats.collisions == 2


def test_merge_is_idempotent(repo, add_law, add_article):
    _three_copies(add_law, add_article)
    resolver = DedupResolver(repo)
    resolver.run(confirm=True)
    after_first = _snapshot(repo)

    second = resolver.run(confirm=True)

    assert second.groups == []
    assert second.stats.laws_deleted == 0
    assert _snapshot(repo) == after_first


def test_stale_group_merge_is_a_no_op(repo, add_law, add_article):
    _three_copies(add_law, add_article)
    resolver = DedupResolver(repo)
    (group,) = resolver.run().groups
    resolver.merge_group(group)

    stats = resolver.merge_group(group)
    assert stats.laws_deleted == 0


def test_amending_act_is_not_merged_with_base_act(repo, add_law):
    add_law("Zakon o radu", gazette_number="12/05")
    add_law("Zakon o izmjenama i dopunama Zakona o radu", gazette_number="33/08")
    add_law("Zakon o izmjenama Zakona o radu")          # no gazette: ungroupable

    report = DedupResolver(repo).run(confirm=True)

    assert report.groups == []
    assert report.ungroupable == [3]
    assert len(repo.list_laws()) == 3


def test_different_jurisdictions_are_not_merged(repo, add_law):
    add_law("Zakon o radu", jurisdiction="RS", gazette_number="12/05")
    add_law("Zakon o radu", jurisdiction="FBIH", gazette_number="12/05")
    assert DedupResolver(repo).run().groups == []


def test_distinct_documents_are_not_merged(repo, add_law):
    add_law("Zakon o radu", gazette_number="12/05", document_path="a.pdf")
    add_law("Zakon o radu", gazette_number="12/05", document_path="b.pdf")
    assert DedupResolver(repo).run().groups == []


def test_conflicting_fingerprints_are_reported_not_merged(repo, add_law):
    add_law("Zakon o radu", gazette_number="12/05", document_path="a.pdf")
    add_law("Zakon o radu", gazette_number="12/05", document_path="b.pdf")
    add_law("Zakon o radu", gazette_number="12/05")

    report = DedupResolver(repo).run(confirm=True)

    (group,) = report.groups
    assert group.status is GroupStatus.AMBIGUOUS
    assert group.canonical_id is None
    assert group.delete_ids == []
    assert group.member_ids == [1, 2, 3]
    assert group.conflicting_fingerprints == ["a.pdf", "b.pdf"]
    assert report.ambiguous == [group]
    assert len(repo.list_laws()) == 3


def test_exact_class_inside_ambiguous_bucket_is_still_merged(repo, add_law):
    add_law("Zakon o radu", gazette_number="12/05", document_path="a.pdf")
    add_law("Zakon o radu", gazette_number="12/05", document_path="A.PDF")
    add_law("Zakon o radu", gazette_number="12/05", document_path="b.pdf")
    add_law("Zakon o radu", gazette_number="12/05")

    report = DedupResolver(repo).run(confirm=True)

    statuses = sorted(str(g.status) for g in report.groups)
    assert statuses == ["ambiguous", "exact"]
    assert [l.id for l in repo.list_laws()] == [1, 3, 4]


def test_laws_without_fingerprint_form_loose_group(repo, add_law, add_article):
    a = add_law("Zakon o radu", gazette_number="12/05")
    b = add_law("Zakon o radu", gazette_number="12/05", slug="radu")
    add_article(a.id, 4)

    report = DedupResolver(repo).run(confirm=True)

    (group,) = report.groups
    assert group.status is GroupStatus.LOOSE
    assert group.canonical_id == b.id
    assert [l.id for l in repo.list_laws()] == [b.id]
    assert [s.number for s in repo.get_segments(b.id)] == [4]


def test_document_path_is_copied_to_canonical(repo, add_law):
    keep = add_law("Zakon o radu", gazette_number="12/05", slug="radu")
    add_law("Zakon o radu", gazette_key="12_05", document_path="PDF/Radu.pdf")

    report = DedupResolver(repo).run(confirm=True)

    assert report.stats.paths_copied == 1
    stored = repo.get_law(keep.id)
    assert stored.document_path == "PDF/Radu.pdf"
    assert stored.document_fingerprint == "pdf/radu.pdf"


def test_jurisdiction_filter(repo, add_law):
    add_law("Zakon o radu", jurisdiction="RS", gazette_number="12/05")
    add_law("Zakon o radu", jurisdiction="RS", gazette_number="12/05")
    add_law("Zakon o radu", jurisdiction="SRB", gazette_number="24/05")
    add_law("Закон о раду", jurisdiction="SRB", gazette_number="24/05")

    report = DedupResolver(repo).run("SRB")

    (group,) = report.groups
    assert group.jurisdiction == "SRB"
    assert group.member_ids == [3, 4]


def test_report_serializes(repo, add_law, add_article):
    _three_copies(add_law, add_article)
    data = DedupResolver(repo).run().to_dict()

    json.dumps(data)
    (group,) = data["groups"]
    assert group["proposed_keep"] == 2
    assert group["proposed_delete"] == [1, 3]
    assert group["root_title"] == "radu"
    assert group["status"] == "exact"
    assert "conflicting_fingerprints" not in group


# ---------------------------------------------------------------------------
# Scoring
# ---------------------------------------------------------------------------

def _law(law_id, **fields):
    return Law(id=law_id, jurisdiction="RS", title="Zakon o radu", **fields)


def test_score_weights():
    assert score(_law(1)) == 0
    assert score(_law(1, slug="radu", gazette_number="12/05", document_path="x.pdf")) == 5
    assert score(_law(1, slug="  ")) == 0
    custom = ScoringWeights(slug=0, gazette_number=0, document_path=10)
    assert score(_law(1, document_path="x.pdf"), custom) == 10


def test_pick_canonical_prefers_score_then_lowest_id():
    members = [_law(5, slug="radu"), _law(3), _law(4, slug="radu")]
    assert pick_canonical(members).id == 4
    assert pick_canonical([_law(9), _law(2)]).id == 2


def test_grouping_key():
    bucket, fp = grouping_key(_law(1, gazette_number="12/2005", source_url="HTTP://x.ba/a.pdf"))
    assert bucket == ("RS", "radu", "12_05")
    assert fp == "http://x.ba/a.pdf"
    assert grouping_key(_law(1))[0] is None


def test_member_differing_only_in_fingerprint_stays_out(repo, add_law):
    add_law("Zakon o radu", gazette_number="12/05", document_path="pdf/radu.pdf")
    add_law("Zakon o radu", gazette_number="12/05", document_path="PDF\\RADU.pdf")
    add_law("Zakon o radu", gazette_number="12/05", document_path="pdf/radu_v2.pdf")

    (group,) = DedupResolver(repo).run().groups

    assert group.status is GroupStatus.EXACT
    assert group.member_ids == [1, 2]


def test_amending_cyrillic_title_end_to_end(repo, add_law):
    base = add_law("Zakon o radu", gazette_number="12/05")
    amending = add_law("ЗАКОН О ИЗМЈЕНАМА И ДОПУНАМА ЗАКОНА О РАДУ", gazette_number="40/06")
    segment_and_store(repo, base, [(1, "Član 1.\nTekst")])
    segment_and_store(repo, amending, [(1, "Члан 1.\nТекст")])

    stored = repo.list_laws()
    assert {l.root_title for l in stored} == {"radu"}
    assert {l.gazette_key for l in stored} == {"12_05", "40_06"}

    report = DedupResolver(repo).run(confirm=True)
    assert report.groups == []
    assert len(repo.list_laws()) == 2


def test_merge_rereads_members_under_row_lock(repo, add_law, add_article, monkeypatch):
    _three_copies(add_law, add_article)
    resolver = DedupResolver(repo)
    (group,) = resolver.run().groups

    filters = []
    original = repo.list_laws

    def recording(filter=None):
        filters.append(filter)
        return original(filter)

    monkeypatch.setattr(repo, "list_laws", recording)
    resolver.merge_group(group)

    assert filters == [LawFilter(ids=(1, 2, 3), for_update=True)]


def test_jurisdiction_case_does_not_split_groups(repo, add_law):
    add_law("Zakon o radu", jurisdiction="RS", gazette_number="12/05")
    add_law("Zakon o radu", jurisdiction="rs ", gazette_number="12/05")

    (group,) = DedupResolver(repo).run().groups

    assert group.jurisdiction == "RS"
    assert group.member_ids == [1, 2]
