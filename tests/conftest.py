from __future__ import annotations

import pytest
from hypothesis import HealthCheck, settings

from data_model.laws import Law, Segment, SegmentType
from repository.memory import InMemoryRepository

settings.register_profile(
    "ci",
    suppress_health_check=[HealthCheck.function_scoped_fixture],
)
settings.load_profile("ci")


@pytest.fixture
def repo() -> InMemoryRepository:
    return InMemoryRepository()


@pytest.fixture
def add_law(repo):
    def _add(title: str = "Zakon o radu", jurisdiction: str = "RS", **fields) -> Law:
        return repo.insert_law(Law(id=None, jurisdiction=jurisdiction, title=title, **fields))
    return _add


@pytest.fixture
def add_article(repo):
    def _add(law_id: int, number: int, text: str = "", segment_type=SegmentType.ARTICLE) -> Segment:
        label = "Uvod" if segment_type is SegmentType.FALLBACK else f"Član {number}"
        return repo.insert_segment(Segment(
            law_id=law_id,
            segment_type=segment_type,
            label=label,
            number=number,
            text=text or f"tekst člana {number}",
            page_hint=1,
        ))
    return _add
