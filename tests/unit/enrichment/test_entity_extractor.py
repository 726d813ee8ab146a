"""
Tests for EntityExtractor.

Test Strategy
-------------
- Drive the extractor with FakeTagger so counts are exact
- Cover the frequency floor, ranking, cap and classification table

Organization
------------
- TestExtraction: counting and filtering
- TestRanking: order, tie-breaks and the cap
- TestClassify: the type decision table
"""

from collections import Counter

import pytest

from conceptforge.conceptmap.models import EntityType
from conceptforge.core.config import ConceptMapConfig
from conceptforge.enrichment.entities import EntityExtractor, classify
from conceptforge.enrichment.tagging import TagKind
from tests.fixtures.fakes import FakeTagger


class TestExtraction:
    """Tests for counting and the frequency floor."""

    def test_biology_passage(self, mitochondria_text, mitochondria_tagger):
        """Mitochondria, ATP and cell recur; nucleus and process do not."""
        extractor = EntityExtractor(mitochondria_tagger)

        entities = extractor.extract(mitochondria_text)

        names = [e.name for e in entities]
        assert set(names) == {"Mitochondria", "cell", "ATP"}
        assert "nucleus" not in names
        assert "process" not in names
        assert all(e.frequency == 2 for e in entities)

    def test_biology_passage_types(self, mitochondria_text, mitochondria_tagger):
        """Name tags covering half the hits decide the type."""
        entities = EntityExtractor(mitochondria_tagger).extract(mitochondria_text)
        types = {e.name: e.type for e in entities}

        assert types["Mitochondria"] == EntityType.ORGANIZATION
        assert types["ATP"] == EntityType.ORGANIZATION
        assert types["cell"] == EntityType.CONCEPT

    def test_empty_text_skips_tagger(self):
        """Empty and whitespace text return [] without tagging."""
        tagger = FakeTagger({"cell": [TagKind.NOUN]})
        extractor = EntityExtractor(tagger)

        assert extractor.extract("") == []
        assert extractor.extract("   \n\t ") == []
        assert tagger.calls == []

    def test_short_nouns_ignored(self):
        """Nouns of three characters or fewer are not counted."""
        tagger = FakeTagger({"DNA": [TagKind.NOUN], "gene": [TagKind.NOUN]})

        entities = EntityExtractor(tagger).extract("DNA gene DNA gene DNA")

        assert [e.name for e in entities] == ["gene"]

    def test_short_names_counted(self):
        """Named entities count regardless of length."""
        tagger = FakeTagger({"UN": [TagKind.ORGANIZATION_NAME]})

        entities = EntityExtractor(tagger).extract("The UN met. The UN voted.")

        assert len(entities) == 1
        assert entities[0].name == "UN"
        assert entities[0].frequency == 2

    def test_case_sensitive_counting(self):
        """Surface strings differing in case are counted separately."""
        tagger = FakeTagger({"Cell": [TagKind.NOUN], "cell": [TagKind.NOUN]})

        entities = EntityExtractor(tagger).extract("Cell biology. The cell divides.")

        assert entities == []

    def test_other_tags_ignored(self):
        tagger = FakeTagger({"quickly": [TagKind.OTHER]})

        assert EntityExtractor(tagger).extract("quickly quickly quickly") == []

    def test_first_offset_recorded(self, mitochondria_text, mitochondria_tagger):
        entities = EntityExtractor(mitochondria_tagger).extract(mitochondria_text)
        offsets = {e.name: e.first_offset for e in entities}

        assert offsets["ATP"] == mitochondria_text.index("ATP")
        assert offsets["cell"] == mitochondria_text.index("cell")

    def test_custom_min_frequency(self):
        tagger = FakeTagger({"gene": [TagKind.NOUN]})
        config = ConceptMapConfig(min_frequency=3)

        assert EntityExtractor(tagger, config).extract("gene gene") == []
        assert len(EntityExtractor(tagger, config).extract("gene gene gene")) == 1


class TestRanking:
    """Tests for rank order and the concept cap."""

    def test_descending_frequency(self):
        tagger = FakeTagger({"alpha": [TagKind.NOUN], "beta": [TagKind.NOUN]})

        entities = EntityExtractor(tagger).extract("alpha beta beta alpha beta")

        assert [e.name for e in entities] == ["beta", "alpha"]
        assert [e.frequency for e in entities] == [3, 2]

    def test_ties_broken_by_first_occurrence(self):
        tagger = FakeTagger({"alpha": [TagKind.NOUN], "beta": [TagKind.NOUN]})

        entities = EntityExtractor(tagger).extract("beta alpha beta alpha")

        assert [e.name for e in entities] == ["beta", "alpha"]

    def test_repeated_runs_same_order(self, mitochondria_text, mitochondria_tagger):
        extractor = EntityExtractor(mitochondria_tagger)

        first = extractor.extract(mitochondria_text)
        second = extractor.extract(mitochondria_text)

        assert [e.name for e in first] == [e.name for e in second]

    def test_capped_at_thirty(self):
        words = [f"term{i:02d}" for i in range(45)]
        tagger = FakeTagger({w: [TagKind.NOUN] for w in words})
        text = " ".join(words + words)

        entities = EntityExtractor(tagger).extract(text)

        assert len(entities) == 30
        assert [e.name for e in entities] == words[:30]

    def test_rank_is_uncapped(self):
        words = [f"term{i:02d}" for i in range(45)]
        tagger = FakeTagger({w: [TagKind.NOUN] for w in words})
        text = " ".join(words + words)

        ranked = EntityExtractor(tagger).rank(text)

        assert [e.name for e in ranked] == words

    def test_frequency_floor_holds(self):
        words = [f"word{i}" for i in range(10)]
        tagger = FakeTagger({w: [TagKind.NOUN] for w in words})
        text = " ".join(words[:5] * 3 + words[5:])

        entities = EntityExtractor(tagger).extract(text)

        assert {e.name for e in entities} == set(words[:5])
        assert all(e.frequency >= 2 for e in entities)


class TestClassify:
    """Tests for the classification decision table."""

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("Migration", EntityType.PROCESS),
            ("Photosynthesis", EntityType.PROCESS),
            ("Development", EntityType.PROCESS),
            ("Biology", EntityType.FIELD),
            ("Geography", EntityType.FIELD),
            ("Water", EntityType.CONCEPT),
        ],
    )
    def test_suffix_rules(self, name, expected):
        assert classify(name, 2, Counter()) == expected

    def test_suffix_rules_ignore_case(self):
        assert classify("MIGRATION", 2, Counter()) == EntityType.PROCESS

    @pytest.mark.parametrize(
        "tag,expected",
        [
            (TagKind.PERSON_NAME, EntityType.PERSON),
            (TagKind.PLACE_NAME, EntityType.PLACE),
            (TagKind.ORGANIZATION_NAME, EntityType.ORGANIZATION),
        ],
    )
    def test_name_tag_at_half(self, tag, expected):
        assert classify("Darwin", 4, Counter({tag: 2})) == expected

    def test_tie_goes_to_name_tag(self):
        """One name hit and one noun hit: the name tag beats the suffix rule."""
        tags = Counter({TagKind.ORGANIZATION_NAME: 1})

        assert classify("Foundation", 2, tags) == EntityType.ORGANIZATION

    def test_name_tag_minority_falls_through(self):
        """A name tag on fewer than half the hits defers to suffix rules."""
        tags = Counter({TagKind.ORGANIZATION_NAME: 1})

        assert classify("Foundation", 3, tags) == EntityType.PROCESS
        assert classify("Acme", 3, tags) == EntityType.CONCEPT

    def test_dominant_name_tag_wins(self):
        tags = Counter({TagKind.PERSON_NAME: 3, TagKind.PLACE_NAME: 1})

        assert classify("Washington", 4, tags) == EntityType.PERSON
