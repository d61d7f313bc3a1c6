import unittest
from types import SimpleNamespace
from unittest.mock import patch

from services import retrieval


def item(title, description="", content="", material_type=None, subject=None):
    return SimpleNamespace(title=title, description=description, content=content,
                           material_type=material_type, subject=subject)


class TestKeywords(unittest.TestCase):
    def test_only_words_longer_than_three(self):
        self.assertEqual(retrieval.extract_keywords("What is the Work done by gravity"),
                         ["what", "work", "done", "gravity"])

    def test_short_query_gives_empty_context(self):
        with patch.object(retrieval, "portal") as portal:
            self.assertEqual(retrieval.build_context("is it on"), "")
            portal.get_all_materials.assert_not_called()


class TestRanking(unittest.TestCase):
    def test_scores_count_matching_keywords(self):
        physics = item("Physics Paper", description="work and power questions")
        self.assertEqual(retrieval.score_item(physics, ["work", "power", "enzyme"]), 2)

    def test_sorted_by_score_with_stable_ties(self):
        a = item("Work notes")
        b = item("Power notes")
        c = item("Work and power")
        d = item("Unrelated")
        ranked = retrieval.rank_items([a, b, c, d], ["work", "power"])
        self.assertEqual([i.title for i in ranked], ["Work and power", "Work notes", "Power notes"])

    def test_keeps_top_five(self):
        items = [item(f"Physics {n}") for n in range(8)]
        ranked = retrieval.rank_items(items, ["physics"])
        self.assertEqual([i.title for i in ranked], [f"Physics {n}" for n in range(5)])


class TestFormatting(unittest.TestCase):
    def test_material_and_blog_blocks(self):
        paper = item("Physics 2019", description="Annual paper", material_type="Past Paper", subject="Physics")
        blog = item("Study habits", content="x" * 300)
        text = retrieval.format_context([paper, blog])
        blocks = text.split("\n\n")
        self.assertEqual(blocks[0], "[RESOURCE: Physics 2019] Type: Past Paper, Subject: Physics. Details: Annual paper...")
        self.assertEqual(blocks[1], "[RESOURCE: Study habits] Type: Insight, Subject: Academic. Details: " + "x" * 150 + "...")

    def test_build_context_uses_catalog(self):
        with patch.object(retrieval, "portal") as portal:
            portal.get_all_materials.return_value = [item("Kinematics notes", material_type="Note", subject="Physics")]
            portal.get_blogs.return_value = [item("Cooking", content="recipes")]
            context = retrieval.build_context("explain kinematics please")
        self.assertIn("[RESOURCE: Kinematics notes]", context)
        self.assertNotIn("Cooking", context)
