import unittest
from types import SimpleNamespace

from services.text import build_repository, filter_materials, filter_repository, highlight_match, slugify


def material(title, subject="Physics", grade="Grade 9", material_type="Past Paper", year=None, description=""):
    return SimpleNamespace(id=1, title=title, subject=subject, grade=grade, material_type=material_type,
                           year=year, description=description)


def blog(title, author="Ms. Khan"):
    return SimpleNamespace(id=1, title=title, author=author)


class TestSlugify(unittest.TestCase):
    def test_strips_punctuation_and_hyphenates(self):
        self.assertEqual(slugify("Top 10 Tips: Ace Your Physics Exam!"), "top-10-tips-ace-your-physics-exam")

    def test_collapses_repeated_hyphens(self):
        self.assertEqual(slugify("Algebra -- the   basics"), "algebra-the-basics")

    def test_trims_edges(self):
        self.assertEqual(slugify("  ...Hello World?  "), "hello-world")

    def test_empty(self):
        self.assertEqual(slugify(""), "")
        self.assertEqual(slugify(None), "")


class TestHighlight(unittest.TestCase):
    def test_wraps_case_insensitive_matches(self):
        self.assertEqual(str(highlight_match("Physics and physics", "PHYSICS")),
                         "<mark>Physics</mark> and <mark>physics</mark>")

    def test_escapes_text_and_regex_characters(self):
        out = str(highlight_match("<b>C++</b> notes", "c++"))
        self.assertEqual(out, "&lt;b&gt;<mark>C++</mark>&lt;/b&gt; notes")

    def test_no_query_returns_escaped_text(self):
        self.assertEqual(str(highlight_match("a < b", "")), "a &lt; b")


class TestGradeFilter(unittest.TestCase):
    def setUp(self):
        self.items = [
            material("Physics Paper 1", subject="Physics", year="2019"),
            material("Biology Notes", subject="Biology", description="cell division"),
            material("Maths Paper 2", subject="Mathematics", year="2021"),
        ]

    def test_subject_filter(self):
        result = filter_materials(self.items, "Biology", "")
        self.assertEqual([m.title for m in result], ["Biology Notes"])

    def test_query_matches_year_and_description(self):
        self.assertEqual([m.title for m in filter_materials(self.items, "All", "2021")], ["Maths Paper 2"])
        self.assertEqual([m.title for m in filter_materials(self.items, "All", "CELL")], ["Biology Notes"])

    def test_all_and_empty_query_keeps_everything(self):
        self.assertEqual(len(filter_materials(self.items, "All", "")), 3)


class TestRepositoryFilter(unittest.TestCase):
    def setUp(self):
        materials = [
            material("Physics 2019", grade="Grade 9", material_type="Past Paper", year="2019"),
            material("Physics Notes", grade="Grade 9", material_type="Note"),
            material("Physics 2020", grade="Grade 10", material_type="Past Paper", year="2020"),
            material("Chemistry 2019", subject="Chemistry", grade="Grade 9", material_type="Past Paper",
                     year="2019"),
        ]
        blogs = [blog("Physics study habits"), blog("Exam season", author="Mr. Physics")]
        self.rows = build_repository(materials, blogs)

    def test_combined_predicates(self):
        result = filter_repository(self.rows, "physics", "Past Paper", "Grade 9")
        self.assertEqual([r["title"] for r in result], ["Physics 2019"])

    def test_every_result_satisfies_all_filters(self):
        result = filter_repository(self.rows, "2019", "Past Paper", "Grade 9")
        self.assertEqual({r["title"] for r in result}, {"Physics 2019", "Chemistry 2019"})
        for row in result:
            self.assertEqual(row["type"], "Past Paper")
            self.assertEqual(row["grade"], "Grade 9")

    def test_blog_type_filter_matches_author(self):
        result = filter_repository(self.rows, "physics", "Blog")
        self.assertEqual([r["title"] for r in result], ["Physics study habits", "Exam season"])

    def test_blogs_have_no_grade(self):
        self.assertEqual(filter_repository(self.rows, "", "Blog", "Grade 9"), [])
        self.assertEqual(len(filter_repository(self.rows, "", "Blog", "All", "Scholarly")), 2)
