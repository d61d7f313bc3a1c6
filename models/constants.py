# Fixed vocabularies shared by models, forms and filters.
GRADES = ("Grade 9", "Grade 10")

PAST_PAPER = "Past Paper"
NOTE = "Note"
MATERIAL_TYPES = (PAST_PAPER, NOTE)

SUBJECTS = (
    "Mathematics",
    "Biology",
    "Chemistry",
    "Physics",
    "English",
    "Urdu",
    "Pakistan Studies",
    "Islamiyat",
    "Computer Science",
)

# newest first, 2025 .. 2012
YEARS = tuple(str(y) for y in range(2025, 2011, -1))

TODO_TAGS = ("Urgent", "Study", "School", "Personal")

ROLE_ADMIN = "admin"
ROLE_USER = "user"
ROLES = (ROLE_ADMIN, ROLE_USER)

# url segment <-> display value
GRADE_SLUGS = {"grade-9": "Grade 9", "grade-10": "Grade 10"}
TYPE_SLUGS = {"past-paper": PAST_PAPER, "note": NOTE}


def grade_slug(grade):
    for slug, value in GRADE_SLUGS.items():
        if value == grade:
            return slug
    raise ValueError(f"Unknown grade: {grade}")


def type_slug(material_type):
    for slug, value in TYPE_SLUGS.items():
        if value == material_type:
            return slug
    raise ValueError(f"Unknown material type: {material_type}")
