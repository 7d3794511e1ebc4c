import pytest

from models.diff import DiffHunk
from services.diff_generator import DiffGenerator
from services.diff_parser import DiffRangeExtractor, parse_hunk_header, to_original_line
from services.errors import ParseError

DIFF = """diff --git a/service/routes/users.js b/service/routes/users.js
index 3b18e51..a9c2d47 100644
--- a/service/routes/users.js
+++ b/service/routes/users.js
@@ -4 +4 @@ const router = express.Router();
-router.get('/users', listUsers);
+router.get('/users', authenticate, listUsers);
@@ -10,2 +10,4 @@ router.post(
-  createUser
-);
+  audit,
+  createUser
+);
+
@@ -20,3 +21,0 @@ router.delete(
-router.put('/users/:id', updateUser);
-router.patch('/users/:id', updateUser);
-
"""


@pytest.fixture
def extractor():
    return DiffRangeExtractor()


def test_hunk_header_with_counts():
    hunk = parse_hunk_header("@@ -10,2 +10,4 @@")

    assert hunk.original_start == 10
    assert hunk.new_start == 10
    assert (hunk.original_count, hunk.new_count) == (2, 4)


def test_hunk_header_counts_default_to_one():
    hunk = parse_hunk_header("@@ -3 +7 @@ function context")

    assert (hunk.original_start, hunk.original_count) == (3, 1)
    assert (hunk.new_start, hunk.new_count) == (7, 1)


def test_changed_lines_cover_hunk(extractor):
    file_diff = extractor.extract("@@ -10,2 +10,4 @@\n")

    assert file_diff.changed_lines >= {10, 11, 12, 13}
    assert file_diff.hunks == [DiffHunk(original_start=10, new_start=10, original_count=2, new_count=4)]


def test_extract_full_diff(extractor):
    file_diff = extractor.extract(DIFF, "service/routes/users.js")

    assert file_diff.file_path == "service/routes/users.js"
    assert [(h.original_start, h.new_start) for h in file_diff.hunks] == [(4, 4), (10, 10), (20, 21)]
    assert file_diff.changed_lines == {4, 10, 11, 12, 13}
    assert file_diff.removed_lines == {4, 10, 11, 20, 21, 22}


def test_empty_diff(extractor):
    file_diff = extractor.extract("")

    assert file_diff.hunks == []
    assert file_diff.changed_lines == set()


def test_malformed_header_raises(extractor):
    with pytest.raises(ParseError) as excinfo:
        extractor.extract("@@ -a,b +c @@\n", "service/routes/users.js")

    assert excinfo.value.file_path == "service/routes/users.js"
    assert excinfo.value.kind == "parse"


def test_to_original_line_uses_preceding_hunk():
    hunks = [
        DiffHunk(original_start=10, new_start=12),
        DiffHunk(original_start=30, new_start=40),
    ]

    assert to_original_line(hunks, 13) == 11
    assert to_original_line(hunks, 45) == 35
    assert to_original_line(hunks, 5) is None


def test_generated_diff_has_zero_context(extractor):
    diff_text = DiffGenerator().generate_diff("a\nb\nc\n", "a\nB\nc\nd", "service/routes/x.js")

    file_diff = extractor.extract(diff_text)

    assert diff_text.startswith("--- a/service/routes/x.js\n+++ b/service/routes/x.js\n")
    assert file_diff.changed_lines == {2, 4}
    assert file_diff.removed_lines == {2}


def test_generated_diff_for_added_file(extractor):
    diff_text = DiffGenerator().generate_diff("", "one\ntwo\n", "service/routes/new.js")

    file_diff = extractor.extract(diff_text)

    assert file_diff.changed_lines == {1, 2}
    assert file_diff.removed_lines == set()


def test_identical_content_has_no_diff():
    assert DiffGenerator().generate_diff("same\n", "same", "f.js") == ""


def test_generated_diff_counts_newlines_only(extractor):
    original = "const s = 'a\u2028b';\nrouter.get('/x', fn);\n"
    new = "const s = 'a\u2028b';\nrouter.get('/x', auth, fn);\n"

    file_diff = extractor.extract(DiffGenerator().generate_diff(original, new, "service/routes/x.js"))

    assert file_diff.changed_lines == {2}
    assert file_diff.removed_lines == {2}
