import io
import os
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout

import export_markdown
from database import ContentDatabase
from seed_content import seed


class TestExportMarkdown(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.db_path = os.path.join(self.tmp.name, "content.db")
        self.env_path = os.path.join(self.tmp.name, "missing.env")
        seed(ContentDatabase(db_path=self.db_path))

    def tearDown(self):
        self.tmp.cleanup()

    def test_seed_is_rerunnable(self):
        self.assertEqual(seed(ContentDatabase(db_path=self.db_path)), 0)

    def test_single_path_to_stdout(self):
        out = io.StringIO()
        with redirect_stdout(out):
            code = export_markdown.main(["--env", self.env_path, "--db", self.db_path, "--path", "/hello-world"])
        self.assertEqual(code, 0)
        text = out.getvalue()
        self.assertTrue(text.startswith('---\ntitle: "Hello World"\n'))
        self.assertIn('tags:\n  - "welcome"\n  - "markdown"\n', text)
        self.assertIn("# Hello World\n\n", text)
        self.assertNotIn("editor note", text)

    def test_missing_path(self):
        err = io.StringIO()
        with redirect_stderr(err):
            code = export_markdown.main(["--env", self.env_path, "--db", self.db_path, "--path", "/nope"])
        self.assertEqual(code, 1)
        self.assertIn("Not found", err.getvalue())

    def test_all_to_directory(self):
        out_dir = os.path.join(self.tmp.name, "out")
        with redirect_stdout(io.StringIO()):
            code = export_markdown.main(["--env", self.env_path, "--db", self.db_path, "--all", "--out-dir", out_dir])
        self.assertEqual(code, 0)
        self.assertEqual(sorted(os.listdir(out_dir)), ["about.md", "hello-world.md", "team.md"])
        with open(os.path.join(out_dir, "team.md"), encoding="utf-8") as f:
            self.assertIn("# Team\n\n", f.read())


if __name__ == "__main__":
    unittest.main()
