import unittest

from article_markdown.config import MarkdownSettings, load_settings


class TestLoadSettings(unittest.TestCase):
    def test_defaults(self):
        self.assertEqual(load_settings({}), MarkdownSettings())

    def test_overrides(self):
        s = load_settings({
            "MARKDOWN_ALTERNATE_ENABLED": "false",
            "MARKDOWN_ADVERTISE_ALTERNATE": "0",
            "MARKDOWN_EXTRA_AGENT_SIGNATURES": " MyCrawler , ,other-bot",
            "SITE_URL": "https://example.com/",
        })
        self.assertFalse(s.enabled)
        self.assertFalse(s.advertise_alternate)
        self.assertEqual(s.extra_agent_signatures, ("mycrawler", "other-bot"))
        self.assertEqual(s.site_url, "https://example.com")


if __name__ == "__main__":
    unittest.main()
