import unittest

from article_markdown.hooks import HookRegistry
from article_markdown.routing.classifier import (
    DEFAULT_LLM_AGENT_SIGNATURES,
    SIGNATURES_FILTER,
    classify,
    get_llm_agent_signatures,
)

BROWSER_UA = "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 Chrome/124.0 Safari/537.36"


class TestClassify(unittest.TestCase):
    def setUp(self):
        self.signatures = list(DEFAULT_LLM_AGENT_SIGNATURES)

    def test_suffix_strips_once(self):
        d = classify("/foo/bar.md", {}, BROWSER_UA, self.signatures)
        self.assertTrue(d.should_serve_markdown)
        self.assertEqual(d.resolved_slug, "/foo/bar")
        self.assertEqual(d.signals, ("suffix",))

    def test_double_suffix_only_stripped_once(self):
        d = classify("/notes.md.md", {}, "", self.signatures)
        self.assertEqual(d.resolved_slug, "/notes.md")

    def test_format_override(self):
        d = classify("/foo/bar", {"format": "md"}, BROWSER_UA, self.signatures)
        self.assertTrue(d.should_serve_markdown)
        self.assertEqual(d.resolved_slug, "/foo/bar")
        self.assertEqual(d.signals, ("format",))

    def test_format_override_is_exact(self):
        for value in ("MD", "markdown", "md ", ""):
            d = classify("/foo/bar", {"format": value}, BROWSER_UA, self.signatures)
            self.assertFalse(d.should_serve_markdown, msg=value)

    def test_agent_match_is_case_insensitive(self):
        d = classify("/foo/bar", {}, "Mozilla/5.0 GPTBot/1.0", self.signatures)
        self.assertTrue(d.should_serve_markdown)
        self.assertEqual(d.signals, ("agent",))
        self.assertEqual(d.resolved_slug, "/foo/bar")

    def test_uppercase_signature_still_matches(self):
        d = classify("/foo", {}, "SomeBot/1.0", ["SOMEBOT"])
        self.assertTrue(d.should_serve_markdown)

    def test_missing_user_agent_is_empty(self):
        d = classify("/foo/bar", {}, None, self.signatures)
        self.assertFalse(d.should_serve_markdown)

    def test_no_signal(self):
        d = classify("/foo/bar", {"page": "2"}, BROWSER_UA, self.signatures)
        self.assertFalse(d.should_serve_markdown)
        self.assertEqual(d.signals, ())
        self.assertEqual(d.resolved_slug, "/foo/bar")

    def test_slug_untouched_without_suffix_signal(self):
        d = classify("/release-1.2", {"format": "md"}, "", self.signatures)
        self.assertEqual(d.resolved_slug, "/release-1.2")

    def test_all_signals_recorded(self):
        d = classify("/a.md", {"format": "md"}, "ClaudeBot/1.0", self.signatures)
        self.assertEqual(d.signals, ("suffix", "agent", "format"))
        self.assertEqual(d.resolved_slug, "/a")


class TestSignatureHook(unittest.TestCase):
    def test_defaults_without_hooks(self):
        self.assertEqual(get_llm_agent_signatures(), list(DEFAULT_LLM_AGENT_SIGNATURES))
        self.assertIn("gptbot", get_llm_agent_signatures())

    def test_filter_can_add_and_remove(self):
        hooks = HookRegistry()
        hooks.add_filter(SIGNATURES_FILTER, lambda sigs: [s for s in sigs if s != "gptbot"] + ["mycrawler"])
        sigs = get_llm_agent_signatures(hooks)
        self.assertNotIn("gptbot", sigs)
        self.assertIn("mycrawler", sigs)

    def test_filter_can_replace(self):
        hooks = HookRegistry()
        hooks.add_filter(SIGNATURES_FILTER, lambda sigs: ["only-this"])
        self.assertEqual(get_llm_agent_signatures(hooks), ["only-this"])

    def test_resolved_fresh_on_every_call(self):
        hooks = HookRegistry()
        self.assertIn("gptbot", get_llm_agent_signatures(hooks))

        def drop_all(sigs):
            return []

        hooks.add_filter(SIGNATURES_FILTER, drop_all)
        self.assertEqual(get_llm_agent_signatures(hooks), [])
        hooks.remove_filter(SIGNATURES_FILTER, drop_all)
        self.assertIn("gptbot", get_llm_agent_signatures(hooks))


if __name__ == "__main__":
    unittest.main()
