import unittest

from article_markdown.hooks import HookRegistry


class TestHookRegistry(unittest.TestCase):
    def test_no_filters_returns_value(self):
        self.assertEqual(HookRegistry().apply_filters("x", 5), 5)

    def test_priority_then_registration_order(self):
        hooks = HookRegistry()
        hooks.add_filter("x", lambda v: v + ["b"], priority=20)
        hooks.add_filter("x", lambda v: v + ["a1"], priority=5)
        hooks.add_filter("x", lambda v: v + ["a2"], priority=5)
        self.assertEqual(hooks.apply_filters("x", []), ["a1", "a2", "b"])

    def test_extra_args_passed(self):
        hooks = HookRegistry()
        hooks.add_filter("x", lambda v, suffix: v + suffix)
        self.assertEqual(hooks.apply_filters("x", "a", "!"), "a!")

    def test_remove_filter(self):
        hooks = HookRegistry()

        def upper(v):
            return v.upper()

        hooks.add_filter("x", upper)
        self.assertTrue(hooks.has_filter("x"))
        self.assertTrue(hooks.remove_filter("x", upper))
        self.assertFalse(hooks.has_filter("x"))
        self.assertFalse(hooks.remove_filter("x", upper))
        self.assertEqual(hooks.apply_filters("x", "a"), "a")


if __name__ == "__main__":
    unittest.main()
