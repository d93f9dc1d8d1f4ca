import unittest
from collections import OrderedDict

from article_markdown.rendering.yaml_subset import esc_yaml, yaml_encode


class TestEscape(unittest.TestCase):
    def test_quotes_escaped(self):
        self.assertEqual(esc_yaml('He said "hi"'), 'He said \\"hi\\"')

    def test_newlines_become_spaces(self):
        self.assertEqual(esc_yaml("a\nb\r\nc"), "a b  c")

    def test_other_characters_untouched(self):
        self.assertEqual(esc_yaml("naïve: #1 'x' \\ é"), "naïve: #1 'x' \\ é")


class TestYamlEncode(unittest.TestCase):
    def test_scalars_and_lists(self):
        data = OrderedDict([("title", "T"), ("tags", ["a", 'b"c'])])
        self.assertEqual(yaml_encode(data), 'title: "T"\ntags:\n  - "a"\n  - "b\\"c"\n')

    def test_empty_values_omitted(self):
        data = OrderedDict([("a", ""), ("b", None), ("c", []), ("d", ()), ("e", "x")])
        self.assertEqual(yaml_encode(data), 'e: "x"\n')

    def test_order_preserved(self):
        data = OrderedDict([("z", "1"), ("a", "2")])
        self.assertEqual(yaml_encode(data), 'z: "1"\na: "2"\n')

    def test_nothing_to_emit(self):
        self.assertEqual(yaml_encode({}), "")


if __name__ == "__main__":
    unittest.main()
