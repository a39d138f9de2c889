import dataclasses
import os
import unittest
from unittest import mock

from pydantic import ValidationError

from semcomment.comments import CommentFormatDescriptor, FormatRegistry
from semcomment.comments.models import FormatsFile
from semcomment.comments.models._base import extra_mode_from_env
from semcomment.exceptions import CommentFormatNotFound, InvalidCommentFormat


class TestCommentFormatDescriptor(unittest.TestCase):
    def test_width_must_be_positive(self):
        for width in (0, -5):
            with self.assertRaises(InvalidCommentFormat):
                CommentFormatDescriptor(name="bad", max_width=width)

    def test_invalid_format_is_a_value_error(self):
        with self.assertRaises(ValueError) as ctx:
            CommentFormatDescriptor(name="bad", max_width=0)
        self.assertIn("'bad'", str(ctx.exception))

    def test_escape_rule_cycle_is_rejected(self):
        with self.assertRaises(InvalidCommentFormat):
            CommentFormatDescriptor(escape_rules={"a": "b", "b": "a"})

    def test_self_escaping_rule_is_accepted(self):
        fmt = CommentFormatDescriptor(escape_rules={"\\": "\\\\"})
        self.assertEqual(fmt.escape("a\\b"), "a\\\\b")

    def test_empty_escape_key_is_rejected(self):
        with self.assertRaises(InvalidCommentFormat):
            CommentFormatDescriptor(escape_rules={"": "x"})

    def test_conflicting_options_are_rejected(self):
        with self.assertRaises(InvalidCommentFormat):
            CommentFormatDescriptor(remove_trailing_dots=True, enforce_trailing_dots=True)
        with self.assertRaises(InvalidCommentFormat):
            CommentFormatDescriptor(link_style="footnote")
        with self.assertRaises(InvalidCommentFormat):
            CommentFormatDescriptor(list_indent=-1)

    def test_list_indent_must_be_an_integer(self):
        for indent in ("2", 1.5, True):
            with self.assertRaises(InvalidCommentFormat) as ctx:
                CommentFormatDescriptor(name="bad", list_indent=indent)
            self.assertIn("list_indent must be an integer", str(ctx.exception))

    def test_render_format_is_validated(self):
        self.assertFalse(CommentFormatDescriptor().is_html)
        self.assertTrue(CommentFormatDescriptor(render_format="html").is_html)
        with self.assertRaises(InvalidCommentFormat):
            CommentFormatDescriptor(render_format="rtf")

    def test_code_snippet_templates(self):
        fmt = CommentFormatDescriptor(
            inline_code_snippet="{@code {{ code }}}",
            block_code_snippet="<pre>{@code\n{{ code }}\n}</pre>",
        )
        self.assertEqual(fmt.inline_code("a.b"), "{@code a.b}")
        self.assertEqual(fmt.code_block("x <y>"), "<pre>{@code\nx <y>\n}</pre>")
        self.assertEqual(CommentFormatDescriptor().inline_code("a"), "<c>a</c>")

    def test_broken_code_snippet_template(self):
        with self.assertRaises(InvalidCommentFormat) as ctx:
            CommentFormatDescriptor(name="bad", inline_code_snippet="{{ code")
        self.assertIn("inline_code_snippet", str(ctx.exception))

    def test_rules_are_normalized_to_pairs(self):
        fmt = CommentFormatDescriptor(escape_rules={"\\": "\\\\"})
        self.assertEqual(fmt.escape_rules, (("\\", "\\\\"),))

    def test_longest_rule_wins_in_a_single_pass(self):
        fmt = CommentFormatDescriptor(escape_rules={'"': '\\"', '"""': "Q"})
        self.assertEqual(fmt.escape('"""x"'), 'Qx\\"')

    def test_delimiter_escaping_uses_only_closing_rules(self):
        fmt = CommentFormatDescriptor(
            block_close='"""', escape_rules={"\\": "\\\\", '"""': '\\"\\"\\"'}
        )
        self.assertEqual(fmt.escape_delimiters('a\\b """'), 'a\\b \\"\\"\\"')

    def test_descriptor_is_immutable(self):
        fmt = CommentFormatDescriptor()
        with self.assertRaises(dataclasses.FrozenInstanceError):
            fmt.max_width = 10

    def test_overrides_are_validated(self):
        fmt = CommentFormatDescriptor(name="x", max_width=50)
        self.assertEqual(fmt.with_overrides(max_width=60).max_width, 60)
        self.assertEqual(fmt.max_width, 50)
        with self.assertRaises(InvalidCommentFormat):
            fmt.with_overrides(max_width=0)


class TestFormatRegistry(unittest.TestCase):
    def setUp(self):
        self.registry = FormatRegistry.default()

    def test_builtin_formats(self):
        for name in ("python", "rust", "go", "java", "c", "shell", "plain"):
            self.assertIn(name, self.registry)
        python = self.registry["python"]
        self.assertEqual(python.block_open, '"""')
        self.assertEqual(python.max_width, 120)
        self.assertEqual(self.registry["rust"].line_prefix, "/// ")

    def test_java_and_go_builtins(self):
        java = self.registry["java"]
        self.assertTrue(java.is_html)
        self.assertTrue(java.old_style_paragraph)
        self.assertTrue(java.omit_closing_li)
        self.assertTrue(self.registry["go"].escape_square_brackets)
        self.assertFalse(self.registry["python"].is_html)

    def test_unknown_format(self):
        with self.assertRaises(CommentFormatNotFound) as ctx:
            self.registry["kotlin"]
        self.assertIsInstance(ctx.exception, LookupError)
        self.assertIn("python", ctx.exception.known)
        self.assertNotIn("kotlin", self.registry)
        self.assertIsNone(self.registry.get("kotlin"))

    def test_get_format_defaults_and_width_override(self):
        self.assertIs(self.registry.get_format(), self.registry["python"])
        narrow = self.registry.get_format("rust", max_width=60)
        self.assertEqual(narrow.max_width, 60)
        self.assertEqual(self.registry["rust"].max_width, 100)

    def test_with_formats_returns_new_registry(self):
        kotlin = CommentFormatDescriptor(name="kotlin", line_prefix=" * ")
        extended = self.registry.with_formats([kotlin])
        self.assertIs(extended["kotlin"], kotlin)
        self.assertNotIn("kotlin", self.registry)
        self.assertEqual(len(extended), len(self.registry) + 1)

    def test_with_formats_replaces_by_name(self):
        wide = CommentFormatDescriptor(name="python", max_width=200)
        self.assertEqual(self.registry.with_formats([wide])["python"].max_width, 200)
        self.assertEqual(self.registry["python"].max_width, 120)


class TestFormatsFile(unittest.TestCase):
    def test_descriptors_from_file_data(self):
        data = {
            "comment_formats": {
                "kotlin": {
                    "block_open": "/**",
                    "line_prefix": " * ",
                    "block_close": " */",
                    "max_width": 90,
                    "escape_rules": {"*/": "*&#47;"},
                }
            }
        }
        (fmt,) = FormatsFile.model_validate(data).to_descriptors()
        self.assertEqual(fmt.name, "kotlin")
        self.assertEqual(fmt.max_width, 90)
        self.assertEqual(fmt.escape_rules, (("*/", "*&#47;"),))

    def test_html_options_from_file_data(self):
        data = {
            "comment_formats": {
                "kdoc": {
                    "render_format": "html",
                    "omit_closing_li": True,
                    "inline_code_snippet": "<code>{{ code }}</code>",
                    "escape_square_brackets": True,
                }
            }
        }
        (fmt,) = FormatsFile.model_validate(data).to_descriptors()
        self.assertTrue(fmt.is_html)
        self.assertTrue(fmt.omit_closing_li)
        self.assertTrue(fmt.escape_square_brackets)
        self.assertEqual(fmt.inline_code("x"), "<code>x</code>")

    def test_invalid_descriptor_values(self):
        data = {"comment_formats": {"broken": {"max_width": 0}}}
        with self.assertRaises(InvalidCommentFormat):
            FormatsFile.model_validate(data).to_descriptors()

    def test_schema_errors(self):
        with self.assertRaises(ValidationError):
            FormatsFile.model_validate({"comment_formats": {"x": {"link_style": "footnote"}}})
        with self.assertRaises(ValidationError):
            FormatsFile.model_validate({"comment_formats": {"x": {"max_width": "wide"}}})
        with self.assertRaises(ValidationError):
            FormatsFile.model_validate({"comment_formats": {"x": {"render_format": "rtf"}}})


class TestExtraMode(unittest.TestCase):
    def test_default_when_unset(self):
        with mock.patch.dict(os.environ, {}, clear=True):
            self.assertEqual(extra_mode_from_env(), "forbid")

    def test_mode_names_and_aliases(self):
        cases = (
            ("ignore", "ignore"),
            (" Allow ", "allow"),
            ("strict", "forbid"),
            ("off", "allow"),
        )
        for raw, expected in cases:
            with mock.patch.dict(os.environ, {"SEMCOMMENT_EXTRA": raw}):
                self.assertEqual(extra_mode_from_env(), expected)

    def test_unknown_value_falls_back_with_warning(self):
        with mock.patch.dict(os.environ, {"SEMCOMMENT_EXTRA": "sometimes"}):
            with self.assertLogs("semcomment.comments.models._base", level="WARNING"):
                self.assertEqual(extra_mode_from_env(), "forbid")


if __name__ == "__main__":
    unittest.main()
