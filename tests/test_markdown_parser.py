"""Tests for the Markdown structural parser."""

import time
import unittest

from semcomment.comments.markdown import (
    Admonition,
    Blockquote,
    Bold,
    Code,
    CodeBlock,
    Heading,
    Italic,
    Link,
    MarkdownParser,
    OrderedList,
    Paragraph,
    Text,
    UnorderedList,
    parse,
    parse_inline,
)
from semcomment.comments.markdown.nodes import MAX_NESTING, plain_text


class TestBlockParsing(unittest.TestCase):
    def test_empty_input_gives_no_blocks(self):
        self.assertEqual(parse(None), [])
        self.assertEqual(parse(""), [])
        self.assertEqual(parse("  \n\t\n"), [])

    def test_blank_lines_separate_paragraphs(self):
        self.assertEqual(
            parse("first line\nsecond line\n\nthird"),
            [
                Paragraph((Text("first line\nsecond line"),)),
                Paragraph((Text("third"),)),
            ],
        )

    def test_paragraph_lines_lose_leading_indentation(self):
        blocks = parse("In some cases,\n          The file extension")
        self.assertEqual(blocks, [Paragraph((Text("In some cases,\nThe file extension"),))])

    def test_unordered_list_with_both_markers(self):
        self.assertEqual(
            parse("- item 1\n* item 2"),
            [UnorderedList(items=((Text("item 1"),), (Text("item 2"),)))],
        )

    def test_ordered_list_keeps_start_index(self):
        blocks = parse("3. three\n4. four")
        self.assertEqual(
            blocks,
            [OrderedList(items=((Text("three"),), (Text("four"),)), start_index=3)],
        )

    def test_list_item_lazy_continuation(self):
        blocks = parse("- A very long item\ntempor incididunt.")
        self.assertEqual(
            blocks,
            [UnorderedList(items=((Text("A very long item\ntempor incididunt."),),))],
        )

    def test_blank_line_between_items_keeps_list_open(self):
        blocks = parse("- a\n\n- b")
        self.assertEqual(len(blocks), 1)
        self.assertEqual(len(blocks[0].items), 2)

    def test_list_ends_before_following_paragraph(self):
        blocks = parse("- a\n\nAfter the list.")
        self.assertEqual(
            [type(b) for b in blocks],
            [UnorderedList, Paragraph],
        )

    def test_marker_kind_change_starts_new_list(self):
        blocks = parse("- a\n1. b")
        self.assertEqual([type(b) for b in blocks], [UnorderedList, OrderedList])

    def test_list_interrupts_paragraph(self):
        blocks = parse("It can contain a list:\n- one")
        self.assertEqual([type(b) for b in blocks], [Paragraph, UnorderedList])

    def test_admonition_takes_precedence_over_blockquote(self):
        self.assertEqual(
            parse("> [!NOTE] hello"),
            [Admonition(kind="NOTE", spans=(Text("hello"),))],
        )

    def test_admonition_kind_is_upper_cased_and_body_joined(self):
        blocks = parse("> [!warning] Mind\n> the gap")
        self.assertEqual(blocks, [Admonition(kind="WARNING", spans=(Text("Mind\nthe gap"),))])

    def test_blockquote_lazy_continuation(self):
        blocks = parse("> This is a blockquote.\nIt can contain multiple lines.")
        self.assertEqual(
            blocks,
            [
                Blockquote(
                    blocks=(
                        Paragraph((Text("This is a blockquote.\nIt can contain multiple lines."),)),
                    )
                )
            ],
        )

    def test_nested_blockquote(self):
        self.assertEqual(
            parse("> > inner"),
            [Blockquote(blocks=(Blockquote(blocks=(Paragraph((Text("inner"),)),)),))],
        )

    def test_quote_with_inner_list(self):
        blocks = parse("> intro\n>\n> - a\n> - b")
        self.assertEqual(len(blocks), 1)
        inner = blocks[0].blocks
        self.assertEqual([type(b) for b in inner], [Paragraph, UnorderedList])

    def test_headings(self):
        self.assertEqual(
            parse("# Summary\n## Examples:"),
            [
                Heading(level=1, spans=(Text("Summary"),)),
                Heading(level=2, spans=(Text("Examples:"),)),
            ],
        )
        self.assertEqual(parse("#"), [Heading(level=1, spans=())])

    def test_too_many_hashes_or_no_space_is_text(self):
        self.assertEqual(parse("####### x"), [Paragraph((Text("####### x"),))])
        self.assertEqual(parse("#hashtag"), [Paragraph((Text("#hashtag"),))])

    def test_code_fence_is_verbatim(self):
        blocks = parse("```python\nx = `1` **b**\n```")
        self.assertEqual(blocks, [CodeBlock(language="python", text="x = `1` **b**")])

    def test_unterminated_fence_runs_to_end(self):
        blocks = parse("before\n\n```\nabc\ndef")
        self.assertEqual(
            blocks,
            [Paragraph((Text("before"),)), CodeBlock(language=None, text="abc\ndef")],
        )

    def test_document_order_is_preserved(self):
        note = (
            "This is a note about the attribute `attr`. It can be multiline.\n"
            "It can contain a list:\n"
            "\n"
            "- item **1**,\n"
            "- item 2.\n"
            "\n"
            "And an **inline code snippet**: `Attr.attr`.\n"
            "\n"
            "# Summary\n"
            "\n"
            "## Examples:\n"
            "\n"
            "1. Example 1\n"
            "2. Example 2\n"
            "\n"
            "> This is a blockquote.\n"
            "It can contain multiple lines.\n"
            "\n"
            "> [!NOTE] Something very important here\n"
        )
        self.assertEqual(
            [type(b) for b in parse(note)],
            [
                Paragraph,
                UnorderedList,
                Paragraph,
                Heading,
                Heading,
                OrderedList,
                Blockquote,
                Admonition,
            ],
        )


class TestInlineParsing(unittest.TestCase):
    def test_code_span_wins_over_bold(self):
        self.assertEqual(
            parse_inline("a `**not bold**` b"),
            (Text("a "), Code("**not bold**"), Text(" b")),
        )

    def test_bold_does_not_close_inside_code(self):
        self.assertEqual(
            parse_inline("**use `a**b` here**"),
            (Bold((Text("use "), Code("a**b"), Text(" here"))),),
        )

    def test_link(self):
        self.assertEqual(
            parse_inline("see [OTEL](https://x.io)."),
            (Text("see "), Link((Text("OTEL"),), "https://x.io"), Text(".")),
        )

    def test_link_label_is_inline_parsed(self):
        self.assertEqual(
            parse_inline("[**Link 1**](https://www.link1.com)"),
            (Link((Bold((Text("Link 1"),)),), "https://www.link1.com"),),
        )

    def test_link_with_empty_label(self):
        self.assertEqual(parse_inline("[](https://a.b)"), (Link((), "https://a.b"),))

    def test_italic_with_star_and_underscore(self):
        self.assertEqual(
            parse_inline("*a* and _b_"),
            (Italic((Text("a"),)), Text(" and "), Italic((Text("b"),))),
        )

    def test_bold_nested_in_italic(self):
        self.assertEqual(
            parse_inline("*a **b** c*"),
            (Italic((Text("a "), Bold((Text("b"),)), Text(" c"))),),
        )

    def test_identifiers_with_underscores_stay_text(self):
        self.assertEqual(
            parse_inline("set error_type_name now"),
            (Text("set error_type_name now"),),
        )

    def test_lone_asterisks_stay_text(self):
        self.assertEqual(parse_inline("2 * 3 * 4"), (Text("2 * 3 * 4"),))

    def test_unmatched_markup_degrades_to_text(self):
        self.assertEqual(
            parse_inline("[broken link and **open"),
            (Text("[broken link and **open"),),
        )
        self.assertEqual(parse_inline("a `tick"), (Text("a `tick"),))

    def test_backslash_escapes_are_kept_literally(self):
        self.assertEqual(parse_inline(r"\[from] \*x\*"), (Text(r"\[from] \*x\*"),))

    def test_double_backtick_code_span(self):
        self.assertEqual(parse_inline("``a ` b``"), (Code("a ` b"),))

    def test_links_bind_tighter_than_emphasis(self):
        self.assertEqual(
            parse_inline("*see [a*b](https://x.io)*"),
            (Italic((Text("see "), Link((Text("a*b"),), "https://x.io"))),),
        )

    def test_destination_is_not_scanned_for_markup(self):
        self.assertEqual(
            parse_inline("[a](https://x.io/*path*) *b*"),
            (Link((Text("a"),), "https://x.io/*path*"), Text(" "), Italic((Text("b"),))),
        )


class TestNesting(unittest.TestCase):
    def _quote_depth(self, blocks):
        depth = 0
        while len(blocks) == 1 and isinstance(blocks[0], Blockquote):
            depth += 1
            blocks = blocks[0].blocks
        return depth, blocks

    def test_deep_quotes_are_capped(self):
        depth, inner = self._quote_depth(parse("> " * 1000 + "x"))
        self.assertEqual(depth, MAX_NESTING)
        (para,) = inner
        self.assertIsInstance(para, Paragraph)
        text = plain_text(para.spans)
        self.assertTrue(text.startswith("> >"))
        self.assertTrue(text.endswith("x"))
        self.assertEqual(text.count(">"), 1000 - MAX_NESTING)

    def test_shallow_quotes_are_untouched(self):
        depth, inner = self._quote_depth(parse("> " * 5 + "x"))
        self.assertEqual(depth, 5)
        self.assertEqual(inner, (Paragraph((Text("x"),)),))

    def test_deep_link_labels_are_capped(self):
        spans = parse_inline("[" * 1000 + "x" + "](https://x.io)" * 1000)
        depth = 0
        while spans and isinstance(spans[0], Link):
            depth += 1
            spans = spans[0].children
        self.assertEqual(depth, MAX_NESTING)
        self.assertIsInstance(spans[0], Text)


class TestScanningCost(unittest.TestCase):
    # Each input is quadratic for a scanner that rescans after every
    # unmatched opener.
    def assertFast(self, text, limit=2.0):
        start = time.perf_counter()
        parse(text)
        self.assertLess(time.perf_counter() - start, limit)

    def test_unmatched_brackets(self):
        self.assertFast("[" * 20000)
        self.assertFast("[a] " * 5000)

    def test_unmatched_emphasis(self):
        self.assertFast("*a " * 7000)
        self.assertFast("_a " * 7000)
        self.assertFast("**a " * 5000)

    def test_unmatched_code_spans(self):
        self.assertFast("`a ``b " * 4000)

    def test_unmatched_brackets_stay_literal(self):
        self.assertEqual(parse_inline("[" * 50), (Text("[" * 50),))


class TestMarkdownParser(unittest.TestCase):
    def test_class_interface_matches_functions(self):
        note = "Intro with `code`.\n\n- [a](https://a.io)\n- **b**\n\n> [!TIP] c"
        parser = MarkdownParser()
        self.assertEqual(parser.parse(note), parse(note))
        self.assertEqual(parser.parse(None), [])
        self.assertEqual(parser.parse_inline("*x*"), parse_inline("*x*"))


if __name__ == "__main__":
    unittest.main()
