"""
Div-block restructurer tests

Tests block detection, the per-type rendering and inside-out handling of
nested blocks.
"""

from tex2lia.lib.divblocks import DivRestructurer, divBlocks_findTopLevel
from tex2lia.models.blocks import DivStyle


def restructure(markdown, **kwargs):
    return DivRestructurer(**kwargs).markdown_restructure(markdown)


class TestBlockDetection:
    """Test the top-level block scanner"""

    def test_two_top_level_blocks(self):
        markdown = '<div class="hinweis">\nA\n</div>\n<div class="exkurs">\nB\n</div>\n'
        blocks = divBlocks_findTopLevel(markdown)
        assert [b.type for b in blocks] == ["hinweis", "exkurs"]
        assert blocks[0].content == "A"
        assert blocks[0].start_index == 0
        assert markdown[blocks[1].start_index:].startswith('<div class="exkurs">')

    def test_nested_block_is_content(self):
        markdown = '<div class="a">\n<div class="b">\nx\n</div>\n</div>\n'
        blocks = divBlocks_findTopLevel(markdown)
        assert len(blocks) == 1
        assert blocks[0].content == '<div class="b">\nx\n</div>'

    def test_unclosed_block_not_reported(self):
        assert divBlocks_findTopLevel('<div class="a">\nx\n') == []

    def test_no_divs_unchanged(self):
        markdown = "# Title\n\nPlain text.\n"
        assert restructure(markdown) == markdown


class TestBlockStyles:
    """Test the rendering of each block style"""

    def test_code_block(self):
        markdown = '<div class="codekurz">\n\nfmt.Println("hi")\n\n</div>\n'
        assert restructure(markdown) == '```\nfmt.Println("hi")\n```\n'

    def test_quote_block(self):
        markdown = '<div class="universalkasten">\nLine one\n\nLine two\n</div>\n'
        assert restructure(markdown) == "> Line one\n>\n> Line two\n\n"

    def test_type_is_case_insensitive(self):
        assert restructure('<div class="Universalkasten">\nA\n</div>\n') == "> A\n\n"

    def test_labeled_block(self):
        markdown = '<div class="hinweis">\nText\n</div>'
        assert restructure(markdown) == "> **Hinweis ⚠️**\n>\n> Text\n\n"

    def test_labeled_block_in_context(self):
        markdown = 'Intro\n\n<div class="hinweis">\nT\n</div>\n\nOutro\n'
        assert restructure(markdown) == "Intro\n\n> **Hinweis ⚠️**\n>\n> T\n\n\nOutro\n"

    def test_definition_block(self):
        markdown = '<div class="definitionskasten">\n\n***Term***\n\nDefinition text\n</div>\n'
        assert restructure(markdown) == (
            "> **Definition 📓**\n>\n>> ***Term***\n>\n> Definition text\n\n"
        )

    def test_span_gets_blank_line(self):
        markdown = '<div class="sprachvgl">\n<span>a</span>\nB\n</div>\n'
        assert restructure(markdown) == "> **Sprachvergleich 🗣️**\n>\n> <span>a</span>\n>\n> B\n\n"

    def test_kommlititem_spacing(self):
        result = restructure('<div class="KommLitItem">\nX\n</div>\n')
        assert '<div class="KommLitItem" style="margin: 1.5em 0;">' in result
        assert "X" in result

    def test_fallback_modes(self):
        styles = {"box": DivStyle.FALLBACK}
        markdown = '<div class="box">\nA\n</div>\n'
        assert restructure(markdown, mode="plain", styles=styles) == "A\n\n"
        assert restructure(markdown, mode="blockquote", styles=styles) == "> A\n\n"


class TestNesting:
    """Test inside-out restructuring"""

    def test_inner_block_converted_first(self):
        markdown = '<div class="universalkasten">\nOuter\n<div class="codekurz">\ncode\n</div>\n</div>\n'
        assert restructure(markdown) == "> Outer\n> ```\n> code\n> ```\n\n"

    def test_unknown_outer_type_left_verbatim(self):
        """Known blocks inside an unknown one are not touched"""
        markdown = '<div class="mystery">\n<div class="codekurz">\nx\n</div>\n</div>\n'
        assert restructure(markdown) == markdown

    def test_spaced_kommlititem_keeps_outer_block(self):
        """A nested KommLitItem closes itself, not the enclosing block"""
        markdown = '<div class="universalkasten">\n<div class="KommLitItem">\nItem\n</div>\nTail\n</div>\n'
        assert restructure(markdown) == (
            '> <div class="KommLitItem" style="margin: 1.5em 0;">\n> Item\n> </div>\n> Tail\n\n'
        )

    def test_opening_tag_with_attributes_counted(self):
        markdown = '<div class="hinweis">\n<div class="x" id="y">\nA\n</div>\nB\n</div>\n'
        blocks = divBlocks_findTopLevel(markdown)
        assert len(blocks) == 1
        assert blocks[0].content == '<div class="x" id="y">\nA\n</div>\nB'

    def test_depth_cap(self):
        """Beyond the depth cap inner content is kept as raw lines"""
        markdown = '<div class="universalkasten">\nOuter\n<div class="codekurz">\ncode\n</div>\n</div>\n'
        result = restructure(markdown, max_depth=1)
        assert result == '> Outer\n> <div class="codekurz">\n> code\n> </div>\n\n'
