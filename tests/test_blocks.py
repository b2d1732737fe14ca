"""Tests for content block encoding and lenient decoding."""

from ccstat.blocks import (
    block_to_dict,
    decode_blocks,
    decode_segment,
    encode_block,
    encode_blocks,
    split_segments,
)
from ccstat.core import (
    RawBlock,
    SummaryBlock,
    SystemBlock,
    TextBlock,
    ThinkingBlock,
    ToolUseBlock,
)


class TestEncoding:
    def test_records_are_single_line(self):
        record = encode_block(TextBlock(content="first\n\nsecond"))
        assert "\n" not in record

    def test_text_with_blank_lines_survives(self):
        blocks = [TextBlock(content="first\n\nsecond"), TextBlock(content="third")]
        assert decode_blocks(encode_blocks(blocks)) == blocks

    def test_mixed_blocks_keep_order_and_tags(self):
        blocks = [
            ThinkingBlock(content="plan"),
            TextBlock(content="Reading the file"),
            ToolUseBlock(tool="Read", input={"file_path": "/src/a.py"}),
            TextBlock(content="Done"),
            ToolUseBlock(tool="Bash", input={"command": "ls"}),
        ]
        decoded = decode_blocks(encode_blocks(blocks))
        assert len(decoded) == 5
        assert [b.type for b in decoded] == ["thinking", "text", "tool_use", "text", "tool_use"]
        assert decoded[2].input == {"file_path": "/src/a.py"}

    def test_system_and_summary(self):
        blocks = [
            SystemBlock(content="Context low", is_meta=True, level="warning"),
            SummaryBlock(summary="Refactored auth"),
        ]
        assert decode_blocks(encode_blocks(blocks)) == blocks

    def test_system_record_shape(self):
        assert block_to_dict(SystemBlock(content="x")) == {
            "type": "system", "content": "x", "isMeta": False, "level": "info",
        }


class TestLenientDecoding:
    def test_malformed_segment_becomes_raw(self):
        assert decode_segment('  {"type": "text", "content": "trunc  ') == RawBlock(
            content='{"type": "text", "content": "trunc'
        )

    def test_non_object_becomes_raw(self):
        assert decode_segment("[1, 2]") == RawBlock(content="[1, 2]")

    def test_unknown_tag_becomes_raw(self):
        block = decode_segment('{"type": "image", "data": "abc"}')
        assert isinstance(block, RawBlock)
        assert block.content == '{"type": "image", "data": "abc"}'

    def test_legacy_meta_key(self):
        block = decode_segment('{"type": "system", "content": "x", "meta": true}')
        assert block == SystemBlock(content="x", is_meta=True, level="info")

    def test_partial_response(self):
        text = encode_block(TextBlock(content="ok")) + '\n\n{"type": "tool_use", "tool": "Re'
        blocks = decode_blocks(text)
        assert blocks[0] == TextBlock(content="ok")
        assert isinstance(blocks[1], RawBlock)

    def test_split_skips_empty_segments(self):
        assert split_segments("a\n\n\n\n  \n\nb") == ["a", "b"]
