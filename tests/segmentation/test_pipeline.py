"""Tests for the segmentation entry points and the command-line interface.

Covers full segmentation of mixed content (prose, math, tables, code), the
cache-aware lookup and the streaming fast path.
"""

# pylint: disable=missing-class-docstring,missing-function-docstring

import json
from concurrent.futures import ThreadPoolExecutor

from chat_render.segmentation.pipeline import (
    describe_segments,
    main,
    parse_content,
    segment_message,
    segments_to_json,
    streaming_segments,
)
from chat_render.segmentation.schema import LatexSegment, PlainTextSegment, TableAlignment, TableSegment

MIXED = (
    "Here is a result:\n"
    "\\[E = mc^2\\]\n"
    "where \\(m\\) is mass.\n\n"
    "| Symbol | Meaning |\n"
    "|:------:|--------:|\n"
    "| \\(c\\) | speed of light |\n\n"
    "```python\nprint('\\(not math\\)')\n```\n"
    "Done."
)


def _kinds(segments) -> list[str]:
    return [s.kind for s in segments]


# ===========================================================================
# parse_content tests
# ===========================================================================


class TestParseContent:

    def test_display_only(self):
        segments = parse_content(r"\[x^2\]")
        assert len(segments) == 1
        assert isinstance(segments[0], LatexSegment)
        assert segments[0].latex == "x^2"
        assert segments[0].is_display is True

    def test_inline_math_and_prose(self):
        segments = parse_content(r"Use \(a\) and \(b\)")
        assert _kinds(segments) == ["text", "latex", "text", "latex"]
        assert segments[0].text == "Use "
        assert (segments[1].latex, segments[1].is_display) == ("a", False)
        assert segments[2].text == " and "
        assert (segments[3].latex, segments[3].is_display) == ("b", False)

    def test_fenced_math_passes_through(self):
        content = "```\n\\(x\\)\n```"
        segments = parse_content(content)
        assert len(segments) == 1
        assert isinstance(segments[0], PlainTextSegment)
        assert segments[0].text == content

    def test_empty_content(self):
        assert not parse_content("")

    def test_plain_prose(self):
        segments = parse_content("Nothing special here.")
        assert _kinds(segments) == ["text"]

    def test_math_in_table_cell_stays_in_table(self):
        segments = parse_content("| \\(x\\) |\n|---|\n")
        assert _kinds(segments) == ["table"]
        assert segments[0].table.headers == [r"\(x\)"]

    def test_mixed_message(self):
        segments = parse_content(MIXED)
        assert _kinds(segments) == ["text", "latex", "text", "latex", "text", "table", "text"]
        assert segments[1].latex == "E = mc^2"
        assert segments[3].latex == "m"
        table = segments[5]
        assert isinstance(table, TableSegment)
        assert table.table.alignments == [TableAlignment.CENTER, TableAlignment.TRAILING]
        assert table.table.rows == [[r"\(c\)", "speed of light"]]
        assert r"print('\(not math\)')" in segments[6].text

    def test_ranges_reconstruct_content(self):
        segments = parse_content(MIXED)
        assert "".join(MIXED[s.start : s.end] for s in segments) == MIXED

    def test_segments_are_contiguous(self):
        segments = parse_content(MIXED)
        assert segments[0].start == 0
        for prev, nxt in zip(segments, segments[1:]):
            assert prev.end == nxt.start
        assert segments[-1].end == len(MIXED)

    def test_idempotent(self):
        assert parse_content(MIXED) == parse_content(MIXED)

    def test_malformed_input_degrades_to_text(self):
        content = r"\[ unclosed \text{open and | pipes ``` fence"
        segments = parse_content(content)
        assert _kinds(segments) == ["text"]
        assert segments[0].text == content


# ===========================================================================
# segment_message tests
# ===========================================================================


class TestSegmentMessage:

    def test_populates_cache(self, cache):
        segments = segment_message(r"\(x\)", dark_mode=False, cache=cache)
        assert cache.get(r"\(x\)", False) == segments

    def test_cache_hit_equals_fresh_parse(self, cache):
        first = segment_message(MIXED, cache=cache)
        second = segment_message(MIXED, cache=cache)
        assert first == second == parse_content(MIXED)

    def test_cached_value_is_returned(self, cache):
        sentinel = [PlainTextSegment(id="sentinel", start=0, end=3, text="abc")]
        cache.set("abc", True, sentinel)
        assert segment_message("abc", dark_mode=True, cache=cache) == sentinel

    def test_dark_mode_does_not_change_result(self, cache):
        assert segment_message(MIXED, dark_mode=True, cache=cache) == segment_message(MIXED, dark_mode=False, cache=cache)
        assert len(cache) == 2

    def test_streaming_bypasses_cache(self, cache):
        segments = segment_message(MIXED, streaming=True, cache=cache)
        assert len(cache) == 0
        assert len(segments) == 1
        assert segments[0].text == MIXED
        assert segments[0].id.startswith("streaming_")

    def test_streaming_empty_content(self):
        segments = streaming_segments("")
        assert len(segments) == 1
        assert segments[0].text == ""

    def test_concurrent_render_passes(self, cache):
        messages = [MIXED, r"Use \(a\) and \(b\)", "| a |\n|---|", "plain"]

        def _render(i: int):
            return segment_message(messages[i % len(messages)], dark_mode=bool(i % 3), cache=cache)

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(_render, range(80)))

        for i, result in enumerate(results):
            assert result == parse_content(messages[i % len(messages)])


# ===========================================================================
# Output helpers and CLI tests
# ===========================================================================


class TestOutput:

    def test_json_dump(self):
        payload = json.loads(segments_to_json(parse_content(r"a \[b\]")))
        assert [item["kind"] for item in payload] == ["text", "latex"]
        assert payload[1]["latex"] == "b"
        assert payload[1]["is_display"] is True

    def test_describe_segments(self):
        text = describe_segments(parse_content("| a |\n|--:|\n" + r"\(x\)"))
        assert "table 0-12" in text
        assert "| --- |" not in text
        assert "| ---: |" in text
        assert "(inline)\nx" in text


class TestMain:

    def test_json_output(self, tmp_path, capsys):
        path = tmp_path / "message.md"
        path.write_text(r"Use \(a\)", encoding="utf-8")
        assert main([str(path)]) == 0
        payload = json.loads(capsys.readouterr().out)
        assert [item["kind"] for item in payload] == ["text", "latex"]

    def test_text_output_streaming(self, tmp_path, capsys):
        path = tmp_path / "message.md"
        path.write_text(r"Use \(a\)", encoding="utf-8")
        assert main([str(path), "--streaming", "--format", "text"]) == 0
        out = capsys.readouterr().out
        assert out.startswith("[streaming_")
        assert r"Use \(a\)" in out
