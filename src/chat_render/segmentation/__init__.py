"""Mixed-content segmentation of chat messages: prose, LaTeX math and GFM tables.

Submodules:
  patterns    -- compiled regex patterns and delimiter constants
  schema      -- Pydantic models (Segment union, ParsedTable, ranges)
  exclusions  -- fenced / inline code ranges that are never math or table
  tables      -- line-oriented GFM table detection and re-rendering
  latex       -- display and inline math range finding
  sanitizer   -- LaTeX payload trimming and \\text{...} repair
  assembler   -- merge of table and math ranges into the ordered segment list
  cache       -- bounded, thread-safe segment cache
  pipeline    -- parse entry points, streaming fast path and CLI
"""
