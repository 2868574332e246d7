"""Incremental chunking of text that is still streaming in.

Submodules:
  chunker   -- StreamingMarkdownChunker: paragraph / code block / table chunks
  thinking  -- ThinkingTextChunker: paragraph chunks of reasoning text
"""
