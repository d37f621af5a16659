"""Citation Scoring Engine.

Asks every configured LLM backend a battery of category questions and mines
the free-text answers for competitor mentions:
  1. Query pool (base category questions + geo/product prompt bank)
  2. Mention detection (aliases, separator-tolerant word boundaries)
  3. Lexical sentiment → sentiment weight
  4. Prominence factor (position, headings, list rank)
  5. Per-model and global aggregation (volume- and equal-weighted)

A sibling computation, AI traffic share, reuses the same pool and fan-out.
"""
