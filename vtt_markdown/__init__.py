"""Convert WebVTT transcripts into Markdown documents with YAML front matter."""

__version__ = "1.0.0"
