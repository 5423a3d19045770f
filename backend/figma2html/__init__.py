"""Figma-to-HTML package.

Subpackages:
- extraction: Figma node-tree minimization, color conversion, compaction
- integrations: Figma REST API and OAuth clients
- llm: Prompt assembly and LangChain chat model invocation
"""
