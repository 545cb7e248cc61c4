"""LLM service module.

Thin adapter over the OpenAI-compatible chat completions API used for
flashcard generation.

Key modules:
- llm.py: ModelConfig, request-scoped client factory and the generate() call
"""
