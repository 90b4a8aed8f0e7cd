"""
Utility modules for ReviewLens.

Cross-cutting concerns:
- CSV parser: Quote-aware single-line tokenizer
- Gemini: Async client for the hosted language model
- Storage: Credential and artifact persistence
"""
