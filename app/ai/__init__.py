"""
AI Module - Provider clients and call monitoring for the prompt fan-out.

Architecture Overview:
=====================

┌─────────────────────────────────────────────────────────────┐
│                   ModelQueryService                          │
│            (app/services/model_query_service.py)             │
│                                                              │
│    Validates the query, then calls every selected provider   │
└──────────────────────────────┬──────────────────────────────┘
                               │
       ┌───────────────────────┼───────────────────────┐
       │                       │                       │
       ▼                       ▼                       ▼
┌───────────────┐     ┌───────────────┐     ┌───────────────┐
│    OpenAI     │     │    Gemini     │     │    Claude     │
│ chat.complet. │     │ generate_cont.│     │   messages    │
└───────────────┘     └───────────────┘     └───────────────┘

Module Structure:
================
- providers/: One client per provider, all exposing call(prompt, max_tokens)
- monitoring/: Logging and usage counters
"""
