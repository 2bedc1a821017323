"""
Routers module - API endpoint handlers organized by feature.

- models: Prompt fan-out to several LLM providers, usage stats
- ui: Side-by-side comparison page
"""
