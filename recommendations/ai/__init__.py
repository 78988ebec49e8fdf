"""LLM collaborator and prompt building blocks for the recommendation agents."""
