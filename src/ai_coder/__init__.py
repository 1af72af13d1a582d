"""LLM provider abstraction and task/message translation for the coding agent."""
